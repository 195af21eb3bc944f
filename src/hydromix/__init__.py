# src/hydromix/__init__.py

"""hydromix - Cost-minimizing nutrient salt mixing for hydroponic solutions."""

from .__about__ import __version__
from .catalog import SaltCatalog
from .composition import composition_matrix, delivered_masses, resolve_composition
from .mix_optimizer import compute_exact_mix, compute_mix, optimize_nutrient_mix
from .nnls import solve_nnls_multiplicative
from .targets import preset_targets, requirement_vector
from .utils import (
    elemental_counts,
    format_mass_with_unit,
    formula_molar_mass,
    mass_to_g_per_l,
    molar_mass,
)

__all__ = [
    "__version__",
    "SaltCatalog",
    "resolve_composition",
    "composition_matrix",
    "delivered_masses",
    "compute_mix",
    "compute_exact_mix",
    "optimize_nutrient_mix",
    "solve_nnls_multiplicative",
    "requirement_vector",
    "preset_targets",
    "molar_mass",
    "formula_molar_mass",
    "elemental_counts",
    "format_mass_with_unit",
    "mass_to_g_per_l",
]
