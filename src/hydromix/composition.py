# src/hydromix/composition.py

from __future__ import annotations

import logging
from typing import Iterable, Mapping, Sequence

import numpy as np

from .errors import DataError
from .reference_data import ATOMIC_WEIGHTS, IONS
from .types import YIELD_KINDS, ResolvedSalt, Salt

logger = logging.getLogger(__name__)


def _ion_yield(salt: Salt, ion: str, count: float, atomic_weights: Mapping[str, float], strict: bool) -> float:
    if count == 0:
        return 0.0

    kind = salt.yield_kind
    if kind == "direct_fraction" or (kind == "auto" and count < 1):
        return float(count)

    weight = atomic_weights.get(ion)
    if weight is None:
        if strict:
            raise DataError(f"salt {salt.id!r}: no atomic weight for ion {ion!r}")
        # Permissive default: contributes nothing instead of failing.
        logger.warning("salt %r: no atomic weight for ion %r, yield set to 0", salt.id, ion)
        weight = 0.0

    return float(count) * float(weight) / float(salt.molar_mass)


def resolve_composition(
    salt: Salt,
    atomic_weights: Mapping[str, float] = ATOMIC_WEIGHTS,
    ions: Iterable[str] = IONS,
    *,
    strict: bool = False,
) -> dict[str, float]:
    """
    Grams of each tracked ion released per gram of salt.

    Counts are moles of ion per mole of salt unless the salt is a direct
    fraction blend. With yield_kind "auto", counts strictly between 0 and 1
    are taken as direct g/g fractions.

    An ion without an atomic weight yields 0 (or raises DataError when
    strict=True).
    """
    if not salt.molar_mass or salt.molar_mass <= 0:
        raise DataError(f"salt {salt.id!r}: molar mass must be positive, got {salt.molar_mass!r}")
    if salt.yield_kind not in YIELD_KINDS:
        raise DataError(f"salt {salt.id!r}: unknown yield kind {salt.yield_kind!r}")

    composition: dict[str, float] = {}
    for ion in ions:
        count = float(salt.ions.get(ion, 0) or 0)
        if count < 0:
            raise DataError(f"salt {salt.id!r}: negative count for ion {ion!r}")
        composition[ion] = _ion_yield(salt, ion, count, atomic_weights, strict)

    return composition


def resolve_salts(
    salts: Iterable[Salt],
    atomic_weights: Mapping[str, float] = ATOMIC_WEIGHTS,
    ions: Iterable[str] = IONS,
    *,
    strict: bool = False,
) -> list[ResolvedSalt]:
    ions = list(ions)
    return [
        ResolvedSalt(salt=s, composition=resolve_composition(s, atomic_weights, ions, strict=strict))
        for s in salts
    ]


def composition_matrix(salts: Sequence[ResolvedSalt], ions: Iterable[str] = IONS) -> np.ndarray:
    """Yield matrix A: rows = ions, columns = salts (g ion / g salt)."""
    ions = list(ions)
    a = np.zeros((len(ions), len(salts)), dtype=float)
    for j, s in enumerate(salts):
        for i, ion in enumerate(ions):
            a[i, j] = float(s.composition.get(ion, 0.0))
    return a


def delivered_masses(a: np.ndarray, masses: np.ndarray) -> np.ndarray:
    """delivered_i = sum_j composition_j[i] * mass_j (grams of each ion)."""
    a = np.asarray(a, dtype=float)
    masses = np.asarray(masses, dtype=float)
    if a.size == 0 or masses.size == 0:
        return np.zeros(a.shape[0], dtype=float)
    return a @ masses
