# src/hydromix/targets.py

from __future__ import annotations

from typing import Iterable, Mapping

import numpy as np

from .config import SolverConfig
from .errors import DataError
from .reference_data import CROP_PRESETS, IONS
from .utils import mg_per_l_to_grams


def effective_volume(volume_l: float, solver_config: SolverConfig | None = None) -> float:
    """Volume floored to config.min_volume_l (1 L by default)."""
    solver_config = solver_config or SolverConfig()
    return max(float(volume_l), float(solver_config.min_volume_l))


def requirement_vector(
    targets_mg_per_l: Mapping[str, float],
    volume_l: float,
    ions: Iterable[str] = IONS,
    solver_config: SolverConfig | None = None,
) -> np.ndarray:
    """
    Grams of each ion needed for the solution, in ion order.

    Missing ions count as 0. Negative targets are passed through unchanged.
    """
    volume = effective_volume(volume_l, solver_config)
    return np.array(
        [mg_per_l_to_grams(float(targets_mg_per_l.get(ion, 0.0) or 0.0), volume) for ion in ions],
        dtype=float,
    )


def validate_target_ions(targets_mg_per_l: Mapping[str, float], ions: Iterable[str] = IONS) -> None:
    tracked = set(ions)
    unknown = sorted(k for k in targets_mg_per_l if k not in tracked)
    if unknown:
        raise DataError(f"targets reference untracked ions: {unknown}")


def preset_targets(name: str) -> dict[str, float]:
    """Copy of a crop preset (mg/L), safe to edit."""
    try:
        return dict(CROP_PRESETS[name])
    except KeyError:
        raise DataError(f"unknown crop preset: {name!r}. Available: {sorted(CROP_PRESETS)}") from None
