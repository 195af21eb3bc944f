# src/hydromix/config.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from .reference_data import IONS


@dataclass(frozen=True, slots=True)
class SolverConfig:
    # -----------------------------
    # Tracked ions (defines vector order)
    # -----------------------------
    ions: List[str] = field(default_factory=lambda: list(IONS))

    # -----------------------------
    # NNLS (multiplicative update)
    # -----------------------------
    nnls_max_iter: int = 2000
    nnls_epsilon: float = 1e-9
    nnls_tolerance: float = 1e-6

    # -----------------------------
    # Greedy backward elimination
    # -----------------------------
    max_passes: int = 5
    feasibility_ratio: float = 0.99
    feasibility_slack: float = 1e-6
    min_active_mass: float = 1e-9  # g
    improvement_epsilon: float = 1e-9

    # -----------------------------
    # Solution volume
    # -----------------------------
    min_volume_l: float = 1.0

    # -----------------------------
    # Solver selection
    # "heuristic": NNLS + greedy elimination
    # "exact": linear program (falls back to heuristic)
    # -----------------------------
    method: str = "heuristic"
    lp_method: str = "highs"

    # Missing atomic weights yield 0 unless strict
    strict_atomic_weights: bool = False
