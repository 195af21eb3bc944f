# src/hydromix/lp_solver.py

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

import numpy as np
from scipy.optimize import linprog

from .config import SolverConfig


@dataclass(frozen=True, slots=True)
class LpSolution:
    success: bool
    message: str
    x: np.ndarray | None


def solve_linear_program(
    a_min: np.ndarray,
    b_min: np.ndarray,
    cost_vector: np.ndarray,
    solver_config: SolverConfig,
) -> LpSolution:
    """
    Solve a linear program:
        minimize c^T x
        subject to A_min x >= b_min
                   x >= 0
    """
    a_min = np.asarray(a_min, dtype=float)
    b_min = np.asarray(b_min, dtype=float)
    cost_vector = np.asarray(cost_vector, dtype=float)

    bounds: List[Tuple[float, float | None]] = [(0.0, None)] * int(cost_vector.shape[0])

    # linprog only takes upper-bound inequalities
    result = linprog(
        cost_vector,
        A_ub=-a_min,
        b_ub=-b_min,
        bounds=bounds,
        method=solver_config.lp_method,
    )

    if not bool(result.success):
        return LpSolution(success=False, message=str(result.message), x=None)

    x = np.clip(np.asarray(result.x, dtype=float), 0.0, None)
    return LpSolution(success=True, message=str(result.message), x=x)
