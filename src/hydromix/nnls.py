# src/hydromix/nnls.py

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class NnlsSolution:
    x: np.ndarray
    iterations: int
    converged: bool


def solve_nnls_multiplicative(
    a: np.ndarray,
    b: np.ndarray,
    *,
    max_iter: int = 2000,
    epsilon: float = 1e-9,
    tolerance: float = 1e-6,
) -> NnlsSolution:
    """
    Approximate non-negative least squares:
        minimize ||A x - b||  subject to  x >= 0

    Lee-Seung multiplicative update starting from x = 1:
        x_j <- x_j * ((A^T b)_j + eps) / ((A^T A x)_j + eps)

    Stops when the largest change in x drops below `tolerance` or after
    `max_iter` iterations. Not an exact solver; the result may under-deliver
    on infeasible or ill-conditioned systems.
    """
    a = np.asarray(a, dtype=float)
    b = np.asarray(b, dtype=float)
    num_ions, num_salts = a.shape

    if num_salts == 0:
        return NnlsSolution(x=np.zeros(0, dtype=float), iterations=0, converged=True)
    if num_ions == 0:
        return NnlsSolution(x=np.zeros(num_salts, dtype=float), iterations=0, converged=True)

    x = np.ones(num_salts, dtype=float)
    numerator = a.T @ b + epsilon

    converged = False
    iterations = 0
    for iterations in range(1, max_iter + 1):
        denominator = a.T @ (a @ x) + epsilon
        x_new = x * numerator / denominator
        max_change = float(np.max(np.abs(x_new - x)))
        x = x_new
        if max_change < tolerance:
            converged = True
            break

    if not converged:
        logger.debug("NNLS did not converge after %d iterations", max_iter)

    x[x < 0] = 0.0
    return NnlsSolution(x=x, iterations=iterations, converged=converged)
