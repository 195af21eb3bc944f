# src/hydromix/mix_optimizer.py

from __future__ import annotations

import logging
from typing import Sequence

import numpy as np

from .catalog import SaltCatalog
from .composition import composition_matrix, delivered_masses, resolve_salts
from .config import SolverConfig
from .errors import DataError, OptimizationError
from .lp_solver import solve_linear_program
from .nnls import solve_nnls_multiplicative
from .reference_data import ATOMIC_WEIGHTS
from .targets import effective_volume, requirement_vector, validate_target_ions
from .types import IonDelivery, MixResult, NutrientMixInput, NutrientMixResult, ResolvedSalt, SaltDose

logger = logging.getLogger(__name__)


def _cost_per_gram(salts: Sequence[ResolvedSalt]) -> np.ndarray:
    return np.array([s.cost_per_kg for s in salts], dtype=float) / 1000.0


def _mix_cost(masses: np.ndarray, cost_per_gram: np.ndarray) -> float:
    return float(np.dot(masses, cost_per_gram)) if masses.size else 0.0


def _solve(a: np.ndarray, requirement: np.ndarray, solver_config: SolverConfig) -> np.ndarray:
    return solve_nnls_multiplicative(
        a,
        requirement,
        max_iter=solver_config.nnls_max_iter,
        epsilon=solver_config.nnls_epsilon,
        tolerance=solver_config.nnls_tolerance,
    ).x


def _check_requirement(requirement: np.ndarray, solver_config: SolverConfig) -> np.ndarray:
    requirement = np.asarray(requirement, dtype=float)
    if requirement.shape != (len(solver_config.ions),):
        raise DataError(
            f"requirement vector has shape {requirement.shape}, expected ({len(solver_config.ions)},) "
            f"for ions {list(solver_config.ions)}"
        )
    if not np.all(np.isfinite(requirement)):
        raise DataError("requirement vector contains non-finite values")
    return requirement


def feasibility_mask(
    delivered: np.ndarray,
    required: np.ndarray,
    solver_config: SolverConfig | None = None,
) -> np.ndarray:
    """Per ion: delivered covers at least feasibility_ratio of the requirement."""
    solver_config = solver_config or SolverConfig()
    delivered = np.asarray(delivered, dtype=float)
    required = np.asarray(required, dtype=float)
    return delivered + solver_config.feasibility_slack >= required * solver_config.feasibility_ratio


def compute_mix(
    salts: Sequence[ResolvedSalt],
    requirement: np.ndarray,
    solver_config: SolverConfig | None = None,
) -> MixResult:
    """
    Cheapest feasible mix found by greedy backward elimination.

    1. Baseline: NNLS over every salt.
    2. Up to max_passes passes, scanning salts in the given order. Each salt
       still in use is excluded in turn and the rest re-solved; the candidate
       is adopted when it is feasible (99% rule on every ion) and strictly
       cheaper.
    3. Stop after a pass without improvement.

    Infeasible requirements are not an error: the best mix found is returned
    and callers compare delivered vs required per ion.
    """
    solver_config = solver_config or SolverConfig()
    requirement = _check_requirement(requirement, solver_config)

    salt_ids = [s.id for s in salts]
    num_salts = len(salts)

    if num_salts == 0 or not np.any(requirement > 0):
        return MixResult(salt_ids=salt_ids, masses=np.zeros(num_salts, dtype=float), cost=0.0, baseline_cost=0.0)

    a = composition_matrix(salts, solver_config.ions)
    cost_per_gram = _cost_per_gram(salts)

    x0 = _solve(a, requirement, solver_config)
    if not np.all(np.isfinite(x0)):
        raise OptimizationError("NNLS produced non-finite masses; check salt compositions")
    baseline_cost = _mix_cost(x0, cost_per_gram)
    logger.debug("baseline mix over %d salts costs %.6f", num_salts, baseline_cost)

    best_x = x0.copy()
    best_cost = baseline_cost

    passes = 0
    for _ in range(solver_config.max_passes):
        passes += 1
        improved = False

        for j in range(num_salts):
            if best_x[j] <= solver_config.min_active_mass:
                continue

            keep = [i for i in range(num_salts) if i != j]
            if not keep:
                continue

            candidate = np.zeros(num_salts, dtype=float)
            candidate[keep] = _solve(a[:, keep], requirement, solver_config)

            candidate_cost = _mix_cost(candidate, cost_per_gram)
            feasible = bool(feasibility_mask(delivered_masses(a, candidate), requirement, solver_config).all())

            if feasible and candidate_cost < best_cost - solver_config.improvement_epsilon:
                logger.debug("dropping %s lowers cost %.6f -> %.6f", salt_ids[j], best_cost, candidate_cost)
                best_x = candidate
                best_cost = candidate_cost
                improved = True

        if not improved:
            break

    return MixResult(
        salt_ids=salt_ids,
        masses=best_x,
        cost=best_cost,
        baseline_cost=baseline_cost,
        passes=passes,
    )


def compute_exact_mix(
    salts: Sequence[ResolvedSalt],
    requirement: np.ndarray,
    solver_config: SolverConfig | None = None,
) -> MixResult:
    """
    Minimum-cost mix as a linear program:
        minimize sum_j cost_j x_j
        subject to A x >= b (ions some salt can supply), x >= 0

    Falls back to compute_mix if the LP cannot be solved.
    """
    solver_config = solver_config or SolverConfig()
    requirement = _check_requirement(requirement, solver_config)

    salt_ids = [s.id for s in salts]
    num_salts = len(salts)

    if num_salts == 0 or not np.any(requirement > 0):
        return MixResult(salt_ids=salt_ids, masses=np.zeros(num_salts, dtype=float), cost=0.0, baseline_cost=0.0)

    a = composition_matrix(salts, solver_config.ions)
    cost_per_gram = _cost_per_gram(salts)

    rows = (a.sum(axis=1) > 0) & (requirement > 0)
    if not rows.any():
        return MixResult(salt_ids=salt_ids, masses=np.zeros(num_salts, dtype=float), cost=0.0, baseline_cost=0.0)

    solution = solve_linear_program(
        a_min=a[rows],
        b_min=requirement[rows],
        cost_vector=cost_per_gram,
        solver_config=solver_config,
    )

    if not solution.success or solution.x is None:
        logger.warning("exact solver failed (%s), falling back to heuristic", solution.message)
        return compute_mix(salts, requirement, solver_config)

    cost = _mix_cost(solution.x, cost_per_gram)
    return MixResult(salt_ids=salt_ids, masses=solution.x, cost=cost, baseline_cost=cost)


def optimize_nutrient_mix(
    mix_input: NutrientMixInput,
    catalog: SaltCatalog | None = None,
    solver_config: SolverConfig | None = None,
) -> NutrientMixResult:
    solver_config = solver_config or SolverConfig()
    catalog = catalog or SaltCatalog()
    ions = list(solver_config.ions)
    targets = mix_input.targets_mg_per_l

    validate_target_ions(targets, ions)

    supplied = catalog.supplied_ions()
    unsupported = [ion for ion in ions if float(targets.get(ion, 0.0) or 0.0) > 0 and ion not in supplied]
    if unsupported:
        raise DataError(f"no catalog salt supplies targeted ions: {unsupported}")

    if solver_config.method == "heuristic":
        solve = compute_mix
    elif solver_config.method == "exact":
        solve = compute_exact_mix
    else:
        raise DataError(f"unknown solver method: {solver_config.method!r}")

    volume = effective_volume(mix_input.volume_l, solver_config)
    requirement = requirement_vector(targets, mix_input.volume_l, ions, solver_config)

    salts = catalog.available_salts(
        mix_input.overrides,
        include_micronutrients=mix_input.include_micronutrients,
        salt_ids=mix_input.salt_ids,
    )
    if not salts:
        return NutrientMixResult(
            success=False,
            message="no candidate salts available",
            salt_doses=[],
            ion_deliveries=[],
            total_cost=0.0,
            volume_l=volume,
            diagnostics="the salt selection and micronutrient filter left no salts to mix",
        )

    resolved = resolve_salts(salts, ATOMIC_WEIGHTS, ions, strict=solver_config.strict_atomic_weights)
    mix = solve(resolved, requirement, solver_config)

    # --- doses
    salt_doses = [
        SaltDose(
            salt_id=s.id,
            name=s.salt.name,
            grams=float(m),
            grams_per_l=float(m) / volume,
            cost_per_kg=s.cost_per_kg,
            cost=float(m) * s.cost_per_kg / 1000.0,
            recommended_tank=s.salt.recommended_tank,
        )
        for s, m in zip(resolved, mix.masses)
        if np.isfinite(m) and m > solver_config.min_active_mass
    ]

    # --- ion delivery check
    a = composition_matrix(resolved, ions)
    delivered = delivered_masses(a, mix.masses)
    feasible = feasibility_mask(delivered, requirement, solver_config)
    reachable = a.sum(axis=1) > 0

    ion_deliveries = []
    warnings: list[str] = []
    unreachable: list[str] = []
    under_delivered: list[str] = []
    for i, ion in enumerate(ions):
        target = float(targets.get(ion, 0.0) or 0.0)
        delivered_mg_per_l = float(delivered[i]) * 1000.0 / volume
        required = float(requirement[i])
        match_percent = (float(delivered[i]) / required) * 100 if required > 0 else 0.0

        ion_deliveries.append(
            IonDelivery(
                ion=ion,
                target_mg_per_l=target,
                required_g=required,
                delivered_g=float(delivered[i]),
                delivered_mg_per_l=delivered_mg_per_l,
                residual_mg_per_l=delivered_mg_per_l - target,
                match_percent=float(match_percent),
                feasible=bool(feasible[i]),
            )
        )

        if feasible[i]:
            continue
        if not reachable[i]:
            unreachable.append(ion)
            warnings.append(f"{ion}: not supplied by any selected salt (target {target:.3f} mg/L)")
        else:
            under_delivered.append(ion)
            warnings.append(f"{ion}: delivered {delivered_mg_per_l:.3f} mg/L of {target:.3f} mg/L target")

    for w in warnings:
        logger.warning(w)

    if warnings:
        message = f"mix under-delivers {len(warnings)} of {len(ions)} ions"
        diagnostics = analyze_under_delivery(
            num_salts=len(resolved),
            unreachable_ions=unreachable,
            under_delivered_ions=under_delivered,
            feasibility_ratio=solver_config.feasibility_ratio,
        )
    else:
        message = "mix meets all targets"
        diagnostics = None

    return NutrientMixResult(
        success=True,
        message=message,
        salt_doses=salt_doses,
        ion_deliveries=ion_deliveries,
        total_cost=float(mix.cost),
        volume_l=volume,
        warnings=warnings,
        diagnostics=diagnostics,
    )


def analyze_under_delivery(
    num_salts: int,
    unreachable_ions: list[str],
    under_delivered_ions: list[str],
    feasibility_ratio: float = 0.99,
) -> str:
    message_parts = [
        f"A total of {num_salts} salts were available to match the ion targets."
    ]

    if unreachable_ions:
        if len(unreachable_ions) == 1:
            message_parts.append(
                f"However, the targeted ion '{unreachable_ions[0]}' is not present in any selected salt."
            )
        else:
            message_parts.append(
                f"However, the following {len(unreachable_ions)} ions are not present in any selected salt: "
                f"{', '.join(unreachable_ions)}."
            )
        message_parts.append(
            "Include salts that supply these ions (for example micronutrient salts) or lower their targets."
        )

    if under_delivered_ions:
        message_parts.append(
            f"The ions {', '.join(under_delivered_ions)} are supplied but fall below {feasibility_ratio:.0%} of their targets. "
            "This may be due to conflicting ratios between the available salts."
        )

    return " ".join(message_parts)
