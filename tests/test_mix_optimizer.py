import logging

import numpy as np
import pytest

from hydromix.catalog import SaltCatalog
from hydromix.composition import composition_matrix, delivered_masses, resolve_salts
from hydromix.config import SolverConfig
from hydromix.errors import DataError, OptimizationError
from hydromix.mix_optimizer import compute_exact_mix, compute_mix, feasibility_mask, optimize_nutrient_mix
from hydromix.reference_data import DEFAULT_SALTS, IONS, MICRONUTRIENT_SALT_IDS
from hydromix.targets import preset_targets, requirement_vector
from hydromix.types import NutrientMixInput, ResolvedSalt, Salt, SaltOverride


# ── Common fixtures ──────────────────────────────────────────────

@pytest.fixture
def k_and_n_config():
    return SolverConfig(ions=["K", "N"])


@pytest.fixture
def lettuce_problem(catalog):
    config = SolverConfig()
    salts = resolve_salts(catalog.available_salts())
    requirement = requirement_vector(preset_targets("Lettuce"), 100.0)
    return salts, requirement, config


# ══════════════════════════════════════════════════════════════
#  compute_mix
# ══════════════════════════════════════════════════════════════

class TestComputeMix:
    def test_single_salt_single_ion(self, pure_k, k_only_config):
        mix = compute_mix(resolve_salts([pure_k], ions=["K"]), np.array([100.0]), k_only_config)
        assert mix.salt_ids == ["pure_k"]
        assert mix.mass_of("pure_k") == pytest.approx(100.0, abs=1e-6)
        assert mix.cost == pytest.approx(0.1)

    @pytest.mark.parametrize("order", [("cheap", "dear"), ("dear", "cheap")])
    def test_drops_expensive_duplicate(self, cheap_k, dear_k, k_only_config, order):
        by_name = {"cheap": cheap_k, "dear": dear_k}
        salts = resolve_salts([by_name[n] for n in order], ions=["K"])

        mix = compute_mix(salts, np.array([50.0]), k_only_config)

        assert mix.mass_of("cheap_k") == pytest.approx(50.0, abs=1e-6)
        assert mix.mass_of("dear_k") == 0.0
        assert mix.cost == pytest.approx(0.025)
        # baseline splits 25 g / 25 g across both salts
        assert mix.baseline_cost == pytest.approx(0.0625)

    def test_stops_after_pass_without_improvement(self, cheap_k, dear_k, k_only_config):
        mix = compute_mix(resolve_salts([cheap_k, dear_k], ions=["K"]), np.array([50.0]), k_only_config)
        assert mix.passes == 2

    def test_pass_cap(self, cheap_k, dear_k):
        config = SolverConfig(ions=["K"], max_passes=1)
        mix = compute_mix(resolve_salts([cheap_k, dear_k], ions=["K"]), np.array([50.0]), config)
        assert mix.passes == 1

    def test_unreachable_ion_is_not_an_error(self, cheap_k, dear_k, k_and_n_config):
        salts = resolve_salts([cheap_k, dear_k], ions=["K", "N"])
        requirement = np.array([100.0, 10.0])

        mix = compute_mix(salts, requirement, k_and_n_config)

        delivered = delivered_masses(composition_matrix(salts, ["K", "N"]), mix.masses)
        feasible = feasibility_mask(delivered, requirement, k_and_n_config)
        assert feasible.tolist() == [True, False]
        assert delivered[1] == 0.0
        # no candidate can be feasible, so the baseline is kept
        assert mix.cost == pytest.approx(mix.baseline_cost)

    def test_zero_requirement(self, lettuce_problem):
        salts, requirement, config = lettuce_problem
        mix = compute_mix(salts, np.zeros_like(requirement), config)
        assert mix.cost == 0.0
        assert not mix.masses.any()
        assert len(mix.masses) == len(salts)

    def test_no_salts(self):
        mix = compute_mix([], requirement_vector(preset_targets("Basil"), 10.0))
        assert mix.masses.shape == (0,)
        assert mix.cost == 0.0

    def test_never_exceeds_baseline(self, lettuce_problem):
        salts, requirement, config = lettuce_problem
        mix = compute_mix(salts, requirement, config)
        assert mix.cost <= mix.baseline_cost
        assert (mix.masses >= 0).all()

    def test_adopted_mix_is_feasible(self, lettuce_problem):
        salts, requirement, config = lettuce_problem
        mix = compute_mix(salts, requirement, config)
        if mix.cost < mix.baseline_cost:
            delivered = delivered_masses(composition_matrix(salts), mix.masses)
            assert feasibility_mask(delivered, requirement, config).all()

    def test_deterministic(self, lettuce_problem):
        salts, requirement, config = lettuce_problem
        first = compute_mix(salts, requirement, config)
        second = compute_mix(salts, requirement, config)
        assert np.array_equal(first.masses, second.masses)
        assert first.cost == second.cost

    def test_requirement_shape_mismatch(self, pure_k, k_only_config):
        with pytest.raises(DataError):
            compute_mix(resolve_salts([pure_k], ions=["K"]), np.array([1.0, 2.0]), k_only_config)

    def test_non_finite_requirement(self, pure_k, k_only_config):
        with pytest.raises(DataError):
            compute_mix(resolve_salts([pure_k], ions=["K"]), np.array([np.nan]), k_only_config)

    def test_non_finite_solution(self, pure_k, k_only_config):
        broken = ResolvedSalt(salt=pure_k, composition={"K": float("inf")})
        with pytest.raises(OptimizationError):
            compute_mix([broken], np.array([10.0]), k_only_config)


class TestFeasibilityMask:
    def test_ninety_nine_percent_rule(self):
        config = SolverConfig(ions=["K", "N", "P"])
        mask = feasibility_mask(np.array([99.0, 98.0, 0.0]), np.array([100.0, 100.0, 0.0]), config)
        assert mask.tolist() == [True, False, True]


# ══════════════════════════════════════════════════════════════
#  compute_exact_mix
# ══════════════════════════════════════════════════════════════

class TestComputeExactMix:
    def test_picks_cheapest_salt(self, cheap_k, dear_k, k_only_config):
        mix = compute_exact_mix(resolve_salts([dear_k, cheap_k], ions=["K"]), np.array([50.0]), k_only_config)
        assert mix.mass_of("cheap_k") == pytest.approx(50.0, rel=1e-6)
        assert mix.mass_of("dear_k") == pytest.approx(0.0, abs=1e-9)
        assert mix.cost == pytest.approx(0.025, rel=1e-6)

    def test_ignores_unreachable_ions(self, pure_k, k_and_n_config):
        mix = compute_exact_mix(resolve_salts([pure_k], ions=["K", "N"]), np.array([100.0, 10.0]), k_and_n_config)
        assert mix.mass_of("pure_k") == pytest.approx(100.0, rel=1e-6)

    def test_meets_every_reachable_requirement(self, lettuce_problem):
        salts, requirement, config = lettuce_problem
        mix = compute_exact_mix(salts, requirement, config)
        delivered = delivered_masses(composition_matrix(salts), mix.masses)
        assert (delivered + 1e-5 >= requirement).all()


# ══════════════════════════════════════════════════════════════
#  optimize_nutrient_mix
# ══════════════════════════════════════════════════════════════

class TestOptimizeNutrientMix:
    def test_lettuce_preset(self, catalog):
        result = optimize_nutrient_mix(NutrientMixInput(preset_targets("Lettuce"), volume_l=100.0), catalog)

        assert result.success
        assert [d.ion for d in result.ion_deliveries] == list(IONS)
        assert result.total_cost == pytest.approx(sum(d.cost for d in result.salt_doses))
        assert all(d.grams > 0 for d in result.salt_doses)

        for d in result.ion_deliveries:
            assert d.residual_mg_per_l == pytest.approx(d.delivered_mg_per_l - d.target_mg_per_l)
            assert d.delivered_mg_per_l == pytest.approx(d.delivered_g * 1000.0 / 100.0)

    def test_doses_per_litre(self, catalog):
        result = optimize_nutrient_mix(NutrientMixInput(preset_targets("Tomato"), volume_l=50.0), catalog)
        for d in result.salt_doses:
            assert d.grams_per_l == pytest.approx(d.grams / 50.0)

    def test_without_micronutrients_warns(self, catalog, caplog):
        mix_input = NutrientMixInput(preset_targets("Lettuce"), volume_l=100.0, include_micronutrients=False)

        with caplog.at_level(logging.WARNING, logger="hydromix.mix_optimizer"):
            result = optimize_nutrient_mix(mix_input, catalog)

        assert result.success
        assert not {d.salt_id for d in result.salt_doses} & MICRONUTRIENT_SALT_IDS
        fe = next(d for d in result.ion_deliveries if d.ion == "Fe")
        assert fe.delivered_g == 0.0
        assert not fe.feasible
        assert any(w.startswith("Fe:") for w in result.warnings)
        assert "not present in any selected salt" in result.diagnostics
        assert "Fe" in caplog.text

    def test_exact_method(self, catalog):
        result = optimize_nutrient_mix(
            NutrientMixInput(preset_targets("Lettuce"), volume_l=100.0),
            catalog,
            SolverConfig(method="exact"),
        )
        assert result.success
        assert all(d.feasible for d in result.ion_deliveries)
        assert result.warnings == []
        assert result.diagnostics is None

    def test_unknown_method(self, catalog):
        with pytest.raises(DataError):
            optimize_nutrient_mix(
                NutrientMixInput({"K": 100}, volume_l=10.0), catalog, SolverConfig(method="simplex")
            )

    def test_untracked_target_ion(self, catalog):
        with pytest.raises(DataError):
            optimize_nutrient_mix(NutrientMixInput({"Na": 10}, volume_l=10.0), catalog)

    def test_target_no_catalog_salt_supplies(self, pure_k):
        catalog = SaltCatalog(salts=(pure_k,))
        with pytest.raises(DataError):
            optimize_nutrient_mix(NutrientMixInput({"K": 100, "N": 10}, volume_l=10.0), catalog)

    def test_salt_selection(self, catalog):
        result = optimize_nutrient_mix(
            NutrientMixInput({"K": 200, "N": 100}, volume_l=10.0, salt_ids=["k_no3", "kcl", "urea"]),
            catalog,
        )
        assert {d.salt_id for d in result.salt_doses} <= {"k_no3", "kcl", "urea"}

    def test_no_candidate_salts(self, catalog):
        result = optimize_nutrient_mix(
            NutrientMixInput({"Fe": 2.0}, volume_l=10.0, salt_ids=["fe_edta"], include_micronutrients=False),
            catalog,
        )
        assert not result.success
        assert result.salt_doses == []
        assert result.total_cost == 0.0

    def test_volume_floor(self, pure_k):
        catalog = SaltCatalog(salts=(pure_k,))
        result = optimize_nutrient_mix(NutrientMixInput({"K": 100}, volume_l=0.25), catalog)
        assert result.volume_l == 1.0
        k = next(d for d in result.ion_deliveries if d.ion == "K")
        assert k.required_g == pytest.approx(0.1)

    def test_cost_override_changes_choice(self, cheap_k, dear_k):
        catalog = SaltCatalog(salts=(cheap_k, dear_k))
        mix_input = NutrientMixInput(
            {"K": 1000},
            volume_l=50.0,
            overrides={"cheap_k": SaltOverride(cost_per_kg=5.0)},
        )
        result = optimize_nutrient_mix(mix_input, catalog)
        assert [d.salt_id for d in result.salt_doses] == ["dear_k"]
        assert result.total_cost == pytest.approx(0.1)

    def test_override_does_not_mutate_catalog(self, catalog):
        mix_input = NutrientMixInput(
            preset_targets("Lettuce"),
            volume_l=100.0,
            overrides={"fe_edta": SaltOverride(molar_mass=382.0, cost_per_kg=16.0)},
        )
        optimize_nutrient_mix(mix_input, catalog)
        assert catalog.get("fe_edta").molar_mass == 367.9
        assert catalog.get("fe_edta").cost_per_kg == 18.0
        assert next(s for s in DEFAULT_SALTS if s.id == "fe_edta").molar_mass == 367.9

    def test_invalid_override(self, catalog):
        with pytest.raises(DataError):
            optimize_nutrient_mix(
                NutrientMixInput({"K": 100}, volume_l=10.0, overrides={"kcl": SaltOverride(molar_mass=0.0)}),
                catalog,
            )

    def test_all_zero_targets(self, catalog):
        result = optimize_nutrient_mix(NutrientMixInput({}, volume_l=100.0), catalog)
        assert result.success
        assert result.salt_doses == []
        assert result.total_cost == 0.0
        assert result.message == "mix meets all targets"


def test_default_salt_order_is_catalog_order(catalog):
    salts = resolve_salts(catalog.available_salts())
    assert [s.id for s in salts] == [s.id for s in DEFAULT_SALTS]
    assert isinstance(salts[0].salt, Salt)
