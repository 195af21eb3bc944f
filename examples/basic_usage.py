# examples/basic_usage.py

# ---------------------------------------------------------------------
# What this example demonstrates
#
# This is a BASIC, end-to-end hydromix example.
#
# It shows:
# 1) How to start from a crop preset and tweak a target
# 2) How to override a salt's molar mass and price from a datasheet
# 3) How to run the heuristic cost optimizer (and the exact LP)
# 4) How to inspect results via built-in reporting tables
#
# NOTES:
# - Ions that no selected salt supplies are reported as warnings, not
#   errors. Try include_micronutrients=False to see this.
# ---------------------------------------------------------------------

import logging

from hydromix import SaltCatalog, optimize_nutrient_mix, preset_targets
from hydromix.config import SolverConfig
from hydromix.reports import build_mix_tables
from hydromix.types import NutrientMixInput, SaltOverride


def main() -> None:
    logging.basicConfig(level=logging.INFO)

    catalog = SaltCatalog()
    catalog.validate()

    # -----------------------------------------------------------------
    # Targets (mg/L)
    # -----------------------------------------------------------------
    targets = preset_targets("Lettuce")
    targets["K"] = 220

    # -----------------------------------------------------------------
    # Datasheet overrides: stoichiometry stays, mass and price change
    # -----------------------------------------------------------------
    overrides = {
        "ca_no3_4h2o": SaltOverride(cost_per_kg=1.5),
        "fe_edta": SaltOverride(molar_mass=382.0, cost_per_kg=16.0),
    }

    mix_input = NutrientMixInput(
        targets_mg_per_l=targets,
        volume_l=100.0,
        overrides=overrides,
        include_micronutrients=True,
    )

    for method in ("heuristic", "exact"):
        result = optimize_nutrient_mix(
            mix_input=mix_input,
            catalog=catalog,
            solver_config=SolverConfig(method=method),
        )

        print(f"\n=== {method} ===")
        print("Success:", result.success)
        print("Message:", result.message)
        print(f"Estimated cost for {result.volume_l:g} L: {result.total_cost:.4f}")

        if result.diagnostics:
            print("\nDiagnostics:\n", result.diagnostics)

        tables = build_mix_tables(result)

        print("\n--- Salts ---")
        print("(empty)" if tables.salts.empty else tables.salts.to_string(index=False))

        print("\n--- Delivery check ---")
        print("(empty)" if tables.ions.empty else tables.ions.to_string(index=False))


if __name__ == "__main__":
    main()
