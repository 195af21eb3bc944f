# src/hydromix/reports.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

import numpy as np
import pandas as pd

from hydromix.types import NutrientMixResult
from hydromix.utils import format_mass_with_unit

SALT_COLUMNS = [
    "Salt ID",
    "Name",
    "Tank",
    "Total Mass [g]",
    "Dose",
    "Unit",
    "Cost [per kg]",
    "Cost",
]

ION_COLUMNS = [
    "Ion",
    "Target [mg/L]",
    "Delivered [mg/L]",
    "Residual [mg/L]",
    "Match (%)",
    "Feasible",
]


def _scale_to_unit(value_g_per_l: float, unit: str, *, decimals: int = 2) -> float:
    """
    Scale value in g/L to a chosen unit.
    """
    if value_g_per_l is None or not np.isfinite(value_g_per_l):
        return float("nan")

    v = float(value_g_per_l)
    if unit == "g/L":
        return round(v, decimals)
    if unit == "mg/L":
        return round(v * 1e3, decimals)
    if unit == "µg/L":
        return round(v * 1e6, decimals)
    if unit == "ng/L":
        return round(v * 1e9, decimals)
    return round(v, decimals)


def _choose_unit_from_min_mass(values_g_per_l: Iterable[float]) -> str:
    """
    Pick a unit based on the minimum non-zero mass in the set.
    """
    vals = [float(v) for v in values_g_per_l if v is not None and np.isfinite(v) and float(v) > 0]
    if not vals:
        return "g/L"
    _, unit = format_mass_with_unit(min(vals))
    return unit


def build_salt_dose_table(result: NutrientMixResult, *, decimals: int = 4) -> pd.DataFrame:
    """
    One row per salt used, heaviest first.

    Dose columns share a single unit chosen from the smallest dose so the
    table reads consistently.
    """
    if not result.success or not result.salt_doses:
        return pd.DataFrame(columns=SALT_COLUMNS)

    unit = _choose_unit_from_min_mass(d.grams_per_l for d in result.salt_doses)

    rows = [
        {
            "Salt ID": d.salt_id,
            "Name": d.name,
            "Tank": d.recommended_tank,
            "Total Mass [g]": round(d.grams, decimals),
            "Dose": _scale_to_unit(d.grams_per_l, unit, decimals=decimals),
            "Unit": unit,
            "Cost [per kg]": round(d.cost_per_kg, 2),
            "Cost": round(d.cost, decimals),
        }
        for d in result.salt_doses
    ]

    df = pd.DataFrame(rows, columns=SALT_COLUMNS)
    return df.sort_values(by="Total Mass [g]", ascending=False, kind="mergesort").reset_index(drop=True)


def build_ion_delivery_table(result: NutrientMixResult, *, decimals: int = 3) -> pd.DataFrame:
    """Delivery check: target vs delivered concentration per ion, in ion order."""
    if not result.ion_deliveries:
        return pd.DataFrame(columns=ION_COLUMNS)

    rows = [
        {
            "Ion": d.ion,
            "Target [mg/L]": round(d.target_mg_per_l, decimals),
            "Delivered [mg/L]": round(d.delivered_mg_per_l, decimals),
            "Residual [mg/L]": round(d.residual_mg_per_l, decimals),
            "Match (%)": round(d.match_percent, 2),
            "Feasible": bool(d.feasible),
        }
        for d in result.ion_deliveries
    ]
    return pd.DataFrame(rows, columns=ION_COLUMNS)


@dataclass(frozen=True, slots=True)
class MixTables:
    salts: pd.DataFrame
    ions: pd.DataFrame


def build_mix_tables(result: NutrientMixResult, *, decimals: int = 4) -> MixTables:
    return MixTables(
        salts=build_salt_dose_table(result, decimals=decimals),
        ions=build_ion_delivery_table(result),
    )
