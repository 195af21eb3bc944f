# src/hydromix/catalog.py

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Iterable, Mapping, Sequence

import pandas as pd

from .errors import DataError
from .reference_data import ATOMIC_WEIGHTS, DEFAULT_SALTS, IONS
from .types import YIELD_KINDS, Salt, SaltOverride

logger = logging.getLogger(__name__)

CATALOG_COLUMNS = [
    "Salt ID",
    "Name",
    "Formula",
    "MW",
    "Cost [per kg]",
    "Tank",
    "Micronutrient",
]


def apply_override(salt: Salt, override: SaltOverride | None) -> Salt:
    """
    Effective view of a salt with datasheet overrides merged in.

    The catalog salt is left untouched; stoichiometry is never overridden.
    """
    if override is None:
        return salt

    changes: dict[str, float] = {}
    if override.molar_mass is not None:
        if override.molar_mass <= 0:
            raise DataError(f"override for {salt.id!r}: molar mass must be positive, got {override.molar_mass!r}")
        changes["molar_mass"] = float(override.molar_mass)
    if override.cost_per_kg is not None:
        if override.cost_per_kg < 0:
            raise DataError(f"override for {salt.id!r}: cost must be non-negative, got {override.cost_per_kg!r}")
        changes["cost_per_kg"] = float(override.cost_per_kg)

    return replace(salt, **changes) if changes else salt


@dataclass(frozen=True, slots=True)
class SaltCatalog:
    """
    Read-only salt catalog.

    - Defaults to the packaged reference salts.
    - Overrides are merged at read time into effective salts.
    - Candidate sets keep catalog order (the optimizer scan order).
    """

    salts: tuple[Salt, ...] = DEFAULT_SALTS

    @property
    def ids(self) -> list[str]:
        return [s.id for s in self.salts]

    def get(self, salt_id: str) -> Salt:
        for s in self.salts:
            if s.id == salt_id:
                return s
        raise DataError(f"unknown salt id: {salt_id!r}")

    def get_salts_by_ids(self, salt_ids: Iterable[str]) -> list[Salt]:
        """Salts for the given ids, in catalog order."""
        wanted = {str(x).strip() for x in salt_ids if str(x).strip()}
        missing = wanted - set(self.ids)
        if missing:
            raise DataError(f"unknown salt ids: {sorted(missing)}")
        return [s for s in self.salts if s.id in wanted]

    def effective_salts(self, overrides: Mapping[str, SaltOverride] | None = None) -> list[Salt]:
        overrides = overrides or {}
        unknown = set(overrides) - set(self.ids)
        if unknown:
            raise DataError(f"overrides reference unknown salt ids: {sorted(unknown)}")
        return [apply_override(s, overrides.get(s.id)) for s in self.salts]

    def available_salts(
        self,
        overrides: Mapping[str, SaltOverride] | None = None,
        *,
        include_micronutrients: bool = True,
        salt_ids: Sequence[str] | None = None,
    ) -> list[Salt]:
        """Effective salts offered to the optimizer, in catalog order."""
        salts = self.effective_salts(overrides)

        if salt_ids is not None:
            selected = {s.id for s in self.get_salts_by_ids(salt_ids)}
            salts = [s for s in salts if s.id in selected]

        if not include_micronutrients:
            salts = [s for s in salts if not s.micronutrient]

        logger.debug("%d candidate salts available", len(salts))
        return salts

    def supplied_ions(self) -> set[str]:
        """Ions some catalog salt can supply."""
        return {ion for s in self.salts for ion, count in s.ions.items() if count and count > 0}

    def validate(
        self,
        atomic_weights: Mapping[str, float] = ATOMIC_WEIGHTS,
        ions: Iterable[str] = IONS,
    ) -> None:
        tracked = set(ions)
        seen: set[str] = set()
        problems: list[str] = []

        for s in self.salts:
            if s.id in seen:
                problems.append(f"duplicate salt id {s.id!r}")
            seen.add(s.id)

            if not s.molar_mass or s.molar_mass <= 0:
                problems.append(f"{s.id}: molar mass must be positive")
            if s.cost_per_kg is None or s.cost_per_kg < 0:
                problems.append(f"{s.id}: cost must be non-negative")
            if s.yield_kind not in YIELD_KINDS:
                problems.append(f"{s.id}: unknown yield kind {s.yield_kind!r}")

            for ion, count in s.ions.items():
                if ion not in tracked:
                    problems.append(f"{s.id}: untracked ion {ion!r}")
                elif ion not in atomic_weights:
                    problems.append(f"{s.id}: no atomic weight for {ion!r}")
                if count is None or count < 0:
                    problems.append(f"{s.id}: negative count for {ion!r}")

        if problems:
            raise DataError("invalid salt catalog: " + "; ".join(problems))

    def to_frame(self, ions: Iterable[str] = IONS) -> pd.DataFrame:
        """Catalog as a DataFrame, one column per tracked ion count."""
        ions = list(ions)
        if not self.salts:
            return pd.DataFrame(columns=CATALOG_COLUMNS + ions)

        rows = []
        for s in self.salts:
            row = {
                "Salt ID": s.id,
                "Name": s.name,
                "Formula": s.formula or "",
                "MW": s.molar_mass,
                "Cost [per kg]": s.cost_per_kg,
                "Tank": s.recommended_tank,
                "Micronutrient": bool(s.micronutrient),
            }
            for ion in ions:
                row[ion] = float(s.ions.get(ion, 0) or 0)
            rows.append(row)

        df = pd.DataFrame(rows, columns=CATALOG_COLUMNS + ions)
        for col in ("MW", "Cost [per kg]"):
            df[col] = pd.to_numeric(df[col], errors="coerce")
        return df
