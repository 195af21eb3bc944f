from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional

import numpy as np

YIELD_KINDS = ("auto", "mole_count", "direct_fraction")


@dataclass(frozen=True)
class Salt:
    """
    ions:
        Ion -> count. Moles of ion per mole of salt for pure compounds, or a
        direct g/g fraction for commercial blends (see yield_kind).
    yield_kind:
        "mole_count", "direct_fraction", or "auto" (counts below 1 are read
        as direct fractions).
    formula:
        Optional chemical formula (hydrate notation allowed), audit only.
    """
    id: str
    name: str
    molar_mass: float
    ions: Mapping[str, float]
    cost_per_kg: float
    recommended_tank: str = ""
    source_notes: str = ""
    formula: Optional[str] = None
    micronutrient: bool = False
    yield_kind: str = "auto"


@dataclass(frozen=True)
class SaltOverride:
    """None keeps the catalog value."""
    molar_mass: Optional[float] = None
    cost_per_kg: Optional[float] = None


@dataclass(frozen=True)
class ResolvedSalt:
    salt: Salt
    composition: Dict[str, float]

    @property
    def id(self) -> str:
        return self.salt.id

    @property
    def cost_per_kg(self) -> float:
        return float(self.salt.cost_per_kg)


@dataclass(frozen=True)
class MixResult:
    salt_ids: List[str]
    masses: np.ndarray  # g, in salt order
    cost: float
    baseline_cost: float
    passes: int = 0

    def mass_of(self, salt_id: str) -> float:
        return float(self.masses[self.salt_ids.index(salt_id)])


@dataclass(frozen=True)
class NutrientMixInput:
    targets_mg_per_l: Dict[str, float]
    volume_l: float
    overrides: Dict[str, SaltOverride] = field(default_factory=dict)
    include_micronutrients: bool = True
    salt_ids: Optional[List[str]] = None


@dataclass(frozen=True)
class SaltDose:
    salt_id: str
    name: str
    grams: float
    grams_per_l: float
    cost_per_kg: float
    cost: float
    recommended_tank: str


@dataclass(frozen=True)
class IonDelivery:
    ion: str
    target_mg_per_l: float
    required_g: float
    delivered_g: float
    delivered_mg_per_l: float
    residual_mg_per_l: float
    match_percent: float
    feasible: bool


@dataclass(frozen=True)
class NutrientMixResult:
    success: bool
    message: str
    salt_doses: List[SaltDose]
    ion_deliveries: List[IonDelivery]
    total_cost: float
    volume_l: float
    warnings: List[str] = field(default_factory=list)
    diagnostics: Optional[str] = None
