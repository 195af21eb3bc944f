# src/hydromix/reference_data.py

"""
Static reference tables: atomic weights, tracked ions, salt catalog and crop
presets. Loaded once at import and never mutated.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Tuple

from .types import Salt

# g/mol
ATOMIC_WEIGHTS: Mapping[str, float] = MappingProxyType(
    {
        "H": 1.00794,
        "He": 4.002602,
        "Li": 6.941,
        "Be": 9.012182,
        "B": 10.811,
        "C": 12.0107,
        "N": 14.0067,
        "O": 15.9994,
        "F": 18.9984032,
        "Na": 22.98976928,
        "Mg": 24.3050,
        "Al": 26.9815386,
        "Si": 28.0855,
        "P": 30.973761,
        "S": 32.065,
        "Cl": 35.453,
        "K": 39.0983,
        "Ca": 40.078,
        "Mn": 54.938045,
        "Fe": 55.845,
        "Cu": 63.546,
        "Zn": 65.38,
        "Mo": 95.95,
    }
)

# Order is significant: it indexes every requirement vector and yield matrix.
IONS: Tuple[str, ...] = ("N", "P", "K", "Ca", "Mg", "S", "Fe", "B", "Mn", "Zn", "Cu", "Mo")


def _salt(**kwargs) -> Salt:
    kwargs["ions"] = MappingProxyType(dict(kwargs["ions"]))
    return Salt(**kwargs)


DEFAULT_SALTS: Tuple[Salt, ...] = (
    _salt(
        id="ca_no3_4h2o",
        name="Calcium nitrate tetrahydrate (Ca(NO3)2·4H2O)",
        formula="Ca(NO3)2·4H2O",
        molar_mass=236.15,
        ions={"Ca": 1, "N": 2},
        recommended_tank="A",
        cost_per_kg=1.8,
        source_notes="Common horticultural grade; check product label for water of crystallization.",
    ),
    _salt(
        id="k_no3",
        name="Potassium nitrate (KNO3)",
        formula="KNO3",
        molar_mass=101.1032,
        ions={"K": 1, "N": 1},
        recommended_tank="A",
        cost_per_kg=1.2,
        source_notes="Widely available; high solubility.",
    ),
    _salt(
        id="map",
        name="Monoammonium phosphate (NH4H2PO4)",
        formula="NH4H2PO4",
        molar_mass=115.027,
        ions={"N": 1, "P": 1},
        recommended_tank="B",
        cost_per_kg=0.9,
        source_notes="Acidifying phosphate source; may lower pH.",
    ),
    _salt(
        id="kh2po4",
        name="Potassium dihydrogen phosphate (KH2PO4)",
        formula="KH2PO4",
        molar_mass=136.086,
        ions={"K": 1, "P": 1},
        recommended_tank="B",
        cost_per_kg=1.1,
        source_notes="Good P + K, can acidify solution.",
    ),
    _salt(
        id="k2so4",
        name="Potassium sulfate (K2SO4)",
        formula="K2SO4",
        molar_mass=174.259,
        ions={"K": 2, "S": 1},
        recommended_tank="B",
        cost_per_kg=0.8,
        source_notes="Sulfate source; keep away from Ca in concentrated mixes.",
    ),
    _salt(
        id="mg_so4_7h2o",
        name="Magnesium sulfate heptahydrate (MgSO4·7H2O)",
        formula="MgSO4·7H2O",
        molar_mass=246.474,
        ions={"Mg": 1, "S": 1},
        recommended_tank="B",
        cost_per_kg=0.6,
        source_notes="Epsom salt; highly soluble.",
    ),
    _salt(
        id="mg_no3_6h2o",
        name="Magnesium nitrate hexahydrate (Mg(NO3)2·6H2O)",
        formula="Mg(NO3)2·6H2O",
        molar_mass=256.41,
        ions={"Mg": 1, "N": 2},
        recommended_tank="A",
        cost_per_kg=2.0,
        source_notes="Useful when more nitrate is desired.",
    ),
    _salt(
        id="urea",
        name="Urea (CO(NH2)2)",
        formula="CO(NH2)2",
        molar_mass=60.055,
        ions={"N": 2},
        recommended_tank="A",
        cost_per_kg=0.7,
        source_notes="Non-ionic; requires hydrolysis to convert to nitrate/ammonium. Use with caution in hydroponics.",
    ),
    _salt(
        id="ammonium_sulfate",
        name="Ammonium sulfate ((NH4)2SO4)",
        formula="(NH4)2SO4",
        molar_mass=132.14,
        ions={"N": 2, "S": 1},
        recommended_tank="B",
        cost_per_kg=0.65,
        source_notes="Acidifying; provides sulfate.",
    ),
    _salt(
        id="kcl",
        name="Potassium chloride (KCl)",
        formula="KCl",
        molar_mass=74.5513,
        ions={"K": 1},
        recommended_tank="A",
        cost_per_kg=0.5,
        source_notes="Cheap K source but adds chloride; useful if chloride tolerance is high.",
    ),
    _salt(
        id="ca_cl2",
        name="Calcium chloride (CaCl2)",
        formula="CaCl2",
        molar_mass=110.98,
        ions={"Ca": 1},
        recommended_tank="A",
        cost_per_kg=0.9,
        source_notes="Highly soluble; provides quick Ca but also chloride.",
    ),
    _salt(
        id="ssp",
        name="Single Superphosphate (SSP)",
        molar_mass=300.0,
        ions={"P": 1, "Ca": 1, "S": 1},
        recommended_tank="B",
        cost_per_kg=0.4,
        source_notes="Variable composition; use product datasheet to set exact P content.",
    ),
    _salt(
        id="tsp",
        name="Triple Superphosphate (TSP)",
        molar_mass=252.0,
        ions={"P": 1},
        recommended_tank="B",
        cost_per_kg=0.6,
        source_notes="Concentrated P source; often granular, dissolution rate varies.",
    ),
    _salt(
        id="fe_edta",
        name="Fe-EDTA (iron EDTA)",
        molar_mass=367.9,
        ions={"Fe": 1},
        recommended_tank="B",
        cost_per_kg=18.0,
        source_notes="Common chelate; stable at pH up to about 6.5. Check product label for %Fe.",
        micronutrient=True,
    ),
    _salt(
        id="fe_dtpa",
        name="Fe-DTPA (iron DTPA)",
        molar_mass=404.0,
        ions={"Fe": 1},
        recommended_tank="B",
        cost_per_kg=22.0,
        source_notes="More stable than EDTA up to pH about 7.5; good for slightly alkaline water.",
        micronutrient=True,
    ),
    _salt(
        id="fe_eddha",
        name="Fe-EDDHA (iron EDDHA chelate)",
        molar_mass=600.0,
        ions={"Fe": 1},
        recommended_tank="B",
        cost_per_kg=45.0,
        source_notes="Most stable chelate for high-pH solutions (pH 7-9).",
        micronutrient=True,
    ),
    _salt(
        id="zn_edta",
        name="Zn-EDTA",
        molar_mass=349.5,
        ions={"Zn": 1},
        recommended_tank="B",
        cost_per_kg=10.0,
        source_notes="Chelated zinc; better retention than sulfate at neutral pH.",
        micronutrient=True,
    ),
    _salt(
        id="mn_edta",
        name="Mn-EDTA",
        molar_mass=331.0,
        ions={"Mn": 1},
        recommended_tank="B",
        cost_per_kg=9.0,
        source_notes="Chelated manganese; prevents precipitation with phosphates.",
        micronutrient=True,
    ),
    _salt(
        id="zn_so4",
        name="Zinc sulfate (ZnSO4)",
        formula="ZnSO4",
        molar_mass=161.47,
        ions={"Zn": 1},
        recommended_tank="B",
        cost_per_kg=6.0,
        source_notes="Inexpensive but less stable in alkaline conditions.",
        micronutrient=True,
    ),
    _salt(
        id="cu_so4",
        name="Copper sulfate (CuSO4)",
        formula="CuSO4",
        molar_mass=159.61,
        ions={"Cu": 1},
        recommended_tank="B",
        cost_per_kg=7.0,
        source_notes="Phytotoxic at low concentrations if overdosed.",
        micronutrient=True,
    ),
    _salt(
        id="mn_so4",
        name="Manganese sulfate (MnSO4·H2O)",
        formula="MnSO4·H2O",
        molar_mass=169.01,
        ions={"Mn": 1},
        recommended_tank="B",
        cost_per_kg=6.5,
        source_notes="Inexpensive source of Mn; can precipitate with phosphates at high concentration.",
        micronutrient=True,
    ),
    _salt(
        id="boric_acid",
        name="Boric acid (H3BO3)",
        formula="H3BO3",
        molar_mass=61.83,
        ions={"B": 1},
        recommended_tank="B",
        cost_per_kg=4.0,
        source_notes="Primary B source; low solubility but sufficient for ppm-level dosing.",
        micronutrient=True,
    ),
    _salt(
        id="na2mo",
        name="Sodium molybdate (Na2MoO4)",
        formula="Na2MoO4",
        molar_mass=205.95,
        ions={"Mo": 1},
        recommended_tank="B",
        cost_per_kg=30.0,
        source_notes="Mo required at very low ppm; use sparingly.",
        micronutrient=True,
    ),
    _salt(
        id="trace_mix",
        name="Trace mix (commercial concentrate)",
        molar_mass=100.0,
        ions={"Fe": 0.15, "Mn": 0.05, "Zn": 0.03, "Cu": 0.01, "B": 0.03, "Mo": 0.005},
        recommended_tank="B",
        cost_per_kg=25.0,
        source_notes="Commercial trace mixes vary; enter datasheet values for accuracy.",
        micronutrient=True,
        yield_kind="direct_fraction",
    ),
)

MICRONUTRIENT_SALT_IDS = frozenset(s.id for s in DEFAULT_SALTS if s.micronutrient)

# mg/L
CROP_PRESETS: Mapping[str, Mapping[str, float]] = MappingProxyType(
    {
        name: MappingProxyType(values)
        for name, values in {
            "Lettuce": {"N": 150, "P": 40, "K": 200, "Ca": 160, "Mg": 40, "S": 60, "Fe": 2.0, "B": 0.5, "Mn": 0.5, "Zn": 0.05, "Cu": 0.05, "Mo": 0.05},
            "Tomato": {"N": 200, "P": 50, "K": 300, "Ca": 200, "Mg": 50, "S": 80, "Fe": 2.5, "B": 0.4, "Mn": 0.5, "Zn": 0.1, "Cu": 0.05, "Mo": 0.05},
            "Strawberry": {"N": 160, "P": 50, "K": 250, "Ca": 180, "Mg": 60, "S": 80, "Fe": 2.0, "B": 0.6, "Mn": 0.6, "Zn": 0.06, "Cu": 0.04, "Mo": 0.05},
            "Cucumber": {"N": 180, "P": 45, "K": 250, "Ca": 170, "Mg": 45, "S": 70, "Fe": 2.0, "B": 0.5, "Mn": 0.5, "Zn": 0.06, "Cu": 0.04, "Mo": 0.03},
            "Pepper": {"N": 180, "P": 50, "K": 280, "Ca": 190, "Mg": 50, "S": 75, "Fe": 2.2, "B": 0.5, "Mn": 0.5, "Zn": 0.06, "Cu": 0.04, "Mo": 0.04},
            "Basil": {"N": 160, "P": 40, "K": 200, "Ca": 150, "Mg": 40, "S": 60, "Fe": 1.8, "B": 0.4, "Mn": 0.4, "Zn": 0.04, "Cu": 0.03, "Mo": 0.02},
            "Spinach": {"N": 180, "P": 50, "K": 220, "Ca": 170, "Mg": 45, "S": 70, "Fe": 3.0, "B": 0.6, "Mn": 0.6, "Zn": 0.08, "Cu": 0.05, "Mo": 0.06},
            "CannabisVeg": {"N": 180, "P": 50, "K": 250, "Ca": 170, "Mg": 50, "S": 80, "Fe": 2.5, "B": 0.5, "Mn": 0.5, "Zn": 0.06, "Cu": 0.04, "Mo": 0.05},
            "CannabisBloom": {"N": 120, "P": 60, "K": 300, "Ca": 160, "Mg": 60, "S": 90, "Fe": 2.5, "B": 0.6, "Mn": 0.6, "Zn": 0.06, "Cu": 0.04, "Mo": 0.05},
        }.items()
    }
)
