# tests/conftest.py
from __future__ import annotations

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

import pytest

from hydromix.catalog import SaltCatalog
from hydromix.config import SolverConfig
from hydromix.types import Salt


@pytest.fixture
def catalog() -> SaltCatalog:
    return SaltCatalog()


@pytest.fixture
def k_only_config() -> SolverConfig:
    return SolverConfig(ions=["K"])


@pytest.fixture
def pure_k() -> Salt:
    """Single-element salt: 1 g of K per g."""
    return Salt(id="pure_k", name="Pure K", molar_mass=39.0983, ions={"K": 1}, cost_per_kg=1.0)


@pytest.fixture
def cheap_k() -> Salt:
    return Salt(id="cheap_k", name="Cheap K", molar_mass=39.0983, ions={"K": 1}, cost_per_kg=0.5)


@pytest.fixture
def dear_k() -> Salt:
    return Salt(id="dear_k", name="Dear K", molar_mass=39.0983, ions={"K": 1}, cost_per_kg=2.0)
