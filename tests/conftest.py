import matplotlib
matplotlib.use("Agg")

import pandas as pd
import pytest

from sbcc_estimator.catalogue import ReferenceCatalogue
from sbcc_estimator.calculator import EmbodiedCarbonCalculator
from sbcc_estimator.state import CalculatorState
from sbcc_estimator.sync import DerivedOutputSync


COMPONENTS = [
    {"componentId": "Concrete C30/37", "greenMarkCategory": "Concrete", "a1a3Factor": 100.0},
    {"componentId": "Rebar", "greenMarkCategory": "Steel", "a1a3Factor": 2000.0},
    {"componentId": "Float glass", "greenMarkCategory": "Glass", "a1a3Factor": 1500.0},
    {"componentId": "Timber", "greenMarkCategory": None, "a1a3Factor": 200.0},
    {"componentId": "Glazed panel", "greenMarkCategory": None, "a1a3Factor": 900.0},
]

COUNTRY_COMPONENTS = [
    {"countryId": "Malaysia", "componentId": "Rebar", "greenMarkCategory": "Steel", "a1a3Factor": 2200.0},
    {"countryId": "China", "componentId": "Float glass", "greenMarkCategory": "Glass", "a1a3Factor": 1600.0},
    {"countryId": "China", "componentId": "Glazed panel", "greenMarkCategory": "Glass", "a1a3Factor": 950.0},
    {"countryId": "Japan", "componentId": "EAF steel", "greenMarkCategory": "Steel", "a1a3Factor": 700.0},
]

PORTS = [
    {"countryId": "Singapore", "seaDistanceKm": 0.0},
    {"countryId": "Malaysia", "seaDistanceKm": 400.0},
    {"countryId": "China", "seaDistanceKm": 3800.0},
    {"countryId": "Malaysia", "seaDistanceKm": 500.0},
    {"countryId": "Thailand", "seaDistanceKm": 1400.0},
]

VEHICLES = [
    {"vehicleId": "Bulk carrier", "mode": "Maritime", "emissionFactor": 0.004},
    {"vehicleId": "Very heavy goods vehicle", "mode": "Road", "emissionFactor": 0.08},
    {"vehicleId": "Heavy goods vehicle", "mode": "Road", "emissionFactor": 0.1},
    {"vehicleId": "Ro-ro ferry", "mode": "Maritime;Road", "emissionFactor": 0.05},
    {"vehicleId": "Cargo plane", "mode": "Air", "emissionFactor": 0.6},
]

REFERENCE_VALUES = [
    {"buildingType": "Office", "referenceValue": 1000},
    {"buildingType": "Residential", "referenceValue": 800},
]


@pytest.fixture
def catalogue():
    return ReferenceCatalogue(
        components=pd.DataFrame(COMPONENTS),
        country_components=pd.DataFrame(COUNTRY_COMPONENTS),
        ports=pd.DataFrame(PORTS),
        vehicles=pd.DataFrame(VEHICLES),
        reference_values=pd.DataFrame(REFERENCE_VALUES),
    )


@pytest.fixture
def calculator(catalogue):
    return EmbodiedCarbonCalculator(catalogue, version="test")


@pytest.fixture
def state(catalogue):
    return CalculatorState.with_default_row(catalogue, gfa=1000)


@pytest.fixture
def sync(state, calculator):
    return DerivedOutputSync(state, calculator)
