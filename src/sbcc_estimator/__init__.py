from .models import (
    Row,
    CalculatorParameters,
    Output,
    OutputRow,
    FieldError
)
from .catalogue import ReferenceCatalogue, load_catalogue
from .state import CalculatorState
from .sync import DerivedOutputSync, compute
from .calculator import EmbodiedCarbonCalculator
from .session import EstimatorSession

__all__ = [
    "Row",
    "CalculatorParameters",
    "Output",
    "OutputRow",
    "FieldError",
    "ReferenceCatalogue",
    "load_catalogue",
    "CalculatorState",
    "DerivedOutputSync",
    "compute",
    "EmbodiedCarbonCalculator",
    "EstimatorSession"
]
