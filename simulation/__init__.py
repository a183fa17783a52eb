"""
Debt Simulator

Projects national debt, GDP, population and inflation year by year with
random economic events, then rates the resulting fiscal health.
"""

from .config import SCENARIO_PRESETS, SimulationConfig
from .events import EconomicEvent, EventGenerator, EventType
from .engine import (
    DebtSimulator,
    EconomicSimulator,
    SimulationNotRunError,
    Trajectory,
    YearlySnapshot,
)
from .assessment import HealthAssessment, assess_economic_health

__version__ = "0.1.0"
__all__ = [
    "SCENARIO_PRESETS",
    "SimulationConfig",
    "EconomicEvent",
    "EventGenerator",
    "EventType",
    "DebtSimulator",
    "EconomicSimulator",
    "SimulationNotRunError",
    "Trajectory",
    "YearlySnapshot",
    "HealthAssessment",
    "assess_economic_health",
]
