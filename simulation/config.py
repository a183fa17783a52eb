"""
Configuration for the Debt Simulator.

Defines the simulation parameters, the rate floors enforced while folding
event impacts, and a handful of scenario presets for the dashboard.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

# Fill value for years the caller did not supply a deficit for ($800B)
DEFAULT_DEFICIT = 0.8

# ~US population (millions) and its recent annual growth
DEFAULT_POPULATION = 330.0
DEFAULT_POPULATION_GROWTH = 0.007

# Floors applied after every event fold. Stacked shocks can push a rate
# arbitrarily low otherwise.
MIN_INFLATION_RATE = -0.02  # limit deflation
MIN_GDP_GROWTH_RATE = -0.15  # limit GDP collapse
MIN_INTEREST_RATE = 0.005
MIN_POPULATION_GROWTH_RATE = -0.03


@dataclass(frozen=True)
class SimulationConfig:
    """All inputs for one simulation run. Rates are decimals, not percents."""

    # --- Debt ---
    initial_debt: float = 20.0  # $trillions
    average_interest_rate: float = 0.03
    annual_deficits: Tuple[float, ...] = (0.5,) * 15  # $trillions/year, negative = surplus

    # --- Simulation Horizon ---
    simulation_years: int = 15

    # --- Macro Baseline ---
    inflation_rate: float = 0.02
    initial_gdp: float = 100.0  # $trillions
    base_gdp_growth_rate: float = 0.02

    # --- Population ---
    initial_population: float = DEFAULT_POPULATION  # millions
    base_population_growth_rate: float = DEFAULT_POPULATION_GROWTH

    # --- Random Events ---
    random_events_enabled: bool = True
    random_seed: Optional[int] = None

    def __post_init__(self):
        if self.simulation_years < 1:
            raise ValueError(
                f"simulation_years must be at least 1, got {self.simulation_years}"
            )
        if self.initial_gdp <= 0:
            raise ValueError(f"initial_gdp must be positive, got {self.initial_gdp}")
        if self.initial_population <= 0:
            raise ValueError(
                f"initial_population must be positive, got {self.initial_population}"
            )
        # Accept lists from callers but keep the frozen instance hashable
        object.__setattr__(self, "annual_deficits", tuple(self.annual_deficits))

    @property
    def initial_debt_ratio(self) -> float:
        """Starting debt-to-GDP ratio, in percent."""
        return self.initial_debt / self.initial_gdp * 100

    def padded_deficits(self) -> List[float]:
        """One deficit per simulated year, padding missing years with the default."""
        deficits = list(self.annual_deficits[: self.simulation_years])
        missing = self.simulation_years - len(deficits)
        return deficits + [DEFAULT_DEFICIT] * missing


# Named scenario presets
SCENARIO_PRESETS: Dict[str, SimulationConfig] = {
    "U.S. Baseline": SimulationConfig(),
    "Balanced Budget": SimulationConfig(
        annual_deficits=(0.0,) * 15,
    ),
    "High Inflation": SimulationConfig(
        inflation_rate=0.06,
        average_interest_rate=0.05,
    ),
    "Austerity Surplus": SimulationConfig(
        annual_deficits=(-0.3,) * 15,
        base_gdp_growth_rate=0.015,
    ),
    "Calm Waters": SimulationConfig(
        random_events_enabled=False,
    ),
    "Long Horizon": SimulationConfig(
        simulation_years=50,
        annual_deficits=(0.5,) * 50,
    ),
}


def calendar_years(num_years: int, start_year: int) -> List[int]:
    """Calendar year for each simulated year index."""
    return [start_year + i for i in range(num_years)]
