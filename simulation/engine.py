"""
Debt progression engine.

Advances national debt, GDP, population and the price level one year at a
time:

1. Rates
   Start from the configured baselines, fold in each active event's
   impacts, and clamp to the floors after every fold.

2. Population and GDP
   Population grows at the year's rate; half of that growth adds to real
   GDP growth, and inflation is applied on top for nominal GDP.

3. Debt
   Simple interest on last year's nominal debt, plus the year's deficit
   and any event-driven deficit.

4. Inflation accounting
   A cumulative price factor rebases nominal debt to year-0 dollars.

Only nominal debt, GDP, population and the price factor carry over between
years. Every other rate restarts from its baseline each year.
"""

import datetime
import logging
from dataclasses import asdict, dataclass
from typing import Callable, Dict, Iterator, List, Optional, Tuple

import numpy as np

from .assessment import HealthAssessment, assess_economic_health
from .config import (
    MIN_GDP_GROWTH_RATE,
    MIN_INFLATION_RATE,
    MIN_INTEREST_RATE,
    MIN_POPULATION_GROWTH_RATE,
    SimulationConfig,
    calendar_years,
)
from .events import EconomicEvent, EventGenerator

logger = logging.getLogger(__name__)

# Population growth feeds real GDP growth at half weight
POPULATION_GDP_WEIGHT = 0.5


class SimulationNotRunError(RuntimeError):
    """Raised when results are requested before the simulation has run."""


@dataclass(frozen=True)
class YearlySnapshot:
    """One simulated year. Money in $trillions, population in millions."""

    year_index: int
    year: int
    nominal_debt: float
    real_debt: float  # year-0 dollars
    interest_payment: float
    principal_change: float  # deficit + event deficit
    gdp: float
    debt_to_gdp_ratio: float  # percent
    inflation_adjustment: float  # nominal value eroded by inflation this year
    inflation_rate: float
    gdp_growth_rate: float
    interest_rate: float
    events: Tuple[EconomicEvent, ...]
    event_deficit_impact: float
    population: Optional[float] = None
    population_growth_rate: Optional[float] = None
    debt_per_capita: Optional[float] = None  # dollars per person


class Trajectory:
    """Ordered, immutable sequence of yearly snapshots."""

    def __init__(self, snapshots: List[YearlySnapshot]):
        self._snapshots = tuple(snapshots)

    def __len__(self) -> int:
        return len(self._snapshots)

    def __iter__(self) -> Iterator[YearlySnapshot]:
        return iter(self._snapshots)

    def __getitem__(self, index):
        return self._snapshots[index]

    def __eq__(self, other) -> bool:
        if not isinstance(other, Trajectory):
            return NotImplemented
        return self._snapshots == other._snapshots

    @property
    def final(self) -> YearlySnapshot:
        return self._snapshots[-1]

    @property
    def years(self) -> List[int]:
        return [s.year for s in self._snapshots]

    def series(self, name: str) -> np.ndarray:
        """One numeric field across all years, e.g. ``series("gdp")``."""
        return np.array([getattr(s, name) for s in self._snapshots], dtype=float)

    def to_records(self) -> List[Dict]:
        """Plain dicts per year; events are reduced to their names."""
        records = []
        for s in self._snapshots:
            row = asdict(s)
            row["events"] = [e.name for e in s.events]
            records.append(row)
        return records


class DebtSimulator:
    """Year-by-year debt, GDP and population progression.

    Event generators hold ongoing-event state, so ``run()`` asks
    ``event_generator_factory`` for a new one each time. The default factory
    seeds from ``config.random_seed``.
    """

    def __init__(
        self,
        config: SimulationConfig = None,
        event_generator_factory: Callable[[], EventGenerator] = None,
        start_year: int = None,
    ):
        self.config = config or SimulationConfig()
        self.event_generator_factory = event_generator_factory or self._seeded_generator
        if start_year is None:
            start_year = datetime.date.today().year
        self.start_year = start_year

    def _seeded_generator(self) -> EventGenerator:
        return EventGenerator(seed=self.config.random_seed)

    def _make_event_generator(self) -> Optional[EventGenerator]:
        if not self.config.random_events_enabled:
            return None
        return self.event_generator_factory()

    def run(self) -> Trajectory:
        c = self.config
        n = c.simulation_years
        generator = self._make_event_generator()

        deficits = c.padded_deficits()
        years = calendar_years(n, self.start_year)

        # --- State carried between years ---
        nominal_debt = c.initial_debt
        gdp = c.initial_gdp
        population = c.initial_population
        inflation_factor = 1.0

        snapshots = []

        # --- Simulation loop ---
        for i in range(n):

            # ============================================================
            # 1. BASELINE RATES + EVENT IMPACTS
            # ============================================================
            inflation_rate = c.inflation_rate
            gdp_growth_rate = c.base_gdp_growth_rate
            interest_rate = c.average_interest_rate
            population_growth_rate = c.base_population_growth_rate
            event_deficit_impact = 0.0
            events: Tuple[EconomicEvent, ...] = ()

            if generator is not None:
                events = generator.generate_events_for_year(i)
                for event in events:
                    inflation_rate += event.inflation_impact
                    gdp_growth_rate += event.gdp_growth_impact
                    interest_rate += event.interest_rate_impact
                    event_deficit_impact += event.deficit_impact
                    if event.population_growth_impact is not None:
                        population_growth_rate += event.population_growth_impact

                    # Floors re-applied after each event, not once at the end
                    inflation_rate = max(inflation_rate, MIN_INFLATION_RATE)
                    gdp_growth_rate = max(gdp_growth_rate, MIN_GDP_GROWTH_RATE)
                    interest_rate = max(interest_rate, MIN_INTEREST_RATE)
                    population_growth_rate = max(
                        population_growth_rate, MIN_POPULATION_GROWTH_RATE
                    )

                if events:
                    logger.debug(
                        "Year %d: %d event(s), deficit impact %+.3fT",
                        years[i], len(events), event_deficit_impact,
                    )

            # ============================================================
            # 2. POPULATION AND GDP
            # ============================================================
            population *= 1 + population_growth_rate

            total_gdp_growth = gdp_growth_rate + population_growth_rate * POPULATION_GDP_WEIGHT
            gdp *= (1 + total_gdp_growth) * (1 + inflation_rate)

            # ============================================================
            # 3. DEBT
            # ============================================================
            # Simple interest on last year's closing nominal debt
            interest_payment = nominal_debt * interest_rate
            principal_change = deficits[i] + event_deficit_impact
            nominal_debt += principal_change + interest_payment

            # ============================================================
            # 4. INFLATION ACCOUNTING
            # ============================================================
            inflation_factor *= 1 + inflation_rate
            real_debt = nominal_debt / inflation_factor
            inflation_adjustment = nominal_debt * inflation_rate / (1 + inflation_rate)

            debt_to_gdp = nominal_debt / gdp * 100
            # $T -> $, millions -> persons
            debt_per_capita = (nominal_debt * 1e12) / (population * 1e6)

            snapshots.append(
                YearlySnapshot(
                    year_index=i,
                    year=years[i],
                    nominal_debt=nominal_debt,
                    real_debt=real_debt,
                    interest_payment=interest_payment,
                    principal_change=principal_change,
                    gdp=gdp,
                    debt_to_gdp_ratio=debt_to_gdp,
                    inflation_adjustment=inflation_adjustment,
                    inflation_rate=inflation_rate,
                    gdp_growth_rate=gdp_growth_rate,
                    interest_rate=interest_rate,
                    events=events,
                    event_deficit_impact=event_deficit_impact,
                    population=population,
                    population_growth_rate=population_growth_rate,
                    debt_per_capita=debt_per_capita,
                )
            )

        trajectory = Trajectory(snapshots)
        logger.info(
            "Simulated %d years (events %s): final debt %.2fT, debt/GDP %.1f%%",
            n,
            "on" if generator is not None else "off",
            trajectory.final.nominal_debt,
            trajectory.final.debt_to_gdp_ratio,
        )
        return trajectory


class EconomicSimulator:
    """Entry point: run the progression, then assess it.

    Example::

        sim = EconomicSimulator(SimulationConfig(random_seed=12345)).simulate()
        sim.results.final.nominal_debt
        sim.assessment.overall.rating
    """

    def __init__(self, config: SimulationConfig = None, start_year: int = None):
        self.config = config or SimulationConfig()
        self.start_year = start_year
        self._results: Optional[Trajectory] = None
        self._assessment: Optional[HealthAssessment] = None

    def simulate(self) -> "EconomicSimulator":
        c = self.config
        self._results = DebtSimulator(c, start_year=self.start_year).run()
        self._assessment = assess_economic_health(
            self._results,
            initial_debt=c.initial_debt,
            initial_gdp=c.initial_gdp,
            initial_debt_ratio=c.initial_debt_ratio,
        )
        return self

    @property
    def results(self) -> Trajectory:
        if self._results is None:
            raise SimulationNotRunError("Results not yet generated")
        return self._results

    @property
    def assessment(self) -> HealthAssessment:
        if self._assessment is None:
            raise SimulationNotRunError("Assessment not yet generated")
        return self._assessment
