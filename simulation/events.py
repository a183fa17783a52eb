"""
Random economic events.

Each simulated year the generator advances every ongoing event through its
lifecycle and then rolls for new ones:

1. Ongoing events
   Active phase -> aftermath phase (impacts scaled down) -> expiry.
   A war entering its aftermath is replaced by a "war ends" event.

2. New events, in order
   War (5%), downturn (10%, then 30% depression / 70% recession),
   boom (8%), natural disaster (7%), tech revolution (3%),
   peace dividend (10%).

At most one event per category is ongoing at a time, and several
categories block each other (no boom during a downturn, no peace dividend
during a war or downturn). Natural disasters are never tracked, so they can
strike in consecutive years.
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import numpy as np

logger = logging.getLogger(__name__)

RandomSource = Callable[[], float]


class EventType(Enum):
    WAR_START = "War Begins"
    WAR_ONGOING = "War Continues"
    WAR_END = "War Ends"
    RECESSION = "Economic Recession"
    DEPRESSION = "Economic Depression"
    ECONOMIC_BOOM = "Economic Boom"
    NATURAL_DISASTER = "Natural Disaster"
    PANDEMIC = "Global Pandemic"
    TECH_REVOLUTION = "Technological Revolution"
    ENERGY_CRISIS = "Energy Crisis"
    PEACE_DIVIDEND = "Peace Dividend"
    FINANCIAL_CRISIS = "Financial Crisis"


WAR_TYPES = (EventType.WAR_START, EventType.WAR_ONGOING, EventType.WAR_END)
DOWNTURN_TYPES = (EventType.RECESSION, EventType.DEPRESSION)
GROWTH_TYPES = (EventType.ECONOMIC_BOOM, EventType.TECH_REVOLUTION)


@dataclass(frozen=True)
class EconomicEvent:
    """A shock to the year's rates. Impacts are added to the baseline rates."""

    type: EventType
    name: str
    description: str
    deficit_impact: float  # $trillions added to the year's deficit
    gdp_growth_impact: float
    inflation_impact: float
    interest_rate_impact: float
    duration: int  # active years
    aftermath_duration: int  # years of reduced impact after the active phase
    aftermath_multiplier: float  # 0-1, impact scaling during aftermath
    population_growth_impact: Optional[float] = None

    @property
    def total_duration(self) -> int:
        return self.duration + self.aftermath_duration

    @property
    def is_multi_year(self) -> bool:
        return self.duration > 1 or self.aftermath_duration > 0

    def with_scaled_impacts(self, multiplier: float) -> "EconomicEvent":
        """Copy with the four rate impacts scaled (population impact untouched)."""
        return replace(
            self,
            deficit_impact=self.deficit_impact * multiplier,
            gdp_growth_impact=self.gdp_growth_impact * multiplier,
            inflation_impact=self.inflation_impact * multiplier,
            interest_rate_impact=self.interest_rate_impact * multiplier,
        )

    def with_description(self, description: str) -> "EconomicEvent":
        return replace(self, description=description)


@dataclass
class OngoingEvent:
    """Generator bookkeeping for one active category."""

    event: EconomicEvent
    years_remaining: int
    in_aftermath: bool = False


# ── Name pools ───────────────────────────────────────────────────────
WAR_NAMES = [
    "The AI Sovereignty War",
    "The Second Cyber Cold War",
    "The Water Wars",
    "The Quantum Conflict",
    "The Space Resource War",
    "The Arctic Territorial War",
    "Indo-Pacific Flashpoint War",
    "Great Blackout War",
    "Second South China Sea War",
    "Data War",
    "Green Energy Wars",
    "Global Food Crisis War",
    "Second Korean Conflict",
    "Digital Iron Curtain War",
    "AI Proxy Wars",
    "Eastern European Insurgency",
    "Middle East Water Conflict",
    "North Atlantic Defense War",
    "U.S.-China Economic War",
    "Synthetic Biology War",
    "Lithium Wars",
    "Space Colony Conflict",
    "Rare Earth Metals War",
    "Automated Warfare Crisis",
    "Climate Refugee War",
    "Orbital Skirmishes",
    "Pacific Cyber War",
    "Neo-Cold War",
    "Red Sea Trade War",
    "Second Taiwan Strait Crisis",
    "Quantum Network War",
    "African Resource Wars",
    "Global Resistance Conflict",
    "Meridian Conflict",
    "Azure Coalition War",
    "Resource War",
    "Technological Sovereignty War",
    "Cyber Defense War",
    "Regional Security Crisis",
    "Global Alliance Conflict",
    "World War X",
    "Great War",
]

RECESSION_NAMES = [
    "Credit Crunch",
    "Market Correction",
    "Economic Contraction",
    "GDP Slowdown",
    "Investment Decline",
    "Consumer Confidence Crisis",
]

BOOM_NAMES = [
    "Economic Renaissance",
    "Prosperity Surge",
    "Market Expansion",
    "Growth Acceleration",
    "Investment Boom",
    "Productivity Revolution",
    "Technological Revolution",
    "Energy Revolution",
    "Space Exploration",
    "Healthcare Revolution",
    "Education Revolution",
    "Government Efficiency Period",
    "Financial Boom",
    "Globalization Renaissance",
]

# Common disasters appear twice so they are drawn more often
DISASTER_TYPES = [
    "Hurricane",
    "Earthquake",
    "Flood",
    "Wildfire",
    "Drought",
    "Tsunami",
    "Volcanic Eruption",
    "Hurricane",
    "Earthquake",
    "Flood",
    "Wildfire",
    "Drought",
]

TECH_TYPES = [
    "Quantum Computing",
    "Renewable Energy",
    "Biotechnology",
    "Space Industry",
    "Manufacturing Automation",
    "Robotics",
    "3D Printing",
    "Nanotechnology",
    "Genetic Engineering",
    "Augmented Reality",
    "Artificial Intelligence",
]

# ── Roll probabilities ───────────────────────────────────────────────
WAR_PROBABILITY = 0.05
DOWNTURN_PROBABILITY = 0.10
DEPRESSION_SHARE = 0.30  # of downturns
BOOM_PROBABILITY = 0.08
DISASTER_PROBABILITY = 0.07
TECH_REVOLUTION_PROBABILITY = 0.03
PEACE_DIVIDEND_PROBABILITY = 0.10


def seeded_random_source(seed: Optional[int] = None) -> RandomSource:
    """Uniform [0, 1) source; reproducible for a given seed, OS entropy otherwise."""
    rng = np.random.default_rng(seed)
    return lambda: float(rng.random())


def _draw_int(random: RandomSource, low: int, span: int) -> int:
    """Integer in [low, low + span), as floor(low + random() * span)."""
    return int(np.floor(low + random() * span))


def _pick(random: RandomSource, names: Sequence[str]) -> str:
    return names[int(random() * len(names))]


# ── Event factories ──────────────────────────────────────────────────
# Draw order inside each factory is part of the seeded sequence.

def make_war(random: RandomSource) -> EconomicEvent:
    name = _pick(random, WAR_NAMES)
    scale = 0.5 + random()  # 0.5-1.5
    return EconomicEvent(
        type=EventType.WAR_START,
        name=name,
        description=f"The {name} has begun, requiring significant military expenditures.",
        deficit_impact=0.5 * scale,
        gdp_growth_impact=0.005 * scale,  # wartime production stimulates short-term output
        inflation_impact=0.01 * scale,
        interest_rate_impact=0.002 * scale,
        duration=_draw_int(random, 2, 5),  # 2-6 years
        aftermath_duration=_draw_int(random, 3, 4),  # 3-6 years
        aftermath_multiplier=0.4,
        population_growth_impact=-0.002 * scale,
    )


def make_war_end(war_name: str) -> EconomicEvent:
    # Duration 0: the remaining years are already counted by the war's record
    return EconomicEvent(
        type=EventType.WAR_END,
        name=f"{war_name} Aftermath",
        description=f"The {war_name} has ended, but reconstruction costs continue.",
        deficit_impact=0.3,
        gdp_growth_impact=0.01,  # post-war recovery
        inflation_impact=0.005,
        interest_rate_impact=-0.001,  # risk premium falls
        duration=0,
        aftermath_duration=0,
        aftermath_multiplier=1.0,
    )


def make_recession(random: RandomSource) -> EconomicEvent:
    name = _pick(random, RECESSION_NAMES)
    severity = 0.6 + random() * 0.8  # 0.6-1.4
    return EconomicEvent(
        type=EventType.RECESSION,
        name=name,
        description=(
            "A recession has hit the economy, reducing tax revenues "
            "and requiring stimulus spending."
        ),
        deficit_impact=0.4 * severity,
        gdp_growth_impact=-0.025 * severity,
        inflation_impact=-0.01 * severity,
        interest_rate_impact=-0.005 * severity,
        duration=_draw_int(random, 1, 3),  # 1-3 years
        aftermath_duration=_draw_int(random, 2, 3),  # 2-4 years
        aftermath_multiplier=0.3,
    )


def make_depression(random: RandomSource) -> EconomicEvent:
    return EconomicEvent(
        type=EventType.DEPRESSION,
        name="Economic Depression",
        description=(
            "A severe economic depression has begun, dramatically increasing "
            "government spending on safety nets and stimulus."
        ),
        deficit_impact=1.2,
        gdp_growth_impact=-0.06,
        inflation_impact=-0.015,  # deflationary pressure
        interest_rate_impact=-0.01,
        duration=_draw_int(random, 3, 4),  # 3-6 years
        aftermath_duration=_draw_int(random, 5, 6),  # 5-10 years
        aftermath_multiplier=0.4,
    )


def make_boom(random: RandomSource) -> EconomicEvent:
    name = _pick(random, BOOM_NAMES)
    return EconomicEvent(
        type=EventType.ECONOMIC_BOOM,
        name=name,
        description=(
            "A period of exceptional economic growth has begun, increasing "
            "tax revenues and reducing benefit payments."
        ),
        deficit_impact=-0.3,
        gdp_growth_impact=0.02,
        inflation_impact=0.005,
        interest_rate_impact=0.002,
        duration=_draw_int(random, 2, 3),  # 2-4 years
        aftermath_duration=_draw_int(random, 1, 2),  # 1-2 years
        aftermath_multiplier=0.2,
    )


def make_natural_disaster(random: RandomSource) -> EconomicEvent:
    kind = _pick(random, DISASTER_TYPES)
    severity = 0.5 + random()  # 0.5-1.5
    return EconomicEvent(
        type=EventType.NATURAL_DISASTER,
        name=f"Major {kind}",
        description=(
            f"A major {kind.lower()} has caused significant damage "
            "requiring federal disaster relief."
        ),
        deficit_impact=0.2 * severity,
        gdp_growth_impact=-0.007 * severity,
        inflation_impact=0.003 * severity,
        interest_rate_impact=0.0,
        duration=1,
        aftermath_duration=_draw_int(random, 1, 2),  # 1-2 years, display only
        aftermath_multiplier=0.3,
    )


def make_tech_revolution(random: RandomSource) -> EconomicEvent:
    kind = _pick(random, TECH_TYPES)
    return EconomicEvent(
        type=EventType.TECH_REVOLUTION,
        name=f"{kind} Revolution",
        description=(
            f"A technological revolution in {kind} is transforming the "
            "economy, boosting productivity and growth."
        ),
        deficit_impact=-0.15,
        gdp_growth_impact=0.015,
        inflation_impact=-0.002,  # productivity gains
        interest_rate_impact=0.001,
        duration=_draw_int(random, 3, 5),  # 3-7 years
        aftermath_duration=_draw_int(random, 5, 8),  # 5-12 years
        aftermath_multiplier=0.6,
    )


def make_peace_dividend(random: RandomSource) -> EconomicEvent:
    return EconomicEvent(
        type=EventType.PEACE_DIVIDEND,
        name="Peace Dividend",
        description="A sustained period of peace has allowed reduction in military spending.",
        deficit_impact=-0.2,
        gdp_growth_impact=0.005,
        inflation_impact=-0.001,
        interest_rate_impact=-0.001,
        duration=_draw_int(random, 3, 4),  # 3-6 years
        aftermath_duration=_draw_int(random, 2, 3),  # 2-4 years
        aftermath_multiplier=0.5,
    )


class EventGenerator:
    """Forward-only stochastic process producing each year's active events.

    One instance per simulation run. Years must be requested in strictly
    increasing order; the ongoing-event state cannot be rewound.
    """

    def __init__(
        self,
        random: Optional[RandomSource] = None,
        seed: Optional[int] = None,
    ):
        self.random = random or seeded_random_source(seed)
        self.ongoing: Dict[EventType, OngoingEvent] = {}
        self._first_seen: Dict[Tuple[EventType, str], int] = {}
        self._last_year: Optional[int] = None

    def is_active(self, *types: EventType) -> bool:
        return any(t in self.ongoing for t in types)

    def _register(self, event: EconomicEvent, key: EventType, year: int) -> EconomicEvent:
        self.ongoing[key] = OngoingEvent(event, event.total_duration)
        logger.debug(
            "Year %d: %s begins (%s, %d+%d years)",
            year, event.name, event.type.value,
            event.duration, event.aftermath_duration,
        )
        return event

    def _forget(self, event: EconomicEvent):
        self._first_seen.pop((event.type, event.name), None)

    def _advance_ongoing(self, year: int) -> List[EconomicEvent]:
        events = []
        expired = []
        war_ended = None

        for key, record in self.ongoing.items():
            record.years_remaining -= 1

            if record.years_remaining <= 0:
                expired.append(key)
                continue

            if (
                record.years_remaining == record.event.aftermath_duration
                and not record.in_aftermath
            ):
                record.in_aftermath = True
                if key == EventType.WAR_ONGOING:
                    self._forget(record.event)
                    record.event = make_war_end(record.event.name)
                    events.append(record.event)
                    war_ended = record
                else:
                    events.append(
                        record.event.with_scaled_impacts(record.event.aftermath_multiplier)
                    )
                logger.debug("Year %d: %s enters aftermath", year, record.event.name)
            else:
                events.append(record.event)

        # Apply map changes after iterating
        for key in expired:
            record = self.ongoing.pop(key)
            logger.debug("Year %d: %s expires", year, record.event.name)
            self._forget(record.event)
        if war_ended is not None:
            del self.ongoing[EventType.WAR_ONGOING]
            self.ongoing[EventType.WAR_END] = war_ended

        return events

    def _roll_new(self, year: int) -> List[EconomicEvent]:
        random = self.random
        events = []

        if not self.is_active(*WAR_TYPES) and random() < WAR_PROBABILITY:
            events.append(self._register(make_war(random), EventType.WAR_ONGOING, year))

        if not self.is_active(*DOWNTURN_TYPES) and random() < DOWNTURN_PROBABILITY:
            if random() < DEPRESSION_SHARE:
                events.append(
                    self._register(make_depression(random), EventType.DEPRESSION, year)
                )
            else:
                events.append(
                    self._register(make_recession(random), EventType.RECESSION, year)
                )

        if (
            not self.is_active(EventType.ECONOMIC_BOOM, *DOWNTURN_TYPES)
            and random() < BOOM_PROBABILITY
        ):
            events.append(self._register(make_boom(random), EventType.ECONOMIC_BOOM, year))

        # Disasters are not tracked and never block each other
        if random() < DISASTER_PROBABILITY:
            disaster = make_natural_disaster(random)
            logger.debug("Year %d: %s strikes", year, disaster.name)
            events.append(disaster)

        if (
            not self.is_active(EventType.TECH_REVOLUTION)
            and random() < TECH_REVOLUTION_PROBABILITY
        ):
            events.append(
                self._register(make_tech_revolution(random), EventType.TECH_REVOLUTION, year)
            )

        # A war in its aftermath (WAR_END) does not block the dividend
        if (
            not self.is_active(
                EventType.WAR_START,
                EventType.WAR_ONGOING,
                EventType.PEACE_DIVIDEND,
                *DOWNTURN_TYPES,
            )
            and random() < PEACE_DIVIDEND_PROBABILITY
        ):
            events.append(
                self._register(make_peace_dividend(random), EventType.PEACE_DIVIDEND, year)
            )

        # Every roll is a new instance, even if an earlier one shared its name
        for event in events:
            self._first_seen[(event.type, event.name)] = year
        return events

    def describe(self, event: EconomicEvent, year: int) -> EconomicEvent:
        """Relabel a multi-year event with its position in its lifecycle."""
        key = (event.type, event.name)
        start = self._first_seen.setdefault(key, year)
        if not event.is_multi_year:
            return event

        year_in_event = year - start
        if year_in_event == 0:
            text = f"{event.description} ({event.duration} year event"
            if event.aftermath_duration > 0:
                text += f" with {event.aftermath_duration} year aftermath"
            text += ")"
        elif year_in_event < event.duration:
            text = f"(Year {year_in_event + 1} of {event.duration})"
        elif year_in_event <= event.total_duration:
            text = (
                f"(Aftermath year {year_in_event - event.duration + 1} "
                f"of {event.aftermath_duration})"
            )
        else:
            # Past the end of the recorded lifecycle
            return event
        return event.with_description(text)

    def generate_events_for_year(self, year: int) -> Tuple[EconomicEvent, ...]:
        if self._last_year is not None and year <= self._last_year:
            raise ValueError(
                f"events must be generated in increasing year order "
                f"(got {year} after {self._last_year})"
            )
        self._last_year = year

        events = self._advance_ongoing(year) + self._roll_new(year)
        return tuple(self.describe(e, year) for e in events)
