"""
Economic health assessment.

Turns a finished trajectory into four category ratings (debt, growth,
stability, interest burden), a 0-20 composite score, and an overall verdict
comparing the end state with the starting conditions.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Sequence, Tuple

import numpy as np

from .events import DOWNTURN_TYPES, GROWTH_TYPES

if TYPE_CHECKING:
    from .engine import YearlySnapshot

# (upper bound, rating, description); first bracket with metric < bound wins
DEBT_TIERS = [
    (-10, "Excellent",
     "The debt-to-GDP ratio has decreased significantly, indicating a much "
     "stronger fiscal position."),
    (0, "Good",
     "The debt-to-GDP ratio has decreased, showing improving fiscal sustainability."),
    (10, "Fair",
     "The debt-to-GDP ratio has increased modestly, which is manageable but "
     "warrants attention."),
    (25, "Concerning",
     "The debt-to-GDP ratio has increased substantially, raising fiscal "
     "sustainability concerns."),
]
DEBT_FALLBACK = (
    "Critical",
    "The debt-to-GDP ratio has increased dramatically, posing serious risks "
    "to fiscal sustainability.",
)

# (lower bound, rating, description); first bracket with metric > bound wins
GROWTH_TIERS = [
    (0.03, "Excellent", "The economy has experienced strong, sustained growth."),
    (0.02, "Good", "The economy has grown at a healthy rate."),
    (0.01, "Fair", "The economy has grown modestly."),
    (0.0, "Weak", "The economy has experienced very low growth."),
]
GROWTH_FALLBACK = ("Poor", "The economy has contracted on average.")

# (max share of years in downturn, rating, description)
STABILITY_TIERS = [
    (0.1, "Good", "The economy was relatively stable with few downturns."),
    (0.2, "Fair",
     "The economy experienced some instability but maintained overall function."),
    (0.3, "Concerning", "The economy faced frequent instability."),
]
STABILITY_EXCELLENT = (
    "Excellent",
    "The economy avoided recessions while experiencing growth periods.",
)
STABILITY_FALLBACK = ("Poor", "The economy was highly unstable with frequent crises.")

# Average interest / GDP, percent; lower is better
INTEREST_TIERS = [
    (2, "Excellent", "Interest costs are a light burden on the economy."),
    (3, "Good", "Interest costs are manageable."),
    (4, "Fair", "Interest costs take a noticeable share of output."),
    (5, "Concerning", "Interest costs are crowding out other priorities."),
]
INTEREST_FALLBACK = ("Critical", "Interest costs consume a heavy share of output.")

# (minimum score, rating, description)
OVERALL_TIERS = [
    (16, "MUCH BETTER",
     "The economy is in a significantly stronger position than at the start "
     "of the simulation."),
    (12, "BETTER", "The economy has improved compared to the starting conditions."),
    (8, "STABLE",
     "The economy has maintained roughly similar health to the starting conditions."),
    (4, "WORSE", "The economy has deteriorated compared to the starting conditions."),
]
OVERALL_FALLBACK = (
    "MUCH WORSE",
    "The economy is in a significantly weaker position than at the start of "
    "the simulation.",
)

# Sub-score brackets (5 points down to 1; anything past the last scores 0).
# Finer-grained than the rating tiers above.
DEBT_SCORE_BOUNDS = (-15, -5, 5, 15, 30)  # ratio change <
GROWTH_SCORE_BOUNDS = (0.035, 0.025, 0.015, 0.005, 0.0)  # avg growth >
INTEREST_SCORE_BOUNDS = (1, 2, 3, 4, 5)  # interest/GDP % <
STABILITY_SCORE_SHARES = (0.1, 0.2, 0.3, 0.4)  # downturn years <= share of horizon

MAX_SCORE = 20


@dataclass(frozen=True)
class DebtAssessment:
    rating: str
    description: str
    change: float  # debt-to-GDP change, percentage points


@dataclass(frozen=True)
class GrowthAssessment:
    rating: str
    description: str
    avg_growth: float


@dataclass(frozen=True)
class StabilityAssessment:
    rating: str
    description: str
    recession_years: int
    boom_years: int
    total_years: int


@dataclass(frozen=True)
class InterestBurden:
    rating: str
    description: str
    avg_interest_to_gdp: float  # percent


@dataclass(frozen=True)
class AssessmentMetrics:
    real_debt_change_percent: float
    gdp_change_percent: float
    debt_ratio_change: float
    score: int  # 0-20


@dataclass(frozen=True)
class OverallAssessment:
    rating: str
    description: str


@dataclass(frozen=True)
class HealthAssessment:
    debt: DebtAssessment
    growth: GrowthAssessment
    stability: StabilityAssessment
    interest_burden: InterestBurden
    metrics: AssessmentMetrics
    overall: OverallAssessment

    @property
    def score(self) -> int:
        return self.metrics.score

    def formatted_report(self) -> str:
        return (
            "ECONOMIC HEALTH ASSESSMENT\n"
            "==========================\n"
            "\n"
            f"Debt Health: {self.debt.rating}: {self.debt.description}\n"
            f"Growth: {self.growth.rating}: {self.growth.description}\n"
            f"Stability: {self.stability.rating}: {self.stability.description}\n"
            f"Interest Burden: {self.interest_burden.rating}: "
            f"{self.interest_burden.avg_interest_to_gdp:.2f}% of GDP\n"
            "\n"
            f"Overall Assessment: {self.overall.rating}: {self.overall.description}\n"
            f"Score: {self.metrics.score}/{MAX_SCORE}"
        )


def _below(value: float, tiers, fallback) -> Tuple[str, str]:
    for bound, rating, description in tiers:
        if value < bound:
            return rating, description
    return fallback


def _above(value: float, tiers, fallback) -> Tuple[str, str]:
    for bound, rating, description in tiers:
        if value > bound:
            return rating, description
    return fallback


def _stability_rating(recession_years: int, boom_years: int, total_years: int):
    if recession_years == 0 and boom_years > 0:
        return STABILITY_EXCELLENT
    for share, rating, description in STABILITY_TIERS:
        if recession_years <= total_years * share:
            return rating, description
    return STABILITY_FALLBACK


def _bracket_score(hits: Sequence[bool]) -> int:
    """5 for the first bracket hit, 4 for the second, ... 0 for none."""
    for i, hit in enumerate(hits):
        if hit:
            return 5 - i
    return 0


def composite_score(
    debt_ratio_change: float,
    avg_growth: float,
    avg_interest_to_gdp: float,
    recession_years: int,
    total_years: int,
) -> int:
    """Sum of four 0-5 sub-scores: debt, growth, interest burden, stability."""
    debt = _bracket_score([debt_ratio_change < b for b in DEBT_SCORE_BOUNDS])
    growth = _bracket_score([avg_growth > b for b in GROWTH_SCORE_BOUNDS])
    interest = _bracket_score([avg_interest_to_gdp < b for b in INTEREST_SCORE_BOUNDS])
    stability = _bracket_score(
        [recession_years == 0]
        + [recession_years <= total_years * s for s in STABILITY_SCORE_SHARES]
    )
    return debt + growth + interest + stability


def _count_years_with(snapshots: List["YearlySnapshot"], types) -> int:
    return sum(
        1 for s in snapshots if any(e.type in types for e in s.events)
    )


def assess_economic_health(
    trajectory,
    initial_debt: float,
    initial_gdp: float,
    initial_debt_ratio: float,
) -> HealthAssessment:
    """Rate a completed trajectory against its starting point.

    ``initial_debt_ratio`` is in percent, like the snapshots' ratios.
    """
    snapshots = list(trajectory)
    if not snapshots:
        raise ValueError("cannot assess an empty trajectory")

    final = snapshots[-1]
    total_years = len(snapshots)

    real_debt_change = (final.real_debt / initial_debt - 1) * 100
    gdp_change = (final.gdp / initial_gdp - 1) * 100
    debt_ratio_change = final.debt_to_gdp_ratio - initial_debt_ratio

    recession_years = _count_years_with(snapshots, DOWNTURN_TYPES)
    boom_years = _count_years_with(snapshots, GROWTH_TYPES)

    growth_rates = np.array([s.gdp_growth_rate for s in snapshots])
    interest_shares = np.array([s.interest_payment / s.gdp for s in snapshots])
    avg_growth = float(growth_rates.mean())
    avg_interest_to_gdp = float(interest_shares.mean() * 100)

    score = composite_score(
        debt_ratio_change, avg_growth, avg_interest_to_gdp,
        recession_years, total_years,
    )

    debt_rating = _below(debt_ratio_change, DEBT_TIERS, DEBT_FALLBACK)
    growth_rating = _above(avg_growth, GROWTH_TIERS, GROWTH_FALLBACK)
    stability_rating = _stability_rating(recession_years, boom_years, total_years)
    interest_rating = _below(avg_interest_to_gdp, INTEREST_TIERS, INTEREST_FALLBACK)
    overall_rating = OVERALL_FALLBACK
    for minimum, rating, description in OVERALL_TIERS:
        if score >= minimum:
            overall_rating = (rating, description)
            break

    return HealthAssessment(
        debt=DebtAssessment(*debt_rating, change=debt_ratio_change),
        growth=GrowthAssessment(*growth_rating, avg_growth=avg_growth),
        stability=StabilityAssessment(
            *stability_rating,
            recession_years=recession_years,
            boom_years=boom_years,
            total_years=total_years,
        ),
        interest_burden=InterestBurden(
            *interest_rating, avg_interest_to_gdp=avg_interest_to_gdp
        ),
        metrics=AssessmentMetrics(
            real_debt_change_percent=real_debt_change,
            gdp_change_percent=gdp_change,
            debt_ratio_change=debt_ratio_change,
            score=score,
        ),
        overall=OverallAssessment(*overall_rating),
    )
