from dataclasses import replace

import numpy as np
import pytest

from simulation.config import (
    MIN_GDP_GROWTH_RATE,
    MIN_INFLATION_RATE,
    MIN_INTEREST_RATE,
    MIN_POPULATION_GROWTH_RATE,
    SimulationConfig,
)
from simulation.engine import (
    DebtSimulator,
    EconomicSimulator,
    SimulationNotRunError,
    Trajectory,
)
from simulation.events import EconomicEvent, EventType


def _shock(**impacts):
    fields = dict(
        type=EventType.FINANCIAL_CRISIS, name="Shock", description="d",
        deficit_impact=0.0, gdp_growth_impact=0.0, inflation_impact=0.0,
        interest_rate_impact=0.0, duration=1, aftermath_duration=0,
        aftermath_multiplier=1.0,
    )
    fields.update(impacts)
    return EconomicEvent(**fields)


class FixedEvents:
    """Event generator stub returning the same events every year."""

    def __init__(self, *events):
        self.events = tuple(events)
        self.years = []

    def generate_events_for_year(self, year):
        self.years.append(year)
        return self.events


# =============================================================================
# DETERMINISTIC PROGRESSION
# =============================================================================

def test_scenario_a_first_year(scenario_a_config):
    trajectory = DebtSimulator(scenario_a_config, start_year=2025).run()
    first = trajectory[0]

    assert len(trajectory) == 5
    assert first.nominal_debt == pytest.approx(10.3)
    assert first.interest_payment == pytest.approx(0.3)
    assert first.gdp == pytest.approx(102.0)
    assert first.debt_to_gdp_ratio == pytest.approx(10.3 / 102.0 * 100)
    assert first.debt_to_gdp_ratio == pytest.approx(10.098, abs=1e-3)
    assert first.events == ()
    assert first.year == 2025


def test_default_population_growth_lowers_ratio(scenario_a_config):
    config = replace(scenario_a_config, base_population_growth_rate=0.007)
    first = DebtSimulator(config).run()[0]
    assert first.gdp == pytest.approx(100 * (1 + 0.02 + 0.5 * 0.007))
    assert first.debt_to_gdp_ratio == pytest.approx(10.063, abs=1e-3)


def test_scenario_a_compounds_interest(scenario_a_config):
    trajectory = DebtSimulator(scenario_a_config).run()
    assert trajectory.final.nominal_debt == pytest.approx(10 * 1.03 ** 5)
    # No inflation: real and nominal debt agree
    assert trajectory.final.real_debt == pytest.approx(trajectory.final.nominal_debt)
    assert trajectory.final.inflation_adjustment == 0


def test_missing_deficits_default_to_800b():
    config = SimulationConfig(
        initial_debt=10, simulation_years=3, average_interest_rate=0.0,
        inflation_rate=0.0, annual_deficits=[], random_events_enabled=False,
    )
    trajectory = DebtSimulator(config).run()
    assert [s.principal_change for s in trajectory] == [0.8, 0.8, 0.8]
    assert trajectory.final.nominal_debt == pytest.approx(12.4)


def test_population_and_inflation_feed_gdp():
    config = SimulationConfig(
        initial_debt=20, simulation_years=1, average_interest_rate=0.03,
        inflation_rate=0.02, annual_deficits=[0.5], initial_gdp=100,
        base_gdp_growth_rate=0.02, initial_population=330,
        base_population_growth_rate=0.01, random_events_enabled=False,
    )
    s = DebtSimulator(config).run()[0]

    assert s.population == pytest.approx(333.3)
    assert s.gdp == pytest.approx(100 * (1 + 0.02 + 0.005) * 1.02)
    assert s.nominal_debt == pytest.approx(20 + 0.5 + 0.6)
    assert s.real_debt == pytest.approx(21.1 / 1.02)
    assert s.inflation_adjustment == pytest.approx(21.1 * 0.02 / 1.02)
    assert s.debt_per_capita == pytest.approx(21.1e12 / 333.3e6)


def test_extending_horizon_keeps_earlier_years():
    base = SimulationConfig(
        simulation_years=10, annual_deficits=[0.5] * 10, random_events_enabled=False,
    )
    longer = replace(base, simulation_years=11)

    short_run = DebtSimulator(base, start_year=2030).run()
    long_run = DebtSimulator(longer, start_year=2030).run()

    assert len(long_run) == 11
    assert list(long_run)[:10] == list(short_run)


def test_rates_restart_from_baseline_each_year():
    generator = FixedEvents(_shock(gdp_growth_impact=0.01))
    config = SimulationConfig(simulation_years=4, base_gdp_growth_rate=0.02)
    trajectory = DebtSimulator(config, event_generator_factory=lambda: generator).run()

    assert generator.years == [0, 1, 2, 3]
    np.testing.assert_allclose(trajectory.series("gdp_growth_rate"), 0.03)


def test_event_deficit_added_to_principal():
    generator = FixedEvents(_shock(deficit_impact=0.25), _shock(deficit_impact=-0.05))
    config = SimulationConfig(simulation_years=2, annual_deficits=[1.0, 1.0])
    trajectory = DebtSimulator(config, event_generator_factory=lambda: generator).run()

    assert trajectory[0].event_deficit_impact == pytest.approx(0.2)
    assert trajectory[0].principal_change == pytest.approx(1.2)


def test_events_ignored_when_disabled():
    generator = FixedEvents(_shock(deficit_impact=5.0))
    config = SimulationConfig(simulation_years=3, random_events_enabled=False)
    trajectory = DebtSimulator(config, event_generator_factory=lambda: generator).run()

    assert generator.years == []
    assert all(s.event_deficit_impact == 0 for s in trajectory)


# =============================================================================
# RATE FLOORS
# =============================================================================

def test_rate_floors_hold_under_extreme_shocks():
    crash = _shock(
        gdp_growth_impact=-1.0, inflation_impact=-1.0,
        interest_rate_impact=-1.0, population_growth_impact=-1.0,
    )
    config = SimulationConfig(simulation_years=5)
    simulator = DebtSimulator(
        config, event_generator_factory=lambda: FixedEvents(crash, crash)
    )
    trajectory = simulator.run()

    for s in trajectory:
        assert s.inflation_rate == pytest.approx(MIN_INFLATION_RATE)
        assert s.gdp_growth_rate == pytest.approx(MIN_GDP_GROWTH_RATE)
        assert s.interest_rate == pytest.approx(MIN_INTEREST_RATE)
        assert s.population_growth_rate == pytest.approx(MIN_POPULATION_GROWTH_RATE)
        assert s.gdp > 0
        assert s.debt_to_gdp_ratio >= 0


def test_floors_applied_after_each_event():
    # -0.03 clamps to -0.02 before the +0.01 is added
    events = FixedEvents(_shock(inflation_impact=-0.05), _shock(inflation_impact=0.01))
    config = SimulationConfig(simulation_years=1, inflation_rate=0.02)
    s = DebtSimulator(config, event_generator_factory=lambda: events).run()[0]
    assert s.inflation_rate == pytest.approx(-0.01)


@pytest.mark.parametrize("seed", range(10))
def test_rate_floors_hold_for_random_runs(seed):
    config = SimulationConfig(
        simulation_years=100, annual_deficits=[], random_seed=seed,
        inflation_rate=-0.02, base_gdp_growth_rate=-0.05,
        average_interest_rate=0.005, base_population_growth_rate=-0.02,
    )
    trajectory = DebtSimulator(config).run()

    assert (trajectory.series("inflation_rate") >= MIN_INFLATION_RATE - 1e-12).all()
    assert (trajectory.series("gdp_growth_rate") >= MIN_GDP_GROWTH_RATE - 1e-12).all()
    assert (trajectory.series("interest_rate") >= MIN_INTEREST_RATE - 1e-12).all()
    assert (
        trajectory.series("population_growth_rate") >= MIN_POPULATION_GROWTH_RATE - 1e-12
    ).all()


# =============================================================================
# REPRODUCIBILITY
# =============================================================================

def test_scenario_b_seed_reproducible(seeded_config):
    first = DebtSimulator(seeded_config, start_year=2025).run()
    second = DebtSimulator(seeded_config, start_year=2025).run()

    assert [s.events for s in first] == [s.events for s in second]
    assert first.final.nominal_debt == second.final.nominal_debt
    assert first == second


def test_same_simulator_runs_twice(seeded_config):
    simulator = DebtSimulator(seeded_config, start_year=2025)
    assert simulator.run() == simulator.run()


def test_generator_factory_called_once_per_run():
    made = []

    def factory():
        made.append(FixedEvents(_shock(deficit_impact=0.1)))
        return made[-1]

    simulator = DebtSimulator(SimulationConfig(simulation_years=3), event_generator_factory=factory)
    first = simulator.run()
    second = simulator.run()

    assert first == second
    assert [g.years for g in made] == [[0, 1, 2], [0, 1, 2]]


def test_start_year_zero_is_kept(scenario_a_config):
    assert DebtSimulator(scenario_a_config, start_year=0).run().years == [0, 1, 2, 3, 4]
    sim = EconomicSimulator(scenario_a_config, start_year=0).simulate()
    assert sim.results.years == [0, 1, 2, 3, 4]


def test_seeded_run_produces_events(seeded_config):
    trajectory = DebtSimulator(seeded_config).run()
    assert any(s.events for s in trajectory)


def test_trajectory_records_and_series(scenario_a_config):
    trajectory = DebtSimulator(scenario_a_config, start_year=2025).run()

    assert isinstance(trajectory, Trajectory)
    assert trajectory.years == [2025, 2026, 2027, 2028, 2029]
    records = trajectory.to_records()
    assert records[0]["nominal_debt"] == pytest.approx(10.3)
    assert records[0]["events"] == []
    assert trajectory.series("nominal_debt").shape == (5,)


# =============================================================================
# ENTRY POINT
# =============================================================================

def test_results_before_simulate_fail():
    sim = EconomicSimulator(SimulationConfig(simulation_years=3))
    with pytest.raises(SimulationNotRunError, match="Results not yet generated"):
        sim.results
    with pytest.raises(SimulationNotRunError, match="Assessment not yet generated"):
        sim.assessment


def test_simulate_returns_results_and_assessment(seeded_config):
    sim = EconomicSimulator(seeded_config).simulate()
    assert len(sim.results) == 60
    assert 0 <= sim.assessment.score <= 20
    assert sim.assessment.stability.total_years == 60


def test_seeded_simulations_identical(seeded_config):
    a = EconomicSimulator(seeded_config, start_year=2025).simulate()
    b = EconomicSimulator(seeded_config, start_year=2025).simulate()
    assert a.results == b.results
    assert a.assessment == b.assessment
