"""
Pytest configuration and fixtures for the LifeSim test suite.

This module provides reusable fixtures for testing all LifeSim components.
Fixtures follow the principle of "arrange-act-assert" with clear separation.
"""

from datetime import date

import pytest

from lifesim.config import EconomicConfig, EngineConfig
from lifesim.engine import SimulationStepper
from lifesim.host import InMemoryHost
from lifesim.profile import PersonalFinancialData
from lifesim.scheduler import ManualScheduler


# ---------------------------------------------------------------------------
# Basic Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def start_date() -> date:
    """Standard simulated start date for tests."""
    return date(2025, 1, 1)


@pytest.fixture
def seed() -> int:
    """Standard random seed for reproducibility."""
    return 42


# ---------------------------------------------------------------------------
# Profile Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def person() -> PersonalFinancialData:
    """
    Typical mid-career profile in Texas (no state income tax).

    Salary: 85,000 with 6% traditional 401k, 4% match
    Roth IRA: 3,000/yr, taxable investing: 250/month
    """
    return PersonalFinancialData(
        age=30,
        current_salary=85_000.0,
        state="Texas",
        match_401k=4.0,
        contributions_401k_traditional=6.0,
        ira_roth_contribution=3_000.0,
        monthly_investment=250.0,
        savings=5_000.0,
        checking_account=2_000.0,
        hysa_account=10_000.0,
        investments=15_000.0,
        retirement_age=65,
    )


@pytest.fixture
def near_retirement() -> PersonalFinancialData:
    """Profile one year away from retirement (age 30, retires at 31)."""
    return PersonalFinancialData(
        age=30, current_salary=100_000.0, state="Texas", retirement_age=31
    )


# ---------------------------------------------------------------------------
# Engine Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def flat_economy() -> EconomicConfig:
    """Economic model without randomness: 2.5% inflation, 10% equities."""
    return EconomicConfig(inflation_spread=0.0, tech_return_range=(0.12, 0.12))


@pytest.fixture
def engine_config(start_date, seed) -> EngineConfig:
    """Seeded engine starting on 2025-01-01."""
    return EngineConfig(start_date=start_date, seed=seed, tick_interval=1.0)


@pytest.fixture
def flat_engine_config(start_date, flat_economy) -> EngineConfig:
    """Deterministic engine starting on 2025-01-01."""
    return EngineConfig(start_date=start_date, seed=0, economic=flat_economy)


@pytest.fixture
def host(person) -> InMemoryHost:
    return InMemoryHost(person)


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def stepper(host, engine_config, scheduler) -> SimulationStepper:
    """Engine over the typical profile, driven manually."""
    return SimulationStepper(host, engine_config, scheduler=scheduler)
