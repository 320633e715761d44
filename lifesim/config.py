"""
Configuration management module for LifeSim.

Purpose
-------
Centralized configuration using Pydantic models for type-safe parameter
management, validation, and serialization.

- EconomicConfig: parameters of the simplified economic model
- EngineConfig: cadence, start date, economic model selection, seed
- ProfileConfig: validated input for a PersonalFinancialData
- AppSettings: environment-driven settings (LIFESIM_ prefix)

Design Principles
-----------------
- Type-safe: Pydantic enforces types and validates ranges
- Immutable: Frozen models prevent accidental mutation
- Serializable: model_dump()/model_validate() round-trip through JSON
- Environment-aware: AppSettings reads .env files

Example
-------
>>> from lifesim.config import EngineConfig, ProfileConfig
>>> engine_cfg = EngineConfig(tick_interval=0.5, seed=7)
>>> profile = ProfileConfig(age=30, current_salary=85_000, state="Texas",
...                         retirement_age=65)
>>> person = profile.to_profile()
"""

from __future__ import annotations

import datetime
from typing import Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import (
    DEFAULT_TICK_INTERVAL,
    MAX_RECENT_EVENTS,
    SALARY_INFLATION_PASS_THROUGH,
    INFLATION_MEAN,
    INFLATION_SPREAD,
    SP500_RETURN,
    TREASURIES_RETURN,
    BONDS_RETURN,
    TECH_RETURN_RANGE,
)

__all__ = [
    "EconomicConfig",
    "EngineConfig",
    "ProfileConfig",
    "AppSettings",
]


# ---------------------------------------------------------------------------
# Economic model
# ---------------------------------------------------------------------------

class EconomicConfig(BaseModel):
    """
    Parameters of the simplified economic model.

    Attributes
    ----------
    inflation_mean : float
        Center of the yearly inflation draw.
    inflation_spread : float
        Half-width of the uniform perturbation around the mean.
    sp500_return, treasuries_return, bonds_return : float
        Deterministic annual returns.
    tech_return_range : (float, float)
        Bounds of the uniform tech-return draw.
    salary_pass_through : float
        Fraction of inflation passed through to salary each year (< 1).

    Examples
    --------
    >>> EconomicConfig(inflation_spread=0.0).inflation_spread
    0.0
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    inflation_mean: float = Field(
        default=INFLATION_MEAN,
        ge=-0.05,
        le=0.20,
        description="Mean yearly inflation"
    )
    inflation_spread: float = Field(
        default=INFLATION_SPREAD,
        ge=0,
        le=0.10,
        description="Half-width of the inflation perturbation"
    )
    sp500_return: float = Field(
        default=SP500_RETURN,
        ge=-0.9,
        le=1.0,
        description="Annual equity index return"
    )
    treasuries_return: float = Field(
        default=TREASURIES_RETURN,
        ge=-0.5,
        le=0.5,
        description="Annual treasury return"
    )
    bonds_return: float = Field(
        default=BONDS_RETURN,
        ge=-0.5,
        le=0.5,
        description="Annual bond return"
    )
    tech_return_range: Tuple[float, float] = Field(
        default=TECH_RETURN_RANGE,
        description="Uniform bounds for the tech return draw"
    )
    salary_pass_through: float = Field(
        default=SALARY_INFLATION_PASS_THROUGH,
        ge=0,
        lt=1,
        description="Fraction of inflation applied to salary"
    )

    @field_validator("tech_return_range")
    @classmethod
    def validate_tech_range(cls, v):
        """Ensure low <= high."""
        low, high = v
        if low > high:
            raise ValueError(f"tech_return_range low ({low}) must be <= high ({high})")
        return v


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------

class EngineConfig(BaseModel):
    """
    Configuration of the yearly simulation engine.

    Attributes
    ----------
    tick_interval : float
        Wall-clock seconds per simulated year.
    start_date : datetime.date
        Simulated calendar date of the seed point.
    economic_model : str
        "simple" (default) or "cycle".
    seed : int, optional
        Seed for the economic generator. None draws OS entropy.
    max_recent_events : int
        Size of the newest-first recent-events list.
    economic : EconomicConfig
        Economic model parameters.

    Examples
    --------
    >>> cfg = EngineConfig(start_date=datetime.date(2025, 1, 1), seed=1)
    >>> cfg.economic_model
    'simple'
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    tick_interval: float = Field(
        default=DEFAULT_TICK_INTERVAL,
        gt=0,
        le=3600,
        description="Seconds per simulated year"
    )
    start_date: datetime.date = Field(
        default_factory=datetime.date.today,
        description="Simulated date of the seed point"
    )
    economic_model: Literal["simple", "cycle"] = Field(
        default="simple",
        description="Economic stepper"
    )
    seed: Optional[int] = Field(
        default=None,
        description="Random seed for reproducibility"
    )
    max_recent_events: int = Field(
        default=MAX_RECENT_EVENTS,
        ge=1,
        le=100,
        description="Recent events kept newest-first"
    )
    economic: EconomicConfig = Field(
        default_factory=EconomicConfig,
        description="Economic model parameters"
    )


# ---------------------------------------------------------------------------
# Profile
# ---------------------------------------------------------------------------

class ProfileConfig(BaseModel):
    """
    Validated input for a PersonalFinancialData.

    The engine trusts its inputs; this model is where hosts and the CLI
    sanitize them (non-negative balances, percentages within 0-100,
    retirement after the current age).
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    age: int = Field(ge=0, le=120, description="Current age")
    current_salary: float = Field(default=0.0, ge=0, description="Annual salary")
    state: str = Field(default="", max_length=50, description="US state name")
    marital_status: Literal["single", "married-jointly", "married-separately"] = "single"

    match_401k: float = Field(default=0.0, ge=0, le=100)
    contributions_401k_traditional: float = Field(default=0.0, ge=0, le=100)
    contributions_401k_roth: float = Field(default=0.0, ge=0, le=100)
    ira_traditional_contribution: float = Field(default=0.0, ge=0)
    ira_roth_contribution: float = Field(default=0.0, ge=0)
    monthly_investment: float = Field(default=0.0, ge=0)

    savings: float = Field(default=0.0, ge=0)
    checking_account: float = Field(default=0.0, ge=0)
    savings_account: float = Field(default=0.0, ge=0)
    hysa_account: float = Field(default=0.0, ge=0)

    investments: float = Field(default=0.0, ge=0)
    the_401k_traditional_holdings: float = Field(default=0.0, ge=0)
    the_401k_roth_holdings: float = Field(default=0.0, ge=0)
    ira_traditional_holdings: float = Field(default=0.0, ge=0)
    ira_roth_holdings: float = Field(default=0.0, ge=0)

    debt_amount: float = Field(default=0.0, ge=0)
    debt_interest_rate: float = Field(default=0.0, ge=0, le=100)
    debt_term_years: int = Field(default=0, ge=0, le=50)

    retirement_age: int = Field(default=65, ge=1, le=120)
    retirement_goal: float = Field(default=0.0, ge=0)
    emergency_fund_months: float = Field(default=6.0, ge=0, le=60)

    monthly_rent: Optional[float] = Field(default=None, ge=0)
    weekly_groceries: Optional[float] = Field(default=None, ge=0)

    @field_validator("retirement_age")
    @classmethod
    def validate_retirement_age(cls, v, info):
        """Ensure retirement_age > age."""
        age = info.data.get("age")
        if age is not None and v <= age:
            raise ValueError(f"retirement_age ({v}) must be greater than age ({age})")
        return v

    def to_profile(self):
        """Build the mutable PersonalFinancialData this config describes."""
        from .profile import PersonalFinancialData

        return PersonalFinancialData(**self.model_dump())


# ---------------------------------------------------------------------------
# Application Settings (Environment Variables)
# ---------------------------------------------------------------------------

class AppSettings(BaseSettings):
    """
    Global application settings loaded from environment variables.

    Environment variables are prefixed with LIFESIM_ (e.g.
    LIFESIM_LOG_LEVEL=DEBUG).

    Attributes
    ----------
    debug : bool
        Enable debug mode (forces DEBUG logging)
    log_level : str
        Logging level: "DEBUG", "INFO", "WARNING", "ERROR"
    tick_interval : float
        Default seconds per simulated year for interactive runs
    seed : int, optional
        Default economic seed

    Examples
    --------
    >>> settings = AppSettings()
    >>> settings.log_level
    'INFO'
    """

    model_config = SettingsConfigDict(
        env_prefix="LIFESIM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    debug: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level"
    )
    tick_interval: float = Field(
        default=DEFAULT_TICK_INTERVAL,
        gt=0,
        description="Seconds per simulated year"
    )
    seed: Optional[int] = Field(
        default=None,
        description="Default economic seed"
    )

    @property
    def effective_log_level(self) -> str:
        return "DEBUG" if self.debug else self.log_level
