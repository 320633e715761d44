"""
LifeSim - Yearly Personal-Finance Simulation

An embeddable engine that advances a personal financial profile one
simulated year per tick through a career and retirement timeline.

Modules
-------
- tax        : Progressive federal, flat state and payroll taxes; 401k/IRA limits
- economy    : Inflation and per-asset returns (simple and business-cycle models)
- allocation : Pooled investment value -> virtual sub-account balances
- expenses   : State-average living expenses with overrides
- debt       : Scheduled debt amortization
- engine     : SimulationStepper state machine, history, events, career actions
- summary    : Year-end summaries, achievements, recommendations
- host       : Host boundary (callbacks) and an in-memory host
- scheduler  : asyncio and manual tick schedulers
- config     : Pydantic configuration and environment settings
- utils      : Shared helpers (rng, formatting, logging)
"""

from .profile import PersonalFinancialData, FinancialState
from .tax import TaxCalculationResult, calculate_taxes, contribution_limit
from .economy import EconomicState, EconomicStateStepper, CycleEconomicStepper
from .allocation import AccountAllocator, AccountBreakdown, ContributionMix
from .engine import (
    SimulationState,
    SimulationStepper,
    SimulationContext,
    HistoricalDataPoint,
    EventNotification,
    JobOfferRequest,
)
from .summary import YearlySummary, generate_yearly_summary
from .host import SimulationHost, InMemoryHost
from .scheduler import AsyncioScheduler, ManualScheduler
from .config import EngineConfig, EconomicConfig, ProfileConfig, AppSettings
from . import utils

__version__ = "0.1.0"
