"""
Economic state and its yearly evolution for LifeSim.

Purpose
-------
Advances inflation and per-asset-class investment returns by one simulated
year. Two steppers share one interface, ``step(previous) -> EconomicState``:

- EconomicStateStepper:
    The default, simplified model. Inflation is a fixed mean plus a bounded
    uniform perturbation; equity, treasury and bond returns are constants;
    tech returns are drawn uniformly from a bounded range. The business
    cycle label is carried for compatibility and stays where it is.

- CycleEconomicStepper:
    Regime-switching model. A labeled business cycle (expansion, peak,
    recession, trough, depression) transitions stochastically, and inflation
    and equity growth are drawn from per-phase ranges.

Design principles
-----------------
- Randomness is explicit: every draw goes through an injected
  ``numpy.random.Generator`` so a seeded run is replayable tick by tick.
- EconomicState is immutable; each step returns a new value.

Example
-------
>>> stepper = EconomicStateStepper(rng=42)
>>> state = initial_economic_state()
>>> nxt = stepper.step(state)
>>> 0.015 <= nxt.current_inflation_rate <= 0.035
True
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Optional

from .config import EconomicConfig
from .constants import (
    INITIAL_INFLATION_RATE,
    INITIAL_STOCK_MARKET_INDEX,
    INITIAL_STOCK_MARKET_GROWTH,
    SP500_RETURN,
    TREASURIES_RETURN,
    BONDS_RETURN,
    TECH_RETURN_RANGE,
    CYCLE_TRANSITIONS,
    CYCLE_MIN_DURATION,
    CYCLE_INFLATION,
    CYCLE_STOCK_GROWTH,
    CYCLE_MARKET_VOLATILITY,
    DEFLATION_FLOOR,
)
from .utils import SeedLike, make_rng

__all__ = [
    "InvestmentReturns",
    "EconomicState",
    "initial_economic_state",
    "EconomicStateStepper",
    "CycleEconomicStepper",
    "make_stepper",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InvestmentReturns:
    """Annual arithmetic returns per asset class."""

    sp500: float = SP500_RETURN
    tech: float = sum(TECH_RETURN_RANGE) / 2.0
    treasuries: float = TREASURIES_RETURN
    bonds: float = BONDS_RETURN


@dataclass(frozen=True)
class EconomicState:
    """
    Macro environment for one simulated year.

    `stock_market_index`, `stock_market_growth`, `economic_cycle` and
    `years_in_current_cycle` are the legacy aggregate fields; the engine
    compounds investments at `investment_returns.sp500`.
    """

    current_inflation_rate: float = INITIAL_INFLATION_RATE
    cumulative_inflation: float = 1.0
    investment_returns: InvestmentReturns = field(default_factory=InvestmentReturns)
    stock_market_index: float = INITIAL_STOCK_MARKET_INDEX
    stock_market_growth: float = INITIAL_STOCK_MARKET_GROWTH
    economic_cycle: str = "expansion"
    years_in_current_cycle: int = 0


def initial_economic_state() -> EconomicState:
    """State used at engine construction and after reset."""
    return EconomicState()


# ---------------------------------------------------------------------------
# Simplified model
# ---------------------------------------------------------------------------

class EconomicStateStepper:
    """
    Simplified one-year economic step.

    Parameters
    ----------
    config : EconomicConfig, optional
        Means, spreads and fixed returns. Defaults to EconomicConfig().
    rng : int | numpy.random.Generator | None
        Seed or generator for the stochastic draws. None uses OS entropy.

    Notes
    -----
    Draw order per step is fixed (inflation, then tech return), so two
    steppers built from the same seed produce identical sequences.
    """

    def __init__(self, config: Optional[EconomicConfig] = None, rng: SeedLike = None):
        self.config = config or EconomicConfig()
        self.rng = make_rng(rng)

    def step(self, previous: EconomicState) -> EconomicState:
        cfg = self.config
        inflation = cfg.inflation_mean + float(
            self.rng.uniform(-cfg.inflation_spread, cfg.inflation_spread)
        )
        tech_low, tech_high = cfg.tech_return_range
        tech = float(self.rng.uniform(tech_low, tech_high))

        returns = InvestmentReturns(
            sp500=cfg.sp500_return,
            tech=tech,
            treasuries=cfg.treasuries_return,
            bonds=cfg.bonds_return,
        )
        new_state = replace(
            previous,
            current_inflation_rate=inflation,
            cumulative_inflation=previous.cumulative_inflation * (1.0 + inflation),
            investment_returns=returns,
            stock_market_index=previous.stock_market_index * (1.0 + cfg.sp500_return),
            stock_market_growth=cfg.sp500_return,
            years_in_current_cycle=previous.years_in_current_cycle + 1,
        )
        logger.debug(
            "economic step: inflation=%.4f tech=%.4f index=%.1f",
            inflation, tech, new_state.stock_market_index,
        )
        return new_state


# ---------------------------------------------------------------------------
# Regime-switching model
# ---------------------------------------------------------------------------

class CycleEconomicStepper(EconomicStateStepper):
    """
    Business-cycle economic step.

    Each phase must last a minimum number of years (base + random jitter)
    before a transition roll happens. Outcomes per phase:

    ==========  ==========================================================
    expansion   peak 70%, extended expansion 20%, sudden recession 10%
    peak        recession 55%, soft landing 30%, extended 13%, depression 2%
    recession   trough 50%, V-shaped recovery 30%, prolonged 19%, depression 1%
    trough      expansion 80%, extended 20%
    depression  trough 60%, prolonged 30%, direct recovery 10%
    ==========  ==========================================================

    Equity growth is drawn from the phase's range plus a symmetric
    volatility term; tech keeps the simplified model's excess return over
    equities; treasuries and bonds stay at their configured constants.
    """

    def _next_phase(self, phase: str, years: int):
        base, jitter = CYCLE_MIN_DURATION[phase]
        threshold = base + float(self.rng.uniform(0.0, jitter))
        if years < threshold:
            return phase, years

        roll = float(self.rng.random())
        outcome = CYCLE_TRANSITIONS[phase][-1][1]
        for cumulative, candidate in CYCLE_TRANSITIONS[phase]:
            if roll < cumulative:
                outcome = candidate
                break

        if outcome == "extend":
            logger.debug("economic cycle: %s extended", phase)
            return phase, 0
        if outcome == "prolong":
            logger.debug("economic cycle: %s prolonged", phase)
            return phase, max(0, years - 1)
        logger.debug("economic cycle transition: %s -> %s", phase, outcome)
        return outcome, 0

    def step(self, previous: EconomicState) -> EconomicState:
        cfg = self.config
        phase, years = self._next_phase(
            previous.economic_cycle, previous.years_in_current_cycle + 1
        )

        base, span, floor = CYCLE_INFLATION[phase]
        inflation = max(floor, base + float(self.rng.random()) * span)
        inflation = max(DEFLATION_FLOOR, inflation)

        low, growth_span = CYCLE_STOCK_GROWTH[phase]
        growth = low + float(self.rng.random()) * growth_span
        growth += (float(self.rng.random()) - 0.5) * CYCLE_MARKET_VOLATILITY

        tech_low, tech_high = cfg.tech_return_range
        tech = growth + float(
            self.rng.uniform(tech_low - cfg.sp500_return, tech_high - cfg.sp500_return)
        )

        returns = InvestmentReturns(
            sp500=growth,
            tech=tech,
            treasuries=cfg.treasuries_return,
            bonds=cfg.bonds_return,
        )
        return replace(
            previous,
            current_inflation_rate=inflation,
            cumulative_inflation=previous.cumulative_inflation * (1.0 + inflation),
            investment_returns=returns,
            stock_market_index=previous.stock_market_index * (1.0 + growth),
            stock_market_growth=growth,
            economic_cycle=phase,
            years_in_current_cycle=years,
        )


def make_stepper(
    model: str = "simple",
    config: Optional[EconomicConfig] = None,
    rng: SeedLike = None,
) -> EconomicStateStepper:
    """Build the stepper named by *model* ("simple" or "cycle")."""
    if model == "simple":
        return EconomicStateStepper(config, rng)
    if model == "cycle":
        return CycleEconomicStepper(config, rng)
    raise ValueError(f"economic model must be 'simple' or 'cycle', got: {model}")
