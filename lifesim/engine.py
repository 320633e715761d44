"""
Yearly simulation engine for LifeSim.

Purpose
-------
Advances a host-owned profile one simulated year per tick. Each tick:

1. Steps the economy (inflation, per-asset returns).
2. Ages the person by one year and advances the simulated calendar.
3. Passes part of the year's inflation through to salary.
4. Derives the year's 401k (capped), match, IRA and taxable contributions.
5. Compounds the pooled investment value at the equity return and adds
   every contribution to it.
6. Credits the retirement-account ledgers with the contributions.
7. Computes taxes, inflates living expenses, services scheduled debt and
   adds the remaining cash flow to the cash pool.
8. Recomputes net worth = cash + pooled investments - debt.
9. Appends a HistoricalDataPoint.
10. Emits retirement milestone events once per crossing.
11. Completes when age reaches the retirement age.

A YearlySummary of the closing year is generated after every tick.

State machine
-------------
    setup --start--> running --pause--> paused --start--> running
    running --(age >= retirement_age)--> completed
    any --reset--> setup

Invalid transitions are no-ops that return the current state.

Design principles
-----------------
- The engine never mutates host data: every write goes through the host's
  update callbacks, which apply synchronously before the next tick is armed.
- Cross-tick state lives in one frozen SimulationContext, readable via
  `SimulationStepper.context` and restorable via `restore()`.
- Randomness is injected (seed or numpy Generator) for replayable runs.

Example
-------
>>> host = InMemoryHost(PersonalFinancialData(age=30, retirement_age=31,
...                                           current_salary=80_000,
...                                           state="Texas"))
>>> sched = ManualScheduler()
>>> stepper = SimulationStepper(host, EngineConfig(seed=1), scheduler=sched)
>>> stepper.start()
<SimulationState.RUNNING: 'running'>
>>> sched.run_until_idle()
1
>>> stepper.state
<SimulationState.COMPLETED: 'completed'>
"""

from __future__ import annotations

import datetime
import logging
import uuid
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import FrozenSet, Optional, Tuple

import pandas as pd

from .allocation import AccountAllocator, ContributionMix
from .config import EngineConfig
from .constants import (
    RETIREMENT_MILESTONES,
    PROMOTION_RAISE,
    DEMOTION_CUT,
    MONTHS_PER_YEAR,
)
from .debt import step_debt
from .economy import EconomicState, EconomicStateStepper, initial_economic_state, make_stepper
from .exceptions import SimulationStateError, ValidationError
from .expenses import inflate_annual_expenses
from .host import SimulationHost
from .scheduler import ManualScheduler, Scheduler
from .summary import YearlySummary, generate_yearly_summary
from .tax import TaxCalculationResult, calculate_taxes
from .types import EventDict
from .utils import SeedLike, format_currency

__all__ = [
    "SimulationState",
    "SimulationProgress",
    "HistoricalDataPoint",
    "EventNotification",
    "JobOfferRequest",
    "SimulationContext",
    "SimulationStepper",
]

logger = logging.getLogger(__name__)


def _add_years(start: datetime.date, years: int) -> datetime.date:
    return (pd.Timestamp(start) + pd.DateOffset(years=years)).date()


def _new_id() -> str:
    return uuid.uuid4().hex[:9]


# ---------------------------------------------------------------------------
# Value types
# ---------------------------------------------------------------------------

class SimulationState(str, Enum):
    SETUP = "setup"
    RUNNING = "running"
    PAUSED = "paused"
    COMPLETED = "completed"


@dataclass(frozen=True)
class SimulationProgress:
    """Position on the simulated timeline."""

    start_date: datetime.date
    current_date: datetime.date
    current_age: int
    years_elapsed: int = 0
    months_elapsed: int = 0
    days_elapsed: int = 0

    @classmethod
    def begin(cls, start_date: datetime.date, age: int) -> "SimulationProgress":
        return cls(start_date=start_date, current_date=start_date, current_age=age)

    def advanced(self) -> "SimulationProgress":
        """One simulated year later."""
        years = self.years_elapsed + 1
        current = _add_years(self.start_date, years)
        return replace(
            self,
            current_date=current,
            current_age=self.current_age + 1,
            years_elapsed=years,
            months_elapsed=years * MONTHS_PER_YEAR,
            days_elapsed=(current - self.start_date).days,
        )


@dataclass(frozen=True)
class HistoricalDataPoint:
    """
    Snapshot at the end of one simulated year.

    `net_worth == cash + investments - debt` holds for every point.
    `timestamp` is the simulated date, not wall-clock time.
    """

    age: int
    net_worth: float
    salary: float
    investments: float
    cash: float
    debt: float
    debt_payment: float
    timestamp: datetime.date
    inflation: float
    stock_market_value: float


@dataclass(frozen=True)
class EventNotification:
    id: str
    type: str
    description: str
    timestamp: datetime.date

    def to_dict(self) -> EventDict:
        return {
            "id": self.id,
            "type": self.type,
            "description": self.description,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass(frozen=True)
class JobOfferRequest:
    """
    Request for the salary of a new job.

    The host answers with `SimulationStepper.resolve_job_offer(request.id,
    salary)` (or `cancel_job_offer`) whenever the user has decided.
    """

    id: str
    requested_on: datetime.date
    current_salary: float


@dataclass(frozen=True)
class SimulationContext:
    """
    Everything the engine carries from one tick to the next.

    Attributes
    ----------
    state : SimulationState
    economic : EconomicState
    progress : SimulationProgress, optional
        None until the first start.
    baseline_salary, baseline_debt : float, optional
        Values captured at the first start, restored by reset.
    history : tuple of HistoricalDataPoint
        Seed point plus one point per tick.
    yearly_summaries : tuple of YearlySummary
    recent_events : tuple of EventNotification
        Newest first, capped at EngineConfig.max_recent_events.
    fired_milestones : frozenset of int
        Milestone ages already announced.
    debt_term_remaining : int
        Years left on the debt repayment schedule.
    pending_job_offer : JobOfferRequest, optional
    last_tax : TaxCalculationResult, optional
        Tax picture of the most recent tick.
    """

    state: SimulationState = SimulationState.SETUP
    economic: EconomicState = field(default_factory=initial_economic_state)
    progress: Optional[SimulationProgress] = None
    baseline_salary: Optional[float] = None
    baseline_debt: Optional[float] = None
    history: Tuple[HistoricalDataPoint, ...] = ()
    yearly_summaries: Tuple[YearlySummary, ...] = ()
    recent_events: Tuple[EventNotification, ...] = ()
    fired_milestones: FrozenSet[int] = frozenset()
    debt_term_remaining: int = 0
    pending_job_offer: Optional[JobOfferRequest] = None
    last_tax: Optional[TaxCalculationResult] = None

    @property
    def has_started(self) -> bool:
        return self.baseline_salary is not None


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------

class SimulationStepper:
    """
    Orchestrates the yearly simulation for one host.

    Parameters
    ----------
    host : SimulationHost
        Owner of the profile and aggregates; receives every update.
    config : EngineConfig, optional
        Cadence, start date, economic model and seed.
    scheduler : Scheduler, optional
        Fires ticks. Defaults to a ManualScheduler; pass an
        AsyncioScheduler for real wall-clock cadence.
    rng : int | numpy.random.Generator, optional
        Overrides `config.seed` for the economic draws.
    economy : EconomicStateStepper, optional
        Overrides the stepper built from `config.economic_model`.
    allocator : AccountAllocator, optional
    """

    def __init__(
        self,
        host: SimulationHost,
        config: Optional[EngineConfig] = None,
        scheduler: Optional[Scheduler] = None,
        rng: SeedLike = None,
        economy: Optional[EconomicStateStepper] = None,
        allocator: Optional[AccountAllocator] = None,
    ):
        self.host = host
        self.config = config or EngineConfig()
        self.scheduler = scheduler if scheduler is not None else ManualScheduler()
        if economy is None:
            seed = rng if rng is not None else self.config.seed
            economy = make_stepper(self.config.economic_model, self.config.economic, seed)
        self.economy = economy
        self.allocator = allocator or AccountAllocator()
        self._context = SimulationContext()
        self._generation = 0

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def context(self) -> SimulationContext:
        return self._context

    @property
    def state(self) -> SimulationState:
        return self._context.state

    @property
    def has_started(self) -> bool:
        return self._context.has_started

    @property
    def economic_state(self) -> EconomicState:
        return self._context.economic

    @property
    def history(self) -> Tuple[HistoricalDataPoint, ...]:
        return self._context.history

    @property
    def yearly_summaries(self) -> Tuple[YearlySummary, ...]:
        return self._context.yearly_summaries

    @property
    def recent_events(self) -> Tuple[EventNotification, ...]:
        return self._context.recent_events

    @property
    def current_age(self) -> int:
        progress = self._context.progress
        return progress.current_age if progress is not None else self.host.person.age

    @property
    def current_date(self) -> datetime.date:
        progress = self._context.progress
        return progress.current_date if progress is not None else self.config.start_date

    # ------------------------------------------------------------------
    # Controls
    # ------------------------------------------------------------------

    def start(self) -> SimulationState:
        """Begin (or resume) ticking. No-op when running or completed."""
        ctx = self._context
        if ctx.state in (SimulationState.RUNNING, SimulationState.COMPLETED):
            return ctx.state

        if not ctx.has_started:
            person = self.host.person
            pooled = self.host.financials.investment_account_value
            progress = SimulationProgress.begin(self.config.start_date, person.age)
            seed_point = HistoricalDataPoint(
                age=person.age,
                net_worth=person.total_cash + pooled - person.debt_amount,
                salary=person.current_salary,
                investments=pooled,
                cash=person.total_cash,
                debt=person.debt_amount,
                debt_payment=0.0,
                timestamp=progress.current_date,
                inflation=ctx.economic.current_inflation_rate,
                stock_market_value=ctx.economic.stock_market_index,
            )
            ctx = replace(
                ctx,
                progress=progress,
                baseline_salary=person.current_salary,
                baseline_debt=person.debt_amount,
                debt_term_remaining=person.debt_term_years,
                history=(seed_point,),
            )
            logger.info(
                "simulation started at age %d (retirement at %d)",
                person.age, person.retirement_age,
            )
        else:
            logger.info("simulation resumed at age %d", ctx.progress.current_age)

        self._context = replace(ctx, state=SimulationState.RUNNING)
        self._schedule_next()
        return SimulationState.RUNNING

    def pause(self) -> SimulationState:
        """Cancel the pending tick. No-op unless running."""
        if self._context.state is not SimulationState.RUNNING:
            return self._context.state
        self.scheduler.cancel()
        self._context = replace(self._context, state=SimulationState.PAUSED)
        logger.info("simulation paused at age %d", self.current_age)
        return SimulationState.PAUSED

    def reset(self) -> SimulationState:
        """
        Return to setup from any state.

        Clears history, summaries and events; restores the baseline salary
        and debt; zeroes the cash pool and investment aggregates; reseeds
        the economic state.
        """
        self.scheduler.cancel()
        self._generation += 1
        ctx = self._context

        person_changes = {"savings": 0.0}
        financial_changes = {"net_worth": 0.0, "investments": 0.0, "investment_account_value": 0.0}
        if ctx.baseline_salary is not None:
            person_changes["current_salary"] = ctx.baseline_salary
            financial_changes["current_salary"] = ctx.baseline_salary
        if ctx.baseline_debt is not None:
            person_changes["debt_amount"] = ctx.baseline_debt
        self.host.update_person_data(person_changes)
        self.host.update_financials(financial_changes)

        self._context = SimulationContext()
        logger.info("simulation reset")
        return SimulationState.SETUP

    def restore(self, context: SimulationContext) -> SimulationState:
        """Adopt a previously saved context; re-arms ticking if it was running."""
        self.scheduler.cancel()
        self._generation += 1
        self._context = context
        if context.state is SimulationState.RUNNING:
            self._schedule_next()
        return context.state

    def _schedule_next(self) -> None:
        self.scheduler.schedule(self.config.tick_interval, self._on_timer)

    def _on_timer(self) -> None:
        if self._context.state is not SimulationState.RUNNING:
            return
        try:
            self.tick()
        except Exception:
            # a failing host callback pauses the run instead of stalling it
            logger.exception("tick failed at age %d; pausing", self.current_age)
            self.pause()
            raise
        if self._context.state is SimulationState.RUNNING and not self.scheduler.pending:
            self._schedule_next()

    def _superseded(self, generation: int) -> bool:
        """True once reset() or restore() ran from inside a host callback."""
        return generation != self._generation

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------

    def tick(self) -> SimulationContext:
        """
        Advance one simulated year.

        Returns
        -------
        SimulationContext
            The new context.

        Raises
        ------
        SimulationStateError
            If the simulation is not running.
        """
        ctx = self._context
        if ctx.state is not SimulationState.RUNNING:
            raise SimulationStateError(
                f"Cannot tick while {ctx.state.value}; call start() first."
            )
        generation = self._generation
        host = self.host
        person = host.person
        financials = host.financials

        # 1-2. Economy and calendar
        economic = self.economy.step(ctx.economic)
        inflation = economic.current_inflation_rate
        tax_year = ctx.progress.current_date.year
        progress = ctx.progress.advanced()

        # 3-4. Salary and contributions
        salary = person.current_salary * (
            1.0 + inflation * self.config.economic.salary_pass_through
        )
        mix = ContributionMix.from_profile(person, year=tax_year, salary=salary)

        # 5. Pooled investments
        pooled = (
            financials.investment_account_value * (1.0 + economic.investment_returns.sp500)
            + mix.total
        )

        # 7. Taxes, expenses, debt service, cash flow
        tax = calculate_taxes(
            salary,
            person.state,
            mix.traditional_401k,
            mix.roth_401k,
            mix.traditional_ira,
            mix.roth_ira,
            year=tax_year,
        )
        annual_expenses = inflate_annual_expenses(financials.annual_expenses, inflation)
        debt = step_debt(person.debt_amount, person.debt_interest_rate, ctx.debt_term_remaining)
        cash_flow = tax.after_tax_income - annual_expenses - debt.payment

        # 6. Ledgers, salary and cash pool
        host.update_person_data({
            "current_salary": salary,
            "savings": person.savings + cash_flow,
            "the_401k_traditional_holdings": (
                person.the_401k_traditional_holdings + mix.traditional_401k + mix.employer_match
            ),
            "the_401k_roth_holdings": person.the_401k_roth_holdings + mix.roth_401k,
            "ira_traditional_holdings": person.ira_traditional_holdings + mix.traditional_ira,
            "ira_roth_holdings": person.ira_roth_holdings + mix.roth_ira,
            "debt_amount": debt.remaining_debt,
        })
        if self._superseded(generation):
            return self._context
        person = host.person

        # 8. Net worth
        cash = person.total_cash
        net_worth = cash + pooled - debt.remaining_debt
        host.update_financials({
            "current_salary": salary,
            "net_worth": net_worth,
            "annual_expenses": annual_expenses,
            "investments": pooled,
            "investment_account_value": pooled,
        })
        if self._superseded(generation):
            return self._context

        # 9. History
        point = HistoricalDataPoint(
            age=progress.current_age,
            net_worth=net_worth,
            salary=salary,
            investments=pooled,
            cash=cash,
            debt=debt.remaining_debt,
            debt_payment=debt.payment,
            timestamp=progress.current_date,
            inflation=inflation,
            stock_market_value=economic.stock_market_index,
        )
        logger.debug(
            "tick age=%d salary=%.2f cash_flow=%.2f pooled=%.2f net_worth=%.2f",
            point.age, salary, cash_flow, pooled, net_worth,
        )

        # 10. Milestones
        fired = set(ctx.fired_milestones)
        recent = ctx.recent_events
        for age, message in RETIREMENT_MILESTONES:
            if ctx.progress.current_age < age <= progress.current_age and age not in fired:
                fired.add(age)
                recent = self._emit("retirement_milestone", message, progress.current_date, recent)
                logger.info("milestone reached: age %d", age)
                if self._superseded(generation):
                    return self._context

        summary = generate_yearly_summary(
            tax_year,
            ctx.history[-1],
            point,
            person,
            host.financials,
            economic,
            tax,
            previous_summary=ctx.yearly_summaries[-1] if ctx.yearly_summaries else None,
            allocator=self.allocator,
        )

        # 11. Completion
        state = self._context.state
        if progress.current_age >= person.retirement_age:
            state = SimulationState.COMPLETED
            self.scheduler.cancel()
            logger.info("simulation completed at age %d", progress.current_age)

        self._context = replace(
            self._context,
            state=state,
            economic=economic,
            progress=progress,
            history=ctx.history + (point,),
            yearly_summaries=ctx.yearly_summaries + (summary,),
            recent_events=recent,
            fired_milestones=frozenset(fired),
            debt_term_remaining=debt.remaining_term,
            last_tax=tax,
        )
        return self._context

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def _emit(
        self,
        event_type: str,
        description: str,
        when: datetime.date,
        recent: Tuple[EventNotification, ...],
    ) -> Tuple[EventNotification, ...]:
        event = EventNotification(
            id=_new_id(), type=event_type, description=description, timestamp=when
        )
        self.host.append_event(event)
        return ((event,) + recent)[: self.config.max_recent_events]

    def _record_event(self, event_type: str, description: str) -> None:
        recent = self._emit(event_type, description, self.current_date, self._context.recent_events)
        self._context = replace(self._context, recent_events=recent)

    # ------------------------------------------------------------------
    # Career actions
    # ------------------------------------------------------------------

    def _set_salary(self, salary: float) -> float:
        self.host.update_person_data({"current_salary": salary})
        self.host.update_financials({"current_salary": salary})
        if self.has_started:
            self._context = replace(self._context, baseline_salary=salary)
        return salary

    def promote(self) -> float:
        """Raise salary by 15%. Returns the new salary."""
        salary = self._set_salary(self.host.person.current_salary * (1.0 + PROMOTION_RAISE))
        self._record_event("promotion", "You got promoted with a 15% salary increase!")
        return salary

    def demote(self) -> float:
        """Cut salary by 10%. Returns the new salary."""
        salary = self._set_salary(self.host.person.current_salary * (1.0 - DEMOTION_CUT))
        self._record_event("demotion", "You were demoted with a 10% salary decrease")
        return salary

    def quit_job(self) -> float:
        salary = self._set_salary(0.0)
        self._record_event("layoff", "You quit your job and are now unemployed")
        return salary

    def request_new_job(self) -> JobOfferRequest:
        """
        Ask the host for a new job's salary.

        Replaces any request still pending. Ticking continues while the
        request is open.
        """
        request = JobOfferRequest(
            id=_new_id(),
            requested_on=self.current_date,
            current_salary=self.host.person.current_salary,
        )
        self._context = replace(self._context, pending_job_offer=request)
        logger.debug("job offer requested: %s", request.id)
        return request

    def _take_job_offer(self, request_id: str) -> JobOfferRequest:
        pending = self._context.pending_job_offer
        if pending is None or pending.id != request_id:
            raise SimulationStateError(f"No pending job offer with id '{request_id}'.")
        self._context = replace(self._context, pending_job_offer=None)
        return pending

    def resolve_job_offer(self, request_id: str, salary: float) -> float:
        """
        Accept the new job at *salary*.

        Raises
        ------
        SimulationStateError
            If *request_id* is not the pending request.
        ValidationError
            If *salary* is negative.
        """
        if salary < 0:
            raise ValidationError(f"salary must be non-negative (got {salary}).")
        self._take_job_offer(request_id)
        self._set_salary(float(salary))
        self._record_event(
            "new_job", f"You got a new job with salary {format_currency(salary)}!"
        )
        return float(salary)

    def cancel_job_offer(self, request_id: str) -> None:
        self._take_job_offer(request_id)

    def __repr__(self) -> str:
        return (
            f"SimulationStepper(state={self.state.value}, age={self.current_age}, "
            f"points={len(self.history)})"
        )
