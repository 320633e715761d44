"""
Living-expense modeling for LifeSim.

Purpose
-------
Derives the yearly cost of living that the engine subtracts from take-home
pay. Two components are modeled:

- Rent: monthly, state average unless the profile overrides it
- Groceries: weekly, state average unless the profile overrides it

The annual total is:
    E = rent * 12 + groceries * 52

Each simulated year the engine inflates the host's annual expense figure by
that year's inflation rate: E_{t+1} = E_t * (1 + pi_t).

Example
-------
>>> exp = state_living_expenses("Texas")
>>> exp.monthly_rent, exp.weekly_groceries
(1200.0, 310.0)
>>> exp.annual_total
30520.0
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from .constants import (
    STATE_RENT_DATA,
    STATE_GROCERY_DATA,
    MONTHS_PER_YEAR,
    WEEKS_PER_YEAR,
)
from .utils import check_non_negative

__all__ = [
    "LivingExpenses",
    "state_living_expenses",
    "living_expenses_for",
    "inflate_annual_expenses",
]


@dataclass(frozen=True)
class LivingExpenses:
    """Monthly rent and weekly groceries for one person."""

    monthly_rent: float = 0.0
    weekly_groceries: float = 0.0

    def __post_init__(self):
        check_non_negative("monthly_rent", self.monthly_rent)
        check_non_negative("weekly_groceries", self.weekly_groceries)

    @property
    def annual_rent(self) -> float:
        return self.monthly_rent * MONTHS_PER_YEAR

    @property
    def annual_groceries(self) -> float:
        return self.weekly_groceries * WEEKS_PER_YEAR

    @property
    def annual_total(self) -> float:
        return self.annual_rent + self.annual_groceries

    @property
    def monthly_total(self) -> float:
        return self.annual_total / MONTHS_PER_YEAR

    def inflated(self, rate: float) -> "LivingExpenses":
        """Both components scaled by (1 + rate)."""
        factor = 1.0 + rate
        return replace(
            self,
            monthly_rent=self.monthly_rent * factor,
            weekly_groceries=self.weekly_groceries * factor,
        )


def state_living_expenses(state: str) -> LivingExpenses:
    """State averages; unknown or empty states cost nothing."""
    return LivingExpenses(
        monthly_rent=float(STATE_RENT_DATA.get(state, 0.0)),
        weekly_groceries=float(STATE_GROCERY_DATA.get(state, 0.0)),
    )


def living_expenses_for(person) -> LivingExpenses:
    """
    Living expenses of a PersonalFinancialData.

    `monthly_rent` / `weekly_groceries` on the profile replace the state
    average component by component when they are set.
    """
    base = state_living_expenses(person.state)
    rent = person.monthly_rent if person.monthly_rent is not None else base.monthly_rent
    groceries = (
        person.weekly_groceries
        if person.weekly_groceries is not None
        else base.weekly_groceries
    )
    return LivingExpenses(monthly_rent=float(rent), weekly_groceries=float(groceries))


def inflate_annual_expenses(annual_expenses: float, inflation_rate: float) -> float:
    """One year of full inflation on an annual expense figure."""
    return annual_expenses * (1.0 + inflation_rate)
