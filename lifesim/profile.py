"""
Personal profile and aggregate financial state for LifeSim.

Purpose
-------
Holds the host-owned, mutable data the engine reads every tick:

- PersonalFinancialData:
    The user's profile: age, salary, location, contribution settings, cash
    balances per bank account, holdings per investment account, debt and
    retirement parameters.

- FinancialState:
    Aggregates derived from the profile (pooled investment value, living
    expenses, net worth) that the host keeps alongside it.

The engine never assigns attributes on these objects. It proposes deltas
(see `lifesim.types`) and the host applies them, typically with
`apply_changes`.

Example
-------
>>> person = PersonalFinancialData(age=30, current_salary=85_000, state="Texas")
>>> person.total_cash
0.0
>>> apply_changes(person, {"savings": 5_000.0})
>>> person.total_cash
5000.0
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Any, Literal, Mapping, Optional

from .expenses import living_expenses_for

__all__ = [
    "MaritalStatus",
    "PersonalFinancialData",
    "FinancialState",
    "apply_changes",
]

MaritalStatus = Literal["single", "married-jointly", "married-separately"]


@dataclass
class PersonalFinancialData:
    """
    Mutable personal profile.

    Percent fields (`match_401k`, `contributions_401k_*`,
    `debt_interest_rate`) are expressed in 0-100 units; IRA contributions
    are annual dollar amounts and `monthly_investment` is dollars per month.

    `savings` is the unallocated cash pool that receives each year's cash
    flow; the three bank accounts are balances the user placed explicitly.
    """

    age: int = 30
    current_salary: float = 0.0
    state: str = ""
    marital_status: MaritalStatus = "single"

    # Contribution settings
    match_401k: float = 0.0
    contributions_401k_traditional: float = 0.0
    contributions_401k_roth: float = 0.0
    ira_traditional_contribution: float = 0.0
    ira_roth_contribution: float = 0.0
    monthly_investment: float = 0.0

    # Cash
    savings: float = 0.0
    checking_account: float = 0.0
    savings_account: float = 0.0
    hysa_account: float = 0.0

    # Holdings
    investments: float = 0.0
    the_401k_traditional_holdings: float = 0.0
    the_401k_roth_holdings: float = 0.0
    ira_traditional_holdings: float = 0.0
    ira_roth_holdings: float = 0.0

    # Debt
    debt_amount: float = 0.0
    debt_interest_rate: float = 0.0
    debt_term_years: int = 0

    # Retirement and planning
    retirement_age: int = 65
    retirement_goal: float = 0.0
    emergency_fund_months: float = 6.0

    # Living-expense overrides (None = state average)
    monthly_rent: Optional[float] = None
    weekly_groceries: Optional[float] = None

    @property
    def total_cash(self) -> float:
        """Unallocated savings plus every bank account."""
        return (
            self.savings
            + self.checking_account
            + self.savings_account
            + self.hysa_account
        )

    @property
    def total_ira_holdings(self) -> float:
        return self.ira_traditional_holdings + self.ira_roth_holdings

    @property
    def total_investment_holdings(self) -> float:
        """Taxable investments plus every retirement-account balance."""
        return (
            self.investments
            + self.the_401k_traditional_holdings
            + self.the_401k_roth_holdings
            + self.total_ira_holdings
        )

    def copy(self) -> "PersonalFinancialData":
        return replace(self)


@dataclass
class FinancialState:
    """
    Host-side aggregates.

    `investment_account_value` is the pooled investment balance the engine
    compounds each year; `investments` mirrors it for older readers.
    """

    current_salary: float = 0.0
    net_worth: float = 0.0
    annual_expenses: float = 0.0
    investments: float = 0.0
    investment_account_value: float = 0.0

    @classmethod
    def from_profile(cls, person: PersonalFinancialData) -> "FinancialState":
        """
        Aggregates implied by a fresh profile.

        The pooled investment value starts as every holding on the profile;
        annual expenses start at the profile's living expenses.
        """
        pooled = person.total_investment_holdings
        return cls(
            current_salary=person.current_salary,
            net_worth=person.total_cash + pooled - person.debt_amount,
            annual_expenses=living_expenses_for(person).annual_total,
            investments=pooled,
            investment_account_value=pooled,
        )

    def copy(self) -> "FinancialState":
        return replace(self)


def apply_changes(target: Any, changes: Mapping[str, Any]) -> None:
    """Assign each key of *changes* onto the dataclass *target*.

    Unknown keys raise AttributeError so typos in update payloads surface
    immediately instead of silently creating new attributes.
    """
    known = {f.name for f in fields(target)}
    for key, value in changes.items():
        if key not in known:
            raise AttributeError(
                f"{type(target).__name__} has no field '{key}'."
            )
        setattr(target, key, value)
