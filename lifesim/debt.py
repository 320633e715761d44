"""
Debt amortization for LifeSim.

Purpose
-------
Scheduled debt repayment as a first-class yearly cash-flow line. A profile
with `debt_term_years > 0` repays its debt on a fixed monthly amortization
schedule; the engine takes each year's payments out of cash flow and
records interest and principal separately.

Formula
-------
With principal P, annual rate R (percent) and remaining term N years:

    r = R / 100 / 12,   n = 12 * N
    m = P * r * (1 + r)^n / ((1 + r)^n - 1)      (m = P / n when r == 0)

A yearly step applies twelve monthly payments of m: interest accrues on the
running balance, the remainder of the payment reduces principal. The final
scheduled year clears the balance.

Example
-------
>>> round(amortized_annual_payment(10_000, 0.0, 5), 2)
2000.0
>>> step = step_debt(10_000, 6.0, 1)
>>> step.remaining_debt, step.remaining_term
(0.0, 0)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .constants import MONTHS_PER_YEAR

__all__ = [
    "DebtStep",
    "monthly_payment",
    "amortized_annual_payment",
    "step_debt",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DebtStep:
    """One year of scheduled debt service."""

    payment: float = 0.0
    interest: float = 0.0
    principal: float = 0.0
    remaining_debt: float = 0.0
    remaining_term: int = 0


def monthly_payment(principal: float, annual_rate: float, term_years: int) -> float:
    """Fixed monthly payment that retires *principal* over *term_years*."""
    if principal <= 0 or term_years <= 0:
        return 0.0
    n = term_years * MONTHS_PER_YEAR
    r = annual_rate / 100.0 / MONTHS_PER_YEAR
    if r == 0:
        return principal / n
    growth = (1.0 + r) ** n
    return principal * r * growth / (growth - 1.0)


def amortized_annual_payment(principal: float, annual_rate: float, term_years: int) -> float:
    """Twelve monthly payments of `monthly_payment`."""
    return monthly_payment(principal, annual_rate, term_years) * MONTHS_PER_YEAR


def step_debt(balance: float, annual_rate: float, term_years: int) -> DebtStep:
    """
    Advance a debt balance by one year of scheduled payments.

    Parameters
    ----------
    balance : float
        Outstanding principal at the start of the year.
    annual_rate : float
        Annual interest rate in percent.
    term_years : int
        Remaining repayment term. 0 means no scheduled repayment, in which
        case the balance is returned untouched.

    Returns
    -------
    DebtStep
    """
    if balance <= 0 or term_years <= 0:
        return DebtStep(remaining_debt=max(0.0, balance), remaining_term=max(0, term_years))

    payment = monthly_payment(balance, annual_rate, term_years)
    r = annual_rate / 100.0 / MONTHS_PER_YEAR
    remaining = balance
    interest_paid = 0.0
    principal_paid = 0.0
    for _ in range(MONTHS_PER_YEAR):
        if remaining <= 0:
            break
        interest = remaining * r
        principal = min(remaining, payment - interest)
        remaining -= principal
        interest_paid += interest
        principal_paid += principal

    if term_years == 1 or remaining < 0.005:
        principal_paid += remaining
        remaining = 0.0

    logger.debug(
        "debt step: paid=%.2f interest=%.2f remaining=%.2f term=%d",
        interest_paid + principal_paid, interest_paid, remaining, term_years - 1,
    )
    return DebtStep(
        payment=interest_paid + principal_paid,
        interest=interest_paid,
        principal=principal_paid,
        remaining_debt=remaining,
        remaining_term=term_years - 1,
    )
