"""
Tax calculation for LifeSim.

Purpose
-------
Pure functions computing a simplified yearly tax picture for a salaried
individual: federal progressive tax, a flat state rate, payroll taxes and
401k/IRA effects. Nothing here raises or keeps state; non-positive salary
short-circuits to an all-zero result and contribution excess is clamped.

Model
-----
Given salary S, traditional/Roth 401k contributions (t, r), traditional IRA
contribution i and the year's combined 401k limit L:

    k        = min(1, L / (t + r))             (1 when t + r == 0)
    t', r'   = k * t, k * r                     ratio preserved
    taxable  = S - t' - i
    federal  = Σ_b rate_b * |taxable ∩ bracket_b|
    state    = taxable * state_rate
    SS       = min(S, wage_base) * 6.2%
    medicare = S * 1.45% + max(0, S - 200k) * 0.9%
    misc     = S * 0.5%
    total    = federal + state + SS + medicare + misc
    net      = S - total - (t' + r')

Example
-------
>>> result = calculate_taxes(100_000, "Texas")
>>> result.taxable_income, result.state_tax, result.social_security
(100000.0, 0.0, 6200.0)
>>> contribution_limit(2026)
24000.0
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import date
from typing import Dict, Optional, Tuple

from .constants import (
    FEDERAL_TAX_BRACKETS,
    STATE_TAX_RATES,
    SOCIAL_SECURITY_RATE,
    SOCIAL_SECURITY_WAGE_BASE,
    MEDICARE_RATE,
    MEDICARE_ADDITIONAL_RATE,
    MEDICARE_ADDITIONAL_THRESHOLD,
    MISC_DEDUCTION_RATE,
    BASE_401K_YEAR,
    BASE_401K_LIMIT,
    ANNUAL_401K_INCREASE,
    IRA_LIMIT_UNDER_50,
    IRA_LIMIT_50_PLUS,
    IRA_CATCH_UP_AGE,
    ROTH_IRA_PHASE_OUT,
)

__all__ = [
    "TaxCalculationResult",
    "calculate_taxes",
    "contribution_limit",
    "cap_401k_contributions",
    "federal_income_tax",
    "ira_limit",
    "max_roth_ira_contribution",
    "effective_tax_rate",
    "take_home_pay",
]


@dataclass(frozen=True)
class TaxCalculationResult:
    """Detailed yearly tax breakdown. Rates are percentages (0-100)."""

    total_tax: float = 0.0
    after_tax_income: float = 0.0
    effective_rate: float = 0.0
    federal_tax: float = 0.0
    state_tax: float = 0.0
    social_security: float = 0.0
    medicare: float = 0.0
    misc_deductions: float = 0.0
    contribution_401k_traditional: float = 0.0
    contribution_401k_roth: float = 0.0
    total_contribution_401k: float = 0.0
    ira_traditional_contribution: float = 0.0
    ira_roth_contribution: float = 0.0
    total_ira_contribution: float = 0.0
    taxable_income: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


# ---------------------------------------------------------------------------
# Limits
# ---------------------------------------------------------------------------

def contribution_limit(year: Optional[int] = None) -> float:
    """
    Combined 401k employee contribution limit for *year*.

    Linear in the year around the 2025 base, in both directions.
    `None` means the current calendar year.

    Examples
    --------
    >>> contribution_limit(2025), contribution_limit(2026), contribution_limit(2023)
    (23500.0, 24000.0, 22500.0)
    """
    if year is None:
        year = date.today().year
    return BASE_401K_LIMIT + ANNUAL_401K_INCREASE * (year - BASE_401K_YEAR)


def cap_401k_contributions(
    traditional: float,
    roth: float,
    year: Optional[int] = None,
) -> Tuple[float, float]:
    """
    Scale both 401k streams by one factor so their sum fits the limit.

    Returns the capped ``(traditional, roth)`` pair. When the combined
    amount is already within the limit (or zero) the inputs come back
    unchanged.
    """
    total = traditional + roth
    limit = contribution_limit(year)
    if total <= 0 or total <= limit:
        return float(traditional), float(roth)
    factor = limit / total
    return traditional * factor, roth * factor


def ira_limit(age: int) -> float:
    """Annual IRA contribution limit, with the catch-up amount from age 50."""
    return IRA_LIMIT_50_PLUS if age >= IRA_CATCH_UP_AGE else IRA_LIMIT_UNDER_50


def max_roth_ira_contribution(
    income: float,
    age: int,
    marital_status: str = "single",
) -> float:
    """
    Maximum Roth IRA contribution after the income phase-out.

    Unknown filing statuses fall back to the single-filer table.
    """
    table = ROTH_IRA_PHASE_OUT.get(marital_status, ROTH_IRA_PHASE_OUT["single"])
    catch_up = age >= IRA_CATCH_UP_AGE
    for lower, upper, max_contribution, max_contribution_50 in table:
        if lower <= income < upper:
            return max_contribution_50 if catch_up else max_contribution
    return 0.0


# ---------------------------------------------------------------------------
# Core calculation
# ---------------------------------------------------------------------------

def federal_income_tax(taxable_income: float) -> float:
    """Marginal progressive tax over FEDERAL_TAX_BRACKETS (no rounding)."""
    tax = 0.0
    remaining = taxable_income
    for lower, upper, rate in FEDERAL_TAX_BRACKETS:
        if remaining <= 0:
            break
        in_bracket = min(remaining, upper - lower)
        tax += in_bracket * rate
        remaining -= in_bracket
    return tax


def calculate_taxes(
    annual_salary: float,
    state: str = "",
    contribution_401k_traditional: float = 0.0,
    contribution_401k_roth: float = 0.0,
    ira_traditional_contribution: float = 0.0,
    ira_roth_contribution: float = 0.0,
    year: Optional[int] = None,
) -> TaxCalculationResult:
    """
    Compute the yearly tax breakdown.

    Parameters
    ----------
    annual_salary : float
        Gross salary. Values <= 0 return an all-zero result.
    state : str, default ""
        Full state name (e.g. "California"). Unknown states pay no state tax.
    contribution_401k_traditional, contribution_401k_roth : float
        Requested employee 401k contributions in dollars, capped together
        at `contribution_limit(year)` with their ratio preserved.
    ira_traditional_contribution, ira_roth_contribution : float
        IRA contributions in dollars. Only the traditional one reduces
        taxable income.
    year : int, optional
        Tax year for the 401k limit. Defaults to the current year.

    Returns
    -------
    TaxCalculationResult
    """
    if annual_salary <= 0:
        return TaxCalculationResult()

    capped_traditional, capped_roth = cap_401k_contributions(
        contribution_401k_traditional, contribution_401k_roth, year
    )
    capped_total = capped_traditional + capped_roth

    taxable_income = annual_salary - capped_traditional - ira_traditional_contribution

    federal_tax = federal_income_tax(taxable_income)
    state_tax = taxable_income * STATE_TAX_RATES.get(state, 0.0)

    # Payroll taxes use gross salary; 401k deferrals do not reduce them.
    social_security = min(annual_salary, SOCIAL_SECURITY_WAGE_BASE) * SOCIAL_SECURITY_RATE
    medicare = (
        annual_salary * MEDICARE_RATE
        + max(0.0, annual_salary - MEDICARE_ADDITIONAL_THRESHOLD) * MEDICARE_ADDITIONAL_RATE
    )
    misc_deductions = annual_salary * MISC_DEDUCTION_RATE

    total_tax = federal_tax + state_tax + social_security + medicare + misc_deductions
    after_tax_income = annual_salary - total_tax - capped_total
    effective_rate = (total_tax + capped_total) / annual_salary * 100.0

    return TaxCalculationResult(
        total_tax=total_tax,
        after_tax_income=after_tax_income,
        effective_rate=effective_rate,
        federal_tax=federal_tax,
        state_tax=state_tax,
        social_security=social_security,
        medicare=medicare,
        misc_deductions=misc_deductions,
        contribution_401k_traditional=capped_traditional,
        contribution_401k_roth=capped_roth,
        total_contribution_401k=capped_total,
        ira_traditional_contribution=float(ira_traditional_contribution),
        ira_roth_contribution=float(ira_roth_contribution),
        total_ira_contribution=float(ira_traditional_contribution + ira_roth_contribution),
        taxable_income=float(taxable_income),
    )


def effective_tax_rate(
    annual_salary: float,
    state: str = "",
    contribution_401k_traditional: float = 0.0,
    contribution_401k_roth: float = 0.0,
    year: Optional[int] = None,
) -> float:
    """Effective rate (percent) including 401k deferrals."""
    return calculate_taxes(
        annual_salary,
        state,
        contribution_401k_traditional,
        contribution_401k_roth,
        year=year,
    ).effective_rate


def take_home_pay(
    annual_salary: float,
    state: str = "",
    contribution_401k_traditional: float = 0.0,
    contribution_401k_roth: float = 0.0,
    year: Optional[int] = None,
) -> float:
    """After-tax income net of 401k contributions."""
    return calculate_taxes(
        annual_salary,
        state,
        contribution_401k_traditional,
        contribution_401k_roth,
        year=year,
    ).after_tax_income
