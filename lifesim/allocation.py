"""
Investment account allocation for LifeSim.

Purpose
-------
The engine tracks investments as one pooled balance. This module turns that
pool back into five virtual sub-accounts (traditional 401k, Roth 401k,
traditional IRA, Roth IRA, taxable brokerage) in proportion to the year's
contribution mix.

Algorithm
---------
Given pooled value V, starting IRA holdings H = H_trad + H_roth and the
year's contributions c_k with total C:

    P          = max(0, V - H)                 non-IRA pooled value
    401k trad  = P * (c_401k_trad + match) / C
    401k roth  = P * c_401k_roth / C
    IRA trad   = P * c_ira_trad / C + H_trad
    IRA roth   = P * c_ira_roth / C + H_roth
    taxable    = P * c_taxable / C

Employer match lands entirely in the traditional bucket. When C == 0 every
sub-balance is 0. This is a reverse allocation over a shared pool, not a
per-account ledger, so it can drift from a real contribution history over
many compounding years.

Example
-------
>>> mix = ContributionMix(traditional_401k=5_000, taxable=5_000)
>>> AccountAllocator().allocate(20_000, 0.0, mix).total
20000.0
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Dict, Optional, Tuple, Union

from .tax import cap_401k_contributions
from .utils import safe_ratio

__all__ = [
    "ContributionMix",
    "AccountBreakdown",
    "AccountAllocator",
]

IRAHoldings = Union[float, Tuple[float, float]]


@dataclass(frozen=True)
class ContributionMix:
    """
    One year of contributions per stream, in dollars.

    Attributes
    ----------
    traditional_401k, roth_401k : float
        Employee 401k deferrals (already capped to the year's limit when
        built through `from_profile`).
    employer_match : float
        Employer match, bounded by the employee deferral and the match rate.
    traditional_ira, roth_ira : float
        IRA contributions.
    taxable : float
        Taxable brokerage investing (monthly investment x 12).
    """

    traditional_401k: float = 0.0
    roth_401k: float = 0.0
    employer_match: float = 0.0
    traditional_ira: float = 0.0
    roth_ira: float = 0.0
    taxable: float = 0.0

    @property
    def total(self) -> float:
        return sum(getattr(self, f.name) for f in fields(self))

    @property
    def total_401k(self) -> float:
        return self.traditional_401k + self.roth_401k

    @property
    def total_ira(self) -> float:
        return self.traditional_ira + self.roth_ira

    @classmethod
    def from_profile(
        cls,
        person,
        year: Optional[int] = None,
        salary: Optional[float] = None,
    ) -> "ContributionMix":
        """
        Derive the year's contributions from a PersonalFinancialData.

        Parameters
        ----------
        person : PersonalFinancialData
            Source of percentages and dollar amounts.
        year : int, optional
            Year whose 401k limit applies. None means the current year.
        salary : float, optional
            Salary to apply percentages to. Defaults to person.current_salary.
        """
        if salary is None:
            salary = person.current_salary
        requested_trad = salary * person.contributions_401k_traditional / 100.0
        requested_roth = salary * person.contributions_401k_roth / 100.0
        trad, roth = cap_401k_contributions(requested_trad, requested_roth, year)
        match = min(trad + roth, salary * person.match_401k / 100.0)
        return cls(
            traditional_401k=trad,
            roth_401k=roth,
            employer_match=max(0.0, match),
            traditional_ira=float(person.ira_traditional_contribution),
            roth_ira=float(person.ira_roth_contribution),
            taxable=float(person.monthly_investment) * 12.0,
        )


@dataclass(frozen=True)
class AccountBreakdown:
    """Virtual sub-account balances derived from the pooled value."""

    traditional_401k: float = 0.0
    roth_401k: float = 0.0
    traditional_ira: float = 0.0
    roth_ira: float = 0.0
    taxable: float = 0.0

    @property
    def total(self) -> float:
        return (
            self.traditional_401k
            + self.roth_401k
            + self.traditional_ira
            + self.roth_ira
            + self.taxable
        )

    def to_dict(self) -> Dict[str, float]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


class AccountAllocator:
    """
    Reverse-allocate a pooled investment balance across account types.

    Stateless; one instance can be shared by the engine and the summary
    generator.
    """

    def allocate(
        self,
        total_investment_value: float,
        starting_ira_holdings: IRAHoldings,
        mix: ContributionMix,
    ) -> AccountBreakdown:
        """
        Parameters
        ----------
        total_investment_value : float
            Pooled investment value V.
        starting_ira_holdings : float or (float, float)
            IRA holdings tracked outside the pool. A bare float is split
            evenly between traditional and Roth when added back.
        mix : ContributionMix
            This year's contributions.

        Returns
        -------
        AccountBreakdown
            All zeros when the mix totals 0.
        """
        if isinstance(starting_ira_holdings, tuple):
            ira_trad, ira_roth = starting_ira_holdings
        else:
            ira_trad = ira_roth = float(starting_ira_holdings) / 2.0
        ira_total = ira_trad + ira_roth

        total_contributions = mix.total
        if total_contributions <= 0:
            return AccountBreakdown()

        non_ira = max(0.0, total_investment_value - ira_total)

        def share(amount: float) -> float:
            return non_ira * safe_ratio(amount, total_contributions)

        return AccountBreakdown(
            traditional_401k=share(mix.traditional_401k + mix.employer_match),
            roth_401k=share(mix.roth_401k),
            traditional_ira=share(mix.traditional_ira) + ira_trad,
            roth_ira=share(mix.roth_ira) + ira_roth,
            taxable=share(mix.taxable),
        )
