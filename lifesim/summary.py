"""
Year-end summaries for LifeSim.

Purpose
-------
Turns two consecutive HistoricalDataPoints, plus the profile, aggregates,
economic state and tax picture of the closing year, into a read-only
YearlySummary:

- Net-worth change (absolute and percent)
- Cash-flow waterfall: take-home - expenses - investing = surplus
- Bank balances and interest accrued at fixed APYs
- Investment sub-account snapshot (AccountAllocator)
- Achievements: one-shot records for this year's transition
- Recommendations: re-evaluated every year

Rules
-----
Achievements and recommendations are ordered lists of ``(predicate,
builder)`` pairs evaluated against a `SummaryFacts` value. Adding a rule
means appending a pair; evaluation order is list order.

Nothing here mutates its inputs.

Example
-------
>>> summary = generate_yearly_summary(2025, prev_point, point, person,
...                                   financials, economic, tax)
>>> [a.id for a in summary.achievements]
['networth_10000', 'positive_growth']
"""

from __future__ import annotations

import datetime
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from .allocation import AccountAllocator, AccountBreakdown, ContributionMix
from .constants import (
    CHECKING_APY,
    SAVINGS_APY,
    HYSA_APY,
    NET_WORTH_MILESTONES,
    EMERGENCY_FUND_TARGET_MONTHS,
    IDLE_SAVINGS_THRESHOLD,
    TARGET_INVESTMENT_RATIO,
    MONTHS_PER_YEAR,
)
from .utils import format_currency, safe_ratio

__all__ = [
    "Achievement",
    "Recommendation",
    "BankAccounts",
    "InterestEarned",
    "EconomicSnapshot",
    "YearlySummary",
    "SummaryFacts",
    "ACHIEVEMENT_RULES",
    "RECOMMENDATION_RULES",
    "generate_yearly_summary",
    "year_over_year_changes",
]


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Achievement:
    id: str
    title: str
    description: str
    category: str
    icon: str
    value: Optional[float] = None
    is_new_this_year: bool = True


@dataclass(frozen=True)
class Recommendation:
    id: str
    title: str
    description: str
    priority: str
    category: str
    actionable: bool
    icon: str


@dataclass(frozen=True)
class BankAccounts:
    """
    Year-end cash by account type.

    `cash_pool` is the unallocated cash that receives each year's cash
    flow. It earns no interest and stays out of the account-placement
    rules; `total_cash` still includes it, matching the profile's total.
    """

    savings: float = 0.0
    checking: float = 0.0
    hysa: float = 0.0
    cash_pool: float = 0.0

    @property
    def total_cash(self) -> float:
        return self.savings + self.checking + self.hysa + self.cash_pool

    @classmethod
    def from_profile(cls, person) -> "BankAccounts":
        return cls(
            savings=person.savings_account,
            checking=person.checking_account,
            hysa=person.hysa_account,
            cash_pool=person.savings,
        )


@dataclass(frozen=True)
class InterestEarned:
    savings: float = 0.0
    checking: float = 0.0
    hysa: float = 0.0

    @property
    def total(self) -> float:
        return self.savings + self.checking + self.hysa

    @classmethod
    def accrue(cls, accounts: BankAccounts) -> "InterestEarned":
        return cls(
            savings=accounts.savings * SAVINGS_APY,
            checking=accounts.checking * CHECKING_APY,
            hysa=accounts.hysa * HYSA_APY,
        )


@dataclass(frozen=True)
class EconomicSnapshot:
    inflation_rate: float
    stock_market_growth: float
    economic_cycle: str


@dataclass(frozen=True)
class YearlySummary:
    """
    Read-only report on one completed simulated year.

    Attributes
    ----------
    year : int
        Calendar year the summary covers.
    age : int
        Age at the end of the year.
    start_date, end_date : datetime.date
        Simulated dates of the two data points compared.
    starting_net_worth, ending_net_worth, net_worth_change : float
    net_worth_change_percentage : float
        Percent change; 0 when the starting net worth is not positive.
    take_home_pay, total_expenses, total_investment_contributions : float
    cash_flow_to_savings : float
        take_home_pay - total_expenses - total_investment_contributions.
    bank_accounts : BankAccounts
    investments_total : float
        Pooled investment value at year end.
    investment_breakdown : AccountBreakdown
    interest_earned : InterestEarned
    emergency_fund_months : float
        Months of expenses covered by total cash (0 when expenses are 0).
    achievements, recommendations : tuple
    economic : EconomicSnapshot
    """

    year: int
    age: int
    start_date: datetime.date
    end_date: datetime.date

    starting_net_worth: float
    ending_net_worth: float
    net_worth_change: float
    net_worth_change_percentage: float

    take_home_pay: float
    total_expenses: float
    total_investment_contributions: float
    cash_flow_to_savings: float

    bank_accounts: BankAccounts
    investments_total: float
    investment_breakdown: AccountBreakdown
    interest_earned: InterestEarned
    emergency_fund_months: float

    achievements: Tuple[Achievement, ...] = ()
    recommendations: Tuple[Recommendation, ...] = ()
    economic: Optional[EconomicSnapshot] = None


# ---------------------------------------------------------------------------
# Rule evaluation
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SummaryFacts:
    """Everything the rule predicates may look at."""

    ending_net_worth: float
    previous_net_worth: float
    net_worth_change: float
    bank_accounts: BankAccounts
    monthly_expenses: float
    emergency_fund_months: float
    previous_emergency_fund_months: float
    investments_total: float

    @property
    def investment_ratio(self) -> float:
        total_assets = self.bank_accounts.total_cash + self.investments_total
        return safe_ratio(self.investments_total, total_assets)


AchievementRule = Tuple[Callable[[SummaryFacts], bool], Callable[[SummaryFacts], Achievement]]
RecommendationRule = Tuple[
    Callable[[SummaryFacts], bool], Callable[[SummaryFacts], Recommendation]
]


def _net_worth_rule(milestone: float) -> AchievementRule:
    def crossed(f: SummaryFacts) -> bool:
        return f.ending_net_worth >= milestone and f.previous_net_worth < milestone

    def build(f: SummaryFacts) -> Achievement:
        return Achievement(
            id=f"networth_{int(milestone)}",
            title="Net Worth Milestone!",
            description=f"Reached {format_currency(milestone)} net worth",
            category="milestone",
            icon="target",
            value=milestone,
        )

    return crossed, build


ACHIEVEMENT_RULES: List[AchievementRule] = [
    *(_net_worth_rule(m) for m in NET_WORTH_MILESTONES),
    (
        lambda f: f.net_worth_change > 0,
        lambda f: Achievement(
            id="positive_growth",
            title="Wealth Builder",
            description=f"Increased net worth by {format_currency(f.net_worth_change)}",
            category="savings",
            icon="chart",
            value=f.net_worth_change,
        ),
    ),
    (
        lambda f: (
            f.emergency_fund_months >= EMERGENCY_FUND_TARGET_MONTHS
            and f.previous_emergency_fund_months < EMERGENCY_FUND_TARGET_MONTHS
        ),
        lambda f: Achievement(
            id="emergency_fund_3",
            title="3-Month Emergency Fund",
            description="Built a solid financial safety net",
            category="emergency_fund",
            icon="shield",
        ),
    ),
    (
        lambda f: f.bank_accounts.hysa > f.bank_accounts.savings + f.bank_accounts.checking,
        lambda f: Achievement(
            id="hysa_optimizer",
            title="Rate Optimizer",
            description="Smart money placement in high-yield savings",
            category="optimization",
            icon="trophy",
        ),
    ),
]


def _move_to_hysa(f: SummaryFacts) -> Recommendation:
    idle = f.bank_accounts.savings
    extra = idle * (HYSA_APY - SAVINGS_APY)
    return Recommendation(
        id="move_to_hysa",
        title="Maximize Your Interest",
        description=(
            f"Move {format_currency(idle)} from Savings to HYSA to earn "
            f"{format_currency(extra)} more per year"
        ),
        priority="high",
        category="optimization",
        actionable=True,
        icon="money",
    )


def _build_emergency_fund(f: SummaryFacts) -> Recommendation:
    needed = f.monthly_expenses * EMERGENCY_FUND_TARGET_MONTHS - f.bank_accounts.total_cash
    return Recommendation(
        id="build_emergency_fund",
        title="Build Emergency Fund",
        description=f"Save {format_currency(max(0.0, needed))} more to reach 3 months of expenses",
        priority="high",
        category="strategy",
        actionable=True,
        icon="shield",
    )


RECOMMENDATION_RULES: List[RecommendationRule] = [
    (lambda f: f.bank_accounts.savings > IDLE_SAVINGS_THRESHOLD, _move_to_hysa),
    (lambda f: f.emergency_fund_months < EMERGENCY_FUND_TARGET_MONTHS, _build_emergency_fund),
    (
        lambda f: (
            f.investment_ratio < TARGET_INVESTMENT_RATIO
            and f.emergency_fund_months >= EMERGENCY_FUND_TARGET_MONTHS
        ),
        lambda f: Recommendation(
            id="increase_investments",
            title="Consider More Investing",
            description="With a solid emergency fund, consider increasing investment contributions",
            priority="medium",
            category="strategy",
            actionable=True,
            icon="chart",
        ),
    ),
    (
        lambda f: f.net_worth_change < 0,
        lambda f: Recommendation(
            id="stay_course",
            title="Stay the Course",
            description="Market volatility is normal. Keep investing regularly for long-term growth",
            priority="medium",
            category="strategy",
            actionable=False,
            icon="muscle",
        ),
    ),
]


def _evaluate(rules, facts: SummaryFacts) -> tuple:
    return tuple(build(facts) for predicate, build in rules if predicate(facts))


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------

def generate_yearly_summary(
    year: int,
    previous,
    current,
    person,
    financials,
    economic,
    tax,
    previous_summary: Optional[YearlySummary] = None,
    allocator: Optional[AccountAllocator] = None,
) -> YearlySummary:
    """
    Build the summary of the year between two data points.

    Parameters
    ----------
    year : int
        Calendar year being summarized.
    previous, current : HistoricalDataPoint
        Start and end of the year.
    person : PersonalFinancialData
        Profile at year end.
    financials : FinancialState
        Aggregates at year end (annual expenses drive the emergency-fund
        coverage: monthly expenses = annual / 12).
    economic : EconomicState
        Economic state of the closing year.
    tax : TaxCalculationResult
        Tax picture of the closing year.
    previous_summary : YearlySummary, optional
        Last year's summary. When given, net-worth and emergency-fund
        crossings are measured against it; otherwise against *previous*.
    allocator : AccountAllocator, optional

    Returns
    -------
    YearlySummary
    """
    allocator = allocator or AccountAllocator()

    net_worth_change = current.net_worth - previous.net_worth
    if previous.net_worth > 0:
        change_pct = net_worth_change / abs(previous.net_worth) * 100.0
    else:
        change_pct = 0.0

    bank_accounts = BankAccounts.from_profile(person)
    interest = InterestEarned.accrue(bank_accounts)

    take_home = tax.after_tax_income
    total_expenses = financials.annual_expenses
    investing = (
        person.monthly_investment * MONTHS_PER_YEAR
        + person.ira_traditional_contribution
        + person.ira_roth_contribution
    )
    surplus = take_home - total_expenses - investing

    mix = ContributionMix.from_profile(person, year=year)
    breakdown = allocator.allocate(
        current.investments,
        (person.ira_traditional_holdings, person.ira_roth_holdings),
        mix,
    )

    monthly_expenses = total_expenses / MONTHS_PER_YEAR
    coverage = safe_ratio(bank_accounts.total_cash, monthly_expenses)
    if previous_summary is not None:
        previous_cash = previous_summary.bank_accounts.total_cash
        previous_net_worth = previous_summary.ending_net_worth
    else:
        previous_cash = previous.cash
        previous_net_worth = previous.net_worth
    previous_coverage = safe_ratio(previous_cash, monthly_expenses)

    facts = SummaryFacts(
        ending_net_worth=current.net_worth,
        previous_net_worth=previous_net_worth,
        net_worth_change=net_worth_change,
        bank_accounts=bank_accounts,
        monthly_expenses=monthly_expenses,
        emergency_fund_months=coverage,
        previous_emergency_fund_months=previous_coverage,
        investments_total=current.investments,
    )

    return YearlySummary(
        year=year,
        age=current.age,
        start_date=previous.timestamp,
        end_date=current.timestamp,
        starting_net_worth=previous.net_worth,
        ending_net_worth=current.net_worth,
        net_worth_change=net_worth_change,
        net_worth_change_percentage=change_pct,
        take_home_pay=take_home,
        total_expenses=total_expenses,
        total_investment_contributions=investing,
        cash_flow_to_savings=surplus,
        bank_accounts=bank_accounts,
        investments_total=current.investments,
        investment_breakdown=breakdown,
        interest_earned=interest,
        emergency_fund_months=coverage,
        achievements=_evaluate(ACHIEVEMENT_RULES, facts),
        recommendations=_evaluate(RECOMMENDATION_RULES, facts),
        economic=EconomicSnapshot(
            inflation_rate=economic.current_inflation_rate,
            stock_market_growth=economic.stock_market_growth,
            economic_cycle=economic.economic_cycle,
        ),
    )


def year_over_year_changes(
    current: YearlySummary,
    previous: Optional[YearlySummary] = None,
) -> Dict[str, float]:
    """
    Deltas between two consecutive summaries.

    Without a previous summary the current year's own figures are returned
    (net-worth change, year-end cash, investments, expenses).
    """
    if previous is None:
        return {
            "net_worth": current.net_worth_change,
            "savings": current.bank_accounts.total_cash,
            "investments": current.investments_total,
            "expenses": current.total_expenses,
        }
    return {
        "net_worth": current.ending_net_worth - previous.ending_net_worth,
        "savings": current.bank_accounts.total_cash - previous.bank_accounts.total_cash,
        "investments": current.investments_total - previous.investments_total,
        "expenses": current.total_expenses - previous.total_expenses,
    }
