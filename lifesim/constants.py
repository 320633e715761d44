"""
Global constants for LifeSim.

Purpose
-------
Centralizes the simplified tax tables, contribution limits, account APYs,
milestone ages and economic defaults used throughout the engine. All values
are simplified constants; none of them claim regulatory accuracy.

Usage
-----
>>> from lifesim.constants import FEDERAL_TAX_BRACKETS, BASE_401K_LIMIT
>>> BASE_401K_LIMIT
23500.0

Categories
----------
- Taxes: federal brackets, state rates, payroll taxes
- Retirement: 401k/IRA limits, Roth IRA phase-out tables
- Banking: APYs per cash account type
- Simulation: cadence, milestone ages, event list size
- Economy: initial economic state, simplified return model, business cycle
- Expenses: state-average rent and grocery costs
"""

from typing import Dict, Tuple

__all__ = [
    # Taxes
    "FEDERAL_TAX_BRACKETS",
    "STATE_TAX_RATES",
    "SOCIAL_SECURITY_RATE",
    "SOCIAL_SECURITY_WAGE_BASE",
    "MEDICARE_RATE",
    "MEDICARE_ADDITIONAL_RATE",
    "MEDICARE_ADDITIONAL_THRESHOLD",
    "MISC_DEDUCTION_RATE",
    # Retirement
    "BASE_401K_YEAR",
    "BASE_401K_LIMIT",
    "ANNUAL_401K_INCREASE",
    "IRA_LIMIT_UNDER_50",
    "IRA_LIMIT_50_PLUS",
    "IRA_CATCH_UP_AGE",
    "ROTH_IRA_PHASE_OUT",
    # Banking
    "CHECKING_APY",
    "SAVINGS_APY",
    "HYSA_APY",
    # Simulation
    "DEFAULT_TICK_INTERVAL",
    "DEFAULT_SEED",
    "MAX_RECENT_EVENTS",
    "SALARY_INFLATION_PASS_THROUGH",
    "RETIREMENT_MILESTONES",
    "PROMOTION_RAISE",
    "DEMOTION_CUT",
    "MONTHS_PER_YEAR",
    "WEEKS_PER_YEAR",
    # Economy
    "INITIAL_INFLATION_RATE",
    "INITIAL_STOCK_MARKET_INDEX",
    "INITIAL_STOCK_MARKET_GROWTH",
    "INFLATION_MEAN",
    "INFLATION_SPREAD",
    "SP500_RETURN",
    "TREASURIES_RETURN",
    "BONDS_RETURN",
    "TECH_RETURN_RANGE",
    "ECONOMIC_CYCLES",
    "CYCLE_TRANSITIONS",
    "CYCLE_MIN_DURATION",
    "CYCLE_INFLATION",
    "CYCLE_STOCK_GROWTH",
    "CYCLE_MARKET_VOLATILITY",
    "DEFLATION_FLOOR",
    # Summary rules
    "NET_WORTH_MILESTONES",
    "EMERGENCY_FUND_TARGET_MONTHS",
    "IDLE_SAVINGS_THRESHOLD",
    "TARGET_INVESTMENT_RATIO",
    # Expenses
    "STATE_RENT_DATA",
    "STATE_GROCERY_DATA",
]


# =============================================================================
# Taxes (2025, single filer, simplified)
# =============================================================================

FEDERAL_TAX_BRACKETS: Tuple[Tuple[float, float, float], ...] = (
    (0.0, 11_925.0, 0.10),
    (11_925.0, 48_475.0, 0.12),
    (48_475.0, 103_350.0, 0.22),
    (103_350.0, 197_300.0, 0.24),
    (197_300.0, 250_525.0, 0.32),
    (250_525.0, 626_350.0, 0.35),
    (626_350.0, float("inf"), 0.37),
)
"""Progressive federal brackets as (lower, upper, marginal rate)."""

STATE_TAX_RATES: Dict[str, float] = {
    "Alabama": 0.035, "Alaska": 0.0, "Arizona": 0.025, "Arkansas": 0.0295,
    "California": 0.067, "Colorado": 0.044, "Connecticut": 0.045,
    "Delaware": 0.044, "District of Columbia": 0.074, "Florida": 0.0,
    "Georgia": 0.0539, "Hawaii": 0.062, "Idaho": 0.05695, "Illinois": 0.0495,
    "Indiana": 0.03, "Iowa": 0.038, "Kansas": 0.054, "Kentucky": 0.04,
    "Louisiana": 0.03, "Maine": 0.065, "Maryland": 0.039,
    "Massachusetts": 0.07, "Michigan": 0.0425, "Minnesota": 0.076,
    "Mississippi": 0.044, "Missouri": 0.035, "Montana": 0.053,
    "Nebraska": 0.038, "Nevada": 0.0, "New Hampshire": 0.0,
    "New Jersey": 0.061, "New Mexico": 0.037, "New York": 0.075,
    "North Carolina": 0.0425, "North Dakota": 0.0225, "Ohio": 0.031,
    "Oklahoma": 0.025, "Oregon": 0.073, "Pennsylvania": 0.0307,
    "Rhode Island": 0.049, "South Carolina": 0.031, "South Dakota": 0.0,
    "Tennessee": 0.0, "Texas": 0.0, "Utah": 0.0455, "Vermont": 0.061,
    "Virginia": 0.039, "Washington": 0.0, "West Virginia": 0.035,
    "Wisconsin": 0.056, "Wyoming": 0.0,
}
"""Flat state income tax rate applied to federal taxable income."""

SOCIAL_SECURITY_RATE: float = 0.062
SOCIAL_SECURITY_WAGE_BASE: float = 160_200.0
"""Gross salary above this amount is not subject to Social Security."""

MEDICARE_RATE: float = 0.0145
MEDICARE_ADDITIONAL_RATE: float = 0.009
MEDICARE_ADDITIONAL_THRESHOLD: float = 200_000.0
"""Gross salary above this amount pays the additional Medicare surtax."""

MISC_DEDUCTION_RATE: float = 0.005
"""Miscellaneous payroll deductions as a fraction of gross salary."""


# =============================================================================
# Retirement accounts
# =============================================================================

BASE_401K_YEAR: int = 2025
BASE_401K_LIMIT: float = 23_500.0
ANNUAL_401K_INCREASE: float = 500.0
"""The combined 401k limit moves linearly by this amount per year."""

IRA_LIMIT_UNDER_50: float = 7_000.0
IRA_LIMIT_50_PLUS: float = 8_000.0
IRA_CATCH_UP_AGE: int = 50

ROTH_IRA_PHASE_OUT: Dict[str, Tuple[Tuple[float, float, float, float], ...]] = {
    "single": (
        (0.0, 150_000.0, 7_000.0, 8_000.0),
        (150_000.0, 151_500.0, 6_300.0, 7_200.0),
        (151_500.0, 153_000.0, 5_600.0, 6_400.0),
        (153_000.0, 154_500.0, 4_900.0, 5_600.0),
        (154_500.0, 156_000.0, 4_200.0, 4_800.0),
        (156_000.0, 157_500.0, 3_500.0, 4_000.0),
        (157_500.0, 159_000.0, 2_800.0, 3_200.0),
        (159_000.0, 160_500.0, 2_100.0, 2_400.0),
        (160_500.0, 162_000.0, 1_400.0, 1_600.0),
        (162_000.0, 163_500.0, 700.0, 800.0),
        (163_500.0, float("inf"), 0.0, 0.0),
    ),
    "married-jointly": (
        (0.0, 236_000.0, 7_000.0, 8_000.0),
        (236_000.0, 237_000.0, 6_300.0, 7_200.0),
        (237_000.0, 238_000.0, 5_600.0, 6_400.0),
        (238_000.0, 239_000.0, 4_900.0, 5_600.0),
        (239_000.0, 240_000.0, 4_200.0, 4_800.0),
        (240_000.0, 241_000.0, 3_500.0, 4_000.0),
        (241_000.0, 242_000.0, 2_800.0, 3_200.0),
        (242_000.0, 243_000.0, 2_100.0, 2_400.0),
        (243_000.0, 244_000.0, 1_400.0, 1_600.0),
        (244_000.0, 245_000.0, 700.0, 800.0),
        (245_000.0, float("inf"), 0.0, 0.0),
    ),
    "married-separately": (
        (0.0, 1_000.0, 6_300.0, 7_200.0),
        (1_000.0, 2_000.0, 5_600.0, 6_400.0),
        (2_000.0, 3_000.0, 4_900.0, 5_600.0),
        (3_000.0, 4_000.0, 4_200.0, 4_800.0),
        (4_000.0, 5_000.0, 3_500.0, 4_000.0),
        (5_000.0, 6_000.0, 2_800.0, 3_200.0),
        (6_000.0, 7_000.0, 2_100.0, 2_400.0),
        (7_000.0, 8_000.0, 1_400.0, 1_600.0),
        (8_000.0, 9_000.0, 700.0, 800.0),
        (9_000.0, float("inf"), 0.0, 0.0),
    ),
}
"""Roth IRA phase-out rows as (income lower, income upper, max, max at 50+)."""


# =============================================================================
# Banking
# =============================================================================

CHECKING_APY: float = 0.0
SAVINGS_APY: float = 0.0005
HYSA_APY: float = 0.04


# =============================================================================
# Simulation
# =============================================================================

DEFAULT_TICK_INTERVAL: float = 5.0
"""Wall-clock seconds per simulated year."""

DEFAULT_SEED: int = 42

MAX_RECENT_EVENTS: int = 5
"""Size of the newest-first event list kept in the simulation context."""

SALARY_INFLATION_PASS_THROUGH: float = 0.8
"""Fraction of the year's inflation passed through to salary."""

RETIREMENT_MILESTONES: Tuple[Tuple[int, str], ...] = (
    (60, "You turned 60! You can now make penalty-free withdrawals from your "
         "IRA accounts (available since age 59½)."),
    (62, "You turned 62! You can now claim early Social Security benefits "
         "(at reduced rates)."),
    (65, "You turned 65! You can now access Medicare and make full retirement "
         "withdrawals from your 401k."),
    (67, "You turned 67! You can now claim full Social Security benefits "
         "without reduction."),
)

PROMOTION_RAISE: float = 0.15
DEMOTION_CUT: float = 0.10

MONTHS_PER_YEAR: int = 12
WEEKS_PER_YEAR: int = 52


# =============================================================================
# Economy
# =============================================================================

INITIAL_INFLATION_RATE: float = 0.025
INITIAL_STOCK_MARKET_INDEX: float = 5_000.0
INITIAL_STOCK_MARKET_GROWTH: float = 0.10

INFLATION_MEAN: float = 0.025
INFLATION_SPREAD: float = 0.01
"""Simple model: inflation ~ Uniform(mean - spread, mean + spread)."""

SP500_RETURN: float = 0.10
TREASURIES_RETURN: float = 0.04
BONDS_RETURN: float = 0.04
TECH_RETURN_RANGE: Tuple[float, float] = (0.08, 0.20)

ECONOMIC_CYCLES: Tuple[str, ...] = (
    "expansion", "peak", "recession", "trough", "depression",
)

CYCLE_TRANSITIONS: Dict[str, Tuple[Tuple[float, str], ...]] = {
    # (cumulative probability, outcome); "extend" keeps the phase and
    # restarts its clock, "prolong" keeps it and rewinds one year.
    "expansion": ((0.70, "peak"), (0.90, "extend"), (1.00, "recession")),
    "peak": ((0.55, "recession"), (0.85, "expansion"), (0.98, "extend"),
             (1.00, "depression")),
    "recession": ((0.50, "trough"), (0.80, "expansion"), (0.99, "prolong"),
                  (1.00, "depression")),
    "trough": ((0.80, "expansion"), (1.00, "extend")),
    "depression": ((0.60, "trough"), (0.90, "prolong"), (1.00, "expansion")),
}

CYCLE_MIN_DURATION: Dict[str, Tuple[float, float]] = {
    "expansion": (2.0, 2.0),
    "peak": (1.0, 0.0),
    "recession": (1.0, 2.0),
    "trough": (1.0, 0.0),
    "depression": (2.0, 3.0),
}
"""Years before a phase may transition: base + Uniform(0, jitter)."""

CYCLE_INFLATION: Dict[str, Tuple[float, float, float]] = {
    # (base offset, signed random span, floor)
    "expansion": (0.025, 0.02, float("-inf")),
    "peak": (0.025, 0.03, float("-inf")),
    "recession": (0.025, -0.015, 0.0),
    "trough": (0.025, -0.02, 0.0),
    "depression": (0.025, -0.05, -0.02),
}

CYCLE_STOCK_GROWTH: Dict[str, Tuple[float, float]] = {
    "expansion": (0.12, 0.08),
    "peak": (0.05, 0.10),
    "recession": (-0.15, 0.10),
    "trough": (-0.10, 0.15),
    "depression": (-0.40, 0.15),
}
"""Stock growth per phase: low + Uniform(0, span)."""

CYCLE_MARKET_VOLATILITY: float = 0.20
DEFLATION_FLOOR: float = -0.02


# =============================================================================
# Yearly summary rules
# =============================================================================

NET_WORTH_MILESTONES: Tuple[float, ...] = (
    10_000.0, 25_000.0, 50_000.0, 100_000.0, 250_000.0, 500_000.0, 1_000_000.0,
)

EMERGENCY_FUND_TARGET_MONTHS: float = 3.0
IDLE_SAVINGS_THRESHOLD: float = 1_000.0
TARGET_INVESTMENT_RATIO: float = 0.6


# =============================================================================
# Living expenses (monthly rent, weekly groceries)
# =============================================================================

STATE_RENT_DATA: Dict[str, float] = {
    "Alabama": 800, "Alaska": 1200, "Arizona": 1100, "Arkansas": 700,
    "California": 2800, "Colorado": 1500, "Connecticut": 1600,
    "Delaware": 1300, "Florida": 1400, "Georgia": 1100, "Hawaii": 2200,
    "Idaho": 900, "Illinois": 1200, "Indiana": 800, "Iowa": 700,
    "Kansas": 800, "Kentucky": 700, "Louisiana": 900, "Maine": 1000,
    "Maryland": 1700, "Massachusetts": 2100, "Michigan": 900,
    "Minnesota": 1100, "Mississippi": 700, "Missouri": 800, "Montana": 900,
    "Nebraska": 800, "Nevada": 1200, "New Hampshire": 1200,
    "New Jersey": 1800, "New Mexico": 900, "New York": 2400,
    "North Carolina": 1000, "North Dakota": 800, "Ohio": 800,
    "Oklahoma": 700, "Oregon": 1400, "Pennsylvania": 1100,
    "Rhode Island": 1300, "South Carolina": 900, "South Dakota": 700,
    "Tennessee": 900, "Texas": 1200, "Utah": 1100, "Vermont": 1200,
    "Virginia": 1300, "Washington": 1600, "West Virginia": 600,
    "Wisconsin": 900, "Wyoming": 800,
}

STATE_GROCERY_DATA: Dict[str, float] = {
    "Alabama": 300, "Alaska": 450, "Arizona": 320, "Arkansas": 280,
    "California": 400, "Colorado": 350, "Connecticut": 380, "Delaware": 340,
    "Florida": 320, "Georgia": 310, "Hawaii": 500, "Idaho": 300,
    "Illinois": 330, "Indiana": 290, "Iowa": 280, "Kansas": 290,
    "Kentucky": 280, "Louisiana": 300, "Maine": 350, "Maryland": 370,
    "Massachusetts": 390, "Michigan": 310, "Minnesota": 320,
    "Mississippi": 280, "Missouri": 290, "Montana": 320, "Nebraska": 290,
    "Nevada": 330, "New Hampshire": 350, "New Jersey": 380,
    "New Mexico": 300, "New York": 400, "North Carolina": 300,
    "North Dakota": 310, "Ohio": 300, "Oklahoma": 280, "Oregon": 350,
    "Pennsylvania": 320, "Rhode Island": 360, "South Carolina": 290,
    "South Dakota": 280, "Tennessee": 290, "Texas": 310, "Utah": 320,
    "Vermont": 370, "Virginia": 330, "Washington": 360,
    "West Virginia": 270, "Wisconsin": 310, "Wyoming": 320,
}
"""Weekly grocery cost per person, by state."""
