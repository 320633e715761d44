"""
Type definitions for LifeSim.

Purpose
-------
TypedDict definitions for the partial-update payloads that cross the
engine/host boundary. The engine never mutates host data directly; each
tick proposes deltas shaped like these dictionaries through the host
callbacks.

Usage
-----
>>> from lifesim.types import PersonUpdateDict
>>> changes: PersonUpdateDict = {"current_salary": 82_000.0, "savings": 14_500.0}
>>> host.update_person_data(changes)

Type Definitions
----------------
PersonUpdateDict
    Partial update of a PersonalFinancialData.

FinancialsUpdateDict
    Partial update of a FinancialState.

EventDict
    Serialized form of an EventNotification.
"""

from typing_extensions import TypedDict

__all__ = [
    "PersonUpdateDict",
    "FinancialsUpdateDict",
    "EventDict",
]


class PersonUpdateDict(TypedDict, total=False):
    """
    Partial update of PersonalFinancialData.

    Every key is optional; only the keys present are applied by the host.

    Examples
    --------
    >>> changes: PersonUpdateDict = {
    ...     "the_401k_traditional_holdings": 41_250.0,
    ...     "ira_roth_holdings": 14_000.0,
    ... }
    """

    current_salary: float
    savings: float
    investments: float
    the_401k_traditional_holdings: float
    the_401k_roth_holdings: float
    ira_traditional_holdings: float
    ira_roth_holdings: float
    debt_amount: float


class FinancialsUpdateDict(TypedDict, total=False):
    """Partial update of FinancialState."""

    current_salary: float
    net_worth: float
    annual_expenses: float
    investments: float
    investment_account_value: float


class EventDict(TypedDict):
    """Serialized EventNotification."""

    id: str
    type: str
    description: str
    timestamp: str
