"""
Host boundary for LifeSim.

Purpose
-------
The engine owns no profile data. A host owns the PersonalFinancialData and
FinancialState, exposes them for reading, and applies the deltas the engine
proposes through three callbacks:

- update_person_data(changes)
- update_financials(changes)
- append_event(event)

Updates are applied synchronously: when a callback returns, the next read of
`person` / `financials` reflects it. The engine relies on this to read fresh
inputs on the following tick.

Example
-------
>>> host = InMemoryHost(PersonalFinancialData(age=30, current_salary=80_000))
>>> host.update_person_data({"savings": 1_000.0})
>>> host.person.savings
1000.0
"""

from __future__ import annotations

import logging
from typing import List, Optional

from typing_extensions import Protocol, runtime_checkable

from .profile import FinancialState, PersonalFinancialData, apply_changes
from .types import FinancialsUpdateDict, PersonUpdateDict

__all__ = [
    "SimulationHost",
    "InMemoryHost",
]

logger = logging.getLogger(__name__)


@runtime_checkable
class SimulationHost(Protocol):
    """Read access plus the three update callbacks the engine calls."""

    @property
    def person(self) -> PersonalFinancialData: ...

    @property
    def financials(self) -> FinancialState: ...

    def update_person_data(self, changes: PersonUpdateDict) -> None: ...

    def update_financials(self, changes: FinancialsUpdateDict) -> None: ...

    def append_event(self, event) -> None: ...


class InMemoryHost:
    """
    Host keeping its own copies of the profile and aggregates.

    Parameters
    ----------
    person : PersonalFinancialData
        Seed profile (copied).
    financials : FinancialState, optional
        Seed aggregates (copied). Derived with `FinancialState.from_profile`
        when omitted.

    Attributes
    ----------
    events : list
        Every event appended, oldest first.
    """

    def __init__(
        self,
        person: PersonalFinancialData,
        financials: Optional[FinancialState] = None,
    ):
        self._person = person.copy()
        if financials is None:
            financials = FinancialState.from_profile(person)
        self._financials = financials.copy()
        self.events: List = []

    @property
    def person(self) -> PersonalFinancialData:
        return self._person

    @property
    def financials(self) -> FinancialState:
        return self._financials

    def update_person_data(self, changes: PersonUpdateDict) -> None:
        apply_changes(self._person, changes)

    def update_financials(self, changes: FinancialsUpdateDict) -> None:
        apply_changes(self._financials, changes)

    def append_event(self, event) -> None:
        logger.info("event: %s", event.description)
        self.events.append(event)

    def __repr__(self) -> str:
        return (
            f"InMemoryHost(age={self._person.age}, "
            f"salary={self._person.current_salary:,.0f}, "
            f"net_worth={self._financials.net_worth:,.0f})"
        )
