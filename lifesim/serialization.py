"""
Serialization module for LifeSim.

Purpose
-------
Moves simulation inputs and outputs across the library boundary:

- Profiles: JSON files validated through ProfileConfig
- History: HistoricalDataPoint sequence -> pandas DataFrame indexed by age
- Summaries: YearlySummary -> plain dict (JSON-ready)

Design Principles
-----------------
- Type-safe: profiles load through Pydantic, errors become ConfigurationError
- Human-readable: indented JSON
- Backward compatible: files carry a schema version; mismatches warn

Example
-------
>>> from pathlib import Path
>>> save_profile(person, Path("profile.json"))
>>> person = load_profile(Path("profile.json"))
>>> df = history_to_frame(stepper.history)
>>> df.loc[31, "net_worth"]
"""

from __future__ import annotations

import json
import warnings
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, Iterable, Union

import pandas as pd
import pydantic

from .config import ProfileConfig
from .exceptions import ConfigurationError
from .profile import PersonalFinancialData

__all__ = [
    "SCHEMA_VERSION",
    "profile_to_dict",
    "profile_from_dict",
    "save_profile",
    "load_profile",
    "history_to_frame",
    "summary_to_dict",
]

PathLike = Union[str, Path]


# ---------------------------------------------------------------------------
# Schema Version
# ---------------------------------------------------------------------------

SCHEMA_VERSION = "0.1.0"


# ---------------------------------------------------------------------------
# Profiles
# ---------------------------------------------------------------------------

def profile_to_dict(person: PersonalFinancialData) -> Dict[str, Any]:
    return asdict(person)


def profile_from_dict(data: Dict[str, Any]) -> PersonalFinancialData:
    """
    Validate *data* through ProfileConfig and build the profile.

    Raises
    ------
    ConfigurationError
        If any field is missing, unknown or out of range.
    """
    try:
        config = ProfileConfig.model_validate(data)
    except pydantic.ValidationError as e:
        raise ConfigurationError(f"Invalid profile: {e}") from e
    return config.to_profile()


def save_profile(person: PersonalFinancialData, path: PathLike) -> None:
    """
    Save a profile to a JSON file.

    Examples
    --------
    >>> save_profile(person, Path("profile.json"))
    """
    path = Path(path)
    payload = {
        "schema_version": SCHEMA_VERSION,
        "profile": profile_to_dict(person),
    }
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(payload, f, indent=2)


def load_profile(path: PathLike) -> PersonalFinancialData:
    """
    Load a profile from a JSON file.

    The file holds ``{"schema_version": ..., "profile": {...}}``; a bare
    profile object is accepted too.

    Raises
    ------
    ConfigurationError
        If the file is missing, is not valid JSON, or fails validation.
    """
    path = Path(path)
    try:
        with open(path, "r") as f:
            payload = json.load(f)
    except FileNotFoundError as e:
        raise ConfigurationError(f"Profile file not found: {path}") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Profile file {path} is not valid JSON: {e}") from e

    if not isinstance(payload, dict):
        raise ConfigurationError(f"Profile file {path} must contain a JSON object.")

    schema_version = payload.get("schema_version", SCHEMA_VERSION)
    if schema_version != SCHEMA_VERSION:
        warnings.warn(
            f"Profile schema version {schema_version} differs from current "
            f"version {SCHEMA_VERSION}. May encounter compatibility issues.",
            UserWarning,
        )

    data = payload.get("profile")
    if data is None:
        data = {k: v for k, v in payload.items() if k != "schema_version"}
    return profile_from_dict(data)


# ---------------------------------------------------------------------------
# Outputs
# ---------------------------------------------------------------------------

def history_to_frame(history: Iterable) -> pd.DataFrame:
    """
    HistoricalDataPoints as a DataFrame indexed by age.

    `timestamp` becomes a datetime64 column. An empty history gives an
    empty frame.
    """
    rows = [asdict(point) for point in history]
    if not rows:
        return pd.DataFrame()
    df = pd.DataFrame(rows).set_index("age")
    df["timestamp"] = pd.to_datetime(df["timestamp"])
    return df


def _jsonable(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return value


def summary_to_dict(summary) -> Dict[str, Any]:
    """
    YearlySummary as a JSON-ready dict.

    Derived totals (cash, interest, investment breakdown) are included
    alongside the stored fields.
    """
    data = _jsonable(asdict(summary))
    data["bank_accounts"]["total_cash"] = summary.bank_accounts.total_cash
    data["interest_earned"]["total"] = summary.interest_earned.total
    data["investment_breakdown"]["total"] = summary.investment_breakdown.total
    return data
