"""General utilities for LifeSim

Contents
--------
- Validation helpers
- Guarded arithmetic (safe_ratio)
- Randomness (make_rng)
- Reporting helpers (format_currency, format_percent)
- Logging setup (configure_logging)
"""

from __future__ import annotations

import logging
from typing import Optional, Union

import numpy as np

__all__ = [
    # Validation
    "check_non_negative",
    # Arithmetic
    "safe_ratio",
    # Randomness
    "make_rng",
    # Reporting
    "format_currency",
    "format_percent",
    # Logging
    "configure_logging",
]

SeedLike = Union[None, int, np.random.Generator]

# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------

def check_non_negative(name: str, value: float) -> None:
    """Raise if *value* is negative (strict)."""
    if value < 0:
        raise ValueError(f"{name} must be non-negative (got {value}).")


# ---------------------------------------------------------------------------
# Guarded arithmetic
# ---------------------------------------------------------------------------

def safe_ratio(numerator: float, denominator: float) -> float:
    """Return numerator / denominator, or 0.0 when the denominator is 0."""
    if denominator == 0:
        return 0.0
    return float(numerator) / float(denominator)


# ---------------------------------------------------------------------------
# Randomness
# ---------------------------------------------------------------------------

def make_rng(seed: SeedLike = None) -> np.random.Generator:
    """Return a numpy Generator.

    Accepts an existing Generator (returned unchanged so callers can share
    one stream), an integer seed, or None for OS entropy.
    """
    if isinstance(seed, np.random.Generator):
        return seed
    return np.random.default_rng(seed)


# ---------------------------------------------------------------------------
# Reporting helpers
# ---------------------------------------------------------------------------

def format_currency(value: float, decimals: int = 0, symbol: str = "$") -> str:
    """
    Format a dollar amount with thousands separators.

    Examples
    --------
    >>> format_currency(1234567.891)
    '$1,234,568'
    >>> format_currency(-2500, decimals=2)
    '-$2,500.00'
    """
    sign = "-" if value < 0 else ""
    return f"{sign}{symbol}{abs(value):,.{decimals}f}"


def format_percent(value: float, decimals: int = 1) -> str:
    """Format a fraction (0.025) as a percentage string ('2.5%')."""
    return f"{value * 100:.{decimals}f}%"


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

def configure_logging(level: str = "INFO", *, rich_output: bool = True) -> None:
    """Configure the ``lifesim`` logger hierarchy.

    Renders through rich's handler on stderr by default (used by the CLI);
    library users that configure logging themselves never need to call this.
    """
    handler: Optional[logging.Handler] = None
    if rich_output:
        from rich.console import Console
        from rich.logging import RichHandler

        handler = RichHandler(console=Console(stderr=True), show_path=False, markup=False)
    else:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )

    root = logging.getLogger("lifesim")
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level.upper())
    root.propagate = False
