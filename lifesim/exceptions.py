"""
Custom exceptions for LifeSim.

Purpose
-------
Provides a unified exception hierarchy for the few places where LifeSim
raises at all. The simulation math itself clamps and guards instead of
raising; exceptions live at the edges (configuration files, profile
validation, misuse of the engine controls).

Exception Hierarchy
-------------------
LifeSimError (base)
├── ConfigurationError - Invalid configuration or profile files
├── ValidationError - Data validation failures
└── SimulationStateError - Engine driven outside its state machine

Usage
-----
>>> from lifesim.exceptions import ConfigurationError, LifeSimError
>>>
>>> try:
...     person = load_profile(path)
... except LifeSimError as e:
...     print(f"LifeSim error: {e}")
"""

__all__ = [
    "LifeSimError",
    "ConfigurationError",
    "ValidationError",
    "SimulationStateError",
]


class LifeSimError(Exception):
    """
    Base exception for all LifeSim errors.

    Examples
    --------
    >>> try:
    ...     stepper.tick()
    ... except LifeSimError as e:
    ...     logger.error(f"Simulation failed: {e}")
    """
    pass


class ConfigurationError(LifeSimError):
    """
    Invalid configuration or profile.

    Raised when a profile or engine configuration cannot be used, such as:
    - Malformed JSON profile files
    - Unsupported schema versions
    - Field values rejected by the pydantic models

    Examples
    --------
    >>> raise ConfigurationError(
    ...     "retirement_age (30) must be greater than age (45)."
    ... )
    """
    pass


class ValidationError(LifeSimError):
    """
    Data validation failures.

    Raised by explicit validation helpers, never by the yearly
    computations themselves.

    Examples
    --------
    >>> raise ValidationError("salary must be non-negative, got -1.")
    """
    pass


class SimulationStateError(LifeSimError):
    """
    Engine driven outside its state machine.

    Raised when:
    - tick() is called while the engine is not running
    - a job offer is resolved with an unknown or stale request id

    Examples
    --------
    >>> raise SimulationStateError(
    ...     "tick() requires state 'running', engine is 'paused'."
    ... )
    """
    pass
