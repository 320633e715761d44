"""
Unit tests for utils.py module.

Tests validation, guarded arithmetic, randomness and formatting utilities.
"""

import logging

import pytest
import numpy as np

from lifesim.utils import (
    check_non_negative,
    safe_ratio,
    make_rng,
    format_currency,
    format_percent,
    configure_logging,
)


class TestValidation:
    """Test input validation functions."""

    def test_check_non_negative_valid(self):
        check_non_negative("test", 0)
        check_non_negative("test", 1000)

    def test_check_non_negative_invalid(self):
        with pytest.raises(ValueError, match="test must be non-negative"):
            check_non_negative("test", -0.1)


class TestSafeRatio:
    def test_regular(self):
        assert safe_ratio(3, 4) == 0.75

    def test_zero_denominator(self):
        assert safe_ratio(10, 0) == 0.0
        assert safe_ratio(0, 0) == 0.0


class TestMakeRng:
    def test_seed_reproducible(self):
        assert make_rng(5).uniform() == make_rng(5).uniform()

    def test_generator_passthrough(self):
        gen = np.random.default_rng(1)
        assert make_rng(gen) is gen

    def test_none_gives_generator(self):
        assert isinstance(make_rng(None), np.random.Generator)


class TestFormatting:
    """Test formatting functions."""

    def test_currency(self):
        assert format_currency(1234567.891) == "$1,234,568"
        assert format_currency(0) == "$0"

    def test_currency_negative_with_decimals(self):
        assert format_currency(-2500, decimals=2) == "-$2,500.00"

    def test_percent(self):
        assert format_percent(0.025) == "2.5%"
        assert format_percent(0.1234, decimals=2) == "12.34%"


class TestConfigureLogging:
    def test_single_handler_after_repeat_calls(self):
        configure_logging("INFO")
        configure_logging("DEBUG", rich_output=False)

        logger = logging.getLogger("lifesim")
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0], logging.StreamHandler)
        assert logger.level == logging.DEBUG
        assert logger.propagate is False

    def test_rich_handler(self):
        from rich.logging import RichHandler

        configure_logging("warning")
        logger = logging.getLogger("lifesim")
        assert isinstance(logger.handlers[0], RichHandler)
        assert logger.level == logging.WARNING
