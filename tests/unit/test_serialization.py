"""
Unit tests for serialization.py module.

Tests profile persistence, history frames and summary dicts.
"""

import json
import warnings

import pandas as pd
import pytest

from lifesim.engine import SimulationStepper
from lifesim.exceptions import ConfigurationError
from lifesim.host import InMemoryHost
from lifesim.scheduler import ManualScheduler
from lifesim.serialization import (
    SCHEMA_VERSION,
    profile_to_dict,
    profile_from_dict,
    save_profile,
    load_profile,
    history_to_frame,
    summary_to_dict,
)


@pytest.fixture
def ran_stepper(person, engine_config):
    scheduler = ManualScheduler()
    stepper = SimulationStepper(InMemoryHost(person), engine_config, scheduler=scheduler)
    stepper.start()
    scheduler.run_until_idle(max_ticks=3)
    return stepper


class TestProfiles:
    """Tests for profile save/load."""

    def test_save_and_load(self, tmp_path, person):
        path = tmp_path / "profile.json"
        save_profile(person, path)

        assert load_profile(path) == person

    def test_file_layout(self, tmp_path, person):
        path = tmp_path / "nested" / "profile.json"
        save_profile(person, path)

        with open(path) as f:
            payload = json.load(f)
        assert payload["schema_version"] == SCHEMA_VERSION
        assert payload["profile"]["current_salary"] == 85_000
        assert payload["profile"]["monthly_rent"] is None

    def test_bare_profile_accepted(self, tmp_path):
        path = tmp_path / "bare.json"
        path.write_text(json.dumps({"age": 45, "current_salary": 70000, "state": "Ohio"}))

        person = load_profile(path)
        assert person.age == 45
        assert person.state == "Ohio"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            load_profile(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(ConfigurationError, match="not valid JSON"):
            load_profile(path)

    def test_non_object(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[1, 2]")
        with pytest.raises(ConfigurationError):
            load_profile(path)

    def test_validation_error_wrapped(self):
        with pytest.raises(ConfigurationError, match="Invalid profile"):
            profile_from_dict({"age": 30, "savings": -10})

    def test_unknown_field_rejected(self):
        with pytest.raises(ConfigurationError):
            profile_from_dict({"age": 30, "favourite_colour": "green"})

    def test_version_mismatch_warns(self, tmp_path, person):
        path = tmp_path / "old.json"
        path.write_text(json.dumps({"schema_version": "0.0.1", "profile": profile_to_dict(person)}))

        with pytest.warns(UserWarning, match="schema version"):
            load_profile(path)

    def test_current_version_silent(self, tmp_path, person):
        path = tmp_path / "profile.json"
        save_profile(person, path)

        with warnings.catch_warnings():
            warnings.simplefilter("error")
            load_profile(path)


class TestHistoryFrame:
    def test_indexed_by_age(self, ran_stepper):
        df = history_to_frame(ran_stepper.history)

        assert list(df.index) == [30, 31, 32, 33]
        assert df.index.name == "age"
        assert "net_worth" in df.columns
        assert pd.api.types.is_datetime64_any_dtype(df["timestamp"])
        assert df.loc[31, "net_worth"] == pytest.approx(ran_stepper.history[1].net_worth)

    def test_empty(self):
        assert history_to_frame(()).empty


class TestSummaryDict:
    def test_json_ready(self, ran_stepper):
        summary = ran_stepper.yearly_summaries[-1]
        data = summary_to_dict(summary)

        json.dumps(data)
        assert data["year"] == 2027
        assert data["end_date"] == "2028-01-01"
        assert data["bank_accounts"]["total_cash"] == pytest.approx(summary.bank_accounts.total_cash)
        assert data["interest_earned"]["total"] == pytest.approx(summary.interest_earned.total)
        assert data["investment_breakdown"]["total"] == pytest.approx(
            summary.investment_breakdown.total
        )
        assert isinstance(data["recommendations"], list)
        assert data["economic"]["economic_cycle"] == "expansion"
