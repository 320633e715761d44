"""
Unit tests for engine.py module.

Tests the simulation state machine, the yearly tick arithmetic, history
bookkeeping, milestone events, career actions and context restore.
"""

import pytest
from dataclasses import FrozenInstanceError
from datetime import date

from lifesim.engine import (
    SimulationState,
    SimulationStepper,
    SimulationContext,
    SimulationProgress,
    JobOfferRequest,
)
from lifesim.exceptions import SimulationStateError, ValidationError
from lifesim.expenses import state_living_expenses
from lifesim.host import InMemoryHost
from lifesim.profile import PersonalFinancialData
from lifesim.scheduler import ManualScheduler
from lifesim.tax import calculate_taxes


def _run(stepper, scheduler, years=None):
    stepper.start()
    return scheduler.run_until_idle(max_ticks=years)


@pytest.fixture
def flat_stepper(host, flat_engine_config, scheduler):
    """Engine with a deterministic economy."""
    return SimulationStepper(host, flat_engine_config, scheduler=scheduler)


class TestStateMachine:
    """Tests for start/pause/reset transitions."""

    def test_initial_state(self, stepper):
        assert stepper.state is SimulationState.SETUP
        assert stepper.history == ()
        assert not stepper.has_started

    def test_start_seeds_history(self, stepper, host):
        assert stepper.start() is SimulationState.RUNNING
        assert len(stepper.history) == 1
        seed = stepper.history[0]
        assert seed.age == 30
        assert seed.investments == host.financials.investment_account_value
        assert seed.net_worth == pytest.approx(host.person.total_cash + seed.investments)

    def test_start_arms_scheduler(self, stepper, scheduler, engine_config):
        stepper.start()
        assert scheduler.pending
        assert scheduler.last_delay == engine_config.tick_interval

    def test_pause_in_setup_is_noop(self, stepper):
        assert stepper.pause() is SimulationState.SETUP

    def test_pause_cancels_pending_tick(self, stepper, scheduler):
        stepper.start()
        assert stepper.pause() is SimulationState.PAUSED
        assert not scheduler.pending
        assert scheduler.run_until_idle() == 0

    def test_resume_does_not_reseed(self, stepper, scheduler):
        _run(stepper, scheduler, years=2)
        stepper.pause()
        assert stepper.start() is SimulationState.RUNNING
        assert len(stepper.history) == 3
        assert stepper.history[0].age == 30
        assert scheduler.pending

    def test_start_while_running_is_noop(self, stepper, scheduler):
        stepper.start()
        assert stepper.start() is SimulationState.RUNNING
        assert len(stepper.history) == 1

    def test_completes_at_retirement_age(self, near_retirement, engine_config):
        scheduler = ManualScheduler()
        stepper = SimulationStepper(InMemoryHost(near_retirement), engine_config, scheduler=scheduler)

        assert _run(stepper, scheduler) == 1
        assert stepper.state is SimulationState.COMPLETED
        assert [p.age for p in stepper.history] == [30, 31]
        assert not scheduler.pending

    def test_start_when_completed_is_noop(self, near_retirement, engine_config):
        scheduler = ManualScheduler()
        stepper = SimulationStepper(InMemoryHost(near_retirement), engine_config, scheduler=scheduler)
        _run(stepper, scheduler)

        assert stepper.start() is SimulationState.COMPLETED
        assert stepper.pause() is SimulationState.COMPLETED
        assert not scheduler.pending

    def test_tick_when_not_running_raises(self, stepper):
        with pytest.raises(SimulationStateError, match="start"):
            stepper.tick()

    def test_tick_when_paused_raises(self, stepper):
        stepper.start()
        stepper.pause()
        with pytest.raises(SimulationStateError):
            stepper.tick()


class TestReset:
    """Tests for reset()."""

    def test_reset_restores_setup(self, stepper, scheduler, host):
        _run(stepper, scheduler, years=4)
        assert host.person.current_salary > 85_000

        assert stepper.reset() is SimulationState.SETUP
        assert stepper.state is SimulationState.SETUP
        assert stepper.history == ()
        assert stepper.yearly_summaries == ()
        assert stepper.recent_events == ()
        assert stepper.current_age == 30
        assert host.person.current_salary == pytest.approx(85_000)
        assert host.financials.current_salary == pytest.approx(85_000)
        assert host.person.savings == 0.0
        assert host.financials.investment_account_value == 0.0
        assert host.financials.net_worth == 0.0
        assert not scheduler.pending

    def test_reset_reseeds_economy(self, stepper, scheduler):
        _run(stepper, scheduler, years=3)
        stepper.reset()
        assert stepper.economic_state == SimulationContext().economic

    def test_reset_then_restart(self, stepper, scheduler):
        _run(stepper, scheduler, years=3)
        stepper.pause()
        stepper.reset()
        _run(stepper, scheduler, years=2)
        assert [p.age for p in stepper.history] == [30, 31, 32]

    def test_reset_before_start(self, stepper, host):
        assert stepper.reset() is SimulationState.SETUP
        assert host.person.current_salary == 85_000
        assert host.person.savings == 0.0

    def test_reset_restores_debt(self, engine_config):
        person = PersonalFinancialData(
            age=40, current_salary=90_000, state="Texas",
            debt_amount=20_000, debt_interest_rate=5.0, debt_term_years=5,
        )
        host = InMemoryHost(person)
        scheduler = ManualScheduler()
        stepper = SimulationStepper(host, engine_config, scheduler=scheduler)
        _run(stepper, scheduler, years=2)
        assert host.person.debt_amount < 20_000

        stepper.reset()
        assert host.person.debt_amount == 20_000


class TestTick:
    """Tests for the yearly tick arithmetic."""

    def test_age_and_history_length(self, stepper, scheduler):
        _run(stepper, scheduler, years=5)

        assert stepper.current_age == 35
        assert len(stepper.history) == 6
        ages = [p.age for p in stepper.history]
        assert all(b - a == 1 for a, b in zip(ages, ages[1:]))

    def test_progress_dates(self, stepper, scheduler):
        _run(stepper, scheduler, years=2)
        progress = stepper.context.progress

        assert progress.current_date == date(2027, 1, 1)
        assert progress.years_elapsed == 2
        assert progress.months_elapsed == 24
        assert progress.days_elapsed == 730
        assert stepper.history[-1].timestamp == date(2027, 1, 1)

    def test_one_year_arithmetic(self, flat_stepper, scheduler, host):
        _run(flat_stepper, scheduler, years=1)

        salary = 85_000 * (1 + 0.025 * 0.8)
        trad = salary * 0.06
        match = salary * 0.04
        contributions = trad + match + 3_000 + 3_000
        pooled = 15_000 * 1.10 + contributions
        expenses = state_living_expenses("Texas").annual_total * 1.025
        tax = calculate_taxes(salary, "Texas", trad, 0.0, 0.0, 3_000, year=2025)

        assert host.person.current_salary == pytest.approx(salary)
        assert host.financials.investment_account_value == pytest.approx(pooled)
        assert host.financials.investments == pytest.approx(pooled)
        assert host.financials.annual_expenses == pytest.approx(expenses)
        assert host.person.the_401k_traditional_holdings == pytest.approx(trad + match)
        assert host.person.ira_roth_holdings == pytest.approx(3_000)
        assert host.person.savings == pytest.approx(5_000 + tax.after_tax_income - expenses)

        point = flat_stepper.history[-1]
        assert point.salary == pytest.approx(salary)
        assert point.investments == pytest.approx(pooled)
        assert point.inflation == pytest.approx(0.025)
        assert point.stock_market_value == pytest.approx(5_500)
        assert flat_stepper.context.last_tax.after_tax_income == pytest.approx(tax.after_tax_income)

    def test_second_tick_reads_updated_salary(self, flat_stepper, scheduler, host):
        _run(flat_stepper, scheduler, years=2)
        assert host.person.current_salary == pytest.approx(85_000 * 1.02 ** 2)

    def test_tax_year_advances(self, flat_stepper, scheduler):
        _run(flat_stepper, scheduler, years=2)
        assert [s.year for s in flat_stepper.yearly_summaries] == [2025, 2026]

    def test_net_worth_identity(self, engine_config):
        person = PersonalFinancialData(
            age=45, current_salary=120_000, state="California",
            contributions_401k_traditional=10.0, contributions_401k_roth=10.0,
            match_401k=5.0, ira_traditional_contribution=7_000,
            monthly_investment=500, savings=3_000, checking_account=4_000,
            savings_account=6_000, hysa_account=20_000, investments=50_000,
            the_401k_traditional_holdings=80_000, ira_roth_holdings=15_000,
            debt_amount=30_000, debt_interest_rate=6.5, debt_term_years=8,
            retirement_age=60,
        )
        host = InMemoryHost(person)
        scheduler = ManualScheduler()
        stepper = SimulationStepper(host, engine_config, scheduler=scheduler)
        _run(stepper, scheduler)

        assert stepper.state is SimulationState.COMPLETED
        for point in stepper.history:
            assert point.net_worth == pytest.approx(point.cash + point.investments - point.debt)

    def test_capped_contributions_in_ledgers(self, engine_config):
        person = PersonalFinancialData(
            age=30, current_salary=500_000, state="Texas",
            contributions_401k_traditional=10.0, contributions_401k_roth=10.0,
        )
        host = InMemoryHost(person)
        scheduler = ManualScheduler()
        stepper = SimulationStepper(host, engine_config, scheduler=scheduler)
        _run(stepper, scheduler, years=1)

        ledgers = host.person.the_401k_traditional_holdings + host.person.the_401k_roth_holdings
        assert ledgers == pytest.approx(23_500)

    def test_debt_service(self, engine_config):
        person = PersonalFinancialData(
            age=30, current_salary=80_000, state="Texas",
            debt_amount=10_000, debt_interest_rate=6.0, debt_term_years=2,
        )
        host = InMemoryHost(person)
        scheduler = ManualScheduler()
        stepper = SimulationStepper(host, engine_config, scheduler=scheduler)
        _run(stepper, scheduler, years=3)

        debts = [p.debt for p in stepper.history]
        assert debts[0] == 10_000
        assert 0 < debts[1] < 10_000
        assert debts[2] == 0.0
        assert debts[3] == 0.0
        assert stepper.history[1].debt_payment > 0
        assert stepper.history[3].debt_payment == 0.0
        assert stepper.context.debt_term_remaining == 0

    def test_unscheduled_debt_is_carried(self, engine_config):
        person = PersonalFinancialData(age=30, current_salary=80_000, debt_amount=7_500)
        host = InMemoryHost(person)
        scheduler = ManualScheduler()
        stepper = SimulationStepper(host, engine_config, scheduler=scheduler)
        _run(stepper, scheduler, years=2)

        assert [p.debt for p in stepper.history] == [7_500, 7_500, 7_500]

    def test_zero_salary_does_not_fail(self, engine_config):
        host = InMemoryHost(PersonalFinancialData(age=30, current_salary=0.0, retirement_age=33))
        scheduler = ManualScheduler()
        stepper = SimulationStepper(host, engine_config, scheduler=scheduler)
        _run(stepper, scheduler)

        assert stepper.state is SimulationState.COMPLETED
        assert all(s.take_home_pay == 0.0 for s in stepper.yearly_summaries)

    def test_one_summary_per_tick(self, stepper, scheduler):
        _run(stepper, scheduler, years=3)
        assert len(stepper.yearly_summaries) == 3
        assert stepper.yearly_summaries[-1].age == 33

    def test_seeded_runs_replay(self, person, engine_config):
        def history():
            scheduler = ManualScheduler()
            stepper = SimulationStepper(InMemoryHost(person), engine_config, scheduler=scheduler)
            _run(stepper, scheduler, years=10)
            return stepper.history

        assert history() == history()

    def test_cycle_model_runs(self, person, start_date):
        from lifesim.config import EngineConfig

        config = EngineConfig(start_date=start_date, seed=3, economic_model="cycle")
        scheduler = ManualScheduler()
        stepper = SimulationStepper(InMemoryHost(person), config, scheduler=scheduler)
        _run(stepper, scheduler)

        assert stepper.state is SimulationState.COMPLETED
        assert stepper.current_age == 65

    def test_context_is_frozen(self, stepper):
        with pytest.raises(FrozenInstanceError):
            stepper.context.history = ()


class TestCooperativeCancellation:
    """Control calls made from inside host callbacks."""

    def test_pause_during_tick(self, person, engine_config):
        class PausingHost(InMemoryHost):
            stepper = None

            def update_financials(self, changes):
                super().update_financials(changes)
                if "net_worth" in changes and self.stepper is not None:
                    self.stepper.pause()

        host = PausingHost(person)
        scheduler = ManualScheduler()
        stepper = SimulationStepper(host, engine_config, scheduler=scheduler)
        host.stepper = stepper

        _run(stepper, scheduler)
        assert stepper.state is SimulationState.PAUSED
        assert len(stepper.history) == 2
        assert not scheduler.pending

    def test_reset_during_tick_discards_tick(self, person, engine_config):
        class ResettingHost(InMemoryHost):
            stepper = None

            def update_financials(self, changes):
                super().update_financials(changes)
                if "net_worth" in changes and changes["net_worth"] != 0.0 and self.stepper:
                    stepper, self.stepper = self.stepper, None
                    stepper.reset()

        host = ResettingHost(person)
        scheduler = ManualScheduler()
        stepper = SimulationStepper(host, engine_config, scheduler=scheduler)
        host.stepper = stepper

        _run(stepper, scheduler)
        assert stepper.state is SimulationState.SETUP
        assert stepper.history == ()
        assert not scheduler.pending

    def test_reset_from_person_update_leaves_host_reset(self, person, engine_config):
        class ResettingHost(InMemoryHost):
            stepper = None

            def update_person_data(self, changes):
                super().update_person_data(changes)
                if "ira_roth_holdings" in changes and self.stepper is not None:
                    stepper, self.stepper = self.stepper, None
                    stepper.reset()

        host = ResettingHost(person)
        scheduler = ManualScheduler()
        stepper = SimulationStepper(host, engine_config, scheduler=scheduler)
        host.stepper = stepper

        _run(stepper, scheduler)
        assert stepper.state is SimulationState.SETUP
        assert stepper.history == ()
        assert host.person.current_salary == 85_000
        assert host.financials.current_salary == 85_000
        assert host.financials.investment_account_value == 0.0
        assert host.financials.investments == 0.0
        assert host.financials.net_worth == 0.0
        assert not scheduler.pending

    def test_reset_from_event_stops_further_events(self, engine_config):
        class ResettingHost(InMemoryHost):
            stepper = None

            def append_event(self, event):
                super().append_event(event)
                if self.stepper is not None:
                    stepper, self.stepper = self.stepper, None
                    stepper.reset()

        host = ResettingHost(PersonalFinancialData(age=59, current_salary=50_000, retirement_age=68))
        scheduler = ManualScheduler()
        stepper = SimulationStepper(host, engine_config, scheduler=scheduler)
        host.stepper = stepper

        _run(stepper, scheduler)
        assert len(host.events) == 1
        assert stepper.state is SimulationState.SETUP
        assert stepper.recent_events == ()

    def test_failing_callback_pauses(self, person, engine_config):
        class FailingHost(InMemoryHost):
            def update_financials(self, changes):
                raise RuntimeError("host storage unavailable")

        scheduler = ManualScheduler()
        stepper = SimulationStepper(FailingHost(person), engine_config, scheduler=scheduler)
        stepper.start()

        with pytest.raises(RuntimeError, match="storage"):
            scheduler.fire()
        assert stepper.state is SimulationState.PAUSED
        assert not scheduler.pending
        assert len(stepper.history) == 1


class TestMilestones:
    """Tests for retirement milestone events."""

    def test_all_milestones_newest_first(self, engine_config):
        host = InMemoryHost(PersonalFinancialData(age=59, current_salary=50_000, retirement_age=68))
        scheduler = ManualScheduler()
        stepper = SimulationStepper(host, engine_config, scheduler=scheduler)
        _run(stepper, scheduler)

        milestones = [e for e in host.events if e.type == "retirement_milestone"]
        assert len(milestones) == 4
        assert "60" in milestones[0].description
        assert "67" in stepper.recent_events[0].description
        assert stepper.context.fired_milestones == frozenset({60, 62, 65, 67})

    def test_recent_events_capped(self, engine_config):
        host = InMemoryHost(PersonalFinancialData(age=59, current_salary=50_000, retirement_age=68))
        scheduler = ManualScheduler()
        stepper = SimulationStepper(host, engine_config, scheduler=scheduler)
        stepper.start()
        stepper.promote()
        stepper.demote()
        scheduler.run_until_idle()

        assert len(host.events) == 6
        assert len(stepper.recent_events) == 5
        assert stepper.recent_events[-1].type == "demotion"

    def test_no_milestones_when_starting_past_them(self, engine_config):
        host = InMemoryHost(PersonalFinancialData(age=68, current_salary=50_000, retirement_age=70))
        scheduler = ManualScheduler()
        stepper = SimulationStepper(host, engine_config, scheduler=scheduler)
        _run(stepper, scheduler)
        assert host.events == []

    def test_event_to_dict(self, engine_config):
        host = InMemoryHost(PersonalFinancialData(age=59, current_salary=50_000, retirement_age=60))
        scheduler = ManualScheduler()
        stepper = SimulationStepper(host, engine_config, scheduler=scheduler)
        _run(stepper, scheduler)

        d = stepper.recent_events[0].to_dict()
        assert set(d) == {"id", "type", "description", "timestamp"}
        assert d["timestamp"] == "2026-01-01"


class TestCareerActions:
    """Tests for promotion, demotion, quitting and new-job requests."""

    def test_promote(self, stepper, host):
        assert stepper.promote() == pytest.approx(97_750)
        assert host.person.current_salary == pytest.approx(97_750)
        assert host.financials.current_salary == pytest.approx(97_750)
        assert stepper.recent_events[0].type == "promotion"

    def test_demote(self, stepper, host):
        assert stepper.demote() == pytest.approx(76_500)
        assert stepper.recent_events[0].type == "demotion"

    def test_quit_job(self, stepper, host):
        assert stepper.quit_job() == 0.0
        assert host.person.current_salary == 0.0
        assert stepper.recent_events[0].type == "layoff"

    def test_baseline_follows_career_change_after_start(self, stepper, scheduler, host):
        stepper.start()
        scheduler.fire()
        stepper.promote()
        promoted = host.person.current_salary
        scheduler.fire()

        stepper.reset()
        assert host.person.current_salary == pytest.approx(promoted)

    def test_baseline_untouched_before_start(self, stepper):
        stepper.promote()
        assert stepper.context.baseline_salary is None

    def test_job_offer_round_trip(self, stepper, host):
        request = stepper.request_new_job()

        assert isinstance(request, JobOfferRequest)
        assert request.current_salary == 85_000
        assert stepper.context.pending_job_offer == request

        assert stepper.resolve_job_offer(request.id, 120_000) == 120_000
        assert host.person.current_salary == 120_000
        assert stepper.context.pending_job_offer is None
        assert stepper.recent_events[0].type == "new_job"
        assert "$120,000" in stepper.recent_events[0].description

    def test_job_offer_wrong_id(self, stepper):
        stepper.request_new_job()
        with pytest.raises(SimulationStateError, match="No pending job offer"):
            stepper.resolve_job_offer("nope", 100_000)

    def test_job_offer_negative_salary(self, stepper):
        request = stepper.request_new_job()
        with pytest.raises(ValidationError):
            stepper.resolve_job_offer(request.id, -1)
        assert stepper.context.pending_job_offer == request

    def test_cancel_job_offer(self, stepper, host):
        request = stepper.request_new_job()
        stepper.cancel_job_offer(request.id)
        assert stepper.context.pending_job_offer is None
        assert host.person.current_salary == 85_000
        with pytest.raises(SimulationStateError):
            stepper.resolve_job_offer(request.id, 1)

    def test_ticking_continues_with_open_request(self, stepper, scheduler):
        stepper.start()
        stepper.request_new_job()
        assert scheduler.run_until_idle(max_ticks=2) == 2
        assert stepper.context.pending_job_offer is not None


class TestRestore:
    def test_restore_rewinds(self, stepper, scheduler):
        _run(stepper, scheduler, years=2)
        saved = stepper.context
        scheduler.run_until_idle(max_ticks=3)
        assert len(stepper.history) == 6

        assert stepper.restore(saved) is SimulationState.RUNNING
        assert len(stepper.history) == 3
        assert stepper.current_age == 32
        assert scheduler.pending

    def test_restore_paused_context_does_not_arm(self, stepper, scheduler):
        _run(stepper, scheduler, years=1)
        stepper.pause()
        saved = stepper.context
        stepper.start()
        stepper.restore(saved)
        assert stepper.state is SimulationState.PAUSED
        assert not scheduler.pending


class TestProgress:
    def test_leap_day_start(self):
        progress = SimulationProgress.begin(date(2024, 2, 29), 30).advanced()
        assert progress.current_date == date(2025, 2, 28)
        assert progress.current_age == 31
