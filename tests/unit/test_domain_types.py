"""Unit tests for kernel domain records and workflow definitions."""

from datetime import date, datetime, time, timezone

import pytest

from clevio_kernel.domain.booking import AdvisorySession
from clevio_kernel.domain.client import (
    Client,
    Member,
    MemberClassification,
    PaymentInstrument,
    ServiceTier,
    TierSubscription,
)
from clevio_kernel.domain.events import PayrollScheduled, SessionBooked
from clevio_kernel.domain.schedule import Frequency, PayrollScheduleRule, python_weekday
from clevio_kernel.domain.values import Money
from clevio_kernel.domain.workflow import (
    ADVISORY_SESSION_WORKFLOW,
    PAYROLL_RUN_WORKFLOW,
    Transition,
    Workflow,
)


class TestClient:
    def test_duplicate_tiers_rejected(self):
        with pytest.raises(ValueError):
            Client(
                client_id="c-1",
                subscriptions=(
                    TierSubscription(ServiceTier.TAX, date(2025, 1, 1)),
                    TierSubscription(ServiceTier.TAX, date(2025, 2, 1)),
                ),
            )

    def test_roster_counts(self):
        client = Client(
            client_id="c-1",
            members=(
                Member("a"),
                Member("b", classification=MemberClassification.CONTRACTOR),
            ),
        )

        assert client.roster_size == 2
        assert client.count_by_classification(MemberClassification.CONTRACTOR) == 1

    def test_payment_instrument_last4(self):
        with pytest.raises(ValueError):
            PaymentInstrument("12345")
        with pytest.raises(ValueError):
            PaymentInstrument("12a4")

    def test_with_helpers_return_new_snapshots(self):
        client = Client(client_id="c-1")

        updated = client.with_payment_instrument(PaymentInstrument("0005"))

        assert updated.has_payment_instrument
        assert not client.has_payment_instrument

    def test_is_committed(self):
        subscription = TierSubscription(ServiceTier.PAYROLL, date(2025, 3, 3))

        assert subscription.is_committed(date(2025, 9, 2))
        assert not subscription.is_committed(date(2025, 9, 3))


class TestScheduleRule:
    def test_sunday_first_conversion(self):
        assert python_weekday(0) == 6
        assert python_weekday(1) == 0
        assert python_weekday(6) == 5

    def test_rule_construction_does_not_validate(self):
        rule = PayrollScheduleRule(Frequency.WEEKLY)

        assert not rule.is_valid
        assert "day_of_week" in rule.validation_error()


class TestWorkflows:
    def test_terminal_states_have_no_actions(self):
        for workflow in (ADVISORY_SESSION_WORKFLOW, PAYROLL_RUN_WORKFLOW):
            for state in workflow.terminal_states:
                assert workflow.actions_from(state) == ()

    def test_transition_from_terminal_rejected_at_definition(self):
        with pytest.raises(ValueError):
            Workflow(
                name="bad",
                description="",
                initial_state="a",
                states=("a", "b"),
                transitions=(Transition("b", "a", "reopen"),),
                terminal_states=("b",),
            )

    def test_unknown_initial_state_rejected(self):
        with pytest.raises(ValueError):
            Workflow("bad", "", "x", ("a",), ())


class TestEvents:
    def test_session_booked_payload(self):
        event = SessionBooked(
            occurred_at=datetime(2025, 3, 3, 9, tzinfo=timezone.utc),
            session_id="s-1",
            client_id="c-1",
            session_type="tax_strategy",
            scheduled_date=date(2025, 3, 10),
            scheduled_time=time(10, 0),
            duration_minutes=60,
        )

        payload = event.to_payload()

        assert payload["event_type"] == "session_booked"
        assert payload["scheduled_date"] == "2025-03-10"
        assert payload["scheduled_time"] == "10:00:00"
        assert payload["event_id"]

    def test_money_payload(self):
        event = PayrollScheduled(
            occurred_at=datetime(2025, 3, 3, 9, tzinfo=timezone.utc),
            run_id="r-1",
            client_id="c-1",
            run_date=date(2025, 3, 21),
            gross_amount=Money.of("75000"),
            fee_total=Money.of("3000.00"),
        )

        assert event.to_payload()["fee_total"] == {"amount": "3000.00", "currency": "USD"}


class TestAdvisorySession:
    def test_non_positive_duration_rejected(self):
        with pytest.raises(ValueError):
            AdvisorySession("c-1", "cash_flow", date(2025, 3, 10), None, 0)

    def test_full_day_starts_at_end_of_day(self):
        session = AdvisorySession("c-1", "cash_flow", date(2025, 3, 10), None, 60)

        assert session.starts_at(timezone.utc) == datetime(2025, 3, 11, tzinfo=timezone.utc)
