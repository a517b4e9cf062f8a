"""
Tests for hearing reminder generation.
"""

from datetime import datetime, timedelta
from types import SimpleNamespace

from legalpro_lite.db.models import AlertType
from legalpro_lite.reminders import generate_hearing_reminders, hearing_moment, reminder_message


def make_case(case_id="c1", hearing_date=None, hearing_time=None):
    return SimpleNamespace(
        id=case_id,
        case_number="CS-100",
        client_name="Ravi Kumar",
        court_name="High Court",
        hearing_date=hearing_date,
        hearing_time=hearing_time,
    )


def make_alert(case_id, alert_time, type=AlertType.HEARING):
    return SimpleNamespace(case_id=case_id, type=type, alert_time=alert_time)


HEARING = datetime(2026, 5, 10, 10, 0)
NOW = datetime(2026, 5, 1, 8, 0)


class TestGenerateHearingReminders:
    """Offsets 24h / 6h / 1h before each hearing"""

    def test_three_reminders_for_future_hearing(self):
        drafts = generate_hearing_reminders([make_case(hearing_date=HEARING)], [], now=NOW)

        assert [d.alert_time for d in drafts] == [
            HEARING - timedelta(hours=24),
            HEARING - timedelta(hours=6),
            HEARING - timedelta(hours=1),
        ]
        assert all(d.type == AlertType.HEARING for d in drafts)
        assert all(d.case_id == "c1" for d in drafts)
        assert drafts[0].message == "Hearing reminder: CS-100 - Ravi Kumar at High Court in 24 hours"
        assert drafts[2].message == "Hearing reminder: CS-100 - Ravi Kumar at High Court in 1 hour"

    def test_past_offsets_are_skipped(self):
        now = HEARING - timedelta(hours=3)

        drafts = generate_hearing_reminders([make_case(hearing_date=HEARING)], [], now=now)

        assert [d.alert_time for d in drafts] == [HEARING - timedelta(hours=1)]

    def test_offset_exactly_now_is_skipped(self):
        now = HEARING - timedelta(hours=1)

        assert generate_hearing_reminders([make_case(hearing_date=HEARING)], [], now=now) == []

    def test_existing_alert_within_a_minute_suppresses(self):
        existing = [make_alert("c1", HEARING - timedelta(hours=6) + timedelta(seconds=30))]

        drafts = generate_hearing_reminders([make_case(hearing_date=HEARING)], existing, now=NOW)

        assert len(drafts) == 2
        assert HEARING - timedelta(hours=6) not in [d.alert_time for d in drafts]

    def test_alert_of_other_type_or_case_does_not_suppress(self):
        existing = [
            make_alert("c1", HEARING - timedelta(hours=6), type=AlertType.DEADLINE),
            make_alert("c2", HEARING - timedelta(hours=1)),
        ]

        drafts = generate_hearing_reminders([make_case(hearing_date=HEARING)], existing, now=NOW)

        assert len(drafts) == 3

    def test_rerun_with_created_alerts_is_idempotent(self):
        cases = [make_case(hearing_date=HEARING)]
        first = generate_hearing_reminders(cases, [], now=NOW)
        created = [make_alert(d.case_id, d.alert_time) for d in first]

        assert generate_hearing_reminders(cases, created, now=NOW) == []

    def test_cases_without_hearing_date_are_ignored(self):
        assert generate_hearing_reminders([make_case()], [], now=NOW) == []


class TestHearingMoment:

    def test_midnight_date_combined_with_time(self):
        case = make_case(hearing_date=datetime(2026, 5, 10), hearing_time="14:30")

        assert hearing_moment(case) == datetime(2026, 5, 10, 14, 30)

    def test_timed_date_wins_over_time_field(self):
        case = make_case(hearing_date=datetime(2026, 5, 10, 9, 15), hearing_time="14:30")

        assert hearing_moment(case) == datetime(2026, 5, 10, 9, 15)

    def test_no_date(self):
        assert hearing_moment(make_case()) is None

    def test_unset_time_stays_at_midnight(self):
        case = make_case(hearing_date=datetime(2026, 5, 10))

        assert hearing_moment(case) == datetime(2026, 5, 10)


def test_reminder_message_pluralization():
    case = make_case()

    assert reminder_message(case, 6).endswith("in 6 hours")
    assert reminder_message(case, 1).endswith("in 1 hour")
