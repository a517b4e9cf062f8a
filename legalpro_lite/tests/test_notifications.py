"""
Tests for alert filtering and notification views.
"""

from datetime import datetime, timedelta
from types import SimpleNamespace

import pytest

from legalpro_lite.notifications import filter_alerts, recent_alerts, unread_count

BASE = datetime(2026, 4, 1, 9, 0)


def make_alert(alert_id, case_id="c1", type="hearing", message="Hearing tomorrow", is_read=False, age=0):
    return SimpleNamespace(
        id=alert_id,
        case_id=case_id,
        type=type,
        message=message,
        is_read=is_read,
        created_at=BASE - timedelta(minutes=age),
    )


CASES = [
    SimpleNamespace(id="c1", case_number="CS-2024-001"),
    SimpleNamespace(id="c2", case_number="WP-77"),
]


@pytest.fixture
def alerts():
    return [
        make_alert("a1", is_read=False, age=5),
        make_alert("a2", type="payment", message="Invoice overdue", is_read=True, age=1),
        make_alert("a3", case_id="c2", type="deadline", message="File reply", is_read=False, age=30),
    ]


class TestFilterAlerts:
    """Search and status filter"""

    def test_all(self, alerts):
        assert filter_alerts(alerts, CASES) == alerts

    def test_unread_and_read(self, alerts):
        assert [a.id for a in filter_alerts(alerts, CASES, status="unread")] == ["a1", "a3"]
        assert [a.id for a in filter_alerts(alerts, CASES, status="read")] == ["a2"]

    def test_by_type(self, alerts):
        assert [a.id for a in filter_alerts(alerts, CASES, status="payment")] == ["a2"]

    def test_search_matches_message_ignoring_case(self, alerts):
        assert [a.id for a in filter_alerts(alerts, CASES, search="INVOICE")] == ["a2"]

    def test_search_matches_case_number(self, alerts):
        assert [a.id for a in filter_alerts(alerts, CASES, search="wp-77")] == ["a3"]

    def test_search_and_status_combine(self, alerts):
        assert filter_alerts(alerts, CASES, search="cs-2024", status="read") == [alerts[1]]

    def test_unknown_status_rejected(self, alerts):
        with pytest.raises(ValueError):
            filter_alerts(alerts, CASES, status="urgent")


def test_unread_count(alerts):
    assert unread_count(alerts) == 2


def test_recent_alerts_newest_first(alerts):
    assert [a.id for a in recent_alerts(alerts)] == ["a2", "a1", "a3"]
    assert [a.id for a in recent_alerts(alerts, limit=1)] == ["a2"]
