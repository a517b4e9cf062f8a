"""
Tests for the Practice Records API
==================================

Tests for:
- CRUD on every resource
- Owner isolation (foreign records look missing)
- Payload validation and reference ownership
- Optimistic versioning via If-Match
- Conflicts, alert read state and invoice sending
"""

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from legalpro_lite.api import app


def case_payload(**overrides):
    body = {
        "caseNumber": "CS-2026-001",
        "clientName": "Ravi Kumar",
        "courtName": "Bombay High Court",
        "opposingParty": "Acme Ltd",
        "hearingDate": "2026-09-01T00:00:00",
        "hearingTime": "10:30",
        "priority": "high",
    }
    body.update(overrides)
    return body


def create_case(client, **overrides):
    response = client.post("/api/cases", json=case_payload(**overrides))
    assert response.status_code == 201, response.text
    return response.json()


def create_client(client, **overrides):
    body = {"name": "Ravi Kumar", "email": "ravi@example.com", "phone": "+91 98200 00000"}
    body.update(overrides)
    response = client.post("/api/clients", json=body)
    assert response.status_code == 201, response.text
    return response.json()


# =============================================================================
# Cases
# =============================================================================

class TestCasesCRUD:
    """Full lifecycle of a case"""

    def test_create_returns_record_with_defaults(self, api_client):
        case = create_case(api_client)

        assert case["id"]
        assert case["version"] == 1
        assert case["caseNumber"] == "CS-2026-001"
        assert case["status"] == "active"
        assert case["priority"] == "high"
        assert case["documents"] == []
        assert case["createdAt"]

    def test_list_newest_first(self, api_client):
        first = create_case(api_client, caseNumber="CS-1")
        second = create_case(api_client, caseNumber="CS-2")

        ids = [c["id"] for c in api_client.get("/api/cases").json()]

        assert ids.index(second["id"]) < ids.index(first["id"])

    def test_get(self, api_client):
        case = create_case(api_client)

        response = api_client.get(f"/api/cases/{case['id']}")

        assert response.status_code == 200
        assert response.json()["clientName"] == "Ravi Kumar"

    def test_partial_update_keeps_other_fields(self, api_client):
        case = create_case(api_client)

        response = api_client.put(f"/api/cases/{case['id']}", json={"status": "closed"})

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "closed"
        assert data["courtName"] == "Bombay High Court"
        assert data["version"] == 2

    def test_patch_is_accepted(self, api_client):
        case = create_case(api_client)

        response = api_client.patch(f"/api/cases/{case['id']}", json={"notes": "Adjourned"})

        assert response.status_code == 200
        assert response.json()["notes"] == "Adjourned"

    def test_delete(self, api_client):
        case = create_case(api_client)

        response = api_client.delete(f"/api/cases/{case['id']}")

        assert response.status_code == 200
        assert response.json() == {"ok": True}
        assert api_client.get(f"/api/cases/{case['id']}").status_code == 404

    def test_delete_case_removes_its_hearings_and_alerts(self, api_client):
        case = create_case(api_client)
        api_client.post("/api/hearings", json={"caseId": case["id"], "hearingDate": "2026-09-01T10:00:00"})
        api_client.post("/api/alerts", json={
            "caseId": case["id"], "type": "hearing", "message": "Soon", "alertTime": "2026-08-31T10:00:00",
        })

        api_client.delete(f"/api/cases/{case['id']}")

        assert api_client.get("/api/hearings").json() == []
        assert api_client.get("/api/alerts").json() == []

    def test_missing_case_is_404(self, api_client):
        response = api_client.get("/api/cases/does-not-exist")

        assert response.status_code == 404
        assert response.json() == {"error": "Not found"}


class TestValidation:
    """Explicit schemas reject bad payloads"""

    def test_missing_required_field(self, api_client):
        body = case_payload()
        del body["courtName"]

        assert api_client.post("/api/cases", json=body).status_code == 422

    def test_unknown_field(self, api_client):
        response = api_client.post("/api/cases", json=case_payload(ownerId="someone-else"))

        assert response.status_code == 422
        assert response.json()["error"] == "Invalid request"
        assert response.json()["details"]

    def test_bad_enum(self, api_client):
        assert api_client.post("/api/cases", json=case_payload(status="archived")).status_code == 422

    def test_bad_time(self, api_client):
        assert api_client.post("/api/cases", json=case_payload(hearingTime="half past ten")).status_code == 422

    def test_required_field_cannot_be_nulled(self, api_client):
        case = create_case(api_client)

        response = api_client.put(f"/api/cases/{case['id']}", json={"caseNumber": None})

        assert response.status_code == 422

    def test_snake_case_keys_are_accepted(self, api_client):
        body = {"case_number": "CS-9", "client_name": "Meera", "court_name": "City Civil Court"}

        assert api_client.post("/api/cases", json=body).status_code == 201

    def test_timezone_aware_dates_are_stored_as_utc(self, api_client):
        case = create_case(api_client, hearingDate="2026-09-01T10:00:00+05:30")

        assert case["hearingDate"].startswith("2026-09-01T04:30:00")


class TestOwnerIsolation:
    """Records of other users behave as missing"""

    def test_foreign_records_are_invisible(self, api_client, second_client):
        case = create_case(api_client)

        assert second_client.get("/api/cases").json() == []
        assert second_client.get(f"/api/cases/{case['id']}").status_code == 404
        assert second_client.put(f"/api/cases/{case['id']}", json={"notes": "x"}).status_code == 404
        assert second_client.delete(f"/api/cases/{case['id']}").status_code == 404

        assert api_client.get(f"/api/cases/{case['id']}").json()["notes"] is None

    def test_cannot_reference_foreign_case(self, api_client, second_client):
        case = create_case(api_client)

        response = second_client.post("/api/hearings", json={
            "caseId": case["id"], "hearingDate": "2026-09-01T10:00:00",
        })

        assert response.status_code == 404

    def test_cannot_reference_foreign_client(self, api_client, second_client):
        client = create_client(api_client)

        response = second_client.post("/api/cases", json=case_payload(clientId=client["id"]))

        assert response.status_code == 404

    def test_requires_session(self, sqlalchemy_db):
        anonymous = TestClient(app)

        for path in ("/api/cases", "/api/clients", "/api/hearings", "/api/alerts",
                     "/api/time-entries", "/api/invoices"):
            assert anonymous.get(path).status_code == 401


class TestVersioning:
    """If-Match turns stale writes into 409"""

    def test_matching_version_updates(self, api_client):
        case = create_case(api_client)

        response = api_client.put(
            f"/api/cases/{case['id']}", json={"notes": "v2"}, headers={"If-Match": "1"}
        )

        assert response.status_code == 200
        assert response.json()["version"] == 2

    def test_stale_version_is_409_and_not_written(self, api_client):
        case = create_case(api_client)
        api_client.put(f"/api/cases/{case['id']}", json={"notes": "first"})

        response = api_client.put(
            f"/api/cases/{case['id']}", json={"notes": "second"}, headers={"If-Match": '"1"'}
        )

        assert response.status_code == 409
        assert api_client.get(f"/api/cases/{case['id']}").json()["notes"] == "first"

    def test_non_numeric_if_match_is_400(self, api_client):
        case = create_case(api_client)

        response = api_client.put(
            f"/api/cases/{case['id']}", json={"notes": "x"}, headers={"If-Match": "abc"}
        )

        assert response.status_code == 400


# =============================================================================
# Other resources
# =============================================================================

class TestOtherResources:

    def test_client_crud(self, api_client):
        client = create_client(api_client)
        assert client["cases"] == []

        updated = api_client.put(f"/api/clients/{client['id']}", json={"address": "Fort, Mumbai"})
        assert updated.json()["address"] == "Fort, Mumbai"

        assert api_client.delete(f"/api/clients/{client['id']}").json() == {"ok": True}
        assert api_client.get("/api/clients").json() == []

    def test_client_email_is_validated(self, api_client):
        assert api_client.post("/api/clients", json={"name": "X", "email": "nope"}).status_code == 422

    def test_hearing_with_attendance_and_orders(self, api_client):
        case = create_case(api_client)

        response = api_client.post("/api/hearings", json={
            "caseId": case["id"],
            "hearingDate": "2026-09-01T10:30:00",
            "hearingType": "evidence_hearing",
            "attendance": {"clientPresent": True, "witnessesPresent": ["PW-1"]},
            "orders": [{"orderType": "adjournment", "orderDetails": "Next date fixed"}],
        })

        assert response.status_code == 201, response.text
        hearing = response.json()
        assert hearing["status"] == "scheduled"
        assert hearing["attendance"] == {
            "clientPresent": True,
            "opposingPartyPresent": False,
            "witnessesPresent": ["PW-1"],
        }
        assert hearing["orders"][0]["orderType"] == "adjournment"

        fetched = api_client.get(f"/api/hearings/{hearing['id']}").json()
        assert fetched["attendance"]["witnessesPresent"] == ["PW-1"]

    def test_time_entry_crud(self, api_client):
        case = create_case(api_client)

        response = api_client.post("/api/time-entries", json={
            "caseId": case["id"], "description": "Drafting", "duration": 90, "hourlyRate": 2500,
        })

        assert response.status_code == 201
        entry = response.json()
        assert entry["billable"] is True
        assert entry["date"]

        updated = api_client.put(f"/api/time-entries/{entry['id']}", json={"billable": False})
        assert updated.json()["billable"] is False

    def test_negative_duration_rejected(self, api_client):
        case = create_case(api_client)

        response = api_client.post("/api/time-entries", json={
            "caseId": case["id"], "description": "Drafting", "duration": -5,
        })

        assert response.status_code == 422

    def test_invoice_crud(self, api_client):
        client = create_client(api_client)

        response = api_client.post("/api/invoices", json={
            "clientId": client["id"],
            "invoiceNumber": "INV-001",
            "items": [{"description": "Consultation", "quantity": 2, "unitPrice": 1500, "amount": 3000}],
            "total": 3000,
        })

        assert response.status_code == 201, response.text
        invoice = response.json()
        assert invoice["status"] == "draft"
        assert invoice["currency"] == "INR"
        assert invoice["items"][0]["unitPrice"] == 1500

        paid = api_client.put(f"/api/invoices/{invoice['id']}", json={"status": "paid"})
        assert paid.json()["status"] == "paid"


# =============================================================================
# Extra endpoints
# =============================================================================

class TestCaseConflictsEndpoint:

    def test_conflicts_against_other_cases(self, api_client):
        current = create_case(api_client, caseNumber="CS-1")
        create_case(api_client, caseNumber="CS-2", clientName="Someone Else",
                    courtName="District Court", hearingTime="11:00")

        response = api_client.get(f"/api/cases/{current['id']}/conflicts")

        assert response.status_code == 200
        conflicts = response.json()
        assert {c["type"] for c in conflicts} == {"time", "opposing-party"}
        time_conflict = next(c for c in conflicts if c["type"] == "time")
        assert time_conflict["severity"] == "high"
        assert time_conflict["message"] == "Time conflict with CS-2 on 1/9/2026"
        assert time_conflict["affectedCase"]["caseNumber"] == "CS-2"

    def test_other_owners_cases_are_not_compared(self, api_client, second_client):
        current = create_case(api_client)
        create_case(second_client)

        assert api_client.get(f"/api/cases/{current['id']}/conflicts").json() == []


class TestAlertReadState:

    def _alert(self, client, case_id, message="Hearing tomorrow"):
        response = client.post("/api/alerts", json={
            "caseId": case_id, "type": "hearing", "message": message, "alertTime": "2026-08-31T10:00:00",
        })
        assert response.status_code == 201, response.text
        return response.json()

    def test_mark_one_read(self, api_client):
        case = create_case(api_client)
        alert = self._alert(api_client, case["id"])
        assert alert["isRead"] is False

        response = api_client.patch(f"/api/alerts/{alert['id']}/read")

        assert response.status_code == 200
        assert response.json()["isRead"] is True

    def test_mark_all_read(self, api_client):
        case = create_case(api_client)
        self._alert(api_client, case["id"], "One")
        self._alert(api_client, case["id"], "Two")

        response = api_client.post("/api/alerts/read-all")

        assert response.json() == {"updated": 2}
        assert all(a["isRead"] for a in api_client.get("/api/alerts").json())
        assert api_client.post("/api/alerts/read-all").json() == {"updated": 0}

    def test_mark_all_read_only_touches_own_alerts(self, api_client, second_client):
        case = create_case(second_client)
        self._alert(second_client, case["id"])

        assert api_client.post("/api/alerts/read-all").json() == {"updated": 0}
        assert second_client.get("/api/alerts").json()[0]["isRead"] is False


class TestSendInvoice:

    def _invoice(self, client, **client_overrides):
        client_record = create_client(client, **client_overrides)
        response = client.post("/api/invoices", json={
            "clientId": client_record["id"], "invoiceNumber": "INV-7", "total": 1200,
        })
        return response.json()

    def test_defaults_to_client_email(self, api_client):
        invoice = self._invoice(api_client)

        with patch("legalpro_lite.email_utils.send_invoice_email", return_value=True) as send:
            response = api_client.post(f"/api/invoices/{invoice['id']}/send", json={})

        assert response.status_code == 200
        assert response.json() == {"ok": True, "to": "ravi@example.com"}
        assert send.call_args.kwargs["to_email"] == "ravi@example.com"

    def test_explicit_recipient_and_subject(self, api_client):
        invoice = self._invoice(api_client)

        with patch("legalpro_lite.email_utils.send_invoice_email", return_value=True) as send:
            response = api_client.post(f"/api/invoices/{invoice['id']}/send", json={
                "to": "accounts@example.com", "subject": "Your invoice",
            })

        assert response.json()["to"] == "accounts@example.com"
        assert send.call_args.kwargs["subject"] == "Your invoice"

    def test_client_without_email_is_400(self, api_client):
        client_record = create_client(api_client, email=None)
        invoice = api_client.post("/api/invoices", json={
            "clientId": client_record["id"], "invoiceNumber": "INV-8",
        }).json()

        response = api_client.post(f"/api/invoices/{invoice['id']}/send", json={})

        assert response.status_code == 400
        assert response.json() == {"error": "Client not found for invoice"}

    @pytest.mark.parametrize("outcome", [False, RuntimeError("smtp down")])
    def test_delivery_failure_is_500(self, api_client, outcome):
        invoice = self._invoice(api_client)
        kwargs = {"side_effect": outcome} if isinstance(outcome, Exception) else {"return_value": outcome}

        with patch("legalpro_lite.email_utils.send_invoice_email", **kwargs):
            response = api_client.post(f"/api/invoices/{invoice['id']}/send", json={})

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to send invoice email"}


def test_health(sqlalchemy_db):
    response = TestClient(app).get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert response.json()["database"] == "ok"
    assert response.headers["x-content-type-options"] == "nosniff"
    assert response.headers["x-frame-options"] == "DENY"
