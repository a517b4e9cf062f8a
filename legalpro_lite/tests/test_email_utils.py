"""
Tests for email delivery (SMTP patched).
"""

from datetime import datetime
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from legalpro_lite import email_utils


def config(**overrides):
    values = {
        "smtp_host": "smtp.example.com",
        "smtp_port": 587,
        "smtp_user": "mailer",
        "smtp_password": "secret",
        "smtp_from": "no-reply@legalpro.local",
        "smtp_use_tls": True,
        "app_url": "https://app.legalpro.test",
        "production": False,
    }
    values.update(overrides)
    return values


@pytest.fixture
def smtp_config(monkeypatch):
    def _use(**overrides):
        monkeypatch.setattr(email_utils, "get_email_config", lambda: config(**overrides))
    return _use


class TestSendEmail:

    def test_starttls_delivery(self, smtp_config):
        smtp_config()
        server = MagicMock()
        server.__enter__.return_value = server

        with patch("legalpro_lite.email_utils.smtplib.SMTP", return_value=server) as smtp:
            assert email_utils.send_email("a@example.com", "Hi", "<p>Hi</p>", "Hi")

        smtp.assert_called_once_with("smtp.example.com", 587)
        server.starttls.assert_called_once()
        server.login.assert_called_once_with("mailer", "secret")
        assert server.sendmail.call_args.args[1] == "a@example.com"

    def test_implicit_ssl_on_465(self, smtp_config):
        smtp_config(smtp_port=465)
        server = MagicMock()
        server.__enter__.return_value = server

        with patch("legalpro_lite.email_utils.smtplib.SMTP_SSL", return_value=server) as smtp_ssl:
            assert email_utils.send_email("a@example.com", "Hi", "<p>Hi</p>")

        smtp_ssl.assert_called_once_with("smtp.example.com", 465)
        server.starttls.assert_not_called()

    def test_smtp_failure_returns_false(self, smtp_config):
        smtp_config()

        with patch("legalpro_lite.email_utils.smtplib.SMTP", side_effect=OSError("refused")):
            assert email_utils.send_email("a@example.com", "Hi", "<p>Hi</p>") is False

    def test_unconfigured_development_logs_and_succeeds(self, smtp_config):
        smtp_config(smtp_host="", smtp_user="", smtp_password="")

        with patch("legalpro_lite.email_utils.smtplib.SMTP") as smtp:
            assert email_utils.send_email("a@example.com", "Hi", "<p>Hi</p>") is True

        smtp.assert_not_called()

    def test_unconfigured_production_fails(self, smtp_config):
        smtp_config(smtp_host="", production=True)

        assert email_utils.send_email("a@example.com", "Hi", "<p>Hi</p>") is False


class TestTemplates:

    def test_password_reset_link(self, smtp_config):
        smtp_config()

        with patch("legalpro_lite.email_utils.send_email", return_value=True) as send:
            email_utils.send_password_reset_email("a@example.com", "tok123", user_name="Asha <Rao>")

        kwargs = send.call_args.kwargs
        assert kwargs["subject"] == "Reset your LegalPro password"
        assert "https://app.legalpro.test/reset-password?token=tok123" in kwargs["text_body"]
        assert "Asha &lt;Rao&gt;" in kwargs["html_body"]

    def test_invoice_summary(self, smtp_config):
        smtp_config()
        invoice = SimpleNamespace(
            invoice_number="INV-42",
            currency="INR",
            issue_date=datetime(2026, 2, 1),
            due_date=None,
            items=[{"description": "Drafting", "quantity": 2, "unit_price": 1500, "amount": 3000}],
            subtotal=3000,
            tax_amount=540,
            discount_amount=0,
            total=3540,
            notes=None,
            terms=None,
        )

        with patch("legalpro_lite.email_utils.send_email", return_value=True) as send:
            assert email_utils.send_invoice_email("client@example.com", invoice, message="Thank you")

        kwargs = send.call_args.kwargs
        assert kwargs["to_email"] == "client@example.com"
        assert kwargs["subject"] == "Invoice INV-42"
        assert "INR 3,540.00" in kwargs["text_body"]
        assert "Drafting" in kwargs["html_body"]
        assert "Thank you" in kwargs["html_body"]
