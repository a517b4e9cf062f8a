"""
Email Utilities
===============

Email sending for password reset and invoices.
Supports both SMTP and a logging-only mode for development.
"""

import html
import smtplib
import logging
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from typing import Optional

from .config import get_settings

logger = logging.getLogger(__name__)

SMTP_SSL_PORT = 465


def get_email_config():
    """Get email configuration from settings."""
    settings = get_settings()
    return {
        "smtp_host": settings.smtp_host,
        "smtp_port": settings.smtp_port,
        "smtp_user": settings.smtp_user,
        "smtp_password": settings.smtp_password,
        "smtp_from": settings.smtp_from,
        "smtp_use_tls": settings.smtp_use_tls,
        "app_url": settings.public_app_url,
        "production": settings.is_production,
    }


def is_email_configured() -> bool:
    """Check if SMTP is properly configured."""
    config = get_email_config()
    return bool(config["smtp_host"] and config["smtp_user"] and config["smtp_password"])


def send_email(
    to_email: str,
    subject: str,
    html_body: str,
    text_body: Optional[str] = None
) -> bool:
    """
    Send an email.

    Returns True if sent successfully, False otherwise.
    Without SMTP configuration the email is logged instead (development) or
    reported as not sent (production).
    """
    config = get_email_config()

    if not is_email_configured():
        if config["production"]:
            logger.error(f"SMTP not configured; email to {to_email} not sent: {subject}")
            return False
        logger.info(f"[DEV MODE] Email would be sent to {to_email}: {subject}")
        logger.debug(f"[DEV MODE] Email body: {text_body or html_body[:200]}")
        return True

    try:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = config["smtp_from"]
        msg["To"] = to_email

        if text_body:
            msg.attach(MIMEText(text_body, "plain", "utf-8"))
        msg.attach(MIMEText(html_body, "html", "utf-8"))

        if config["smtp_port"] == SMTP_SSL_PORT:
            server = smtplib.SMTP_SSL(config["smtp_host"], config["smtp_port"])
        else:
            server = smtplib.SMTP(config["smtp_host"], config["smtp_port"])

        with server:
            if config["smtp_use_tls"] and config["smtp_port"] != SMTP_SSL_PORT:
                server.starttls()
            server.login(config["smtp_user"], config["smtp_password"])
            server.sendmail(config["smtp_from"], to_email, msg.as_string())

        logger.info(f"Email sent successfully to {to_email}")
        return True

    except Exception as e:
        logger.error(f"Failed to send email to {to_email}: {e}")
        return False


def send_password_reset_email(to_email: str, reset_token: str, user_name: Optional[str] = None) -> bool:
    """
    Send a password reset email.

    Args:
        to_email: Recipient email address
        reset_token: The password reset token
        user_name: Optional user name for personalization

    Returns:
        True if sent successfully, False otherwise
    """
    config = get_email_config()
    reset_link = f"{config['app_url']}/reset-password?token={reset_token}"

    greeting = f"Hello {html.escape(user_name)}," if user_name else "Hello,"

    html_body = f"""
    <!DOCTYPE html>
    <html lang="en">
    <head><meta charset="UTF-8"></head>
    <body style="font-family: Arial, sans-serif;">
        <div style="max-width: 600px; margin: 0 auto; padding: 20px;">
            <h1 style="font-size: 22px;">LegalPro</h1>
            <p>{greeting}</p>
            <p>We received a request to reset the password for your LegalPro account.</p>
            <p><a href="{reset_link}" style="display: inline-block; background: #1f4e79; color: white; padding: 12px 24px; text-decoration: none; border-radius: 6px;">Reset password</a></p>
            <p>This link is valid for one hour. If you did not ask for a reset, ignore this email.</p>
            <p style="word-break: break-all; font-size: 12px; color: #555;">{reset_link}</p>
        </div>
    </body>
    </html>
    """

    text_body = f"""
{greeting}

We received a request to reset the password for your LegalPro account.

Open this link to choose a new password:
{reset_link}

This link is valid for one hour. If you did not ask for a reset, ignore this email.
"""

    return send_email(
        to_email=to_email,
        subject="Reset your LegalPro password",
        html_body=html_body,
        text_body=text_body
    )


def _money(amount, currency: str) -> str:
    return f"{currency} {float(amount or 0):,.2f}"


def send_invoice_email(
    to_email: str,
    invoice,
    subject: Optional[str] = None,
    message: Optional[str] = None,
) -> bool:
    """
    Send an invoice summary to a client.

    Args:
        to_email: Recipient email address
        invoice: Invoice row (db.models.Invoice)
        subject: Optional subject, defaults to "Invoice <number>"
        message: Optional note shown above the line items
    """
    currency = invoice.currency or "INR"
    subject = subject or f"Invoice {invoice.invoice_number}"
    issue_date = invoice.issue_date.date().isoformat() if invoice.issue_date else "-"
    due_date = invoice.due_date.date().isoformat() if invoice.due_date else "-"

    rows = []
    lines = []
    for item in invoice.items or []:
        description = item.get("description", "")
        quantity = item.get("quantity", 0)
        amount = item.get("amount", 0)
        rows.append(
            f"<tr><td>{html.escape(str(description))}</td>"
            f"<td style=\"text-align: right;\">{quantity}</td>"
            f"<td style=\"text-align: right;\">{_money(item.get('unit_price', 0), currency)}</td>"
            f"<td style=\"text-align: right;\">{_money(amount, currency)}</td></tr>"
        )
        lines.append(f"- {description} x{quantity}: {_money(amount, currency)}")

    note_html = f"<p>{html.escape(message)}</p>" if message else ""

    html_body = f"""
    <!DOCTYPE html>
    <html lang="en">
    <head><meta charset="UTF-8"></head>
    <body style="font-family: Arial, sans-serif;">
        <div style="max-width: 640px; margin: 0 auto; padding: 20px;">
            <h2>Invoice {html.escape(invoice.invoice_number)}</h2>
            {note_html}
            <p>Issue date: {issue_date}<br>Due date: {due_date}</p>
            <table style="width: 100%; border-collapse: collapse;" border="1" cellpadding="6">
                <thead><tr><th>Description</th><th>Qty</th><th>Unit price</th><th>Amount</th></tr></thead>
                <tbody>{''.join(rows)}</tbody>
            </table>
            <p style="text-align: right;">
                Subtotal: {_money(invoice.subtotal, currency)}<br>
                Tax: {_money(invoice.tax_amount, currency)}<br>
                Discount: {_money(invoice.discount_amount, currency)}<br>
                <strong>Total: {_money(invoice.total, currency)}</strong>
            </p>
            {f"<p>{html.escape(invoice.terms)}</p>" if invoice.terms else ""}
        </div>
    </body>
    </html>
    """

    text_body = "\n".join([
        f"Invoice {invoice.invoice_number}",
        message or "",
        f"Issue date: {issue_date}",
        f"Due date: {due_date}",
        "",
        *lines,
        "",
        f"Total: {_money(invoice.total, currency)}",
    ])

    return send_email(
        to_email=to_email,
        subject=subject,
        html_body=html_body,
        text_body=text_body
    )
