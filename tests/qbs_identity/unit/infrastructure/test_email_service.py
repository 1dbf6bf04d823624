"""Unit tests for the SMTP EmailService."""

import smtplib
from unittest.mock import MagicMock, patch

import pytest

from qbs_identity.infrastructure.email import EmailService

SMTP_PATH = "qbs_identity.infrastructure.email.email_service.smtplib.SMTP"


@pytest.fixture
def smtp_settings(make_settings):
    return make_settings(
        smtp_enabled=True,
        smtp_host="smtp.mail.com",
        smtp_port=587,
        smtp_user="mailer",
        smtp_password="smtp-secret",
        smtp_from_email="noreply@mail.com",
    )


class TestEmailService:
    def test_disabled_service_sends_nothing(self, make_settings):
        service = EmailService(make_settings())

        with patch(SMTP_PATH) as smtp:
            service.send_password_reset_email("a@b.com", "https://x/reset")

        smtp.assert_not_called()

    def test_password_reset_uses_starttls_and_login(self, smtp_settings):
        service = EmailService(smtp_settings)
        server = MagicMock()

        with patch(SMTP_PATH) as smtp:
            smtp.return_value.__enter__.return_value = server
            service.send_password_reset_email("a@b.com", "https://x/reset?token=abc")

        smtp.assert_called_once_with("smtp.mail.com", 587)
        server.starttls.assert_called_once()
        server.login.assert_called_once_with("mailer", "smtp-secret")
        message = server.send_message.call_args.args[0]
        assert message["To"] == "a@b.com"
        assert message["From"] == "QB Securiegnty <noreply@mail.com>"
        assert "https://x/reset?token=abc" in message.as_string()

    def test_welcome_escapes_name_in_html(self, smtp_settings):
        service = EmailService(smtp_settings)
        server = MagicMock()

        with patch(SMTP_PATH) as smtp:
            smtp.return_value.__enter__.return_value = server
            service.send_welcome_email("a@b.com", "<Ada>", "https://x/verify")

        html_part = server.send_message.call_args.args[0].get_payload()[1]
        body = html_part.get_payload(decode=True).decode()
        assert "&lt;Ada&gt;" in body
        assert "<Ada>" not in body

    def test_smtp_failure_propagates(self, smtp_settings):
        service = EmailService(smtp_settings)

        with patch(SMTP_PATH, side_effect=smtplib.SMTPException("boom")):
            with pytest.raises(smtplib.SMTPException):
                service.send_verification_email("a@b.com", "Ada", "https://x/verify")
