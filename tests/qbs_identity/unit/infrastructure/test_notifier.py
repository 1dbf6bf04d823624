"""Unit tests for the background email notifier."""

import smtplib
from unittest.mock import Mock

import pytest

from qbs_identity.infrastructure.email import (
    BackgroundEmailNotifier,
    EmailService,
    drain_background_tasks,
)


class TestBackgroundEmailNotifier:
    def setup_method(self):
        self.email_service = Mock(spec=EmailService)
        self.notifier = BackgroundEmailNotifier(self.email_service)

    @pytest.mark.asyncio
    async def test_welcome_is_delivered_in_background(self):
        self.notifier.send_welcome("a@b.com", "Ada", "https://x/verify")
        await drain_background_tasks()

        self.email_service.send_welcome_email.assert_called_once_with(
            "a@b.com",
            "Ada",
            "https://x/verify",
        )

    @pytest.mark.asyncio
    async def test_reset_and_verification_are_delivered(self):
        self.notifier.send_verification("a@b.com", "Ada", "https://x/verify")
        self.notifier.send_password_reset("a@b.com", "https://x/reset")
        await drain_background_tasks()

        self.email_service.send_verification_email.assert_called_once()
        self.email_service.send_password_reset_email.assert_called_once_with(
            "a@b.com",
            "https://x/reset",
        )

    @pytest.mark.asyncio
    async def test_delivery_failure_is_logged_not_raised(self, caplog):
        self.email_service.send_password_reset_email.side_effect = (
            smtplib.SMTPException("down")
        )

        self.notifier.send_password_reset("a@b.com", "https://x/reset")
        await drain_background_tasks()

        assert "Failed to deliver password reset email" in caplog.text
