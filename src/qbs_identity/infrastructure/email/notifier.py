"""Fire-and-forget delivery of account emails.

Sending happens in background tasks on a worker thread; a failed send is
logged and never reaches the request that triggered it.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Set

from qbs_identity.infrastructure.email.email_service import EmailService

logger = logging.getLogger(__name__)

# Store references to fire-and-forget tasks to prevent garbage collection
_background_tasks: Set[asyncio.Task] = set()


class Notifier(ABC):
    """Outbound account notifications."""

    @abstractmethod
    def send_welcome(self, to_email: str, name: str, verification_link: str) -> None:
        """Welcome a new account and ask for email confirmation."""

    @abstractmethod
    def send_verification(
        self,
        to_email: str,
        name: str,
        verification_link: str,
    ) -> None:
        """Send a fresh email confirmation link."""

    @abstractmethod
    def send_password_reset(self, to_email: str, reset_link: str) -> None:
        """Send a password reset link."""


class BackgroundEmailNotifier(Notifier):
    """Notifier that hands each email to a background task."""

    def __init__(self, email_service: EmailService):
        self._email_service = email_service

    def send_welcome(self, to_email: str, name: str, verification_link: str) -> None:
        self._dispatch(
            "welcome",
            self._email_service.send_welcome_email,
            to_email,
            name,
            verification_link,
        )

    def send_verification(
        self,
        to_email: str,
        name: str,
        verification_link: str,
    ) -> None:
        self._dispatch(
            "verification",
            self._email_service.send_verification_email,
            to_email,
            name,
            verification_link,
        )

    def send_password_reset(self, to_email: str, reset_link: str) -> None:
        self._dispatch(
            "password reset",
            self._email_service.send_password_reset_email,
            to_email,
            reset_link,
        )

    def _dispatch(self, kind: str, send: Callable[..., None], *args: Any) -> None:
        task = asyncio.get_running_loop().create_task(self._deliver(kind, send, *args))
        _background_tasks.add(task)
        task.add_done_callback(_background_tasks.discard)

    @staticmethod
    async def _deliver(kind: str, send: Callable[..., None], *args: Any) -> None:
        try:
            await asyncio.to_thread(send, *args)
        except Exception as e:
            logger.error("Failed to deliver %s email: %s", kind, e)


async def drain_background_tasks() -> None:
    """Wait for pending deliveries (used on shutdown)."""
    if _background_tasks:
        await asyncio.gather(*_background_tasks, return_exceptions=True)
