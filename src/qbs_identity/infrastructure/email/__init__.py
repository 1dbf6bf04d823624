from qbs_identity.infrastructure.email.email_service import EmailService
from qbs_identity.infrastructure.email.notifier import (
    BackgroundEmailNotifier,
    Notifier,
    drain_background_tasks,
)

__all__ = [
    "BackgroundEmailNotifier",
    "EmailService",
    "Notifier",
    "drain_background_tasks",
]
