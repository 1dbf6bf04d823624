import html
import logging
import smtplib
import ssl
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from qbs_config.settings import Settings
from qbs_identity.infrastructure.email import templates

logger = logging.getLogger(__name__)


class EmailService:
    """Blocking SMTP sender for transactional emails."""

    def __init__(self, settings: Settings):
        self._settings = settings

    @property
    def enabled(self) -> bool:
        return self._settings.smtp_enabled

    def _create_message(
        self,
        to_email: str,
        subject: str,
        text_body: str,
        html_body: str | None = None,
    ) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = f"{self._settings.smtp_from_name} <{self._settings.smtp_from_email}>"
        msg["To"] = to_email

        msg.attach(MIMEText(text_body, "plain"))
        if html_body:
            msg.attach(MIMEText(html_body, "html"))

        return msg

    def _send_email(self, to_email: str, message: MIMEMultipart) -> None:
        if not self._settings.smtp_host:
            logger.error("SMTP host not configured")
            return

        smtp_password = (
            self._settings.smtp_password.get_secret_value()
            if self._settings.smtp_password
            else ""
        )

        try:
            if self._settings.smtp_use_tls and not self._settings.smtp_starttls:
                # Implicit TLS (port 465)
                context = ssl.create_default_context()
                with smtplib.SMTP_SSL(
                    self._settings.smtp_host,
                    self._settings.smtp_port,
                    context=context,
                ) as server:
                    if self._settings.smtp_user:
                        server.login(self._settings.smtp_user, smtp_password)
                    server.send_message(message)
            else:
                # STARTTLS (port 587) or plain
                with smtplib.SMTP(
                    self._settings.smtp_host,
                    self._settings.smtp_port,
                ) as server:
                    if self._settings.smtp_starttls:
                        context = ssl.create_default_context()
                        server.starttls(context=context)
                    if self._settings.smtp_user:
                        server.login(self._settings.smtp_user, smtp_password)
                    server.send_message(message)

            logger.info("Email sent to %s", to_email)

        except (smtplib.SMTPException, OSError) as e:
            logger.error("Failed to send email to %s: %s", to_email, e)
            raise

    def send_welcome_email(
        self,
        to_email: str,
        name: str,
        verification_link: str,
    ) -> None:
        if not self.enabled:
            logger.warning("SMTP disabled, skipping welcome email to %s", to_email)
            return

        safe_name = html.escape(name)
        message = self._create_message(
            to_email=to_email,
            subject=templates.WELCOME_SUBJECT,
            text_body=templates.WELCOME_TEXT.format(
                name=name,
                verification_link=verification_link,
            ),
            html_body=templates.render_html(
                templates.WELCOME_CONTENT.format(name=safe_name),
                link=verification_link,
                label="Verify Email",
                footer="You are receiving this because an account was created with this address.",
            ),
        )
        self._send_email(to_email, message)

    def send_verification_email(
        self,
        to_email: str,
        name: str,
        verification_link: str,
    ) -> None:
        if not self.enabled:
            logger.warning("SMTP disabled, skipping verification email to %s", to_email)
            return

        message = self._create_message(
            to_email=to_email,
            subject=templates.VERIFICATION_SUBJECT,
            text_body=templates.VERIFICATION_TEXT.format(
                name=name,
                verification_link=verification_link,
            ),
            html_body=templates.render_html(
                templates.VERIFICATION_CONTENT.format(name=html.escape(name)),
                link=verification_link,
                label="Verify Email",
            ),
        )
        self._send_email(to_email, message)

    def send_password_reset_email(self, to_email: str, reset_link: str) -> None:
        if not self.enabled:
            logger.warning(
                "SMTP disabled, skipping password reset email to %s",
                to_email,
            )
            return

        message = self._create_message(
            to_email=to_email,
            subject=templates.PASSWORD_RESET_SUBJECT,
            text_body=templates.PASSWORD_RESET_TEXT.format(reset_link=reset_link),
            html_body=templates.render_html(
                templates.PASSWORD_RESET_CONTENT,
                link=reset_link,
                label="Reset Password",
            ),
        )
        self._send_email(to_email, message)
