"""Outgoing e-mail over SMTP."""

import logging
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage

from mareye.config import Settings, get_settings
from mareye.schemas.contact import ContactForm, DataSubmission
from mareye.services import email_templates

logger = logging.getLogger(__name__)

TRANSIENT_SMTP_ERRORS = (ConnectionError, TimeoutError, smtplib.SMTPServerDisconnected)


@dataclass
class EmailResult:
    """Outcome of a send attempt."""

    success: bool
    error: str | None = None
    # True when nothing was sent because SMTP is not configured
    skipped: bool = False
    # Connection-level failure; the same message may go through later
    retryable: bool = False


class EmailService:
    """Send verification, welcome and contact e-mails through one SMTP account."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()

    @property
    def is_configured(self) -> bool:
        """Check if SMTP credentials are present."""
        return bool(self.settings.host_email and self.settings.host_email_password)

    def _build(
        self,
        to: str,
        subject: str,
        text: str,
        html: str,
        reply_to: str | None = None,
        sender_name: str | None = None,
    ) -> EmailMessage:
        msg = EmailMessage()
        sender = self.settings.host_email or ""
        msg["From"] = f'"{sender_name}" <{sender}>' if sender_name else sender
        msg["To"] = to
        msg["Subject"] = subject
        if reply_to:
            msg["Reply-To"] = reply_to
        msg.set_content(text)
        msg.add_alternative(html, subtype="html")
        return msg

    def _send(self, msg: EmailMessage) -> EmailResult:
        if self.settings.email_disabled:
            logger.info(f"Email disabled, not sending '{msg['Subject']}' to {msg['To']}")
            return EmailResult(success=True, skipped=True)
        if not self.is_configured:
            logger.warning("SMTP credentials not configured, cannot send email")
            return EmailResult(success=False, error="SMTP not configured", skipped=True)

        s = self.settings
        try:
            if s.smtp_use_ssl:
                server: smtplib.SMTP = smtplib.SMTP_SSL(
                    s.smtp_host, s.smtp_port, timeout=s.smtp_timeout_seconds
                )
            else:
                server = smtplib.SMTP(s.smtp_host, s.smtp_port, timeout=s.smtp_timeout_seconds)
            with server:
                if not s.smtp_use_ssl:
                    server.starttls()
                server.login(s.host_email, s.host_email_password)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send '{msg['Subject']}' to {msg['To']}: {e}")
            return EmailResult(
                success=False, error=str(e), retryable=isinstance(e, TRANSIENT_SMTP_ERRORS)
            )

        logger.info(f"Sent '{msg['Subject']}' to {msg['To']}")
        return EmailResult(success=True)

    def send_otp_email(self, to: str, code: str, name: str | None = None) -> EmailResult:
        subject, text, html = email_templates.otp_email(code, name, self.settings.otp_ttl_minutes)
        return self._send(self._build(to, subject, text, html))

    def send_welcome_email(self, to: str, name: str) -> EmailResult:
        dashboard_url = f"{self.settings.frontend_base_url.rstrip('/')}/dashboard"
        subject, text, html = email_templates.welcome_email(name, dashboard_url)
        return self._send(self._build(to, subject, text, html))

    def send_contact_message(self, form: ContactForm) -> EmailResult:
        subject, text, html = email_templates.contact_email(
            form.first_name, form.last_name, form.email, form.institution, form.message
        )
        msg = self._build(
            self._contact_recipient(),
            subject,
            text,
            html,
            reply_to=form.email or None,
            sender_name="MarEye Platform",
        )
        return self._send(msg)

    def send_data_submission(self, form: DataSubmission) -> EmailResult:
        tools = [(tool.name, tool.description) for tool in form.selected_tools]
        subject, text, html = email_templates.data_submission_email(
            form.name, form.email, form.institution, form.description, tools, form.file_summary()
        )
        msg = self._build(
            self._contact_recipient(),
            subject,
            text,
            html,
            reply_to=form.email,
            sender_name="MarEye Platform",
        )
        attachment = form.decoded_file()
        if attachment is not None:
            maintype, _, subtype = (form.file_type or "application/octet-stream").partition("/")
            msg.add_attachment(
                attachment,
                maintype=maintype,
                subtype=subtype or "octet-stream",
                filename=form.file_name,
            )
        return self._send(msg)

    def _contact_recipient(self) -> str:
        return self.settings.contact_recipient or self.settings.host_email or ""


def get_email_service() -> EmailService:
    """Get an e-mail service instance."""
    return EmailService()
