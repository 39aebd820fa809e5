"""Tests for SMTP delivery and the welcome e-mail task."""

import smtplib
from unittest.mock import MagicMock, patch

import pytest
from celery.exceptions import Retry

from mareye.config import Settings
from mareye.services.email_service import EmailResult, EmailService
from mareye.tasks.email import send_welcome_email


def make_settings(**overrides) -> Settings:
    values = {
        "host_email": "noreply@mareye.test",
        "host_email_password": "app-password",
        "email_disabled": False,
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def mock_smtp():
    with patch("mareye.services.email_service.smtplib.SMTP") as mock_cls:
        yield mock_cls.return_value


class TestEmailService:
    def test_sends_otp_over_starttls(self, mock_smtp):
        result = EmailService(make_settings()).send_otp_email("diver@example.com", "123456")

        assert result == EmailResult(success=True)
        mock_smtp.starttls.assert_called_once()
        mock_smtp.login.assert_called_once_with("noreply@mareye.test", "app-password")
        msg = mock_smtp.send_message.call_args.args[0]
        assert msg["To"] == "diver@example.com"
        assert "123456" in msg.get_body(("plain",)).get_content()

    def test_disabled_skips_sending(self, mock_smtp):
        result = EmailService(make_settings(email_disabled=True)).send_welcome_email(
            "diver@example.com", "Sam"
        )

        assert result.success is True
        assert result.skipped is True
        mock_smtp.send_message.assert_not_called()

    def test_unconfigured_reports_failure(self, mock_smtp):
        service = EmailService(make_settings(host_email=None, host_email_password=None))

        result = service.send_otp_email("diver@example.com", "123456")

        assert result.success is False
        assert result.error == "SMTP not configured"
        mock_smtp.send_message.assert_not_called()

    def test_smtp_error_reported(self, mock_smtp):
        mock_smtp.login.side_effect = smtplib.SMTPAuthenticationError(535, b"bad credentials")

        result = EmailService(make_settings()).send_otp_email("diver@example.com", "123456")

        assert result.success is False
        assert "bad credentials" in result.error
        assert result.retryable is False

    def test_refused_connection_is_retryable(self):
        with patch(
            "mareye.services.email_service.smtplib.SMTP",
            side_effect=ConnectionRefusedError("refused"),
        ):
            result = EmailService(make_settings()).send_welcome_email("diver@example.com", "Sam")

        assert result.success is False
        assert result.retryable is True

    def test_welcome_links_dashboard(self, mock_smtp):
        settings = make_settings(frontend_base_url="https://oceanova.example/")

        EmailService(settings).send_welcome_email("diver@example.com", "Sam")

        msg = mock_smtp.send_message.call_args.args[0]
        assert "https://oceanova.example/dashboard" in msg.get_body(("plain",)).get_content()


class TestWelcomeTask:
    def test_task_reports_outcome(self):
        service = MagicMock()
        service.send_welcome_email.return_value = EmailResult(success=True)
        with patch("mareye.tasks.email.get_email_service", return_value=service):
            result = send_welcome_email("diver@example.com", "Sam")

        service.send_welcome_email.assert_called_once_with("diver@example.com", "Sam")
        assert result == {"success": True, "skipped": False, "error": None}

    def test_task_reports_failure(self):
        service = MagicMock()
        service.send_welcome_email.return_value = EmailResult(success=False, error="SMTP down")
        with patch("mareye.tasks.email.get_email_service", return_value=service):
            result = send_welcome_email("diver@example.com", "Sam")

        assert result["success"] is False
        assert result["error"] == "SMTP down"

    def test_task_retries_when_smtp_refuses_connection(self):
        with (
            patch(
                "mareye.tasks.email.get_email_service",
                return_value=EmailService(make_settings()),
            ),
            patch(
                "mareye.services.email_service.smtplib.SMTP",
                side_effect=ConnectionRefusedError("refused"),
            ),
            patch.object(send_welcome_email, "retry", side_effect=Retry()) as mock_retry,
        ):
            with pytest.raises(Retry):
                send_welcome_email("diver@example.com", "Sam")

        mock_retry.assert_called_once()
        assert isinstance(mock_retry.call_args.kwargs["exc"], ConnectionError)
        assert mock_retry.call_args.kwargs["countdown"] == 30

    def test_task_does_not_retry_permanent_failure(self):
        service = MagicMock()
        service.send_welcome_email.return_value = EmailResult(success=False, error="535 auth")
        with (
            patch("mareye.tasks.email.get_email_service", return_value=service),
            patch.object(send_welcome_email, "retry") as mock_retry,
        ):
            result = send_welcome_email("diver@example.com", "Sam")

        mock_retry.assert_not_called()
        assert result["success"] is False
