"""Celery tasks for outgoing e-mail."""

import logging

from mareye.celery_app import app as celery_app
from mareye.services.email_service import get_email_service

logger = logging.getLogger(__name__)

RETRY_BASE_SECONDS = 30


@celery_app.task(bind=True, name="tasks.send_welcome_email", max_retries=3)
def send_welcome_email(self, email: str, name: str) -> dict:
    """Send the welcome e-mail after a verified registration.

    Connection failures are retried with exponential backoff; other
    failures are reported in the result and not retried.

    Args:
        email: Recipient address
        name: Name used in the greeting

    Returns:
        Dict with the send outcome
    """
    result = get_email_service().send_welcome_email(email, name)
    if result.success:
        return {"success": True, "skipped": result.skipped, "error": None}

    if result.retryable and self.request.retries < self.max_retries:
        countdown = RETRY_BASE_SECONDS * 2**self.request.retries
        logger.warning(f"Welcome email to {email} failed, retry in {countdown}s: {result.error}")
        raise self.retry(exc=ConnectionError(result.error), countdown=countdown)

    logger.error(f"Welcome email to {email} not sent: {result.error}")
    return {"success": False, "skipped": result.skipped, "error": result.error}
