"""Contact form and data submission relay."""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, HTTPException, status
from pydantic import ValidationError

from mareye.api.dependencies import get_email_service
from mareye.schemas.contact import ContactForm, ContactResponse, DataSubmission
from mareye.services.email_service import EmailResult, EmailService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["contact"])

SENT_MESSAGE = "Message sent successfully! We'll get back to you soon."
NOT_CONFIGURED_MESSAGE = (
    "Form submitted successfully! The submission has been logged for the team."
)
DELIVERY_FAILED_MESSAGE = (
    "Message received! There was an issue with email delivery, but your message "
    "has been logged and we'll respond soon."
)

CONTACT_FIELDS = ("firstName", "lastName", "message")
SUBMISSION_FIELDS = ("name", "email", "institution", "description")


def parse_submission(data: dict[str, Any]) -> ContactForm | DataSubmission:
    """Classify a payload as a contact message or a data submission."""
    try:
        if all(data.get(key) for key in CONTACT_FIELDS):
            return ContactForm.model_validate(data)
        if all(data.get(key) for key in SUBMISSION_FIELDS):
            return DataSubmission.model_validate(data)
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid form data"
        ) from e
    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid form data")


def log_submission(form: ContactForm | DataSubmission) -> None:
    if isinstance(form, ContactForm):
        logger.info(
            f"Contact form from {form.first_name} {form.last_name} <{form.email}> "
            f"({form.institution}): {form.message}"
        )
        return
    tools = ", ".join(tool.name for tool in form.selected_tools) or "none"
    logger.info(
        f"Data submission from {form.name} <{form.email}> ({form.institution}), "
        f"tools: {tools}; {form.file_summary()}"
    )


@router.post("/send-email", response_model=ContactResponse)
def send_email(
    data: Annotated[dict[str, Any], Body()],
    email_service: Annotated[EmailService, Depends(get_email_service)],
):
    """Relay a contact message or data submission to the site owner.

    The submission is always logged; delivery problems still answer 200.
    """
    form = parse_submission(data)
    log_submission(form)

    if not email_service.is_configured:
        logger.warning("SMTP credentials not configured; submission only logged")
        return ContactResponse(message=NOT_CONFIGURED_MESSAGE)

    if isinstance(form, ContactForm):
        result: EmailResult = email_service.send_contact_message(form)
    else:
        result = email_service.send_data_submission(form)

    if not result.success:
        logger.warning(f"Email delivery failed, submission kept in logs: {result.error}")
        return ContactResponse(message=DELIVERY_FAILED_MESSAGE)
    return ContactResponse(message=SENT_MESSAGE)
