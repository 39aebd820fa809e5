"""Tests for the contact and data submission relay."""

import base64
from unittest.mock import MagicMock

import pytest

from mareye.api.dependencies import get_email_service
from mareye.main import app
from mareye.schemas.contact import DataSubmission
from mareye.services.email_service import EmailResult, EmailService

CONTACT = {
    "firstName": "Sylvia",
    "lastName": "Earle",
    "email": "sylvia@example.com",
    "institution": "Mission Blue",
    "message": "Interested in a pilot.",
}

SUBMISSION = {
    "name": "Sylvia Earle",
    "email": "sylvia@example.com",
    "institution": "Mission Blue",
    "description": "Hydrophone recordings from the Mariana trench",
    "selectedTools": [{"name": "Threat Detection", "description": "YOLO"}],
    "fileName": "survey.csv",
    "fileSize": 2048,
    "fileType": "text/csv",
    "fileBase64": "data:text/csv;base64," + base64.b64encode(b"depth,temp\n10,4").decode(),
}


@pytest.fixture
def email_service(client):
    service = MagicMock(spec=EmailService)
    service.is_configured = True
    service.send_contact_message.return_value = EmailResult(success=True)
    service.send_data_submission.return_value = EmailResult(success=True)
    app.dependency_overrides[get_email_service] = lambda: service
    return service


def test_contact_form_sent(client, email_service):
    response = client.post("/api/send-email", json=CONTACT)

    assert response.status_code == 200
    assert response.json()["message"].startswith("Message sent successfully")
    form = email_service.send_contact_message.call_args.args[0]
    assert form.first_name == "Sylvia"
    assert form.institution == "Mission Blue"


def test_data_submission_sent(client, email_service):
    response = client.post("/api/send-email", json=SUBMISSION)

    assert response.status_code == 200
    form = email_service.send_data_submission.call_args.args[0]
    assert form.decoded_file() == b"depth,temp\n10,4"
    assert form.selected_tools[0].name == "Threat Detection"
    email_service.send_contact_message.assert_not_called()


def test_invalid_form(client, email_service):
    response = client.post("/api/send-email", json={"firstName": "Only"})
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid form data"


def test_unconfigured_smtp_is_soft_success(client, email_service):
    email_service.is_configured = False

    response = client.post("/api/send-email", json=CONTACT)

    assert response.status_code == 200
    assert "logged" in response.json()["message"]
    email_service.send_contact_message.assert_not_called()


def test_delivery_failure_is_soft_success(client, email_service):
    email_service.send_contact_message.return_value = EmailResult(success=False, error="boom")

    response = client.post("/api/send-email", json=CONTACT)

    assert response.status_code == 200
    assert "issue with email delivery" in response.json()["message"]


def test_data_submission_summary_without_file():
    required = ("name", "email", "institution", "description")
    form = DataSubmission.model_validate({key: SUBMISSION[key] for key in required})
    assert form.file_summary() == "No file attached"
    assert form.decoded_file() is None
