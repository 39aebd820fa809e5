"""Tests for the OTP send and verify endpoints."""

import inspect

from kombu.exceptions import OperationalError

from mareye.api.auth import send_otp, verify_otp
from mareye.models.user import User

EMAIL = "newdiver@example.com"
USER_DATA = {
    "username": "newdiver",
    "email": EMAIL,
    "password": "deepsea123",
    "firstName": "Nemo",
    "lastName": "Diver",
}


def send_registration(client):
    return client.post(
        "/api/send-otp", json={"email": EMAIL, "type": "registration", "userData": USER_DATA}
    )


def test_send_otp_registration(client, otp_sender):
    response = send_registration(client)

    assert response.status_code == 200
    assert response.json() == {"message": "OTP sent successfully", "success": True}
    assert otp_sender.sent[0][0] == EMAIL


def test_send_otp_invalid_email(client):
    response = client.post("/api/send-otp", json={"email": "not-an-email", "type": "login"})
    assert response.status_code == 400


def test_send_otp_registration_existing_user(client, registered_user):
    response = client.post(
        "/api/send-otp", json={"email": registered_user["email"], "type": "registration"}
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "User already exists with this email"


def test_send_otp_login_unknown_user(client):
    response = client.post("/api/send-otp", json={"email": EMAIL, "type": "login"})
    assert response.status_code == 404
    assert response.json()["detail"] == "No account found with this email"


def test_send_otp_delivery_failure(client, otp_sender):
    otp_sender.fail = True
    response = send_registration(client)
    assert response.status_code == 500
    assert response.json()["detail"] == "Failed to send OTP email"


def test_verify_registration_creates_verified_user(client, db, otp_sender, welcome_task):
    send_registration(client)
    code = otp_sender.last_code(EMAIL)

    response = client.post(
        "/api/verify-otp", json={"email": EMAIL, "otp": code, "type": "registration"}
    )

    assert response.status_code == 201
    data = response.json()
    assert data["success"] is True
    assert data["user"]["email"] == EMAIL
    assert data["user"]["isEmailVerified"] is True
    assert data["userData"]["username"] == "newdiver"
    assert "password" not in data["userData"]
    assert "Max-Age=86400" in response.headers["set-cookie"]

    user = db.query(User).filter(User.email == EMAIL).one()
    assert user.is_email_verified
    assert user.password_hash and user.password_hash != "deepsea123"
    welcome_task.assert_called_once_with(EMAIL, "Nemo")

    # The new session cookie authenticates immediately
    assert client.get("/api/profile").json()["user"]["firstName"] == "Nemo"


def test_verify_registered_user_can_login_with_password(client, otp_sender):
    send_registration(client)
    client.post(
        "/api/verify-otp",
        json={"email": EMAIL, "otp": otp_sender.last_code(EMAIL), "type": "registration"},
    )
    response = client.post("/api/login", json={"email": EMAIL, "password": "deepsea123"})
    assert response.status_code == 200


def test_verify_wrong_code(client, otp_sender):
    send_registration(client)
    code = otp_sender.last_code(EMAIL)
    wrong = "000000" if code != "000000" else "111111"

    response = client.post(
        "/api/verify-otp", json={"email": EMAIL, "otp": wrong, "type": "registration"}
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid OTP"


def test_verify_without_pending_code(client):
    response = client.post(
        "/api/verify-otp", json={"email": EMAIL, "otp": "123456", "type": "registration"}
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "OTP not found or expired"


def test_verify_registration_without_user_data(client, otp_sender):
    client.post("/api/send-otp", json={"email": EMAIL, "type": "registration"})
    response = client.post(
        "/api/verify-otp",
        json={"email": EMAIL, "otp": otp_sender.last_code(EMAIL), "type": "registration"},
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "User data not found"


def test_verify_login(client, registered_user, otp_sender):
    email = registered_user["email"]
    assert client.post("/api/send-otp", json={"email": email, "type": "login"}).status_code == 200

    response = client.post(
        "/api/verify-otp",
        json={"email": email, "otp": otp_sender.last_code(email), "type": "login"},
    )

    assert response.status_code == 200
    assert response.json()["message"] == "Login successful"
    assert "auth_token=" in response.headers["set-cookie"]


def test_verify_unknown_type(client, registered_user, otp_sender):
    email = registered_user["email"]
    client.post("/api/send-otp", json={"email": email, "type": "login"})

    response = client.post(
        "/api/verify-otp",
        json={"email": email, "otp": otp_sender.last_code(email), "type": "password-reset"},
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid verification type"


def test_registration_code_cannot_complete_login(client, otp_sender):
    send_registration(client)
    code = otp_sender.last_code(EMAIL)
    # Account created by password meanwhile, so a login would otherwise succeed
    client.post("/api/register", json=USER_DATA)

    response = client.post("/api/verify-otp", json={"email": EMAIL, "otp": code, "type": "login"})

    assert response.status_code == 400
    assert response.json()["detail"] == "OTP was not issued for this verification type"
    assert "set-cookie" not in response.headers


def test_login_code_cannot_complete_registration(client, db, registered_user, otp_sender):
    email = registered_user["email"]
    client.post("/api/send-otp", json={"email": email, "type": "login"})
    code = otp_sender.last_code(email)

    response = client.post(
        "/api/verify-otp", json={"email": email, "otp": code, "type": "registration"}
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "OTP was not issued for this verification type"
    # The code is left in place for the flow it belongs to
    response = client.post("/api/verify-otp", json={"email": email, "otp": code, "type": "login"})
    assert response.status_code == 200


def test_unknown_type_does_not_consume_code(client, otp_sender):
    send_registration(client)
    code = otp_sender.last_code(EMAIL)

    response = client.post(
        "/api/verify-otp", json={"email": EMAIL, "otp": code, "type": "Registration"}
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid verification type"

    response = client.post(
        "/api/verify-otp", json={"email": EMAIL, "otp": code, "type": "registration"}
    )
    assert response.status_code == 201


def test_registration_survives_broker_outage(client, db, otp_sender, welcome_task):
    welcome_task.side_effect = OperationalError("Error 111 connecting to redis")
    send_registration(client)

    response = client.post(
        "/api/verify-otp",
        json={"email": EMAIL, "otp": otp_sender.last_code(EMAIL), "type": "registration"},
    )

    assert response.status_code == 201
    assert "auth_token=" in response.headers["set-cookie"]
    assert db.query(User).filter(User.email == EMAIL).count() == 1
    welcome_task.assert_called_once()


def test_otp_handlers_run_off_the_event_loop():
    """SMTP delivery and password hashing block, so these handlers are sync."""
    assert not inspect.iscoroutinefunction(send_otp)
    assert not inspect.iscoroutinefunction(verify_otp)
