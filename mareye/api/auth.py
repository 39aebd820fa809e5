"""Authentication API endpoints: password, OTP and Google sign-in."""

import logging
from typing import Annotated
from urllib.parse import quote

import httpx
from fastapi import APIRouter, Depends, HTTPException, Response, status
from fastapi.responses import JSONResponse, RedirectResponse
from kombu.exceptions import OperationalError
from pydantic import ValidationError
from sqlalchemy.orm import Session

from mareye.api.cookies import clear_auth_cookie, set_auth_cookie
from mareye.api.dependencies import get_google_oauth_client, get_otp
from mareye.config import get_settings
from mareye.database import get_db
from mareye.models.user import User
from mareye.schemas.auth import (
    AuthResponse,
    MessageResponse,
    UserLogin,
    UserRegister,
    UserResponse,
)
from mareye.schemas.otp import SendOTPRequest, VerifyOTPRequest
from mareye.services.auth import (
    authenticate_user,
    create_access_token,
    create_user,
    get_user_by_email,
    upsert_google_user,
)
from mareye.services.google_oauth import GoogleOAuthClient, GoogleOAuthError
from mareye.services.otp_service import OTPService
from mareye.services.otp_store import OTPPurpose
from mareye.tasks.email import send_welcome_email

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["auth"])


def user_response(user: User) -> UserResponse:
    """Serialize a user, falling back to the username for the first name."""
    return UserResponse(
        id=str(user.id),
        email=user.email,
        first_name=user.display_first_name,
        last_name=user.last_name or "",
        dob=user.dob or "",
        avatar=user.avatar or "",
        is_email_verified=bool(user.is_email_verified),
    )


@router.post("/register", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserRegister,
    db: Annotated[Session, Depends(get_db)],
):
    """Register a new user with a password."""
    if get_user_by_email(db, user_data.email):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User already exists")

    create_user(
        db,
        user_data.email,
        user_data.password,
        username=user_data.username,
        first_name=user_data.first_name,
        last_name=user_data.last_name,
        dob=user_data.dob,
        avatar=user_data.avatar,
    )
    logger.info(f"Registered user {user_data.email}")
    return MessageResponse(message="User registered successfully")


@router.post("/login", response_model=AuthResponse)
async def login(
    credentials: UserLogin,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
):
    """Login with email and password; the session token is set as a cookie."""
    user = authenticate_user(db, credentials.email, credentials.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )

    minutes = get_settings().login_token_minutes
    set_auth_cookie(response, create_access_token(user.id, user.email, minutes), minutes)
    return AuthResponse(message="Login successful", user=user_response(user))


@router.post("/logout", response_model=MessageResponse)
async def logout(response: Response):
    """Clear the session cookie."""
    clear_auth_cookie(response)
    return MessageResponse(message="Logged out successfully")


def queue_welcome_email(user: User) -> None:
    """Queue the welcome e-mail; a broker outage is logged and the request goes on."""
    try:
        send_welcome_email.delay(user.email, user.display_first_name)
    except OperationalError as e:
        logger.warning(f"Welcome email for {user.email} not queued: {e}")


@router.post("/send-otp", response_model=MessageResponse)
def send_otp(
    request: SendOTPRequest,
    db: Annotated[Session, Depends(get_db)],
    otp: Annotated[OTPService, Depends(get_otp)],
):
    """Send a verification code for registration or login."""
    existing = get_user_by_email(db, request.email)
    if request.type == OTPPurpose.REGISTRATION and existing:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User already exists with this email",
        )
    if request.type == OTPPurpose.LOGIN and not existing:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No account found with this email",
        )

    user_data = request.user_data or {}
    name = user_data.get("firstName") or user_data.get("username")
    if existing and not name:
        name = existing.display_first_name

    result = otp.issue(request.email, request.type, request.user_data, recipient_name=name)
    if not result.sent:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to send OTP email",
        )
    return MessageResponse(message="OTP sent successfully")


@router.post("/verify-otp")
def verify_otp(
    request: VerifyOTPRequest,
    db: Annotated[Session, Depends(get_db)],
    otp: Annotated[OTPService, Depends(get_otp)],
):
    """Verify a code and finish the registration or login it was issued for."""
    # Checked before verify so a malformed request never consumes a code
    try:
        purpose = OTPPurpose(request.type)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid verification type"
        ) from e

    verification = otp.verify(request.email, request.otp, purpose)
    if not verification.accepted:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=verification.message)

    minutes = get_settings().otp_token_minutes

    if purpose == OTPPurpose.REGISTRATION:
        payload = verification.pending_payload
        if not payload:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail="User data not found"
            )
        try:
            user_data = UserRegister.model_validate({**payload, "email": request.email})
        except ValidationError as e:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid user data"
            ) from e
        if get_user_by_email(db, user_data.email):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail="User already exists"
            )

        user = create_user(
            db,
            user_data.email,
            user_data.password,
            username=user_data.username,
            first_name=user_data.first_name,
            last_name=user_data.last_name,
            dob=user_data.dob,
            avatar=user_data.avatar,
            is_email_verified=True,
        )
        queue_welcome_email(user)
        logger.info(f"Registered user {user.email} via OTP")

        body = AuthResponse(message="Registration successful", user=user_response(user))
        content = body.model_dump(mode="json", by_alias=True)
        content["userData"] = user_data.model_dump(by_alias=True, exclude={"password"})
        response = JSONResponse(status_code=status.HTTP_201_CREATED, content=content)
        set_auth_cookie(response, create_access_token(user.id, user.email, minutes), minutes)
        return response

    user = get_user_by_email(db, request.email)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    body = AuthResponse(message="Login successful", user=user_response(user))
    response = JSONResponse(content=body.model_dump(mode="json", by_alias=True))
    set_auth_cookie(response, create_access_token(user.id, user.email, minutes), minutes)
    return response


@router.get("/auth/google")
async def google_start(
    google: Annotated[GoogleOAuthClient, Depends(get_google_oauth_client)],
):
    """Redirect to the Google consent screen."""
    return RedirectResponse(google.authorization_url())


def _login_error_redirect(message: str) -> RedirectResponse:
    frontend = get_settings().frontend_base_url.rstrip("/")
    return RedirectResponse(f"{frontend}/auth/login?error={quote(message)}")


@router.get("/auth/google/callback")
async def google_callback(
    db: Annotated[Session, Depends(get_db)],
    google: Annotated[GoogleOAuthClient, Depends(get_google_oauth_client)],
    code: str | None = None,
    error: str | None = None,
):
    """Finish Google sign-in, set a 7-day session cookie and return to the site."""
    if error:
        return _login_error_redirect(error)
    if not code:
        return _login_error_redirect("Missing code")

    try:
        profile = await google.profile_from_code(code)
    except (GoogleOAuthError, httpx.HTTPError) as e:
        logger.error(f"Google OAuth callback error: {e}")
        return _login_error_redirect("Google sign-in failed")

    try:
        user = upsert_google_user(db, profile)
    except ValueError as e:
        return _login_error_redirect(str(e))

    settings = get_settings()
    minutes = settings.google_token_minutes
    response = RedirectResponse(f"{settings.frontend_base_url.rstrip('/')}/")
    set_auth_cookie(response, create_access_token(user.id, user.email, minutes), minutes)
    logger.info(f"Google sign-in for {user.email}")
    return response
