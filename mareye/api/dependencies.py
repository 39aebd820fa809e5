"""FastAPI dependencies for authentication, database and outbound services."""

import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from mareye.config import get_settings
from mareye.database import get_db
from mareye.models.user import User
from mareye.services.auth import (
    TokenError,
    TokenStructureError,
    decode_access_token,
    get_user_by_id,
)
from mareye.services.chatbot import ChatService
from mareye.services.detection_client import DetectionClient
from mareye.services.email_service import EmailService
from mareye.services.enhancement_client import EnhancementClient
from mareye.services.google_oauth import GoogleOAuthClient
from mareye.services.otp_service import OTPService, get_otp_service
from mareye.services.species_service import SpeciesService

logger = logging.getLogger(__name__)

_BEARER_PREFIX = re.compile(r"^Bearer\s+", re.IGNORECASE)


@dataclass
class AuthIdentity:
    """Caller identity carried by a verified token."""

    user_id: int
    email: str | None
    source: str


class TokenStrategy(ABC):
    """One place a request may carry a session token."""

    name: str

    @abstractmethod
    def extract(self, request: Request) -> str | None:
        """Return the raw token, or None if this source has none."""


class CookieTokenStrategy(TokenStrategy):
    name = "cookie"

    def extract(self, request: Request) -> str | None:
        return request.cookies.get(get_settings().auth_cookie_name) or None


class BearerHeaderStrategy(TokenStrategy):
    name = "bearer"

    def extract(self, request: Request) -> str | None:
        authorization = request.headers.get("authorization")
        if not authorization or not _BEARER_PREFIX.match(authorization):
            return None
        return _BEARER_PREFIX.sub("", authorization).strip() or None


# Tried in order; the first token that verifies wins. Cookie comes first so
# browser sessions never get overridden by an unrelated Authorization header.
AUTH_STRATEGIES: tuple[TokenStrategy, ...] = (CookieTokenStrategy(), BearerHeaderStrategy())


def resolve_identity(
    request: Request, strategies: tuple[TokenStrategy, ...] = AUTH_STRATEGIES
) -> AuthIdentity:
    """Derive the caller identity from the first strategy whose token verifies."""
    failure: str | None = None
    for strategy in strategies:
        token = strategy.extract(request)
        if not token:
            continue
        try:
            payload = decode_access_token(token)
            user_id = int(payload["sub"])
        except TokenStructureError:
            failure = failure or "Invalid token structure"
            continue
        except (TokenError, ValueError):
            failure = failure or "Invalid or expired token"
            continue
        return AuthIdentity(user_id=user_id, email=payload.get("email"), source=strategy.name)

    if failure is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No authentication cookie found",
            headers={"WWW-Authenticate": "Bearer"},
        )
    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=failure,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
) -> User:
    """Get the current authenticated user from the cookie or bearer token."""
    identity = resolve_identity(request)
    user = get_user_by_id(db, identity.user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


def get_otp(service: Annotated[OTPService, Depends(get_otp_service)]) -> OTPService:
    """Get the shared OTP service."""
    return service


def get_email_service() -> EmailService:
    """Get e-mail service instance."""
    return EmailService()


def get_chat_service() -> ChatService:
    """Get chatbot service instance."""
    return ChatService()


def get_detection_client() -> DetectionClient:
    """Get threat detection backend client."""
    return DetectionClient()


def get_enhancement_client() -> EnhancementClient:
    """Get image enhancement backend client."""
    return EnhancementClient()


def get_species_service() -> SpeciesService:
    """Get species identification service."""
    return SpeciesService()


def get_google_oauth_client() -> GoogleOAuthClient:
    """Get Google OAuth client."""
    return GoogleOAuthClient()
