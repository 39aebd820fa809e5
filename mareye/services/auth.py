"""Authentication service for JWT and password handling."""

import logging
from datetime import UTC, datetime, timedelta
from typing import Any

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy import or_
from sqlalchemy.orm import Session

from mareye.config import get_settings
from mareye.models.user import User

logger = logging.getLogger(__name__)

settings = get_settings()

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class TokenError(Exception):
    """Raised when a token cannot be trusted."""


class TokenExpiredError(TokenError):
    pass


class TokenStructureError(TokenError):
    """Signature is valid but the claims are not what we issue."""


def verify_password(plain_password: str, hashed_password: str | None) -> bool:
    """Verify a password against its hash."""
    if not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password."""
    return pwd_context.hash(password)


def create_access_token(user_id: int, email: str, expires_minutes: int) -> str:
    """Create a JWT access token."""
    expire = datetime.now(UTC) + timedelta(minutes=expires_minutes)
    to_encode = {
        "sub": str(user_id),
        "email": email,
        "exp": expire,
    }
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict[str, Any]:
    """Decode and validate a JWT token.

    Raises:
        TokenExpiredError: the token's exp has passed
        TokenError: bad signature or malformed token
        TokenStructureError: the token carries no subject
    """
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except ExpiredSignatureError as e:
        raise TokenExpiredError(str(e)) from e
    except JWTError as e:
        raise TokenError(str(e)) from e

    if not payload.get("sub"):
        raise TokenStructureError("Token does not contain user ID")
    return payload


def authenticate_user(db: Session, email: str, password: str) -> User | None:
    """Authenticate a user by email and password."""
    user = get_user_by_email(db, email)
    if not user:
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user


def get_user_by_email(db: Session, email: str) -> User | None:
    """Get a user by email."""
    return db.query(User).filter(User.email == email.strip().lower()).first()


def get_user_by_id(db: Session, user_id: int) -> User | None:
    return db.query(User).filter(User.id == user_id).first()


def create_user(
    db: Session,
    email: str,
    password: str,
    username: str | None = None,
    first_name: str = "",
    last_name: str = "",
    dob: str = "",
    avatar: str = "",
    is_email_verified: bool = False,
) -> User:
    """Create a new user."""
    user = User(
        email=email.strip().lower(),
        password_hash=get_password_hash(password),
        username=username,
        first_name=first_name or "",
        last_name=last_name or "",
        dob=dob or "",
        avatar=avatar or "",
        is_email_verified=is_email_verified,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def upsert_google_user(db: Session, profile: dict[str, Any]) -> User:
    """Create or update the account matching a Google userinfo profile.

    Matches on e-mail or Google subject id. Username and creation time are
    only set when the row is new; name, avatar and verification flag are
    refreshed on every sign-in.
    """
    email = (profile.get("email") or "").strip().lower()
    if not email:
        raise ValueError("Email not available from Google")
    google_id = profile.get("sub")

    filters = [User.email == email]
    if google_id:
        filters.append(User.google_id == google_id)
    user = db.query(User).filter(or_(*filters)).first()

    if user is None:
        user = User(email=email, username=profile.get("name") or email.split("@")[0])
        db.add(user)
        logger.info(f"Creating account for Google user {email}")

    user.email = email
    user.first_name = profile.get("given_name") or ""
    user.last_name = profile.get("family_name") or ""
    user.avatar = profile.get("picture") or ""
    user.google_id = google_id
    user.is_email_verified = bool(profile.get("email_verified"))

    db.commit()
    db.refresh(user)
    return user
