"""Session cookie helpers."""

from fastapi import Response

from mareye.config import get_settings


def set_auth_cookie(response: Response, token: str, max_age_minutes: int) -> None:
    """Attach the session token as an HTTP-only cookie."""
    settings = get_settings()
    response.set_cookie(
        key=settings.auth_cookie_name,
        value=token,
        max_age=max_age_minutes * 60,
        path="/",
        httponly=True,
        samesite="lax",
        secure=settings.is_production,
    )


def clear_auth_cookie(response: Response) -> None:
    settings = get_settings()
    response.delete_cookie(
        key=settings.auth_cookie_name,
        path="/",
        httponly=True,
        samesite="lax",
        secure=settings.is_production,
    )
