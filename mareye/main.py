"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from mareye.api import (
    auth,
    chatbot,
    contact,
    detection,
    enhancement,
    history,
    profile,
    species,
    watchlist,
)
from mareye.config import get_settings
from mareye.services.errors import (
    LLMNotConfiguredError,
    UpstreamServiceError,
    UpstreamUnavailableError,
)
from mareye.services.otp_service import OTPSweeper, get_otp_service

settings = get_settings()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application startup and shutdown events."""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    sweeper = OTPSweeper(get_otp_service(), settings.otp_sweep_interval_seconds)
    await sweeper.start()
    yield
    await sweeper.stop()


app = FastAPI(
    title="MarEye API",
    description="MarEye marine security platform API",
    version="0.1.0",
    lifespan=lifespan,
)

cors_origins = [settings.frontend_base_url.rstrip("/")]
if settings.is_development:
    cors_origins += ["http://localhost:3000", "http://localhost:3001"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=sorted(set(cors_origins)),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report malformed request bodies as 400 with the first problem found."""
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        detail = f"{field}: {first.get('msg')}" if field else str(first.get("msg"))
    else:
        detail = "Invalid request"
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": detail})


@app.exception_handler(UpstreamServiceError)
async def upstream_error_handler(request: Request, exc: UpstreamServiceError):
    """Pass the backend's status and JSON body through unchanged."""
    return JSONResponse(status_code=exc.status_code, content=exc.payload)


@app.exception_handler(UpstreamUnavailableError)
async def upstream_unavailable_handler(request: Request, exc: UpstreamUnavailableError):
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"success": False, "detail": str(exc)},
    )


@app.exception_handler(LLMNotConfiguredError)
async def llm_not_configured_handler(request: Request, exc: LLMNotConfiguredError):
    logger.error(f"LLM provider not configured: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": str(exc)},
    )


# Register routers
app.include_router(auth.router)
app.include_router(profile.router)
app.include_router(history.router)
app.include_router(watchlist.router)
app.include_router(chatbot.router)
app.include_router(contact.router)
app.include_router(detection.router)
app.include_router(enhancement.router)
app.include_router(species.router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "environment": settings.environment}
