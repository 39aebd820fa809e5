"""One-time password issuance and verification.

A code proves control of an e-mail address before an account is created or
a login completes. For registrations the whole pending account payload rides
along with the code, so nothing is written to the users table until the code
is verified.

Per e-mail the record moves NONE -> ISSUED -> VERIFIED | EXPIRED |
ATTEMPTS_EXHAUSTED, and every terminal state removes the record. Issuing
again while ISSUED overwrites the record and restarts the machine.
"""

import asyncio
import hmac
import logging
import secrets
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from enum import StrEnum
from functools import lru_cache
from typing import Any, Protocol

import redis

from mareye.config import get_settings
from mareye.services.email_service import EmailResult, get_email_service
from mareye.services.otp_store import (
    InMemoryOTPStore,
    OTPPurpose,
    OTPRecord,
    OTPStore,
    RedisOTPStore,
)

logger = logging.getLogger(__name__)


class OTPSender(Protocol):
    def send_otp_email(self, to: str, code: str, name: str | None = None) -> EmailResult: ...


class VerificationReason(StrEnum):
    VERIFIED = "verified"
    NOT_FOUND = "not_found"
    EXPIRED = "expired"
    TOO_MANY_ATTEMPTS = "too_many_attempts"
    MISMATCH = "mismatch"
    WRONG_PURPOSE = "wrong_purpose"


REASON_MESSAGES = {
    VerificationReason.VERIFIED: "OTP verified successfully",
    VerificationReason.NOT_FOUND: "OTP not found or expired",
    VerificationReason.EXPIRED: "OTP has expired",
    VerificationReason.TOO_MANY_ATTEMPTS: "Too many failed attempts. Please request a new OTP",
    VerificationReason.MISMATCH: "Invalid OTP",
    VerificationReason.WRONG_PURPOSE: "OTP was not issued for this verification type",
}


@dataclass
class IssueResult:
    """Whether the code reached the user's inbox."""

    sent: bool
    error: str | None = None


@dataclass
class OTPVerification:
    """Outcome of checking a candidate code."""

    accepted: bool
    reason: VerificationReason
    pending_payload: dict[str, Any] | None = None
    purpose: OTPPurpose | None = None

    @property
    def message(self) -> str:
        return REASON_MESSAGES[self.reason]


def _utcnow() -> datetime:
    return datetime.now(UTC)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def generate_code() -> str:
    """Return a cryptographically random six-digit code."""
    return str(100000 + secrets.randbelow(900000))


class OTPService:
    """Issue and verify codes against an injected store."""

    def __init__(
        self,
        store: OTPStore,
        sender: OTPSender,
        ttl: timedelta = timedelta(minutes=10),
        max_attempts: int = 3,
        clock: Callable[[], datetime] = _utcnow,
        log_codes: bool = False,
    ) -> None:
        self.store = store
        self.sender = sender
        self.ttl = ttl
        self.max_attempts = max_attempts
        self.clock = clock
        self.log_codes = log_codes

    def issue(
        self,
        email: str,
        purpose: OTPPurpose,
        pending_payload: dict[str, Any] | None = None,
        recipient_name: str | None = None,
    ) -> IssueResult:
        """Store a fresh code for the e-mail and send it.

        The record is kept even when sending fails, so a retried send can
        still succeed against it.
        """
        key = normalize_email(email)
        now = self.clock()
        code = generate_code()
        self.store.set(
            OTPRecord(
                email=key,
                code=code,
                expires_at=now + self.ttl,
                purpose=purpose,
                pending_payload=pending_payload,
            ),
            now,
        )
        self.store.purge_expired(now)

        if self.log_codes:
            logger.debug(f"OTP for {key}: {code}")

        result = self.sender.send_otp_email(key, code, recipient_name)
        if not result.success:
            logger.warning(f"OTP for {key} stored but not delivered: {result.error}")
            return IssueResult(sent=False, error=result.error)
        return IssueResult(sent=True)

    def verify(
        self, email: str, candidate: str, purpose: OTPPurpose | None = None
    ) -> OTPVerification:
        """Check a candidate code and consume the record on success.

        With `purpose` given, a record issued for another flow is refused
        before the code is compared and is left untouched.
        """
        key = normalize_email(email)
        record = self.store.get(key)
        if record is None:
            return OTPVerification(False, VerificationReason.NOT_FOUND)

        now = self.clock()
        if record.is_expired(now):
            self.store.delete(key)
            return OTPVerification(False, VerificationReason.EXPIRED, purpose=record.purpose)

        if record.attempts >= self.max_attempts:
            self.store.delete(key)
            return OTPVerification(
                False, VerificationReason.TOO_MANY_ATTEMPTS, purpose=record.purpose
            )

        if purpose is not None and record.purpose != purpose:
            return OTPVerification(False, VerificationReason.WRONG_PURPOSE, purpose=record.purpose)

        if not hmac.compare_digest(record.code.encode(), candidate.strip().encode()):
            record.attempts += 1
            if record.attempts >= self.max_attempts:
                self.store.delete(key)
                logger.info(f"OTP for {key} exhausted after {record.attempts} failed attempts")
                return OTPVerification(
                    False, VerificationReason.TOO_MANY_ATTEMPTS, purpose=record.purpose
                )
            self.store.set(record, now)
            return OTPVerification(False, VerificationReason.MISMATCH, purpose=record.purpose)

        self.store.delete(key)
        return OTPVerification(
            True,
            VerificationReason.VERIFIED,
            pending_payload=record.pending_payload,
            purpose=record.purpose,
        )

    def sweep(self) -> int:
        """Drop expired records regardless of verify traffic."""
        removed = self.store.purge_expired(self.clock())
        if removed:
            logger.info(f"Swept {removed} expired OTP records")
        return removed


class OTPSweeper:
    """Background task that sweeps expired codes on a fixed interval."""

    def __init__(self, service: OTPService, interval_seconds: int) -> None:
        self.service = service
        self.interval_seconds = max(interval_seconds, 1)
        self._task: asyncio.Task | None = None
        self._stop_event = asyncio.Event()

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        if self.running:
            return
        logger.info(f"Starting OTP sweeper every {self.interval_seconds} seconds")
        self._stop_event = asyncio.Event()
        self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        if not self._task:
            return
        self._stop_event.set()
        await self._task
        self._task = None

    async def _run(self) -> None:
        while not self._stop_event.is_set():
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self.interval_seconds)
            except TimeoutError:
                try:
                    self.service.sweep()
                except Exception:
                    logger.exception("OTP sweep failed")


def build_otp_store() -> OTPStore:
    """Create the store selected by OTP_STORE_BACKEND."""
    settings = get_settings()
    if settings.otp_store_backend == "redis":
        return RedisOTPStore(redis.from_url(settings.redis_url))
    return InMemoryOTPStore()


@lru_cache
def get_otp_service() -> OTPService:
    """Get the process-wide OTP service."""
    settings = get_settings()
    return OTPService(
        store=build_otp_store(),
        sender=get_email_service(),
        ttl=timedelta(minutes=settings.otp_ttl_minutes),
        max_attempts=settings.otp_max_attempts,
        log_codes=not settings.is_production,
    )
