"""Storage backends for pending one-time passwords.

Records are keyed by e-mail address. The in-memory store is volatile: a
process restart drops every in-flight code and the user simply requests a
new one. The Redis store shares records across API instances and lets Redis
expire them.
"""

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any

import redis

logger = logging.getLogger(__name__)


class OTPPurpose(StrEnum):
    """What a verified code unlocks."""

    REGISTRATION = "registration"
    LOGIN = "login"


@dataclass
class OTPRecord:
    """A pending code for one e-mail address."""

    email: str
    code: str
    expires_at: datetime
    purpose: OTPPurpose
    attempts: int = 0
    pending_payload: dict[str, Any] | None = field(default=None)

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at

    def to_json(self) -> str:
        return json.dumps(
            {
                "email": self.email,
                "code": self.code,
                "expires_at": self.expires_at.isoformat(),
                "purpose": self.purpose.value,
                "attempts": self.attempts,
                "pending_payload": self.pending_payload,
            }
        )

    @classmethod
    def from_json(cls, raw: str | bytes) -> "OTPRecord":
        data = json.loads(raw)
        return cls(
            email=data["email"],
            code=data["code"],
            expires_at=datetime.fromisoformat(data["expires_at"]),
            purpose=OTPPurpose(data["purpose"]),
            attempts=int(data.get("attempts", 0)),
            pending_payload=data.get("pending_payload"),
        )


class OTPStore(ABC):
    """Key-value interface for OTP records."""

    @abstractmethod
    def get(self, email: str) -> OTPRecord | None:
        """Return the record for an e-mail, or None."""

    @abstractmethod
    def set(self, record: OTPRecord, now: datetime) -> None:
        """Store a record, replacing any existing one for the same e-mail.

        `now` is the caller's clock reading, used to size backend expiry.
        """

    @abstractmethod
    def delete(self, email: str) -> None:
        """Remove the record for an e-mail if present."""

    @abstractmethod
    def purge_expired(self, now: datetime) -> int:
        """Remove expired records and return how many were removed."""


class InMemoryOTPStore(OTPStore):
    """Process-local store backed by a dict."""

    def __init__(self) -> None:
        self._records: dict[str, OTPRecord] = {}

    def get(self, email: str) -> OTPRecord | None:
        return self._records.get(email)

    def set(self, record: OTPRecord, now: datetime) -> None:
        self._records[record.email] = record

    def delete(self, email: str) -> None:
        self._records.pop(email, None)

    def purge_expired(self, now: datetime) -> int:
        expired = [email for email, record in list(self._records.items()) if record.is_expired(now)]
        for email in expired:
            self._records.pop(email, None)
        return len(expired)

    def __len__(self) -> int:
        return len(self._records)


class RedisOTPStore(OTPStore):
    """Shared store; each record carries a Redis TTL matching its expiry."""

    key_prefix = "otp:"

    def __init__(self, client: redis.Redis) -> None:
        self._client = client

    def _key(self, email: str) -> str:
        return f"{self.key_prefix}{email}"

    def get(self, email: str) -> OTPRecord | None:
        raw = self._client.get(self._key(email))
        if raw is None:
            return None
        try:
            return OTPRecord.from_json(raw)
        except (ValueError, KeyError) as e:
            logger.warning(f"Discarding unreadable OTP record for {email}: {e}")
            self.delete(email)
            return None

    def set(self, record: OTPRecord, now: datetime) -> None:
        ttl_ms = int((record.expires_at - now).total_seconds() * 1000)
        if ttl_ms <= 0:
            self.delete(record.email)
            return
        self._client.set(self._key(record.email), record.to_json(), px=ttl_ms)

    def delete(self, email: str) -> None:
        self._client.delete(self._key(email))

    def purge_expired(self, now: datetime) -> int:
        # Redis expires keys on its own
        return 0
