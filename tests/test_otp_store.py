"""Tests for OTP record serialization and the Redis store."""

from datetime import UTC, datetime, timedelta
from unittest.mock import MagicMock

from mareye.services.otp_store import OTPPurpose, OTPRecord, RedisOTPStore

NOW = datetime(2026, 1, 1, 12, 0, tzinfo=UTC)


def make_record(**overrides) -> OTPRecord:
    values = {
        "email": "diver@example.com",
        "code": "123456",
        "expires_at": NOW + timedelta(minutes=10),
        "purpose": OTPPurpose.REGISTRATION,
        "pending_payload": {"username": "diver"},
    }
    values.update(overrides)
    return OTPRecord(**values)


def test_record_json_preserves_fields():
    record = make_record(attempts=2)
    restored = OTPRecord.from_json(record.to_json())
    assert restored == record


def test_redis_set_uses_remaining_lifetime_as_ttl():
    client = MagicMock()
    store = RedisOTPStore(client)

    store.set(make_record(), NOW)

    key, value = client.set.call_args.args
    assert key == "otp:diver@example.com"
    assert OTPRecord.from_json(value).code == "123456"
    assert client.set.call_args.kwargs["px"] == 600_000


def test_redis_ttl_follows_caller_clock_not_wall_clock():
    """TTL is measured from the service clock, which may differ from wall time."""
    client = MagicMock()
    store = RedisOTPStore(client)
    issued_at = datetime(2030, 6, 1, 8, 0, tzinfo=UTC)
    record = make_record(expires_at=issued_at + timedelta(minutes=10))

    store.set(record, issued_at + timedelta(minutes=4))

    assert client.set.call_args.kwargs["px"] == 360_000


def test_redis_set_of_expired_record_deletes_it():
    client = MagicMock()
    store = RedisOTPStore(client)

    store.set(make_record(expires_at=NOW - timedelta(seconds=1)), NOW)

    client.set.assert_not_called()
    client.delete.assert_called_once_with("otp:diver@example.com")


def test_redis_get_roundtrip_and_missing():
    client = MagicMock()
    record = make_record()
    stored = {"otp:diver@example.com": record.to_json().encode()}
    client.get.side_effect = stored.get
    store = RedisOTPStore(client)

    assert store.get("diver@example.com").pending_payload == {"username": "diver"}
    assert store.get("nobody@example.com") is None


def test_redis_get_discards_corrupt_record():
    client = MagicMock()
    client.get.return_value = b"not json"
    store = RedisOTPStore(client)

    assert store.get("diver@example.com") is None
    client.delete.assert_called_once_with("otp:diver@example.com")


def test_redis_purge_is_noop():
    assert RedisOTPStore(MagicMock()).purge_expired(NOW) == 0
