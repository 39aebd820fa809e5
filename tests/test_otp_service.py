"""Tests for OTP issuance, verification and sweeping."""

import asyncio
from datetime import timedelta

import pytest

from mareye.services.otp_service import (
    OTPService,
    OTPSweeper,
    VerificationReason,
    generate_code,
    normalize_email,
)
from mareye.services.otp_store import InMemoryOTPStore, OTPPurpose

EMAIL = "diver@example.com"


@pytest.fixture
def store():
    return InMemoryOTPStore()


@pytest.fixture
def service(store, otp_sender, clock):
    return OTPService(store=store, sender=otp_sender, clock=clock)


def wrong_code(code: str) -> str:
    return "000000" if code != "000000" else "111111"


def test_generate_code_is_six_digits():
    for _ in range(200):
        code = generate_code()
        assert len(code) == 6
        assert 100000 <= int(code) <= 999999


def test_normalize_email():
    assert normalize_email("  Diver@Example.COM ") == EMAIL


def test_issue_stores_and_sends(service, store, otp_sender, clock):
    """A fresh code is stored with a ten minute expiry and e-mailed."""
    result = service.issue(EMAIL, OTPPurpose.REGISTRATION, {"username": "diver"})

    assert result.sent
    record = store.get(EMAIL)
    assert record.expires_at == clock.now + timedelta(minutes=10)
    assert record.attempts == 0
    assert otp_sender.sent == [(EMAIL, record.code)]


def test_issue_normalizes_email(service, store, otp_sender):
    service.issue("  DIVER@example.com", OTPPurpose.LOGIN)
    assert store.get(EMAIL) is not None
    assert otp_sender.sent[0][0] == EMAIL


def test_issue_keeps_record_when_send_fails(service, store, otp_sender):
    otp_sender.fail = True
    result = service.issue(EMAIL, OTPPurpose.LOGIN)

    assert not result.sent
    assert result.error == "SMTP down"
    assert store.get(EMAIL) is not None


def test_reissue_overwrites_previous_code(service, store, otp_sender):
    service.issue(EMAIL, OTPPurpose.LOGIN)
    first = store.get(EMAIL).code
    service.issue(EMAIL, OTPPurpose.LOGIN)
    second = otp_sender.last_code(EMAIL)

    assert store.get(EMAIL).code == second
    if first != second:
        assert service.verify(EMAIL, first).reason == VerificationReason.MISMATCH


def test_verify_success_returns_payload_and_consumes(service, store, otp_sender):
    payload = {"username": "diver", "password": "secret"}
    service.issue(EMAIL, OTPPurpose.REGISTRATION, payload)
    code = otp_sender.last_code(EMAIL)

    result = service.verify(EMAIL, code)

    assert result.accepted
    assert result.reason == VerificationReason.VERIFIED
    assert result.message == "OTP verified successfully"
    assert result.pending_payload == payload
    assert result.purpose == OTPPurpose.REGISTRATION
    assert store.get(EMAIL) is None
    assert service.verify(EMAIL, code).reason == VerificationReason.NOT_FOUND


def test_verify_unknown_email(service):
    result = service.verify(EMAIL, "123456")
    assert not result.accepted
    assert result.reason == VerificationReason.NOT_FOUND
    assert result.message == "OTP not found or expired"


def test_verify_expired_deletes_record(service, store, otp_sender, clock):
    service.issue(EMAIL, OTPPurpose.LOGIN)
    code = otp_sender.last_code(EMAIL)
    clock.advance(minutes=10, seconds=1)

    result = service.verify(EMAIL, code)

    assert result.reason == VerificationReason.EXPIRED
    assert result.message == "OTP has expired"
    assert store.get(EMAIL) is None


def test_verify_at_exact_expiry_is_still_valid(service, otp_sender, clock):
    service.issue(EMAIL, OTPPurpose.LOGIN)
    clock.advance(minutes=10)
    assert service.verify(EMAIL, otp_sender.last_code(EMAIL)).accepted


def test_mismatch_increments_attempts(service, store, otp_sender):
    service.issue(EMAIL, OTPPurpose.LOGIN)
    code = otp_sender.last_code(EMAIL)

    result = service.verify(EMAIL, wrong_code(code))

    assert result.reason == VerificationReason.MISMATCH
    assert result.message == "Invalid OTP"
    assert store.get(EMAIL).attempts == 1


def test_third_wrong_guess_exhausts_record(service, store, otp_sender):
    """After three wrong guesses even the correct code is refused."""
    service.issue(EMAIL, OTPPurpose.LOGIN)
    code = otp_sender.last_code(EMAIL)
    bad = wrong_code(code)

    assert service.verify(EMAIL, bad).reason == VerificationReason.MISMATCH
    assert service.verify(EMAIL, bad).reason == VerificationReason.MISMATCH
    third = service.verify(EMAIL, bad)

    assert third.reason == VerificationReason.TOO_MANY_ATTEMPTS
    assert third.message == "Too many failed attempts. Please request a new OTP"
    assert store.get(EMAIL) is None
    assert not service.verify(EMAIL, code).accepted


def test_record_with_exhausted_attempts_is_rejected(service, store, otp_sender, clock):
    service.issue(EMAIL, OTPPurpose.LOGIN)
    record = store.get(EMAIL)
    record.attempts = 3
    store.set(record, clock.now)

    result = service.verify(EMAIL, record.code)

    assert result.reason == VerificationReason.TOO_MANY_ATTEMPTS
    assert store.get(EMAIL) is None


def test_correct_code_after_two_misses(service, otp_sender):
    service.issue(EMAIL, OTPPurpose.LOGIN)
    code = otp_sender.last_code(EMAIL)
    service.verify(EMAIL, wrong_code(code))
    service.verify(EMAIL, wrong_code(code))

    assert service.verify(EMAIL, code).accepted


def test_sweep_removes_only_expired(service, store, clock):
    service.issue("old@example.com", OTPPurpose.LOGIN)
    clock.advance(minutes=6)
    service.issue("new@example.com", OTPPurpose.LOGIN)
    clock.advance(minutes=5)

    assert service.sweep() == 1
    assert store.get("old@example.com") is None
    assert store.get("new@example.com") is not None


@pytest.mark.asyncio
async def test_sweeper_runs_on_interval(service, store, clock):
    service.issue(EMAIL, OTPPurpose.LOGIN)
    clock.advance(minutes=11)

    sweeper = OTPSweeper(service, interval_seconds=1)
    await sweeper.start()
    assert sweeper.running
    await asyncio.sleep(1.2)
    await sweeper.stop()

    assert not sweeper.running
    assert len(store) == 0


def test_verify_refuses_code_issued_for_other_purpose(service, store, otp_sender):
    service.issue(EMAIL, OTPPurpose.REGISTRATION, {"username": "diver"})
    code = otp_sender.last_code(EMAIL)

    result = service.verify(EMAIL, code, OTPPurpose.LOGIN)

    assert not result.accepted
    assert result.reason == VerificationReason.WRONG_PURPOSE
    assert store.get(EMAIL).attempts == 0
    assert service.verify(EMAIL, code, OTPPurpose.REGISTRATION).accepted
