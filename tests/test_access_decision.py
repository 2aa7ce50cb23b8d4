"""
Unit tests for AccessDecisionService over in-memory repositories.
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from app.models.enums import DecisionOutcome
from app.services.access_control import AccessDecisionService
from app.utils.exceptions import DatastoreError, ValidationError
from fakes import InMemoryData, InMemoryUnitOfWork

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


# ----------------------------------------------------------------
# Helpers
# ----------------------------------------------------------------

def make_service(data):
    uow = InMemoryUnitOfWork(data)
    return AccessDecisionService(uow, clock=lambda: NOW), uow


@pytest.fixture
def data():
    """Scanner S1, user U1 holding token A1B2C3D4, permanent grant (U1, S1)."""
    d = InMemoryData()
    d.add_scanner("S1")
    d.add_user("U1", email="u1@example.com")
    d.add_token("A1B2C3D4", user_id="U1")
    d.add_grant("U1", "S1")
    return d


# ----------------------------------------------------------------
# Input validation
# ----------------------------------------------------------------

class TestValidation:
    @pytest.mark.parametrize("scanner, token", [
        ("", "A1B2C3D4"),
        ("S1", ""),
        (None, "A1B2C3D4"),
        ("S1", None),
        ("   ", "A1B2C3D4"),
        ("S1", 1234),
    ])
    def test_missing_input_rejected_before_datastore(self, scanner, token):
        uow = MagicMock()
        service = AccessDecisionService(uow)

        with pytest.raises(ValidationError):
            service.decide(scanner, token)

        assert uow.call_count == 0


# ----------------------------------------------------------------
# Decision chain
# ----------------------------------------------------------------

class TestDecisionChain:
    def test_full_chain_grants_and_lowercase_uid_matches(self, data):
        service, _ = make_service(data)

        result = service.decide("S1", "a1b2c3d4")

        assert result.granted
        assert result.outcome is DecisionOutcome.GRANTED
        assert result.until is None
        assert result.user_email == "u1@example.com"
        assert result.token_uid == "a1b2c3d4"

    def test_grant_logs_once_and_stamps_last_used(self, data):
        service, _ = make_service(data)

        service.decide("S1", "A1B2C3D4")

        assert len(data.logs) == 1
        entry = data.logs[0]
        assert entry.access_granted is True
        assert entry.denial_reason is None
        assert entry.token_id == "T-A1B2C3D4"
        assert data.tokens["T-A1B2C3D4"].last_used_at == NOW

    def test_grant_echoes_expiration(self, data):
        expires = NOW + timedelta(days=30)
        data.add_grant("U1", "S1", expires_at=expires)
        service, _ = make_service(data)

        result = service.decide("S1", "A1B2C3D4")

        assert result.granted
        assert result.until == expires

    def test_unknown_scanner_writes_nothing(self, data):
        service, _ = make_service(data)

        result = service.decide("NOPE", "A1B2C3D4")

        assert result.outcome is DecisionOutcome.SCANNER_NOT_FOUND
        assert data.logs == []

    def test_disabled_scanner_is_logged_with_token(self, data):
        data.add_scanner("S1", is_active=False)
        service, _ = make_service(data)

        result = service.decide("S1", "A1B2C3D4")

        assert result.outcome is DecisionOutcome.SCANNER_DISABLED
        assert len(data.logs) == 1
        assert data.logs[0].denial_reason == "scanner disabled"
        assert data.logs[0].token_id == "T-A1B2C3D4"

    def test_unknown_token_logged_without_token_id(self, data):
        service, _ = make_service(data)

        result = service.decide("S1", "DEADBEEF")

        assert result.outcome is DecisionOutcome.TOKEN_NOT_FOUND
        assert len(data.logs) == 1
        entry = data.logs[0]
        assert entry.token_id is None
        assert entry.access_granted is False
        assert entry.denial_reason == "token not found"
        assert entry.rfid_uid == "DEADBEEF"

    def test_disabled_token(self, data):
        data.add_token("A1B2C3D4", user_id="U1", is_active=False)
        service, _ = make_service(data)

        result = service.decide("S1", "A1B2C3D4")

        assert result.outcome is DecisionOutcome.TOKEN_DISABLED
        assert data.logs[0].denial_reason == "token disabled"
        assert data.logs[0].token_id == "T-A1B2C3D4"

    def test_orphaned_token(self, data):
        del data.users["U1"]
        service, _ = make_service(data)

        result = service.decide("S1", "A1B2C3D4")

        assert result.outcome is DecisionOutcome.USER_NOT_FOUND
        assert data.logs[0].denial_reason == "user not found"

    def test_disabled_user(self, data):
        data.add_user("U1", is_active=False)
        service, _ = make_service(data)

        result = service.decide("S1", "A1B2C3D4")

        assert result.outcome is DecisionOutcome.USER_DISABLED
        assert data.logs[0].denial_reason == "user disabled"

    def test_no_grant_leaves_last_used_untouched(self, data):
        data.grants.clear()
        service, _ = make_service(data)

        result = service.decide("S1", "A1B2C3D4")

        assert result.outcome is DecisionOutcome.NO_ACCESS
        assert data.logs[0].denial_reason == "no access"
        assert data.tokens["T-A1B2C3D4"].last_used_at is None

    def test_disabled_grant(self, data):
        data.add_grant("U1", "S1", is_active=False)
        service, _ = make_service(data)

        result = service.decide("S1", "A1B2C3D4")

        assert result.outcome is DecisionOutcome.ACCESS_DISABLED
        assert data.logs[0].denial_reason == "access disabled"

    def test_expired_grant_denied_even_if_active(self, data):
        yesterday = NOW - timedelta(days=1)
        data.add_grant("U1", "S1", is_active=True, expires_at=yesterday)
        service, _ = make_service(data)

        result = service.decide("S1", "A1B2C3D4")

        assert result.outcome is DecisionOutcome.ACCESS_EXPIRED
        assert not result.granted
        assert result.until == yesterday
        assert data.logs[0].denial_reason == "access expired"
        assert data.tokens["T-A1B2C3D4"].last_used_at is None

    def test_grant_expiring_exactly_now_still_valid(self, data):
        data.add_grant("U1", "S1", expires_at=NOW)
        service, _ = make_service(data)

        assert service.decide("S1", "A1B2C3D4").granted

    def test_duplicate_taps_are_logged_separately(self, data):
        service, uow = make_service(data)

        service.decide("S1", "A1B2C3D4")
        service.decide("S1", "A1B2C3D4")

        assert len(data.logs) == 2
        assert data.logs[0].id != data.logs[1].id
        assert uow.calls == 2

    def test_every_call_rereads_state(self, data):
        service, _ = make_service(data)
        assert service.decide("S1", "A1B2C3D4").granted

        data.add_token("A1B2C3D4", user_id="U1", is_active=False)

        assert service.decide("S1", "A1B2C3D4").outcome is DecisionOutcome.TOKEN_DISABLED


# ----------------------------------------------------------------
# Atomicity
# ----------------------------------------------------------------

class TestAtomicity:
    def test_failed_commit_never_returns_a_grant(self, data):
        service, uow = make_service(data)
        uow.fail_on_commit = True

        with pytest.raises(DatastoreError):
            service.decide("S1", "A1B2C3D4")

        assert data.logs == []
        assert data.tokens["T-A1B2C3D4"].last_used_at is None

    def test_datastore_failure_mid_chain_propagates(self, data):
        service, _ = make_service(data)
        failing = MagicMock()
        failing.return_value.__enter__.return_value.scanners.get.side_effect = DatastoreError("down")
        service.unit_of_work = failing

        with pytest.raises(DatastoreError):
            service.decide("S1", "A1B2C3D4")
