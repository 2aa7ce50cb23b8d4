# =======================================================================================
# app/services/access_control.py - Core Business Logic
# =======================================================================================
import logging
from datetime import datetime
from typing import Any, Callable, Optional

from ..models.enums import DENIAL_REASONS, DecisionOutcome
from ..models.schemas import AccessGrant, AccessLogEntry, DecisionResult, Token, User
from ..repositories.base import AccessStore, UnitOfWork
from ..utils.validators import normalize_rfid_uid, require_text, utc_now

logger = logging.getLogger(__name__)


class AccessDecisionService:
    """
    Decides whether a card presented at a scanner opens the door.

    Every call re-reads scanner, token, user and grant inside one unit of
    work, writes exactly one audit log row (unless the scanner is unknown)
    and, on a grant, stamps the token's last use. The result is only
    returned once the unit of work has committed.
    """

    def __init__(self, unit_of_work: UnitOfWork, clock: Callable[[], datetime] = utc_now):
        self.unit_of_work = unit_of_work
        self.clock = clock

    @staticmethod
    def is_expired(grant: AccessGrant, now: datetime) -> bool:
        """A grant expires strictly after its expiration instant."""
        return grant.expires_at is not None and grant.expires_at < now

    def decide(self, scanner_id: Any, raw_token_uid: Any) -> DecisionResult:
        """
        Run the decision chain for one card tap.

        Raises ValidationError before any datastore access if either input
        is missing or empty, and DatastoreError if the transaction fails.
        """
        scanner_id = require_text("scanner", scanner_id)
        require_text("token", raw_token_uid)
        rfid_uid = normalize_rfid_uid(raw_token_uid)

        with self.unit_of_work() as store:
            result = self._evaluate(store, scanner_id, raw_token_uid, rfid_uid)

        logger.info(
            "Access %s: scanner=%s uid=%s user=%s",
            result.outcome.value, scanner_id, rfid_uid, result.user_label,
        )
        return result

    def _evaluate(self, store: AccessStore, scanner_id: str, raw_uid: str, rfid_uid: str) -> DecisionResult:
        now = self.clock()

        # 1. Scanner; without one there is nothing to attach a log row to
        scanner = store.scanners.get(scanner_id)
        if scanner is None:
            return DecisionResult(
                outcome=DecisionOutcome.SCANNER_NOT_FOUND,
                scanner_id=scanner_id,
                token_uid=raw_uid,
            )

        # 2. Token
        token = store.tokens.get_by_uid(rfid_uid)
        if not scanner.is_active:
            return self._deny(store, DecisionOutcome.SCANNER_DISABLED, scanner_id, raw_uid, now, token)
        if token is None:
            return self._deny(store, DecisionOutcome.TOKEN_NOT_FOUND, scanner_id, raw_uid, now)
        if not token.is_active:
            return self._deny(store, DecisionOutcome.TOKEN_DISABLED, scanner_id, raw_uid, now, token)

        # 3. Owning user
        user = store.users.get(token.user_id)
        if user is None:
            return self._deny(store, DecisionOutcome.USER_NOT_FOUND, scanner_id, raw_uid, now, token)
        if not user.is_active:
            return self._deny(store, DecisionOutcome.USER_DISABLED, scanner_id, raw_uid, now, token, user)

        # 4. Grant for (user, scanner)
        grant = store.grants.get_for(user.id, scanner.id)
        if grant is None:
            return self._deny(store, DecisionOutcome.NO_ACCESS, scanner_id, raw_uid, now, token, user)
        if not grant.is_active:
            return self._deny(store, DecisionOutcome.ACCESS_DISABLED, scanner_id, raw_uid, now, token, user, grant)
        if self.is_expired(grant, now):
            return self._deny(store, DecisionOutcome.ACCESS_EXPIRED, scanner_id, raw_uid, now, token, user, grant)

        # 5. Granted
        store.audit_log.append(
            AccessLogEntry(
                token_id=token.id,
                scanner_id=scanner_id,
                access_granted=True,
                rfid_uid=raw_uid,
                timestamp=now,
            )
        )
        store.tokens.touch_last_used(token.id, now)

        return DecisionResult(
            outcome=DecisionOutcome.GRANTED,
            scanner_id=scanner_id,
            token_uid=raw_uid,
            token_id=token.id,
            user_id=user.id,
            user_email=user.email,
            until=grant.expires_at,
        )

    @staticmethod
    def _deny(
        store: AccessStore,
        outcome: DecisionOutcome,
        scanner_id: str,
        raw_uid: str,
        now: datetime,
        token: Optional[Token] = None,
        user: Optional[User] = None,
        grant: Optional[AccessGrant] = None,
    ) -> DecisionResult:
        """Log a denied attempt and build its result."""
        reason = DENIAL_REASONS[outcome]
        store.audit_log.append(
            AccessLogEntry(
                token_id=token.id if token else None,
                scanner_id=scanner_id,
                access_granted=False,
                rfid_uid=raw_uid,
                denial_reason=reason,
                timestamp=now,
            )
        )
        return DecisionResult(
            outcome=outcome,
            scanner_id=scanner_id,
            token_uid=raw_uid,
            token_id=token.id if token else None,
            user_id=user.id if user else (token.user_id if token else None),
            user_email=user.email if user else None,
            until=grant.expires_at if grant else None,
            denial_reason=reason,
        )
