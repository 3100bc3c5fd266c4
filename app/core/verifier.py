"""
Secure-link verification pipeline.

Checks run in a fixed order and short-circuit on the first failure:
lookup -> status -> expiry -> email. Only when all pass does the verifier
issue its single write, a conditional pending -> verified transition.
Expected failures come back as a VerificationResult; store faults and
duplicate tokens raise and are turned into a 500 at the API boundary.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from app.core.errors import DataIntegrityError
from app.core.link_states import PENDING
from app.store.link_repo import LinkStore
from app.utils.time import now_utc


class Outcome(str, Enum):
    VERIFIED = "verified"
    INVALID_REQUEST = "invalid_request"
    NOT_FOUND = "not_found"
    ALREADY_USED = "already_used"
    EXPIRED = "expired"
    EMAIL_MISMATCH = "email_mismatch"
    INTERNAL_ERROR = "internal_error"


# Outcome -> (HTTP status, user-facing text). Callers key their UI off this.
OUTCOME_HTTP: Dict[Outcome, tuple] = {
    Outcome.VERIFIED: (200, "Email verification successful."),
    Outcome.INVALID_REQUEST: (400, "Token and email are required."),
    # Deliberately vague: does not reveal whether the token ever existed
    Outcome.NOT_FOUND: (404, "Invalid or expired link."),
    Outcome.ALREADY_USED: (400, "This link has already been used."),
    Outcome.EXPIRED: (400, "This link has expired."),
    Outcome.EMAIL_MISMATCH: (403, "Email address does not match our records."),
    Outcome.INTERNAL_ERROR: (500, "An internal server error occurred. Please try again."),
}


@dataclass
class VerificationResult:
    outcome: Outcome
    link_id: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return self.outcome is Outcome.VERIFIED

    @property
    def status_code(self) -> int:
        return OUTCOME_HTTP[self.outcome][0]

    def to_body(self) -> Dict[str, Any]:
        """Response body: {success, error} on failure, {success, message, ...} on success."""
        text = OUTCOME_HTTP[self.outcome][1]
        if not self.success:
            return {"success": False, "error": text}
        return {"success": True, "message": text, **self.details}


def internal_error() -> VerificationResult:
    return VerificationResult(outcome=Outcome.INTERNAL_ERROR)


def normalize_email(value: str) -> str:
    return value.strip().lower()


def _present(value) -> bool:
    return isinstance(value, str) and value != ""


def verify(token, email, store: LinkStore, now: Optional[datetime] = None) -> VerificationResult:
    if not _present(token) or not _present(email):
        return VerificationResult(outcome=Outcome.INVALID_REQUEST)

    links = store.find_by_token(token)
    if not links:
        return VerificationResult(outcome=Outcome.NOT_FOUND)
    if len(links) > 1:
        raise DataIntegrityError(len(links))
    link = links[0]

    if link.status != PENDING:
        return VerificationResult(outcome=Outcome.ALREADY_USED, link_id=link.id)

    now = now or now_utc()
    if link.expires_at < now:
        return VerificationResult(outcome=Outcome.EXPIRED, link_id=link.id)

    if normalize_email(email) != normalize_email(link.customer_email):
        return VerificationResult(outcome=Outcome.EMAIL_MISMATCH, link_id=link.id)

    # Conditional write; losing a race to a concurrent request reads as "used"
    if not store.mark_verified(link.id):
        return VerificationResult(outcome=Outcome.ALREADY_USED, link_id=link.id)

    return VerificationResult(
        outcome=Outcome.VERIFIED,
        link_id=link.id,
        details={
            "customer_name": link.customer_name,
            "customer_email": link.customer_email,
            "secure_link_id": link.id,
            "staff_creator_email": link.staff_creator_email,
        },
    )
