"""
Error Taxonomy — Stable, client-safe error vocabulary.

Every failure that reaches the client is one of these. The message is safe to
show to a visitor; upstream detail is logged server-side and never attached.
"""
from typing import Optional


class GateError(Exception):
    """Base class for errors rendered as ``{"error": message, ...extra}``."""

    status_code = 500
    code = "error"
    message = "Something went wrong. Please try again."

    def __init__(self, message: Optional[str] = None, **extra):
        self.message = message or self.message
        self.extra = extra
        super().__init__(self.message)

    def to_body(self) -> dict:
        return {"error": self.message, **self.extra}


class ValidationError(GateError):
    status_code = 400
    code = "validation_error"
    message = "Invalid input"

    def __init__(self, message: Optional[str] = None, field: Optional[str] = None):
        if field:
            super().__init__(message, field=field)
        else:
            super().__init__(message)
        self.field = field


class DuplicateContactError(GateError):
    status_code = 409
    code = "duplicate_contact"
    message = "This mobile number is already registered"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message, field="mobile")


class AlreadyRegistered(GateError):
    status_code = 409
    code = "already_registered"
    message = "Registration is already complete for this session"


class NotFound(GateError):
    status_code = 404
    code = "not_found"
    message = "Session not found"


class NotEligible(GateError):
    status_code = 403
    code = "not_eligible"
    message = "Complete all verification steps first"

    def __init__(self, step1_verified: bool, step2_verified: bool, message: Optional[str] = None):
        super().__init__(
            message,
            step1_verified=bool(step1_verified),
            step2_verified=bool(step2_verified),
        )


class RateLimited(GateError):
    status_code = 429
    code = "rate_limited"
    message = "Rate limit exceeded. Please try again in a moment."


class ServiceUnavailable(GateError):
    status_code = 402
    code = "service_unavailable"
    message = "Service temporarily unavailable. Please try again later."


class StoreUnavailable(GateError):
    status_code = 503
    code = "store_unavailable"
    message = "Could not reach the database. Please try again."


class VerificationFailed(GateError):
    status_code = 500
    code = "verification_failed"
    message = "Verification failed. Please try again."


class Unexpected(GateError):
    status_code = 500
    code = "unexpected"
