"""
Validators — Regex and rule-based validation for registration input and ids.
"""
import re

# Indian mobile numbers: leading 6-9, then nine more ASCII digits
MOBILE_PATTERN = re.compile(r"^[6-9][0-9]{9}$")
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
UUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE
)

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 100


def validate_mobile(mobile: str | None) -> bool:
    """Validate a 10-digit Indian mobile number (e.g. 9876543210)."""
    if not mobile:
        return False
    return bool(MOBILE_PATTERN.match(mobile.strip()))


def validate_email(email: str | None) -> bool:
    if not email:
        return False
    return bool(EMAIL_PATTERN.match(email.strip()))


def validate_name(name: str | None) -> tuple[bool, str]:
    """Validate a full name after trimming. Returns (ok, message)."""
    cleaned = (name or "").strip()
    if not cleaned:
        return False, "Name is required"
    if len(cleaned) < NAME_MIN_LENGTH:
        return False, f"Name must be at least {NAME_MIN_LENGTH} characters"
    if len(cleaned) > NAME_MAX_LENGTH:
        return False, f"Name must be at most {NAME_MAX_LENGTH} characters"
    return True, "Valid"


def validate_uuid(value) -> bool:
    """Canonical 8-4-4-4-12 hex UUID string."""
    return isinstance(value, str) and bool(UUID_PATTERN.match(value))
