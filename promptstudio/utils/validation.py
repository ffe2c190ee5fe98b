"""
Form input validation - email, password and display name.

Each validator returns (is_valid, error_message); the message is None
when the value is valid.
"""
import re
from typing import Optional

EMAIL_REGEX = re.compile(
    r"^[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+@"
    r"[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)+$"
)
PASSWORD_MIN_LENGTH = 8
NAME_MIN_LENGTH = 2


def normalize_email(email: Optional[str]) -> str:
    """Trim and lower-case an email for storage and lookups."""
    if not email:
        return ""
    return email.strip().lower()


def validate_email(email: Optional[str]) -> tuple[bool, Optional[str]]:
    if not email:
        return False, "Email is required"
    if not EMAIL_REGEX.match(email):
        return False, "Invalid email format"
    return True, None


def validate_password(password: Optional[str]) -> tuple[bool, Optional[str]]:
    if not password:
        return False, "Password is required"
    if len(password) < PASSWORD_MIN_LENGTH:
        return False, f"Password must be at least {PASSWORD_MIN_LENGTH} characters"
    if not re.search(r"[A-Z]", password):
        return False, "Password must contain at least one uppercase letter"
    if not re.search(r"[a-z]", password):
        return False, "Password must contain at least one lowercase letter"
    if not re.search(r"\d", password):
        return False, "Password must contain at least one number"
    return True, None


def validate_name(name: Optional[str]) -> tuple[bool, Optional[str]]:
    if not name or not name.strip():
        return False, "Name is required"
    if len(name.strip()) < NAME_MIN_LENGTH:
        return False, f"Name must be at least {NAME_MIN_LENGTH} characters"
    return True, None
