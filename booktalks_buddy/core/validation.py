"""
Form validation helpers.

Pure functions shared by the request schemas and the services. Each validator
sanitizes its input first (script blocks, scriptable URL schemes, inline event
handlers and markup are removed, whitespace is collapsed) and then checks the
cleaned value.
"""

from __future__ import annotations

import re
import uuid
from dataclasses import dataclass
from typing import Optional

DISPLAY_NAME_MAX_LENGTH = 50
USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 30
NAME_MIN_LENGTH = 6
NAME_MAX_LENGTH = 50
BOOK_TITLE_MIN_LENGTH = 6
BOOK_TITLE_MAX_LENGTH = 100
EMAIL_MAX_LENGTH = 254
PHONE_DIGITS = 10

_SCRIPT_BLOCK = re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE)
_DANGEROUS_SCHEMES = re.compile(r"(javascript|vbscript|data):", re.IGNORECASE)
_EVENT_HANDLER = re.compile(r"on\w+\s*=", re.IGNORECASE)
_TAG = re.compile(r"<[^>]*>")
_WHITESPACE = re.compile(r"\s+")

_NAME_PATTERN = re.compile(r"^[A-Za-z\s\-']+$")
_USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_\-]*$")
_BOOK_TITLE_PATTERN = re.compile(r"^[\w\s\-'.,:;!?&()]+$")
_EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a single field validation."""

    is_valid: bool
    error: Optional[str] = None
    sanitized_value: Optional[str] = None


def _ok(value: str) -> ValidationResult:
    return ValidationResult(is_valid=True, sanitized_value=value)


def _fail(message: str) -> ValidationResult:
    return ValidationResult(is_valid=False, error=message)


def remove_dangerous_content(value: str) -> str:
    """Strip script blocks, scriptable URL schemes, event handlers and tags."""
    cleaned = _SCRIPT_BLOCK.sub("", value)
    cleaned = _DANGEROUS_SCHEMES.sub("", cleaned)
    cleaned = _EVENT_HANDLER.sub("", cleaned)
    return _TAG.sub("", cleaned)


def normalize_whitespace(value: str) -> str:
    return _WHITESPACE.sub(" ", value).strip()


def sanitize_input(value: Optional[str]) -> str:
    """Clean user text before it is validated or stored."""
    if not value:
        return ""
    return normalize_whitespace(remove_dangerous_content(value))


def validate_display_name(value: Optional[str]) -> ValidationResult:
    """Display names are optional but capped at 50 characters."""
    sanitized = sanitize_input(value)
    if len(sanitized) > DISPLAY_NAME_MAX_LENGTH:
        return _fail(f"Display name must be {DISPLAY_NAME_MAX_LENGTH} characters or less")
    return _ok(sanitized)


def validate_username(value: Optional[str]) -> ValidationResult:
    sanitized = sanitize_input(value)
    if not sanitized:
        return _fail("Username is required")
    if len(sanitized) < USERNAME_MIN_LENGTH:
        return _fail(f"Username must be at least {USERNAME_MIN_LENGTH} characters")
    if len(sanitized) > USERNAME_MAX_LENGTH:
        return _fail(f"Username must be {USERNAME_MAX_LENGTH} characters or less")
    if not _USERNAME_PATTERN.match(sanitized):
        return _fail("Username can only contain letters, numbers, underscores and hyphens, and must start with a letter or number")
    return _ok(sanitized)


def validate_name_field(value: Optional[str], field_name: str = "Name") -> ValidationResult:
    """Person or store names: 6 to 50 letters, spaces, hyphens or apostrophes."""
    sanitized = sanitize_input(value)
    if not sanitized:
        return _fail(f"{field_name} is required")
    if len(sanitized) < NAME_MIN_LENGTH:
        return _fail(f"{field_name} must be at least {NAME_MIN_LENGTH} characters")
    if len(sanitized) > NAME_MAX_LENGTH:
        return _fail(f"{field_name} must be {NAME_MAX_LENGTH} characters or less")
    if not _NAME_PATTERN.match(sanitized):
        return _fail(f"{field_name} can only contain letters, spaces, hyphens, and apostrophes")
    return _ok(sanitized)


def validate_book_title(value: Optional[str]) -> ValidationResult:
    sanitized = sanitize_input(value)
    if not sanitized:
        return _fail("Book title is required")
    if len(sanitized) < BOOK_TITLE_MIN_LENGTH:
        return _fail(f"Book title must be at least {BOOK_TITLE_MIN_LENGTH} characters")
    if len(sanitized) > BOOK_TITLE_MAX_LENGTH:
        return _fail(f"Book title must be {BOOK_TITLE_MAX_LENGTH} characters or less")
    if not _BOOK_TITLE_PATTERN.match(sanitized):
        return _fail("Book title contains invalid characters")
    return _ok(sanitized)


def validate_email(value: Optional[str]) -> ValidationResult:
    sanitized = sanitize_input(value)
    if not sanitized:
        return _fail("Email is required")
    if len(sanitized) > EMAIL_MAX_LENGTH:
        return _fail("Email address is too long")
    if not _EMAIL_PATTERN.match(sanitized):
        return _fail("Please enter a valid email address")
    return _ok(sanitized.lower())


def validate_phone(value: Optional[str]) -> ValidationResult:
    digits = re.sub(r"\D", "", value or "")
    if not digits:
        return _fail("Phone number is required")
    if len(digits) != PHONE_DIGITS:
        return _fail(f"Phone number must be exactly {PHONE_DIGITS} digits")
    return _ok(digits)


def validate_optional_text(value: Optional[str], max_length: int, field_name: str = "Text") -> ValidationResult:
    sanitized = sanitize_input(value)
    if len(sanitized) > max_length:
        return _fail(f"{field_name} must be {max_length} characters or less")
    return _ok(sanitized)


def validate_required_text(value: Optional[str], max_length: int, field_name: str = "Text") -> ValidationResult:
    """Required free text: blank after trimming is rejected."""
    sanitized = sanitize_input(value)
    if not sanitized:
        return _fail(f"{field_name} is required")
    if len(sanitized) > max_length:
        return _fail(f"{field_name} must be {max_length} characters or less")
    return _ok(sanitized)


def validate_uuid(value: Optional[str], field_name: str = "id") -> ValidationResult:
    try:
        parsed = uuid.UUID(str(value))
    except (TypeError, ValueError):
        return _fail(f"Invalid {field_name} format")
    return _ok(str(parsed))


def is_valid_uuid(value: Optional[str]) -> bool:
    return validate_uuid(value).is_valid
