"""String trimming and PII stripping for event payloads."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

DEFAULT_PII_FIELDS: tuple[str, ...] = (
    "email",
    "emailAddress",
    "email_address",
    "phone",
    "phoneNumber",
    "phone_number",
    "ssn",
    "socialSecurityNumber",
    "social_security_number",
    "creditCard",
    "credit_card",
    "creditCardNumber",
    "credit_card_number",
    "password",
    "passwd",
    "secret",
    "token",
    "firstName",
    "first_name",
    "lastName",
    "last_name",
    "fullName",
    "full_name",
    "dateOfBirth",
    "date_of_birth",
    "dob",
    "address",
    "streetAddress",
    "street_address",
    "ipAddress",
    "ip_address",
)


def sanitize_string(value: str, max_length: int = 1000) -> str:
    """Trim surrounding whitespace and truncate to *max_length* characters."""
    return value.strip()[:max_length]


def strip_pii(
    obj: dict[str, Any],
    pii_fields: Iterable[str] | None = None,
) -> dict[str, Any]:
    """Return a copy of *obj* without PII keys.

    Matching is case-insensitive.  Nested dicts are processed recursively;
    lists are kept as-is.
    """
    fields = DEFAULT_PII_FIELDS if pii_fields is None else tuple(pii_fields)
    lowered = {f.lower() for f in fields}
    return _strip(obj, lowered)


def _strip(obj: dict[str, Any], lowered: set[str]) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for key, value in obj.items():
        if key.lower() in lowered:
            continue
        if isinstance(value, dict):
            result[key] = _strip(value, lowered)
        else:
            result[key] = value
    return result
