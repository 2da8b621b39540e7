"""Identifier format checks."""

from uuid import UUID


def is_valid_identifier(value) -> bool:
    """True when `value` looks like an identifier this domain generates (a UUID)."""
    if value is None:
        return False
    try:
        UUID(str(value))
    except ValueError:
        return False
    return True
