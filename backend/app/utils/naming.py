"""Website name sanitising and unique default names."""
import re
import secrets
from datetime import date
from typing import Callable

from app.utils.exceptions import InvalidInputError

MIN_NAME_LENGTH = 3
MAX_NAME_LENGTH = 100
MAX_NAME_PROBES = 20
DEFAULT_NAME_PREFIX = "My Website"


def sanitize_name(name: str) -> str:
    """Strip characters outside letters, digits, whitespace and hyphens."""
    cleaned = re.sub(r"[^\w\s-]", "", name or "")
    # Collapse runs of whitespace
    cleaned = re.sub(r"\s+", " ", cleaned)
    return cleaned.strip()


def validate_name(name: str) -> str:
    """
    Sanitize a website name and check its length.

    Args:
        name: Raw name from the caller

    Returns:
        The sanitized name

    Raises:
        InvalidInputError: If the sanitized name is not 3-100 characters
    """
    cleaned = sanitize_name(name)
    if not MIN_NAME_LENGTH <= len(cleaned) <= MAX_NAME_LENGTH:
        raise InvalidInputError(
            f"Website name must be between {MIN_NAME_LENGTH} and {MAX_NAME_LENGTH} "
            "characters (letters, numbers, spaces and hyphens)"
        )
    return cleaned


def base_default_name(today: date) -> str:
    return f"{DEFAULT_NAME_PREFIX} {today.isoformat()}"


def probe_unique_name(base: str, is_taken: Callable[[str], bool]) -> str:
    """
    Find a free name by appending " (n)" to the base.

    Gives up after MAX_NAME_PROBES candidates and appends a random suffix.

    Args:
        base: Preferred name
        is_taken: Returns True when a candidate is already used by the owner

    Returns:
        A name that was free at the time of the check
    """
    if not is_taken(base):
        return base

    for counter in range(1, MAX_NAME_PROBES + 1):
        candidate = f"{base} ({counter})"
        if not is_taken(candidate):
            return candidate

    return f"{base} {secrets.token_hex(3)}"
