"""
Input validation helper functions.
Provides validation for common input types.
"""

import re
from datetime import datetime

SERVICE_TIERS = ('rental', 'decoration')


def validate_email(email: str) -> bool:
    """
    Validate email format.

    Args:
        email: Email address to validate

    Returns:
        True if valid email format
    """
    if not email:
        return False

    pattern = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'
    return bool(re.match(pattern, email))


def validate_phone(phone: str, min_length: int = 8) -> bool:
    """
    Validate phone number length.
    Any format is accepted as long as it has at least min_length characters.

    Args:
        phone: Phone number to validate
        min_length: Minimum length after trimming

    Returns:
        True if long enough
    """
    if not phone:
        return False

    return len(phone.strip()) >= min_length


def validate_date_format(date_str: str) -> bool:
    """
    Validate date is in YYYY-MM-DD format.

    Args:
        date_str: Date string to validate

    Returns:
        True if valid format
    """
    try:
        datetime.strptime(date_str, '%Y-%m-%d')
        return True
    except (ValueError, TypeError):
        return False


def validate_service_tier(tier: str) -> bool:
    """Check tier is 'rental' or 'decoration'."""
    return tier in SERVICE_TIERS


def parse_positive_int(value) -> int | None:
    """
    Parse a strictly positive integer from user input.

    Args:
        value: int or numeric string

    Returns:
        The integer, or None if it does not parse or is < 1
    """
    if isinstance(value, bool):
        return None
    try:
        number = int(str(value).strip())
    except (ValueError, TypeError):
        return None
    return number if number >= 1 else None


def parse_non_negative_number(value) -> float | None:
    """Parse a float >= 0, or None."""
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (ValueError, TypeError):
        return None
    return number if number >= 0 else None


def sanitize_input(text: str, max_length: int = None) -> str:
    """
    Sanitize text input by trimming and limiting length.

    Args:
        text: Text to sanitize
        max_length: Maximum length (optional)

    Returns:
        Sanitized text
    """
    if not text:
        return ''

    # Strip whitespace
    sanitized = str(text).strip()

    # Limit length if specified
    if max_length and len(sanitized) > max_length:
        sanitized = sanitized[:max_length]

    return sanitized
