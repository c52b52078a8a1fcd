"""Validation utilities for common data types."""

from typing import Optional
from email_validator import validate_email as _validate_email, EmailNotValidError


def validate_email(email: str) -> tuple[bool, Optional[str]]:
    """
    Validate email address format.
    
    Args:
        email: Email address to validate
        
    Returns:
        Tuple of (is_valid, lower-cased normalized email or error_message)
    """
    try:
        validation = _validate_email(email.strip(), check_deliverability=False)
        return True, validation.normalized.lower()
    except EmailNotValidError as e:
        return False, str(e)


def is_blank(value: Optional[str]) -> bool:
    """True for None, empty or whitespace-only strings."""
    return value is None or not value.strip()
