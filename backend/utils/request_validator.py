"""
Validation utilities for request payloads.
"""

from typing import Any, Dict, Tuple


def validate_credentials(email: Any, password: Any) -> Tuple[bool, str]:
    """
    Validate login payload fields.

    Args:
        email: Submitted email
        password: Submitted password

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not isinstance(email, str) or not email.strip():
        return False, "Email and password are required"
    if not isinstance(password, str) or not password:
        return False, "Email and password are required"
    return True, ""


def validate_top_k(k: Any, maximum: int = 100) -> Tuple[bool, str]:
    """
    Validate an optional top-k request parameter.

    Args:
        k: Submitted value (None means "use the default")
        maximum: Largest accepted value

    Returns:
        Tuple of (is_valid, error_message)
    """
    if k is None:
        return True, ""
    if isinstance(k, bool) or not isinstance(k, int):
        return False, "k must be an integer"
    if k < 1 or k > maximum:
        return False, f"k must be between 1 and {maximum}"
    return True, ""


def as_json_object(payload: Any) -> Dict[str, Any]:
    """
    Normalize a parsed request body to a dict.

    Missing bodies and JSON values other than objects (lists, strings,
    numbers) become an empty dict, so field checks report them as missing.
    """
    return payload if isinstance(payload, dict) else {}
