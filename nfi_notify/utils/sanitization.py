import html
import re
from typing import Any, Mapping, Optional

_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")


def sanitize_string(value: Optional[str]) -> Optional[str]:
    """
    Sanitize a string by escaping HTML special characters to prevent XSS.
    Returns None if input is None.
    """
    if value is None:
        return None
    if not isinstance(value, str):
        return value
    return html.escape(str(value), quote=True)


def sanitize_params(params: Optional[Mapping[str, Any]]) -> dict[str, str]:
    """
    Escape every template parameter before it is interpolated into an email body.

    Args:
        params: Template parameters supplied by the caller

    Returns:
        New dictionary with escaped string values
    """
    if not params:
        return {}
    return {key: sanitize_string(str(value)) for key, value in params.items() if value is not None}


def strip_header_value(value: str) -> str:
    """Remove line breaks and control characters from a value used in an email header"""
    value = value.replace("\r", " ").replace("\n", " ")
    return _CONTROL_CHARS.sub("", value).strip()
