"""
Security utility for sanitizing sensitive data in logs and errors
Prevents passwords and bearer tokens from being exposed in logs
"""

from typing import Dict, Any
import re

# Headers that contain sensitive information
SENSITIVE_HEADERS = {
    "authorization",
    "cookie",
    "x-api-key",
    "x-auth-token",
}

# Keys whose values are never logged
SENSITIVE_KEYS = {"password", "secret", "token", "authorization", "jwt_secret"}

# Patterns to detect and redact sensitive data
SENSITIVE_PATTERNS = [
    (re.compile(r'(Bearer\s+[a-zA-Z0-9_\-\.]+)'), 'Bearer ***REDACTED***'),  # Bearer tokens
    (re.compile(r'(eyJ[a-zA-Z0-9_\-]+\.[a-zA-Z0-9_\-]+\.[a-zA-Z0-9_\-]+)'), '***JWT REDACTED***'),  # Bare JWTs
]


def sanitize_headers(headers: Dict[str, Any]) -> Dict[str, Any]:
    """
    Remove sensitive headers from dict

    Args:
        headers: Dictionary of headers

    Returns:
        Sanitized headers with sensitive values redacted
    """
    if not isinstance(headers, dict):
        return headers

    sanitized = {}
    for key, value in headers.items():
        if key.lower() in SENSITIVE_HEADERS:
            sanitized[key] = "***REDACTED***"
        else:
            sanitized[key] = value

    return sanitized


def sanitize_string(text: str) -> str:
    """
    Remove sensitive patterns from string

    Args:
        text: String that may contain sensitive data

    Returns:
        Sanitized string with patterns redacted
    """
    if not isinstance(text, str):
        return text

    sanitized = text
    for pattern, replacement in SENSITIVE_PATTERNS:
        sanitized = pattern.sub(replacement, sanitized)

    return sanitized


def sanitize_dict(data: Dict[str, Any], sensitive_keys: set = None) -> Dict[str, Any]:
    """
    Recursively sanitize dictionary by removing sensitive keys

    Args:
        data: Dictionary to sanitize
        sensitive_keys: Set of keys to redact (defaults to SENSITIVE_KEYS)

    Returns:
        Sanitized dictionary
    """
    if not isinstance(data, dict):
        return data

    if sensitive_keys is None:
        sensitive_keys = SENSITIVE_KEYS

    sanitized = {}
    for key, value in data.items():
        if key.lower() in sensitive_keys:
            sanitized[key] = "***REDACTED***"
        elif isinstance(value, dict):
            sanitized[key] = sanitize_dict(value, sensitive_keys)
        elif isinstance(value, str):
            sanitized[key] = sanitize_string(value)
        else:
            sanitized[key] = value

    return sanitized


def get_safe_token_display(token: str) -> str:
    """
    Get safe version of a token for logging (only prefix)

    Args:
        token: Full token

    Returns:
        Safe display string (e.g., "eyJhbGciOiJI...***")
    """
    if not token or not isinstance(token, str):
        return "***INVALID***"

    if len(token) < 12:
        return "***REDACTED***"

    return f"{token[:12]}...***"
