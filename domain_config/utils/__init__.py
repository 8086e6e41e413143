"""
Utility Functions and Classes

Provides log sanitization helpers. Error handlers are imported from
domain_config.utils.error_handlers directly.
"""

from domain_config.utils.sanitize import (
    sanitize_dict,
    sanitize_headers,
    sanitize_string,
    get_safe_token_display
)

__all__ = [
    "sanitize_dict",
    "sanitize_headers",
    "sanitize_string",
    "get_safe_token_display"
]
