"""
Core Utilities

Modules:
    - security: Admin password check, JWT issuance and verification
    - exceptions: Service exceptions with HTTP status and error code
    - logging_config: JSON file logging with request ids
"""

from domain_config.core import security, exceptions, logging_config

__all__ = ["security", "exceptions", "logging_config"]
