"""
SQLAlchemy Database Models

Models:
    - Config: Site metadata (title, author, links, permissions, ...)
    - Domain: Host name mapped onto a Config

Relationships:
    Config 1:N Domain
"""

from domain_config.models.config import Config
from domain_config.models.domain import Domain

__all__ = ["Config", "Domain"]
