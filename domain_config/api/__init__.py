"""
API Routes and Endpoints

Routers:
    - sessions: Admin login, session introspection, logout
    - configs: Config CRUD
    - domains: Domain CRUD and host name lookup
"""

from domain_config.api import sessions, configs, domains

__all__ = ["sessions", "configs", "domains"]
