"""
Domain Config Service

Per-domain site configuration (title, author, keywords, links, permissions)
behind an admin-protected REST API.
"""

__version__ = "1.0.0"
