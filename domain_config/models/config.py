"""
Config Model - Site metadata shared by one or more domains
"""

from sqlalchemy import Column, Integer, String, JSON, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from domain_config.database import Base


class Config(Base):
    """
    Config model - metadata served for a site

    Attributes:
        id: Auto-increment identifier
        title: Site title
        author: Site author
        description: Site description
        keywords: Comma-separated keywords
        links: Free-form JSON object of links
        permissions: Free-form JSON object of feature permissions
        created_at: Creation timestamp
        updated_at: Last modification timestamp

    Relationships:
        domains: Domains using this config (one-to-many)

    A config cannot be deleted while domains still reference it.
    """

    __tablename__ = "configs"

    id = Column(Integer, primary_key=True, autoincrement=True)

    title = Column(String(255), nullable=True)
    author = Column(String(255), nullable=True)
    description = Column(String(255), nullable=True)
    keywords = Column(String(255), nullable=True)
    links = Column(JSON, nullable=True)
    permissions = Column(JSON, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    domains = relationship("Domain", back_populates="config")

    def __repr__(self):
        return f"<Config(id={self.id}, title={self.title})>"
