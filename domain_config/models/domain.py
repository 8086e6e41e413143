"""
Domain Model - Maps a host name onto a Config
"""

from sqlalchemy import Column, Integer, String, ForeignKey, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from domain_config.database import Base


class Domain(Base):
    """
    Domain model

    Attributes:
        id: Auto-increment identifier
        domain: Host name, lower-case and unique (e.g. "example.com")
        config_id: Foreign key to configs table
        homepage: Optional homepage URL
        created_at: Creation timestamp
        updated_at: Last modification timestamp

    Relationships:
        config: Config served for this domain (many-to-one)
    """

    __tablename__ = "domains"

    id = Column(Integer, primary_key=True, autoincrement=True)
    domain = Column(String(255), nullable=False, unique=True, index=True)
    config_id = Column(Integer, ForeignKey("configs.id"), nullable=False, index=True)
    homepage = Column(String(500), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    config = relationship("Config", back_populates="domains", lazy="joined")

    def __repr__(self):
        return f"<Domain(id={self.id}, domain={self.domain}, config_id={self.config_id})>"
