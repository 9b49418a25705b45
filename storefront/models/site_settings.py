"""
Site Settings Model

Key-value store for site-wide configuration documents. Singleton documents
(e.g. the product page layout) live under a well-known unique key so that
first-write races collapse into one row.
"""
from sqlalchemy import Column, Integer, String, Text, DateTime
from sqlalchemy.sql import func

from storefront.core.database import Base


class SiteSettings(Base):
    """
    Key-value store for site configuration.
    """
    __tablename__ = "site_settings"

    id = Column(Integer, primary_key=True, index=True)

    # Key-value
    key = Column(String(100), unique=True, nullable=False, index=True)
    value = Column(Text, nullable=False)
    value_type = Column(String(20), default="string")  # string, url, json, boolean, number

    # Organization
    category = Column(String(50), default="general", index=True)  # layout, branding, system
    description = Column(Text)

    # Audit
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
    updated_by = Column(String(255), nullable=True)  # Principal subject from the identity provider
