"""
Homepage section model

One typed content block on the storefront homepage. The payload lives in a
JSON document whose shape is keyed by `type` (see app schemas); ordering is
ascending by `order` with the primary key as insertion-order tiebreak.
"""
from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, Boolean, DateTime, JSON, Index
from sqlalchemy.sql import func

from storefront.core.database import Base


SECTION_TYPES = (
    "hero",
    "banner",
    "productCarousel",
    "categoryList",
    "promotionalBlock",
    "customHtml",
    "featuredProducts",
)


class HomepageSection(Base):
    __tablename__ = "homepage_sections"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)  # Admin-facing label, not unique
    type = Column(String(50), nullable=False)

    # "order" is reserved in SQL; keep the attribute name, rename the column
    order = Column("display_order", Integer, nullable=False, default=0)
    is_visible = Column(Boolean, nullable=False, default=True)

    content = Column(JSON, nullable=False, default=dict)

    created_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        server_default=func.now()
    )
    updated_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        server_default=func.now()
    )

    __table_args__ = (
        Index("idx_homepage_sections_visible_order", "is_visible", "display_order"),
    )

    def __repr__(self) -> str:
        return f"<HomepageSection {self.id} {self.type} order={self.order}>"
