
from __future__ import annotations
import uuid
from datetime import datetime
from typing import Optional, List, TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship
from stylist.db.base import Base

if TYPE_CHECKING:
    from stylist.db.model.product import Product



"""
  Brand (one Shopify store per brand)
"""
class Brand(Base):

    __tablename__ = "brands"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    name:        Mapped[str]           = mapped_column(String(255), nullable=False)
    shop_domain: Mapped[Optional[str]] = mapped_column(String(255), unique=True, index=True)   # xxx.myshopify.com, used by the sync job
    website_url: Mapped[Optional[str]] = mapped_column(Text)
    is_active:   Mapped[bool]          = mapped_column(Boolean, nullable=False, default=True)

    last_synced_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))       # stamped by every synced product

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    products: Mapped[List["Product"]] = relationship(back_populates="brand", passive_deletes=True)
