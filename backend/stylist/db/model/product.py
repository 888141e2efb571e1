
from __future__ import annotations
import uuid
from decimal import Decimal
from datetime import datetime
from typing import Optional, List

from sqlalchemy import (
    DateTime, String, Integer, UniqueConstraint, Index, Numeric, ForeignKey, Text, func
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from stylist.db.base import Base
from stylist.db.model.brand import Brand


# enrichment_status values (product row side; the Redis queue keeps its own status)
ENRICHMENT_PENDING = "pending"
ENRICHMENT_PROCESSING = "processing"
ENRICHMENT_COMPLETED = "completed"
ENRICHMENT_FAILED = "failed"



"""
  Catalog product
  - (brand_id, source_product_id) is the idempotency key for the Shopify sync
  - gender / category_lvl1 / color_primary / product_type are filled by enrichment
  - embedding keeps the vector as JSON text; embedding_vector vector(1536) lives only in
    PostgreSQL (pgvector, see migrations) and is written with raw SQL, so it is not mapped here
"""
class Product(Base):

    __tablename__ = "products"

    id:       Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    brand_id: Mapped[str] = mapped_column(String(36), ForeignKey("brands.id", ondelete="CASCADE"), index=True, nullable=False)

    # source identity
    source:            Mapped[str]           = mapped_column(String(32), nullable=False, default="shopify")
    source_product_id: Mapped[str]           = mapped_column(String(64), nullable=False)
    handle:            Mapped[Optional[str]] = mapped_column(String(255))

    # catalog content
    title:            Mapped[str]           = mapped_column(Text, nullable=False, default="")
    description_html: Mapped[Optional[str]] = mapped_column(Text)
    status:           Mapped[str]           = mapped_column(String(32), nullable=False, default="active")
    tags:             Mapped[Optional[str]] = mapped_column(Text)        # JSON list as text, e.g. '["summer","linen"]'
    product_type:     Mapped[Optional[str]] = mapped_column(String(255))
    vendor:           Mapped[Optional[str]] = mapped_column(String(255))

    # enrichment output
    gender:        Mapped[Optional[str]] = mapped_column(String(32))
    category_lvl1: Mapped[Optional[str]] = mapped_column(String(64))
    color_primary: Mapped[Optional[str]] = mapped_column(String(64))
    embedding:     Mapped[Optional[str]] = mapped_column(Text)          # JSON array, portable copy of embedding_vector

    enrichment_status: Mapped[Optional[str]]      = mapped_column(String(16), default=ENRICHMENT_PENDING)
    enrichment_error:  Mapped[Optional[str]]      = mapped_column(Text)
    enriched_at:       Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    synced_at:  Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    brand:    Mapped[Brand]                  = relationship(back_populates="products")
    variants: Mapped[List["ProductVariant"]] = relationship(
        back_populates="product", cascade="all, delete-orphan", passive_deletes=True,
    )
    images:   Mapped[List["ProductImage"]]   = relationship(
        back_populates="product", cascade="all, delete-orphan", passive_deletes=True,
        order_by="ProductImage.position",
    )

    __table_args__ = (
        UniqueConstraint("brand_id", "source_product_id"),
        Index("idx_products_enrichment_status", "enrichment_status"),
    )



class ProductVariant(Base):

    __tablename__ = "product_variants"

    id:         Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    product_id: Mapped[str] = mapped_column(String(36), ForeignKey("products.id", ondelete="CASCADE"), index=True, nullable=False)

    source_variant_id:  Mapped[Optional[str]]     = mapped_column(String(64))
    sku:                Mapped[Optional[str]]     = mapped_column(String(255))
    price:              Mapped[Decimal]           = mapped_column(Numeric(10, 2), nullable=False, default=Decimal("0.00"))
    compare_at_price:   Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2))
    option1:            Mapped[Optional[str]]     = mapped_column(String(255))
    option2:            Mapped[Optional[str]]     = mapped_column(String(255))
    option3:            Mapped[Optional[str]]     = mapped_column(String(255))
    inventory_quantity: Mapped[int]               = mapped_column(Integer, nullable=False, default=0)

    product: Mapped[Product] = relationship(back_populates="variants")



class ProductImage(Base):

    __tablename__ = "product_images"

    id:         Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    product_id: Mapped[str] = mapped_column(String(36), ForeignKey("products.id", ondelete="CASCADE"), index=True, nullable=False)

    src:      Mapped[str]           = mapped_column(Text, nullable=False)
    position: Mapped[int]           = mapped_column(Integer, nullable=False, default=0)
    alt:      Mapped[Optional[str]] = mapped_column(Text)

    product: Mapped[Product] = relationship(back_populates="images")
