
# product / brand database repository (enrichment + Shopify sync)

from __future__ import annotations

from datetime import datetime
from typing import Optional, Dict, Any, Sequence
import logging

import sqlalchemy as sa
from sqlalchemy import select, func, text
from sqlalchemy.orm import Session, selectinload

from stylist.db.model.brand import Brand
from stylist.db.model.product import (
    Product, ProductVariant, ProductImage, ENRICHMENT_PENDING,
)


logger = logging.getLogger(__name__)


'''
  Columns the Shopify sync owns. An update only touches these, so enrichment
  output (gender / category_lvl1 / color_primary / embedding) survives a re-sync.
  product_type is written by both; the Shopify value wins on sync.
'''
SYNC_FIELDS = [
    "source",
    "title",
    "description_html",
    "status",
    "handle",
    "tags",
    "product_type",
    "vendor",
]

# columns enrichment is allowed to write through update_product_fields
ENRICHMENT_FIELDS = {
    "gender",
    "category_lvl1",
    "color_primary",
    "product_type",
    "embedding",
    "enrichment_status",
    "enrichment_error",
    "enriched_at",
}

_VARIANT_FIELDS = (
    "source_variant_id", "sku", "price", "compare_at_price",
    "option1", "option2", "option3", "inventory_quantity",
)



# ===================== reads =====================

def get_product(db: Session, product_id: str, *, with_relations: bool = False) -> Optional[Product]:
    stmt = select(Product).where(Product.id == product_id)
    if with_relations:
        stmt = stmt.options(
            selectinload(Product.brand),
            selectinload(Product.images),
            selectinload(Product.variants),
        )
    return db.execute(stmt).scalar_one_or_none()


def product_exists(db: Session, product_id: str) -> bool:
    return db.execute(
        select(func.count()).select_from(Product).where(Product.id == product_id)
    ).scalar_one() > 0


def get_brand(db: Session, brand_id: str) -> Optional[Brand]:
    return db.get(Brand, brand_id)


def find_by_source(db: Session, brand_id: str, source_product_id: str) -> Optional[Product]:
    return db.execute(
        select(Product)
        .where(Product.brand_id == brand_id, Product.source_product_id == source_product_id)
        .options(selectinload(Product.variants), selectinload(Product.images))
    ).scalar_one_or_none()


# enrichment_status -> row count (NULL counted as pending)
def count_by_enrichment_status(db: Session) -> Dict[str, int]:
    status = func.coalesce(Product.enrichment_status, ENRICHMENT_PENDING)
    rows = db.execute(select(status, func.count()).group_by(status)).all()
    return {str(s): int(n) for s, n in rows}



# ===================== enrichment writes =====================

def update_product_fields(db: Session, product_id: str, **fields: Any) -> int:
    """
    Partial UPDATE of the enrichment-owned columns; commits. Returns affected rows.
    Unknown keys raise ValueError.
    """
    unknown = set(fields) - ENRICHMENT_FIELDS
    if unknown:
        raise ValueError(f"not updatable here: {sorted(unknown)}")
    if not fields:
        return 0

    res = db.execute(
        sa.update(Product)
        .where(Product.id == product_id)
        .values(**fields)
    )
    db.commit()
    return int(res.rowcount or 0)


def update_embedding_vector(db: Session, product_id: str, vector: Sequence[float], *, dimensions: int = 1536) -> bool:
    """
    Write the pgvector column with a parameterized UPDATE.
    The column only exists on PostgreSQL; on any other dialect this is a no-op returning False.
    """
    if db.get_bind().dialect.name != "postgresql":
        return False

    literal = "[" + ",".join(repr(float(v)) for v in vector) + "]"
    db.execute(
        text(f"UPDATE products SET embedding_vector = CAST(:vec AS vector({int(dimensions)})) WHERE id = :id"),
        {"vec": literal, "id": product_id},
    )
    db.commit()
    return True



# ===================== Shopify sync writes =====================

'''
  Insert or update one normalized Shopify product, keyed by (brand_id, source_product_id).
    - existing row: SYNC_FIELDS updated in place, variants/images replaced wholesale
    - new row: inserted with enrichment_status = pending
    - synced_at on the product and last_synced_at on the brand are stamped
  Flushes but does not commit; the caller commits or rolls back per product.
'''
def upsert_product(db: Session, brand: Brand, data: Dict[str, Any], *, synced_at: datetime) -> Product:

    source_product_id = str(data["source_product_id"])
    product = find_by_source(db, brand.id, source_product_id)

    if product is None:
        product = Product(brand_id=brand.id, source_product_id=source_product_id,
                          enrichment_status=ENRICHMENT_PENDING)
        db.add(product)

    for field in SYNC_FIELDS:
        if field in data:
            setattr(product, field, data[field])
    if product.title is None:
        product.title = ""

    product.variants = [
        ProductVariant(**{k: v.get(k) for k in _VARIANT_FIELDS if v.get(k) is not None})
        for v in (data.get("variants") or [])
    ]
    product.images = [
        ProductImage(src=img["src"], position=int(img.get("position") or 0), alt=img.get("alt"))
        for img in (data.get("images") or [])
        if img.get("src")
    ]

    product.synced_at = synced_at
    brand.last_synced_at = synced_at

    db.flush()
    return product

