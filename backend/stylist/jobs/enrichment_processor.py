# Product enrichment: LLM attribute classification + best-effort text embedding

from __future__ import annotations

import json
import logging
import re
from typing import Any, Callable, Dict, Optional

from sqlalchemy.orm import Session

from stylist.core.config import settings
from stylist.db.model.product import (
    Product, ENRICHMENT_PROCESSING, ENRICHMENT_COMPLETED, ENRICHMENT_FAILED,
)
from stylist.db.session import SessionLocal, session_scope
from stylist.integrations.llm import LLMClient
from stylist.jobs.errors import ProductNotFoundError
from stylist.repository import product_repo
from stylist.utils.clock import now_utc


logger = logging.getLogger(__name__)


DETECTION_PROMPT = """You are a fashion product classifier. Given the product information below, return a single JSON object with exactly these keys (use null if unknown):
- category_lvl1: one of "tops", "bottoms", "dresses", "ethnicwear", "outerwear", "co-ords", "activewear", "loungewear", "footwear", "accessories", "jewellery", "menswear", or null
- gender: one of "women", "men", "unisex", or null
- color_primary: primary color (e.g. "black", "navy"), or null
- product_type: brief type (e.g. "t-shirt", "jeans"), or null

Product information:
"""

# keys requested from the classifier, merged onto the product row
ATTRIBUTE_KEYS = ("gender", "category_lvl1", "color_primary", "product_type")

DESCRIPTION_MAX_CHARS = 2000
EMBED_MAX_CHARS = 8000

_TAG_RE = re.compile(r"<[^>]*>")
_WS_RE = re.compile(r"\s+")


def strip_html(html: Optional[str]) -> str:
    return _WS_RE.sub(" ", _TAG_RE.sub(" ", html or "")).strip()


def _tags_text(tags: Optional[str]) -> Optional[str]:
    # JSON list -> "a, b"; any other string is passed through raw
    if not tags:
        return None
    try:
        parsed = json.loads(tags)
    except ValueError:
        return tags
    if isinstance(parsed, list):
        return ", ".join(str(t) for t in parsed) if parsed else tags
    return tags


def build_text_bundle(product: Product) -> str:
    """Title / Description / Product Type / Vendor / Tags lines, skipping empty ones."""
    parts = []
    if product.title:
        parts.append(f"Title: {product.title}")
    description = strip_html(product.description_html)
    if description:
        parts.append(f"Description: {description[:DESCRIPTION_MAX_CHARS]}")
    if product.product_type:
        parts.append(f"Product Type: {product.product_type}")
    if product.vendor:
        parts.append(f"Vendor: {product.vendor}")
    tags = _tags_text(product.tags)
    if tags:
        parts.append(f"Tags: {tags}")
    return "\n".join(parts)


def build_prompt(product: Product) -> str:
    return DETECTION_PROMPT + build_text_bundle(product) + "\nRespond only with valid JSON."


# LLM value if truthy, else the existing column value, else None
def merge_attributes(llm: Dict[str, Any], product: Product) -> Dict[str, Optional[str]]:
    return {key: llm.get(key) or getattr(product, key) or None for key in ATTRIBUTE_KEYS}



'''
  Enrich one product:
    1) load the product (brand, images by position, variants); missing -> ProductNotFoundError, nothing written
    2) enrichment_status = processing, enrichment_error cleared
    3) classifier prompt -> JSON-mode chat (temperature 0.2, max 500 tokens)
    4) merge + persist, enrichment_status = completed, enriched_at = now
    5) embedding (best effort): JSON text column + pgvector column on PostgreSQL
  Any failure in 3-4 writes enrichment_status = failed with the message and re-raises.
'''
class EnrichmentProcessor:

    def __init__(
        self,
        session_factory: Callable[[], Session] = SessionLocal,
        llm: Optional[LLMClient] = None,
    ):
        self.session_factory = session_factory
        self.llm = llm or LLMClient()


    def run(self, product_id: str) -> Dict[str, Any]:
        with session_scope(self.session_factory) as db:
            product = product_repo.get_product(db, product_id, with_relations=True)
            if product is None:
                raise ProductNotFoundError(product_id)

            product_repo.update_product_fields(
                db, product_id, enrichment_status=ENRICHMENT_PROCESSING, enrichment_error=None)

            try:
                result = self.llm.chat_json(
                    [{"role": "user", "content": build_prompt(product)}],
                    temperature=0.2,
                    max_tokens=500,
                )
                update = merge_attributes(result, product)
                update.update(
                    enrichment_status=ENRICHMENT_COMPLETED,
                    enrichment_error=None,
                    enriched_at=now_utc(),
                )
                product_repo.update_product_fields(db, product_id, **update)
            except Exception as e:
                db.rollback()
                product_repo.update_product_fields(
                    db, product_id, enrichment_status=ENRICHMENT_FAILED, enrichment_error=str(e) or type(e).__name__)
                raise

            self._store_embedding(db, product, result)

        logger.info("enrichment.ok product_id=%s category=%s gender=%s color=%s",
                    product_id, update["category_lvl1"], update["gender"], update["color_primary"])
        return update


    def _store_embedding(self, db: Session, product: Product, result: Dict[str, Any]) -> None:
        parts = [product.title, product.description_html, result.get("category_lvl1"), result.get("color_primary")]
        text = " ".join(str(p) for p in parts if p)[:EMBED_MAX_CHARS]
        if not text:
            return
        try:
            vector = self.llm.embed(text)
            product_repo.update_product_fields(db, product.id, embedding=json.dumps(vector))
            product_repo.update_embedding_vector(
                db, product.id, vector, dimensions=settings.EMBEDDING_DIMENSIONS)
        except Exception as e:
            db.rollback()
            logger.warning("enrichment.embedding_failed product_id=%s err=%s", product.id, e)
