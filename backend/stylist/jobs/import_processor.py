# Bulk product import into a brand; every imported product is queued for enrichment

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Optional

import redis
from sqlalchemy.orm import Session

from stylist.db.model.product import ENRICHMENT_PENDING
from stylist.db.session import SessionLocal, session_scope
from stylist.jobs.errors import BrandNotFoundError
from stylist.jobs.job_store import JobStore
from stylist.jobs.types import DEFAULT_ENRICHMENT_PRIORITY
from stylist.repository import product_repo
from stylist.utils.clock import now_utc


logger = logging.getLogger(__name__)


@dataclass
class ImportResult:
    total: int = 0
    new_products: int = 0
    updated_products: int = 0
    errors: int = 0
    enqueued_for_enrichment: int = 0

    def as_dict(self) -> Dict[str, int]:
        return {
            "total": self.total,
            "newProducts": self.new_products,
            "updatedProducts": self.updated_products,
            "errors": self.errors,
            "enqueuedForEnrichment": self.enqueued_for_enrichment,
        }


def import_products_into_brand(
    brand_id: str,
    products: Iterable[Dict[str, Any]],
    *,
    store: Optional[JobStore] = None,
    session_factory: Callable[[], Session] = SessionLocal,
    priority: int = DEFAULT_ENRICHMENT_PRIORITY,
) -> ImportResult:
    """
    Upsert already-normalized product dicts (the shape product_repo.upsert_product
    takes) and queue each one for enrichment.

    Every imported row, new or updated, is reset to enrichment_status=pending.
    A product whose DB write fails is rolled back, counted in `errors` and skipped.
    A queue failure only logs a warning: the product stays imported and can be
    re-queued later (admin endpoint or scripts/requeue_enrichment.py).
    """
    store = store or JobStore.from_settings()
    result = ImportResult()

    with session_scope(session_factory) as db:
        brand = product_repo.get_brand(db, brand_id)
        if brand is None:
            raise BrandNotFoundError(brand_id)

        for data in products:
            result.total += 1
            source_id = data.get("source_product_id")
            try:
                existed = product_repo.find_by_source(db, brand.id, str(source_id)) is not None
                product = product_repo.upsert_product(db, brand, data, synced_at=now_utc())
                product.enrichment_status = ENRICHMENT_PENDING
                db.commit()
            except Exception as e:
                db.rollback()
                result.errors += 1
                logger.error("import.product_failed brand_id=%s source_id=%s err=%s", brand_id, source_id, e)
                continue

            if existed:
                result.updated_products += 1
            else:
                result.new_products += 1

            try:
                store.enqueue_enrichment(product.id, priority)
                result.enqueued_for_enrichment += 1
            except redis.RedisError as e:
                logger.warning("import.enqueue_failed product_id=%s err=%s", product.id, e)

    logger.info(
        "import.done brand_id=%s new=%s updated=%s errors=%s enqueued=%s",
        brand_id, result.new_products, result.updated_products, result.errors, result.enqueued_for_enrichment,
    )
    return result
