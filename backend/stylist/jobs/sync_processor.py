# Brand catalog sync from the Shopify Admin GraphQL API

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from sqlalchemy.orm import Session

from stylist.db.session import SessionLocal, session_scope
from stylist.integrations.shopify import ShopifyClient, normalize_shopify_product
from stylist.jobs.errors import BrandNotFoundError, JobValidationError
from stylist.repository import product_repo
from stylist.utils.clock import now_utc


logger = logging.getLogger(__name__)


@dataclass
class SyncResult:
    synced: int = 0
    errors: int = 0



def sync_brand_from_shopify(
    brand_id: str,
    access_token: str,
    *,
    session_factory: Callable[[], Session] = SessionLocal,
    client_factory: Callable[..., ShopifyClient] = ShopifyClient,
    page_size: int | None = None,
) -> SyncResult:
    """
    Page through the brand's Shopify catalog and upsert every product.

    One product failing (normalization or DB write) is rolled back, counted in
    `errors` and skipped. Page fetch failures (HTTP / GraphQL) abort the sync and
    propagate; products committed before that stay committed.
    Newly synced products are not queued for enrichment here.
    """
    result = SyncResult()

    with session_scope(session_factory) as db:
        brand = product_repo.get_brand(db, brand_id)
        if brand is None:
            raise BrandNotFoundError(brand_id)
        if not brand.shop_domain:
            raise JobValidationError(f"Brand {brand_id} has no shop_domain")

        client = client_factory(brand.shop_domain, access_token)
        logger.info("sync.start brand_id=%s shop=%s", brand_id, brand.shop_domain)

        for node in client.iter_products(page_size=page_size):
            source_id = node.get("id")
            try:
                data = normalize_shopify_product(node)
                product_repo.upsert_product(db, brand, data, synced_at=now_utc())
                db.commit()
                result.synced += 1
            except Exception as e:
                db.rollback()
                result.errors += 1
                logger.error("sync.product_failed brand_id=%s source_id=%s err=%s", brand_id, source_id, e)

    logger.info("sync.done brand_id=%s synced=%s errors=%s", brand_id, result.synced, result.errors)
    return result



class SyncProcessor:

    def __init__(
        self,
        session_factory: Callable[[], Session] = SessionLocal,
        client_factory: Callable[..., ShopifyClient] = ShopifyClient,
    ):
        self.session_factory = session_factory
        self.client_factory = client_factory


    def run(self, brand_id: str, access_token: str) -> SyncResult:
        return sync_brand_from_shopify(
            brand_id,
            access_token,
            session_factory=self.session_factory,
            client_factory=self.client_factory,
        )
