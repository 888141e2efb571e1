''' Admin job endpoints: queue stats, enrichment status, manual enqueue '''

from __future__ import annotations

import hmac
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from stylist.core.config import settings
from stylist.db.session import get_db
from stylist.jobs import ADMIN_ENRICHMENT_PRIORITY, JobStore, JobValidationError
from stylist.repository import product_repo



''' X-Admin-Secret must match ADMIN_SECRET; an unset secret rejects every call '''
def require_admin_secret(x_admin_secret: Optional[str] = Header(default=None, alias="X-Admin-Secret")) -> None:
    expected = settings.ADMIN_SECRET.get_secret_value() if settings.ADMIN_SECRET else ""
    if not expected or not x_admin_secret or not hmac.compare_digest(x_admin_secret, expected):
        raise HTTPException(status_code=401, detail="admin secret required")


_store: Optional[JobStore] = None

# one store (one Redis connection pool) per process; tests override this dependency
def get_job_store() -> JobStore:
    global _store
    if _store is None:
        _store = JobStore.from_settings()
    return _store


router = APIRouter(
    prefix="/admin/jobs",
    tags=["admin-jobs"],
    dependencies=[Depends(require_admin_secret)],
)


class SyncShopifyRequest(BaseModel):
    brandId: Optional[str] = Field(default=None)
    accessToken: Optional[str] = Field(default=None)



#=================== read ==================== #

''' queue counters (Redis) next to the products.enrichment_status counts (DB) '''
@router.get("/stats")
def job_stats(store: JobStore = Depends(get_job_store), db: Session = Depends(get_db)):
    return {
        "queue": store.get_enrichment_queue_stats().as_dict(),
        "db": product_repo.count_by_enrichment_status(db),
    }


@router.get("/enrich-status/{product_id}")
def enrich_status(product_id: str, store: JobStore = Depends(get_job_store)):
    return {"productId": product_id, **store.get_enrichment_job_status(product_id).as_dict()}



#=================== enqueue ==================== #

@router.post("/enrich-product/{product_id}", status_code=202)
def enqueue_product_enrichment(
    product_id: str,
    store: JobStore = Depends(get_job_store),
    db: Session = Depends(get_db),
):
    if not product_repo.product_exists(db, product_id):
        raise HTTPException(status_code=404, detail="product not found")
    try:
        store.enqueue_enrichment(product_id, ADMIN_ENRICHMENT_PRIORITY)
    except JobValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"queued": True, "productId": product_id, "priority": ADMIN_ENRICHMENT_PRIORITY}


@router.post("/sync-shopify", status_code=202)
def enqueue_shopify_sync(
    body: SyncShopifyRequest,
    store: JobStore = Depends(get_job_store),
    db: Session = Depends(get_db),
):
    brand_id = (body.brandId or "").strip()
    access_token = (body.accessToken or "").strip()
    if not brand_id or not access_token:
        raise HTTPException(status_code=400, detail="brandId and accessToken are required")

    if product_repo.get_brand(db, brand_id) is None:
        raise HTTPException(status_code=404, detail="brand not found")

    try:
        store.enqueue_sync_shopify(brand_id, access_token)
    except JobValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"queued": True, "brandId": brand_id}
