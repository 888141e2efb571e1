"""Admin job router: secret guard, stats, status and enqueue endpoints."""

from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from pydantic import SecretStr

from stylist.api.v1 import admin_jobs
from stylist.core.config import settings
from stylist.db.session import get_db
from stylist.jobs.types import EnrichmentState, SyncJob


SECRET = "s3cret"
HEADERS = {"X-Admin-Secret": SECRET}


@pytest.fixture
def app_client(monkeypatch, job_store, session_factory) -> TestClient:
    """Only the admin router, with the store and DB dependencies overridden."""
    monkeypatch.setattr(settings, "ADMIN_SECRET", SecretStr(SECRET))

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app = FastAPI()
    app.include_router(admin_jobs.router, prefix="/api/v1")
    app.dependency_overrides[admin_jobs.get_job_store] = lambda: job_store
    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


# ===================== guard =====================

@pytest.mark.parametrize("headers", [{}, {"X-Admin-Secret": "wrong"}])
def test_requests_without_the_secret_are_rejected(app_client, headers):
    resp = app_client.get("/api/v1/admin/jobs/stats", headers=headers)
    assert resp.status_code == 401


def test_unset_secret_rejects_everything(app_client, monkeypatch):
    monkeypatch.setattr(settings, "ADMIN_SECRET", None)
    resp = app_client.get("/api/v1/admin/jobs/stats", headers=HEADERS)
    assert resp.status_code == 401


# ===================== read =====================

def test_stats_report_queue_and_database_side_by_side(app_client, job_store, product):
    job_store.enqueue_enrichment("prod-1")
    job_store.enqueue_enrichment("prod-2")

    resp = app_client.get("/api/v1/admin/jobs/stats", headers=HEADERS)

    assert resp.status_code == 200
    body = resp.json()
    assert body["queue"] == {"pending": 2, "processing": 0, "failed": 0, "completed": 0}
    assert body["db"] == {"pending": 1}


def test_enrich_status(app_client, job_store):
    job_store.enqueue_enrichment("prod-1", 50)

    resp = app_client.get("/api/v1/admin/jobs/enrich-status/prod-1", headers=HEADERS)

    assert resp.status_code == 200
    assert resp.json() == {"productId": "prod-1", "status": "pending", "priority": 50}


# ===================== enqueue =====================

def test_enrich_product_enqueues_at_admin_priority(app_client, job_store, product):
    job_store.enqueue_enrichment("other", 100)

    resp = app_client.post("/api/v1/admin/jobs/enrich-product/prod-1", headers=HEADERS)

    assert resp.status_code == 202
    assert resp.json()["priority"] == 50
    status = job_store.get_enrichment_job_status("prod-1")
    assert status.status is EnrichmentState.PENDING
    assert status.priority == 50
    assert job_store.get_next_enrichment_job() == "prod-1"


def test_enrich_product_404_for_unknown_product(app_client, job_store, brand):
    resp = app_client.post("/api/v1/admin/jobs/enrich-product/nope", headers=HEADERS)
    assert resp.status_code == 404
    assert job_store.get_next_enrichment_job() is None


def test_sync_shopify_enqueues_exactly_one_job(app_client, job_store, brand):
    resp = app_client.post(
        "/api/v1/admin/jobs/sync-shopify",
        json={"brandId": "brand-1", "accessToken": "shpat_abc"},
        headers=HEADERS,
    )

    assert resp.status_code == 202
    assert job_store.get_next_job() == SyncJob("brand-1", "shpat_abc")
    assert job_store.get_next_job() is None


@pytest.mark.parametrize("body", [{}, {"brandId": "brand-1"}, {"accessToken": "tok"}, {"brandId": " ", "accessToken": "tok"}])
def test_sync_shopify_400_when_fields_missing(app_client, job_store, brand, body):
    resp = app_client.post("/api/v1/admin/jobs/sync-shopify", json=body, headers=HEADERS)
    assert resp.status_code == 400
    assert job_store.get_next_sync_job() is None


def test_sync_shopify_404_for_unknown_brand(app_client, job_store, brand):
    resp = app_client.post(
        "/api/v1/admin/jobs/sync-shopify",
        json={"brandId": "nope", "accessToken": "tok"},
        headers=HEADERS,
    )
    assert resp.status_code == 404
    assert job_store.get_next_sync_job() is None
