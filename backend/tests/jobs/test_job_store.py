"""JobStore behaviour against an in-process fake Redis."""

from __future__ import annotations

import json

import pytest
import redis

from stylist.jobs.errors import JobValidationError
from stylist.jobs.job_store import JobStore
from stylist.jobs.types import EnrichJob, EnrichmentState, QueueStats, SyncJob


# ===================== ordering =====================

def test_lower_priority_pops_first(job_store: JobStore):
    job_store.enqueue_enrichment("P2", 100)
    job_store.enqueue_enrichment("P1", 50)

    assert job_store.get_next_enrichment_job() == "P1"
    assert job_store.get_next_enrichment_job() == "P2"
    assert job_store.get_next_enrichment_job() is None


@pytest.mark.parametrize("bad_priority", [50.7, 50.2, "high", None, True, float("nan"), 9_000_001, -9_000_001])
def test_enqueue_rejects_priorities_that_cannot_order_exactly(job_store: JobStore, redis_client, bad_priority):
    with pytest.raises(JobValidationError):
        job_store.enqueue_enrichment("P1", bad_priority)
    assert redis_client.zcard(job_store.k_queue) == 0
    assert redis_client.hget(job_store.k_attempts, "P1") is None


def test_priority_extremes_keep_order_and_fifo(job_store: JobStore):
    job_store.enqueue_enrichment("LAST-A", 9_000_000)
    job_store.enqueue_enrichment("LAST-B", 9_000_000)
    job_store.enqueue_enrichment("FIRST", -9_000_000)
    job_store.enqueue_enrichment("MIDDLE", 50.0)

    assert job_store.get_enrichment_job_status("LAST-B").priority == 9_000_000
    assert job_store.get_enrichment_job_status("FIRST").priority == -9_000_000
    popped = [job_store.get_next_enrichment_job() for _ in range(4)]
    assert popped == ["FIRST", "MIDDLE", "LAST-A", "LAST-B"]


def test_equal_priorities_pop_in_insertion_order(job_store: JobStore):
    # member names chosen so lexicographic order would differ from insertion order
    for pid in ("zeta", "alpha", "mike"):
        job_store.enqueue_enrichment(pid, 100)

    popped = [job_store.get_next_enrichment_job() for _ in range(3)]
    assert popped == ["zeta", "alpha", "mike"]


def test_default_priority_is_100(job_store: JobStore):
    job_store.enqueue_enrichment("P1")
    status = job_store.get_enrichment_job_status("P1")
    assert status.status is EnrichmentState.PENDING
    assert status.priority == 100


# ===================== enqueue =====================

def test_double_enqueue_keeps_one_entry_and_resets_attempts(job_store: JobStore, redis_client):
    job_store.enqueue_enrichment("P1", 100)
    assert job_store.get_next_enrichment_job() == "P1"
    job_store.mark_enrichment_processing("P1")

    job_store.enqueue_enrichment("P1", 100)
    job_store.enqueue_enrichment("P1", 50)

    assert redis_client.zcard(job_store.k_queue) == 1
    assert redis_client.hget(job_store.k_attempts, "P1") == "0"
    assert not redis_client.sismember(job_store.k_processing, "P1")
    assert job_store.get_enrichment_job_status("P1").priority == 50


def test_enqueue_clears_previous_failure(job_store: JobStore, redis_client):
    job_store.enqueue_enrichment("P1")
    job_store.get_next_enrichment_job()
    job_store.mark_enrichment_processing("P1")
    job_store.mark_enrichment_failed("P1", "boom")

    job_store.enqueue_enrichment("P1")

    assert redis_client.hget(job_store.k_failed, "P1") is None
    assert job_store.get_enrichment_job_status("P1").status is EnrichmentState.PENDING


@pytest.mark.parametrize("bad_id", ["", "undefined", "null", None])
def test_enqueue_rejects_placeholder_ids(job_store: JobStore, redis_client, bad_id):
    with pytest.raises(JobValidationError):
        job_store.enqueue_enrichment(bad_id)
    assert redis_client.zcard(job_store.k_queue) == 0


# ===================== claim / complete / fail =====================

def test_processing_marker_counts_attempts_and_sets_expiry(job_store: JobStore, redis_client):
    job_store.enqueue_enrichment("P1")
    job_store.get_next_enrichment_job()

    assert job_store.mark_enrichment_processing("P1") == 1
    assert job_store.mark_enrichment_processing("P1") == 2

    ttl = redis_client.ttl(job_store.k_processing)
    assert 0 < ttl <= 300

    status = job_store.get_enrichment_job_status("P1")
    assert status.status is EnrichmentState.PROCESSING
    assert status.attempts == 2


def test_completed_records_timestamp_and_drops_attempts(job_store: JobStore, redis_client):
    job_store.enqueue_enrichment("P1")
    job_store.get_next_enrichment_job()
    job_store.mark_enrichment_processing("P1")
    job_store.mark_enrichment_completed("P1")

    status = job_store.get_enrichment_job_status("P1")
    assert status.status is EnrichmentState.COMPLETED
    assert isinstance(status.completed_at, int) and status.completed_at > 0
    assert redis_client.hget(job_store.k_attempts, "P1") is None
    assert not redis_client.sismember(job_store.k_processing, "P1")


def test_failed_is_retryable_under_the_cap(job_store: JobStore):
    job_store.enqueue_enrichment("P1")
    job_store.get_next_enrichment_job()
    job_store.mark_enrichment_processing("P1")

    assert job_store.mark_enrichment_failed("P1", "LLM timeout") is True

    status = job_store.get_enrichment_job_status("P1")
    assert status.status is EnrichmentState.FAILED
    assert status.error == "LLM timeout"
    assert status.attempts == 1
    assert isinstance(status.failed_at, int)


# cap 3: third claim -> attempts 3 -> not retryable, counter dropped, never re-queued
def test_failed_at_the_cap_is_terminal(job_store: JobStore, redis_client):
    job_store.enqueue_enrichment("P1")
    job_store.get_next_enrichment_job()
    for _ in range(3):
        attempts = job_store.mark_enrichment_processing("P1")
    assert attempts == 3

    assert job_store.mark_enrichment_failed("P1", "still broken") is False

    assert redis_client.hget(job_store.k_attempts, "P1") is None
    assert job_store.get_next_enrichment_job() is None
    record = json.loads(redis_client.hget(job_store.k_failed, "P1"))
    assert record["attempts"] == 3
    assert record["error"] == "still broken"


def test_status_follows_the_latest_transition(job_store: JobStore):
    job_store.enqueue_enrichment("P1")
    job_store.get_next_enrichment_job()
    job_store.mark_enrichment_processing("P1")
    job_store.mark_enrichment_completed("P1")

    job_store.enqueue_enrichment("P1")
    assert job_store.get_enrichment_job_status("P1").status is EnrichmentState.PENDING

    job_store.get_next_enrichment_job()
    job_store.mark_enrichment_processing("P1")
    job_store.mark_enrichment_failed("P1", "boom")
    assert job_store.get_enrichment_job_status("P1").status is EnrichmentState.FAILED


def test_unknown_status_for_untracked_id(job_store: JobStore):
    status = job_store.get_enrichment_job_status("never-seen")
    assert status.status is EnrichmentState.UNKNOWN
    assert status.as_dict() == {"status": "unknown"}


def test_status_as_dict_uses_camel_case_timestamps(job_store: JobStore):
    job_store.enqueue_enrichment("P1")
    job_store.get_next_enrichment_job()
    job_store.mark_enrichment_processing("P1")
    job_store.mark_enrichment_failed("P1", "boom")

    data = job_store.get_enrichment_job_status("P1").as_dict()
    assert data["status"] == "failed"
    assert data["error"] == "boom"
    assert data["attempts"] == 1
    assert "failedAt" in data


# ===================== stats =====================

def test_stats_after_enqueue_complete_and_fail(job_store: JobStore):
    job_store.enqueue_enrichment("A")
    job_store.enqueue_enrichment("B")

    assert job_store.get_next_enrichment_job() == "A"
    job_store.mark_enrichment_processing("A")
    job_store.mark_enrichment_completed("A")

    assert job_store.get_next_enrichment_job() == "B"
    job_store.mark_enrichment_processing("B")
    job_store.mark_enrichment_failed("B", "boom")

    assert job_store.get_enrichment_queue_stats() == QueueStats(pending=0, processing=0, failed=1, completed=1)


class _DownRedis:
    def zcard(self, *_a):
        raise redis.ConnectionError("redis is down")


def test_stats_are_zero_when_redis_is_unreachable():
    store = JobStore(_DownRedis(), key_prefix="test")
    assert store.get_enrichment_queue_stats() == QueueStats()


def test_list_failed_enrichment_jobs(job_store: JobStore):
    for pid in ("B", "A"):
        job_store.enqueue_enrichment(pid)
        job_store.get_next_enrichment_job()
        job_store.mark_enrichment_processing(pid)
        job_store.mark_enrichment_failed(pid, "boom")

    assert job_store.list_failed_enrichment_jobs() == ["A", "B"]


# ===================== sync queue / unified =====================

def test_sync_payload_round_trip_through_get_next_job(job_store: JobStore, redis_client):
    job_store.enqueue_sync_shopify("brand-1", "shpat_abc")

    raw = redis_client.lrange(job_store.k_sync, 0, -1)
    assert json.loads(raw[0]) == {"brandId": "brand-1", "accessToken": "shpat_abc"}

    job = job_store.get_next_job()
    assert isinstance(job, SyncJob)
    assert job.kind.value == "sync-shopify"
    assert job.payload == {"brandId": "brand-1", "accessToken": "shpat_abc"}
    assert job_store.get_next_job() is None


def test_sync_queue_is_fifo_without_dedup(job_store: JobStore):
    job_store.enqueue_sync_shopify("b1", "t1")
    job_store.enqueue_sync_shopify("b2", "t2")
    job_store.enqueue_sync_shopify("b1", "t1")

    brands = [job_store.get_next_sync_job().brand_id for _ in range(3)]
    assert brands == ["b1", "b2", "b1"]


def test_malformed_sync_payload_is_dropped(job_store: JobStore, redis_client):
    redis_client.rpush(job_store.k_sync, "not-json")
    redis_client.rpush(job_store.k_sync, json.dumps({"brandId": "b1"}))

    assert job_store.get_next_sync_job() is None
    assert job_store.get_next_sync_job() is None
    assert redis_client.llen(job_store.k_sync) == 0


def test_get_next_job_drains_enrichment_before_sync(job_store: JobStore):
    job_store.enqueue_sync_shopify("brand-1", "tok")
    job_store.enqueue_enrichment("P1")
    job_store.enqueue_enrichment("P2")

    kinds = [job_store.get_next_job() for _ in range(3)]
    assert kinds[0] == EnrichJob("P1")
    assert kinds[1] == EnrichJob("P2")
    assert isinstance(kinds[2], SyncJob)


def test_sync_job_repr_hides_token():
    assert "shpat_secret" not in repr(SyncJob("b1", "shpat_secret"))
