# Redis-backed enrichment / sync job queues and the enrichment status registry

from __future__ import annotations

import json
import logging
from typing import List, Optional

import redis

from stylist.core.config import settings
from stylist.jobs.errors import JobValidationError
from stylist.jobs.types import (
    DEFAULT_ENRICHMENT_PRIORITY,
    EnrichJob,
    EnrichmentState,
    Job,
    JobStatus,
    QueueStats,
    SyncJob,
)
from stylist.utils.clock import now_ms


logger = logging.getLogger(__name__)


# score = priority * PRIORITY_SCALE + seq; seq keeps equal priorities in insertion order
PRIORITY_SCALE = 10 ** 9
# keeps the composite score below 2**53, exact as a Redis double
MAX_PRIORITY = 9_000_000

_INVALID_IDS = {"", "undefined", "null", "None"}


def _validate_id(value, field: str) -> str:
    text = "" if value is None else str(value)
    if text.strip() in _INVALID_IDS:
        raise JobValidationError(f"Invalid {field}: {value!r}")
    return text


def _validate_priority(value) -> int:
    if isinstance(value, bool):
        raise JobValidationError(f"Invalid priority: {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise JobValidationError(f"Invalid priority: {value!r}") from None
    if not number.is_integer() or abs(number) > MAX_PRIORITY:
        raise JobValidationError(
            f"Invalid priority: {value!r} (whole number within +-{MAX_PRIORITY} required)"
        )
    return int(number)


'''
Key layout (prefix defaults to "backend2"):
    {prefix}:enrichment:queue       ZSET  product_id -> composite score
    {prefix}:enrichment:seq         STR   INCR counter for the FIFO tie-break
    {prefix}:enrichment:processing  SET   claimed product ids (whole-set EXPIRE, advisory)
    {prefix}:enrichment:attempts    HASH  product_id -> claims since last enqueue
    {prefix}:enrichment:failed      HASH  product_id -> {"error","attempts","failedAt"}
    {prefix}:enrichment:results     HASH  product_id -> completion epoch ms
    {prefix}:sync:queue             LIST  {"brandId","accessToken"} JSON, FIFO

Every call is a single Redis command; multi-step transitions (enqueue, claim)
are not transactional, so two producers enqueueing the same id concurrently
can interleave. Nothing here re-enqueues a failed job: retry is the caller's call.
'''
class JobStore:

    def __init__(
        self,
        client: "redis.Redis",
        *,
        key_prefix: str = "backend2",
        max_attempts: int = 3,
        processing_ttl: int = 300,
    ):
        self.r = client
        self.max_attempts = max(1, int(max_attempts))
        self.processing_ttl = int(processing_ttl)

        p = key_prefix
        self.k_queue = f"{p}:enrichment:queue"
        self.k_seq = f"{p}:enrichment:seq"
        self.k_processing = f"{p}:enrichment:processing"
        self.k_attempts = f"{p}:enrichment:attempts"
        self.k_failed = f"{p}:enrichment:failed"
        self.k_results = f"{p}:enrichment:results"
        self.k_sync = f"{p}:sync:queue"


    @classmethod
    def from_settings(cls, client: Optional["redis.Redis"] = None) -> "JobStore":
        if client is None:
            client = redis.from_url(settings.REDIS_URL, decode_responses=True)
        return cls(
            client,
            key_prefix=settings.JOB_KEY_PREFIX,
            max_attempts=settings.ENRICHMENT_MAX_ATTEMPTS,
            processing_ttl=settings.ENRICHMENT_PROCESSING_TTL_SEC,
        )


    # ===================== enrichment queue =====================

    def enqueue_enrichment(self, product_id, priority: int = DEFAULT_ENRICHMENT_PRIORITY) -> str:
        """
        Queue (or re-queue) a product for enrichment. Clears a previous failure and
        processing marker, resets attempts to 0. Re-enqueueing an id already in the
        queue moves it to the new priority, at the back of that priority.
        """
        pid = _validate_id(product_id, "product_id")
        prio = _validate_priority(priority)

        self.r.hdel(self.k_failed, pid)
        self.r.srem(self.k_processing, pid)

        seq = int(self.r.incr(self.k_seq)) % PRIORITY_SCALE
        self.r.zadd(self.k_queue, {pid: prio * PRIORITY_SCALE + seq})
        self.r.hset(self.k_attempts, pid, 0)

        logger.debug("jobs.enrich.enqueued product_id=%s priority=%s", pid, prio)
        return pid


    def get_next_enrichment_job(self) -> Optional[str]:
        popped = self.r.zpopmin(self.k_queue, 1)
        if not popped:
            return None
        member, _score = popped[0]
        return str(member)


    # claim: returns the new attempt count
    def mark_enrichment_processing(self, product_id: str) -> int:
        self.r.sadd(self.k_processing, product_id)
        self.r.expire(self.k_processing, self.processing_ttl)
        return int(self.r.hincrby(self.k_attempts, product_id, 1))


    def mark_enrichment_completed(self, product_id: str) -> None:
        self.r.srem(self.k_processing, product_id)
        self.r.hset(self.k_results, product_id, now_ms())
        self.r.hdel(self.k_failed, product_id)
        self.r.hdel(self.k_attempts, product_id)


    def mark_enrichment_failed(self, product_id: str, error: str) -> bool:
        """
        Record a failed attempt. Returns True while the product may be retried
        (attempts < max_attempts); once the cap is reached the attempts counter is
        dropped and False is returned. Does not re-enqueue either way.
        """
        self.r.srem(self.k_processing, product_id)
        attempts = int(self.r.hget(self.k_attempts, product_id) or 0)

        record = {"error": str(error), "attempts": attempts, "failedAt": now_ms()}
        self.r.hset(self.k_failed, product_id, json.dumps(record))
        self.r.hdel(self.k_results, product_id)

        if attempts >= self.max_attempts:
            self.r.hdel(self.k_attempts, product_id)
        return attempts < self.max_attempts


    def get_enrichment_job_status(self, product_id: str) -> JobStatus:
        # precedence: queued -> processing -> completed -> failed -> unknown
        score = self.r.zscore(self.k_queue, product_id)
        if score is not None:
            return JobStatus(EnrichmentState.PENDING, priority=int(score) // PRIORITY_SCALE)

        if self.r.sismember(self.k_processing, product_id):
            attempts = int(self.r.hget(self.k_attempts, product_id) or 0)
            return JobStatus(EnrichmentState.PROCESSING, attempts=attempts)

        completed = self.r.hget(self.k_results, product_id)
        if completed:
            return JobStatus(EnrichmentState.COMPLETED, completed_at=int(completed))

        failed = self.r.hget(self.k_failed, product_id)
        if failed:
            try:
                data = json.loads(failed)
            except ValueError:
                data = {"error": str(failed)}
            return JobStatus(
                EnrichmentState.FAILED,
                error=data.get("error"),
                attempts=data.get("attempts"),
                failed_at=data.get("failedAt"),
            )

        return JobStatus(EnrichmentState.UNKNOWN)


    def get_enrichment_queue_stats(self) -> QueueStats:
        try:
            return QueueStats(
                pending=int(self.r.zcard(self.k_queue)),
                processing=int(self.r.scard(self.k_processing)),
                failed=int(self.r.hlen(self.k_failed)),
                completed=int(self.r.hlen(self.k_results)),
            )
        except redis.RedisError as e:
            logger.warning("jobs.stats.unavailable err=%s", e)
            return QueueStats()


    # product ids with a failure record, for operator re-queues
    def list_failed_enrichment_jobs(self) -> List[str]:
        return sorted(str(k) for k in self.r.hkeys(self.k_failed))


    # ===================== sync queue =====================

    def enqueue_sync_shopify(self, brand_id, access_token) -> str:
        bid = _validate_id(brand_id, "brand_id")
        token = _validate_id(access_token, "access_token")
        self.r.rpush(self.k_sync, json.dumps({"brandId": bid, "accessToken": token}))
        logger.debug("jobs.sync.enqueued brand_id=%s", bid)
        return bid


    def get_next_sync_job(self) -> Optional[SyncJob]:
        raw = self.r.lpop(self.k_sync)
        if not raw:
            return None
        try:
            data = json.loads(raw)
            return SyncJob(brand_id=str(data["brandId"]), access_token=str(data["accessToken"]))
        except (ValueError, KeyError, TypeError):
            # the payload is already popped; it is dropped, not requeued
            logger.error("jobs.sync.malformed_payload dropped len=%s", len(raw))
            return None


    # ===================== unified =====================

    def get_next_job(self) -> Optional[Job]:
        # enrichment always drains first; a busy enrichment queue starves sync
        product_id = self.get_next_enrichment_job()
        if product_id:
            return EnrichJob(product_id=product_id)
        return self.get_next_sync_job()
