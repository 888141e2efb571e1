# Background job worker: a single polling loop over the Redis job store

from __future__ import annotations

import logging
import signal
import time
from dataclasses import dataclass
from typing import Callable, Optional

from stylist.core.config import settings
from stylist.core.logging import configure_logging
from stylist.db.session import dispose_engine
from stylist.jobs.enrichment_processor import EnrichmentProcessor
from stylist.jobs.job_store import JobStore
from stylist.jobs.sync_processor import SyncProcessor
from stylist.jobs.types import EnrichJob, Job, SyncJob


logger = logging.getLogger(__name__)



@dataclass(frozen=True)
class PollPolicy:
    poll_interval_sec: float = 2.0   # sleep after an empty poll
    idle_log_every: int = 30         # "idle" notice every N empty polls
    error_backoff_sec: float = 2.0   # sleep after the loop itself failed (e.g. Redis down)

    def __post_init__(self):
        # used as a modulus in the idle branch
        if self.idle_log_every < 1:
            object.__setattr__(self, "idle_log_every", 1)

    @classmethod
    def from_settings(cls) -> "PollPolicy":
        interval = settings.WORKER_POLL_INTERVAL_MS / 1000.0
        return cls(
            poll_interval_sec=interval,
            idle_log_every=settings.WORKER_IDLE_LOG_EVERY,
            error_backoff_sec=interval,
        )



'''
  One process = one sequential loop. Per job:
    enrich-product: claim (attempts += 1) -> EnrichmentProcessor.run -> completed / failed
    sync-shopify:   SyncProcessor.run, single attempt, no status bookkeeping
  Job errors stop at the job boundary; loop errors (queue reads) are logged and retried
  after a fixed backoff. A job claimed by a process that dies is not recovered.
'''
class Worker:

    def __init__(
        self,
        store: JobStore,
        enrichment: EnrichmentProcessor,
        sync: SyncProcessor,
        policy: Optional[PollPolicy] = None,
        *,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.store = store
        self.enrichment = enrichment
        self.sync = sync
        self.policy = policy or PollPolicy()
        self._sleep = sleep
        self._stop = False


    def stop(self, *_args) -> None:
        # finish the current job, then leave run_forever
        if not self._stop:
            logger.info("worker.stop_requested")
        self._stop = True


    @property
    def stopping(self) -> bool:
        return self._stop


    def run_one(self) -> bool:
        """Process at most one job. Returns False when both queues are empty."""
        job = self.store.get_next_job()
        if job is None:
            return False
        self.dispatch(job)
        return True


    def dispatch(self, job: Job) -> None:
        if isinstance(job, EnrichJob):
            self._handle_enrich(job)
        elif isinstance(job, SyncJob):
            self._handle_sync(job)
        else:
            raise TypeError(f"unknown job type: {type(job).__name__}")


    def _handle_enrich(self, job: EnrichJob) -> None:
        product_id = job.product_id
        try:
            attempts = self.store.mark_enrichment_processing(product_id)
            logger.info("worker.enrich.start product_id=%s attempt=%s", product_id, attempts)
            self.enrichment.run(product_id)
            self.store.mark_enrichment_completed(product_id)
            logger.info("worker.enrich.ok product_id=%s", product_id)
        except Exception as e:
            message = str(e) or type(e).__name__
            retryable = self.store.mark_enrichment_failed(product_id, message)
            if retryable:
                logger.warning("worker.enrich.failed product_id=%s retryable=true err=%s", product_id, message)
            else:
                logger.error("worker.enrich.failed product_id=%s max_attempts_reached err=%s", product_id, message)


    def _handle_sync(self, job: SyncJob) -> None:
        try:
            result = self.sync.run(job.brand_id, job.access_token)
            logger.info("worker.sync.ok brand_id=%s synced=%s errors=%s",
                        job.brand_id, result.synced, result.errors)
        except Exception as e:
            logger.error("worker.sync.failed brand_id=%s err=%s", job.brand_id, e)


    def run_forever(self, *, max_cycles: Optional[int] = None) -> int:
        """
        Poll until stop() (SIGINT / SIGTERM) or `max_cycles` loop iterations.
        Returns the number of jobs processed.
        """
        policy = self.policy
        idle_cycles = 0
        cycles = 0
        processed = 0

        logger.info("worker.started poll_interval_sec=%s", policy.poll_interval_sec)
        while not self._stop:
            if max_cycles is not None and cycles >= max_cycles:
                break
            cycles += 1
            try:
                if self.run_one():
                    processed += 1
                    continue
                idle_cycles += 1
                if idle_cycles % policy.idle_log_every == 0:
                    logger.info("worker.idle cycles=%s", idle_cycles)
                self._sleep(policy.poll_interval_sec)
            except Exception as e:
                logger.exception("worker.loop_error err=%s", e)
                self._sleep(policy.error_backoff_sec)

        logger.info("worker.stopped processed=%s", processed)
        return processed



def build_worker() -> Worker:
    return Worker(
        store=JobStore.from_settings(),
        enrichment=EnrichmentProcessor(),
        sync=SyncProcessor(),
        policy=PollPolicy.from_settings(),
    )


def main() -> None:
    configure_logging(settings.LOG_LEVEL)
    worker = build_worker()

    signal.signal(signal.SIGINT, worker.stop)
    signal.signal(signal.SIGTERM, worker.stop)

    try:
        worker.run_forever()
    finally:
        dispose_engine()


if __name__ == "__main__":
    main()
