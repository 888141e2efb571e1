
import argparse
import logging

from stylist.core.config import settings
from stylist.core.logging import configure_logging
from stylist.jobs import DEFAULT_ENRICHMENT_PRIORITY, JobStore, JobValidationError


logger = logging.getLogger("stylist.scripts.requeue_enrichment")


# Re-enqueue products for enrichment (retry past the attempts cap is always manual).
#   python scripts/requeue_enrichment.py <product_id> [<product_id> ...]
#   python scripts/requeue_enrichment.py --failed            # every id with a failure record
#   python scripts/requeue_enrichment.py --failed --priority 50

def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Re-enqueue products for enrichment")
    p.add_argument("product_ids", nargs="*", help="product ids to enqueue")
    p.add_argument("--failed", action="store_true", help="re-enqueue every product with a failure record")
    p.add_argument("--priority", type=int, default=DEFAULT_ENRICHMENT_PRIORITY,
                   help=f"queue priority, lower runs first (default {DEFAULT_ENRICHMENT_PRIORITY})")
    args = p.parse_args(argv)
    if not args.product_ids and not args.failed:
        p.error("give product ids or --failed")
    return args


def requeue(store: JobStore, product_ids, *, include_failed: bool, priority: int) -> int:
    ids = list(dict.fromkeys(product_ids))
    if include_failed:
        ids += [pid for pid in store.list_failed_enrichment_jobs() if pid not in ids]

    queued = 0
    for pid in ids:
        try:
            store.enqueue_enrichment(pid, priority)
            queued += 1
        except JobValidationError as e:
            logger.warning("requeue.skipped product_id=%r err=%s", pid, e)
    return queued


def main(argv=None):
    configure_logging(settings.LOG_LEVEL)
    args = parse_args(argv)
    store = JobStore.from_settings()
    queued = requeue(store, args.product_ids, include_failed=args.failed, priority=args.priority)
    logger.info("requeue.done queued=%s stats=%s", queued, store.get_enrichment_queue_stats().as_dict())


if __name__ == "__main__":
    main()
