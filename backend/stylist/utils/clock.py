from __future__ import annotations
import time
from datetime import datetime, timezone

def now_utc() -> datetime:
    return datetime.now(timezone.utc)  # timestamptz columns


def now_ms() -> int:
    # epoch milliseconds, the unit the job store writes for completedAt / failedAt
    return int(time.time() * 1000)
