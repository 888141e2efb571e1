from __future__ import annotations

from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any, Dict, Optional, Union


# import pipeline default; admin-triggered re-enrichment jumps ahead of it
DEFAULT_ENRICHMENT_PRIORITY = 100
ADMIN_ENRICHMENT_PRIORITY = 50


class JobKind(str, Enum):
    ENRICH_PRODUCT = "enrich-product"
    SYNC_SHOPIFY = "sync-shopify"


class EnrichmentState(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class EnrichJob:
    product_id: str

    @property
    def kind(self) -> JobKind:
        return JobKind.ENRICH_PRODUCT

    @property
    def payload(self) -> Dict[str, Any]:
        return {"productId": self.product_id}


@dataclass(frozen=True)
class SyncJob:
    brand_id: str
    access_token: str

    @property
    def kind(self) -> JobKind:
        return JobKind.SYNC_SHOPIFY

    @property
    def payload(self) -> Dict[str, Any]:
        return {"brandId": self.brand_id, "accessToken": self.access_token}

    def __repr__(self) -> str:
        # keep the token out of logs
        return f"SyncJob(brand_id={self.brand_id!r}, access_token='***')"


Job = Union[EnrichJob, SyncJob]


"""
  Derived enrichment status of one product id, as seen by the job store.
  Only the fields relevant to `status` are set:
    pending    -> priority
    processing -> attempts
    completed  -> completed_at (epoch ms)
    failed     -> error, attempts, failed_at (epoch ms)
"""
@dataclass
class JobStatus:
    status: EnrichmentState
    priority: Optional[int] = None
    attempts: Optional[int] = None
    error: Optional[str] = None
    failed_at: Optional[int] = None
    completed_at: Optional[int] = None

    def as_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"status": self.status.value}
        camel = {"failed_at": "failedAt", "completed_at": "completedAt"}
        for key, value in asdict(self).items():
            if key == "status" or value is None:
                continue
            out[camel.get(key, key)] = value
        return out


@dataclass
class QueueStats:
    pending: int = 0
    processing: int = 0
    failed: int = 0
    completed: int = 0

    def as_dict(self) -> Dict[str, int]:
        return asdict(self)
