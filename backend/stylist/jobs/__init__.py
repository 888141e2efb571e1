from .errors import JobError, JobValidationError, ProductNotFoundError, BrandNotFoundError
from .types import (
    ADMIN_ENRICHMENT_PRIORITY,
    DEFAULT_ENRICHMENT_PRIORITY,
    EnrichJob,
    EnrichmentState,
    Job,
    JobKind,
    JobStatus,
    QueueStats,
    SyncJob,
)
from .job_store import JobStore


__all__ = [
    "JobError", "JobValidationError", "ProductNotFoundError", "BrandNotFoundError",
    "ADMIN_ENRICHMENT_PRIORITY", "DEFAULT_ENRICHMENT_PRIORITY",
    "EnrichJob", "SyncJob", "Job", "JobKind", "EnrichmentState", "JobStatus", "QueueStats",
    "JobStore",
]
