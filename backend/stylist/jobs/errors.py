
"""
   Job pipeline exception types.
   Raised by the job store (bad input) and by the processors (missing rows);
   the worker turns them into job failures, the admin API into 4xx responses.
"""

class JobError(Exception):
    """Base for all job pipeline errors."""

class JobValidationError(JobError, ValueError):
    """Empty / placeholder ids or an unusable job payload."""

class ProductNotFoundError(JobError):
    """Enrichment target does not exist in the products table."""

    def __init__(self, product_id: str):
        super().__init__(f"Product not found: {product_id}")
        self.product_id = product_id

class BrandNotFoundError(JobError):
    """Sync target brand does not exist."""

    def __init__(self, brand_id: str):
        super().__init__(f"Brand not found: {brand_id}")
        self.brand_id = brand_id
