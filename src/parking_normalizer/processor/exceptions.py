"""
Parking Normalizer - Error Taxonomy

Only InsufficientDataError is recoverable: the reconciliation driver skips
the (garage, hour) pair and a later run retries it. Everything else aborts
the run.
"""

from typing import Any, List, Optional


class NormalizationError(Exception):
    """Base class for normalization errors."""
    pass


class EmptyDatasetError(NormalizationError):
    """Raised when the raw sample store holds no samples at all."""
    pass


class InsufficientDataError(NormalizationError):
    """Raised when a (garage, hour) has fewer samples than the policy minimum."""

    def __init__(self, garage_id: int, bucket: str, sample_count: int, min_samples: int):
        super().__init__(
            f"Garage {garage_id} at {bucket}: min_samples = {min_samples} "
            f"but only {sample_count} sample(s)"
        )
        self.garage_id = garage_id
        self.bucket = bucket
        self.sample_count = sample_count
        self.min_samples = min_samples


class EmptyAggregationError(NormalizationError):
    """Raised when asked to average zero samples (min_samples misconfigured to 0)."""
    pass


class MalformedResultError(NormalizationError):
    """Raised when a query result does not match the expected row schema."""

    def __init__(self, message: str, context: Optional[str] = None,
                 errors: Optional[List[Any]] = None):
        super().__init__(message)
        self.context = context
        self.errors = errors or []
