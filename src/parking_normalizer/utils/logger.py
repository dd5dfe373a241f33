"""
Parking Normalizer - Structured Logging
Provides JSON-formatted logging for log aggregation queries.
"""

import logging
import sys
from typing import Optional
from pythonjsonlogger import jsonlogger

from .config import LOG_LEVEL, config


def setup_logger(name: str = __name__) -> logging.Logger:
    """
    Configure structured JSON logger.

    Args:
        name: Logger name (typically __name__ from calling module)

    Returns:
        Configured logger instance

    Example:
        >>> logger = setup_logger(__name__)
        >>> logger.info("Run completed", extra={
        ...     "records_inserted": 42,
        ...     "duration_seconds": 3.1
        ... })
    """
    logger = logging.getLogger(name)

    # Prevent duplicate handlers
    if logger.hasHandlers():
        return logger

    level = getattr(logging, LOG_LEVEL.upper(), logging.INFO)
    logger.setLevel(level)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)

    formatter = jsonlogger.JsonFormatter(
        '%(asctime)s %(name)s %(levelname)s %(message)s',
        datefmt='%Y-%m-%dT%H:%M:%S'
    )
    handler.setFormatter(formatter)

    logger.addHandler(handler)
    logger.propagate = False

    return logger


# Global logger instance
logger = setup_logger('parking_normalizer')


def log_reconciliation_start(mode: str, range_start: str, range_end: str, garage_count: int):
    """Log the start of a reconciliation run."""
    logger.info("Reconciliation started", extra={
        "event_type": "reconciliation_start",
        "mode": mode,
        "range_start": range_start,
        "range_end": range_end,
        "garage_count": garage_count,
        "environment": config.environment
    })


def log_reconciliation_complete(mode: str, buckets_visited: int, records_inserted: int,
                                existing_skipped: int, insufficient_skipped: int,
                                duration_seconds: float):
    """Log successful reconciliation completion."""
    logger.info("Reconciliation completed", extra={
        "event_type": "reconciliation_complete",
        "mode": mode,
        "buckets_visited": buckets_visited,
        "records_inserted": records_inserted,
        "existing_skipped": existing_skipped,
        "insufficient_skipped": insufficient_skipped,
        "duration_seconds": duration_seconds
    })


def log_reconciliation_error(error: Exception, mode: str, bucket: Optional[str] = None,
                             garage_id: Optional[int] = None):
    """Log a failure that aborted a reconciliation run."""
    logger.error("Reconciliation failed", extra={
        "event_type": "reconciliation_error",
        "mode": mode,
        "bucket": bucket,
        "garage_id": garage_id,
        "error_type": type(error).__name__,
        "error_message": str(error)
    }, exc_info=True)


def log_insufficient_data(garage_id: int, bucket: str, sample_count: int, min_samples: int):
    """Log a (garage, hour) pair skipped for lack of samples."""
    logger.info("Insufficient datapoints, skip for now", extra={
        "event_type": "insufficient_data",
        "garage_id": garage_id,
        "bucket": bucket,
        "sample_count": sample_count,
        "min_samples": min_samples
    })


def log_database_error(error: Exception, query_context: str = None):
    """Log database error with context."""
    logger.error("Database error", extra={
        "event_type": "database_error",
        "error_type": type(error).__name__,
        "error_message": str(error),
        "query_context": query_context
    }, exc_info=True)
