"""
Error handling utilities for consistent error patterns across the engine.

Missing data and store failures degrade to fallback values; only invalid
caller input is raised. These helpers keep the logging for both paths uniform.
"""

import functools
import bittensor as bt
from typing import Any, Dict, Optional


def log_and_raise_validation_error(
    message: str,
    data: Optional[Dict[str, Any]] = None,
    context_info: Optional[Dict[str, Any]] = None
) -> None:
    """
    Log validation error with context and raise ValueError.

    Args:
        message: Error message describing what validation failed
        data: Data that failed validation (will be truncated if large)
        context_info: Additional context dictionary

    Raises:
        ValueError: Always raises with formatted message
    """
    # Truncate large data for logging
    safe_data = data
    if data and len(str(data)) > 200:
        safe_data = str(data)[:200] + "... (truncated)"

    bt.logging.error(
        f"Validation failed: {message}",
        extra={'validation_data': safe_data, 'context': context_info}
    )

    raise ValueError(message)


def log_store_failure(
    error: Exception,
    operation: str,
    context: Optional[Dict[str, Any]] = None
) -> None:
    """
    Log a store read/write failure that the caller will degrade around.

    Args:
        error: The original exception
        operation: Description of the store operation that failed
        context: Additional context information (entity ids, dates)
    """
    bt.logging.warning(
        f"Store operation '{operation}' failed, degrading to fallback: {error}",
        extra={
            'operation': operation,
            'context': context,
            'error_type': type(error).__name__
        }
    )


_RERAISE = object()


def safe_operation(operation_name: str, default_return=_RERAISE):
    """
    Decorator for store reads that degrade to a default on failure.

    Args:
        operation_name: Name of the operation for logging
        default_return: Value to return on error (None is a valid default).
                        When omitted the error is logged and re-raised.

    Returns:
        Decorator function
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except Exception as e:
                if default_return is _RERAISE:
                    bt.logging.error(
                        f"Operation '{operation_name}' failed: {e}",
                        extra={
                            'operation': operation_name,
                            'function': func.__name__,
                            'error_type': type(e).__name__
                        }
                    )
                    raise
                log_store_failure(e, operation_name, {'function': func.__name__})
                return default_return
        return wrapper
    return decorator


# Standard error messages for common scenarios
class ErrorMessages:
    """Standard error messages for consistency."""

    # Validation errors
    INVALID_ENTITY_TYPE = "Unknown entity type"
    INVALID_AS_OF_DATE = "Malformed as-of date"
    INVALID_WINDOW = "Unknown scoring window"
    MISSING_ACCOUNT_ID = "Target account id is missing"

    # Store errors
    SNAPSHOT_READ_FAILED = "Snapshot read failed"
    SNAPSHOT_WRITE_FAILED = "Snapshot write failed"
    GRAPH_READ_FAILED = "Follow graph read failed"
    CONTENT_READ_FAILED = "Content read failed"
    PROFILE_READ_FAILED = "Profile lookup failed"
    SMART_SCORE_READ_FAILED = "Smart account score read failed"
