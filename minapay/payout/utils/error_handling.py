"""
Error handling utilities for consistent error patterns across the payout pipeline.

These helpers log a failure with its context through bittensor's logger and
then raise, so callers never have to pair a log line with a raise by hand.
"""

import bittensor as bt
from typing import Any, Dict, Optional


SENSITIVE_MARKERS = ['api_key', 'token', 'password', 'secret', 'private_key']


def log_and_raise_api_error(
    error: Exception,
    endpoint: str,
    params: Optional[Dict[str, Any]] = None,
    context: str = "API call"
) -> None:
    """
    Log API error with context and raise RuntimeError.

    Args:
        error: The original exception
        endpoint: API endpoint that failed
        params: Request parameters (will be sanitized)
        context: Additional context for the error

    Raises:
        RuntimeError: Always raises with formatted message
    """
    safe_params = {}
    if params:
        safe_params = {k: v for k, v in params.items()
                      if k.lower() not in SENSITIVE_MARKERS}

    bt.logging.error(
        f"{context} failed: {error}",
        extra={
            'endpoint': endpoint,
            'params': safe_params,
            'error_type': type(error).__name__
        }
    )

    raise RuntimeError(f"{context} failed for {endpoint}: {error}") from error


def log_and_raise_validation_error(
    message: str,
    data: Optional[Any] = None,
) -> None:
    """
    Log validation error with context and raise ValueError.

    Args:
        message: Error message describing what validation failed
        data: Data that failed validation (truncated if large)

    Raises:
        ValueError: Always raises with formatted message
    """
    safe_data = data
    if data and len(str(data)) > 200:
        safe_data = str(data)[:200] + "... (truncated)"

    bt.logging.error(
        f"Validation failed: {message}",
        extra={'validation_data': safe_data}
    )

    raise ValueError(message)


def log_and_raise_config_error(
    message: str,
    config_key: Optional[str] = None,
    config_value: Optional[str] = None
) -> None:
    """
    Log configuration error and raise ValueError.

    Args:
        message: Error message describing the configuration issue
        config_key: The configuration key that's problematic
        config_value: The problematic value (redacted for key material)

    Raises:
        ValueError: Always raises with formatted message
    """
    safe_value = config_value
    if config_value and any(sensitive in str(config_key).lower()
                           for sensitive in ['private', 'token', 'password', 'secret']):
        safe_value = '***REDACTED***'

    bt.logging.error(
        f"Configuration error: {message}",
        extra={'config_key': config_key, 'config_value': safe_value}
    )

    raise ValueError(f"{message} (config_key: {config_key})")
