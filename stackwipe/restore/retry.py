"""Bounded retry for rate-limited AWS calls."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Optional

from botocore.exceptions import ClientError

logger = logging.getLogger(__name__)

RETRYABLE_ERROR_CODES = frozenset({"TooManyRequestsException"})

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_INITIAL_DELAY = 60.0
DEFAULT_BACKOFF_FACTOR = 2.0


def error_code(error: BaseException) -> Optional[str]:
    """AWS error code of a ClientError, None for anything else."""
    if isinstance(error, ClientError):
        return error.response.get("Error", {}).get("Code")
    return None


def error_message(error: BaseException) -> str:
    """Provider message of an error, as AWS returned it."""
    if isinstance(error, ClientError):
        message = error.response.get("Error", {}).get("Message")
        if message:
            return message
    return str(error)


def call_with_retry(
    fn: Callable[[], Any],
    notify: Optional[Callable[[str], None]] = None,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    initial_delay: float = DEFAULT_INITIAL_DELAY,
    factor: float = DEFAULT_BACKOFF_FACTOR,
) -> Any:
    """Call fn, retrying only when AWS answers TooManyRequests.

    Any other error is raised on the first attempt. Delays grow
    geometrically: with the defaults the gaps are 60s and 120s.

    Args:
        fn: Zero-argument callable wrapping one AWS call
        notify: Progress callback receiving "<message>. Will retry..."
        max_attempts: Total attempts, including the first
        initial_delay: Seconds to wait before the second attempt
        factor: Multiplier applied to the delay after each retry

    Returns:
        Whatever fn returns

    Raises:
        ClientError: The non-retryable error, or the last throttling error
    """
    delay = initial_delay
    for attempt in range(1, max_attempts + 1):
        try:
            return fn()
        except ClientError as e:
            if error_code(e) not in RETRYABLE_ERROR_CODES:
                raise
            if attempt >= max_attempts:
                logger.error(f"Still throttled after {max_attempts} attempts: {error_message(e)}")
                raise

            if notify is not None:
                notify(f"{error_message(e)}. Will retry...")
            logger.warning(f"Throttled, retrying in {delay:.0f}s (attempt {attempt}/{max_attempts})")
            time.sleep(delay)
            delay *= factor
