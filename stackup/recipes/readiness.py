"""
Readiness polling for a freshly started stack.
"""

import time
import requests
from typing import Optional
import logging

logger = logging.getLogger(__name__)


class ReadinessResult:
    """Result of a readiness poll."""

    def __init__(self, success: bool, attempts: int, message: str):
        self.success = success
        self.attempts = attempts
        self.message = message


def probe(url: str, timeout: float = 10) -> Optional[str]:
    """
    Probe url once.

    Returns:
        None when the endpoint answered with a 2xx/3xx status, else the error
    """
    try:
        response = requests.get(url, timeout=timeout)
    except requests.exceptions.RequestException as e:
        return f"Request failed: {str(e)}"
    if 200 <= response.status_code < 400:
        return None
    return f"Unexpected status {response.status_code}"


def poll_readiness(url: str, max_attempts: int = 30, retry_delay: float = 5, timeout: float = 10) -> ReadinessResult:
    """
    Poll url until it answers successfully or max_attempts is exhausted.

    Args:
        url: Readiness endpoint
        max_attempts: Upper bound on probes
        retry_delay: Seconds between probes
        timeout: Per-request timeout in seconds

    Returns:
        ReadinessResult with success flag and number of attempts made
    """
    logger.info(f"Waiting for {url} (up to {max_attempts} attempts, {retry_delay}s apart)")

    last_error = None
    for attempt in range(1, max_attempts + 1):
        last_error = probe(url, timeout=timeout)
        if last_error is None:
            logger.info(f"{url} ready after {attempt} attempt(s)")
            return ReadinessResult(True, attempt, f"Ready after {attempt} attempt(s)")

        if attempt < max_attempts:
            logger.debug(f"Attempt {attempt} failed ({last_error}), retrying in {retry_delay}s...")
            time.sleep(retry_delay)

    logger.error(f"{url} not ready after {max_attempts} attempts: {last_error}")
    return ReadinessResult(False, max_attempts, f"Not ready after {max_attempts} attempts: {last_error}")
