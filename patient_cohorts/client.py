"""Thin requests wrapper for the assessment API."""

import logging
import time
from dataclasses import dataclass

import requests

from .errors import TransportFault

logger = logging.getLogger(__name__)

RETRY_STATUSES = (429, 500, 502, 503, 504)


@dataclass(frozen=True)
class RetryPolicy:
    """Bounded exponential backoff for a single request."""

    max_attempts: int = 4
    backoff: float = 1.0
    multiplier: float = 2.0
    max_backoff: float = 30.0
    retry_statuses: tuple[int, ...] = RETRY_STATUSES

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {self.max_attempts}")

    def delay(self, attempt: int) -> float:
        """Seconds to wait after the given (1-based) failed attempt."""
        return min(self.backoff * self.multiplier ** (attempt - 1), self.max_backoff)


class AssessmentClient:
    """Session bound to one API key, with timeouts and retries on every GET."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = 30.0,
        retry_policy: RetryPolicy | None = None,
        session=None,
        sleep=time.sleep,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.retry_policy = retry_policy or RetryPolicy()
        self.sleep = sleep
        self.session = session or requests.Session()
        self.session.headers.update({
            "x-api-key": api_key,
            "Content-Type": "application/json",
        })

    def get_json(self, path: str, params: dict | None = None) -> dict:
        return self._request("GET", path, params=params)

    def post_json(self, path: str, body: dict) -> dict:
        # Submissions are not idempotent, so they get exactly one attempt.
        return self._request("POST", path, attempts=1, json=body)

    def _request(self, method: str, path: str, attempts: int | None = None, **kwargs) -> dict:
        url = f"{self.base_url}{path}"
        attempts = attempts or self.retry_policy.max_attempts

        for attempt in range(1, attempts + 1):
            try:
                r = self.session.request(method, url, timeout=self.timeout, **kwargs)
            except requests.RequestException as e:
                fault = TransportFault(f"{method} {url} failed: {e}")
            else:
                if 200 <= r.status_code < 300:
                    try:
                        return r.json()
                    except ValueError:
                        fault = TransportFault(
                            f"{method} {url} returned a body that is not JSON",
                            status_code=r.status_code,
                        )
                elif r.status_code in self.retry_policy.retry_statuses:
                    fault = TransportFault(
                        f"{method} {url} returned HTTP {r.status_code}",
                        status_code=r.status_code,
                    )
                else:
                    raise TransportFault(
                        f"{method} {url} returned HTTP {r.status_code}",
                        status_code=r.status_code,
                    )

            if attempt < attempts:
                wait = self.retry_policy.delay(attempt)
                logger.warning(f"{fault} (attempt {attempt}/{attempts}), retrying in {wait:.1f}s")
                self.sleep(wait)

        logger.error(f"Giving up after {attempts} attempt(s): {fault}")
        raise fault
