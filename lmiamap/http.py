"""HTTP client with retry/backoff for the record feed."""
from __future__ import annotations

import logging
import random
import time
from typing import Any, Dict, Optional

import requests

logger = logging.getLogger(__name__)

RETRYABLE_STATUSES = (429, 500, 502, 503, 504)


class HttpClient:
    def __init__(
        self,
        timeout: float = 20,
        retry_max: int = 3,
        backoff_base: float = 0.5,
        backoff_max: float = 8.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.timeout = timeout
        self.retry_max = max(1, int(retry_max))
        self.backoff_base = backoff_base
        self.backoff_max = backoff_max
        self.session = session or requests.Session()

    def get_json(self, url: str, extra_headers: Optional[Dict[str, str]] = None) -> Any:
        """GET a JSON feed and return the decoded body.

        429 and 5xx responses and connection errors are retried with backoff,
        honouring Retry-After. After the last attempt the requests error is
        raised; a 200 with a non-JSON body raises ValueError.
        """
        headers = {"Accept": "application/json"}
        if extra_headers:
            headers.update(extra_headers)

        for attempt in range(1, self.retry_max + 1):
            try:
                resp = self.session.get(url, headers=headers, timeout=self.timeout)
            except requests.RequestException as exc:
                logger.warning("Request to %s failed (attempt %s): %s", url, attempt, exc)
                if attempt >= self.retry_max:
                    raise
                self._sleep_backoff(attempt)
                continue

            status = resp.status_code
            if status == 200:
                try:
                    return resp.json()
                except ValueError:
                    logger.error("Non-JSON response from %s", url)
                    raise

            if status in RETRYABLE_STATUSES:
                logger.warning("HTTP %s from %s (attempt %s)", status, url, attempt)
                if attempt >= self.retry_max:
                    resp.raise_for_status()
                if not self._sleep_retry_after(resp):
                    self._sleep_backoff(attempt)
                continue

            # Non-retryable
            logger.error("HTTP %s from %s", status, url)
            resp.raise_for_status()
            raise requests.HTTPError(f"HTTP error! status: {status}", response=resp)

        raise RuntimeError("Unexpected HTTP retry loop exit")

    def _sleep_backoff(self, attempt: int) -> None:
        base = min(self.backoff_base * (2 ** (attempt - 1)), self.backoff_max)
        jitter = random.uniform(0, self.backoff_base)
        time.sleep(base + jitter)

    def _sleep_retry_after(self, resp: requests.Response) -> bool:
        retry_after = resp.headers.get("Retry-After")
        if not retry_after:
            return False
        try:
            delay = float(retry_after)
        except ValueError:
            return False
        delay = max(0.0, min(delay, self.backoff_max))
        time.sleep(delay)
        return True
