"""Fetching remote manifests over HTTP with retry."""

import logging
import random
import time
from urllib.parse import urlparse

import requests

from .constants import (
    MAX_RETRIES,
    REQUEST_TIMEOUT,
    RETRY_BASE_DELAY,
    USER_AGENT,
)

log = logging.getLogger("pagesync")

ALLOWED_SCHEMES = ("http", "https")


def is_remote(source: str) -> bool:
    """Return True if *source* looks like an http(s) URL."""
    return urlparse(source).scheme in ALLOWED_SCHEMES


def backoff_delay(attempt: int) -> float:
    """Seconds to wait after failed *attempt* (1-based), with jitter."""
    return RETRY_BASE_DELAY * (2 ** (attempt - 1)) + random.uniform(0, 0.5)


def fetch_text(url: str, *, retries: int = MAX_RETRIES) -> str:
    """Download the manifest at *url* and return it as text.

    Tries up to *retries* times; the last ``requests.RequestException`` is
    re-raised.  Bodies without a declared charset are read as UTF-8.
    """
    log.info("Fetching manifest from %s", url)
    headers = {"User-Agent": USER_AGENT}
    attempt = 1

    while True:
        try:
            resp = requests.get(url, headers=headers, timeout=REQUEST_TIMEOUT)
            resp.raise_for_status()
        except requests.RequestException as exc:
            if attempt >= retries:
                raise
            delay = backoff_delay(attempt)
            log.warning(
                "Manifest fetch %d/%d failed (%s), retrying in %.1fs",
                attempt, retries, exc, delay,
            )
            time.sleep(delay)
            attempt += 1
            continue

        resp.encoding = resp.encoding or "utf-8"
        return resp.text
