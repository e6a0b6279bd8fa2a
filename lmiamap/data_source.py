"""One-shot retrieval of the LMIA record collection."""
from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, List, Optional

import requests

from . import config
from .http import HttpClient
from .records import Record, parse_records

logger = logging.getLogger(__name__)


class LoadFailure(RuntimeError):
    pass


def is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def _read_payload(source: str, http_client: Optional[HttpClient]) -> Any:
    if is_url(source):
        client = http_client or HttpClient(
            timeout=config.HTTP_TIMEOUT_SECONDS,
            retry_max=config.HTTP_RETRY_MAX,
            backoff_base=config.HTTP_BACKOFF_BASE,
            backoff_max=config.HTTP_BACKOFF_MAX,
        )
        return client.get_json(source)
    path = Path(source).expanduser()
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def load_records(source: str, http_client: Optional[HttpClient] = None) -> List[Record]:
    """Fetch and parse the record collection.

    Transport errors and malformed payloads are raised as LoadFailure.
    """
    try:
        payload = _read_payload(source, http_client)
        records = parse_records(payload)
    except (OSError, requests.RequestException, ValueError) as exc:
        logger.error("Error loading LMIA data from %s: %s", source, exc)
        raise LoadFailure(f"Could not load LMIA data from {source}: {exc}") from exc

    logger.info("Loaded %s LMIA records", len(records))
    return records


async def fetch_records(source: str, http_client: Optional[HttpClient] = None) -> List[Record]:
    return await asyncio.to_thread(load_records, source, http_client)
