"""HTTP client for public Notion pages."""

import time
import uuid
from typing import Any

import httpx

from .. import config
from ..logger import logger

DEFAULT_TIMEOUT_SECONDS = 15.0
CHUNK_LIMIT = 100
MAX_CHUNKS = 20


class NotionAPIError(RuntimeError):
    """Raised when a Notion page cannot be fetched."""


def normalize_page_id(page_id: str) -> str:
    """Return the dashed UUID form Notion expects.

    Accepts both "149c09c3c6044fd495248cacffd5cf05" and the dashed form.

    Raises:
        ValueError: If page_id is not a UUID.
    """
    return str(uuid.UUID(page_id.strip()))


class NotionClient:
    """Loads public pages as record maps via the loadPageChunk endpoint."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        http_client: httpx.Client | None = None,
    ):
        self._base_url = (base_url or config.NOTION_API_BASE).rstrip("/")
        self._client = http_client or httpx.Client(timeout=timeout)

    def close(self) -> None:
        self._client.close()

    def _load_chunk(self, page_id: str, chunk_number: int, cursor: dict) -> dict:
        payload = {
            "pageId": page_id,
            "limit": CHUNK_LIMIT,
            "cursor": cursor,
            "chunkNumber": chunk_number,
            "verticalColumns": False,
        }
        try:
            response = self._client.post(f"{self._base_url}/loadPageChunk", json=payload)
            response.raise_for_status()
            return response.json()
        except httpx.TimeoutException as e:
            raise NotionAPIError(f"Notion request timed out for page {page_id}") from e
        except httpx.HTTPStatusError as e:
            raise NotionAPIError(
                f"Notion returned {e.response.status_code} for page {page_id}"
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            raise NotionAPIError(f"Failed to fetch Notion page {page_id}: {e}") from e

    def get_page(self, page_id: str) -> dict[str, Any]:
        """Fetch every chunk of a page and merge them into one record map.

        Args:
            page_id: Notion page id, dashed or undashed.

        Returns:
            Record map with a ``block`` mapping of id -> block record.

        Raises:
            NotionAPIError: On transport, HTTP or decoding failures.
        """
        try:
            page_id = normalize_page_id(page_id)
        except ValueError as e:
            raise NotionAPIError(f"Invalid Notion page id: {page_id!r}") from e

        start = time.perf_counter()
        blocks: dict[str, Any] = {}
        cursor: dict = {"stack": []}

        for chunk_number in range(MAX_CHUNKS):
            data = self._load_chunk(page_id, chunk_number, cursor)
            record_map = data.get("recordMap") or {}
            blocks.update(record_map.get("block") or {})

            cursor = data.get("cursor") or {}
            if not cursor.get("stack"):
                break
        else:
            logger.warn("notion page truncated", page_id=page_id, chunks=MAX_CHUNKS)

        duration_ms = (time.perf_counter() - start) * 1000
        logger.info(
            "notion page fetched",
            page_id=page_id,
            blocks=len(blocks),
            duration_ms=round(duration_ms, 2),
        )
        return {"block": blocks}
