"""Fetch, parse and analyse Notion writing pages."""

import time
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass

from .. import config
from ..logger import clear_context, logger, set_context
from .analysis import analyze_content, enhance_block
from .client import NotionClient
from .models import EnhancedParsedPage, ParsedPage, WritingSummary
from .parser import parse_page


@dataclass
class _CacheEntry:
    page: EnhancedParsedPage
    timestamp: float


class NotionContentService:
    """Writing pages backed by Notion with a short-lived in-memory cache.

    Every public method degrades to None / [] when Notion is unavailable, so
    a bad remote page never breaks a render.
    """

    def __init__(
        self,
        client: NotionClient | None = None,
        writing_pages: dict[str, str] | None = None,
        cache_ttl: float = config.PAGE_CACHE_TTL,
        clock: Callable[[], float] = time.time,
        max_workers: int = 6,
    ):
        self._client = client or NotionClient()
        self.writing_pages = writing_pages if writing_pages is not None else config.writing_pages()
        self._cache_ttl = cache_ttl
        self._clock = clock
        self._max_workers = max_workers
        # Entries are replaced on the next read after expiry, never swept
        self._cache: dict[str, _CacheEntry] = {}

    def fetch_page(self, page_id: str) -> ParsedPage | None:
        set_context(page_id=page_id)
        try:
            record_map = self._client.get_page(page_id)
            page = parse_page(record_map)
            if page is None:
                logger.warn("notion page had no page block")
            return page
        except Exception as e:
            logger.error("failed to fetch notion page", error=str(e))
            return None
        finally:
            clear_context()

    def fetch_enhanced_page(self, page_id: str) -> EnhancedParsedPage | None:
        page = self.fetch_page(page_id)
        if page is None:
            return None

        try:
            enhanced_blocks = [enhance_block(block) for block in page.blocks]
            analysis = analyze_content(enhanced_blocks)
        except Exception as e:
            logger.exception("failed to analyse notion page", page_id=page_id, error=str(e))
            return None

        return EnhancedParsedPage(
            id=page.id,
            title=page.title,
            blocks=page.blocks,
            metadata=page.metadata,
            enhanced_blocks=enhanced_blocks,
            analysis=analysis,
        )

    def get_cached_page(self, page_id: str) -> EnhancedParsedPage | None:
        """Return a page from cache when fresh, otherwise fetch it.

        Failed fetches are not cached.
        """
        now = self._clock()
        cached = self._cache.get(page_id)
        if cached is not None and now - cached.timestamp < self._cache_ttl:
            logger.debug("page cache hit", page_id=page_id)
            return cached.page

        page = self.fetch_enhanced_page(page_id)
        if page is not None:
            self._cache[page_id] = _CacheEntry(page=page, timestamp=self._clock())
        return page

    def get_writing_page(self, slug: str) -> EnhancedParsedPage | None:
        page_id = self.writing_pages.get(slug)
        if page_id is None:
            return None
        return self.get_cached_page(page_id)

    def fetch_all_writing_pages(self) -> list[WritingSummary]:
        """Fetch every configured writing page concurrently.

        Pages that fail to load are left out. Results keep the configured
        order.
        """
        items = list(self.writing_pages.items())
        if not items:
            return []

        start = time.perf_counter()
        results: dict[int, WritingSummary] = {}

        with ThreadPoolExecutor(max_workers=min(self._max_workers, len(items))) as executor:
            future_to_index = {
                executor.submit(self.get_cached_page, page_id): i
                for i, (_, page_id) in enumerate(items)
            }
            for future in as_completed(future_to_index):
                idx = future_to_index[future]
                slug, page_id = items[idx]
                try:
                    page = future.result()
                except Exception as e:
                    logger.error("failed to load writing page", slug=slug, error=str(e))
                    continue
                if page is None:
                    continue
                results[idx] = WritingSummary(
                    slug=slug,
                    page_id=page_id,
                    title=page.title,
                    total_words=page.metadata.total_words,
                    reading_time=page.metadata.total_reading_time,
                    created_time=page.metadata.created_time,
                    last_edited_time=page.metadata.last_edited_time,
                )

        summaries = [results[i] for i in sorted(results)]
        duration_ms = (time.perf_counter() - start) * 1000
        logger.info(
            "writing pages loaded",
            requested=len(items),
            loaded=len(summaries),
            failed=len(items) - len(summaries),
            duration_ms=round(duration_ms, 2),
        )
        return summaries

    def clear_cache(self) -> None:
        self._cache.clear()

    def close(self) -> None:
        self._client.close()
