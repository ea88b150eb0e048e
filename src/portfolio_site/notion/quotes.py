"""Quotes collection.

The curated local dataset is the primary source; the original Notion quotes
page is scraped only when the dataset cannot be read.
"""

import json
import random
import re
import time
from collections.abc import Callable
from pathlib import Path

from pydantic import BaseModel, Field

from .. import config
from ..logger import logger
from .client import NotionClient
from .models import ParsedRichText
from .parser import parse_rich_text, plain_text

QUOTE_BLOCK_TYPES = ("quote", "text", "bulleted_list")
MIN_UNATTRIBUTED_LENGTH = 20

# "Quote text" - Author, with hyphen, en dash or em dash
_ATTRIBUTED_QUOTE = re.compile(r'^"?([^"]+)"?\s*[-–—]\s*(.+)$')
_HASHTAG = re.compile(r"#\w+")

# theme -> keywords that imply it
_THEME_KEYWORDS: list[tuple[str, tuple[str, ...]]] = [
    ("love", ("love",)),
    ("life", ("life", "living")),
    ("spirituality", ("soul", "spirit")),
    ("wisdom", ("wisdom", "wise")),
    ("time", ("time", "future", "past")),
    ("dreams", ("dream",)),
    ("mortality", ("death", "die")),
    ("art", ("art", "artist")),
    ("suffering", ("pain", "suffer")),
]


class Quote(BaseModel):
    id: str
    text: str
    author: str | None = None
    source: str | None = None
    rich_text: list[ParsedRichText] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)


def extract_tags(text: str) -> list[str]:
    """Hashtags (without '#') followed by keyword themes, de-duplicated."""
    tags = [h[1:] for h in _HASHTAG.findall(text)]

    lower = text.lower()
    for theme, keywords in _THEME_KEYWORDS:
        if any(k in lower for k in keywords):
            tags.append(theme)

    return list(dict.fromkeys(tags))


def get_random_quote(quotes: list[Quote], rng: random.Random | None = None) -> Quote | None:
    if not quotes:
        return None
    return (rng or random).choice(quotes)


def get_quotes_by_tag(quotes: list[Quote], tag: str) -> list[Quote]:
    return [q for q in quotes if tag in q.tags]


def get_quotes_by_author(quotes: list[Quote], author: str) -> list[Quote]:
    return [q for q in quotes if q.author == author]


class QuotesService:
    def __init__(
        self,
        data_path: Path | None = None,
        client: NotionClient | None = None,
        quotes_page_id: str | None = None,
        cache_ttl: float = config.QUOTES_CACHE_TTL,
        clock: Callable[[], float] = time.time,
    ):
        self._data_path = data_path or config.CONTENT_DIR / "quotes.json"
        self._client = client
        self._quotes_page_id = quotes_page_id or config.NOTION_QUOTES_PAGE_ID
        self._cache_ttl = cache_ttl
        self._clock = clock
        self._cache: tuple[list[Quote], float] | None = None

    def _load_local(self) -> list[Quote]:
        with open(self._data_path, encoding="utf-8") as f:
            data = json.load(f)

        quotes = []
        for item in data["quotes"]:
            author = item.get("author")
            source = item.get("source")
            quotes.append(
                Quote(
                    id=str(item["id"]),
                    text=item["quote"],
                    author=author if author and author != "Unknown" else None,
                    source=source if source and source.strip() else None,
                    rich_text=parse_rich_text([[item["quote"], []]]),
                    tags=item.get("tags") or [],
                )
            )
        return quotes

    def fetch_quotes(self) -> list[Quote]:
        try:
            return self._load_local()
        except Exception as e:
            logger.error(
                "failed to load local quotes, falling back to notion",
                path=str(self._data_path),
                error=str(e),
            )
            return self.fetch_quotes_from_notion()

    def fetch_quotes_from_notion(self) -> list[Quote]:
        try:
            if self._client is None:
                self._client = NotionClient()
            record_map = self._client.get_page(self._quotes_page_id)
        except Exception as e:
            logger.error("failed to fetch quotes from notion", error=str(e))
            return []

        quotes: list[Quote] = []
        for raw in (record_map.get("block") or {}).values():
            block = raw.get("value") if isinstance(raw, dict) else None
            if not block or block.get("type") not in QUOTE_BLOCK_TYPES:
                continue
            title = (block.get("properties") or {}).get("title")
            if not title:
                continue

            rich_text = parse_rich_text(title)
            text = plain_text(rich_text)
            block_id = str(block.get("id", ""))

            match = _ATTRIBUTED_QUOTE.match(text)
            if match and match.group(1) and match.group(2):
                quotes.append(
                    Quote(
                        id=block_id,
                        text=match.group(1).strip(),
                        author=match.group(2).strip() or None,
                        rich_text=parse_rich_text([[match.group(1), []]]),
                        tags=extract_tags(text),
                    )
                )
            elif len(text) > MIN_UNATTRIBUTED_LENGTH and "here are some quotes" not in text.lower():
                quotes.append(
                    Quote(id=block_id, text=text, rich_text=rich_text, tags=extract_tags(text))
                )

        logger.info("quotes fetched from notion", count=len(quotes))
        return quotes

    def get_cached_quotes(self) -> list[Quote]:
        now = self._clock()
        if self._cache is not None and now - self._cache[1] < self._cache_ttl:
            return self._cache[0]

        quotes = self.fetch_quotes()
        self._cache = (quotes, self._clock())
        return quotes

    def close(self) -> None:
        """Close the Notion client if the fallback ever created one."""
        if self._client is not None:
            self._client.close()
            self._client = None
