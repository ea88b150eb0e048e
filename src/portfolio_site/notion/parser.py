"""Decode Notion record maps into ParsedPage / ParsedBlock trees.

A record map (as returned by the loadPageChunk endpoint) holds an unordered
``block`` mapping of id -> {"role": ..., "value": {...}}. Text properties use
Notion's compact rich text encoding: a list whose items are either bare
strings or ``[text, [[tag, value?], ...]]`` pairs.

Decoding is best effort. Malformed nodes are skipped rather than failing the
whole page.
"""

import math
import time
from dataclasses import dataclass
from typing import Any, Union

from .models import (
    Annotations,
    BlockMetadata,
    PageMetadata,
    ParsedBlock,
    ParsedPage,
    ParsedRichText,
)

WORDS_PER_MINUTE = 200

# Rich text encodings
PlainText = str
FormatCode = list[Any]  # [tag] or [tag, value]
FormattedText = list[Any]  # [text, [FormatCode, ...]]
RawRichText = Union[PlainText, FormattedText]

# Format tags that set a boolean style flag
_FLAG_TAGS = {
    "b": "bold",
    "i": "italic",
    "s": "strikethrough",
    "u": "underline",
    "c": "code",
}
_COLOR_TAG = "h"
_LINK_TAG = "a"


@dataclass(frozen=True)
class Parsed:
    block: ParsedBlock


@dataclass(frozen=True)
class Skipped:
    reason: str


BlockDecodeResult = Union[Parsed, Skipped]


def _now_ms() -> int:
    return int(time.time() * 1000)


def _decode_formats(formats: Any) -> tuple[Annotations, str | None]:
    flags: dict[str, Any] = {}
    href = None

    if not isinstance(formats, list):
        return Annotations(), None

    for code in formats:
        if not isinstance(code, list) or not code:
            continue
        tag = code[0]
        value = code[1] if len(code) > 1 else None
        if tag in _FLAG_TAGS:
            flags[_FLAG_TAGS[tag]] = True
        elif tag == _COLOR_TAG and isinstance(value, str):
            flags["color"] = value
        elif tag == _LINK_TAG and isinstance(value, str):
            href = value
        # other tags (mentions, dates, equations) carry no style we render

    return Annotations(**flags), href


def decode_rich_text_item(item: RawRichText) -> ParsedRichText:
    """Decode one rich text run in either encoding."""
    if isinstance(item, list) and item:
        text = item[0]
        formats = item[1] if len(item) > 1 else []
        annotations, href = _decode_formats(formats)
        return ParsedRichText(text=str(text), annotations=annotations, href=href)

    return ParsedRichText(text=str(item))


def parse_rich_text(raw: Any) -> list[ParsedRichText]:
    """Decode a Notion rich text array. Anything but a list yields []."""
    if not isinstance(raw, list):
        return []
    return [decode_rich_text_item(item) for item in raw]


def plain_text(runs: list[ParsedRichText]) -> str:
    return "".join(run.text for run in runs)


def calculate_metrics(text: str) -> dict[str, int]:
    """Word count and reading time (minutes, 200 wpm rounded up)."""
    word_count = len(text.split())
    return {
        "word_count": word_count,
        "reading_time": math.ceil(word_count / WORDS_PER_MINUTE),
    }


def _dict_or_empty(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def _timestamp(value: Any, default: int) -> int:
    # bool is an int subclass but never a timestamp
    if isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0:
        return int(value)
    return default


def _block_value(raw: Any) -> dict | None:
    if not isinstance(raw, dict):
        return None
    value = raw.get("value")
    return value if isinstance(value, dict) else None


def decode_block(
    raw: Any,
    block_map: dict[str, Any] | None = None,
    _seen: frozenset[str] = frozenset(),
) -> BlockDecodeResult:
    """Decode one block record.

    Args:
        raw: A block record ({"value": {...}}) from a record map.
        block_map: The record map's block mapping. When given, the block's
            ``content`` ids are resolved into children.

    Returns:
        Parsed with the block, or Skipped with the reason it was dropped.
    """
    if raw is None:
        return Skipped("block missing")

    value = _block_value(raw)
    if value is None:
        return Skipped("block has no value")

    properties = _dict_or_empty(value.get("properties"))
    if properties.get("title"):
        content = parse_rich_text(properties["title"])
    elif properties.get("caption"):
        content = parse_rich_text(properties["caption"])
    else:
        content = []

    now = _now_ms()
    metrics = calculate_metrics(plain_text(content))

    block_id = str(value.get("id") or "")
    block_type = str(value.get("type") or "")
    children = None
    if block_map is not None and block_type != "page":
        children = _decode_children(value.get("content"), block_map, _seen | {block_id})

    block = ParsedBlock(
        id=block_id,
        type=block_type,
        content=content,
        metadata=BlockMetadata(
            created_time=_timestamp(value.get("created_time"), now),
            last_edited_time=_timestamp(value.get("last_edited_time"), now),
            **metrics,
        ),
        children=children,
    )
    return Parsed(block)


def _decode_children(
    content_ids: Any,
    block_map: dict[str, Any],
    seen: frozenset[str],
) -> list[ParsedBlock] | None:
    if not isinstance(content_ids, list) or not content_ids:
        return None

    children = []
    for child_id in content_ids:
        if not isinstance(child_id, str) or child_id in seen:
            continue
        result = decode_block(block_map.get(child_id), block_map, seen)
        if isinstance(result, Parsed):
            children.append(result.block)
    return children or None


def parse_block(raw: Any, block_map: dict[str, Any] | None = None) -> ParsedBlock | None:
    """Decode one block record, returning None for anything malformed."""
    result = decode_block(raw, block_map)
    if isinstance(result, Parsed):
        return result.block
    return None


def find_page_block(blocks: dict[str, Any]) -> dict | None:
    """Return the value of the first "page" block in iteration order.

    Record maps usually hold a single page block. When they hold several
    (e.g. linked sub-pages), the first one encountered wins; the source format
    does not guarantee an order.
    """
    for raw in blocks.values():
        value = _block_value(raw)
        if value is not None and value.get("type") == "page":
            return value
    return None


def parse_page(record_map: Any) -> ParsedPage | None:
    """Decode a full page from a record map.

    The page total counts words of its direct blocks only.
    """
    if not isinstance(record_map, dict):
        return None
    blocks_by_id = record_map.get("block")
    if not isinstance(blocks_by_id, dict) or not blocks_by_id:
        return None

    page = find_page_block(blocks_by_id)
    if page is None:
        return None

    properties = _dict_or_empty(page.get("properties"))
    title = plain_text(parse_rich_text(properties["title"])) if properties.get("title") else "Untitled"

    blocks: list[ParsedBlock] = []
    total_words = 0
    page_id = str(page.get("id") or "")

    content_ids = page.get("content")
    if isinstance(content_ids, list):
        for content_id in content_ids:
            if not isinstance(content_id, str):
                continue
            result = decode_block(blocks_by_id.get(content_id), blocks_by_id, frozenset({page_id}))
            if isinstance(result, Parsed):
                blocks.append(result.block)
                total_words += result.block.metadata.word_count

    now = _now_ms()
    return ParsedPage(
        id=page_id,
        title=title,
        blocks=blocks,
        metadata=PageMetadata(
            total_words=total_words,
            total_reading_time=math.ceil(total_words / WORDS_PER_MINUTE),
            created_time=_timestamp(page.get("created_time"), now),
            last_edited_time=_timestamp(page.get("last_edited_time"), now),
        ),
    )
