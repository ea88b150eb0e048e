"""Shared fixtures: Notion record maps and a controllable clock."""

import pytest

from .factories import PAGE_ID, FakeClock, make_block


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def record_map():
    """A page with a heading, two paragraphs, a quote and a nested toggle."""
    return {
        "block": {
            PAGE_ID: make_block(
                PAGE_ID,
                "page",
                title=[["Overthinking vs Misthinking"]],
                content=["h1", "p1", "p2", "q1", "t1", "missing"],
                created_time=1_690_000_000_000,
                last_edited_time=1_695_000_000_000,
            ),
            "h1": make_block("h1", "header", title=[["Thinking about thinking"]],
                             created_time=1_690_000_000_000, last_edited_time=1_690_000_000_000),
            "p1": make_block(
                "p1",
                "text",
                title=[["We think a great deal. ", []], ["Most of it", [["b"]]], [" is good."]],
                created_time=1_690_000_000_000,
                last_edited_time=1_690_000_000_000,
            ),
            "p2": make_block(
                "p2",
                "text",
                title=[["Read more ", []], ["here", [["a", "https://example.com"]]]],
                created_time=1_690_000_000_000,
                last_edited_time=1_690_000_000_000,
            ),
            "q1": make_block("q1", "quote", title=[["“Know thyself.”"]],
                             created_time=1_690_000_000_000, last_edited_time=1_690_000_000_000),
            "t1": make_block(
                "t1",
                "toggle",
                title=[["Footnotes"]],
                content=["t1c"],
                created_time=1_690_000_000_000,
                last_edited_time=1_690_000_000_000,
            ),
            "t1c": make_block("t1c", "text", title=[["one two three four"]],
                              created_time=1_690_000_000_000, last_edited_time=1_690_000_000_000),
        }
    }
