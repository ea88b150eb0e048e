"""Tests for decoding Notion record maps."""

from unittest.mock import patch

from portfolio_site.notion import (
    Annotations,
    Parsed,
    ParsedRichText,
    Skipped,
    calculate_metrics,
    decode_block,
    parse_block,
    parse_page,
    parse_rich_text,
)

from .factories import PAGE_ID, make_block


class TestParseRichText:
    def test_bold(self):
        assert parse_rich_text([["hello", [["b", True]]]]) == [
            ParsedRichText(text="hello", annotations=Annotations(bold=True))
        ]

    def test_link_kept_outside_annotations(self):
        result = parse_rich_text([["link", [["a", "https://x.com"]]]])
        assert result == [ParsedRichText(text="link", annotations=Annotations(), href="https://x.com")]
        assert result[0].annotations.model_dump(exclude_none=True) == {}

    def test_all_style_flags(self):
        (run,) = parse_rich_text([["x", [["b"], ["i"], ["s"], ["u"], ["c"], ["h", "red"]]]])
        assert run.annotations == Annotations(
            bold=True, italic=True, strikethrough=True, underline=True, code=True, color="red"
        )
        assert run.href is None

    def test_unknown_codes_ignored(self):
        (run,) = parse_rich_text([["x", [["d", {"type": "date"}], ["b"]]]])
        assert run.annotations == Annotations(bold=True)

    def test_bare_strings(self):
        assert parse_rich_text(["plain"]) == [ParsedRichText(text="plain")]

    def test_pair_without_formats(self):
        assert parse_rich_text([["just text"]]) == [ParsedRichText(text="just text")]

    def test_non_list_input(self):
        assert parse_rich_text(None) == []
        assert parse_rich_text("text") == []

    def test_non_string_link_and_color_ignored(self):
        (run,) = parse_rich_text([["x", [["a", 5], ["h", {"c": 1}], ["i"]]]])
        assert run.href is None
        assert run.annotations == Annotations(italic=True)


class TestCalculateMetrics:
    def test_empty(self):
        assert calculate_metrics("") == {"word_count": 0, "reading_time": 0}

    def test_three_words(self):
        assert calculate_metrics("one two three") == {"word_count": 3, "reading_time": 1}

    def test_collapses_whitespace(self):
        assert calculate_metrics("  one \n\t two  ")["word_count"] == 2

    def test_reading_time_rounds_up(self):
        assert calculate_metrics("word " * 201)["reading_time"] == 2


class TestParseBlock:
    def test_missing_block(self):
        assert parse_block(None) is None
        assert parse_block({"role": "reader"}) is None

    def test_decode_reports_reason(self):
        result = decode_block({"role": "reader"})
        assert isinstance(result, Skipped)
        assert "value" in result.reason

    def test_title_text_and_metrics(self):
        block = parse_block(make_block("b1", "text", title=[["four words right here"]],
                                       created_time=10, last_edited_time=20))
        assert block.id == "b1"
        assert block.type == "text"
        assert block.metadata.word_count == 4
        assert block.metadata.reading_time == 1
        assert block.metadata.created_time == 10
        assert block.metadata.last_edited_time == 20

    def test_caption_used_when_no_title(self):
        raw = {"value": {"id": "img", "type": "image", "properties": {"caption": [["A caption"]]}}}
        block = parse_block(raw)
        assert block.plain_text == "A caption"

    def test_title_preferred_over_caption(self):
        raw = {"value": {"id": "b", "type": "text",
                         "properties": {"title": [["Title"]], "caption": [["Caption"]]}}}
        assert parse_block(raw).plain_text == "Title"

    def test_no_text(self):
        block = parse_block({"value": {"id": "d", "type": "divider"}})
        assert block.content == []
        assert block.metadata.word_count == 0

    def test_missing_timestamps_default_to_now(self):
        with patch("portfolio_site.notion.parser.time.time", return_value=1234.5):
            block = parse_block({"value": {"id": "b", "type": "text"}})
        assert block.metadata.created_time == 1_234_500
        assert block.metadata.last_edited_time == 1_234_500

    def test_children_resolved_with_block_map(self, record_map):
        blocks = record_map["block"]
        block = parse_block(blocks["t1"], blocks)
        assert [c.id for c in block.children] == ["t1c"]
        # own text only
        assert block.metadata.word_count == 1

    def test_children_absent_without_block_map(self, record_map):
        assert parse_block(record_map["block"]["t1"]).children is None

    def test_cycles_do_not_recurse(self):
        blocks = {
            "a": make_block("a", "toggle", title=[["a"]], content=["b"]),
            "b": make_block("b", "toggle", title=[["b"]], content=["a"]),
        }
        block = parse_block(blocks["a"], blocks)
        assert [c.id for c in block.children] == ["b"]
        assert block.children[0].children is None

    def test_decode_returns_parsed(self, record_map):
        assert isinstance(decode_block(record_map["block"]["p1"]), Parsed)

    def test_properties_not_a_mapping(self):
        for properties in (["oops"], "bad", 3):
            block = parse_block({"value": {"id": "x", "type": "text", "properties": properties}})
            assert block.content == []
            assert block.metadata.word_count == 0

    def test_null_id_and_type(self):
        block = parse_block({"value": {"id": None, "type": None}})
        assert block.id == ""
        assert block.type == ""

    def test_non_numeric_timestamps_default_to_now(self):
        with patch("portfolio_site.notion.parser.time.time", return_value=5.0):
            block = parse_block({"value": {"id": "b", "type": "text", "created_time": "yesterday"}})
        assert block.metadata.created_time == 5000

    def test_unhashable_child_ids_skipped(self):
        blocks = {
            "a": make_block("a", "toggle", content=[["nested"], "b"]),
            "b": make_block("b", "text", title=[["child"]]),
        }
        assert [c.id for c in parse_block(blocks["a"], blocks).children] == ["b"]


class TestParsePage:
    def test_title_and_blocks(self, record_map):
        page = parse_page(record_map)
        assert page.id == PAGE_ID
        assert page.title == "Overthinking vs Misthinking"
        # "missing" id is skipped
        assert [b.id for b in page.blocks] == ["h1", "p1", "p2", "q1", "t1"]

    def test_total_words_counts_direct_blocks_only(self, record_map):
        page = parse_page(record_map)
        direct = sum(b.metadata.word_count for b in page.blocks)
        assert page.metadata.total_words == direct
        # nested toggle child has four words that are not added
        assert page.metadata.total_words == 3 + 10 + 3 + 2 + 1
        assert page.metadata.total_reading_time == 1

    def test_page_timestamps(self, record_map):
        page = parse_page(record_map)
        assert page.metadata.created_time == 1_690_000_000_000
        assert page.metadata.last_edited_time == 1_695_000_000_000

    def test_untitled(self):
        page = parse_page({"block": {"p": make_block("p", "page", content=[])}})
        assert page.title == "Untitled"
        assert page.blocks == []
        assert page.metadata.total_words == 0

    def test_no_page_block(self):
        assert parse_page({"block": {"x": make_block("x", "text", title=[["hi"]])}}) is None

    def test_malformed_record_maps(self):
        assert parse_page(None) is None
        assert parse_page({}) is None
        assert parse_page({"block": {}}) is None

    def test_first_page_block_wins(self):
        record_map = {
            "block": {
                "first": make_block("first", "page", title=[["First"]]),
                "second": make_block("second", "page", title=[["Second"]]),
            }
        }
        assert parse_page(record_map).title == "First"

    def test_rich_text_preserved_in_blocks(self, record_map):
        page = parse_page(record_map)
        p2 = page.blocks[2]
        assert p2.content[1].href == "https://example.com"
        assert page.blocks[1].content[1].annotations.bold is True

    def test_malformed_child_does_not_lose_page(self):
        record_map = {
            "block": {
                "p": make_block("p", "page", title=[["Page"]], content=["a", {"id": "c"}, "b"]),
                "a": {"value": {"id": "a", "type": "text", "properties": "bad"}},
                "b": make_block("b", "text", title=[["two words"]]),
            }
        }
        page = parse_page(record_map)
        assert [b.id for b in page.blocks] == ["a", "b"]
        assert page.blocks[0].content == []
        assert page.metadata.total_words == 2

    def test_page_properties_not_a_mapping(self):
        page = parse_page({"block": {"p": {"value": {"id": "p", "type": "page", "properties": ["x"]}}}})
        assert page.title == "Untitled"
