"""Normalized representation of Notion pages and their analysis."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class Annotations(_Frozen):
    """Inline style flags of a rich text run. Unset flags are None."""

    bold: bool | None = None
    italic: bool | None = None
    strikethrough: bool | None = None
    underline: bool | None = None
    code: bool | None = None
    color: str | None = None


class ParsedRichText(_Frozen):
    text: str
    annotations: Annotations = Field(default_factory=Annotations)
    href: str | None = None  # link target, kept apart from style annotations


class BlockMetadata(_Frozen):
    created_time: int  # epoch milliseconds
    last_edited_time: int
    word_count: int
    reading_time: int  # minutes


class ParsedBlock(_Frozen):
    id: str
    type: str
    content: list[ParsedRichText]
    metadata: BlockMetadata
    children: list["ParsedBlock"] | None = None

    @property
    def plain_text(self) -> str:
        return "".join(run.text for run in self.content)


class PageMetadata(_Frozen):
    total_words: int  # direct blocks only, nested children are not added
    total_reading_time: int
    created_time: int
    last_edited_time: int


class ParsedPage(_Frozen):
    id: str
    title: str
    blocks: list[ParsedBlock]
    metadata: PageMetadata


class BlockSemantics(_Frozen):
    is_quote: bool
    is_code: bool
    is_heading: bool
    heading_level: int | None = None


class Typography(_Frozen):
    has_smart_quotes: bool
    has_em_dashes: bool
    sentence_count: int
    avg_words_per_sentence: float


class EnhancedParsedBlock(ParsedBlock):
    semantics: BlockSemantics
    typography: Typography


class Readability(_Frozen):
    flesch_score: float  # 0-100
    grade_level: float  # 0-20


Sentiment = Literal["positive", "neutral", "negative"]


class ContentAnalysis(_Frozen):
    complexity: float  # 0-100
    sentiment: Sentiment
    themes: list[str]
    readability: Readability


class EnhancedParsedPage(ParsedPage):
    enhanced_blocks: list[EnhancedParsedBlock]
    analysis: ContentAnalysis


class WritingSummary(_Frozen):
    """Index entry for one writing page."""

    slug: str
    page_id: str
    title: str
    total_words: int
    reading_time: int
    created_time: int
    last_edited_time: int
