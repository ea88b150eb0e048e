from .models import (
    Annotations,
    BlockMetadata,
    BlockSemantics,
    ContentAnalysis,
    EnhancedParsedBlock,
    EnhancedParsedPage,
    PageMetadata,
    ParsedBlock,
    ParsedPage,
    ParsedRichText,
    Readability,
    Typography,
    WritingSummary,
)
from .parser import (
    Parsed,
    Skipped,
    calculate_metrics,
    decode_block,
    parse_block,
    parse_page,
    parse_rich_text,
)
from .analysis import analyze_content, enhance_block
from .client import NotionAPIError, NotionClient
from .service import NotionContentService
from .quotes import (
    Quote,
    QuotesService,
    extract_tags,
    get_quotes_by_author,
    get_quotes_by_tag,
    get_random_quote,
)

__all__ = [
    # Models
    "Annotations",
    "BlockMetadata",
    "BlockSemantics",
    "ContentAnalysis",
    "EnhancedParsedBlock",
    "EnhancedParsedPage",
    "PageMetadata",
    "ParsedBlock",
    "ParsedPage",
    "ParsedRichText",
    "Readability",
    "Typography",
    "WritingSummary",
    # Parser
    "Parsed",
    "Skipped",
    "calculate_metrics",
    "decode_block",
    "parse_block",
    "parse_page",
    "parse_rich_text",
    # Analysis
    "analyze_content",
    "enhance_block",
    # Client / service
    "NotionAPIError",
    "NotionClient",
    "NotionContentService",
    # Quotes
    "Quote",
    "QuotesService",
    "extract_tags",
    "get_quotes_by_author",
    "get_quotes_by_tag",
    "get_random_quote",
]
