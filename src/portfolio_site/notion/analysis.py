"""Heuristic text statistics for parsed pages.

These are deliberately crude measures used for page badges (reading level,
mood, recurring words). The formulas are kept stable so scores shown on the
site do not shift between releases.
"""

import re
from collections import Counter

from .models import (
    BlockSemantics,
    ContentAnalysis,
    EnhancedParsedBlock,
    ParsedBlock,
    Readability,
    Sentiment,
    Typography,
)

_SENTENCE_SPLIT = re.compile(r"[.!?]+")
_SMART_QUOTES = re.compile("[“”‘’]")
# "â€”" is an em-dash that went through a UTF-8 -> cp1252 round trip upstream
_EM_DASHES = re.compile("—|â€”|--")

POSITIVE_WORDS = frozenset({"good", "great", "love", "happy", "beautiful", "wonderful"})
NEGATIVE_WORDS = frozenset({"bad", "hate", "sad", "terrible", "awful", "horrible"})
SENTIMENT_RATIO = 1.5

THEME_STOPWORDS = frozenset({"their", "there", "these", "those", "which", "where"})
THEME_MIN_LENGTH = 5
THEME_MIN_COUNT = 3
MAX_THEMES = 5

_VOWELS = "aeiou"


def _sentences(text: str) -> list[str]:
    return [s for s in _SENTENCE_SPLIT.split(text) if s.strip()]


def _heading_level(block_type: str) -> int | None:
    if "sub_sub_" in block_type:
        return 3
    if "sub_" in block_type:
        return 2
    if "header" in block_type:
        return 1
    return None


def enhance_block(block: ParsedBlock) -> EnhancedParsedBlock:
    """Attach semantic flags and typography stats to a block.

    Pure: the input block is left untouched and equal inputs give equal
    outputs.
    """
    text = block.plain_text

    semantics = BlockSemantics(
        is_quote=block.type == "quote",
        is_code=block.type == "code",
        is_heading=block.type.startswith("header") or block.type.startswith("sub_"),
        heading_level=_heading_level(block.type),
    )

    sentences = _sentences(text)
    if sentences:
        avg_words = sum(len(s.split()) for s in sentences) / len(sentences)
    else:
        avg_words = 0.0

    typography = Typography(
        has_smart_quotes=bool(_SMART_QUOTES.search(text)),
        has_em_dashes=bool(_EM_DASHES.search(text)),
        sentence_count=len(sentences),
        avg_words_per_sentence=avg_words,
    )

    base_fields = {name: getattr(block, name) for name in ParsedBlock.model_fields}
    return EnhancedParsedBlock(
        **base_fields,
        semantics=semantics,
        typography=typography,
    )


def calculate_complexity(blocks: list[EnhancedParsedBlock]) -> float:
    """Mean words-per-sentence across blocks, times three, clamped to 0-100."""
    if not blocks:
        return 0.0
    mean = sum(b.typography.avg_words_per_sentence for b in blocks) / len(blocks)
    return min(100.0, max(0.0, mean * 3))


def analyze_sentiment(text: str) -> Sentiment:
    words = text.lower().split()
    positive = sum(1 for w in words if w in POSITIVE_WORDS)
    negative = sum(1 for w in words if w in NEGATIVE_WORDS)

    if positive > negative * SENTIMENT_RATIO:
        return "positive"
    if negative > positive * SENTIMENT_RATIO:
        return "negative"
    return "neutral"


def extract_themes(text: str) -> list[str]:
    """Most frequent long words, ties kept in first-seen order."""
    counts = Counter(
        w
        for w in text.lower().split()
        if len(w) >= THEME_MIN_LENGTH and w not in THEME_STOPWORDS
    )
    frequent = [(w, c) for w, c in counts.items() if c >= THEME_MIN_COUNT]
    frequent.sort(key=lambda item: item[1], reverse=True)
    return [w for w, _ in frequent[:MAX_THEMES]]


def count_syllables(word: str) -> int:
    word = word.lower()
    count = 0
    previous_was_vowel = False

    for char in word:
        is_vowel = char in _VOWELS
        if is_vowel and not previous_was_vowel:
            count += 1
        previous_was_vowel = is_vowel

    # silent e
    if word.endswith("e"):
        count -= 1

    return max(1, count)


def calculate_readability(text: str) -> Readability:
    """Flesch Reading Ease (0-100) and Flesch-Kincaid grade (0-20)."""
    sentences = _sentences(text)
    words = text.split()
    syllables = sum(count_syllables(w) for w in words)

    words_per_sentence = len(words) / max(1, len(sentences))
    syllables_per_word = syllables / max(1, len(words))

    flesch = 206.835 - 1.015 * words_per_sentence - 84.6 * syllables_per_word
    grade = 0.39 * words_per_sentence + 11.8 * syllables_per_word - 15.59

    return Readability(
        flesch_score=max(0.0, min(100.0, flesch)),
        grade_level=max(0.0, min(20.0, grade)),
    )


def analyze_content(blocks: list[EnhancedParsedBlock]) -> ContentAnalysis:
    text = " ".join(b.plain_text for b in blocks)

    return ContentAnalysis(
        complexity=calculate_complexity(blocks),
        sentiment=analyze_sentiment(text),
        themes=extract_themes(text),
        readability=calculate_readability(text),
    )
