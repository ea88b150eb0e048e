"""Markdown to HTML with Pygments-highlighted code blocks."""

import re

import markdown as md
from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import TextLexer, get_lexer_by_name
from pygments.util import ClassNotFound

from ..logger import logger

HIGHLIGHT_STYLE = "github-dark"
CODE_BLOCK_CLASS = "highlight-code-block"

LANGUAGE_ALIASES = {
    "js": "javascript",
    "ts": "typescript",
    "py": "python",
    "sh": "bash",
    "yml": "yaml",
    "text": "plaintext",
    "md": "markdown",
}

_FENCED_CODE = re.compile(r"```(\w+)?\n([\s\S]*?)```")

# Highlighted HTML is stashed behind placeholders so markdown leaves it alone
_PLACEHOLDER = "HIGHLIGHTEDCODEBLOCK{}END"
_PLACEHOLDER_PARAGRAPH = re.compile(r"<p>(HIGHLIGHTEDCODEBLOCK\d+END)</p>")


def normalize_language(language: str | None) -> str:
    if not language:
        return "plaintext"
    language = language.lower()
    return LANGUAGE_ALIASES.get(language, language)


def highlight_code(code: str, language: str | None) -> str:
    """Highlight a code sample, falling back to plain text for unknown languages."""
    lang = normalize_language(language)
    try:
        lexer = TextLexer() if lang == "plaintext" else get_lexer_by_name(lang)
    except ClassNotFound:
        logger.warn("unknown code block language", language=lang)
        lexer = TextLexer()

    formatter = HtmlFormatter(style=HIGHLIGHT_STYLE, cssclass=CODE_BLOCK_CLASS, noclasses=True)
    return highlight(code.strip(), lexer, formatter)


def render_markdown(content: str) -> str:
    """Render markdown (GFM-style line breaks and tables) to HTML."""
    stash: list[str] = []

    def _replace(match: re.Match) -> str:
        stash.append(highlight_code(match.group(2), match.group(1)))
        return "\n\n" + _PLACEHOLDER.format(len(stash) - 1) + "\n\n"

    processed = _FENCED_CODE.sub(_replace, content)

    html = md.markdown(
        processed,
        extensions=["tables", "nl2br", "sane_lists"],
        output_format="html",
    )

    html = _PLACEHOLDER_PARAGRAPH.sub(lambda m: m.group(1), html)
    for index, block in enumerate(stash):
        html = html.replace(_PLACEHOLDER.format(index), block)

    return html
