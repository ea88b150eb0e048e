"""Site configuration read from environment variables."""

import os
from pathlib import Path

# Public site origin used for sitemap URLs
SITE_URL = os.getenv("SITE_URL", "https://briankelleher.ie").rstrip("/")

# "development" disables the https redirect and HSTS
ENVIRONMENT = os.getenv("ENVIRONMENT", "production").lower()

# Directory holding quotes.json, projects.json and project markdown
CONTENT_DIR = Path(os.getenv("CONTENT_DIR", str(Path(__file__).parent / "data")))

GITHUB_USERNAME = os.getenv("GITHUB_USERNAME", "HeroBrian389")

NOTION_API_BASE = os.getenv("NOTION_API_BASE", "https://www.notion.so/api/v3")
NOTION_ROOT_PAGE_ID = os.getenv("NOTION_ROOT_PAGE_ID", "149c09c3c6044fd495248cacffd5cf05")
NOTION_QUOTES_PAGE_ID = os.getenv(
    "NOTION_QUOTES_PAGE_ID", "475b7fbc-7ab3-47c6-ab0b-c17177db4acc"
)

# Cache lifetimes in seconds
PAGE_CACHE_TTL = 5 * 60
QUOTES_CACHE_TTL = 10 * 60

# GitHub contributions proxy quota
GITHUB_PROXY_LIMIT = 10
GITHUB_PROXY_WINDOW_MS = 60_000

_DEFAULT_WRITING_PAGES = {
    "overthinking-vs-misthinking": "26a5b55f-f5bd-405d-aaf0-a96979d817eb",
    "why-do-we-collect-stories": "44b00c27-5430-4b65-95c8-f78097dd8e82",
    "good-writing-steals-soul": "6ffc4de7-f506-4421-bef1-1db03b8bd4cd",
    "witness-to-our-lives": "943ccbc2-08b0-4941-9f14-f0a16aa000fc",
    "cure-soul-by-senses": "97add8d8-fb23-4a00-bb75-b1c651b6ac6a",
    "leinster-final-speech": "b2197937-3321-442f-8376-117a3a55f08d",
}


def _page_env_var(slug: str) -> str:
    return "NOTION_PAGE_" + slug.upper().replace("-", "_")


def writing_pages() -> dict[str, str]:
    """Map writing slugs to Notion page ids.

    Each id can be overridden with NOTION_PAGE_<SLUG>, e.g.
    NOTION_PAGE_WITNESS_TO_OUR_LIVES.
    """
    return {
        slug: os.getenv(_page_env_var(slug), page_id)
        for slug, page_id in _DEFAULT_WRITING_PAGES.items()
    }


def is_development() -> bool:
    return ENVIRONMENT in ("development", "dev", "local")
