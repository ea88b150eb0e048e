"""Scrape the public contribution count from a GitHub profile."""

import re
import time

import httpx

from .logger import logger

PROFILE_URL = (
    "https://github.com/{username}?action=show&controller=profiles"
    "&tab=contributions&user_id={username}"
)

REQUEST_HEADERS = {
    "accept": "text/html",
    "accept-language": "en-US,en;q=0.9",
    "user-agent": (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/137.0.0.0 Safari/537.36"
    ),
    "x-requested-with": "XMLHttpRequest",
}

_CONTRIBUTIONS = re.compile(
    r"(\d{1,5}(?:,\d{3})*)\s*\n?\s*contributions?\s*\n?\s*in the last year",
    re.IGNORECASE,
)
_CONTRIBUTIONS_H2 = re.compile(
    r"<h2[^>]*>[\s\S]*?(\d{1,5}(?:,\d{3})*)\s*contributions?\s*in the last year[\s\S]*?</h2>",
    re.IGNORECASE,
)


class GitHubFetchError(RuntimeError):
    """Raised when the contributions fragment cannot be downloaded."""


def parse_contribution_count(html: str) -> int | None:
    """Find "N contributions in the last year" in the profile fragment."""
    for pattern in (_CONTRIBUTIONS, _CONTRIBUTIONS_H2):
        match = pattern.search(html)
        if match:
            return int(match.group(1).replace(",", ""))
    return None


def fetch_contributions_html(
    username: str,
    client: httpx.Client | None = None,
    timeout: float = 10.0,
) -> str:
    """Download the contributions fragment for a user.

    Raises:
        GitHubFetchError: On transport errors or a non-2xx status.
    """
    url = PROFILE_URL.format(username=username)
    start = time.perf_counter()
    try:
        if client is not None:
            response = client.get(url, headers=REQUEST_HEADERS, follow_redirects=True)
        else:
            with httpx.Client(timeout=timeout) as owned:
                response = owned.get(url, headers=REQUEST_HEADERS, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise GitHubFetchError(f"GitHub returned status {e.response.status_code}") from e
    except httpx.HTTPError as e:
        raise GitHubFetchError(f"Failed to reach GitHub: {e}") from e

    duration_ms = (time.perf_counter() - start) * 1000
    logger.debug("github contributions fetched", username=username, duration_ms=round(duration_ms, 2))
    return response.text
