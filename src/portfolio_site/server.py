"""FastAPI application serving the site's content API."""

import time
import uuid
from contextlib import asynccontextmanager
from typing import Literal

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse, RedirectResponse, Response
from pydantic import BaseModel, Field

from . import config
from .content import (
    ContentNotFoundError,
    ProjectCatalog,
    ProjectDetail,
    ProjectMeta,
    Talk,
    build_sitemap,
    extract_youtube_id,
    get_all_talks,
    get_published_posts,
    get_talk_by_slug,
    youtube_thumbnail_url,
)
from .github import GitHubFetchError, fetch_contributions_html, parse_contribution_count
from .logger import clear_context, logger, set_context
from .notion import (
    EnhancedParsedPage,
    NotionContentService,
    Quote,
    QuotesService,
    WritingSummary,
    get_quotes_by_author,
    get_quotes_by_tag,
    get_random_quote,
)
from .rate_limiter import (
    RateLimiter,
    RateLimitOptions,
    create_rate_limit_headers,
    get_client_ip,
)
from .terminal import TerminalState

GITHUB_RATE_LIMIT = RateLimitOptions(
    limit=config.GITHUB_PROXY_LIMIT,
    window_ms=config.GITHUB_PROXY_WINDOW_MS,
    key_prefix="github-contributions",
)

CONTENT_SECURITY_POLICY = "; ".join(
    [
        "default-src 'self'",
        "script-src 'self' 'unsafe-inline' 'unsafe-eval' https://www.youtube.com https://s.ytimg.com https://www.google.com https://www.gstatic.com",
        "style-src 'self' 'unsafe-inline' https://fonts.googleapis.com",
        "img-src 'self' data: https: blob:",
        "font-src 'self' https://fonts.gstatic.com",
        "frame-src 'self' https://www.youtube.com https://www.youtube-nocookie.com https://player.vimeo.com",
        "connect-src 'self' https://api.github.com https://*.notion.so wss: https:",
        "media-src 'self' https: blob:",
        "object-src 'none'",
        "base-uri 'self'",
        "form-action 'self'",
        "frame-ancestors 'none'",
        "upgrade-insecure-requests",
    ]
)

PERMISSIONS_POLICY = ", ".join(
    [
        "accelerometer=()",
        "autoplay=()",
        "camera=()",
        "display-capture=()",
        "encrypted-media=()",
        "fullscreen=(self)",
        "geolocation=()",
        "gyroscope=()",
        "magnetometer=()",
        "microphone=()",
        "midi=()",
        "payment=()",
        "picture-in-picture=()",
        "publickey-credentials-get=()",
        "sync-xhr=()",
        "usb=()",
        "screen-wake-lock=()",
        "web-share=()",
        "xr-spatial-tracking=()",
    ]
)

SECURITY_HEADERS = {
    "Content-Security-Policy": CONTENT_SECURITY_POLICY,
    "X-Frame-Options": "DENY",
    "X-Content-Type-Options": "nosniff",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Permissions-Policy": PERMISSIONS_POLICY,
}
HSTS_HEADER = "max-age=31536000; includeSubDomains; preload"


# --- Request/Response Models ---


class HealthResponse(BaseModel):
    status: str


class ErrorResponse(BaseModel):
    code: str
    message: str


class ContributionsResponse(BaseModel):
    contributions: int
    success: bool
    error: str | None = None


class TalkResponse(Talk):
    youtube_id: str | None = None
    thumbnail_url: str | None = None


class TerminalRequest(BaseModel):
    command: str = Field(..., max_length=200)
    current_project: str | None = None


class TerminalEntryResponse(BaseModel):
    type: Literal["prompt", "output"]
    content: str


class TerminalResponse(BaseModel):
    output: list[TerminalEntryResponse]
    current_project: str | None
    open: str | None = None
    close: str | None = None


# --- App State ---

_rate_limiter: RateLimiter | None = None
_content_service: NotionContentService | None = None
_quotes_service: QuotesService | None = None
_project_catalog: ProjectCatalog | None = None


def get_rate_limiter() -> RateLimiter:
    """Lazy initialization of the rate limiter."""
    global _rate_limiter
    if _rate_limiter is None:
        _rate_limiter = RateLimiter()
    return _rate_limiter


def get_content_service() -> NotionContentService:
    """Lazy initialization of the Notion writing service."""
    global _content_service
    if _content_service is None:
        _content_service = NotionContentService()
    return _content_service


def get_quotes_service() -> QuotesService:
    """Lazy initialization of the quotes service."""
    global _quotes_service
    if _quotes_service is None:
        _quotes_service = QuotesService()
    return _quotes_service


def get_project_catalog() -> ProjectCatalog:
    """Lazy initialization of the project catalogue."""
    global _project_catalog
    if _project_catalog is None:
        _project_catalog = ProjectCatalog()
    return _project_catalog


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle."""
    global _rate_limiter, _content_service, _quotes_service

    logger.info("starting server", environment=config.ENVIRONMENT)
    get_rate_limiter()

    yield

    if _rate_limiter is not None:
        _rate_limiter.dispose()
        _rate_limiter = None
    if _content_service is not None:
        _content_service.close()
        _content_service = None
    if _quotes_service is not None:
        _quotes_service.close()
        _quotes_service = None
    logger.info("server shutdown")


app = FastAPI(
    title="Portfolio Site API",
    description="Writing, quotes, projects and talks for the personal site",
    version="0.1.0",
    lifespan=lifespan,
)


# --- Middleware ---


@app.middleware("http")
async def security_headers(request: Request, call_next):
    """Redirect plain http outside development and add security headers."""
    if (
        not config.is_development()
        and request.url.scheme == "http"
        and request.headers.get("x-forwarded-proto", "http") == "http"
    ):
        return RedirectResponse(str(request.url.replace(scheme="https")), status_code=301)

    set_context(request_id=str(uuid.uuid4()), path=request.url.path)
    start = time.perf_counter()
    try:
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000
        logger.info(
            "request handled",
            method=request.method,
            status=response.status_code,
            duration_ms=round(duration_ms, 2),
        )
    finally:
        clear_context()

    for name, value in SECURITY_HEADERS.items():
        response.headers[name] = value
    if request.url.scheme == "https" or request.headers.get("x-forwarded-proto") == "https":
        response.headers["Strict-Transport-Security"] = HSTS_HEADER
    return response


# --- Exception Handlers ---


@app.exception_handler(ContentNotFoundError)
async def content_not_found_handler(request, exc: ContentNotFoundError):
    return JSONResponse(
        status_code=404,
        content=ErrorResponse(code="NOT_FOUND", message=str(exc)).model_dump(),
    )


# --- Health ---


@app.get("/health", response_model=HealthResponse)
def health():
    """Liveness check."""
    return HealthResponse(status="healthy")


# --- Writing ---


@app.get("/api/writing", response_model=list[WritingSummary])
def list_writing():
    """Index of writing pages that loaded successfully."""
    return get_content_service().fetch_all_writing_pages()


@app.get("/api/writing/{slug}", response_model=EnhancedParsedPage)
def get_writing(slug: str):
    service = get_content_service()
    if slug not in service.writing_pages:
        raise ContentNotFoundError(f"Writing page '{slug}' not found")

    page = service.get_writing_page(slug)
    if page is None:
        raise HTTPException(status_code=502, detail="Failed to load page. Please try again later.")
    return page


# --- Quotes ---


@app.get("/api/quotes", response_model=list[Quote])
def list_quotes(tag: str | None = Query(default=None), author: str | None = Query(default=None)):
    quotes = get_quotes_service().get_cached_quotes()
    if tag:
        quotes = get_quotes_by_tag(quotes, tag)
    if author:
        quotes = get_quotes_by_author(quotes, author)
    return quotes


@app.get("/api/quotes/random", response_model=Quote)
def random_quote():
    quote = get_random_quote(get_quotes_service().get_cached_quotes())
    if quote is None:
        raise ContentNotFoundError("No quotes available")
    return quote


# --- Projects ---


@app.get("/api/projects", response_model=list[ProjectMeta])
def list_projects():
    return get_project_catalog().get_all_projects()


@app.get("/api/projects/{slug}", response_model=ProjectDetail)
def get_project(slug: str):
    project = get_project_catalog().get_project_by_slug(slug)
    if project is None:
        raise ContentNotFoundError(f"Project '{slug}' not found")
    return project


# --- Talks ---


def _talk_response(talk: Talk) -> TalkResponse:
    youtube_id = extract_youtube_id(talk.video_url)
    return TalkResponse(
        **talk.model_dump(),
        youtube_id=youtube_id,
        thumbnail_url=youtube_thumbnail_url(youtube_id),
    )


@app.get("/api/talks", response_model=list[TalkResponse])
def list_talks():
    return [_talk_response(t) for t in get_all_talks()]


@app.get("/api/talks/{slug}", response_model=TalkResponse)
def get_talk(slug: str):
    talk = get_talk_by_slug(slug)
    if talk is None:
        raise ContentNotFoundError(f"Talk '{slug}' not found")
    return _talk_response(talk)


# --- GitHub proxy ---


@app.get("/api/github-contributions", response_model=ContributionsResponse)
def github_contributions(request: Request):
    """Contribution count for the configured GitHub user, 10 requests/minute per IP."""
    client_ip = get_client_ip(request.headers)
    result = get_rate_limiter().check(client_ip, GITHUB_RATE_LIMIT)
    headers = create_rate_limit_headers(result.info)

    if not result.allowed:
        return JSONResponse(
            status_code=429,
            content=ContributionsResponse(
                contributions=0,
                success=False,
                error="Too many requests. Please try again later.",
            ).model_dump(),
            headers=headers,
        )

    try:
        html = fetch_contributions_html(config.GITHUB_USERNAME)
    except GitHubFetchError as e:
        logger.error("failed to fetch github contributions", error=str(e))
        body = ContributionsResponse(contributions=0, success=False, error=str(e))
        return JSONResponse(content=body.model_dump(), headers=headers)

    count = parse_contribution_count(html)
    if count is None:
        logger.error("could not parse contribution count", html_length=len(html))
        body = ContributionsResponse(
            contributions=0, success=False, error="Could not parse contribution count"
        )
    else:
        body = ContributionsResponse(contributions=count, success=True)
    return JSONResponse(content=body.model_dump(), headers=headers)


# --- Terminal ---


@app.post("/api/terminal", response_model=TerminalResponse)
def run_terminal_command(request: TerminalRequest):
    """Execute one terminal command against the project list.

    The client keeps the session; it sends back which project is open.
    """
    slugs = get_project_catalog().slugs()
    state = TerminalState(project_slugs=slugs)
    if request.current_project in slugs:
        state.current_project = request.current_project

    before = len(state.buffer)
    action = state.execute_command(request.command)
    # first new entry is the echoed prompt replacing the last one
    new_entries = state.buffer[before - 1 :]

    return TerminalResponse(
        output=[TerminalEntryResponse(type=e.type, content=e.content) for e in new_entries],
        current_project=state.current_project,
        open=action.open,
        close=action.close,
    )


# --- Sitemap ---


@app.get("/sitemap.xml")
def sitemap():
    posts = get_published_posts(get_content_service().fetch_all_writing_pages())
    xml = build_sitemap(posts, config.SITE_URL)
    return Response(
        content=xml,
        media_type="application/xml",
        headers={"Cache-Control": "public, max-age=86400"},
    )
