from .models import (
    CodeSnippet,
    ContentNotFoundError,
    LocalWritingPost,
    ProjectDetail,
    ProjectMeta,
    PublishedPost,
    Talk,
)
from .markdown import highlight_code, normalize_language, render_markdown
from .projects import ProjectCatalog, project_sort_score
from .talks import (
    extract_youtube_id,
    get_all_talks,
    get_talk_by_slug,
    youtube_thumbnail_url,
)
from .posts import LOCAL_WRITING_POSTS, get_published_posts
from .sitemap import build_sitemap

__all__ = [
    # Models
    "CodeSnippet",
    "ContentNotFoundError",
    "LocalWritingPost",
    "ProjectDetail",
    "ProjectMeta",
    "PublishedPost",
    "Talk",
    # Markdown
    "highlight_code",
    "normalize_language",
    "render_markdown",
    # Projects
    "ProjectCatalog",
    "project_sort_score",
    # Talks
    "extract_youtube_id",
    "get_all_talks",
    "get_talk_by_slug",
    "youtube_thumbnail_url",
    # Writing
    "LOCAL_WRITING_POSTS",
    "get_published_posts",
    "build_sitemap",
]
