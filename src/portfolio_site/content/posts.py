"""Writing posts hosted with the site rather than in Notion."""

from datetime import datetime, timezone

from ..notion.models import WritingSummary
from .models import HeroImage, LocalWritingPost, PublishedPost

LOCAL_WRITING_POSTS: list[LocalWritingPost] = [
    LocalWritingPost(
        slug="edge-city-fellows",
        title="Edge City Fellows, Patagonia",
        published_at="2025-11-19",
        summary=(
            "Edge offered rare time for deep AI work, long proofs, contraband border "
            "runs, and the kindest technologists I know."
        ),
        hero_image=HeroImage(
            src="/writing/edge-city/edge-city-01.jpeg",
            alt="Edge City Fellows pausing for a photo on a ridge above Lago Lácar",
        ),
        reading_time_minutes=6,
    ),
]


def get_published_posts(notion_pages: list[WritingSummary]) -> list[PublishedPost]:
    """Local posts plus loaded Notion pages, newest first.

    Notion pages are dated by their last edit.
    """
    posts = [PublishedPost(slug=p.slug, published_on=p.published_at) for p in LOCAL_WRITING_POSTS]
    posts.extend(
        PublishedPost(
            slug=page.slug,
            published_on=datetime.fromtimestamp(page.last_edited_time / 1000, tz=timezone.utc).date(),
        )
        for page in notion_pages
    )
    return sorted(posts, key=lambda p: p.published_on, reverse=True)
