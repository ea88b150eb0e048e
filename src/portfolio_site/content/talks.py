"""Conference talks and YouTube helpers."""

from urllib.parse import parse_qs, urlparse

from .models import Talk

TALKS: list[Talk] = [
    Talk(
        slug="ai-crm-sales-agent-2025-11-20",
        title="How to build an AI CRM/sales agent",
        event="Remote session",
        date_iso="2025-11-20",
        location="Online",
        pdf_path="/talks/how-to-build-an-ai-crm.pdf",
        video_url="https://youtu.be/44Pdj-DTerY",
        description=(
            "An end-to-end walkthrough of designing, deploying, and hardening an "
            "AI-native CRM/sales agent, from ingesting customer data and wiring tool "
            "access to evaluating dialogues and measuring impact in production."
        ),
        key_points=[
            "Syncing CRM data, summarizing accounts, and exposing safe tool adapters for email, calendar, and deal updates.",
            "Conversation flows that mix scripted intent detection with multi-turn reasoning and retrieval.",
            "Evaluation with simulated prospects, red-team prompts and latency/cost dashboards.",
        ],
    ),
    Talk(
        slug="edge-city-patagonia-2025-10-29",
        title="How to use AI to Ship Production Code",
        event="Edge Fellowship Workshop, Edge City, Patagonia",
        event_url="https://app.sola.day/event/detail/16784",
        date_iso="2025-10-29",
        location="Le Village, San Martín de los Andes, Argentina",
        pdf_path="/talks/how-to-use-ai-to-ship-production-code.pdf",
        video_url="https://youtu.be/5dCNHaV8UPM",
        description="A practical workshop on using coding agents to ship reviewed, tested production changes.",
    ),
]


def get_all_talks() -> list[Talk]:
    """Talks, most recent first."""
    return sorted(TALKS, key=lambda t: t.date_iso, reverse=True)


def get_talk_by_slug(slug: str) -> Talk | None:
    return next((t for t in TALKS if t.slug == slug), None)


def extract_youtube_id(url: str | None = None, video_id: str | None = None) -> str | None:
    """Pull the video id out of youtu.be, watch?v= and /embed/ URLs.

    An explicit video_id wins over the URL.
    """
    if video_id:
        return video_id
    if not url:
        return None

    try:
        parsed = urlparse(url)
    except ValueError:
        return None
    if not parsed.scheme or not parsed.netloc:
        return None

    if "youtu.be" in parsed.netloc:
        segments = [s for s in parsed.path.split("/") if s]
        return segments[0] if segments else None

    v = parse_qs(parsed.query).get("v")
    if v and v[0]:
        return v[0]

    if "/embed/" in parsed.path:
        rest = parsed.path.split("/embed/", 1)[1]
        first = rest.split("/")[0]
        return first or None

    return None


def youtube_thumbnail_url(video_id: str | None) -> str | None:
    if not video_id:
        return None
    return f"https://i.ytimg.com/vi/{video_id}/hqdefault.jpg"
