"""sitemap.xml generation."""

from xml.sax.saxutils import escape

from .models import PublishedPost

STATIC_PAGES = ["/", "/about", "/art", "/ponder", "/quotes", "/writing"]

SITEMAP_NAMESPACE = "http://www.sitemaps.org/schemas/sitemap/0.9"


def _url(loc: str, changefreq: str, priority: str, lastmod: str | None = None) -> str:
    parts = [f"    <loc>{escape(loc)}</loc>"]
    if lastmod:
        parts.append(f"    <lastmod>{lastmod}</lastmod>")
    parts.append(f"    <changefreq>{changefreq}</changefreq>")
    parts.append(f"    <priority>{priority}</priority>")
    return "  <url>\n" + "\n".join(parts) + "\n  </url>"


def build_sitemap(posts: list[PublishedPost], site_url: str) -> str:
    site_url = site_url.rstrip("/")
    urls = [_url(f"{site_url}{page}", "daily", "0.7") for page in STATIC_PAGES]
    urls.extend(
        _url(
            f"{site_url}/writing/{post.slug}",
            "weekly",
            "0.8",
            lastmod=post.published_on.isoformat(),
        )
        for post in posts
    )
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f'<urlset xmlns="{SITEMAP_NAMESPACE}">\n' + "\n".join(urls) + "\n</urlset>\n"
    )
