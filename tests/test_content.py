"""Tests for projects, markdown rendering, talks, posts and the sitemap."""

import json
from datetime import date

import pytest

from portfolio_site.content import (
    LOCAL_WRITING_POSTS,
    ProjectCatalog,
    ProjectMeta,
    PublishedPost,
    build_sitemap,
    extract_youtube_id,
    get_all_talks,
    get_published_posts,
    get_talk_by_slug,
    highlight_code,
    normalize_language,
    project_sort_score,
    render_markdown,
    youtube_thumbnail_url,
)
from portfolio_site.notion import WritingSummary


@pytest.fixture
def content_dir(tmp_path):
    (tmp_path / "projects").mkdir()
    (tmp_path / "projects.json").write_text(
        json.dumps(
            [
                {"slug": "old", "title": "Old", "year": 2019},
                {"slug": "new", "title": "New", "date": "2024-03-01", "github": "https://github.com/x/y"},
                {"slug": "bare-year", "title": "Bare", "date": "2024"},
                {"slug": "undated", "title": "Undated"},
            ]
        ),
        encoding="utf-8",
    )
    (tmp_path / "projects" / "new.md").write_text("## Notes\n\nSome *text*.", encoding="utf-8")
    return tmp_path


class TestProjectCatalog:
    def test_sorted_newest_first(self, content_dir):
        slugs = [p.slug for p in ProjectCatalog(content_dir).get_all_projects()]
        assert slugs == ["new", "bare-year", "old", "undated"]

    def test_detail_renders_long_description(self, content_dir):
        project = ProjectCatalog(content_dir).get_project_by_slug("new")
        assert project.long_description.startswith("## Notes")
        assert "<h2>Notes</h2>" in project.rendered_long_description
        assert "<em>text</em>" in project.rendered_long_description
        assert str(project.github) == "https://github.com/x/y"

    def test_detail_without_markdown(self, content_dir):
        project = ProjectCatalog(content_dir).get_project_by_slug("old")
        assert project.long_description is None
        assert project.rendered_long_description == ""

    def test_unknown_slug(self, content_dir):
        assert ProjectCatalog(content_dir).get_project_by_slug("missing") is None

    def test_bundled_catalog(self):
        catalog = ProjectCatalog()
        assert catalog.slugs() == ["animation-creation-app", "claude-workflow-automation", "notion-site"]
        detail = catalog.get_project_by_slug("animation-creation-app")
        assert detail.featured
        assert detail.code_snippet.language == "python"
        assert "<table>" in detail.rendered_long_description


class TestSortScore:
    def test_bare_year_date_is_first_of_january(self):
        bare = ProjectMeta(slug="a", title="A", date="2024")
        full = ProjectMeta(slug="b", title="B", date="2024-01-01")
        assert project_sort_score(bare) == project_sort_score(full)

    def test_invalid_date_falls_back_to_year(self):
        assert project_sort_score(ProjectMeta(slug="a", title="A", date="soon", year=2020)) == 2020

    def test_nothing_scores_zero(self):
        assert project_sort_score(ProjectMeta(slug="a", title="A")) == 0


class TestMarkdown:
    def test_language_aliases(self):
        assert normalize_language("py") == "python"
        assert normalize_language("JS") == "javascript"
        assert normalize_language(None) == "plaintext"
        assert normalize_language("rust") == "rust"

    def test_fenced_code_is_highlighted(self):
        html = render_markdown("Intro\n\n```py\ndef f():\n    return 1\n```\n\nOutro")
        assert 'class="highlight-code-block"' in html
        assert "HIGHLIGHTEDCODEBLOCK" not in html
        assert "<p>Intro</p>" in html
        assert "<p>Outro</p>" in html
        assert "<p><div" not in html

    def test_multiple_code_blocks_keep_order(self):
        html = render_markdown("```sh\necho first\n```\n\n```py\nprint('second')\n```")
        assert html.index("first") < html.index("second")

    def test_unknown_language_falls_back_to_text(self):
        html = highlight_code("<b>x</b>", "not-a-language")
        assert 'class="highlight-code-block"' in html
        assert "&lt;b&gt;" in html

    def test_tables_and_line_breaks(self):
        html = render_markdown("| a | b |\n| --- | --- |\n| 1 | 2 |\n\nline one\nline two")
        assert "<table>" in html
        assert "<br />" in html or "<br>" in html


class TestTalks:
    def test_most_recent_first(self):
        talks = get_all_talks()
        assert [t.date_iso for t in talks] == sorted((t.date_iso for t in talks), reverse=True)

    def test_by_slug(self):
        assert get_talk_by_slug("edge-city-patagonia-2025-10-29").date_iso == date(2025, 10, 29)
        assert get_talk_by_slug("nope") is None

    @pytest.mark.parametrize(
        "url, expected",
        [
            ("https://youtu.be/44Pdj-DTerY", "44Pdj-DTerY"),
            ("https://www.youtube.com/watch?v=abc123&t=10", "abc123"),
            ("https://www.youtube.com/embed/xyz789", "xyz789"),
            ("https://vimeo.com/12345", None),
            ("not a url", None),
            (None, None),
        ],
    )
    def test_extract_youtube_id(self, url, expected):
        assert extract_youtube_id(url) == expected

    def test_explicit_id_wins(self):
        assert extract_youtube_id("https://youtu.be/abc", video_id="override") == "override"

    def test_thumbnail(self):
        assert youtube_thumbnail_url("abc") == "https://i.ytimg.com/vi/abc/hqdefault.jpg"
        assert youtube_thumbnail_url(None) is None


class TestPublishedPosts:
    def test_merges_local_and_notion_newest_first(self):
        notion = [
            WritingSummary(
                slug="notion-post",
                page_id="p",
                title="Notion",
                total_words=10,
                reading_time=1,
                created_time=0,
                last_edited_time=1_700_000_000_000,  # 2023-11-14 UTC
            )
        ]
        posts = get_published_posts(notion)
        assert [p.slug for p in posts] == [LOCAL_WRITING_POSTS[0].slug, "notion-post"]
        assert posts[1].published_on == date(2023, 11, 14)

    def test_local_only(self):
        assert [p.slug for p in get_published_posts([])] == [p.slug for p in LOCAL_WRITING_POSTS]


class TestSitemap:
    def test_static_pages_and_posts(self):
        xml = build_sitemap(
            [PublishedPost(slug="hello", published_on=date(2025, 1, 2))],
            "https://example.com/",
        )
        assert xml.startswith('<?xml version="1.0" encoding="UTF-8"?>')
        assert '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">' in xml
        assert "<loc>https://example.com/</loc>" in xml
        assert "<loc>https://example.com/quotes</loc>" in xml
        assert xml.count("<priority>0.7</priority>") == 6
        assert "<loc>https://example.com/writing/hello</loc>" in xml
        assert "<lastmod>2025-01-02</lastmod>" in xml
        assert "<changefreq>weekly</changefreq>" in xml

    def test_locations_escaped(self):
        xml = build_sitemap([PublishedPost(slug="a&b", published_on=date(2025, 1, 1))], "https://example.com")
        assert "/writing/a&amp;b</loc>" in xml
