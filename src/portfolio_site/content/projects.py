"""Project catalogue backed by static JSON metadata and markdown files."""

import json
from datetime import date
from functools import lru_cache
from pathlib import Path

from .. import config
from ..logger import logger
from .markdown import render_markdown
from .models import ProjectDetail, ProjectMeta


class ProjectCatalog:
    """Projects loaded from ``projects.json`` and ``projects/<slug>.md``."""

    def __init__(self, content_dir: Path | None = None):
        self._content_dir = content_dir or config.CONTENT_DIR
        self._metas: dict[str, ProjectMeta] | None = None

    def _load(self) -> dict[str, ProjectMeta]:
        if self._metas is None:
            path = self._content_dir / "projects.json"
            with open(path, encoding="utf-8") as f:
                raw = json.load(f)
            self._metas = {item["slug"]: ProjectMeta.model_validate(item) for item in raw}
            logger.debug("project metadata loaded", path=str(path), count=len(self._metas))
        return self._metas

    def get_all_projects(self) -> list[ProjectMeta]:
        """All projects, newest first."""
        return sorted(self._load().values(), key=project_sort_score, reverse=True)

    def get_long_description(self, slug: str) -> str | None:
        path = self._content_dir / "projects" / f"{slug}.md"
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def get_project_by_slug(self, slug: str) -> ProjectDetail | None:
        meta = self._load().get(slug)
        if meta is None:
            logger.info("no project found", slug=slug)
            return None

        long_description = self.get_long_description(slug)
        return ProjectDetail(
            **meta.model_dump(),
            long_description=long_description,
            rendered_long_description=_render_cached(long_description) if long_description else "",
        )

    def slugs(self) -> list[str]:
        return [p.slug for p in self.get_all_projects()]


@lru_cache(maxsize=64)
def _render_cached(text: str) -> str:
    return render_markdown(text)


def project_sort_score(meta: ProjectMeta) -> float:
    """Sort key: full date, bare year as 1 January, else year, else 0.

    Dates score as ordinals so they always sort after bare ``year`` values,
    which score as the year number itself.
    """
    if meta.date:
        value = f"{meta.date}-01-01" if len(meta.date) == 4 else meta.date
        try:
            return float(date.fromisoformat(value[:10]).toordinal())
        except ValueError:
            pass
    if meta.year:
        return float(meta.year)
    return 0.0
