"""Schemas for the static site content."""

from datetime import date
from typing import Literal

from pydantic import BaseModel, Field, HttpUrl


class ContentNotFoundError(LookupError):
    """Raised when a slug does not match any known content."""


class CodeSnippet(BaseModel):
    language: str
    code: str | None = None
    path: str | None = None


class ProjectMeta(BaseModel):
    slug: str
    title: str
    description: str | None = None
    short_description: str | None = None
    technologies: list[str] = Field(default_factory=list)
    highlights: list[str] | None = None
    link: HttpUrl | None = None
    demo: HttpUrl | None = None
    github: HttpUrl | None = None
    date: str | None = None  # ISO date or bare year
    year: int | None = None
    featured: bool = False
    status: Literal["completed", "in-progress", "archived", "production"] = "completed"
    category: Literal["ai", "web", "infrastructure", "other"] | None = None
    code_snippet: CodeSnippet | None = None


class ProjectDetail(ProjectMeta):
    long_description: str | None = None
    rendered_long_description: str = ""


class Talk(BaseModel):
    slug: str
    title: str
    event: str
    event_url: str | None = None
    date_iso: date
    location: str | None = None
    slides_url: str | None = None
    pdf_path: str | None = None
    video_url: str | None = None
    description: str | None = None
    key_points: list[str] = Field(default_factory=list)


class HeroImage(BaseModel):
    src: str
    alt: str


class LocalWritingPost(BaseModel):
    slug: str
    title: str
    published_at: date
    summary: str
    hero_image: HeroImage
    reading_time_minutes: int


class PublishedPost(BaseModel):
    """A writing entry listed in the sitemap."""

    slug: str
    published_on: date
