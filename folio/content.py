"""Compile Markdown pages and blog posts into structured records."""

from __future__ import annotations

import datetime as _dt
import math
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import markdown
import yaml

from folio.loader import ParseError
from folio.schemas import coerce_date, date_text, slug_from_filename, slugify

FRONTMATTER_RE = re.compile(r"\A---\s*\n(.*?)\n---\s*\n?", re.DOTALL)
MARKDOWN_EXTENSIONS = ["extra", "sane_lists", "smarty"]
DEFAULT_NAV_ORDER = 999
WORDS_PER_MINUTE = 200


def split_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    match = FRONTMATTER_RE.match(text)
    if not match:
        return {}, text
    metadata = yaml.safe_load(match.group(1)) or {}
    if not isinstance(metadata, dict):
        raise ValueError("front-matter must be a YAML mapping")
    body = text[match.end() :]
    return metadata, body


def read_source(path: Path) -> tuple[dict[str, Any], str]:
    text = path.read_text(encoding="utf-8")
    try:
        return split_frontmatter(text)
    except (yaml.YAMLError, ValueError) as exc:
        raise ParseError(f'Failed to parse front-matter in "{path.as_posix()}": {exc}') from exc


def render_markdown(text: str | None) -> str:
    if not text:
        return ""
    return markdown.markdown(text, extensions=MARKDOWN_EXTENSIONS)


def jsonable(value: Any) -> Any:
    if isinstance(value, _dt.date):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(key): jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [jsonable(item) for item in value]
    return value


def resolve_slug(metadata: dict[str, Any], path: Path, *, strip_date_prefix: bool = False) -> str:
    """Front-matter slug or file name, slugified so it is a single safe path segment."""
    slug = slugify(str(metadata.get("slug") or "")) or slug_from_filename(path.stem, strip_date_prefix=strip_date_prefix)
    if not slug:
        raise ParseError(f'Cannot derive a slug for "{path.as_posix()}"')
    return slug


def resolve_nav_order(value: Any) -> int:
    if isinstance(value, bool) or value is None:
        return DEFAULT_NAV_ORDER
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        return DEFAULT_NAV_ORDER


@dataclass(frozen=True)
class CompiledPage:
    slug: str
    title: str
    description: str
    content_html: str
    meta: dict[str, Any]

    @property
    def nav_order(self) -> int:
        return self.meta["nav_order"]

    @property
    def show_in_nav(self) -> bool:
        return self.meta["show_in_nav"]

    def as_dict(self) -> dict[str, Any]:
        return {
            "slug": self.slug,
            "title": self.title,
            "description": self.description,
            "content_html": self.content_html,
            "meta": dict(self.meta),
        }


def compile_page(path: Path) -> CompiledPage:
    metadata, body = read_source(path)
    slug = resolve_slug(metadata, path)
    meta = jsonable(metadata)
    meta["nav_order"] = resolve_nav_order(metadata.get("nav_order"))
    meta["show_in_nav"] = metadata.get("show_in_nav") is not False
    return CompiledPage(
        slug=slug,
        title=str(metadata.get("title") or slug),
        description=str(metadata.get("description") or ""),
        content_html=render_markdown(body),
        meta=meta,
    )


def compile_pages(directory: Path | None) -> list[CompiledPage]:
    if directory is None or not directory.is_dir():
        return []
    return [compile_page(path) for path in sorted(directory.glob("*.md"))]


@dataclass(frozen=True)
class BlogPost:
    slug: str
    title: str
    description: str
    author: str
    publish_on: str | None
    expire_on: str | None
    updated_on: str | None
    featured: bool
    tags: tuple[str, ...]
    image: str
    reading_time: int
    content_html: str
    draft: bool = False

    def summary(self) -> dict[str, Any]:
        return {
            "slug": self.slug,
            "title": self.title,
            "description": self.description,
            "author": self.author,
            "publish_on": self.publish_on,
            "expire_on": self.expire_on,
            "updated_on": self.updated_on,
            "draft": self.draft,
            "featured": self.featured,
            "tags": list(self.tags),
            "image": self.image,
            "reading_time": self.reading_time,
        }

    def as_dict(self) -> dict[str, Any]:
        return {**self.summary(), "content_html": self.content_html}


@dataclass(frozen=True)
class BlogDisabled:
    """No publishable posts; the blog route must be switched off."""

    enabled: bool = field(default=False, init=False)

    def as_dict(self) -> None:
        return None


@dataclass(frozen=True)
class CompiledBlog:
    posts: tuple[BlogPost, ...]
    tags: dict[str, tuple[str, ...]]
    enabled: bool = field(default=True, init=False)

    def as_dict(self) -> dict[str, Any]:
        return {
            "posts": [post.as_dict() for post in self.posts],
            "tags": {tag: list(slugs) for tag, slugs in self.tags.items()},
        }


BLOG_DISABLED = BlogDisabled()
BlogResult = BlogDisabled | CompiledBlog


def reading_time(body: str) -> int:
    return max(1, math.ceil(len(body.split()) / WORDS_PER_MINUTE))


def normalize_tags(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, (list, tuple)):
        return tuple(str(item) for item in value if item not in (None, ""))
    return (str(value),)


def _post_date(metadata: dict[str, Any], key: str, path: Path, warnings: list[str]) -> _dt.date | None:
    try:
        return coerce_date(metadata.get(key))
    except ValueError as exc:
        warnings.append(f'Ignoring {key} in "{path.name}": {exc}')
        return None


def resolve_build_date(value: _dt.date | str | None) -> _dt.date:
    return coerce_date(value) or _dt.date.today()


def compile_blog(
    directory: Path | None,
    *,
    build_date: _dt.date | str | None = None,
    default_author: str = "",
) -> tuple[BlogResult, list[str]]:
    """Compile every ``*.md`` post in ``directory`` that is publishable on ``build_date``.

    Posts are dropped when drafted, scheduled after the build date, or expired on or before
    it. Survivors are ordered newest first (undated posts last) and indexed by tag in that
    same order. Returns ``BLOG_DISABLED`` when nothing survives.
    """
    warnings: list[str] = []
    if directory is None or not directory.is_dir():
        return BLOG_DISABLED, warnings

    today = resolve_build_date(build_date)
    candidates: list[tuple[_dt.date | None, BlogPost]] = []

    for path in sorted(directory.glob("*.md")):
        metadata, body = read_source(path)

        if metadata.get("draft") is True:
            continue

        publish_on = _post_date(metadata, "publish_on", path, warnings)
        if publish_on is not None and publish_on > today:
            continue

        expire_on = _post_date(metadata, "expire_on", path, warnings)
        if expire_on is not None and expire_on <= today:
            continue

        updated_on = _post_date(metadata, "updated_on", path, warnings)
        slug = resolve_slug(metadata, path, strip_date_prefix=True)
        post = BlogPost(
            slug=slug,
            title=str(metadata.get("title") or slug),
            description=str(metadata.get("description") or ""),
            author=str(metadata.get("author") or default_author),
            publish_on=date_text(publish_on),
            expire_on=date_text(expire_on),
            updated_on=date_text(updated_on),
            featured=metadata.get("featured") is True,
            tags=normalize_tags(metadata.get("tags")),
            image=str(metadata.get("image") or ""),
            reading_time=reading_time(body),
            content_html=render_markdown(body),
        )
        candidates.append((publish_on, post))

    if not candidates:
        return BLOG_DISABLED, warnings

    candidates.sort(key=lambda item: item[0] or _dt.date.min, reverse=True)
    posts = tuple(post for _, post in candidates)

    tags: dict[str, list[str]] = {}
    for post in posts:
        for tag in post.tags:
            tags.setdefault(tag, []).append(post.slug)

    return CompiledBlog(posts=posts, tags={tag: tuple(slugs) for tag, slugs in tags.items()}), warnings
