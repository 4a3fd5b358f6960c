"""Run the full compilation pipeline and write the publication dataset."""

from __future__ import annotations

import dataclasses
import datetime as _dt
import json
import os
import shutil
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from loguru import logger

from folio.content import CompiledBlog, CompiledPage, BlogResult, compile_blog, compile_pages, jsonable, render_markdown, resolve_build_date
from folio.crossref import CrossReferenceIndex, build_cross_references
from folio.i18n import I18nBundle, resolve_i18n
from folio.loader import SchemaError, apply_site_defaults, load_sources
from folio.manifest import Manifest, build_manifest
from folio.seo import derive_site_meta, feed_xml, llms_txt, resolve_site_url, robots_txt, sitemap_xml
from folio.settings import BuildSettings
from folio.validate import validate
from folio.visibility import Projection, VisibilityPolicy, filter_for_print, filter_for_web

DISABLED_BLOG_WARNING = "No publishable blog posts found, blog will be disabled"
DATA_SUBDIR = "data"
GENERATED_FILES = ("robots.txt", "sitemap.xml", "llms.txt", "feed.xml", "CNAME", ".nojekyll")


@dataclass(frozen=True)
class SiteDataset:
    site: dict[str, Any]
    policy: VisibilityPolicy
    web: Projection
    print: Projection
    pages: tuple[CompiledPage, ...]
    crossref: CrossReferenceIndex
    i18n: I18nBundle
    manifest: Manifest
    build_date: _dt.date
    warnings: tuple[str, ...]

    @property
    def blog(self) -> BlogResult:
        return self.web.blog


@dataclass(frozen=True)
class BuildReport:
    output_dir: Path
    dataset: SiteDataset
    written: tuple[str, ...]

    def as_dict(self) -> dict[str, Any]:
        return {
            "ok": True,
            "output_dir": self.output_dir.as_posix(),
            "build_date": self.dataset.build_date.isoformat(),
            "locale": self.dataset.i18n.locale,
            "routes": list(self.dataset.manifest.routes),
            "warnings": list(self.dataset.warnings),
            "written": list(self.written),
        }


def _locale_file(site: Mapping[str, Any], data_dir: Path) -> Path | None:
    raw = site.get("i18n_file")
    if not raw:
        return None
    path = Path(str(raw))
    return path if path.is_absolute() else data_dir / path


def compile_site(
    sources: Mapping[str, Any],
    *,
    data_dir: Path,
    pages_dir: Path | None = None,
    blog_dir: Path | None = None,
    build_date: _dt.date | str | None = None,
    locales_dir: Path | None = None,
) -> SiteDataset:
    """Turn loaded source mappings into the redacted, localized dataset.

    Raises ``SchemaError`` carrying every validation issue before any stage runs.
    """
    site, resume, skills, projects = (sources.get(name) for name in ("site", "resume", "skills", "projects"))

    issues = validate(site, resume, skills, projects)
    if issues:
        for issue in issues:
            logger.error(str(issue))
        raise SchemaError(f"Validation failed with {len(issues)} issue(s)", issues=tuple(issues))

    site = apply_site_defaults(site)

    today = resolve_build_date(build_date)
    warnings: list[str] = []

    logger.debug("Compiling pages from {}", pages_dir)
    pages = compile_pages(pages_dir)

    logger.debug("Compiling blog from {} as of {}", blog_dir, today)
    blog, blog_warnings = compile_blog(blog_dir, build_date=today, default_author=str(resume.get("name") or ""))
    warnings.extend(blog_warnings)
    if blog_dir is not None and not blog.enabled:
        warnings.append(DISABLED_BLOG_WARNING)

    logger.debug("Resolving i18n for {}", site.get("lang"))
    overrides = (site.get("i18n_overrides") or {}).get("labels")
    i18n, i18n_warnings = resolve_i18n(
        str(site["lang"]),
        overrides=overrides,
        locale_file=_locale_file(site, data_dir),
        locales_dir=locales_dir,
    )
    warnings.extend(i18n_warnings)

    policy = VisibilityPolicy.from_mapping(site.get("visibility"))
    web = filter_for_web(policy, resume, skills, projects, blog)
    if web.resume.get("summary"):
        web = dataclasses.replace(
            web,
            resume={**web.resume, "summary_html": render_markdown(str(web.resume["summary"]))},
        )
    printed = filter_for_print(policy, resume, skills, projects)

    crossref, crossref_warnings = build_cross_references(web.skills, web.resume, web.projects)
    warnings.extend(crossref_warnings)

    manifest = build_manifest(
        policy,
        skills=web.skills,
        projects=web.projects,
        blog=web.blog,
        pages=pages,
        i18n=i18n,
    )

    site_data = {**derive_site_meta(web.resume), **site, "visibility": policy.as_dict()}
    return SiteDataset(
        site=site_data,
        policy=policy,
        web=web,
        print=printed,
        pages=tuple(pages),
        crossref=crossref,
        i18n=i18n,
        manifest=manifest,
        build_date=today,
        warnings=tuple(warnings),
    )


def write_json(path: Path, payload: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(jsonable(payload), indent=2, ensure_ascii=False) + "\n", encoding="utf-8")


def write_text(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def clear_generated(output_dir: Path) -> None:
    """Remove everything a previous build wrote so hidden sections do not linger."""
    shutil.rmtree(output_dir / DATA_SUBDIR, ignore_errors=True)
    for name in GENERATED_FILES:
        (output_dir / name).unlink(missing_ok=True)


def write_dataset(dataset: SiteDataset, output_dir: Path, *, site_url: str) -> list[str]:
    clear_generated(output_dir)
    written: list[str] = []

    def emit_json(rel_path: str, payload: Any) -> None:
        write_json(output_dir / rel_path, payload)
        written.append(rel_path)

    def emit_text(rel_path: str, text: str) -> None:
        write_text(output_dir / rel_path, text)
        written.append(rel_path)

    web = dataset.web
    emit_json("data/site.json", dataset.site)
    emit_json("data/resume.json", web.resume)
    if web.skills is not None:
        emit_json("data/skills.json", web.skills)
    if web.projects is not None:
        emit_json("data/projects.json", web.projects)

    emit_json("data/print/resume.json", dataset.print.resume)
    if dataset.print.skills is not None:
        emit_json("data/print/skills.json", dataset.print.skills)
    if dataset.print.projects is not None:
        emit_json("data/print/projects.json", dataset.print.projects)

    emit_json("data/crossref.json", dataset.crossref.as_dict())
    emit_json("data/i18n.json", dataset.i18n.as_dict())
    emit_json("data/manifest.json", dataset.manifest.as_dict())

    if isinstance(web.blog, CompiledBlog):
        emit_json("data/blog/index.json", [post.summary() for post in web.blog.posts])
        emit_json("data/blog/tags.json", web.blog.as_dict()["tags"])
        for post in web.blog.posts:
            emit_json(f"data/blog/{post.slug}.json", post.as_dict())

    for page in dataset.pages:
        emit_json(f"data/pages/{page.slug}.json", page.as_dict())

    seo = dataset.site.get("seo") or {}
    emit_text("robots.txt", robots_txt(seo, site_url))

    if seo.get("sitemap"):
        blog_posts = web.blog.posts if isinstance(web.blog, CompiledBlog) else ()
        sitemap = sitemap_xml(dataset.manifest.routes, site_url, dataset.build_date, dataset.i18n, blog_posts)
        if sitemap:
            emit_text("sitemap.xml", sitemap)

    if seo.get("llms_txt"):
        emit_text("llms.txt", llms_txt(web.resume, web.skills, web.projects, web.blog))

    if seo.get("rss"):
        feed = feed_xml(dataset.site, web.blog, site_url, dataset.i18n)
        if feed:
            emit_text("feed.xml", feed)

    if dataset.site.get("custom_domain"):
        emit_text("CNAME", str(dataset.site["custom_domain"]))
    emit_text(".nojekyll", "")

    return written


def build_site(settings: BuildSettings, *, environ: Mapping[str, str] | None = None) -> BuildReport:
    env = os.environ if environ is None else environ

    logger.debug("Loading sources from {}", settings.data_dir)
    sources = load_sources(settings.data_dir)
    dataset = compile_site(
        sources,
        data_dir=settings.data_dir,
        pages_dir=settings.pages_dir,
        blog_dir=settings.blog_dir,
        build_date=settings.build_date,
        locales_dir=settings.locales_dir,
    )

    site_url = resolve_site_url(settings.site_url, env)
    written = write_dataset(dataset, settings.output_dir, site_url=site_url)
    logger.debug("Wrote {} files to {}", len(written), settings.output_dir)

    for warning in dataset.warnings:
        logger.warning(warning)

    return BuildReport(output_dir=settings.output_dir, dataset=dataset, written=tuple(written))
