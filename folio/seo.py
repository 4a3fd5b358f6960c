"""SEO artefacts. Every generator here must only ever see the web projection."""

from __future__ import annotations

import datetime as _dt
import html
from collections.abc import Iterable, Mapping, Sequence
from email.utils import format_datetime
from typing import Any

from folio.content import BlogPost, BlogResult
from folio.i18n import I18nBundle
from folio.manifest import route_segment

FEED_MAX_ITEMS = 20


def format_location(location: Any) -> str:
    if not location:
        return ""
    if isinstance(location, str):
        return location
    if isinstance(location, Mapping):
        return ", ".join(str(location[key]) for key in ("city", "region", "country") if location.get(key))
    return str(location)


def derive_site_meta(resume: Mapping[str, Any] | None) -> dict[str, str]:
    resume = resume or {}
    name = str(resume.get("name") or "")
    tagline = str(resume.get("tagline") or "")
    location = format_location((resume.get("contact") or {}).get("location"))

    title = name
    if location:
        title += f" ({location})"
    if tagline:
        title += f" - {tagline}"
    return {"title": title, "description": tagline}


def resolve_site_url(site_url: str | None, environ: Mapping[str, str]) -> str:
    if site_url:
        return site_url.rstrip("/")
    repository = environ.get("GITHUB_REPOSITORY", "")
    if "/" in repository:
        owner, repo = repository.split("/", 1)
        return f"https://{owner}.github.io/{repo}"
    return ""


def _robots(seo: Mapping[str, Any]) -> Mapping[str, Any]:
    return seo.get("robots") or {}


def robots_txt(seo: Mapping[str, Any], site_url: str) -> str:
    lines = ["User-agent: *"]
    if _robots(seo).get("indexing") is False:
        lines.append("Disallow: /")
    else:
        lines.append("Allow: /")
        if site_url:
            lines.append(f"Sitemap: {site_url}/sitemap.xml")
    return "\n".join(lines) + "\n"


def meta_robots(seo: Mapping[str, Any]) -> str:
    robots = _robots(seo)
    if robots.get("indexing") is False:
        return "noindex, nofollow"
    follow = "nofollow" if robots.get("follow_links") is False else "follow"
    return f"index, {follow}"


def _xml(text: Any) -> str:
    return html.escape(str(text or ""), quote=True)


def _url_entry(loc: str, lastmod: str, priority: str) -> list[str]:
    return [
        "  <url>",
        f"    <loc>{_xml(loc)}</loc>",
        f"    <lastmod>{lastmod}</lastmod>",
        f"    <priority>{priority}</priority>",
        "  </url>",
    ]


def sitemap_xml(
    routes: Sequence[str],
    site_url: str,
    build_date: _dt.date,
    i18n: I18nBundle,
    blog_posts: Iterable[BlogPost] = (),
) -> str:
    if not site_url:
        return ""

    main_routes = {f"/{route_segment(i18n, section)}" for section in ("skills", "projects", "blog")}
    lastmod = build_date.isoformat()
    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">',
    ]
    for route in routes:
        if route == "/":
            priority = "1.0"
        elif route in main_routes:
            priority = "0.8"
        else:
            priority = "0.6"
        lines.extend(_url_entry(f"{site_url}{route}", lastmod, priority))

    blog_segment = route_segment(i18n, "blog")
    for post in blog_posts:
        lines.extend(_url_entry(f"{site_url}/{blog_segment}/{post.slug}", post.publish_on or lastmod, "0.6"))

    lines.append("</urlset>")
    return "\n".join(lines) + "\n"


def _contact_lines(contact: Mapping[str, Any]) -> list[str]:
    lines: list[str] = []
    if contact.get("location"):
        lines.append(f"- Location: {format_location(contact['location'])}")
    if contact.get("website"):
        lines.append(f"- Website: {contact['website']}")
    if contact.get("email"):
        lines.append(f"- Email: {contact['email']}")
    if contact.get("phone"):
        lines.append(f"- Phone: {contact['phone']}")
    for social in contact.get("socials") or []:
        lines.append(f"- {social.get('type')}: {social.get('username')}")
    for link in contact.get("links") or []:
        lines.append(f"- {link.get('title')}: {link.get('url')}")
    return lines


def llms_txt(
    resume: Mapping[str, Any],
    skills: Mapping[str, Any] | None,
    projects: Mapping[str, Any] | None,
    blog: BlogResult,
) -> str:
    lines: list[str] = []

    if resume.get("name"):
        header = f"# {resume['name']}"
        if resume.get("tagline"):
            header += f" - {resume['tagline']}"
        lines.extend([header, ""])

    summary = str(resume.get("summary") or "").strip()
    if summary:
        lines.extend(["> " + summary.replace("\n", "\n> "), ""])

    contact_lines = _contact_lines(resume.get("contact") or {})
    if contact_lines:
        lines.extend(["## Contact", *contact_lines, ""])

    experience = resume.get("experience") or []
    if experience:
        lines.append("## Experience")
        for entry in experience:
            heading = f"### {entry.get('title')}"
            if entry.get("company"):
                heading += f" at {entry['company']}"
            heading += f" ({entry.get('start')} - {entry.get('end') or 'Present'})"
            lines.append(heading)
            if entry.get("description"):
                lines.append(str(entry["description"]).strip())
            if entry.get("skills"):
                lines.append(f"Skills: {', '.join(str(item) for item in entry['skills'])}")
            lines.append("")

    project_list = (projects or {}).get("projects") or []
    if project_list:
        lines.append("## Projects")
        for project in project_list:
            lines.append(f"### {project.get('name')} - {project.get('start')} - {project.get('end') or 'Ongoing'}")
            if project.get("description"):
                lines.append(str(project["description"]).strip())
            if project.get("url"):
                lines.append(f"URL: {project['url']}")
            if project.get("repo"):
                lines.append(f"Repo: {project['repo']}")
            if project.get("skills"):
                lines.append(f"Skills: {', '.join(str(item) for item in project['skills'])}")
            lines.append("")

    education = resume.get("education") or []
    if education:
        lines.append("## Education")
        for entry in education:
            lines.append(
                f"### {entry.get('qualification')} - {entry.get('institution')} "
                f"({entry.get('start')} - {entry.get('end') or 'Present'})"
            )
            if entry.get("description"):
                lines.append(str(entry["description"]).strip())
            lines.append("")

    categories = (skills or {}).get("categories") or []
    if categories:
        lines.append("## Skills")
        for category in categories:
            lines.append(f"### {category.get('name')}")
            for skill in category.get("skills") or []:
                parts = [str(skill.get("name"))]
                if skill.get("level"):
                    parts.append(f"Level: {skill['level']}")
                if skill.get("years_active"):
                    parts.append(f"{skill['years_active']} years")
                lines.append(f"- {', '.join(parts)}")
            lines.append("")

    community = resume.get("community") or []
    if community:
        lines.append("## Community")
        for entry in community:
            lines.append(f"### {entry.get('name')} - {entry.get('role')}")
            if entry.get("description"):
                lines.append(str(entry["description"]).strip())
            lines.append("")

    accreditations = resume.get("accreditations") or []
    if accreditations:
        lines.append("## Accreditations")
        for entry in accreditations:
            parts = [str(entry.get("title")), str(entry.get("issuer"))]
            if entry.get("date"):
                parts.append(f"({entry['date']})")
            lines.append(f"- {' - '.join(parts)}")
        lines.append("")

    if blog.enabled and blog.posts:
        lines.append("## Blog")
        for post in blog.posts:
            lines.append(f"### {post.title}")
            if post.publish_on:
                lines.append(f"Published: {post.publish_on}")
            if post.description:
                lines.append(post.description)
            if post.tags:
                lines.append(f"Tags: {', '.join(post.tags)}")
            lines.append("")

    return "\n".join(lines)


def _rfc822(value: str) -> str:
    day = _dt.date.fromisoformat(value)
    return format_datetime(_dt.datetime(day.year, day.month, day.day, tzinfo=_dt.timezone.utc), usegmt=True)


def feed_xml(site: Mapping[str, Any], blog: BlogResult, site_url: str, i18n: I18nBundle) -> str:
    if not site_url or not blog.enabled or not blog.posts:
        return ""

    blog_segment = route_segment(i18n, "blog")
    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        '<rss version="2.0" xmlns:atom="http://www.w3.org/2005/Atom">',
        "  <channel>",
        f"    <title>{_xml(site.get('title'))}</title>",
        f"    <link>{site_url}/</link>",
        f"    <description>{_xml(site.get('description'))}</description>",
        f"    <language>{_xml(site.get('lang') or 'en')}</language>",
        f'    <atom:link href="{site_url}/feed.xml" rel="self" type="application/rss+xml"/>',
    ]
    for post in blog.posts[:FEED_MAX_ITEMS]:
        post_url = f"{site_url}/{blog_segment}/{post.slug}"
        lines.append("    <item>")
        lines.append(f"      <title>{_xml(post.title)}</title>")
        lines.append(f"      <link>{_xml(post_url)}</link>")
        lines.append(f"      <description>{_xml(post.description)}</description>")
        if post.publish_on:
            lines.append(f"      <pubDate>{_rfc822(post.publish_on)}</pubDate>")
        lines.append(f"      <guid>{_xml(post_url)}</guid>")
        for tag in post.tags:
            lines.append(f"      <category>{_xml(tag)}</category>")
        lines.append("    </item>")
    lines.extend(["  </channel>", "</rss>"])
    return "\n".join(lines) + "\n"
