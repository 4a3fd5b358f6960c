from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from folio.content import BlogResult, CompiledPage
from folio.i18n import I18nBundle
from folio.visibility import VisibilityPolicy

# (visibility key, route label, nav label, fallback segment, fallback nav label)
MAIN_SECTIONS: tuple[tuple[str, str, str, str, str], ...] = (
    ("skills", "route_skills", "nav_skills", "skills", "Skills"),
    ("projects", "route_projects", "nav_projects", "projects", "Projects"),
    ("blog", "route_blog", "nav_blog", "blog", "Blog"),
)


@dataclass(frozen=True)
class NavEntry:
    label: str
    path: str

    def as_dict(self) -> dict[str, str]:
        return {"label": self.label, "path": self.path}


@dataclass(frozen=True)
class Manifest:
    routes: tuple[str, ...]
    nav: tuple[NavEntry, ...]

    def as_dict(self) -> dict[str, Any]:
        return {
            "routes": list(self.routes),
            "nav": [entry.as_dict() for entry in self.nav],
        }


def route_segment(i18n: I18nBundle, section: str) -> str:
    for key, route_label, _, fallback, _ in MAIN_SECTIONS:
        if key == section:
            return i18n.label(route_label, fallback)
    raise KeyError(section)


def _has_content(
    section: str,
    skills: Mapping[str, Any] | None,
    projects: Mapping[str, Any] | None,
    blog: BlogResult,
) -> bool:
    if section == "skills":
        return bool(skills and skills.get("categories"))
    if section == "projects":
        return bool(projects and projects.get("projects"))
    return blog.enabled and bool(blog.posts)


def build_manifest(
    policy: VisibilityPolicy,
    *,
    skills: Mapping[str, Any] | None,
    projects: Mapping[str, Any] | None,
    blog: BlogResult,
    pages: Sequence[CompiledPage],
    i18n: I18nBundle,
) -> Manifest:
    """Derive the ordered route list and navigation for the published site.

    ``/`` always comes first, followed by skills, projects and blog when each is web-visible
    and has content, then custom pages by ascending ``nav_order`` (stable for ties). Pages
    with ``show_in_nav`` false get a route but no nav entry.
    """
    routes: list[str] = ["/"]
    nav: list[NavEntry] = [NavEntry(label=i18n.label("nav_home", "Home"), path="/")]

    for section, route_label, nav_label, fallback, fallback_label in MAIN_SECTIONS:
        if not policy.web(section) or not _has_content(section, skills, projects, blog):
            continue
        path = f"/{i18n.label(route_label, fallback)}"
        routes.append(path)
        nav.append(NavEntry(label=i18n.label(nav_label, fallback_label), path=path))

    for page in sorted(pages, key=lambda item: item.nav_order):
        path = f"/{page.slug}"
        routes.append(path)
        if page.show_in_nav:
            nav.append(NavEntry(label=page.title, path=path))

    return Manifest(routes=tuple(routes), nav=tuple(nav))
