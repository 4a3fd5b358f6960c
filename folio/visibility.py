from __future__ import annotations

import copy
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from folio.content import BLOG_DISABLED, BlogResult
from folio.schemas import VISIBILITY_DEFAULTS, Visibility, normalize_visibility

WEB_LEVELS = frozenset({Visibility.all, Visibility.web})
PRINT_LEVELS = frozenset({Visibility.all, Visibility.print})

CONTACT_FIELD_KEYS: tuple[tuple[str, str], ...] = (
    ("email", "contact_email"),
    ("phone", "contact_phone"),
    ("location", "location"),
    ("website", "contact_website"),
    ("socials", "socials"),
    ("links", "links"),
)
RESUME_SECTIONS = ("education", "experience", "community", "accreditations")


def is_web_visible(value: Visibility | str | bool) -> bool:
    return normalize_visibility(value) in WEB_LEVELS


def is_print_visible(value: Visibility | str | bool) -> bool:
    return normalize_visibility(value) in PRINT_LEVELS


@dataclass(frozen=True)
class VisibilityPolicy:
    levels: Mapping[str, Visibility]

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any] | None) -> VisibilityPolicy:
        combined = {**VISIBILITY_DEFAULTS, **(raw or {})}
        return cls(levels={key: normalize_visibility(value) for key, value in combined.items()})

    def level(self, key: str) -> Visibility:
        return self.levels.get(key, Visibility.all)

    def web(self, key: str) -> bool:
        return self.level(key) in WEB_LEVELS

    def printed(self, key: str) -> bool:
        return self.level(key) in PRINT_LEVELS

    def as_dict(self) -> dict[str, str]:
        return {key: level.value for key, level in self.levels.items()}


@dataclass(frozen=True)
class Projection:
    resume: dict[str, Any]
    skills: dict[str, Any] | None
    projects: dict[str, Any] | None
    blog: BlogResult = BLOG_DISABLED

    def as_dict(self) -> dict[str, Any]:
        return {
            "resume": self.resume,
            "skills": self.skills,
            "projects": self.projects,
            "blog": self.blog.as_dict(),
        }


def _as_policy(policy: VisibilityPolicy | Mapping[str, Any]) -> VisibilityPolicy:
    if isinstance(policy, VisibilityPolicy):
        return policy
    return VisibilityPolicy.from_mapping(policy)


def _redact_resume(resume: Mapping[str, Any] | None, visible: Callable[[str], bool]) -> dict[str, Any]:
    result = copy.deepcopy(dict(resume or {}))

    contact = result.get("contact")
    if isinstance(contact, dict):
        for field_name, key in CONTACT_FIELD_KEYS:
            if not visible(key):
                contact.pop(field_name, None)

    for section in RESUME_SECTIONS:
        if not visible(section):
            result.pop(section, None)

    experience = result.get("experience")
    if isinstance(experience, list) and not visible("experience_company"):
        for entry in experience:
            if isinstance(entry, dict):
                entry.pop("company", None)

    return result


def _project(
    visible: Callable[[str], bool],
    resume: Mapping[str, Any] | None,
    skills: Mapping[str, Any] | None,
    projects: Mapping[str, Any] | None,
    blog: BlogResult,
) -> Projection:
    return Projection(
        resume=_redact_resume(resume, visible),
        skills=copy.deepcopy(dict(skills)) if skills is not None and visible("skills") else None,
        projects=copy.deepcopy(dict(projects)) if projects is not None and visible("projects") else None,
        blog=copy.deepcopy(blog) if visible("blog") else BLOG_DISABLED,
    )


def filter_for_web(
    policy: VisibilityPolicy | Mapping[str, Any],
    resume: Mapping[str, Any] | None,
    skills: Mapping[str, Any] | None,
    projects: Mapping[str, Any] | None,
    blog: BlogResult = BLOG_DISABLED,
) -> Projection:
    """Redacted copy of the profile for the published site.

    Inputs are never modified; hidden catalogs come back as ``None`` and a hidden blog as
    ``BLOG_DISABLED``.
    """
    return _project(_as_policy(policy).web, resume, skills, projects, blog)


def filter_for_print(
    policy: VisibilityPolicy | Mapping[str, Any],
    resume: Mapping[str, Any] | None,
    skills: Mapping[str, Any] | None,
    projects: Mapping[str, Any] | None,
) -> Projection:
    """Redacted copy of the profile for document exports. Never carries the blog."""
    return _project(_as_policy(policy).printed, resume, skills, projects, BLOG_DISABLED)


strip_visibility = filter_for_web
