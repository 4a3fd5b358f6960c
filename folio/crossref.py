from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from folio.schemas import slugify


@dataclass(frozen=True)
class CatalogSkill:
    name: str
    level: Any
    category: str | None

    def as_dict(self) -> dict[str, Any]:
        return {"name": self.name, "level": self.level, "category": self.category}


@dataclass(frozen=True)
class CrossReferenceIndex:
    skill_to_experience: dict[str, list[dict[str, Any]]] = field(default_factory=dict)
    skill_to_project: dict[str, list[dict[str, Any]]] = field(default_factory=dict)
    experience_to_skills: dict[str, list[dict[str, Any]]] = field(default_factory=dict)
    project_to_skills: dict[str, list[dict[str, Any]]] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        return {
            "skillToExperience": self.skill_to_experience,
            "skillToProject": self.skill_to_project,
            "experienceToSkills": self.experience_to_skills,
            "projectToSkills": self.project_to_skills,
        }


def build_skill_index(skills: Mapping[str, Any] | None) -> dict[str, CatalogSkill]:
    index: dict[str, CatalogSkill] = {}
    if not skills:
        return index
    for category in skills.get("categories") or []:
        for skill in category.get("skills") or []:
            name = str(skill.get("name") or "").strip()
            if not name:
                continue
            # Later categories overwrite earlier ones for duplicate names.
            index[name.lower()] = CatalogSkill(
                name=name,
                level=skill.get("level"),
                category=category.get("name"),
            )
    return index


def experience_key(entry: Mapping[str, Any]) -> str:
    title = str(entry.get("title") or "")
    company = entry.get("company")
    if company:
        return slugify(f"{title}--{company}")
    return slugify(title)


def _link(
    owner_label: str,
    owner_key: str,
    skill_names: list[Any],
    association: dict[str, Any],
    skill_index: dict[str, CatalogSkill],
    skill_map: dict[str, list[dict[str, Any]]],
    owner_map: dict[str, list[dict[str, Any]]],
    warnings: list[str],
) -> None:
    matched: list[dict[str, Any]] = []
    for raw_name in skill_names:
        name = str(raw_name)
        key = name.lower()
        skill = skill_index.get(key)
        if skill is None:
            if skill_index:
                warnings.append(f'Skill "{name}" referenced in {owner_label} not found in skills catalog')
            continue
        skill_map.setdefault(key, []).append(dict(association))
        matched.append(skill.as_dict())
    if matched:
        owner_map.setdefault(owner_key, []).extend(matched)


def build_cross_references(
    skills: Mapping[str, Any] | None,
    resume: Mapping[str, Any] | None,
    projects: Mapping[str, Any] | None,
) -> tuple[CrossReferenceIndex, list[str]]:
    """Link catalogued skills to the experience and project entries naming them.

    Skill names match case-insensitively. Unmatched names produce a warning only when the
    catalog holds at least one skill. Absent inputs contribute nothing.
    """
    warnings: list[str] = []
    skill_index = build_skill_index(skills)
    skill_to_experience: dict[str, list[dict[str, Any]]] = {}
    skill_to_project: dict[str, list[dict[str, Any]]] = {}
    experience_to_skills: dict[str, list[dict[str, Any]]] = {}
    project_to_skills: dict[str, list[dict[str, Any]]] = {}

    for entry in (resume or {}).get("experience") or []:
        if not entry.get("skills"):
            continue
        association: dict[str, Any] = {"title": entry.get("title")}
        if entry.get("company"):
            association["company"] = entry["company"]
        association["start"] = entry.get("start")
        association["end"] = entry.get("end") or None
        _link(
            f'experience "{entry.get("title")}"',
            experience_key(entry),
            entry["skills"],
            association,
            skill_index,
            skill_to_experience,
            experience_to_skills,
            warnings,
        )

    for entry in (projects or {}).get("projects") or []:
        if not entry.get("skills"):
            continue
        _link(
            f'project "{entry.get("name")}"',
            slugify(str(entry.get("name") or "")),
            entry["skills"],
            {"name": entry.get("name"), "start": entry.get("start")},
            skill_index,
            skill_to_project,
            project_to_skills,
            warnings,
        )

    index = CrossReferenceIndex(
        skill_to_experience=skill_to_experience,
        skill_to_project=skill_to_project,
        experience_to_skills=experience_to_skills,
        project_to_skills=project_to_skills,
    )
    return index, warnings
