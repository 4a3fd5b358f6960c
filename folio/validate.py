from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ValidationError

from folio.schemas import ProjectsSchema, ResumeSchema, SiteSchema, SkillsSchema

ROOT_FIELD = "(root)"

SCHEMA_FILES: tuple[tuple[str, type[BaseModel]], ...] = (
    ("site.yml", SiteSchema),
    ("resume.yml", ResumeSchema),
    ("skills.yml", SkillsSchema),
    ("projects.yml", ProjectsSchema),
)

# pydantic error types rewritten into the wording used by build output.
ERROR_REASONS = {
    "missing": "is required",
    "string_type": "must be a string",
    "bool_type": "must be a boolean",
    "list_type": "must be an array",
    "dict_type": "must be a mapping",
    "model_type": "must be an object",
    "model_attributes_type": "must be an object",
}


@dataclass(frozen=True)
class ValidationIssue:
    file: str
    field: str
    reason: str

    def as_dict(self) -> dict[str, Any]:
        return {
            "file": self.file,
            "field": self.field,
            "reason": self.reason,
        }

    def __str__(self) -> str:
        return f'"{self.file}" validation failed: {self.field} {self.reason}'


def format_location(loc: Sequence[str | int]) -> str:
    parts: list[str] = []
    for item in loc:
        if isinstance(item, int):
            if parts:
                parts[-1] = f"{parts[-1]}[{item}]"
            else:
                parts.append(f"[{item}]")
        else:
            parts.append(str(item))
    return ".".join(parts) or ROOT_FIELD


def error_reason(error: dict[str, Any]) -> str:
    error_type = error.get("type", "")
    if error_type == "value_error":
        ctx_error = error.get("ctx", {}).get("error")
        if ctx_error is not None:
            return str(ctx_error)
    return ERROR_REASONS.get(error_type, error.get("msg", "is invalid"))


def validate_document(file: str, model_cls: type[BaseModel], data: Any) -> list[ValidationIssue]:
    if not isinstance(data, dict):
        return [ValidationIssue(file=file, field=ROOT_FIELD, reason="must be a YAML mapping")]

    try:
        model_cls.model_validate(data)
    except ValidationError as exc:
        return [
            ValidationIssue(file=file, field=format_location(error["loc"]), reason=error_reason(error))
            for error in exc.errors()
        ]
    return []


def validate(site: Any, resume: Any, skills: Any, projects: Any) -> list[ValidationIssue]:
    """Check all four source documents and return every problem found.

    Never raises. Any non-empty result must block the build.
    """
    issues: list[ValidationIssue] = []
    for (file, model_cls), data in zip(SCHEMA_FILES, (site, resume, skills, projects)):
        issues.extend(validate_document(file, model_cls, data))
    return issues
