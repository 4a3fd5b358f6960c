from __future__ import annotations

import datetime as _dt
import re
from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, StrictBool, StrictStr, field_validator

SLUG_SEPARATOR_RE = re.compile(r"[^a-z0-9]+")
DATE_PREFIX_RE = re.compile(r"^\d{4}-\d{2}-\d{2}-")
ISO_DATE_RE = re.compile(r"^(\d{4}-\d{2}-\d{2})(?:[T ].*)?$")


class Visibility(str, Enum):
    all = "all"
    web = "web"
    print = "print"
    none = "none"


VISIBILITY_VALUES = tuple(item.value for item in Visibility)
LEGACY_VISIBILITY_ALIASES = {
    True: Visibility.all,
    False: Visibility.none,
}

VISIBILITY_DEFAULTS: dict[str, str] = {
    "education": "all",
    "experience": "all",
    "experience_company": "all",
    "projects": "all",
    "community": "all",
    "accreditations": "all",
    "skills": "all",
    "blog": "all",
    "contact_email": "none",
    "contact_phone": "none",
    "location": "all",
    "contact_website": "all",
    "socials": "all",
    "links": "all",
}

SEO_DEFAULTS: dict[str, Any] = {
    "robots": {
        "indexing": True,
        "follow_links": True,
    },
    "sitemap": True,
    "llms_txt": True,
    "rss": True,
}

DOCUMENTS_DEFAULTS: dict[str, Any] = {
    "pdf": True,
    "docx": True,
    "page_size": "A4",
    "filename": "resume",
}


def slugify(value: str) -> str:
    return SLUG_SEPARATOR_RE.sub("-", str(value).lower()).strip("-")


def slug_from_filename(stem: str, *, strip_date_prefix: bool = False) -> str:
    if strip_date_prefix:
        stem = DATE_PREFIX_RE.sub("", stem)
    return slugify(stem)


def normalize_visibility(value: Any) -> Visibility:
    """Map a raw visibility value (enum string or legacy boolean) onto the enum."""
    if isinstance(value, Visibility):
        return value
    if isinstance(value, bool):
        return LEGACY_VISIBILITY_ALIASES[value]
    text = str(value).strip()
    try:
        return Visibility(text)
    except ValueError as exc:
        raise ValueError(f"must be one of {', '.join(VISIBILITY_VALUES)}") from exc


def coerce_date(value: Any) -> _dt.date | None:
    if value is None or value == "":
        return None
    if isinstance(value, _dt.datetime):
        return value.date()
    if isinstance(value, _dt.date):
        return value
    text = str(value).strip()
    match = ISO_DATE_RE.match(text)
    if not match:
        raise ValueError(f"invalid date {text!r}; expected YYYY-MM-DD")
    try:
        return _dt.date.fromisoformat(match.group(1))
    except ValueError as exc:
        raise ValueError(f"invalid date {text!r}: {exc}") from exc


def date_text(value: _dt.date | None) -> str | None:
    if value is None:
        return None
    return value.isoformat()


def _check_visibility(value: Any) -> Any:
    normalize_visibility(value)
    return value


VisibilityValue = Annotated[Any, AfterValidator(_check_visibility)]


def _require_text(value: str) -> str:
    if not value.strip():
        raise ValueError("must be a non-empty string")
    return value


class SourceModel(BaseModel):
    model_config = ConfigDict(extra="allow")


class DocumentSettings(SourceModel):
    pdf: StrictBool | None = None
    docx: StrictBool | None = None
    page_size: Literal["A4", "Letter"] | None = None
    filename: StrictStr | None = None

    @field_validator("filename")
    @classmethod
    def validate_filename(cls, value: str | None) -> str | None:
        if value is None:
            return None
        if not value or any(token in value for token in ("/", "\\", ".")):
            raise ValueError("must be a non-empty string without slashes or file extensions")
        return value


class SiteSchema(SourceModel):
    lang: StrictStr
    visibility: dict[str, VisibilityValue] = Field(default_factory=dict)
    documents: DocumentSettings | None = None

    @field_validator("lang")
    @classmethod
    def validate_lang(cls, value: str) -> str:
        return _require_text(value)


class ResumeSchema(SourceModel):
    name: StrictStr
    tagline: StrictStr

    @field_validator("name", "tagline")
    @classmethod
    def validate_text(cls, value: str) -> str:
        return _require_text(value)


class SkillSchema(SourceModel):
    name: StrictStr

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        return _require_text(value)


class SkillCategorySchema(SourceModel):
    skills: list[SkillSchema]


class SkillsSchema(SourceModel):
    categories: list[SkillCategorySchema]


class ProjectSchema(SourceModel):
    name: StrictStr
    description: StrictStr
    start: Any

    @field_validator("name", "description")
    @classmethod
    def validate_text(cls, value: str) -> str:
        return _require_text(value)

    @field_validator("start")
    @classmethod
    def validate_start(cls, value: Any) -> Any:
        if value in (None, ""):
            raise ValueError("is required")
        return value


class ProjectsSchema(SourceModel):
    projects: list[ProjectSchema]


class LocalePack(SourceModel):
    locale: StrictStr | None = None
    dir: Literal["ltr", "rtl"] = "ltr"
    labels: dict[str, Any] = Field(default_factory=dict)

    @field_validator("labels", mode="before")
    @classmethod
    def default_labels(cls, value: Any) -> Any:
        if value is None:
            return {}
        return value
