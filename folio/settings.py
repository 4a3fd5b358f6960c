from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from folio.loader import LoadError
from folio.schemas import coerce_date
from folio.validate import error_reason, format_location

DEFAULT_DATA_DIR = Path("data")
DEFAULT_OUTPUT_DIR = Path("dist")

ENV_FIELDS = {
    "FOLIO_DATA_DIR": "data_dir",
    "FOLIO_PAGES_DIR": "pages_dir",
    "FOLIO_BLOG_DIR": "blog_dir",
    "FOLIO_OUTPUT_DIR": "output_dir",
    "FOLIO_BUILD_DATE": "build_date",
    "FOLIO_SITE_URL": "site_url",
    "FOLIO_LOCALES_DIR": "locales_dir",
}


def _normalize_optional_token(value: Any) -> Any:
    if isinstance(value, str):
        text = value.strip()
        return text or None
    return value


class SettingsError(LoadError):
    """Build settings from the environment or command line are invalid."""


class BuildSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    data_dir: Path = DEFAULT_DATA_DIR
    pages_dir: Path | None = None
    blog_dir: Path | None = None
    output_dir: Path = DEFAULT_OUTPUT_DIR
    build_date: str | None = None
    site_url: str = ""
    locales_dir: Path | None = None

    @field_validator("pages_dir", "blog_dir", "locales_dir", "build_date", mode="before")
    @classmethod
    def normalize_optional(cls, value: Any) -> Any:
        return _normalize_optional_token(value)

    @field_validator("build_date")
    @classmethod
    def validate_build_date(cls, value: str | None) -> str | None:
        if value is None:
            return None
        parsed = coerce_date(value)
        return parsed.isoformat() if parsed else None

    @field_validator("site_url")
    @classmethod
    def normalize_site_url(cls, value: str) -> str:
        return value.strip().rstrip("/")


def load_build_settings_from_env(
    environ: Mapping[str, str] | None = None,
    *,
    base_settings: BuildSettings | None = None,
) -> BuildSettings:
    env = dict(os.environ if environ is None else environ)
    settings = base_settings or BuildSettings()
    payload = settings.model_dump(mode="python")

    for env_var, field_name in ENV_FIELDS.items():
        if env_var in env:
            payload[field_name] = env[env_var]

    return BuildSettings.model_validate(payload)


def apply_overrides(settings: BuildSettings, overrides: Mapping[str, Any]) -> BuildSettings:
    payload = settings.model_dump(mode="python")
    payload.update({key: value for key, value in overrides.items() if value is not None})
    return BuildSettings.model_validate(payload)


def resolve_build_settings(
    overrides: Mapping[str, Any],
    environ: Mapping[str, str] | None = None,
) -> BuildSettings:
    """Environment settings with non-empty ``overrides`` applied on top.

    Raises ``SettingsError`` naming every invalid setting.
    """
    try:
        return apply_overrides(load_build_settings_from_env(environ), overrides)
    except ValidationError as exc:
        details = "; ".join(f"{format_location(error['loc'])} {error_reason(error)}" for error in exc.errors())
        raise SettingsError(f"Invalid build settings: {details}") from exc
