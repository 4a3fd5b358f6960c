from __future__ import annotations

import concurrent.futures
import copy
from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml

from folio.schemas import DOCUMENTS_DEFAULTS, LEGACY_VISIBILITY_ALIASES, SEO_DEFAULTS, VISIBILITY_DEFAULTS

if TYPE_CHECKING:
    from folio.validate import ValidationIssue

SOURCE_FILES = ("site", "resume", "skills", "projects")


class LoadError(Exception):
    """Base class for failures that block a build."""


class NotFound(LoadError):
    pass


class ParseError(LoadError):
    pass


class SchemaError(LoadError):
    def __init__(self, message: str, issues: tuple[ValidationIssue, ...] = ()) -> None:
        super().__init__(message)
        self.issues = tuple(issues)


def load_mapping(path: Path) -> dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise NotFound(f'Required file "{path.as_posix()}" not found') from exc

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ParseError(f'Failed to parse "{path.as_posix()}": {exc}') from exc

    if not isinstance(data, dict):
        raise SchemaError(
            f'Failed to parse "{path.as_posix()}": file is empty or does not contain a YAML mapping'
        )
    return data


def deep_merge(base: Mapping[str, Any], overrides: Mapping[str, Any]) -> dict[str, Any]:
    merged = copy.deepcopy(dict(base))
    for key, value in overrides.items():
        current = merged.get(key)
        if isinstance(value, Mapping) and isinstance(current, Mapping):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def coerce_legacy_visibility(value: Any) -> Any:
    if isinstance(value, bool):
        return LEGACY_VISIBILITY_ALIASES[value].value
    return value


def apply_site_defaults(site: Mapping[str, Any]) -> dict[str, Any]:
    """Return a copy of ``site`` with visibility, SEO and document defaults filled in.

    Legacy boolean visibility values are rewritten to ``all``/``none``. Sections that are
    present but not mappings are passed through untouched so validation can report them.
    """
    merged = copy.deepcopy(dict(site))

    visibility = merged.get("visibility") or {}
    if isinstance(visibility, Mapping):
        combined = {**VISIBILITY_DEFAULTS, **visibility}
        merged["visibility"] = {key: coerce_legacy_visibility(value) for key, value in combined.items()}

    seo = merged.get("seo") or {}
    if isinstance(seo, Mapping):
        merged["seo"] = deep_merge(SEO_DEFAULTS, seo)

    documents = merged.get("documents") or {}
    if isinstance(documents, Mapping):
        merged["documents"] = {**DOCUMENTS_DEFAULTS, **documents}

    return merged


def load_site_config(path: Path) -> dict[str, Any]:
    return apply_site_defaults(load_mapping(path))


def load_sources(data_dir: Path) -> dict[str, dict[str, Any]]:
    """Read site/resume/skills/projects from ``data_dir`` in parallel.

    The first failure (in file order) is re-raised once every read has finished.
    """
    loaders = {
        "site": load_site_config,
        "resume": load_mapping,
        "skills": load_mapping,
        "projects": load_mapping,
    }
    with concurrent.futures.ThreadPoolExecutor(max_workers=len(SOURCE_FILES)) as executor:
        futures = {
            name: executor.submit(loaders[name], data_dir / f"{name}.yml") for name in SOURCE_FILES
        }
        concurrent.futures.wait(futures.values())

    return {name: futures[name].result() for name in SOURCE_FILES}
