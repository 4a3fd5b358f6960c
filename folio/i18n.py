from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from folio.schemas import LocalePack

BUILTIN_LOCALES_DIR = Path(__file__).resolve().parent / "locales"
REFERENCE_LANG = "en"
CUSTOM_LANG = "custom"


@dataclass(frozen=True)
class I18nBundle:
    locale: str
    dir: str = "ltr"
    labels: dict[str, Any] = field(default_factory=dict)

    def label(self, key: str, default: str) -> str:
        value = self.labels.get(key)
        return str(value) if value else default

    def as_dict(self) -> dict[str, Any]:
        return {"locale": self.locale, "dir": self.dir, "labels": dict(self.labels)}


def load_pack(path: Path) -> LocalePack | None:
    try:
        payload = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError):
        return None
    if not isinstance(payload, dict):
        return None
    try:
        return LocalePack.model_validate(payload)
    except ValidationError:
        return None


def load_builtin_pack(lang: str, locales_dir: Path | None = None) -> LocalePack | None:
    if not lang or "/" in lang or "\\" in lang:
        return None
    return load_pack((locales_dir or BUILTIN_LOCALES_DIR) / f"{lang}.yml")


def resolve_i18n(
    lang: str,
    *,
    overrides: Mapping[str, Any] | None = None,
    locale_file: Path | None = None,
    locales_dir: Path | None = None,
) -> tuple[I18nBundle, list[str]]:
    """Resolve the label bundle for ``lang``.

    Unknown languages and unreadable custom files fall back to English with a warning.
    ``overrides`` win over pack labels. Any English key still missing afterwards is filled
    with the key name itself, so the result always covers the English reference set.
    """
    warnings: list[str] = []
    pack: LocalePack | None = None
    locale = lang

    if lang == CUSTOM_LANG and locale_file is not None:
        pack = load_pack(locale_file)
        if pack is None:
            warnings.append(
                f'Custom locale file "{locale_file.as_posix()}" could not be loaded, falling back to English'
            )
    else:
        pack = load_builtin_pack(lang, locales_dir)
        if pack is None:
            warnings.append(f'Language pack for "{lang}" not found, falling back to English')

    english: LocalePack | None = pack if lang == REFERENCE_LANG else None
    if pack is None:
        english = load_builtin_pack(REFERENCE_LANG, locales_dir)
        pack = english
        locale = REFERENCE_LANG
    elif english is None:
        english = load_builtin_pack(REFERENCE_LANG, locales_dir)

    if english is None:
        warnings.append("English reference language pack not found, label completeness not checked")
    reference_keys = list(english.labels) if english is not None else []

    labels: dict[str, Any] = dict(pack.labels) if pack is not None else {}
    if overrides:
        labels.update(overrides)

    for key in reference_keys:
        if key not in labels:
            warnings.append(f'i18n key "{key}" missing from language pack, using key as fallback')
            labels[key] = key

    bundle = I18nBundle(
        locale=(pack.locale if pack is not None and pack.locale else locale),
        dir=pack.dir if pack is not None else "ltr",
        labels=labels,
    )
    return bundle, warnings
