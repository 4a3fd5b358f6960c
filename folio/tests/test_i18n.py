from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from folio.i18n import BUILTIN_LOCALES_DIR, load_builtin_pack, resolve_i18n


def _english_keys() -> list[str]:
    pack = load_builtin_pack("en")
    assert pack is not None
    return list(pack.labels)


def test_english_resolves_without_warnings() -> None:
    bundle, warnings = resolve_i18n("en")

    assert warnings == []
    assert bundle.locale == "en"
    assert bundle.dir == "ltr"
    assert bundle.label("nav_home", "?") == "Home"
    assert bundle.label("route_skills", "?") == "skills"


def test_builtin_translation_is_used() -> None:
    bundle, warnings = resolve_i18n("fr")

    assert warnings == []
    assert bundle.locale == "fr"
    assert bundle.label("nav_home", "?") == "Accueil"
    assert bundle.label("route_skills", "?") == "competences"


def test_arabic_pack_is_right_to_left() -> None:
    bundle, _ = resolve_i18n("ar")

    assert bundle.dir == "rtl"
    assert bundle.as_dict()["dir"] == "rtl"


@pytest.mark.parametrize("lang", ["en", "fr", "de", "es", "ar"])
def test_bundled_packs_cover_the_english_reference(lang: str) -> None:
    bundle, warnings = resolve_i18n(lang)

    assert warnings == []
    assert set(_english_keys()) <= set(bundle.labels)


def test_unknown_language_falls_back_to_english() -> None:
    bundle, warnings = resolve_i18n("xx")

    assert bundle.locale == "en"
    assert bundle.label("nav_home", "?") == "Home"
    assert warnings == ['Language pack for "xx" not found, falling back to English']


def test_overrides_win_over_pack_labels() -> None:
    bundle, _ = resolve_i18n("de", overrides={"nav_home": "Start", "extra_label": "Extra"})

    assert bundle.label("nav_home", "?") == "Start"
    assert bundle.labels["extra_label"] == "Extra"


def test_custom_pack_fills_missing_keys_with_their_names(tmp_path: Path) -> None:
    locale_file = tmp_path / "i18n.yml"
    locale_file.write_text(
        yaml.safe_dump({"locale": "pt", "labels": {"nav_home": "Inicio"}}),
        encoding="utf-8",
    )

    bundle, warnings = resolve_i18n("custom", locale_file=locale_file)

    assert bundle.locale == "pt"
    assert bundle.label("nav_home", "?") == "Inicio"
    assert bundle.labels["nav_blog"] == "nav_blog"
    assert len(warnings) == len(_english_keys()) - 1
    assert 'i18n key "nav_blog" missing from language pack, using key as fallback' in warnings


def test_unreadable_custom_pack_falls_back_to_english(tmp_path: Path) -> None:
    bundle, warnings = resolve_i18n("custom", locale_file=tmp_path / "missing.yml")

    assert bundle.locale == "en"
    assert bundle.label("nav_home", "?") == "Home"
    assert len(warnings) == 1
    assert "could not be loaded, falling back to English" in warnings[0]


def test_missing_english_reference_is_a_warning(tmp_path: Path) -> None:
    bundle, warnings = resolve_i18n("en", locales_dir=tmp_path)

    assert bundle.labels == {}
    assert bundle.label("nav_home", "Home") == "Home"
    assert warnings == [
        'Language pack for "en" not found, falling back to English',
        "English reference language pack not found, label completeness not checked",
    ]


def test_builtin_locales_ship_with_the_package() -> None:
    assert sorted(path.stem for path in BUILTIN_LOCALES_DIR.glob("*.yml")) == ["ar", "de", "en", "es", "fr"]
