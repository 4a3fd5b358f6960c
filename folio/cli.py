from __future__ import annotations

import argparse
import json
from typing import Any

from loguru import logger

from folio.build import build_site, compile_site
from folio.content import jsonable
from folio.loader import LoadError, SchemaError, load_sources
from folio.logger import setup_logger
from folio.settings import BuildSettings, resolve_build_settings
from folio.validate import validate


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--data-dir",
        default=None,
        help="Directory holding site.yml, resume.yml, skills.yml and projects.yml (default: data).",
    )
    parser.add_argument(
        "--pages-dir",
        default=None,
        help="Optional directory of Markdown pages.",
    )
    parser.add_argument(
        "--blog-dir",
        default=None,
        help="Optional directory of Markdown blog posts.",
    )
    parser.add_argument(
        "--build-date",
        default=None,
        help="Date used for blog scheduling and sitemap lastmod (default: today, YYYY-MM-DD).",
    )
    parser.add_argument(
        "--locales-dir",
        default=None,
        help="Directory of language packs (default: packs bundled with folio).",
    )
    parser.add_argument("--pretty", action="store_true", help="Pretty-print JSON output.")
    parser.add_argument("--verbose", action="store_true", help="Log stage progress to stderr.")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Compile a YAML/Markdown profile into a publishable site dataset")
    subparsers = parser.add_subparsers(dest="command", required=True)

    validate_parser = subparsers.add_parser("validate", help="Load and validate the profile source files.")
    _add_common_arguments(validate_parser)

    build_site_parser = subparsers.add_parser("build", help="Compile the profile and write the site dataset.")
    _add_common_arguments(build_site_parser)
    build_site_parser.add_argument(
        "--output-dir",
        default=None,
        help="Directory the dataset is written to (default: dist).",
    )
    build_site_parser.add_argument(
        "--site-url",
        default=None,
        help="Public site URL (default: derived from GITHUB_REPOSITORY when set).",
    )

    manifest_parser = subparsers.add_parser(
        "manifest",
        help="Print the route manifest and navigation without writing files.",
    )
    _add_common_arguments(manifest_parser)

    return parser


def resolve_settings(args: argparse.Namespace) -> BuildSettings:
    overrides = {
        "data_dir": args.data_dir,
        "pages_dir": args.pages_dir,
        "blog_dir": args.blog_dir,
        "build_date": args.build_date,
        "locales_dir": args.locales_dir,
        "output_dir": getattr(args, "output_dir", None),
        "site_url": getattr(args, "site_url", None),
    }
    return resolve_build_settings(overrides)


def _print(payload: dict[str, Any], *, pretty: bool) -> None:
    if pretty:
        print(json.dumps(jsonable(payload), indent=2, sort_keys=True, ensure_ascii=False))
    else:
        print(json.dumps(jsonable(payload), sort_keys=True, ensure_ascii=False))


def failure_payload(exc: LoadError) -> dict[str, Any]:
    issues = exc.issues if isinstance(exc, SchemaError) else ()
    return {
        "ok": False,
        "error_type": exc.__class__.__name__,
        "message": str(exc),
        "issues": [issue.as_dict() for issue in issues],
    }


def run_validate(args: argparse.Namespace) -> int:
    try:
        settings = resolve_settings(args)
        sources = load_sources(settings.data_dir)
    except LoadError as exc:
        logger.error(str(exc))
        _print(failure_payload(exc), pretty=args.pretty)
        return 1

    issues = validate(sources["site"], sources["resume"], sources["skills"], sources["projects"])
    for issue in issues:
        logger.error(str(issue))

    result = {
        "ok": not issues,
        "data_dir": settings.data_dir.as_posix(),
        "issues": [issue.as_dict() for issue in issues],
    }
    _print(result, pretty=args.pretty)
    return 0 if result["ok"] else 1


def run_build(args: argparse.Namespace) -> int:
    try:
        report = build_site(resolve_settings(args))
    except LoadError as exc:
        if not isinstance(exc, SchemaError) or not exc.issues:
            logger.error(str(exc))
        _print(failure_payload(exc), pretty=args.pretty)
        return 1

    _print(report.as_dict(), pretty=args.pretty)
    return 0


def run_manifest(args: argparse.Namespace) -> int:
    try:
        settings = resolve_settings(args)
        dataset = compile_site(
            load_sources(settings.data_dir),
            data_dir=settings.data_dir,
            pages_dir=settings.pages_dir,
            blog_dir=settings.blog_dir,
            build_date=settings.build_date,
            locales_dir=settings.locales_dir,
        )
    except LoadError as exc:
        if not isinstance(exc, SchemaError) or not exc.issues:
            logger.error(str(exc))
        _print(failure_payload(exc), pretty=args.pretty)
        return 1

    for warning in dataset.warnings:
        logger.warning(warning)

    payload = {
        "ok": True,
        **dataset.manifest.as_dict(),
        "warnings": list(dataset.warnings),
    }
    _print(payload, pretty=args.pretty)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logger(verbose=args.verbose)

    if args.command == "validate":
        return run_validate(args)
    if args.command == "build":
        return run_build(args)
    if args.command == "manifest":
        return run_manifest(args)
    parser.error(f"Unknown command: {args.command}")
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
