"""
bundle-compare: writes a markdown comment describing how the bundle size of a
build changed compared to a baseline build.

Both inputs are Vite stats JSON files: arrays of {filename|label, parsedSize, gzipSize}.

Exit codes:
  0 = comment written
  1 = unreadable/invalid input, bad configuration or unwritable output
  2 = usage error
"""

import argparse
import logging
import re
from pathlib import Path
from typing import List, Optional

import sentry_sdk
from sentry_sdk.utils import BadDsn

from bundle_compare.bundle_analysis import (
    AssetNameNormalizer,
    InvalidSnapshotError,
    compare,
    load_snapshot,
    render_comment,
)
from bundle_compare.config import get_config

log = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="bundle-compare",
        description="Compare two Vite bundle stats snapshots and write a markdown report.",
    )
    p.add_argument("--base", required=True, help="Stats JSON of the baseline build.")
    p.add_argument("--current", required=True, help="Stats JSON of the proposed build.")
    p.add_argument(
        "--output", required=True, help="Markdown file to write (overwritten)."
    )
    p.add_argument(
        "--title",
        default=None,
        help="Report title, also used to identify the comment (default: comment.title config).",
    )
    return p


class InvalidConfigurationError(Exception):
    def __init__(self, setting: str, message: str):
        self.setting = setting
        self.message = message

    def __str__(self) -> str:
        return f"{self.setting}: {self.message}"


def resolve_log_level(name) -> int:
    level = logging.getLevelName(str(name).upper())
    if not isinstance(level, int):
        raise InvalidConfigurationError("setup.loglvl", f"unknown log level {name!r}")
    return level


def setup_logging() -> None:
    logging.basicConfig(
        level=resolve_log_level(get_config("setup", "loglvl", default="INFO")),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def setup_sentry() -> None:
    dsn = get_config("setup", "sentry", "dsn")
    if dsn:
        try:
            sentry_sdk.init(
                dsn=dsn, environment=get_config("setup", "sentry", "environment")
            )
        except BadDsn as exc:
            raise InvalidConfigurationError("setup.sentry.dsn", str(exc)) from exc


def build_normalizer() -> AssetNameNormalizer:
    try:
        return AssetNameNormalizer(
            pattern=get_config("comparison", "hash_pattern"),
            placeholder=get_config("comparison", "hash_placeholder"),
        )
    except (re.error, TypeError) as exc:
        raise InvalidConfigurationError("comparison", str(exc)) from exc


def row_limit(name: str) -> int:
    value = get_config("comment", name)
    # bool is an int subclass
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise InvalidConfigurationError(
            f"comment.{name}", f"expected a positive integer, got {value!r}"
        )
    return value


def write_report(path: str, body: str) -> Path:
    output_path = Path(path).resolve()
    output_path.write_text(f"{body}\n", encoding="utf-8")
    return output_path


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        setup_logging()
        setup_sentry()
        normalizer = build_normalizer()
        changeset_limit = row_limit("changeset_limit")
        details_limit = row_limit("details_limit")
    except InvalidConfigurationError as exc:
        log.error(
            "Invalid configuration",
            extra=dict(setting=exc.setting, error=exc.message),
        )
        return 1

    title = args.title or get_config("comment", "title")
    try:
        base_records = load_snapshot(args.base)
        current_records = load_snapshot(args.current)
    except InvalidSnapshotError as exc:
        log.error(
            "Invalid bundle snapshot",
            extra=dict(source=exc.source, error=exc.message, errors=exc.errors),
        )
        return 1
    except OSError as exc:
        log.error(
            "Unable to read bundle snapshot",
            extra=dict(file_location=exc.filename, error=str(exc)),
        )
        return 1

    comparison = compare(base_records, current_records, normalizer=normalizer)
    body = render_comment(
        base_records,
        current_records,
        comparison,
        title=title,
        changeset_limit=changeset_limit,
        details_limit=details_limit,
    )

    try:
        output_path = write_report(args.output, body)
    except OSError as exc:
        log.error(
            "Unable to write bundle size report",
            extra=dict(file_location=args.output, error=str(exc)),
        )
        return 1

    log.info(
        "Wrote bundle size report",
        extra=dict(
            path=str(output_path),
            title=title,
            bigger=len(comparison.bigger),
            smaller=len(comparison.smaller),
            added=len(comparison.added),
            removed=len(comparison.removed),
        ),
    )
    return 0
