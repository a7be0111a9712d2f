"""CLI entrypoint: check links, refs, docs and roles in a snooty docs project."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
import sys

from dotenv import load_dotenv

from rstxref.net.client import FetchError, HttpClient
from rstxref.project.config import PROJECT_CONFIG_FILENAME, ProjectConfig
from rstxref.project.documents import gather_documents
from rstxref.validation.config import CheckerSettings
from rstxref.validation.runner import LinkChecker


load_dotenv()

LOGGER = logging.getLogger(__name__)


def _split_changes(values: list[str] | None) -> list[str]:
    changes: list[str] = []
    for value in values or []:
        changes.extend(part.strip() for part in value.split(",") if part.strip())
    return changes


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=(
            "Check links, and optionally :ref:s, :doc:s and other :role:s in a docs project. "
            "Refs are checked against local anchors and intersphinx inventories, roles against "
            "the latest snooty-parser rstspec.toml, then every link is probed."
        )
    )
    parser.add_argument("--path", default=".", help="Path to the project (directory holding snooty.toml)")
    parser.add_argument("-r", "--refs", action="store_true", help="Check :ref: targets")
    parser.add_argument("-d", "--docs", action="store_true", help="Check :doc: targets")
    parser.add_argument(
        "--changes",
        action="append",
        help="Comma-separated list of files to check (repeatable); defaults to every file",
    )
    parser.add_argument("-p", "--progress", action="store_true", help="Show probe progress on stderr")
    parser.add_argument("-w", "--workers", type=int, default=None, help="Number of probe workers")
    parser.add_argument(
        "-t",
        "--throttle",
        type=int,
        default=None,
        help="Overall probes per second; each worker waits 1e9 / (throttle / workers) ns between probes",
    )
    parser.add_argument("--json", action="store_true", help="Print the run report as JSON")
    return parser.parse_args(argv)


def _print_progress(completed: int, total: int) -> None:
    sys.stderr.write(f"\rprobed {completed}/{total}")
    if completed == total:
        sys.stderr.write("\n")
    sys.stderr.flush()


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
    args = _parse_args(argv)

    root = Path(args.path).resolve()
    try:
        settings = CheckerSettings.from_env().with_overrides(workers=args.workers, throttle=args.throttle)
        project = ProjectConfig.from_path(root / PROJECT_CONFIG_FILENAME)
    except (OSError, ValueError) as exc:
        LOGGER.error("Configuration error: %s", exc)
        return 2

    documents = gather_documents(root)
    with HttpClient(timeout_seconds=settings.timeout_seconds, max_retries=settings.max_retries) as http:
        try:
            checker = LinkChecker.from_http(project, settings, http)
        except (FetchError, ValueError) as exc:
            LOGGER.error("Could not load role catalog: %s", exc)
            return 2

        report = checker.run(
            documents,
            changes=_split_changes(args.changes),
            check_refs=args.refs,
            check_docs=args.docs,
            on_progress=_print_progress if args.progress else None,
        )

    for diagnostic in report.diagnostics:
        LOGGER.error("%s", diagnostic)

    if args.json:
        print(json.dumps(report.to_dict(), ensure_ascii=True, indent=2))

    if report.ok:
        LOGGER.info("No errors found.")
        return 0
    LOGGER.error("%d errors found.", len(report.diagnostics))
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
