"""Command-line entry point for static-review."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import List

from .config import DEFAULT_CONFIG_PATH, ReviewConfig, load_config
from .context import RunContext
from .engine import Engine, RunReport
from .errors import StaticReviewError
from .result import format_summary_table
from .reviews.builtin import builtin_registry
from .status import RunStatus
from .utils import expand_paths

DEFAULT_PATHS = (".",)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Run pluggable static reviews over source files",
    )
    parser.add_argument(
        "paths",
        nargs="*",
        help="Files or directories to review (defaults to the current directory).",
    )
    parser.add_argument(
        "--review",
        "-r",
        dest="reviews",
        action="append",
        default=[],
        help="Review identifier to run (repeatable, overrides the config file).",
    )
    parser.add_argument(
        "--config",
        "-c",
        default=DEFAULT_CONFIG_PATH,
        help="Path to the YAML configuration file.",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Number of worker threads used to evaluate reviews.",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Abort the run after this many seconds.",
    )
    parser.add_argument(
        "--out",
        "--output",
        dest="output_path",
        type=str,
        default=None,
        help="Path to write the JSON report (e.g., artifacts/review.json).",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log engine and registry activity.",
    )
    return parser


def build_context(args: argparse.Namespace, config: ReviewConfig) -> RunContext:
    paths = expand_paths(args.paths or list(DEFAULT_PATHS), exclude=config.exclude)
    return RunContext.from_paths(
        paths,
        args.reviews or config.reviews,
        builtin_registry(config.options),
        workers=args.workers if args.workers is not None else config.workers,
        timeout=args.timeout if args.timeout is not None else config.timeout,
    )


def write_output(report: RunReport, output_path: str | None) -> None:
    print(format_summary_table(report))

    if output_path:
        payload = json.dumps(report.to_dict(), indent=2)
        output_file = Path(output_path)
        output_file.parent.mkdir(parents=True, exist_ok=True)
        output_file.write_text(payload, encoding="utf-8")
        print(f"\nReport written to {output_path}")


def main(argv: List[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config(args.config)
        context = build_context(args, config)
    except StaticReviewError as exc:
        print(f"Error: {exc}")
        return RunStatus.ERRORED.exit_code

    report = Engine(context).run()
    write_output(report, args.output_path)
    return report.exit_code


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
