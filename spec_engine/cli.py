"""CLI entry point for running spec suites."""

import argparse
import asyncio
import json
import logging
import sys
from collections.abc import Sequence
from typing import Any

from spec_engine.discovery import find_suites
from spec_engine.errors import FATAL_ERRORS, SpecEngineError
from spec_engine.models.config import RunConfig
from spec_engine.reporters.base import DispatchReporter
from spec_engine.reporters.json_reporter import JsonReporter
from spec_engine.reporters.loading import load_reporter_manifest
from spec_engine.reporters.log_reporter import STATUS_SYMBOLS
from spec_engine.suite import Suite


def log_results_summary(log: logging.Logger, summary: dict[str, Any]) -> None:
    """Log a formatted summary of test results."""
    log.info("=" * 80)
    log.info("Test Results Summary:")
    log.info("=" * 80)

    for result in summary["results"]:
        symbol = STATUS_SYMBOLS.get(result["status"], "?")
        log.info(
            "%s %s: %s (%dms)",
            symbol,
            result["test"],
            result["status"],
            result["duration_ms"],
        )
        if result["message"]:
            log.info("  Message: %s", result["message"])

    log.info(
        "Total: %d, succeeded: %d, failed: %d, pending: %d, canceled: %d, "
        "ignored: %d",
        summary["total"],
        summary["succeeded"],
        summary["failed"],
        summary["pending"],
        summary["canceled"],
        summary["ignored"],
    )


def build_config(
    config_json: str | None,
    include: Sequence[str] = (),
    exclude: Sequence[str] = (),
    test_names: Sequence[str] = (),
    parallel: bool = False,
    max_concurrency: int | None = None,
    stop_on_failure: bool = False,
) -> RunConfig:
    """Combine the `--config` JSON with the individual flags; flags win."""
    base = RunConfig.model_validate_json(config_json) if config_json else RunConfig()

    overrides: dict[str, Any] = {}
    if include:
        overrides["include_tags"] = frozenset(include)
    if exclude:
        overrides["exclude_tags"] = base.exclude_tags | frozenset(exclude)
    if test_names:
        overrides["test_names"] = frozenset(test_names)
    if parallel:
        overrides["parallel"] = True
    if max_concurrency is not None:
        overrides["max_concurrency"] = max_concurrency
    if stop_on_failure:
        overrides["stop_on_failure"] = True

    return RunConfig.model_validate({**dict(base), **overrides})


async def run(
    targets: Sequence[str],
    config: RunConfig,
    reporter_key: str = "logging",
) -> int:
    """Run the suites named by `targets` and return the exit code."""
    log = logging.getLogger("spec_engine")

    log.info("Loading reporter: %s", reporter_key)
    manifest = load_reporter_manifest(reporter_key)
    results = JsonReporter()
    reporter = DispatchReporter(reporters=[manifest.reporter_factory(), results])

    suite_classes: list[type[Suite]] = []
    for target in targets:
        suite_classes.extend(find_suites(target))

    log.info("Running %d suite(s)...", len(suite_classes))

    construction_failed = False
    for suite_cls in suite_classes:
        try:
            suite = suite_cls()
        except SpecEngineError as e:
            log.error("Could not construct %s: %s", suite_cls.__qualname__, e)
            construction_failed = True
            continue
        try:
            await suite.run_async(reporter, config)
        except FATAL_ERRORS as e:
            log.error("Stopping after %s aborted: %r", suite.suite_id, e)
            break

    summary = results.summary()
    log_results_summary(log, summary)
    for aborted in results.aborted_suites:
        log.error("Suite aborted: %s (%s)", aborted["suite"], aborted["message"])
    print(json.dumps(summary, indent=2))

    has_failures = (
        construction_failed
        or summary["failed"] > 0
        or summary["canceled"] > 0
        or bool(results.aborted_suites)
    )
    return 1 if has_failures else 0


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Run behavior-driven spec suites")
    parser.add_argument(
        "targets",
        nargs="+",
        metavar="TARGET",
        help="Module containing suites, or module:SuiteClass",
    )
    parser.add_argument(
        "--include",
        action="append",
        default=[],
        metavar="TAG",
        help="Run only tests with this tag (repeatable)",
    )
    parser.add_argument(
        "--exclude",
        action="append",
        default=[],
        metavar="TAG",
        help="Skip tests with this tag (repeatable)",
    )
    parser.add_argument(
        "--test",
        action="append",
        default=[],
        metavar="NAME",
        help="Run only the test with this full name (repeatable)",
    )
    parser.add_argument(
        "--parallel",
        action="store_true",
        help="Run the tests of each suite concurrently",
    )
    parser.add_argument(
        "--max-concurrency",
        type=int,
        default=None,
        help="Upper bound on concurrently running tests",
    )
    parser.add_argument(
        "--stop-on-failure",
        action="store_true",
        help="Do not start further tests after the first failure",
    )
    parser.add_argument(
        "--reporter",
        default="logging",
        help="Reporter key (logging, json, recording)",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="JSON run configuration",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    config = build_config(
        args.config,
        include=args.include,
        exclude=args.exclude,
        test_names=args.test,
        parallel=args.parallel,
        max_concurrency=args.max_concurrency,
        stop_on_failure=args.stop_on_failure,
    )

    exit_code = asyncio.run(
        run(targets=args.targets, config=config, reporter_key=args.reporter)
    )
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()
