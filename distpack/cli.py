"""CLI entrypoints for distpack commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import ConfigError
from .logging import configure_logging
from .orchestrator import Orchestrator, RunReport, Step


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_step_parser(
    subparsers: argparse._SubParsersAction, step: Step, help_text: str
) -> None:
    step_parser = subparsers.add_parser(step.value, help=help_text)
    _add_verbose_option(step_parser, suppress_default=True)
    step_parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the project root holding .distpack.yml (defaults to current directory).",
    )
    step_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Render and package without publishing anything.",
    )
    step_parser.add_argument(
        "-d",
        "--distribution",
        dest="distributions",
        action="append",
        default=None,
        metavar="DIST",
        help="Only process this distribution (repeatable).",
    )
    step_parser.add_argument(
        "-p",
        "--packager",
        dest="packagers",
        action="append",
        default=None,
        metavar="PACKAGER",
        help="Only run this packager (repeatable).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="distpack",
        description="Render, build and publish package manager packages for a release.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write the run log to this file, e.g. out/distpack/distpack.log.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    _add_step_parser(
        subparsers, Step.PREPARE, "Render packager templates into out/distpack."
    )
    _add_step_parser(
        subparsers, Step.PACKAGE, "Build packages from the rendered templates."
    )
    _add_step_parser(
        subparsers, Step.PUBLISH, "Build and publish packages to their repositories."
    )

    serve_parser = subparsers.add_parser(
        "serve",
        help="Expose distpack operations over HTTP.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to listen on.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for distpack commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    if args.command == "serve":
        from .service import run_service

        run_service(host=args.host, port=args.port)
        return

    orchestrator = Orchestrator()
    try:
        report = orchestrator.run(
            args.path,
            args.command,
            dry_run=bool(getattr(args, "dry_run", False)),
            distributions=args.distributions,
            packagers=args.packagers,
        )
    except (FileNotFoundError, ConfigError, ValueError) as exc:
        parser.exit(1, f"{exc}\n")

    _print_report(report)
    if not report.succeeded:
        parser.exit(
            1,
            f"distpack {args.command} failed for {len(report.failures)} packager(s).\n"
            "Run with --verbose for more details.\n",
        )


def _print_report(report: RunReport) -> None:
    if not report.outcomes:
        print("Nothing to do: no enabled packagers or distributions")
        return
    suffix = " (dry-run)" if report.dry_run else ""
    for outcome in report.outcomes:
        status = "failed" if outcome.failed else outcome.state.value
        print(f"{outcome.distribution} [{outcome.packager}]: {status}{suffix}")


if __name__ == "__main__":
    main(sys.argv[1:])
