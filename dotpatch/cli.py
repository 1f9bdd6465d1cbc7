"""CLI entrypoints for dotpatch commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List

from .config import ConfigError
from .errors import PatchError
from .fileio import read_document
from .logging import configure_logging
from .models import PatchResult
from .orchestrator import Orchestrator, PlanAborted
from .patching.markers import extract_regions
from .recipes import discover_recipes

EXIT_FAILURE = 1
EXIT_DRIFT = 3


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


def _add_dry_run_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the diff without writing any file.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dotpatch",
        description="Idempotently patch managed blocks in dotfiles.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write log records to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    ensure_parser = subparsers.add_parser(
        "ensure",
        help="Create or update one managed block in a file.",
    )
    _add_verbose_option(ensure_parser, suppress_default=True)
    _add_dry_run_option(ensure_parser)
    ensure_parser.add_argument("file", help="File to patch.")
    ensure_parser.add_argument(
        "--marker",
        required=True,
        help="Line that starts the managed block (matched literally, whole line).",
    )
    source = ensure_parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--line",
        dest="lines",
        action="append",
        help="Block line after the marker; repeat for multiple lines.",
    )
    source.add_argument(
        "--from-file",
        type=Path,
        help="Read block lines after the marker from this file ('-' for stdin).",
    )

    apply_parser = subparsers.add_parser(
        "apply",
        help="Run every configured recipe and block from .dotpatch.yml.",
    )
    _add_verbose_option(apply_parser, suppress_default=True)
    _add_dry_run_option(apply_parser)
    apply_parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Directory holding .dotpatch.yml, or the config file itself (defaults to current directory).",
    )
    apply_parser.add_argument(
        "--check",
        action="store_true",
        help="Exit with status 3 when any file would change; implies --dry-run.",
    )

    recipes_parser = subparsers.add_parser("recipes", help="List built-in recipes.")
    _add_verbose_option(recipes_parser, suppress_default=True)

    show_parser = subparsers.add_parser(
        "show",
        help="Print the BEGIN/END managed regions found in a file.",
    )
    _add_verbose_option(show_parser, suppress_default=True)
    show_parser.add_argument("file", help="File to inspect.")
    show_parser.add_argument(
        "--prefix",
        default="#",
        help="Comment prefix used by the region markers (for example '--' for Lua).",
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for dotpatch commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    orchestrator = Orchestrator()

    if args.command == "ensure":
        dry_run = bool(getattr(args, "dry_run", False))
        try:
            lines = _block_lines(args)
            result = orchestrator.run_ensure(args.file, args.marker, lines, dry_run=dry_run)
        except PatchError as exc:
            parser.exit(EXIT_FAILURE, f"dotpatch ensure failed: {exc}\n")
        except OSError as exc:
            parser.exit(EXIT_FAILURE, f"dotpatch ensure failed: {exc}\n")
        _print_result(result)
    elif args.command == "apply":
        check = bool(getattr(args, "check", False))
        dry_run = check or bool(getattr(args, "dry_run", False))
        try:
            outcome = orchestrator.run_apply(args.path, dry_run=dry_run)
        except PlanAborted as exc:
            for result in exc.completed:
                _print_result(result)
            parser.exit(EXIT_FAILURE, f"dotpatch apply aborted: {exc}\nRun with --verbose for more details.\n")
        except (ConfigError, PatchError, ValueError) as exc:
            parser.exit(EXIT_FAILURE, f"dotpatch apply failed: {exc}\n")
        for result in outcome.results:
            _print_result(result)
        for step in outcome.skipped:
            print(f"skipped: {step.name} ({_relativize(step.path)} not found)")
        if check and outcome.changed:
            parser.exit(EXIT_DRIFT, f"{len(outcome.changed)} file patch(es) out of date\n")
    elif args.command == "recipes":
        for recipe in discover_recipes():
            suffix = " (optional)" if recipe.optional else ""
            print(f"{recipe.name:<26} {recipe.target}{suffix}")
            if recipe.description:
                print(f"{'':<26} {recipe.description}")
    elif args.command == "show":
        try:
            document = read_document(Path(args.file).expanduser())
        except PatchError as exc:
            parser.exit(EXIT_FAILURE, f"{exc}\n")
        regions = extract_regions(document.text, prefix=args.prefix)
        if not regions:
            print("No managed regions found")
        for key, body in regions.items():
            print(f"[{key}]")
            print(body)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(EXIT_FAILURE, "Unknown command\n")


def _block_lines(args: argparse.Namespace) -> List[str]:
    if args.lines is not None:
        return list(args.lines)
    source: Path = args.from_file
    if str(source) == "-":
        text = sys.stdin.read()
    else:
        text = source.expanduser().read_text(encoding="utf-8")
    return text.rstrip("\n").splitlines()


def _print_result(result: PatchResult) -> None:
    rel_path = _relativize(result.path)
    prefix = "would be " if result.dry_run and result.status.changed else ""
    print(f"{result.label}: {prefix}{result.status.value} ({rel_path})")
    if result.dry_run and result.diff:
        print(result.diff, end="" if result.diff.endswith("\n") else "\n")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
