"""CLI entrypoints for nanistats commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .logging import configure_logging
from .report import ReportRenderer, render_json
from .session import StatsSession, WorkspaceUnavailable


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


def _add_output_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print results as JSON instead of a text report.",
    )
    parser.add_argument(
        "--unique-words",
        action="store_true",
        help="List de-duplicated words instead of every occurrence.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nanistats",
        description="Count dialogue characters, words and speakers in Naninovel scripts.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write log records to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    scan_parser = subparsers.add_parser(
        "scan",
        help="Aggregate statistics for every script under a directory.",
    )
    _add_verbose_option(scan_parser, suppress_default=True)
    _add_output_options(scan_parser)
    scan_parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the workspace root (defaults to current directory).",
    )
    scan_parser.add_argument(
        "--exclude",
        action="append",
        default=[],
        metavar="NAME",
        help="Directory name to skip; may be repeated.",
    )
    scan_parser.add_argument(
        "--no-cache",
        action="store_true",
        help="Ignore the per-file stats cache for this run.",
    )
    scan_parser.add_argument(
        "--summary",
        action="store_true",
        help="Print totals only, without the per-directory tree.",
    )

    file_parser = subparsers.add_parser(
        "file",
        help="Show statistics for a single script file.",
    )
    _add_verbose_option(file_parser, suppress_default=True)
    _add_output_options(file_parser)
    file_parser.add_argument("path", help="Path to the script file.")

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP service.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to listen on.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for nanistats commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)
    renderer = ReportRenderer()

    if args.command == "scan":
        root = Path(args.path).expanduser().resolve()
        session = StatsSession(
            root,
            exclude_dirs=args.exclude,
            use_cache=False if args.no_cache else None,
        )
        try:
            snapshot = session.refresh()
        except WorkspaceUnavailable:
            sys.stdout.write(renderer.render_unavailable(str(root)))
            parser.exit(1)
        if snapshot is None:  # pragma: no cover - single-threaded CLI never supersedes
            parser.exit(1, "nanistats scan was superseded\n")
        if args.json:
            print(render_json(snapshot.tree, unique_words=args.unique_words))
        else:
            sys.stdout.write(
                renderer.render_tree(
                    _relativize(root),
                    snapshot.tree,
                    unique_words=args.unique_words,
                    show_tree=not args.summary,
                )
            )
    elif args.command == "file":
        target = Path(args.path).expanduser().resolve()
        if not target.is_file():
            parser.exit(1, f"Script not found: {args.path}\n")
        session = StatsSession(target.parent)
        stats = session.document_stats(target)
        if args.json:
            print(render_json(stats, unique_words=args.unique_words))
        else:
            sys.stdout.write(
                renderer.render_file(_relativize(target), stats, unique_words=args.unique_words)
            )
    elif args.command == "serve":
        from .service import run_service

        run_service(host=args.host, port=args.port)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd())) or "."
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
