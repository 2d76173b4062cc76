"""
Command-line entry point: reads commands from files or stdin.
"""

import argparse
import sys
from typing import Iterable, List, Optional, TextIO

from .commands import CommandDispatcher
from .config import LOG_LEVELS, get_config
from .exceptions import CommandError
from .logging import get_logger, setup_logging


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="simpledb",
        description="In-memory database with nested transactions.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "files",
        nargs="*",
        metavar="FILE",
        help="Files with one command per line; reads stdin if omitted ('-' is stdin).",
    )
    parser.add_argument(
        "--echo",
        action="store_true",
        default=None,
        help="Print each command before its output.",
    )
    parser.add_argument(
        "--log-level",
        type=str.lower,
        choices=LOG_LEVELS,
        default=None,
        help="Logging level.",
    )
    parser.add_argument(
        "--log-format",
        choices=["console", "json"],
        default=None,
        help="Log renderer.",
    )
    parser.add_argument(
        "--prompt",
        action="store_true",
        help="Show a prompt when reading from an interactive terminal.",
    )
    return parser


def _interactive_lines(stream: TextIO, out: TextIO) -> Iterable[str]:
    while True:
        out.write("> ")
        out.flush()
        line = stream.readline()
        if not line:
            return
        yield line


def run_stream(
    dispatcher: CommandDispatcher, lines: Iterable[str], out: TextIO, err: TextIO
) -> int:
    """
    Feed lines to the dispatcher, printing output as it is produced.

    Returns:
        The number of lines that failed
    """
    log = get_logger("cli")
    failures = 0

    def report(error: CommandError) -> None:
        nonlocal failures
        failures += 1
        log.warning("command_failed", line=error.line, error=str(error))
        print(f"ERROR: {error}", file=err)

    for output in dispatcher.run(lines, on_error=report):
        print(output, file=out)

    return failures


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point."""
    args = build_parser().parse_args(argv)
    config = get_config()
    setup_logging(level=args.log_level, log_format=args.log_format)

    dispatcher = CommandDispatcher(
        null_token=config.null_token,
        no_transaction_token=config.no_transaction_token,
        result_prefix=config.result_prefix,
        echo=config.echo_commands if args.echo is None else args.echo,
    )

    failures = 0
    for path in args.files or ["-"]:
        if dispatcher.finished:
            break
        if path == "-":
            if args.prompt and sys.stdin.isatty():
                lines = _interactive_lines(sys.stdin, sys.stdout)
            else:
                lines = sys.stdin
            failures += run_stream(dispatcher, lines, sys.stdout, sys.stderr)
            continue
        # lines are decoded lazily, so read errors surface mid-stream
        try:
            with open(path, encoding="utf-8") as stream:
                failures += run_stream(dispatcher, stream, sys.stdout, sys.stderr)
        except FileNotFoundError:
            print(f"ERROR: file not found: {path}", file=sys.stderr)
            return 2
        except UnicodeDecodeError as e:
            get_logger("cli").error("file_unreadable", path=path, error=str(e))
            print(f"ERROR: {path} is not valid UTF-8: {e.reason}", file=sys.stderr)
            return 2
        except OSError as e:
            get_logger("cli").error("file_unreadable", path=path, error=str(e))
            print(f"ERROR: cannot read {path}: {e.strerror or e}", file=sys.stderr)
            return 2

    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
