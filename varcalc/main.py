# Command-line entry point for the statement calculator.
#
# Picks an input reader (prompt_toolkit with history and completion for a terminal, a prompting
# readline() for a terminal with --plain, bare readline() for pipes and files), configures logging,
# runs one session and maps failures to exit statuses.

from __future__ import annotations

import argparse
import logging
import sys
from typing import Callable, List, Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.history import FileHistory
from pydantic import ValidationError

from varcalc import reserved
from varcalc.config import CalculatorConfig, load_config
from varcalc.errors import InternalError
from varcalc.session import BANNER, EXIT_CONFIG_ERROR, EXIT_INTERNAL_ERROR, Session
from varcalc.variables import VariableStore

logger = logging.getLogger(__name__)

LineReader = Callable[[], Optional[str]]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="varcalc",
        description="Interactive arithmetic calculator with named variables.",
    )
    parser.add_argument(
        "--file",
        type=str,
        help="Read statements from this file instead of standard input.",
    )
    parser.add_argument(
        "--plain",
        action="store_true",
        help="Disable prompt_toolkit line editing, history and completion.",
    )
    parser.add_argument(
        "--history-file",
        type=str,
        help="History file for interactive sessions (default: ~/.varcalc_history).",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        help="Logging level: DEBUG, INFO, WARNING, ERROR or CRITICAL (default: WARNING).",
    )
    parser.add_argument(
        "--env-file",
        type=str,
        help="Path to a .env file with VARCALC_* settings.",
    )
    parser.add_argument(
        "--no-banner",
        action="store_true",
        help="Do not print the banner in interactive sessions.",
    )
    return parser


def configure_logging(config: CalculatorConfig) -> None:
    logging.basicConfig(
        level=config.logging_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


def prompt_reader(config: CalculatorConfig, variables: VariableStore) -> LineReader:
    """Line reader backed by prompt_toolkit, completing reserved words and current variables."""
    session = PromptSession(history=FileHistory(config.history_file))

    def read_line() -> Optional[str]:
        words = list(reserved.reserved_words()) + variables.names()
        completer = WordCompleter(words, ignore_case=True)
        try:
            return session.prompt(config.prompt, completer=completer) + '\n'
        except EOFError:
            return None

    return read_line


def terminal_reader(config: CalculatorConfig) -> LineReader:
    """Plain stdin reader that shows the prompt before each line."""

    def read_line() -> str:
        print(config.prompt, end="", flush=True)
        return sys.stdin.readline()

    return read_line


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        config = load_config(
            env_file=args.env_file,
            history_file=args.history_file,
            log_level=args.log_level,
            use_prompt_toolkit=False if args.plain else None,
            show_banner=False if args.no_banner else None,
        )
    except ValidationError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR
    configure_logging(config)

    variables = VariableStore()
    input_file = None
    if args.file:
        try:
            input_file = open(args.file, 'r', encoding='utf-8')
        except OSError as e:
            print(f"Error reading {args.file}: {e}", file=sys.stderr)
            return EXIT_CONFIG_ERROR
        read_line: LineReader = input_file.readline
        interactive = False
    elif config.use_prompt_toolkit and sys.stdin.isatty():
        read_line = prompt_reader(config, variables)
        interactive = True
    elif sys.stdin.isatty():
        read_line = terminal_reader(config)
        interactive = True
    else:
        read_line = sys.stdin.readline
        interactive = False

    if interactive and config.show_banner:
        print(BANNER)
    session = Session(read_line, variables=variables, interactive=interactive)
    try:
        return session.run()
    except InternalError as e:
        logger.critical("internal error: %s", e)
        print(f"Internal error: {e}", file=sys.stderr)
        return EXIT_INTERNAL_ERROR
    except Exception as e:
        logger.exception("unexpected failure")
        print(f"Unexpected error: {e}", file=sys.stderr)
        return EXIT_INTERNAL_ERROR
    finally:
        if input_file is not None:
            input_file.close()


if __name__ == '__main__':
    raise SystemExit(main())
