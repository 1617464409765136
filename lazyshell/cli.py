#!/usr/bin/env python3

import argparse
import argcomplete
import logging
import os
import sys

from abc import ABC, abstractmethod
from dataclasses import dataclass
from functools import wraps
from typing import Callable, List, Optional

from .ai import EditorState, LLMClient, LLMError, QueryAborted, complete, explain, get_provider, read_query
from .config import Config, ConfigError, load_config
from .shell import render_zsh_script


_available_commands: List["Command"] = []
_config: Optional[Config] = None


class Argument(ABC):
    def __init__(self, help: str, kwargs: Optional[dict] = None):
        self.help = help
        self.kwargs = kwargs if kwargs is not None else {}

    @abstractmethod
    def add_to_parser(self, parser: argparse.ArgumentParser):
        pass


class OptionalArg(Argument):
    def __init__(
        self,
        long_option: str,
        help: str,
        kwargs: Optional[dict] = None,
    ):
        super().__init__(help=help, kwargs=kwargs)
        self.long_option = long_option

    def add_to_parser(self, parser: argparse.ArgumentParser):
        parser.add_argument(self.long_option, help=self.help, **self.kwargs)


@dataclass
class Command:
    name: str
    func: Callable
    help: str
    description: str
    args: List[Argument]


def _load_config():
    global _config
    if _config is None:
        try:
            _config = load_config()
        except ConfigError as e:
            print(str(e), file=sys.stderr)
            sys.exit(1)


def command(args: List[Argument]):
    def decorator(func):
        if not func.__name__.startswith("handle_"):
            raise ValueError("Command handler must start with 'handle_'.")

        if not func.__doc__:
            raise ValueError(
                f"Command handler '{func.__name__}' must have a docstring for its help text."
            )

        @wraps(func)
        def wrapper(*args, **kwargs):
            _load_config()
            return func(*args, **kwargs)

        command_name = func.__name__.split("_")[1]
        # Use the first line of the docstring as the help text and
        # the full docstring for the detailed description.
        help_text = func.__doc__.strip().split("\n")[0]
        _available_commands.append(
            Command(command_name, wrapper, help_text, func.__doc__, args)
        )
        return wrapper

    return decorator


##############################################################################


@command(
    [
        OptionalArg(
            long_option="--buffer",
            help="The current content of the command line.",
            kwargs={"default": ""},
        ),
        OptionalArg(
            long_option="--cursor",
            help="The cursor offset within the command line.",
            kwargs={"type": int, "default": None},
        ),
        OptionalArg(
            long_option="--query",
            help="What the command should do. Asked interactively when omitted.",
        ),
    ]
)
def handle_complete(args):
    """Generate a command from a natural language query, rewriting the buffer if it is not empty.
    The new command line is printed on stdout. Nothing is printed when the buffer must stay as it was.
    """
    cursor = args.cursor if args.cursor is not None else len(args.buffer)
    state = EditorState(buffer=args.buffer, cursor=cursor)

    query = args.query
    if query is None:
        try:
            query = read_query()
        except QueryAborted:
            sys.exit(1)

    try:
        new_state = complete(_config, state, query)
    except LLMError:
        # Already reported on the status line
        sys.exit(1)

    if new_state is None:
        sys.exit(1)

    print(new_state.buffer)


@command(
    [
        OptionalArg(
            long_option="--buffer",
            help="The command line to explain.",
            kwargs={"required": True},
        )
    ]
)
def handle_explain(args):
    """Explain what the command line does, printed as a shell comment."""
    try:
        explanation = explain(_config, EditorState(buffer=args.buffer, cursor=len(args.buffer)))
    except LLMError:
        sys.exit(1)

    print(explanation)


@command([])
def handle_check(args):
    """Check that a request can be sent: API key set and curl or wget installed.
    Exits with status 1, after printing what is missing, when it cannot.
    """
    try:
        LLMClient(_config).preflight()
    except LLMError:
        sys.exit(1)


@command([])
def handle_toggle(args):
    """Switch to the next LLM provider and print its name.
    The zsh integration stores the printed name in LZSH_LLM_PROVIDER for the rest of the session.
    """
    new_config = _config.toggled()
    print(f"Switched to {new_config.label} API", file=sys.stderr)
    print(new_config.provider)


@command([])
def handle_init(args):
    """Print the zsh integration script. Load it with: eval "$(lazyshell init)"."""
    try:
        provider = get_provider(_config.provider)
    except LLMError as e:
        print(str(e), file=sys.stderr)
        sys.exit(1)

    key_env = provider.config.api_key_env
    if not os.environ.get(key_env):
        print(f"Warning: {key_env} is not set", file=sys.stderr)
        print(
            f"Get your API key from {provider.config.api_key_url} and then run:",
            file=sys.stderr,
        )
        print(f"export {key_env}=<your API key>", file=sys.stderr)

    print(render_zsh_script(provider.name))


##############################################################################


def run_cli(argv: Optional[List[str]] = None):
    """
    Parses command-line arguments and executes the corresponding command.

    This function is designed to be testable by allowing arguments to be passed
    directly.

    Args:
        argv: A list of strings representing the command-line arguments.
              If None, `sys.argv[1:]` is used automatically by `parse_args`.
    """
    parser = argparse.ArgumentParser(
        description="LLM powered command completion and explanation for zsh."
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log debug information to stderr."
    )
    subparsers = parser.add_subparsers(
        dest="command", help="Sub-commands", required=True
    )

    # Sort commands alphabetically for consistent --help output.
    _available_commands.sort(key=lambda cmd: cmd.name)

    for command in _available_commands:
        subparser = subparsers.add_parser(
            command.name, help=command.help, description=command.description
        )
        for arg in command.args:
            arg.add_to_parser(subparser)
        subparser.set_defaults(func=command.func)

    # Enable argument auto-completion.
    argcomplete.autocomplete(parser)

    args = parser.parse_args(argv)

    # stdout carries the result, so logs always go to stderr.
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        args.func(args)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def main():
    """The main entry point for the command-line interface, called by the `lazyshell` script."""
    run_cli()


if __name__ == "__main__":
    main()
