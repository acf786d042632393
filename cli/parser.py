"""Command parser for CLI input."""

import glob
import shlex

from common.constants import PIECE_COUNT
from cli.models import BreakCommand, CommandRequest, InspectCommand, MendCommand, SecureModeCommand


class ParseError(Exception):
    """Raised when command parsing fails."""

    pass


def parse_command(input_line: str) -> CommandRequest:
    """Parse user input into a CommandRequest object.

    Args:
        input_line: Raw user input from REPL

    Returns:
        CommandRequest object (one of Break/Mend/Inspect/SecureMode)

    Raises:
        ParseError: If command syntax is invalid
    """
    if not input_line.strip():
        raise ParseError("Empty command")

    try:
        tokens = shlex.split(input_line)
    except ValueError as e:
        raise ParseError(f"Invalid syntax: {e}")

    if not tokens:
        raise ParseError("Empty command")

    command_name = tokens[0]

    if command_name == "break":
        return _parse_break(tokens[1:])
    elif command_name == "mend":
        return _parse_mend(tokens[1:])
    elif command_name == "inspect":
        return _parse_inspect(tokens[1:])
    elif command_name == "secure":
        return _parse_secure(tokens[1:])
    else:
        raise ParseError(f"Unknown command: {command_name}")


def _parse_break(args: list[str]) -> BreakCommand:
    """Parse 'break <file> [--secure|--plain] [--out DIR]' command."""
    secure = None
    args, output_dir = _take_option(args, "--out")

    positional = []
    for arg in args:
        if arg == "--secure":
            secure = True
        elif arg == "--plain":
            secure = False
        elif arg.startswith("--"):
            raise ParseError(f"Unknown option for break: {arg}")
        else:
            positional.append(arg)

    if len(positional) != 1:
        raise ParseError("break requires exactly 1 file")

    return BreakCommand(file_path=positional[0], secure=secure, output_dir=output_dir)


def _parse_mend(args: list[str]) -> MendCommand:
    """Parse 'mend <piece>... [--out DIR] [--overwrite]' command."""
    overwrite = False
    args, output_dir = _take_option(args, "--out")

    pieces = []
    for arg in args:
        if arg == "--overwrite":
            overwrite = True
        elif arg.startswith("--"):
            raise ParseError(f"Unknown option for mend: {arg}")
        else:
            pieces.extend(_expand(arg))

    if len(pieces) != PIECE_COUNT:
        raise ParseError(f"mend requires exactly {PIECE_COUNT} pieces, got {len(pieces)}")

    return MendCommand(piece_paths=tuple(pieces), output_dir=output_dir, overwrite=overwrite)


def _parse_inspect(args: list[str]) -> InspectCommand:
    """Parse 'inspect <piece>' command."""
    if len(args) != 1:
        raise ParseError("inspect requires exactly 1 argument: <piece>")

    return InspectCommand(piece_path=args[0])


def _parse_secure(args: list[str]) -> SecureModeCommand:
    """Parse 'secure on|off' command."""
    if len(args) != 1 or args[0] not in ("on", "off"):
        raise ParseError("secure requires exactly 1 argument: on|off")

    return SecureModeCommand(enabled=args[0] == "on")


def _take_option(args: list[str], name: str) -> tuple[list[str], str | None]:
    """Remove 'name VALUE' from args and return (remaining, VALUE)."""
    if name not in args:
        return args, None

    index = args.index(name)
    if index + 1 >= len(args):
        raise ParseError(f"{name} requires a value")

    value = args[index + 1]
    return args[:index] + args[index + 2:], value


def _expand(arg: str) -> list[str]:
    """Expand shell-style wildcards; literal paths pass through."""
    if glob.has_magic(arg):
        matches = sorted(glob.glob(arg))
        if not matches:
            raise ParseError(f"No pieces match {arg}")
        return matches
    return [arg]
