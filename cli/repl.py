"""REPL with prompt_toolkit for user interaction."""

import os
import sys
from prompt_toolkit import PromptSession
from prompt_toolkit.history import InMemoryHistory

from cli.commands import (
    handle_break,
    handle_inspect,
    handle_mend,
    handle_secure_mode,
)
from cli.completer import TriptychCompleter
from cli.constants import (
    HELP_TEXT,
    LOGO,
    PROMPT_TEXT,
    STYLE,
    WELCOME_HELP,
    WELCOME_TITLE,
)
from cli.models import (
    BreakCommand,
    InspectCommand,
    MendCommand,
    SecureModeCommand,
)
from cli.parser import ParseError, parse_command


def clear_screen() -> None:
    """Clear the terminal screen (cross-platform)."""
    if sys.platform == "win32":
        os.system("cls")
    else:
        os.system("clear")


def show_logo() -> None:
    """Display Triptych logo with ANSI colors."""
    print(LOGO)


def dispatch_command(cmd_obj) -> str:
    """Dispatch parsed command to appropriate handler."""
    if isinstance(cmd_obj, BreakCommand):
        return handle_break(cmd_obj)
    elif isinstance(cmd_obj, MendCommand):
        return handle_mend(cmd_obj)
    elif isinstance(cmd_obj, InspectCommand):
        return handle_inspect(cmd_obj)
    elif isinstance(cmd_obj, SecureModeCommand):
        return handle_secure_mode(cmd_obj)
    else:
        return f"Unknown command type: {type(cmd_obj)}"


def repl_loop() -> None:
    """Start interactive REPL with prompt_toolkit."""
    history = InMemoryHistory()
    session: PromptSession = PromptSession(
        completer=TriptychCompleter(), history=history, style=STYLE
    )

    clear_screen()
    show_logo()
    print(WELCOME_TITLE)
    print(WELCOME_HELP)

    while True:
        try:
            user_input = session.prompt([("class:prompt", PROMPT_TEXT)])

            if not user_input.strip():
                continue

            if user_input.strip() == "exit":
                print("Goodbye!")
                break

            if user_input.strip() == "help":
                print(HELP_TEXT)
                continue

            if user_input.strip() == "clear":
                clear_screen()
                show_logo()
                print(WELCOME_TITLE)
                print(WELCOME_HELP)
                continue

            cmd_obj = parse_command(user_input)
            result = dispatch_command(cmd_obj)
            print(result)

        except ParseError as e:
            print(f"Error: {e}")
        except KeyboardInterrupt:
            continue
        except EOFError:
            print("\nGoodbye!")
            break
