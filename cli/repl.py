"""REPL with prompt_toolkit for user interaction."""

import os
import sys
from typing import Callable

from prompt_toolkit import PromptSession
from prompt_toolkit.history import InMemoryHistory

from common.logging_config import get_logger
from cli.commands import (
    handle_delete,
    handle_discard,
    handle_list,
    handle_token,
    handle_upload,
    handle_url,
)
from cli.completer import FileDropCompleter
from cli.constants import (
    HELP_TEXT,
    LOGO,
    PROMPT_TEXT,
    STYLE,
    WELCOME_HELP,
    WELCOME_TITLE,
)
from cli.models import (
    CommandRequest,
    DeleteCommand,
    DiscardCommand,
    ListCommand,
    TokenCommand,
    UploadCommand,
    UrlCommand,
)
from cli.parser import ParseError, parse_command

logger = get_logger(__name__)

HANDLERS: dict[type, Callable[..., str]] = {
    TokenCommand: handle_token,
    UploadCommand: handle_upload,
    ListCommand: handle_list,
    DeleteCommand: handle_delete,
    DiscardCommand: handle_discard,
    UrlCommand: handle_url,
}


def clear_screen() -> None:
    os.system("cls" if sys.platform == "win32" else "clear")


def show_welcome() -> None:
    print(LOGO)
    print(WELCOME_TITLE)
    print(WELCOME_HELP)


def dispatch_command(cmd_obj: CommandRequest) -> str:
    """Route a parsed command to its handler."""
    handler = HANDLERS.get(type(cmd_obj))
    if handler is None:
        return f"Unknown command type: {type(cmd_obj).__name__}"
    return handler(cmd_obj)


def handle_builtin(line: str) -> bool | None:
    """
    Run REPL-only commands that never reach the server.

    Returns:
        None if line is not a builtin, False to leave the loop, True to keep going
    """
    if line == "exit":
        print("Goodbye!")
        return False
    if line == "help":
        print(HELP_TEXT)
        return True
    if line == "clear":
        clear_screen()
        show_welcome()
        return True
    return None


def repl_loop() -> None:
    """Start interactive REPL with prompt_toolkit."""
    session: PromptSession = PromptSession(
        completer=FileDropCompleter(), history=InMemoryHistory(), style=STYLE
    )

    clear_screen()
    show_welcome()

    while True:
        try:
            line = session.prompt([("class:prompt", PROMPT_TEXT)]).strip()
            if not line:
                continue

            builtin = handle_builtin(line)
            if builtin is False:
                break
            if builtin:
                continue

            print(dispatch_command(parse_command(line)))

        except ParseError as e:
            print(f"Error: {e}")
        except KeyboardInterrupt:
            continue
        except EOFError:
            print("\nGoodbye!")
            break
        except ConnectionError as e:
            logger.debug(f"Command failed: {e}")
            print(f"Error: {e}")
