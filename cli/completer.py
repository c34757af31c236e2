"""Custom completer for FileDrop CLI with local path autocompletion."""

import os
from pathlib import Path
from typing import Iterable

from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.document import Document

from cli.constants import COMMANDS


class FileDropCompleter(Completer):
    """
    Custom completer that provides:
    - Command name completion for the first token
    - Local file path completion for the 'upload' command
    """

    def get_completions(
        self, document: Document, complete_event
    ) -> Iterable[Completion]:
        text = document.text_before_cursor
        tokens = text.split()

        is_typing_new_token = text.endswith(" ") or not tokens

        if not tokens or (len(tokens) == 1 and not is_typing_new_token):
            yield from self._complete_commands(tokens[0] if tokens else "")
            return

        if tokens[0].lower() != "upload":
            return

        current_word = "" if is_typing_new_token else tokens[-1]
        yield from self._complete_paths(current_word)

    def _complete_commands(self, partial: str) -> Iterable[Completion]:
        """Complete command names matching the partial input."""
        partial_lower = partial.lower()
        for cmd in COMMANDS:
            if cmd.startswith(partial_lower):
                yield Completion(cmd, start_position=-len(partial))

    def _complete_paths(self, partial: str) -> Iterable[Completion]:
        """
        Complete local paths. Directories are suggested with a trailing
        separator so completion can continue inside them.
        """
        expanded = os.path.expanduser(partial)
        directory, prefix = os.path.split(expanded)
        search_dir = Path(directory) if directory else Path.cwd()

        if not search_dir.is_dir():
            return

        try:
            entries = sorted(search_dir.iterdir(), key=lambda p: p.name)
        except OSError:
            return

        typed_dir = partial[: len(partial) - len(prefix)]
        for entry in entries:
            if not entry.name.startswith(prefix):
                continue
            if entry.name.startswith(".") and not prefix.startswith("."):
                continue
            suffix = os.sep if entry.is_dir() else ""
            yield Completion(
                f"{typed_dir}{entry.name}{suffix}",
                start_position=-len(partial),
                display=f"{entry.name}{suffix}",
            )
