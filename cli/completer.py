"""Custom completer for Triptych CLI with file autocompletion."""

from pathlib import Path
from typing import Iterable

from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.document import Document

from cli.constants import COMMANDS
from common.constants import PIECE_FILE_SUFFIX

PIECE_COMMANDS = ("mend", "inspect")


class TriptychCompleter(Completer):
    """
    Custom completer that provides:
    - Command name completion for the first token
    - File path completion for 'break' arguments
    - Piece file completion for 'mend' and 'inspect' arguments
    """

    def get_completions(
        self, document: Document, complete_event
    ) -> Iterable[Completion]:
        """
        Generate completions based on cursor position and context.

        For the first token, completes command names.
        For break/mend/inspect arguments, completes paths relative to cwd.
        """
        text = document.text_before_cursor
        tokens = text.split()

        is_typing_new_token = text.endswith(" ") or not tokens

        if not tokens or (len(tokens) == 1 and not is_typing_new_token):
            yield from self._complete_commands(tokens[0] if tokens else "")
            return

        command = tokens[0].lower()
        if command not in ("break",) + PIECE_COMMANDS:
            return

        current_word = "" if is_typing_new_token else tokens[-1]
        if current_word.startswith("--"):
            return

        already_typed = set(tokens[1:])
        if not is_typing_new_token:
            already_typed.discard(current_word)

        yield from self._complete_paths(
            current_word,
            pieces_only=command in PIECE_COMMANDS,
            exclude=already_typed,
        )

    def _complete_commands(self, partial: str) -> Iterable[Completion]:
        """Complete command names matching the partial input."""
        partial_lower = partial.lower()
        for cmd in COMMANDS:
            if cmd.startswith(partial_lower):
                yield Completion(cmd, start_position=-len(partial))

    def _complete_paths(
        self, partial: str, pieces_only: bool, exclude: set
    ) -> Iterable[Completion]:
        """
        Complete file paths in the directory of the partial input.

        Directories are always offered so the user can descend into them;
        files are limited to piece files when pieces_only is set.
        """
        directory, slash, prefix = partial.rpartition("/")
        head = directory + slash
        if partial.startswith("/"):
            base = Path(head)
        else:
            base = Path.cwd() / directory

        if not base.is_dir():
            return

        candidates = []
        for item in base.iterdir():
            if not item.name.startswith(prefix):
                continue
            rel = head + item.name
            if item.is_dir():
                candidates.append(rel + "/")
            elif not pieces_only or item.name.endswith(PIECE_FILE_SUFFIX):
                if rel not in exclude:
                    candidates.append(rel)

        for path in sorted(candidates):
            yield Completion(path, start_position=-len(partial))
