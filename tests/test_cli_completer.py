"""Tests for TriptychCompleter."""

import pytest

from prompt_toolkit.document import Document

from cli.completer import TriptychCompleter
from cli.constants import COMMANDS


@pytest.fixture
def completer():
    """Create a TriptychCompleter instance."""
    return TriptychCompleter()


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    """
    Create a working directory with plain files, piece files and a subdirectory.

    Returns:
        Path to the directory, which is also made the cwd
    """
    (tmp_path / "notes.txt").write_text("content")
    (tmp_path / "notes.txt.1a2b3c4d.part1of3.piece").write_bytes(b"")
    (tmp_path / "notes.txt.1a2b3c4d.part2of3.piece").write_bytes(b"")
    (tmp_path / "pieces").mkdir()
    (tmp_path / "pieces" / "x.part3of3.piece").write_bytes(b"")
    monkeypatch.chdir(tmp_path)
    return tmp_path


def get_completions_list(completer, text):
    """Helper to get list of completion texts from completer."""
    doc = Document(text, len(text))
    return [c.text for c in completer.get_completions(doc, None)]


class TestCommandCompletion:
    """Tests for command name completion."""

    def test_empty_input_shows_all_commands(self, completer):
        completions = get_completions_list(completer, "")
        assert set(COMMANDS) <= set(completions)

    def test_partial_command_filters(self, completer):
        assert get_completions_list(completer, "me") == ["mend"]

    def test_command_completion_case_insensitive(self, completer):
        assert "break" in get_completions_list(completer, "BR")


class TestPathCompletion:
    """Tests for file argument completion."""

    def test_break_offers_all_files(self, completer, workdir):
        completions = get_completions_list(completer, "break no")
        assert "notes.txt" in completions
        assert "notes.txt.1a2b3c4d.part1of3.piece" in completions

    def test_mend_offers_only_pieces_and_directories(self, completer, workdir):
        completions = get_completions_list(completer, "mend ")
        assert "notes.txt" not in completions
        assert "notes.txt.1a2b3c4d.part1of3.piece" in completions
        assert "pieces/" in completions

    def test_mend_skips_pieces_already_typed(self, completer, workdir):
        completions = get_completions_list(completer, "mend notes.txt.1a2b3c4d.part1of3.piece ")
        assert "notes.txt.1a2b3c4d.part1of3.piece" not in completions
        assert "notes.txt.1a2b3c4d.part2of3.piece" in completions

    def test_completes_inside_subdirectory(self, completer, workdir):
        assert get_completions_list(completer, "inspect pieces/") == ["pieces/x.part3of3.piece"]

    def test_absolute_paths(self, completer, workdir):
        completions = get_completions_list(completer, f"inspect {workdir}/pieces/x")
        assert completions == [f"{workdir}/pieces/x.part3of3.piece"]

    def test_no_completion_for_options(self, completer, workdir):
        assert get_completions_list(completer, "break notes.txt --") == []

    def test_no_completion_for_unknown_command(self, completer, workdir):
        assert get_completions_list(completer, "secure ") == []

    def test_missing_directory(self, completer, workdir):
        assert get_completions_list(completer, "break nowhere/") == []
