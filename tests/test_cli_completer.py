"""Tests for FiledropCompleter."""

import pytest

from prompt_toolkit.document import Document

from cli.completer import FiledropCompleter
from cli.constants import COMMANDS, FILE_TYPES


@pytest.fixture
def completer():
    """Create a FiledropCompleter instance."""
    return FiledropCompleter()


def get_completions_list(completer, text):
    """Helper to get list of completion texts from completer."""
    doc = Document(text, len(text))
    return [c.text for c in completer.get_completions(doc, None)]


def test_empty_input_lists_all_commands(completer):
    assert get_completions_list(completer, "") == COMMANDS


def test_partial_command(completer):
    assert get_completions_list(completer, "do") == ["download"]
    assert get_completions_list(completer, "UP") == ["upload"]


def test_list_type_completion(completer):
    assert get_completions_list(completer, "list ") == list(FILE_TYPES)
    assert get_completions_list(completer, "list ima") == ["image"]


def test_list_type_completed_once(completer):
    assert get_completions_list(completer, "list image ") == []


def test_no_type_completion_after_paging_option(completer):
    assert get_completions_list(completer, "list --page ") == []


def test_upload_completes_local_paths(completer, tmp_path, monkeypatch):
    (tmp_path / "photo.png").write_text("content")
    (tmp_path / "notes.txt").write_text("content")
    monkeypatch.chdir(tmp_path)

    assert get_completions_list(completer, "upload pho") == ["to.png"]
    assert get_completions_list(completer, "upload photo.png no") == ["tes.txt"]


def test_other_commands_have_no_argument_completion(completer):
    assert get_completions_list(completer, "delete ") == []
    assert get_completions_list(completer, "health ") == []
