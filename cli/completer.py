"""Custom completer for the Filedrop CLI."""

from typing import Iterable

from prompt_toolkit.completion import Completer, Completion, PathCompleter
from prompt_toolkit.document import Document

from cli.constants import COMMANDS, FILE_TYPES


class FiledropCompleter(Completer):
    """
    Custom completer that provides:
    - Command name completion for the first token
    - Local path completion for 'upload' arguments
    - File type completion for the 'list' argument
    """

    def __init__(self):
        self.path_completer = PathCompleter(expanduser=True)

    def get_completions(
        self, document: Document, complete_event
    ) -> Iterable[Completion]:
        text = document.text_before_cursor
        tokens = text.split()

        is_typing_new_token = text.endswith(" ") or not tokens

        if not tokens or (len(tokens) == 1 and not is_typing_new_token):
            yield from self._complete_words(COMMANDS, tokens[0] if tokens else "")
            return

        command = tokens[0].lower()
        current_word = "" if is_typing_new_token else tokens[-1]

        if command == "upload":
            word_document = Document(current_word, len(current_word))
            yield from self.path_completer.get_completions(word_document, complete_event)
        elif command == "list":
            previous = tokens[-1] if is_typing_new_token else tokens[-2]
            if previous in ("--page", "--limit"):
                return
            typed_types = [t for t in tokens[1:] if t in FILE_TYPES and t != current_word]
            if not typed_types:
                yield from self._complete_words(FILE_TYPES, current_word)

    def _complete_words(self, words, partial: str) -> Iterable[Completion]:
        """Complete words matching the partial input."""
        partial_lower = partial.lower()
        for word in words:
            if word.startswith(partial_lower):
                yield Completion(word, start_position=-len(partial))
