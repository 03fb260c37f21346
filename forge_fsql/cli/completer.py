"""Context-aware tab completion for the fsql prompt."""

from typing import Iterable, List, Sequence, Tuple

from prompt_toolkit.completion import Completer, Completion

from ..catalog import SchemaCatalog

TABLE_CONTEXT_WORDS = {"FROM", "JOIN", "INTO", "UPDATE", "TABLE"}


class CompletionEngine:
    """Proposes dot commands, tables and columns for a partial line.

    Reads the schema through the catalog on every call, so a refresh is
    picked up by the next completion request.
    """

    def __init__(self, schema: SchemaCatalog, command_names: Sequence[str]):
        self.schema = schema
        self.command_names = tuple(command_names)

    def complete(self, line: str) -> Tuple[List[str], str]:
        """Return ``(candidates, substring being replaced)`` for ``line``."""
        trimmed = line.lstrip()
        if not trimmed:
            return [], ""

        if trimmed.startswith("."):
            return self._complete_command(trimmed), trimmed

        words = trimmed.split()
        last_word = words[-1] if not trimmed[-1].isspace() else ""
        if not last_word:
            return [], ""

        cache = self.schema.get_schema_cache()

        if "." in last_word:
            table_part, _, column_part = last_word.rpartition(".")
            table = cache.find_table(table_part)
            if table is None:
                return [], last_word
            prefix = column_part.lower()
            matches = [
                f"{table_part}.{column}"
                for column in cache.get_columns(table)
                if column.lower().startswith(prefix)
            ]
            return matches, last_word

        previous = words[-2].upper() if len(words) > 1 else ""
        prefix = last_word.lower()
        if previous in TABLE_CONTEXT_WORDS:
            return _starting_with(cache.tables, prefix), last_word

        merged = dict.fromkeys(_starting_with(cache.tables, prefix))
        merged.update(dict.fromkeys(_starting_with(cache.all_columns, prefix)))
        return list(merged), last_word

    def _complete_command(self, typed: str) -> List[str]:
        lowered = typed.lower()
        return [name for name in self.command_names if name.lower().startswith(lowered)]


def _starting_with(names: Iterable[str], prefix: str) -> List[str]:
    return [name for name in names if name.lower().startswith(prefix)]


class FsqlCompleter(Completer):
    """prompt_toolkit adapter around ``CompletionEngine``."""

    def __init__(self, engine: CompletionEngine):
        self.engine = engine

    def get_completions(self, document, complete_event):
        candidates, substring = self.engine.complete(document.text_before_cursor)
        for candidate in candidates:
            yield Completion(candidate, start_position=-len(substring))
