"""Persistent statement history."""

import logging
from pathlib import Path
from typing import Iterable, List, Optional

from prompt_toolkit.history import History

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_PATH = Path.home() / ".forge_sql_history"
DEFAULT_MAX_SIZE = 1000


class HistoryLog:
    """Flat, newline-delimited log of submitted statements.

    Loaded once on construction and written back wholesale by ``save``.
    I/O failures are logged and never raised.
    """

    def __init__(self, path: Optional[Path] = None, max_size: int = DEFAULT_MAX_SIZE):
        self.path = Path(path) if path is not None else DEFAULT_HISTORY_PATH
        self.max_size = max_size
        self._entries: List[str] = []
        self.load()

    def load(self) -> None:
        if not self.path.exists():
            return
        try:
            content = self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Failed to load history from %s: %s", self.path, exc)
            return
        self._entries = [line for line in content.split("\n") if line]

    def save(self) -> None:
        """Overwrite the history file with the most recent entries."""
        to_save = self._entries[-self.max_size:] if self.max_size > 0 else []
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text("\n".join(to_save), encoding="utf-8")
        except OSError as exc:
            logger.warning("Failed to save history to %s: %s", self.path, exc)

    def add(self, statement: str) -> None:
        """Record a statement unless it repeats the previous entry."""
        trimmed = statement.strip()
        if not trimmed:
            return
        if self._entries and self._entries[-1] == trimmed:
            return
        self._entries.append(trimmed)

    def entries(self) -> List[str]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)


class HistoryLogAdapter(History):
    """Exposes a ``HistoryLog`` to prompt_toolkit for arrow-key recall.

    Persistence stays with the log: prompt_toolkit's per-line appends are
    kept in memory only, while the session records complete statements.
    """

    def __init__(self, log: HistoryLog):
        self.log = log
        super().__init__()

    def load_history_strings(self) -> Iterable[str]:
        # prompt_toolkit expects newest first
        return reversed(self.log.entries())

    def store_string(self, string: str) -> None:
        pass
