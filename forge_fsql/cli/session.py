"""Multiline statement assembly for the interactive session."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

EXIT_TOKENS = ("exit", "quit", ".exit")
STATEMENT_TERMINATOR = ";"
COMMAND_PREFIX = "."

PRIMARY_PROMPT = "fsql> "
CONTINUATION_PROMPT = "      ...> "


class ActionKind(Enum):
    """What the loop should do after a line has been handled."""

    EXIT = "exit"
    PROMPT = "prompt"
    CONTINUE = "continue"
    DISPATCH = "dispatch"


@dataclass(frozen=True)
class LineAction:
    kind: ActionKind
    text: Optional[str] = None


@dataclass
class SessionState:
    """Input buffer and mode of the session.

    ``handle_line`` and ``cancel`` are the only mutators. Dot commands are
    dispatched as soon as they are typed on a fresh prompt; SQL keeps
    accumulating until a line ends with ``;``.
    """

    buffer: List[str] = field(default_factory=list)
    is_multiline: bool = False

    @property
    def prompt(self) -> str:
        return CONTINUATION_PROMPT if self.is_multiline else PRIMARY_PROMPT

    @property
    def pending_text(self) -> str:
        return "\n".join(self.buffer)

    def handle_line(self, raw: str) -> LineAction:
        line = raw.strip()

        if line in EXIT_TOKENS:
            return LineAction(ActionKind.EXIT)

        if not line:
            return LineAction(ActionKind.PROMPT)

        if not self.is_multiline:
            if line.endswith(STATEMENT_TERMINATOR) or line.startswith(COMMAND_PREFIX):
                return LineAction(ActionKind.DISPATCH, line)
            self.is_multiline = True
            self.buffer = [line]
            return LineAction(ActionKind.CONTINUE)

        self.buffer.append(line)
        if not line.endswith(STATEMENT_TERMINATOR):
            return LineAction(ActionKind.CONTINUE)

        statement = self.pending_text
        self.reset()
        return LineAction(ActionKind.DISPATCH, statement)

    def cancel(self) -> bool:
        """Discard buffered input; returns True when something was dropped."""
        was_multiline = self.is_multiline
        self.reset()
        return was_multiline

    def reset(self) -> None:
        self.buffer = []
        self.is_multiline = False
