"""Dot-command registry and input classifier."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Optional, Tuple

from ..catalog import SchemaCatalog, SchemaLoadError
from ..cli.formatter import ResultFormatter
from ..client import ForgeClient

logger = logging.getLogger(__name__)

TABLES_QUERY = (
    "SELECT table_name FROM information_schema.tables "
    "WHERE table_schema = DATABASE()"
)
SCHEMA_QUERY = (
    "SELECT table_name, column_name, data_type FROM information_schema.columns "
    "WHERE table_schema = DATABASE() ORDER BY table_name, ordinal_position"
)


class CommandKind(Enum):
    """Built-in administrative commands."""

    TABLES = "tables"
    DESCRIBE = "describe"
    SCHEMA = "schema"
    REFRESH_SCHEMA = "refresh_schema"
    HELP = "help"


@dataclass
class CommandContext:
    """Collaborators a command may use."""

    client: ForgeClient
    schema: SchemaCatalog
    formatter: ResultFormatter


@dataclass(frozen=True)
class Command:
    """A registered dot command."""

    name: str
    description: str
    kind: CommandKind

    def execute(self, context: CommandContext, args: str = "") -> str:
        """Run the command and return display text."""
        handler = _HANDLERS[self.kind]
        return handler(context, args)


@dataclass(frozen=True)
class ParsedCommand:
    """Classifier output for one complete input unit."""

    is_special: bool
    command: Optional[Command] = None
    args: str = ""


def _run_tables(context: CommandContext, args: str) -> str:
    result = context.client.execute(TABLES_QUERY)
    return context.formatter.format_result(result)


def _run_describe(context: CommandContext, args: str) -> str:
    if not args:
        return context.formatter.style("Usage: .describe <table_name>", fg="yellow")
    result = context.client.execute(f"DESCRIBE {args}")
    return context.formatter.format_result(result)


def _run_schema(context: CommandContext, args: str) -> str:
    result = context.client.execute(SCHEMA_QUERY)
    return context.formatter.format_result(result)


def _run_refresh_schema(context: CommandContext, args: str) -> str:
    try:
        elapsed = context.schema.load_schema(context.client)
    except SchemaLoadError as exc:
        return context.formatter.format_error(f"Failed to refresh schema: {exc}")
    cache = context.schema.get_schema_cache()
    table_word = "table" if len(cache.tables) == 1 else "tables"
    return context.formatter.format_success(
        f"Schema refreshed ({len(cache.tables)} {table_word}, {elapsed:.0f}ms)"
    )


def _run_help(context: CommandContext, args: str) -> str:
    style = context.formatter.style
    lines = [style("Special Commands:", bold=True)]
    for command in COMMANDS:
        lines.append(f"  {style(command.name.ljust(15), fg='cyan')} {command.description}")
    lines.append("")
    lines.append(style("Other:", bold=True))
    others = [
        ("exit, quit", "Exit the CLI"),
        ("Ctrl+C", "Cancel current query"),
        ("Ctrl+D", "Exit the CLI"),
        ("↑/↓", "Navigate command history"),
        ("Tab", "Complete commands, tables and columns"),
    ]
    for name, description in others:
        lines.append(f"  {style(name.ljust(15), fg='cyan')} {description}")
    return "\n".join(lines)


_HANDLERS: Dict[CommandKind, Callable[[CommandContext, str], str]] = {
    CommandKind.TABLES: _run_tables,
    CommandKind.DESCRIBE: _run_describe,
    CommandKind.SCHEMA: _run_schema,
    CommandKind.REFRESH_SCHEMA: _run_refresh_schema,
    CommandKind.HELP: _run_help,
}

COMMANDS: Tuple[Command, ...] = (
    Command(".tables", "List all tables", CommandKind.TABLES),
    Command(".describe", "Describe a table (.describe table_name)", CommandKind.DESCRIBE),
    Command(".schema", "Show database schema", CommandKind.SCHEMA),
    Command(".refreshSchema", "Reload the schema used for autocompletion", CommandKind.REFRESH_SCHEMA),
    Command(".help", "Show available commands", CommandKind.HELP),
)


def get_command(name: str) -> Optional[Command]:
    """Exact, case-sensitive lookup by dot-prefixed name."""
    for command in COMMANDS:
        if command.name == name:
            return command
    return None


def command_names() -> Tuple[str, ...]:
    return tuple(command.name for command in COMMANDS)


def parse_command(text: str) -> ParsedCommand:
    """Classify input as a dot command or SQL."""
    trimmed = text.strip()
    if not trimmed.startswith("."):
        return ParsedCommand(is_special=False)

    parts = trimmed.split()
    command = get_command(parts[0])
    if command is None:
        logger.debug("Unknown dot command: %s", parts[0])
    return ParsedCommand(is_special=True, command=command, args=" ".join(parts[1:]))
