"""Administrative dot commands."""

from .registry import (
    COMMANDS,
    Command,
    CommandContext,
    CommandKind,
    ParsedCommand,
    command_names,
    get_command,
    parse_command,
)

__all__ = [
    "COMMANDS",
    "Command",
    "CommandContext",
    "CommandKind",
    "ParsedCommand",
    "command_names",
    "get_command",
    "parse_command",
]
