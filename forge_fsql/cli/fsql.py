"""Interactive SQL shell for a Forge SQL webtrigger."""

from __future__ import annotations

import logging
import sys
import time
from typing import Callable, Optional

import click
import yaml
from prompt_toolkit import PromptSession
from prompt_toolkit.auto_suggest import AutoSuggestFromHistory

from ..catalog import SchemaCatalog, SchemaLoadError
from ..client import ForgeClient
from ..commands import CommandContext, command_names, parse_command
from ..config import Config, ConfigError, URL_ENV_VAR, load_config
from ..utils.logging import setup_logging
from .completer import CompletionEngine, FsqlCompleter
from .formatter import ResultFormatter
from .history import HistoryLog, HistoryLogAdapter
from .session import ActionKind, SessionState

logger = logging.getLogger(__name__)

UNKNOWN_COMMAND = "Unknown command. Type .help for available commands"
CANCELLED_NOTICE = "Multi-line input cancelled"
EXIT_HINT = "(Use .exit, exit, or Ctrl+D to quit)"


class FsqlRepl:
    """Interactive loop with full terminal support."""

    def __init__(
        self,
        client: ForgeClient,
        schema: SchemaCatalog,
        history: HistoryLog,
        formatter: ResultFormatter,
        emit: Callable[[str], None] = click.echo,
        session=None,
    ):
        self.client = client
        self.schema = schema
        self.history = history
        self.formatter = formatter
        self.emit = emit
        self.state = SessionState()
        self.context = CommandContext(client=client, schema=schema, formatter=formatter)
        self.completion_engine = CompletionEngine(schema, command_names())
        self.session = session or self._create_session()

    def _create_session(self) -> PromptSession:
        """Create prompt session backed by the persistent history log."""
        return PromptSession(
            history=HistoryLogAdapter(self.history),
            auto_suggest=AutoSuggestFromHistory(),
            completer=FsqlCompleter(self.completion_engine),
            complete_while_typing=False,
        )

    def run(self) -> None:
        while True:
            try:
                line = self.session.prompt(self.state.prompt)
            except KeyboardInterrupt:
                self._cancel_input()
                continue
            except EOFError:
                break

            action = self.state.handle_line(line)
            if action.kind is ActionKind.EXIT:
                break
            if action.kind is ActionKind.DISPATCH:
                self.dispatch(action.text)
        self.shutdown()

    def _cancel_input(self) -> None:
        if self.state.cancel():
            self.emit("\n" + self.formatter.style(CANCELLED_NOTICE, fg="yellow"))
        else:
            self.emit("\n" + self.formatter.style(EXIT_HINT, fg="bright_black"))

    def dispatch(self, text: str) -> None:
        """Record, classify and run one complete input unit."""
        self.history.add(text)
        try:
            self._dispatch(text)
        except Exception as exc:
            logger.exception("Dispatch failed")
            self.emit(self.formatter.format_error(f"unexpected error: {exc}"))

    def _dispatch(self, text: str) -> None:
        parsed = parse_command(text)
        if parsed.is_special:
            if parsed.command is None:
                self.emit(self.formatter.style(UNKNOWN_COMMAND, fg="red"))
                return
            self.emit(parsed.command.execute(self.context, parsed.args))
            return

        result = self.client.execute(text)
        self.emit(self.formatter.format_result(result))
        if result.ok and result.query_time:
            self.emit(self.formatter.format_query_time(result.query_time))

    def shutdown(self) -> None:
        self.history.save()
        self.emit(self.formatter.style("\nGoodbye!", fg="bright_black"))


def connect_and_preload(
    client: ForgeClient,
    schema: SchemaCatalog,
    formatter: ResultFormatter,
    skip_schema_load: bool,
    emit: Callable[..., None] = click.echo,
) -> bool:
    """Probe the endpoint and warm the schema cache; returns connectivity."""
    emit(formatter.style("Connecting ... ", fg="bright_black"), nl=False)
    start = time.monotonic()
    connected = client.test_connection()
    elapsed = (time.monotonic() - start) * 1000

    if not connected:
        emit(formatter.style("✗ Connection failed", fg="red"))
        emit(formatter.style(f"Check your {URL_ENV_VAR} configuration", fg="yellow"))
        return False

    emit(formatter.style(f"✓ Connected ({elapsed:.0f}ms)", fg="green"))
    if skip_schema_load:
        return True

    emit(
        formatter.style(
            "Loading schema for autocompletions "
            "(--skip-schema-load bypasses this) ... ",
            fg="bright_black",
        ),
        nl=False,
    )
    try:
        load_ms = schema.load_schema(client)
    except SchemaLoadError:
        emit(formatter.style("⚠ Failed (autocompletion unavailable)", fg="bright_black"))
    else:
        emit(formatter.style(f"✓ Done ({load_ms:.0f}ms)", fg="green"))
    return True


def _load_config_bundle(config_path: Optional[str]) -> Config:
    if not config_path:
        return Config()
    try:
        return load_config(config_path)
    except (ConfigError, yaml.YAMLError) as exc:
        raise click.ClickException(f"Invalid config file: {exc}")


@click.command()
@click.option(
    "--url",
    envvar=URL_ENV_VAR,
    help=f"Webtrigger URL. Defaults to ${URL_ENV_VAR}.",
)
@click.option(
    "--timeout",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Request timeout in seconds (default 30).",
)
@click.option(
    "--skip-schema-load",
    is_flag=True,
    help="Do not preload the schema used for autocompletion.",
)
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, readable=True),
    help="Path to YAML config file.",
)
@click.option("--history-file", type=click.Path(dir_okay=False), help="History file path.")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Logging level (default WARNING).",
)
@click.option("--log-file", type=click.Path(dir_okay=False), help="Also write logs to this file.")
def cli(
    url: Optional[str],
    timeout: Optional[float],
    skip_schema_load: bool,
    config_path: Optional[str],
    history_file: Optional[str],
    log_level: Optional[str],
    log_file: Optional[str],
) -> None:
    """Entry point for the fsql CLI."""
    config = _load_config_bundle(config_path).resolve(
        url=url,
        timeout=timeout,
        skip_schema_load=skip_schema_load,
        history_file=history_file,
        log_level=log_level,
        log_file=log_file,
    )
    setup_logging(config.logging.level, config.logging.structured, config.logging.file)

    formatter = ResultFormatter(color=sys.stdout.isatty())
    if not config.endpoint.url:
        click.echo(formatter.format_error(f"{URL_ENV_VAR} not configured"), err=True)
        click.echo("Pass --url or set it in the environment or config file.", err=True)
        sys.exit(1)

    client = ForgeClient(config.endpoint.url, timeout=config.endpoint.timeout)
    schema = SchemaCatalog()
    history = HistoryLog(
        config.session.history_path(), max_size=config.session.history_size
    )

    click.echo(formatter.style("Forge FSQL CLI", fg="blue", bold=True))
    click.echo("")
    click.echo("Type .help for commands, exit to quit")
    click.echo("")
    connect_and_preload(client, schema, formatter, config.session.skip_schema_load)
    click.echo("")

    with client:
        repl = FsqlRepl(client, schema, history, formatter)
        repl.run()


if __name__ == "__main__":
    cli()
