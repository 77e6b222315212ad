"""
Main CLI interface for eventlog-checker.

The ``check`` command is the monitoring plugin: it prints one status line and
exits with the conventional plugin exit code. The remaining commands are for
operators inspecting logs and persisted offsets.
"""

import sys
from pathlib import Path
from typing import Optional

import click
from loguru import logger
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .core.check import EventLogCheck
from .core.log_source import create_log_source
from .core.resolver import create_message_resolver
from .exceptions import ConfigurationError, EventLogCheckError
from .models.query import LogQuery
from .models.reports import CheckResult, CheckStatus
from .utils.config import AppConfig, ConfigManager
from .utils.helpers import FormatHelper, StateFileHelper

# Initialize rich console
console = Console()

PROG_NAME = "check-windows-eventlog"
DEFAULT_CHECK_NAME = "Event Log"


def setup_logging(app_config: AppConfig, verbose: bool = False) -> None:
    """Setup logging configuration."""
    log_config = app_config.logging
    level = "DEBUG" if verbose else log_config.level

    # Remove default logger
    logger.remove()

    # Plugin output goes to stdout, so logs stay on stderr
    logger.add(
        sys.stderr,
        level=level,
        format=log_config.format,
    )

    # Add file logging if configured
    if log_config.file_path:
        log_path = Path(log_config.file_path)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_path,
            level=level,
            format=log_config.format,
            rotation=log_config.rotation,
            retention=log_config.retention
        )


def configured_check_name(ctx: Optional[click.Context]) -> str:
    """Check name from the loaded configuration, if it got that far."""
    if ctx is not None:
        config_manager = (ctx.find_root().obj or {}).get('config_manager')
        if config_manager is not None:
            return config_manager.config.check_name
    return DEFAULT_CHECK_NAME


def format_unknown(name: str, message: str) -> str:
    return CheckResult(name=name, status=CheckStatus.UNKNOWN, message=message).format()


class UnknownCheckError(click.ClickException):
    """Failure before any log is scanned, reported as UNKNOWN."""

    exit_code = CheckStatus.UNKNOWN.exit_code

    def show(self, file=None):
        # Configuration did not load, so the configured name is unknown
        click.echo(format_unknown(DEFAULT_CHECK_NAME, self.format_message()))


class DefaultCommandGroup(click.Group):
    """Group that runs ``check`` when no command is named."""

    default_command = 'check'

    def parse_args(self, ctx, args):
        # Skip group options to find where a command name would be
        index = 0
        while index < len(args):
            if args[index] == '--config':
                index += 2
            elif args[index].startswith('--config='):
                index += 1
            else:
                break
        if index == len(args) or (index < len(args) and args[index] not in self.commands
                                  and args[index] not in ctx.help_option_names):
            args = args[:index] + [self.default_command] + args[index:]
        return super().parse_args(ctx, args)


def emit_result(ctx: click.Context, result: CheckResult) -> None:
    """Print the plugin line and exit with the matching code."""
    click.echo(result.format().rstrip("\n"))
    ctx.exit(result.exit_code)


@click.group(cls=DefaultCommandGroup)
@click.option('--config', 'config_path', type=click.Path(dir_okay=False), help='Configuration file path (YAML or JSON)')
@click.pass_context
def cli(ctx, config_path):
    """
    eventlog-checker - Windows Event Log monitoring check.

    Counts warnings and errors written to Windows event logs since the last run.
    Without a command, the options are passed to ``check``, so
    `check-windows-eventlog --log System` and
    `check-windows-eventlog check --log System` are equivalent.
    """
    ctx.ensure_object(dict)

    try:
        config_manager = ConfigManager(config_path)
    except ConfigurationError as e:
        raise UnknownCheckError(str(e)) from e

    ctx.obj['config_manager'] = config_manager
    setup_logging(config_manager.config)


@cli.command()
@click.option('--log', help='Event log names (comma separated)')
@click.option('--type', 'event_type', help='Event types (comma separated)')
@click.option('--source-pattern', help='Event source (regexp pattern)')
@click.option('--source-exclude', help='Event source excluded (regexp pattern)')
@click.option('--message-pattern', help='Message pattern (regexp pattern)')
@click.option('--message-exclude', help='Message pattern excluded (regexp pattern)')
@click.option('--event-id', help='Event IDs (comma separated, N, N-M or !N)')
@click.option('--warning-over', '-w', type=int, default=0, help='Trigger a warning if matched lines is over a number')
@click.option('--critical-over', '-c', type=int, default=0, help='Trigger a critical if matched lines is over a number')
@click.option('--return', '-r', 'return_content', is_flag=True, help='Return matched lines')
@click.option('--state-dir', '-s', metavar='DIR', help='Dir to keep state files under')
@click.option('--no-state', is_flag=True, help="Don't use state file and read whole logs")
@click.option('--fail-first', is_flag=True, help='Count errors on first run')
@click.option('--verbose', is_flag=True, help='Verbose output')
@click.pass_context
def check(ctx, log, event_type, source_pattern, source_exclude, message_pattern, message_exclude,
          event_id, warning_over, critical_over, return_content, state_dir, no_state, fail_first, verbose):
    """Check event logs for new warnings and errors."""

    config_manager = ctx.obj['config_manager']
    app_config = config_manager.config
    if verbose:
        setup_logging(app_config, verbose=True)

    # State files are keyed on the exact arguments given
    orig_args = ctx.obj.get('argv')
    if orig_args is None:
        orig_args = sys.argv[1:]

    try:
        query = LogQuery.from_options(
            state_dir=config_manager.get_state_dir(state_dir),
            log=log,
            type=event_type,
            source_pattern=source_pattern,
            source_exclude=source_exclude,
            message_pattern=message_pattern,
            message_exclude=message_exclude,
            event_id=event_id,
            warning_over=warning_over,
            critical_over=critical_over,
            return_content=return_content,
            no_state=no_state,
            fail_first=fail_first,
            verbose=verbose,
            orig_args=orig_args,
        )
    except ConfigurationError as e:
        logger.error(f"Invalid configuration: {e}")
        result = CheckResult(name=app_config.check_name, status=CheckStatus.UNKNOWN, message=str(e))
    else:
        logger.debug(f"Checking logs {', '.join(query.log_names)} with state in {query.state_dir}")
        result = EventLogCheck(
            query,
            source=create_log_source(),
            resolver=create_message_resolver(),
            name=app_config.check_name,
        ).run()
    emit_result(ctx, result)


@cli.command()
@click.option('--log', '-l', 'log_name', default='Application', help='Windows log name')
def log_stats(log_name):
    """Show record bounds for a Windows event log."""

    try:
        with create_log_source().open(log_name) as log:
            oldest, count = log.bounds()
    except EventLogCheckError as e:
        logger.error(f"Error getting log statistics: {e}")
        console.print(f"[red]✗[/red] Error getting log statistics: {e}")
        sys.exit(1)

    table = Table(title=f"{log_name} Log Statistics")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="white")

    table.add_row("Log Name", log_name)
    table.add_row("Oldest Record", FormatHelper.format_number(oldest))
    table.add_row("Record Count", FormatHelper.format_number(count))
    table.add_row("Newest Record", FormatHelper.format_number(oldest + count - 1) if count else "N/A")

    console.print(table)


@cli.command()
@click.option('--state-dir', '-s', metavar='DIR', help='Dir holding state files')
@click.pass_context
def state_show(ctx, state_dir):
    """List persisted offsets."""

    config_manager = ctx.obj['config_manager']
    directory = config_manager.get_state_dir(state_dir)
    entries = StateFileHelper.list_state_files(directory)

    if not entries:
        console.print(f"[yellow]⚠[/yellow] No state files in {directory}")
        return

    table = Table(title=f"State files in {directory}")
    table.add_column("State File", style="cyan")
    table.add_column("Offset", style="green")
    table.add_column("Modified", style="yellow")

    for entry in entries:
        table.add_row(
            FormatHelper.truncate_string(entry['file'], 80),
            entry['offset'] if entry['offset'] is not None else "[red]invalid[/red]",
            entry['modified'],
        )

    console.print(table)


@cli.command()
def version():
    """Show version information."""

    from . import __version__, __author__

    console.print(Panel.fit(
        f"[bold blue]eventlog-checker[/bold blue]\n\n"
        f"Version: {__version__}\n"
        f"Author: {__author__}\n"
        f"Description: Windows Event Log monitoring check plugin"
    ))


def main(argv: Optional[list] = None):
    """Main entry point for the CLI."""
    args = list(sys.argv[1:] if argv is None else argv)
    try:
        code = cli.main(args=args, prog_name=PROG_NAME, obj={'argv': args}, standalone_mode=False)
    except click.ClickException as e:
        click.echo(format_unknown(configured_check_name(getattr(e, 'ctx', None)), e.format_message()))
        sys.exit(CheckStatus.UNKNOWN.exit_code)
    except click.Abort:
        click.echo(format_unknown(DEFAULT_CHECK_NAME, "Operation cancelled by user"))
        sys.exit(CheckStatus.UNKNOWN.exit_code)
    sys.exit(code or 0)


if __name__ == '__main__':
    main()
