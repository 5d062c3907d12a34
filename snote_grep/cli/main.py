"""CLI entry point for snote-grep."""

from __future__ import annotations

import sys
from pathlib import Path

import click
from rich.markup import escape

from snote_grep.cli.logging_setup import configure_logging, err_console
from snote_grep.config.settings import DEFAULT_SETTINGS_PATH, load_settings, to_default_map
from snote_grep.domain.errors import OutputOpenError, TemplateError
from snote_grep.domain.models import (
    DEFAULT_FAST_MULTIPLIER,
    DEFAULT_QUEUE_SIZE,
    DEFAULT_TEMPLATE,
    WILDCARD,
    ScanConfig,
    ScanSummary,
)
from snote_grep.engine.orchestrator import DEFAULT_PATHS, run_scan
from snote_grep.output.formatter import FIELD_HELP, get_formatter
from snote_grep.output.sink import open_sink

_FORMAT_HELP = "Output template using {field} placeholders. Fields: " + "; ".join(
    f"{name}: {desc}" for name, desc in FIELD_HELP.items()
)


def _load_settings_file(ctx: click.Context, _param: click.Parameter, value: Path | None) -> None:
    """Eager --config callback: settings file values become option defaults."""
    path = value if value is not None else DEFAULT_SETTINGS_PATH
    try:
        settings = load_settings(path)
    except ValueError as err:
        raise click.BadParameter(str(err), ctx=ctx, param_hint="--config") from err
    if settings:
        ctx.default_map = {**(ctx.default_map or {}), **to_default_map(settings)}


def _print_stats(summary: ScanSummary) -> None:
    err_console.print(
        f"[bold]Scanned {summary.files_scanned} file(s)[/bold] — "
        f"{summary.records_emitted} record(s), "
        f"{summary.total_errors} error(s) "
        f"[dim]limit={summary.concurrency_limit} elapsed={summary.elapsed:.2f}s[/dim]"
    )


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("paths", nargs=-1, type=click.Path(path_type=str))
@click.option(
    "--config",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    is_eager=True,
    expose_value=False,
    callback=_load_settings_file,
    help=f"YAML settings file (default: {DEFAULT_SETTINGS_PATH}).",
)
@click.option(
    "-s",
    "--snote",
    "snote_type",
    default=WILDCARD,
    show_default=True,
    help="Notice type to look for, * matches all.",
)
@click.option(
    "-a",
    "--ignore-remote/--no-ignore-remote",
    default=False,
    help="Ignore REMOTE-prefixed notices of the selected type.",
)
@click.option(
    "--strip/--no-strip",
    "strip_leaders",
    default=False,
    help="Emit only the notice text, without the leading metadata.",
)
@click.option(
    "-H",
    "--filename/--no-filename",
    "include_filename",
    default=False,
    help="Prefix emitted lines with the path of the file they came from.",
)
@click.option(
    "-o",
    "--output",
    default="-",
    show_default=True,
    help="File to write results to, - writes to stdout.",
)
@click.option(
    "--fast/--no-fast",
    default=False,
    help="Scan files concurrently (does not guarantee order of results).",
)
@click.option(
    "--workers",
    type=click.IntRange(min=1),
    default=None,
    help="Concurrency limit in fast mode (default: CPUs x --fast-multiplier).",
)
@click.option(
    "--fast-multiplier",
    type=click.IntRange(min=1),
    default=DEFAULT_FAST_MULTIPLIER,
    show_default=True,
    help="Concurrent scans per CPU in fast mode when --workers is not set.",
)
@click.option(
    "--queue-size",
    type=click.IntRange(min=0),
    default=DEFAULT_QUEUE_SIZE,
    show_default=True,
    help="Records buffered between scanners and the writer, 0 = unbounded.",
)
@click.option("--format", "template", default=DEFAULT_TEMPLATE, show_default=True, help=_FORMAT_HELP)
@click.option(
    "--json/--no-json",
    "as_json",
    default=False,
    help="Emit one JSON object per record instead of using --format.",
)
@click.option(
    "-0",
    "--null-delimited/--newline-delimited",
    default=False,
    help="Separate results with a null byte instead of a newline.",
)
@click.option("--stats", is_flag=True, default=False, help="Print a run summary to stderr.")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Log progress to stderr.")
@click.option("-q", "--quiet", is_flag=True, default=False, help="Only log errors.")
@click.version_option(package_name="snote-grep")
def cli(
    paths: tuple[str, ...],
    snote_type: str,
    ignore_remote: bool,
    strip_leaders: bool,
    include_filename: bool,
    output: str,
    fast: bool,
    workers: int | None,
    fast_multiplier: int,
    queue_size: int,
    template: str,
    as_json: bool,
    null_delimited: bool,
    stats: bool,
    verbose: bool,
    quiet: bool,
) -> None:
    """Scan log files for IRC server notices and print the matching lines.

    PATHS are files or directories, walked recursively (default: current directory).
    """
    configure_logging(verbose=verbose, quiet=quiet)

    config = ScanConfig(
        snote_type=snote_type,
        ignore_remote=ignore_remote,
        strip_leaders=strip_leaders,
        include_filename=include_filename,
        output=output,
        fast=fast,
        template=template,
        null_delimited=null_delimited,
        fast_multiplier=fast_multiplier,
        workers=workers,
        queue_size=queue_size,
    )

    try:
        formatter = get_formatter(config.template, as_json=as_json)
    except TemplateError as err:
        raise click.BadParameter(str(err), param_hint="--format") from err

    try:
        sink = open_sink(config.output)
    except OutputOpenError as err:
        err_console.print(f"[red]Error:[/red] {escape(str(err))}")
        raise SystemExit(1)

    try:
        with sink:
            summary = run_scan(list(paths) or list(DEFAULT_PATHS), config, sink, formatter)
    except BrokenPipeError:
        sys.exit(0)

    if stats:
        _print_stats(summary)


if __name__ == "__main__":
    cli()
