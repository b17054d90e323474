"""CLI entry point for calpipe."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Callable, List, Optional

import typer

from calpipe import __version__
from calpipe.ics import (
    Cat,
    KeepProp,
    KnownKind,
    Limit,
    Operator,
    ParseError,
    Pipeline,
    RemoveProp,
    SetProp,
    TzSubst,
    format_error_for_user,
    parse,
    run,
    serialize,
)
from calpipe.ics.config import CalpipeConfig, load_config
from calpipe.ics.constants import CALENDAR_DESCRIPTION_PROPERTY, CALENDAR_NAME_PROPERTY, DEFAULTS
from calpipe.ics.files import STDIN_MARKER, InputDocument, collect_inputs, write_document
from calpipe.ics.serializer import escape_text
from calpipe.ics.validators import parse_name_list, parse_tz_pair

logger = logging.getLogger(__name__)

app = typer.Typer(help="Merge and rewrite iCalendar (.ics) files.")

FILES_HELP = "Input .ics files, '-' for standard input (defaults to standard input)."
SCOPE_HELP = "Component kind to edit (VEVENT, VALARM, VCALENDAR, ...)."


@dataclass(frozen=True)
class DriverOptions:
    config: CalpipeConfig
    name: Optional[str]
    description: Optional[str]
    output: Optional[Path]
    keep_duplicate_timezones: bool


def version_callback(value: bool):
    """Show version and exit."""
    if value:
        typer.echo(f"calpipe version {__version__}")
        raise typer.Exit()


def _configure_logging(level: int) -> None:
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
    logging.getLogger("calpipe").setLevel(level)


@app.callback()
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    name: Optional[str] = typer.Option(
        None,
        "--name",
        help="Calendar name (defaults to the first name found in the inputs).",
    ),
    description: Optional[str] = typer.Option(
        None,
        "--description",
        help="Calendar description (defaults to the first description found in the inputs).",
    ),
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the result to this file instead of standard output.",
    ),
    keep_duplicate_timezones: bool = typer.Option(
        False,
        "--keep-duplicate-timezones",
        help="Keep every VTIMEZONE instead of the last one per TZID.",
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Log debug details to standard error."),
):
    """Merge and rewrite iCalendar (.ics) files."""
    config = load_config()
    _configure_logging(logging.DEBUG if verbose else config.log_level)
    ctx.obj = DriverOptions(
        config=config,
        name=name,
        description=description,
        output=Path(output) if output else None,
        keep_duplicate_timezones=keep_duplicate_timezones,
    )


def _build_pipeline(options: DriverOptions, stage: Optional[Operator]) -> Pipeline:
    pipeline = Pipeline((Cat(dedup_timezones=not options.keep_duplicate_timezones, prod_id=options.config.prod_id),))
    if stage is not None:
        pipeline = pipeline.then(stage)
    if options.name is not None:
        pipeline = pipeline.then(SetProp(CALENDAR_NAME_PROPERTY, escape_text(options.name), scope=KnownKind.VCALENDAR))
    if options.description is not None:
        pipeline = pipeline.then(
            SetProp(CALENDAR_DESCRIPTION_PROPERTY, escape_text(options.description), scope=KnownKind.VCALENDAR)
        )
    return pipeline


def _stdin_for(files: List[Path]) -> Optional[BinaryIO]:
    stdin = typer.get_binary_stream("stdin")
    if any(str(path) == STDIN_MARKER for path in files):
        return stdin
    if not files and not stdin.isatty():
        return stdin
    return None


def _parse_documents(documents: List[InputDocument]):
    calendars = []
    for document in documents:
        try:
            calendars.append(parse(document.data))
        except ParseError as exc:
            exc.source = document.name
            raise
        logger.debug("Read %s", document.name)
    return calendars


def _execute(ctx: typer.Context, build_stage: Callable[[], Optional[Operator]], files: Optional[List[Path]]) -> None:
    options: DriverOptions = ctx.obj
    paths = list(files or [])
    try:
        pipeline = _build_pipeline(options, build_stage())
        documents = collect_inputs(paths, _stdin_for(paths))
        calendars = _parse_documents(documents)
        data = serialize(run(pipeline, calendars))
        if options.output is not None:
            write_document(options.output, data)
    except Exception as exc:
        typer.secho(format_error_for_user(exc), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    if options.output is None:
        stdout = typer.get_binary_stream("stdout")
        stdout.write(data)
        stdout.flush()


@app.command("cat")
def cat_command(
    ctx: typer.Context,
    files: Optional[List[Path]] = typer.Argument(None, help=FILES_HELP),
):
    """Concatenate and merge .ics files, keeping the last copy of each event."""
    _execute(ctx, lambda: None, files)


@app.command("remove-prop")
def remove_prop_command(
    ctx: typer.Context,
    names: str = typer.Argument(..., help="Comma-separated property names to remove."),
    files: Optional[List[Path]] = typer.Argument(None, help=FILES_HELP),
    scope: str = typer.Option(DEFAULTS["SCOPE"], "--scope", help=SCOPE_HELP),
):
    """Remove properties from every component of a kind."""
    _execute(ctx, lambda: RemoveProp(parse_name_list(names), scope=scope), files)


@app.command("keep-prop")
def keep_prop_command(
    ctx: typer.Context,
    names: str = typer.Argument(..., help="Comma-separated property names to keep."),
    files: Optional[List[Path]] = typer.Argument(None, help=FILES_HELP),
    scope: str = typer.Option(DEFAULTS["SCOPE"], "--scope", help=SCOPE_HELP),
):
    """Keep only the listed properties (UID, DTSTAMP and DTSTART always stay)."""
    _execute(ctx, lambda: KeepProp(parse_name_list(names), scope=scope), files)


@app.command("set-prop")
def set_prop_command(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Property name."),
    value: str = typer.Argument(..., help="New raw property value."),
    files: Optional[List[Path]] = typer.Argument(None, help=FILES_HELP),
    scope: str = typer.Option(DEFAULTS["SCOPE"], "--scope", help=SCOPE_HELP),
):
    """Set a property on every component of a kind."""
    _execute(ctx, lambda: SetProp(name, value, scope=scope), files)


@app.command("tz-subst")
def tz_subst_command(
    ctx: typer.Context,
    old: str = typer.Argument(..., help="Timezone identifier to replace."),
    new: str = typer.Argument(..., help="Replacement timezone identifier."),
    files: Optional[List[Path]] = typer.Argument(None, help=FILES_HELP),
    pair: Optional[List[str]] = typer.Option(
        None,
        "--pair",
        help="Additional OLD=NEW substitution (repeatable).",
    ),
):
    """Rename timezone identifiers (offsets and rules are not adjusted)."""
    _execute(ctx, lambda: TzSubst.from_pairs([(old, new), *(parse_tz_pair(value) for value in pair or [])]), files)


@app.command("limit")
def limit_command(
    ctx: typer.Context,
    count: int = typer.Argument(..., help="Maximum number of events to keep."),
    files: Optional[List[Path]] = typer.Argument(None, help=FILES_HELP),
):
    """Keep only the first COUNT events."""
    _execute(ctx, lambda: Limit(count), files)


def cli():
    """Entry point for the CLI."""
    app()
