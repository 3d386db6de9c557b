"""CLI entry point for mycount.

Uses Click to expose the ``mycount`` command group with subcommands that
delegate to the event store and the time formatter.
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Callable, TypeVar

import click

import mycount
from mycount.core import clock
from mycount.core.event import CountdownEvent, CountMode
from mycount.core.formatter import date_with_day_text, detail, summarize
from mycount.core.images import DEFAULT_SAMPLE, SAMPLES, find_sample
from mycount.core.store import EventStore
from mycount.core.validation import (
    InvalidEventError,
    check_image_id,
    normalize_target,
    normalize_title,
)

T = TypeVar("T")

_DATE_FORMATS = [
    "%Y-%m-%d",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%dT%H:%M",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%dT%H:%M:%S",
]
_MODE_CHOICE = click.Choice([mode.value for mode in CountMode])


def _run(action: Callable[[], T]) -> T:
    """Execute *action*, converting ``InvalidEventError`` to a CLI error.

    On ``InvalidEventError`` the message is printed to stderr and the
    process exits with code 1.
    """
    try:
        return action()
    except InvalidEventError as exc:
        click.echo(str(exc), err=True)
        sys.exit(1)


def _resolve(store: EventStore, prefix: str) -> CountdownEvent:
    """Return the single event whose id starts with *prefix*."""
    needle = prefix.strip().lower()
    matches = [event for event in store.events if str(event.id).startswith(needle)]
    if not needle or not matches:
        raise InvalidEventError(f"No event with id {prefix}")
    if len(matches) > 1:
        raise InvalidEventError(f"Ambiguous id {prefix}: matches {len(matches)} events")
    return matches[0]


def _read_image(path: Path | None) -> bytes | None:
    return path.read_bytes() if path is not None else None


def _summary_line(event: CountdownEvent, now: datetime) -> str:
    summary = summarize(event, now)
    unit = "日" if summary.shows_day_unit else ""
    flag = " [ended]" if summary.expired else (" [!]" if summary.critical else "")
    return (
        f"{str(event.id)[:8]}  {event.title}  "
        f"{summary.header_label} {summary.display_value}{unit}{flag}"
    )


def _print_list(store: EventStore, now: datetime) -> None:
    events = store.events
    if not events:
        click.echo("No events")
        return
    for event in events:
        click.echo(_summary_line(event, now))


@click.group()
@click.version_option(version=mycount.__version__, prog_name="mycount")
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False, path_type=Path),
    envvar="MYCOUNT_DATA_DIR",
    default=None,
    help="Directory holding events.json (default: ~/.config/mycount).",
)
@click.option("-v", "--verbose", is_flag=True, help="Log debug output to stderr.")
@click.pass_context
def cli(ctx: click.Context, data_dir: Path | None, verbose: bool) -> None:
    """mycount: count down to, or up from, the moments that matter."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = EventStore(data_dir=data_dir)


@cli.command()
@click.argument("title")
@click.argument("target", type=click.DateTime(formats=_DATE_FORMATS))
@click.option("--mode", type=_MODE_CHOICE, default=CountMode.COUNTDOWN.value, show_default=True)
@click.option("--image", "image_id", default=DEFAULT_SAMPLE.id, show_default=True)
@click.option("--image-file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_obj
def add(
    store: EventStore,
    title: str,
    target: datetime,
    mode: str,
    image_id: str,
    image_file: Path | None,
) -> None:
    """Add an event counting toward (or up from) TARGET."""

    def action() -> CountdownEvent:
        return store.create(
            title=normalize_title(title),
            target_date=normalize_target(target),
            mode=CountMode(mode),
            image_id=check_image_id(image_id),
            custom_image_data=_read_image(image_file),
        )

    event = _run(action)
    click.echo(f"Added {event.id}: {event.title}")


@cli.command()
@click.argument("event_id")
@click.option("--title")
@click.option("--target", type=click.DateTime(formats=_DATE_FORMATS))
@click.option("--mode", type=_MODE_CHOICE)
@click.option("--image", "image_id")
@click.option("--image-file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--clear-image", is_flag=True, help="Drop the custom image.")
@click.pass_obj
def edit(
    store: EventStore,
    event_id: str,
    title: str | None,
    target: datetime | None,
    mode: str | None,
    image_id: str | None,
    image_file: Path | None,
    clear_image: bool,
) -> None:
    """Edit the event EVENT_ID (any unique id prefix)."""
    if image_file is not None and clear_image:
        raise click.UsageError("--image-file and --clear-image are mutually exclusive")

    def action() -> CountdownEvent | None:
        current = _resolve(store, event_id)
        if clear_image:
            image_data = None
        elif image_file is not None:
            image_data = _read_image(image_file)
        else:
            image_data = current.custom_image_data
        return store.update(
            current.id,
            title=normalize_title(title) if title is not None else current.title,
            target_date=normalize_target(target) if target is not None else current.target_date,
            mode=CountMode(mode) if mode is not None else current.mode,
            image_id=check_image_id(image_id) if image_id is not None else current.image_id,
            custom_image_data=image_data,
        )

    event = _run(action)
    if event is not None:
        click.echo(f"Updated {event.id}: {event.title}")


@cli.command()
@click.argument("event_ids", nargs=-1, required=True)
@click.pass_obj
def delete(store: EventStore, event_ids: tuple[str, ...]) -> None:
    """Delete one or more events by id."""
    ids = _run(lambda: {_resolve(store, prefix).id for prefix in event_ids})
    store.delete(ids)
    click.echo(f"Deleted {len(ids)} event(s)")


@cli.command(name="list")
@click.pass_obj
def list_events(store: EventStore) -> None:
    """List all events, newest first."""
    now = clock.now()
    store.rollover_pass(now)
    _print_list(store, now)


@cli.command()
@click.argument("event_id")
@click.pass_obj
def show(store: EventStore, event_id: str) -> None:
    """Show the detail view of EVENT_ID."""
    resolved = _run(lambda: _resolve(store, event_id))
    now = clock.now()
    store.rollover_pass(now)
    event = store.get(resolved.id) or resolved
    info = detail(event, now)
    image = "custom" if event.custom_image_data else find_sample(event.image_id).label

    click.echo(f"{event.title}  ({event.mode.title})")
    click.echo(f"Target:   {date_with_day_text(event.target_date)} {info.time_text}")
    click.echo(f"Days:     {info.date_tab}")
    click.echo(f"Time:     {info.time_tab}")
    click.echo(f"Midnight: {info.until_midnight}")
    click.echo(f"Image:    {image}")


@cli.command()
@click.pass_obj
def rollover(store: EventStore) -> None:
    """Move every ended countdown forward to its next yearly occurrence."""
    if store.rollover_pass():
        click.echo("Rolled over ended countdowns")
    else:
        click.echo("Nothing to roll over")


@cli.command()
@click.option("--interval", type=click.FloatRange(min=0.1), default=1.0, show_default=True)
@click.option("--count", type=click.IntRange(min=1), default=None, help="Stop after N ticks.")
@click.pass_obj
def watch(store: EventStore, interval: float, count: int | None) -> None:
    """Redraw the event list every INTERVAL seconds."""
    try:
        for now in clock.Ticker(interval=interval, count=count):
            store.rollover_pass(now)
            click.clear()
            _print_list(store, now)
    except KeyboardInterrupt:
        pass


@cli.command()
def images() -> None:
    """List the built-in sample images."""
    for sample in SAMPLES:
        click.echo(f"{sample.id}\t{sample.label}")
