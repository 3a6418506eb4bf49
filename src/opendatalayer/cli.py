"""CLI entry point for exercising a data layer locally."""

from __future__ import annotations

import json
from typing import Any

import click

from .core.config import Settings, load_settings
from .core.errors import ConfigError, EventError
from .core.events import Event
from .observability.logger import get_logger, setup_logging
from .odl import OpenDataLayer

logger = get_logger(__name__)


def _build(config: str | None, debug: bool) -> OpenDataLayer:
    overrides: dict[str, Any] = {}
    if debug:
        overrides["debug"] = True
        overrides["observability"] = {"log_level": "DEBUG", "log_format": "console"}
    try:
        settings: Settings = load_settings(config_path=config, overrides=overrides)
    except ConfigError as exc:
        raise click.UsageError(str(exc)) from exc

    setup_logging(
        level=settings.observability.log_level,
        format=settings.observability.log_format,
    )
    return OpenDataLayer.from_settings(settings)


def _parse_json_object(value: str, what: str) -> dict[str, Any]:
    try:
        parsed = json.loads(value)
    except json.JSONDecodeError as exc:
        raise click.BadParameter(f"{what} is not valid JSON: {exc}") from exc
    if not isinstance(parsed, dict):
        raise click.BadParameter(f"{what} must be a JSON object")
    return parsed


def _parse_scalar(raw: str) -> str | int | float | bool:
    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        return raw
    if isinstance(value, (str, int, float, bool)):
        return value
    return raw


def _dump(event: Event) -> str:
    return json.dumps(event.to_dict(), default=str, sort_keys=True)


@click.group()
def main() -> None:
    """OpenDataLayer event pipeline."""


@main.command()
@click.argument("name")
@click.option("--data", "data_json", default=None, help="Event payload as a JSON object")
@click.option(
    "--dimension",
    "dimensions",
    multiple=True,
    help="Custom dimension as key=value (repeatable)",
)
@click.option(
    "--context",
    "contexts",
    multiple=True,
    help="Context domain as domain=JSON (repeatable)",
)
@click.option("--config", default=None, help="Config file path")
@click.option("--debug", is_flag=True, help="Log every event to stderr")
def track(
    name: str,
    data_json: str | None,
    dimensions: tuple[str, ...],
    contexts: tuple[str, ...],
    config: str | None,
    debug: bool,
) -> None:
    """Track a single event and print its record."""
    odl = _build(config, debug)

    for item in contexts:
        domain, sep, raw = item.partition("=")
        if not sep or not domain:
            raise click.BadParameter(f"expected domain=JSON, got {item!r}")
        odl.set_context(domain, _parse_json_object(raw, f"context {domain!r}"))

    data = _parse_json_object(data_json, "--data") if data_json is not None else None

    custom: dict[str, Any] | None = None
    if dimensions:
        custom = {}
        for item in dimensions:
            key, sep, raw = item.partition("=")
            if not sep or not key:
                raise click.BadParameter(f"expected key=value, got {item!r}")
            custom[key] = _parse_scalar(raw)

    event = odl.track(name, data, custom)
    click.echo(_dump(event))
    odl.destroy()


@main.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("--config", default=None, help="Config file path")
@click.option("--debug", is_flag=True, help="Log every event to stderr")
def replay(path: str, config: str | None, debug: bool) -> None:
    """Track every JSON-lines record in PATH and print the stored events."""
    odl = _build(config, debug)

    with open(path) as f:
        for lineno, line in enumerate(f, 1):
            if not line.strip():
                continue
            try:
                record = json.loads(line)
                if not isinstance(record, dict) or not isinstance(record.get("event"), str):
                    raise EventError("record needs a string 'event' field")
                Event.from_dict(
                    {k: record[k] for k in ("event", "data", "customDimensions") if k in record}
                )
            except (json.JSONDecodeError, EventError) as exc:
                raise click.UsageError(f"{path}:{lineno}: {exc}") from exc
            odl.track(record["event"], record.get("data"), record.get("customDimensions"))

    events = odl.get_events()
    for event in events:
        click.echo(_dump(event))
    logger.info("replay complete", path=path, stored=len(events))
    click.echo(f"{len(events)} event(s) stored", err=True)
    odl.destroy()
