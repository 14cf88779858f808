"""CLI entrypoint for the stash finder."""

from __future__ import annotations

from collections import Counter
from pathlib import Path

import typer
from rich import print
from rich.console import Console
from rich.table import Table

from stash_finder.adapters import MinescriptGameCommandAdapter, MinescriptUnavailableError
from stash_finder.config import settings
from stash_finder.events import read_scan_events
from stash_finder.intake import StashFinder
from stash_finder.models import RegionId
from stash_finder.notifier import ConsoleNotifier, GameChatNotifier, Notifier
from stash_finder.persistence import StashFileStore, StashStoreWriteError
from stash_finder.telemetry import configure_logging

app = typer.Typer(help="Stash finder: record chunks with dense storage block clusters")


@app.callback()
def _main(
    log_level: str = typer.Option(None, help="Override the configured log level"),
) -> None:
    configure_logging(log_level or settings.log_level)


def _build_notifier(console: Console | None = None) -> Notifier:
    if settings.game_adapter.lower() == "minescript":
        try:
            adapter = MinescriptGameCommandAdapter(command_prefix=settings.minescript_command_prefix)
        except MinescriptUnavailableError:
            return ConsoleNotifier(console)
        return GameChatNotifier(adapter)
    return ConsoleNotifier(console)


def _build_finder(state_file: str | None) -> StashFinder:
    return StashFinder(store=StashFileStore(Path(state_file or settings.state_file)))


def _save(finder: StashFinder) -> None:
    try:
        finder.save()
    except StashStoreWriteError as exc:
        print({"error": str(exc)})
        raise typer.Exit(code=1)


@app.command("show-config")
def show_config() -> None:
    """Show effective finder configuration."""
    print(settings.model_dump(mode="json"))


@app.command()
def scan(
    x: int = typer.Option(..., help="Chunk X"),
    z: int = typer.Option(..., help="Chunk Z"),
    blocks: list[str] = typer.Option(None, "--block", "-b", help="Block entity id found in the chunk (repeatable)"),
    state_file: str = typer.Option(None, help="Stash state file (defaults to STASH_FINDER_STATE_FILE)"),
) -> None:
    """Evaluate a single chunk scan and record it if it qualifies."""
    finder = _build_finder(state_file)
    finder.load()
    outcome = finder.on_scan(RegionId(x, z), blocks or [], settings.threshold_config(), _build_notifier())
    _save(finder)
    print({"chunk": RegionId(x, z).short_string(), "outcome": outcome.value, "stashes": len(finder.registry)})


@app.command()
def replay(
    events_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSONL file of chunk scans"),
    state_file: str = typer.Option(None, help="Stash state file (defaults to STASH_FINDER_STATE_FILE)"),
    fresh_start: bool = typer.Option(False, help="Discard previously recorded stashes first"),
) -> None:
    """Feed a recorded stream of chunk scans through the finder."""
    finder = _build_finder(state_file)
    if fresh_start:
        finder.activate()
    else:
        finder.load()

    config = settings.threshold_config()
    notifier = _build_notifier()
    outcomes: Counter[str] = Counter()
    for event in read_scan_events(events_file):
        outcomes[finder.handle(event, config, notifier).value] += 1

    _save(finder)
    print({"outcomes": dict(outcomes), "stashes": len(finder.registry)})


@app.command("list")
def list_stashes(
    limit: int = typer.Option(20, help="How many stashes to show"),
    state_file: str = typer.Option(None, help="Stash state file (defaults to STASH_FINDER_STATE_FILE)"),
) -> None:
    """Show recorded stashes, largest first."""
    finder = _build_finder(state_file)
    finder.load()

    table = Table(title="Stashes")
    table.add_column("Chunk")
    table.add_column("Block centre")
    table.add_column("Storages", justify="right")
    for record in finder.stashes[:limit]:
        bx, bz = record.position.block_center()
        table.add_row(record.position.short_string(), f"{bx}, {bz}", str(record.storage_count))

    Console().print(table)


@app.command()
def clear(
    state_file: str = typer.Option(None, help="Stash state file (defaults to STASH_FINDER_STATE_FILE)"),
) -> None:
    """Forget every recorded stash."""
    finder = _build_finder(state_file)
    finder.reset(ConsoleNotifier())
    _save(finder)


if __name__ == "__main__":
    app()
