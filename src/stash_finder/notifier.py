"""Delivery of stash notifications to chat and popup channels."""

from __future__ import annotations

import json
import logging
from typing import Protocol

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from stash_finder.adapters import GameCommandAdapter, MinescriptCommand
from stash_finder.models import NotificationChannel


class Notifier(Protocol):
    """Outbound notification capability supplied by the host."""

    def notify(self, channel: NotificationChannel, title: str, message: str) -> None:
        """Deliver ``message`` on ``channel`` (``CHAT`` or ``POPUP``)."""


class ConsoleNotifier:
    """Prints chat lines and popup panels to a rich console."""

    def __init__(self, console: Console | None = None) -> None:
        self._console = console or Console()

    def notify(self, channel: NotificationChannel, title: str, message: str) -> None:
        if channel == NotificationChannel.POPUP:
            self._console.print(Panel(message, title=title, expand=False))
        else:
            self._console.print(f"[bold cyan]{escape(f'[{title}]')}[/bold cyan] {escape(message)}")


class GameChatNotifier:
    """Sends notifications into the game as ``tellraw`` chat and actionbar titles."""

    def __init__(self, adapter: GameCommandAdapter, *, target: str = "@s", logger: logging.Logger | None = None) -> None:
        self._adapter = adapter
        self._target = target
        self._logger = logger or logging.getLogger("stash_finder.notifier")

    def notify(self, channel: NotificationChannel, title: str, message: str) -> None:
        if channel == NotificationChannel.POPUP:
            command = f"title {self._target} actionbar {json.dumps({'text': message})}"
        else:
            component = [{"text": f"[{title}] ", "color": "aqua"}, {"text": message}]
            command = f"tellraw {self._target} {json.dumps(component)}"

        try:
            self._adapter.send(MinescriptCommand(command=command))
        except Exception:  # noqa: BLE001 - a failed delivery must not interrupt scanning.
            self._logger.exception("notification_failed", extra={"channel": channel.value})
