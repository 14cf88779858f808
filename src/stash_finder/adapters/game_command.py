"""Command transport used to deliver stash notifications into the game."""

from dataclasses import dataclass
from typing import Protocol


@dataclass(slots=True)
class MinescriptCommand:
    """A single in-game command, e.g. a ``tellraw`` announcing a found stash."""

    command: str


class GameCommandAdapter(Protocol):
    """Sends chat and title commands to a running Minecraft client."""

    def send(self, payload: MinescriptCommand) -> str | None:
        """Run ``payload`` in the game and return its textual result, if any."""


class EchoGameCommandAdapter:
    """Used when no game is attached; keeps the commands a notifier would have sent."""

    def __init__(self) -> None:
        self.sent: list[str] = []

    def send(self, payload: MinescriptCommand) -> str:
        self.sent.append(payload.command)
        return f"executed: {payload.command}"
