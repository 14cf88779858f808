"""Live Minecraft command adapter.

Dispatches commands through a locally importable ``minescript`` module so
stash notifications reach a real game client. The module is resolved lazily at
construction, which keeps the package importable where the mod is absent.
"""

from __future__ import annotations

import importlib
from dataclasses import dataclass, field
from typing import Callable

from stash_finder.adapters.game_command import GameCommandAdapter, MinescriptCommand

EXECUTOR_ATTRIBUTES = ("execute", "run", "command", "chat_command")


class MinescriptUnavailableError(RuntimeError):
    """Raised when minescript is not installed or has no supported command API."""


@dataclass(slots=True)
class MinescriptGameCommandAdapter(GameCommandAdapter):
    """Adapter that dispatches commands through the ``minescript`` module."""

    command_prefix: str = "/"
    module_name: str = "minescript"
    _executor: Callable[[str], object] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._executor = self._resolve_executor(self.module_name)

    def send(self, payload: MinescriptCommand) -> str | None:
        command = payload.command
        if self.command_prefix and not command.startswith(self.command_prefix):
            command = f"{self.command_prefix}{command}"

        result = self._executor(command)
        return "" if result is None else str(result)

    @staticmethod
    def _resolve_executor(module_name: str) -> Callable[[str], object]:
        try:
            module = importlib.import_module(module_name)
        except Exception as exc:  # noqa: BLE001
            raise MinescriptUnavailableError(
                f"Unable to import {module_name}. Install it and ensure Minecraft + the mod are running."
            ) from exc

        for attr in EXECUTOR_ATTRIBUTES:
            fn = getattr(module, attr, None)
            if callable(fn):
                return fn

        raise MinescriptUnavailableError(
            f"Imported {module_name} but found no supported API (expected {'/'.join(EXECUTOR_ATTRIBUTES)})."
        )
