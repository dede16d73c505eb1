"""Renderer contract shared by every execution strategy."""

from __future__ import annotations

from enum import Enum
from typing import Protocol, runtime_checkable


class StrategyKind(str, Enum):
    """How a renderer performs its conversion."""

    command = "command"
    library = "library"


@runtime_checkable
class Renderer(Protocol):
    """Turns markup text into HTML, or raises a ``RenderError``."""

    name: str

    def render(self, content: str) -> str: ...

    def available(self) -> bool: ...
