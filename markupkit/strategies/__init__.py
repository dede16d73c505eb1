"""Execution strategies behind the renderer contract."""

from markupkit.interfaces.renderer import Renderer, StrategyKind
from markupkit.registry.models import RendererDescriptor
from markupkit.strategies.command import CommandRenderer, ProcessExecution
from markupkit.strategies.library import LibraryRenderer, probe_module


def build_renderer(
    descriptor: RendererDescriptor, default_timeout: float | None = None
) -> Renderer:
    """Instantiate the renderer a descriptor asks for.

    Construction is cheap and holds no per-call state, so the engine builds
    a fresh renderer for every request.
    """
    if descriptor.strategy is StrategyKind.command:
        return CommandRenderer(descriptor, default_timeout=default_timeout)
    if descriptor.strategy is StrategyKind.library:
        return LibraryRenderer(descriptor)
    raise ValueError(
        f"Unsupported strategy: {descriptor.strategy!r}. "
        f"Supported: {', '.join(k.value for k in StrategyKind)}"
    )


__all__ = [
    "CommandRenderer",
    "LibraryRenderer",
    "ProcessExecution",
    "build_renderer",
    "probe_module",
]
