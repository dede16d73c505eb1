"""Renderer contract used by the engine and both strategies."""

from markupkit.interfaces.renderer import Renderer, StrategyKind

__all__ = ["Renderer", "StrategyKind"]
