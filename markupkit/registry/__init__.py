"""Language registry and descriptor models."""

from markupkit.registry.builtin import BUILTIN_RENDERERS
from markupkit.registry.models import (
    CommandSpec,
    LibrarySpec,
    RendererDescriptor,
    normalize_identifier,
)
from markupkit.registry.registry import DuplicatePolicy, LanguageRegistry

__all__ = [
    "BUILTIN_RENDERERS",
    "CommandSpec",
    "DuplicatePolicy",
    "LanguageRegistry",
    "LibrarySpec",
    "RendererDescriptor",
    "normalize_identifier",
]
