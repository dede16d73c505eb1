"""markupkit - render many markup languages to HTML through one call."""

from markupkit.config import MarkupConfig, load_config
from markupkit.engine import RenderEngine, RenderRequest, RenderResult, build_registry, create_engine
from markupkit.errors import (
    CommandNotFound,
    DependencyMissing,
    MarkupError,
    NonZeroExit,
    RegistryError,
    RenderError,
    RenderingError,
    RenderTimeout,
    UnsupportedFormat,
)
from markupkit.interfaces import Renderer, StrategyKind
from markupkit.registry import (
    BUILTIN_RENDERERS,
    CommandSpec,
    LanguageRegistry,
    LibrarySpec,
    RendererDescriptor,
)

__version__ = "0.1.0"

__all__ = [
    "BUILTIN_RENDERERS",
    "CommandNotFound",
    "CommandSpec",
    "DependencyMissing",
    "LanguageRegistry",
    "LibrarySpec",
    "MarkupConfig",
    "MarkupError",
    "NonZeroExit",
    "RegistryError",
    "RenderEngine",
    "RenderError",
    "RenderRequest",
    "RenderResult",
    "RenderTimeout",
    "Renderer",
    "RendererDescriptor",
    "RenderingError",
    "StrategyKind",
    "UnsupportedFormat",
    "build_registry",
    "create_engine",
    "load_config",
]
