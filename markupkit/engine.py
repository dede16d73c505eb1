"""Rendering facade: resolve an identifier, build its renderer, delegate."""

from __future__ import annotations

import logging
from pathlib import PurePath

from pydantic import BaseModel, ConfigDict

from markupkit.config.models import EngineSettings, MarkupConfig
from markupkit.errors import RegistryError, RenderError, UnsupportedFormat
from markupkit.registry.builtin import BUILTIN_RENDERERS
from markupkit.registry.models import RendererDescriptor, normalize_identifier
from markupkit.registry.registry import LanguageRegistry
from markupkit.strategies import build_renderer

logger = logging.getLogger(__name__)


class RenderRequest(BaseModel):
    """One render call: markup text plus the identifier or filename naming its language."""

    identifier: str
    content: str


class RenderResult(BaseModel):
    """Either rendered HTML or the error that prevented it."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    html: str | None = None
    error: RenderError | None = None
    language: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _candidate_keys(identifier_or_filename: str) -> list[str]:
    """Lookup keys to try, most specific first.

    The string itself comes first (``markdown``, ``.md``), then the
    filename's compound suffixes longest first, so ``notes.rst.txt`` tries
    ``.rst.txt`` before ``.txt``.
    """
    keys = [normalize_identifier(identifier_or_filename)]
    suffixes = PurePath(identifier_or_filename.strip()).suffixes
    for i in range(len(suffixes)):
        keys.append("".join(suffixes[i:]).lower())
    return keys


class RenderEngine:
    """Single entry point for rendering markup to HTML.

    Holds no language-specific logic: it looks the identifier up in a
    frozen ``LanguageRegistry``, builds the renderer the descriptor names,
    and returns whatever that renderer produces.  Renderer errors reach the
    caller unchanged.
    """

    def __init__(
        self,
        registry: LanguageRegistry,
        settings: EngineSettings | None = None,
    ) -> None:
        if not registry.frozen:
            raise RegistryError("Registry must be frozen before the engine can serve renders")
        self._registry = registry
        self._settings = settings or EngineSettings()

    @property
    def registry(self) -> LanguageRegistry:
        return self._registry

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def render(self, identifier_or_filename: str, content: str) -> str:
        """Render ``content`` with the language named by an identifier or filename.

        Raises:
            UnsupportedFormat: no renderer is registered for the identifier.
            RenderError: any failure raised by the renderer itself.
        """
        descriptor = self.language_for(identifier_or_filename)
        if descriptor is None:
            raise UnsupportedFormat(identifier_or_filename)

        renderer = build_renderer(descriptor, default_timeout=self._settings.default_timeout)
        logger.debug(
            "Rendering %s via %s (%s, %d chars)",
            identifier_or_filename,
            descriptor.name,
            descriptor.strategy.value,
            len(content),
        )
        return renderer.render(content)

    def execute(self, request: RenderRequest) -> RenderResult:
        """Render a request, returning failures as values instead of raising."""
        descriptor = self.language_for(request.identifier)
        language = descriptor.name if descriptor else None
        try:
            html = self.render(request.identifier, request.content)
        except RenderError as e:
            logger.debug("Render of %s failed: %s", request.identifier, e)
            return RenderResult(error=e, language=language)
        return RenderResult(html=html, language=language)

    def language_for(self, identifier_or_filename: str) -> RendererDescriptor | None:
        """Descriptor that would render this identifier or filename, if any."""
        for key in _candidate_keys(identifier_or_filename):
            descriptor = self._registry.lookup(key)
            if descriptor is not None:
                return descriptor
        return None

    def can_render(self, identifier_or_filename: str) -> bool:
        return self.language_for(identifier_or_filename) is not None

    def languages(self) -> list[RendererDescriptor]:
        return self._registry.descriptors()

    def availability(self) -> dict[str, bool]:
        """Capability probe for every registered language, keyed by name."""
        default_timeout = self._settings.default_timeout
        return {
            d.name: build_renderer(d, default_timeout=default_timeout).available()
            for d in self._registry.descriptors()
        }


def build_registry(config: MarkupConfig) -> LanguageRegistry:
    """Registry with built-ins plus config-declared renderers, frozen."""
    disabled = {normalize_identifier(name) for name in config.registry.disabled}
    registry = LanguageRegistry(on_duplicate=config.registry.on_duplicate)
    for descriptor in (*BUILTIN_RENDERERS, *config.renderers):
        if descriptor.name in disabled:
            logger.debug("Skipping disabled language %s", descriptor.name)
            continue
        registry.register_descriptor(descriptor)
    registry.freeze()
    return registry


def create_engine(config: MarkupConfig | None = None) -> RenderEngine:
    """Build a ready-to-serve engine from app-level config."""
    config = config or MarkupConfig()
    return RenderEngine(build_registry(config), settings=config.engine)
