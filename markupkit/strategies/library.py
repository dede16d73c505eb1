"""Library strategy: render by calling an importable Python package in-process."""

from __future__ import annotations

import functools
import importlib
import logging
from collections.abc import Mapping
from types import ModuleType
from typing import Any

from markupkit.errors import DependencyMissing, RenderingError
from markupkit.registry.models import LibrarySpec, RendererDescriptor, thaw_options

logger = logging.getLogger(__name__)


@functools.lru_cache(maxsize=None)
def probe_module(name: str) -> ModuleType | None:
    """Import ``name`` once per process; None if it cannot be imported."""
    try:
        return importlib.import_module(name)
    except ImportError as e:
        logger.warning("%s not installed, renderers depending on it are disabled (%s)", name, e)
        return None
    except Exception as e:
        logger.warning(
            "%s failed to import, renderers depending on it are disabled (%s: %s)",
            name,
            e.__class__.__name__,
            e,
        )
        return None


def _resolve_attribute(module: ModuleType, dotted: str) -> Any:
    target: Any = module
    for part in dotted.split("."):
        target = getattr(target, part)
    return target


class LibraryRenderer:
    """Calls a library's conversion routine directly, no subprocess involved.

    The dependency is resolved through ``probe_module`` so the import is
    attempted only once.  A fresh converter object is built for every call,
    which keeps instances stateless between renders.
    """

    def __init__(self, descriptor: RendererDescriptor) -> None:
        if descriptor.library is None:
            raise ValueError(f"{descriptor.name} is not a library renderer")
        self.name = descriptor.name
        self._spec: LibrarySpec = descriptor.library

    def available(self) -> bool:
        return probe_module(self._spec.module) is not None

    def render(self, content: str) -> str:
        """Render ``content`` to HTML with the configured library."""
        entry = self._entry_point()
        spec = self._spec

        try:
            if spec.method:
                converter = entry(**thaw_options(spec.options))
                convert = getattr(converter, spec.method)
                result = self._call(convert, content, {})
            else:
                result = self._call(entry, content, thaw_options(spec.options))
        except Exception as e:
            raise RenderingError(self.name, str(e) or e.__class__.__name__) from e

        if spec.result_key is not None:
            if not isinstance(result, Mapping) or spec.result_key not in result:
                raise RenderingError(
                    self.name, f"result has no {spec.result_key!r} part"
                )
            result = result[spec.result_key]

        if not isinstance(result, str):
            raise RenderingError(
                self.name, f"expected str output, got {type(result).__name__}"
            )
        return result

    def _call(self, fn: Any, content: str, options: Mapping[str, Any]) -> Any:
        if self._spec.content_arg:
            return fn(**{self._spec.content_arg: content}, **options)
        return fn(content, **options)

    def _entry_point(self) -> Any:
        module = probe_module(self._spec.module)
        if module is None:
            raise DependencyMissing(self._spec.module, self._spec.install_hint)
        try:
            return _resolve_attribute(module, self._spec.entry_point)
        except AttributeError:
            raise DependencyMissing(
                f"{self._spec.module}.{self._spec.entry_point}",
                f"{self._spec.module} has no attribute {self._spec.entry_point!r}",
            ) from None
