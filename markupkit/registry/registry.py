"""Language registry: identifier -> descriptor, configured once then frozen."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Literal

from markupkit.errors import DuplicateIdentifier, RegistryFrozen
from markupkit.registry.models import RendererDescriptor, normalize_identifier

logger = logging.getLogger(__name__)

DuplicatePolicy = Literal["reject", "override"]


class LanguageRegistry:
    """Maps language identifiers to renderer descriptors.

    The registry has two phases.  While configuring, ``register`` adds
    entries.  ``freeze()`` switches it to serving: the table becomes a
    read-only mapping and any further registration raises ``RegistryFrozen``.
    Lookups are plain dict reads, so a frozen registry can be shared by
    any number of threads without locking.

    Usage::

        registry = LanguageRegistry()
        registry.register_descriptor(markdown_descriptor)
        registry.freeze()
        registry.lookup(".md")
    """

    def __init__(self, on_duplicate: DuplicatePolicy = "reject") -> None:
        self._on_duplicate = on_duplicate
        self._entries: dict[str, RendererDescriptor] = {}
        self._table: Mapping[str, RendererDescriptor] = self._entries
        self._frozen = False

    # ------------------------------------------------------------------
    # Configuring
    # ------------------------------------------------------------------

    def register(self, identifier: str, descriptor: RendererDescriptor) -> None:
        """Add one identifier -> descriptor entry."""
        key = normalize_identifier(identifier)
        if self._frozen:
            raise RegistryFrozen(key)
        if not key:
            raise ValueError("identifier must not be empty")

        existing = self._entries.get(key)
        if existing is not None and existing is not descriptor:
            if self._on_duplicate == "reject":
                raise DuplicateIdentifier(key, existing.name, descriptor.name)
            logger.warning(
                "Identifier %r re-registered: %s -> %s", key, existing.name, descriptor.name
            )
        self._entries[key] = descriptor

    def register_descriptor(self, descriptor: RendererDescriptor) -> None:
        """Register every identifier (name, aliases, extensions) of a descriptor.

        Under the ``reject`` policy all identifiers are checked first, so a
        conflict leaves the registry unchanged.
        """
        if self._frozen:
            raise RegistryFrozen(descriptor.name)
        if self._on_duplicate == "reject":
            for identifier in descriptor.identifiers:
                existing = self._entries.get(identifier)
                if existing is not None and existing is not descriptor:
                    raise DuplicateIdentifier(identifier, existing.name, descriptor.name)
        for identifier in descriptor.identifiers:
            self.register(identifier, descriptor)
        logger.debug(
            "Registered %s (%s) for %s",
            descriptor.name,
            descriptor.strategy.value,
            ", ".join(descriptor.identifiers),
        )

    def register_all(self, descriptors: Iterable[RendererDescriptor]) -> None:
        for descriptor in descriptors:
            self.register_descriptor(descriptor)

    def freeze(self) -> None:
        """Finish configuration. Irreversible; calling it twice is a no-op."""
        if self._frozen:
            return
        self._table = MappingProxyType(dict(self._entries))
        self._frozen = True
        logger.debug("Registry frozen with %d identifiers", len(self._table))

    # ------------------------------------------------------------------
    # Serving
    # ------------------------------------------------------------------

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def on_duplicate(self) -> DuplicatePolicy:
        return self._on_duplicate

    def lookup(self, identifier: str) -> RendererDescriptor | None:
        """Return the descriptor for an identifier, or None if unregistered."""
        return self._table.get(normalize_identifier(identifier))

    def identifiers(self) -> list[str]:
        return sorted(self._table)

    def descriptors(self) -> list[RendererDescriptor]:
        """Distinct registered descriptors, sorted by name."""
        unique = {id(d): d for d in self._table.values()}
        return sorted(unique.values(), key=lambda d: d.name)

    def __contains__(self, identifier: object) -> bool:
        if not isinstance(identifier, str):
            return False
        return normalize_identifier(identifier) in self._table

    def __len__(self) -> int:
        return len(self._table)
