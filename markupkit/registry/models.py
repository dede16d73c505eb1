"""Pydantic models describing one registered markup language."""

from __future__ import annotations

import shlex
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator, model_validator

from markupkit.interfaces.renderer import StrategyKind


def normalize_identifier(identifier: str) -> str:
    """Canonical form of a lookup key: stripped and lower-cased."""
    return identifier.strip().lower()


def freeze_options(value: Any) -> Any:
    """Read-only copy of a nested options structure (mappings and lists)."""
    if isinstance(value, Mapping):
        return MappingProxyType({k: freeze_options(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze_options(v) for v in value)
    return value


def thaw_options(value: Any) -> Any:
    """Fresh mutable copy of a frozen options structure, safe to hand to a library."""
    if isinstance(value, Mapping):
        return {k: thaw_options(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return [thaw_options(v) for v in value]
    return value


class CommandSpec(BaseModel):
    """Parameters for a renderer that shells out to an external tool."""

    model_config = ConfigDict(frozen=True)

    argv: tuple[str, ...]
    timeout: float | None = Field(default=None, gt=0)

    @field_validator("argv", mode="before")
    @classmethod
    def _split_command_line(cls, value: Any) -> Any:
        # Command lines from YAML are split once here, never at render time
        if isinstance(value, str):
            return tuple(shlex.split(value))
        return value

    @field_validator("argv")
    @classmethod
    def _require_executable(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        if not value or not value[0]:
            raise ValueError("argv must start with an executable name")
        return value

    @property
    def executable(self) -> str:
        return self.argv[0]


class LibrarySpec(BaseModel):
    """Parameters for a renderer that calls an importable Python library.

    ``entry_point`` is a dotted attribute path inside ``module``.  Without
    ``method`` it is called as ``entry_point(content, **options)``; with
    ``method`` it is treated as a converter class, constructed with
    ``options``, and ``method`` is called with the content.
    ``options`` is stored read-only; every call receives its own mutable copy.
    """

    model_config = ConfigDict(frozen=True)

    module: str
    entry_point: str
    method: str | None = None
    options: dict[str, Any] = Field(default_factory=dict)
    content_arg: str | None = None  # pass content by keyword instead of positionally
    result_key: str | None = None  # index into a mapping result (e.g. docutils parts)
    package: str | None = None  # distribution name for install hints

    @field_validator("options", mode="after")
    @classmethod
    def _freeze_options(cls, value: dict[str, Any]) -> Mapping[str, Any]:
        return freeze_options(value)

    @field_serializer("options")
    def _dump_options(self, value: Mapping[str, Any]) -> dict[str, Any]:
        return thaw_options(value)

    @property
    def install_hint(self) -> str:
        return f"Install with: pip install {self.package or self.module}"


class RendererDescriptor(BaseModel):
    """Immutable description of one markup language and how to render it."""

    model_config = ConfigDict(frozen=True)

    name: str
    extensions: tuple[str, ...] = ()
    aliases: tuple[str, ...] = ()
    strategy: StrategyKind
    command: CommandSpec | None = None
    library: LibrarySpec | None = None

    @field_validator("name")
    @classmethod
    def _normalize_name(cls, value: str) -> str:
        value = normalize_identifier(value)
        if not value:
            raise ValueError("name must not be empty")
        return value

    @field_validator("aliases")
    @classmethod
    def _normalize_aliases(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(normalize_identifier(a) for a in value if a.strip())

    @field_validator("extensions")
    @classmethod
    def _normalize_extensions(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        result = []
        for ext in value:
            ext = normalize_identifier(ext)
            if not ext:
                continue
            result.append(ext if ext.startswith(".") else f".{ext}")
        return tuple(result)

    @model_validator(mode="after")
    def _check_strategy_params(self) -> RendererDescriptor:
        if self.strategy is StrategyKind.command:
            if self.command is None:
                raise ValueError(f"{self.name}: command strategy requires 'command'")
            if self.library is not None:
                raise ValueError(f"{self.name}: command strategy cannot set 'library'")
        else:
            if self.library is None:
                raise ValueError(f"{self.name}: library strategy requires 'library'")
            if self.command is not None:
                raise ValueError(f"{self.name}: library strategy cannot set 'command'")
        return self

    @property
    def identifiers(self) -> tuple[str, ...]:
        """Every lookup key for this language, name first."""
        seen: dict[str, None] = {}
        for key in (self.name, *self.aliases, *self.extensions):
            seen.setdefault(key, None)
        return tuple(seen)
