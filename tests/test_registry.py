"""Tests for markupkit.registry: descriptor models, lifecycle, duplicates, builtins."""

from __future__ import annotations

import itertools
import logging

import pytest
from pydantic import ValidationError

from markupkit.errors import DuplicateIdentifier, RegistryFrozen
from markupkit.interfaces.renderer import StrategyKind
from markupkit.registry import BUILTIN_RENDERERS, LanguageRegistry
from markupkit.registry.builtin import MARKDOWN
from markupkit.registry.models import CommandSpec, LibrarySpec, RendererDescriptor


def _descriptor(name: str, *extensions: str) -> RendererDescriptor:
    return RendererDescriptor(
        name=name,
        extensions=extensions,
        strategy=StrategyKind.command,
        command=CommandSpec(argv=(f"{name}-tool",)),
    )


# ---------------------------------------------------------------------------
# Descriptor models
# ---------------------------------------------------------------------------


class TestCommandSpec:
    def test_string_command_line_is_split(self):
        spec = CommandSpec(argv="pandoc --from 'org mode' --to html")
        assert spec.argv == ("pandoc", "--from", "org mode", "--to", "html")
        assert spec.executable == "pandoc"

    def test_empty_argv_rejected(self):
        with pytest.raises(ValidationError):
            CommandSpec(argv=())

    def test_non_positive_timeout_rejected(self):
        with pytest.raises(ValidationError):
            CommandSpec(argv=("tool",), timeout=0)


class TestLibrarySpec:
    def _spec(self) -> LibrarySpec:
        return LibrarySpec(
            module="docutils.core",
            entry_point="publish_parts",
            options={"writer_name": "html5", "settings_overrides": {"report_level": 5}, "tags": ["a"]},
        )

    def test_options_cannot_be_mutated(self):
        spec = self._spec()
        with pytest.raises(TypeError):
            spec.options["writer_name"] = "latex"
        with pytest.raises(TypeError):
            spec.options["settings_overrides"]["report_level"] = 1
        with pytest.raises(AttributeError):
            spec.options["tags"].append("b")

    def test_builtin_options_are_read_only(self):
        with pytest.raises(TypeError):
            MARKDOWN.library.options["extensions"] = []

    def test_dump_returns_plain_containers(self):
        dumped = self._spec().model_dump(mode="json")
        assert dumped["options"] == {
            "writer_name": "html5",
            "settings_overrides": {"report_level": 5},
            "tags": ["a"],
        }


class TestRendererDescriptor:
    def test_extensions_normalized(self):
        d = _descriptor("Markdown", "MD", ".Markdown", " ")
        assert d.name == "markdown"
        assert d.extensions == (".md", ".markdown")

    def test_identifiers_name_first_without_duplicates(self):
        d = RendererDescriptor(
            name="rst",
            aliases=("rst", "ReST"),
            extensions=(".rst",),
            strategy=StrategyKind.command,
            command=CommandSpec(argv=("rst2html",)),
        )
        assert d.identifiers == ("rst", "rest", ".rst")

    def test_command_strategy_requires_command(self):
        with pytest.raises(ValidationError, match="requires 'command'"):
            RendererDescriptor(name="x", strategy=StrategyKind.command)

    def test_library_strategy_requires_library(self):
        with pytest.raises(ValidationError, match="requires 'library'"):
            RendererDescriptor(name="x", strategy="library")

    def test_mixed_params_rejected(self):
        with pytest.raises(ValidationError, match="cannot set"):
            RendererDescriptor(
                name="x",
                strategy=StrategyKind.library,
                library=LibrarySpec(module="m", entry_point="f"),
                command=CommandSpec(argv=("tool",)),
            )

    def test_descriptor_is_immutable(self):
        d = _descriptor("asciidoc", ".adoc")
        with pytest.raises(ValidationError):
            d.name = "other"

    def test_validates_from_plain_dict(self):
        d = RendererDescriptor.model_validate({
            "name": "org",
            "extensions": ["org"],
            "strategy": "command",
            "command": {"argv": "pandoc -f org -t html", "timeout": 5},
        })
        assert d.strategy is StrategyKind.command
        assert d.extensions == (".org",)
        assert d.command.timeout == 5


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------


class TestRegistryLifecycle:
    def test_totality_after_freeze(self):
        descriptors = [_descriptor("a", ".a"), _descriptor("b", ".b", ".bb"), _descriptor("c")]
        registry = LanguageRegistry()
        registry.register_all(descriptors)
        registry.freeze()

        for d in descriptors:
            for identifier in d.identifiers:
                assert registry.lookup(identifier) is d

    def test_lookup_unknown_returns_none(self):
        registry = LanguageRegistry()
        registry.freeze()
        assert registry.lookup(".nope") is None

    def test_lookup_is_case_insensitive(self):
        d = _descriptor("textile", ".textile")
        registry = LanguageRegistry()
        registry.register_descriptor(d)
        registry.freeze()
        assert registry.lookup(".TEXTILE") is d
        assert registry.lookup("  Textile ") is d

    def test_register_after_freeze_is_rejected(self):
        registry = LanguageRegistry()
        registry.freeze()
        with pytest.raises(RegistryFrozen):
            registry.register(".md", _descriptor("markdown"))
        with pytest.raises(RegistryFrozen):
            registry.register_descriptor(_descriptor("markdown"))
        assert len(registry) == 0

    def test_freeze_is_idempotent(self):
        registry = LanguageRegistry()
        registry.register_descriptor(_descriptor("a", ".a"))
        registry.freeze()
        registry.freeze()
        assert registry.frozen is True
        assert len(registry) == 2

    def test_frozen_table_is_read_only(self):
        registry = LanguageRegistry()
        registry.register_descriptor(_descriptor("a", ".a"))
        registry.freeze()
        with pytest.raises(TypeError):
            registry._table[".b"] = _descriptor("b")

    def test_empty_identifier_rejected(self):
        registry = LanguageRegistry()
        with pytest.raises(ValueError):
            registry.register("   ", _descriptor("a"))

    def test_contains_and_listing(self):
        a, b = _descriptor("b-lang", ".b"), _descriptor("a-lang", ".a")
        registry = LanguageRegistry()
        registry.register_all([a, b])
        registry.freeze()
        assert ".A" in registry
        assert 42 not in registry
        assert registry.identifiers() == [".a", ".b", "a-lang", "b-lang"]
        assert [d.name for d in registry.descriptors()] == ["a-lang", "b-lang"]


# ---------------------------------------------------------------------------
# Duplicates and ordering
# ---------------------------------------------------------------------------


class TestDuplicatePolicy:
    def test_reject_raises(self):
        registry = LanguageRegistry()
        registry.register_descriptor(_descriptor("markdown", ".md"))
        with pytest.raises(DuplicateIdentifier) as exc_info:
            registry.register_descriptor(_descriptor("other", ".md"))
        assert exc_info.value.identifier == ".md"
        assert exc_info.value.existing == "markdown"
        assert exc_info.value.incoming == "other"

    def test_reject_leaves_registry_unchanged(self):
        registry = LanguageRegistry()
        registry.register_descriptor(_descriptor("markdown", ".md"))
        with pytest.raises(DuplicateIdentifier):
            registry.register_descriptor(_descriptor("other", ".other", ".md"))
        assert "other" not in registry
        assert ".other" not in registry

    def test_override_replaces_and_warns(self, caplog):
        original, replacement = _descriptor("markdown", ".md"), _descriptor("commonmark", ".md")
        registry = LanguageRegistry(on_duplicate="override")
        registry.register_descriptor(original)
        with caplog.at_level(logging.WARNING, logger="markupkit.registry.registry"):
            registry.register_descriptor(replacement)
        registry.freeze()

        assert registry.lookup(".md") is replacement
        assert registry.lookup("markdown") is original
        assert "re-registered" in caplog.text
        assert "'.md'" in caplog.text

    def test_same_descriptor_twice_is_not_a_conflict(self):
        d = _descriptor("markdown", ".md")
        registry = LanguageRegistry()
        registry.register(".md", d)
        registry.register(".md", d)
        assert registry.lookup(".md") is d


class TestOrderIndependence:
    def test_any_registration_order_gives_same_lookups(self):
        descriptors = [_descriptor("a", ".a"), _descriptor("b", ".b"), _descriptor("c", ".c")]
        results = []
        for order in itertools.permutations(descriptors):
            registry = LanguageRegistry()
            registry.register_all(order)
            registry.freeze()
            results.append({k: registry.lookup(k).name for k in registry.identifiers()})
        assert all(r == results[0] for r in results)


# ---------------------------------------------------------------------------
# Built-in languages
# ---------------------------------------------------------------------------


class TestBuiltinRenderers:
    def test_builtins_register_without_conflicts(self):
        registry = LanguageRegistry(on_duplicate="reject")
        registry.register_all(BUILTIN_RENDERERS)
        registry.freeze()
        assert len(registry.descriptors()) == len(BUILTIN_RENDERERS)

    @pytest.mark.parametrize(
        "identifier, expected",
        [
            (".md", "markdown"),
            (".markdown", "markdown"),
            (".rst", "rst"),
            (".rst.txt", "rst"),
            (".adoc", "asciidoc"),
            (".textile", "textile"),
            (".rdoc", "rdoc"),
            (".org", "org"),
            (".mediawiki", "mediawiki"),
            (".creole", "creole"),
            (".pod", "pod"),
        ],
    )
    def test_builtin_extension_mapping(self, identifier, expected):
        registry = LanguageRegistry()
        registry.register_all(BUILTIN_RENDERERS)
        registry.freeze()
        assert registry.lookup(identifier).name == expected

    def test_command_builtins_are_plain_argument_vectors(self):
        for d in BUILTIN_RENDERERS:
            if d.strategy is StrategyKind.command:
                assert d.command.timeout is None
                assert all(" " not in arg for arg in d.command.argv)
