"""Shared test fixtures for markupkit."""

import logging
import sys
import textwrap

import pytest

from markupkit.config.models import MarkupConfig
from markupkit.interfaces.renderer import StrategyKind
from markupkit.registry.models import CommandSpec, LibrarySpec, RendererDescriptor
from markupkit.registry.registry import LanguageRegistry
from markupkit.strategies.library import probe_module

STUB_MODULE = "markupkit_test_stub"
BROKEN_MODULE = "markupkit_broken_stub"

_STUB_SOURCE = textwrap.dedent(
    '''
    """Stand-in markup library used by the test suite."""


    def to_html(text, **options):
        prefix = options.get("prefix", "")
        return prefix + text.upper()


    def parts(source, **options):
        return {"body": "<p>" + source + "</p>", "whole": "<html>" + source + "</html>"}


    def explode(text):
        raise RuntimeError("stub parser exploded")


    def not_a_string(text):
        return 42


    def tagged(text, tags):
        tags.append(text)
        return ",".join(tags)


    class Converter:
        def __init__(self, **options):
            self.options = options
            self.calls = 0

        def convert(self, text):
            self.calls += 1
            return "<div>" + text + "</div>" + ("!" * (self.calls - 1))
    '''
)


@pytest.fixture
def make_command():
    """Factory for command descriptors that run an inline Python script."""

    def _make(name: str, script: str, extensions=(), timeout=None) -> RendererDescriptor:
        return RendererDescriptor(
            name=name,
            extensions=extensions,
            strategy=StrategyKind.command,
            command=CommandSpec(argv=(sys.executable, "-c", script), timeout=timeout),
        )

    return _make


@pytest.fixture
def make_library(stub_library):
    """Factory for library descriptors backed by the stub module by default."""

    def _make(name: str, extensions=(), **library) -> RendererDescriptor:
        library.setdefault("module", stub_library)
        library.setdefault("entry_point", "to_html")
        return RendererDescriptor(
            name=name,
            extensions=extensions,
            strategy=StrategyKind.library,
            library=LibrarySpec(**library),
        )

    return _make


@pytest.fixture(autouse=True)
def _isolate_process_state():
    """Fresh import probe cache and no CLI-installed log handlers per test."""
    probe_module.cache_clear()
    yield
    probe_module.cache_clear()
    logger = logging.getLogger("markupkit")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def stub_library(tmp_path, monkeypatch):
    """Importable ``markupkit_test_stub`` module on sys.path."""
    (tmp_path / f"{STUB_MODULE}.py").write_text(_STUB_SOURCE)
    monkeypatch.syspath_prepend(str(tmp_path))
    monkeypatch.delitem(sys.modules, STUB_MODULE, raising=False)
    return STUB_MODULE


@pytest.fixture
def broken_library(tmp_path, monkeypatch):
    """Module that raises RuntimeError while being imported."""
    (tmp_path / f"{BROKEN_MODULE}.py").write_text("raise RuntimeError('init failed')\n")
    monkeypatch.syspath_prepend(str(tmp_path))
    monkeypatch.delitem(sys.modules, BROKEN_MODULE, raising=False)
    return BROKEN_MODULE


@pytest.fixture
def echo_descriptor(make_command):
    return make_command("echo", "import sys; sys.stdout.write(sys.stdin.read())", extensions=(".echo",))


@pytest.fixture
def upper_descriptor(make_library):
    return make_library("markdown", extensions=(".md",))


@pytest.fixture
def frozen_registry(echo_descriptor, upper_descriptor):
    registry = LanguageRegistry()
    registry.register_descriptor(echo_descriptor)
    registry.register_descriptor(upper_descriptor)
    registry.freeze()
    return registry


@pytest.fixture
def sample_config():
    return MarkupConfig()
