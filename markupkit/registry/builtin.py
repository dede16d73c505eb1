"""Built-in markup languages.

Each entry is plain data: which strategy renders the language and with
which parameters.  Adding a language means adding a descriptor here (or in
``markupkit.yaml``), never touching the engine.
"""

from __future__ import annotations

from markupkit.interfaces.renderer import StrategyKind
from markupkit.registry.models import CommandSpec, LibrarySpec, RendererDescriptor

MARKDOWN = RendererDescriptor(
    name="markdown",
    aliases=("md",),
    extensions=(".md", ".markdown", ".mdown", ".mkdn", ".mkd", ".mdwn", ".ron"),
    strategy=StrategyKind.library,
    library=LibrarySpec(
        module="markdown",
        entry_point="Markdown",
        method="convert",
        options={"extensions": ["extra", "sane_lists"], "output_format": "html"},
        package="Markdown",
    ),
)

RESTRUCTUREDTEXT = RendererDescriptor(
    name="rst",
    aliases=("restructuredtext", "rest"),
    extensions=(".rst", ".rest", ".rst.txt", ".rest.txt"),
    strategy=StrategyKind.library,
    library=LibrarySpec(
        module="docutils.core",
        entry_point="publish_parts",
        content_arg="source",
        result_key="body",
        options={
            "writer_name": "html5",
            "settings_overrides": {
                "halt_level": 5,
                "report_level": 5,
                "input_encoding": "unicode",
                "output_encoding": "unicode",
                "raw_enabled": False,
                "file_insertion_enabled": False,
            },
        },
        package="docutils",
    ),
)

TEXTILE = RendererDescriptor(
    name="textile",
    extensions=(".textile",),
    strategy=StrategyKind.library,
    library=LibrarySpec(module="textile", entry_point="textile", package="textile"),
)

CREOLE = RendererDescriptor(
    name="creole",
    extensions=(".creole",),
    strategy=StrategyKind.library,
    library=LibrarySpec(module="creole", entry_point="creole2html", package="python-creole"),
)

ASCIIDOC = RendererDescriptor(
    name="asciidoc",
    aliases=("adoc",),
    extensions=(".asciidoc", ".adoc", ".asc"),
    strategy=StrategyKind.command,
    # -s: body only, -o -: write to stdout, trailing -: read stdin
    command=CommandSpec(argv=("asciidoctor", "--safe-mode", "secure", "-s", "-o", "-", "-")),
)

RDOC = RendererDescriptor(
    name="rdoc",
    extensions=(".rdoc",),
    strategy=StrategyKind.command,
    command=CommandSpec(argv=("rdoc", "--pipe")),
)

ORG = RendererDescriptor(
    name="org",
    aliases=("orgmode",),
    extensions=(".org",),
    strategy=StrategyKind.command,
    command=CommandSpec(argv=("pandoc", "--from", "org", "--to", "html")),
)

MEDIAWIKI = RendererDescriptor(
    name="mediawiki",
    aliases=("wiki",),
    extensions=(".mediawiki", ".wiki"),
    strategy=StrategyKind.command,
    command=CommandSpec(argv=("pandoc", "--from", "mediawiki", "--to", "html")),
)

POD = RendererDescriptor(
    name="pod",
    extensions=(".pod",),
    strategy=StrategyKind.command,
    command=CommandSpec(argv=("pod2html", "--noindex", "--quiet")),
)

BUILTIN_RENDERERS: tuple[RendererDescriptor, ...] = (
    MARKDOWN,
    RESTRUCTUREDTEXT,
    TEXTILE,
    CREOLE,
    ASCIIDOC,
    RDOC,
    ORG,
    MEDIAWIKI,
    POD,
)
