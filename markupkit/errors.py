"""markupkit exception hierarchy.

Render failures all derive from ``RenderError`` and carry a ``kind`` string
so callers (and the CLI) can report them uniformly.  Registry misuse during
startup derives from ``RegistryError``.
"""

from __future__ import annotations


class MarkupError(Exception):
    """Base for all markupkit errors."""


class RenderError(MarkupError):
    """Base for every failure a render call can produce."""

    kind = "RenderError"


class UnsupportedFormat(RenderError):  # noqa: N818
    """No renderer is registered for the requested identifier."""

    kind = "UnsupportedFormat"

    def __init__(self, identifier: str) -> None:
        self.identifier = identifier
        super().__init__(f"No renderer registered for {identifier!r}")


class CommandNotFound(RenderError):  # noqa: N818
    """The external executable could not be resolved on PATH."""

    kind = "CommandNotFound"

    def __init__(self, command: str) -> None:
        self.command = command
        super().__init__(f"Command not found: {command!r}")


class NonZeroExit(RenderError):  # noqa: N818
    """The external command ran but exited with a failure status."""

    kind = "NonZeroExit"

    def __init__(self, command: str, exit_code: int, stderr: str) -> None:
        self.command = command
        self.exit_code = exit_code
        self.stderr = stderr
        msg = f"{command} exited {exit_code}"
        if stderr.strip():
            msg += f": {stderr.strip()}"
        super().__init__(msg)


class RenderTimeout(RenderError):
    """The external command exceeded its time bound and was killed."""

    kind = "Timeout"

    def __init__(self, command: str, timeout: float) -> None:
        self.command = command
        self.timeout = timeout
        super().__init__(f"{command} timed out after {timeout:g}s")


class DependencyMissing(RenderError):  # noqa: N818
    """A required in-process library is not importable."""

    kind = "DependencyMissing"

    def __init__(self, module: str, hint: str = "") -> None:
        self.module = module
        msg = f"Required dependency {module!r} is not available"
        if hint:
            msg += f". {hint}"
        super().__init__(msg)


class RenderingError(RenderError):
    """Generic conversion failure; wraps the underlying exception."""

    kind = "RenderingError"

    def __init__(self, language: str, message: str) -> None:
        self.language = language
        self.detail = message
        super().__init__(f"{language} rendering failed: {message}")


class RegistryError(MarkupError):
    """Raised when the language registry is misused during configuration."""


class DuplicateIdentifier(RegistryError):  # noqa: N818
    """An identifier is already registered and the policy rejects overrides."""

    def __init__(self, identifier: str, existing: str, incoming: str) -> None:
        self.identifier = identifier
        self.existing = existing
        self.incoming = incoming
        super().__init__(
            f"Identifier {identifier!r} already registered to {existing!r}; "
            f"refusing to register it for {incoming!r}"
        )


class RegistryFrozen(RegistryError):  # noqa: N818
    """Registration was attempted after the registry started serving."""

    def __init__(self, identifier: str) -> None:
        self.identifier = identifier
        super().__init__(
            f"Cannot register {identifier!r}: registry is frozen and serving lookups"
        )
