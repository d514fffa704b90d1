"""Quill exception hierarchy.

Shared across the locator, caches, render pipeline, and handlers so
every module raises and catches the same types.
"""


class QuillError(Exception):
    """Base for all quill-specific errors."""


class ConfigurationError(QuillError):
    """Raised when views configuration is invalid."""


class EngineNotFound(ConfigurationError):  # noqa: N818
    """No engine is registered under the requested name."""

    def __init__(self, kind: str, name: str, available: tuple[str, ...] = ()) -> None:
        self.kind = kind
        self.name = name
        self.available = available
        known = ", ".join(available) if available else "none"
        super().__init__(f"No {kind} engine named {name!r} (registered: {known})")


class ResourceReadError(QuillError):
    """Reading a resource from storage failed (permissions, I/O)."""

    def __init__(self, path: str, detail: str = "") -> None:
        self.path = path
        self.detail = detail
        super().__init__(f"{path}: {detail}" if detail else path)


class ResourceNotFound(ResourceReadError):  # noqa: N818
    """The resource does not exist at the resolved path."""


class RenderError(QuillError):
    """A first- or second-pass engine failed to render or compile."""

    def __init__(self, name: str, detail: str = "") -> None:
        self.name = name
        self.detail = detail
        super().__init__(f"Failed to render {name!r}: {detail}" if detail else name)


class CompressionError(QuillError):
    """The compression capability failed."""
