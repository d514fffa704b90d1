"""Quill — a read-through, two-pass rendering cache for server-rendered views.

Reads templates and static assets from disk, renders them through one or
two passes, gzips what clients can take, and memoizes every derived form
for the life of the process.

Basic usage::

    from quill import Views, ViewsConfig

    views = Views(ViewsConfig.from_env(root="/srv/site"))

    home = views.send_static("index", warm=True)     # views/index.kida -> HTML
    script = views.send_script("app.js", warm=True)  # public/app.js, gzip negotiated
    profile = views.send_template("profile")         # compiled once, rendered per request

    await views.warm_up()
    response = await profile(request, user=user)
"""

__version__ = "0.1.0"
__all__ = [
    "CompressionError",
    "ConfigurationError",
    "EngineNotFound",
    "EngineRegistry",
    "FileCache",
    "Locator",
    "QuillError",
    "RenderError",
    "RenderPipeline",
    "Request",
    "ResourceNotFound",
    "ResourceReadError",
    "Response",
    "Views",
    "ViewsConfig",
    "as_asgi",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import quill`` fast while providing a clean top-level API.
    """
    if name == "Views":
        from quill.views import Views

        return Views

    if name == "ViewsConfig":
        from quill.config import ViewsConfig

        return ViewsConfig

    if name == "FileCache":
        from quill.files import FileCache

        return FileCache

    if name == "RenderPipeline":
        from quill.templates import RenderPipeline

        return RenderPipeline

    if name == "Locator":
        from quill.locator import Locator

        return Locator

    if name == "EngineRegistry":
        from quill.engines.registry import EngineRegistry

        return EngineRegistry

    if name == "Request":
        from quill.http.request import Request

        return Request

    if name == "Response":
        from quill.http.response import Response

        return Response

    if name == "as_asgi":
        from quill.asgi import as_asgi

        return as_asgi

    if name in (
        "CompressionError",
        "ConfigurationError",
        "EngineNotFound",
        "QuillError",
        "RenderError",
        "ResourceNotFound",
        "ResourceReadError",
    ):
        from quill import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
