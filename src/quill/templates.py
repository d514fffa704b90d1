"""Two-pass render pipeline.

First pass: template source + params -> markup (``render``).
Second pass: markup -> render function of per-request locals (``compile``).

Both passes are memoized per resource identity, the logical name with
the first-pass engine's name enforced as its default extension
(``"app"`` -> ``"app.kida"``). Rendered markup and compiled functions
live in separate mappings, so rendering and compiling the same name
never clobber each other.

The markup a second-pass compile is built from is rendered uncached;
only the compiled function is stored.
"""

import logging
import os
from collections.abc import Mapping
from typing import Any

from quill._internal.invoke import invoke
from quill._internal.singleflight import SingleFlight
from quill.config import ViewsConfig
from quill.engines.protocol import Reader, RenderFunction
from quill.engines.registry import EngineRegistry, default_registry
from quill.errors import QuillError, RenderError, ResourceReadError
from quill.files import read_bytes, read_resource
from quill.locator import Locator, add_extension

logger = logging.getLogger("quill.render")


class RenderPipeline:
    """Memoized first- and second-pass rendering over the views directory.

    Usage::

        pipeline = RenderPipeline(ViewsConfig(root="/srv/site", cache=True))
        html = await pipeline.render("about", {"title": "About"})
        page = await pipeline.compile("profile")
        body = page({"user": user})
    """

    __slots__ = (
        "_compiled",
        "_compiles",
        "_config",
        "_engines",
        "_locator",
        "_reader",
        "_rendered",
        "_renders",
    )

    def __init__(
        self,
        config: ViewsConfig,
        engines: EngineRegistry | None = None,
        *,
        reader: Reader | None = None,
    ) -> None:
        self._engines = engines or default_registry()
        self._reader: Reader = reader or read_bytes
        self._rendered: dict[str, str] = {}
        self._compiled: dict[str, RenderFunction] = {}
        self._renders: SingleFlight[str, str] = SingleFlight()
        self._compiles: SingleFlight[str, RenderFunction] = SingleFlight()
        self.configure(config)

    def configure(self, config: ViewsConfig) -> None:
        """Swap in new configuration.

        Both engine names must be registered. Existing entries keep the
        identities they were stored under.
        """
        self._engines.first_pass(config.first_pass)
        self._engines.second_pass(config.second_pass)
        self._config = config
        self._locator = Locator(config)

    @property
    def config(self) -> ViewsConfig:
        return self._config

    @property
    def engines(self) -> EngineRegistry:
        return self._engines

    @property
    def enabled(self) -> bool:
        return self._config.cache

    def identity(self, name: str) -> str:
        """Cache key for *name*: the name with the default extension applied."""
        return add_extension(name, self._config.first_pass)

    def cached_html(self, name: str) -> str | None:
        return self._rendered.get(self.identity(name))

    def cached_function(self, name: str) -> RenderFunction | None:
        return self._compiled.get(self.identity(name))

    # ------------------------------------------------------------------
    # First pass
    # ------------------------------------------------------------------

    async def render(
        self,
        name: str,
        vars: Mapping[str, Any] | None = None,  # noqa: A002
        *,
        cache: bool = True,
    ) -> str:
        """Render *name* through the first-pass engine.

        Params passed to the engine are, in increasing precedence, the
        configured ``defaults``, *vars*, and ``filename`` (the resolved
        path, used by engines to resolve includes).

        Raises:
            ResourceNotFound: The template file does not exist.
            RenderError: The engine failed.
        """
        key = self.identity(name)
        if self.enabled:
            html = self._rendered.get(key)
            if html is not None:
                logger.debug("Cache hit for rendered %s", key)
                return html
            if cache:
                return await self._renders.do(key, lambda: self._render_and_store(key, vars))
        return await self._render(key, vars)

    async def _render_and_store(self, key: str, vars: Mapping[str, Any] | None) -> str:  # noqa: A002
        html = await self._render(key, vars)
        return self._rendered.setdefault(key, html)

    async def _render(self, key: str, vars: Mapping[str, Any] | None) -> str:  # noqa: A002
        path = self._locator.resolve(key, "views")
        source = await self._read_text(path)
        params = {**self._config.defaults, **(vars or {}), "filename": path}
        engine = self._engines.first_pass(self._config.first_pass)

        logger.debug("Rendering %s with %s engine", path, self._config.first_pass)
        try:
            return await invoke(engine.render, source, params)
        except QuillError:
            raise
        except Exception as exc:
            raise RenderError(key, str(exc)) from exc

    # ------------------------------------------------------------------
    # Second pass
    # ------------------------------------------------------------------

    async def compile(
        self,
        name: str,
        vars: Mapping[str, Any] | None = None,  # noqa: A002
    ) -> RenderFunction:
        """Compile *name* into a render function of per-request locals.

        Names ending in a final-output extension (``.html``) are read as
        markup directly. Anything else is first rendered, uncached, with
        *vars*.

        Raises:
            ResourceNotFound: The source file does not exist.
            RenderError: Either engine failed.
        """
        key = self.identity(name)
        if self.enabled:
            fn = self._compiled.get(key)
            if fn is not None:
                logger.debug("Cache hit for compiled %s", key)
                return fn
            return await self._compiles.do(key, lambda: self._compile_and_store(key, vars))
        return await self._compile(key, vars)

    async def _compile_and_store(self, key: str, vars: Mapping[str, Any] | None) -> RenderFunction:  # noqa: A002
        fn = await self._compile(key, vars)
        return self._compiled.setdefault(key, fn)

    async def _compile(self, key: str, vars: Mapping[str, Any] | None) -> RenderFunction:  # noqa: A002
        if os.path.splitext(key)[1] in self._config.final_extensions:
            markup = await self._read_text(self._locator.resolve(key, "views"))
        else:
            markup = await self.render(key, vars, cache=False)

        engine = self._engines.second_pass(self._config.second_pass)
        logger.debug("Compiling %s with %s engine", key, self._config.second_pass)
        try:
            return engine.compile(markup)
        except Exception as exc:
            raise RenderError(key, str(exc)) from exc

    async def _read_text(self, path: str) -> str:
        data = await read_resource(self._reader, path)
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ResourceReadError(path, f"not valid UTF-8: {exc}") from exc
