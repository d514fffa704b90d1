"""Views — the startup-time facade over locator, file cache, and pipeline.

Owns one ``ViewsConfig`` and the caches built from it. Configuration
accessors follow get/set semantics: called without an argument they
return the current value, called with one they swap in a new config
for every later call. Set configuration at startup, before traffic.

Usage::

    views = Views(ViewsConfig.from_env(root="/srv/site"))
    views.views("templates")

    home = views.send_static("index", warm=True)
    script = views.send_script("app.js", warm=True)
    profile = views.send_template("profile")

    await views.warm_up()
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import replace
from pathlib import Path
from types import MappingProxyType
from typing import Any

import anyio

from quill._internal.invoke import invoke
from quill.config import ViewsConfig
from quill.engines.protocol import Compressor, Reader, RenderFunction
from quill.engines.registry import EngineRegistry, default_registry
from quill.files import FileCache
from quill.handlers import Handler, SendScript, SendStatic, SendTemplate
from quill.locator import Locator
from quill.templates import RenderPipeline

logger = logging.getLogger("quill.server")

type ErrorReporter = Callable[[Exception], Any]


class Views:
    """Configuration boundary and handler factory.

    Args:
        config: Initial configuration (default: ``ViewsConfig.from_env()``).
        engines: Engine registry (default: built-in kida and md engines).
        reader: Async storage read capability shared by file cache and pipeline.
        compressor: Sync compression capability (default: ``gzip.compress``).
        on_error: Error channel for handler and warm-up failures, sync or async.
    """

    __slots__ = (
        "_config",
        "_files",
        "_locator",
        "_on_error",
        "_pipeline",
        "_warm_warned",
        "_warmers",
    )

    def __init__(
        self,
        config: ViewsConfig | None = None,
        *,
        engines: EngineRegistry | None = None,
        reader: Reader | None = None,
        compressor: Compressor | None = None,
        on_error: ErrorReporter | None = None,
    ) -> None:
        self._config = config if config is not None else ViewsConfig.from_env()
        self._locator = Locator(self._config)
        self._files = FileCache(self._config, reader=reader, compressor=compressor)
        self._pipeline = RenderPipeline(self._config, engines or default_registry(), reader=reader)
        self._on_error = on_error
        self._warmers: list[Handler] = []
        self._warm_warned = False

    # ------------------------------------------------------------------
    # Configuration (get with no argument, set with one)
    # ------------------------------------------------------------------

    @property
    def config(self) -> ViewsConfig:
        return self._config

    @property
    def files(self) -> FileCache:
        return self._files

    @property
    def pipeline(self) -> RenderPipeline:
        return self._pipeline

    @property
    def engines(self) -> EngineRegistry:
        return self._pipeline.engines

    def configure(self, **changes: Any) -> ViewsConfig:
        """Replace configuration fields. Cached entries are not rekeyed."""
        if "defaults" in changes:
            changes["defaults"] = MappingProxyType(dict(changes["defaults"]))
        config = replace(self._config, **changes)
        # Validates engine names before anything is swapped
        self._pipeline.configure(config)
        self._files.configure(config)
        self._locator = Locator(config)
        self._config = config
        logger.debug("Views reconfigured: %s", ", ".join(sorted(changes)))
        return config

    def root(self, value: str | Path | None = None) -> str | Path | None:
        """Get or set the root directory."""
        if value is None:
            return self._config.root
        self.configure(root=value)
        return None

    def views(self, value: str | None = None) -> str | None:
        """Get or set the views directory, relative to root."""
        if value is None:
            return self._config.views_dir
        self.configure(views_dir=value)
        return None

    def public(self, value: str | None = None) -> str | None:
        """Get or set the public directory, relative to root."""
        if value is None:
            return self._config.public_dir
        self.configure(public_dir=value)
        return None

    def first_pass(self, value: str | None = None) -> str | None:
        """Get or set the first-pass engine name."""
        if value is None:
            return self._config.first_pass
        self.configure(first_pass=value)
        return None

    def second_pass(self, value: str | None = None) -> str | None:
        """Get or set the second-pass engine name."""
        if value is None:
            return self._config.second_pass
        self.configure(second_pass=value)
        return None

    def cache_enabled(self, value: bool | None = None) -> bool | None:
        """Get or set whether caching is on."""
        if value is None:
            return self._config.cache
        self.configure(cache=value)
        return None

    def defaults(self, value: Mapping[str, Any] | None = None) -> Mapping[str, Any] | None:
        """Get or set the params merged under every first-pass render."""
        if value is None:
            return self._config.defaults
        self.configure(defaults=value)
        return None

    # ------------------------------------------------------------------
    # Pipeline access
    # ------------------------------------------------------------------

    def resolve(self, name: str, kind: str = "views") -> str:
        """Resolve *name* against the views or public directory."""
        return self._locator.resolve(name, "public" if kind == "public" else "views")

    async def file(self, path: str, *, cache: bool = True, zip: bool = False) -> bytes:  # noqa: A002
        """Raw or compressed contents of *path*, used verbatim as key."""
        return await self._files.get(path, cache=cache, zip=zip)

    async def public_file(self, name: str, *, cache: bool = True, zip: bool = False) -> bytes:  # noqa: A002
        """Like :meth:`file`, with *name* resolved against the public directory."""
        return await self._files.get(self._locator.resolve(name, "public"), cache=cache, zip=zip)

    async def render(
        self,
        name: str,
        vars: Mapping[str, Any] | None = None,  # noqa: A002
        *,
        cache: bool = True,
    ) -> str:
        """First-pass render of *name* from the views directory."""
        return await self._pipeline.render(name, vars, cache=cache)

    async def compile(
        self,
        name: str,
        vars: Mapping[str, Any] | None = None,  # noqa: A002
    ) -> RenderFunction:
        """Second-pass compile of *name* into a render function."""
        return await self._pipeline.compile(name, vars)

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    def send_static(self, name: str, *, warm: bool = False) -> SendStatic:
        return self._register(SendStatic(self, name), warm=warm)

    def send_script(self, name: str, *, warm: bool = False) -> SendScript:
        return self._register(SendScript(self, name), warm=warm)

    def send_template(
        self,
        name: str,
        vars: Mapping[str, Any] | None = None,  # noqa: A002
        *,
        warm: bool = False,
    ) -> SendTemplate:
        return self._register(SendTemplate(self, name, vars), warm=warm)

    def _register[H: SendStatic | SendScript | SendTemplate](self, handler: H, *, warm: bool) -> H:
        if warm:
            self._warmers.append(handler)
        return handler

    @property
    def pending_warm(self) -> int:
        """Number of handlers registered for warm-up."""
        return len(self._warmers)

    def check_warm(self) -> None:
        """Warn once if requests arrive while warm-up handlers are still pending."""
        if self._warmers and not self._warm_warned:
            self._warm_warned = True
            logger.warning(
                "%d handler(s) registered with warm=True were not warmed before the "
                "first request; await views.warm_up() at startup",
                len(self._warmers),
            )

    async def warm_up(self) -> None:
        """Run every registered warm-up concurrently.

        Call once at startup (an ASGI lifespan hook works). Failures are
        logged and reported, never raised: a broken template should fail
        its requests, not the process.
        """
        warmers, self._warmers = self._warmers, []
        if not warmers:
            return
        logger.info("Warming %d view handler(s)", len(warmers))
        async with anyio.create_task_group() as tg:
            for handler in warmers:
                tg.start_soon(self._warm_one, handler)

    async def _warm_one(self, handler: Handler) -> None:
        try:
            await handler.warm()
        except Exception as exc:
            logger.warning("Warm-up failed for %s: %s", handler.name, exc)
            await self.report(exc)

    async def report(self, exc: Exception) -> None:
        """Forward *exc* to the error channel, if one is set."""
        if self._on_error is None:
            return
        try:
            await invoke(self._on_error, exc)
        except Exception:
            logger.exception("Error reporter failed")
