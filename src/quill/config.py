"""Views configuration.

ViewsConfig is a frozen dataclass — immutable after creation, passed
explicitly into the locator, file cache, and render pipeline. The
mutable getter/setter surface lives on ``Views`` and swaps the whole
config object rather than editing it in place.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any

_TRUTHY = frozenset({"1", "true", "yes", "on"})


def _env_flag(value: str | None) -> bool:
    return value is not None and value.strip().lower() in _TRUTHY


@dataclass(frozen=True, slots=True)
class ViewsConfig:
    """Views configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = ViewsConfig(root="/srv/site", cache=True, first_pass="md")
    """

    # Directories
    root: str | Path = field(default_factory=os.getcwd)
    views_dir: str = "views"
    public_dir: str = "public"

    # Engines (names resolved through the EngineRegistry)
    first_pass: str = "kida"
    second_pass: str = "kida"

    # Off unless forced or running in production
    cache: bool = False

    # Params merged under caller vars for every first-pass render
    defaults: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    # Extensions that are already final markup (second pass reads them directly)
    final_extensions: tuple[str, ...] = (".html", ".htm")

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        **overrides: Any,
    ) -> ViewsConfig:
        """Build a config from process environment, read once at startup.

        ``QUILL_CACHE`` forces caching on; otherwise caching follows
        ``QUILL_ENV == "production"``. ``QUILL_ROOT`` sets the root
        directory. Keyword overrides win over the environment.
        """
        env = os.environ if environ is None else environ
        values: dict[str, Any] = {
            "cache": _env_flag(env.get("QUILL_CACHE")) or env.get("QUILL_ENV") == "production",
        }
        if env.get("QUILL_ROOT"):
            values["root"] = env["QUILL_ROOT"]
        values.update(overrides)
        if "defaults" in values:
            values["defaults"] = MappingProxyType(dict(values["defaults"]))
        return cls(**values)
