"""Engine and storage capability protocols.

An engine is any object matching the shape below. No base class
required. The registry checks the shape, not the lineage.

A first-pass engine turns template source into markup::

    class Upper:
        def render(self, source: str, params: Mapping[str, Any]) -> str:
            return source.upper()

A second-pass engine compiles markup into a reusable render function
that is later called with per-request locals::

    class Format:
        def compile(self, markup: str) -> RenderFunction:
            return lambda locals_: markup.format(**locals_)
"""

from collections.abc import Awaitable, Callable, Mapping
from typing import Any, Protocol

# Compiled second-pass output, called with per-request locals
type RenderFunction = Callable[[Mapping[str, Any]], str]

# Storage read capability: path -> full contents
type Reader = Callable[[str], Awaitable[bytes]]

# Compression capability: raw bytes -> compressed bytes (runs in a worker thread)
type Compressor = Callable[[bytes], bytes]


class FirstPassEngine(Protocol):
    """Source -> markup. ``render`` may be sync or async."""

    def render(self, source: str, params: Mapping[str, Any]) -> str | Awaitable[str]: ...


class SecondPassEngine(Protocol):
    """Markup -> render function."""

    def compile(self, markup: str) -> RenderFunction: ...
