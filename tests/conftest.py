"""Shared fixtures: a temporary site tree and counting capabilities."""

import gzip
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import anyio
import pytest

from quill.config import ViewsConfig
from quill.engines.kida_engine import KidaCompiler
from quill.engines.registry import EngineRegistry


class CountingReader:
    """Async reader that counts calls per path and can be told to fail."""

    def __init__(self, *, delay: float = 0.0) -> None:
        self.calls: list[str] = []
        self.delay = delay
        self.failures: dict[str, BaseException] = {}

    def count(self, path: str | Path) -> int:
        return self.calls.count(str(path))

    async def __call__(self, path: str) -> bytes:
        self.calls.append(path)
        if self.delay:
            await anyio.sleep(self.delay)
        if path in self.failures:
            raise self.failures[path]
        return await anyio.Path(path).read_bytes()


class CountingCompressor:
    """gzip.compress with a call counter."""

    def __init__(self, *, fail: bool = False) -> None:
        self.calls = 0
        self.fail = fail

    def __call__(self, data: bytes) -> bytes:
        self.calls += 1
        if self.fail:
            msg = "compressor exploded"
            raise RuntimeError(msg)
        return gzip.compress(data)


class RecordingEngine:
    """First-pass engine returning a fixed template or the source, recording params."""

    def __init__(self, output: str | None = None) -> None:
        self.output = output
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def render(self, source: str, params: Mapping[str, Any]) -> str:
        self.calls.append((source, dict(params)))
        return self.output if self.output is not None else source


class FailingEngine:
    def render(self, source: str, params: Mapping[str, Any]) -> str:
        msg = "bad template"
        raise ValueError(msg)


@pytest.fixture
def site(tmp_path: Path) -> Path:
    """Create a root with views/ and public/ directories."""
    views = tmp_path / "views"
    views.mkdir()
    public = tmp_path / "public"
    public.mkdir()

    (views / "app.rec").write_text("app source")
    (views / "page.html").write_text("<i>{{ name }}</i>")
    (public / "app.js").write_text("console.log('hello');" * 20)
    (public / "style.css").write_text("body { color: red; }")
    return tmp_path


@pytest.fixture
def reader() -> CountingReader:
    return CountingReader()


@pytest.fixture
def compressor() -> CountingCompressor:
    return CountingCompressor()


@pytest.fixture
def engine() -> RecordingEngine:
    return RecordingEngine()


@pytest.fixture
def registry(engine: RecordingEngine) -> EngineRegistry:
    """Registry with a recording first pass named ``rec`` and kida second pass."""
    reg = EngineRegistry()
    reg.register_first_pass("rec", engine)
    reg.register_first_pass("broken", FailingEngine())
    reg.register_second_pass("kida", KidaCompiler())
    return reg


@pytest.fixture
def config(site: Path) -> ViewsConfig:
    return ViewsConfig(root=site, first_pass="rec", cache=True)


@pytest.fixture
def slow_reader() -> CountingReader:
    """Reader that yields long enough for concurrent callers to pile up."""
    return CountingReader(delay=0.01)


@pytest.fixture
def failing_compressor() -> CountingCompressor:
    return CountingCompressor(fail=True)
