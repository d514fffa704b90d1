"""Engine registry — named first- and second-pass capabilities.

Configuration refers to engines by name (``first_pass="kida"``); the
registry maps those names to engine objects. Lookups of unknown names
raise ``EngineNotFound`` so a typo in configuration surfaces at setup
time, not on the first request.

Usage::

    registry = default_registry()
    registry.register_first_pass("upper", UpperEngine())
    engine = registry.first_pass("upper")
"""

from quill.engines.kida_engine import KidaCompiler, KidaRenderer
from quill.engines.markdown import MarkdownRenderer
from quill.engines.protocol import FirstPassEngine, SecondPassEngine
from quill.errors import ConfigurationError, EngineNotFound


class EngineRegistry:
    """Name -> engine tables for each rendering pass."""

    __slots__ = ("_first", "_second")

    def __init__(self) -> None:
        self._first: dict[str, FirstPassEngine] = {}
        self._second: dict[str, SecondPassEngine] = {}

    def register_first_pass(self, name: str, engine: FirstPassEngine) -> None:
        """Register (or replace) a first-pass engine under *name*."""
        if not callable(getattr(engine, "render", None)):
            msg = f"First-pass engine {name!r} must define render(source, params)"
            raise ConfigurationError(msg)
        self._first[name] = engine

    def register_second_pass(self, name: str, engine: SecondPassEngine) -> None:
        """Register (or replace) a second-pass engine under *name*."""
        if not callable(getattr(engine, "compile", None)):
            msg = f"Second-pass engine {name!r} must define compile(markup)"
            raise ConfigurationError(msg)
        self._second[name] = engine

    def first_pass(self, name: str) -> FirstPassEngine:
        engine = self._first.get(name)
        if engine is None:
            raise EngineNotFound("first-pass", name, tuple(sorted(self._first)))
        return engine

    def second_pass(self, name: str) -> SecondPassEngine:
        engine = self._second.get(name)
        if engine is None:
            raise EngineNotFound("second-pass", name, tuple(sorted(self._second)))
        return engine

    def first_pass_names(self) -> tuple[str, ...]:
        return tuple(sorted(self._first))

    def second_pass_names(self) -> tuple[str, ...]:
        return tuple(sorted(self._second))


def default_registry() -> EngineRegistry:
    """Registry with the built-in engines.

    First pass: ``kida`` (templated HTML), ``md`` (Markdown via patitas).
    Second pass: ``kida``.
    """
    registry = EngineRegistry()
    registry.register_first_pass("kida", KidaRenderer())
    registry.register_first_pass("md", MarkdownRenderer())
    registry.register_second_pass("kida", KidaCompiler())
    return registry
