"""Tests for quill.engines — registry, built-in kida/markdown engines, helpers."""

import pytest

from quill.engines import helpers
from quill.engines.kida_engine import KidaCompiler, KidaRenderer
from quill.engines.markdown import MarkdownRenderer
from quill.engines.registry import EngineRegistry, default_registry
from quill.errors import ConfigurationError, EngineNotFound


class TestEngineRegistry:
    def test_default_registry_names(self) -> None:
        registry = default_registry()

        assert registry.first_pass_names() == ("kida", "md")
        assert registry.second_pass_names() == ("kida",)
        assert isinstance(registry.first_pass("kida"), KidaRenderer)
        assert isinstance(registry.first_pass("md"), MarkdownRenderer)
        assert isinstance(registry.second_pass("kida"), KidaCompiler)

    def test_unknown_name(self) -> None:
        registry = default_registry()

        with pytest.raises(EngineNotFound) as exc_info:
            registry.first_pass("jade")

        assert exc_info.value.name == "jade"
        assert exc_info.value.available == ("kida", "md")
        assert "first-pass" in str(exc_info.value)

    def test_engine_not_found_is_configuration_error(self) -> None:
        with pytest.raises(ConfigurationError):
            EngineRegistry().second_pass("kida")

    def test_register_replaces(self) -> None:
        class Upper:
            def render(self, source, params):
                return source.upper()

        registry = default_registry()
        engine = Upper()
        registry.register_first_pass("kida", engine)

        assert registry.first_pass("kida") is engine

    def test_rejects_wrong_shape(self) -> None:
        registry = EngineRegistry()

        with pytest.raises(ConfigurationError, match="render"):
            registry.register_first_pass("bad", object())  # type: ignore[arg-type]
        with pytest.raises(ConfigurationError, match="compile"):
            registry.register_second_pass("bad", object())  # type: ignore[arg-type]


class TestKidaRenderer:
    def test_renders_params(self, tmp_path) -> None:
        engine = KidaRenderer()
        html = engine.render(
            "<h1>{{ title }}</h1>",
            {"title": "Home", "filename": str(tmp_path / "index.kida")},
        )
        assert html == "<h1>Home</h1>"

    def test_escapes_params(self, tmp_path) -> None:
        engine = KidaRenderer()
        html = engine.render("{{ x }}", {"x": "<script>", "filename": str(tmp_path / "a.kida")})
        assert "<script>" not in html

    def test_include_resolves_next_to_filename(self, tmp_path) -> None:
        (tmp_path / "nav.kida").write_text("<nav>menu</nav>")
        engine = KidaRenderer()

        html = engine.render(
            '{% include "nav.kida" %}<main></main>',
            {"filename": str(tmp_path / "index.kida")},
        )

        assert "<nav>menu</nav>" in html

    def test_helpers_available(self, tmp_path) -> None:
        engine = KidaRenderer()
        html = engine.render(
            "{{ contains(tags, 'a') }}",
            {"tags": ["a", "b"], "filename": str(tmp_path / "x.kida")},
        )
        assert html == "True"


class TestKidaCompiler:
    def test_compile_once_render_many(self) -> None:
        render = KidaCompiler().compile("<b>{{ name }}</b>")

        assert render({"name": "X"}) == "<b>X</b>"
        assert render({"name": "Y"}) == "<b>Y</b>"

    def test_locals_mapping_is_not_mutated(self) -> None:
        render = KidaCompiler().compile("{{ a }}")
        locals_ = {"a": "1"}

        render(locals_)

        assert locals_ == {"a": "1"}


class TestMarkdownRenderer:
    def test_renders_heading(self) -> None:
        pytest.importorskip("patitas")

        html = MarkdownRenderer().render("# Hello", {"filename": "x.md"})

        assert "<h1" in html
        assert "Hello" in html

    def test_empty_source_returns_empty(self) -> None:
        assert MarkdownRenderer().render("", {}) == ""


class TestHelpers:
    def test_comparisons(self) -> None:
        assert helpers.gt(2, 1) and not helpers.gt(1, 1)
        assert helpers.gte(1, 1)
        assert helpers.lt(1, 2) and not helpers.lt(2, 2)
        assert helpers.lte(2, 2)
        assert helpers.is_("a", "a") and helpers.isnt("a", "b")

    def test_logic(self) -> None:
        assert helpers.and_(1, "x") is True
        assert helpers.and_(1, "") is False
        assert helpers.or_(0, "x") is True
        assert helpers.or_(0, None) is False

    def test_contains(self) -> None:
        assert helpers.contains(["a"], "a")
        assert helpers.contains("haystack", "hay")
        assert not helpers.contains(None, "a")

    def test_registry_of_helpers(self) -> None:
        assert set(helpers.BUILTIN_HELPERS) == {
            "and_", "contains", "gt", "gte", "is_", "isnt", "lt", "lte", "or_",
        }
