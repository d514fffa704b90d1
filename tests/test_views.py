"""Tests for quill.views — get/set configuration boundary and warm-up."""

import logging
import os

import pytest

from quill.config import ViewsConfig
from quill.errors import EngineNotFound
from quill.http.request import Request
from quill.views import Views


@pytest.fixture
def views(config, registry, reader, compressor) -> Views:
    return Views(config, engines=registry, reader=reader, compressor=compressor)


class TestConfigurationAccessors:
    def test_get_returns_current_values(self, views, site) -> None:
        assert views.root() == site
        assert views.views() == "views"
        assert views.public() == "public"
        assert views.first_pass() == "rec"
        assert views.second_pass() == "kida"
        assert views.cache_enabled() is True
        assert dict(views.defaults()) == {}

    def test_set_replaces_config(self, views) -> None:
        before = views.config

        assert views.views("templates") is None
        assert views.public("static") is None
        assert views.root("/srv") is None

        assert views.views() == "templates"
        assert views.public() == "static"
        assert views.root() == "/srv"
        assert before.views_dir == "views"

    def test_set_cache_false(self, views) -> None:
        views.cache_enabled(False)

        assert views.cache_enabled() is False
        assert views.files.enabled is False
        assert views.pipeline.enabled is False

    def test_set_defaults_is_read_only_copy(self, views) -> None:
        source = {"title": "Site"}
        views.defaults(source)
        source["title"] = "Changed"

        assert views.defaults()["title"] == "Site"

    def test_unknown_engine_rejected_without_change(self, views) -> None:
        with pytest.raises(EngineNotFound):
            views.first_pass("jade")

        assert views.first_pass() == "rec"

    def test_resolve_follows_new_directories(self, views) -> None:
        views.root("/srv")
        views.public("static")

        assert views.resolve("app.js", "public") == os.path.join("/srv", "static", "app.js")
        assert views.resolve("index.kida") == os.path.join("/srv", "views", "index.kida")

    def test_default_config_from_env(self, monkeypatch, tmp_path) -> None:
        monkeypatch.setenv("QUILL_ENV", "production")
        monkeypatch.setenv("QUILL_ROOT", str(tmp_path))

        views = Views()

        assert views.cache_enabled() is True
        assert views.root() == str(tmp_path)


class TestFileAccess:
    @pytest.mark.asyncio
    async def test_public_file_resolves_against_public(self, views, site) -> None:
        data = await views.public_file("app.js")

        assert data == (site / "public" / "app.js").read_bytes()
        assert str(site / "public" / "app.js") in views.files

    @pytest.mark.asyncio
    async def test_file_uses_path_verbatim(self, views, site) -> None:
        path = str(site / "public" / "style.css")

        assert await views.file(path) == b"body { color: red; }"

    @pytest.mark.asyncio
    async def test_render_and_compile(self, views, engine) -> None:
        engine.output = "<b>{{ name }}</b>"

        assert await views.render("app") == "<b>{{ name }}</b>"
        render = await views.compile("app")
        assert render({"name": "X"}) == "<b>X</b>"


class TestWarmUp:
    @pytest.mark.asyncio
    async def test_warm_populates_caches(self, views, site, reader) -> None:
        views.send_static("app", warm=True)
        views.send_script("app.js", warm=True)
        views.send_template("page.html", warm=True)
        views.send_static("cold")

        assert views.pending_warm == 3
        await views.warm_up()

        assert views.pending_warm == 0
        assert views.pipeline.cached_html("app") is not None
        assert views.pipeline.cached_function("page.html") is not None
        entry = views.files.peek(str(site / "public" / "app.js"))
        assert entry is not None and entry.compressed is not None
        assert views.pipeline.cached_html("cold") is None

    @pytest.mark.asyncio
    async def test_warm_requests_are_cache_hits(self, views, site, reader) -> None:
        handler = views.send_static("app", warm=True)
        await views.warm_up()

        await handler(Request())

        assert reader.count(site / "views" / "app.rec") == 1

    @pytest.mark.asyncio
    async def test_warm_failure_is_reported_not_raised(self, config, registry, reader) -> None:
        reported: list[Exception] = []
        views = Views(config, engines=registry, reader=reader, on_error=reported.append)
        views.send_static("missing", warm=True)
        views.send_static("app", warm=True)

        await views.warm_up()

        assert len(reported) == 1
        assert views.pipeline.cached_html("app") is not None

    @pytest.mark.asyncio
    async def test_warm_up_without_handlers(self, views) -> None:
        await views.warm_up()

    @pytest.mark.asyncio
    async def test_warm_with_cache_disabled_stores_nothing(self, site, registry, reader) -> None:
        views = Views(ViewsConfig(root=site, first_pass="rec"), engines=registry, reader=reader)
        views.send_static("app", warm=True)

        await views.warm_up()

        assert views.pipeline.cached_html("app") is None

    @pytest.mark.asyncio
    async def test_request_before_warm_up_warns_once(self, views, caplog) -> None:
        handler = views.send_static("app", warm=True)

        with caplog.at_level(logging.WARNING, logger="quill.server"):
            first = await handler(Request())
            await handler(Request())

        assert first.status == 200
        warnings = [r for r in caplog.records if "warm_up" in r.getMessage()]
        assert len(warnings) == 1

    @pytest.mark.asyncio
    async def test_no_warning_after_warm_up(self, views, caplog) -> None:
        handler = views.send_static("app", warm=True)
        await views.warm_up()

        with caplog.at_level(logging.WARNING, logger="quill.server"):
            await handler(Request())

        assert not caplog.records
