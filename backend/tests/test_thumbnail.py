"""Tests for thumbnail rendering around the browser call."""
import asyncio
import base64

import pytest

from app.services.thumbnail import ThumbnailRenderer
from app.utils.exceptions import RenderFailedError

from conftest import FAKE_JPEG, FakeRenderer


def test_wrap_fixes_frame_size(settings):
    renderer = ThumbnailRenderer(settings, width=640, height=360)
    framed = renderer.wrap("<p>hello</p>")
    assert "width: 640px;" in framed
    assert "height: 360px;" in framed
    assert '<div id="thumbnail-frame"><p>hello</p></div>' in framed


def test_capture_data_uri_encodes_jpeg(settings):
    renderer = FakeRenderer(settings)
    uri = asyncio.run(renderer.capture_data_uri("<html></html>"))

    prefix = "data:image/jpeg;base64,"
    assert uri.startswith(prefix)
    assert base64.b64decode(uri[len(prefix):]) == FAKE_JPEG


def test_capture_failure_raises_render_failed(settings):
    renderer = FakeRenderer(settings, fail=True)
    with pytest.raises(RenderFailedError):
        asyncio.run(renderer.capture("<html></html>"))


def test_browser_errors_are_wrapped(settings, monkeypatch):
    import playwright.async_api

    def broken_playwright():
        raise OSError("chromium executable not found")

    monkeypatch.setattr(playwright.async_api, "async_playwright", broken_playwright)
    renderer = ThumbnailRenderer(settings)

    with pytest.raises(RenderFailedError) as exc_info:
        asyncio.run(renderer.capture("<html></html>"))
    assert "chromium executable not found" in exc_info.value.message


def test_concurrent_renders_are_capped(settings):
    capped = settings.model_copy(update={"max_concurrent_renders": 2})

    class SlowRenderer(ThumbnailRenderer):
        def __init__(self):
            super().__init__(capped)
            self.active = 0
            self.peak = 0

        async def _capture(self, html: str) -> bytes:
            self.active += 1
            self.peak = max(self.peak, self.active)
            await asyncio.sleep(0.01)
            self.active -= 1
            return FAKE_JPEG

    async def scenario():
        renderer = SlowRenderer()
        await asyncio.gather(*(renderer.capture(f"<p>{i}</p>") for i in range(6)))
        return renderer.peak

    assert asyncio.run(scenario()) == 2
