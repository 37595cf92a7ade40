"""Tests for raw screenshot capture."""

import pytest

from mcp_chrome_tools.actions import capture_screenshot
from mcp_chrome_tools.exceptions import CDPProtocolError, ChromeConnectionError

from _utils import FakeSession, make_context


def _page_session(**extra):
    replies = {
        "DOM.getDocument": {"root": {"nodeId": 1}},
        "DOM.getBoxModel": {"model": {"width": 1280, "height": 4200.4, "content": [0, 0, 1280, 0, 1280, 4200.4, 0, 4200.4]}},
        "Page.captureScreenshot": {"data": "iVBORw0KGgo="},
    }
    replies.update(extra)
    return FakeSession(replies=replies)


class TestCaptureScreenshot:

    def test_viewport_png_by_default(self, event_loop):
        session = _page_session()
        data = event_loop.run_until_complete(capture_screenshot(make_context([session]), "A1"))

        assert data == "iVBORw0KGgo="
        assert session.methods() == ["Page.enable", "Page.captureScreenshot"]
        assert session.params_of("Page.captureScreenshot")[0] == {
            "format": "png",
            "fromSurface": True,
            "captureBeyondViewport": False,
        }
        assert session.close_calls == 1

    def test_jpeg_quality_is_forwarded(self, event_loop):
        session = _page_session()
        event_loop.run_until_complete(capture_screenshot(make_context([session]), "A1", format="jpeg", quality=55))
        assert session.params_of("Page.captureScreenshot")[0]["quality"] == 55

    def test_jpeg_quality_defaults_to_80(self, event_loop):
        session = _page_session()
        event_loop.run_until_complete(capture_screenshot(make_context([session]), "A1", format="jpeg"))
        assert session.params_of("Page.captureScreenshot")[0]["quality"] == 80

    def test_png_ignores_quality(self, event_loop):
        session = _page_session()
        event_loop.run_until_complete(capture_screenshot(make_context([session]), "A1", format="png", quality=10))
        assert "quality" not in session.params_of("Page.captureScreenshot")[0]

    def test_full_page_overrides_and_restores_metrics(self, event_loop):
        session = _page_session()
        event_loop.run_until_complete(capture_screenshot(make_context([session]), "A1", full_page=True))

        assert session.methods() == [
            "Page.enable",
            "DOM.getDocument",
            "DOM.getBoxModel",
            "Emulation.setDeviceMetricsOverride",
            "Page.captureScreenshot",
            "Emulation.clearDeviceMetricsOverride",
        ]
        assert session.params_of("Emulation.setDeviceMetricsOverride")[0] == {
            "width": 1920, "height": 4201, "deviceScaleFactor": 1, "mobile": False,
        }
        assert session.params_of("Page.captureScreenshot")[0]["captureBeyondViewport"] is True

    def test_full_page_restores_metrics_on_failure(self, event_loop):
        session = _page_session(**{
            "Page.captureScreenshot": CDPProtocolError("Page.captureScreenshot", -32000, "Unable to capture screenshot"),
        })
        with pytest.raises(CDPProtocolError):
            event_loop.run_until_complete(capture_screenshot(make_context([session]), "A1", full_page=True))

        assert session.methods()[-1] == "Emulation.clearDeviceMetricsOverride"
        assert session.close_calls == 1

    def test_full_page_capture_error_wins_over_restore_error(self, event_loop):
        session = _page_session(**{
            "Page.captureScreenshot": CDPProtocolError("Page.captureScreenshot", -32000, "Unable to capture screenshot"),
            "Emulation.clearDeviceMetricsOverride": ChromeConnectionError("Connection to tab A1 was closed"),
        })
        with pytest.raises(CDPProtocolError, match="Unable to capture screenshot"):
            event_loop.run_until_complete(capture_screenshot(make_context([session]), "A1", full_page=True))

        assert session.close_calls == 1

    def test_full_page_restore_error_after_capture_is_raised(self, event_loop):
        session = _page_session(**{
            "Emulation.clearDeviceMetricsOverride": ChromeConnectionError("Connection to tab A1 was closed"),
        })
        with pytest.raises(ChromeConnectionError):
            event_loop.run_until_complete(capture_screenshot(make_context([session]), "A1", full_page=True))

    def test_rejects_unknown_format(self, event_loop):
        ctx = make_context([])
        with pytest.raises(ValueError):
            event_loop.run_until_complete(capture_screenshot(ctx, "A1", format="gif"))
        assert ctx.opened == []
