"""Website thumbnail rendering using headless Chromium via Playwright."""
import asyncio
import base64
from typing import Optional

from app.config import Settings
from app.utils.exceptions import RenderFailedError
from app.utils.logger import logger

# Fixed-size frame so the document's own layout cannot change the capture area
THUMBNAIL_FRAME_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
    <meta charset="UTF-8">
    <style>
        html, body {{
            margin: 0;
            padding: 0;
            width: {width}px;
            height: {height}px;
            overflow: hidden;
            background: white;
        }}
        #thumbnail-frame {{
            width: {width}px;
            height: {height}px;
            overflow: hidden;
            position: relative;
        }}
    </style>
</head>
<body>
    <div id="thumbnail-frame">{content}</div>
</body>
</html>
"""


class ThumbnailRenderer:
    """Captures a still JPEG of generated HTML. Renders are capped per instance."""

    def __init__(
        self,
        settings: Settings,
        width: Optional[int] = None,
        height: Optional[int] = None,
    ):
        self.width = width or settings.thumbnail_width
        self.height = height or settings.thumbnail_height
        self.timeout_ms = settings.render_timeout_ms
        self._semaphore = asyncio.Semaphore(max(1, settings.max_concurrent_renders))

    def wrap(self, html: str) -> str:
        return THUMBNAIL_FRAME_TEMPLATE.format(width=self.width, height=self.height, content=html)

    async def capture(self, html: str) -> bytes:
        """
        Render HTML off-screen and capture a JPEG.

        Args:
            html: Generated website document

        Returns:
            JPEG bytes of exactly width x height pixels

        Raises:
            RenderFailedError: If the browser cannot launch or the page does not settle
        """
        async with self._semaphore:
            return await self._capture(html)

    async def _capture(self, html: str) -> bytes:
        from playwright.async_api import async_playwright

        browser = None
        try:
            async with async_playwright() as p:
                try:
                    browser = await p.chromium.launch(
                        headless=True,
                        args=[
                            "--no-sandbox",
                            "--disable-setuid-sandbox",
                            "--disable-dev-shm-usage",
                            "--disable-gpu",
                        ],
                    )
                    context = await browser.new_context(
                        viewport={"width": self.width, "height": self.height},
                    )
                    page = await context.new_page()
                    page.on("pageerror", lambda err: logger.debug(f"[RENDER] Page error: {err}"))

                    await page.set_content(self.wrap(html), wait_until="networkidle", timeout=self.timeout_ms)
                    await page.set_viewport_size({"width": self.width, "height": self.height})
                    await page.evaluate(
                        f"() => {{ document.body.style.width = '{self.width}px';"
                        f" document.body.style.height = '{self.height}px'; }}"
                    )

                    screenshot = await page.screenshot(
                        type="jpeg",
                        quality=90,
                        clip={"x": 0, "y": 0, "width": self.width, "height": self.height},
                    )
                    logger.info(f"[RENDER] Captured thumbnail ({len(screenshot)} bytes)")
                    return screenshot
                finally:
                    if browser is not None:
                        await browser.close()
        except RenderFailedError:
            raise
        except Exception as e:
            logger.error(f"[RENDER] Thumbnail capture failed: {e}", exc_info=True)
            raise RenderFailedError(f"Failed to render website thumbnail: {e}") from e

    async def capture_data_uri(self, html: str) -> str:
        """Capture and encode the thumbnail for inline storage."""
        image = await self.capture(html)
        return "data:image/jpeg;base64," + base64.b64encode(image).decode("ascii")
