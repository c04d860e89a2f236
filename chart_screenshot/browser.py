"""
Per-request headless browser sessions.

Each capture launches its own Chromium through Playwright, loads the chart,
waits for it to render, hides overlays, takes a clipped PNG and always
closes the browser again. Nothing is shared between captures.
"""

import io
from typing import Callable, List, Optional

from PIL import Image, UnidentifiedImageError
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from playwright.async_api import async_playwright

from .config import Config, load_capture_profile
from .cookies import load_cookies, normalize_cookies
from .errors import ErrorKind, ScreenshotError
from .logging_setup import get_logger
from .symbols import build_chart_url

logger = get_logger(__name__)

HIDE_OVERLAYS_SCRIPT = """
(selectors) => {
    let hidden = 0;
    selectors.forEach(selector => {
        document.querySelectorAll(selector).forEach(el => {
            if (el && el.style) {
                el.style.display = 'none';
                hidden += 1;
            }
        });
    });
    return hidden;
}
"""


class BrowserSessionManager:
    """
    Owns the browser lifecycle for screenshot captures.

    - One browser process and one page per `capture()` call.
    - Failures are raised as `ScreenshotError` with their kind already set.
    - The browser is closed on every path; close errors are only logged.
    """

    def __init__(self, config: Config, profile: Optional[dict] = None,
                 playwright_factory: Callable = async_playwright,
                 cookie_loader: Optional[Callable[[], List[dict]]] = None):
        self.config = config
        self.profile = profile if profile is not None else load_capture_profile(config.CAPTURE_PROFILE)
        self._playwright_factory = playwright_factory
        self._cookie_loader = cookie_loader or (lambda: load_cookies(config.COOKIE_FILE))

    async def capture(self, symbol: str, interval: Optional[str] = None) -> bytes:
        """
        Capture a PNG of the chart for an already validated symbol.

        Args:
            symbol: EXCHANGE:PAIR symbol
            interval: Optional chart resolution

        Returns:
            PNG bytes of the clipped viewport region

        Raises:
            ScreenshotError: classified as TIMEOUT, NETWORK or GENERIC
        """
        url = build_chart_url(self.config.CHART_BASE_URL, symbol, interval)
        logger.info("Starting screenshot capture for symbol: %s", symbol)

        p = None
        browser = None
        try:
            p = await self._playwright_factory().start()
            browser = await self._launch_browser(p)
            page = await self._create_page(browser)
            await self._apply_cookies(page)
            await self._navigate(page, url)
            await self._wait_for_chart(page)
            await self._hide_overlays(page)
            screenshot = await self._take_screenshot(page)
        except ScreenshotError:
            raise
        except Exception as e:
            logger.exception("Error capturing screenshot for %s", symbol)
            raise ScreenshotError(ErrorKind.GENERIC, str(e) or None) from e
        finally:
            if browser is not None:
                await self._close_browser(browser)
            if p is not None:
                await self._stop_driver(p)

        logger.info("Screenshot captured successfully for %s", symbol)
        return screenshot

    async def _launch_browser(self, p):
        """Launch headless Chromium with the flags for the current environment."""
        launch_args = self.profile['launch_args']
        if self.config.PRODUCTION:
            return await p.chromium.launch(
                headless=True,
                args=launch_args['production'],
                executable_path=self.config.BROWSER_EXECUTABLE_PATH,
            )
        options = {'headless': True, 'args': launch_args['default']}
        if self.config.BROWSER_EXECUTABLE_PATH:
            options['executable_path'] = self.config.BROWSER_EXECUTABLE_PATH
        return await p.chromium.launch(**options)

    async def _create_page(self, browser):
        """Create a page with a fixed viewport and a desktop user agent."""
        return await browser.new_page(
            viewport=self.config.viewport,
            device_scale_factor=self.config.DEVICE_SCALE_FACTOR,
            user_agent=self.config.USER_AGENT,
            ignore_https_errors=True,
        )

    async def _apply_cookies(self, page):
        cookies = normalize_cookies(self._cookie_loader(), self.config.CHART_BASE_URL)
        if not cookies:
            logger.warning("No cookies found - proceeding without authentication")
            return
        logger.info("Setting %d cookies for authentication", len(cookies))
        await page.context.add_cookies(cookies)

    async def _navigate(self, page, url: str):
        """Load the chart page; timeouts and network failures are classified here."""
        logger.info("Navigating to: %s", url)
        try:
            await page.goto(url, wait_until="networkidle", timeout=self.config.NAVIGATION_TIMEOUT_MS)
        except PlaywrightTimeoutError as e:
            logger.error("Navigation timed out after %dms: %s", self.config.NAVIGATION_TIMEOUT_MS, e)
            raise ScreenshotError(ErrorKind.TIMEOUT) from e
        except PlaywrightError as e:
            if 'net::' in str(e):
                logger.error("Network error while loading %s: %s", url, e)
                raise ScreenshotError(ErrorKind.NETWORK) from e
            raise

    async def _wait_for_chart(self, page):
        """Fixed render delay, then a best-effort wait for the chart legend."""
        logger.info("Waiting for chart to render...")
        await page.wait_for_timeout(self.config.RENDER_DELAY_MS)
        try:
            await page.wait_for_selector(self.profile['chart_ready_selector'],
                                         timeout=self.config.CHART_READY_TIMEOUT_MS)
            logger.info("Chart elements detected")
        except PlaywrightError:
            logger.warning("Chart elements not detected, proceeding with screenshot")

    async def _hide_overlays(self, page):
        try:
            hidden = await page.evaluate(HIDE_OVERLAYS_SCRIPT, self.profile['overlay_selectors'])
            logger.debug("Hid %s overlay elements", hidden)
        except PlaywrightError as e:
            logger.warning("Could not hide overlays: %s", e)

    async def _take_screenshot(self, page) -> bytes:
        """Capture the viewport region and make sure it decodes as a PNG."""
        screenshot = await page.screenshot(
            type='png',
            full_page=False,
            clip={
                'x': 0,
                'y': 0,
                'width': self.config.VIEWPORT_WIDTH,
                'height': self.config.VIEWPORT_HEIGHT,
            },
        )
        verify_png(screenshot)
        return screenshot

    async def _close_browser(self, browser):
        try:
            await browser.close()
            logger.info("Browser closed successfully")
        except Exception:
            logger.exception("Error closing browser")

    async def _stop_driver(self, p):
        try:
            await p.stop()
        except Exception:
            logger.exception("Error stopping browser driver")


def verify_png(data: bytes) -> tuple:
    """
    Check that `data` is a complete PNG image.

    Returns:
        (width, height) of the image

    Raises:
        ScreenshotError: GENERIC if the data is empty or not a valid PNG
    """
    if not data:
        raise ScreenshotError(ErrorKind.GENERIC, "Screenshot is empty")
    try:
        with Image.open(io.BytesIO(data)) as img:
            if img.format != 'PNG':
                raise ScreenshotError(ErrorKind.GENERIC, f"Screenshot is {img.format}, expected PNG")
            size = img.size
            img.verify()
    except (UnidentifiedImageError, OSError, SyntaxError) as e:
        raise ScreenshotError(ErrorKind.GENERIC, f"Screenshot is not a valid PNG: {e}") from e
    return size
