import io

import pytest
from PIL import Image

from chart_screenshot.config import Config, load_capture_profile


def make_png(width=32, height=18):
    buffer = io.BytesIO()
    Image.new('RGB', (width, height), (19, 23, 34)).save(buffer, format='PNG')
    return buffer.getvalue()


class FakeContext:
    def __init__(self, driver):
        self.driver = driver

    async def add_cookies(self, cookies):
        self.driver.cookies_added.append(cookies)


class FakePage:
    def __init__(self, driver):
        self.driver = driver
        self.context = FakeContext(driver)

    async def goto(self, url, wait_until=None, timeout=None):
        self.driver.calls.append(('goto', url, wait_until, timeout))
        if self.driver.goto_error:
            raise self.driver.goto_error

    async def wait_for_timeout(self, timeout):
        self.driver.calls.append(('wait_for_timeout', timeout))

    async def wait_for_selector(self, selector, timeout=None):
        self.driver.calls.append(('wait_for_selector', selector, timeout))
        if self.driver.selector_error:
            raise self.driver.selector_error

    async def evaluate(self, script, arg=None):
        self.driver.calls.append(('evaluate', arg))
        if self.driver.evaluate_error:
            raise self.driver.evaluate_error
        return 0

    async def screenshot(self, **kwargs):
        self.driver.calls.append(('screenshot', kwargs))
        if self.driver.screenshot_error:
            raise self.driver.screenshot_error
        return self.driver.image


class FakeBrowser:
    def __init__(self, driver):
        self.driver = driver

    async def new_page(self, **kwargs):
        self.driver.page_options.append(kwargs)
        return FakePage(self.driver)

    async def close(self):
        self.driver.closed += 1
        if self.driver.close_error:
            raise self.driver.close_error


class FakeChromium:
    def __init__(self, driver):
        self.driver = driver

    async def launch(self, **kwargs):
        self.driver.launch_options.append(kwargs)
        if self.driver.launch_error:
            raise self.driver.launch_error
        self.driver.launched += 1
        return FakeBrowser(self.driver)


class FakePlaywright:
    def __init__(self, driver):
        self.driver = driver
        self.chromium = FakeChromium(driver)

    async def stop(self):
        self.driver.stopped += 1
        if self.driver.stop_error:
            raise self.driver.stop_error


class FakeDriver:
    """Stands in for `async_playwright`; records what the session manager does."""

    def __init__(self):
        self.image = make_png()
        self.launch_error = None
        self.goto_error = None
        self.selector_error = None
        self.evaluate_error = None
        self.screenshot_error = None
        self.close_error = None
        self.stop_error = None

        self.launched = 0
        self.closed = 0
        self.stopped = 0
        self.launch_options = []
        self.page_options = []
        self.cookies_added = []
        self.calls = []

    def __call__(self):
        return self

    async def start(self):
        return FakePlaywright(self)

    def call_names(self):
        return [call[0] for call in self.calls]


@pytest.fixture
def driver():
    return FakeDriver()


@pytest.fixture
def config(tmp_path):
    return Config({'COOKIE_FILE': str(tmp_path / 'cookies.json')})


@pytest.fixture
def profile():
    return load_capture_profile(Config.PACKAGE_DIR / 'config.yaml')


@pytest.fixture
def png_bytes():
    return make_png()
