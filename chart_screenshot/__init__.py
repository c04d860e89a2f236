"""
Chart Screenshot Module

An HTTP service that captures TradingView chart screenshots with a headless
Chromium driven by Playwright.

Key Features:
- One isolated browser per request, always torn down
- Cookie replay for authenticated chart layouts
- Two-stage render wait and overlay suppression before capture
- Classified JSON errors (400/408/502/500) or a verified PNG

Usage:
    from chart_screenshot import create_app, load_config

    app = create_app(load_config())

or from the command line:
    python -m chart_screenshot --port 5000
"""

__version__ = "1.0.0"

from .browser import BrowserSessionManager
from .config import Config, load_config
from .errors import ErrorKind, ScreenshotError
from .server import create_app

__all__ = ['BrowserSessionManager', 'Config', 'ErrorKind', 'ScreenshotError', 'create_app', 'load_config']
