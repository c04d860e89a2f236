"""
Configuration management for the chart screenshot service.
Centralizes all configuration values and eliminates hardcoded constants.
"""

import os
from pathlib import Path
from typing import Mapping, Optional

import yaml
from dotenv import load_dotenv


DEFAULT_USER_AGENT = (
    'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 '
    '(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36'
)


class Config:
    """Application configuration, built once at process start."""

    # File Paths
    PACKAGE_DIR = Path(__file__).parent
    BASE_DIR = PACKAGE_DIR.parent

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        env = os.environ if environ is None else environ

        # Server Configuration
        self.SERVER_PORT = int(env.get('PORT', 5000))
        self.SERVER_HOST = env.get('HOST', '0.0.0.0')

        # Browser Configuration
        app_env = env.get('APP_ENV') or env.get('NODE_ENV', '')
        self.PRODUCTION = app_env.strip().lower() == 'production'
        self.BROWSER_EXECUTABLE_PATH = env.get('BROWSER_EXECUTABLE_PATH') or None
        self.USER_AGENT = env.get('USER_AGENT', DEFAULT_USER_AGENT)

        # Screenshot Configuration
        self.CHART_BASE_URL = env.get('CHART_BASE_URL', 'https://www.tradingview.com/chart/')
        self.VIEWPORT_WIDTH = int(env.get('VIEWPORT_WIDTH', 1920))
        self.VIEWPORT_HEIGHT = int(env.get('VIEWPORT_HEIGHT', 1080))
        self.DEVICE_SCALE_FACTOR = 1
        self.NAVIGATION_TIMEOUT_MS = int(env.get('NAVIGATION_TIMEOUT_MS', 30000))
        self.RENDER_DELAY_MS = int(env.get('RENDER_DELAY_MS', 6000))
        self.CHART_READY_TIMEOUT_MS = int(env.get('CHART_READY_TIMEOUT_MS', 10000))
        self.CAPTURE_PROFILE = Path(env.get('CAPTURE_PROFILE', self.PACKAGE_DIR / 'config.yaml'))

        # Authentication
        self.COOKIE_FILE = Path(env.get('COOKIE_FILE', self.BASE_DIR / 'cookies.json'))

        # Logging
        self.LOG_LEVEL = env.get('LOG_LEVEL', 'INFO').upper()

    @property
    def viewport(self) -> dict:
        """Viewport dict in the shape Playwright expects."""
        return {'width': self.VIEWPORT_WIDTH, 'height': self.VIEWPORT_HEIGHT}

    def validate_config(self):
        """Validate configuration values."""
        errors = []

        if self.SERVER_PORT <= 0 or self.SERVER_PORT > 65535:
            errors.append("Server port must be between 1 and 65535")

        for name in ('NAVIGATION_TIMEOUT_MS', 'CHART_READY_TIMEOUT_MS'):
            if getattr(self, name) <= 0:
                errors.append(f"{name} must be positive")

        if self.RENDER_DELAY_MS < 0:
            errors.append("RENDER_DELAY_MS must not be negative")

        if self.VIEWPORT_WIDTH <= 0 or self.VIEWPORT_HEIGHT <= 0:
            errors.append("Viewport dimensions must be positive")

        if self.BROWSER_EXECUTABLE_PATH and not Path(self.BROWSER_EXECUTABLE_PATH).exists():
            errors.append(f"Browser executable does not exist: {self.BROWSER_EXECUTABLE_PATH}")

        if not self.CAPTURE_PROFILE.exists():
            errors.append(f"Capture profile not found at {self.CAPTURE_PROFILE}")

        if errors:
            raise ValueError(f"Configuration errors: {'; '.join(errors)}")

        return True


def load_capture_profile(profile_path: Path) -> dict:
    """Load launch flags and selectors from the YAML capture profile."""
    if not profile_path.exists():
        raise FileNotFoundError(f"Capture profile not found at {profile_path}")
    with open(profile_path, 'r') as f:
        profile = yaml.safe_load(f)

    missing = [key for key in ('launch_args', 'chart_ready_selector', 'overlay_selectors')
               if key not in (profile or {})]
    if missing:
        raise ValueError(f"Capture profile {profile_path} is missing: {', '.join(missing)}")
    return profile


def load_config(environ: Optional[Mapping[str, str]] = None) -> Config:
    """Read `.env`, build a validated `Config`."""
    if environ is None:
        load_dotenv()
    config = Config(environ)
    config.validate_config()
    return config
