"""
Error taxonomy for screenshot requests.

Every failure the screenshot route can report is a `ScreenshotError` whose
`kind` is set where the failure happens. The HTTP layer only looks at the
kind to pick a status code and payload.
"""

from enum import Enum
from typing import Dict, Optional


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    TIMEOUT = "timeout"
    NETWORK = "network"
    GENERIC = "generic"


# kind -> (status code, error summary, default message)
ERROR_RESPONSES = {
    ErrorKind.VALIDATION: (400, "Invalid symbol format",
                           "Symbol must be in format EXCHANGE:PAIR (e.g., BINANCE:BTCUSDT)"),
    ErrorKind.TIMEOUT: (408, "Request timeout",
                        "Failed to load TradingView chart within timeout period"),
    ErrorKind.NETWORK: (502, "Network error",
                        "Failed to connect to TradingView"),
    ErrorKind.GENERIC: (500, "Screenshot capture failed",
                        "An unexpected error occurred"),
}


class ScreenshotError(Exception):
    """A classified screenshot failure."""

    def __init__(self, kind: ErrorKind, message: Optional[str] = None, error: Optional[str] = None):
        status_code, default_error, default_message = ERROR_RESPONSES[kind]
        self.kind = kind
        self.status_code = status_code
        self.error = error or default_error
        self.message = message or default_message
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, str]:
        return create_error_response(self.error, self.message)

    def __repr__(self):
        return f"ScreenshotError(kind={self.kind.value!r}, message={self.message!r})"


def create_error_response(error: str, message: str) -> Dict[str, str]:
    """Standard JSON error envelope."""
    return {"error": error, "message": message}
