"""
Symbol and interval validation plus chart URL construction.
"""

import re
from typing import Optional
from urllib.parse import quote

SYMBOL_PATTERN = re.compile(r'[A-Za-z0-9]+:[A-Za-z0-9]+')
INTERVAL_PATTERN = re.compile(r'([0-9]{1,4}[SHDWM]?|[SHDWM])', re.IGNORECASE)

# Characters encodeURIComponent leaves alone.
_URI_COMPONENT_SAFE = "-_.!~*'()"


def validate_symbol(symbol: Optional[str]) -> bool:
    """Return True if `symbol` looks like EXCHANGE:PAIR (e.g. BINANCE:BTCUSDT)."""
    if not symbol:
        return False
    return SYMBOL_PATTERN.fullmatch(symbol) is not None


def validate_interval(interval: Optional[str]) -> bool:
    """Return True for chart resolutions such as 15, 240, D, 1W."""
    if not interval:
        return False
    return INTERVAL_PATTERN.fullmatch(interval) is not None


def build_chart_url(base_url: str, symbol: str, interval: Optional[str] = None) -> str:
    """
    Build the chart page URL for a validated symbol.

    Args:
        base_url: Chart page, e.g. https://www.tradingview.com/chart/
        symbol: Validated EXCHANGE:PAIR symbol
        interval: Optional validated resolution

    Returns:
        URL with the symbol (and interval) encoded into the query string
    """
    separator = '&' if '?' in base_url else '?'
    url = f"{base_url}{separator}symbol={quote(symbol, safe=_URI_COMPONENT_SAFE)}"
    if interval:
        url += f"&interval={quote(interval.upper(), safe=_URI_COMPONENT_SAFE)}"
    return url
