import pytest

from chart_screenshot.symbols import build_chart_url, validate_interval, validate_symbol


@pytest.mark.parametrize("symbol", [
    "BINANCE:BTCUSDT",
    "binance:btcusdt",
    "NASDAQ:AAPL",
    "X:1",
    "FX123:EUR456",
])
def test_valid_symbols(symbol):
    assert validate_symbol(symbol)


@pytest.mark.parametrize("symbol", [
    None,
    "",
    "invalid",
    "BINANCE:",
    ":BTCUSDT",
    "BINANCE::BTCUSDT",
    "BINANCE:BTC:USDT",
    "BINANCE:BTC-USDT",
    "BINANCE: BTCUSDT",
    " BINANCE:BTCUSDT",
    "BINANCE:BTCUSDT\n",
    "BINANCE:BTCUSDT.P",
])
def test_invalid_symbols(symbol):
    assert not validate_symbol(symbol)


def test_symbol_has_no_length_bound():
    assert validate_symbol("A" * 200 + ":" + "B" * 200)


@pytest.mark.parametrize("interval", ["1", "15", "240", "D", "1D", "1d", "W", "1W", "M", "30S"])
def test_valid_intervals(interval):
    assert validate_interval(interval)


@pytest.mark.parametrize("interval", ["", None, "1Y", "12345", "DD", "1 D", "15m;", "\u0661\u0665", "\u0661D"])
def test_invalid_intervals(interval):
    assert not validate_interval(interval)


def test_build_chart_url_encodes_symbol_like_uri_component():
    url = build_chart_url("https://www.tradingview.com/chart/", "BINANCE:BTCUSDT")
    assert url == "https://www.tradingview.com/chart/?symbol=BINANCE%3ABTCUSDT"


def test_build_chart_url_appends_interval_upper_cased():
    url = build_chart_url("https://www.tradingview.com/chart/", "NASDAQ:AAPL", "1d")
    assert url == "https://www.tradingview.com/chart/?symbol=NASDAQ%3AAAPL&interval=1D"


def test_build_chart_url_keeps_existing_query():
    url = build_chart_url("https://www.tradingview.com/chart/abc/?theme=dark", "NASDAQ:AAPL")
    assert url == "https://www.tradingview.com/chart/abc/?theme=dark&symbol=NASDAQ%3AAAPL"
