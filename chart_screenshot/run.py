#!/usr/bin/env python3
"""
Process entry point: builds the configuration once, binds the port and
serves the API with uvicorn. SIGINT/SIGTERM stop the process immediately
without draining in-flight requests.
"""

import argparse
import signal

import uvicorn

from .config import load_config
from .logging_setup import configure_logging, get_logger
from .server import create_app

logger = get_logger(__name__)


class ScreenshotServer(uvicorn.Server):
    """uvicorn server that exits on the first termination signal."""

    def handle_exit(self, sig, frame):
        try:
            name = signal.Signals(sig).name
        except ValueError:
            name = str(sig)
        logger.info("Received %s, shutting down", name)
        self.force_exit = True
        super().handle_exit(sig, frame)


def build_server(config) -> ScreenshotServer:
    app = create_app(config)
    server_config = uvicorn.Config(
        app,
        host=config.SERVER_HOST,
        port=config.SERVER_PORT,
        log_config=None,
        log_level=config.LOG_LEVEL.lower(),
    )
    return ScreenshotServer(server_config)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description='Serve TradingView chart screenshots over HTTP')
    parser.add_argument('--host', help='Bind address (overrides HOST)')
    parser.add_argument('--port', type=int, help='Listening port (overrides PORT)')
    args = parser.parse_args(argv)

    config = load_config()
    if args.host:
        config.SERVER_HOST = args.host
    if args.port is not None:
        config.SERVER_PORT = args.port
        config.validate_config()

    configure_logging(config.LOG_LEVEL)
    server = build_server(config)

    port = config.SERVER_PORT
    logger.info("TradingView Screenshot Service running on port %d", port)
    logger.info("Health check: http://localhost:%d/health", port)
    logger.info("Screenshot endpoint: http://localhost:%d/screenshot?symbol=BINANCE:BTCUSDT", port)

    try:
        server.run()
    except KeyboardInterrupt:
        pass
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
