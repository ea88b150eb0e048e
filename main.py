"""Entry point for the portfolio site API server."""

import argparse
import os

import uvicorn


def main():
    parser = argparse.ArgumentParser(description="Portfolio site API server")
    parser.add_argument(
        "--env",
        choices=["development", "production"],
        default=None,
        help="Runtime environment (default: production). Overrides ENVIRONMENT env var.",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Log level. Overrides LOG_LEVEL env var.",
    )
    parser.add_argument("--host", default="0.0.0.0", help="Bind host (default: 0.0.0.0)")
    parser.add_argument("--port", type=int, default=8000, help="Bind port (default: 8000)")
    args = parser.parse_args()

    # config is read at import time, so set ENVIRONMENT before importing the app
    if args.env:
        os.environ["ENVIRONMENT"] = args.env

    from portfolio_site.logger import logger
    from portfolio_site.server import app

    if args.log_level:
        logger.set_level(args.log_level)

    uvicorn.run(app, host=args.host, port=args.port)


if __name__ == "__main__":
    main()
