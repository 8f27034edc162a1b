"""Run the mangashelf FastAPI application with uvicorn."""

from __future__ import annotations

import argparse
import os
from typing import Sequence

import uvicorn

from mangashelf import logging_manager as log_mgr


def build_parser() -> argparse.ArgumentParser:
    """Construct the argument parser for the web API runner."""

    parser = argparse.ArgumentParser(
        description="Serve the mangashelf cover API with uvicorn",
    )
    parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Hostname or IP address to bind (default: %(default)s)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="TCP port to listen on (default: %(default)s)",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload; useful during local development.",
    )
    parser.add_argument(
        "--log-level",
        default="info",
        choices=["critical", "error", "warning", "info", "debug", "trace"],
        help="Log level for uvicorn and the mangashelf logger (default: %(default)s)",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    """Parse arguments and launch the uvicorn server."""

    args = build_parser().parse_args(argv)
    # Exported so reload workers start at the same level.
    os.environ["MANGASHELF_LOG_LEVEL"] = "debug" if args.log_level == "trace" else args.log_level
    log_mgr.set_log_level(None)
    uvicorn.run(
        "mangashelf.webapi.application:create_app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=args.log_level,
        factory=True,
    )


if __name__ == "__main__":  # pragma: no cover - server entry point
    try:
        main()
    except KeyboardInterrupt:  # pragma: no cover - user initiated shutdown
        log_mgr.get_logger().info("Server interrupted by user")
