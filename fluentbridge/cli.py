# ==============================================
# CLI — Command Line Entry Point
# ==============================================
#
# COMMANDS:
# ---------
# 1. Run the bridge (config from environment / .env):
#    fluent-bit-bridge serve
#    fluent-bit-bridge serve --port 9090
#
# 2. Push a JSON file of log records to a running bridge,
#    the way Fluent Bit's http output would:
#    fluent-bit-bridge push logs.json --api-key secret
#    fluent-bit-bridge push logs.json --db app --collection errors
#
# `python -m fluentbridge ...` is equivalent.
#
# ==============================================

import argparse
import logging
import os
import sys

import requests

from fluentbridge.app import API_KEY_HEADER, create_app
from fluentbridge.config import get_config
from fluentbridge.errors import ConfigError, StorageError
from fluentbridge.storage import MongoClient

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [fluent-bit-bridge] %(levelname)s %(message)s"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        stream=sys.stderr,
    )


def serve(args) -> int:
    try:
        config = get_config()
    except ConfigError as e:
        configure_logging()
        logger.error("Failed to create server: %s", e)
        return 1

    configure_logging(config.server.log_level)

    host = args.host or config.server.host
    port = args.port or config.server.port

    storage = MongoClient.from_config(config.mongo)
    try:
        storage.connect()
    except StorageError as e:
        logger.error("Failed to create server: %s", e.detail)
        return 1

    app = create_app(config, storage=storage)
    logger.info("Starting fluent-bit-bridge server on port %d", port)
    try:
        app.run(host=host, port=port, threaded=True)
    finally:
        storage.disconnect()
    return 0


def push(args) -> int:
    configure_logging()

    api_key = args.api_key or os.environ.get("API_KEY", "")
    try:
        with open(args.file, "rb") as f:
            body = f.read()
    except OSError as e:
        logger.error("Could not read %s: %s", args.file, e)
        return 1

    params = {}
    if args.db:
        params["db"] = args.db
    if args.collection:
        params["collection"] = args.collection

    try:
        response = requests.post(
            args.url.rstrip("/") + "/ingest",
            data=body,
            params=params,
            headers={API_KEY_HEADER: api_key, "Content-Type": "application/json"},
            timeout=args.timeout,
        )
    except requests.RequestException as e:
        logger.error("Request failed: %s", e)
        return 1

    print(f"{response.status_code} {response.text.strip()}")
    return 0 if response.ok else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fluent-bit-bridge",
        description="Receive Fluent Bit HTTP output and store it in MongoDB.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve_parser = subparsers.add_parser("serve", help="Run the ingestion server")
    serve_parser.add_argument("--host", default=None, help="Bind address (default: HOST or 0.0.0.0)")
    serve_parser.add_argument("--port", type=int, default=None, help="Listen port (default: PORT or 8080)")
    serve_parser.set_defaults(func=serve)

    push_parser = subparsers.add_parser("push", help="POST a JSON file of logs to a running bridge")
    push_parser.add_argument("file", help="File holding a JSON object or array of objects")
    push_parser.add_argument("--url", default="http://127.0.0.1:8080", help="Bridge base URL")
    push_parser.add_argument("--api-key", default=None, help="Shared secret (default: API_KEY)")
    push_parser.add_argument("--db", default=None, help="Target database")
    push_parser.add_argument("--collection", default=None, help="Target collection")
    push_parser.add_argument("--timeout", type=float, default=10.0, help="Request timeout in seconds")
    push_parser.set_defaults(func=push)

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
