import hmac
import logging
from datetime import datetime, timezone

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from fluentbridge.config import AppConfig, get_config
from fluentbridge.errors import IngestError, StorageError, UnauthorizedError
from fluentbridge.ingest import LogIngestor
from fluentbridge.normalization import LogNormalizer

logger = logging.getLogger(__name__)

API_KEY_HEADER = "X-API-Key"


def _rfc3339_now():
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def _authenticated(api_key):
    supplied = request.headers.get(API_KEY_HEADER)
    if not supplied:
        return False
    return hmac.compare_digest(supplied.encode("utf-8"), api_key.encode("utf-8"))


def create_app(config: AppConfig = None, storage=None, normalizer: LogNormalizer = None):
    """Flask application factory.

    ``storage`` is the shared, already-connected MongoClient (or any object
    with the same ``ping``/``insert_one``/``insert_many`` methods).
    """
    app = Flask(__name__)

    if config is None:
        config = get_config()
    if storage is None:
        raise ValueError("create_app requires a storage client")

    ingestor = LogIngestor(
        storage,
        default_database=config.mongo.database,
        default_collection=config.mongo.collection,
        normalizer=normalizer,
    )

    # Store components on app for access in tests
    app.config["components"] = {
        "config": config,
        "storage": storage,
        "ingestor": ingestor,
    }

    # --- Error handlers ---

    @app.errorhandler(IngestError)
    def handle_ingest_error(error):
        if isinstance(error, StorageError):
            logger.error("Database error: %s", error.detail)
        return jsonify({"status": "error", "error": error.reason}), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        if error.code is None or error.code < 400:
            return error
        response = jsonify({"status": "error", "error": error.name.lower()})
        response.status_code = error.code
        for name, value in error.get_headers():
            if name == "Allow":
                response.headers[name] = value
        return response

    # --- Routes ---

    def health():
        try:
            storage.ping(config.mongo.health_timeout_seconds)
        except StorageError as e:
            logger.warning("Health check failed: %s", e.detail)
            return jsonify({"status": "unhealthy", "timestamp": _rfc3339_now()}), 503
        return jsonify({"status": "healthy", "timestamp": _rfc3339_now()})

    app.add_url_rule("/healthz", "healthz", health, methods=["GET"])
    app.add_url_rule("/health", "health", health, methods=["GET"])

    @app.route("/ingest", methods=["POST"], provide_automatic_options=False)
    def ingest():
        if not _authenticated(config.server.api_key):
            raise UnauthorizedError()

        result = ingestor.ingest(
            request.get_data(cache=False),
            database=request.args.get("db"),
            collection=request.args.get("collection"),
        )
        return jsonify({"status": "ok", "inserted": result.inserted})

    return app
