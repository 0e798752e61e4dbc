# ==============================================
# Pytest Configuration and Fixtures
# ==============================================
#
# Shared fixtures for all tests. No MongoDB is needed: the
# storage client is a MagicMock with the MongoClient interface.
# ==============================================

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from fluentbridge.app import create_app
from fluentbridge.config import AppConfig, MongoConfig, ServerConfig
from fluentbridge.normalization import LogNormalizer
from fluentbridge.storage import MongoClient

API_KEY = "test-secret"
FIXED_NOW = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def config():
    return AppConfig(
        mongo=MongoConfig(uri="mongodb://localhost:27017"),
        server=ServerConfig(api_key=API_KEY),
    )


@pytest.fixture
def storage():
    return MagicMock(spec=MongoClient)


@pytest.fixture
def fixed_now():
    return FIXED_NOW


@pytest.fixture
def normalizer(fixed_now):
    """Normalizer with a fixed clock."""
    return LogNormalizer(clock=lambda: fixed_now)


@pytest.fixture
def app(config, storage, normalizer):
    application = create_app(config, storage=storage, normalizer=normalizer)
    application.config["TESTING"] = True
    return application


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_headers():
    return {"X-API-Key": API_KEY}


@pytest.fixture
def fluentbit_record():
    """A record as Fluent Bit's kubernetes filter emits it."""
    return {
        "@timestamp": "2024-01-15T10:30:00.123456789Z",
        "log": '{"level":"ERROR","msg":"payment failed","trace_id":"abc123"}\n',
        "stream": "stderr",
        "kubernetes": {
            "pod_name": "payments-7d9f8-xk2",
            "namespace_name": "shop",
            "container_name": "payments",
            "labels": {"app": "payments"},
        },
    }
