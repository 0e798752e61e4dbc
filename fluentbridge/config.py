# ==============================================
# Configuration Management
# ==============================================
#
# PURPOSE:
#   Load and validate all configuration from environment
#   variables / .env file. Provides typed config objects
#   to the server, the storage client and the CLI.
#
# CLASSES:
# --------
# - MongoConfig (dataclass)
#     uri: str                       (required, MONGODB_URI)
#     database: str                  (default "logging")
#     collection: str                (default "logs")
#     connect_timeout_seconds: float (default 10.0)
#     write_timeout_seconds: float   (default 5.0)
#     health_timeout_seconds: float  (default 2.0)
#
# - ServerConfig (dataclass)
#     api_key: str       (required, API_KEY)
#     host: str          (default "0.0.0.0")
#     port: int          (default 8080)
#     log_level: str     (default "INFO")
#
# - AppConfig (dataclass)
#     mongo: MongoConfig
#     server: ServerConfig
#
# FUNCTIONS:
# ----------
# - load_config(environ) -> AppConfig
#     Build an AppConfig from an explicit mapping. Raises
#     ConfigError when a required value is missing or a
#     number does not parse.
#
# - get_config() -> AppConfig
#     Load .env using python-dotenv, then the process environment.
#     Returns the same singleton on repeated calls.
#
# ==============================================

import math
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

from fluentbridge.errors import ConfigError


DEFAULT_DATABASE = "logging"
DEFAULT_COLLECTION = "logs"
DEFAULT_PORT = 8080
MAX_PORT = 65535


@dataclass
class MongoConfig:
    """MongoDB connection and target configuration."""
    uri: str
    database: str = DEFAULT_DATABASE
    collection: str = DEFAULT_COLLECTION
    connect_timeout_seconds: float = 10.0
    write_timeout_seconds: float = 5.0
    health_timeout_seconds: float = 2.0


@dataclass
class ServerConfig:
    """HTTP server configuration."""
    api_key: str
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    log_level: str = "INFO"


@dataclass
class AppConfig:
    """Main application configuration."""
    mongo: MongoConfig
    server: ServerConfig


# Singleton instance
_config_instance: Optional[AppConfig] = None


def _required(environ: Mapping[str, str], name: str) -> str:
    value = environ.get(name, "")
    if not value:
        raise ConfigError(f"{name} environment variable required")
    return value


def _number(environ: Mapping[str, str], name: str, default, cast, maximum=None):
    raw = environ.get(name, "")
    if not raw:
        return default
    try:
        value = cast(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from None
    if not math.isfinite(value) or value <= 0:
        raise ConfigError(f"{name} must be a positive finite number, got {raw!r}")
    if maximum is not None and value > maximum:
        raise ConfigError(f"{name} must be at most {maximum}, got {raw!r}")
    return value


def load_config(environ: Mapping[str, str]) -> AppConfig:
    """
    Build configuration from a mapping of environment variables.

    Empty strings count as absent, so optional values fall back to
    their defaults and required values fail.

    Args:
        environ: Mapping such as os.environ

    Returns:
        AppConfig: Application configuration

    Raises:
        ConfigError: If MONGODB_URI or API_KEY is missing, or a
            numeric setting is invalid
    """
    mongo_config = MongoConfig(
        uri=_required(environ, "MONGODB_URI"),
        database=environ.get("MONGODB_DB") or DEFAULT_DATABASE,
        collection=environ.get("MONGODB_COLLECTION") or DEFAULT_COLLECTION,
        connect_timeout_seconds=_number(environ, "CONNECT_TIMEOUT_SECONDS", 10.0, float),
        write_timeout_seconds=_number(environ, "WRITE_TIMEOUT_SECONDS", 5.0, float),
        health_timeout_seconds=_number(environ, "HEALTH_TIMEOUT_SECONDS", 2.0, float),
    )

    server_config = ServerConfig(
        api_key=_required(environ, "API_KEY"),
        host=environ.get("HOST") or "0.0.0.0",
        port=_number(environ, "PORT", DEFAULT_PORT, int, maximum=MAX_PORT),
        log_level=(environ.get("LOG_LEVEL") or "INFO").upper(),
    )

    return AppConfig(mongo=mongo_config, server=server_config)


def get_config() -> AppConfig:
    """
    Load configuration from environment variables / .env file.
    Returns the same singleton instance on repeated calls.

    Returns:
        AppConfig: Application configuration
    """
    global _config_instance

    if _config_instance is not None:
        return _config_instance

    # Load .env file from project root; real environment wins
    env_path = Path(__file__).parent.parent / ".env"
    load_dotenv(dotenv_path=env_path)

    _config_instance = load_config(os.environ)
    return _config_instance


def reset_config() -> None:
    """Forget the cached singleton so the next get_config() reloads."""
    global _config_instance
    _config_instance = None
