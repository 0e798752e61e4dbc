"""Exception hierarchy for the bridge.

Only ``IngestError`` subclasses reach HTTP clients; their ``reason`` is
the public message and never includes driver or connection details.
"""


class BridgeError(Exception):
    """Base class for every error raised by this package."""


class ConfigError(BridgeError):
    """Required configuration is missing or invalid."""


class IngestError(BridgeError):
    status_code = 500
    reason = "internal error"

    def __init__(self, detail: str = ""):
        super().__init__(detail or self.reason)
        self.detail = detail


class UnauthorizedError(IngestError):
    status_code = 401
    reason = "unauthorized"


class InvalidPayloadError(IngestError):
    status_code = 400
    reason = "invalid data"


class StorageError(IngestError):
    status_code = 500
    reason = "database error"
