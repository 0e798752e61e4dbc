# ==============================================
# LogIngestor — Request Orchestrator
# ==============================================
#
# PURPOSE:
#   Ties decoding, normalization and storage together for one
#   request body. The HTTP layer handles method and credential
#   checks and calls into this class only.
#
#   raw bytes
#      │ decode_envelope()
#      ▼
#   list of candidates (object → [object], array → array)
#      │ LogNormalizer.normalize_batch()  (non-objects skipped)
#      ▼
#   list of canonical documents
#      │ 0 docs → no write
#      │ 1 doc  → MongoClient.insert_one()
#      │ n docs → MongoClient.insert_many()
#      ▼
#   IngestResult
#
#   Exactly one storage round-trip per request, never retried.
#
# ==============================================

import json
import logging
from dataclasses import dataclass
from typing import Any, Optional

from fluentbridge.errors import InvalidPayloadError
from fluentbridge.normalization import LogNormalizer

logger = logging.getLogger(__name__)


@dataclass
class IngestResult:
    inserted: int
    database: str
    collection: str


def decode_envelope(body: bytes) -> list[Any]:
    """
    Decode a request body into the list of candidate records.

    A JSON array is returned as is and a JSON object becomes a one-element
    list. Anything else, including undecodable bytes, is rejected.

    Raises:
        InvalidPayloadError: If the body is not a JSON object or array
    """
    try:
        data = json.loads(body)
    except (ValueError, RecursionError) as e:
        logger.warning("Failed to decode JSON: %s", e)
        raise InvalidPayloadError("invalid JSON") from e

    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        return [data]

    logger.warning("Unexpected data format: %s", type(data).__name__)
    raise InvalidPayloadError(f"unsupported JSON shape: {type(data).__name__}")


class LogIngestor:
    def __init__(self, storage, default_database: str, default_collection: str,
                 normalizer: Optional[LogNormalizer] = None):
        self.storage = storage
        self.default_database = default_database
        self.default_collection = default_collection
        self.normalizer = normalizer or LogNormalizer()

    def ingest(self, body: bytes, database: Optional[str] = None,
               collection: Optional[str] = None) -> IngestResult:
        """
        Decode, normalize and store one request body.

        Args:
            body: Raw request body
            database: Target database; empty or None uses the default
            collection: Target collection; empty or None uses the default

        Returns:
            IngestResult with the number of documents written

        Raises:
            InvalidPayloadError: Body is not a JSON object or array
            StorageError: The write failed
        """
        database = database or self.default_database
        collection = collection or self.default_collection

        candidates = decode_envelope(body)
        documents = self.normalizer.normalize_batch(candidates)

        if len(documents) < len(candidates):
            logger.debug("Skipped %d non-object entries", len(candidates) - len(documents))

        if not documents:
            return IngestResult(inserted=0, database=database, collection=collection)

        if len(documents) == 1:
            self.storage.insert_one(database, collection, documents[0])
        else:
            self.storage.insert_many(database, collection, documents)

        logger.info("Inserted %d logs into %s.%s", len(documents), database, collection)
        return IngestResult(inserted=len(documents), database=database, collection=collection)
