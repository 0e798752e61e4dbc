import json
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, Optional

from .levels import LogLevel
from .timestamps import TimestampParser

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class LogNormalizer:
    """
    Turns one raw forwarder record into the document stored in MongoDB.

    Stateless apart from the injected clock, so a single instance is shared
    by every request. Never raises for a dict input: enrichment steps that
    cannot apply are skipped and the raw value is kept.
    """

    TIMESTAMP_FIELD = "@timestamp"
    PLATFORM_FIELD = "kubernetes"
    CONTAINER_FIELD = "container_name"
    NAMESPACE_FIELD = "namespace_name"
    LOG_LINE_FIELD = "log"
    DEFAULT_TYPE = "log"

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self.clock = clock or utc_now

    def normalize(self, raw_record: dict) -> dict:
        # Later steps overwrite keys set by earlier ones
        processed = dict(raw_record)

        processed["timestamp"] = self._resolve_timestamp(raw_record)
        self._extract_platform_metadata(raw_record, processed)
        self._expand_log_line(raw_record, processed)

        if "type" not in processed:
            processed["type"] = self.DEFAULT_TYPE

        level = processed.get("level")
        if isinstance(level, str):
            processed["level"] = level.lower()
            if not LogLevel.is_known(processed["level"]):
                logger.debug("Unrecognized log level %r kept as is", processed["level"])

        return processed

    def normalize_batch(self, candidates: Iterable[Any]) -> list[dict]:
        """Normalize every mapping in ``candidates``; other values are skipped."""
        return [self.normalize(item) for item in candidates if isinstance(item, dict)]

    def _resolve_timestamp(self, raw_record: dict) -> datetime:
        # Malformed values fall back to now, same as missing ones
        parsed = TimestampParser.parse(raw_record.get(self.TIMESTAMP_FIELD))
        if parsed is None:
            return self.clock()
        return parsed

    def _extract_platform_metadata(self, raw_record: dict, processed: dict) -> None:
        platform = raw_record.get(self.PLATFORM_FIELD)
        if not isinstance(platform, dict):
            return

        container_name = platform.get(self.CONTAINER_FIELD)
        if isinstance(container_name, str):
            processed["service"] = container_name

        namespace = platform.get(self.NAMESPACE_FIELD)
        if isinstance(namespace, str):
            processed["namespace"] = namespace

    def _expand_log_line(self, raw_record: dict, processed: dict) -> None:
        log_line = raw_record.get(self.LOG_LINE_FIELD)
        if not isinstance(log_line, str):
            return

        log_line = log_line.strip()
        embedded = self._parse_embedded_object(log_line)
        if embedded is None:
            processed["message"] = log_line
        else:
            processed.update(embedded)

    @staticmethod
    def _parse_embedded_object(text: str) -> Optional[dict]:
        if not (text.startswith("{") and text.endswith("}")):
            return None
        try:
            parsed = json.loads(text)
        except (ValueError, RecursionError):
            return None
        if not isinstance(parsed, dict):
            return None
        return parsed
