import re
from datetime import datetime, timedelta, timezone
from typing import Any, Optional


class TimestampParser:
    # Forwarders emit RFC 3339 with up to nanosecond precision; an offset is mandatory
    RFC3339_PATTERN = re.compile(
        r'(\d{4})-(\d{2})-(\d{2})[Tt](\d{2}):(\d{2}):(\d{2})'
        r'(?:\.(\d+))?'
        r'([Zz]|[+-]\d{2}:\d{2})',
        re.ASCII,
    )

    @classmethod
    def parse(cls, value: Any) -> Optional[datetime]:
        """
        Parse an RFC 3339 timestamp string into an aware datetime.

        Fractional seconds beyond microseconds are truncated. Returns None
        for anything that is not a well-formed RFC 3339 string, including
        non-string values.
        """
        if not isinstance(value, str):
            return None

        match = cls.RFC3339_PATTERN.fullmatch(value)
        if not match:
            return None

        year, month, day, hour, minute, second, fraction, offset = match.groups()
        microsecond = int((fraction or "0")[:6].ljust(6, "0"))

        try:
            tzinfo = cls._parse_offset(offset)
            return datetime(
                int(year), int(month), int(day),
                int(hour), int(minute), int(second),
                microsecond, tzinfo=tzinfo,
            )
        except ValueError:
            return None

    @classmethod
    def _parse_offset(cls, offset: str) -> timezone:
        if offset in ("Z", "z"):
            return timezone.utc
        sign = -1 if offset[0] == "-" else 1
        hours, minutes = int(offset[1:3]), int(offset[4:6])
        if hours > 23 or minutes > 59:
            raise ValueError(f"offset out of range: {offset}")
        return timezone(sign * timedelta(hours=hours, minutes=minutes))
