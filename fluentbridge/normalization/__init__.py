# ==============================================
# NORMALIZATION
# ==============================================
#
# This package turns raw Fluent Bit records into the canonical
# documents written to MongoDB. Everything here is pure: no I/O,
# no shared mutable state.
#
# Modules:
# --------
# - timestamps.py     → Parse RFC 3339 (nanosecond) forwarder timestamps
# - levels.py         → LogLevel enumeration of expected level values
# - log_normalizer.py → Copy, enrich and merge one record
#
# ==============================================

from .levels import LogLevel
from .log_normalizer import LogNormalizer
from .timestamps import TimestampParser

__all__ = ["LogLevel", "LogNormalizer", "TimestampParser"]
