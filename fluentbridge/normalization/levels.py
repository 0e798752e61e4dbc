from enum import Enum


class LogLevel(str, Enum):
    """
    Log levels the bridge expects to see.

    Documentation only: the normalizer lower-cases any string level and
    never rejects or reclassifies values outside this set.
    """
    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"
    FATAL = "fatal"

    @classmethod
    def is_known(cls, value) -> bool:
        return isinstance(value, str) and value in cls._value2member_map_
