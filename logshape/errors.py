"""Exception types raised by logshape."""


class LogshapeError(Exception):
    pass


class ConfigurationError(LogshapeError, ValueError):
    """Invalid logger configuration detected at construction time."""


class EeeohParseError(LogshapeError, ValueError):
    pass


class RedactionError(LogshapeError, TypeError):
    pass


class StdoutMockError(LogshapeError, AssertionError):
    """The recording destination received or returned something unexpected."""


__all__ = [
    "LogshapeError",
    "ConfigurationError",
    "EeeohParseError",
    "RedactionError",
    "StdoutMockError",
]
