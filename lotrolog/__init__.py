"""
LOTRO Combat Log Parser - turns Lord of the Rings Online combat log lines into typed events
"""

__version__ = "0.1.0"
__author__ = "LOTRO Combat Parser Team"
__description__ = "Parse LOTRO combat log lines into structured combat events"
__license__ = "MIT"

# Version info
VERSION = __version__
VERSION_INFO = tuple(int(x) for x in __version__.split('.'))

from .events import LogEvent, EventCategory, Avoidance, SelfReference, SELF, resolve_self
from .errors import (
    ErrorCategory, PatternError, ParseError, NoTimestampFound, InvalidTimestampFormat,
    NoParserMatched, MalformedPhrase, ValueNotNumeric, AmbiguousMatch
)
from .parse import LogParser
from .report import ParseReport, FailureInfo
from .config import Config, ConfigError

# Package exports
__all__ = [
    'LogParser',
    'LogEvent',
    'EventCategory',
    'Avoidance',
    'SelfReference',
    'SELF',
    'resolve_self',
    'ParseReport',
    'FailureInfo',
    'Config',
    'ConfigError',
    'ErrorCategory',
    'PatternError',
    'ParseError',
    'NoTimestampFound',
    'InvalidTimestampFormat',
    'NoParserMatched',
    'MalformedPhrase',
    'ValueNotNumeric',
    'AmbiguousMatch',
]
