"""
Error types for the LOTRO combat log parser.

Every per-line failure is a ParseError. Each subclass belongs to one of three
error categories so the report can tell a genuinely unknown phrase apart from
a recognised phrase with a broken structure or a line with no timestamp.
"""

from enum import Enum
from typing import Dict, Any, Iterable


class ErrorCategory(Enum):
    """Error categories for per-line parse failures."""
    CLASSIFICATION = "classification"
    STRUCTURAL = "structural"
    TIMESTAMP = "timestamp"


class PatternError(Exception):
    """Phrase registry errors (missing file, bad regex, unknown category)."""
    pass


class ParseError(Exception):
    """Base class for failures to parse a single log line."""

    category = ErrorCategory.STRUCTURAL

    def __init__(self, raw_line: str = "", detail: str = ""):
        self.raw_line = raw_line
        self.detail = detail
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        message = self.detail or type(self).__name__
        if self.raw_line:
            message += f": <{self.raw_line}>"
        return message

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging/serialization."""
        return {
            'error_type': type(self).__name__,
            'category': self.category.name,
            'detail': self.detail,
            'raw_line': self.raw_line
        }


class NoTimestampFound(ParseError):
    """The line does not start with a timestamp token."""

    category = ErrorCategory.TIMESTAMP

    def __init__(self, raw_line: str = "", detail: str = "timestamp not found"):
        super().__init__(raw_line, detail)


class InvalidTimestampFormat(ParseError):
    """The timestamp token has the right shape but is not a valid time."""

    def __init__(self, raw_line: str = "", detail: str = "invalid timestamp format"):
        super().__init__(raw_line, detail)


class NoParserMatched(ParseError):
    """No registered phrase recognised the line."""

    category = ErrorCategory.CLASSIFICATION

    def __init__(self, raw_line: str = "", detail: str = "no parsers matched"):
        super().__init__(raw_line, detail)


class MalformedPhrase(ParseError):
    """A phrase was recognised but its structure did not match its grammar."""
    pass


class ValueNotNumeric(ParseError):
    """A numeric field could not be converted to an integer."""
    pass


class AmbiguousMatch(ParseError):
    """More than one event category recognised the same line."""

    def __init__(self, raw_line: str, categories: Iterable[str]):
        self.categories = list(categories)
        super().__init__(raw_line, f"line matched several categories: {', '.join(self.categories)}")
