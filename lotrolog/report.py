"""
Line classification report - counts parsed and failed lines for a run
"""

from dataclasses import dataclass, field
from typing import Dict, Any, List

from .events import LogEvent
from .errors import ParseError, ErrorCategory

DEFAULT_MAX_FAILURE_SAMPLES = 10


@dataclass
class FailureInfo:
    """A line that could not be parsed."""

    line_number: int
    raw_line: str
    error: ParseError

    @property
    def category(self) -> ErrorCategory:
        return self.error.category

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging/serialization."""
        data = self.error.to_dict()
        data['line_number'] = self.line_number
        data['raw_line'] = self.raw_line
        return data


@dataclass
class ParseReport:
    """Totals, per-category counts and failing lines of a parse run."""

    total_lines: int = 0
    parsed_lines: int = 0
    failures: List[FailureInfo] = field(default_factory=list)
    category_counts: Dict[str, int] = field(default_factory=dict)
    error_counts: Dict[str, int] = field(default_factory=dict)

    def record_event(self, event: LogEvent) -> None:
        """Record a successfully parsed line."""
        self.total_lines += 1
        self.parsed_lines += 1
        key = event.category.value
        self.category_counts[key] = self.category_counts.get(key, 0) + 1

    def record_failure(self, line_number: int, raw_line: str, error: ParseError) -> None:
        """Record a line that failed to parse."""
        self.total_lines += 1
        self.failures.append(FailureInfo(line_number, raw_line, error))
        key = error.category.name
        self.error_counts[key] = self.error_counts.get(key, 0) + 1

    @property
    def total_failures(self) -> int:
        return len(self.failures)

    @property
    def failed_lines(self) -> List[str]:
        """Raw failing lines in input order."""
        return [failure.raw_line for failure in self.failures]

    @property
    def success_rate(self) -> float:
        """Fraction of lines parsed, 1.0 for an empty run."""
        if not self.total_lines:
            return 1.0
        return self.parsed_lines / self.total_lines

    def failure_sample(self, limit: int = DEFAULT_MAX_FAILURE_SAMPLES) -> List[str]:
        """First ``limit`` failing raw lines."""
        if limit < 0:
            raise ValueError("limit must not be negative")
        return self.failed_lines[:limit]

    def summary_lines(self, limit: int = DEFAULT_MAX_FAILURE_SAMPLES) -> List[str]:
        """Run summary as printable lines."""
        lines = [
            f"total lines: {self.total_lines}",
            f"total errors: {self.total_failures}",
        ]
        lines.extend(self.failure_sample(limit))
        return lines

    def to_dict(self, limit: int = DEFAULT_MAX_FAILURE_SAMPLES) -> Dict[str, Any]:
        """Convert report to dictionary representation.

        Args:
            limit: Maximum number of failures to include

        Returns:
            Dictionary representation of the report
        """
        return {
            'total_lines': self.total_lines,
            'parsed_lines': self.parsed_lines,
            'total_failures': self.total_failures,
            'success_rate': self.success_rate,
            'category_counts': dict(self.category_counts),
            'error_counts': dict(self.error_counts),
            'failures': [failure.to_dict() for failure in self.failures[:limit]]
        }
