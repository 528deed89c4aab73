"""
Unit tests for the line classification report
"""

import pytest
import sys
import os

# Add the parent directory to the path so we can import lotrolog
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from lotrolog.report import ParseReport
from lotrolog.events import LogEvent, EventCategory
from lotrolog.errors import NoParserMatched, ValueNotNumeric, NoTimestampFound


class TestParseReport:
    """Test ParseReport class."""

    def setup_method(self):
        """Set up test fixtures."""
        self.report = ParseReport()
        self.report.record_event(LogEvent(category=EventCategory.DEATH))
        self.report.record_event(LogEvent(category=EventCategory.DEATH))
        self.report.record_event(LogEvent(category=EventCategory.HEAL))
        for number in range(1, 13):
            line = f"bad line {number}"
            self.report.record_failure(number, line, NoParserMatched(line))
        self.report.record_failure(13, "bad value", ValueNotNumeric("bad value", "x"))
        self.report.record_failure(14, "no time", NoTimestampFound("no time"))

    def test_counts(self):
        """Test total, parsed and failed counts."""
        assert self.report.total_lines == 17
        assert self.report.parsed_lines == 3
        assert self.report.total_failures == 14

    def test_category_counts(self):
        """Test counts of parsed categories."""
        assert self.report.category_counts == {"Death": 2, "Heal": 1}

    def test_error_counts(self):
        """Test counts of failures by error category."""
        assert self.report.error_counts == {
            "CLASSIFICATION": 12, "STRUCTURAL": 1, "TIMESTAMP": 1
        }

    def test_failed_lines_in_order(self):
        """Test that failing lines are kept in input order."""
        assert self.report.failed_lines[0] == "bad line 1"
        assert self.report.failed_lines[-1] == "no time"

    def test_failure_sample(self):
        """Test that the sample is capped."""
        assert self.report.failure_sample() == [f"bad line {n}" for n in range(1, 11)]
        assert self.report.failure_sample(2) == ["bad line 1", "bad line 2"]
        assert self.report.failure_sample(0) == []

        with pytest.raises(ValueError):
            self.report.failure_sample(-1)

    def test_summary_lines(self):
        """Test the printable summary."""
        summary = self.report.summary_lines(2)

        assert summary == [
            "total lines: 17",
            "total errors: 14",
            "bad line 1",
            "bad line 2",
        ]

    def test_success_rate(self):
        """Test the fraction of parsed lines."""
        assert self.report.success_rate == pytest.approx(3 / 17)
        assert ParseReport().success_rate == 1.0

    def test_to_dict(self):
        """Test converting report to dictionary."""
        data = self.report.to_dict(limit=1)

        assert data["total_lines"] == 17
        assert data["total_failures"] == 14
        assert len(data["failures"]) == 1
        assert data["failures"][0]["line_number"] == 1
        assert data["failures"][0]["error_type"] == "NoParserMatched"
        assert data["failures"][0]["category"] == "CLASSIFICATION"

    def test_failure_category(self):
        """Test that failures expose their error category."""
        assert self.report.failures[-1].category.name == "TIMESTAMP"


if __name__ == "__main__":
    pytest.main([__file__])
