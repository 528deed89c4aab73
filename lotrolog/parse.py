"""
Log line parser for the LOTRO combat log parser - classifies combat log lines using regex patterns.

This module loads the phrase registry (``patterns.yml``) and dispatches each raw
log line through the registered categories, converting it into an immutable
LogEvent or raising the ParseError that explains why it could not be parsed.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Any, Tuple, Union
import yaml

from .events import LogEvent, EventCategory, Avoidance
from .errors import PatternError, ParseError, NoParserMatched, AmbiguousMatch
from .matchers import (
    Matcher, CommentMatcher, PatternMatcher, DEFAULT_REFERENCE_YEAR, parse_avoidance
)
from .report import ParseReport

logger = logging.getLogger(__name__)

DEFAULT_PATTERNS_FILE = Path(__file__).parent / "patterns.yml"


@dataclass
class RegisteredCategory:
    """An event category and the matchers that can produce it, in order."""

    category: EventCategory
    matchers: List[Matcher] = field(default_factory=list)
    exclusive: bool = False


class LogParser:
    """Parses LOTRO combat log lines using the phrase registry."""

    def __init__(self, patterns_file: Optional[Union[str, Path]] = None,
                 reference_year: int = DEFAULT_REFERENCE_YEAR,
                 check_ambiguity: bool = True):
        """Initialize parser with the phrase registry from a YAML file.

        Args:
            patterns_file: Path to the registry file (bundled registry if None)
            reference_year: Year given to parsed timestamps
            check_ambiguity: Reject lines that more than one category recognises

        Raises:
            PatternError: If the registry cannot be loaded
        """
        self.patterns_file = Path(patterns_file) if patterns_file else DEFAULT_PATTERNS_FILE
        self.reference_year = reference_year
        self.check_ambiguity = check_ambiguity
        self.patterns: Dict[str, Any] = {}
        self.registry: List[RegisteredCategory] = []
        self._load_patterns()

    @classmethod
    def from_config(cls, config) -> 'LogParser':
        """Create a parser from the ``parser`` section of a Config."""
        parser_config = config.get_parser_config()
        return cls(
            patterns_file=parser_config.get('patterns_file'),
            reference_year=parser_config.get('reference_year', DEFAULT_REFERENCE_YEAR),
            check_ambiguity=parser_config.get('check_ambiguity', True)
        )

    def _load_patterns(self) -> None:
        """Load the phrase registry from YAML.

        Raises:
            PatternError: If the registry cannot be loaded
        """
        if not self.patterns_file.exists():
            raise PatternError(f"Patterns file not found: {self.patterns_file}")

        try:
            with open(self.patterns_file, 'r', encoding='utf-8') as f:
                patterns = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise PatternError(f"Invalid YAML in patterns file: {e}")
        except OSError as e:
            raise PatternError(f"Failed to load patterns: {e}")

        if not patterns or not isinstance(patterns, dict):
            raise PatternError("Patterns file is empty or invalid")

        self.registry = self._build_registry(patterns)
        self.patterns = patterns

        total = sum(len(entry.matchers) for entry in self.registry)
        logger.info(f"Loaded {total} matchers in {len(self.registry)} categories from {self.patterns_file}")

    def _build_registry(self, patterns: Dict[str, Any]) -> List[RegisteredCategory]:
        """Build the ordered category registry from the loaded YAML."""
        reasons = {
            text: parse_avoidance(f"avoidance_reasons.{text}", name)
            for text, name in (patterns.get('avoidance_reasons') or {}).items()
        }

        categories = patterns.get('categories')
        if not categories or not isinstance(categories, list):
            raise PatternError("Patterns file declares no categories")

        registry = []
        seen = set()
        for entry in categories:
            if not isinstance(entry, dict):
                raise PatternError(f"Invalid category entry: {entry!r}")

            category_name = entry.get('category')
            try:
                category = EventCategory(category_name)
            except ValueError:
                raise PatternError(f"Unknown event category: {category_name}")

            if category == EventCategory.UNKNOWN:
                raise PatternError("The Unknown category cannot have matchers")
            if category in seen:
                raise PatternError(f"Category declared twice: {category_name}")
            seen.add(category)

            registered = RegisteredCategory(category=category, exclusive=bool(entry.get('exclusive', False)))
            for matcher_data in entry.get('matchers') or []:
                registered.matchers.append(self._build_matcher(matcher_data, reasons))

            if not registered.matchers:
                logger.warning(f"Category '{category_name}' has no matchers")
                continue

            registry.append(registered)

        return registry

    def _build_matcher(self, data: Dict[str, Any], reasons: Dict[str, Avoidance]) -> Matcher:
        if not isinstance(data, dict):
            raise PatternError(f"Invalid matcher entry: {data!r}")

        name = data.get('name')
        if not name:
            raise PatternError(f"Matcher without a name: {data}")

        if data.get('type', 'pattern') == 'comment':
            return CommentMatcher(name=name, prefix=data.get('prefix', '###'))

        return PatternMatcher.from_dict(
            name, data,
            avoidance_reasons=reasons or None,
            reference_year=self.reference_year
        )

    def parse_line(self, raw_line: str) -> LogEvent:
        """Parse a single log line into a LogEvent.

        Categories are tried in registry order. A hard failure from any
        matcher is raised at once.

        Args:
            raw_line: Raw log line to parse

        Returns:
            The parsed event, carrying ``raw_line`` unchanged

        Raises:
            NoParserMatched: If no phrase recognises the line
            AmbiguousMatch: If several categories recognise the line
            ParseError: If a recognised phrase could not be parsed
        """
        if not raw_line or not raw_line.strip():
            raise NoParserMatched(raw_line, "empty line")

        matched: List[Tuple[EventCategory, Dict[str, Any]]] = []
        for entry in self.registry:
            candidate = self._match_category(entry, raw_line)
            if candidate is None:
                continue

            matched.append((entry.category, candidate))
            if entry.exclusive or not self.check_ambiguity:
                break

        if not matched:
            raise NoParserMatched(raw_line)

        if len(matched) > 1:
            raise AmbiguousMatch(raw_line, [category.value for category, _ in matched])

        category, candidate = matched[0]
        event = LogEvent(category=category, raw_line=raw_line, **candidate)
        logger.debug(f"Created event: {event}")
        return event

    def _match_category(self, entry: RegisteredCategory, raw_line: str) -> Optional[Dict[str, Any]]:
        """Return the candidate of the first matcher of a category that matches."""
        for matcher in entry.matchers:
            candidate = matcher.try_match(raw_line)
            if candidate is not None:
                logger.debug(f"Matcher '{matcher.name}' matched as {entry.category.value}")
                return candidate
        return None

    def parse_lines(self, lines: Iterable[str], report: Optional[ParseReport] = None) -> Iterator[LogEvent]:
        """Parse a sequence of lines, skipping the ones that fail.

        Args:
            lines: Log lines in file order (trailing newlines are stripped)
            report: Optional report that records every line and failure

        Yields:
            Parsed events in input order
        """
        for line_number, line in enumerate(lines, start=1):
            line = line.rstrip('\r\n')
            try:
                event = self.parse_line(line)
            except ParseError as e:
                logger.debug(f"Line {line_number}: {e}")
                if report is not None:
                    report.record_failure(line_number, line, e)
                continue

            if report is not None:
                report.record_event(event)
            yield event

    def parse_file(self, path: Union[str, Path], report: Optional[ParseReport] = None) -> List[LogEvent]:
        """Parse an entire log file.

        Args:
            path: Log file to read
            report: Optional report that records every line and failure

        Returns:
            Parsed events in file order

        Raises:
            OSError: If the file cannot be read
        """
        path = Path(path)
        with open(path, 'r', encoding='utf-8', errors='replace') as f:
            events = list(self.parse_lines(f, report))

        logger.info(f"Parsed {len(events)} events from {path}")
        return events

    def reload_patterns(self) -> None:
        """Reload the phrase registry from file.

        Raises:
            PatternError: If the registry cannot be reloaded
        """
        self._load_patterns()
        logger.info("Patterns reloaded successfully")

    def get_pattern_info(self) -> Dict[str, Any]:
        """Get information about the loaded registry.

        Returns:
            Dictionary with registry information
        """
        return {
            'patterns_file': str(self.patterns_file),
            'total_categories': len(self.registry),
            'total_matchers': sum(len(entry.matchers) for entry in self.registry),
            'categories': [entry.category.value for entry in self.registry],
            'matcher_names': {
                entry.category.value: [matcher.name for matcher in entry.matchers]
                for entry in self.registry
            }
        }
