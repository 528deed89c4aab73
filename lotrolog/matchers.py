"""
Phrase matchers for LOTRO combat logs.

A matcher recognises one phrase shape and pulls its fields out of the line.
``try_match`` has three outcomes:

* a dict of event fields when the phrase matched,
* ``None`` when the phrase was not recognised (the next matcher is tried),
* a raised ``ParseError`` when the phrase was recognised but is broken.

Also home to the helpers shared by every matcher: the timestamp extractor,
the numeric normalizer and the self-reference resolver.
"""

import re
import logging
from datetime import datetime
from typing import Dict, List, Optional, Any, Tuple, Union

from .events import Avoidance, Actor, SELF
from .errors import (
    PatternError, NoTimestampFound, InvalidTimestampFormat,
    MalformedPhrase, ValueNotNumeric
)

logger = logging.getLogger(__name__)

DEFAULT_REFERENCE_YEAR = 2000

# [07/08 02:22:01 PM] or 07/08 14:22:01, brackets must be balanced
TIMESTAMP_RE = re.compile(
    r'^(\[)?(?P<date>\d{2}/\d{2})\s+(?P<time>\d{2}:\d{2}:\d{2})'
    r'(?:\s*(?P<meridiem>AM|PM))?(?(1)\]) '
)
TIMESTAMP_FORMATS = ('%Y/%m/%d %I:%M:%S %p', '%Y/%m/%d %H:%M:%S')

SELF_WORDS = ('You', 'you')

DEFAULT_AVOIDANCE_REASONS = {
    'blocked': Avoidance.BLOCKED,
    'parried': Avoidance.PARRIED,
    'evaded': Avoidance.EVADED,
    'resisted': Avoidance.RESISTED,
}

_DIGITS_RE = re.compile(r'[0-9]+')

# Named groups a phrase regex may declare
CAPTURE_GROUPS = frozenset(
    ['source', 'target', 'skill', 'value', 'value_type', 'crit', 'avoided', 'reason']
)
# Fields a registry entry may set to a fixed value
FIXED_FIELDS = frozenset(
    ['source', 'target', 'skill', 'value', 'value_type', 'crit', 'devastating', 'avoidance']
)


def extract_timestamp(line: str, reference_year: int = DEFAULT_REFERENCE_YEAR) -> Tuple[datetime, str]:
    """Strip and parse the leading timestamp of a log line.

    Logs carry no year, so ``reference_year`` is used. Consumers must not
    rely on the year of the returned timestamp.

    Args:
        line: Raw log line
        reference_year: Year to give the timestamp

    Returns:
        Tuple of (timestamp, rest of the line after the timestamp)

    Raises:
        NoTimestampFound: If the line does not start with a timestamp
        InvalidTimestampFormat: If the timestamp is not a valid time
    """
    match = TIMESTAMP_RE.match(line)
    if not match:
        raise NoTimestampFound(line)

    timestamp_str = f"{reference_year:04d}/{match.group('date')} {match.group('time')}"
    if match.group('meridiem'):
        timestamp_str += f" {match.group('meridiem')}"

    for fmt in TIMESTAMP_FORMATS:
        try:
            return datetime.strptime(timestamp_str, fmt), line[match.end():]
        except ValueError:
            continue

    raise InvalidTimestampFormat(line, f"invalid timestamp format: {match.group(0).strip()}")


def normalize_value(text: str, raw_line: str = "") -> int:
    """Parse a magnitude such as ``1,234`` into an integer.

    Raises:
        ValueNotNumeric: If the text is not a non-negative base-10 integer
    """
    cleaned = text.replace(',', '')
    if not _DIGITS_RE.fullmatch(cleaned):
        raise ValueNotNumeric(raw_line, f"value not convertible to int: {text!r}")
    return int(cleaned)


def resolve_actor(name: str) -> Actor:
    """Map "you"/"You" to the SELF placeholder, keep any other name."""
    return SELF if name in SELF_WORDS else name


class Matcher:
    """Base class for phrase matchers."""

    name = "matcher"

    def try_match(self, line: str) -> Optional[Dict[str, Any]]:
        """Try to recognise a line.

        Args:
            line: Raw log line

        Returns:
            Event fields if the phrase matched, None otherwise

        Raises:
            ParseError: If the phrase matched but could not be parsed
        """
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class CommentMatcher(Matcher):
    """Matches comment lines inserted into the log (no timestamp)."""

    def __init__(self, name: str = "comment", prefix: str = "###"):
        if not prefix:
            raise PatternError(f"Matcher '{name}' needs a non-empty prefix")
        self.name = name
        self.prefix = prefix

    def try_match(self, line: str) -> Optional[Dict[str, Any]]:
        if line.startswith(self.prefix):
            return {}
        return None


class PatternMatcher(Matcher):
    """Regex-driven matcher for one timestamped phrase shape.

    The ``trigger`` decides whether the phrase applies at all; after that the
    timestamp and one of ``patterns`` (or one of the ``exact`` self forms)
    must match, otherwise the line is a hard failure.
    """

    def __init__(self, name: str, trigger: str, patterns: List[str],
                 exclude: Optional[str] = None,
                 exact: Optional[Dict[str, Dict[str, Any]]] = None,
                 fields: Optional[Dict[str, Any]] = None,
                 avoidance_reasons: Optional[Dict[str, Avoidance]] = None,
                 reference_year: int = DEFAULT_REFERENCE_YEAR):
        self.name = name
        self.trigger = _compile(name, trigger)
        self.exclude = _compile(name, exclude) if exclude else None
        self.patterns = [_compile(name, p) for p in patterns]
        self.exact = {text: coerce_fields(name, f) for text, f in (exact or {}).items()}
        self.fields = coerce_fields(name, fields or {})
        self.avoidance_reasons = avoidance_reasons or DEFAULT_AVOIDANCE_REASONS
        self.reference_year = reference_year

        if not self.patterns and not self.exact:
            raise PatternError(f"Matcher '{name}' has no regex and no exact forms")

        for pattern in self.patterns:
            unknown = set(pattern.groupindex) - CAPTURE_GROUPS
            if unknown:
                raise PatternError(
                    f"Matcher '{name}' captures unknown groups: {', '.join(sorted(unknown))}"
                )

    @classmethod
    def from_dict(cls, name: str, data: Dict[str, Any],
                  avoidance_reasons: Optional[Dict[str, Avoidance]] = None,
                  reference_year: int = DEFAULT_REFERENCE_YEAR) -> 'PatternMatcher':
        """Build a matcher from its registry entry."""
        trigger = data.get('trigger')
        if not trigger:
            raise PatternError(f"Matcher '{name}' has no trigger")

        patterns = data.get('regex') or []
        if isinstance(patterns, str):
            patterns = [patterns]

        exact = {}
        for form in data.get('exact') or []:
            if not isinstance(form, dict) or 'text' not in form:
                raise PatternError(f"Matcher '{name}' has an exact form without text")
            exact[form['text']] = form.get('fields') or {}

        return cls(
            name=name,
            trigger=trigger,
            patterns=patterns,
            exclude=data.get('exclude'),
            exact=exact,
            fields=data.get('fields'),
            avoidance_reasons=avoidance_reasons,
            reference_year=reference_year
        )

    def try_match(self, line: str) -> Optional[Dict[str, Any]]:
        if not self.trigger.search(line):
            return None
        if self.exclude and self.exclude.search(line):
            return None

        timestamp, message = extract_timestamp(line, self.reference_year)
        candidate: Dict[str, Any] = {'timestamp': timestamp}

        if message in self.exact:
            candidate.update(self.exact[message])
            return candidate

        for pattern in self.patterns:
            match = pattern.search(message)
            if match:
                candidate.update(self.fields)
                candidate.update(self._extract(match, line))
                return candidate

        raise MalformedPhrase(line, f"failed to parse as {self.name}")

    def _extract(self, match: re.Match, raw_line: str) -> Dict[str, Any]:
        """Turn the named groups of a match into event fields."""
        extracted: Dict[str, Any] = {}

        for group, text in match.groupdict().items():
            if text is None:
                # optional group did not take part in the match
                continue

            if group in ('source', 'target'):
                extracted[group] = resolve_actor(text)
            elif group == 'value':
                extracted['value'] = normalize_value(text, raw_line)
            elif group == 'crit':
                modifier = text.strip()
                extracted['crit'] = modifier == 'critical'
                extracted['devastating'] = modifier == 'devastating'
            elif group == 'avoided':
                extracted['avoidance'] = self.avoidance_reasons.get(text, Avoidance.UNKNOWN)
            elif group == 'reason':
                # "but Bob blocked the attempt": the verb is the last word
                words = text.split()
                verb = words[-1] if words else text
                extracted['avoidance'] = self.avoidance_reasons.get(verb, Avoidance.UNKNOWN)
            else:
                extracted[group] = text

        return extracted


def coerce_fields(name: str, fields: Dict[str, Any]) -> Dict[str, Any]:
    """Convert fixed fields from their YAML spelling to event values.

    ``self`` as an actor becomes SELF and avoidance names become
    Avoidance members.
    """
    coerced: Dict[str, Any] = {}

    for key, value in fields.items():
        if key not in FIXED_FIELDS:
            raise PatternError(f"Matcher '{name}' sets unknown field '{key}'")

        if key in ('source', 'target'):
            coerced[key] = SELF if value == 'self' else str(value)
        elif key == 'avoidance':
            coerced[key] = parse_avoidance(name, value)
        else:
            coerced[key] = value

    return coerced


def parse_avoidance(name: str, value: Union[str, Avoidance]) -> Avoidance:
    """Look up an Avoidance member by its value (``Blocked``, ``Missed``...)."""
    if isinstance(value, Avoidance):
        return value
    try:
        return Avoidance(value)
    except ValueError:
        raise PatternError(f"Matcher '{name}' uses unknown avoidance '{value}'")


def _compile(name: str, regex: str) -> re.Pattern:
    try:
        compiled = re.compile(regex)
        logger.debug(f"Compiled pattern '{name}': {regex}")
        return compiled
    except re.error as e:
        raise PatternError(f"Invalid regex for matcher '{name}': {e}")
