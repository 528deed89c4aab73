"""
Event definitions for the LOTRO combat log parser - defines parsed combat events and their structure
"""

from enum import Enum
from dataclasses import dataclass, replace
from typing import Dict, Any, Optional, Union
from datetime import datetime


class EventCategory(Enum):
    """Kinds of combat events a log line can describe."""

    UNKNOWN = "Unknown"

    # Combat events
    DAMAGE_TAKEN = "DamageTaken"
    DAMAGE_DEALT = "DamageDealt"
    HEAL = "Heal"
    POWER_RESTORED = "PowerRestored"

    # Effect events
    DEBUFF_APPLIED = "DebuffApplied"
    BUFF_APPLIED = "BuffApplied"
    BENEFIT = "Benefit"
    CORRUPTION_REMOVED = "CorruptionRemoved"
    CC_BROKEN = "CcBroken"

    # Interrupts
    INTERRUPT = "Interrupt"
    MOB_INTERRUPT = "MobInterrupt"

    # Life and death
    DEATH = "Death"
    REVIVE = "Revive"
    TEMP_MORALE_LOST = "TempMoraleLost"
    TEMP_MORALE_NOT_WASTED = "TempMoraleNotWasted"

    # Session events
    COMBAT_START = "CombatStart"
    COMBAT_END = "CombatEnd"
    COMMENT = "Comment"


class Avoidance(Enum):
    """How an attack failed to connect, if at all."""

    NONE = "None"
    BLOCKED = "Blocked"
    PARRIED = "Parried"
    EVADED = "Evaded"
    RESISTED = "Resisted"
    IMMUNE = "Immune"
    DEFLECTED = "Deflected"
    MISSED = "Missed"
    UNKNOWN = "Unknown"


class SelfReference(Enum):
    """Stands in for the player who recorded the log ("you" in log text)."""

    SELF = "<self>"


SELF = SelfReference.SELF

# An actor is either a name taken from the log or the observing player
Actor = Union[str, SelfReference]


@dataclass(frozen=True)
class LogEvent:
    """Structured combat event parsed from a single log line."""

    category: EventCategory
    timestamp: Optional[datetime] = None
    source: Actor = ""
    target: Actor = ""
    skill: str = ""
    value: int = 0
    value_type: str = ""
    crit: bool = False
    devastating: bool = False
    avoidance: Avoidance = Avoidance.NONE
    raw_line: str = ""

    def __post_init__(self):
        """Post-initialization validation."""
        if not isinstance(self.category, EventCategory):
            raise ValueError("category must be an EventCategory enum value")

        if self.timestamp is not None and not isinstance(self.timestamp, datetime):
            raise ValueError("timestamp must be a datetime object or None")

        for name in ("source", "target"):
            actor = getattr(self, name)
            if not isinstance(actor, (str, SelfReference)):
                raise ValueError(f"{name} must be a string or SELF")

        if isinstance(self.value, bool) or not isinstance(self.value, int) or self.value < 0:
            raise ValueError("value must be a non-negative integer")

        if not isinstance(self.avoidance, Avoidance):
            raise ValueError("avoidance must be an Avoidance enum value")

    def involves_self(self) -> bool:
        """Check whether the observing player is the source or target.

        Returns:
            True if either actor is the self placeholder
        """
        return self.source is SELF or self.target is SELF

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to a JSON-serializable dictionary.

        Returns:
            Dictionary representation of the event
        """
        return {
            "category": self.category.value,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
            "source": _actor_text(self.source),
            "target": _actor_text(self.target),
            "skill": self.skill,
            "value": self.value,
            "value_type": self.value_type,
            "crit": self.crit,
            "devastating": self.devastating,
            "avoidance": self.avoidance.value,
            "raw_line": self.raw_line
        }

    def __str__(self) -> str:
        """String representation of the event."""
        parts = [f"{_actor_text(self.source) or '?'} -> {_actor_text(self.target) or '?'}"]
        if self.skill:
            parts.append(self.skill)
        if self.value:
            parts.append(f"{self.value} {self.value_type}".strip())
        if self.crit:
            parts.append("critical")
        if self.devastating:
            parts.append("devastating")
        if self.avoidance is not Avoidance.NONE:
            parts.append(self.avoidance.value.lower())
        return f"{self.category.value}({', '.join(parts)})"


def _actor_text(actor: Actor) -> str:
    return actor.value if isinstance(actor, SelfReference) else actor


def resolve_self(event: LogEvent, player_name: str) -> LogEvent:
    """Replace the self placeholder with the observing player's name.

    Args:
        event: Parsed event, possibly referring to SELF
        player_name: Name of the player who recorded the log

    Returns:
        A new event with SELF actors substituted; the given event is
        returned as-is when it does not involve the player
    """
    if not player_name or not player_name.strip():
        raise ValueError("player_name must be a non-empty string")

    if not event.involves_self():
        return event

    return replace(
        event,
        source=player_name if event.source is SELF else event.source,
        target=player_name if event.target is SELF else event.target
    )
