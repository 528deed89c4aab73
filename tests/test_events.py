"""
Unit tests for the LOTRO combat log events module
"""

import pytest
from datetime import datetime
import sys
import os

# Add the parent directory to the path so we can import lotrolog
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from lotrolog.events import (
    LogEvent, EventCategory, Avoidance, SelfReference, SELF, resolve_self
)


class TestEventCategory:
    """Test EventCategory enum."""

    def test_event_categories_exist(self):
        """Test that all expected categories exist with their log names."""
        expected = {
            "UNKNOWN": "Unknown", "DAMAGE_TAKEN": "DamageTaken", "DAMAGE_DEALT": "DamageDealt",
            "HEAL": "Heal", "POWER_RESTORED": "PowerRestored", "DEBUFF_APPLIED": "DebuffApplied",
            "BUFF_APPLIED": "BuffApplied", "INTERRUPT": "Interrupt",
            "CORRUPTION_REMOVED": "CorruptionRemoved", "DEATH": "Death", "REVIVE": "Revive",
            "COMBAT_START": "CombatStart", "COMBAT_END": "CombatEnd",
            "MOB_INTERRUPT": "MobInterrupt", "TEMP_MORALE_LOST": "TempMoraleLost",
            "TEMP_MORALE_NOT_WASTED": "TempMoraleNotWasted", "CC_BROKEN": "CcBroken",
            "BENEFIT": "Benefit", "COMMENT": "Comment",
        }

        for name, value in expected.items():
            assert getattr(EventCategory, name).value == value
        assert len(EventCategory) == len(expected)

    def test_avoidance_values(self):
        """Test that avoidance values can be looked up by name."""
        assert Avoidance("Missed") is Avoidance.MISSED
        assert Avoidance("None") is Avoidance.NONE


class TestLogEvent:
    """Test LogEvent class."""

    def test_valid_event_creation(self):
        """Test creating a valid LogEvent."""
        timestamp = datetime(2000, 7, 8, 14, 22, 1)
        event = LogEvent(
            category=EventCategory.DAMAGE_DEALT,
            timestamp=timestamp,
            source="Bob",
            target="Orc",
            skill="Sting",
            value=1234,
            value_type="Common",
            crit=True,
            raw_line="test line"
        )

        assert event.category == EventCategory.DAMAGE_DEALT
        assert event.timestamp == timestamp
        assert event.value == 1234
        assert event.avoidance == Avoidance.NONE
        assert event.devastating is False

    def test_defaults(self):
        """Test that optional fields default to empty values."""
        event = LogEvent(category=EventCategory.COMMENT)

        assert event.timestamp is None
        assert event.source == ""
        assert event.target == ""
        assert event.skill == ""
        assert event.value == 0
        assert event.value_type == ""
        assert event.raw_line == ""

    def test_invalid_category(self):
        """Test that invalid category raises error."""
        with pytest.raises(ValueError, match="category must be an EventCategory"):
            LogEvent(category="Death")

    def test_invalid_timestamp(self):
        """Test that invalid timestamp raises error."""
        with pytest.raises(ValueError, match="timestamp must be a datetime"):
            LogEvent(category=EventCategory.DEATH, timestamp="07/08 14:22:01")

    @pytest.mark.parametrize("value", [-1, 1.5, "10", True])
    def test_invalid_value(self, value):
        """Test that value must be a non-negative integer."""
        with pytest.raises(ValueError, match="value must be a non-negative integer"):
            LogEvent(category=EventCategory.HEAL, value=value)

    def test_invalid_actor(self):
        """Test that actors must be names or SELF."""
        with pytest.raises(ValueError, match="source must be a string or SELF"):
            LogEvent(category=EventCategory.DEATH, source=None)

    def test_self_never_equals_a_name(self):
        """Test that the placeholder cannot collide with a player name."""
        assert SELF is SelfReference.SELF
        assert SELF != "SELF"
        assert SELF != SELF.value

    def test_involves_self(self):
        """Test detection of the observing player."""
        assert LogEvent(category=EventCategory.REVIVE, target=SELF).involves_self()
        assert not LogEvent(category=EventCategory.REVIVE, target="Bob").involves_self()

    def test_to_dict(self):
        """Test converting event to dictionary."""
        event = LogEvent(
            category=EventCategory.DAMAGE_DEALT,
            timestamp=datetime(2000, 7, 8, 14, 22, 1),
            source=SELF,
            target="Orc",
            skill="Sting",
            value=12,
            value_type="Common",
            avoidance=Avoidance.PARRIED,
            raw_line="test line"
        )

        event_dict = event.to_dict()

        assert event_dict["category"] == "DamageDealt"
        assert event_dict["timestamp"] == "2000-07-08T14:22:01"
        assert event_dict["source"] == "<self>"
        assert event_dict["target"] == "Orc"
        assert event_dict["value"] == 12
        assert event_dict["avoidance"] == "Parried"
        assert event_dict["raw_line"] == "test line"

    def test_to_dict_comment(self):
        """Test that comments serialize without timestamp."""
        assert LogEvent(category=EventCategory.COMMENT).to_dict()["timestamp"] is None

    def test_str_representation(self):
        """Test string representation of event."""
        event = LogEvent(
            category=EventCategory.DAMAGE_DEALT,
            source="Bob",
            target="Orc",
            skill="Sting",
            value=1234,
            value_type="Common",
            crit=True
        )

        str_repr = str(event)
        assert str_repr.startswith("DamageDealt(")
        assert "Bob -> Orc" in str_repr
        assert "1234 Common" in str_repr
        assert "critical" in str_repr


class TestResolveSelf:
    """Test substitution of the observing player's name."""

    def test_resolve_source_and_target(self):
        """Test that SELF actors are replaced by the player name."""
        event = LogEvent(category=EventCategory.CC_BROKEN, source=SELF, target="Alice")
        resolved = resolve_self(event, "Bob")

        assert resolved.source == "Bob"
        assert resolved.target == "Alice"
        assert event.source is SELF

    def test_resolve_keeps_other_fields(self):
        """Test that only the actors change."""
        event = LogEvent(category=EventCategory.HEAL, target=SELF, value=10, raw_line="line")
        resolved = resolve_self(event, "Bob")

        assert resolved.target == "Bob"
        assert resolved.value == 10
        assert resolved.raw_line == "line"

    def test_resolve_without_self(self):
        """Test that events without SELF are returned unchanged."""
        event = LogEvent(category=EventCategory.DEATH, source="Bob", target="Orc")
        assert resolve_self(event, "Alice") is event

    def test_resolve_requires_name(self):
        """Test that an empty player name is rejected."""
        with pytest.raises(ValueError):
            resolve_self(LogEvent(category=EventCategory.REVIVE, target=SELF), " ")


if __name__ == "__main__":
    pytest.main([__file__])
