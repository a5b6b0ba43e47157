from enum import Enum
from typing import Optional


class StatType(str, Enum):
    """
    Every action a tracker can tag against the video clock.
    The value is the exact string stored in the `type` field of a stat.
    """
    FG_MADE = "FG Made"
    FG_MISSED = "FG Missed"
    THREE_PT_MADE = "3PT Made"
    THREE_PT_MISSED = "3PT Missed"
    FT_MADE = "FT Made"
    FT_MISSED = "FT Missed"
    REBOUND = "Rebound"
    ASSIST = "Assist"
    STEAL = "Steal"
    BLOCK = "Block"
    TURNOVER = "Turnover"
    FOUL = "Foul"

    @classmethod
    def parse(cls, value) -> Optional["StatType"]:
        """Return the matching StatType, or None for unknown/legacy strings."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


class TeamSlot(str, Enum):
    TEAM1 = "team1"
    TEAM2 = "team2"

    @classmethod
    def parse(cls, value) -> Optional["TeamSlot"]:
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


class BadgeLevel(str, Enum):
    GOLD = "Gold"
    SILVER = "Silver"
    BRONZE = "Bronze"


# Display-only intensity per tier
BADGE_PROGRESS = {
    BadgeLevel.GOLD: 100,
    BadgeLevel.SILVER: 75,
    BadgeLevel.BRONZE: 45,
}

SHOT_TYPES = frozenset({
    StatType.FG_MADE,
    StatType.FG_MISSED,
    StatType.THREE_PT_MADE,
    StatType.THREE_PT_MISSED,
    StatType.FT_MADE,
    StatType.FT_MISSED,
})
