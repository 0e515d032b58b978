# Area: Mission
"""
periselene._mission.enums — Mission phase and participant status
================================================================
"""

from enum import Enum


class MissionPhase(Enum):
    """
    Phases of the shared mission clock.

    Phase transitions:
    IDLE -> BUILD (director launch or force start)
    BUILD -> FLIGHT (director launch or force start)
    Any phase -> IDLE (STOP / new heat)
    """
    IDLE = "IDLE"
    BUILD = "BUILD"
    FLIGHT = "FLIGHT"

    @classmethod
    def parse(cls, value) -> "MissionPhase":
        """Lenient parse from a store value; unknown values read as IDLE."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            return cls.IDLE


class ParticipantStatus(Enum):
    """Lifecycle of one participant within a heat."""
    WAITING = "WAITING"
    BUILDING = "BUILDING"
    FLYING = "FLYING"
    LANDED = "LANDED"

    @classmethod
    def parse(cls, value) -> "ParticipantStatus":
        """Lenient parse from a store value; unknown values read as WAITING."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            return cls.WAITING
