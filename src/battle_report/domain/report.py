"""Battle report data model."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class BattleResult(str, Enum):
    WIN = "win"
    LOSS = "loss"


class EventKind(str, Enum):
    """Reward categories seen in real reports."""

    DESTRUCTION_OF_AIRCRAFT = "Destruction of aircraft"
    DESTRUCTION_OF_GROUND_VEHICLES_AND_FLEETS = "Destruction of ground vehicles and fleets"
    ASSISTANCE_IN_DESTROYING_THE_ENEMY = "Assistance in destroying the enemy"
    CRITICAL_DAMAGE_TO_THE_ENEMY = "Critical damage to the enemy"
    SCOUTING_OF_THE_ENEMY = "Scouting of the enemy"
    DAMAGE_TAKEN_BY_SCOUTED_ENEMIES = "Damage taken by scouted enemies"
    DESTRUCTION_BY_ALLIES_OF_SCOUTED_ENEMIES = "Destruction by allies of scouted enemies"
    CAPTURE_OF_ZONES = "Capture of zones"

    @classmethod
    def from_category(cls, category: str) -> "EventKind | None":
        try:
            return cls(category)
        except ValueError:
            return None


@dataclass(frozen=True, slots=True)
class Reward:
    """Silverlions and research points granted for something."""

    silverlions: int = 0
    research: int = 0

    def __add__(self, other: Reward) -> Reward:
        return Reward(
            silverlions=self.silverlions + other.silverlions,
            research=self.research + other.research,
        )


@dataclass(frozen=True, slots=True)
class Event:
    time: int  # minutes since battle start
    category: str
    vehicle: str
    enemy: str | None
    reward: Reward

    @property
    def kind(self) -> EventKind | None:
        return EventKind.from_category(self.category)


@dataclass(frozen=True, slots=True)
class Award:
    time: int
    name: str
    reward: Reward


@dataclass(frozen=True, slots=True)
class Vehicle:
    name: str
    activity: int
    time_played: int
    reward: Reward


@dataclass(frozen=True, slots=True)
class VehicleResearch:
    name: str
    research: int


@dataclass(frozen=True, slots=True)
class ModificationResearch:
    vehicle: str
    name: str
    research: int


@dataclass(frozen=True)
class BattleReport:
    """A fully parsed battle report.

    Built once by a successful parse. ``total_crp`` and ``used_items`` keep the
    trailing fields that carry no reward semantics so callers can still reach
    them.
    """

    session_id: str
    result: BattleResult
    mission_name: str
    events: tuple[Event, ...]
    awards: tuple[Award, ...]
    reward_for_winning: Reward | None
    other_awards: Reward
    vehicles: tuple[Vehicle, ...]
    activity: int
    damaged_vehicles: tuple[str, ...]
    repair_cost: int
    ammo_and_crew_cost: int
    vehicle_research: tuple[VehicleResearch, ...] = field(default_factory=tuple)
    modification_research: tuple[ModificationResearch, ...] = field(default_factory=tuple)
    earned_rewards: Reward = field(default_factory=Reward)
    balance: Reward = field(default_factory=Reward)
    total_crp: int | None = None
    used_items: str | None = None
