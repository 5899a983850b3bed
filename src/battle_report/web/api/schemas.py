from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, validate_by_name=True)


class Reward(CamelModel):
    silverlions: int = Field(..., ge=0)
    research: int = Field(..., ge=0)


class Event(CamelModel):
    time: int = Field(..., ge=0)
    category: str
    kind: Optional[str] = None
    vehicle: str
    enemy: Optional[str] = None
    reward: Reward


class Award(CamelModel):
    time: int = Field(..., ge=0)
    name: str
    reward: Reward


class Vehicle(CamelModel):
    name: str
    activity: int = Field(..., ge=0, le=100)
    time_played: int = Field(..., alias="timePlayed", ge=0)
    reward: Reward


class VehicleResearch(CamelModel):
    name: str
    research: int = Field(..., ge=0)


class ModificationResearch(CamelModel):
    vehicle: str
    name: str
    research: int = Field(..., ge=0)


class BattleReportResponse(CamelModel):
    session_id: str = Field(..., alias="sessionId")
    result: str
    mission_name: str = Field(..., alias="missionName")
    events: List[Event]
    awards: List[Award]
    reward_for_winning: Optional[Reward] = Field(None, alias="rewardForWinning")
    other_awards: Reward = Field(..., alias="otherAwards")
    vehicles: List[Vehicle]
    activity: int = Field(..., ge=0, le=100)
    damaged_vehicles: List[str] = Field(..., alias="damagedVehicles")
    repair_cost: int = Field(..., alias="repairCost", ge=0)
    ammo_and_crew_cost: int = Field(..., alias="ammoAndCrewCost", ge=0)
    vehicle_research: List[VehicleResearch] = Field(..., alias="vehicleResearch")
    modification_research: List[ModificationResearch] = Field(..., alias="modificationResearch")
    earned_rewards: Reward = Field(..., alias="earnedRewards")
    balance: Reward
    total_crp: Optional[int] = Field(None, alias="totalCrp")
    used_items: Optional[str] = Field(None, alias="usedItems")


class ParseErrorDetail(CamelModel):
    kind: str
    expected: str
    offset: int
    line: Optional[int] = None
    column: Optional[int] = None
    rules: List[str] = Field(default_factory=list)


class ParseRequest(CamelModel):
    text: str
    allow_empty_tables: Optional[bool] = Field(None, alias="allowEmptyTables")


class ApiResponse(CamelModel):
    ok: bool
    message: Optional[str] = None
    message_kind: Optional[str] = Field(None, alias="messageKind")
    report: Optional[BattleReportResponse] = None
    error: Optional[ParseErrorDetail] = None


class ReportHistoryResponse(CamelModel):
    count: int
    reports: List[BattleReportResponse]
