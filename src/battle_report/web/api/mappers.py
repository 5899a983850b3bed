from __future__ import annotations

from battle_report.domain.report import (
    Award,
    BattleReport,
    Event,
    ModificationResearch,
    Reward,
    Vehicle,
    VehicleResearch,
)
from battle_report.grammar.errors import ReportParseError
from battle_report.web.api import schemas


def build_report_response(report: BattleReport) -> schemas.BattleReportResponse:
    return schemas.BattleReportResponse(
        session_id=report.session_id,
        result=report.result.value,
        mission_name=report.mission_name,
        events=[_event(event) for event in report.events],
        awards=[_award(award) for award in report.awards],
        reward_for_winning=_reward(report.reward_for_winning) if report.reward_for_winning else None,
        other_awards=_reward(report.other_awards),
        vehicles=[_vehicle(vehicle) for vehicle in report.vehicles],
        activity=report.activity,
        damaged_vehicles=list(report.damaged_vehicles),
        repair_cost=report.repair_cost,
        ammo_and_crew_cost=report.ammo_and_crew_cost,
        vehicle_research=[_vehicle_research(item) for item in report.vehicle_research],
        modification_research=[_modification_research(item) for item in report.modification_research],
        earned_rewards=_reward(report.earned_rewards),
        balance=_reward(report.balance),
        total_crp=report.total_crp,
        used_items=report.used_items,
    )


def build_error_detail(exc: ReportParseError) -> schemas.ParseErrorDetail:
    return schemas.ParseErrorDetail(
        kind=exc.kind.value,
        expected=exc.expected,
        offset=exc.offset,
        line=exc.line,
        column=exc.column,
        rules=list(exc.rules),
    )


def _reward(reward: Reward) -> schemas.Reward:
    return schemas.Reward(silverlions=reward.silverlions, research=reward.research)


def _event(event: Event) -> schemas.Event:
    kind = event.kind
    return schemas.Event(
        time=event.time,
        category=event.category,
        kind=kind.name.lower() if kind is not None else None,
        vehicle=event.vehicle,
        enemy=event.enemy,
        reward=_reward(event.reward),
    )


def _award(award: Award) -> schemas.Award:
    return schemas.Award(time=award.time, name=award.name, reward=_reward(award.reward))


def _vehicle(vehicle: Vehicle) -> schemas.Vehicle:
    return schemas.Vehicle(
        name=vehicle.name,
        activity=vehicle.activity,
        time_played=vehicle.time_played,
        reward=_reward(vehicle.reward),
    )


def _vehicle_research(item: VehicleResearch) -> schemas.VehicleResearch:
    return schemas.VehicleResearch(name=item.name, research=item.research)


def _modification_research(item: ModificationResearch) -> schemas.ModificationResearch:
    return schemas.ModificationResearch(vehicle=item.vehicle, name=item.name, research=item.research)
