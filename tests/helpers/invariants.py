from __future__ import annotations

from battle_report.domain.report import BattleReport, Reward


def assert_reward_non_negative(reward: Reward) -> None:
    assert reward.silverlions >= 0
    assert reward.research >= 0


def assert_report_well_formed(report: BattleReport) -> None:
    for event in report.events:
        assert event.time >= 0
        assert event.category
        assert event.vehicle
        assert_reward_non_negative(event.reward)
    for award in report.awards:
        assert award.name
        assert_reward_non_negative(award.reward)
    for vehicle in report.vehicles:
        assert 0 <= vehicle.activity <= 100
        assert vehicle.time_played >= 0
        assert_reward_non_negative(vehicle.reward)
    assert 0 <= report.activity <= 100
    assert report.repair_cost >= 0
    assert report.ammo_and_crew_cost >= 0
    assert_reward_non_negative(report.balance)
    assert_reward_non_negative(report.earned_rewards)
