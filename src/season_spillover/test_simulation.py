import pytest

from season_spillover.config import DurationGraceConfig, Settings
from season_spillover.gamedate import CalendarDate, Season
from season_spillover.simulation import Scenario, ScenarioError, Simulation, format_day


def test_spring_crop_survives_into_summer():
    scenario = Scenario.from_dict({
        "start": {"season": "spring", "day": 27},
        "days": 3,
        "crops": [{"name": "Cauliflower", "tile": [3, 4]}],
    })
    sim = Simulation(scenario)
    logs = sim.run()

    assert [log.date for log in logs] == [
        CalendarDate.of("spring", 27),
        CalendarDate.of("spring", 28),
        CalendarDate.of("summer", 1),
    ]
    assert not logs[0].report.grace_active
    assert logs[1].report.grace_active
    assert all(not log.host_killed for log in logs)
    assert all(log.exempt_at_save is False for log in logs)
    crop = sim.farm.crops()[(3, 4)]
    assert not crop.dead
    assert crop.current_phase > 0


def test_host_wipe_applies_without_grace():
    scenario = Scenario.from_dict({
        "start": {"season": "fall", "day": 28},
        "crops": [{"name": "Pumpkin"}],
    })
    grace = DurationGraceConfig(days={Season.SPRING: 0, Season.SUMMER: 0, Season.FALL: 0, Season.WINTER: 0})
    logs = Simulation(scenario, Settings(grace=grace)).run()
    assert not logs[0].report.grace_active
    assert logs[0].host_killed == ["Pumpkin"]
    assert "killed by season change: Pumpkin" in format_day(logs[0])


def test_bonus_harvest_in_simulation():
    scenario = Scenario.from_dict({
        "start": {"season": "summer", "day": 5},
        "auto_harvest": True,
        "crops": [{"name": "Green Bean", "phase": 5}],
    })
    sim = Simulation(scenario)
    log = sim.step()
    assert log.watched == ["Green Bean"]
    assert log.harvested == ["Green Bean"]
    assert [c.name for c in log.report.bonus_killed] == ["Green Bean"]
    assert sim.farm.crops() == {}
    assert "killed (after last harvest): Green Bean" in format_day(log)


@pytest.mark.parametrize("data", [
    {"start": {"season": "monsoon"}},
    {"start": {"day": 40}},
    {"crops": [{"name": "Moonmelon"}]},
    "just a string",
])
def test_bad_scenarios(data):
    with pytest.raises(ScenarioError):
        Scenario.from_dict(data)


def test_missing_scenario_file(tmp_path):
    with pytest.raises(ScenarioError):
        Scenario.from_yaml(tmp_path / "missing.yaml")
