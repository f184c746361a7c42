import copy
import json

import httpx
import pytest

from season_spillover.bridge.smapi import BridgeError, SMAPIBridgeClient
from season_spillover.cli import main
from season_spillover.config import Settings
from season_spillover.gamedate import CalendarDate, Season
from season_spillover.lifecycle.controller import DayTransitionController

SOIL = {
    "isGreenhouse": False,
    "tiles": [
        {"x": 60, "y": 20, "crop": {
            "name": "Parsnip",
            "regrowAfterHarvest": -1,
            "seasonsToGrowIn": ["spring"],
            "currentPhase": 2,
            "phaseCount": 5,
            "fullyGrown": False,
            "dayOfCurrentPhase": 1,
        }},
        {"x": 61, "y": 20, "crop": {
            "name": "Corn",
            "regrowAfterHarvest": 4,
            "seasonsToGrowIn": ["summer", "fall"],
            "currentPhase": 5,
            "phaseCount": 6,
            "fullyGrown": True,
            "dayOfCurrentPhase": 2,
        }},
        {"x": 62, "y": 20, "crop": None},
    ],
}


class FakeBridge:
    """Records actions and serves canned game data."""

    def __init__(self, season="summer", day=28, year=1, soil=SOIL):
        self.time = {"season": season, "day": day, "year": year}
        self.soil = soil
        self.actions = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        if request.method == "GET" and request.url.path == "/state":
            return httpx.Response(200, json={"success": True, "data": {"time": self.time}})
        if request.method == "GET" and request.url.path == "/farm/soil":
            return httpx.Response(200, json={"success": True, "data": self.soil})
        if request.method == "POST" and request.url.path == "/action":
            self.actions.append(json.loads(request.content))
            return httpx.Response(200, json={"success": True, "data": {"message": "ok"}})
        return httpx.Response(404, json={"success": False, "error": "not found"})

    def client(self) -> SMAPIBridgeClient:
        transport = httpx.MockTransport(self.handler)
        return SMAPIBridgeClient("http://bridge", client=httpx.Client(transport=transport))


def test_get_farm_parses_soil():
    farm = FakeBridge().client().get_farm()
    assert len(farm.terrain_features) == 3
    parsnip = farm.terrain_features[(60, 20)].crop
    assert parsnip.native_seasons == frozenset({Season.SPRING})
    assert parsnip.regrow_after_harvest == -1
    corn = farm.terrain_features[(61, 20)].crop
    assert corn.native_seasons == frozenset({Season.SUMMER, Season.FALL})
    assert corn.fully_grown
    assert corn.total_phases == 6
    assert farm.terrain_features[(62, 20)].crop is None
    assert farm.exempt_from_seasonal_decay is False


def test_current_date():
    client = FakeBridge(season="Fall", day=3, year=2).client()
    assert client.current_date() == CalendarDate.of("fall", 3, year=2)
    assert client.current_season() is Season.FALL


def test_kill_posts_once():
    bridge = FakeBridge()
    crop = bridge.client().get_farm().terrain_features[(60, 20)].crop
    crop.kill()
    crop.kill()
    assert bridge.actions == [{"action": "kill_crop", "location": "Farm", "x": 60, "y": 20}]


def test_exemption_flag_is_pushed():
    bridge = FakeBridge()
    farm = bridge.client().get_farm()
    farm.exempt_from_seasonal_decay = True
    assert farm.exempt_from_seasonal_decay
    assert bridge.actions == [{"action": "set_greenhouse", "location": "Farm", "value": True}]


def test_bridge_errors():
    def refuse(request):
        return httpx.Response(200, json={"success": False, "error": "no save loaded"})

    def crash(request):
        return httpx.Response(500)

    for handler in (refuse, crash):
        client = SMAPIBridgeClient("http://bridge", client=httpx.Client(transport=httpx.MockTransport(handler)))
        with pytest.raises(BridgeError):
            client.get_farm()


def test_bad_time_data():
    bridge = FakeBridge(season="monsoon")
    with pytest.raises(BridgeError):
        bridge.client().current_date()


def test_controller_against_bridge():
    """Summer 28 -> Fall 1: Spring crops die, the farm is made exempt, then cleared on save."""
    bridge = FakeBridge(season="summer", day=28)
    client = bridge.client()
    controller = DayTransitionController.from_settings(Settings(), client, client)

    report = controller.on_day_ending()
    assert report.grace_active
    assert [c.name for c in report.killed] == ["Parsnip"]

    controller.on_saving()
    assert bridge.actions == [
        {"action": "set_greenhouse", "location": "Farm", "value": True},
        {"action": "kill_crop", "location": "Farm", "x": 60, "y": 20},
        {"action": "set_greenhouse", "location": "Farm", "value": False},
    ]


def test_picking_between_day_start_and_day_end_kills_watched_crop():
    """Each read is a fresh copy, so the watched bean is found again by tile."""
    soil = {"isGreenhouse": False, "tiles": [
        {"x": 70, "y": 10, "crop": {
            "name": "Green Bean",
            "regrowAfterHarvest": 3,
            "seasonsToGrowIn": ["spring"],
            "currentPhase": 5,
            "phaseCount": 6,
            "fullyGrown": False,
            "dayOfCurrentPhase": 0,
        }},
    ]}
    bridge = FakeBridge(season="summer", day=5, soil=soil)
    client = bridge.client()
    controller = DayTransitionController.from_settings(Settings(), client, client)

    assert [c.name for c in controller.on_day_started()] == ["Green Bean"]

    # Player picks the bean during the day
    picked = copy.deepcopy(soil)
    picked["tiles"][0]["crop"].update(fullyGrown=True, dayOfCurrentPhase=3)
    bridge.soil = picked

    report = controller.on_day_ending()
    assert report.grace_active
    assert report.killed == []
    assert [c.name for c in report.bonus_killed] == ["Green Bean"]
    assert {"action": "kill_crop", "location": "Farm", "x": 70, "y": 10} in bridge.actions


def test_inspect_command(monkeypatch, tmp_path, capsys):
    bridge = FakeBridge(season="summer", day=28)
    monkeypatch.setattr("season_spillover.bridge.SMAPIBridgeClient", lambda url, timeout: bridge.client())

    assert main(["inspect", "--config", str(tmp_path / "missing.yaml")]) == 0

    out = capsys.readouterr().out
    assert "Tomorrow: Fall 1, Year 1 (grace active)" in out
    assert "(60, 20) Parsnip: kill" in out
    assert "(61, 20) Corn: keep" in out
    assert bridge.actions == []


def test_inspect_command_reports_bridge_error(monkeypatch, tmp_path, capsys):
    def crash(request):
        return httpx.Response(500)

    client = SMAPIBridgeClient("http://bridge", client=httpx.Client(transport=httpx.MockTransport(crash)))
    monkeypatch.setattr("season_spillover.bridge.SMAPIBridgeClient", lambda url, timeout: client)

    assert main(["inspect", "--config", str(tmp_path / "missing.yaml")]) == 1
    assert "Bridge error" in capsys.readouterr().err
