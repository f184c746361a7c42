from season_spillover.config import DurationGraceConfig, Settings
from season_spillover.farm.memory import MemoryClock, MemoryCrop, MemoryFarm, MemoryWorld, SoilTile
from season_spillover.gamedate import CalendarDate, Season
from season_spillover.lifecycle.controller import DayTransitionController
from season_spillover.lifecycle.events import LifecycleEvents


def make_controller(today, spring=28, summer=28, fall=28, winter=0):
    grace = DurationGraceConfig(days={
        Season.SPRING: spring,
        Season.SUMMER: summer,
        Season.FALL: fall,
        Season.WINTER: winter,
    })
    farm = MemoryFarm()
    clock = MemoryClock(date=CalendarDate.of(*today))
    controller = DayTransitionController.from_settings(Settings(grace=grace), MemoryWorld(farm), clock)
    return controller, farm, clock


class BrokenWorld:
    def get_farm(self):
        raise RuntimeError("farm not loaded")


def test_no_grace_leaves_host_in_charge():
    """Nothing is touched when no grace window is open."""
    controller, farm, _ = make_controller(("spring", 27))
    melon = farm.plant((0, 0), MemoryCrop.from_catalog("Melon"))
    report = controller.on_day_ending()
    assert not report.grace_active
    assert report.total_killed == 0
    assert not farm.exempt_from_seasonal_decay
    assert not melon.dead


def test_day_end_kills_only_unprotected_crops():
    controller, farm, _ = make_controller(("summer", 28), spring=28, summer=28)
    parsnip = farm.plant((0, 0), MemoryCrop.from_catalog("Parsnip"))
    tomato = farm.plant((0, 1), MemoryCrop.from_catalog("Tomato"))
    pumpkin = farm.plant((0, 2), MemoryCrop.from_catalog("Pumpkin"))
    farm.terrain_features[(0, 3)] = SoilTile()
    farm.terrain_features[(0, 4)] = object()  # not soil

    report = controller.on_day_ending()

    assert report.date == CalendarDate.of("fall", 1)
    assert report.grace_active
    assert farm.exempt_from_seasonal_decay
    assert parsnip.dead
    assert not tomato.dead
    assert not pumpkin.dead
    assert report.killed == [parsnip]


def test_growing_regrow_crop_not_watched_until_harvestable():
    controller, farm, _ = make_controller(("summer", 1))
    bean = farm.plant((0, 0), MemoryCrop.from_catalog("Green Bean", current_phase=2))
    assert controller.on_day_started() == []

    bean.current_phase = 5
    assert controller.on_day_started() == [bean]


def test_bonus_harvest_then_death():
    """A watched crop picked today dies tonight, even while Spring is in grace."""
    controller, farm, _ = make_controller(("summer", 5), spring=28)
    bean = farm.plant((0, 0), MemoryCrop.from_catalog("Green Bean", current_phase=5))
    unpicked = farm.plant((0, 1), MemoryCrop.from_catalog("Strawberry", current_phase=5))

    assert controller.on_day_started() == [bean, unpicked]
    assert set(controller.watch_set) == {(0, 0), (0, 1)}
    assert bean.harvest()

    report = controller.on_day_ending()
    assert report.grace_active
    assert report.killed == []
    assert report.bonus_killed == [bean]
    assert bean.dead
    assert not unpicked.dead


def test_day_end_pass_is_idempotent():
    controller, farm, _ = make_controller(("summer", 28), spring=0)
    parsnip = farm.plant((0, 0), MemoryCrop.from_catalog("Parsnip"))
    bean = farm.plant((0, 1), MemoryCrop.from_catalog("Green Bean", current_phase=5))
    controller.on_day_started()
    bean.harvest()

    controller.on_day_ending()
    after_first = [(c.dead, c.fully_grown, c.day_of_current_phase) for c in (parsnip, bean)]
    controller.on_day_ending()
    after_second = [(c.dead, c.fully_grown, c.day_of_current_phase) for c in (parsnip, bean)]
    assert after_first == after_second
    assert parsnip.dead and bean.dead


def test_saving_always_clears_exemption():
    controller, farm, clock = make_controller(("summer", 27))
    farm.plant((0, 0), MemoryCrop.from_catalog("Parsnip"))
    events = LifecycleEvents()
    controller.attach(events)
    flags = []
    events.subscribe("saving", lambda: flags.append(farm.exempt_from_seasonal_decay))

    for _ in range(120):
        events.fire_day_started()
        events.fire_day_ending()
        events.fire_saving()
        clock.advance()

    assert flags == [False] * 120
    assert farm.exempt_from_seasonal_decay is False


def test_detach_stops_handling():
    controller, farm, _ = make_controller(("summer", 27))
    events = LifecycleEvents()
    controller.attach(events)
    controller.detach(events)
    farm.exempt_from_seasonal_decay = True
    events.fire_saving()
    assert farm.exempt_from_seasonal_decay is True


def test_failures_never_escape_handlers():
    """A broken host means no kills, not a crash."""
    controller, _, _ = make_controller(("summer", 28))
    controller.world = BrokenWorld()
    assert controller.on_day_started() == []
    report = controller.on_day_ending()
    assert report.failed
    assert "farm not loaded" in report.error
    assert controller.last_report is report
    controller.on_saving()


def test_failed_kill_stops_pass_and_spares_the_rest():
    controller, farm, _ = make_controller(("summer", 28), spring=0)

    class Stubborn(MemoryCrop):
        def kill(self):
            raise RuntimeError("cannot kill")

    farm.plant((0, 0), Stubborn(name="Stubborn", native_seasons=frozenset({Season.SPRING})))
    parsnip = farm.plant((0, 1), MemoryCrop.from_catalog("Parsnip"))
    report = controller.on_day_ending()
    assert report.failed
    assert not parsnip.dead


def test_ready_again_but_unpicked_survives():
    """Only a picking since day start triggers the last-harvest kill."""
    controller, farm, _ = make_controller(("summer", 5), spring=28)
    bean = farm.plant((0, 0), MemoryCrop.from_catalog(
        "Green Bean", current_phase=5, fully_grown=True, day_of_current_phase=0,
    ))
    assert controller.on_day_started() == [bean]

    report = controller.on_day_ending()
    assert report.grace_active
    assert report.bonus_killed == []
    assert not bean.dead


def test_repeat_picking_of_watched_crop_kills_it():
    controller, farm, _ = make_controller(("summer", 5), spring=28)
    bean = farm.plant((0, 0), MemoryCrop.from_catalog(
        "Green Bean", current_phase=5, fully_grown=True, day_of_current_phase=0,
    ))
    controller.on_day_started()
    assert bean.harvest()

    report = controller.on_day_ending()
    assert report.bonus_killed == [bean]
    assert bean.dead


def test_watched_crop_is_looked_up_again_at_day_end():
    """The crop on the watched tile at day end is the one judged."""
    controller, farm, _ = make_controller(("summer", 5), spring=28)
    farm.plant((0, 0), MemoryCrop.from_catalog("Green Bean", current_phase=5))
    controller.on_day_started()

    replacement = MemoryCrop.from_catalog("Green Bean", current_phase=5)
    farm.plant((0, 0), replacement)
    assert replacement.harvest()

    report = controller.on_day_ending()
    assert report.bonus_killed == [replacement]
    assert replacement.dead


def test_watch_set_cleared_after_day_end():
    controller, farm, _ = make_controller(("summer", 5), spring=28)
    farm.plant((0, 0), MemoryCrop.from_catalog("Green Bean", current_phase=5))
    controller.on_day_started()
    assert controller.watch_set

    controller.on_day_ending()
    assert controller.watch_set == {}
    assert controller.watched_crops() == []


def test_no_grace_turns_exemption_off():
    controller, farm, _ = make_controller(("spring", 27))
    farm.exempt_from_seasonal_decay = True
    report = controller.on_day_ending()
    assert not report.grace_active
    assert farm.exempt_from_seasonal_decay is False
