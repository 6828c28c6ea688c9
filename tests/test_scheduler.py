import pytest

from orbital_decay.decay.scheduler import DecayScheduler


def _scheduler(config, *vessels):
    registry = {v.id: v for v in vessels}
    return DecayScheduler(registry.get, config), registry


def test_add_schedules_next_periapsis(config, make_vessel):
    v = make_vessel(time_to_periapsis=321.0)
    sched, _ = _scheduler(config, v)

    assert sched.add(v, now=1000.0) is True
    assert sched.next_decay(v.id) == 1321.0


def test_add_is_idempotent(config, make_vessel):
    v = make_vessel(time_to_periapsis=10.0)
    sched, _ = _scheduler(config, v)
    sched.add(v, now=0.0)
    v.orbit.time_to_periapsis = 999.0

    assert sched.add(v, now=50.0) is False
    assert sched.next_decay(v.id) == 10.0
    assert len(sched) == 1


def test_tick_on_empty_schedule_touches_nothing(config):
    def lookup(_):
        raise AssertionError("lookup must not be called")

    sched = DecayScheduler(lookup, config)
    result = sched.tick(1e9)
    assert result.decayed == [] and result.removed == [] and result.failed == []


def test_empty_tick_results_are_independent(config):
    sched = DecayScheduler(lambda _: None, config)

    first = sched.tick(0.0)
    first.decayed.append("x")
    first.removed.append("y")
    first.failed.append("z")

    second = sched.tick(1.0)
    assert second.decayed == [] and second.removed == [] and second.failed == []
    assert second is not first


def test_pending_vessel_untouched(config, make_vessel):
    v = make_vessel(semi_major_axis=700_000.0, time_to_periapsis=500.0)
    sched, _ = _scheduler(config, v)
    sched.add(v, now=0.0)

    result = sched.tick(499.0)

    assert result.decayed == []
    assert v.orbit.semi_major_axis == 700_000.0
    assert sched.next_decay(v.id) == 500.0


def test_due_vessel_decays_and_is_rearmed(config, make_vessel):
    v = make_vessel(semi_major_axis=700_000.0, periapsis_altitude=50_000.0, time_to_periapsis=500.0)
    sched, _ = _scheduler(config, v)
    sched.add(v, now=0.0)
    v.orbit.time_to_periapsis = 600.0

    result = sched.tick(500.0)

    assert result.decayed == [v.id]
    assert v.orbit.semi_major_axis == pytest.approx(700_000.0 * 0.984)
    assert v.id in sched
    assert sched.next_decay(v.id) == 1100.0


def test_overdue_vessel_decays_once_per_tick(config, make_vessel):
    v = make_vessel(semi_major_axis=700_000.0, periapsis_altitude=50_000.0, time_to_periapsis=100.0)
    sched, _ = _scheduler(config, v)
    sched.add(v, now=0.0)

    sched.tick(10_000.0)

    assert v.orbit.semi_major_axis == pytest.approx(700_000.0 * 0.984)
    assert sched.next_decay(v.id) == 10_100.0


def test_destroyed_vessel_removed_and_pass_continues(config, make_vessel):
    gone = make_vessel(time_to_periapsis=1.0)
    alive = make_vessel(semi_major_axis=700_000.0, periapsis_altitude=50_000.0, time_to_periapsis=1.0)
    sched, registry = _scheduler(config, gone, alive)
    sched.add(gone, now=0.0)
    sched.add(alive, now=0.0)
    del registry[gone.id]

    result = sched.tick(5.0)

    assert result.removed == [gone.id]
    assert result.decayed == [alive.id]
    assert gone.id not in sched
    assert alive.orbit.semi_major_axis < 700_000.0


class _BrokenOrbit:
    semi_major_axis = 1.0
    time_to_periapsis = 1.0

    @property
    def periapsis_altitude(self):
        raise RuntimeError("orbit unavailable")


def test_failure_in_one_vessel_is_isolated(config, make_vessel, caplog):
    broken = make_vessel(time_to_periapsis=1.0)
    ok = make_vessel(semi_major_axis=700_000.0, periapsis_altitude=50_000.0, time_to_periapsis=1.0)
    sched, _ = _scheduler(config, broken, ok)
    sched.add(broken, now=0.0)
    sched.add(ok, now=0.0)
    broken.orbit = _BrokenOrbit()
    broken.orbit.body = ok.main_body

    result = sched.tick(2.0)

    assert result.failed == [broken.id]
    assert result.decayed == [ok.id]
    assert broken.id in sched
    assert "Decay failed" in caplog.text


def test_snapshot_is_a_copy(config, make_vessel):
    v = make_vessel(time_to_periapsis=5.0)
    sched, _ = _scheduler(config, v)
    sched.add(v, now=10.0)

    snap = sched.snapshot()
    snap[v.id] = -1.0
    snap["other"] = 1.0

    assert sched.snapshot() == {v.id: 15.0}


def test_schedule_at_and_remove(config):
    sched = DecayScheduler(lambda _: None, config)
    assert sched.schedule_at("x", 42.0) is True
    assert sched.schedule_at("x", 99.0) is False
    assert sched.next_decay("x") == 42.0
    assert sched.remove("x") is True
    assert sched.remove("x") is False
