import pytest

from orbital_decay.config.settings import DecaySettings
from orbital_decay.decay.eligibility import EXCLUDED_TYPES, is_eligible
from orbital_decay.host.vessel import VesselType


def test_debris_in_atmosphere_regime_is_eligible(config, make_vessel):
    assert is_eligible(make_vessel(), config) is True


def test_none_is_not_eligible(config):
    assert is_eligible(None, config) is False


def test_destroyed_vessel_is_not_eligible(config, make_vessel):
    v = make_vessel()
    v.alive = False
    assert is_eligible(v, config) is False


def test_active_vessel_always_excluded(make_vessel):
    v = make_vessel()
    everything_on = DecaySettings(all_decay=True, decay_percent=0.05)
    assert is_eligible(v, everything_on, active_vessel=None) is True
    assert is_eligible(v, everything_on, active_vessel=v) is False


def test_body_without_atmosphere(config, make_vessel, make_body):
    v = make_vessel(body=make_body(atmosphere=False))
    assert is_eligible(v, config) is False


@pytest.mark.parametrize("vessel_type", sorted(EXCLUDED_TYPES, key=lambda t: t.value))
def test_excluded_types_never_tracked(vessel_type, make_vessel):
    cfg = DecaySettings(all_decay=True, decay_percent=0.02)
    assert is_eligible(make_vessel(vessel_type=vessel_type), cfg) is False


def test_debris_only_mode(config, make_vessel):
    probe = make_vessel(vessel_type=VesselType.PROBE)
    debris = make_vessel(vessel_type=VesselType.DEBRIS)
    assert is_eligible(probe, config) is False
    assert is_eligible(debris, config) is True


def test_all_decay_mode_includes_other_types(make_vessel):
    cfg = DecaySettings(all_decay=True, decay_percent=0.02)
    assert is_eligible(make_vessel(vessel_type=VesselType.STATION), cfg) is True


@pytest.mark.parametrize("landed,splashed", [(True, False), (False, True)])
def test_landed_or_splashed_excluded(config, make_vessel, landed, splashed):
    assert is_eligible(make_vessel(landed=landed, splashed=splashed), config) is False


def test_space_threshold_boundary(config, make_vessel):
    at = make_vessel(altitude=250_000.0)
    above = make_vessel(altitude=250_000.1)
    assert is_eligible(at, config) is True
    assert is_eligible(above, config) is False
