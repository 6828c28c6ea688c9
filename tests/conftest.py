import itertools

import pytest

from orbital_decay.config.settings import DecaySettings
from orbital_decay.host.vessel import VesselType

_ids = itertools.count(1)


class FakeBody:
    def __init__(self, atmosphere=True, space_threshold_altitude=250_000.0, name="Body"):
        self.name = name
        self.atmosphere = atmosphere
        self.space_threshold_altitude = space_threshold_altitude


class FakeOrbit:
    """Orbit with directly settable derived quantities."""
    def __init__(self, body, semi_major_axis=700_000.0, periapsis_altitude=100_000.0,
                 time_to_periapsis=300.0, period=600.0):
        self.body = body
        self.semi_major_axis = semi_major_axis
        self.periapsis_altitude = periapsis_altitude
        self.time_to_periapsis = time_to_periapsis
        self.period = period


class FakeVessel:
    def __init__(self, vessel_type=VesselType.DEBRIS, body=None, altitude=100_000.0,
                 landed=False, splashed=False, name=None, **orbit_kwargs):
        self.id = f"vessel-{next(_ids)}"
        self.name = name or self.id
        self.vessel_type = vessel_type
        self.orbit = FakeOrbit(body or FakeBody(), **orbit_kwargs)
        self.altitude = altitude
        self.landed = landed
        self.splashed = splashed
        self.alive = True

    @property
    def main_body(self):
        return self.orbit.body


@pytest.fixture
def config():
    return DecaySettings(orbital_decay_enabled=True, all_decay=False, decay_percent=0.02)


@pytest.fixture
def make_vessel():
    return FakeVessel


@pytest.fixture
def make_body():
    return FakeBody
