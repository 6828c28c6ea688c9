# orbital_decay/host/body.py
from dataclasses import dataclass


@dataclass(frozen=True)
class CelestialBody:
    """
    Body that vessels orbit.
    space_threshold_altitude: altitude (m) above which a vessel counts as being "in space"
    and is no longer considered for decay.
    """
    name: str
    radius: float
    gm: float
    atmosphere: bool
    space_threshold_altitude: float

    def __post_init__(self):
        if self.radius <= 0:
            raise ValueError(f"{self.name}: radius must be > 0")
        if self.gm <= 0:
            raise ValueError(f"{self.name}: gm must be > 0")
        if self.space_threshold_altitude <= 0:
            raise ValueError(f"{self.name}: space_threshold_altitude must be > 0")


KERBIN = CelestialBody("Kerbin", radius=600_000.0, gm=3.5316e12, atmosphere=True,
                       space_threshold_altitude=250_000.0)
MUN = CelestialBody("Mun", radius=200_000.0, gm=6.5138398e10, atmosphere=False,
                    space_threshold_altitude=60_000.0)
EARTH = CelestialBody("Earth", radius=6378137.0, gm=3.986004418e14, atmosphere=True,
                      space_threshold_altitude=1_000_000.0)
