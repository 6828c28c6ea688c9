# orbital_decay/host/vessel.py
import uuid
from enum import Enum
from typing import Optional

from orbital_decay.host.orbit import Orbit


class VesselType(Enum):
    DEBRIS = "Debris"
    PROBE = "Probe"
    SHIP = "Ship"
    STATION = "Station"
    LANDER = "Lander"
    ROVER = "Rover"
    BASE = "Base"
    RELAY = "Relay"
    PLANE = "Plane"
    EVA = "EVA"
    FLAG = "Flag"
    SPACE_OBJECT = "SpaceObject"
    UNKNOWN = "Unknown"


class Vessel:
    """
    Host-side trackable object. The decay subsystem only reads the accessors below and
    writes orbit.semi_major_axis.
    """
    def __init__(self, name: str, orbit: Orbit, vessel_type: VesselType = VesselType.DEBRIS,
                 landed: bool = False, splashed: bool = False, vessel_id: Optional[str] = None):
        self.id = str(vessel_id) if vessel_id is not None else str(uuid.uuid4())
        self.name = name
        self.orbit = orbit
        self.vessel_type = vessel_type
        self.landed = bool(landed)
        self.splashed = bool(splashed)
        self.alive = True

    @property
    def main_body(self):
        return self.orbit.body

    @property
    def altitude(self) -> float:
        if self.landed or self.splashed:
            return 0.0
        return self.orbit.altitude

    def __repr__(self):
        return f"{self.name} [{self.vessel_type.value}] {self.orbit!r}"
