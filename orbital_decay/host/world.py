# orbital_decay/host/world.py
import json
import logging
import os
from typing import Dict, List, Optional

from orbital_decay.host.events import GameEvent
from orbital_decay.host.vessel import Vessel

logger = logging.getLogger(__name__)


class World:
    """
    Reference host: owns the vessels, the universal clock and the lifecycle events
    the decay subsystem listens to.
    """
    def __init__(self, universal_time: float = 0.0, save_name: str = "default"):
        self.universal_time = float(universal_time)
        self.save_name = save_name
        self.active_vessel: Optional[Vessel] = None
        self._vessels: Dict[str, Vessel] = {}

        self.on_game_state_save = GameEvent("onGameStateSave")
        self.on_stage_separation = GameEvent("onStageSeparation")
        self.on_vessel_destroyed = GameEvent("onVesselDestroyed")

    @property
    def vessels(self) -> List[Vessel]:
        """Snapshot list of live vessels."""
        return list(self._vessels.values())

    def find_vessel(self, vessel_id: str) -> Optional[Vessel]:
        v = self._vessels.get(vessel_id)
        if v is None or not v.alive:
            return None
        return v

    def spawn(self, vessel: Vessel, active: bool = False) -> Vessel:
        self._vessels[vessel.id] = vessel
        if active:
            self.active_vessel = vessel
        return vessel

    def destroy(self, vessel: Vessel) -> None:
        if self._vessels.pop(vessel.id, None) is None:
            return
        vessel.alive = False
        if self.active_vessel is vessel:
            self.active_vessel = None
        logger.info("Vessel %s destroyed", vessel.name)
        self.on_vessel_destroyed.fire(vessel)

    def stage(self, *debris: Vessel) -> None:
        """Spawn separated stages and notify listeners."""
        for d in debris:
            self.spawn(d)
        self.on_stage_separation.fire({"count": len(debris), "time": self.universal_time})

    def request_save(self) -> None:
        self.on_game_state_save.fire({"save_name": self.save_name, "time": self.universal_time})

    def advance(self, dt: float) -> None:
        """
        Move the clock forward and propagate every orbit.
        Vessels whose periapsis dropped below the surface are treated as re-entered.
        """
        if dt < 0:
            raise ValueError("dt must be >= 0 (universal time is monotonic)")
        self.universal_time += float(dt)
        reentered = []
        for v in self.vessels:
            if v.landed or v.splashed:
                continue
            v.orbit.propagate(dt)
            if v.orbit.periapsis_altitude <= 0.0:
                reentered.append(v)
        for v in reentered:
            logger.info("Vessel %s re-entered %s", v.name, v.main_body.name)
            self.destroy(v)

    # -----------------------
    # Clock persistence
    # -----------------------
    def save_clock(self, path: str) -> bool:
        """Persist universal time for this save; failures are logged, never raised."""
        try:
            os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
            with open(path, "w", encoding="utf-8") as f:
                json.dump({"save_name": self.save_name, "universal_time": self.universal_time}, f, indent=2)
        except OSError as e:
            logger.warning("Failed to write world clock %s: %s", path, e)
            return False
        return True

    def restore_clock(self, path: str) -> bool:
        """
        Resume universal time from a previous run. The clock only moves forward;
        a missing or unreadable file leaves it untouched.
        """
        if not os.path.exists(path):
            return False
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
            saved = float(data["universal_time"])
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning("World clock %s unreadable, keeping UT=%.1f: %s", path, self.universal_time, e)
            return False
        if saved > self.universal_time:
            self.universal_time = saved
        logger.info("Resumed %s at UT=%.1f", self.save_name, self.universal_time)
        return True
