# orbital_decay/simulation/runner.py
import logging
import math
import uuid
from typing import Dict, List, Optional, Tuple

import numpy as np

from orbital_decay.config import settings
from orbital_decay.host.body import CelestialBody, KERBIN
from orbital_decay.host.orbit import Orbit
from orbital_decay.host.vessel import Vessel, VesselType
from orbital_decay.host.world import World

logger = logging.getLogger(__name__)

History = Dict[str, List[Tuple[float, float]]]


def _slot_id(save_name: str, name: str) -> str:
    """Same save + same vessel name -> same id, so a persisted schedule matches on the next run."""
    return str(uuid.uuid5(uuid.NAMESPACE_URL, f"save:{save_name}/{name}"))


def random_debris_world(n: int, body: CelestialBody = KERBIN, seed: Optional[int] = None,
                        save_name: str = settings.DEFAULT_SAVE_NAME) -> World:
    """
    World with one active ship in a high parking orbit plus `n` debris pieces whose
    periapsis is spread between PERIAPSIS_MIN and PERIAPSIS_MAX.
    """
    rng = np.random.default_rng(settings.DEFAULT_RANDOM_SEED if seed is None else seed)
    world = World(save_name=save_name)

    ship_orbit = Orbit(body, semi_major_axis=body.radius + body.space_threshold_altitude * 0.4)
    world.spawn(Vessel("Ship", ship_orbit, VesselType.SHIP, vessel_id=_slot_id(save_name, "Ship")), active=True)

    for i in range(int(n)):
        pe_alt = float(rng.uniform(settings.PERIAPSIS_MIN, settings.PERIAPSIS_MAX))
        ecc = float(rng.uniform(0.0, settings.ECCENTRICITY_MAX))
        sma = (body.radius + pe_alt) / (1.0 - ecc)
        orbit = Orbit(body, semi_major_axis=sma, eccentricity=ecc,
                      mean_anomaly=float(rng.uniform(0.0, 2.0 * math.pi)))
        name = f"Debris-{i + 1}"
        world.spawn(Vessel(name, orbit, VesselType.DEBRIS, vessel_id=_slot_id(save_name, name)))
    return world


def run_session(world: World, manager, dt: float = settings.DT, steps: int = settings.STEPS,
                history: Optional[History] = None) -> History:
    """
    Step the world: advance clock/orbits, then let the decay manager tick.
    Records (universal time, semi-major axis) for every live vessel after each step.
    """
    if dt <= 0:
        raise ValueError("dt must be > 0")
    history = {} if history is None else history

    decayed_total = 0
    for _ in range(int(steps)):
        world.advance(dt)
        result = manager.update()
        decayed_total += len(result.decayed)
        t = world.universal_time
        for v in world.vessels:
            history.setdefault(v.name, []).append((t, v.orbit.semi_major_axis))

    logger.info("Session finished at UT=%.1f s: %d decay events, %d vessels alive",
                world.universal_time, decayed_total, len(world.vessels))
    return history
