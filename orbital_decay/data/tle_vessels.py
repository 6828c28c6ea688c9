# orbital_decay/data/tle_vessels.py
import logging
import uuid
from typing import Iterable, List, Tuple

import numpy as np
from sgp4.api import Satrec

from orbital_decay.host.body import EARTH, CelestialBody
from orbital_decay.host.orbit import Orbit
from orbital_decay.host.vessel import Vessel, VesselType

logger = logging.getLogger(__name__)

_NORAD_NAMESPACE = uuid.NAMESPACE_URL


def vessel_id_for_norad(satnum: int) -> str:
    """Stable id so persisted decay timestamps survive a reload of the same catalogue."""
    return str(uuid.uuid5(_NORAD_NAMESPACE, f"norad:{int(satnum)}"))


def classify(name: str) -> VesselType:
    upper = (name or "").upper()
    if " DEB" in upper or upper.endswith("DEB") or "R/B" in upper:
        return VesselType.DEBRIS
    return VesselType.PROBE


def vessel_from_tle(name: str, tle1: str, tle2: str, body: CelestialBody = EARTH) -> Vessel:
    """
    Build a host vessel from TLE mean elements.
    Semi-major axis comes from the Kozai mean motion (rad/min) via Kepler's third law.
    """
    sat = Satrec.twoline2rv(tle1, tle2)
    if getattr(sat, "error", 0):
        raise ValueError(f"{name}: SGP4 init error code={sat.error}")
    n = float(sat.no_kozai) / 60.0  # rad/s
    if n <= 0:
        raise ValueError(f"{name}: non-positive mean motion in TLE")
    sma = float(np.cbrt(body.gm / n ** 2))
    orbit = Orbit(body, semi_major_axis=sma, eccentricity=float(sat.ecco), mean_anomaly=float(sat.mo))
    return Vessel(name=name, orbit=orbit, vessel_type=classify(name),
                  vessel_id=vessel_id_for_norad(sat.satnum))


def vessels_from_tles(entries: Iterable[Tuple[str, str, str]], body: CelestialBody = EARTH) -> List[Vessel]:
    out = []
    for name, l1, l2 in entries:
        try:
            out.append(vessel_from_tle(name, l1, l2, body=body))
        except (ValueError, RuntimeError) as e:
            logger.warning("Skipping TLE %s: %s", name, e)
    return out
