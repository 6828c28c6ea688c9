# orbital_decay/host/orbit.py
import math

import numpy as np

from orbital_decay.host.body import CelestialBody

TWO_PI = 2.0 * math.pi

# Kepler solver
_KEPLER_TOL = 1e-12
_KEPLER_MAX_ITER = 50


def solve_kepler(mean_anomaly: float, eccentricity: float) -> float:
    """
    Solve Kepler's equation M = E - e*sin(E) for the eccentric anomaly E (elliptic orbits).
    Newton iteration starting from E0 = M (or pi for high eccentricity).
    """
    M = float(np.mod(mean_anomaly, TWO_PI))
    e = float(eccentricity)
    E = M if e < 0.8 else math.pi
    for _ in range(_KEPLER_MAX_ITER):
        f = E - e * np.sin(E) - M
        fp = 1.0 - e * np.cos(E)
        step = f / fp
        E -= step
        if abs(step) < _KEPLER_TOL:
            break
    return float(E)


class Orbit:
    """
    Keplerian orbit around a CelestialBody.
    State: semi-major axis (m), eccentricity, mean anomaly at the current time (rad).
    Everything else (period, periapsis altitude, time to periapsis, altitude) is derived.
    """
    def __init__(self, body: CelestialBody, semi_major_axis: float, eccentricity: float = 0.0,
                 mean_anomaly: float = 0.0):
        if not (0.0 <= eccentricity < 1.0):
            raise ValueError("eccentricity must be in [0, 1) (elliptic orbits only)")
        self.body = body
        self.eccentricity = float(eccentricity)
        self.mean_anomaly = float(np.mod(mean_anomaly, TWO_PI))
        self._sma = 0.0
        self.semi_major_axis = semi_major_axis

    @property
    def semi_major_axis(self) -> float:
        return self._sma

    @semi_major_axis.setter
    def semi_major_axis(self, value: float) -> None:
        value = float(value)
        if not math.isfinite(value) or value < 0.0:
            raise ValueError(f"semi_major_axis must be finite and >= 0 (got {value!r})")
        self._sma = value

    @property
    def mean_motion(self) -> float:
        """rad/s; zero for a collapsed orbit."""
        if self._sma <= 0.0:
            return 0.0
        return float(np.sqrt(self.body.gm / self._sma ** 3))

    @property
    def period(self) -> float:
        n = self.mean_motion
        return TWO_PI / n if n > 0.0 else math.inf

    @property
    def periapsis_radius(self) -> float:
        return self._sma * (1.0 - self.eccentricity)

    @property
    def apoapsis_radius(self) -> float:
        return self._sma * (1.0 + self.eccentricity)

    @property
    def periapsis_altitude(self) -> float:
        return self.periapsis_radius - self.body.radius

    @property
    def apoapsis_altitude(self) -> float:
        return self.apoapsis_radius - self.body.radius

    @property
    def time_to_periapsis(self) -> float:
        """Seconds until the next periapsis passage, in (0, period]."""
        n = self.mean_motion
        if n <= 0.0:
            return math.inf
        remaining = float(np.mod(TWO_PI - self.mean_anomaly, TWO_PI))
        if remaining == 0.0:
            remaining = TWO_PI
        return remaining / n

    @property
    def radius(self) -> float:
        E = solve_kepler(self.mean_anomaly, self.eccentricity)
        return self._sma * (1.0 - self.eccentricity * math.cos(E))

    @property
    def altitude(self) -> float:
        return self.radius - self.body.radius

    def propagate(self, dt: float) -> None:
        """Advance the mean anomaly by dt seconds."""
        self.mean_anomaly = float(np.mod(self.mean_anomaly + self.mean_motion * float(dt), TWO_PI))

    def __repr__(self):
        return (f"Orbit({self.body.name}, a={self._sma:.1f} m, e={self.eccentricity:.4f}, "
                f"PeA={self.periapsis_altitude:.1f} m)")
