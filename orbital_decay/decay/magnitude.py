# orbital_decay/decay/magnitude.py
from orbital_decay.config.settings import DecaySettings


def decay_fraction(vessel, config: DecaySettings) -> float:
    """
    Fraction of the semi-major axis removed by one decay event.
    Deeper periapsis (relative to the space threshold) decays faster; above the threshold
    the result goes negative and callers must clamp.
    """
    depth = vessel.orbit.periapsis_altitude / vessel.main_body.space_threshold_altitude
    return (1.0 - depth) * config.decay_percent


def clamp_multiplier(multiplier: float) -> float:
    """Keep a semi-major axis multiplier in [0, 1]."""
    return min(1.0, max(0.0, float(multiplier)))


def apply_decay_event(vessel, config: DecaySettings) -> float:
    """Apply one discrete decay event in place; returns the multiplier used."""
    multiplier = clamp_multiplier(1.0 - decay_fraction(vessel, config))
    vessel.orbit.semi_major_axis = vessel.orbit.semi_major_axis * multiplier
    return multiplier
