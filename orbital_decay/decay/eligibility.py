# orbital_decay/decay/eligibility.py
from orbital_decay.config.settings import DecaySettings
from orbital_decay.host.vessel import VesselType

EXCLUDED_TYPES = frozenset({
    VesselType.EVA,
    VesselType.FLAG,
    VesselType.SPACE_OBJECT,
    VesselType.UNKNOWN,
})


def is_eligible(vessel, config: DecaySettings, active_vessel=None) -> bool:
    """
    True when the vessel should be under decay management:
    alive, not the active vessel, orbiting a body with an atmosphere, of a decaying type
    (any non-excluded type when config.all_decay, DEBRIS otherwise), in flight,
    and at or below the body's space threshold altitude.
    """
    if vessel is None or not getattr(vessel, "alive", True):
        return False
    if active_vessel is not None and vessel is active_vessel:
        return False
    body = vessel.main_body
    if not body.atmosphere:
        return False
    if vessel.vessel_type in EXCLUDED_TYPES:
        return False
    if not config.all_decay and vessel.vessel_type != VesselType.DEBRIS:
        return False
    if vessel.landed or vessel.splashed:
        return False
    if vessel.altitude > body.space_threshold_altitude:
        return False
    return True
