"""
Startup reconciliation of persisted decay timestamps against the current universal time.

Decay owed for the time the simulation was not running is approximated as a single
compounded adjustment: every full orbital period elapsed since the persisted timestamp
counts as one decay event at the vessel's *current* per-event fraction.
"""
import logging
import math
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional

from orbital_decay.config.settings import DecaySettings
from orbital_decay.decay.magnitude import clamp_multiplier, decay_fraction
from orbital_decay.decay.scheduler import DecayScheduler

logger = logging.getLogger(__name__)


@dataclass
class CatchUpReport:
    caught_up: Dict[str, int] = field(default_factory=dict)   # id -> missed orbits applied
    pending: List[str] = field(default_factory=list)          # persisted timestamp still ahead
    skipped: List[str] = field(default_factory=list)          # less than one orbit missed
    fresh: List[str] = field(default_factory=list)            # no prior record
    failed: List[str] = field(default_factory=list)           # malformed entry or error


def missed_orbits(t_prev: float, now: float, period: float) -> int:
    """Whole orbital periods elapsed between t_prev and now (0 when t_prev >= now)."""
    if not math.isfinite(period) or period <= 0.0:
        raise ValueError(f"orbital period must be finite and > 0 (got {period!r})")
    if t_prev >= now:
        return 0
    return int(math.floor((now - t_prev) / period))


def catch_up_multiplier(orbits: int, fraction: float) -> float:
    """Compounded semi-major axis multiplier for `orbits` events at a fixed fraction, in [0, 1]."""
    if orbits <= 0:
        return 1.0
    return clamp_multiplier(1.0 - orbits * fraction)


class CatchUpProcessor:
    def __init__(self, config: DecaySettings):
        self.config = config

    def run(self, candidates: Iterable, record: Optional[Mapping[str, float]],
            scheduler: DecayScheduler, now: float,
            malformed: Iterable[str] = ()) -> CatchUpReport:
        """
        Apply catch-up to each eligible candidate and seed `scheduler`.
        Per-vessel failures are logged and reported; they never stop the batch.
        Every candidate ends up scheduled (fallback: now + time_to_periapsis).
        """
        report = CatchUpReport()
        record = record or {}
        malformed = set(malformed)
        candidates = list(candidates)

        for vessel in candidates:
            try:
                self._catch_up_one(vessel, record, malformed, scheduler, now, report)
            except Exception as e:
                logger.warning("Catch-up failed for %s, tracking it fresh: %s", vessel.id, e)
                report.failed.append(vessel.id)

        for vessel in candidates:
            if vessel.id in scheduler:
                continue
            try:
                scheduler.add(vessel, now)
            except Exception:
                # due immediately; the next tick retries with per-vessel isolation
                logger.exception("Could not schedule %s at its next periapsis; marking it due now", vessel.id)
                scheduler.schedule_at(vessel.id, now)
                if vessel.id not in report.failed:
                    report.failed.append(vessel.id)

        logger.info("Catch-up done: %d caught up, %d pending, %d skipped, %d fresh, %d failed",
                    len(report.caught_up), len(report.pending), len(report.skipped),
                    len(report.fresh), len(report.failed))
        return report

    def _catch_up_one(self, vessel, record, malformed, scheduler, now, report):
        vessel_id = vessel.id
        if vessel_id in malformed:
            logger.warning("Persisted timestamp for %s is malformed; no catch-up", vessel_id)
            report.failed.append(vessel_id)
            return

        raw = record.get(vessel_id)
        if raw is None:
            report.fresh.append(vessel_id)
            return
        t_prev = float(raw)
        if not math.isfinite(t_prev):
            raise ValueError(f"non-finite timestamp {raw!r}")

        if t_prev >= now:
            scheduler.schedule_at(vessel_id, t_prev)
            report.pending.append(vessel_id)
            return

        orbits = missed_orbits(t_prev, now, vessel.orbit.period)
        logger.info("%s needs to catch up on %d orbits worth of decay", vessel_id, orbits)
        if orbits == 0:
            report.skipped.append(vessel_id)
            return

        multiplier = catch_up_multiplier(orbits, decay_fraction(vessel, self.config))
        vessel.orbit.semi_major_axis = vessel.orbit.semi_major_axis * multiplier
        scheduler.schedule_at(vessel_id, now + vessel.orbit.time_to_periapsis)
        report.caught_up[vessel_id] = orbits
        logger.info("Caught up with %s's decay (x%.6f)", vessel_id, multiplier)
