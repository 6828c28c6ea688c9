# orbital_decay/decay/scheduler.py
import logging
import threading
from typing import Callable, Dict, List, NamedTuple, Optional

from orbital_decay.config.settings import DecaySettings
from orbital_decay.decay.magnitude import apply_decay_event

logger = logging.getLogger(__name__)


class TickResult(NamedTuple):
    decayed: List[str]
    removed: List[str]
    failed: List[str]


class DecayScheduler:
    """
    Live schedule: vessel id -> universal time of that vessel's next decay event.

    lookup(vessel_id) must return the live vessel or None once it no longer exists.
    Entries are rewritten after each decay event and dropped only when the vessel is gone.
    """
    def __init__(self, lookup: Callable[[str], Optional[object]], config: DecaySettings):
        self.lookup = lookup
        self.config = config
        self._next: Dict[str, float] = {}
        self._lock = threading.RLock()

    def __len__(self):
        return len(self._next)

    def __contains__(self, vessel_id) -> bool:
        return vessel_id in self._next

    def next_decay(self, vessel_id: str) -> Optional[float]:
        return self._next.get(vessel_id)

    def add(self, vessel, now: float) -> bool:
        """Start tracking vessel with next decay at its next periapsis. No-op if tracked."""
        with self._lock:
            if vessel.id in self._next:
                return False
            self._next[vessel.id] = float(now) + vessel.orbit.time_to_periapsis
            return True

    def schedule_at(self, vessel_id: str, timestamp: float) -> bool:
        """Track vessel_id with an explicit timestamp (startup seeding). No-op if tracked."""
        with self._lock:
            if vessel_id in self._next:
                return False
            self._next[vessel_id] = float(timestamp)
            return True

    def remove(self, vessel_id: str) -> bool:
        with self._lock:
            return self._next.pop(vessel_id, None) is not None

    def tick(self, now: float) -> TickResult:
        """
        Evaluate every tracked vessel against `now`.
        Gone vessels are dropped, due ones get one decay event and are re-armed at
        now + time_to_periapsis. Due vessels are collected before any mutation.
        """
        with self._lock:
            if not self._next:
                return TickResult([], [], [])

            due = []
            removed = []
            failed = []
            for vessel_id, timestamp in list(self._next.items()):
                try:
                    vessel = self.lookup(vessel_id)
                except Exception:
                    logger.exception("Lookup failed for %s", vessel_id)
                    failed.append(vessel_id)
                    continue
                if vessel is None:
                    removed.append(vessel_id)
                    continue
                if timestamp > now:
                    continue
                due.append((vessel_id, vessel))

            for vessel_id in removed:
                del self._next[vessel_id]
                logger.info("Dropped %s from decay schedule (vessel no longer exists)", vessel_id)

            decayed = []
            for vessel_id, vessel in due:
                try:
                    multiplier = apply_decay_event(vessel, self.config)
                    self._next[vessel_id] = float(now) + vessel.orbit.time_to_periapsis
                except Exception:
                    logger.exception("Decay failed for %s", vessel_id)
                    failed.append(vessel_id)
                    continue
                decayed.append(vessel_id)
                logger.debug("Decayed %s's orbit (x%.6f), next at %.1f",
                             vessel_id, multiplier, self._next[vessel_id])

            return TickResult(decayed, removed, failed)

    def snapshot(self) -> Dict[str, float]:
        """Copy of the full schedule for persistence."""
        with self._lock:
            return dict(self._next)
