# orbital_decay/decay/manager.py
import logging
from typing import List, Optional

from orbital_decay.config.settings import DecaySettings, decay_file_path
from orbital_decay.decay.catch_up import CatchUpProcessor, CatchUpReport
from orbital_decay.decay.eligibility import is_eligible
from orbital_decay.decay.persistence import load_record, save_record
from orbital_decay.decay.scheduler import DecayScheduler, TickResult

logger = logging.getLogger(__name__)


class DecayManager:
    """
    Wires the decay subsystem into a host world:
      start()  -> eligibility scan, catch-up from the persisted record, event subscriptions
      update() -> per-step tick (never raises)
      stage separation -> track newly eligible vessels
      save requested   -> persist the schedule
    """
    def __init__(self, world, config: DecaySettings, save_path: Optional[str] = None):
        self.world = world
        self.config = config
        self.save_path = save_path or decay_file_path(getattr(world, "save_name", None))
        self.scheduler = DecayScheduler(world.find_vessel, config)
        self.catch_up = CatchUpProcessor(config)
        self.active = False
        self.last_report: Optional[CatchUpReport] = None

    # -----------------------
    # Lifecycle
    # -----------------------
    def start(self) -> Optional[CatchUpReport]:
        if not self.config.orbital_decay_enabled:
            logger.info("DecayManager is turned off; nothing to do")
            self.destroy()
            return None

        self.world.on_game_state_save.add(self.on_game_state_save)
        self.world.on_stage_separation.add(self.on_stage_separation)
        self.active = True
        logger.info("DecayManager is awake")

        now = self.world.universal_time
        candidates = self.find_candidates()
        logger.info("Finished populating decay candidates. Found %d candidates", len(candidates))
        if not candidates:
            return None

        try:
            loaded = load_record(self.save_path)
            record, malformed = loaded.record, loaded.malformed
        except Exception as e:
            logger.warning("Could not load decay record %s, no catch-up this session: %s",
                           self.save_path, e)
            record, malformed = {}, {}

        self.last_report = self.catch_up.run(candidates, record, self.scheduler, now,
                                             malformed=malformed)
        return self.last_report

    def destroy(self) -> None:
        self.world.on_game_state_save.remove(self.on_game_state_save)
        self.world.on_stage_separation.remove(self.on_stage_separation)
        if self.active:
            logger.info("Destroying DecayManager")
        self.active = False

    # -----------------------
    # Event handlers
    # -----------------------
    def on_stage_separation(self, data=None) -> List[str]:
        logger.info("Staging event detected. Checking for new debris")
        added = []
        now = self.world.universal_time
        for vessel in self.find_candidates(skip_tracked=True):
            if self.scheduler.add(vessel, now):
                added.append(vessel.id)
                logger.info("Added %s to the decay list", vessel.name)
        return added

    def on_game_state_save(self, data=None) -> bool:
        ok = save_record(self.save_path, self.scheduler.snapshot())
        if not ok:
            logger.warning("Decay schedule not saved; will retry on the next save request")
        return ok

    def update(self) -> TickResult:
        if not self.active:
            return TickResult([], [], [])
        try:
            return self.scheduler.tick(self.world.universal_time)
        except Exception:
            logger.exception("Decay tick failed")
            return TickResult([], [], [])

    # -----------------------
    # Helpers
    # -----------------------
    def find_candidates(self, skip_tracked: bool = False) -> list:
        active = self.world.active_vessel
        out = []
        for vessel in self.world.vessels:
            if skip_tracked and vessel is not None and vessel.id in self.scheduler:
                continue
            try:
                if is_eligible(vessel, self.config, active):
                    out.append(vessel)
            except Exception as e:
                logger.warning("Eligibility check failed for %r: %s", vessel, e)
        return out

    @property
    def tracked_ids(self) -> List[str]:
        return list(self.scheduler.snapshot())

    def next_decay(self, vessel_id: str) -> Optional[float]:
        return self.scheduler.next_decay(vessel_id)
