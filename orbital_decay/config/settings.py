"""
Project settings (constants + small helpers).
Units: meters (m), seconds (s), meters^3/s^2 for gravitational parameters.
"""
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, replace
from datetime import timedelta
from typing import Optional

logger = logging.getLogger(__name__)

# Paths
BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(__file__)))
OUTPUT_DIR = os.path.join(BASE_DIR, "outputs")
SAVES_DIR = os.path.join(BASE_DIR, "saves")
DEFAULT_SAVE_NAME = "default"
DECAY_FILE_NAME = "Kessler.dat"
CLOCK_FILE_NAME = "world.json"

# Run
DEFAULT_RANDOM_SEED: Optional[int] = None
VALIDATE_ON_IMPORT = False

# Decay (defaults for the runtime options)
ORBITAL_DECAY_ENABLED = True
ALL_DECAY = False
DECAY_PERCENT = 0.02

# Simulation
DT = 10.0
STEPS = 2000
OFFLINE_GAP_SEC = 6 * 3600.0

# CLI/random debris generator
MAX_DEBRIS = 200
DEFAULT_DEBRIS = 12
PERIAPSIS_MIN = 72_000.0
PERIAPSIS_MAX = 240_000.0
ECCENTRICITY_MAX = 0.05

# TLE ingestion
TLE_CACHE_FILE = os.path.join(BASE_DIR, "tle_cache.json")
TLE_CACHE_TTL = timedelta(hours=6)


@dataclass(frozen=True)
class DecaySettings:
    """
    Read-only options consumed by the decay subsystem.

    orbital_decay_enabled: when False the whole subsystem stays inactive
    all_decay: when False only DEBRIS vessels are tracked
    decay_percent: per-event shrink scale (> 0)
    """
    orbital_decay_enabled: bool = ORBITAL_DECAY_ENABLED
    all_decay: bool = ALL_DECAY
    decay_percent: float = DECAY_PERCENT

    def validate(self) -> "DecaySettings":
        for name in ("orbital_decay_enabled", "all_decay"):
            if not isinstance(getattr(self, name), bool):
                raise ValueError(f"{name} must be a boolean (got {getattr(self, name)!r})")
        pct = self.decay_percent
        if isinstance(pct, bool) or not isinstance(pct, (int, float)) or pct <= 0:
            raise ValueError(f"decay_percent must be a number > 0 (got {pct!r})")
        if pct > 1:
            raise ValueError("decay_percent must be <= 1")
        return self


def load_decay_settings(path: Optional[str] = None) -> DecaySettings:
    """
    Build DecaySettings from module defaults, optionally overridden by a JSON file
    holding any of {"orbital_decay_enabled", "all_decay", "decay_percent"}.
    A missing override file is not an error; unknown keys are ignored.
    """
    cfg = DecaySettings(
        orbital_decay_enabled=bool(ORBITAL_DECAY_ENABLED),
        all_decay=bool(ALL_DECAY),
        decay_percent=float(DECAY_PERCENT),
    )
    if path is None or not os.path.exists(path):
        return cfg.validate()

    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"decay settings file {path} must hold a JSON object")

    overrides = {}
    if "orbital_decay_enabled" in data:
        overrides["orbital_decay_enabled"] = data["orbital_decay_enabled"]
    if "all_decay" in data:
        overrides["all_decay"] = data["all_decay"]
    if "decay_percent" in data:
        overrides["decay_percent"] = data["decay_percent"]
    logger.info("Loaded decay settings overrides from %s: %s", path, sorted(overrides))
    return replace(cfg, **overrides).validate()


def _save_file_path(file_name: str, save_name: Optional[str], saves_dir: Optional[str]) -> str:
    name = DEFAULT_SAVE_NAME if not save_name else save_name
    root = SAVES_DIR if saves_dir is None else saves_dir
    return os.path.join(root, name, file_name)


def decay_file_path(save_name: Optional[str] = None, saves_dir: Optional[str] = None) -> str:
    """Path of the persisted decay schedule for a given save."""
    return _save_file_path(DECAY_FILE_NAME, save_name, saves_dir)


def clock_file_path(save_name: Optional[str] = None, saves_dir: Optional[str] = None) -> str:
    """Path of the persisted universal time for a given save."""
    return _save_file_path(CLOCK_FILE_NAME, save_name, saves_dir)


def validate_settings() -> None:
    if DECAY_PERCENT <= 0:
        raise ValueError("DECAY_PERCENT must be > 0")
    if DT <= 0:
        raise ValueError("DT must be > 0")
    if STEPS <= 0:
        raise ValueError("STEPS must be > 0")
    if OFFLINE_GAP_SEC < 0:
        raise ValueError("OFFLINE_GAP_SEC must be >= 0")
    if MAX_DEBRIS <= 0:
        raise ValueError("MAX_DEBRIS must be > 0")
    if not (0 < DEFAULT_DEBRIS <= MAX_DEBRIS):
        raise ValueError("DEFAULT_DEBRIS must be in (0, MAX_DEBRIS]")
    if PERIAPSIS_MAX < PERIAPSIS_MIN:
        raise ValueError("PERIAPSIS_MAX must be >= PERIAPSIS_MIN")
    if not (0 <= ECCENTRICITY_MAX < 1):
        raise ValueError("ECCENTRICITY_MAX must be in [0, 1)")


if VALIDATE_ON_IMPORT:
    validate_settings()
