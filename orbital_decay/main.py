# orbital_decay/main.py
import json
import logging
import traceback
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from orbital_decay.cli import run_cli
from orbital_decay.config import settings
from orbital_decay.config.settings import DT, OUTPUT_DIR, clock_file_path, decay_file_path
from orbital_decay.data.tle_fetcher import fetch_tle_group
from orbital_decay.data.tle_vessels import vessels_from_tles
from orbital_decay.decay.manager import DecayManager
from orbital_decay.host.world import World
from orbital_decay.simulation.runner import random_debris_world, run_session
from orbital_decay.visualization.plots import plot_decay_history

# --- Setup logger ------------------------------------------------------------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s  %(levelname)-7s  %(name)s  %(message)s",
    datefmt="%H:%M:%S"
)
log = logging.getLogger("main")


def save_json(obj: Any, name_prefix: str) -> str:
    ts = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    out_dir = Path(getattr(settings, "OUTPUT_DIR", "outputs"))
    out_dir.mkdir(parents=True, exist_ok=True)
    filename = out_dir / f"{name_prefix}_{ts}.json"
    with open(filename, "w") as f:
        json.dump(obj, f, indent=2, default=lambda o: repr(o))
    return str(filename)


def build_world(opts) -> World:
    if opts["source"] == "tle":
        world = World(save_name=f"tle-{opts['group']}")
        for v in vessels_from_tles(fetch_tle_group(opts["group"])):
            world.spawn(v)
        log.info("Loaded %d vessels from TLE group %s", len(world.vessels), opts["group"])
        return world
    return random_debris_world(opts["n_debris"])


def main():
    try:
        opts = run_cli()
        config = opts["config"]
        world = build_world(opts)
        save_path = decay_file_path(world.save_name)
        clock_path = clock_file_path(world.save_name)

        # Resume the clock of a previous run so its persisted timestamps line up
        world.restore_clock(clock_path)
        world.on_game_state_save.add(lambda data: world.save_clock(clock_path))

        # 1) First session (catches up on a record left by an earlier run)
        manager = DecayManager(world, config, save_path=save_path)
        manager.start()
        history = run_session(world, manager, dt=DT, steps=opts["steps"])
        world.request_save()
        manager.destroy()

        # 2) Downtime: orbits keep moving, nobody applies decay
        log.info("Simulating %.0f s offline", opts["offline_gap"])
        world.advance(opts["offline_gap"])

        # 3) Restart: catch-up from the persisted schedule
        manager = DecayManager(world, config, save_path=save_path)
        report = manager.start()
        history = run_session(world, manager, dt=DT, steps=opts["steps"], history=history)
        world.request_save()
        manager.destroy()

        summary = {
            "meta": {
                "source": opts["source"],
                "all_decay": config.all_decay,
                "decay_percent": config.decay_percent,
                "dt": DT,
                "steps_per_session": opts["steps"],
                "offline_gap": opts["offline_gap"],
                "timestamp_utc": datetime.now(timezone.utc).isoformat(),
            },
            "catch_up": vars(report) if report is not None else None,
            "final_universal_time": world.universal_time,
            "survivors": {v.name: v.orbit.periapsis_altitude for v in world.vessels},
        }
        out_file = save_json(summary, "decay_summary")
        log.info("Saved summary: %s", out_file)

        try:
            plot_decay_history(history, out_dir=OUTPUT_DIR)
        except Exception as e:
            log.warning("Plotting failed: %s", e)

    except Exception:
        log.error("Fatal exception during run:")
        traceback.print_exc()


if __name__ == "__main__":
    main()
