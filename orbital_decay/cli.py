# orbital_decay/cli.py
from orbital_decay.config import settings
from orbital_decay.config.settings import (
    DEFAULT_DEBRIS,
    MAX_DEBRIS,
    DecaySettings,
    load_decay_settings,
)


def get_float(prompt, default=None, min_val=None):
    """
    Safe float input with optional default. Non-interactive (EOF) returns default.
    """
    while True:
        try:
            user = input(prompt)
        except EOFError:
            return float(default) if default is not None else None
        if user.strip() == "" and default is not None:
            return float(default)
        try:
            val = float(user)
            if min_val is not None and val < min_val:
                raise ValueError
            return val
        except (ValueError, TypeError):
            print("❌ Please enter a valid number.")


def get_int(prompt, default=None, min_val=None, max_val=None):
    """
    Safe integer input with limits. Non-interactive (EOF) returns default.
    """
    while True:
        try:
            user = input(prompt)
        except EOFError:
            return int(default) if default is not None else None
        if user.strip() == "" and default is not None:
            return int(default)
        try:
            val = int(user)
            if min_val is not None and val < min_val:
                raise ValueError
            if max_val is not None and val > max_val:
                raise ValueError
            return val
        except (ValueError, TypeError):
            print("❌ Invalid integer input.")


def get_yes_no(prompt, default=False):
    try:
        user = input(prompt).strip().lower()
    except EOFError:
        return default
    if user == "":
        return default
    return user.startswith("y")


def choose_source():
    """
      1 -> RANDOM debris field around Kerbin [default]
      2 -> TLE group from CelesTrak (Earth)
    """
    print("\n🛰️  World Source")
    print("  1) RANDOM (Recommended) — synthetic debris around Kerbin")
    print("  2) TLE — download a CelesTrak group")
    try:
        choice = input("Select source [1]: ").strip()
    except EOFError:
        choice = ""
    if choice == "2":
        try:
            group = input("CelesTrak group [cosmos-2251-debris]: ").strip()
        except EOFError:
            group = ""
        return "tle", group or "cosmos-2251-debris"
    return "random", None


def configure_decay(base: DecaySettings) -> DecaySettings:
    print("\n☄️ Decay Settings")
    all_decay = get_yes_no(f"Decay all vessel types, not only debris? (y/N) [{'y' if base.all_decay else 'n'}]: ",
                           default=base.all_decay)
    percent = get_float(f"Decay percent per event [default {base.decay_percent}]: ",
                        default=base.decay_percent, min_val=1e-9)
    return DecaySettings(orbital_decay_enabled=base.orbital_decay_enabled,
                         all_decay=all_decay, decay_percent=percent).validate()


def run_cli(settings_path=None):
    print("======================================")
    print("      ORBITAL DECAY ENGINE (CLI)      ")
    print("======================================")

    source, group = choose_source()
    n_debris = DEFAULT_DEBRIS
    if source == "random":
        n_debris = get_int(f"Number of debris (1–{MAX_DEBRIS}) [default {DEFAULT_DEBRIS}]: ",
                           default=DEFAULT_DEBRIS, min_val=1, max_val=MAX_DEBRIS)

    config = configure_decay(load_decay_settings(settings_path))

    steps = get_int(f"\nSteps per session [default {settings.STEPS}]: ", default=settings.STEPS, min_val=1)
    offline = get_float(f"Offline gap between sessions in seconds [default {int(settings.OFFLINE_GAP_SEC)}]: ",
                        default=settings.OFFLINE_GAP_SEC, min_val=0.0)

    print("\n✅ CLI input complete.")
    print(f"→ Source: {source}{' (' + group + ')' if group else ''}")
    print(f"→ Decay: all_decay={config.all_decay}, decay_percent={config.decay_percent}")

    return {
        "source": source,
        "group": group,
        "n_debris": n_debris,
        "config": config,
        "steps": steps,
        "offline_gap": offline,
    }
