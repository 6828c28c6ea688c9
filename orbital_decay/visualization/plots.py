import os

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt

from orbital_decay.config.settings import OUTPUT_DIR


def plot_decay_history(history, out_dir=None, max_series=20):
    """
    Plot semi-major axis vs universal time for each vessel in `history`
    ({name: [(t, sma), ...]}). Returns the saved PNG path.
    """
    out_dir = out_dir or OUTPUT_DIR
    os.makedirs(out_dir, exist_ok=True)

    plt.figure(figsize=(10, 6))

    names = sorted(history)[:max_series]
    for name in names:
        series = history[name]
        if not series:
            continue
        times = [t for t, _ in series]
        smas = [a / 1000.0 for _, a in series]
        plt.plot(times, smas, label=name)

    plt.xlabel("Universal Time (s)")
    plt.ylabel("Semi-major Axis (km)")
    plt.title("Orbital Decay")

    if names:
        if len(names) <= 10:
            plt.legend()
        else:
            plt.legend(fontsize=8, ncol=2)

    save_path = os.path.join(out_dir, "decay_history.png")
    plt.tight_layout()
    plt.savefig(save_path)
    plt.close()

    print(f"[OK] Saved: {save_path}")
    return save_path
