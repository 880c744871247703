import os

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
from matplotlib.patches import Ellipse
import numpy as np

from tracegen.geofence import Circle
from tracegen.location import KM_TO_DEG

CLIENT_COLORS = ['purple', 'orange', 'cyan', 'magenta', 'brown', 'green']


def plot_traces(conf, areas, traces, directory, max_clients=15):
    """
    Plot the broker areas and the paths of up to max_clients clients per
    broker, as a lon/lat map per broker. traces is a DataFrame from
    sink.load_traces.
    """
    fig, axes = plt.subplots(1, len(areas), figsize=(12 * len(areas), 12), squeeze=False)

    for ax, area in zip(axes[0], areas):
        if isinstance(area.geofence, Circle):
            c = area.geofence.center
            # degrees of longitude shrink with the latitude
            lon_scale = 1 / max(np.cos(np.radians(c.lat)), 1e-6)
            ellipse = Ellipse(
                (c.lon, c.lat),
                2 * area.geofence.radius_km * KM_TO_DEG * lon_scale,
                2 * area.geofence.radius_km * KM_TO_DEG,
                fill=False, linestyle='--', color='gray', alpha=0.7, label=f'Broker area {area.name}')
            ax.add_patch(ellipse)
            ax.scatter([c.lon], [c.lat], c='red', s=100, marker='s', zorder=3)

        broker_traces = traces[traces["broker"] == area.name] if len(traces) else traces
        clients = sorted(broker_traces["client"].unique())[:max_clients] if len(broker_traces) else []
        for i, client in enumerate(clients):
            path = broker_traces[(broker_traces["client"] == client) & (broker_traces["action_type"] == "ping")]
            color = CLIENT_COLORS[i % len(CLIENT_COLORS)]
            ax.plot(path["longitude"], path["latitude"], color=color, linewidth=1.0, alpha=0.8, zorder=2)
            ax.scatter(path["longitude"].iloc[:1], path["latitude"].iloc[:1], c=color, s=60, marker='*', zorder=4,
                       label=f'Client {client}' if i < 3 else None)

        ax.set_xlabel('Longitude (degrees)')
        ax.set_ylabel('Latitude (degrees)')
        ax.set_title(f'{conf.NAME}: {area.name} ({len(clients)} clients shown)')
        ax.autoscale_view()
        ax.legend()
        ax.grid(True, alpha=0.3)

    plt.tight_layout()
    os.makedirs(os.path.join(directory, "graphics"), exist_ok=True)
    path = os.path.join(directory, "graphics", f"{conf.NAME}_traces.png")
    plt.savefig(path, dpi=150, bbox_inches='tight')
    plt.close(fig)
    print(f"Plot saved to {path}")
    return path
