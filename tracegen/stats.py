from tracegen.geofence import intersects

FIELDS = (
    "pings", "subscribes", "publishes", "payload_bytes", "distance_km",
    "subscription_overlaps", "message_overlaps",
)


def count_overlaps(geofence, broker_areas):
    """
    Number of broker areas reached by a geofence besides the home broker of
    the client that created it.
    """
    hits = 0
    for area in broker_areas:
        if intersects(geofence, getattr(area, "geofence", area)):
            hits += 1
    # a geofence always contains its own origin, so it meets its home broker
    return max(hits - 1, 0)


def safe_div(numerator, denominator):
    if not denominator:
        return None
    return numerator / denominator


class Stats:
    """
    Running totals of one generation run (or of one worker task, to be
    added to the run total afterwards).
    """

    def __init__(self):
        self.pings = 0
        self.subscribes = 0
        self.publishes = 0
        self.payload_bytes = 0
        self.distance_km = 0.0
        self.subscription_overlaps = 0
        self.message_overlaps = 0

    def add_ping(self):
        self.pings += 1

    def add_subscribe(self):
        self.subscribes += 1

    def add_publish(self, payload_size):
        self.publishes += 1
        self.payload_bytes += payload_size

    def add_distance(self, distance_km):
        self.distance_km += distance_km

    def add_subscription_overlaps(self, geofence, broker_areas):
        n = count_overlaps(geofence, broker_areas)
        self.subscription_overlaps += n
        return n

    def add_message_overlaps(self, geofence, broker_areas):
        n = count_overlaps(geofence, broker_areas)
        self.message_overlaps += n
        return n

    def merge(self, other):
        for field in FIELDS:
            setattr(self, field, getattr(self, field) + getattr(other, field))
        return self

    def __add__(self, other):
        total = Stats()
        total.merge(self)
        total.merge(other)
        return total

    def __eq__(self, other):
        if not isinstance(other, Stats):
            return NotImplemented
        return all(getattr(self, f) == getattr(other, f) for f in FIELDS)

    def as_dict(self):
        return {f: getattr(self, f) for f in FIELDS}

    def summary(self, total_clients, runtime_ms):
        """
        Derived rates of the run. Every value whose denominator is zero
        (no clients, no publishes, zero runtime) is None.
        """
        runtime_s = runtime_ms / 1000
        runtime_h = runtime_s / 3600
        distance_per_client = safe_div(self.distance_km, total_clients)
        return {
            "clients": total_clients,
            "runtime_s": runtime_s,
            "pings": self.pings,
            "pings_per_s": safe_div(self.pings, runtime_s),
            "subscribes": self.subscribes,
            "subscribes_per_s": safe_div(self.subscribes, runtime_s),
            "publishes": self.publishes,
            "publishes_per_s": safe_div(self.publishes, runtime_s),
            "payload_kb": self.payload_bytes / 1000.0,
            "bytes_per_publish": safe_div(self.payload_bytes, self.publishes),
            "distance_km": self.distance_km,
            "km_per_client": distance_per_client,
            "avg_speed_kmh": None if distance_per_client is None else safe_div(distance_per_client, runtime_h),
            "message_overlaps": self.message_overlaps,
            "subscription_overlaps": self.subscription_overlaps,
        }

    def render_summary(self, total_clients, runtime_ms):
        s = self.summary(total_clients, runtime_ms)
        return (
            "Data set characteristics:\n"
            f"    Number of ping messages: {s['pings']} ({fmt(s['pings_per_s'])} messages/s)\n"
            f"    Number of subscribe messages: {s['subscribes']} ({fmt(s['subscribes_per_s'])} messages/s)\n"
            f"    Number of publish messages: {s['publishes']} ({fmt(s['publishes_per_s'])} messages/s)\n"
            f"    Publish payload size: {fmt(s['payload_kb'])}KB ({fmt(s['bytes_per_publish'])} bytes/message)\n"
            f"    Client distance travelled: {fmt(s['distance_km'])}km ({fmt(s['km_per_client'])} km/client)\n"
            f"    Client average speed: {fmt(s['avg_speed_kmh'])} km/h\n"
            f"    Number of message geofence broker overlaps: {s['message_overlaps']}\n"
            f"    Number of subscription geofence broker overlaps: {s['subscription_overlaps']}\n"
        )

    def __repr__(self):
        return "Stats(" + ", ".join(f"{f}={getattr(self, f)}" for f in FIELDS) + ")"


def fmt(value):
    if value is None:
        return "n/a"
    return round(value, 2)
