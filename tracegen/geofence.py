import re

from numpy import cos, radians

from tracegen.config import ROLES, ConfigurationError
from tracegen.location import DEG_TO_KM, Location, deg_to_km, km_to_deg, normalize_lon

VERBOSE = False


def verboseprint(*args, **kwargs):
    if VERBOSE:
        print(*args, **kwargs)


WKT_CIRCLE = re.compile(r"^\s*BUFFER\s*\(\s*POINT\s*\(\s*(\S+)\s+(\S+)\s*\)\s*,\s*(\S+)\s*\)\s*$")


class Circle:
    """
    Circular geofence. The radius is kept in kilometers, it is only
    converted to degrees when written as WKT.
    """

    def __init__(self, center: Location, radius_km: float):
        if radius_km < 0:
            raise ValueError(f"negative geofence radius {radius_km}km")
        self.center = center
        self.radius_km = float(radius_km)

    @classmethod
    def from_degrees(cls, center: Location, radius_deg: float):
        return cls(center, deg_to_km(radius_deg))

    @property
    def radius_deg(self) -> float:
        return km_to_deg(self.radius_km)

    def contains(self, point: Location) -> bool:
        return self.center.distance_km(point) <= self.radius_km

    def intersects(self, other) -> bool:
        if isinstance(other, World):
            return True
        return self.center.distance_km(other.center) <= self.radius_km + other.radius_km

    def random_location(self, rng) -> Location:
        """
        uniform sample inside the circle, drawn from its lat/lon bounding
        box until one lands inside
        """
        dlat = self.radius_km / DEG_TO_KM
        # bounding box gets very wide towards the poles
        dlon = self.radius_km / (DEG_TO_KM * max(float(cos(radians(self.center.lat))), 1e-6))
        dlon = min(dlon, 180.0)
        while True:
            lat = max(-90.0, min(90.0, rng.uniform(self.center.lat - dlat, self.center.lat + dlat)))
            lon = normalize_lon(rng.uniform(self.center.lon - dlon, self.center.lon + dlon))
            candidate = Location(lat, lon)
            if self.contains(candidate):
                return candidate

    @property
    def wkt(self) -> str:
        return f"BUFFER (POINT ({self.center.lon} {self.center.lat}), {self.radius_deg})"

    def __eq__(self, other):
        if not isinstance(other, Circle):
            return NotImplemented
        # the radius passes through a degree conversion on every WKT round trip
        return self.center == other.center and abs(self.radius_km - other.radius_km) <= 1e-9 * max(1.0, self.radius_km)

    def __hash__(self):
        # equal circles may differ in the last digits of their radius
        return hash(self.center)

    def __repr__(self):
        return f"Circle(center={self.center!r}, radius_km={self.radius_km})"


class World:
    """Geofence covering the whole globe."""

    def contains(self, point: Location) -> bool:
        return True

    def intersects(self, other) -> bool:
        return True

    def random_location(self, rng) -> Location:
        return Location(rng.uniform(-90.0, 90.0), rng.uniform(-180.0, 180.0))

    @property
    def wkt(self) -> str:
        return ""

    def __eq__(self, other):
        return isinstance(other, World)

    def __hash__(self):
        return hash("World")

    def __repr__(self):
        return "World()"


WORLD = World()


def contains(geofence, point) -> bool:
    return geofence.contains(point)


def intersects(a, b) -> bool:
    if isinstance(a, World) or isinstance(b, World):
        return True
    return a.intersects(b)


def geofence_from_wkt(text):
    """
    Parse a geofence written by Circle.wkt. An empty string is a world-wide
    geofence.
    """
    if text is None or not text.strip():
        return WORLD
    match = WKT_CIRCLE.match(text)
    if match is None:
        raise ValueError(f"Unsupported geofence WKT: {text!r}")
    lon, lat, radius_deg = (float(g) for g in match.groups())
    return Circle.from_degrees(Location(lat, lon), radius_deg)


class BrokerArea:
    """Jurisdiction of one broker and the clients generated inside it."""

    def __init__(self, name, geofence, clients=0, machines=1, publishers=0, subscribers=0):
        self.name = name
        self.geofence = geofence
        self.clients = clients
        self.machines = machines
        self.publishers = publishers
        self.subscribers = subscribers

    def count(self, role):
        """number of clients of a role (client, publisher or subscriber)"""
        return getattr(self, ROLES[role])

    def __repr__(self):
        return (f"BrokerArea(name={self.name!r}, geofence={self.geofence!r}, clients={self.clients}, "
                f"publishers={self.publishers}, subscribers={self.subscribers}, machines={self.machines})")


def broker_areas_from_config(brokers):
    """
    build BrokerArea objects from the list of dicts kept in Config.BROKERS.
    A broker entry has lat, lon and either radius (km) or radius_deg.
    """
    areas = []
    for b in brokers:
        center = Location(b["lat"], b["lon"])
        if b.get("radius") is None and b.get("radius_deg") is None:
            geofence = WORLD
        elif b.get("radius") is not None:
            geofence = Circle(center, b["radius"])
        else:
            geofence = Circle.from_degrees(center, b["radius_deg"])
        areas.append(BrokerArea(b["name"], geofence, b.get("clients", 0), b.get("machines", 1),
                                b.get("publishers", 0), b.get("subscribers", 0)))
    return areas


def validate_broker_areas(areas):
    """
    Broker areas must not overlap, otherwise clients cannot be assigned to
    a single jurisdiction and generation must stop.
    """
    geofences = [a.geofence if isinstance(a, BrokerArea) else a for a in areas]
    names = [a.name if isinstance(a, BrokerArea) else str(a) for a in areas]
    for i, ba in enumerate(geofences):
        overlapping = [names[j] for j, other in enumerate(geofences) if j != i and intersects(ba, other)]
        if overlapping:
            raise ConfigurationError(f"Broker areas should not overlap: {names[i]} overlaps {', '.join(overlapping)}")
        verboseprint(f"Broker area {names[i]} is valid")
