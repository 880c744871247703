from numpy import arcsin, arctan2, cos, degrees, pi, radians, sin, sqrt

# 1 degree of arc at the equator
DEG_TO_KM = 111.32
KM_TO_DEG = 1.0 / DEG_TO_KM
# sphere on which DEG_TO_KM holds exactly
EARTH_RADIUS_KM = DEG_TO_KM * 180.0 / pi


def km_to_deg(km: float) -> float:
    return km * KM_TO_DEG


def deg_to_km(deg: float) -> float:
    return deg * DEG_TO_KM


class Location:
    """
    Point on the earth surface, latitude and longitude in degrees.
    Treated as a value: never modified after creation.
    """
    __slots__ = ("lat", "lon")

    def __init__(self, lat: float, lon: float):
        self.lat = float(lat)
        self.lon = float(lon)

    def distance_km(self, other) -> float:
        """
        great-circle (haversine) distance between this location and
        another Location, in kilometers
        """
        lat1 = radians(self.lat)
        lat2 = radians(other.lat)
        dlat = lat2 - lat1
        dlon = radians(other.lon - self.lon)
        h = sin(dlat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(dlon / 2) ** 2
        # rounding can push h a hair above 1 for antipodal points
        h = min(1.0, float(h))
        return float(2 * EARTH_RADIUS_KM * arcsin(sqrt(h)))

    def bearing_to(self, other) -> float:
        """
        initial bearing towards another Location, degrees clockwise from
        north in [0, 360)
        """
        lat1 = radians(self.lat)
        lat2 = radians(other.lat)
        dlon = radians(other.lon - self.lon)
        x = sin(dlon) * cos(lat2)
        y = cos(lat1) * sin(lat2) - sin(lat1) * cos(lat2) * cos(dlon)
        return float(degrees(arctan2(x, y))) % 360.0

    def location_in_distance(self, distance_km: float, direction: float):
        """
        Project a new Location distance_km away, travelling along the
        great circle that leaves this point with the given bearing (degrees).
        """
        delta = distance_km / EARTH_RADIUS_KM
        theta = radians(direction)
        lat1 = radians(self.lat)
        lon1 = radians(self.lon)

        lat2 = arcsin(sin(lat1) * cos(delta) + cos(lat1) * sin(delta) * cos(theta))
        lon2 = lon1 + arctan2(sin(theta) * sin(delta) * cos(lat1),
                              cos(delta) - sin(lat1) * sin(lat2))
        return Location(degrees(lat2), normalize_lon(float(degrees(lon2))))

    def __eq__(self, other):
        if not isinstance(other, Location):
            return NotImplemented
        return self.lat == other.lat and self.lon == other.lon

    def __hash__(self):
        return hash((self.lat, self.lon))

    def __repr__(self):
        return f"Location(lat={self.lat}, lon={self.lon})"


def normalize_lon(lon: float) -> float:
    """wrap a longitude into [-180, 180)"""
    return (lon + 180.0) % 360.0 - 180.0
