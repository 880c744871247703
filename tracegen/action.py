from enum import Enum

from tracegen.geofence import WORLD, geofence_from_wkt
from tracegen.location import Location

HEADER = ["timestamp(ms)", "latitude", "longitude", "action_type", "topic", "geofence", "payload_size"]


class ActionType(Enum):
    PING = "ping"
    SUBSCRIBE = "subscribe"
    PUBLISH = "publish"


class Action:
    """One event of a client trace."""

    def __init__(self, timestamp, location, kind, topic=None, geofence=None, payload_size=None):
        self.timestamp = int(timestamp)
        self.location = location
        self.kind = kind
        self.topic = topic
        self.geofence = geofence
        self.payload_size = payload_size

    def to_row(self):
        return [
            str(self.timestamp),
            str(self.location.lat),
            str(self.location.lon),
            self.kind.value,
            self.topic or "",
            "" if self.geofence is None else self.geofence.wkt,
            "" if self.payload_size is None else str(self.payload_size),
        ]

    @classmethod
    def from_row(cls, row):
        if len(row) != len(HEADER):
            raise ValueError(f"Expected {len(HEADER)} fields, got {len(row)}: {row}")
        timestamp, lat, lon, kind, topic, geofence, payload_size = row
        kind = ActionType(kind)
        if kind is ActionType.PING:
            parsed_geofence = None
        else:
            # subscriptions and messages without a geofence are world-wide
            parsed_geofence = geofence_from_wkt(geofence)
        return cls(
            int(timestamp),
            Location(float(lat), float(lon)),
            kind,
            topic or None,
            parsed_geofence,
            int(payload_size) if payload_size else None,
        )

    def __eq__(self, other):
        if not isinstance(other, Action):
            return NotImplemented
        return (self.timestamp, self.location, self.kind, self.topic, self.geofence, self.payload_size) == \
            (other.timestamp, other.location, other.kind, other.topic, other.geofence, other.payload_size)

    def __repr__(self):
        return (f"Action(timestamp={self.timestamp}, location={self.location!r}, kind={self.kind.value}, "
                f"topic={self.topic!r}, geofence={self.geofence!r}, payload_size={self.payload_size})")


def ping(timestamp, location):
    return Action(timestamp, location, ActionType.PING)


def subscribe(timestamp, location, topic, geofence=WORLD):
    return Action(timestamp, location, ActionType.SUBSCRIBE, topic, geofence)


def publish(timestamp, location, topic, payload_size, geofence=WORLD):
    return Action(timestamp, location, ActionType.PUBLISH, topic, geofence, payload_size)
