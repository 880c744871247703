"""
Built-in scenarios. Each one only overrides the Config attributes it needs,
the role counts of its brokers and its SCHEDULE pick what a client does.
"""
from tracegen.config import VALIDATION_END, Config


class HikingConfig(Config):
    """
    Hikers travel on roughly straight routes, share road conditions with
    hikers close by and send text messages to a wider area.
    """

    def __init__(self):
        super().__init__()
        self.NAME = "hiking"

        for broker in self.BROKERS:
            broker["clients"] = 1200
            broker["machines"] = 3

        self.MOBILITY_MODE = "speed"
        self.MIN_TRAVEL_SPEED = 2  # km/h
        self.MAX_TRAVEL_SPEED = 8  # km/h
        self.MIN_TRAVEL_TIME = 5 * self.ONE_SEC_INTERVAL
        self.MAX_TRAVEL_TIME = 30 * self.ONE_SEC_INTERVAL
        self.WARMUP_TIME = 5 * self.ONE_SEC_INTERVAL
        self.RUNTIME = 15 * self.ONE_MIN_INTERVAL

        self.RENEWAL_DISTANCE = 0.05  # 50m

        self.TOPICS = {
            "road": {
                "publication_probability": 10,
                "subscription_radius": (0.5, 0.5),
                "message_radius": (0.5, 0.5),
                "payload_size": (100, 100),
                "fixed_subscription": False,
            },
            "text": {
                "publication_probability": 50,
                "subscription_radius": (1.0, 50.0),
                "message_radius": (1.0, 50.0),
                "payload_size": (10, 1000),
                # picked once at the start location of the hiker
                "fixed_subscription": True,
            },
        }


class OpenDataConfig(Config):
    """
    Environmental sensors publish world-wide readings, subscribers care
    about a region around them and rarely move.
    """

    def __init__(self):
        super().__init__()
        self.NAME = "open_data"

        for broker in self.BROKERS:
            broker["clients"] = 0
            broker["publishers"] = 3
            broker["subscribers"] = 2
            broker["machines"] = 3

        # subscribers
        self.MOBILITY_MODE = "distance"
        self.MIN_TRAVEL_DISTANCE = 20.0  # km
        self.MAX_TRAVEL_DISTANCE = 80.0  # km
        self.MIN_TICK = 3 * self.ONE_SEC_INTERVAL
        self.MAX_TICK = 12 * self.ONE_SEC_INTERVAL
        self.MOBILITY_PROBABILITY = 10
        self.FIXED_DIRECTION = False
        # sensors stay where they are
        self.MIN_PUB_TIME_GAP = 2 * self.ONE_SEC_INTERVAL
        self.MAX_PUB_TIME_GAP = 15 * self.ONE_SEC_INTERVAL
        self.PUBLISHER_MOBILITY_PROBABILITY = 0
        self.WARMUP_TIME = 3 * self.ONE_SEC_INTERVAL
        self.RUNTIME = 30 * self.ONE_MIN_INTERVAL

        self.RENEWAL_DISTANCE = None
        self.MIN_RENEWAL_TIME = 5 * self.ONE_MIN_INTERVAL
        self.MAX_RENEWAL_TIME = 15 * self.ONE_MIN_INTERVAL

        self.TOPICS = {
            "temperature": {
                "publication_probability": 100,
                "subscription_radius": (1.0, 500.0),
                "message_radius": None,
                "payload_size": (100, 100),
                "fixed_subscription": False,
            },
            "humidity": {
                "publication_probability": 100,
                "subscription_radius": (1.0, 500.0),
                "message_radius": None,
                "payload_size": (50, 150),
                "fixed_subscription": False,
            },
            "barometric_pressure": {
                "publication_probability": 100,
                "subscription_radius": (1.0, 500.0),
                "message_radius": None,
                "payload_size": (10, 75),
                "fixed_subscription": False,
            },
        }


class DataDistributionConfig(Config):
    """
    Sensors push readings and public announcements into an area around
    them, subscribers listen world-wide.
    """

    def __init__(self):
        super().__init__()
        self.NAME = "data_distribution"

        for broker in self.BROKERS:
            broker["clients"] = 0
            broker["publishers"] = 3
            broker["subscribers"] = 2
            broker["machines"] = 3

        # subscribers move on every tick
        self.MOBILITY_MODE = "distance"
        self.MIN_TRAVEL_DISTANCE = 1.0  # km
        self.MAX_TRAVEL_DISTANCE = 20.0  # km
        self.MIN_TICK = 3 * self.ONE_SEC_INTERVAL
        self.MAX_TICK = 12 * self.ONE_SEC_INTERVAL
        self.MOBILITY_PROBABILITY = 100
        self.FIXED_DIRECTION = False
        self.MIN_PUB_TIME_GAP = 2 * self.ONE_SEC_INTERVAL
        self.MAX_PUB_TIME_GAP = 70 * self.ONE_SEC_INTERVAL
        self.PUBLISHER_MOBILITY_PROBABILITY = 50
        self.WARMUP_TIME = 3 * self.ONE_SEC_INTERVAL
        self.RUNTIME = 30 * self.ONE_MIN_INTERVAL

        self.RENEWAL_DISTANCE = None
        self.MIN_RENEWAL_TIME = 5 * self.ONE_MIN_INTERVAL
        self.MAX_RENEWAL_TIME = 60 * self.ONE_MIN_INTERVAL

        self.TOPICS = {
            "temperature": {
                "publication_probability": 100,
                "subscription_radius": None,
                "message_radius": (1.0, 10.0),
                "payload_size": (100, 100),
                "fixed_subscription": False,
            },
            "humidity": {
                "publication_probability": 100,
                "subscription_radius": None,
                "message_radius": (1.0, 10.0),
                "payload_size": (50, 150),
                "fixed_subscription": False,
            },
            "public_announcement": {
                "publication_probability": 100,
                "subscription_radius": None,
                "message_radius": (40.0, 120.0),
                "payload_size": (10, 75),
                "fixed_subscription": False,
            },
        }


class MatchAllConfig(Config):
    """
    Every client subscribes to and publishes into the same 50km area, so
    every message matches every subscription.
    """

    def __init__(self):
        super().__init__()
        self.NAME = "match_all"

        self.BROKERS = [
            {"name": "MatchAll", "lat": 20.0, "lon": 20.0, "radius": 50.0, "clients": 100, "machines": 1},
        ]

        self.MOBILITY_MODE = "distance"
        self.MOBILITY_PROBABILITY = 0
        self.MIN_TICK = 1 * self.ONE_SEC_INTERVAL
        self.MAX_TICK = 5 * self.ONE_SEC_INTERVAL
        self.WARMUP_TIME = 5 * self.ONE_SEC_INTERVAL
        self.RUNTIME = 1 * self.ONE_MIN_INTERVAL

        self.RENEWAL_DISTANCE = None

        self.TOPICS = {
            "data": {
                "publication_probability": 100,
                "subscription_radius": (100.0, 100.0),
                "message_radius": (100.0, 100.0),
                "payload_size": (20, 20),
                "fixed_subscription": True,
            },
        }


class ValidationConfig(Config):
    """
    Broker validation run: every client pings, subscribes, publishes five
    times, jumps to another place, publishes five times, subscribes again
    and publishes five more times, all within 155 seconds.
    """

    def __init__(self):
        super().__init__()
        self.NAME = "validation"
        self.SCHEDULE = "validation"

        for broker in self.BROKERS:
            broker["clients"] = 200
            broker["machines"] = 1

        self.MOBILITY_PROBABILITY = 0
        self.RUNTIME = VALIDATION_END
        self.RENEWAL_DISTANCE = None

        self.TOPICS = {
            "data": {
                "publication_probability": 100,
                "subscription_radius": (50.0, 50.0),
                "message_radius": (50.0, 50.0),
                "payload_size": (20, 20),
                "fixed_subscription": False,
            },
        }


SCENARIOS = {
    "hiking": HikingConfig,
    "open_data": OpenDataConfig,
    "data_distribution": DataDistributionConfig,
    "match_all": MatchAllConfig,
    "validation": ValidationConfig,
}
