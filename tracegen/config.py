import os

import yaml


class ConfigurationError(ValueError):
    """A scenario that cannot be generated. Raised before any client is processed."""


# attributes written by to_dict and accepted from YAML files
FIELDS = (
    "NAME", "SEED", "OUT_DIR", "BROKERS", "SCHEDULE",
    "WARMUP_TIME", "RUNTIME",
    "MOBILITY_MODE", "MIN_TRAVEL_SPEED", "MAX_TRAVEL_SPEED", "MIN_TRAVEL_TIME", "MAX_TRAVEL_TIME",
    "MIN_TRAVEL_DISTANCE", "MAX_TRAVEL_DISTANCE", "MIN_TICK", "MAX_TICK",
    "MOBILITY_PROBABILITY", "FIXED_DIRECTION",
    "MIN_PUB_TIME_GAP", "MAX_PUB_TIME_GAP", "PUBLISHER_MOBILITY_PROBABILITY",
    "RENEWAL_DISTANCE", "MIN_RENEWAL_TIME", "MAX_RENEWAL_TIME",
    "TOPICS",
    "DIRECTION_JITTER", "REVERSE_AFTER", "GIVE_UP_AFTER",
    "PLOT", "VERBOSE",
)

MOBILITY_MODES = ("speed", "distance")
SCHEDULES = ("cycles", "validation")

# client role -> key of its count in a broker entry
ROLES = {
    "client": "clients",
    "publisher": "publishers",
    "subscriber": "subscribers",
}

TOPIC_KEYS = ("publication_probability", "subscription_radius", "message_radius", "payload_size", "fixed_subscription")

# last publish window of the validation schedule ends here (ms)
VALIDATION_END = 155000


class Config:
    def __init__(self):
        self.NAME = "default"
        self.SEED = 44
        self.OUT_DIR = "out"

        ### TIME ###
        self.ONE_SEC_INTERVAL = 1000
        self.ONE_MIN_INTERVAL = 60 * self.ONE_SEC_INTERVAL
        self.ONE_HR_INTERVAL = 60 * self.ONE_MIN_INTERVAL
        self.WARMUP_TIME = 5 * self.ONE_SEC_INTERVAL  # ms, initial actions happen before this
        self.RUNTIME = 15 * self.ONE_MIN_INTERVAL  # ms, final ping happens exactly here

        # cycles: ping/subscribe/publish loop, validation: fixed schedule of a broker validation run
        self.SCHEDULE = "cycles"

        ### BROKERS ###
        # radius in km, or radius_deg for values given in degrees
        # clients ping, subscribe and publish; optional publishers/subscribers counts add pure sensors and listeners
        self.BROKERS = [
            {"name": "Columbus", "lat": 39.961332, "lon": -82.999083, "radius_deg": 5.0, "clients": 10, "machines": 1},
            {"name": "Frankfurt", "lat": 50.106732, "lon": 8.663124, "radius_deg": 2.1, "clients": 10, "machines": 1},
            {"name": "Paris", "lat": 48.877366, "lon": 2.359708, "radius_deg": 2.1, "clients": 10, "machines": 1},
        ]

        ### MOBILITY ###
        # speed: distance = speed * travel time, clock advances by the travel time
        # distance: distance sampled directly, clock advances by a tick
        self.MOBILITY_MODE = "speed"
        self.MIN_TRAVEL_SPEED = 2  # km/h
        self.MAX_TRAVEL_SPEED = 8  # km/h
        self.MIN_TRAVEL_TIME = 5 * self.ONE_SEC_INTERVAL  # ms
        self.MAX_TRAVEL_TIME = 30 * self.ONE_SEC_INTERVAL  # ms
        self.MIN_TRAVEL_DISTANCE = 1.0  # km
        self.MAX_TRAVEL_DISTANCE = 2.0  # km
        self.MIN_TICK = 3 * self.ONE_SEC_INTERVAL  # ms
        self.MAX_TICK = 12 * self.ONE_SEC_INTERVAL  # ms
        self.MOBILITY_PROBABILITY = 100  # %
        self.FIXED_DIRECTION = True
        self.DIRECTION_JITTER = 10.0  # degrees either side of the client direction
        self.REVERSE_AFTER = 30  # attempts before heading the opposite way
        self.GIVE_UP_AFTER = 32  # attempts before staying where we are

        ### PUBLISHERS ###
        self.MIN_PUB_TIME_GAP = 2 * self.ONE_SEC_INTERVAL  # ms between two publish rounds
        self.MAX_PUB_TIME_GAP = 15 * self.ONE_SEC_INTERVAL
        self.PUBLISHER_MOBILITY_PROBABILITY = 0  # %

        ### SUBSCRIPTION RENEWAL ###
        self.RENEWAL_DISTANCE = 0.05  # km, None disables
        self.MIN_RENEWAL_TIME = None  # ms, None disables
        self.MAX_RENEWAL_TIME = None

        ### CONTENT ###
        # topic -> policy; radius ranges in km, None means world-wide
        self.TOPICS = {
            "data": {
                "publication_probability": 50,
                "subscription_radius": (1.0, 1.0),
                "message_radius": (1.0, 1.0),
                "payload_size": (20, 20),
                "fixed_subscription": False,
            },
        }

        self.PLOT = False
        self.VERBOSE = False

    def validate(self):
        """
        Normalize and check the scenario. Probabilities are clamped to
        [0, 100], every (min, max) pair must be ordered.
        """
        if self.MOBILITY_MODE not in MOBILITY_MODES:
            raise ConfigurationError(f"Unknown mobility mode {self.MOBILITY_MODE!r}, must be one of: {', '.join(MOBILITY_MODES)}")
        if self.SCHEDULE not in SCHEDULES:
            raise ConfigurationError(f"Unknown schedule {self.SCHEDULE!r}, must be one of: {', '.join(SCHEDULES)}")
        if not self.BROKERS:
            raise ConfigurationError("At least one broker area is needed")
        for b in self.BROKERS:
            for key in ("name", "lat", "lon"):
                if key not in b:
                    raise ConfigurationError(f"Broker entry {b} is missing {key!r}")
            for count in ROLES.values():
                if b.get(count, 0) < 0:
                    raise ConfigurationError(f"Broker {b['name']} has a negative number of {count}")
            for key in ("radius", "radius_deg"):
                if b.get(key) is not None and b[key] < 0:
                    raise ConfigurationError(f"Broker {b['name']} has a negative {key}")
            if b.get("machines", 1) < 1:
                raise ConfigurationError(f"Broker {b['name']} needs at least one workload machine")
            if self.SCHEDULE == "validation" and (b.get("publishers", 0) or b.get("subscribers", 0)):
                raise ConfigurationError("The validation schedule only knows clients, not publishers or subscribers")

        self.MOBILITY_PROBABILITY = clamp_probability(self.MOBILITY_PROBABILITY)
        self.PUBLISHER_MOBILITY_PROBABILITY = clamp_probability(self.PUBLISHER_MOBILITY_PROBABILITY)
        check_range("travel speed", self.MIN_TRAVEL_SPEED, self.MAX_TRAVEL_SPEED)
        check_range("travel time", self.MIN_TRAVEL_TIME, self.MAX_TRAVEL_TIME)
        check_range("travel distance", self.MIN_TRAVEL_DISTANCE, self.MAX_TRAVEL_DISTANCE)
        check_range("tick", self.MIN_TICK, self.MAX_TICK)
        check_range("publish time gap", self.MIN_PUB_TIME_GAP, self.MAX_PUB_TIME_GAP)
        if self.MIN_RENEWAL_TIME is not None or self.MAX_RENEWAL_TIME is not None:
            check_range("renewal time", self.MIN_RENEWAL_TIME, self.MAX_RENEWAL_TIME)
            if self.MIN_RENEWAL_TIME <= 0:
                raise ConfigurationError("Renewal time must be positive")
        if self.GIVE_UP_AFTER < self.REVERSE_AFTER:
            raise ConfigurationError("GIVE_UP_AFTER must not be smaller than REVERSE_AFTER")

        if not self.TOPICS:
            raise ConfigurationError("At least one topic is needed")
        for topic, policy in self.TOPICS.items():
            unknown = [key for key in policy if key not in TOPIC_KEYS]
            if unknown:
                raise ConfigurationError(f"Unknown key(s) {', '.join(map(repr, unknown))} in topic {topic!r}, "
                                         f"must be one of: {', '.join(TOPIC_KEYS)}")
            policy["publication_probability"] = clamp_probability(policy.get("publication_probability", 0))
            for key in ("subscription_radius", "message_radius", "payload_size"):
                value = policy.get(key)
                if value is not None:
                    check_range(f"{topic} {key}", value[0], value[1])
                    if value[0] < 0:
                        raise ConfigurationError(f"{topic} {key} must not be negative")

        # every cycle needs room for its co-timed actions
        step = self.MIN_TRAVEL_TIME if self.MOBILITY_MODE == "speed" else self.MIN_TICK
        if step < self.cycle_span():
            raise ConfigurationError(f"Time step of {step}ms cannot hold {self.cycle_span()}ms of co-timed actions")
        if self.role_count("publisher") and self.MIN_PUB_TIME_GAP < self.cycle_span():
            raise ConfigurationError(f"Publish time gap of {self.MIN_PUB_TIME_GAP}ms cannot hold {self.cycle_span()}ms of co-timed actions")
        if self.WARMUP_TIME < self.cycle_span():
            raise ConfigurationError(f"Warmup of {self.WARMUP_TIME}ms cannot hold the initial actions")
        if self.RUNTIME < self.WARMUP_TIME + self.cycle_span():
            raise ConfigurationError("Runtime must leave room for at least one cycle after the warmup")
        if self.SCHEDULE == "validation" and self.RUNTIME < VALIDATION_END:
            raise ConfigurationError(f"The validation schedule needs a runtime of at least {VALIDATION_END}ms")
        return self

    def cycle_span(self):
        """ms needed by one ping plus a subscribe and a publish per topic"""
        return 1 + 2 * len(self.TOPICS)

    def role_count(self, role):
        return sum(b.get(ROLES[role], 0) for b in self.BROKERS)

    def total_clients(self):
        return sum(self.role_count(role) for role in ROLES)

    def to_dict(self):
        d = {}
        for field in FIELDS:
            value = getattr(self, field)
            if field == "TOPICS":
                value = {t: {k: list(v) if isinstance(v, tuple) else v for k, v in p.items()} for t, p in value.items()}
            elif field == "BROKERS":
                value = [dict(b) for b in value]
            d[field] = value
        return d

    def update(self, values):
        for key, value in values.items():
            if key not in FIELDS:
                raise ConfigurationError(f"Unknown configuration key {key!r}")
            if key == "TOPICS":
                value = {t: {k: tuple(v) if isinstance(v, list) else v for k, v in p.items()} for t, p in value.items()}
            setattr(self, key, value)
        return self


def clamp_probability(chance):
    if chance > 100:
        return 100
    if chance < 0:
        return 0
    return chance


def check_range(name, low, high):
    if low is None or high is None:
        raise ConfigurationError(f"Both bounds of the {name} range are needed")
    if low > high:
        raise ConfigurationError(f"Invalid {name} range: minimum {low} is larger than maximum {high}")


def load_config(path, scenarios=None):
    """
    Read a YAML scenario file. The optional SCENARIO key names the built-in
    scenario it starts from, all other keys override its attributes.
    """
    if scenarios is None:
        from tracegen.scenarios import SCENARIOS
        scenarios = SCENARIOS
    with open(path, 'r') as file:
        values = yaml.load(file, Loader=yaml.FullLoader) or {}
    base = values.pop("SCENARIO", None)
    if base is None:
        conf = Config()
    elif base in scenarios:
        conf = scenarios[base]()
    else:
        raise ConfigurationError(f"Unknown scenario {base!r} in {os.path.basename(path)}")
    return conf.update(values)


def dump_config(conf, path):
    with open(path, 'w') as file:
        yaml.dump(conf.to_dict(), file, sort_keys=False)
