import random
from enum import Enum

import simpy

from tracegen import action
from tracegen.config import VALIDATION_END
from tracegen.geofence import WORLD, Circle
from tracegen.mobility import MobilityModel

VERBOSE = False


def verboseprint(*args, **kwargs):
    if VERBOSE:
        print(*args, **kwargs)


class ClientState(Enum):
    INIT = "init"
    WARMUP = "warmup"
    RUNNING = "running"
    FINALIZING = "finalizing"
    DONE = "done"


# steps of a validation run: (what, window start ms, window end ms)
VALIDATION_SCHEDULE = (
    ("ping", 0, 5000),
    ("subscribe", 10000, 15000),
    ("publish", 20000, 55000),
    ("relocate", 60000, 65000),
    ("publish", 70000, 105000),
    ("subscribe", 110000, 115000),
    ("publish", 120000, VALIDATION_END),
)
VALIDATION_PUBLISHES = 5  # per publish window


def true_with_chance(rng, chance):
    """True with the given chance in percent (clamped to 0..100)."""
    chance = max(0, min(100, chance))
    return rng.randint(1, 100) <= chance


class TopicPolicy:
    """
    What a client does with one topic: how likely it publishes each cycle
    and which geofence radius (km) and payload size (bytes) it picks.
    A radius range of None means the topic is world-wide.
    """

    def __init__(self, topic, publication_probability=0, subscription_radius=None, message_radius=None,
                 payload_size=(0, 0), fixed_subscription=False):
        self.topic = topic
        self.publication_probability = publication_probability
        self.subscription_radius = subscription_radius
        self.message_radius = message_radius
        self.payload_size = payload_size
        self.fixed_subscription = fixed_subscription

    def subscription_geofence(self, location, rng):
        return sample_geofence(location, self.subscription_radius, rng)

    def message_geofence(self, location, rng):
        return sample_geofence(location, self.message_radius, rng)

    def sample_payload_size(self, rng):
        return rng.randint(int(self.payload_size[0]), int(self.payload_size[1]))

    def __repr__(self):
        return f"TopicPolicy(topic={self.topic!r}, publication_probability={self.publication_probability})"


def sample_geofence(location, radius_range, rng):
    if radius_range is None:
        return WORLD
    return Circle(location, rng.uniform(radius_range[0], radius_range[1]))


def topic_policies(conf):
    return [TopicPolicy(topic, **policy) for topic, policy in conf.TOPICS.items()]


class ActionTimeline:
    """
    Generates the trace of one client living in one broker area.

    The client runs as a simpy process, the simulation clock is the trace
    timestamp in ms. Co-timed actions of a cycle are spread over
    consecutive milliseconds: ping, then one subscribe per topic, then one
    publish per topic.

    The role decides what a cycle holds. A client pings, renews its
    subscriptions and publishes. A publisher only publishes, every publish
    time gap. A subscriber renews its subscriptions and pings when it
    moved.
    """

    def __init__(self, conf, broker, broker_areas, stats, rng=None, name="client", role="client"):
        self.conf = conf
        self.broker = broker
        self.broker_areas = broker_areas
        self.stats = stats
        self.rng = rng if rng is not None else random.Random()
        self.name = name
        self.role = role
        self.policies = topic_policies(conf)
        self.mobility = MobilityModel.from_config(conf, self.rng)

        self.state = ClientState.INIT
        self.actions = []
        self.location = None
        self.direction = None
        self.last_subscribed = None
        self.renewal_deadline = None
        self.fixed_geofences = {}

    def generate(self):
        env = simpy.Environment()
        if self.conf.SCHEDULE == "validation":
            env.process(self.run_validation(env))
        else:
            env.process(self.run(env))
        env.run()
        self.state = ClientState.DONE
        return self.actions

    def init_client(self):
        self.location = self.broker.geofence.random_location(self.rng)
        self.direction = self.rng.uniform(0.0, 360.0)
        verboseprint(f"Calculating actions for {self.role} {self.name} which travels in {self.direction:.1f}")
        for policy in self.policies:
            if policy.fixed_subscription:
                self.fixed_geofences[policy.topic] = policy.subscription_geofence(self.location, self.rng)

    def run(self, env):
        conf = self.conf
        span = conf.cycle_span()

        # INIT
        self.init_client()
        yield env.timeout(self.rng.randint(0, conf.WARMUP_TIME - span))

        self.state = ClientState.WARMUP
        self.emit_ping(env.now)
        if self.role != "publisher":
            self.emit_subscriptions(env.now)
        yield env.timeout(conf.WARMUP_TIME - env.now)

        self.state = ClientState.RUNNING
        while True:
            now = env.now
            step = self.sample_step()
            if self.role == "client":
                self.emit_ping(now)
                self.renew_subscriptions(now)
                self.emit_publications(now)
                self.move(step, conf.MOBILITY_PROBABILITY)
            elif self.role == "publisher":
                self.emit_publications(now)
                self.move(step, conf.PUBLISHER_MOBILITY_PROBABILITY)
            else:
                if self.move(step, conf.MOBILITY_PROBABILITY):
                    self.emit_ping(now)
                self.renew_subscriptions(now)

            # the next cycle must fit before the final ping
            if now + step + span > conf.RUNTIME:
                break
            yield env.timeout(step)

        self.state = ClientState.FINALIZING
        yield env.timeout(conf.RUNTIME - env.now)
        self.emit_ping(env.now)

    def run_validation(self, env):
        """
        Fixed schedule of a validation run: ping, subscribe, publish,
        relocate anywhere in the broker area, publish, subscribe again,
        publish. Every step happens at a random time inside its window.
        """
        conf = self.conf
        self.init_client()
        n = len(self.policies)

        for i, (what, start, end) in enumerate(VALIDATION_SCHEDULE):
            self.state = ClientState.WARMUP if i == 0 else ClientState.RUNNING
            if what == "publish":
                gap = (end - start) // VALIDATION_PUBLISHES
                for p in range(VALIDATION_PUBLISHES):
                    slot = start + p * gap
                    yield env.timeout(self.rng.randint(slot, slot + gap - n) - env.now)
                    self.emit_publications(env.now, offset=0)
                continue

            yield env.timeout(self.rng.randint(start, end - n) - env.now)
            if what == "ping":
                self.emit_ping(env.now)
            elif what == "subscribe":
                self.emit_subscriptions(env.now, offset=0)
            else:
                # the client may end up outside of its own subscription geofence
                self.location = self.broker.geofence.random_location(self.rng)
                self.emit_ping(env.now)

        self.state = ClientState.FINALIZING
        yield env.timeout(conf.RUNTIME - env.now)
        self.emit_ping(env.now)

    def sample_step(self):
        """time to the next cycle in ms"""
        conf = self.conf
        if self.role == "publisher":
            return self.rng.randint(conf.MIN_PUB_TIME_GAP, conf.MAX_PUB_TIME_GAP)
        if conf.MOBILITY_MODE == "speed":
            return self.rng.randint(conf.MIN_TRAVEL_TIME, conf.MAX_TRAVEL_TIME)
        return self.rng.randint(conf.MIN_TICK, conf.MAX_TICK)

    def renewal_due(self, now):
        conf = self.conf
        if conf.RENEWAL_DISTANCE is not None:
            if self.location.distance_km(self.last_subscribed) >= conf.RENEWAL_DISTANCE:
                return True
        if self.renewal_deadline is not None and now >= self.renewal_deadline:
            return True
        return False

    def renew_subscriptions(self, now):
        if self.renewal_due(now):
            verboseprint(f"Renewing subscription for {self.role} {self.name}")
            self.emit_subscriptions(now)

    def move(self, step, probability):
        """
        Advance the client with the given chance, step is the travel time
        in ms. Returns True when the client attempted to move.
        """
        conf = self.conf
        if not true_with_chance(self.rng, probability):
            return False
        if not conf.FIXED_DIRECTION:
            self.direction = self.rng.uniform(0.0, 360.0)
        if conf.MOBILITY_MODE == "speed":
            self.location = self.mobility.next_location_by_speed(
                self.broker.geofence, self.location, self.direction, step,
                conf.MIN_TRAVEL_SPEED, conf.MAX_TRAVEL_SPEED, self.stats)
        else:
            self.location = self.mobility.next_location_by_distance(
                self.broker.geofence, self.location, self.direction,
                conf.MIN_TRAVEL_DISTANCE, conf.MAX_TRAVEL_DISTANCE, self.stats)
        return True

    def emit_ping(self, now):
        self.stats.add_ping()
        self.actions.append(action.ping(now, self.location))

    def emit_subscriptions(self, now, offset=1):
        for i, policy in enumerate(self.policies):
            geofence = self.fixed_geofences.get(policy.topic)
            if geofence is None:
                geofence = policy.subscription_geofence(self.location, self.rng)
            self.stats.add_subscription_overlaps(geofence, self.broker_areas)
            self.stats.add_subscribe()
            self.actions.append(action.subscribe(now + offset + i, self.location, policy.topic, geofence))

        self.last_subscribed = self.location
        if self.conf.MIN_RENEWAL_TIME is not None:
            self.renewal_deadline = now + self.rng.randint(self.conf.MIN_RENEWAL_TIME, self.conf.MAX_RENEWAL_TIME)

    def emit_publications(self, now, offset=None):
        if offset is None:
            offset = 1 + len(self.policies)
        for i, policy in enumerate(self.policies):
            if not true_with_chance(self.rng, policy.publication_probability):
                continue
            geofence = policy.message_geofence(self.location, self.rng)
            payload_size = policy.sample_payload_size(self.rng)
            self.stats.add_message_overlaps(geofence, self.broker_areas)
            self.stats.add_publish(payload_size)
            self.actions.append(action.publish(now + offset + i, self.location, policy.topic, payload_size, geofence))
