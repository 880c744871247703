import random

VERBOSE = False


def verboseprint(*args, **kwargs):
    if VERBOSE:
        print(*args, **kwargs)


class MobilityModel:
    """
    Moves a client roughly along its direction while keeping it inside its
    broker area, by rejection sampling candidate locations.

    Attempts 1..reverse_after head in the client direction (jittered),
    attempts up to give_up_after head the opposite way. When all of them
    leave the area the client stays where it is for this step.
    """

    def __init__(self, rng=None, jitter=10.0, reverse_after=30, give_up_after=32):
        self.rng = rng if rng is not None else random.Random()
        self.jitter = jitter
        self.reverse_after = reverse_after
        self.give_up_after = give_up_after
        self.attempts = 0  # used by the last call

    @classmethod
    def from_config(cls, conf, rng):
        return cls(rng, conf.DIRECTION_JITTER, conf.REVERSE_AFTER, conf.GIVE_UP_AFTER)

    def next_location_by_distance(self, area, location, direction, min_distance, max_distance, stats=None):
        """travel distance (km) sampled uniformly from [min_distance, max_distance]"""
        def sample():
            distance = self.rng.uniform(min_distance, max_distance)
            verboseprint(f"Travelling for {distance * 1000:.0f}m.")
            return distance
        return self._resample(area, location, direction, sample, stats)

    def next_location_by_speed(self, area, location, direction, travel_time, min_speed, max_speed, stats=None):
        """travel distance is speed (km/h, sampled) times travel_time (ms)"""
        def sample():
            speed = self.rng.uniform(min_speed, max_speed)
            distance = speed * travel_time / 3600000
            verboseprint(f"Travelling with {speed:.1f} km/h for {travel_time}ms which leads to {distance * 1000:.0f}m.")
            return distance
        return self._resample(area, location, direction, sample, stats)

    def _resample(self, area, location, direction, sample_distance, stats):
        for attempt in range(1, self.give_up_after + 1):
            self.attempts = attempt
            distance = sample_distance()
            heading = self.rng.uniform(direction - self.jitter, direction + self.jitter)
            if attempt > self.reverse_after:
                heading += 180.0

            candidate = location.location_in_distance(distance, heading)
            if area.contains(candidate):
                if stats is not None:
                    stats.add_distance(distance)
                return candidate

        print(f"Warning: {location} cannot be used to find another location after {self.attempts} attempts.")
        return location
