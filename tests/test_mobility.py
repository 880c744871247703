import random
import unittest

from tracegen.config import Config
from tracegen.geofence import WORLD, Circle
from tracegen.location import Location
from tracegen.mobility import MobilityModel
from tracegen.stats import Stats


class TestMobilityModel(unittest.TestCase):

    def test_gives_up_in_degenerate_area(self):
        # no candidate 1-2km away can ever land in a circle of radius 0
        area = Circle(Location(0, 0), 0.0)
        start = Location(0, 0)
        stats = Stats()
        model = MobilityModel(random.Random(44))

        end = model.next_location_by_distance(area, start, 90, 1.0, 2.0, stats)

        self.assertEqual(end, start, "client stays where it is")
        self.assertEqual(model.attempts, 32, "all attempts are used up")
        self.assertEqual(stats.distance_km, 0.0, "no distance travelled")

    def test_stays_inside_area(self):
        area = Circle(Location(0, 0), 5.0)
        location = Location(0, 0)
        stats = Stats()
        model = MobilityModel(random.Random(44))

        accepted = 0
        for _ in range(1000):
            following = model.next_location_by_distance(area, location, 90, 1.0, 2.0, stats)
            self.assertLessEqual(model.attempts, 32, "bounded number of attempts")
            self.assertTrue(area.contains(following), "client never leaves its broker area")
            if following != location:
                accepted += 1
                self.assertAlmostEqual(location.distance_km(following), 1.5, delta=0.5 + 1e-9)
            location = following

        self.assertGreater(accepted, 0)
        mean = stats.distance_km / accepted
        self.assertGreaterEqual(mean, 1.0)
        self.assertLessEqual(mean, 2.0)

    def test_first_attempts_follow_direction(self):
        start = Location(0, 0)
        model = MobilityModel(random.Random(7))
        for _ in range(50):
            end = model.next_location_by_distance(WORLD, start, 90, 1.0, 2.0)
            self.assertEqual(model.attempts, 1, "first candidate is always accepted in a world-wide area")
            bearing = start.bearing_to(end)
            self.assertGreaterEqual(bearing, 80 - 1e-6)
            self.assertLessEqual(bearing, 100 + 1e-6)

    def test_reverses_at_border(self):
        # heading east from the eastern rim only works by turning around
        area = Circle(Location(0, 0), 5.0)
        start = Location(0, 0).location_in_distance(4.9, 90)
        model = MobilityModel(random.Random(11))

        end = model.next_location_by_distance(area, start, 90, 1.0, 2.0)

        self.assertGreater(model.attempts, 30, "direction attempts failed first")
        self.assertTrue(area.contains(end))
        self.assertLess(end.lon, start.lon, "client moved west")

    def test_speed_based_distance(self):
        start = Location(10, 10)
        stats = Stats()
        model = MobilityModel(random.Random(3))

        # 5 km/h for one hour
        end = model.next_location_by_speed(WORLD, start, 0, 3600000, 5, 5, stats)

        self.assertAlmostEqual(stats.distance_km, 5.0, 9)
        self.assertAlmostEqual(start.distance_km(end), 5.0, 6)

    def test_from_config(self):
        conf = Config()
        conf.DIRECTION_JITTER = 5.0
        conf.REVERSE_AFTER = 10
        conf.GIVE_UP_AFTER = 12
        model = MobilityModel.from_config(conf, random.Random(1))
        self.assertEqual((model.jitter, model.reverse_after, model.give_up_after), (5.0, 10, 12))

        model.next_location_by_distance(Circle(Location(0, 0), 0.0), Location(0, 0), 0, 1.0, 1.0)
        self.assertEqual(model.attempts, 12)


if __name__ == '__main__':
    unittest.main()
