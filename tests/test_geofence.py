import random
import unittest

from tracegen.config import Config, ConfigurationError
from tracegen.geofence import (WORLD, BrokerArea, Circle, World, broker_areas_from_config, contains,
                               geofence_from_wkt, intersects, validate_broker_areas)
from tracegen.location import DEG_TO_KM, Location


class TestCircle(unittest.TestCase):

    def test_contains(self):
        # 0.05 degrees of longitude on the equator are ~5.6km, 0.1 are ~11.1km
        c = Circle(Location(0, 0), 10)
        self.assertTrue(c.contains(Location(0, 0)), "center is inside")
        self.assertTrue(c.contains(Location(0, 0.05)), "point inside radius")
        self.assertFalse(c.contains(Location(0, 0.1)), "point outside radius")
        self.assertTrue(contains(c, Location(0.05, 0)), "module level helper")

    def test_contains_boundary(self):
        c = Circle(Location(0, 0), DEG_TO_KM)
        edge = Location(0, 0).location_in_distance(DEG_TO_KM * 0.999999, 90)
        self.assertTrue(c.contains(edge), "points on the rim belong to the circle")

    def test_intersects(self):
        a = Circle(Location(0, 0), 10)
        b = Circle(Location(0, 0.15), 10)  # ~16.7km apart
        c = Circle(Location(0, 0.2), 10)  # ~22.3km apart
        self.assertTrue(a.intersects(b))
        self.assertTrue(b.intersects(a), "commutativity")
        self.assertFalse(a.intersects(c))
        self.assertTrue(intersects(a, b))
        self.assertFalse(intersects(c, a))

    def test_radius_conversion(self):
        c = Circle.from_degrees(Location(10, 10), 2.1)
        self.assertAlmostEqual(c.radius_km, 2.1 * 111.32, 9)
        self.assertAlmostEqual(c.radius_deg, 2.1, 12)

    def test_equal_circles_hash_equally(self):
        a = Circle(Location(48.877366, 2.359708), 25.0)
        b = geofence_from_wkt(a.wkt)
        c = Circle(Location(48.877366, 2.359708), 0.12345649999999)
        d = Circle(Location(48.877366, 2.359708), 0.1234565)
        self.assertEqual(a, b)
        self.assertEqual(hash(a), hash(b), "WKT round trip keeps the hash")
        self.assertEqual(c, d)
        self.assertEqual(hash(c), hash(d), "radii that round apart still hash equally")
        self.assertEqual(len({a, b}), 1)

    def test_negative_radius(self):
        with self.assertRaises(ValueError):
            Circle(Location(0, 0), -1)

    def test_random_location_inside(self):
        rng = random.Random(1)
        for center in (Location(0, 0), Location(48.877366, 2.359708), Location(-75, 170)):
            c = Circle(center, 50)
            for _ in range(300):
                self.assertTrue(c.contains(c.random_location(rng)), f"sampled location inside circle around {center}")

    def test_random_location_zero_radius(self):
        c = Circle(Location(12.5, 42.0), 0)
        self.assertEqual(c.random_location(random.Random(3)), Location(12.5, 42.0))


class TestWorld(unittest.TestCase):

    def test_world(self):
        self.assertTrue(WORLD.contains(Location(89, -179)))
        self.assertTrue(WORLD.intersects(Circle(Location(0, 0), 1)))
        self.assertTrue(Circle(Location(0, 0), 1).intersects(WORLD))
        self.assertTrue(intersects(WORLD, WORLD))
        self.assertEqual(World(), WORLD, "all world geofences are equal")
        self.assertEqual(WORLD.wkt, "")

    def test_random_location(self):
        rng = random.Random(5)
        for _ in range(100):
            p = WORLD.random_location(rng)
            self.assertTrue(-90 <= p.lat <= 90)
            self.assertTrue(-180 <= p.lon <= 180)


class TestWkt(unittest.TestCase):

    def test_circle_wkt(self):
        c = Circle.from_degrees(Location(1.5, 2.5), 0.5)
        self.assertTrue(c.wkt.startswith("BUFFER (POINT (2.5 1.5), "), "longitude comes first")
        self.assertAlmostEqual(float(c.wkt[len("BUFFER (POINT (2.5 1.5), "):-1]), 0.5, 12, "radius in degrees")

    def test_round_trip(self):
        for c in (Circle(Location(48.877366, 2.359708), 25.0), Circle(Location(-33.5, -70.25), 0.5)):
            self.assertEqual(geofence_from_wkt(c.wkt), c)

    def test_world(self):
        self.assertIs(geofence_from_wkt(""), WORLD)
        self.assertIs(geofence_from_wkt("  "), WORLD)
        self.assertIs(geofence_from_wkt(None), WORLD)

    def test_invalid(self):
        with self.assertRaises(ValueError):
            geofence_from_wkt("POLYGON ((0 0, 1 1, 1 0, 0 0))")
        with self.assertRaises(ValueError):
            geofence_from_wkt("BUFFER (POINT (a b), c)")


class TestBrokerAreas(unittest.TestCase):

    def test_from_config(self):
        areas = broker_areas_from_config([
            {"name": "A", "lat": 1, "lon": 2, "radius": 10, "clients": 3, "machines": 2},
            {"name": "B", "lat": 40, "lon": 2, "radius_deg": 1.0},
            {"name": "C", "lat": 0, "lon": 0, "publishers": 4, "subscribers": 2},
        ])
        self.assertEqual([a.name for a in areas], ["A", "B", "C"])
        self.assertEqual(areas[0].geofence, Circle(Location(1, 2), 10))
        self.assertEqual((areas[0].clients, areas[0].machines), (3, 2))
        self.assertAlmostEqual(areas[1].geofence.radius_km, DEG_TO_KM, 9)
        self.assertEqual((areas[1].clients, areas[1].machines), (0, 1), "defaults")
        self.assertIs(areas[2].geofence, WORLD, "no radius means world-wide")
        self.assertEqual([areas[2].count(role) for role in ("client", "publisher", "subscriber")], [0, 4, 2])

    def test_default_brokers_are_valid(self):
        validate_broker_areas(broker_areas_from_config(Config().BROKERS))

    def test_disjoint(self):
        validate_broker_areas([
            Circle(Location(0, 0), 10),
            Circle(Location(0, 1), 10),
            Circle(Location(0, 2), 10),
        ])

    def test_single_overlap(self):
        # ~5.6km apart, a client near the middle would belong to both brokers
        with self.assertRaises(ConfigurationError):
            validate_broker_areas([
                BrokerArea("A", Circle(Location(0, 0), 10)),
                BrokerArea("B", Circle(Location(0, 0.05), 10)),
            ])

    def test_touching_areas(self):
        # centers 2 * 111.32km apart, radii sum up to a hair more
        with self.assertRaises(ConfigurationError, msg="rims that just meet count as overlap"):
            validate_broker_areas([
                Circle(Location(0, 0), DEG_TO_KM),
                Circle(Location(0, 2), DEG_TO_KM * 1.000001),
            ])

    def test_mutually_overlapping(self):
        with self.assertRaises(ConfigurationError):
            validate_broker_areas([
                BrokerArea("A", Circle(Location(0, 0), 100)),
                BrokerArea("B", Circle(Location(0, 0.5), 100)),
                BrokerArea("C", Circle(Location(0.5, 0.25), 100)),
            ])

    def test_overlapping(self):
        # the middle circle touches both neighbours
        with self.assertRaises(ConfigurationError):
            validate_broker_areas([
                BrokerArea("West", Circle(Location(0, 0), 100)),
                BrokerArea("Middle", Circle(Location(0, 1), 100)),
                BrokerArea("East", Circle(Location(0, 2), 100)),
            ])

    def test_world_with_two_others(self):
        with self.assertRaises(ConfigurationError):
            validate_broker_areas([WORLD, Circle(Location(0, 0), 10), Circle(Location(0, 5), 10)])


if __name__ == '__main__':
    unittest.main()
