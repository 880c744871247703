import unittest

from tracegen.location import DEG_TO_KM, Location, deg_to_km, km_to_deg, normalize_lon


class TestLocationClass(unittest.TestCase):

    def test_constructor(self):
        p = Location(1, 2)

        self.assertEqual(p.lat, 1.0, "sanity check constructor")
        self.assertEqual(p.lon, 2.0, "sanity check constructor")
        self.assertIsInstance(p.lat, float, "coordinates are stored as floats")

    def test_distance(self):
        message = "sanity-checking our great-circle distance calculation"
        # one degree of arc is DEG_TO_KM on the equator, in both directions
        p1 = Location(0, 0)
        p2 = Location(0, 1)
        self.assertAlmostEqual(p1.distance_km(p2), DEG_TO_KM, 6, message)
        self.assertAlmostEqual(p2.distance_km(p1), DEG_TO_KM, 6, message+", and commutativity")

        p3 = Location(1, 0)
        self.assertAlmostEqual(p1.distance_km(p3), DEG_TO_KM, 6, message+" along a meridian")

        # a degree of longitude shrinks with the latitude
        p4 = Location(60, 0)
        p5 = Location(60, 1)
        self.assertLess(p4.distance_km(p5), DEG_TO_KM * 0.51, message+" at 60 degrees north")
        self.assertGreater(p4.distance_km(p5), DEG_TO_KM * 0.49, message+" at 60 degrees north")

        self.assertEqual(p1.distance_km(p1), 0.0, "distance to itself")

    def test_distance_antipodal(self):
        p1 = Location(0, 0)
        p2 = Location(0, 180)
        self.assertAlmostEqual(p1.distance_km(p2), 180 * DEG_TO_KM, 6, "half the circumference")

    def test_bearing(self):
        origin = Location(0, 0)
        self.assertAlmostEqual(origin.bearing_to(Location(1, 0)), 0.0, 6, "north")
        self.assertAlmostEqual(origin.bearing_to(Location(0, 1)), 90.0, 6, "east")
        self.assertAlmostEqual(origin.bearing_to(Location(-1, 0)), 180.0, 6, "south")
        self.assertAlmostEqual(origin.bearing_to(Location(0, -1)), 270.0, 6, "west")

    def test_location_in_distance(self):
        start = Location(48.877366, 2.359708)
        for direction in (10, 45, 90, 200, 315):
            end = start.location_in_distance(10, direction)
            self.assertAlmostEqual(start.distance_km(end), 10, 6, f"travelled distance heading {direction}")
            self.assertAlmostEqual(start.bearing_to(end), direction % 360, 4, f"initial bearing heading {direction}")

        self.assertAlmostEqual(start.distance_km(start.location_in_distance(0, 123)), 0.0, 6, "no travel, no movement")

    def test_location_in_distance_across_antimeridian(self):
        start = Location(0, 179.99)
        end = start.location_in_distance(10, 90)
        self.assertLess(end.lon, -179.0, "longitude wraps around")
        self.assertAlmostEqual(start.distance_km(end), 10, 6)

    def test_normalize_lon(self):
        self.assertEqual(normalize_lon(0.0), 0.0)
        self.assertEqual(normalize_lon(190.0), -170.0)
        self.assertEqual(normalize_lon(-190.0), 170.0)
        self.assertEqual(normalize_lon(180.0), -180.0, "180 maps onto -180")
        self.assertEqual(normalize_lon(-180.0), -180.0)

    def test_unit_conversion(self):
        self.assertAlmostEqual(km_to_deg(DEG_TO_KM), 1.0, 12)
        self.assertAlmostEqual(deg_to_km(2.1), 2.1 * 111.32, 12)
        self.assertAlmostEqual(km_to_deg(deg_to_km(5.0)), 5.0, 12)

    def test_value_semantics(self):
        self.assertEqual(Location(1.5, 2.5), Location(1.5, 2.5))
        self.assertNotEqual(Location(1.5, 2.5), Location(2.5, 1.5))
        self.assertEqual(len({Location(1, 2), Location(1, 2)}), 1, "equal locations hash equally")


if __name__ == '__main__':
    unittest.main()
