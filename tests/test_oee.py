"""OEE calculator tests"""

import unittest
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from oee import calculate_oee, get_oee_category, OEEResult


class TestCalculateOEE(unittest.TestCase):
    """calculate_oee tests"""

    def test_full_hour_regression(self):
        result = calculate_oee("480", 0, "100", 480, 0)

        self.assertEqual(result, OEEResult(availability=100, performance=60, quality=100, oee=60))

    def test_with_losses_and_rejects(self):
        result = calculate_oee("480", 30, "100", 360, 40)

        self.assertEqual(result.availability, 93.75)
        self.assertEqual(result.performance, 53.33)
        self.assertEqual(result.quality, 90.0)
        self.assertEqual(result.oee, 45.0)

    def test_integer_and_string_inputs_agree(self):
        self.assertEqual(calculate_oee(480, 30, 100, 360, 40), calculate_oee("480", 30, "100", 360, 40))

    def test_unit_suffixes_are_ignored(self):
        self.assertEqual(calculate_oee("480 min", 30, "100 u/hr", 360, 40), calculate_oee(480, 30, 100, 360, 40))

    def test_oee_uses_unrounded_factors(self):
        available, loss, capacity, good, rejects = 60, 7, 55, 41, 3
        operating = available - loss
        availability = operating / available * 100
        performance = (good + rejects) / (operating / 60 * capacity) * 100
        quality = good / (good + rejects) * 100

        result = calculate_oee(available, loss, capacity, good, rejects)

        self.assertEqual(result.oee, round(availability * performance * quality / 10000, 2))
        self.assertEqual(result.availability, round(availability, 2))
        self.assertEqual(result.performance, round(performance, 2))
        self.assertEqual(result.quality, round(quality, 2))

    def test_zero_available_time_is_degenerate(self):
        for args in [(0, 0, 100, 50, 5), ("0", 10, "100", 0, 0), (0, 999, 1, 1, 1)]:
            self.assertEqual(calculate_oee(*args), OEEResult(0, 0, 0, 0))

    def test_zero_line_capacity_is_degenerate(self):
        for args in [(480, 0, 0, 50, 5), ("480", 30, "0", 360, 40), (60, 0, "", 1, 1)]:
            self.assertEqual(calculate_oee(*args), OEEResult(0, 0, 0, 0))

    def test_unparseable_inputs_count_as_zero(self):
        self.assertEqual(calculate_oee("abc", 0, "100", 10, 0), OEEResult(0, 0, 0, 0))
        self.assertEqual(calculate_oee(None, 0, None, 10, 0), OEEResult(0, 0, 0, 0))

    def test_negative_inputs_are_degenerate(self):
        self.assertEqual(calculate_oee("-60", 0, "100", 10, 0), OEEResult(0, 0, 0, 0))

    def test_no_production_gives_zero_quality(self):
        result = calculate_oee(60, 0, 100, 0, 0)

        self.assertEqual(result.availability, 100)
        self.assertEqual(result.performance, 0)
        self.assertEqual(result.quality, 0)
        self.assertEqual(result.oee, 0)

    def test_loss_time_above_available_time_is_not_clamped(self):
        result = calculate_oee(60, 90, 100, 10, 0)

        self.assertEqual(result.availability, -50.0)
        # Negative operating time gives no ideal production
        self.assertEqual(result.performance, 0)
        self.assertEqual(result.quality, 100)
        self.assertEqual(result.oee, 0)

    def test_total_loss_gives_zero_availability(self):
        result = calculate_oee(60, 60, 100, 0, 0)

        self.assertEqual(result.availability, 0)
        self.assertEqual(result.performance, 0)

    def test_over_capacity_performance_is_not_clamped(self):
        result = calculate_oee(60, 0, 100, 150, 0)

        self.assertEqual(result.performance, 150.0)
        self.assertEqual(result.oee, 150.0)

    def test_same_input_same_output(self):
        self.assertEqual(calculate_oee(420, 15, 120, 700, 12), calculate_oee(420, 15, 120, 700, 12))

    def test_to_dict(self):
        self.assertEqual(
            calculate_oee("480", 0, "100", 480, 0).to_dict(),
            {"availability": 100, "performance": 60, "quality": 100, "oee": 60}
        )


class TestOEECategory(unittest.TestCase):
    """get_oee_category tests"""

    def test_world_class(self):
        self.assertEqual(get_oee_category(85).category, "World Class")
        self.assertEqual(get_oee_category(99.5).category, "World Class")
        self.assertEqual(get_oee_category(85).color, "text-green-600")

    def test_good(self):
        self.assertEqual(get_oee_category(84.99).category, "Good")
        self.assertEqual(get_oee_category(60).category, "Good")
        self.assertEqual(get_oee_category(60).color, "text-blue-600")

    def test_needs_improvement(self):
        self.assertEqual(get_oee_category(59.99).category, "Needs Improvement")
        self.assertEqual(get_oee_category(0).category, "Needs Improvement")
        self.assertEqual(get_oee_category(-10).color, "text-red-600")


if __name__ == '__main__':
    unittest.main()
