"""Shift schedule tests"""

import unittest
import datetime
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from shifts import (
    SHIFT_SCHEDULES, get_current_shift, get_current_hour, get_next_hour,
    get_time_remaining, get_shift_info
)


def at(hour, minute=0):
    return datetime.datetime(2024, 6, 20, hour, minute)


class TestCurrentShift(unittest.TestCase):

    def test_boundaries(self):
        self.assertEqual(get_current_shift(at(7, 0)), 'MORNING')
        self.assertEqual(get_current_shift(at(15, 29)), 'MORNING')
        self.assertEqual(get_current_shift(at(15, 30)), 'AFTERNOON')
        self.assertEqual(get_current_shift(at(23, 29)), 'AFTERNOON')
        self.assertEqual(get_current_shift(at(23, 30)), 'EVENING')
        self.assertEqual(get_current_shift(at(3, 0)), 'EVENING')
        self.assertEqual(get_current_shift(at(6, 59)), 'EVENING')


class TestCurrentHour(unittest.TestCase):

    def test_day_slots(self):
        self.assertEqual(get_current_hour('MORNING', at(8, 15)), "08:00-09:00")
        self.assertEqual(get_current_hour('AFTERNOON', at(22, 45)), "22:30-23:30")

    def test_break_falls_back_to_first_slot(self):
        self.assertEqual(get_current_hour('MORNING', at(11, 10)), "07:00-08:00")

    def test_evening_crosses_midnight(self):
        self.assertEqual(get_current_hour('EVENING', at(23, 45)), "23:30-00:30")
        self.assertEqual(get_current_hour('EVENING', at(0, 10)), "23:30-00:30")
        self.assertEqual(get_current_hour('EVENING', at(0, 30)), "00:30-01:30")
        self.assertEqual(get_current_hour('EVENING', at(6, 45)), "06:30-07:00")

    def test_unknown_shift(self):
        self.assertEqual(get_current_hour('NIGHT', at(1, 0)), '')


class TestNextHour(unittest.TestCase):

    def test_next(self):
        self.assertEqual(get_next_hour('MORNING', "10:00-11:00"), "11:30-12:30")

    def test_wraps_around(self):
        self.assertEqual(get_next_hour('EVENING', "06:30-07:00"), "23:30-00:30")
        self.assertEqual(get_next_hour('MORNING', "not a slot"), "07:00-08:00")

    def test_unknown_shift(self):
        self.assertEqual(get_next_hour('NIGHT', "07:00-08:00"), '')


class TestShiftInfo(unittest.TestCase):

    def test_time_remaining(self):
        self.assertEqual(get_time_remaining('MORNING', at(13, 15)), "2h 15m")
        self.assertEqual(get_time_remaining('EVENING', at(23, 45)), "7h 15m")
        self.assertEqual(get_time_remaining('EVENING', at(5, 0)), "2h 0m")

    def test_info(self):
        info = get_shift_info(at(16, 0))

        self.assertEqual(info, {
            "currentShift": "AFTERNOON",
            "currentHour": "15:30-16:30",
            "nextHour": "16:30-17:30",
            "shiftName": "Afternoon Shift",
            "timeRemaining": "7h 30m"
        })

    def test_every_shift_has_eight_slots(self):
        for shift in SHIFT_SCHEDULES.values():
            self.assertEqual(len(shift.hours), 8)


if __name__ == '__main__':
    unittest.main()
