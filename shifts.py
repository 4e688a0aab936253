"""Shift schedules and current shift/hour resolution"""
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional

MINUTES_PER_DAY = 1440


@dataclass(frozen=True)
class ShiftConfig:
    name: str
    start_time: str
    end_time: str
    hours: List[str]


SHIFT_SCHEDULES: Dict[str, ShiftConfig] = {
    'MORNING': ShiftConfig(
        name='Morning Shift',
        start_time='07:00',
        end_time='15:30',
        hours=[
            "07:00-08:00", "08:00-09:00", "09:00-10:00", "10:00-11:00",
            "11:30-12:30", "12:30-13:30", "13:30-14:30", "14:30-15:30"
        ]
    ),
    'AFTERNOON': ShiftConfig(
        name='Afternoon Shift',
        start_time='15:30',
        end_time='23:30',
        hours=[
            "15:30-16:30", "16:30-17:30", "17:30-18:30", "18:30-19:30",
            "19:30-20:30", "20:30-21:30", "21:30-22:30", "22:30-23:30"
        ]
    ),
    'EVENING': ShiftConfig(
        name='Evening Shift',
        start_time='23:30',
        end_time='07:00',
        hours=[
            "23:30-00:30", "00:30-01:30", "01:30-02:30", "02:30-03:30",
            "03:30-04:30", "04:30-05:30", "05:30-06:30", "06:30-07:00"
        ]
    ),
}

MORNING_START = 7 * 60          # 07:00
AFTERNOON_START = 15 * 60 + 30  # 15:30
EVENING_START = 23 * 60 + 30    # 23:30


def _to_minutes(hhmm: str) -> int:
    hours, minutes = hhmm.split(':')
    return int(hours) * 60 + int(minutes)


def _minute_of_day(now: Optional[datetime]) -> int:
    now = now or datetime.now()
    return now.hour * 60 + now.minute


def get_current_shift(now: Optional[datetime] = None) -> str:
    """Shift key for the given time; the evening shift crosses midnight"""
    current = _minute_of_day(now)
    if MORNING_START <= current < AFTERNOON_START:
        return 'MORNING'
    if AFTERNOON_START <= current < EVENING_START:
        return 'AFTERNOON'
    return 'EVENING'


def get_current_hour(shift: str, now: Optional[datetime] = None) -> str:
    """
    Hour slot of `shift` containing the given time.

    Falls back to the shift's first slot when no slot matches (e.g. during
    the morning break) and returns "" for an unknown shift.
    """
    shift_config = SHIFT_SCHEDULES.get(shift)
    if not shift_config:
        return ''

    current = _minute_of_day(now)
    for slot in shift_config.hours:
        start_str, end_str = slot.split('-')
        start, end = _to_minutes(start_str), _to_minutes(end_str)

        if shift == 'EVENING':
            # Shift minutes past midnight onto the next day
            if start < EVENING_START:
                start += MINUTES_PER_DAY
            if end <= MORNING_START:
                end += MINUTES_PER_DAY
            adjusted = current if current >= EVENING_START else current + MINUTES_PER_DAY
            if start <= adjusted < end:
                return slot
        elif start <= current < end:
            return slot

    return shift_config.hours[0]


def get_next_hour(shift: str, current_hour: str) -> str:
    """Slot after `current_hour`, wrapping to the first slot"""
    shift_config = SHIFT_SCHEDULES.get(shift)
    if not shift_config:
        return ''

    try:
        index = shift_config.hours.index(current_hour)
    except ValueError:
        return shift_config.hours[0]
    if index == len(shift_config.hours) - 1:
        return shift_config.hours[0]
    return shift_config.hours[index + 1]


def get_time_remaining(shift: str, now: Optional[datetime] = None) -> str:
    """Time left until the end of `shift`, formatted '{h}h {m}m'"""
    shift_config = SHIFT_SCHEDULES.get(shift)
    if not shift_config:
        return ''
    remaining = (_to_minutes(shift_config.end_time) - _minute_of_day(now)) % MINUTES_PER_DAY
    return f"{remaining // 60}h {remaining % 60}m"


def get_shift_info(now: Optional[datetime] = None) -> Dict[str, str]:
    now = now or datetime.now()
    shift = get_current_shift(now)
    current_hour = get_current_hour(shift, now)
    return {
        "currentShift": shift,
        "currentHour": current_hour,
        "nextHour": get_next_hour(shift, current_hour),
        "shiftName": SHIFT_SCHEDULES[shift].name,
        "timeRemaining": get_time_remaining(shift, now)
    }
