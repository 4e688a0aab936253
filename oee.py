"""OEE (Overall Equipment Effectiveness) calculation"""
from dataclasses import dataclass, asdict
from typing import Any, Dict

from utils import parse_int

WORLD_CLASS_THRESHOLD = 85
GOOD_THRESHOLD = 60


@dataclass(frozen=True)
class OEEResult:
    """OEE factors as percentages rounded to 2 decimals"""
    availability: float
    performance: float
    quality: float
    oee: float

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class OEECategory:
    category: str
    color: str

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


ZERO_OEE = OEEResult(availability=0, performance=0, quality=0, oee=0)


def calculate_oee(
    available_time: Any,
    loss_time: int,
    line_capacity: Any,
    good_parts: int,
    rejects: int
) -> OEEResult:
    """
    Calculate OEE for a single production period.

    OEE = Availability * Performance * Quality

    Where:
    - Availability = (Available Time - Loss Time) / Available Time
    - Performance = Total Produced / ((Operating Time / 60) * Line Capacity)
    - Quality = Good Parts / Total Produced

    Args:
        available_time: Planned minutes, may be string-encoded ("480")
        loss_time: Minutes lost to stoppages
        line_capacity: Rated units per hour, may be string-encoded ("100")
        good_parts: Good units produced
        rejects: Rejected units produced

    Returns:
        OEEResult with every factor as a percentage. All zero when the
        available time or line capacity is not positive.
    """
    planned_time = parse_int(available_time)
    ideal_rate = parse_int(line_capacity)

    if planned_time <= 0 or ideal_rate <= 0:
        return ZERO_OEE

    # Not clamped: loss time above planned time gives negative availability
    operating_time = planned_time - loss_time
    availability = operating_time / planned_time * 100

    total_produced = good_parts + rejects
    ideal_production = (operating_time / 60) * ideal_rate
    performance = total_produced / ideal_production * 100 if ideal_production > 0 else 0

    quality = good_parts / total_produced * 100 if total_produced > 0 else 0

    # Factors are percentages, hence 100 ** 2
    oee = availability * performance * quality / 10000

    return OEEResult(
        availability=round(availability, 2),
        performance=round(performance, 2),
        quality=round(quality, 2),
        oee=round(oee, 2)
    )


def get_oee_category(oee: float) -> OEECategory:
    """Classify an OEE percentage"""
    if oee >= WORLD_CLASS_THRESHOLD:
        return OEECategory(category='World Class', color='text-green-600')
    if oee >= GOOD_THRESHOLD:
        return OEECategory(category='Good', color='text-blue-600')
    return OEECategory(category='Needs Improvement', color='text-red-600')
