"""Production analytics: rollups of entries by line, shift, model and day"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Optional
import logging

from config import analytics_config
from models import ProductionEntry, PENDING, APPROVED, REJECTED
from oee import calculate_oee, get_oee_category
from utils import date_key, days_ago

logger = logging.getLogger(__name__)


@dataclass
class GroupTotals:
    """Running sums for one group of entries"""
    entries: int = 0
    good_parts: int = 0
    spd_parts: int = 0
    rejects: int = 0
    target: int = 0
    loss_time: int = 0
    oee_values: List[float] = field(default_factory=list)

    def add(self, entry: ProductionEntry):
        self.entries += 1
        self.good_parts += entry.total_good_parts
        self.spd_parts += entry.total_spd_parts
        self.rejects += entry.total_rejects
        self.target += entry.total_target
        self.loss_time += entry.loss_time or 0

    @property
    def production(self) -> int:
        return self.good_parts + self.spd_parts + self.rejects

    @property
    def efficiency(self) -> int:
        # SPD parts are usable output
        return percentage(self.good_parts + self.spd_parts, self.production)

    @property
    def reject_rate(self) -> int:
        return percentage(self.rejects, self.production)

    @property
    def avg_loss_time(self) -> int:
        return round(self.loss_time / self.entries) if self.entries > 0 else 0


def percentage(part: float, whole: float) -> int:
    """Whole-number percentage, 0 when the denominator is not positive"""
    return round(part / whole * 100) if whole > 0 else 0


def entry_oee(entry: ProductionEntry):
    return calculate_oee(
        entry.available_time,
        entry.loss_time or 0,
        entry.line_capacity,
        entry.total_good_parts,
        entry.total_rejects
    )


def group_entries(
    entries: Iterable[ProductionEntry],
    key: Callable[[ProductionEntry], Any],
    with_oee: bool = False
) -> Dict[Any, GroupTotals]:
    """Reduce entries into totals per key, in first-seen key order"""
    groups: Dict[Any, GroupTotals] = {}
    for entry in entries:
        group_key = key(entry)
        if group_key not in groups:
            groups[group_key] = GroupTotals()
        groups[group_key].add(entry)
        if with_oee:
            groups[group_key].oee_values.append(entry_oee(entry).oee)
    return groups


def filter_approved_since(entries: Iterable[ProductionEntry], since: datetime) -> List[ProductionEntry]:
    """Approved entries created at or after `since`"""
    return [
        e for e in entries
        if e.status == APPROVED and e.created_at is not None and e.created_at >= since
    ]


def summarize_entries(entries: List[ProductionEntry]) -> Dict[str, int]:
    """Counts by approval status over every entry given"""
    total = len(entries)
    status_counts = {PENDING: 0, APPROVED: 0, REJECTED: 0}
    for entry in entries:
        if entry.status in status_counts:
            status_counts[entry.status] += 1

    return {
        "totalEntries": total,
        "pendingEntries": status_counts[PENDING],
        "approvedEntries": status_counts[APPROVED],
        "rejectedEntries": status_counts[REJECTED],
        "approvalRate": percentage(status_counts[APPROVED], total)
    }


def line_performance(entries: Iterable[ProductionEntry]) -> List[Dict[str, Any]]:
    results = []
    for line, totals in group_entries(entries, lambda e: e.line, with_oee=True).items():
        results.append({
            "line": line,
            "totalEntries": totals.entries,
            "totalGoodParts": totals.good_parts,
            "totalSpdParts": totals.spd_parts,
            "totalRejects": totals.rejects,
            "totalProduction": totals.production,
            "totalTarget": totals.target,
            "efficiency": totals.efficiency,
            "rejectRate": totals.reject_rate,
            "targetAchievement": percentage(totals.production, totals.target),
            "avgLossTime": totals.avg_loss_time,
            "averageOee": round(sum(totals.oee_values) / len(totals.oee_values), 2)
        })
    return results


def shift_analytics(entries: Iterable[ProductionEntry]) -> List[Dict[str, Any]]:
    return [
        {
            "shift": shift,
            "totalProduction": totals.production,
            "totalGood": totals.good_parts,
            "totalSpd": totals.spd_parts,
            "totalRejects": totals.rejects,
            "efficiency": totals.efficiency,
            "rejectRate": totals.reject_rate,
            "entries": totals.entries,
            "avgLossTime": totals.avg_loss_time
        }
        for shift, totals in group_entries(entries, lambda e: e.shift).items()
    ]


def model_performance(entries: Iterable[ProductionEntry]) -> List[Dict[str, Any]]:
    return [
        {
            "model": model,
            "totalProduction": totals.production,
            "totalGood": totals.good_parts,
            "totalSpd": totals.spd_parts,
            "totalRejects": totals.rejects,
            "efficiency": totals.efficiency,
            # A group always has at least one entry
            "averageRejects": round(totals.rejects / totals.entries),
            "entries": totals.entries
        }
        for model, totals in group_entries(entries, lambda e: e.model).items()
    ]


def production_type_analytics(entries: Iterable[ProductionEntry]) -> List[Dict[str, Any]]:
    typed = [e for e in entries if e.production_type is not None]
    return [
        {
            "productionType": production_type,
            "entries": totals.entries,
            "totalProduction": totals.production,
            "totalGood": totals.good_parts,
            "totalSpd": totals.spd_parts,
            "totalRejects": totals.rejects,
            "efficiency": totals.efficiency,
            "rejectRate": totals.reject_rate
        }
        for production_type, totals in group_entries(typed, lambda e: e.production_type).items()
    ]


def defect_type_analytics(entries: Iterable[ProductionEntry], total_entries: int) -> List[Dict[str, Any]]:
    """Defect type counts as a share of `total_entries`"""
    typed = [e for e in entries if e.defect_type is not None]
    return [
        {
            "defectType": defect_type,
            "count": totals.entries,
            "percentage": percentage(totals.entries, total_entries)
        }
        for defect_type, totals in group_entries(typed, lambda e: e.defect_type).items()
    ]


def daily_trend(entries: Iterable[ProductionEntry]) -> List[Dict[str, Any]]:
    """Per-day production, ascending by ISO date"""
    daily = group_entries(entries, lambda e: date_key(e.date))
    return [
        {
            "date": day,
            "goodParts": totals.good_parts,
            "spdParts": totals.spd_parts,
            "rejects": totals.rejects,
            "total": totals.production,
            "efficiency": totals.efficiency
        }
        for day, totals in sorted(daily.items(), key=lambda item: item[0])
    ]


def entry_metrics(entry: ProductionEntry) -> Dict[str, Any]:
    """Detail metrics for a single entry"""
    result = entry_oee(entry)
    return {
        "id": entry.id,
        "oee": result.to_dict(),
        "category": get_oee_category(result.oee).to_dict(),
        "totalGood": entry.total_good_parts,
        "totalSpd": entry.total_spd_parts,
        "totalRejects": entry.total_rejects,
        "totalProduction": entry.total_production,
        "totalTarget": entry.total_target,
        "efficiency": percentage(entry.total_good_parts + entry.total_spd_parts, entry.total_production),
        "rejectRate": percentage(entry.total_rejects, entry.total_production),
        "targetAchievement": percentage(entry.total_production, entry.total_target)
    }


def build_analytics(entries: List[ProductionEntry], now: Optional[datetime] = None) -> Dict[str, Any]:
    """
    Full analytics payload for the supervisor dashboard.

    The summary covers every entry; categorical breakdowns cover approved
    entries created inside the analytics window, the daily trend approved
    entries inside the shorter trend window.

    Args:
        entries: All entries known to the store
        now: Reference time for the trailing windows, defaults to now

    Returns:
        Dictionary of summary, breakdown lists and daily trend
    """
    now = now or datetime.now()
    summary = summarize_entries(entries)
    recent = filter_approved_since(entries, days_ago(analytics_config.window_days, now))
    trend = filter_approved_since(entries, days_ago(analytics_config.trend_days, now))

    logger.info(
        f"Building analytics over {summary['totalEntries']} entries "
        f"({len(recent)} approved in {analytics_config.window_days}d window)"
    )

    return {
        "summary": summary,
        "linePerformance": line_performance(recent),
        "shiftAnalytics": shift_analytics(recent),
        "modelPerformance": model_performance(recent),
        "productionTypeAnalytics": production_type_analytics(recent),
        "defectTypeAnalytics": defect_type_analytics(recent, summary["totalEntries"]),
        "dailyTrend": daily_trend(trend)
    }
