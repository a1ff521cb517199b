# glucose_tracker/services/stats_service.py

from glucose_tracker.enums.app_enum import LevelStatusEnum
from glucose_tracker.mappers.record_mapper import record_to_dict
from glucose_tracker.services.record_service import RecordService
from glucose_tracker.utils.utils import to_utc_iso

# mmol/L bands shown on the dashboard
LOW_BELOW = 3.9
ELEVATED_ABOVE = 7.8
HIGH_ABOVE = 10.0

TREND_SIZE = 20
MAX_TZ_OFFSET_MINUTES = 14 * 60


def classify_level(level: float) -> LevelStatusEnum:
    if level < LOW_BELOW:
        return LevelStatusEnum.low
    if level > HIGH_ABOVE:
        return LevelStatusEnum.high
    if level > ELEVATED_ABOVE:
        return LevelStatusEnum.elevated
    return LevelStatusEnum.normal


def hourly_averages(records, tz_offset_minutes: int = 0):
    """
    Mean level per local hour of day across all records.

    Always returns 24 buckets; an hour with no readings has a null level.
    """
    buckets = {hour: [] for hour in range(24)}
    for r in records:
        # minute-of-day arithmetic stays valid at the edges of the datetime range
        t = r.measurement_time
        local_minute = t.hour * 60 + t.minute + tz_offset_minutes
        buckets[(local_minute // 60) % 24].append(r.level)

    result = []
    for hour in range(24):
        readings = buckets[hour]
        result.append({
            "hour": hour,
            "level": round(sum(readings) / len(readings), 1) if readings else None,
            "count": len(readings)
        })
    return result


class StatsService:

    @staticmethod
    def parse_tz_offset(raw):
        if raw is None or raw == "":
            return 0, None
        try:
            offset = int(raw)
        except (TypeError, ValueError):
            return None, "tzOffset must be an integer number of minutes"
        if abs(offset) > MAX_TZ_OFFSET_MINUTES:
            return None, "tzOffset is out of range"
        return offset, None

    @staticmethod
    def get_summary(guard, user_id: int, tz_offset_minutes: int = 0):
        # newest first
        records = RecordService.list_records(guard, user_id)

        if not records:
            return {
                "count": 0,
                "average": None,
                "min": None,
                "max": None,
                "latest": None,
                "trend": [],
                "hourly": hourly_averages([], tz_offset_minutes)
            }

        levels = [r.level for r in records]
        latest = records[0]

        return {
            "count": len(records),
            "average": round(sum(levels) / len(levels), 1),
            "min": min(levels),
            "max": max(levels),
            "latest": {
                **record_to_dict(latest),
                "status": classify_level(latest.level).value
            },
            "trend": [
                {"measurementTime": to_utc_iso(r.measurement_time), "level": r.level}
                for r in reversed(records[:TREND_SIZE])
            ],
            "hourly": hourly_averages(records, tz_offset_minutes)
        }
