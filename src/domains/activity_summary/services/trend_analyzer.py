"""Trend and velocity analysis over activity windows."""

from collections import defaultdict
from datetime import timedelta
from logging import Logger
from typing import Sequence

from domains.activity_summary.core.activity import Activity
from domains.activity_summary.core.processing_models import (
    DEFAULT_BURNDOWN_RATE,
    TimeRange,
    TimeRangeMetrics,
    TrendAnalysis,
    TrendDirection,
    VelocityMetrics,
)
from domains.activity_summary.core.scoring import (
    average,
    calculate_productivity_score,
    completion_rate,
)
from utils.logging.logging_manager import LogManager

WEEK = timedelta(days=7)
TREND_THRESHOLD = 0.1

# datetime.weekday() order
WEEKDAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
SEASONALITY_ORDER = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")


def trend_direction(first_half: float, second_half: float) -> TrendDirection:
    """Compare two means with a 10% tolerance band."""
    if second_half > first_half * (1 + TREND_THRESHOLD):
        return TrendDirection.INCREASING
    if second_half < first_half * (1 - TREND_THRESHOLD):
        return TrendDirection.DECREASING
    return TrendDirection.STABLE


def split_trend(values: Sequence[float]) -> TrendDirection:
    """Direction of a series, comparing the mean of its second half to its first half."""
    if len(values) < 2:
        return TrendDirection.STABLE
    midpoint = len(values) // 2
    return trend_direction(average(values[:midpoint]), average(values[midpoint:]))


class TrendAnalyzer:
    """Windowed trend detection, weekday seasonality and per-user velocity."""

    def __init__(self, logger: Logger | None = None):
        self.logger = logger or LogManager.get_instance().get_logger("TrendAnalyzer")

    def analyze_trends(
        self, activities: Sequence[Activity], time_ranges: Sequence[TimeRange] | None = None
    ) -> TrendAnalysis:
        """
        Build per-window metrics and classify the velocity/productivity direction.

        Args:
            activities: Filtered activities.
            time_ranges: Caller supplied windows; weekly windows are generated when empty.

        Returns:
            TrendAnalysis with one TimeRangeMetrics per window.
        """
        ranges = list(time_ranges) if time_ranges else self.generate_weekly_ranges(activities)
        self.logger.debug(
            f"Analyzing trends over {len(ranges)} windows "
            f"({'custom' if time_ranges else 'weekly'} ranges)"
        )

        range_metrics = [
            self.calculate_time_range_metrics(time_range, self.filter_by_time_range(activities, time_range))
            for time_range in ranges
        ]

        velocity_trend = split_trend([metrics.average_velocity for metrics in range_metrics])
        productivity_trend = split_trend([metrics.productivity_score for metrics in range_metrics])

        return TrendAnalysis(
            time_ranges=range_metrics,
            overall_trend=productivity_trend,
            velocity_trend=velocity_trend,
            productivity_trend=productivity_trend,
            seasonality=self.calculate_seasonality(activities),
        )

    @staticmethod
    def generate_weekly_ranges(activities: Sequence[Activity]) -> list[TimeRange]:
        """Consecutive 7-day windows from the earliest created to the latest updated date."""
        if not activities:
            return []

        start = min(activity.created for activity in activities)
        end = max(activity.updated for activity in activities)

        ranges = []
        current = start
        week_number = 1
        while current < end:
            week_end = min(current + WEEK, end)
            ranges.append(TimeRange(start=current, end=week_end, label=f"Week {week_number}"))
            current = week_end
            week_number += 1

        return ranges

    @staticmethod
    def filter_by_time_range(activities: Sequence[Activity], time_range: TimeRange) -> list[Activity]:
        """Activities created and updated inside the window, both ends inclusive.

        An activity can fall in several windows (or none) when its created/updated
        span crosses window boundaries.
        """
        return [
            activity
            for activity in activities
            if activity.created >= time_range.start and activity.updated <= time_range.end
        ]

    @staticmethod
    def calculate_time_range_metrics(time_range: TimeRange, activities: Sequence[Activity]) -> TimeRangeMetrics:
        completion_count = sum(1 for activity in activities if activity.is_completed)
        total_time_spent = sum(activity.time_spent for activity in activities)

        days = time_range.days
        velocity = completion_count / days if days > 0 else 0.0

        productivity_score = 0.0
        if activities:
            productivity_score = calculate_productivity_score(
                activities, completion_rate(completion_count, len(activities))
            )

        return TimeRangeMetrics(
            range=time_range,
            activity_count=len(activities),
            completion_count=completion_count,
            total_time_spent=total_time_spent,
            average_velocity=velocity,
            productivity_score=productivity_score,
        )

    @staticmethod
    def calculate_seasonality(activities: Sequence[Activity]) -> dict[str, float]:
        """Completed/total ratio per weekday of creation; weekdays without activities are omitted."""
        counts: dict[str, int] = defaultdict(int)
        completed: dict[str, int] = defaultdict(int)

        for activity in activities:
            day_name = WEEKDAY_NAMES[activity.created.weekday()]
            counts[day_name] += 1
            if activity.is_completed:
                completed[day_name] += 1

        return {day: completed[day] / counts[day] for day in SEASONALITY_ORDER if counts[day] > 0}

    def calculate_velocity(
        self,
        activities: Sequence[Activity],
        burndown_rate: float = DEFAULT_BURNDOWN_RATE,
        velocity_trend: TrendDirection | str = TrendDirection.STABLE,
    ) -> VelocityMetrics:
        """
        Completions per day for every user over that user's own created-to-updated span.

        Users whose span is zero days are left out of the average. The current velocity
        is reported as the average velocity; there is no separate sampling window.
        """
        user_activities: dict[str, list[Activity]] = defaultdict(list)
        for activity in activities:
            user_activities[activity.assignee.account_id].append(activity)

        user_velocities: dict[str, float] = {}
        for user_id, items in user_activities.items():
            start = min(activity.created for activity in items)
            end = max(activity.updated for activity in items)
            days = (end - start).total_seconds() / 86400
            if days > 0:
                completed = sum(1 for activity in items if activity.is_completed)
                user_velocities[user_id] = completed / days

        average_velocity = average(user_velocities.values())
        self.logger.debug(
            f"Velocity computed for {len(user_velocities)}/{len(user_activities)} users: "
            f"{average_velocity:.2f} items/day"
        )

        return VelocityMetrics(
            current_velocity=average_velocity,
            average_velocity=average_velocity,
            velocity_trend=velocity_trend,
            burndown_rate=burndown_rate,
            user_velocities=user_velocities,
        )
