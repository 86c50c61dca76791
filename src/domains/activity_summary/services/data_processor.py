"""
Activity Data Processor

Aggregates work activities into team and user productivity metrics.

Key functionalities:
- Filter activities by a minimum logged time
- Build a high-level summary (totals, date range, most active user, top priority)
- Break metrics down by user, priority and status
- Rank users by completion rate
- Delegate windowed trend and velocity analysis to the TrendAnalyzer

Processing is pure: the input list is never mutated and the same input, options
and as-of timestamp always produce the same result (apart from processing_time).
"""

import time
from collections import Counter, defaultdict
from datetime import datetime, timedelta, timezone
from logging import Logger
from typing import Sequence

from domains.activity_summary.core.activity import Activity
from domains.activity_summary.core.processing_models import (
    PriorityMetrics,
    ProcessingOptions,
    ProcessingResult,
    ProcessingSummary,
    StatusMetrics,
    TimeRange,
    TrendDirection,
    UserMetrics,
)
from domains.activity_summary.core.scoring import calculate_productivity_score, completion_rate
from domains.activity_summary.services.trend_analyzer import TrendAnalyzer
from utils.logging.logging_manager import LogManager

TOP_ISSUE_MIN_SECONDS = 7200
RECENT_CHANGE_WINDOW = timedelta(days=7)
NO_PRIORITY_LABEL = "None"
NO_STATUS_LABEL = "Unknown"


class DataProcessor:
    """Service that turns a list of activities into a ProcessingResult."""

    def __init__(self, logger: Logger | None = None, trend_analyzer: TrendAnalyzer | None = None):
        self.logger = logger or LogManager.get_instance().get_logger("DataProcessor")
        self.trend_analyzer = trend_analyzer or TrendAnalyzer(logger=self.logger)

    def process_activities(
        self,
        activities: Sequence[Activity],
        options: ProcessingOptions | None = None,
        as_of: datetime | None = None,
    ) -> ProcessingResult:
        """
        Run every aggregation enabled in the options.

        Args:
            activities: Activities to aggregate (not modified).
            options: Aggregations to run; None behaves like ProcessingOptions().
            as_of: Reference time for "recent" computations. When omitted the clock is
                read once. A naive value is read as UTC when the activities carry
                timezone info, and an aware one is converted to naive UTC otherwise.

        Returns:
            ProcessingResult with the requested breakdowns populated.
        """
        started = time.perf_counter()
        options = options or ProcessingOptions()
        as_of = self._align_as_of(as_of, activities) if as_of else self._now_for(activities)

        self.logger.info(f"Processing {len(activities)} activities")

        filtered = self._filter_activities(activities, options)
        if len(filtered) != len(activities):
            self.logger.info(
                f"Filtered to {len(filtered)} activities with at least {options.minimum_time_spent}s logged"
            )

        summary = self._calculate_summary(filtered)

        user_metrics: dict[str, UserMetrics] = {}
        if options.group_by_user:
            user_metrics = self._rank_users(self._calculate_user_metrics(filtered))

        priority_breakdown = {}
        if options.group_by_priority:
            priority_breakdown = self._calculate_priority_breakdown(filtered)

        status_breakdown = {}
        if options.group_by_status:
            status_breakdown = self._calculate_status_breakdown(filtered, as_of)

        trend_analysis = None
        if options.analyze_trends:
            trend_analysis = self.trend_analyzer.analyze_trends(filtered, options.custom_time_ranges)

        velocity_metrics = None
        if options.calculate_velocity:
            velocity_trend = trend_analysis.velocity_trend if trend_analysis else TrendDirection.STABLE
            velocity_metrics = self.trend_analyzer.calculate_velocity(
                filtered, burndown_rate=options.burndown_rate, velocity_trend=velocity_trend
            )

        processing_time = time.perf_counter() - started
        self.logger.info(
            f"Processing completed in {processing_time:.3f}s: {summary.total_activities} activities, "
            f"{summary.total_users} users, completion rate {summary.completion_rate:.1f}%"
        )

        return ProcessingResult(
            summary=summary,
            user_metrics=user_metrics,
            priority_breakdown=priority_breakdown,
            status_breakdown=status_breakdown,
            trend_analysis=trend_analysis,
            velocity_metrics=velocity_metrics,
            processed_at=as_of,
            processing_time=processing_time,
        )

    @staticmethod
    def _is_aware(activities: Sequence[Activity]) -> bool:
        return any(
            activity.created.tzinfo is not None or activity.updated.tzinfo is not None for activity in activities
        )

    @classmethod
    def _now_for(cls, activities: Sequence[Activity]) -> datetime:
        if cls._is_aware(activities):
            return datetime.now(timezone.utc)
        return datetime.now()

    @classmethod
    def _align_as_of(cls, as_of: datetime, activities: Sequence[Activity]) -> datetime:
        if cls._is_aware(activities):
            return as_of if as_of.tzinfo is not None else as_of.replace(tzinfo=timezone.utc)
        if activities and as_of.tzinfo is not None:
            return as_of.astimezone(timezone.utc).replace(tzinfo=None)
        return as_of

    @staticmethod
    def _filter_activities(activities: Sequence[Activity], options: ProcessingOptions) -> list[Activity]:
        if options.minimum_time_spent <= 0:
            return list(activities)
        return [activity for activity in activities if activity.time_spent >= options.minimum_time_spent]

    @staticmethod
    def _priority_label(activity: Activity) -> str:
        return activity.priority or NO_PRIORITY_LABEL

    @staticmethod
    def _status_label(activity: Activity) -> str:
        return activity.status or NO_STATUS_LABEL

    @staticmethod
    def _first_max(counts: dict[str, int]) -> str:
        """Key with the highest positive value; ties go to the lexicographically smallest key."""
        best_key = ""
        best_value = 0
        for key in sorted(counts):
            if counts[key] > best_value:
                best_key = key
                best_value = counts[key]
        return best_key

    def _calculate_summary(self, activities: list[Activity]) -> ProcessingSummary:
        if not activities:
            return ProcessingSummary()

        user_time: dict[str, int] = defaultdict(int)
        priority_counts: Counter = Counter()
        completed = 0
        total_time = 0
        min_date = activities[0].created
        max_date = activities[0].updated

        for activity in activities:
            user_time[activity.assignee.account_id] += activity.time_spent
            priority_counts[self._priority_label(activity)] += 1
            total_time += activity.time_spent
            if activity.is_completed:
                completed += 1
            if activity.created < min_date:
                min_date = activity.created
            if activity.updated > max_date:
                max_date = activity.updated

        rate = completion_rate(completed, len(activities))

        return ProcessingSummary(
            total_activities=len(activities),
            total_users=len(user_time),
            total_time_spent=total_time,
            average_time_per_user=total_time // len(user_time),
            date_range=TimeRange(
                start=min_date,
                end=max_date,
                label=f"{min_date:%Y-%m-%d} to {max_date:%Y-%m-%d}",
            ),
            most_active_user=self._first_max(user_time),
            top_priority=self._first_max(priority_counts),
            completion_rate=rate,
            productivity_score=calculate_productivity_score(activities, rate),
        )

    def _calculate_user_metrics(self, activities: list[Activity]) -> dict[str, UserMetrics]:
        grouped: dict[str, list[Activity]] = defaultdict(list)
        for activity in activities:
            grouped[activity.assignee.account_id].append(activity)

        user_metrics = {}
        for user_id, items in grouped.items():
            completed = sum(1 for activity in items if activity.is_completed)
            total_time = sum(activity.time_spent for activity in items)
            priority_distribution: dict[str, int] = defaultdict(int)
            status_distribution: dict[str, int] = defaultdict(int)
            for activity in items:
                priority_distribution[self._priority_label(activity)] += 1
                status_distribution[self._status_label(activity)] += 1

            user_metrics[user_id] = UserMetrics(
                user_id=user_id,
                display_name=items[0].assignee.display_name,
                total_activities=len(items),
                completed_activities=completed,
                total_time_spent=total_time,
                average_time_per_task=total_time // len(items),
                priority_distribution=dict(priority_distribution),
                status_distribution=dict(status_distribution),
                completion_rate=completion_rate(completed, len(items)),
                top_issues=[activity.key for activity in items if activity.time_spent >= TOP_ISSUE_MIN_SECONDS],
            )

        self.logger.debug(f"Calculated metrics for {len(user_metrics)} users")
        return user_metrics

    @staticmethod
    def _rank_users(user_metrics: dict[str, UserMetrics]) -> dict[str, UserMetrics]:
        """Assign ranks 1..N by completion rate; equal rates keep first-seen order."""
        ordered = sorted(user_metrics.values(), key=lambda metrics: metrics.completion_rate, reverse=True)
        ranks = {metrics.user_id: rank for rank, metrics in enumerate(ordered, start=1)}
        return {
            user_id: metrics.model_copy(update={"productivity_rank": ranks[user_id]})
            for user_id, metrics in user_metrics.items()
        }

    def _calculate_priority_breakdown(self, activities: list[Activity]) -> dict[str, PriorityMetrics]:
        grouped: dict[str, list[Activity]] = defaultdict(list)
        for activity in activities:
            grouped[self._priority_label(activity)].append(activity)

        breakdown = {}
        for priority, items in grouped.items():
            completed_items = [activity for activity in items if activity.is_completed]
            completed_time = sum(activity.time_spent for activity in completed_items)
            breakdown[priority] = PriorityMetrics(
                priority=priority,
                count=len(items),
                total_time_spent=sum(activity.time_spent for activity in items),
                completed_count=len(completed_items),
                completion_rate=completion_rate(len(completed_items), len(items)),
                average_time_to_complete=completed_time // len(completed_items) if completed_items else 0,
            )

        return breakdown

    def _calculate_status_breakdown(self, activities: list[Activity], as_of: datetime) -> dict[str, StatusMetrics]:
        recent_threshold = as_of - RECENT_CHANGE_WINDOW
        grouped: dict[str, list[Activity]] = defaultdict(list)
        for activity in activities:
            grouped[self._status_label(activity)].append(activity)

        breakdown = {}
        for status, items in grouped.items():
            users = list(dict.fromkeys(activity.assignee.account_id for activity in items))
            completed = sum(1 for activity in items if activity.is_completed)
            breakdown[status] = StatusMetrics(
                status=status,
                count=len(items),
                total_time_spent=sum(activity.time_spent for activity in items),
                completed_count=completed,
                completion_rate=completion_rate(completed, len(items)),
                users=users,
                recent_changes=sum(1 for activity in items if activity.updated > recent_threshold),
            )

        return breakdown
