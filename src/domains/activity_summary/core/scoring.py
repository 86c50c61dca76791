"""Scoring helpers shared by the aggregator and the trend analyzer."""

from typing import Iterable, Sequence

from domains.activity_summary.core.activity import Activity

# Weights of the productivity score partitions (sum to 100)
COMPLETION_WEIGHT = 0.5
HIGH_PRIORITY_WEIGHT = 25
EFFICIENCY_WEIGHT = 25
PARTIAL_CREDIT = 0.5


def completion_rate(completed: int, total: int) -> float:
    """Percentage of completed items, 0 for an empty set."""
    if total <= 0:
        return 0.0
    return completed / total * 100


def average(values: Iterable[float]) -> float:
    values = list(values)
    if not values:
        return 0.0
    return sum(values) / len(values)


def calculate_productivity_score(activities: Sequence[Activity], rate: float) -> float:
    """Heuristic 0-100 score.

    completion rate * 0.5
    + completed fraction of High/Critical items * 25 (only when there are any)
    + mean per activity (1.0 completed, 0.5 otherwise) * 25
    """
    if not activities:
        return 0.0

    score = rate * COMPLETION_WEIGHT

    high_priority_total = 0
    high_priority_completed = 0
    efficiency = 0.0
    for activity in activities:
        completed = activity.is_completed
        if activity.is_high_priority:
            high_priority_total += 1
            if completed:
                high_priority_completed += 1
        efficiency += 1.0 if completed else PARTIAL_CREDIT

    if high_priority_total > 0:
        score += high_priority_completed / high_priority_total * HIGH_PRIORITY_WEIGHT

    score += efficiency / len(activities) * EFFICIENCY_WEIGHT

    return min(max(score, 0.0), 100.0)
