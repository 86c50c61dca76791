"""Processing Models

Options and outputs of the DataProcessor.

Models:
    - TimeRange: labelled [start, end] window
    - ProcessingOptions: which aggregations to run
    - ProcessingSummary: high-level metrics over all filtered activities
    - UserMetrics / PriorityMetrics / StatusMetrics: per-dimension breakdowns
    - TimeRangeMetrics / TrendAnalysis: windowed trend detection
    - VelocityMetrics: completions per day
    - ProcessingResult: everything above, built once per call

Every metric record is frozen. The productivity rank of a UserMetrics is filled
by a separate ranking step that returns a copy (see DataProcessor).
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_BURNDOWN_RATE = 0.8


class TrendDirection(str, Enum):
    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"


class FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True, use_enum_values=True)


class TimeRange(FrozenModel):
    """A labelled time window. Both ends are inclusive when filtering activities."""

    start: datetime
    end: datetime
    label: str = ""

    @property
    def days(self) -> float:
        return (self.end - self.start).total_seconds() / 86400


class ProcessingOptions(FrozenModel):
    """Toggles for the optional aggregations. The empty value means "summary only"."""

    group_by_user: bool = False
    group_by_priority: bool = False
    group_by_status: bool = False
    analyze_trends: bool = False
    calculate_velocity: bool = False
    custom_time_ranges: list[TimeRange] = Field(default_factory=list)
    minimum_time_spent: int = Field(0, description="Seconds; values <= 0 disable filtering")
    burndown_rate: float = Field(
        DEFAULT_BURNDOWN_RATE, description="Placeholder burndown rate reported with velocity metrics"
    )


class ProcessingSummary(FrozenModel):
    total_activities: int = 0
    total_users: int = 0
    total_time_spent: int = 0
    average_time_per_user: int = 0
    date_range: TimeRange | None = None
    most_active_user: str = ""
    top_priority: str = ""
    completion_rate: float = 0.0
    productivity_score: float = 0.0


class UserMetrics(FrozenModel):
    user_id: str
    display_name: str = ""
    total_activities: int = 0
    completed_activities: int = 0
    total_time_spent: int = 0
    average_time_per_task: int = 0
    priority_distribution: dict[str, int] = Field(default_factory=dict)
    status_distribution: dict[str, int] = Field(default_factory=dict)
    completion_rate: float = 0.0
    productivity_rank: int = 0
    top_issues: list[str] = Field(default_factory=list)


class PriorityMetrics(FrozenModel):
    priority: str
    count: int = 0
    total_time_spent: int = 0
    completed_count: int = 0
    completion_rate: float = 0.0
    average_time_to_complete: int = 0


class StatusMetrics(FrozenModel):
    status: str
    count: int = 0
    total_time_spent: int = 0
    completed_count: int = 0
    completion_rate: float = 0.0
    users: list[str] = Field(default_factory=list)
    recent_changes: int = 0


class TimeRangeMetrics(FrozenModel):
    range: TimeRange
    activity_count: int = 0
    completion_count: int = 0
    total_time_spent: int = 0
    average_velocity: float = 0.0
    productivity_score: float = 0.0


class TrendAnalysis(FrozenModel):
    time_ranges: list[TimeRangeMetrics] = Field(default_factory=list)
    overall_trend: TrendDirection = TrendDirection.STABLE
    velocity_trend: TrendDirection = TrendDirection.STABLE
    productivity_trend: TrendDirection = TrendDirection.STABLE
    seasonality: dict[str, float] = Field(default_factory=dict, description="Weekday -> completed ratio")


class VelocityMetrics(FrozenModel):
    current_velocity: float = 0.0
    average_velocity: float = 0.0
    velocity_trend: TrendDirection = TrendDirection.STABLE
    burndown_rate: float = DEFAULT_BURNDOWN_RATE
    user_velocities: dict[str, float] = Field(default_factory=dict)


class ProcessingResult(FrozenModel):
    summary: ProcessingSummary = Field(default_factory=ProcessingSummary)
    user_metrics: dict[str, UserMetrics] = Field(default_factory=dict)
    priority_breakdown: dict[str, PriorityMetrics] = Field(default_factory=dict)
    status_breakdown: dict[str, StatusMetrics] = Field(default_factory=dict)
    trend_analysis: TrendAnalysis | None = None
    velocity_metrics: VelocityMetrics | None = None
    processed_at: datetime
    processing_time: float = Field(0.0, ge=0, description="Seconds spent processing")
