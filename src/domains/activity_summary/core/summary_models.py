"""Summary Models

Request and response types of the SummaryGenerator.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from domains.activity_summary.core.processing_models import ProcessingResult


class SummaryFormat(str, Enum):
    EXECUTIVE = "executive"
    DETAILED = "detailed"
    BULLET_POINT = "bullet_point"
    NARRATIVE = "narrative"


class SummaryRequest(BaseModel):
    """What the caller wants in the generated summary."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = ""
    period: str = Field("weekly", description="weekly, monthly, quarterly, ...")
    include_metrics: bool = True
    include_trends: bool = False
    include_users: bool = False
    custom_sections: list[str] = Field(default_factory=list)
    max_users: int = Field(0, description="0 or negative means no limit")
    min_time_spent: int = Field(0, description="Seconds; forwarded to the processing options")
    format: SummaryFormat = SummaryFormat.EXECUTIVE


class SummaryKeyMetrics(BaseModel):
    total_activities: int = 0
    completed_activities: int = 0
    completion_rate: float = 0.0
    total_time_spent: str = "0m"
    average_time_per_task: str = "0m"
    productivity_score: float = 0.0
    active_users: int = 0
    top_priority: str = ""
    most_active_user: str = ""


class UserInsight(BaseModel):
    user_id: str
    display_name: str = ""
    productivity_rank: int = 0
    completion_rate: float = 0.0
    total_activities: int = 0
    time_spent: str = "0m"
    key_achievements: list[str] = Field(default_factory=list)
    areas_for_improvement: list[str] = Field(default_factory=list)


class SummaryTrendAnalysis(BaseModel):
    overall_trend: str
    velocity_trend: str
    productivity_trend: str
    key_changes: list[str] = Field(default_factory=list)
    seasonality: dict[str, float] = Field(default_factory=dict)


class SummaryResponse(BaseModel):
    title: str = ""
    period: str = ""
    generated_at: datetime
    executive_summary: str = ""
    key_metrics: SummaryKeyMetrics | None = None
    highlights: list[str] = Field(default_factory=list)
    concerns: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    user_insights: list[UserInsight] = Field(default_factory=list)
    trend_analysis: SummaryTrendAnalysis | None = None
    sections: dict[str, str] = Field(default_factory=dict)
    raw_data: ProcessingResult | None = None
