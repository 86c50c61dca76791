"""
Executive Summary Generator

Turns a ProcessingResult into a structured, natural-language summary: key
metrics, an executive paragraph, highlights, concerns, recommendations,
per-user insights, a trend section and optional custom sections.

Every text is rule based; the same ProcessingResult and SummaryRequest always
produce the same response apart from generated_at.
"""

from datetime import datetime
from logging import Logger

from domains.activity_summary.core.activity import format_time_spent
from domains.activity_summary.core.processing_models import (
    PriorityMetrics,
    ProcessingResult,
    StatusMetrics,
    TrendAnalysis,
    TrendDirection,
    UserMetrics,
    VelocityMetrics,
)
from domains.activity_summary.core.summary_models import (
    SummaryFormat,
    SummaryKeyMetrics,
    SummaryRequest,
    SummaryResponse,
    SummaryTrendAnalysis,
    UserInsight,
)
from domains.activity_summary.error import ProcessingDataRequiredError
from domains.activity_summary.services.data_processor import NO_PRIORITY_LABEL
from utils.logging.logging_manager import LogManager

HIGH_PRIORITY = "High"
BREAKDOWN_PRIORITIES = ("High", "Medium", "Low")
LARGE_TASK_SECONDS = 14400
TOP_PERFORMERS_LIMIT = 2


def format_percentage(value: float) -> str:
    return f"{value:.1f}%"


def productivity_level(score: float) -> str:
    if score >= 80:
        return "excellent"
    if score >= 60:
        return "good"
    if score >= 40:
        return "average"
    return "concerning"


class SummaryGenerator:
    """Builds SummaryResponse objects from processed activity metrics."""

    def __init__(self, logger: Logger | None = None):
        self.logger = logger or LogManager.get_instance().get_logger("SummaryGenerator")

    def generate_summary(self, data: ProcessingResult | None, request: SummaryRequest) -> SummaryResponse:
        """
        Generate the summary described by the request.

        Args:
            data: Output of DataProcessor.process_activities.
            request: Title, period, format and which optional parts to include.

        Returns:
            SummaryResponse

        Raises:
            ProcessingDataRequiredError: If data is None.
        """
        self.logger.info(
            f"Starting summary generation: title='{request.title}', period={request.period}, "
            f"format={request.format.value}"
        )

        if data is None:
            raise ProcessingDataRequiredError()

        sections = {section: self._generate_custom_section(data, section) for section in request.custom_sections}

        response = SummaryResponse(
            title=request.title,
            period=request.period,
            generated_at=datetime.now(),
            executive_summary=self._generate_executive_summary(data, request),
            key_metrics=self._generate_key_metrics(data) if request.include_metrics else None,
            highlights=self._generate_highlights(data),
            concerns=self._generate_concerns(data),
            recommendations=self._generate_recommendations(data),
            user_insights=self._generate_user_insights(data, request.max_users) if request.include_users else [],
            trend_analysis=(
                self._generate_trend_analysis(data.trend_analysis)
                if request.include_trends and data.trend_analysis is not None
                else None
            ),
            sections=sections,
            raw_data=data if request.format == SummaryFormat.DETAILED else None,
        )

        self.logger.info(
            f"Summary generation completed: {len(response.highlights)} highlights, "
            f"{len(response.concerns)} concerns, {len(response.recommendations)} recommendations, "
            f"{len(response.user_insights)} user insights"
        )
        return response

    @staticmethod
    def _generate_key_metrics(data: ProcessingResult) -> SummaryKeyMetrics:
        summary = data.summary
        average_time_per_task = 0
        if summary.total_activities > 0:
            average_time_per_task = summary.total_time_spent // summary.total_activities

        return SummaryKeyMetrics(
            total_activities=summary.total_activities,
            completed_activities=round(summary.total_activities * summary.completion_rate / 100),
            completion_rate=summary.completion_rate,
            total_time_spent=format_time_spent(summary.total_time_spent),
            average_time_per_task=format_time_spent(average_time_per_task),
            productivity_score=summary.productivity_score,
            active_users=summary.total_users,
            top_priority=summary.top_priority,
            most_active_user=summary.most_active_user,
        )

    @staticmethod
    def _generate_executive_summary(data: ProcessingResult, request: SummaryRequest) -> str:
        summary = data.summary
        period_label = summary.date_range.label if summary.date_range else ""
        period_clause = f"{request.period} period from {period_label}" if period_label else f"{request.period} period"

        parts = [
            f"During the {period_clause}, the team completed {summary.total_activities} activities "
            f"with a {format_percentage(summary.completion_rate)} completion rate.",
            f"A total of {format_time_spent(summary.total_time_spent)} was invested across "
            f"{summary.total_users} team members, with an average of "
            f"{format_time_spent(summary.average_time_per_user)} per team member.",
            f"The team achieved a productivity score of {format_percentage(summary.productivity_score)}, "
            f"indicating {productivity_level(summary.productivity_score)} performance.",
        ]

        if summary.top_priority and summary.top_priority != NO_PRIORITY_LABEL:
            focus = f"The primary focus was on {summary.top_priority.lower()} priority items"
            leader = data.user_metrics.get(summary.most_active_user) if summary.most_active_user else None
            if leader is not None:
                focus += (
                    f", with {leader.display_name} leading the effort by contributing "
                    f"{format_time_spent(leader.total_time_spent)} across {leader.total_activities} activities."
                )
            else:
                focus += "."
            parts.append(focus)

        return " ".join(parts)

    def _generate_highlights(self, data: ProcessingResult) -> list[str]:
        highlights = []
        summary = data.summary

        if summary.completion_rate >= 80:
            highlights.append(
                f"Excellent completion rate of {format_percentage(summary.completion_rate)} "
                "demonstrates strong execution capability"
            )

        if summary.productivity_score >= 75:
            highlights.append(
                f"Strong productivity score of {format_percentage(summary.productivity_score)} "
                "indicates effective team performance"
            )

        high_priority = data.priority_breakdown.get(HIGH_PRIORITY)
        if high_priority is not None and high_priority.completion_rate >= 75:
            highlights.append(
                f"High-priority items completed at {format_percentage(high_priority.completion_rate)} rate, "
                "showing good prioritization"
            )

        top_performers = self._get_top_performers(data.user_metrics, TOP_PERFORMERS_LIMIT)
        if top_performers:
            names = " and ".join(user.display_name for user in top_performers)
            highlights.append(f"Outstanding contributions from {names} with consistently high performance")

        trends = data.trend_analysis
        if trends is not None:
            if trends.overall_trend == TrendDirection.INCREASING:
                highlights.append("Positive trend in overall team performance and productivity")
            if trends.velocity_trend == TrendDirection.INCREASING:
                highlights.append("Improving velocity indicates enhanced team efficiency")

        return highlights

    def _generate_concerns(self, data: ProcessingResult) -> list[str]:
        concerns = []
        summary = data.summary

        if summary.completion_rate < 60:
            concerns.append(
                f"Completion rate of {format_percentage(summary.completion_rate)} is below optimal levels "
                "and requires attention"
            )

        if summary.productivity_score < 50:
            concerns.append(
                f"Productivity score of {format_percentage(summary.productivity_score)} "
                "indicates potential process inefficiencies"
            )

        high_priority = data.priority_breakdown.get(HIGH_PRIORITY)
        if high_priority is not None and high_priority.completion_rate < 60:
            concerns.append(
                f"High-priority items only {format_percentage(high_priority.completion_rate)} completed, "
                "potentially impacting critical objectives"
            )

        under_performers = self._get_under_performers(data.user_metrics)
        if under_performers:
            concerns.append(f"{len(under_performers)} team members showing below-average performance metrics")

        trends = data.trend_analysis
        if trends is not None:
            if trends.overall_trend == TrendDirection.DECREASING:
                concerns.append("Declining trend in overall team performance requires investigation")
            if trends.velocity_trend == TrendDirection.DECREASING:
                concerns.append("Decreasing velocity trend may indicate capacity or process issues")

        if self._has_workload_imbalance(data.user_metrics):
            concerns.append("Uneven workload distribution may lead to burnout and reduced efficiency")

        return concerns

    def _generate_recommendations(self, data: ProcessingResult) -> list[str]:
        recommendations = []
        summary = data.summary

        if summary.completion_rate < 70:
            recommendations.append(
                "Implement daily standups and sprint reviews to improve task completion tracking"
            )
            recommendations.append(
                "Consider reducing work-in-progress limits to focus on completing current tasks"
            )

        if summary.productivity_score < 60:
            recommendations.append("Conduct process review to identify and eliminate bottlenecks in the workflow")
            recommendations.append(
                "Provide additional training or resources to team members with lower productivity scores"
            )

        if self._has_high_priority_backlog(data.priority_breakdown):
            recommendations.append("Prioritize high-priority items and consider resource reallocation")
            recommendations.append(
                "Review and refine prioritization process to ensure critical work gets adequate attention"
            )

        if self._has_workload_imbalance(data.user_metrics):
            recommendations.append("Redistribute workload to balance team capacity and prevent burnout")
            recommendations.append("Cross-train team members to provide better coverage and flexibility")

        if data.trend_analysis is not None and data.trend_analysis.overall_trend == TrendDirection.DECREASING:
            recommendations.append("Investigate root causes of declining performance trends")
            recommendations.append("Implement regular retrospectives to identify improvement opportunities")

        recommendations.append("Continue monitoring key metrics and adjust strategies based on performance data")
        recommendations.append("Recognize and celebrate high performers to maintain team motivation")

        return recommendations

    def _generate_user_insights(self, data: ProcessingResult, max_users: int) -> list[UserInsight]:
        users = sorted(data.user_metrics.values(), key=lambda user: user.productivity_rank)
        if max_users > 0:
            users = users[:max_users]

        return [
            UserInsight(
                user_id=user.user_id,
                display_name=user.display_name,
                productivity_rank=user.productivity_rank,
                completion_rate=user.completion_rate,
                total_activities=user.total_activities,
                time_spent=format_time_spent(user.total_time_spent),
                key_achievements=self._generate_user_achievements(user),
                areas_for_improvement=self._generate_user_improvements(user),
            )
            for user in users
        ]

    @staticmethod
    def _generate_trend_analysis(trends: TrendAnalysis) -> SummaryTrendAnalysis:
        key_changes = []

        if trends.overall_trend == TrendDirection.INCREASING:
            key_changes.append("Overall team performance showing positive improvement")
        elif trends.overall_trend == TrendDirection.DECREASING:
            key_changes.append("Overall team performance showing concerning decline")

        if trends.velocity_trend == TrendDirection.INCREASING:
            key_changes.append("Team velocity increasing, indicating improved efficiency")
        elif trends.velocity_trend == TrendDirection.DECREASING:
            key_changes.append("Team velocity decreasing, may indicate capacity issues")

        return SummaryTrendAnalysis(
            overall_trend=trends.overall_trend,
            velocity_trend=trends.velocity_trend,
            productivity_trend=trends.productivity_trend,
            key_changes=key_changes,
            seasonality=dict(trends.seasonality),
        )

    def _generate_custom_section(self, data: ProcessingResult, section: str) -> str:
        name = section.lower()
        if name == "priority_breakdown":
            return self._generate_priority_breakdown(data.priority_breakdown)
        if name == "status_summary":
            return self._generate_status_summary(data.status_breakdown)
        if name == "velocity_analysis":
            if data.velocity_metrics is None:
                return "Velocity analysis not available"
            return self._generate_velocity_analysis(data.velocity_metrics)
        if name == "time_analysis":
            return self._generate_time_analysis(data)

        self.logger.warning(f"Unknown custom section requested: {section}")
        return f"Custom section '{section}' not implemented"

    # Helpers

    @staticmethod
    def _get_top_performers(user_metrics: dict[str, UserMetrics], limit: int) -> list[UserMetrics]:
        candidates = [user for user in user_metrics.values() if user.completion_rate >= 80 and user.productivity_rank <= 3]
        candidates.sort(key=lambda user: user.productivity_rank)
        return candidates[:limit]

    @staticmethod
    def _get_under_performers(user_metrics: dict[str, UserMetrics]) -> list[UserMetrics]:
        rank_cutoff = len(user_metrics) * 3 // 4
        return [
            user
            for user in user_metrics.values()
            if user.completion_rate < 50 or user.productivity_rank > rank_cutoff
        ]

    @staticmethod
    def _has_workload_imbalance(user_metrics: dict[str, UserMetrics]) -> bool:
        """More than 2x or less than half of the mean time spent per user."""
        if len(user_metrics) < 2:
            return False

        times = [user.total_time_spent for user in user_metrics.values()]
        mean_time = sum(times) / len(times)
        return max(times) > mean_time * 2 or min(times) < mean_time / 2

    @staticmethod
    def _has_high_priority_backlog(priority_breakdown: dict[str, PriorityMetrics]) -> bool:
        high_priority = priority_breakdown.get(HIGH_PRIORITY)
        return high_priority is not None and high_priority.completion_rate < 70

    @staticmethod
    def _generate_user_achievements(user: UserMetrics) -> list[str]:
        achievements = []
        if user.completion_rate >= 90:
            achievements.append("Exceptional completion rate above 90%")
        if user.productivity_rank <= 2:
            achievements.append("Top performer in team productivity rankings")
        if user.top_issues:
            achievements.append(f"Successfully handled {len(user.top_issues)} complex, high-impact issues")
        return achievements

    @staticmethod
    def _generate_user_improvements(user: UserMetrics) -> list[str]:
        improvements = []
        if user.completion_rate < 60:
            improvements.append("Focus on improving task completion rate")
        if user.average_time_per_task > LARGE_TASK_SECONDS:
            improvements.append("Consider breaking down large tasks into smaller, manageable pieces")
        return improvements

    @staticmethod
    def _generate_priority_breakdown(breakdown: dict[str, PriorityMetrics]) -> str:
        lines = ["Priority Distribution Analysis:"]
        for priority in BREAKDOWN_PRIORITIES:
            metrics = breakdown.get(priority)
            if metrics is None:
                continue
            lines.append(
                f"- {priority} Priority: {metrics.count} items "
                f"({format_percentage(metrics.completion_rate)} completion rate, "
                f"{format_time_spent(metrics.total_time_spent)} total time)"
            )
        return "\n".join(lines) + "\n"

    @staticmethod
    def _generate_status_summary(breakdown: dict[str, StatusMetrics]) -> str:
        lines = ["Status Distribution Summary:"]
        for status, metrics in breakdown.items():
            lines.append(
                f"- {status}: {metrics.count} items ({format_time_spent(metrics.total_time_spent)} total time, "
                f"{metrics.recent_changes} recent changes)"
            )
        return "\n".join(lines) + "\n"

    @staticmethod
    def _generate_velocity_analysis(velocity: VelocityMetrics) -> str:
        lines = [
            "Velocity Analysis:",
            f"- Current Velocity: {velocity.current_velocity:.2f} items/day",
            f"- Average Velocity: {velocity.average_velocity:.2f} items/day",
            f"- Velocity Trend: {velocity.velocity_trend}",
            f"- Burndown Rate: {velocity.burndown_rate * 100:.1f}%",
        ]
        return "\n".join(lines) + "\n"

    @staticmethod
    def _generate_time_analysis(data: ProcessingResult) -> str:
        summary = data.summary
        average_time_per_task = 0
        if summary.total_activities > 0:
            average_time_per_task = summary.total_time_spent // summary.total_activities
        period_label = summary.date_range.label if summary.date_range else ""

        lines = [
            "Time Investment Analysis:",
            f"- Total Time Invested: {format_time_spent(summary.total_time_spent)}",
            f"- Average Time per User: {format_time_spent(summary.average_time_per_user)}",
            f"- Average Time per Task: {format_time_spent(average_time_per_task)}",
            f"- Period: {period_label}",
        ]
        return "\n".join(lines) + "\n"
