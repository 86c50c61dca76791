"""Unit tests for the executive SummaryGenerator."""

from datetime import datetime

import pytest

from conftest import AS_OF
from domains.activity_summary.core.processing_models import (
    PriorityMetrics,
    ProcessingOptions,
    ProcessingResult,
    ProcessingSummary,
    StatusMetrics,
    TimeRange,
    TrendAnalysis,
    UserMetrics,
    VelocityMetrics,
)
from domains.activity_summary.core.summary_models import SummaryFormat, SummaryRequest
from domains.activity_summary.error import ProcessingDataRequiredError
from domains.activity_summary.services.data_processor import DataProcessor
from domains.activity_summary.services.summary_generator import SummaryGenerator, productivity_level
from utils.error.base_custom_error import ErrorCode

ALWAYS_RECOMMENDED = [
    "Continue monitoring key metrics and adjust strategies based on performance data",
    "Recognize and celebrate high performers to maintain team motivation",
]


@pytest.fixture
def generator() -> SummaryGenerator:
    return SummaryGenerator()


def build_result(completion_rate: float = 75.0, productivity_score: float = 65.0, **kwargs) -> ProcessingResult:
    summary = ProcessingSummary(
        total_activities=20,
        total_users=2,
        total_time_spent=72000,
        average_time_per_user=36000,
        date_range=TimeRange(
            start=datetime(2024, 1, 1), end=datetime(2024, 1, 7), label="2024-01-01 to 2024-01-07"
        ),
        most_active_user=kwargs.pop("most_active_user", ""),
        top_priority=kwargs.pop("top_priority", ""),
        completion_rate=completion_rate,
        productivity_score=productivity_score,
    )
    return ProcessingResult(summary=summary, processed_at=AS_OF, **kwargs)


def user(user_id: str, rank: int, completion_rate: float, time_spent: int = 36000, **kwargs) -> UserMetrics:
    return UserMetrics(
        user_id=user_id,
        display_name=user_id.title(),
        total_activities=10,
        completed_activities=int(completion_rate / 10),
        total_time_spent=time_spent,
        average_time_per_task=time_spent // 10,
        completion_rate=completion_rate,
        productivity_rank=rank,
        **kwargs,
    )


class TestPreconditions:
    """Input validation."""

    def test_missing_data_raises(self, generator) -> None:
        """None data is rejected with the data-required error."""
        with pytest.raises(ProcessingDataRequiredError) as exc_info:
            generator.generate_summary(None, SummaryRequest())

        assert exc_info.value.code == ErrorCode.DATA_MISSING
        assert "processing data is required" in str(exc_info.value)

    def test_empty_result_does_not_raise(self, generator) -> None:
        """A zero result still produces a response."""
        result = ProcessingResult(processed_at=AS_OF)
        response = generator.generate_summary(
            result, SummaryRequest(custom_sections=["time_analysis", "velocity_analysis"])
        )

        assert response.key_metrics.total_activities == 0
        assert response.key_metrics.average_time_per_task == "0m"
        assert "- Average Time per Task: 0m" in response.sections["time_analysis"]
        assert response.recommendations[-2:] == ALWAYS_RECOMMENDED


class TestKeyMetrics:
    """Key metrics block."""

    def test_key_metrics(self, generator) -> None:
        result = build_result(completion_rate=75.0, top_priority="High", most_active_user="alice")
        metrics = generator.generate_summary(result, SummaryRequest()).key_metrics

        assert metrics.total_activities == 20
        assert metrics.completed_activities == 15
        assert metrics.total_time_spent == "20h 0m"
        assert metrics.average_time_per_task == "1h 0m"
        assert metrics.active_users == 2
        assert metrics.top_priority == "High"
        assert metrics.most_active_user == "alice"

    def test_completed_count_is_rounded(self, generator) -> None:
        """3 activities at 66.67% completion are 2 completed, not 1."""
        result = ProcessingResult(
            summary=ProcessingSummary(total_activities=3, completion_rate=200 / 3), processed_at=AS_OF
        )
        metrics = generator.generate_summary(result, SummaryRequest()).key_metrics

        assert metrics.completed_activities == 2

    def test_metrics_can_be_excluded(self, generator) -> None:
        response = generator.generate_summary(build_result(), SummaryRequest(include_metrics=False))

        assert response.key_metrics is None


class TestExecutiveSummary:
    """Executive paragraph."""

    def test_paragraph_content(self, generator) -> None:
        """Period, totals, productivity level and the leading user are interpolated."""
        result = build_result(
            completion_rate=75.0,
            productivity_score=65.0,
            top_priority="High",
            most_active_user="alice",
            user_metrics={"alice": user("alice", 1, 80.0, time_spent=45000)},
        )
        text = generator.generate_summary(result, SummaryRequest(period="weekly")).executive_summary

        assert "weekly period from 2024-01-01 to 2024-01-07" in text
        assert "20 activities" in text
        assert "75.0% completion rate" in text
        assert "2 team members" in text
        assert "indicating good performance" in text
        assert "primary focus was on high priority items" in text
        assert "with Alice leading the effort by contributing 12h 30m across 10 activities." in text

    def test_unresolved_most_active_user_is_omitted(self, generator) -> None:
        """The contributor clause needs the user in the user metrics."""
        result = build_result(top_priority="Medium", most_active_user="ghost")
        text = generator.generate_summary(result, SummaryRequest()).executive_summary

        assert "leading the effort" not in text
        assert text.endswith("medium priority items.")

    def test_missing_priority_skips_focus_clause(self, generator) -> None:
        """Activities without a priority leave out the focus and leader sentence."""
        result = build_result(
            top_priority="None",
            most_active_user="alice",
            user_metrics={"alice": user("alice", 1, 80.0)},
        )
        text = generator.generate_summary(result, SummaryRequest()).executive_summary

        assert "primary focus" not in text
        assert "leading the effort" not in text
        assert text.endswith("performance.")

    @pytest.mark.parametrize(
        ("score", "level"),
        [(95, "excellent"), (80, "excellent"), (60, "good"), (40, "average"), (39.9, "concerning")],
    )
    def test_productivity_levels(self, score, level) -> None:
        assert productivity_level(score) == level


class TestHighlightsAndConcerns:
    """Threshold-driven highlights and concerns."""

    def test_strong_team_highlights(self, generator) -> None:
        """Completion 85 and productivity 80 lead the highlights in order."""
        response = generator.generate_summary(
            build_result(completion_rate=85.0, productivity_score=80.0), SummaryRequest()
        )

        assert "Excellent completion rate" in response.highlights[0]
        assert "Strong productivity score" in response.highlights[1]
        assert response.concerns == []

    def test_top_performers_highlight(self, generator) -> None:
        """At most two users with completion >= 80 and rank <= 3, by rank."""
        users = {
            "carol": user("carol", 3, 85.0),
            "alice": user("alice", 1, 95.0),
            "bob": user("bob", 2, 90.0),
        }
        response = generator.generate_summary(build_result(user_metrics=users), SummaryRequest())

        assert "Outstanding contributions from Alice and Bob with consistently high performance" in response.highlights

    def test_high_priority_highlight_and_concern(self, generator) -> None:
        good = build_result(priority_breakdown={"High": PriorityMetrics(priority="High", count=4, completion_rate=75.0)})
        bad = build_result(priority_breakdown={"High": PriorityMetrics(priority="High", count=4, completion_rate=50.0)})

        good_response = generator.generate_summary(good, SummaryRequest())
        bad_response = generator.generate_summary(bad, SummaryRequest())

        assert any("High-priority items completed at 75.0% rate" in item for item in good_response.highlights)
        assert any("High-priority items only 50.0% completed" in item for item in bad_response.concerns)
        assert "Prioritize high-priority items and consider resource reallocation" in bad_response.recommendations

    def test_weak_team_concerns(self, generator) -> None:
        """Low completion and productivity are both reported."""
        response = generator.generate_summary(
            build_result(completion_rate=40.0, productivity_score=30.0), SummaryRequest()
        )

        assert response.concerns[0].startswith("Completion rate of 40.0% is below optimal levels")
        assert response.concerns[1].startswith("Productivity score of 30.0%")
        assert response.highlights == []

    def test_underperformers(self, generator) -> None:
        """Completion below 50 or rank beyond the top three quarters."""
        users = {
            "alice": user("alice", 1, 90.0),
            "bob": user("bob", 2, 85.0),
            "carol": user("carol", 3, 45.0),
            "dan": user("dan", 4, 70.0),
        }
        response = generator.generate_summary(build_result(user_metrics=users), SummaryRequest())

        assert "2 team members showing below-average performance metrics" in response.concerns

    def test_workload_imbalance(self, generator) -> None:
        """A user with more than twice the mean time triggers the imbalance rules."""
        users = {
            "alice": user("alice", 1, 80.0, time_spent=100000),
            "bob": user("bob", 2, 80.0, time_spent=10000),
            "carol": user("carol", 3, 80.0, time_spent=10000),
        }
        response = generator.generate_summary(build_result(user_metrics=users), SummaryRequest())

        assert "Uneven workload distribution may lead to burnout and reduced efficiency" in response.concerns
        assert "Redistribute workload to balance team capacity and prevent burnout" in response.recommendations

    def test_single_user_is_never_imbalanced(self, generator) -> None:
        response = generator.generate_summary(
            build_result(user_metrics={"alice": user("alice", 1, 80.0)}), SummaryRequest()
        )

        assert not any("workload" in concern.lower() for concern in response.concerns)

    def test_trend_driven_items(self, generator) -> None:
        """Rising trends are highlights, falling trends are concerns and recommendations."""
        rising = build_result(trend_analysis=TrendAnalysis(overall_trend="increasing", velocity_trend="increasing"))
        falling = build_result(trend_analysis=TrendAnalysis(overall_trend="decreasing", velocity_trend="decreasing"))

        rising_response = generator.generate_summary(rising, SummaryRequest())
        falling_response = generator.generate_summary(falling, SummaryRequest())

        assert "Positive trend in overall team performance and productivity" in rising_response.highlights
        assert "Improving velocity indicates enhanced team efficiency" in rising_response.highlights
        assert "Declining trend in overall team performance requires investigation" in falling_response.concerns
        assert "Decreasing velocity trend may indicate capacity or process issues" in falling_response.concerns
        assert "Investigate root causes of declining performance trends" in falling_response.recommendations


class TestRecommendations:
    """Recommendations list."""

    def test_general_recommendations_always_last(self, generator) -> None:
        response = generator.generate_summary(
            build_result(completion_rate=95.0, productivity_score=90.0), SummaryRequest()
        )

        assert response.recommendations == ALWAYS_RECOMMENDED

    def test_low_completion_and_productivity(self, generator) -> None:
        """Each triggered rule adds two items before the general ones."""
        response = generator.generate_summary(
            build_result(completion_rate=50.0, productivity_score=50.0), SummaryRequest()
        )

        assert len(response.recommendations) == 6
        assert response.recommendations[0].startswith("Implement daily standups")
        assert response.recommendations[2].startswith("Conduct process review")


class TestUserInsights:
    """Per-user insights."""

    def test_insights_sorted_and_truncated(self, generator) -> None:
        users = {
            "carol": user("carol", 3, 50.0),
            "alice": user("alice", 1, 95.0, top_issues=["PROJ-1", "PROJ-2"]),
            "bob": user("bob", 2, 85.0, time_spent=200000),
        }
        response = generator.generate_summary(
            build_result(user_metrics=users), SummaryRequest(include_users=True, max_users=2)
        )
        insights = response.user_insights

        assert [insight.user_id for insight in insights] == ["alice", "bob"]
        assert insights[0].key_achievements == [
            "Exceptional completion rate above 90%",
            "Top performer in team productivity rankings",
            "Successfully handled 2 complex, high-impact issues",
        ]
        assert insights[1].areas_for_improvement == [
            "Consider breaking down large tasks into smaller, manageable pieces"
        ]
        assert insights[1].time_spent == "55h 33m"

    def test_no_limit_and_low_completion(self, generator) -> None:
        users = {"alice": user("alice", 1, 95.0), "carol": user("carol", 2, 40.0)}
        response = generator.generate_summary(
            build_result(user_metrics=users), SummaryRequest(include_users=True, max_users=0)
        )

        assert len(response.user_insights) == 2
        assert response.user_insights[1].areas_for_improvement == ["Focus on improving task completion rate"]

    def test_insights_excluded_by_default(self, generator) -> None:
        users = {"alice": user("alice", 1, 95.0)}
        response = generator.generate_summary(build_result(user_metrics=users), SummaryRequest())

        assert response.user_insights == []


class TestTrendSection:
    """Trend analysis block."""

    def test_trend_section(self, generator) -> None:
        trends = TrendAnalysis(
            overall_trend="increasing",
            velocity_trend="decreasing",
            productivity_trend="increasing",
            seasonality={"Monday": 0.5},
        )
        response = generator.generate_summary(
            build_result(trend_analysis=trends), SummaryRequest(include_trends=True)
        )

        assert response.trend_analysis.overall_trend == "increasing"
        assert response.trend_analysis.key_changes == [
            "Overall team performance showing positive improvement",
            "Team velocity decreasing, may indicate capacity issues",
        ]
        assert response.trend_analysis.seasonality == {"Monday": 0.5}

    def test_trend_section_requires_data_and_request(self, generator) -> None:
        trends = TrendAnalysis()

        without_request = generator.generate_summary(build_result(trend_analysis=trends), SummaryRequest())
        without_data = generator.generate_summary(build_result(), SummaryRequest(include_trends=True))

        assert without_request.trend_analysis is None
        assert without_data.trend_analysis is None


class TestCustomSections:
    """Custom section dispatch."""

    def test_unknown_section(self, generator) -> None:
        response = generator.generate_summary(build_result(), SummaryRequest(custom_sections=["unknown_section"]))

        assert "not implemented" in response.sections["unknown_section"]
        assert response.sections["unknown_section"] == "Custom section 'unknown_section' not implemented"

    def test_dispatch_is_case_insensitive(self, generator) -> None:
        """The requested section name is kept as the key."""
        breakdown = {
            "Low": PriorityMetrics(priority="Low", count=1, completion_rate=0.0, total_time_spent=1800),
            "High": PriorityMetrics(priority="High", count=2, completion_rate=100.0, total_time_spent=12600),
            "Urgent": PriorityMetrics(priority="Urgent", count=1),
        }
        response = generator.generate_summary(
            build_result(priority_breakdown=breakdown), SummaryRequest(custom_sections=["Priority_Breakdown"])
        )

        assert response.sections["Priority_Breakdown"] == (
            "Priority Distribution Analysis:\n"
            "- High Priority: 2 items (100.0% completion rate, 3h 30m total time)\n"
            "- Low Priority: 1 items (0.0% completion rate, 30m total time)\n"
        )

    def test_status_summary(self, generator) -> None:
        breakdown = {"Done": StatusMetrics(status="Done", count=3, total_time_spent=7200, recent_changes=2)}
        response = generator.generate_summary(
            build_result(status_breakdown=breakdown), SummaryRequest(custom_sections=["status_summary"])
        )

        assert response.sections["status_summary"] == (
            "Status Distribution Summary:\n- Done: 3 items (2h 0m total time, 2 recent changes)\n"
        )

    def test_velocity_section(self, generator) -> None:
        velocity = VelocityMetrics(current_velocity=1.5, average_velocity=1.25, velocity_trend="stable")
        with_velocity = generator.generate_summary(
            build_result(velocity_metrics=velocity), SummaryRequest(custom_sections=["velocity_analysis"])
        )
        without_velocity = generator.generate_summary(
            build_result(), SummaryRequest(custom_sections=["velocity_analysis"])
        )

        assert with_velocity.sections["velocity_analysis"] == (
            "Velocity Analysis:\n"
            "- Current Velocity: 1.50 items/day\n"
            "- Average Velocity: 1.25 items/day\n"
            "- Velocity Trend: stable\n"
            "- Burndown Rate: 80.0%\n"
        )
        assert without_velocity.sections["velocity_analysis"] == "Velocity analysis not available"

    def test_time_analysis(self, generator) -> None:
        response = generator.generate_summary(build_result(), SummaryRequest(custom_sections=["time_analysis"]))

        assert response.sections["time_analysis"] == (
            "Time Investment Analysis:\n"
            "- Total Time Invested: 20h 0m\n"
            "- Average Time per User: 10h 0m\n"
            "- Average Time per Task: 1h 0m\n"
            "- Period: 2024-01-01 to 2024-01-07\n"
        )


class TestFormats:
    """Response format handling."""

    def test_detailed_format_embeds_raw_data(self, generator) -> None:
        result = build_result()
        detailed = generator.generate_summary(result, SummaryRequest(format=SummaryFormat.DETAILED))
        executive = generator.generate_summary(result, SummaryRequest(format=SummaryFormat.EXECUTIVE))

        assert detailed.raw_data == result
        assert executive.raw_data is None

    def test_title_and_period_are_copied(self, generator) -> None:
        response = generator.generate_summary(
            build_result(), SummaryRequest(title="Sprint 12", period="monthly")
        )

        assert response.title == "Sprint 12"
        assert response.period == "monthly"


class TestEndToEnd:
    """DataProcessor output feeding the generator."""

    def test_processed_fixture(self, generator, sample_activities) -> None:
        options = ProcessingOptions(group_by_user=True, group_by_priority=True, group_by_status=True)
        result = DataProcessor().process_activities(sample_activities, options, as_of=AS_OF)
        response = generator.generate_summary(
            result, SummaryRequest(title="Weekly", include_users=True, custom_sections=["status_summary"])
        )

        assert response.key_metrics.completed_activities == 2
        assert response.highlights == ["High-priority items completed at 100.0% rate, showing good prioritization"]
        assert "1 team members showing below-average performance metrics" in response.concerns
        assert len(response.recommendations) == 4
        assert [insight.user_id for insight in response.user_insights] == ["alice", "bob"]
        assert "with Alice leading the effort" in response.executive_summary
        assert response.sections["status_summary"].startswith("Status Distribution Summary:\n- Done: 2 items")
