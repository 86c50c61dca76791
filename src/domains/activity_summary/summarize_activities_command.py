"""
Activity Summary Command

Builds an executive summary from a JSON export of issue-tracker activities.

FUNCTIONALITY:
- Load activities from a Jira search export or a list of flat activity records
- Aggregate metrics by user, priority and status
- Optionally analyze weekly trends and per-user velocity
- Generate highlights, concerns, recommendations and user insights
- Save the summary as JSON and, optionally, the metric tables as CSV

USAGE EXAMPLES:

1. Weekly summary with the default breakdowns:
   python src/main.py activity_summary summarize-activities --input data/issues.json

2. Trends, velocity and user insights for the top 5 users:
   python src/main.py activity_summary summarize-activities --input data/issues.json
   --trends --velocity --include-users --max-users 5

3. Custom sections and CSV export:
   python src/main.py activity_summary summarize-activities --input data/issues.json
   --section priority_breakdown --section time_analysis --csv

4. Only activities with at least 2 hours logged, detailed format:
   python src/main.py activity_summary summarize-activities --input data/issues.json
   --min-time-spent 7200 --format detailed --output-file output/summary.json
"""

from argparse import ArgumentParser, Namespace

from domains.activity_summary.core.processing_models import ProcessingOptions
from domains.activity_summary.core.summary_models import SummaryFormat, SummaryRequest, SummaryResponse
from domains.activity_summary.services.activity_loader import ActivityLoader
from domains.activity_summary.services.data_processor import DataProcessor
from domains.activity_summary.services.report_exporter import ReportExporter
from domains.activity_summary.services.summary_generator import SummaryGenerator
from utils.command.base_command import BaseCommand
from utils.logging.logging_manager import LogManager

GROUP_BY_CHOICES = ["user", "priority", "status"]
SECTION_CHOICES = ["priority_breakdown", "status_summary", "velocity_analysis", "time_analysis"]


class SummarizeActivitiesCommand(BaseCommand):
    """Command to aggregate activities and generate an executive summary."""

    @staticmethod
    def get_name() -> str:
        return "summarize-activities"

    @staticmethod
    def get_description() -> str:
        return "Aggregate issue-tracker activities into productivity metrics and an executive summary."

    @staticmethod
    def get_help() -> str:
        return (
            "Loads activities from a JSON file, computes user/priority/status metrics, "
            "optional trends and velocity, and writes a structured executive summary."
        )

    @staticmethod
    def get_arguments(parser: ArgumentParser):
        parser.add_argument(
            "--input",
            type=str,
            required=True,
            help="Path to a JSON file with a list of issues or an object with an 'issues' list.",
        )
        parser.add_argument("--title", type=str, default="Activity Summary", help="Summary title.")
        parser.add_argument(
            "--period",
            type=str,
            default="weekly",
            help="Reporting period label (weekly, monthly, quarterly; default: weekly).",
        )
        parser.add_argument(
            "--group-by",
            action="append",
            choices=GROUP_BY_CHOICES,
            help="Breakdown to compute; repeatable (default: user, priority and status).",
        )
        parser.add_argument("--trends", action="store_true", help="Analyze weekly trends and seasonality.")
        parser.add_argument("--velocity", action="store_true", help="Calculate per-user velocity.")
        parser.add_argument(
            "--min-time-spent",
            type=int,
            default=0,
            help="Ignore activities with less logged time, in seconds (default: 0, no filtering).",
        )
        parser.add_argument(
            "--max-users",
            type=int,
            default=0,
            help="Maximum number of user insights (default: 0, no limit).",
        )
        parser.add_argument("--include-users", action="store_true", help="Include per-user insights.")
        parser.add_argument(
            "--format",
            type=str,
            default=SummaryFormat.EXECUTIVE.value,
            choices=[summary_format.value for summary_format in SummaryFormat],
            help="Summary format; 'detailed' embeds the raw metrics (default: executive).",
        )
        parser.add_argument(
            "--section",
            action="append",
            default=[],
            help=f"Custom section to render; repeatable. Known sections: {', '.join(SECTION_CHOICES)}.",
        )
        parser.add_argument(
            "--output-file",
            type=str,
            required=False,
            help="Optional file path for the JSON summary.",
        )
        parser.add_argument("--csv", action="store_true", help="Also export the metric breakdowns as CSV.")
        parser.add_argument(
            "--strict",
            action="store_true",
            help="Fail on the first invalid activity instead of skipping it.",
        )

    @staticmethod
    def main(args: Namespace):
        """
        Main function to execute the activity summary.

        Args:
            args (Namespace): Command-line arguments.
        """
        logger = LogManager.get_instance().get_logger("SummarizeActivitiesCommand")

        try:
            group_by = set(args.group_by or GROUP_BY_CHOICES)

            activities = ActivityLoader().load_activities_from_file(args.input, strict=args.strict)

            options = ProcessingOptions(
                group_by_user="user" in group_by,
                group_by_priority="priority" in group_by,
                group_by_status="status" in group_by,
                analyze_trends=args.trends,
                calculate_velocity=args.velocity,
                minimum_time_spent=args.min_time_spent,
            )
            result = DataProcessor().process_activities(activities, options)

            request = SummaryRequest(
                title=args.title,
                period=args.period,
                include_trends=args.trends,
                include_users=args.include_users,
                custom_sections=args.section,
                max_users=args.max_users,
                min_time_spent=args.min_time_spent,
                format=SummaryFormat(args.format),
            )
            response = SummaryGenerator().generate_summary(result, request)

            exporter = ReportExporter()
            output_path = exporter.save_summary(response, output_path=args.output_file)

            csv_paths = {}
            if args.csv:
                csv_paths = exporter.export_metrics_csv(result)

            logger.info("Activity summary completed successfully")
            SummarizeActivitiesCommand._print_summary(response, output_path, csv_paths)

        except Exception as e:
            logger.error(f"Failed to generate activity summary: {e}")
            print(f"Error: Failed to generate activity summary: {e}")
            exit(1)

    @staticmethod
    def _print_summary(response: SummaryResponse, output_path: str, csv_paths: dict[str, str]):
        print("\n" + "=" * 70)
        print(f"📊 {response.title} ({response.period})")
        print("=" * 70)
        print(response.executive_summary)

        if response.highlights:
            print("\n✅ Highlights:")
            for highlight in response.highlights:
                print(f"  • {highlight}")

        if response.concerns:
            print("\n⚠️  Concerns:")
            for concern in response.concerns:
                print(f"  • {concern}")

        print("\n💡 Recommendations:")
        for recommendation in response.recommendations:
            print(f"  • {recommendation}")

        print(f"\n💾 Summary saved to: {output_path}")
        for table, path in csv_paths.items():
            print(f"💾 {table.capitalize()} metrics exported to: {path}")
