from logging import Logger

from domains.activity_summary.core.processing_models import ProcessingResult
from domains.activity_summary.core.summary_models import SummaryResponse
from utils.logging.logging_manager import LogManager
from utils.output_manager import OutputManager

REPORT_SUB_DIR = "activity-summary"


class ReportExporter:
    """Persists generated summaries (JSON) and metric breakdowns (CSV) under the output directory."""

    def __init__(self, logger: Logger | None = None):
        self.logger = logger or LogManager.get_instance().get_logger("ReportExporter")

    def save_summary(
        self, response: SummaryResponse, file_basename: str = "activity_summary", output_path: str | None = None
    ) -> str:
        """
        Save a SummaryResponse as JSON.

        Args:
            response: Generated summary.
            file_basename: Base name of the timestamped file in output/activity-summary/.
            output_path: Full path overriding the default location.

        Returns:
            Path of the written file.
        """
        path = OutputManager.save_json_report(
            response.model_dump(mode="json"), REPORT_SUB_DIR, file_basename, output_path=output_path
        )
        self.logger.info(f"Summary saved to {path}")
        return path

    def export_metrics_csv(self, data: ProcessingResult, file_basename: str = "activity_metrics") -> dict[str, str]:
        """Write one CSV per non-empty breakdown (users, priorities, statuses); returns table -> path."""
        tables = {
            "users": [self._user_row(metrics) for metrics in data.user_metrics.values()],
            "priorities": [metrics.model_dump() for metrics in data.priority_breakdown.values()],
            "statuses": [self._status_row(metrics) for metrics in data.status_breakdown.values()],
        }

        paths = {}
        for table, rows in tables.items():
            if not rows:
                self.logger.debug(f"No {table} metrics to export")
                continue
            paths[table] = OutputManager.save_csv_report(rows, REPORT_SUB_DIR, f"{file_basename}_{table}")
            self.logger.info(f"Exported {len(rows)} {table} rows to {paths[table]}")

        return paths

    @staticmethod
    def _user_row(metrics) -> dict:
        row = metrics.model_dump(exclude={"priority_distribution", "status_distribution", "top_issues"})
        row["top_issues"] = ", ".join(metrics.top_issues)
        return row

    @staticmethod
    def _status_row(metrics) -> dict:
        row = metrics.model_dump(exclude={"users"})
        row["users"] = ", ".join(metrics.users)
        return row
