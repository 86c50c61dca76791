"""Activity Models

Canonical input record for the activity summary engine. An Activity is one
issue-tracker ticket, already validated and normalized by the activity loader.
Activities are immutable for the whole processing run.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, computed_field

COMPLETED_STATUSES = frozenset({"Done", "Closed", "Resolved", "Complete", "Finished"})
IN_PROGRESS_STATUSES = frozenset({"In Progress", "In Development", "In Review", "In Testing"})
HIGH_PRIORITIES = frozenset({"High", "Critical"})

PRIORITY_WEIGHTS = {
    "Critical": 5,
    "Highest": 5,
    "High": 4,
    "Medium": 3,
    "Low": 2,
    "Lowest": 1,
}

UNASSIGNED_ID = "unassigned"


def is_completed_status(status: str) -> bool:
    """Exact, case-sensitive match against the completion statuses."""
    return status in COMPLETED_STATUSES


def format_time_spent(seconds: int) -> str:
    """Format a duration in seconds as "2h 30m" / "45m"."""
    if seconds <= 0:
        return "0m"

    hours = seconds // 3600
    minutes = (seconds % 3600) // 60

    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"


class AssigneeUser(BaseModel):
    """Issue-tracker user an activity is assigned to."""

    model_config = ConfigDict(frozen=True)

    account_id: str = Field(..., description="Stable user identifier")
    display_name: str = Field("", description="Human readable name")


class Activity(BaseModel):
    """A single work item (ticket) pulled from the issue tracker."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Issue tracker internal id")
    key: str = Field(..., description="Human readable ticket code (e.g. CWS-123)")
    summary: str = Field("", description="Ticket title")
    priority: str = Field("", description="Free text priority (High, Medium, ...)")
    status: str = Field("", description="Free text workflow status")
    time_spent: int = Field(0, ge=0, description="Logged time in seconds")
    created: datetime
    updated: datetime
    assignee: AssigneeUser = Field(
        default_factory=lambda: AssigneeUser(account_id=UNASSIGNED_ID, display_name="Unassigned")
    )
    type: str = Field("", description="Issue type (Bug, Story, Task, ...)")
    description: str = Field("", description="Ticket body")
    project_key: str = Field("", description="Project the ticket belongs to")

    @property
    def is_completed(self) -> bool:
        return is_completed_status(self.status)

    @property
    def is_in_progress(self) -> bool:
        return self.status in IN_PROGRESS_STATUSES

    @property
    def is_high_priority(self) -> bool:
        return self.priority in HIGH_PRIORITIES

    @property
    def priority_weight(self) -> int:
        """Numeric weight used to order priorities (unknown priorities weigh 0)."""
        return PRIORITY_WEIGHTS.get(self.priority, 0)

    @computed_field
    @property
    def formatted_time_spent(self) -> str:
        return format_time_spent(self.time_spent)

    def to_summary_line(self) -> str:
        return f"{self.key}: {self.summary} [{self.status}] - {self.priority}"
