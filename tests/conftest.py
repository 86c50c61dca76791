from datetime import datetime, timedelta

import pytest

from domains.activity_summary.core.activity import Activity, AssigneeUser
from utils.logging.logging_manager import LogLevel, LogManager

BASE_TIME = datetime(2024, 1, 15, 9, 0, 0)
AS_OF = datetime(2024, 1, 20, 12, 0, 0)


@pytest.fixture(scope="session", autouse=True)
def log_manager(tmp_path_factory):
    """Initialize the LogManager singleton once, writing into a temporary directory."""
    log_dir = tmp_path_factory.mktemp("logs")
    return LogManager.initialize(
        log_dir=str(log_dir),
        log_file="test.log",
        log_retention_hours=1,
        default_level=LogLevel.DEBUG,
        log_output="file",
    )


def build_activity(
    key: str,
    user_id: str = "user-1",
    display_name: str | None = None,
    priority: str = "Medium",
    status: str = "Done",
    time_spent: int = 3600,
    created: datetime = BASE_TIME,
    updated: datetime | None = None,
    summary: str = "",
) -> Activity:
    return Activity(
        id=key.split("-")[-1],
        key=key,
        summary=summary or f"Work on {key}",
        priority=priority,
        status=status,
        time_spent=time_spent,
        created=created,
        updated=updated or created + timedelta(days=1),
        assignee=AssigneeUser(account_id=user_id, display_name=display_name or user_id.replace("-", " ").title()),
    )


@pytest.fixture
def make_activity():
    return build_activity


@pytest.fixture
def sample_activities() -> list[Activity]:
    """Four activities across two users (High/Medium/High/Low priorities)."""
    return [
        build_activity(
            "PROJ-1", "alice", "Alice", "High", "Done", 7200, BASE_TIME, BASE_TIME + timedelta(days=2)
        ),
        build_activity(
            "PROJ-2",
            "alice",
            "Alice",
            "Medium",
            "In Progress",
            3600,
            BASE_TIME + timedelta(days=1),
            BASE_TIME + timedelta(days=3),
        ),
        build_activity(
            "PROJ-3", "bob", "Bob", "High", "Done", 5400, BASE_TIME, BASE_TIME + timedelta(days=1)
        ),
        build_activity(
            "PROJ-4", "bob", "Bob", "Low", "Open", 1800, BASE_TIME + timedelta(days=2), BASE_TIME + timedelta(days=4)
        ),
    ]
