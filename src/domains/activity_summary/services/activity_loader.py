"""Activity Loader

Turns raw issue-tracker payloads into validated Activity records.

Two payload shapes are accepted:
    - Jira REST issues: {"id", "key", "fields": {"summary", "status": {"name"}, ...}}
    - Flat dicts using the Activity field names (the layout written by exports)
"""

import re
from datetime import datetime, timezone
from logging import Logger
from typing import Any, Iterable

from pydantic import ValidationError

from domains.activity_summary.core.activity import UNASSIGNED_ID, Activity, AssigneeUser
from domains.activity_summary.error import ActivityLoadError, ActivityValidationError
from utils.data.json_manager import JSONManager
from utils.logging.logging_manager import LogManager

ISSUE_KEY_PATTERN = re.compile(r"^[A-Z][A-Z0-9]*-\d+$")
NUMERIC_OFFSET_PATTERN = re.compile(r"([+-]\d{2})(\d{2})$")

TIMESTAMP_FORMATS = (
    "%Y-%m-%dT%H:%M:%S.%f%z",
    "%Y-%m-%dT%H:%M:%S%z",
    "%Y-%m-%dT%H:%M:%S.%f",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d",
)


def parse_timestamp(value: Any) -> datetime:
    """
    Parse an issue-tracker timestamp.

    Accepts datetime objects, RFC 3339 strings ("2024-01-15T10:30:00Z"),
    Jira strings with a compact offset ("2024-01-15T10:30:00.000+0000"),
    "YYYY-MM-DD HH:MM:SS" and plain dates. Values without an offset are read as UTC,
    so every parsed timestamp is timezone-aware.

    Raises:
        ValueError: If the value matches none of the supported layouts.
    """
    if isinstance(value, datetime):
        return _as_utc(value)
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Invalid timestamp: {value!r}")

    text = value.strip()
    if text.endswith("Z"):
        text = f"{text[:-1]}+00:00"
    text = NUMERIC_OFFSET_PATTERN.sub(r"\1:\2", text) if "T" in text else text

    try:
        return _as_utc(datetime.fromisoformat(text))
    except ValueError:
        pass

    for fmt in TIMESTAMP_FORMATS:
        try:
            return _as_utc(datetime.strptime(text, fmt))
        except ValueError:
            continue

    raise ValueError(f"Unsupported timestamp format: {value!r}")


def _as_utc(value: datetime) -> datetime:
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)


class ActivityLoader:
    """Builds Activity objects from Jira issues or flat activity dicts."""

    def __init__(self, logger: Logger | None = None):
        self.logger = logger or LogManager.get_instance().get_logger("ActivityLoader")

    def parse_issue(self, payload: dict) -> Activity:
        """
        Convert one raw payload into an Activity.

        Raises:
            ActivityValidationError: If the payload breaks the activity contract
                (bad key, negative time, unparseable timestamps, wrong types).
        """
        if not isinstance(payload, dict):
            raise ActivityValidationError(f"Expected an object, got {type(payload).__name__}")

        raw = self._from_jira(payload) if isinstance(payload.get("fields"), dict) else self._from_flat(payload)
        key = raw.get("key") or ""

        if not ISSUE_KEY_PATTERN.match(str(key)):
            raise ActivityValidationError(f"Invalid issue key: '{key}'", key=key, field="key")

        time_spent = raw.get("time_spent")
        if time_spent is None:
            raw["time_spent"] = 0
        elif not isinstance(time_spent, int) or isinstance(time_spent, bool) or time_spent < 0:
            raise ActivityValidationError(
                f"time_spent must be a non-negative integer, got {time_spent!r}", key=key, field="time_spent"
            )

        for field in ("created", "updated"):
            try:
                raw[field] = parse_timestamp(raw.get(field))
            except ValueError as e:
                raise ActivityValidationError(str(e), key=key, field=field, cause=e) from e

        raw["id"] = str(raw.get("id") or key)
        for field in ("summary", "priority", "status", "type", "description", "project_key"):
            if raw.get(field) is None:
                raw[field] = ""

        try:
            return Activity(**raw)
        except ValidationError as e:
            first_error = e.errors()[0]
            field = ".".join(str(part) for part in first_error.get("loc", ())) or None
            raise ActivityValidationError(
                f"Invalid activity: {first_error.get('msg')}", key=key, field=field, cause=e
            ) from e

    def load_activities(self, payloads: Iterable[dict], strict: bool = False) -> list[Activity]:
        """
        Parse a batch of payloads.

        Args:
            payloads: Raw issues or flat activity dicts.
            strict: Raise on the first invalid record instead of skipping it.

        Returns:
            Valid activities in input order.
        """
        activities = []
        skipped = 0
        for index, payload in enumerate(payloads):
            try:
                activities.append(self.parse_issue(payload))
            except ActivityValidationError as e:
                if strict:
                    raise
                skipped += 1
                self.logger.warning(f"Skipping invalid activity at index {index}: {e}")

        self.logger.info(f"Loaded {len(activities)} activities ({skipped} skipped)")
        return activities

    def load_activities_from_file(self, file_path: str, strict: bool = False) -> list[Activity]:
        """
        Read activities from a JSON file holding a list, or an object with an "issues" list.

        Raises:
            ActivityLoadError: If the file is missing, is not valid JSON or has another layout.
        """
        self.logger.info(f"Reading activities from {file_path}")
        try:
            content = JSONManager.read_json(file_path)
        except FileNotFoundError as e:
            raise ActivityLoadError(file_path, "file not found", cause=e) from e
        except ValueError as e:
            raise ActivityLoadError(file_path, "invalid JSON", cause=e) from e

        if isinstance(content, dict):
            content = content.get("issues")
        if not isinstance(content, list):
            raise ActivityLoadError(file_path, "expected a list of issues or an object with an 'issues' list")

        return self.load_activities(content, strict=strict)

    @staticmethod
    def _from_jira(payload: dict) -> dict:
        fields = payload["fields"]
        return {
            "id": payload.get("id"),
            "key": payload.get("key"),
            "summary": fields.get("summary"),
            "priority": (fields.get("priority") or {}).get("name"),
            "status": (fields.get("status") or {}).get("name"),
            "time_spent": fields.get("timespent"),
            "created": fields.get("created"),
            "updated": fields.get("updated"),
            "assignee": ActivityLoader._assignee(fields.get("assignee")),
            "type": (fields.get("issuetype") or {}).get("name"),
            "description": fields.get("description") if isinstance(fields.get("description"), str) else None,
            "project_key": (fields.get("project") or {}).get("key"),
        }

    @staticmethod
    def _from_flat(payload: dict) -> dict:
        raw = {
            field: payload.get(field)
            for field in (
                "id",
                "key",
                "summary",
                "priority",
                "status",
                "time_spent",
                "created",
                "updated",
                "type",
                "description",
                "project_key",
            )
        }
        raw["assignee"] = ActivityLoader._assignee(payload.get("assignee"))
        return raw

    @staticmethod
    def _assignee(raw: Any) -> AssigneeUser:
        if not isinstance(raw, dict):
            return AssigneeUser(account_id=UNASSIGNED_ID, display_name="Unassigned")

        account_id = raw.get("account_id") or raw.get("accountId")
        if not account_id:
            return AssigneeUser(account_id=UNASSIGNED_ID, display_name="Unassigned")

        display_name = raw.get("display_name") or raw.get("displayName") or account_id
        return AssigneeUser(account_id=str(account_id), display_name=str(display_name))
