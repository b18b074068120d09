from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

CANDIDATE_STR_FIELDS = ["name", "email", "phone", "stage", "jobId", "appliedAt", "resume"]
JOB_STR_FIELDS = ["title", "location", "status", "createdAt"]


def _is_non_empty_str(v: Any) -> bool:
    return isinstance(v, str) and v.strip() != ""


def _is_id(v: Any) -> bool:
    if isinstance(v, bool):
        return False
    return _is_non_empty_str(v) or isinstance(v, int)


def coerce_text(v: Any) -> str:
    """Text as the views expect it; anything that is not text or a number becomes ''."""
    if isinstance(v, str):
        return v
    if isinstance(v, (int, float)) and not isinstance(v, bool):
        return str(v)
    return ""


def parse_timestamp(v: Any) -> Optional[datetime]:
    """
    Parse an ISO-8601 string, epoch milliseconds or datetime.

    Aware values are converted to naive local time so every comparison in
    the stats window happens on the local clock. Returns None when the
    value cannot be read as a point in time.
    """
    if isinstance(v, datetime):
        dt = v
    elif isinstance(v, (int, float)) and not isinstance(v, bool):
        try:
            dt = datetime.fromtimestamp(v / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    elif _is_non_empty_str(v):
        text = v.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if dt.tzinfo is not None:
        # Offsets near datetime.min/max can push the local value out of range.
        try:
            dt = dt.astimezone().replace(tzinfo=None)
        except (OverflowError, OSError, ValueError):
            return None
    return dt


def validate_candidate(data: Dict[str, Any]) -> List[str]:
    """
    Returns a list of problems found in a raw candidate record.
    Empty list means the record is well-formed. Problems never reject the
    record; they are logged and the field falls back to a display default.
    """
    errors: List[str] = []

    if "id" not in data:
        errors.append("Missing required field: id")
    elif not _is_id(data["id"]):
        errors.append("Field 'id' must be a non-empty string or integer")

    for f in CANDIDATE_STR_FIELDS:
        if f in data and data[f] is not None and not isinstance(data[f], str):
            errors.append(f"Field '{f}' must be a string if provided")

    if "appliedAt" in data and parse_timestamp(data["appliedAt"]) is None:
        errors.append("Field 'appliedAt' is not a readable timestamp")

    timeline = data.get("timeline")
    if timeline is not None and not isinstance(timeline, list):
        errors.append("Field 'timeline' must be a list if provided")

    return errors


def validate_job(data: Dict[str, Any]) -> List[str]:
    """Same contract as validate_candidate, for job records."""
    errors: List[str] = []

    if "id" not in data:
        errors.append("Missing required field: id")
    elif not _is_id(data["id"]):
        errors.append("Field 'id' must be a non-empty string or integer")

    for f in JOB_STR_FIELDS:
        if f in data and data[f] is not None and not isinstance(data[f], str):
            errors.append(f"Field '{f}' must be a string if provided")

    return errors
