"""
Candidate, job and stage records.

Records are frozen snapshots of what the backend returned for one load
cycle. Values that arrive malformed are coerced on construction so the
filtering and stats code can treat every field as present.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from .schema import coerce_text, parse_timestamp


class Stage(str, Enum):
    """Pipeline position of a candidate, in pipeline order."""

    APPLIED = "applied"
    SCREEN = "screen"
    TECH = "tech"
    OFFER = "offer"
    HIRED = "hired"
    REJECTED = "rejected"


@dataclass(frozen=True)
class StageInfo:
    value: str
    label: str
    color: str


# Order is significant: the first entry is the fallback for unknown stages.
STAGES: Tuple[StageInfo, ...] = (
    StageInfo(Stage.APPLIED.value, "Applied", "blue"),
    StageInfo(Stage.SCREEN.value, "Screening", "yellow"),
    StageInfo(Stage.TECH.value, "Technical", "purple"),
    StageInfo(Stage.OFFER.value, "Offer", "green"),
    StageInfo(Stage.HIRED.value, "Hired", "emerald"),
    StageInfo(Stage.REJECTED.value, "Rejected", "red"),
)

CLOSED_STAGES = frozenset({Stage.HIRED.value, Stage.REJECTED.value})
PENDING_REVIEW_STAGES = frozenset({Stage.SCREEN.value, Stage.TECH.value})


class JobStatus(str, Enum):
    ACTIVE = "active"
    ARCHIVED = "archived"


@dataclass(frozen=True)
class Candidate:
    id: str
    name: str = ""
    email: str = ""
    phone: str = ""
    stage: str = ""
    job_id: str = ""
    applied_at: Optional[datetime] = None
    resume: str = ""
    timeline: Tuple[Any, ...] = field(default_factory=tuple)

    @property
    def activity_count(self) -> int:
        return len(self.timeline)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Candidate":
        timeline = data.get("timeline")
        return cls(
            id=coerce_text(data.get("id")),
            name=coerce_text(data.get("name")),
            email=coerce_text(data.get("email")),
            phone=coerce_text(data.get("phone")),
            stage=coerce_text(data.get("stage")),
            job_id=coerce_text(data.get("jobId")),
            applied_at=parse_timestamp(data.get("appliedAt")),
            resume=coerce_text(data.get("resume")),
            timeline=tuple(timeline) if isinstance(timeline, list) else (),
        )


@dataclass(frozen=True)
class Job:
    id: str
    title: str = ""
    location: str = ""
    status: str = ""
    created_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Job":
        return cls(
            id=coerce_text(data.get("id")),
            title=coerce_text(data.get("title")),
            location=coerce_text(data.get("location")),
            status=coerce_text(data.get("status")),
            created_at=parse_timestamp(data.get("createdAt")),
        )
