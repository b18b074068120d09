"""
Dashboard statistics over a loaded dataset.

Invariant:
Given identical jobs, candidates and `now`, compute_stats returns an
identical snapshot. Nothing is carried over between calls.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Dict, List, Sequence, TypeVar

from .models import (
    CLOSED_STAGES,
    PENDING_REVIEW_STAGES,
    STAGES,
    Candidate,
    Job,
    JobStatus,
    Stage,
)

RECENT_LIMIT = 5
WEEK = timedelta(days=7)

T = TypeVar("T")


@dataclass(frozen=True)
class DashboardStats:
    total_jobs: int = 0
    active_jobs: int = 0
    archived_jobs: int = 0
    total_candidates: int = 0
    active_candidates: int = 0
    hired_candidates: int = 0
    rejected_candidates: int = 0
    recent_applications: int = 0
    today_applications: int = 0
    total_assessments: int = 0
    pending_reviews: int = 0
    by_stage: Dict[str, int] = field(default_factory=dict)
    computed_at: datetime = field(default_factory=datetime.now)


def start_of_day(now: datetime) -> datetime:
    """Midnight of now's calendar date, on the same clock as now."""
    return now.replace(hour=0, minute=0, second=0, microsecond=0)


def _local(now: datetime) -> datetime:
    # Candidate timestamps are naive local time; see schema.parse_timestamp.
    if now.tzinfo is not None:
        return now.astimezone().replace(tzinfo=None)
    return now


def compute_stats(jobs: Sequence[Job], candidates: Sequence[Candidate], now: datetime) -> DashboardStats:
    """
    Aggregate job and candidate counts in one pass over each collection.

    "Today" starts at local midnight of now; "this week" is the rolling
    seven days ending at now. Both boundaries are inclusive. Candidates
    with an unreadable applied_at are counted everywhere except the time
    windows. Stages outside the known six count toward active candidates
    but not toward by_stage.
    """
    now = _local(now)
    today = start_of_day(now)
    week_ago = now - WEEK

    active_jobs = archived_jobs = 0
    for job in jobs:
        if job.status == JobStatus.ACTIVE.value:
            active_jobs += 1
        elif job.status == JobStatus.ARCHIVED.value:
            archived_jobs += 1

    by_stage = {info.value: 0 for info in STAGES}
    active = pending = recent = today_count = 0
    for c in candidates:
        if c.stage in by_stage:
            by_stage[c.stage] += 1
        if c.stage not in CLOSED_STAGES:
            active += 1
        if c.stage in PENDING_REVIEW_STAGES:
            pending += 1
        if c.applied_at is not None:
            if c.applied_at >= week_ago:
                recent += 1
            if c.applied_at >= today:
                today_count += 1

    return DashboardStats(
        total_jobs=len(jobs),
        active_jobs=active_jobs,
        archived_jobs=archived_jobs,
        total_candidates=len(candidates),
        active_candidates=active,
        hired_candidates=by_stage[Stage.HIRED.value],
        rejected_candidates=by_stage[Stage.REJECTED.value],
        recent_applications=recent,
        today_applications=today_count,
        total_assessments=0,
        pending_reviews=pending,
        by_stage=by_stage,
        computed_at=now,
    )


def recent_items(items: Sequence[T], limit: int = RECENT_LIMIT) -> List[T]:
    """First `limit` records in backend order, as the dashboard lists them."""
    return list(items[:limit])
