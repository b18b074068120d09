"""
One place for every display default.

Lookups that can miss (unknown stage, stale job reference, unreadable
date, blank name) resolve through this module so every view shows the
same placeholder for the same kind of gap.
"""

from datetime import datetime
from typing import Any, Dict, Iterable, Mapping, Optional, Union

from .models import Job, StageInfo, STAGES

UNKNOWN_POSITION = "Unknown Position"
UNKNOWN_JOB = "Unknown Job"
UNKNOWN_LOCATION = "Unknown Location"
UNKNOWN_CANDIDATE = "Unknown Candidate"
NOT_AVAILABLE = "N/A"
UNKNOWN_INITIAL = "?"

FALLBACKS: Dict[str, Any] = {
    "stage": STAGES[0],
    # Title of the position a candidate applied to.
    "job.title": UNKNOWN_POSITION,
    # Title on a job's own card.
    "job.name": UNKNOWN_JOB,
    "job.location": UNKNOWN_LOCATION,
    "job.status": NOT_AVAILABLE,
    "date": NOT_AVAILABLE,
    "candidate.name": UNKNOWN_CANDIDATE,
    "candidate.initial": UNKNOWN_INITIAL,
    "text": "",
}

_STAGES_BY_VALUE = {info.value: info for info in STAGES}

JobsLookup = Union[Mapping[str, Job], Iterable[Job]]


def resolve(kind: str, value: Any) -> Any:
    """Return value, or the registered fallback for kind when value is blank."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return FALLBACKS[kind]
    return value


def stage_info(stage: Optional[str]) -> StageInfo:
    """Display metadata for a stage; unrecognized values get the first stage."""
    return _STAGES_BY_VALUE.get(stage or "", FALLBACKS["stage"])


def index_jobs(jobs: Iterable[Job]) -> Dict[str, Job]:
    """Map job id to job. The first job with a given id wins."""
    index: Dict[str, Job] = {}
    for job in jobs:
        index.setdefault(job.id, job)
    return index


def job_title(job_id: Optional[str], jobs: JobsLookup) -> str:
    """
    Title of the job a candidate applied to.

    Accepts an index from index_jobs() or any iterable of jobs. Missing
    jobs and blank titles both resolve to the placeholder.
    """
    if not job_id:
        return FALLBACKS["job.title"]
    if isinstance(jobs, Mapping):
        job = jobs.get(job_id)
    else:
        job = next((j for j in jobs if j.id == job_id), None)
    return resolve("job.title", job.title if job else None)


def format_date(value: Optional[datetime]) -> str:
    """Numeric date, e.g. 10/9/2026."""
    if not isinstance(value, datetime):
        return FALLBACKS["date"]
    return f"{value.month}/{value.day}/{value.year}"


def format_short_date(value: Optional[datetime]) -> str:
    """Month and day, e.g. Oct 9."""
    if not isinstance(value, datetime):
        return FALLBACKS["date"]
    return f"{value.strftime('%b')} {value.day}"


def format_time(value: Optional[datetime]) -> str:
    """Clock time, e.g. 8:05:12 AM."""
    if not isinstance(value, datetime):
        return FALLBACKS["date"]
    return value.strftime("%I:%M:%S %p").lstrip("0")


def initial(name: Optional[str]) -> str:
    """Upper-cased first letter of a name for avatars."""
    name = resolve("text", name).strip()
    return name[0].upper() if name else FALLBACKS["candidate.initial"]
