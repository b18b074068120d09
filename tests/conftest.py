"""
Pytest configuration and shared fixtures.
"""

import json
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Dict, List

import pytest
import requests

from talentview.config import Settings
from talentview.logger import get_logger, reset_logger
from talentview.models import Candidate, Job

NOW = datetime(2026, 10, 19, 15, 30, 0)


@pytest.fixture(autouse=True)
def quiet_logger():
    """Fresh process-wide logger with no handlers for every test."""
    reset_logger()
    logger = get_logger(enable_file=False, enable_console=False)
    yield logger
    reset_logger()


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def settings() -> Settings:
    return Settings(api_base="http://api.test", timeout=5, max_retries=2)


def make_candidate(i: int, **overrides) -> Candidate:
    fields = {
        "id": f"c{i}",
        "name": f"Candidate {i}",
        "email": f"candidate{i}@example.com",
        "phone": f"555-{i:04d}",
        "stage": "applied",
        "job_id": "j1",
        "applied_at": NOW - timedelta(days=30),
    }
    fields.update(overrides)
    return Candidate(**fields)


@pytest.fixture
def candidate_factory():
    return make_candidate


@pytest.fixture
def jobs() -> List[Job]:
    return [
        Job(id="j1", title="Frontend Engineer", location="Remote", status="active"),
        Job(id="j2", title="Data Analyst", location="Berlin", status="archived"),
        Job(id="j3", title="Recruiter", location="NYC", status="active"),
    ]


@pytest.fixture
def raw_candidates() -> List[Dict[str, Any]]:
    """Candidate records as the backend sends them."""
    return [
        {
            "id": "c1",
            "name": "Ada Lovelace",
            "email": "ada@x.com",
            "phone": "555-1111",
            "stage": "tech",
            "jobId": "j1",
            "appliedAt": "2026-10-19T09:00:00",
            "resume": "Analytical engines.",
            "timeline": [{"type": "applied"}, {"type": "stage_change"}],
        },
        {
            "id": "c2",
            "name": "Grace Hopper",
            "email": "grace@navy.mil",
            "phone": "555-2222",
            "stage": "hired",
            "jobId": "j2",
            "appliedAt": "2026-10-15T12:00:00",
            "resume": "Compilers.",
            "timeline": [],
        },
        {
            "id": "c3",
            "name": 42,
            "email": None,
            "stage": "foo",
            "jobId": "missing",
            "appliedAt": "not a date",
        },
    ]


@pytest.fixture
def raw_jobs() -> List[Dict[str, Any]]:
    return [
        {"id": "j1", "title": "Frontend Engineer", "location": "Remote", "status": "active",
         "createdAt": "2026-09-01T00:00:00"},
        {"id": "j2", "title": None, "location": "Berlin", "status": "archived",
         "createdAt": "2026-08-01T00:00:00"},
    ]


def json_response(status: int, body: Any = None, text: str = None) -> requests.Response:
    """A real requests.Response carrying the given status and body."""
    resp = requests.Response()
    resp.status_code = status
    resp.url = "http://api.test"
    resp.encoding = "utf-8"
    if text is not None:
        resp._content = text.encode("utf-8")
    else:
        resp._content = json.dumps(body).encode("utf-8")
    return resp


class FakeSession:
    """Stands in for requests.Session; serves queued responses per collection."""

    def __init__(self, responses: Dict[str, list]):
        self.responses = {k: list(v) for k, v in responses.items()}
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append((url, params, timeout))
        collection = url.rstrip("/").rsplit("/", 1)[-1]
        queue = self.responses.get(collection)
        if not queue:
            raise requests.exceptions.ConnectionError(f"no response queued for {collection}")
        result = queue.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


@pytest.fixture
def fake_session_factory():
    return FakeSession


@pytest.fixture
def data_files(tmp_path, raw_candidates, raw_jobs) -> Dict[str, Path]:
    candidates_file = tmp_path / "candidates.json"
    candidates_file.write_text(json.dumps({"data": raw_candidates}))
    jobs_file = tmp_path / "jobs.json"
    jobs_file.write_text(json.dumps(raw_jobs))
    return {"candidates": candidates_file, "jobs": jobs_file}


@pytest.fixture
def response_factory():
    return json_response
