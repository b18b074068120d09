"""
Tests for display fallbacks.
"""

from datetime import datetime

from talentview.fallbacks import (
    UNKNOWN_POSITION,
    format_date,
    format_short_date,
    format_time,
    index_jobs,
    initial,
    job_title,
    resolve,
    stage_info,
)
from talentview.models import Job, STAGES


class TestStageInfo:

    def test_known_stage(self):
        info = stage_info("screen")
        assert info.label == "Screening"
        assert info.value == "screen"

    def test_unknown_stage_falls_back_to_first(self):
        """Unrecognized values resolve without raising."""
        assert stage_info("foo") == STAGES[0]
        assert stage_info("") == STAGES[0]
        assert stage_info(None) == STAGES[0]

    def test_all_six_stages_in_order(self):
        assert [s.value for s in STAGES] == ["applied", "screen", "tech", "offer", "hired", "rejected"]


class TestJobTitle:

    def test_resolves_from_sequence(self, jobs):
        assert job_title("j2", jobs) == "Data Analyst"

    def test_resolves_from_index(self, jobs):
        assert job_title("j3", index_jobs(jobs)) == "Recruiter"

    def test_unknown_job_uses_placeholder(self, jobs):
        assert job_title("nope", jobs) == UNKNOWN_POSITION

    def test_jobs_not_loaded_yet(self):
        assert job_title("j1", []) == UNKNOWN_POSITION

    def test_blank_title_uses_placeholder(self):
        assert job_title("j9", [Job(id="j9", title="")]) == UNKNOWN_POSITION

    def test_empty_job_id(self, jobs):
        assert job_title("", jobs) == UNKNOWN_POSITION

    def test_first_duplicate_wins(self):
        jobs = [Job(id="j1", title="First"), Job(id="j1", title="Second")]
        assert job_title("j1", jobs) == "First"
        assert job_title("j1", index_jobs(jobs)) == "First"


class TestFormatting:

    def test_format_date(self):
        assert format_date(datetime(2026, 3, 7, 10, 0)) == "3/7/2026"

    def test_format_short_date(self):
        assert format_short_date(datetime(2026, 10, 9)) == "Oct 9"

    def test_format_time(self):
        assert format_time(datetime(2026, 10, 9, 8, 5, 12)) == "8:05:12 AM"

    def test_missing_dates(self):
        assert format_date(None) == "N/A"
        assert format_short_date(None) == "N/A"
        assert format_time(None) == "N/A"

    def test_initial(self):
        assert initial("ada") == "A"
        assert initial("  ") == "?"
        assert initial(None) == "?"

    def test_resolve_passthrough(self):
        assert resolve("job.title", "Engineer") == "Engineer"
        assert resolve("date", None) == "N/A"
