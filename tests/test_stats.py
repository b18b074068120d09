"""
Tests for dashboard statistics.
"""

from datetime import datetime, timedelta, timezone

from talentview.models import Job
from talentview.stats import compute_stats, recent_items, start_of_day


class TestTimeWindows:
    """Today and rolling seven-day windows."""

    def test_today_week_total(self, candidate_factory, now):
        candidates = [
            candidate_factory(1, applied_at=now),
            candidate_factory(2, applied_at=now - timedelta(days=1)),
            candidate_factory(3, applied_at=now - timedelta(days=10)),
        ]
        stats = compute_stats([], candidates, now)

        assert stats.today_applications == 1
        assert stats.recent_applications == 2
        assert stats.total_candidates == 3

    def test_midnight_boundary_inclusive(self, candidate_factory, now):
        midnight = start_of_day(now)
        candidates = [
            candidate_factory(1, applied_at=midnight),
            candidate_factory(2, applied_at=midnight - timedelta(microseconds=1)),
        ]
        assert compute_stats([], candidates, now).today_applications == 1

    def test_week_boundary_inclusive(self, candidate_factory, now):
        candidates = [
            candidate_factory(1, applied_at=now - timedelta(days=7)),
            candidate_factory(2, applied_at=now - timedelta(days=7, seconds=1)),
        ]
        assert compute_stats([], candidates, now).recent_applications == 1

    def test_week_is_rolling_not_calendar(self, candidate_factory):
        # A Monday morning: last Wednesday is still inside the window
        monday = datetime(2026, 10, 19, 9, 0)
        wednesday = monday - timedelta(days=5)
        stats = compute_stats([], [candidate_factory(1, applied_at=wednesday)], monday)
        assert stats.recent_applications == 1

    def test_unreadable_date_outside_windows(self, candidate_factory, now):
        stats = compute_stats([], [candidate_factory(1, applied_at=None)], now)
        assert stats.total_candidates == 1
        assert stats.today_applications == 0
        assert stats.recent_applications == 0

    def test_aware_now_is_accepted(self, candidate_factory):
        now = datetime.now(timezone.utc)
        local_now = now.astimezone().replace(tzinfo=None)
        stats = compute_stats([], [candidate_factory(1, applied_at=local_now)], now)
        assert stats.today_applications == 1


class TestCounts:
    """Stage and job status counts."""

    def test_stage_counts(self, candidate_factory, now):
        stages = ["applied", "screen", "tech", "tech", "offer", "hired", "rejected", "rejected", "foo"]
        candidates = [candidate_factory(i, stage=s) for i, s in enumerate(stages)]
        stats = compute_stats([], candidates, now)

        assert stats.hired_candidates == 1
        assert stats.rejected_candidates == 2
        assert stats.active_candidates == 6  # includes the unknown stage
        assert stats.pending_reviews == 3
        assert stats.by_stage == {
            "applied": 1, "screen": 1, "tech": 2, "offer": 1, "hired": 1, "rejected": 2,
        }

    def test_job_status_counts(self, jobs, now):
        jobs = jobs + [Job(id="j4", status="draft")]
        stats = compute_stats(jobs, [], now)
        assert stats.total_jobs == 4
        assert stats.active_jobs == 2
        assert stats.archived_jobs == 1

    def test_empty_inputs(self, now):
        stats = compute_stats([], [], now)
        assert stats.total_jobs == 0
        assert stats.total_candidates == 0
        assert stats.total_assessments == 0
        assert set(stats.by_stage.values()) == {0}

    def test_deterministic(self, candidate_factory, jobs, now):
        candidates = [candidate_factory(i, applied_at=now - timedelta(hours=i * 10)) for i in range(30)]
        first = compute_stats(jobs, candidates, now)
        second = compute_stats(jobs, candidates, now)
        assert first == second
        assert first.computed_at == now


class TestRecentItems:

    def test_first_five(self, candidate_factory):
        pool = [candidate_factory(i) for i in range(8)]
        assert [c.id for c in recent_items(pool)] == ["c0", "c1", "c2", "c3", "c4"]

    def test_short_input(self, jobs):
        assert recent_items(jobs) == jobs
