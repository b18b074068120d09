"""
Candidate list and dashboard view state.

Views hold the user's parameters (criteria, page) and recompute derived
data from the DatasetStore's current snapshot whenever either changes.
Navigation and notification are callbacks supplied by the host.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, List, Optional, Tuple

from .config import Settings
from .fallbacks import job_title, stage_info
from .filtering import PAGE_SIZE, FilterCriteria, Page, clamp_page, filter_candidates, paginate
from .loader import Dataset, DatasetStore
from .logger import get_logger
from .models import Candidate, Job, StageInfo
from .stats import DashboardStats, compute_stats, recent_items

Navigate = Callable[[str], None]
Notify = Callable[[str], None]

EMPTY_FILTERED_MESSAGE = "Try adjusting your filters to see more results."
EMPTY_POOL_MESSAGE = "No candidates have applied yet."


def _noop(_: str) -> None:
    return None


@dataclass(frozen=True)
class ListSummary:
    filtered_count: int
    total_count: int
    empty_message: Optional[str]

    @property
    def line(self) -> str:
        return f"{self.filtered_count} of {self.total_count} candidates"


def _report_failure(dataset: Dataset, applied: bool, notify: Notify, message: str) -> None:
    if applied and dataset.failed:
        notify(message)


class CandidateListView:
    """Filtered, paginated view over the loaded candidate pool."""

    def __init__(
        self,
        store: DatasetStore,
        page_size: int = PAGE_SIZE,
        navigate: Navigate = _noop,
        notify: Notify = _noop,
    ):
        self.store = store
        self.page_size = page_size
        self.navigate = navigate
        self.notify = notify
        self._criteria = FilterCriteria()
        self._page = 1
        self._memo_key: Optional[Tuple[Dataset, FilterCriteria]] = None
        self._memo: List[Candidate] = []
        self._listeners: List[Callable[[Page], None]] = []
        store.subscribe(self._on_dataset)

    @property
    def criteria(self) -> FilterCriteria:
        return self._criteria

    @property
    def page(self) -> int:
        return self._page

    def subscribe(self, listener: Callable[[Page], None]) -> None:
        """Call listener with the current page after every change."""
        self._listeners.append(listener)

    def _changed(self) -> None:
        if not self._listeners:
            return
        current = self.current_page()
        for listener in list(self._listeners):
            listener(current)

    def _filtered(self, dataset: Dataset) -> List[Candidate]:
        # Keyed on the dataset object itself: stores replace, never mutate.
        memo = self._memo_key
        if memo is None or memo[0] is not dataset or memo[1] != self._criteria:
            self._memo = filter_candidates(dataset.candidates, self._criteria)
            self._memo_key = (dataset, self._criteria)
            get_logger().record_recompute()
        return self._memo

    def filtered(self) -> List[Candidate]:
        return self._filtered(self.store.dataset)

    def current_page(self) -> Page:
        return paginate(self._filtered(self.store.dataset), self._page, self.page_size)

    # Criteria changes always return to the first page.

    def set_criteria(self, criteria: FilterCriteria) -> None:
        if criteria == self._criteria:
            return
        self._criteria = criteria
        self._page = 1
        self._changed()

    def set_search(self, term: str) -> None:
        self.set_criteria(FilterCriteria(term, self._criteria.stage_filter, self._criteria.job_filter))

    def set_stage(self, stage: str) -> None:
        self.set_criteria(FilterCriteria(self._criteria.search_term, stage, self._criteria.job_filter))

    def set_job(self, job_id: str) -> None:
        self.set_criteria(FilterCriteria(self._criteria.search_term, self._criteria.stage_filter, job_id))

    def clear_filters(self) -> None:
        self.set_criteria(FilterCriteria())

    def go_to(self, page: int) -> int:
        total = self.current_page().total_pages
        target = clamp_page(page, total)
        if target != self._page:
            self._page = target
            self._changed()
        return self._page

    def next_page(self) -> int:
        return self.go_to(self._page + 1)

    def previous_page(self) -> int:
        return self.go_to(self._page - 1)

    def summary(self) -> ListSummary:
        dataset = self.store.dataset
        filtered = self._filtered(dataset)
        empty_message = None
        if not filtered:
            empty_message = EMPTY_FILTERED_MESSAGE if self._criteria.is_active else EMPTY_POOL_MESSAGE
        return ListSummary(len(filtered), len(dataset.candidates), empty_message)

    def stage_info(self, candidate: Candidate) -> StageInfo:
        return stage_info(candidate.stage)

    def job_title(self, candidate: Candidate) -> str:
        return job_title(candidate.job_id, self.store.dataset.jobs_by_id)

    def job_options(self) -> Tuple[Job, ...]:
        return self.store.dataset.jobs

    def select(self, candidate: Candidate) -> None:
        """Hand the candidate's id, and nothing else, to navigation."""
        self.navigate(candidate.id)

    def load(self, source, settings: Settings) -> bool:
        """Reload the dataset. Returns True if the result was applied."""
        dataset, applied = self.store.reload(source, settings)
        _report_failure(dataset, applied, self.notify, "Failed to load candidates")
        return applied

    def _on_dataset(self, dataset: Dataset) -> None:
        # A new snapshot can shrink the result; keep the page valid.
        # Listeners of concurrent loads can run out of order, so clamp
        # against whatever the store holds now, not the dataset passed in.
        total = paginate(self._filtered(self.store.dataset), 1, self.page_size).total_pages
        self._page = clamp_page(self._page, total)
        self._changed()


class DashboardView:
    """Recruiting stats recomputed from scratch on every dataset change."""

    def __init__(
        self,
        store: DatasetStore,
        notify: Notify = _noop,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.store = store
        self.notify = notify
        self.clock = clock
        self.stats = DashboardStats()
        self.last_updated: Optional[datetime] = None
        self.recent_jobs: List[Job] = []
        self.recent_candidates: List[Candidate] = []
        store.subscribe(self._on_dataset)

    def refresh(self) -> DashboardStats:
        dataset = self.store.dataset
        self.stats = compute_stats(dataset.jobs, dataset.candidates, self.clock())
        self.recent_jobs = recent_items(dataset.jobs)
        self.recent_candidates = recent_items(dataset.candidates)
        self.last_updated = self.stats.computed_at
        get_logger().record_recompute()
        get_logger().debug("Dashboard stats", total_jobs=self.stats.total_jobs,
                           total_candidates=self.stats.total_candidates)
        return self.stats

    def load(self, source, settings: Settings) -> bool:
        dataset, applied = self.store.reload(source, settings)
        _report_failure(dataset, applied, self.notify, "Failed to load dashboard data")
        return applied

    def _on_dataset(self, dataset: Dataset) -> None:
        self.refresh()
