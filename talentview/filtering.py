"""
Filter and paginate the in-memory candidate pool.

Responsibilities:
- Apply search, stage and job constraints to the full candidate list.
- Slice the filtered list into fixed-size pages.

Non-Responsibilities:
- No fetching. Callers pass an already-loaded snapshot.
- No page clamping inside paginate(); callers use clamp_page().

Invariant:
Given identical candidates and criteria, the result is identical and in
input order.
"""

import math
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from .models import Candidate
from .fallbacks import job_title, stage_info  # noqa: F401  re-exported lookups

PAGE_SIZE = 12

Predicate = Callable[[Candidate], bool]


@dataclass(frozen=True)
class FilterCriteria:
    """Search term, stage and job constraints. Blank means unconstrained."""

    search_term: str = ""
    stage_filter: str = ""
    job_filter: str = ""

    @property
    def is_active(self) -> bool:
        return bool(self.search_term.strip() or self.stage_filter or self.job_filter)


@dataclass(frozen=True)
class Page:
    items: List[Candidate]
    page: int
    page_size: int
    total_count: int
    total_pages: int

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages


def search_predicate(term: str) -> Optional[Predicate]:
    """Case-insensitive substring match on name, email or phone."""
    needle = term.strip().lower()
    if not needle:
        return None

    def matches(c: Candidate) -> bool:
        return (
            needle in c.name.lower()
            or needle in c.email.lower()
            or needle in c.phone.lower()
        )
    return matches


def stage_predicate(stage: str) -> Optional[Predicate]:
    if not stage:
        return None
    return lambda c: c.stage == stage


def job_predicate(job_id: str) -> Optional[Predicate]:
    if not job_id:
        return None
    return lambda c: c.job_id == job_id


def build_predicates(criteria: FilterCriteria) -> List[Predicate]:
    """Active predicates for criteria; inactive dimensions are left out."""
    built = (
        search_predicate(criteria.search_term),
        stage_predicate(criteria.stage_filter),
        job_predicate(criteria.job_filter),
    )
    return [p for p in built if p is not None]


def filter_candidates(candidates: Sequence[Candidate], criteria: FilterCriteria) -> List[Candidate]:
    predicates = build_predicates(criteria)
    if not predicates:
        return list(candidates)
    return [c for c in candidates if all(p(c) for p in predicates)]


def total_pages_for(count: int, page_size: int = PAGE_SIZE) -> int:
    if page_size <= 0:
        raise ValueError("page_size must be positive")
    return math.ceil(count / page_size) if count > 0 else 0


def paginate(items: Sequence[Candidate], page: int, page_size: int = PAGE_SIZE) -> Page:
    """
    Slice one page out of items. Pages are 1-based.

    A page outside [1, total_pages] yields an empty item list rather than an
    error; keeping the page in range is the caller's job.
    """
    total = len(items)
    pages = total_pages_for(total, page_size)
    if page < 1:
        sliced: List[Candidate] = []
    else:
        start = (page - 1) * page_size
        sliced = list(items[start:start + page_size])
    return Page(
        items=sliced,
        page=page,
        page_size=page_size,
        total_count=total,
        total_pages=pages,
    )


def filter_and_paginate(
    candidates: Sequence[Candidate],
    criteria: FilterCriteria,
    page: int = 1,
    page_size: int = PAGE_SIZE,
) -> Page:
    return paginate(filter_candidates(candidates, criteria), page, page_size)


def clamp_page(page: int, total_pages: int) -> int:
    """Keep page within [1, total_pages]; an empty result still shows page 1."""
    return max(1, min(page, max(total_pages, 1)))
