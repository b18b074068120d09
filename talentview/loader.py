"""
Bulk dataset loading.

Fetches the whole candidate and job collections, in parallel, and hands
back an immutable Dataset. A collection that cannot be fetched or read
comes back empty and is listed in Dataset.failed; nothing here raises to
the caller.
"""

import json
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

import requests

from .config import Settings
from .fallbacks import index_jobs
from .logger import get_logger
from .models import Candidate, Job
from .retry import RetryError, exponential_backoff, should_retry_http_status
from .schema import validate_candidate, validate_job

CANDIDATES = "candidates"
JOBS = "jobs"


class LoadError(Exception):
    """A collection could not be fetched or its body could not be read."""

    def __init__(self, collection: str, message: str, error_type: str, status: Optional[int] = None):
        super().__init__(message)
        self.collection = collection
        self.error_type = error_type
        self.status = status


class TransientStatusError(Exception):
    """Retryable HTTP status (rate limiting, gateway or server errors)."""

    def __init__(self, status: int):
        super().__init__(f"HTTP {status}")
        self.status = status


@dataclass(frozen=True)
class Dataset:
    candidates: Tuple[Candidate, ...] = ()
    jobs: Tuple[Job, ...] = ()
    failed: Tuple[str, ...] = ()
    loaded_at: Optional[datetime] = None
    jobs_by_id: Dict[str, Job] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "jobs_by_id", index_jobs(self.jobs))

    @property
    def ok(self) -> bool:
        return not self.failed


EMPTY_DATASET = Dataset()


def extract_records(body: Any, collection: str, allow_bare_list: bool = False) -> List[Any]:
    """
    Pull the record list out of a `{"data": [...]}` envelope.

    Raises:
        LoadError: when the body has no list where one is expected
    """
    if allow_bare_list and isinstance(body, list):
        return body
    if isinstance(body, dict) and isinstance(body.get("data"), list):
        return body["data"]
    raise LoadError(collection, f"Response for {collection} has no 'data' list", "MalformedBody")


class ApiSource:
    """Reads collections from the REST backend."""

    def __init__(
        self,
        settings: Settings,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.settings = settings
        self.session = session or requests.Session()
        self._get = exponential_backoff(
            max_retries=settings.max_retries,
            exceptions=(
                requests.exceptions.Timeout,
                requests.exceptions.ConnectionError,
                TransientStatusError,
            ),
            on_retry=self._log_retry,
            sleep=sleep,
        )(self._request)

    def _request(self, url: str, params: Dict[str, Any]) -> requests.Response:
        resp = self.session.get(url, params=params, timeout=self.settings.timeout)
        if should_retry_http_status(resp.status_code):
            raise TransientStatusError(resp.status_code)
        return resp

    @staticmethod
    def _log_retry(attempt: int, error: Exception, delay: float):
        get_logger().warning("Retrying request", attempt=attempt, error=str(error), delay=delay)

    def fetch(self, collection: str, page_size: int) -> List[Any]:
        """
        GET /api/<collection>?page=1&pageSize=<page_size>.

        Raises:
            LoadError: on transport errors, non-success status or unreadable body
        """
        url = f"{self.settings.api_base}/api/{collection}"
        try:
            resp = self._get(url, {"page": 1, "pageSize": page_size})
            resp.raise_for_status()
        except RetryError as e:
            cause = e.__cause__
            status = getattr(cause, "status", None)
            error_type = f"HTTPError_{status}" if status else type(cause).__name__
            raise LoadError(collection, f"{collection} request failed: {cause}", error_type, status) from e
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            raise LoadError(collection, f"{collection} request failed ({status}): {url}", f"HTTPError_{status}", status) from e
        except requests.exceptions.RequestException as e:
            raise LoadError(collection, f"{collection} request error: {e}", "RequestException") from e

        try:
            body = resp.json()
        except ValueError as e:
            raise LoadError(collection, f"{collection} response is not JSON", "InvalidJSON") from e
        return extract_records(body, collection)


class FileSource:
    """Reads collections from local JSON files, enveloped or bare lists."""

    def __init__(self, paths: Dict[str, Optional[Path]]):
        self.paths = paths

    def fetch(self, collection: str, page_size: int) -> List[Any]:
        path = self.paths.get(collection)
        if path is None:
            return []
        try:
            with Path(path).open("r", encoding="utf-8") as f:
                body = json.load(f)
        except FileNotFoundError as e:
            raise LoadError(collection, f"File not found: {path}", "FileNotFound") from e
        except (json.JSONDecodeError, OSError) as e:
            raise LoadError(collection, f"Cannot read {path}: {e}", "InvalidJSON") from e
        return extract_records(body, collection, allow_bare_list=True)[:page_size]


def _parse_records(records: List[Any], collection: str) -> list:
    logger = get_logger()
    model, validate = (Candidate, validate_candidate) if collection == CANDIDATES else (Job, validate_job)
    parsed = []
    malformed = 0
    for index, raw in enumerate(records):
        if not isinstance(raw, dict):
            malformed += 1
            logger.warning("Dropping non-object record", collection=collection, index=index)
            continue
        try:
            errors = validate(raw)
            record = model.from_dict(raw)
        except Exception as e:
            malformed += 1
            logger.warning("Dropping unreadable record", collection=collection, index=index,
                           error_type=type(e).__name__, error=str(e))
            continue
        if errors:
            malformed += 1
            logger.debug("Coercing malformed record", collection=collection, id=raw.get("id"), errors=errors)
        parsed.append(record)
    if malformed:
        logger.record_malformed_record(malformed)
    return parsed


def _fetch_collection(source, collection: str, page_size: int) -> Tuple[list, bool]:
    """Fetch and parse one collection; on any LoadError return ([], True)."""
    logger = get_logger()
    logger.record_request_attempt(collection)
    try:
        records = source.fetch(collection, page_size)
    except LoadError as e:
        logger.record_request_failure(collection, e.error_type)
        logger.error("Failed to load collection", collection=collection, error=str(e), status=e.status)
        return [], True
    logger.record_request_success(collection)
    parsed = _parse_records(records, collection)
    logger.info(f"Loaded {len(parsed)} {collection}")
    return parsed, False


def load_dataset(source, settings: Settings, now: Optional[Callable[[], datetime]] = None) -> Dataset:
    """
    Fetch candidates and jobs concurrently and return once both resolved.

    Each collection fails independently: a failed one is empty and named in
    Dataset.failed while the other is kept.
    """
    now = now or datetime.now
    with ThreadPoolExecutor(max_workers=2) as pool:
        candidates_future = pool.submit(_fetch_collection, source, CANDIDATES, settings.candidates_page_size)
        jobs_future = pool.submit(_fetch_collection, source, JOBS, settings.jobs_page_size)
        candidates, candidates_failed = candidates_future.result()
        jobs, jobs_failed = jobs_future.result()

    failed = tuple(
        name for name, flag in ((CANDIDATES, candidates_failed), (JOBS, jobs_failed)) if flag
    )
    return Dataset(
        candidates=tuple(candidates),
        jobs=tuple(jobs),
        failed=failed,
        loaded_at=now(),
    )


class DatasetStore:
    """
    Holds the current Dataset and applies loads in issue order.

    Every load is tagged with a sequence number when it starts. A finished
    load replaces the dataset only if its number is higher than the one
    last applied, so a slow older load can never overwrite newer data.
    The dataset itself is replaced wholesale, never mutated.
    """

    def __init__(self, dataset: Dataset = EMPTY_DATASET):
        self._lock = threading.Lock()
        self._issued = 0
        self._applied = 0
        self._dataset = dataset
        self._listeners: List[Callable[[Dataset], None]] = []

    @property
    def dataset(self) -> Dataset:
        return self._dataset

    @property
    def applied_sequence(self) -> int:
        return self._applied

    def subscribe(self, listener: Callable[[Dataset], None]) -> None:
        self._listeners.append(listener)

    def begin(self) -> int:
        with self._lock:
            self._issued += 1
            seq = self._issued
        get_logger().record_load_started()
        return seq

    def apply(self, seq: int, dataset: Dataset) -> bool:
        """Install dataset if seq is newer than the applied one. Returns True if installed."""
        logger = get_logger()
        with self._lock:
            if seq <= self._applied:
                stale = True
            else:
                stale = False
                self._applied = seq
                self._dataset = dataset
        if stale:
            logger.record_load_discarded()
            logger.info("Discarding stale load", sequence=seq, applied=self._applied)
            return False
        logger.record_load_applied()
        for listener in list(self._listeners):
            listener(dataset)
        return True

    def reload(self, source, settings: Settings) -> Tuple[Dataset, bool]:
        """Run one tagged load. Returns the loaded dataset and whether it was applied."""
        seq = self.begin()
        dataset = load_dataset(source, settings)
        return dataset, self.apply(seq, dataset)
