import argparse
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .config import Settings, load_settings
from .fallbacks import format_date, format_short_date, format_time, initial, job_title, resolve
from .filtering import FilterCriteria
from .loader import CANDIDATES, JOBS, ApiSource, DatasetStore, FileSource
from .logger import get_logger, reset_logger
from .models import STAGES, Candidate
from .views import CandidateListView, DashboardView


def _notify(message: str) -> None:
    print(f"[error] {message}", file=sys.stderr)


def build_source(args: argparse.Namespace, settings: Settings):
    if args.candidates_file or args.jobs_file:
        return FileSource({
            CANDIDATES: Path(args.candidates_file) if args.candidates_file else None,
            JOBS: Path(args.jobs_file) if args.jobs_file else None,
        })
    return ApiSource(settings)


def render_candidate(candidate: Candidate, view: CandidateListView) -> List[str]:
    stage = view.stage_info(candidate)
    return [
        f"[{initial(candidate.name)}] {resolve('candidate.name', candidate.name)}  ({stage.label})",
        f"  Email: {candidate.email}",
        f"  Phone: {candidate.phone}",
        f"  Job: {view.job_title(candidate)}",
        f"  Applied {format_date(candidate.applied_at)}",
        f"  {candidate.activity_count} activities  |  id: {candidate.id}",
    ]


def cmd_candidates(args: argparse.Namespace, settings: Settings) -> None:
    view = CandidateListView(DatasetStore(), notify=_notify)
    view.load(build_source(args, settings), settings)
    view.set_criteria(FilterCriteria(args.search or "", args.stage or "", args.job or ""))
    view.go_to(args.page)

    summary = view.summary()
    print(f"Candidates: {summary.line}")
    page = view.current_page()
    for candidate in page.items:
        print()
        for line in render_candidate(candidate, view):
            print(line)
    if summary.empty_message:
        print("No candidates found")
        print(summary.empty_message)
    if page.total_pages > 1:
        print()
        print(f"Page {page.page} of {page.total_pages}")


def cmd_dashboard(args: argparse.Namespace, settings: Settings) -> None:
    store = DatasetStore()
    view = DashboardView(store, notify=_notify)
    view.load(build_source(args, settings), settings)
    s = view.stats

    print(f"Last updated: {format_time(view.last_updated)}")
    print(f"Total Jobs: {s.total_jobs} ({s.active_jobs} active, {s.archived_jobs} archived)")
    print(f"Total Candidates: {s.total_candidates}")
    print(f"Active Pipeline: {s.active_candidates} ({s.pending_reviews} pending review)")
    print(f"This Week: {s.recent_applications}")
    print(f"Today: {s.today_applications}")
    print(f"Hired: {s.hired_candidates}  Rejected: {s.rejected_candidates}")
    print("By stage:")
    for info in STAGES:
        print(f"  {info.label}: {s.by_stage.get(info.value, 0)}")

    print("\nRecent jobs:")
    for job in view.recent_jobs:
        print(
            f"  {resolve('job.name', job.title)} - {resolve('job.location', job.location)}"
            f" [{resolve('job.status', job.status)}] {format_short_date(job.created_at)}"
        )
    print("\nRecent candidates:")
    jobs_by_id = store.dataset.jobs_by_id
    for c in view.recent_candidates:
        print(
            f"  {resolve('candidate.name', c.name)} - {job_title(c.job_id, jobs_by_id)}"
            f" {format_short_date(c.applied_at)}"
        )


def _add_source_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--candidates-file", help="Read candidates from a JSON file instead of the API")
    parser.add_argument("--jobs-file", help="Read jobs from a JSON file instead of the API")


def main(argv: Optional[List[str]] = None):
    settings = load_settings()
    parser = argparse.ArgumentParser(prog="talentview", description="Candidate list and recruiting dashboard")
    parser.add_argument("--version", action="store_true", help="Show version")

    subparsers = parser.add_subparsers(dest="command")
    cand = subparsers.add_parser("candidates", help="Search, filter and page through candidates")
    cand.add_argument("--search", help="Case-insensitive match on name, email or phone")
    cand.add_argument("--stage", choices=[s.value for s in STAGES], help="Only candidates in this stage")
    cand.add_argument("--job", help="Only candidates for this job id")
    cand.add_argument("--page", type=int, default=1, help="Page number (default 1)")
    _add_source_args(cand)
    cand.set_defaults(func=cmd_candidates)

    dash = subparsers.add_parser("dashboard", help="Show recruiting stats")
    _add_source_args(dash)
    dash.set_defaults(func=cmd_dashboard)

    args = parser.parse_args(argv)

    if args.version:
        print(__version__)
        return

    reset_logger()
    logger = get_logger(level=settings.log_level, log_dir=settings.log_dir)
    if settings.invalid:
        logger.warning("Ignoring invalid settings", keys=list(settings.invalid))

    if hasattr(args, "func"):
        args.func(args, settings)
        logger.log_metrics_summary()
        return

    parser.print_help()


if __name__ == "__main__":
    main()
