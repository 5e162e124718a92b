"""
Sorting and filtering over in-memory job and technician collections.

All functions are pure: they never mutate their inputs and always return new
lists. Python's sort is stable, so ties keep their prior relative order.
"""

from dataclasses import dataclass
from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence

from job_allocation.domain.entities.job import Job
from job_allocation.domain.entities.technician import Technician
from job_allocation.domain.value_objects.job_priority import JobPriority
from job_allocation.domain.value_objects.job_status import JobStatus

ALL = "all"


@dataclass
class AvailableJobFilters:
    """Filters for the technician-facing available jobs list."""

    search: str = ""
    created_date: str = ""  # YYYY-MM-DD
    priority: str = ALL
    job_type: str = ALL
    status: str = ALL


def priority_rank(job: Job) -> int:
    return job.priority.rank if job.priority else JobPriority.rank_of(None)


def sort_by_priority(jobs: Sequence[Job], descending: bool = True) -> List[Job]:
    """Order by Urgent > High > Medium > Low > missing."""
    return sorted(jobs, key=priority_rank, reverse=descending)


def sort_by_due_date(jobs: Sequence[Job], descending: bool = False) -> List[Job]:
    """
    Order by due timestamp.

    Jobs whose due date could not be parsed always go last, in their original
    relative order, for either direction.
    """
    dated = [job for job in jobs if job.due_date is not None]
    undated = [job for job in jobs if job.due_date is None]
    return sorted(dated, key=lambda job: job.due_date, reverse=descending) + undated


def sort_jobs(
    jobs: Sequence[Job], sort_by: Optional[str], descending: bool
) -> List[Job]:
    if sort_by == "priority":
        return sort_by_priority(jobs, descending=descending)
    if sort_by == "due_date":
        return sort_by_due_date(jobs, descending=descending)
    return list(jobs)


def filter_technicians_by_skill(
    technicians: Sequence[Technician], skill: str = ALL
) -> List[Technician]:
    if not skill or skill == ALL:
        return list(technicians)
    return [tech for tech in technicians if tech.has_specialty(skill)]


def search_jobs(jobs: Sequence[Job], term: Optional[str]) -> List[Job]:
    if not term or not term.strip():
        return list(jobs)
    return [job for job in jobs if job.matches_search(term)]


def pending_jobs(jobs: Iterable[Job]) -> List[Job]:
    """Unassigned jobs waiting for allocation."""
    return [job for job in jobs if job.status == JobStatus.PENDING]


def filter_available_jobs(
    jobs: Sequence[Job], filters: AvailableJobFilters
) -> List[Job]:
    filtered = search_jobs(jobs, filters.search)

    if filters.created_date:
        filtered = [
            job
            for job in filtered
            if job.created_at
            and job.created_at.date().isoformat() == filters.created_date
        ]

    if filters.priority and filters.priority != ALL:
        filtered = [
            job
            for job in filtered
            if job.priority and job.priority.value == filters.priority
        ]

    if filters.job_type and filters.job_type != ALL:
        filtered = [job for job in filtered if job.job_type.value == filters.job_type]

    if filters.status and filters.status != ALL:
        filtered = [job for job in filtered if job.status.value == filters.status]

    return filtered


def urgent_jobs(jobs: Sequence[Job], today: date) -> List[Job]:
    """Urgent-priority or overdue jobs, de-duplicated, soonest due first."""
    seen = set()
    combined = []
    for job in jobs:
        if job.id in seen:
            continue
        if job.priority == JobPriority.URGENT or job.is_overdue(today):
            seen.add(job.id)
            combined.append(job)
    return sort_by_due_date(combined)


def status_counts(jobs: Iterable[Job], today: Optional[date] = None) -> Dict[str, int]:
    """Count jobs per status; with ``today`` the display status is used."""
    counts: Dict[str, int] = {}
    for job in jobs:
        status = job.display_status(today) if today else job.status
        counts[status.value] = counts.get(status.value, 0) + 1
    return counts
