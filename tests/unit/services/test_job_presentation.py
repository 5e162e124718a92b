"""
Unit tests for sorting and filtering of jobs and technicians.
"""

from datetime import date, datetime, timezone

from job_allocation.application.services.job_presentation import (
    ALL,
    AvailableJobFilters,
    filter_available_jobs,
    filter_technicians_by_skill,
    pending_jobs,
    search_jobs,
    sort_by_due_date,
    sort_by_priority,
    sort_jobs,
    status_counts,
    urgent_jobs,
)
from job_allocation.domain.entities.job import Job
from job_allocation.domain.entities.technician import Technician
from job_allocation.domain.value_objects.job_priority import JobPriority
from job_allocation.domain.value_objects.job_status import JobStatus
from job_allocation.domain.value_objects.job_type import JobType
from job_allocation.domain.value_objects.references import PropertyRef

TODAY = date(2024, 6, 10)


def at(day: int) -> datetime:
    return datetime(2024, 6, day, tzinfo=timezone.utc)


def make_job(job_id, priority=JobPriority.MEDIUM, due=None, **overrides):
    fields = dict(
        id=job_id,
        job_id=job_id,
        job_type=JobType.GAS,
        priority=priority,
        due_date=due,
    )
    fields.update(overrides)
    return Job(**fields)


def ids(jobs):
    return [job.id for job in jobs]


class TestSorting:
    def test_priority_descending(self):
        jobs = [
            make_job("a", JobPriority.LOW),
            make_job("b", JobPriority.URGENT),
            make_job("c", None),
            make_job("d", JobPriority.HIGH),
            make_job("e", JobPriority.MEDIUM),
        ]

        assert ids(sort_by_priority(jobs)) == ["b", "d", "e", "a", "c"]
        assert ids(sort_by_priority(jobs, descending=False)) == ["c", "a", "e", "d", "b"]

    def test_priority_sort_is_stable_for_ties(self):
        jobs = [
            make_job("a", JobPriority.HIGH),
            make_job("b", JobPriority.LOW),
            make_job("c", JobPriority.HIGH),
            make_job("d", JobPriority.HIGH),
        ]

        first = sort_by_priority(jobs)
        second = sort_by_priority(jobs)

        assert ids(first) == ["a", "c", "d", "b"]
        assert ids(first) == ids(second)

    def test_due_date_ascending_with_undated_last(self):
        jobs = [
            make_job("a", due=at(15)),
            make_job("b", due=None),
            make_job("c", due=at(11)),
            make_job("d", due=None),
            make_job("e", due=at(11)),
        ]

        assert ids(sort_by_due_date(jobs)) == ["c", "e", "a", "b", "d"]

    def test_due_date_descending_keeps_undated_last(self):
        jobs = [
            make_job("a", due=None),
            make_job("b", due=at(11)),
            make_job("c", due=at(15)),
        ]

        assert ids(sort_by_due_date(jobs, descending=True)) == ["c", "b", "a"]

    def test_sort_does_not_mutate_input(self):
        jobs = [make_job("a", JobPriority.LOW), make_job("b", JobPriority.URGENT)]

        sort_by_priority(jobs)

        assert ids(jobs) == ["a", "b"]

    def test_sort_jobs_dispatch(self):
        jobs = [make_job("a", JobPriority.LOW, due=at(11)), make_job("b", JobPriority.HIGH, due=at(15))]

        assert ids(sort_jobs(jobs, "priority", True)) == ["b", "a"]
        assert ids(sort_jobs(jobs, "due_date", True)) == ["b", "a"]
        assert ids(sort_jobs(jobs, None, True)) == ["a", "b"]


class TestFiltering:
    def test_skill_filter(self):
        techs = [
            Technician(id="T1", name="Alice", specialties={"Gas"}),
            Technician(id="T2", name="Bob", specialties={"Smoke"}),
            Technician(id="T3", name="Cara", specialties={"Gas", "Smoke"}),
        ]

        assert [t.id for t in filter_technicians_by_skill(techs, "Gas")] == ["T1", "T3"]
        assert len(filter_technicians_by_skill(techs, ALL)) == 3
        assert filter_technicians_by_skill(techs, "Pool Safety") == []

    def test_search_matches_address(self):
        jobs = [
            make_job("a", property_ref=PropertyRef(id="P1", address="12 High St")),
            make_job("b", property_ref=PropertyRef(id="P2", address="4 Elm Rd")),
        ]

        assert ids(search_jobs(jobs, "ELM")) == ["b"]
        assert ids(search_jobs(jobs, "")) == ["a", "b"]
        assert ids(search_jobs(jobs, None)) == ["a", "b"]

    def test_pending_jobs(self):
        jobs = [
            make_job("a"),
            make_job("b", status=JobStatus.SCHEDULED),
            make_job("c", status=JobStatus.CANCELLED),
        ]

        assert ids(pending_jobs(jobs)) == ["a"]

    def test_available_job_filters(self):
        jobs = [
            make_job("a", JobPriority.HIGH, created_at=at(1)),
            make_job("b", JobPriority.LOW, created_at=at(2), job_type=JobType.SMOKE),
            make_job("c", JobPriority.HIGH, created_at=at(2), job_type=JobType.SMOKE),
        ]

        assert ids(filter_available_jobs(jobs, AvailableJobFilters())) == ["a", "b", "c"]
        assert ids(
            filter_available_jobs(jobs, AvailableJobFilters(created_date="2024-06-02"))
        ) == ["b", "c"]
        assert ids(
            filter_available_jobs(
                jobs, AvailableJobFilters(priority="High", job_type="Smoke")
            )
        ) == ["c"]
        assert ids(filter_available_jobs(jobs, AvailableJobFilters(status="Scheduled"))) == []


class TestUrgentAndCounts:
    def test_urgent_jobs_combines_urgent_and_overdue(self):
        jobs = [
            make_job("a", JobPriority.URGENT, due=at(20)),
            make_job("b", JobPriority.LOW, due=at(5)),
            make_job("c", JobPriority.LOW, due=at(25)),
            make_job("d", JobPriority.URGENT, due=at(1)),
            make_job("e", JobPriority.LOW, due=at(2), status=JobStatus.COMPLETED),
        ]

        assert ids(urgent_jobs(jobs, TODAY)) == ["d", "b", "a"]

    def test_urgent_jobs_deduplicates(self):
        job = make_job("a", JobPriority.URGENT, due=at(1))

        assert ids(urgent_jobs([job, job], TODAY)) == ["a"]

    def test_status_counts_use_display_status(self):
        jobs = [
            make_job("a", due=at(1)),
            make_job("b", due=at(20)),
            make_job("c", due=at(1), status=JobStatus.COMPLETED),
        ]

        assert status_counts(jobs, TODAY) == {"Overdue": 1, "Pending": 1, "Completed": 1}
        assert status_counts(jobs) == {"Pending": 2, "Completed": 1}
