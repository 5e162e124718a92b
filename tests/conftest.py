"""
Pytest configuration and fixtures.
"""

from datetime import date, datetime, timezone
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio

from job_allocation.application.interfaces.gateways import (
    JobGatewayInterface,
    ReportFile,
    TechnicianGatewayInterface,
)
from job_allocation.application.services.allocation_coordinator import (
    AllocationCoordinator,
)
from job_allocation.application.services.capacity_model import CapacityModel
from job_allocation.application.services.job_state_machine import JobStateMachine
from job_allocation.config.settings import Settings
from job_allocation.domain.entities.job import Job
from job_allocation.domain.entities.technician import Technician
from job_allocation.domain.value_objects.availability import Availability
from job_allocation.domain.value_objects.job_priority import JobPriority
from job_allocation.domain.value_objects.job_status import JobStatus
from job_allocation.domain.value_objects.job_type import JobType
from job_allocation.domain.value_objects.references import PropertyRef
from job_allocation.infrastructure.gateways.memory.gateway import (
    InMemoryComplianceGateway,
)

# Fixed "today" for every test clock. It lies in the past, so the in-memory
# job service (which uses the real date) agrees that due jobs are due.
TODAY = date(2024, 6, 10)


def due(day: date) -> datetime:
    return datetime(day.year, day.month, day.day, tzinfo=timezone.utc)


@pytest.fixture(scope="session")
def test_settings():
    """Test settings configuration."""
    return Settings(
        ENVIRONMENT="test",
        DEBUG=True,
        LOG_LEVEL="DEBUG",
        USE_IN_MEMORY_GATEWAY=True,
        REFRESH_BOARD_AFTER_ASSIGN=True,
    )


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def capacity_model():
    return CapacityModel()


@pytest.fixture
def state_machine(capacity_model):
    return JobStateMachine(capacity_model)


@pytest.fixture
def sample_property():
    return PropertyRef(id="P1", address="12 High St, Springfield", agency_name="Acme Realty")


@pytest.fixture
def technicians():
    """Directory used by the seeded job service."""
    return [
        Technician(
            id="T1",
            name="Alice Smith",
            email="alice@example.com",
            availability=Availability.AVAILABLE,
            current_jobs=2,
            max_jobs=5,
            specialties={"Gas", "Electrical"},
        ),
        Technician(
            id="T2",
            name="Bob Jones",
            email="bob@example.com",
            availability=Availability.BUSY,
            current_jobs=5,
            max_jobs=5,
            specialties={"Smoke"},
        ),
        Technician(
            id="T3",
            name="Cara Lee",
            email="cara@example.com",
            availability=Availability.AVAILABLE,
            current_jobs=1,
            max_jobs=5,
            specialties={"Pool Safety"},
        ),
        Technician(
            id="T4",
            name="Dan Wu",
            email="dan@example.com",
            availability=Availability.ON_LEAVE,
            current_jobs=0,
            max_jobs=4,
            specialties={"Gas"},
        ),
    ]


@pytest.fixture
def jobs(technicians, sample_property):
    """
    J1 pending urgent, J2 scheduled due today, J3 scheduled for T3,
    J4 scheduled due tomorrow, J5 pending without a due date.
    """
    t1, t2, t3, _ = technicians
    return [
        Job(
            id="J1",
            job_id="000001",
            job_type=JobType.GAS,
            status=JobStatus.PENDING,
            priority=JobPriority.URGENT,
            due_date=due(date(2024, 6, 12)),
            property_ref=sample_property,
            description="Annual gas safety check",
            created_at=due(date(2024, 6, 1)),
        ),
        Job(
            id="J2",
            job_id="000002",
            job_type=JobType.SMOKE,
            status=JobStatus.SCHEDULED,
            priority=JobPriority.HIGH,
            due_date=due(TODAY),
            property_ref=PropertyRef(id="P2", address="4 Elm Rd"),
            technician=t2.to_ref(),
            created_at=due(date(2024, 6, 2)),
        ),
        Job(
            id="J3",
            job_id="000003",
            job_type=JobType.POOL_SAFETY,
            status=JobStatus.SCHEDULED,
            priority=JobPriority.MEDIUM,
            due_date=due(date(2024, 6, 20)),
            property_ref=PropertyRef(id="P3", address="9 Bay Pde"),
            technician=t3.to_ref(),
            created_at=due(date(2024, 6, 3)),
        ),
        Job(
            id="J4",
            job_id="000004",
            job_type=JobType.ELECTRICAL,
            status=JobStatus.SCHEDULED,
            priority=JobPriority.LOW,
            due_date=due(date(2024, 6, 11)),
            property_ref=PropertyRef(id="P4", address="1 Ocean Ave"),
            technician=t1.to_ref(),
            created_at=due(date(2024, 6, 4)),
        ),
        Job(
            id="J5",
            job_id="000005",
            job_type=JobType.REPAIRS,
            status=JobStatus.PENDING,
            priority=JobPriority.MEDIUM,
            due_date=None,
            property_ref=PropertyRef(id="P5", address="77 Hill St"),
            created_at=due(date(2024, 6, 1)),
        ),
    ]


@pytest.fixture
def gateway(jobs, technicians, sample_property):
    """In-memory job service seeded with the sample data."""
    store = InMemoryComplianceGateway()
    store.seed(jobs=jobs, technicians=technicians, properties=[sample_property])
    return store


@pytest_asyncio.fixture
async def coordinator(gateway):
    """Coordinator with a loaded board and a fixed clock."""
    coordinator = AllocationCoordinator(
        job_gateway=gateway,
        technician_gateway=gateway,
        clock=lambda: TODAY,
    )
    await coordinator.refresh()
    return coordinator


@pytest.fixture
def pdf_report():
    return ReportFile(
        filename="report.pdf", content=b"%PDF-1.4 test", content_type="application/pdf"
    )


@pytest.fixture
def mock_job_gateway():
    """Mock job gateway."""
    mock_gateway = AsyncMock(spec=JobGatewayInterface)

    mock_gateway.get_job = AsyncMock()
    mock_gateway.assign_job = AsyncMock()
    mock_gateway.claim_job = AsyncMock()
    mock_gateway.complete_job = AsyncMock()
    mock_gateway.update_job = AsyncMock()
    mock_gateway.update_job_status = AsyncMock()
    mock_gateway.create_job = AsyncMock()

    return mock_gateway


@pytest.fixture
def mock_technician_gateway():
    """Mock technician gateway."""
    mock_gateway = AsyncMock(spec=TechnicianGatewayInterface)

    mock_gateway.get_technician = AsyncMock()
    mock_gateway.list_technicians = AsyncMock(return_value=[])

    return mock_gateway
