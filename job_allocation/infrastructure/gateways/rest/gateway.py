"""
REST gateway to the compliance job and technician services.
"""

from typing import List, Optional

import structlog

from job_allocation.application.interfaces.gateways import (
    AssignmentResponse,
    CompletionRequest,
    JobDraft,
    JobFilters,
    JobGatewayInterface,
    JobPage,
    JobUpdate,
    TechnicianFilters,
    TechnicianGatewayInterface,
)
from job_allocation.domain.entities.job import Job
from job_allocation.domain.entities.technician import Technician
from job_allocation.domain.exceptions.gateway_error import GatewayAPIError
from job_allocation.domain.value_objects.job_status import JobStatus
from job_allocation.infrastructure.gateways.rest.client import ComplianceAPIClient
from job_allocation.infrastructure.gateways.rest.transformer import (
    ComplianceTransformer,
)

logger = structlog.get_logger()


class RestComplianceGateway(JobGatewayInterface, TechnicianGatewayInterface):
    """Job and technician gateway backed by the compliance REST API."""

    def __init__(self, client: ComplianceAPIClient, transformer: ComplianceTransformer):
        self.client = client
        self.transformer = transformer

    async def close(self) -> None:
        await self.client.close()

    # Technicians

    async def list_technicians(
        self, filters: Optional[TechnicianFilters] = None
    ) -> List[Technician]:
        data = await self.client.get(
            "/v1/technicians",
            "fetch technicians",
            params=(filters or TechnicianFilters()).to_query(),
        )
        return self.transformer.technicians_from_api(data)

    async def get_technician(self, technician_id: str) -> Optional[Technician]:
        try:
            data = await self.client.get(
                f"/v1/technicians/{technician_id}", "fetch technician"
            )
        except GatewayAPIError as e:
            if e.is_not_found:
                return None
            raise

        raw = data.get("technician")
        if not raw:
            return None
        technician = self.transformer.technician_from_api(raw)
        self.transformer.remember([technician])
        return technician

    # Jobs

    async def list_jobs(self, filters: Optional[JobFilters] = None) -> JobPage:
        data = await self.client.get(
            "/v1/jobs", "fetch jobs", params=(filters or JobFilters()).to_query()
        )
        return self.transformer.job_page_from_api(data)

    async def get_job(self, job_id: str) -> Optional[Job]:
        try:
            data = await self.client.get(f"/v1/jobs/{job_id}", "fetch job")
        except GatewayAPIError as e:
            if e.is_not_found:
                return None
            raise

        raw = data.get("job")
        return self.transformer.job_from_api(raw) if raw else None

    async def create_job(self, draft: JobDraft) -> Job:
        data = await self.client.post(
            "/v1/jobs", "create job", self.transformer.draft_to_payload(draft)
        )
        return self.transformer.job_from_api(data["job"])

    async def update_job(self, job_id: str, update: JobUpdate) -> Job:
        data = await self.client.put(
            f"/v1/jobs/{job_id}", "update job", self.transformer.update_to_payload(update)
        )
        return self.transformer.job_from_api(data["job"])

    async def update_job_status(self, job_id: str, status: JobStatus) -> Job:
        data = await self.client.patch(
            f"/v1/jobs/{job_id}/status",
            "update job status",
            data={"status": status.value},
        )
        return self.transformer.job_from_api(data["job"])

    async def assign_job(self, job_id: str, technician_id: str) -> AssignmentResponse:
        data = await self.client.patch(
            f"/v1/jobs/{job_id}/assign",
            "assign job",
            data={"technicianId": technician_id},
        )
        return self.transformer.assignment_from_api(data)

    async def claim_job(self, job_id: str, technician_id: str) -> AssignmentResponse:
        # The acting technician is taken from the API session token
        logger.debug("Claiming job", job_id=job_id, technician_id=technician_id)
        data = await self.client.patch(f"/v1/jobs/{job_id}/claim", "claim job", data={})
        return self.transformer.assignment_from_api(data)

    async def complete_job(self, job_id: str, request: CompletionRequest) -> Job:
        multipart = self.transformer.completion_to_multipart(request)
        data = await self.client.patch(
            f"/v1/jobs/{job_id}/complete",
            "complete job",
            form=multipart["form"],
            files=multipart["files"],
        )

        # The response also carries the freed-up technician record
        if data.get("technician"):
            self.transformer.remember(
                [self.transformer.technician_from_api(data["technician"])]
            )
        return self.transformer.job_from_api(data["job"])

    async def list_available_jobs(
        self, filters: Optional[JobFilters] = None
    ) -> JobPage:
        data = await self.client.get(
            "/v1/jobs/available-jobs",
            "fetch available jobs",
            params=(filters or JobFilters()).to_query(),
        )
        return self.transformer.job_page_from_api(data)
