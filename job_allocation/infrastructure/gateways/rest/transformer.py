"""
Compliance API data transformer.

Raw payloads are normalized here, once, on the way in. Nothing past this
module branches on whether a technician reference arrived as a string ID or
an embedded object.
"""

import json
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from job_allocation.application.interfaces.gateways import (
    AssignmentResponse,
    CompletionRequest,
    JobDraft,
    JobPage,
    JobUpdate,
    Pagination,
)
from job_allocation.config.logging import get_logger
from job_allocation.domain.entities.job import Job
from job_allocation.domain.entities.technician import Technician
from job_allocation.domain.exceptions.gateway_error import GatewayAPIError
from job_allocation.domain.value_objects.availability import Availability
from job_allocation.domain.value_objects.job_priority import JobPriority
from job_allocation.domain.value_objects.job_status import JobStatus
from job_allocation.domain.value_objects.job_type import JobType
from job_allocation.domain.value_objects.references import PropertyRef, TechnicianRef

logger = get_logger(__name__)

UNKNOWN_TECHNICIAN = "Unknown Technician"


def parse_datetime(value: Any) -> Optional[datetime]:
    """
    Parse an API timestamp or date.

    Unparseable values yield None instead of raising.
    """
    if not value:
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = datetime.fromisoformat(str(value).strip().replace("Z", "+00:00"))
        except ValueError:
            logger.warning("Unparseable timestamp from job service", value=value)
            return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_datetime(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    return value.isoformat().replace("+00:00", "Z")


def _entity_id(raw: Dict[str, Any]) -> str:
    return str(raw.get("_id") or raw.get("id") or "")


def _display_name(raw: Dict[str, Any]) -> str:
    if raw.get("fullName"):
        return str(raw["fullName"]).strip()
    parts = [str(raw.get(key) or "").strip() for key in ("firstName", "lastName")]
    joined = " ".join(part for part in parts if part)
    if joined:
        return joined
    return str(raw.get("name") or "").strip()


def _non_negative(value: Any, default: int = 0) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return max(number, 0)


class ComplianceTransformer:
    """Transform data between domain and compliance API formats."""

    def __init__(self, default_max_jobs: int = 5):
        self.default_max_jobs = default_max_jobs
        self._technicians: Dict[str, Technician] = {}

    # Technician directory

    def remember(self, technicians: Iterable[Technician]) -> None:
        """Cache known technicians for resolving job references."""
        for technician in technicians:
            self._technicians[technician.id] = technician

    def known_technician(self, technician_id: str) -> Optional[Technician]:
        return self._technicians.get(technician_id)

    def _find_by_name(self, name: str) -> Optional[Technician]:
        needle = name.strip().lower()
        for technician in self._technicians.values():
            if technician.name.strip().lower() == needle:
                return technician
        return None

    # Inbound

    def technician_ref(self, raw: Any) -> Optional[TechnicianRef]:
        """Resolve any shape of ``assignedTechnician`` to a canonical reference."""
        if raw is None or raw == "":
            return None

        if isinstance(raw, str):
            known = self.known_technician(raw)
            return TechnicianRef(id=raw, display_name=known.name if known else raw)

        if not isinstance(raw, dict):
            logger.warning("Unexpected technician reference", value=repr(raw))
            return None

        technician_id = _entity_id(raw)
        name = _display_name(raw)

        if not technician_id and name:
            match = self._find_by_name(name)
            technician_id = match.id if match else ""

        if not name and technician_id:
            known = self.known_technician(technician_id)
            name = known.name if known else ""

        return TechnicianRef(id=technician_id, display_name=name or UNKNOWN_TECHNICIAN)

    def property_ref(self, raw: Any) -> Optional[PropertyRef]:
        if not raw:
            return None
        if isinstance(raw, str):
            return PropertyRef(id=raw)

        address = raw.get("fullAddress")
        if not address and isinstance(raw.get("address"), dict):
            address = raw["address"].get("fullAddress")

        agency = raw.get("agency")
        agency_name = agency.get("companyName") if isinstance(agency, dict) else None

        return PropertyRef(
            id=_entity_id(raw), address=address or "", agency_name=agency_name
        )

    def job_from_api(self, raw: Dict[str, Any]) -> Job:
        job_key = _entity_id(raw)
        try:
            job_type = JobType(raw.get("jobType"))
            status = JobStatus(raw.get("status") or JobStatus.PENDING.value)
        except ValueError as e:
            raise GatewayAPIError(502, f"Unexpected job payload for {job_key}: {e}")

        try:
            priority = JobPriority(raw["priority"]) if raw.get("priority") else None
        except ValueError:
            priority = None

        invoice = raw.get("invoice")
        if isinstance(invoice, dict):
            invoice_id = invoice.get("_id") or invoice.get("id")
        else:
            invoice_id = invoice or None

        return Job(
            id=job_key,
            job_id=str(raw.get("job_id") or ""),
            job_type=job_type,
            status=status,
            priority=priority,
            due_date=parse_datetime(raw.get("dueDate")),
            property_ref=self.property_ref(raw.get("property")),
            technician=self.technician_ref(raw.get("assignedTechnician")),
            description=raw.get("description"),
            notes=raw.get("notes"),
            has_invoice=bool(raw.get("hasInvoice")),
            invoice_id=invoice_id,
            created_at=parse_datetime(raw.get("createdAt")),
            updated_at=parse_datetime(raw.get("updatedAt")),
            completed_at=parse_datetime(raw.get("completedAt")),
        )

    def technician_from_api(self, raw: Dict[str, Any]) -> Technician:
        """
        Build a technician record.

        Partial records, such as the one returned with an assignment, are
        completed from the cached directory entry.
        """
        technician_id = _entity_id(raw)
        known = self.known_technician(technician_id)

        raw_availability = raw.get("availabilityStatus")
        try:
            availability = Availability(raw_availability)
        except ValueError:
            if raw_availability is not None:
                logger.warning(
                    "Unknown technician availability",
                    technician_id=technician_id,
                    availability=raw_availability,
                )
            availability = known.availability if known else Availability.UNAVAILABLE

        def pick(key: str, attr: str, default: Any) -> Any:
            if raw.get(key) is not None:
                return raw[key]
            return getattr(known, attr) if known else default

        specialties = raw.get("specialties") or raw.get("skills")
        if specialties is None:
            specialties = known.specialties if known else frozenset()

        return Technician(
            id=technician_id,
            name=_display_name(raw) or (known.name if known else UNKNOWN_TECHNICIAN),
            email=pick("email", "email", ""),
            phone=pick("phone", "phone", ""),
            experience=_non_negative(pick("experience", "experience", 0)),
            availability=availability,
            current_jobs=_non_negative(pick("currentJobs", "current_jobs", 0)),
            max_jobs=_non_negative(
                pick("maxJobs", "max_jobs", self.default_max_jobs),
                self.default_max_jobs,
            ),
            completed_jobs=_non_negative(pick("completedJobs", "completed_jobs", 0)),
            average_rating=float(pick("averageRating", "average_rating", 0.0) or 0.0),
            total_ratings=_non_negative(pick("totalRatings", "total_ratings", 0)),
            specialties=frozenset(specialties),
            status=pick("status", "status", "Active"),
        )

    def pagination_from_api(self, raw: Optional[Dict[str, Any]]) -> Pagination:
        if not raw:
            return Pagination()
        return Pagination(
            current_page=raw.get("currentPage", 1),
            total_pages=raw.get("totalPages", 1),
            total_items=raw.get("totalItems", 0),
            items_per_page=raw.get("itemsPerPage", 0),
            has_next_page=bool(raw.get("hasNextPage")),
            has_prev_page=bool(raw.get("hasPrevPage")),
        )

    def job_page_from_api(self, data: Dict[str, Any]) -> JobPage:
        statistics = data.get("statistics") or {}
        return JobPage(
            jobs=[self.job_from_api(raw) for raw in data.get("jobs") or []],
            pagination=self.pagination_from_api(data.get("pagination")),
            status_counts=dict(statistics.get("statusCounts") or {}),
        )

    def technicians_from_api(self, data: Dict[str, Any]) -> List[Technician]:
        technicians = [
            self.technician_from_api(raw) for raw in data.get("technicians") or []
        ]
        self.remember(technicians)
        return technicians

    def assignment_from_api(self, data: Dict[str, Any]) -> AssignmentResponse:
        technician = self.technician_from_api(data.get("technician") or {})
        self.remember([technician])
        return AssignmentResponse(job=self.job_from_api(data["job"]), technician=technician)

    # Outbound

    def draft_to_payload(self, draft: JobDraft) -> Dict[str, Any]:
        payload = {
            "property": draft.property_id,
            "jobType": draft.job_type.value,
            "dueDate": format_datetime(draft.due_date),
            "assignedTechnician": draft.technician_id or None,
            "priority": draft.priority.value,
        }
        if draft.description:
            payload["description"] = draft.description
        if draft.notes:
            payload["notes"] = draft.notes
        return payload

    def update_to_payload(self, update: JobUpdate) -> Dict[str, Any]:
        """Only changed fields; a cleared technician is sent as explicit null."""
        payload: Dict[str, Any] = {}
        if update.job_type is not None:
            payload["jobType"] = update.job_type.value
        if update.due_date is not None:
            payload["dueDate"] = format_datetime(update.due_date)
        if update.changes_technician:
            payload["assignedTechnician"] = update.technician_id
        if update.status is not None:
            payload["status"] = update.status.value
        if update.priority is not None:
            payload["priority"] = update.priority.value
        if update.description is not None:
            payload["description"] = update.description
        return payload

    def completion_to_multipart(self, request: CompletionRequest) -> Dict[str, Any]:
        """Form fields and files for the single completion request."""
        form = {"hasInvoice": "true" if request.has_invoice else "false"}
        if request.invoice is not None:
            form["invoiceData"] = json.dumps(request.invoice.to_payload())

        files = {
            "reportFile": (
                request.report.filename,
                request.report.content,
                request.report.content_type,
            )
        }
        return {"form": form, "files": files}
