"""
Job completion form: report attachment, invoice builder and validation.

Form state lives only for the duration of one completion attempt. A failed
submission leaves every field in place so the operator can retry without
re-entering line items.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional

from job_allocation.application.interfaces.gateways import CompletionRequest, ReportFile
from job_allocation.config.logging import get_logger
from job_allocation.domain.entities.invoice import (
    Invoice,
    InvoiceLineItem,
    Number,
    money,
    to_decimal,
)
from job_allocation.domain.exceptions.allocation_error import ActionInProgressError
from job_allocation.domain.exceptions.validation_error import CompletionValidationError

logger = get_logger(__name__)

PDF_CONTENT_TYPE = "application/pdf"


class CompletionStage(str, Enum):
    """Where the operator is in the completion flow."""

    IDLE = "idle"
    REPORT_ATTACHED = "report_attached"
    BUILDING_INVOICE = "building_invoice"
    SUBMITTING = "submitting"


@dataclass
class LineItemDraft:
    """Editable invoice row; amount is derived on every read."""

    id: str
    name: str = ""
    quantity: Decimal = Decimal("1")
    rate: Decimal = Decimal("0")

    @property
    def amount(self) -> Decimal:
        return self.quantity * self.rate

    @property
    def is_complete(self) -> bool:
        return (
            bool(self.name.strip())
            and self.quantity.is_finite()
            and self.rate.is_finite()
            and self.quantity > 0
            and self.rate > 0
        )

    def to_line_item(self) -> InvoiceLineItem:
        return InvoiceLineItem(
            id=self.id, name=self.name.strip(), quantity=self.quantity, rate=self.rate
        )


class CompletionForm:
    """Builds and validates a single completion submission."""

    def __init__(
        self,
        job_id: str,
        due_date: Optional[date] = None,
        accepted_content_type: str = PDF_CONTENT_TYPE,
    ):
        self.job_id = job_id
        self.due_date = due_date
        self.accepted_content_type = accepted_content_type
        self.reset()

    def reset(self) -> None:
        """Clear every field back to the initial state."""
        self.report: Optional[ReportFile] = None
        self.invoice_enabled = False
        self.description = ""
        self.tax_percentage = Decimal("0")
        self.notes = ""
        self.errors: Dict[str, str] = {}
        self.loading = False
        self._next_item_id = 1
        self.items: List[LineItemDraft] = [self._new_item()]

    def _new_item(self) -> LineItemDraft:
        item = LineItemDraft(id=str(self._next_item_id))
        self._next_item_id += 1
        return item

    @property
    def stage(self) -> CompletionStage:
        if self.loading:
            return CompletionStage.SUBMITTING
        if self.invoice_enabled:
            return CompletionStage.BUILDING_INVOICE
        if self.report is not None:
            return CompletionStage.REPORT_ATTACHED
        return CompletionStage.IDLE

    def is_due_today(self, today: date) -> bool:
        """Drives the presentational "not due today" warning."""
        return self.due_date == today

    # Report

    def attach_report(self, report: ReportFile) -> bool:
        """Attach the report if it is of the accepted document type."""
        if report.content_type != self.accepted_content_type:
            self.errors["reportFile"] = "Please select a PDF file"
            return False

        self.report = report
        self.errors.pop("reportFile", None)
        return True

    def remove_report(self) -> None:
        self.report = None

    # Invoice builder

    def toggle_invoice(self, enabled: bool) -> None:
        self.invoice_enabled = enabled

    def add_item(self) -> LineItemDraft:
        """Append a row seeded with quantity 1 and rate 0."""
        item = self._new_item()
        self.items.append(item)
        return item

    def remove_item(self, item_id: str) -> bool:
        """Remove a row; the last remaining row cannot be removed."""
        if len(self.items) <= 1:
            return False

        remaining = [item for item in self.items if item.id != item_id]
        if len(remaining) == len(self.items):
            return False

        self.items = remaining
        return True

    def update_item(
        self,
        item_id: str,
        name: Optional[str] = None,
        quantity: Optional[Number] = None,
        rate: Optional[Number] = None,
    ) -> LineItemDraft:
        for item in self.items:
            if item.id == item_id:
                if name is not None:
                    item.name = name
                if quantity is not None:
                    item.quantity = to_decimal(quantity)
                if rate is not None:
                    item.rate = to_decimal(rate)
                return item
        raise KeyError(f"Invoice item {item_id} not found")

    def set_tax_percentage(self, value: Number) -> None:
        self.tax_percentage = to_decimal(value)

    @property
    def subtotal(self) -> Decimal:
        return sum((item.amount for item in self.items), Decimal("0"))

    @property
    def tax(self) -> Decimal:
        return self.subtotal * self.tax_percentage / Decimal("100")

    @property
    def total(self) -> Decimal:
        return self.subtotal + self.tax

    def totals(self) -> Dict[str, str]:
        """Display values at 2 decimal places."""
        return {
            "subtotal": f"{money(self.subtotal):.2f}",
            "tax": f"{money(self.tax):.2f}",
            "total": f"{money(self.total):.2f}",
        }

    # Validation and submission

    def validate(self) -> bool:
        """Collect every field error rather than stopping at the first."""
        errors: Dict[str, str] = {}

        if self.report is None:
            errors["reportFile"] = "Please upload a job report PDF"
        elif self.report.content_type != self.accepted_content_type:
            errors["reportFile"] = "Please select a PDF file"

        if self.invoice_enabled:
            if not self.description.strip():
                errors["invoiceDescription"] = "Invoice description is required"

            if not self.items or not all(item.is_complete for item in self.items):
                errors["invoiceItems"] = "Please fill in all invoice item details"

            if not (
                self.tax_percentage.is_finite()
                and Decimal("0") <= self.tax_percentage <= Decimal("100")
            ):
                errors["taxPercentage"] = "Tax percentage must be between 0 and 100"

        self.errors = errors
        return not errors

    def build_invoice(self) -> Optional[Invoice]:
        if not self.invoice_enabled:
            return None
        return Invoice(
            description=self.description.strip(),
            items=[item.to_line_item() for item in self.items],
            tax_percentage=self.tax_percentage,
            notes=self.notes,
        )

    def build_request(self) -> CompletionRequest:
        """Validate and assemble the single atomic completion request."""
        if not self.validate():
            logger.info(
                "Completion form rejected", job_id=self.job_id, errors=self.errors
            )
            raise CompletionValidationError(self.errors)

        return CompletionRequest(report=self.report, invoice=self.build_invoice())

    def begin_submit(self) -> None:
        """Enter the in-flight state; a second submit is refused."""
        if self.loading:
            raise ActionInProgressError("complete", self.job_id)
        self.loading = True

    def end_submit(self) -> None:
        self.loading = False

    @classmethod
    def from_submission(
        cls,
        job_id: str,
        report: Optional[ReportFile],
        invoice_data: Optional[Dict[str, Any]] = None,
        due_date: Optional[date] = None,
        accepted_content_type: str = PDF_CONTENT_TYPE,
    ) -> "CompletionForm":
        """
        Rebuild form state from a submitted payload.

        Client-sent amounts and totals are ignored; only names, quantities and
        rates are taken and everything else is recomputed.
        """
        form = cls(job_id, due_date=due_date, accepted_content_type=accepted_content_type)
        if report is not None:
            # Bypass attach_report so a wrong type surfaces through validate()
            form.report = report

        if invoice_data:
            form.toggle_invoice(True)
            form.description = str(invoice_data.get("description") or "")
            form.notes = str(invoice_data.get("notes") or "")
            form.set_tax_percentage(invoice_data.get("taxPercentage") or 0)

            raw_items = invoice_data.get("items") or []
            if raw_items:
                form.items = []
                for raw in raw_items:
                    item = form.add_item()
                    form.update_item(
                        item.id,
                        name=str(raw.get("name") or ""),
                        quantity=raw.get("quantity") or 0,
                        rate=raw.get("rate") or 0,
                    )

        return form
