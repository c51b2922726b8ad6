# This project was developed with assistance from AI tools.
"""Case document listing schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from snang_db.enums import DocumentStatus, DocumentType


class DocumentResponse(BaseModel):
    """Document metadata projection (no storage path or extraction data)."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    document_type: DocumentType
    file_name: str
    file_size: int
    mime_type: str
    status: DocumentStatus
    uploaded_at: datetime
    verified_at: datetime | None = None


class DocumentStatusSummary(BaseModel):
    """Per-buyer completeness rollup from ``v_buyer_document_status``.

    The defaults are the documented shape returned when the view has no row
    for the buyer or the view query fails.
    """

    model_config = ConfigDict(extra="ignore")

    docs_uploaded: int = 0
    has_ic: bool = False
    has_payslip: bool = False
    has_bank_statement: bool = False
    has_kwsp: bool = False
    all_required_uploaded: bool = False


class DocumentListData(BaseModel):
    documents: list[DocumentResponse] = Field(default_factory=list)
    summary: DocumentStatusSummary = Field(default_factory=DocumentStatusSummary)
