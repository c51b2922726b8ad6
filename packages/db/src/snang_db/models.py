# This project was developed with assistance from AI tools.
"""
Snang portal -- domain models

Mappings of the hosted store's consent, notice, telemetry and case document
tables. The schema is provisioned by the hosted store; these classes only
describe the columns this application reads and writes.

The two aggregate views are mapped as Core tables on a separate MetaData so
that ``Base.metadata.create_all`` never tries to create them as tables.
"""

from sqlalchemy import (
    BigInteger,
    Boolean,
    Column,
    DateTime,
    Enum,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    UniqueConstraint,
    func,
    text,
)
from sqlalchemy.dialects.postgresql import INTERVAL, JSONB, UUID

from .database import Base
from .enums import CaptureMethod, DocumentStatus, DocumentType


class ConsentRecord(Base):
    """One consent type granted by a buyer (dual-keyed by buyer_hash and case_id)."""

    __tablename__ = "consent_records"
    __table_args__ = (UniqueConstraint("buyer_hash", "consent_type"),)

    id = Column(UUID(as_uuid=True), primary_key=True, server_default=text("gen_random_uuid()"))
    buyer_hash = Column(Text, nullable=False, index=True)
    case_id = Column(UUID(as_uuid=True), nullable=True)
    # String rather than Enum: the store also holds types this service never reads.
    consent_type = Column(String(50), nullable=False)
    purposes = Column(JSONB, nullable=True, server_default=text("'[]'::jsonb"))
    granted_at = Column(DateTime(timezone=True), server_default=func.now())
    expires_at = Column(DateTime(timezone=True), nullable=True)
    revoked_at = Column(DateTime(timezone=True), nullable=True)
    retention_period = Column(INTERVAL, nullable=True)
    consent_version = Column(Text, nullable=False)
    ip_hash = Column(Text, nullable=True)
    user_agent_hash = Column(Text, nullable=True)
    capture_method = Column(
        Enum(CaptureMethod, name="capture_method", native_enum=False),
        nullable=False,
        default=CaptureMethod.WEB_FORM,
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<ConsentRecord(buyer_hash='{self.buyer_hash}', type='{self.consent_type}')>"


class PdpaNoticeVersion(Base):
    """Versioned PDPA notice text in Bahasa Melayu and English."""

    __tablename__ = "pdpa_notice_versions"

    version = Column(Text, primary_key=True)
    content_bm = Column(Text, nullable=False)
    content_en = Column(Text, nullable=False)
    summary_bm = Column(Text, nullable=True)
    summary_en = Column(Text, nullable=True)
    effective_from = Column(DateTime(timezone=True), nullable=False)
    superseded_at = Column(DateTime(timezone=True), nullable=True)
    change_reason = Column(Text, nullable=True)
    approved_by = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    created_by = Column(Text, server_default="system")

    def __repr__(self):
        return f"<PdpaNoticeVersion(version='{self.version}')>"


class TelemetryEvent(Base):
    """Workflow proof event (consent granted/revoked, etc.)."""

    __tablename__ = "telemetry_events"

    id = Column(UUID(as_uuid=True), primary_key=True, server_default=text("gen_random_uuid()"))
    event_type = Column(Text, nullable=False, index=True)
    timestamp = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    case_id = Column(Text, nullable=True)
    project_id = Column(Text, nullable=True)
    role = Column(Text, nullable=False)
    # "metadata" is reserved on declarative classes
    event_metadata = Column("metadata", JSONB, server_default=text("'{}'::jsonb"))
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<TelemetryEvent(type='{self.event_type}')>"


class CaseDocument(Base):
    """An uploaded buyer document, keyed by buyer_hash and later linked to a case."""

    __tablename__ = "case_documents"

    id = Column(UUID(as_uuid=True), primary_key=True, server_default=text("gen_random_uuid()"))
    buyer_hash = Column(Text, nullable=False, index=True)
    case_id = Column(UUID(as_uuid=True), nullable=True, index=True)
    document_type = Column(
        Enum(DocumentType, name="document_type", native_enum=False),
        nullable=False,
    )
    file_name = Column(Text, nullable=False)
    file_size = Column(Integer, nullable=False)
    mime_type = Column(Text, nullable=False)
    storage_path = Column(Text, nullable=False)
    status = Column(
        Enum(DocumentStatus, name="document_status", native_enum=False),
        nullable=False,
        default=DocumentStatus.UPLOADED,
    )
    uploaded_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    verified_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<CaseDocument(id={self.id}, type='{self.document_type}')>"


# -- Read-only views (maintained by the hosted store) --

view_metadata = MetaData()

buyer_document_status_view = Table(
    "v_buyer_document_status",
    view_metadata,
    Column("buyer_hash", Text),
    Column("case_id", UUID(as_uuid=True)),
    Column("docs_uploaded", BigInteger),
    Column("has_ic", Boolean),
    Column("has_payslip", Boolean),
    Column("has_bank_statement", Boolean),
    Column("has_kwsp", Boolean),
    Column("all_required_uploaded", Boolean),
    Column("last_upload_at", DateTime(timezone=True)),
)

buyer_consent_status_view = Table(
    "v_buyer_consent_status",
    view_metadata,
    Column("buyer_hash", Text),
    Column("has_basic", Boolean),
    Column("has_marketing", Boolean),
    Column("has_analytics", Boolean),
    Column("has_third_party", Boolean),
    Column("has_lppsa_submission", Boolean),
    Column("active_consent_count", BigInteger),
    Column("first_consent_at", DateTime(timezone=True)),
    Column("latest_consent_at", DateTime(timezone=True)),
)
