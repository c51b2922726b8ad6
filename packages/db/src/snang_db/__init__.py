# This project was developed with assistance from AI tools.
__version__ = "0.1.0"

from .database import Base, DatabaseService, get_db, get_db_service
from .enums import (
    CaptureMethod,
    ConsentPurpose,
    ConsentType,
    DocumentStatus,
    DocumentType,
    PortalRole,
)
from .models import (
    CaseDocument,
    ConsentRecord,
    PdpaNoticeVersion,
    TelemetryEvent,
    buyer_consent_status_view,
    buyer_document_status_view,
    view_metadata,
)

__all__ = [
    "Base",
    "DatabaseService",
    "get_db",
    "get_db_service",
    "__version__",
    # Enums
    "CaptureMethod",
    "ConsentPurpose",
    "ConsentType",
    "DocumentStatus",
    "DocumentType",
    "PortalRole",
    # Models
    "CaseDocument",
    "ConsentRecord",
    "PdpaNoticeVersion",
    "TelemetryEvent",
    # Views
    "buyer_consent_status_view",
    "buyer_document_status_view",
    "view_metadata",
]
