# This project was developed with assistance from AI tools.
"""
Domain enums for PDPA consent and buyer document tracking.

Shared domain types used by both SQLAlchemy models (db package)
and Pydantic schemas (api package).
"""

import enum


class ConsentType(str, enum.Enum):
    PDPA_BASIC = "PDPA_BASIC"
    PDPA_MARKETING = "PDPA_MARKETING"
    PDPA_ANALYTICS = "PDPA_ANALYTICS"
    PDPA_THIRD_PARTY = "PDPA_THIRD_PARTY"

    @classmethod
    def values(cls) -> list[str]:
        """Recognized consent type codes, in declaration order."""
        return [member.value for member in cls]

    @property
    def retention_period(self) -> str:
        """PostgreSQL INTERVAL literal for how long the record is retained."""
        return _CONSENT_RETENTION[self.value]

    @property
    def mapped_purposes(self) -> list["ConsentPurpose"]:
        """Purpose codes covered by this legacy consent type."""
        return [ConsentPurpose(p) for p in _CONSENT_PURPOSES[self.value]]

    @property
    def granted_event(self) -> str:
        return f"{self.value}_GRANTED"

    @property
    def revoked_event(self) -> str:
        return f"{self.value}_REVOKED"


class ConsentPurpose(str, enum.Enum):
    C1_ELIGIBILITY = "C1_ELIGIBILITY"
    C2_DOCUMENT_PROCESSING = "C2_DOCUMENT_PROCESSING"
    C3_SHARE_AGENT = "C3_SHARE_AGENT"
    C4_DEVELOPER_ANALYTICS = "C4_DEVELOPER_ANALYTICS"
    C5_COMMUNICATION = "C5_COMMUNICATION"
    C6_PROMOTIONAL = "C6_PROMOTIONAL"

    @classmethod
    def required(cls) -> tuple["ConsentPurpose", ...]:
        """Purposes that gate loan processing (C1-C4)."""
        return (
            cls.C1_ELIGIBILITY,
            cls.C2_DOCUMENT_PROCESSING,
            cls.C3_SHARE_AGENT,
            cls.C4_DEVELOPER_ANALYTICS,
        )

    @classmethod
    def values(cls) -> list[str]:
        return [member.value for member in cls]

    @property
    def is_required(self) -> bool:
        return self in ConsentPurpose.required()

    @property
    def retention_period(self) -> str:
        return "7 years" if self.is_required else "2 years"

    @property
    def granted_event(self) -> str:
        return f"PURPOSE_{self.value}_GRANTED"

    @property
    def revoked_event(self) -> str:
        return f"PURPOSE_{self.value}_REVOKED"


_CONSENT_RETENTION: dict[str, str] = {
    "PDPA_BASIC": "7 years",
    "PDPA_MARKETING": "2 years",
    "PDPA_ANALYTICS": "1 year",
    "PDPA_THIRD_PARTY": "7 years",
}

_CONSENT_PURPOSES: dict[str, tuple[str, ...]] = {
    "PDPA_BASIC": (
        "C1_ELIGIBILITY",
        "C2_DOCUMENT_PROCESSING",
        "C3_SHARE_AGENT",
        "C4_DEVELOPER_ANALYTICS",
    ),
    "PDPA_MARKETING": ("C6_PROMOTIONAL",),
    # Absorbed into C4
    "PDPA_ANALYTICS": ("C4_DEVELOPER_ANALYTICS",),
    "PDPA_THIRD_PARTY": ("C3_SHARE_AGENT",),
}


class CaptureMethod(str, enum.Enum):
    WEB_FORM = "WEB_FORM"
    API = "API"
    IMPORT = "IMPORT"


class DocumentType(str, enum.Enum):
    IC = "IC"
    PAYSLIP = "PAYSLIP"
    BANK_STATEMENT = "BANK_STATEMENT"
    KWSP = "KWSP"


class DocumentStatus(str, enum.Enum):
    UPLOADING = "UPLOADING"
    UPLOADED = "UPLOADED"
    PROCESSING = "PROCESSING"
    VERIFIED = "VERIFIED"
    REJECTED = "REJECTED"
    FAILED = "FAILED"


class PortalRole(str, enum.Enum):
    BUYER = "buyer"
    AGENT = "agent"
    DEVELOPER = "developer"
    SYSTEM = "system"
