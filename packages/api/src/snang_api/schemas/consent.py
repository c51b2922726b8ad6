# This project was developed with assistance from AI tools.
"""PDPA consent request/response schemas.

Consent payloads are serialized in camelCase (``hasConsent``,
``grantedAt``) because the portal front-end consumes them directly;
request bodies stay snake_case.
"""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel
from snang_db.enums import CaptureMethod, ConsentPurpose, ConsentType


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ConsentCheckResult(_CamelModel):
    """Whether a buyer currently holds one consent type."""

    consent_type: ConsentType
    has_consent: bool
    granted_at: datetime | None = None
    expires_at: datetime | None = None
    consent_version: str | None = None


class BuyerConsentStatus(_CamelModel):
    """Rollup of every consent type for a buyer."""

    buyer_hash: str
    has_basic: bool = False
    has_marketing: bool = False
    has_analytics: bool = False
    has_third_party: bool = False
    has_lppsa_submission: bool = False
    active_consent_count: int = 0
    first_consent_at: datetime | None = None
    latest_consent_at: datetime | None = None
    can_proceed: bool = False


class ConsentRecordResponse(_CamelModel):
    """A stored consent record."""

    id: UUID
    buyer_hash: str
    consent_type: ConsentType
    granted_at: datetime | None = None
    expires_at: datetime | None = None
    revoked_at: datetime | None = None
    consent_version: str
    ip_hash: str | None = None
    user_agent_hash: str | None = None
    capture_method: CaptureMethod = CaptureMethod.WEB_FORM
    purposes: list[ConsentPurpose] | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @computed_field
    @property
    def retention_period(self) -> str:
        return self.consent_type.retention_period


class NoticeDisplay(_CamelModel):
    """Current PDPA notice rendered for one locale."""

    version: str
    content: str
    summary: str | None = None
    effective_from: datetime


# -- Requests --


class ConsentToggle(BaseModel):
    """One checkbox from the consent gate form."""

    type: str
    granted: bool = False


class ConsentGrantRequest(BaseModel):
    """Grant body. Exactly one mode applies: ``purposes``, ``consents`` or single."""

    buyer_hash: str | None = None
    consent_version: str | None = None
    consent_type: str | None = None
    consents: list[ConsentToggle] | None = None
    purposes: list[str] | None = None
    ip_hash: str | None = None
    user_agent_hash: str | None = None
    capture_method: CaptureMethod | None = None
    expires_at: datetime | None = None


class ConsentRevokeRequest(BaseModel):
    buyer_hash: str | None = None
    consent_type: str | None = None
    reason: str | None = None
    ip_hash: str | None = None


# -- Grant/revoke responses --


class GrantPurposesResponse(BaseModel):
    success: bool = True
    mode: Literal["purposes"] = "purposes"
    buyer_hash: str
    purposes_granted: list[ConsentPurpose]


class GrantBatchResponse(BaseModel):
    success: bool = True
    mode: Literal["batch"] = "batch"
    data: list[ConsentRecordResponse] = Field(default_factory=list)
    count: int = 0


class GrantSingleResponse(BaseModel):
    success: bool = True
    mode: Literal["single"] = "single"
    data: ConsentRecordResponse


class RevokeResponse(BaseModel):
    success: bool = True
    buyer_hash: str
    consent_type: ConsentType
    revoked_at: datetime
