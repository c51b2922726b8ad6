# This project was developed with assistance from AI tools.
"""PDPA consent routes.

Store failures on the read routes are not caught here: they reach the
application's catch-all handler, which logs them and answers with the
generic "Internal server error" body. Grant/revoke failures map to 500 with
a stable ``code`` the consent gate UI branches on.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from snang_db.enums import CaptureMethod, ConsentPurpose, ConsentType

from ..schemas import SuccessResponse
from ..schemas.consent import (
    BuyerConsentStatus,
    ConsentCheckResult,
    ConsentGrantRequest,
    ConsentRecordResponse,
    ConsentRevokeRequest,
    GrantBatchResponse,
    GrantPurposesResponse,
    GrantSingleResponse,
    NoticeDisplay,
    RevokeResponse,
)
from ..services.consent import (
    SUPPORTED_LOCALES,
    ConsentService,
    ConsentServiceError,
    get_consent_service,
)
from ..services.ports import ConsentChecker

logger = logging.getLogger(__name__)

router = APIRouter()

_VALID_TYPES = ", ".join(ConsentType.values())


def _bad_request(message: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)


def _failed(message: str, code: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={"error": message, "code": code},
    )


@router.get("/check", response_model=SuccessResponse[ConsentCheckResult])
async def check_consent(
    buyer_hash: str | None = Query(default=None),
    consent_type: str | None = Query(default=None, alias="type"),
    service: ConsentChecker = Depends(get_consent_service),
) -> SuccessResponse[ConsentCheckResult]:
    """Lightweight check used by route-level consent gates."""
    if not buyer_hash:
        raise _bad_request("buyer_hash query parameter is required")
    if not consent_type or consent_type not in ConsentType.values():
        raise _bad_request(f"Invalid or missing type. Valid: {_VALID_TYPES}")

    result = await service.check_consent(buyer_hash, ConsentType(consent_type))
    return SuccessResponse[ConsentCheckResult](data=result)


@router.get("/status", response_model=SuccessResponse[BuyerConsentStatus])
async def consent_status(
    buyer_hash: str | None = Query(default=None),
    service: ConsentService = Depends(get_consent_service),
) -> SuccessResponse[BuyerConsentStatus]:
    """Full consent rollup for a buyer."""
    if not buyer_hash:
        raise _bad_request("buyer_hash query parameter is required")

    result = await service.get_buyer_consent_status(buyer_hash)
    return SuccessResponse[BuyerConsentStatus](data=result)


@router.get("/notice", response_model=SuccessResponse[NoticeDisplay])
async def consent_notice(
    locale: str | None = Query(default=None),
    service: ConsentService = Depends(get_consent_service),
) -> SuccessResponse[NoticeDisplay]:
    """Current PDPA notice text for the consent gate. Empty locale means bm."""
    locale = locale or "bm"
    if locale not in SUPPORTED_LOCALES:
        raise _bad_request("locale must be bm or en")

    notice = await service.get_notice_for_display(locale)
    if notice is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"error": "No active PDPA notice version found", "code": "NO_NOTICE"},
        )
    return SuccessResponse[NoticeDisplay](data=notice)


@router.post("/grant", status_code=status.HTTP_201_CREATED)
async def grant_consent(
    body: ConsentGrantRequest,
    service: ConsentService = Depends(get_consent_service),
) -> GrantPurposesResponse | GrantBatchResponse | GrantSingleResponse:
    """Grant consent in purposes, batch or single mode."""
    if not body.buyer_hash:
        raise _bad_request("buyer_hash is required")

    capture_method = body.capture_method or CaptureMethod.WEB_FORM

    if body.purposes is not None:
        if not body.consent_version:
            raise _bad_request("consent_version is required")
        invalid = [p for p in body.purposes if p not in ConsentPurpose.values()]
        if invalid:
            raise _bad_request(f"Invalid purpose codes: {', '.join(invalid)}")

        purposes = [ConsentPurpose(p) for p in body.purposes]
        try:
            await service.grant_purposes(
                body.buyer_hash,
                purposes,
                body.consent_version,
                ip_hash=body.ip_hash,
                user_agent_hash=body.user_agent_hash,
                capture_method=capture_method,
            )
        except ConsentServiceError as exc:
            raise _failed("Failed to grant consent", "GRANT_FAILED") from exc
        return GrantPurposesResponse(buyer_hash=body.buyer_hash, purposes_granted=purposes)

    if body.consents is not None:
        if not body.consent_version:
            raise _bad_request("consent_version is required")
        invalid = [c.type for c in body.consents if c.type not in ConsentType.values()]
        if invalid:
            raise _bad_request(f"Invalid consent_type: {', '.join(invalid)}")

        # Rejected entries are skipped by the service, not reported as a failure
        records = await service.grant_batch_consents(
            body.buyer_hash,
            [(ConsentType(c.type), c.granted) for c in body.consents],
            body.consent_version,
            ip_hash=body.ip_hash,
            user_agent_hash=body.user_agent_hash,
        )
        data = [ConsentRecordResponse.model_validate(r) for r in records]
        return GrantBatchResponse(data=data, count=len(data))

    if not body.consent_type:
        raise _bad_request(
            "consent_type is required (or use consents[] for batch or purposes[] for purposes)"
        )
    if body.consent_type not in ConsentType.values():
        raise _bad_request(f"Invalid consent_type: {body.consent_type}")
    if not body.consent_version:
        raise _bad_request("consent_version is required")

    try:
        record = await service.grant_consent(
            body.buyer_hash,
            ConsentType(body.consent_type),
            body.consent_version,
            ip_hash=body.ip_hash,
            user_agent_hash=body.user_agent_hash,
            capture_method=capture_method,
            expires_at=body.expires_at,
        )
    except ConsentServiceError as exc:
        raise _failed("Failed to grant consent", "GRANT_FAILED") from exc
    return GrantSingleResponse(data=ConsentRecordResponse.model_validate(record))


@router.post("/revoke", response_model=RevokeResponse)
async def revoke_consent(
    body: ConsentRevokeRequest,
    service: ConsentService = Depends(get_consent_service),
) -> RevokeResponse:
    """Withdraw a consent type (effective immediately)."""
    if not body.buyer_hash:
        raise _bad_request("buyer_hash is required")
    if not body.consent_type or body.consent_type not in ConsentType.values():
        raise _bad_request(f"Invalid or missing consent_type. Valid: {_VALID_TYPES}")

    consent_type = ConsentType(body.consent_type)
    try:
        revoked_at = await service.revoke_consent(
            body.buyer_hash,
            consent_type,
            reason=body.reason,
            ip_hash=body.ip_hash,
        )
    except ConsentServiceError as exc:
        raise _failed("Failed to revoke consent", "REVOKE_FAILED") from exc

    logger.info("Consent %s revoked", consent_type.value)
    return RevokeResponse(
        buyer_hash=body.buyer_hash,
        consent_type=consent_type,
        revoked_at=revoked_at,
    )
