# This project was developed with assistance from AI tools.
"""PDPA consent service.

Grants, checks and revokes consent for a buyer and serves the current PDPA
notice. Every grant or revocation also writes a proof event to
``telemetry_events``; that write runs in a savepoint so a telemetry failure
is logged without undoing the consent change itself.

When the PDPA gate is disabled (demo builds, ``PDPA_GATE_ENABLED=False``)
``can_proceed`` and the optional-consent checks short-circuit to True.
"""

import logging
from collections.abc import Iterable
from datetime import UTC, datetime
from typing import Any

from fastapi import Depends
from snang_db import (
    ConsentRecord,
    PdpaNoticeVersion,
    TelemetryEvent,
    buyer_consent_status_view,
    get_db,
)
from snang_db.enums import CaptureMethod, ConsentPurpose, ConsentType, PortalRole
from sqlalchemy import cast, func, or_, select, update
from sqlalchemy.dialects.postgresql import INTERVAL, insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.config import Settings, get_settings
from ..schemas.consent import BuyerConsentStatus, ConsentCheckResult, NoticeDisplay

logger = logging.getLogger(__name__)

SUPPORTED_LOCALES = ("bm", "en")


class ConsentServiceError(Exception):
    """Raised when the store rejects a consent write."""


def _active(stmt):
    """Restrict a consent_records query to unrevoked, unexpired rows."""
    return stmt.where(
        ConsentRecord.revoked_at.is_(None),
        or_(ConsentRecord.expires_at.is_(None), ConsentRecord.expires_at > func.now()),
    )


def is_purpose_required(purpose: ConsentPurpose) -> bool:
    return purpose.is_required


def get_mapped_purposes(consent_type: ConsentType) -> list[ConsentPurpose]:
    """Purpose codes covered by a legacy consent type."""
    return consent_type.mapped_purposes


def purposes_to_consent_types(purposes: Iterable[ConsentPurpose]) -> list[ConsentType]:
    """Derive the legacy consent types a set of purposes amounts to."""
    granted = set(purposes)
    has_all_required = all(p in granted for p in ConsentPurpose.required())

    types: list[ConsentType] = []
    if has_all_required:
        types.append(ConsentType.PDPA_BASIC)
    if ConsentPurpose.C6_PROMOTIONAL in granted:
        types.append(ConsentType.PDPA_MARKETING)
    # C3/C4 only count on their own when PDPA_BASIC does not already cover them
    if ConsentPurpose.C4_DEVELOPER_ANALYTICS in granted and not has_all_required:
        types.append(ConsentType.PDPA_ANALYTICS)
    if ConsentPurpose.C3_SHARE_AGENT in granted and not has_all_required:
        types.append(ConsentType.PDPA_THIRD_PARTY)
    return types


class ConsentService:
    """Consent lifecycle operations over one request's session."""

    def __init__(self, session: AsyncSession, *, gate_enabled: bool = True):
        self._session = session
        self.gate_enabled = gate_enabled

    # -- Checks --

    async def can_proceed(self, buyer_hash: str) -> bool:
        """True when the buyer holds PDPA_BASIC (always True with the gate off)."""
        if not self.gate_enabled:
            logger.warning("PDPA gate bypassed (gate disabled)")
            return True
        return await self.has_consent(buyer_hash, ConsentType.PDPA_BASIC)

    async def has_consent(self, buyer_hash: str, consent_type: ConsentType) -> bool:
        if not self.gate_enabled and consent_type != ConsentType.PDPA_BASIC:
            return True

        stmt = _active(
            select(ConsentRecord.id).where(
                ConsentRecord.buyer_hash == buyer_hash,
                ConsentRecord.consent_type == consent_type.value,
            )
        ).limit(1)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def check_consent(
        self, buyer_hash: str, consent_type: ConsentType
    ) -> ConsentCheckResult:
        """Return whether the buyer holds ``consent_type`` plus grant metadata."""
        stmt = _active(
            select(
                ConsentRecord.granted_at,
                ConsentRecord.expires_at,
                ConsentRecord.consent_version,
            ).where(
                ConsentRecord.buyer_hash == buyer_hash,
                ConsentRecord.consent_type == consent_type.value,
            )
        ).limit(1)
        result = await self._session.execute(stmt)
        row = result.first()
        if row is None:
            return ConsentCheckResult(consent_type=consent_type, has_consent=False)
        return ConsentCheckResult(
            consent_type=consent_type,
            has_consent=True,
            granted_at=row.granted_at,
            expires_at=row.expires_at,
            consent_version=row.consent_version,
        )

    async def get_buyer_consent_status(self, buyer_hash: str) -> BuyerConsentStatus:
        if not self.gate_enabled:
            now = datetime.now(UTC)
            return BuyerConsentStatus(
                buyer_hash=buyer_hash,
                has_basic=True,
                has_marketing=True,
                has_analytics=True,
                has_third_party=True,
                active_consent_count=len(ConsentType),
                first_consent_at=now,
                latest_consent_at=now,
                can_proceed=True,
            )

        stmt = select(buyer_consent_status_view).where(
            buyer_consent_status_view.c.buyer_hash == buyer_hash
        )
        try:
            result = await self._session.execute(stmt)
            row = result.mappings().one_or_none()
        except SQLAlchemyError as exc:
            logger.error("Error getting consent status, using defaults: %s", exc)
            row = None
        if row is None:
            return BuyerConsentStatus(buyer_hash=buyer_hash)

        return BuyerConsentStatus(
            buyer_hash=buyer_hash,
            has_basic=bool(row["has_basic"]),
            has_marketing=bool(row["has_marketing"]),
            has_analytics=bool(row["has_analytics"]),
            has_third_party=bool(row["has_third_party"]),
            has_lppsa_submission=bool(row["has_lppsa_submission"]),
            active_consent_count=row["active_consent_count"] or 0,
            first_consent_at=row["first_consent_at"],
            latest_consent_at=row["latest_consent_at"],
            can_proceed=bool(row["has_basic"]),
        )

    # -- Grants --

    async def grant_consent(
        self,
        buyer_hash: str,
        consent_type: ConsentType,
        consent_version: str,
        *,
        ip_hash: str | None = None,
        user_agent_hash: str | None = None,
        capture_method: CaptureMethod = CaptureMethod.WEB_FORM,
        expires_at: datetime | None = None,
        purposes: list[ConsentPurpose] | None = None,
        commit: bool = True,
    ) -> ConsentRecord:
        """Upsert one consent type for the buyer, clearing any prior revocation."""
        values: dict[str, Any] = {
            "buyer_hash": buyer_hash,
            "consent_type": consent_type.value,
            "consent_version": consent_version,
            "granted_at": datetime.now(UTC),
            "expires_at": expires_at,
            "revoked_at": None,
            "retention_period": cast(consent_type.retention_period, INTERVAL),
            "ip_hash": ip_hash,
            "user_agent_hash": user_agent_hash,
            "capture_method": capture_method,
        }
        if purposes is not None:
            values["purposes"] = [p.value for p in purposes]

        stmt = insert(ConsentRecord).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=[ConsentRecord.buyer_hash, ConsentRecord.consent_type],
            set_={
                **{k: stmt.excluded[k] for k in values if k != "buyer_hash"},
                "updated_at": func.now(),
            },
        ).returning(ConsentRecord)

        # Savepoint: a failed upsert inside a batch leaves earlier grants intact
        try:
            async with self._session.begin_nested():
                result = await self._session.execute(
                    stmt, execution_options={"populate_existing": True}
                )
                record = result.scalar_one()
        except SQLAlchemyError as exc:
            logger.error("Error granting %s for buyer: %s", consent_type.value, exc)
            if commit:
                await self._session.rollback()
            raise ConsentServiceError(f"Failed to grant {consent_type.value}") from exc

        if purposes is None:
            await self._log_proof_event(
                buyer_hash,
                consent_type.granted_event,
                {"consentVersion": consent_version, "captureMethod": capture_method.value},
            )
        if commit:
            await self._session.commit()
        return record

    async def grant_batch_consents(
        self,
        buyer_hash: str,
        consents: Iterable[tuple[ConsentType, bool]],
        consent_version: str,
        *,
        ip_hash: str | None = None,
        user_agent_hash: str | None = None,
    ) -> list[ConsentRecord]:
        """Grant every ``(type, granted)`` pair whose flag is set.

        Entries the store rejects are skipped; the returned list holds only
        the records that were written.
        """
        records: list[ConsentRecord] = []
        for consent_type, granted in consents:
            if not granted:
                continue
            try:
                record = await self.grant_consent(
                    buyer_hash,
                    consent_type,
                    consent_version,
                    ip_hash=ip_hash,
                    user_agent_hash=user_agent_hash,
                    commit=False,
                )
            except ConsentServiceError:
                logger.warning("Skipping %s in batch grant", consent_type.value)
                continue
            records.append(record)
        await self._session.commit()
        return records

    async def grant_purposes(
        self,
        buyer_hash: str,
        purposes: list[ConsentPurpose],
        consent_version: str,
        *,
        ip_hash: str | None = None,
        user_agent_hash: str | None = None,
        capture_method: CaptureMethod = CaptureMethod.WEB_FORM,
    ) -> ConsentRecord:
        """Grant purpose codes directly, stored on a derived consent type.

        All required purposes present -> PDPA_BASIC, otherwise PDPA_MARKETING.
        One proof event is written per purpose.
        """
        has_all_required = all(p in purposes for p in ConsentPurpose.required())
        consent_type = ConsentType.PDPA_BASIC if has_all_required else ConsentType.PDPA_MARKETING

        record = await self.grant_consent(
            buyer_hash,
            consent_type,
            consent_version,
            ip_hash=ip_hash,
            user_agent_hash=user_agent_hash,
            capture_method=capture_method,
            purposes=purposes,
            commit=False,
        )
        for purpose in purposes:
            await self._log_proof_event(
                buyer_hash,
                purpose.granted_event,
                {
                    "consentVersion": consent_version,
                    "captureMethod": capture_method.value,
                    "allPurposes": [p.value for p in purposes],
                },
            )
        await self._session.commit()
        return record

    # -- Revocation --

    async def revoke_consent(
        self,
        buyer_hash: str,
        consent_type: ConsentType,
        *,
        reason: str | None = None,
        ip_hash: str | None = None,
    ) -> datetime:
        """Mark the buyer's active ``consent_type`` record revoked.

        Returns the revocation timestamp. Revoking a type the buyer does not
        hold is not an error.
        """
        revoked_at = datetime.now(UTC)
        stmt = (
            update(ConsentRecord)
            .where(
                ConsentRecord.buyer_hash == buyer_hash,
                ConsentRecord.consent_type == consent_type.value,
                ConsentRecord.revoked_at.is_(None),
            )
            .values(revoked_at=revoked_at, updated_at=revoked_at)
        )
        try:
            await self._session.execute(stmt)
        except SQLAlchemyError as exc:
            logger.error("Error revoking %s for buyer: %s", consent_type.value, exc)
            await self._session.rollback()
            raise ConsentServiceError(f"Failed to revoke {consent_type.value}") from exc

        await self._log_proof_event(
            buyer_hash,
            consent_type.revoked_event,
            {"reason": reason, "ipHash": ip_hash},
        )
        await self._session.commit()
        return revoked_at

    async def revoke_purpose(
        self,
        buyer_hash: str,
        purpose: ConsentPurpose,
        *,
        reason: str | None = None,
    ) -> datetime:
        """Withdraw one purpose.

        A required purpose cannot be withdrawn alone: PDPA_BASIC is revoked
        instead. Optional purposes are removed from the buyer's active records.
        """
        if purpose.is_required:
            return await self.revoke_consent(
                buyer_hash,
                ConsentType.PDPA_BASIC,
                reason=f"Required purpose {purpose.value} revoked",
            )

        remaining = [p for p in await self.get_buyer_purposes(buyer_hash) if p != purpose]
        revoked_at = datetime.now(UTC)
        stmt = (
            update(ConsentRecord)
            .where(
                ConsentRecord.buyer_hash == buyer_hash,
                ConsentRecord.revoked_at.is_(None),
            )
            .values(purposes=[p.value for p in remaining], updated_at=revoked_at)
        )
        try:
            await self._session.execute(stmt)
        except SQLAlchemyError as exc:
            logger.error("Error revoking purpose %s for buyer: %s", purpose.value, exc)
            await self._session.rollback()
            raise ConsentServiceError(f"Failed to revoke {purpose.value}") from exc

        await self._log_proof_event(
            buyer_hash,
            purpose.revoked_event,
            {"reason": reason, "remainingPurposes": [p.value for p in remaining]},
        )
        await self._session.commit()
        return revoked_at

    # -- Purposes --

    async def get_buyer_purposes(self, buyer_hash: str) -> list[ConsentPurpose]:
        """Distinct purposes across the buyer's active records, in code order."""
        stmt = _active(
            select(ConsentRecord.purposes).where(ConsentRecord.buyer_hash == buyer_hash)
        )
        result = await self._session.execute(stmt)

        found: set[str] = set()
        for purposes in result.scalars().all():
            if isinstance(purposes, list):
                found.update(purposes)
        return [p for p in ConsentPurpose if p.value in found]

    async def has_purpose(self, buyer_hash: str, purpose: ConsentPurpose) -> bool:
        if not self.gate_enabled and not purpose.is_required:
            return True
        return purpose in await self.get_buyer_purposes(buyer_hash)

    async def has_all_required_purposes(self, buyer_hash: str) -> bool:
        if not self.gate_enabled:
            return True
        granted = await self.get_buyer_purposes(buyer_hash)
        return all(p in granted for p in ConsentPurpose.required())

    # -- PDPA notice --

    async def get_current_notice(self) -> PdpaNoticeVersion | None:
        """Latest non-superseded notice version."""
        stmt = (
            select(PdpaNoticeVersion)
            .where(PdpaNoticeVersion.superseded_at.is_(None))
            .order_by(PdpaNoticeVersion.effective_from.desc())
            .limit(1)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_notice_for_display(self, locale: str = "bm") -> NoticeDisplay | None:
        if locale not in SUPPORTED_LOCALES:
            raise ValueError(f"Unsupported locale: {locale}")
        notice = await self.get_current_notice()
        if notice is None:
            return None
        bm = locale == "bm"
        return NoticeDisplay(
            version=notice.version,
            content=notice.content_bm if bm else notice.content_en,
            summary=notice.summary_bm if bm else notice.summary_en,
            effective_from=notice.effective_from,
        )

    # -- Proof events --

    async def _log_proof_event(
        self,
        buyer_hash: str,
        event_type: str,
        metadata: dict[str, Any],
    ) -> None:
        """Insert a telemetry proof event; failures are logged, never raised."""
        event = TelemetryEvent(
            event_type=event_type,
            role=PortalRole.BUYER.value,
            # Consent is captured before a case exists
            case_id=None,
            project_id=None,
            event_metadata={"buyer_hash": buyer_hash, **metadata, "authorityClaimed": False},
        )
        try:
            async with self._session.begin_nested():
                self._session.add(event)
        except SQLAlchemyError:
            logger.exception("Error logging proof event %s", event_type)


def get_consent_service(
    session: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> ConsentService:
    return ConsentService(session, gate_enabled=settings.PDPA_GATE_ENABLED)


def log_consent_gate_status(settings: Settings) -> None:
    """Log whether the PDPA consent gate is enforced. Call at startup."""
    if settings.PDPA_GATE_ENABLED:
        logger.info("PDPA consent gate: ENABLED")
    else:
        logger.warning("PDPA consent gate: DISABLED (demo bypass active)")
