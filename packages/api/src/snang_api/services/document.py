# This project was developed with assistance from AI tools.
"""Case document listing service.

Two reads back the documents route: raw ``case_documents`` rows for the
listing, and the ``v_buyer_document_status`` view for the completeness
summary. Only the listing is allowed to fail the request; a failed or empty
summary read falls back to ``DocumentStatusSummary()`` defaults.
"""

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from fastapi import Depends
from snang_db import CaseDocument, buyer_document_status_view, get_db
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..schemas.document import DocumentListData, DocumentResponse, DocumentStatusSummary
from .ports import DocumentReader

logger = logging.getLogger(__name__)

# Columns exposed by the listing; storage_path and extraction data stay server-side.
DOCUMENT_COLUMNS = (
    CaseDocument.id,
    CaseDocument.document_type,
    CaseDocument.file_name,
    CaseDocument.file_size,
    CaseDocument.mime_type,
    CaseDocument.status,
    CaseDocument.uploaded_at,
    CaseDocument.verified_at,
)


class DocumentStoreError(Exception):
    """Raised when the hosted store rejects a document query.

    ``str(exc)`` is the store's own message.
    """


class DocumentStore:
    """SQLAlchemy-backed DocumentReader over one request's session."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def list_documents(
        self,
        *,
        buyer_hash: str | None,
        case_id: str | None,
    ) -> Sequence[Mapping[str, Any]]:
        """Return document rows matching every supplied identifier, newest first."""
        stmt = select(*DOCUMENT_COLUMNS).order_by(
            CaseDocument.uploaded_at.desc(),
            CaseDocument.id,
        )
        if buyer_hash:
            stmt = stmt.where(CaseDocument.buyer_hash == buyer_hash)
        if case_id:
            stmt = stmt.where(CaseDocument.case_id == case_id)

        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError as exc:
            raise DocumentStoreError(_store_message(exc)) from exc
        return result.mappings().all()

    async def fetch_summary(self, buyer_hash: str) -> Mapping[str, Any] | None:
        """Return the buyer's summary row, or None when the view has none.

        More than one row for the buyer is an error, not a choice.
        """
        stmt = select(buyer_document_status_view).where(
            buyer_document_status_view.c.buyer_hash == buyer_hash
        )
        try:
            result = await self._session.execute(stmt)
            return result.mappings().one_or_none()
        except SQLAlchemyError as exc:
            raise DocumentStoreError(_store_message(exc)) from exc


def _store_message(exc: SQLAlchemyError) -> str:
    """Prefer the driver's message over SQLAlchemy's wrapped repr."""
    orig = getattr(exc, "orig", None)
    return str(orig) if orig is not None else str(exc)


def get_document_store(session: AsyncSession = Depends(get_db)) -> DocumentReader:
    return DocumentStore(session)


async def get_buyer_documents(
    store: DocumentReader,
    *,
    buyer_hash: str | None,
    case_id: str | None,
) -> DocumentListData:
    """Assemble documents plus summary for a buyer and/or case.

    Raises DocumentStoreError when the document listing fails. The summary
    is read only when ``buyer_hash`` is given; it is never filtered by
    ``case_id``, so case-only requests always carry the default summary.
    """
    rows = await store.list_documents(buyer_hash=buyer_hash, case_id=case_id)
    documents = [DocumentResponse.model_validate(dict(row)) for row in rows or []]

    summary = DocumentStatusSummary()
    if buyer_hash:
        try:
            row = await store.fetch_summary(buyer_hash)
        except DocumentStoreError as exc:
            logger.warning("Document summary unavailable for buyer, using defaults: %s", exc)
            row = None
        if row is not None:
            summary = DocumentStatusSummary.model_validate(dict(row))

    return DocumentListData(documents=documents, summary=summary)
