# This project was developed with assistance from AI tools.
"""Buyer document listing route."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ..schemas import SuccessResponse
from ..schemas.document import DocumentListData
from ..services.document import DocumentStoreError, get_buyer_documents, get_document_store
from ..services.ports import DocumentReader

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=SuccessResponse[DocumentListData])
async def list_documents(
    buyer_hash: str | None = Query(default=None),
    case_id: str | None = Query(default=None),
    store: DocumentReader = Depends(get_document_store),
) -> SuccessResponse[DocumentListData]:
    """List uploaded documents for a buyer and/or case with a completeness summary.

    Unlike the consent routes, a store failure here surfaces the store's
    own message in the 500 body.
    """
    if not buyer_hash and not case_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="buyer_hash or case_id is required",
        )

    try:
        data = await get_buyer_documents(store, buyer_hash=buyer_hash, case_id=case_id)
    except DocumentStoreError as exc:
        logger.error("Document list query failed: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(exc),
        ) from exc

    return SuccessResponse[DocumentListData](data=data)
