# This project was developed with assistance from AI tools.
"""Tests for the SQLAlchemy-backed DocumentStore."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import MultipleResultsFound, OperationalError

from snang_api.services.document import DocumentStore, DocumentStoreError


def _compile(stmt) -> str:
    return str(stmt.compile(dialect=postgresql.dialect()))


def _session_returning(result) -> MagicMock:
    session = MagicMock()
    session.execute = AsyncMock(return_value=result)
    return session


def _listing_result(rows):
    result = MagicMock()
    result.mappings.return_value.all.return_value = rows
    return result


@pytest.mark.asyncio
async def test_list_documents_filters_by_buyer_and_orders_newest_first():
    session = _session_returning(_listing_result([]))

    await DocumentStore(session).list_documents(buyer_hash="h1", case_id=None)

    stmt = session.execute.await_args.args[0]
    sql = _compile(stmt)
    assert "case_documents.buyer_hash = " in sql
    assert "case_documents.case_id" not in sql.split("WHERE")[1]
    assert "ORDER BY case_documents.uploaded_at DESC, case_documents.id" in sql
    assert "storage_path" not in sql


@pytest.mark.asyncio
async def test_list_documents_applies_both_filters():
    session = _session_returning(_listing_result([]))

    await DocumentStore(session).list_documents(buyer_hash="h1", case_id="c9")

    stmt = session.execute.await_args.args[0]
    where = _compile(stmt).split("WHERE")[1]
    assert "case_documents.buyer_hash = " in where
    assert "case_documents.case_id = " in where
    assert " AND " in where
    params = stmt.compile(dialect=postgresql.dialect()).params
    assert set(params.values()) == {"h1", "c9"}


@pytest.mark.asyncio
async def test_list_documents_returns_rows():
    rows = [{"id": "a"}, {"id": "b"}]
    session = _session_returning(_listing_result(rows))

    result = await DocumentStore(session).list_documents(buyer_hash=None, case_id="c9")

    assert result == rows


@pytest.mark.asyncio
async def test_list_documents_wraps_driver_message():
    session = MagicMock()
    session.execute = AsyncMock(
        side_effect=OperationalError("SELECT", {}, Exception("permission denied for table"))
    )

    with pytest.raises(DocumentStoreError, match="permission denied for table"):
        await DocumentStore(session).list_documents(buyer_hash="h1", case_id=None)


@pytest.mark.asyncio
async def test_fetch_summary_queries_view_by_buyer_only():
    result = MagicMock()
    result.mappings.return_value.one_or_none.return_value = None
    session = _session_returning(result)

    assert await DocumentStore(session).fetch_summary("h1") is None

    sql = _compile(session.execute.await_args.args[0])
    assert "FROM v_buyer_document_status" in sql
    assert "v_buyer_document_status.buyer_hash = " in sql
    assert "v_buyer_document_status.case_id =" not in sql


@pytest.mark.asyncio
async def test_fetch_summary_multiple_rows_is_an_error():
    result = MagicMock()
    result.mappings.return_value.one_or_none.side_effect = MultipleResultsFound(
        "Multiple rows were found when one or none was required"
    )
    session = _session_returning(result)

    with pytest.raises(DocumentStoreError, match="Multiple rows"):
        await DocumentStore(session).fetch_summary("h1")
