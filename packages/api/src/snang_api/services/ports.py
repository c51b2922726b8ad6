# This project was developed with assistance from AI tools.
"""Narrow capability interfaces the routes depend on.

Routes only need these methods, so tests can substitute small fakes through
``app.dependency_overrides`` instead of a live database.
"""

from collections.abc import Mapping, Sequence
from typing import Any, Protocol

from snang_db.enums import ConsentType

from ..schemas.consent import ConsentCheckResult


class ConsentChecker(Protocol):
    async def check_consent(
        self, buyer_hash: str, consent_type: ConsentType
    ) -> ConsentCheckResult: ...


class DocumentReader(Protocol):
    async def list_documents(
        self, *, buyer_hash: str | None, case_id: str | None
    ) -> Sequence[Mapping[str, Any]]: ...

    async def fetch_summary(self, buyer_hash: str) -> Mapping[str, Any] | None: ...
