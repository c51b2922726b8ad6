# This project was developed with assistance from AI tools.
"""Model and enum tests (no database required)."""

from types import SimpleNamespace

import pytest

from snang_db import (
    Base,
    ConsentPurpose,
    ConsentType,
    buyer_consent_status_view,
    buyer_document_status_view,
    get_db_service,
    view_metadata,
)


class TestConsentType:
    def test_values_in_declaration_order(self):
        assert ConsentType.values() == [
            "PDPA_BASIC",
            "PDPA_MARKETING",
            "PDPA_ANALYTICS",
            "PDPA_THIRD_PARTY",
        ]

    @pytest.mark.parametrize(
        ("consent_type", "period"),
        [
            (ConsentType.PDPA_BASIC, "7 years"),
            (ConsentType.PDPA_MARKETING, "2 years"),
            (ConsentType.PDPA_ANALYTICS, "1 year"),
            (ConsentType.PDPA_THIRD_PARTY, "7 years"),
        ],
    )
    def test_retention_period(self, consent_type, period):
        assert consent_type.retention_period == period

    def test_events(self):
        assert ConsentType.PDPA_MARKETING.granted_event == "PDPA_MARKETING_GRANTED"
        assert ConsentType.PDPA_MARKETING.revoked_event == "PDPA_MARKETING_REVOKED"

    def test_analytics_maps_to_developer_analytics(self):
        assert ConsentType.PDPA_ANALYTICS.mapped_purposes == [
            ConsentPurpose.C4_DEVELOPER_ANALYTICS
        ]


class TestConsentPurpose:
    def test_required_are_c1_to_c4(self):
        assert [p.value[:2] for p in ConsentPurpose.required()] == ["C1", "C2", "C3", "C4"]

    def test_optional_purposes(self):
        optional = [p for p in ConsentPurpose if not p.is_required]
        assert optional == [ConsentPurpose.C5_COMMUNICATION, ConsentPurpose.C6_PROMOTIONAL]
        assert all(p.retention_period == "2 years" for p in optional)

    def test_events(self):
        purpose = ConsentPurpose.C3_SHARE_AGENT
        assert purpose.granted_event == "PURPOSE_C3_SHARE_AGENT_GRANTED"
        assert purpose.revoked_event == "PURPOSE_C3_SHARE_AGENT_REVOKED"


class TestMetadata:
    def test_tables_registered(self):
        assert set(Base.metadata.tables) == {
            "consent_records",
            "pdpa_notice_versions",
            "telemetry_events",
            "case_documents",
        }

    def test_views_are_not_part_of_table_metadata(self):
        assert "v_buyer_document_status" not in Base.metadata.tables
        assert set(view_metadata.tables) == {
            "v_buyer_document_status",
            "v_buyer_consent_status",
        }

    def test_document_view_columns(self):
        assert [c.name for c in buyer_document_status_view.columns] == [
            "buyer_hash",
            "case_id",
            "docs_uploaded",
            "has_ic",
            "has_payslip",
            "has_bank_statement",
            "has_kwsp",
            "all_required_uploaded",
            "last_upload_at",
        ]

    def test_consent_view_has_lppsa_flag(self):
        assert "has_lppsa_submission" in buyer_consent_status_view.c


def test_get_db_service_requires_startup():
    request = SimpleNamespace(app=SimpleNamespace(state=SimpleNamespace()))

    with pytest.raises(RuntimeError, match="not initialised"):
        get_db_service(request)
