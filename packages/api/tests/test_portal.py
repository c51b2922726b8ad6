# This project was developed with assistance from AI tools.
"""Tests for the portal layouts and pages."""

import pytest
from fastapi.testclient import TestClient
from snang_db.enums import PortalRole

from snang_api.core.config import Settings
from snang_api.main import create_app
from snang_api.ui import agent_layout, buyer_layout, demo_watermark, render_page, role_layout


class TestRoleLayouts:
    def test_buyer_layout_wraps_children(self):
        assert buyer_layout("<p>x</p>") == '<div class="role-buyer"><p>x</p></div>'

    def test_agent_layout_wraps_children(self):
        assert agent_layout("<p>x</p>") == '<div class="role-agent"><p>x</p></div>'

    def test_empty_children(self):
        assert buyer_layout("") == '<div class="role-buyer"></div>'

    @pytest.mark.parametrize("role", [PortalRole.DEVELOPER, PortalRole.SYSTEM])
    def test_other_roles_have_no_layout(self, role):
        with pytest.raises(ValueError, match="No portal layout"):
            role_layout(role, "")


class TestDemoWatermark:
    def test_content(self):
        html = demo_watermark()
        assert 'data-testid="demo-watermark"' in html
        assert "DEMO BUILD" in html
        assert "pointer-events-none" in html
        assert "fixed" in html

    def test_is_stable(self):
        assert demo_watermark() == demo_watermark()

    def test_rendered_only_in_demo_mode(self):
        assert "DEMO BUILD" in render_page("t", "", demo_mode=True)
        assert "DEMO BUILD" not in render_page("t", "", demo_mode=False)

    def test_title_is_escaped(self):
        assert "<title>a &lt;b&gt;</title>" in render_page("a <b>", "", demo_mode=False)


class TestPortalPages:
    def test_buyer_page(self, make_client):
        response = make_client().get("/buyer")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert 'class="role-buyer"' in response.text
        assert "demo-watermark" not in response.text

    def test_agent_page(self, make_client):
        response = make_client().get("/agent")

        assert response.status_code == 200
        assert 'class="role-agent"' in response.text

    def test_demo_mode_shows_watermark(self):
        settings = Settings(_env_file=None, DEMO_MODE=True)
        client = TestClient(create_app(settings))

        response = client.get("/buyer")

        assert 'data-testid="demo-watermark"' in response.text
