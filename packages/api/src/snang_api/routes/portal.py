# This project was developed with assistance from AI tools.
"""Buyer and agent portal pages -- no authentication required."""

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse

from ..core.config import Settings, get_settings
from ..ui import agent_layout, buyer_layout, render_page

router = APIRouter()


@router.get("/buyer", response_class=HTMLResponse)
async def buyer_portal(settings: Settings = Depends(get_settings)) -> HTMLResponse:
    """Buyer portal shell."""
    body = buyer_layout('<section id="buyer-app"></section>')
    return HTMLResponse(render_page("Snang - Pembeli", body, demo_mode=settings.DEMO_MODE))


@router.get("/agent", response_class=HTMLResponse)
async def agent_portal(settings: Settings = Depends(get_settings)) -> HTMLResponse:
    """Agent portal shell."""
    body = agent_layout('<section id="agent-app"></section>')
    return HTMLResponse(render_page("Snang - Ejen", body, demo_mode=settings.DEMO_MODE))
