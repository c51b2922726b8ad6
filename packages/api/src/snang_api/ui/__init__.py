# This project was developed with assistance from AI tools.
"""HTML fragments for the buyer and agent portals."""

from .layouts import agent_layout, buyer_layout, demo_watermark, render_page, role_layout

__all__ = [
    "agent_layout",
    "buyer_layout",
    "demo_watermark",
    "render_page",
    "role_layout",
]
