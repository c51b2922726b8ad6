# This project was developed with assistance from AI tools.
"""Portal page shells.

Role layouts tag their subtree with a ``role-<name>`` CSS class so portal
stylesheets can scope buyer and agent styling. Children are trusted HTML
fragments produced by this package; plain text must be escaped by the
caller (``html.escape``).
"""

from html import escape

from snang_db.enums import PortalRole

_LAYOUT_ROLES = (PortalRole.BUYER, PortalRole.AGENT)

_DEMO_WATERMARK = (
    '<div class="fixed top-16 right-4 z-40 pointer-events-none" data-testid="demo-watermark">'
    '<div class="bg-snang-amber-500/90 text-white text-xs font-mono px-3 py-1.5 '
    'rounded-lg shadow-lg flex items-center gap-2">'
    '<span class="animate-pulse w-2 h-2 bg-white rounded-full"></span>'
    "DEMO BUILD"
    "</div>"
    "</div>"
)


def role_layout(role: PortalRole, children: str) -> str:
    """Wrap ``children`` in the container for ``role``."""
    if role not in _LAYOUT_ROLES:
        raise ValueError(f"No portal layout for role: {role.value}")
    return f'<div class="role-{role.value}">{children}</div>'


def buyer_layout(children: str) -> str:
    return role_layout(PortalRole.BUYER, children)


def agent_layout(children: str) -> str:
    return role_layout(PortalRole.AGENT, children)


def demo_watermark() -> str:
    """Fixed-position badge marking a non-production build."""
    return _DEMO_WATERMARK


def render_page(title: str, body: str, *, demo_mode: bool) -> str:
    """Full HTML document around an already-rendered body fragment."""
    watermark = demo_watermark() if demo_mode else ""
    return (
        "<!DOCTYPE html>"
        '<html lang="ms">'
        "<head>"
        '<meta charset="utf-8">'
        '<meta name="viewport" content="width=device-width, initial-scale=1">'
        f"<title>{escape(title)}</title>"
        "</head>"
        "<body>"
        f"{watermark}"
        f'<main class="pb-20 bg-slate-100 min-h-screen">{body}</main>'
        "</body>"
        "</html>"
    )
