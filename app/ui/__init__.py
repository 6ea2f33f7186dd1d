from app.ui.helpers import download_text, forget_deleted, style_fig
from app.ui.shell import AppShell, badge, kpi_row, muted, placeholder, section_header, status_badge

__all__ = [
    "AppShell",
    "badge",
    "download_text",
    "forget_deleted",
    "kpi_row",
    "muted",
    "placeholder",
    "section_header",
    "status_badge",
    "style_fig",
]
