from __future__ import annotations

from typing import MutableMapping, Optional

import streamlit as st

from student_dashboard.export import sanitize_filename


def _key(prefix: str, name: str) -> str:
    return f"{prefix}:{sanitize_filename(name)}"


def download_text(label: str, content: str, filename: str, mime: str = "text/csv") -> None:
    """Render a download button for generated text with a deterministic key."""
    safe_name = sanitize_filename(filename)
    st.download_button(
        label=label,
        data=content.encode("utf-8"),
        file_name=safe_name,
        mime=mime,
        key=_key("dl", safe_name),
        use_container_width=False,
    )


def style_fig(fig, title: Optional[str] = None):
    fig.update_layout(
        title=title or fig.layout.title.text,
        template="plotly_dark",
        plot_bgcolor="#161b22",
        paper_bgcolor="#161b22",
        font=dict(family="Inter, sans-serif", color="#e6edf3", size=12),
        hoverlabel=dict(bgcolor="#0d1117", font_size=12),
    )
    return fig


def forget_deleted(state: MutableMapping[str, object], student_id: int) -> None:
    """Clear widget state that pointed at a student who was just deleted."""
    state["delete_confirm"] = False
    if state.get("delete_id") == student_id:
        state.pop("delete_id")
    if state.get("focus_id") == student_id:
        state["focus_id"] = None
