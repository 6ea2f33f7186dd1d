from __future__ import annotations

import string
from typing import Iterable, Optional

import streamlit as st

SURFACE = "#0d1117"
SURFACE_ALT = "#161b22"
BORDER = "#30363d"
TEXT = "#e6edf3"
MUTED = "#8b949e"
ACCENT = "#58a6ff"
SUCCESS = "#3fb950"
WARNING = "#d29922"
ERROR = "#f85149"

CSS_TEMPLATE = """
<style>
:root {
    --surface: $SURFACE;
    --surface-alt: $SURFACE_ALT;
    --border: $BORDER;
    --text: $TEXT;
    --muted: $MUTED;
    --accent: $ACCENT;
    --radius-md: 12px;
}

html, body, [class^="css"], .stApp {
    background: var(--surface);
    color: var(--text);
    font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', sans-serif;
}

section.main .block-container { padding: 1.2rem 2rem 2rem 2rem; max-width: 1400px; }

.app-card {
    background: var(--surface-alt);
    border: 1px solid var(--border);
    border-radius: var(--radius-md);
    padding: 1rem 1.1rem;
}

.app-badge {
    display: inline-flex;
    padding: 0.2rem 0.55rem;
    border-radius: 10px;
    font-size: 0.75rem;
    font-weight: 600;
    border: 1px solid var(--border);
}
.app-badge.success { background: rgba(63,185,80,0.18); color: $SUCCESS; }
.app-badge.warning { background: rgba(210,153,34,0.18); color: $WARNING; }
.app-badge.danger { background: rgba(248,81,73,0.18); color: $ERROR; }

.app-kpi { background: var(--surface-alt); border: 1px solid var(--border); border-radius: var(--radius-md); padding: 0.8rem 1rem; }
.app-kpi .label { color: $MUTED; font-size: 0.85rem; }
.app-kpi .value { font-size: 1.4rem; font-weight: 700; }

.insight-placeholder { color: var(--muted); font-style: italic; }
.small-muted { color: var(--muted); font-size: 0.9rem; }
.section-header { font-weight: 700; font-size: 1.05rem; margin-bottom: 0.35rem; }

@media print {
    section[data-testid="stSidebar"], header, .stButton { display: none !important; }
}
</style>
"""

GLOBAL_CSS = string.Template(CSS_TEMPLATE).safe_substitute(
    {
        "SURFACE": SURFACE,
        "SURFACE_ALT": SURFACE_ALT,
        "BORDER": BORDER,
        "TEXT": TEXT,
        "MUTED": MUTED,
        "ACCENT": ACCENT,
        "SUCCESS": SUCCESS,
        "WARNING": WARNING,
        "ERROR": ERROR,
    }
)

STATUS_TONES = {"Excellent": "success", "Average": "warning", "Needs Improvement": "danger"}


def muted(text: str):
    st.markdown(f"<div class='small-muted'>{text}</div>", unsafe_allow_html=True)


def badge(label: str, tone: str = "success"):
    st.markdown(f"<span class='app-badge {tone}'>{label}</span>", unsafe_allow_html=True)


def status_badge(status: str):
    badge(status, STATUS_TONES.get(status, "warning"))


def placeholder(text: str):
    st.markdown(f"<p class='insight-placeholder'>{text}</p>", unsafe_allow_html=True)


def kpi_row(items: Iterable[dict]):
    items = list(items)
    cols = st.columns(len(items)) if items else []
    for col, item in zip(cols, items):
        with col:
            st.markdown(
                f"""
                <div class='app-kpi'>
                    <div class='label'>{item.get('label','')}</div>
                    <div class='value'>{item.get('value','-')}</div>
                    <div class='small-muted'>{item.get('hint','')}</div>
                </div>
                """,
                unsafe_allow_html=True,
            )


def section_header(title: str, description: Optional[str] = None):
    st.markdown(f"<div class='section-header'>{title}</div>", unsafe_allow_html=True)
    if description:
        muted(description)


class AppShell:
    def __init__(self, title: str, subtitle: Optional[str] = None):
        self.title = title
        self.subtitle = subtitle
        st.markdown(GLOBAL_CSS, unsafe_allow_html=True)

    def header(self):
        st.title(self.title)
        if self.subtitle:
            muted(self.subtitle)
