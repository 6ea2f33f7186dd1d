from typing import Iterable, Optional

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from .charts import Circle, Line, Polygon, Primitive, Rect, Text

COLORS = {
    "grid": "#30363d",
    "axis": "#30363d",
    "axis-label": "#8b949e",
    "scale-label": "#6e7681",
    "label": "#8b949e",
    "value-label": "#f0f6fc",
    "series": "#58a6ff",
    "series-alt": "#f78166",
    "winner": "#3fb950",
}

FILLS = {
    "series": "rgba(88, 166, 255, 0.3)",
    "series-alt": "rgba(247, 129, 102, 0.3)",
}

FONT_SIZES = {"axis-label": 12, "scale-label": 10, "value-label": 10, "winner": 12}

ANCHORS = {"middle": "center", "start": "left", "end": "right"}


def _shape(primitive: Primitive) -> Optional[dict]:
    color = COLORS.get(primitive.role, COLORS["grid"])
    if isinstance(primitive, Line):
        return dict(type="line", x0=primitive.x1, y0=primitive.y1, x1=primitive.x2, y1=primitive.y2, line=dict(color=color, width=1))
    if isinstance(primitive, Circle):
        return dict(
            type="circle",
            x0=primitive.cx - primitive.r,
            y0=primitive.cy - primitive.r,
            x1=primitive.cx + primitive.r,
            y1=primitive.cy + primitive.r,
            line=dict(color=color, width=1),
            fillcolor=color if primitive.filled else "rgba(0,0,0,0)",
        )
    if isinstance(primitive, Rect):
        return dict(
            type="rect",
            x0=primitive.x,
            y0=primitive.y,
            x1=primitive.x + primitive.width,
            y1=primitive.y + primitive.height,
            line=dict(width=0),
            fillcolor=color,
        )
    if isinstance(primitive, Polygon):
        if not primitive.points:
            return None
        path = "M " + " L ".join(f"{x},{y}" for x, y in primitive.points) + " Z"
        return dict(type="path", path=path, line=dict(color=color, width=2), fillcolor=FILLS.get(primitive.role, color))
    return None


def figure_from_primitives(primitives: Iterable[Primitive], width: float, height: float, title: Optional[str] = None) -> go.Figure:
    """Draw canvas primitives (origin top-left, y down) on a blank Plotly figure."""

    fig = go.Figure()
    shapes = []
    annotations = []
    for primitive in primitives:
        if isinstance(primitive, Text):
            annotations.append(
                dict(
                    x=primitive.x,
                    y=primitive.y,
                    text=primitive.text,
                    showarrow=False,
                    xanchor=ANCHORS.get(primitive.anchor, "center"),
                    font=dict(color=COLORS.get(primitive.role, COLORS["label"]), size=FONT_SIZES.get(primitive.role, 11)),
                )
            )
            continue
        shape = _shape(primitive)
        if shape is not None:
            shapes.append(shape)

    fig.update_layout(
        title=title,
        width=width,
        height=height,
        shapes=shapes,
        annotations=annotations,
        margin=dict(t=40 if title else 0, r=0, b=0, l=0),
        showlegend=False,
    )
    fig.update_xaxes(range=[0, width], visible=False, fixedrange=True)
    fig.update_yaxes(range=[height, 0], visible=False, fixedrange=True, scaleanchor="x")
    return fig


def average_bar(ranked_df: pd.DataFrame) -> go.Figure:
    if ranked_df.empty:
        return go.Figure()
    fig = px.bar(ranked_df, x="Name", y="Average", color="Grade", title="Average by student", range_y=[0, 100])
    fig.update_layout(xaxis_title="Student", yaxis_title="Average mark")
    return fig


def grade_pie(ranked_df: pd.DataFrame) -> go.Figure:
    if ranked_df.empty:
        return go.Figure()
    counts = ranked_df["Grade"].value_counts().rename_axis("Grade").reset_index(name="Students")
    return px.pie(counts, names="Grade", values="Students", title="Grade distribution")
