"""
Plotly renderer
X-axis: calendar days · Y-axis: concurrent ids · One filled band per id
"""

from __future__ import annotations

from typing import Optional

import plotly.graph_objects as go

from bumpchart.model import StackLayout
from bumpchart.settings import ChartSettings


def get_color(palette: list[str], index: int) -> str:
    return palette[index % len(palette)]


def chart_height(layout: StackLayout, settings: ChartSettings) -> int:
    m = settings.margin
    return layout.max_stack_height * settings.layer_height_px + m.top + m.bottom


class PlotlyBumpRenderer:
    def __init__(self, settings: Optional[ChartSettings] = None, width: Optional[int] = None) -> None:
        self.settings = settings or ChartSettings()
        self.width = max(self.settings.min_width_px, width or 0)

    def render(self, layout: StackLayout) -> go.Figure:
        s = self.settings
        days = list(layout.days)
        fig = go.Figure()
        for i, key in enumerate(layout.keys):
            points = layout.series[key]
            color = get_color(s.palette, i)
            # Invisible lower edge, then the upper edge filled down to it.
            fig.add_trace(go.Scatter(
                x=days,
                y=[p.baseline for p in points],
                mode="lines",
                line=dict(width=0, color=color),
                hoverinfo="skip",
                showlegend=False,
                legendgroup=key,
            ))
            fig.add_trace(go.Scatter(
                name=key,
                x=days,
                y=[p.top for p in points],
                mode="lines",
                line=dict(width=0.5, color=color),
                fill="tonexty",
                fillcolor=color,
                hovertext=[f"{key}: {p.time:%Y-%m-%d}" if p.height else "" for p in points],
                hoverinfo="text",
                showlegend=False,
                legendgroup=key,
            ))

        annotations = []
        for key in layout.keys:
            first = layout.first_active(key)
            if first is None:
                continue
            annotations.append(dict(
                x=first.time,
                y=(first.baseline + first.top) / 2,
                text=key,
                showarrow=False,
                xanchor="left",
                xshift=s.label_offset_px,
                font=dict(size=11, color="#ffffff"),
            ))

        m = s.margin
        fig.update_layout(
            xaxis=dict(
                type="date",
                range=[layout.min_start, layout.max_end],
                gridcolor="rgba(128,128,128,0.3)",
            ),
            yaxis=dict(
                range=[0, layout.max_stack_height],
                dtick=1,
                showticklabels=False,
                gridcolor="rgba(128,128,128,0.15)",
            ),
            annotations=annotations,
            plot_bgcolor="#161b22",
            paper_bgcolor="#161b22",
            font=dict(color="#e6edf3", size=12),
            margin=dict(l=m.left, r=m.right, t=m.top, b=m.bottom),
            width=self.width,
            height=chart_height(layout, s),
        )
        return fig
