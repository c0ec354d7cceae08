"""
Bump Chart Viewer - Plotly Dash
X-axis: calendar days · Y-axis: concurrent ids · One stacked band per id
"""

import base64

import dash
from dash import dcc, html, callback, Input, Output

from bumpchart.chart import PlotlyBumpRenderer, get_color
from bumpchart.csv_source import SAMPLE_CSV, PandasCsvSource, decode_csv_bytes
from bumpchart.errors import CsvParseError
from bumpchart.pipeline import parse_issue
from bumpchart.session import render_text
from bumpchart.settings import ChartSettings, configure_logging
from bumpchart.summary import peak_days, summarize

SETTINGS = ChartSettings.from_env()
SOURCE = PandasCsvSource()
RENDERER = PlotlyBumpRenderer(SETTINGS)

app = dash.Dash(__name__, title="Bump Chart Viewer")
server = app.server

CARD_STYLE = {
    "backgroundColor": "#161b22",
    "border": "1px solid #30363d",
    "borderRadius": "12px",
    "padding": "24px",
    "marginBottom": "24px",
}
RANGE_ITEM_STYLE = {
    "fontFamily": "monospace",
    "fontSize": "0.85rem",
    "padding": "10px 12px",
    "backgroundColor": "#21262d",
    "borderRadius": "8px",
    "marginBottom": "6px",
    "listStyle": "none",
    "display": "flex",
    "justifyContent": "space-between",
}


def range_list(ranges):
    if not ranges:
        return [html.Li("None", style={"listStyle": "none", "color": "#8b949e"})]
    return [
        html.Li(
            style=RANGE_ITEM_STYLE,
            children=[
                html.Span(f"{r.start:%Y-%m-%d} – {r.end:%Y-%m-%d}", style={"color": "#58a6ff"}),
                html.Span(f"{r.days} d", style={"color": "#8b949e", "fontSize": "0.8rem"}),
            ],
        )
        for r in ranges
    ]


def layer_panel(layer, color):
    def section(title, badge_color, ranges):
        return html.Div(
            style={"marginBottom": "16px"},
            children=[
                html.H3(
                    [f"{title} ", html.Span(str(len(ranges)), style={"background": badge_color, "color": "#0d1117", "padding": "2px 8px", "borderRadius": "999px", "fontSize": "0.7rem"})],
                    style={"fontSize": "0.8rem", "color": "#8b949e", "margin": "0 0 8px 0"},
                ),
                html.Ul(range_list(ranges), style={"padding": 0, "margin": 0, "maxHeight": "140px", "overflowY": "auto"}),
            ],
        )

    return html.Div(
        style={**CARD_STYLE, "borderLeft": f"3px solid {color}", "padding": "20px", "marginBottom": 0},
        children=[
            html.H2(layer.key, style={"fontSize": "1rem", "margin": "0 0 4px 0"}),
            html.P(f"{layer.active_days} active day(s) · {layer.gap_days} idle", style={"color": "#8b949e", "fontSize": "0.85rem", "margin": "0 0 16px 0"}),
            section("Active", "#3fb950", layer.active),
            section("Overlaps within id", "#d29922", layer.overlaps),
            section("Gaps", "#f0883e", layer.gaps),
        ],
    )


app.layout = html.Div(
    style={
        "fontFamily": "Outfit, system-ui, sans-serif",
        "backgroundColor": "#0d1117",
        "color": "#e6edf3",
        "minHeight": "100vh",
        "padding": "24px",
    },
    children=[
        html.Div(
            style={"maxWidth": "1200px", "margin": "0 auto"},
            children=[
                html.Header(
                    style={"marginBottom": "32px", "borderBottom": "1px solid #30363d", "paddingBottom": "20px"},
                    children=[
                        html.H1("Bump Chart Viewer", style={"margin": "0 0 6px 0", "fontSize": "1.75rem"}),
                        html.P(
                            "How many intervals are active on each day, and which ones",
                            style={"color": "#8b949e", "margin": 0},
                        ),
                    ],
                ),
                dcc.Upload(
                    id="upload-data",
                    children=html.Div(
                        [
                            "📂 Drop CSV here or click to upload",
                            html.Br(),
                            html.Small("Expected columns: id, start, end (e.g. 2024-01-30)", style={"opacity": 0.8}),
                        ]
                    ),
                    style={
                        "border": "2px dashed #30363d",
                        "borderRadius": "12px",
                        "padding": "24px",
                        "textAlign": "center",
                        "cursor": "pointer",
                        "backgroundColor": "#161b22",
                        "marginBottom": "16px",
                    },
                ),
                dcc.Textarea(
                    id="csv-input",
                    value=SAMPLE_CSV,
                    style={
                        "width": "100%",
                        "height": "180px",
                        "fontFamily": "monospace",
                        "backgroundColor": "#161b22",
                        "color": "#e6edf3",
                        "border": "1px solid #30363d",
                        "borderRadius": "8px",
                        "padding": "12px",
                        "marginBottom": "16px",
                    },
                ),
                html.Pre(id="parse-errors", style={"color": "#f85149", "whiteSpace": "pre-wrap", "margin": "0 0 16px 0"}),
                html.Div(
                    style=CARD_STYLE,
                    children=[
                        html.H2("Concurrent intervals per day", style={"fontSize": "1rem", "margin": "0 0 4px 0"}),
                        html.P(id="chart-caption", style={"color": "#8b949e", "fontSize": "0.85rem", "margin": "0 0 16px 0"}),
                        dcc.Loading(
                            dcc.Graph(id="bump-chart", config={"displayModeBar": True, "responsive": True}, style={"width": "100%", "overflowX": "auto"}),
                            type="dot",
                        ),
                    ],
                ),
                html.Div(
                    id="layer-panels",
                    style={"display": "grid", "gridTemplateColumns": "repeat(auto-fill, minmax(340px, 1fr))", "gap": "24px"},
                    children=[],
                ),
            ],
        ),
    ],
)


@callback(
    Output("csv-input", "value"),
    Output("parse-errors", "children", allow_duplicate=True),
    Input("upload-data", "contents"),
    prevent_initial_call=True,
)
def load_upload(contents):
    if not contents:
        return dash.no_update, dash.no_update
    _, content = contents.split(",", 1)
    try:
        text = decode_csv_bytes(base64.b64decode(content))
    except CsvParseError as e:
        # Textarea and chart keep their previous content.
        return dash.no_update, parse_issue(e).text
    return text, dash.no_update


@callback(
    Output("bump-chart", "figure"),
    Output("parse-errors", "children"),
    Output("chart-caption", "children"),
    Output("layer-panels", "children"),
    Input("csv-input", "value"),
)
def update_chart(text):
    rendered = render_text(text or "", SOURCE, RENDERER, SETTINGS)
    result = rendered.result
    if not rendered.ok:
        # Previous figure, caption and panels stay on screen next to the error.
        return dash.no_update, result.issue.text, dash.no_update, dash.no_update

    layout = result.layout
    layers = summarize(result.validation.intervals, layout)
    peaks = peak_days(layout)
    caption = (
        f"{len(layout.keys)} id(s) · {layout.min_start:%Y-%m-%d} to {layout.max_end:%Y-%m-%d} · "
        f"peak {layout.max_stack_height} concurrent on {len(peaks)} day(s) from {peaks[0]:%Y-%m-%d}"
    )
    panels = [layer_panel(layer, get_color(SETTINGS.palette, i)) for i, layer in enumerate(layers)]
    return rendered.chart, "", caption, panels


if __name__ == "__main__":
    configure_logging(SETTINGS)
    app.run(debug=True, port=8050)
