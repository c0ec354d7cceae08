"""
Bump Chart Viewer - Streamlit
X-axis: calendar days · Y-axis: concurrent ids · One stacked band per id
"""

from html import escape

import streamlit as st

from bumpchart.chart import PlotlyBumpRenderer, get_color
from bumpchart.csv_source import SAMPLE_CSV, PandasCsvSource, decode_csv_bytes
from bumpchart.errors import CsvParseError
from bumpchart.pipeline import parse_issue
from bumpchart.session import ChartSession
from bumpchart.settings import ChartSettings, configure_logging
from bumpchart.summary import peak_days, summarize


def fmt_ranges(ranges) -> str:
    return "".join(
        f"<li><code>{r.start:%Y-%m-%d} – {r.end:%Y-%m-%d}</code> · {r.days} d</li>"
        for r in ranges
    ) or "<li class='empty'>None</li>"


st.set_page_config(page_title="Bump Chart Viewer", layout="wide")

st.title("Bump Chart Viewer")
st.caption("How many intervals are active on each day, and which ones")

if "session" not in st.session_state:
    settings = ChartSettings.from_env()
    configure_logging(settings)
    st.session_state.session = ChartSession(
        PlotlyBumpRenderer(settings), settings, source=PandasCsvSource()
    )
    st.session_state.csv_text = SAMPLE_CSV
    st.session_state.last_upload = None

session: ChartSession = st.session_state.session
settings = session.settings

uploaded_file = st.file_uploader(
    "Upload CSV",
    type=["csv"],
    help="Expected columns: id, start, end (e.g. 2024-01-30)",
)
if uploaded_file is not None and uploaded_file.file_id != st.session_state.last_upload:
    st.session_state.last_upload = uploaded_file.file_id
    try:
        st.session_state.csv_text = decode_csv_bytes(uploaded_file.read())
    except CsvParseError as e:
        st.error(parse_issue(e).text)

text = st.text_area("CSV data", key="csv_text", height=220)

with st.spinner("Rendering..."):
    state = session.submit(text)

if state.issue is not None:
    st.error(state.issue.text)
    if state.stale:
        st.caption("Showing the last valid chart.")

if state.chart is None:
    st.stop()

st.plotly_chart(state.chart, use_container_width=False)

result = state.rendered.result
if not result.ok:
    st.stop()

layout = result.layout
peaks = peak_days(layout)
st.caption(
    f"{len(layout.keys)} id(s) · {layout.min_start:%Y-%m-%d} to {layout.max_end:%Y-%m-%d} · "
    f"peak {layout.max_stack_height} concurrent on {len(peaks)} day(s) from {peaks[0]:%Y-%m-%d}"
)

st.divider()
st.subheader("Per id")

st.markdown("""
<style>
.layer-card {
    background: #ffffff;
    border: 1px solid #30363d;
    border-radius: 12px;
    padding: 16px;
    height: 280px;
    overflow-y: auto;
    margin-bottom: 16px;
}
.layer-card h4 { margin: 0 0 12px 0; font-size: 1rem; }
.layer-card .summary {
    display: flex; gap: 16px; margin-bottom: 12px;
    font-size: 0.9rem; color: #6e7681;
}
.layer-card .summary strong { color: #1f2328; }
.layer-card ul { padding: 0 0 0 16px; margin: 0; font-size: 0.85rem; }
.layer-card li { margin-bottom: 4px; }
.layer-card .subsection { margin-bottom: 12px; }
.layer-card .subsection-title { font-size: 0.8rem; color: #6e7681; margin: 0 0 6px 0; }
</style>
""", unsafe_allow_html=True)

layers = summarize(result.validation.intervals, layout)
cols = st.columns(min(3, len(layers)))
for i, layer in enumerate(layers):
    with cols[i % 3]:
        color = get_color(settings.palette, i)
        st.markdown(f"""
        <div class="layer-card" style="border-left: 3px solid {color}">
            <h4>{escape(layer.key)}</h4>
            <div class="summary">
                <span><strong>Active:</strong> {layer.active_days} d</span>
                <span><strong>Gaps:</strong> {layer.gap_days} d</span>
            </div>
            <div class="subsection">
                <p class="subsection-title">Active ranges ({len(layer.active)})</p>
                <ul>{fmt_ranges(layer.active)}</ul>
            </div>
            <div class="subsection">
                <p class="subsection-title">Overlaps within id ({len(layer.overlaps)})</p>
                <ul>{fmt_ranges(layer.overlaps)}</ul>
            </div>
            <div class="subsection">
                <p class="subsection-title">Gaps ({len(layer.gaps)})</p>
                <ul>{fmt_ranges(layer.gaps)}</ul>
            </div>
        </div>
        """, unsafe_allow_html=True)
