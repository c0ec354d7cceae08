"""
Semantic test: host boundary.

Invariant:
A failed submission never replaces the last good chart; it is reported next
to it. Nothing at this boundary raises for bad input.
"""

from __future__ import annotations

import asyncio
import threading

import pytest

from bumpchart.bootstrap import SourceLoader
from bumpchart.csv_source import SAMPLE_CSV, PandasCsvSource
from bumpchart.errors import SourceUnavailableError
from bumpchart.pipeline import IssueKind
from bumpchart.session import ChartSession, render_text

GOOD = "id,start,end\nA,2024-01-01,2024-01-02\n"
BAD_ROWS = "id,start,end\n,2024-01-01,2024-01-02\n"
BAD_CSV = "id,start,end\nA,2024-01-01,2024-01-02,x,y\n"


class RecordingRenderer:
    def __init__(self) -> None:
        self.calls = []

    def render(self, layout):
        self.calls.append(layout)
        return ("chart", len(self.calls))


class BrokenRenderer:
    def render(self, layout):
        raise RuntimeError("no canvas")


def test_render_text_success() -> None:
    renderer = RecordingRenderer()

    rendered = render_text(GOOD, PandasCsvSource(), renderer)

    assert rendered.ok
    assert rendered.chart == ("chart", 1)
    assert renderer.calls[0].keys == ("A",)


def test_render_text_parse_error() -> None:
    rendered = render_text(BAD_CSV, PandasCsvSource(), RecordingRenderer())

    assert not rendered.ok
    assert rendered.result.issue.kind is IssueKind.PARSE
    assert rendered.result.issue.text.startswith("Parse error: ")


def test_render_text_renderer_failure_is_computation_issue() -> None:
    rendered = render_text(GOOD, PandasCsvSource(), BrokenRenderer())

    assert rendered.result.issue.kind is IssueKind.COMPUTATION
    assert rendered.result.issue.text == "Error while drawing chart: no canvas"


def test_render_text_does_not_render_invalid_input() -> None:
    renderer = RecordingRenderer()

    rendered = render_text(BAD_ROWS, PandasCsvSource(), renderer)

    assert rendered.result.issue.kind is IssueKind.ROWS
    assert renderer.calls == []


def test_session_keeps_last_good_chart_on_error() -> None:
    session = ChartSession(RecordingRenderer(), source=PandasCsvSource())

    good = session.submit(GOOD)
    bad = session.submit(BAD_ROWS)

    assert good.chart == ("chart", 1)
    assert not good.stale
    assert bad.issue.kind is IssueKind.ROWS
    assert bad.chart == ("chart", 1)
    assert bad.stale
    assert session.state is bad


def test_session_error_before_any_chart_is_not_stale() -> None:
    session = ChartSession(RecordingRenderer(), source=PandasCsvSource())

    state = session.submit("")

    assert state.issue.kind is IssueKind.HEADER
    assert state.chart is None
    assert not state.stale


def test_submit_async_resolves_source_once() -> None:
    built = []

    def factory():
        built.append(1)
        return PandasCsvSource()

    session = ChartSession(RecordingRenderer(), loader=SourceLoader(factory))

    async def run():
        return await asyncio.gather(session.submit_async(SAMPLE_CSV), session.submit_async(GOOD))

    first, second = asyncio.run(run())

    assert first.rendered.ok and second.rendered.ok
    assert built == [1]


def test_submit_async_reports_unavailable_source() -> None:
    def factory():
        raise ImportError("no parser here")

    session = ChartSession(RecordingRenderer(), loader=SourceLoader(factory))

    state = asyncio.run(session.submit_async(GOOD))

    assert state.issue.kind is IssueKind.SOURCE_UNAVAILABLE
    assert state.issue.text == "Failed to load CSV parser: no parser here"


def test_loader_retries_after_failure() -> None:
    attempts = []

    def factory():
        attempts.append(1)
        if len(attempts) == 1:
            raise OSError("offline")
        return PandasCsvSource()

    loader = SourceLoader(factory)

    async def run():
        try:
            await loader.get()
        except SourceUnavailableError:
            pass
        return await loader.get()

    source = asyncio.run(run())

    assert isinstance(source, PandasCsvSource)
    assert loader.loaded
    assert len(attempts) == 2


class FakeTimer:
    def __init__(self, delay, fn) -> None:
        self.delay = delay
        self.fn = fn
        self.cancelled = False

    def start(self) -> None:
        pass

    def cancel(self) -> None:
        self.cancelled = True


def test_debounced_submit_runs_last_text_only() -> None:
    timers = []

    def factory(delay, fn):
        timers.append(FakeTimer(delay, fn))
        return timers[-1]

    session = ChartSession(RecordingRenderer(), source=PandasCsvSource())
    states = []
    submit = session.debounced(states.append, timer_factory=factory)

    submit(BAD_ROWS)
    submit(GOOD)

    assert timers[0].cancelled
    assert timers[1].delay == session.settings.debounce_seconds
    timers[0].fn()  # superseded timer firing late does nothing
    assert states == []
    timers[1].fn()
    assert len(states) == 1
    assert states[0].rendered.ok


def test_debounced_without_source_fails_on_caller_thread() -> None:
    session = ChartSession(RecordingRenderer())

    with pytest.raises(RuntimeError):
        session.debounced(lambda state: None)


def test_debounced_submit_from_timer_thread_reports_state() -> None:
    session = ChartSession(RecordingRenderer(), source=PandasCsvSource())
    states = []
    done = threading.Event()

    def on_state(state) -> None:
        states.append(state)
        done.set()

    submit = session.debounced(on_state)
    submit(BAD_ROWS)

    assert done.wait(2.0)
    assert states[0].issue.kind is IssueKind.ROWS
    assert session.state is states[0]


def test_concurrent_submits_leave_consistent_state() -> None:
    session = ChartSession(RecordingRenderer(), source=PandasCsvSource())
    session.submit(GOOD)
    texts = [GOOD, BAD_ROWS] * 10

    threads = [threading.Thread(target=session.submit, args=(t,)) for t in texts]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    state = session.state
    assert state.chart is not None
    assert state.stale == (not state.rendered.ok)
