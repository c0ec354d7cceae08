"""
Host boundary
CSV text -> parsed table -> chart result -> rendered chart, plus last-good-chart bookkeeping
"""

from __future__ import annotations

import asyncio
import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Optional

from bumpchart.bootstrap import SourceLoader
from bumpchart.errors import CsvParseError, SourceUnavailableError
from bumpchart.pipeline import ChartIssue, ChartResult, IssueKind, build_chart, computation_issue, parse_issue
from bumpchart.ports import ChartRenderer, RowSource
from bumpchart.scheduling import Debouncer
from bumpchart.settings import ChartSettings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Rendered:
    result: ChartResult
    chart: Any = None

    @property
    def ok(self) -> bool:
        return self.result.ok and self.chart is not None


def render_text(
    text: str,
    source: RowSource,
    renderer: ChartRenderer,
    settings: Optional[ChartSettings] = None,
) -> Rendered:
    """Run one full pass. Never raises for bad input or a failing renderer."""
    settings = settings or ChartSettings()
    try:
        table = source.parse(text)
    except CsvParseError as e:
        logger.warning("CSV parse failed: %s", e)
        return Rendered(ChartResult(issue=parse_issue(e)))

    result = build_chart(table.fields, table.rows, settings)
    if not result.ok:
        return Rendered(result)
    try:
        chart = renderer.render(result.layout)
    except Exception as e:  # drawing failure must not take the host down
        logger.exception("rendering failed")
        return Rendered(ChartResult(issue=computation_issue(e), validation=result.validation))
    return Rendered(result, chart)


@dataclass(frozen=True)
class SessionState:
    """What a host shows: the latest issue (if any) next to the last good chart."""

    rendered: Rendered
    chart: Any = None
    stale: bool = False

    @property
    def issue(self) -> Optional[ChartIssue]:
        return self.rendered.result.issue


class ChartSession:
    def __init__(
        self,
        renderer: ChartRenderer,
        settings: Optional[ChartSettings] = None,
        *,
        source: Optional[RowSource] = None,
        loader: Optional[SourceLoader] = None,
    ) -> None:
        self.renderer = renderer
        self.settings = settings or ChartSettings()
        self._source = source
        self._loader = loader or SourceLoader()
        self._last_chart: Any = None
        self.state: Optional[SessionState] = None
        # submit may run on a debounce timer thread and the host thread at once.
        self._lock = threading.Lock()

    def _apply(self, rendered: Rendered) -> SessionState:
        if rendered.ok:
            self._last_chart = rendered.chart
            state = SessionState(rendered, rendered.chart, stale=False)
        else:
            state = SessionState(rendered, self._last_chart, stale=self._last_chart is not None)
        self.state = state
        return state

    def submit(self, text: str) -> SessionState:
        if self._source is None:
            raise RuntimeError("no row source yet; use submit_async or pass source=")
        with self._lock:
            return self._apply(render_text(text, self._source, self.renderer, self.settings))

    async def submit_async(self, text: str) -> SessionState:
        if self._source is None:
            try:
                self._source = await self._loader.get()
            except SourceUnavailableError as e:
                issue = ChartIssue.single(IssueKind.SOURCE_UNAVAILABLE, f"Failed to load CSV parser: {e}")
                with self._lock:
                    return self._apply(Rendered(ChartResult(issue=issue)))
        # Let a pending "working" indicator paint before the synchronous pass.
        await asyncio.sleep(0)
        return self.submit(text)

    def debounced(
        self,
        on_state: Callable[[SessionState], Any],
        timer_factory: Optional[Callable[..., Any]] = None,
    ) -> Debouncer:
        """Wrap ``submit`` so it runs at most once per quiet period.

        Needs a resolved row source: the timer thread has no caller to
        report a missing one to.
        """
        if self._source is None:
            raise RuntimeError("debounced submit needs a row source; pass source= or await submit_async first")

        def run(text: str) -> None:
            on_state(self.submit(text))

        if timer_factory is None:
            return Debouncer(run, self.settings.debounce_seconds)
        return Debouncer(run, self.settings.debounce_seconds, timer_factory=timer_factory)
