"""Verbose-mode timing spans for service calls.

``caliber -v`` turns telemetry on for the invocation. Each ``@traced``
service method then opens a span, ``trace_span`` blocks inside it open
child spans, and the finished tree is attached to the returned
``ServiceResult.meta`` under ``"telemetry"``. A traced method called
from inside another one (``toggle_entry`` delegating to ``toggle_at``)
becomes a child span of its caller; only the outermost call attaches
the tree.

With telemetry off every entry point costs one ContextVar lookup.
"""

from __future__ import annotations

import functools
import time
from collections.abc import Callable, Generator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, ParamSpec, TypeVar

import structlog

from caliber.services.result import ServiceResult

_enabled: ContextVar[bool] = ContextVar("caliber_telemetry", default=False)
_current_span: ContextVar[Span | None] = ContextVar("caliber_span", default=None)

log = structlog.get_logger("caliber.telemetry")


@dataclass
class Span:
    """One timed step. Children are the steps nested inside it."""

    name: str
    parent: Span | None = None
    children: list[Span] = field(default_factory=list)
    annotations: dict[str, Any] = field(default_factory=dict)
    started: float = field(default_factory=time.perf_counter)
    finished: float | None = None

    @property
    def duration_ms(self) -> float:
        if self.finished is None:
            return 0.0
        return (self.finished - self.started) * 1000

    @property
    def depth(self) -> int:
        return 0 if self.parent is None else self.parent.depth + 1

    def end(self) -> None:
        self.finished = time.perf_counter()

    def annotate(self, key: str, value: Any) -> None:
        self.annotations[key] = value

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "duration_ms": round(self.duration_ms, 2),
        }
        if self.annotations:
            data["annotations"] = dict(self.annotations)
        if self.children:
            data["children"] = [child.to_dict() for child in self.children]
        return data


@contextmanager
def _open_span(name: str, parent: Span | None) -> Generator[Span]:
    span = Span(name=name, parent=parent)
    if parent is not None:
        parent.children.append(span)
    token = _current_span.set(span)
    try:
        yield span
    finally:
        span.end()
        _current_span.reset(token)


@contextmanager
def trace_span(name: str) -> Generator[Span | None]:
    """Time a block as a child of the running service span.

    Yields None when telemetry is off or no traced call is running.
    """
    parent = _current_span.get() if _enabled.get() else None
    if parent is None:
        yield None
        return
    with _open_span(name, parent) as span:
        yield span


def _attach(result: ServiceResult, span: Span) -> ServiceResult:
    if result.warnings:
        span.annotate("warnings", len(result.warnings))
    meta = {**(result.meta or {}), "telemetry": span.to_dict()}
    return result.model_copy(update={"meta": meta})


def _log_span(span: Span, *, ok: bool) -> None:
    log.debug(
        "span.complete",
        span_name=span.name,
        duration_ms=round(span.duration_ms, 2),
        depth=span.depth,
        ok=ok,
    )


_P = ParamSpec("_P")
_R = TypeVar("_R")


def traced(func: Callable[_P, _R]) -> Callable[_P, _R]:  # noqa: UP047
    """Time a service method and attach its span tree to the ServiceResult."""

    @functools.wraps(func)
    def wrapper(*args: _P.args, **kwargs: _P.kwargs) -> _R:
        if not _enabled.get():
            return func(*args, **kwargs)

        parent = _current_span.get()
        ok = False
        try:
            with _open_span(func.__qualname__, parent) as span:
                result = func(*args, **kwargs)
                ok = not isinstance(result, ServiceResult) or result.ok
        finally:
            _log_span(span, ok=ok)

        if parent is None and isinstance(result, ServiceResult):
            return _attach(result, span)  # type: ignore[return-value]
        return result

    return wrapper


def enable_telemetry() -> None:
    """Turn spans on for the current context (``--verbose``)."""
    _enabled.set(True)


def disable_telemetry() -> None:
    _enabled.set(False)


def get_current_span() -> Span | None:
    """The innermost open span, for annotating from service code."""
    if not _enabled.get():
        return None
    return _current_span.get()
