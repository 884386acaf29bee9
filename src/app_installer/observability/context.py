from __future__ import annotations

from contextvars import ContextVar


_run_id: ContextVar[str | None] = ContextVar("run_id", default=None)
_flow: ContextVar[str | None] = ContextVar("flow", default=None)
_section: ContextVar[str | None] = ContextVar("section", default=None)
_errors: ContextVar[list[str] | None] = ContextVar("errors", default=None)


def bind_context(*, run_id: str, flow: str) -> None:
    _run_id.set(run_id)
    _flow.set(flow)
    _section.set(None)
    _errors.set([])


def set_section(section: str | None) -> None:
    _section.set(section)


def add_error(message: str) -> None:
    errs = list(_errors.get() or [])
    errs.append(message)
    _errors.set(errs)


def snapshot() -> dict[str, object]:
    """Return a snapshot of current observability context for logging."""

    out: dict[str, object] = {}
    if (v := _run_id.get()) is not None:
        out["run_id"] = v
    if (v := _flow.get()) is not None:
        out["flow"] = v
    if (v := _section.get()) is not None:
        out["section"] = v
    out["errors"] = list(_errors.get() or [])
    return out
