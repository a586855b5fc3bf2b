from __future__ import annotations

from ipgeo_tracker.app.errors import AppError


class ErrorBanner:
    @staticmethod
    def format(error: AppError | str) -> str:
        if isinstance(error, str):
            return f"[ERROR] kind=validation message={error} trace_id=n/a"
        trace_id = error.trace_id or "n/a"
        return f"[ERROR] kind={error.kind.value} message={error.message} trace_id={trace_id}"

    @staticmethod
    def show(error: AppError | str | None) -> None:
        if error is None:
            return
        print(ErrorBanner.format(error))
