from __future__ import annotations

import sys
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path

from powerprofile.store.paths import event_log_path

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def format_line(when: datetime, message: str) -> str:
    return f"{when.strftime(TIMESTAMP_FORMAT)} - {message}"


@dataclass
class EventLog:
    """Append-only daily text log, one event per line."""

    base_dir: Path | None = None

    def path_for(self, day: date) -> Path:
        return event_log_path(day, self.base_dir)

    def append(self, message: str, *, when: datetime | None = None) -> Path | None:
        """Append one line. Returns None if the log could not be written."""

        when = when or datetime.now()
        path = self.path_for(when.date())
        line = format_line(when, message)

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open("a", encoding="utf-8") as f:
                f.write(line)
                f.write("\n")
        except OSError as e:
            # A broken log never stops the run.
            print(f"Cannot write log {path}: {e}", file=sys.stderr)
            print(line, file=sys.stderr)
            return None
        return path

    def tail(self, day: date, limit: int = 20) -> list[str]:
        path = self.path_for(day)
        if limit <= 0 or not path.exists():
            return []

        try:
            lines = path.read_text(encoding="utf-8", errors="replace").splitlines()
        except OSError:
            return []
        return [ln for ln in lines if ln.strip()][-limit:]
