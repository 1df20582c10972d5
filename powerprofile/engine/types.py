from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Final


DEFAULT_IDLE_THRESHOLD_MS: Final[int] = 3_600_000
DEFAULT_NETWORK_THRESHOLD_KBPS: Final[float] = 20.0
DEFAULT_CPU_THRESHOLD_PERCENT: Final[float] = 10.0
DEFAULT_CONFIRM_TIMEOUT_SECONDS: Final[int] = 290
DEFAULT_SAMPLE_SECONDS: Final[int] = 1
DEFAULT_INTERFACES: Final[tuple[str, ...]] = ("eth0", "nordlynx")
DEFAULT_SUSPEND_COMMAND: Final[tuple[str, ...]] = ("sudo", "systemctl", "suspend")


def parse_hhmm(text: str) -> int:
    """Parse "HH:MM" (or "HHMM") into a decimal HHMM integer.

    "08:30" -> 830. Leading zeros never make this octal.
    """

    raw = text.strip().replace(":", "")
    if len(raw) != 4 or not raw.isdigit():
        raise ValueError(f"invalid time of day: {text!r}")

    hours = int(raw[:2], 10)
    minutes = int(raw[2:], 10)
    if hours > 23 or minutes > 59:
        raise ValueError(f"invalid time of day: {text!r}")
    return hours * 100 + minutes


@dataclass(frozen=True)
class TimeWindow:
    """Inclusive HHMM window within a single day."""

    start: int
    end: int

    def contains(self, hhmm: int) -> bool:
        return self.start <= hhmm <= self.end

    def __str__(self) -> str:
        start = f"{self.start // 100:02d}:{self.start % 100:02d}"
        end = f"{self.end // 100:02d}:{self.end % 100:02d}"
        return f"{start}-{end}"


def parse_window(text: str) -> TimeWindow:
    """Parse "HH:MM-HH:MM" into a TimeWindow."""

    start_raw, sep, end_raw = text.partition("-")
    if not sep:
        raise ValueError(f"invalid time window: {text!r}")

    window = TimeWindow(start=parse_hhmm(start_raw), end=parse_hhmm(end_raw))
    if window.start > window.end:
        # Windows crossing midnight are expressed as two windows.
        raise ValueError(f"time window ends before it starts: {text!r}")
    return window


DEFAULT_WEEKDAY_WINDOWS: Final[tuple[TimeWindow, ...]] = (
    TimeWindow(700, 1430),
    TimeWindow(0, 500),
)
DEFAULT_WEEKEND_WINDOWS: Final[tuple[TimeWindow, ...]] = (
    TimeWindow(2200, 2359),
    TimeWindow(0, 700),
)


@dataclass
class Config:
    idle_threshold_ms: int = DEFAULT_IDLE_THRESHOLD_MS
    network_threshold_kbps: float = DEFAULT_NETWORK_THRESHOLD_KBPS
    cpu_threshold_percent: float = DEFAULT_CPU_THRESHOLD_PERCENT
    confirm_timeout_seconds: int = DEFAULT_CONFIRM_TIMEOUT_SECONDS
    sample_seconds: int = DEFAULT_SAMPLE_SECONDS
    interfaces: tuple[str, ...] = DEFAULT_INTERFACES
    weekday_windows: tuple[TimeWindow, ...] = DEFAULT_WEEKDAY_WINDOWS
    weekend_windows: tuple[TimeWindow, ...] = DEFAULT_WEEKEND_WINDOWS
    display: str = ":0"
    suspend_method: str = "systemctl"
    suspend_command: tuple[str, ...] = DEFAULT_SUSPEND_COMMAND

    def windows_for(self, isoweekday: int) -> tuple[TimeWindow, ...]:
        if 1 <= isoweekday <= 5:
            return self.weekday_windows
        if 6 <= isoweekday <= 7:
            return self.weekend_windows
        return ()


@dataclass(frozen=True)
class Readings:
    now: datetime
    idle_ms: int | None
    active_streams: int | None
    network_blocks: bool
    throughput_kbps: dict[str, float] = field(default_factory=dict)
    cpu_idle_percent: float = 0.0


@dataclass(frozen=True)
class Flags:
    """Per-signal flags; True means the signal blocks suspension."""

    stream: bool = True
    idle: bool = True
    network: bool = True
    cpu: bool = True

    @property
    def allow(self) -> bool:
        # CPU is informational only.
        return not (self.stream or self.idle or self.network)

    def describe(self) -> str:
        return (
            f"stream={int(self.stream)}, idle={int(self.idle)}, "
            f"network={int(self.network)}, cpu={int(self.cpu)}"
        )


class Outcome(Enum):
    BLOCKED = "blocked"
    CANCELED = "canceled"
    INSUFFICIENT_IDLE = "insufficient_idle"
    SUSPENDED = "suspended"
    SUSPEND_FAILED = "suspend_failed"
