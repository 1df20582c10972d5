from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import datetime

from .types import Config, Flags, Readings


@dataclass(frozen=True)
class NetworkCheck:
    blocks: bool
    samples: dict[str, float] = field(default_factory=dict)
    busy_interface: str | None = None


def current_hhmm(now: datetime) -> int:
    return now.hour * 100 + now.minute


def stream_blocks(active_streams: int | None) -> bool:
    """Any playing audio stream blocks suspension; an unknown count blocks too."""

    if active_streams is None:
        return True
    return active_streams != 0


def idle_blocks(now: datetime, idle_ms: int | None, config: Config) -> bool:
    """Schedule + idle rule.

    Rules:
        1. Pick the windows for the day class (Mon-Fri weekday, Sat-Sun weekend).
        2. If the current HHMM is outside every window → block.
        3. If idle_ms is None → block.
        4. If idle_ms >= idle_threshold_ms → allow, else block.
    """

    hhmm = current_hhmm(now)
    windows = config.windows_for(now.isoweekday())
    if not any(window.contains(hhmm) for window in windows):
        return True

    if idle_ms is None:
        return True

    return idle_ms < config.idle_threshold_ms


def check_network(
    interfaces: Sequence[str],
    sample: Callable[[str], float | None],
    threshold_kbps: float,
) -> NetworkCheck:
    """Sample each interface in order, stopping at the first busy one.

    An unparseable sample counts as 0. The flag reflects the last interface
    evaluated; with no interfaces it keeps its blocking default.
    """

    blocks = True
    samples: dict[str, float] = {}

    for interface in interfaces:
        speed = sample(interface)
        if speed is None:
            speed = 0.0
        samples[interface] = speed

        if speed > threshold_kbps:
            return NetworkCheck(blocks=True, samples=samples, busy_interface=interface)
        blocks = False

    return NetworkCheck(blocks=blocks, samples=samples)


def cpu_blocks(cpu_idle_percent: float | None, threshold_percent: float) -> bool:
    if cpu_idle_percent is None:
        cpu_idle_percent = 0.0
    return 100.0 - cpu_idle_percent > threshold_percent


def evaluate(readings: Readings, config: Config) -> Flags:
    """Reduce a set of readings to per-signal flags.

    Args:
        readings: Signals gathered for this invocation.
        config: Runtime configuration.

    Returns:
        Flags; ``flags.allow`` is the final decision.
    """

    return Flags(
        stream=stream_blocks(readings.active_streams),
        idle=idle_blocks(readings.now, readings.idle_ms, config),
        network=readings.network_blocks,
        cpu=cpu_blocks(readings.cpu_idle_percent, config.cpu_threshold_percent),
    )
