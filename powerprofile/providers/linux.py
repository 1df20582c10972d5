import os
import re
import subprocess
from datetime import datetime
from pathlib import Path

from ..engine.rules import check_network
from ..engine.types import Config, Readings
from .sleep_linux import make_suspender

_NUMBER_RE = re.compile(r"^[0-9]+(\.[0-9]+)?$")

# zenity exits with 1 when the user presses Cancel (5 on timeout, 0 on OK).
ZENITY_CANCELED = 1


def parse_number(text: str | None) -> float | None:
    """Parse a plain non-negative decimal; anything else is None."""

    if text is None:
        return None
    text = text.strip()
    if not _NUMBER_RE.match(text):
        return None
    return float(text)


def parse_idle_ms(output: str) -> int | None:
    value = output.strip()
    if not value.isdigit():
        return None
    return int(value)


def parse_stream_count(output: str) -> int:
    # One sink input per line.
    return len([line for line in output.splitlines() if line.strip()])


def parse_ifstat_download(output: str) -> float | None:
    """Download rate from `ifstat -i IFACE S 1`.

    Output is a header with the interface name, a units header
    ("KB/s in  KB/s out") and one sample line; the download rate is
    the first column of the third line.
    """

    lines = output.splitlines()
    if len(lines) < 3:
        return None
    parts = lines[2].split()
    if not parts:
        return None
    return parse_number(parts[0])


def parse_mpstat_idle(output: str) -> float | None:
    """%idle from the `Average:` line of `mpstat S 1` (twelfth column)."""

    for line in output.splitlines():
        if not line.startswith("Average:"):
            continue
        parts = line.split()
        if len(parts) < 12:
            return None
        return parse_number(parts[11])
    return None


class LinuxProvider:
    """Linux signal sources and actions.

    Signals:
    - idle time: xprintidle (X11)
    - audio streams: pactl (PulseAudio / PipeWire)
    - download rate: ifstat
    - CPU idle: mpstat (sysstat)

    Actions:
    - confirmation prompt: zenity
    - suspend: `sudo systemctl suspend` or logind over D-Bus

    Notes:
    - Cron jobs lack a graphical environment; DISPLAY and XAUTHORITY are
      filled in for the X11 tools when missing.
    - Numeric tools run under LC_ALL=C so decimals use a dot.
    """

    def __init__(self, config: Config, *, suspender=None):
        self._config = config
        self._suspender = suspender or make_suspender(
            config.suspend_method, config.suspend_command
        )

    def _graphical_env(self) -> dict[str, str]:
        env = dict(os.environ)
        env.setdefault("DISPLAY", self._config.display)
        env.setdefault("XAUTHORITY", str(Path.home() / ".Xauthority"))
        return env

    def _numeric_env(self) -> dict[str, str]:
        env = dict(os.environ)
        env["LC_ALL"] = "C"
        return env

    def _run_stdout(self, args: list[str], *, env: dict[str, str], timeout: float) -> str | None:
        try:
            result = subprocess.run(
                args,
                capture_output=True,
                text=True,
                timeout=timeout,
                env=env,
                check=True,
            )
        except (
            subprocess.CalledProcessError,
            subprocess.TimeoutExpired,
            FileNotFoundError,
            OSError,
        ):
            return None
        return result.stdout

    def _sample_timeout(self) -> float:
        return float(self._config.sample_seconds + 5)

    def get_idle_ms(self) -> int | None:
        output = self._run_stdout(["xprintidle"], env=self._graphical_env(), timeout=5)
        if output is None:
            return None
        return parse_idle_ms(output)

    def get_active_streams(self) -> int | None:
        output = self._run_stdout(
            ["pactl", "list", "short", "sink-inputs"], env=self._graphical_env(), timeout=5
        )
        if output is None:
            return None
        return parse_stream_count(output)

    def get_throughput_kbps(self, interface: str) -> float | None:
        output = self._run_stdout(
            ["ifstat", "-i", interface, str(self._config.sample_seconds), "1"],
            env=self._numeric_env(),
            timeout=self._sample_timeout(),
        )
        if output is None:
            return None
        return parse_ifstat_download(output)

    def get_cpu_idle_percent(self) -> float | None:
        output = self._run_stdout(
            ["mpstat", str(self._config.sample_seconds), "1"],
            env=self._numeric_env(),
            timeout=self._sample_timeout(),
        )
        if output is None:
            return None
        return parse_mpstat_idle(output)

    def confirm(self, text: str, timeout_seconds: int) -> bool:
        """Show a cancelable prompt. False only if the user canceled."""

        try:
            result = subprocess.run(
                ["zenity", "--question", f"--text={text}", f"--timeout={timeout_seconds}"],
                capture_output=True,
                text=True,
                timeout=timeout_seconds + 30,
                env=self._graphical_env(),
            )
        except (subprocess.TimeoutExpired, FileNotFoundError, OSError):
            # No usable prompt: behave as if it timed out.
            return True
        return result.returncode != ZENITY_CANCELED

    def suspend(self) -> bool:
        return self._suspender.suspend()

    def suspend_error(self) -> str | None:
        return self._suspender.last_error()

    def get_readings(self, now: datetime | None = None) -> Readings:
        idle_ms = self.get_idle_ms()
        active_streams = self.get_active_streams()
        now = now or datetime.now()

        network = check_network(
            self._config.interfaces,
            self.get_throughput_kbps,
            self._config.network_threshold_kbps,
        )
        if network.busy_interface is not None:
            speed = network.samples[network.busy_interface]
            print(
                f"Significant network activity detected on {network.busy_interface}: "
                f"{speed:g} KB/s. Not suspending."
            )

        cpu_idle = self.get_cpu_idle_percent()

        return Readings(
            now=now,
            idle_ms=idle_ms,
            active_streams=active_streams,
            network_blocks=network.blocks,
            throughput_kbps=network.samples,
            cpu_idle_percent=cpu_idle if cpu_idle is not None else 0.0,
        )
