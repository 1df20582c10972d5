from __future__ import annotations

import os
import shutil
import subprocess
import sys
from pathlib import Path

SERVICE_NAME = "powerprofile.service"
TIMER_NAME = "powerprofile.timer"


def _systemd_user_dir() -> Path:
    base = os.environ.get("XDG_CONFIG_HOME")
    if base:
        return Path(base) / "systemd" / "user"
    return Path.home() / ".config" / "systemd" / "user"


def _detect_exec_start() -> str:
    """Return an ExecStart string usable by systemd.

    Preference:
    1) Absolute path to `powerprofile` script on PATH
    2) sys.executable -m powerprofile.cli check
    """

    exe = shutil.which("powerprofile")
    if exe:
        return f"{exe} check"

    # Fallback for editable installs / venv.
    return f"{sys.executable} -m powerprofile.cli check"


def _render_service(*, exec_start: str) -> str:
    return (
        "[Unit]\n"
        "Description=powerprofile suspend policy check\n"
        "After=graphical-session.target\n"
        "\n"
        "[Service]\n"
        "Type=oneshot\n"
        f"ExecStart={exec_start}\n"
        "\n"
        "# X11 tools (xprintidle, zenity) need the display\n"
        "Environment=DISPLAY=:0\n"
        "Environment=XAUTHORITY=%h/.Xauthority\n"
        "Environment=XDG_CONFIG_HOME=%h/.config\n"
        "Environment=XDG_DATA_HOME=%h/.local/share\n"
    )


def _render_timer(*, interval_minutes: int) -> str:
    return (
        "[Unit]\n"
        "Description=Run powerprofile suspend policy check periodically\n"
        "\n"
        "[Timer]\n"
        f"OnBootSec={interval_minutes}min\n"
        f"OnUnitActiveSec={interval_minutes}min\n"
        f"Unit={SERVICE_NAME}\n"
        "\n"
        "[Install]\n"
        "WantedBy=timers.target\n"
    )


def main(*, force: bool = False, interval_minutes: int = 5) -> int:
    if sys.platform != "linux":
        print("init is currently supported only on Linux (systemd user)")
        return 1

    if interval_minutes <= 0:
        print("--interval must be > 0")
        return 1

    systemctl = shutil.which("systemctl")
    if not systemctl:
        print("systemctl not found; cannot enable systemd user timer")
        return 1

    unit_dir = _systemd_user_dir()
    service_path = unit_dir / SERVICE_NAME
    timer_path = unit_dir / TIMER_NAME

    unit_dir.mkdir(parents=True, exist_ok=True)

    existing = [p for p in (service_path, timer_path) if p.exists()]
    if existing and not force:
        for path in existing:
            print(f"Unit already exists: {path}")
        print("Re-run with --force to overwrite")
        return 1

    service_path.write_text(_render_service(exec_start=_detect_exec_start()), encoding="utf-8")
    timer_path.write_text(_render_timer(interval_minutes=interval_minutes), encoding="utf-8")

    try:
        subprocess.run([systemctl, "--user", "daemon-reload"], check=True)
        subprocess.run([systemctl, "--user", "enable", "--now", TIMER_NAME], check=True)
    except subprocess.CalledProcessError as e:
        print(f"systemctl failed: {e}")
        print(f"Units written to: {unit_dir}")
        print("You can try manually:")
        print("  systemctl --user daemon-reload")
        print(f"  systemctl --user enable --now {TIMER_NAME}")
        return 1

    print(f"Installed and enabled: {timer_path}")
    print("Check status:")
    print(f"  systemctl --user list-timers {TIMER_NAME}")
    return 0
