from __future__ import annotations

import shutil
import subprocess
import sys
from datetime import date

from powerprofile.store import EventLog, get_config_path

TIMER_UNIT = "powerprofile.timer"


def _systemd_status() -> dict:
    if sys.platform != "linux":
        return {"available": False}

    systemctl = shutil.which("systemctl")
    if not systemctl:
        return {"available": False}

    enabled = subprocess.run(
        [systemctl, "--user", "is-enabled", TIMER_UNIT],
        capture_output=True,
        text=True,
    ).stdout.strip()
    active = subprocess.run(
        [systemctl, "--user", "is-active", TIMER_UNIT],
        capture_output=True,
        text=True,
    ).stdout.strip()

    return {
        "available": True,
        "enabled": enabled,
        "active": active,
    }


def main(*, lines: int = 20, log: EventLog | None = None) -> int:
    log = log or EventLog()
    today = date.today()

    print(f"Config: {get_config_path()}")
    print(f"Log: {log.path_for(today)}")

    systemd = _systemd_status()
    if systemd.get("available"):
        print(f"Timer: enabled={systemd.get('enabled') or '-'} active={systemd.get('active') or '-'}")
    else:
        print("Timer: systemd not available")

    print("-" * 50)
    tail = log.tail(today, limit=max(0, lines))
    if not tail:
        print("No events logged today")
        return 0

    for line in tail:
        print(line)
    return 0
