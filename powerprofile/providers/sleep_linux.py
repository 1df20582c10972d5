from __future__ import annotations

import asyncio
import subprocess
from collections.abc import Sequence

LOGIND_BUS_NAME = "org.freedesktop.login1"
LOGIND_OBJECT_PATH = "/org/freedesktop/login1"
LOGIND_MANAGER_INTERFACE = "org.freedesktop.login1.Manager"


class CommandSuspender:
    """Suspend by running a command, `sudo systemctl suspend` by default."""

    def __init__(self, command: Sequence[str], *, timeout: float = 60.0):
        self._command = list(command)
        self._timeout = timeout
        self._last_error: str | None = None

    def last_error(self) -> str | None:
        return self._last_error

    def suspend(self) -> bool:
        self._last_error = None
        try:
            result = subprocess.run(
                self._command,
                capture_output=True,
                text=True,
                timeout=self._timeout,
            )
        except (FileNotFoundError, subprocess.TimeoutExpired, OSError) as exc:
            self._last_error = str(exc)
            return False

        if result.returncode != 0:
            stderr = (result.stderr or "").strip()
            self._last_error = stderr or f"exit status {result.returncode}"
            return False
        return True


class LogindSuspender:
    """Suspend through systemd-logind on the system D-Bus.

    Works without sudo when polkit lets the active session suspend.
    """

    def __init__(self, *, interactive: bool = False):
        self._interactive = interactive
        self._last_error: str | None = None

    def last_error(self) -> str | None:
        return self._last_error

    def suspend(self) -> bool:
        self._last_error = None
        try:
            asyncio.run(self._call_suspend())
        except Exception as exc:
            self._last_error = str(exc) or type(exc).__name__
            return False
        return True

    async def _call_suspend(self) -> None:
        from dbus_next.aio import MessageBus
        from dbus_next.constants import BusType

        bus = await MessageBus(bus_type=BusType.SYSTEM).connect()
        try:
            introspection = await bus.introspect(LOGIND_BUS_NAME, LOGIND_OBJECT_PATH)
            obj = bus.get_proxy_object(LOGIND_BUS_NAME, LOGIND_OBJECT_PATH, introspection)
            manager = obj.get_interface(LOGIND_MANAGER_INTERFACE)
            await manager.call_suspend(self._interactive)  # type: ignore[attr-defined]
        finally:
            bus.disconnect()


def make_suspender(method: str, command: Sequence[str]) -> CommandSuspender | LogindSuspender:
    if method == "logind":
        return LogindSuspender()
    if method == "systemctl":
        return CommandSuspender(command)
    raise ValueError(f"Unknown suspend method: {method}")
