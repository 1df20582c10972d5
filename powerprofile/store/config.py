from __future__ import annotations

import tomllib
from pathlib import Path

from powerprofile.engine.types import Config, TimeWindow, parse_window
from powerprofile.store.paths import get_config_path

SUSPEND_METHODS = {"systemctl", "logind"}


def _toml_list(items) -> str:
    return "[" + ", ".join(f'"{item}"' for item in items) + "]"


def default_config_toml(config: Config | None = None) -> str:
    cfg = config or Config()
    # Keep it minimal and editable.
    return (
        "# powerprofile configuration\n"
        "# Location: ~/.config/powerprofile/config.toml (or XDG_CONFIG_HOME)\n"
        "\n"
        "# Minimum idle time before suspending (milliseconds)\n"
        f"idle_threshold_ms = {cfg.idle_threshold_ms}\n"
        "# Download rate above which an interface blocks suspension (KB/s)\n"
        f"network_threshold_kbps = {cfg.network_threshold_kbps:g}\n"
        f"cpu_threshold_percent = {cfg.cpu_threshold_percent:g}\n"
        f"confirm_timeout_seconds = {cfg.confirm_timeout_seconds}\n"
        f"sample_seconds = {cfg.sample_seconds}\n"
        f"interfaces = {_toml_list(cfg.interfaces)}\n"
        "\n"
        "[schedule]\n"
        "# Inclusive HH:MM-HH:MM windows in which suspending is allowed\n"
        f"weekday = {_toml_list(str(w) for w in cfg.weekday_windows)}\n"
        f"weekend = {_toml_list(str(w) for w in cfg.weekend_windows)}\n"
        "\n"
        "[linux]\n"
        f'display = "{cfg.display}"\n'
        '# "systemctl" runs suspend_command, "logind" asks logind over D-Bus\n'
        f'suspend_method = "{cfg.suspend_method}"\n'
        f"suspend_command = {_toml_list(cfg.suspend_command)}\n"
    )


def ensure_default_config_file(path: Path | None = None) -> Path:
    config_path = path or get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)
    if not config_path.exists():
        config_path.write_text(default_config_toml(), encoding="utf-8")
    return config_path


def _is_number(value) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _str_tuple(value) -> tuple[str, ...] | None:
    if isinstance(value, list) and all(isinstance(item, str) for item in value):
        return tuple(value)
    return None


def _windows(value) -> tuple[TimeWindow, ...]:
    items = _str_tuple(value)
    if items is None:
        raise ValueError(f"time windows must be a list of strings, got {value!r}")
    return tuple(parse_window(item) for item in items)


def load_config(path: Path | None = None, *, create_if_missing: bool = True) -> tuple[Config, dict]:
    """Load config.toml, returning (Config, meta).

    Meta contains useful diagnostics for debug output.
    """

    config_path = path or get_config_path()
    meta: dict = {"path": str(config_path), "loaded": False, "created": False}

    if create_if_missing:
        before = config_path.exists()
        try:
            ensure_default_config_file(config_path)
        except OSError as e:
            meta["error"] = f"config_write_error: {e}"
        meta["created"] = not before and config_path.exists()

    if not config_path.exists():
        return Config(), meta

    try:
        raw = tomllib.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError) as e:
        meta["error"] = f"config_read_error: {e}"
        return Config(), meta

    cfg = Config()

    if _is_int(raw.get("idle_threshold_ms")):
        cfg.idle_threshold_ms = int(raw["idle_threshold_ms"])
    if _is_number(raw.get("network_threshold_kbps")):
        cfg.network_threshold_kbps = float(raw["network_threshold_kbps"])
    if _is_number(raw.get("cpu_threshold_percent")):
        cfg.cpu_threshold_percent = float(raw["cpu_threshold_percent"])
    if _is_int(raw.get("confirm_timeout_seconds")):
        cfg.confirm_timeout_seconds = int(raw["confirm_timeout_seconds"])
    if _is_int(raw.get("sample_seconds")):
        cfg.sample_seconds = int(raw["sample_seconds"])

    interfaces = _str_tuple(raw.get("interfaces"))
    if interfaces is not None:
        cfg.interfaces = interfaces

    schedule = raw.get("schedule")
    if isinstance(schedule, dict):
        try:
            if "weekday" in schedule:
                cfg.weekday_windows = _windows(schedule["weekday"])
            if "weekend" in schedule:
                cfg.weekend_windows = _windows(schedule["weekend"])
        except ValueError as e:
            # A broken schedule must not widen the allowed windows.
            meta["error"] = f"schedule_error: {e}"
            cfg.weekday_windows = ()
            cfg.weekend_windows = ()

    linux = raw.get("linux")
    if isinstance(linux, dict):
        if isinstance(linux.get("display"), str):
            cfg.display = linux["display"]

        method = linux.get("suspend_method")
        if isinstance(method, str) and method.strip().lower() in SUSPEND_METHODS:
            cfg.suspend_method = method.strip().lower()

        command = _str_tuple(linux.get("suspend_command"))
        if command:
            cfg.suspend_command = command

    meta["loaded"] = True
    return cfg, meta


def validate_config(config: Config) -> None:
    if config.idle_threshold_ms <= 0:
        raise ValueError("idle_threshold_ms must be > 0")
    if config.network_threshold_kbps < 0:
        raise ValueError("network_threshold_kbps must be >= 0")
    if not 0 <= config.cpu_threshold_percent <= 100:
        raise ValueError("cpu_threshold_percent must be within 0..100")
    if config.confirm_timeout_seconds <= 0:
        raise ValueError("confirm_timeout_seconds must be > 0")
    if config.sample_seconds <= 0:
        raise ValueError("sample_seconds must be > 0")
    if config.suspend_method not in SUSPEND_METHODS:
        raise ValueError(f"suspend_method must be one of {sorted(SUSPEND_METHODS)}")
    if config.suspend_method == "systemctl" and not config.suspend_command:
        raise ValueError("suspend_command must not be empty")
