from .config import (
    default_config_toml,
    ensure_default_config_file,
    load_config,
    validate_config,
)
from .event_log import EventLog, format_line
from .paths import event_log_path, get_config_path, get_data_dir, get_logs_dir

__all__ = [
    "default_config_toml",
    "ensure_default_config_file",
    "load_config",
    "validate_config",
    "EventLog",
    "format_line",
    "event_log_path",
    "get_config_path",
    "get_data_dir",
    "get_logs_dir",
]
