import sys

from powerprofile.engine.gate import run_policy
from powerprofile.providers.linux import LinuxProvider
from powerprofile.store import EventLog, load_config, validate_config


def main(provider=None, log: EventLog | None = None) -> int:
    """Run one policy check (the cron / timer entry point)."""

    config, config_meta = load_config()
    if config_meta.get("error"):
        print(f"Config error: {config_meta.get('error')}", file=sys.stderr)

    try:
        validate_config(config)
    except ValueError as e:
        print(f"Invalid config {config_meta.get('path')}: {e}", file=sys.stderr)
        return 1

    provider = provider or LinuxProvider(config)
    log = log or EventLog()

    outcome, flags = run_policy(provider, config, log)
    print(f"{outcome.value}: {flags.describe()}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
