from powerprofile.engine.rules import current_hhmm, evaluate
from powerprofile.providers.linux import LinuxProvider
from powerprofile.store import load_config


def _flag(blocks: bool) -> str:
    return "block" if blocks else "allow"


def main(provider=None) -> int:
    """Run debug CLI - prints one set of readings + flags, never suspends."""

    config, config_meta = load_config()
    provider = provider or LinuxProvider(config)

    print("powerprofile debug")
    print(f"Config: {config_meta.get('path')}")
    if config_meta.get("created"):
        print("Config created with defaults")
    elif config_meta.get("loaded"):
        print("Config loaded")
    if config_meta.get("error"):
        print(f"Config error: {config_meta.get('error')}")
    print("-" * 50)

    readings = provider.get_readings()
    flags = evaluate(readings, config)

    windows = config.windows_for(readings.now.isoweekday())

    lines: list[str] = []
    lines.append(f"timestamp: {readings.now.isoformat(timespec='seconds')}")
    lines.append(
        f"day: {readings.now.isoweekday()} hhmm: {current_hhmm(readings.now):04d} "
        f"windows: {', '.join(str(w) for w in windows) or '-'}"
    )
    lines.append(f"idle_ms: {readings.idle_ms} (threshold {config.idle_threshold_ms})")
    lines.append(f"active_streams: {readings.active_streams}")
    for interface in config.interfaces:
        speed = readings.throughput_kbps.get(interface)
        shown = f"{speed:g} KB/s" if speed is not None else "not sampled"
        lines.append(f"network[{interface}]: {shown} (threshold {config.network_threshold_kbps:g})")
    lines.append(
        f"cpu_idle: {readings.cpu_idle_percent:g}% (busy threshold {config.cpu_threshold_percent:g}%)"
    )
    lines.append("-" * 50)
    lines.append(f"stream: {_flag(flags.stream)}")
    lines.append(f"idle: {_flag(flags.idle)}")
    lines.append(f"network: {_flag(flags.network)}")
    lines.append(f"cpu: {_flag(flags.cpu)} (informational)")
    lines.append(f"decision: {'suspend' if flags.allow else 'stay awake'}")

    print("\n".join(lines))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
