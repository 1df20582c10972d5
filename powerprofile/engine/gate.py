from datetime import datetime

from .rules import evaluate
from .types import Config, Flags, Outcome


def wait_phrase(timeout_seconds: int) -> str:
    minutes = max(1, round(timeout_seconds / 60))
    return f"{minutes} minute" if minutes == 1 else f"{minutes} minutes"


def prompt_text(timeout_seconds: int) -> str:
    return (
        f"The system will suspend in {wait_phrase(timeout_seconds)} due to inactivity. "
        "Click Cancel to prevent this."
    )


def commit_suspend(provider, config: Config, log) -> Outcome:
    """Re-check idle time after the gate and suspend if still idle.

    Only idle time is re-read; the other signals are not evaluated again.
    """

    idle_ms = provider.get_idle_ms()
    log.append(f"Re-checked idle time: {idle_ms if idle_ms is not None else 'unknown'} ms")

    if idle_ms is None or idle_ms < config.idle_threshold_ms:
        log.append(
            "Idle time not sufficient for suspension after delay (insufficient idle time)."
        )
        return Outcome.INSUFFICIENT_IDLE

    log.append("System suspending due to inactivity.")
    if not provider.suspend():
        error = provider.suspend_error()
        log.append(f"Failed to suspend system. ({error})" if error else "Failed to suspend system.")
        return Outcome.SUSPEND_FAILED
    return Outcome.SUSPENDED


def run_policy(provider, config: Config, log, now: datetime | None = None) -> tuple[Outcome, Flags]:
    """One full invocation: gather, evaluate, gate, re-check, suspend.

    Args:
        provider: Signal source and action sink (see LinuxProvider).
        config: Runtime configuration.
        log: Event log with an ``append(message)`` method.
        now: Wall clock override for the schedule rule.

    Returns:
        (outcome, flags) for the run.
    """

    readings = provider.get_readings(now)
    flags = evaluate(readings, config)

    if not flags.allow:
        log.append(f"System not suspended. {flags.describe()}")
        return Outcome.BLOCKED, flags

    timeout = config.confirm_timeout_seconds
    log.append(f"Preparing to suspend the system. Waiting {wait_phrase(timeout)}.")

    if not provider.confirm(prompt_text(timeout), timeout):
        log.append("User canceled the suspension.")
        return Outcome.CANCELED, flags

    return commit_suspend(provider, config, log), flags
