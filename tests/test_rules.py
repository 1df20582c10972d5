from datetime import datetime
from unittest.mock import MagicMock

import pytest

from powerprofile.engine.rules import (
    check_network,
    cpu_blocks,
    current_hhmm,
    evaluate,
    idle_blocks,
    stream_blocks,
)
from powerprofile.engine.types import Config, Readings, TimeWindow, parse_hhmm, parse_window

HOUR_MS = 3_600_000

# 2024-01-01 is a Monday.
TUESDAY = (2024, 1, 2)
SATURDAY = (2024, 1, 6)
SUNDAY = (2024, 1, 7)


def _at(day: tuple[int, int, int], hour: int, minute: int = 0) -> datetime:
    return datetime(*day, hour, minute)


def _readings(**overrides) -> Readings:
    values = {
        "now": _at(TUESDAY, 8),
        "idle_ms": 4_000_000,
        "active_streams": 0,
        "network_blocks": False,
        "throughput_kbps": {"eth0": 1.0},
        "cpu_idle_percent": 99.0,
    }
    values.update(overrides)
    return Readings(**values)


def test_stream_blocks_when_no_streams_is_allowed():
    assert stream_blocks(0) is False


@pytest.mark.parametrize("count", [1, 2, 17])
def test_stream_blocks_with_active_streams(count):
    assert stream_blocks(count) is True


def test_stream_blocks_unknown_count_fails_safe():
    assert stream_blocks(None) is True


def test_current_hhmm_is_decimal():
    assert current_hhmm(_at(TUESDAY, 8, 9)) == 809
    assert current_hhmm(_at(TUESDAY, 0, 0)) == 0


def test_idle_blocks_weekday_window_with_enough_idle():
    assert idle_blocks(_at(TUESDAY, 8), 4_000_000, Config()) is False


def test_idle_blocks_threshold_is_inclusive():
    assert idle_blocks(_at(TUESDAY, 8), HOUR_MS, Config()) is False
    assert idle_blocks(_at(TUESDAY, 8), HOUR_MS - 1, Config()) is True


def test_idle_blocks_unknown_idle_fails_safe():
    assert idle_blocks(_at(TUESDAY, 8), None, Config()) is True


@pytest.mark.parametrize(
    "hour,minute,blocked",
    [
        (0, 0, False),
        (5, 0, False),
        (5, 1, True),
        (6, 59, True),
        (7, 0, False),
        (14, 30, False),
        (14, 31, True),
        (16, 0, True),
        (23, 59, True),
    ],
)
def test_idle_blocks_weekday_windows(hour, minute, blocked):
    assert idle_blocks(_at(TUESDAY, hour, minute), 10 * HOUR_MS, Config()) is blocked


@pytest.mark.parametrize(
    "day,hour,minute,blocked",
    [
        (SATURDAY, 22, 0, False),
        (SATURDAY, 23, 59, False),
        (SATURDAY, 21, 59, True),
        (SATURDAY, 12, 0, True),
        (SUNDAY, 0, 0, False),
        (SUNDAY, 7, 0, False),
        (SUNDAY, 7, 1, True),
        (SUNDAY, 8, 0, True),
    ],
)
def test_idle_blocks_weekend_windows(day, hour, minute, blocked):
    assert idle_blocks(_at(day, hour, minute), 10 * HOUR_MS, Config()) is blocked


def test_idle_blocks_no_windows_never_allows():
    config = Config(weekday_windows=(), weekend_windows=())
    assert idle_blocks(_at(TUESDAY, 8), 10 * HOUR_MS, config) is True


def test_check_network_stops_at_first_busy_interface():
    sample = MagicMock(side_effect=[50.0, 1.0])

    result = check_network(["eth0", "nordlynx"], sample, 20.0)

    assert result.blocks is True
    assert result.busy_interface == "eth0"
    assert result.samples == {"eth0": 50.0}
    assert sample.call_count == 1


def test_check_network_busy_second_interface():
    sample = MagicMock(side_effect=[1.0, 25.5, 0.0])

    result = check_network(["eth0", "nordlynx", "wlan0"], sample, 20.0)

    assert result.blocks is True
    assert result.busy_interface == "nordlynx"
    assert sample.call_count == 2


def test_check_network_all_quiet_allows():
    sample = MagicMock(side_effect=[20.0, 3.2])

    result = check_network(["eth0", "nordlynx"], sample, 20.0)

    assert result.blocks is False
    assert result.busy_interface is None
    assert result.samples == {"eth0": 20.0, "nordlynx": 3.2}


def test_check_network_unparseable_sample_counts_as_zero():
    sample = MagicMock(return_value=None)

    result = check_network(["eth0"], sample, 20.0)

    assert result.blocks is False
    assert result.samples == {"eth0": 0.0}


def test_check_network_without_interfaces_keeps_blocking_default():
    sample = MagicMock()

    result = check_network([], sample, 20.0)

    assert result.blocks is True
    sample.assert_not_called()


@pytest.mark.parametrize(
    "idle,blocked",
    [(95.0, False), (90.0, False), (89.9, True), (0.0, True), (None, True)],
)
def test_cpu_blocks(idle, blocked):
    assert cpu_blocks(idle, 10.0) is blocked


def test_evaluate_allows_when_all_gating_signals_clear():
    flags = evaluate(_readings(), Config())

    assert flags.stream is False
    assert flags.idle is False
    assert flags.network is False
    assert flags.allow is True


def test_evaluate_cpu_flag_is_informational():
    flags = evaluate(_readings(cpu_idle_percent=0.0), Config())

    assert flags.cpu is True
    assert flags.allow is True


@pytest.mark.parametrize(
    "overrides",
    [
        {"active_streams": 1},
        {"idle_ms": 500_000},
        {"now": _at(TUESDAY, 16)},
        {"network_blocks": True},
    ],
)
def test_evaluate_any_gating_flag_blocks(overrides):
    flags = evaluate(_readings(**overrides), Config())
    assert flags.allow is False


def test_flags_describe_uses_shell_convention():
    flags = evaluate(_readings(active_streams=2), Config())
    assert flags.describe() == "stream=1, idle=0, network=0, cpu=0"


def test_parse_hhmm_is_decimal():
    assert parse_hhmm("08:09") == 809
    assert parse_hhmm("0900") == 900
    assert parse_hhmm("23:59") == 2359


@pytest.mark.parametrize("text", ["24:00", "7:00", "12:60", "ab:cd", ""])
def test_parse_hhmm_rejects_invalid(text):
    with pytest.raises(ValueError):
        parse_hhmm(text)


def test_parse_window():
    assert parse_window("07:00-14:30") == TimeWindow(700, 1430)
    assert str(parse_window(" 00:00 - 05:00 ")) == "00:00-05:00"


@pytest.mark.parametrize("text", ["07:00", "14:30-07:00", "07:00-25:00"])
def test_parse_window_rejects_invalid(text):
    with pytest.raises(ValueError):
        parse_window(text)


def test_windows_for_day_class():
    config = Config()
    assert config.windows_for(1) == config.weekday_windows
    assert config.windows_for(5) == config.weekday_windows
    assert config.windows_for(6) == config.weekend_windows
    assert config.windows_for(7) == config.weekend_windows
