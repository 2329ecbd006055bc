from datetime import datetime, timezone

from message_board.utils.identity import (
    MonotonicTimestamps,
    format_timestamp,
    new_id,
    utc_now_iso,
)


def test_new_id_is_unique_opaque_string() -> None:
    ids = {new_id() for _ in range(100)}

    assert len(ids) == 100
    assert all(isinstance(i, str) and i for i in ids)


def test_format_timestamp_is_fixed_width_utc() -> None:
    moment = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)

    assert format_timestamp(moment) == "2024-01-02T03:04:05.000000Z"


def test_monotonic_timestamps_never_repeat_under_frozen_clock() -> None:
    frozen = datetime(2024, 1, 1, tzinfo=timezone.utc)
    timestamps = MonotonicTimestamps(clock=lambda: frozen)

    issued = [timestamps.now_iso() for _ in range(3)]

    assert issued == [
        "2024-01-01T00:00:00.000000Z",
        "2024-01-01T00:00:00.000001Z",
        "2024-01-01T00:00:00.000002Z",
    ]


def test_monotonic_timestamps_survive_clock_going_backwards() -> None:
    readings = iter(
        [
            datetime(2024, 1, 1, 0, 0, 10, tzinfo=timezone.utc),
            datetime(2024, 1, 1, 0, 0, 5, tzinfo=timezone.utc),
        ]
    )
    timestamps = MonotonicTimestamps(clock=lambda: next(readings))

    first = timestamps.now_iso()
    second = timestamps.now_iso()

    assert second > first


def test_process_timestamps_sort_in_issue_order() -> None:
    issued = [utc_now_iso() for _ in range(50)]

    assert issued == sorted(issued)
    assert len(set(issued)) == len(issued)
