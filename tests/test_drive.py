from __future__ import annotations

import pytest

from gms.contracts import DriveClassification, DriveResult, PlaySummary
from gms.core import MisuseError
from gms.football import DriveTracker


def _drive_with(plays, result=DriveResult.PUNT, start=20):
    tracker = DriveTracker()
    tracker.start("HOME", "AWAY", start, 900, 1)
    for summary in plays:
        tracker.add_play(summary)
    return tracker.finalize(result)


def test_finalize_sets_end_position_from_last_play():
    drive = _drive_with([PlaySummary(20, 6, 35, False), PlaySummary(26, 7, 35, True)])
    assert drive.finalized
    assert drive.end_position == 33
    stats = drive.stats()
    assert (stats.total_plays, stats.total_yards, stats.seconds_elapsed, stats.first_downs) == (2, 13, 70, 1)
    assert stats.efficiency == pytest.approx(6.5)


def test_empty_drive_ends_where_it_started():
    drive = _drive_with([], result=DriveResult.END_OF_HALF, start=40)
    assert drive.end_position == 40
    assert drive.stats().efficiency == 0
    assert drive.longest_play() is None


def test_finalized_drive_rejects_new_plays():
    drive = _drive_with([PlaySummary(20, 3, 35, False)])
    with pytest.raises(MisuseError) as ex:
        drive.add_play(PlaySummary(23, 4, 35, False))
    assert ex.value.error_code == "DRIVE_FINALIZED"
    with pytest.raises(MisuseError):
        drive.finalize(DriveResult.TURNOVER)
    assert len(drive.plays) == 1


def test_tracker_requires_an_active_drive():
    tracker = DriveTracker()
    with pytest.raises(MisuseError) as ex:
        tracker.add_play(PlaySummary(20, 3, 35, False))
    assert ex.value.error_code == "NO_ACTIVE_DRIVE"
    tracker.start("HOME", "AWAY", 25, 900, 1)
    with pytest.raises(MisuseError) as ex:
        tracker.start("AWAY", "HOME", 25, 900, 1)
    assert ex.value.error_code == "DRIVE_ALREADY_ACTIVE"


def test_explosive_only_above_eight_yards_per_play():
    assert _drive_with([PlaySummary(20, 9, 35, False)]).classify() == DriveClassification.EXPLOSIVE
    two_eights = [PlaySummary(20, 8, 35, False), PlaySummary(28, 8, 35, False)]
    assert _drive_with(two_eights).classify() == DriveClassification.STALLED


def test_methodical_and_quick_strike():
    long_drive = [PlaySummary(20 + 5 * i, 5, 35, i % 2 == 1) for i in range(8)]
    assert _drive_with(long_drive, DriveResult.FIELD_GOAL).classify() == DriveClassification.METHODICAL
    short_score = [PlaySummary(20 + 5 * i, 5, 35, False) for i in range(3)]
    assert _drive_with(short_score, DriveResult.TOUCHDOWN).classify() == DriveClassification.QUICK_STRIKE
    assert _drive_with(short_score, DriveResult.PUNT).classify() == DriveClassification.STALLED


def test_key_plays_and_longest_play():
    plays = [PlaySummary(20, 3, 35, False), PlaySummary(23, 12, 35, True), PlaySummary(35, 2, 35, True)]
    drive = _drive_with(plays, DriveResult.TOUCHDOWN)
    assert drive.longest_play().yards_gained == 12
    assert [p.yards_gained for p in drive.key_plays()] == [12, 2]
    assert drive.is_successful
