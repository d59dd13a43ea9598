from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

from gms.contracts import DriveClassification, DriveResult, PlaySummary
from gms.core import misuse_error

logger = logging.getLogger(__name__)

SUCCESSFUL_RESULTS = {DriveResult.TOUCHDOWN, DriveResult.FIELD_GOAL}
KEY_PLAY_YARDS = 10


@dataclass(slots=True)
class DriveStats:
    total_plays: int
    total_yards: int
    seconds_elapsed: int
    first_downs: int

    @property
    def efficiency(self) -> float:
        if self.total_plays == 0:
            return 0.0
        return self.total_yards / self.total_plays


@dataclass(slots=True)
class Drive:
    offense_team_id: str
    defense_team_id: str
    start_position: int
    start_clock: int
    quarter: int
    plays: Sequence[PlaySummary] = field(default_factory=list)
    end_position: int | None = None
    result: DriveResult | None = None
    finalized: bool = False

    def add_play(self, summary: PlaySummary) -> None:
        if self.finalized:
            raise misuse_error(
                "drive_tracker",
                "DRIVE_FINALIZED",
                "cannot add a play to a finalized drive",
                {"offense_team_id": self.offense_team_id, "result": self.result.value if self.result else None},
            )
        self.plays.append(summary)

    def finalize(self, result: DriveResult) -> None:
        if self.finalized:
            raise misuse_error(
                "drive_tracker",
                "DRIVE_ALREADY_FINALIZED",
                "drive can only be finalized once",
                {"offense_team_id": self.offense_team_id, "result": self.result.value if self.result else None},
            )
        if self.plays:
            last = self.plays[-1]
            self.end_position = max(0, min(100, last.field_position + last.yards_gained))
        else:
            self.end_position = self.start_position
        self.result = result
        self.plays = tuple(self.plays)
        self.finalized = True

    def stats(self) -> DriveStats:
        return DriveStats(
            total_plays=len(self.plays),
            total_yards=sum(p.yards_gained for p in self.plays),
            seconds_elapsed=sum(p.seconds_elapsed for p in self.plays),
            first_downs=sum(1 for p in self.plays if p.first_down),
        )

    @property
    def is_successful(self) -> bool:
        return self.result in SUCCESSFUL_RESULTS

    def classify(self) -> DriveClassification:
        stats = self.stats()
        if stats.efficiency > 8:
            return DriveClassification.EXPLOSIVE
        if stats.total_plays >= 8 and stats.efficiency > 4:
            return DriveClassification.METHODICAL
        if stats.total_plays <= 3 and self.is_successful:
            return DriveClassification.QUICK_STRIKE
        return DriveClassification.STALLED

    def longest_play(self) -> PlaySummary | None:
        if not self.plays:
            return None
        return max(self.plays, key=lambda p: p.yards_gained)

    def key_plays(self) -> list[PlaySummary]:
        return [p for p in self.plays if p.yards_gained >= KEY_PLAY_YARDS or p.first_down]


class DriveTracker:
    def __init__(self) -> None:
        self._active: Drive | None = None
        self._completed: list[Drive] = []

    @property
    def active(self) -> Drive | None:
        return self._active

    @property
    def drives(self) -> list[Drive]:
        return list(self._completed)

    def start(self, offense_team_id: str, defense_team_id: str, start_position: int, start_clock: int, quarter: int) -> Drive:
        if self._active is not None:
            raise misuse_error(
                "drive_tracker",
                "DRIVE_ALREADY_ACTIVE",
                "finalize the active drive before starting another",
                {"offense_team_id": self._active.offense_team_id},
            )
        self._active = Drive(
            offense_team_id=offense_team_id,
            defense_team_id=defense_team_id,
            start_position=start_position,
            start_clock=start_clock,
            quarter=quarter,
        )
        return self._active

    def add_play(self, summary: PlaySummary) -> None:
        if self._active is None:
            raise misuse_error("drive_tracker", "NO_ACTIVE_DRIVE", "no drive has been started", {})
        self._active.add_play(summary)

    def finalize(self, result: DriveResult) -> Drive:
        if self._active is None:
            raise misuse_error("drive_tracker", "NO_ACTIVE_DRIVE", "no drive has been started", {})
        drive = self._active
        drive.finalize(result)
        self._completed.append(drive)
        self._active = None
        stats = drive.stats()
        logger.info(
            "drive finalized offense=%s result=%s plays=%d yards=%d class=%s",
            drive.offense_team_id,
            result.value,
            stats.total_plays,
            stats.total_yards,
            drive.classify().value,
        )
        return drive
