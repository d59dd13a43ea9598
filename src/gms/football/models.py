from __future__ import annotations

from dataclasses import dataclass, field

from gms.contracts import (
    DefensiveActionSet,
    FieldGoalResult,
    MatchSnapshot,
    OffensiveAction,
    PlayBreakdown,
    PlayOutcome,
)
from gms.football.drive import Drive


@dataclass(slots=True)
class PlayRecord:
    play_index: int
    quarter: int
    clock_seconds: int
    offense_team_id: str
    offense_action: OffensiveAction
    defense_action: DefensiveActionSet
    outcome: PlayOutcome
    breakdown: PlayBreakdown
    seconds_elapsed: int
    snapshot: MatchSnapshot
    conversion: FieldGoalResult | None = None

    @property
    def outcome_kind(self) -> str:
        return self.outcome.kind


@dataclass(slots=True)
class MatchResult:
    final_state: MatchSnapshot
    plays: list[PlayRecord]
    drives: list[Drive]
    home_team_id: str
    away_team_id: str
    home_score: int
    away_score: int
    action_stream: list[dict[str, str | int]] = field(default_factory=list)

    @property
    def winner(self) -> str | None:
        if self.home_score == self.away_score:
            return None
        return self.home_team_id if self.home_score > self.away_score else self.away_team_id
