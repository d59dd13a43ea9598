from __future__ import annotations

from collections import deque
from typing import Any, Sequence

from gms.contracts import (
    DefensiveActionSet,
    FieldGoalType,
    FourthDownDecision,
    KickoffType,
    OffensiveAction,
    PlayContext,
    PuntType,
    RandomSource,
    RunAction,
    RunType,
)


class ScriptedRandom(RandomSource):
    """Replays queued draws, then falls back to a fixed value.

    `spawn` returns the same instance so every substream shares one script.
    """

    def __init__(self, draws: Sequence[float] = (), default: float = 0.5, ints: Sequence[int] = ()) -> None:
        self._draws = deque(draws)
        self._ints = deque(ints)
        self._default = default

    def rand(self) -> float:
        if self._draws:
            return self._draws.popleft()
        return self._default

    def randint(self, a: int, b: int) -> int:
        if self._ints:
            return self._ints.popleft()
        return a

    def choice(self, items: Sequence[Any]) -> Any:
        return items[0]

    def shuffle(self, items: list[Any]) -> None:
        return None

    def spawn(self, substream_id: str) -> RandomSource:
        return self


class ScriptedActions:
    """Action provider that plays back a fixed list of calls."""

    def __init__(
        self,
        plays: Sequence[OffensiveAction] = (),
        *,
        default: OffensiveAction | None = None,
        fourth_down: FourthDownDecision = FourthDownDecision.GO,
        kickoff: KickoffType = KickoffType.NORMAL,
        punt: PuntType = PuntType.NORMAL,
        field_goal: FieldGoalType = FieldGoalType.NORMAL,
        defense: DefensiveActionSet | None = None,
    ) -> None:
        self._plays = deque(plays)
        self._default = default or RunAction(RunType.POWER)
        self._fourth_down = fourth_down
        self._kickoff = kickoff
        self._punt = punt
        self._field_goal = field_goal
        self._defense = defense or DefensiveActionSet()
        self.offensive_calls = 0
        self.fourth_down_calls = 0

    def offensive_action(self, context: PlayContext, random_source: RandomSource) -> OffensiveAction:
        self.offensive_calls += 1
        if self._plays:
            return self._plays.popleft()
        return self._default

    def defensive_action(self, context: PlayContext, random_source: RandomSource) -> DefensiveActionSet:
        return self._defense

    def fourth_down_decision(self, context: PlayContext, random_source: RandomSource) -> FourthDownDecision:
        self.fourth_down_calls += 1
        return self._fourth_down

    def kickoff_type(self, context: PlayContext, random_source: RandomSource) -> KickoffType:
        return self._kickoff

    def punt_type(self, context: PlayContext, random_source: RandomSource) -> PuntType:
        return self._punt

    def field_goal_type(self, context: PlayContext, random_source: RandomSource) -> FieldGoalType:
        return self._field_goal


def make_context(
    *,
    down: int = 1,
    distance: int = 10,
    field_position: int = 25,
    clock_seconds: int = 900,
    quarter: int = 1,
    score_differential: int = 0,
    **overrides: Any,
) -> PlayContext:
    return PlayContext(
        down=down,
        distance=distance,
        field_position=field_position,
        clock_seconds=clock_seconds,
        quarter=quarter,
        score_differential=score_differential,
        offense_team_id=overrides.pop("offense_team_id", "HOME"),
        defense_team_id=overrides.pop("defense_team_id", "AWAY"),
        **overrides,
    )
