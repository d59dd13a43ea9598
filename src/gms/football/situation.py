from __future__ import annotations

from typing import Iterable

from gms.contracts import (
    FirstDown,
    Momentum,
    OffensiveGain,
    PlayContext,
    PlayKind,
    PlayOutcome,
    PressureLevel,
    SituationalModifiers,
    Touchdown,
    Turnover,
)
from gms.football.tables import MOMENTUM_BONUS, MOMENTUM_IMPACT, PRESSURE_MODIFIER, WEATHER_PENALTY, classify_gain

TWO_MINUTE_WARNING_SECONDS = 120
RED_ZONE = 80


def situational_modifiers(context: PlayContext, play_kind: PlayKind, *, final_quarter: int = 4) -> SituationalModifiers:
    modifiers = SituationalModifiers()

    if context.down == 1:
        modifiers.down_distance = 5
    elif context.down == 3 and context.distance >= 8:
        modifiers.down_distance = -10
    elif context.down == 4:
        modifiers.down_distance = -15

    if context.field_position >= RED_ZONE:
        modifiers.field_position = -5
    elif context.field_position <= 20:
        modifiers.field_position = -3

    if context.quarter >= final_quarter:
        if abs(context.score_differential) <= 7:
            modifiers.time_score = 5
        elif context.score_differential > 14:
            modifiers.time_score = -5

    modifiers.weather = WEATHER_PENALTY[context.weather].get(play_kind, 0)
    modifiers.pressure = PRESSURE_MODIFIER[context.pressure]
    modifiers.momentum = MOMENTUM_BONUS[context.momentum]
    return modifiers


def derive_pressure(
    *,
    quarter: int,
    clock_seconds: int,
    down: int,
    field_position: int,
    score_differential: int,
    final_quarter: int = 4,
) -> PressureLevel:
    level = 0
    if quarter >= final_quarter:
        level += 2
    if quarter in (final_quarter // 2, final_quarter) and clock_seconds <= TWO_MINUTE_WARNING_SECONDS:
        level += 2
    if down >= 3:
        level += 1
    if down == 4:
        level += 2
    if field_position >= RED_ZONE:
        level += 1
    if abs(score_differential) <= 7:
        level += 1

    if level >= 6:
        return PressureLevel.EXTREME
    if level >= 4:
        return PressureLevel.HIGH
    if level >= 2:
        return PressureLevel.MEDIUM
    return PressureLevel.LOW


def play_impact(outcome: PlayOutcome) -> int:
    if isinstance(outcome, Touchdown):
        return MOMENTUM_IMPACT["touchdown"]
    if isinstance(outcome, Turnover):
        return MOMENTUM_IMPACT["turnover"]
    if isinstance(outcome, FirstDown):
        return MOMENTUM_IMPACT["first_down"] + MOMENTUM_IMPACT.get(classify_gain(outcome.yards), 0)
    if isinstance(outcome, OffensiveGain):
        return MOMENTUM_IMPACT.get(outcome.gain_type, 0)
    return 0


def momentum_for(offense_team_id: str, recent: Iterable[tuple[str, int]]) -> Momentum:
    """Collapse recent (team, impact) pairs into a momentum tag for the offense."""
    trend = 0
    for team_id, impact in recent:
        trend += impact if team_id == offense_team_id else -impact
    if trend >= 6:
        return Momentum.HEAVILY_OFFENSE
    if trend >= 3:
        return Momentum.OFFENSE
    if trend <= -6:
        return Momentum.HEAVILY_DEFENSE
    if trend <= -3:
        return Momentum.DEFENSE
    return Momentum.NEUTRAL
