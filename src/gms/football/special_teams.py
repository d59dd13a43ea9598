from __future__ import annotations

import logging

from gms.contracts import (
    AttemptType,
    ConversionType,
    FieldGoalAction,
    FieldGoalResult,
    FieldGoalType,
    KickoffAction,
    KickoffResult,
    KickoffResultType,
    KickoffType,
    KneelResult,
    PlayBreakdown,
    PlayContext,
    PlayKind,
    PuntAction,
    PuntResult,
    PuntResultType,
    PuntType,
    RandomSource,
    SituationalAction,
    SituationalType,
    SpikeResult,
)
from gms.football.ratings import clamp, clamp_probability, round_half_up

logger = logging.getLogger(__name__)

KICKOFF_BASE_DISTANCE = 45.0
KICKOFF_BASE_STRENGTH = 80.0
KICKOFF_TOUCHBACK_DISTANCE = 65.0
KICKOFF_RETURN_CAP = 35.0
KICKOFF_START_CAP = 50
ONSIDE_DISTANCE = 15.0
SQUIB_DISTANCE = 35.0
PUNT_TOUCHBACK_NET = 50
FAIR_CATCH_PROBABILITY = 0.1
EXTRA_POINT_DISTANCE = 20
TWO_POINT_DISTANCE = 2


def kickoff_distance(kicker_strength: float) -> float:
    return KICKOFF_BASE_DISTANCE + (kicker_strength - KICKOFF_BASE_STRENGTH) / 5


def field_goal_probability(distance: int) -> float:
    return clamp_probability(0.95 - (distance - 20) * 0.02, low=0.3, high=0.99)


def resolve_kickoff(
    action: KickoffAction,
    random_source: RandomSource,
    *,
    touchback_position: int = 25,
) -> tuple[KickoffResult, PlayBreakdown]:
    kicking, returning = action.kicking, action.returning
    breakdown = PlayBreakdown(
        play_kind=PlayKind.KICKOFF,
        offense_rating=kicking.kicker_strength,
        defense_rating=returning.return_explosiveness,
        key_factors=[f"kickoff {action.kickoff_type.value}"],
    )

    if action.kickoff_type == KickoffType.ONSIDE:
        recovery = clamp_probability(0.3 + kicking.surprise_factor / 200)
        breakdown.probabilities["onside_recovery"] = recovery
        landing = action.kickoff_spot + int(ONSIDE_DISTANCE)
        if random_source.rand() < recovery:
            result = KickoffResult(
                kickoff_type=action.kickoff_type,
                result_type=KickoffResultType.ONSIDE_RECOVERED,
                kick_distance=ONSIDE_DISTANCE,
                return_yards=0,
                start_position=landing,
            )
        else:
            result = KickoffResult(
                kickoff_type=action.kickoff_type,
                result_type=KickoffResultType.ONSIDE_LOST,
                kick_distance=ONSIDE_DISTANCE,
                return_yards=0,
                start_position=100 - landing,
            )
        return result, breakdown

    if action.kickoff_type == KickoffType.TOUCHBACK:
        distance = KICKOFF_TOUCHBACK_DISTANCE
        return_base = 0.0
    elif action.kickoff_type == KickoffType.SQUIB:
        distance = SQUIB_DISTANCE
        return_base = 8 + (returning.return_explosiveness - 70) / 15
    else:
        distance = kickoff_distance(kicking.kicker_strength)
        return_base = 15 + (returning.return_explosiveness - 70) / 10 - (kicking.coverage_speed - 70) / 15

    if distance >= KICKOFF_TOUCHBACK_DISTANCE or action.kickoff_spot + distance >= 100:
        result = KickoffResult(
            kickoff_type=action.kickoff_type,
            result_type=KickoffResultType.TOUCHBACK,
            kick_distance=distance,
            return_yards=0,
            start_position=touchback_position,
        )
        return result, breakdown

    jitter = random_source.rand() * 10 - 5
    return_yards = round_half_up(clamp(return_base + jitter, 0, KICKOFF_RETURN_CAP))
    breakdown.jitter = round_half_up(jitter)
    catch_spot = 100 - (action.kickoff_spot + distance)
    start = int(clamp(round_half_up(catch_spot + return_yards), 1, KICKOFF_START_CAP))
    result = KickoffResult(
        kickoff_type=action.kickoff_type,
        result_type=KickoffResultType.RETURN,
        kick_distance=distance,
        return_yards=return_yards,
        start_position=start,
    )
    return result, breakdown


def resolve_punt(action: PuntAction, context: PlayContext, random_source: RandomSource) -> tuple[PuntResult, PlayBreakdown]:
    kicking, returning = action.kicking, action.returning
    breakdown = PlayBreakdown(
        play_kind=PlayKind.PUNT,
        offense_rating=kicking.punter_strength,
        defense_rating=returning.return_explosiveness,
        key_factors=[f"punt {action.punt_type.value}"],
    )

    if action.punt_type == PuntType.FAKE:
        success = clamp_probability(kicking.surprise_factor / 100)
        breakdown.probabilities["fake_success"] = success
        if random_source.rand() < success:
            gained = round_half_up(5 + random_source.rand() * 10)
            result_type = PuntResultType.FAKE_CONVERTED
        else:
            gained = -2
            result_type = PuntResultType.FAKE_FAILED
        return PuntResult(action.punt_type, result_type, punt_distance=0, return_yards=0, net_yards=gained), breakdown

    if action.punt_type == PuntType.COFFIN_CORNER:
        distance = 30 + (kicking.punter_strength - 70) / 6
        return_yards = max(0.0, 3 + (returning.return_explosiveness - 70) / 20)
    else:
        distance = 35 + (kicking.punter_strength - 70) / 4
        return_yards = max(0.0, 8 + (returning.return_explosiveness - 70) / 12)
    return result_for_punt(action.punt_type, distance, return_yards, context.field_position, random_source), breakdown


def result_for_punt(
    punt_type: PuntType,
    distance: float,
    return_yards: float,
    field_position: int,
    random_source: RandomSource,
) -> PuntResult:
    net = round_half_up(distance - return_yards)
    if net >= PUNT_TOUCHBACK_NET or field_position + distance >= 100:
        return PuntResult(punt_type, PuntResultType.TOUCHBACK, punt_distance=distance, return_yards=0, net_yards=round_half_up(distance))
    if random_source.rand() < FAIR_CATCH_PROBABILITY:
        return PuntResult(punt_type, PuntResultType.FAIR_CATCH, punt_distance=distance, return_yards=0, net_yards=round_half_up(distance))
    return PuntResult(punt_type, PuntResultType.RETURN, punt_distance=distance, return_yards=return_yards, net_yards=net)


def resolve_field_goal(
    action: FieldGoalAction,
    context: PlayContext,
    random_source: RandomSource,
) -> tuple[FieldGoalResult, PlayBreakdown]:
    breakdown = PlayBreakdown(
        play_kind=PlayKind.FIELD_GOAL,
        offense_rating=action.kicking.kicker_accuracy,
        defense_rating=action.returning.return_explosiveness,
        key_factors=[f"{action.field_goal_type.value} field goal from {action.distance}"],
    )
    if action.field_goal_type == FieldGoalType.FAKE:
        probability = clamp_probability(action.kicking.surprise_factor / 100)
        breakdown.probabilities["fake_success"] = probability
        made = random_source.rand() < probability
        yards = max(context.distance, round_half_up(5 + random_source.rand() * 10)) if made else 0
        return FieldGoalResult(AttemptType.FAKE_FIELD_GOAL, made, action.distance, probability, yards=yards), breakdown

    probability = field_goal_probability(action.distance)
    breakdown.probabilities["field_goal"] = probability
    made = random_source.rand() < probability
    return FieldGoalResult(AttemptType.FIELD_GOAL, made, action.distance, probability), breakdown


def resolve_conversion(
    conversion: ConversionType,
    random_source: RandomSource,
    *,
    extra_point_probability: float,
    two_point_probability: float,
) -> FieldGoalResult:
    if conversion == ConversionType.TWO_POINT:
        probability = clamp_probability(two_point_probability)
        return FieldGoalResult(AttemptType.TWO_POINT, random_source.rand() < probability, TWO_POINT_DISTANCE, probability)
    probability = clamp_probability(extra_point_probability)
    return FieldGoalResult(AttemptType.EXTRA_POINT, random_source.rand() < probability, EXTRA_POINT_DISTANCE, probability)


def resolve_situational(
    action: SituationalAction,
    context: PlayContext,
    random_source: RandomSource,
) -> tuple[KneelResult | SpikeResult | PuntResult, PlayBreakdown]:
    breakdown = PlayBreakdown(play_kind=PlayKind.SITUATIONAL, key_factors=[action.situational_type.value])
    if action.situational_type == SituationalType.KNEEL:
        return KneelResult(), breakdown
    if action.situational_type == SituationalType.SPIKE:
        return SpikeResult(), breakdown
    # safety kick behaves as a punt without unit ratings
    distance = float(35 + random_source.randint(0, 14))
    return_yards = float(random_source.randint(0, 9))
    logger.debug("safety kick distance=%s return=%s", distance, return_yards)
    return result_for_punt(PuntType.NORMAL, distance, return_yards, context.field_position, random_source), breakdown
