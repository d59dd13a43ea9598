from __future__ import annotations

import logging
import math
from dataclasses import asdict

from gms.contracts import (
    ConversionType,
    DefensiveActionSet,
    DefensiveRatings,
    FieldGoalAction,
    FieldGoalResult,
    FirstDown,
    GainType,
    IncompletePass,
    KickoffAction,
    MatchRules,
    OffensiveAction,
    OffensiveGain,
    OffensiveRatings,
    PassAction,
    PlayBreakdown,
    PlayContext,
    PlayOutcome,
    PuntAction,
    RandomSource,
    RunAction,
    SituationalAction,
    TackleForLoss,
    Touchdown,
    Turnover,
    TurnoverKind,
    ValidationError,
    ValidationIssue,
)
from gms.core import ConfigurationError, build_forensic_artifact, default_match_rules, gameplay_random
from gms.football.ratings import CompositeRatingEvaluator, clamp, clamp_probability, round_half_up
from gms.football.situation import situational_modifiers
from gms.football.special_teams import (
    resolve_conversion,
    resolve_field_goal,
    resolve_kickoff,
    resolve_punt,
    resolve_situational,
)
from gms.football.tables import PRESSURE_EXECUTION, PRESSURE_FUMBLE, RISK_INTERCEPTION, classify_gain
from gms.football.validation import PlayInputValidator

logger = logging.getLogger(__name__)

RUN_YARDS_RANGE = (-5.0, 25.0)
PASS_YARDS_RANGE = (1.0, 40.0)
COMPLETION_RANGE = (0.3, 0.9)
JITTER_SPAN = 8
INTERCEPTION_RETURN_SPAN = 15
BREAKAWAY_RANGE = (0.0, 0.15)
FUMBLE_RANGE = (0.002, 0.08)


class PlayResolver:
    """Turns one situation plus both calls into a single outcome.

    Every random draw comes from the injected source, in a fixed order per
    branch, so a seeded source replays the same outcome for the same inputs.
    """

    def __init__(
        self,
        random_source: RandomSource | None = None,
        *,
        rules: MatchRules | None = None,
        validator: PlayInputValidator | None = None,
    ) -> None:
        self._random_source = random_source or gameplay_random()
        self._rules = rules or default_match_rules()
        self._validator = validator or PlayInputValidator()
        self._ratings = CompositeRatingEvaluator()

    def resolve(
        self,
        context: PlayContext,
        offense_action: OffensiveAction,
        defense_action: DefensiveActionSet,
        offense_ratings: OffensiveRatings | None = None,
        defense_ratings: DefensiveRatings | None = None,
        *,
        random_source: RandomSource | None = None,
    ) -> tuple[PlayOutcome, PlayBreakdown]:
        warnings = self._validate(context, offense_action, offense_ratings, defense_ratings)
        rand = random_source or self._random_source

        if isinstance(offense_action, KickoffAction):
            outcome, breakdown = resolve_kickoff(
                offense_action,
                rand,
                touchback_position=self._rules.kickoff_touchback_position,
            )
        elif isinstance(offense_action, PuntAction):
            outcome, breakdown = resolve_punt(offense_action, context, rand)
        elif isinstance(offense_action, FieldGoalAction):
            outcome, breakdown = resolve_field_goal(offense_action, context, rand)
        elif isinstance(offense_action, SituationalAction):
            outcome, breakdown = resolve_situational(offense_action, context, rand)
        else:
            outcome, breakdown = self._resolve_scrimmage(
                context, offense_action, defense_action, offense_ratings, defense_ratings, rand
            )
        logger.debug(
            "resolved %s at down=%s distance=%s position=%s -> %s",
            offense_action.kind.value,
            context.down,
            context.distance,
            context.field_position,
            outcome.kind,
        )
        for issue in warnings:
            logger.debug("play input warning %s at %s: %s", issue.code, issue.field_path, issue.message)
            breakdown.key_factors.append(f"{issue.code} {issue.field_path}")
        return outcome, breakdown

    def resolve_conversion(self, conversion: ConversionType, random_source: RandomSource | None = None) -> FieldGoalResult:
        return resolve_conversion(
            conversion,
            random_source or self._random_source,
            extra_point_probability=self._rules.extra_point_probability,
            two_point_probability=self._rules.two_point_probability,
        )

    def _validate(
        self,
        context: PlayContext,
        action: OffensiveAction,
        offense_ratings: OffensiveRatings | None,
        defense_ratings: DefensiveRatings | None,
    ) -> list[ValidationIssue]:
        try:
            result = self._validator.validate_play(context, action, offense_ratings, defense_ratings, entity_id=context.offense_team_id)
            return result.issues
        except ValidationError as exc:
            raise ConfigurationError(
                build_forensic_artifact(
                    engine_scope="play_resolver",
                    error_code="PLAY_CONFIGURATION_INVALID",
                    message="play request failed pre-resolution validation",
                    state_snapshot=asdict(context),
                    context={"issues": [asdict(issue) for issue in exc.issues], "action": type(action).__name__},
                    identifiers={"offense_team_id": context.offense_team_id, "defense_team_id": context.defense_team_id},
                    causal_fragment=["pre_resolution_gate"],
                )
            ) from exc

    def _resolve_scrimmage(
        self,
        context: PlayContext,
        action: RunAction | PassAction,
        defense_action: DefensiveActionSet,
        offense: OffensiveRatings,
        defense: DefensiveRatings,
        rand: RandomSource,
    ) -> tuple[PlayOutcome, PlayBreakdown]:
        matchup = self._ratings.evaluate(action, defense_action, offense, defense)
        modifiers = situational_modifiers(context, action.kind, final_quarter=self._rules.quarters)

        off_shift, def_shift = PRESSURE_EXECUTION[context.pressure]
        offense_execution = int(clamp(round_half_up(matchup.offense_rating + off_shift), 0, 100))
        defense_execution = int(clamp(round_half_up(matchup.defense_rating + def_shift), 0, 100))
        jitter = round_half_up((rand.rand() - 0.5) * JITTER_SPAN)
        base = matchup.advantage + modifiers.total + (offense_execution - defense_execution) / 3 + jitter

        breakdown = PlayBreakdown(
            play_kind=action.kind,
            offense_rating=matchup.offense_rating,
            defense_rating=matchup.defense_rating,
            advantage=matchup.advantage,
            modifiers=modifiers,
            offense_execution=offense_execution,
            defense_execution=defense_execution,
            jitter=jitter,
            base_result=round(base, 4),
            key_factors=list(matchup.key_factors),
        )

        if isinstance(action, RunAction):
            raw_yards = clamp(3 + base / 6, *RUN_YARDS_RANGE)
        else:
            completion = clamp_probability(0.6 + base / 80, *COMPLETION_RANGE)
            breakdown.probabilities["completion"] = completion
            if rand.rand() >= completion:
                return self._resolve_incompletion(action, base, breakdown, rand)
            raw_yards = clamp(action.expected_yards + base / 5, *PASS_YARDS_RANGE)

        raw_yards += self._breakaway_yards(offense, base, raw_yards, breakdown, rand)
        yards = round_half_up(raw_yards)

        fumble = clamp_probability(
            0.01
            + max(0, yards) * 0.0005
            + PRESSURE_FUMBLE[context.pressure]
            + (defense.tackles_for_loss - offense.ball_security) / 2000,
            *FUMBLE_RANGE,
        )
        breakdown.probabilities["fumble"] = fumble
        if rand.rand() < fumble:
            breakdown.key_factors.append("ball came loose")
            return Turnover(TurnoverKind.FUMBLE, yards=yards, return_yards=0), breakdown

        return self._classify(context, action, yards), breakdown

    def _resolve_incompletion(
        self,
        action: PassAction,
        base: float,
        breakdown: PlayBreakdown,
        rand: RandomSource,
    ) -> tuple[PlayOutcome, PlayBreakdown]:
        interception = clamp_probability(max(0.02, 0.05 - base / 200) + RISK_INTERCEPTION[action.risk])
        breakdown.probabilities["interception"] = interception
        if rand.rand() < interception:
            return_yards = int(math.floor(rand.rand() * INTERCEPTION_RETURN_SPAN))
            return Turnover(TurnoverKind.INTERCEPTION, yards=0, return_yards=return_yards), breakdown
        return IncompletePass(), breakdown

    def _breakaway_yards(
        self,
        offense: OffensiveRatings,
        base: float,
        yards: float,
        breakdown: PlayBreakdown,
        rand: RandomSource,
    ) -> float:
        if yards <= 0:
            return 0.0
        chance = clamp_probability(0.02 + (offense.breakaway_ability - 70) / 500 + base / 500, *BREAKAWAY_RANGE)
        breakdown.probabilities["breakaway"] = chance
        if rand.rand() >= chance:
            return 0.0
        breakdown.key_factors.append("broke into the open field")
        return float(8 + rand.randint(0, 17))

    def _classify(self, context: PlayContext, action: RunAction | PassAction, yards: int) -> PlayOutcome:
        if context.field_position + yards >= 100:
            return Touchdown(yards=yards, play_kind=action.kind)
        if yards >= context.distance:
            return FirstDown(yards=yards, play_kind=action.kind)
        gain_type = classify_gain(yards)
        if gain_type == GainType.LOSS:
            return TackleForLoss(yards=yards, play_kind=action.kind)
        return OffensiveGain(yards=yards, gain_type=gain_type, play_kind=action.kind)
