from __future__ import annotations

from dataclasses import dataclass

from gms.contracts import (
    ActionProvider,
    Coverage,
    DefensiveActionSet,
    DefensiveFormation,
    FieldGoalType,
    FourthDownDecision,
    KickoffType,
    OffensiveAction,
    PassAction,
    PassType,
    PlayContext,
    PuntType,
    RandomSource,
    RiskLevel,
    RunAction,
    RunType,
    SituationalAction,
    SituationalType,
)

MAX_FIELD_GOAL_DISTANCE = 55
FIELD_GOAL_RANGE_START = 65
PUNT_FAKE_WINDOW = (33, 55)
TWO_MINUTES = 120

RUN_PLAYBOOK: dict[str, list[RunType]] = {
    "short_yardage": [RunType.POWER, RunType.ISO, RunType.DIVE],
    "third_and_long": [RunType.DRAW, RunType.COUNTER],
    "red_zone": [RunType.POWER, RunType.COUNTER, RunType.SWEEP],
    "normal": [RunType.OUTSIDE_ZONE, RunType.STRETCH, RunType.POWER, RunType.SWEEP, RunType.COUNTER],
}

PASS_PLAYBOOK: dict[str, list[PassType]] = {
    "short_yardage": [PassType.SLANT, PassType.QUICK_OUT, PassType.SCREEN],
    "third_and_long": [PassType.DIG, PassType.DEEP_OUT, PassType.POST, PassType.CURL],
    "red_zone": [PassType.SLANT, PassType.CORNER, PassType.HITCH],
    "two_minute": [PassType.QUICK_OUT, PassType.DEEP_OUT, PassType.GO, PassType.DIG],
    "normal": [PassType.HITCH, PassType.CURL, PassType.SLANT, PassType.DIG, PassType.POST, PassType.SCREEN],
}

PASS_DEPTH: dict[PassType, int] = {
    PassType.SCREEN: 3,
    PassType.SLANT: 6,
    PassType.QUICK_OUT: 5,
    PassType.HITCH: 7,
    PassType.CURL: 10,
    PassType.DIG: 13,
    PassType.POST: 18,
    PassType.CORNER: 17,
    PassType.DEEP_OUT: 15,
    PassType.GO: 25,
}


@dataclass(slots=True)
class CoachProfile:
    fourth_down_aggression: float = 50.0
    passing_tendency: float = 55.0
    play_action_effectiveness: float = 60.0
    blitz_aggression: float = 30.0
    man_coverage_preference: float = 45.0
    fake_tendency: float = 5.0
    onside_tendency: float = 50.0


@dataclass(slots=True)
class SituationalActionProvider(ActionProvider):
    """Play caller driven by a coach profile and the current situation.

    Fourth-down aggression, pass tendency and blitz appetite are nudged by
    down, distance, field position and the clock, then rolled against the
    per-play random source.
    """

    profile: CoachProfile
    final_quarter: int = 4

    def offensive_action(self, context: PlayContext, random_source: RandomSource) -> OffensiveAction:
        if self._should_kneel(context):
            return SituationalAction(SituationalType.KNEEL)
        posture = self._posture_for_state(context)
        risk = self._risk_for_state(context)
        if random_source.rand() * 100 < self._pass_likelihood(context):
            pass_type = random_source.choice(PASS_PLAYBOOK[posture])
            return PassAction(pass_type=pass_type, expected_yards=PASS_DEPTH[pass_type], risk=risk)
        run_posture = "normal" if posture == "two_minute" else posture
        run_type = random_source.choice(RUN_PLAYBOOK[run_posture])
        return RunAction(run_type=run_type, direction=random_source.choice(["left", "middle", "right"]), risk=risk)

    def defensive_action(self, context: PlayContext, random_source: RandomSource) -> DefensiveActionSet:
        if context.field_position >= 95 or (context.distance <= 1 and context.field_position >= 90):
            formation = DefensiveFormation.GOAL_LINE
        elif context.down >= 3 and context.distance > 7:
            formation = DefensiveFormation.DIME
        elif context.distance >= 7:
            formation = DefensiveFormation.NICKEL
        else:
            formation = DefensiveFormation.BASE

        adjustments: list[str] = []
        blitz = random_source.rand() * 100 < self._blitz_likelihood(context)
        if blitz:
            adjustments.append("blitz")
        if context.distance <= 2 and formation != DefensiveFormation.DIME:
            adjustments.append("stack_box")
        # offense trailing by more than a score late: keep everything in front
        if self._is_late(context) and context.score_differential < -8:
            adjustments.append("prevent")

        if "prevent" in adjustments:
            coverage = Coverage.COVER_6
        elif random_source.rand() * 100 < self.profile.man_coverage_preference:
            coverage = Coverage.COVER_0 if blitz else Coverage.COVER_1
        else:
            coverage = random_source.choice([Coverage.COVER_2, Coverage.COVER_3, Coverage.COVER_4])
        return DefensiveActionSet(formation=formation, coverage=coverage, adjustments=tuple(adjustments))

    def fourth_down_decision(self, context: PlayContext, random_source: RandomSource) -> FourthDownDecision:
        aggression = self.profile.fourth_down_aggression
        if context.distance <= 2:
            aggression += 20
        if 35 <= context.field_position <= 45:
            aggression += 15
        if self._is_late(context) and context.score_differential < 0:
            aggression += 25
        if context.score_differential > 14:
            aggression -= 20
        if aggression + (random_source.rand() * 20 - 10) > 60:
            return FourthDownDecision.GO

        field_goal_distance = 100 - context.field_position + 17
        if context.field_position >= FIELD_GOAL_RANGE_START and field_goal_distance <= MAX_FIELD_GOAL_DISTANCE:
            return FourthDownDecision.FIELD_GOAL
        return FourthDownDecision.PUNT

    def kickoff_type(self, context: PlayContext, random_source: RandomSource) -> KickoffType:
        # the kicking team is the offense in a kickoff context
        if context.quarter >= self.final_quarter and context.score_differential < 0 and context.clock_seconds < 300:
            if random_source.rand() * 100 < self.profile.onside_tendency:
                return KickoffType.ONSIDE
        if context.quarter == self.final_quarter // 2 and context.clock_seconds <= 30:
            return KickoffType.SQUIB
        return KickoffType.NORMAL

    def punt_type(self, context: PlayContext, random_source: RandomSource) -> PuntType:
        low, high = PUNT_FAKE_WINDOW
        if low <= context.field_position <= high and context.distance <= 3:
            if random_source.rand() * 100 < self.profile.fake_tendency:
                return PuntType.FAKE
        if context.field_position >= 55:
            return PuntType.COFFIN_CORNER
        return PuntType.NORMAL

    def field_goal_type(self, context: PlayContext, random_source: RandomSource) -> FieldGoalType:
        if context.distance <= 3 and random_source.rand() * 100 < self.profile.fake_tendency / 2:
            return FieldGoalType.FAKE
        return FieldGoalType.NORMAL

    def _posture_for_state(self, context: PlayContext) -> str:
        if self._is_late(context) and context.score_differential < 0:
            return "two_minute"
        if context.field_position >= 80:
            return "red_zone"
        if context.down >= 3 and context.distance >= 7:
            return "third_and_long"
        if context.distance <= 2:
            return "short_yardage"
        return "normal"

    def _pass_likelihood(self, context: PlayContext) -> float:
        likelihood = self.profile.passing_tendency
        if context.down == 3 and context.distance > 7:
            likelihood += 30
        if context.down == 1:
            likelihood -= 20
            if self.profile.play_action_effectiveness > 75:
                likelihood += self.profile.play_action_effectiveness / 6
        if self._is_late(context):
            likelihood += 25
        if context.field_position >= 80:
            likelihood -= 15
        return likelihood

    def _blitz_likelihood(self, context: PlayContext) -> float:
        likelihood = self.profile.blitz_aggression
        if context.down == 3 and context.distance > 7:
            likelihood += 25
        if context.field_position >= 70:
            likelihood += 20
        if context.down == 1:
            likelihood -= 15
        return likelihood

    def _risk_for_state(self, context: PlayContext) -> RiskLevel:
        if self._is_late(context) and context.score_differential < 0:
            return RiskLevel.HIGH
        if context.score_differential > 14:
            return RiskLevel.LOW
        return RiskLevel.MEDIUM

    def _should_kneel(self, context: PlayContext) -> bool:
        return (
            context.quarter >= self.final_quarter
            and context.clock_seconds <= TWO_MINUTES
            and context.score_differential > 0
            and context.down < 4
            and context.field_position > 2
        )

    def _is_late(self, context: PlayContext) -> bool:
        return context.quarter >= self.final_quarter and context.clock_seconds < TWO_MINUTES
