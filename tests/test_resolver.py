from __future__ import annotations

import pytest

from gms.contracts import (
    AttemptType,
    ConversionType,
    DefensiveActionSet,
    DefensiveFormation,
    DefensiveRatings,
    FieldGoalAction,
    FirstDown,
    GainType,
    IncompletePass,
    KickingRatings,
    KickoffAction,
    KickoffResultType,
    KickoffType,
    OffensiveGain,
    OffensiveRatings,
    PassAction,
    PassType,
    PlayKind,
    PressureLevel,
    PuntAction,
    PuntResultType,
    PuntType,
    ReturnerRatings,
    RiskLevel,
    RunAction,
    RunType,
    TackleForLoss,
    Touchdown,
    Turnover,
    TurnoverKind,
)
from gms.core import ConfigurationError, seeded_random
from gms.football import PlayResolver, field_goal_probability, kickoff_distance
from tests.helpers import ScriptedRandom, make_context

OFFENSE = OffensiveRatings()
DEFENSE = DefensiveRatings()
BASE_DEFENSE = DefensiveActionSet()


def _resolve(context, action, draws=(), *, offense=OFFENSE, defense=DEFENSE, defense_action=BASE_DEFENSE, ints=()):
    resolver = PlayResolver(ScriptedRandom(draws, ints=ints))
    return resolver.resolve(context, action, defense_action, offense, defense)


def test_even_run_on_first_down_gains_base_yards():
    outcome, breakdown = _resolve(make_context(field_position=25), RunAction(RunType.POWER))
    assert outcome == OffensiveGain(yards=4, gain_type=GainType.MEDIUM, play_kind=PlayKind.RUNNING)
    assert breakdown.advantage == 0
    assert breakdown.modifiers.down_distance == 5
    assert breakdown.jitter == 0


def test_touchdown_when_gain_reaches_goal_line():
    context = make_context(down=1, distance=3, field_position=97)
    outcome, _ = _resolve(context, RunAction(RunType.POWER))
    assert outcome == Touchdown(yards=3, play_kind=PlayKind.RUNNING)


def test_breakaway_extends_run_into_first_down():
    context = make_context(down=2, distance=10, field_position=30)
    outcome, breakdown = _resolve(context, RunAction(RunType.SWEEP), draws=[0.5, 0.01])
    assert outcome == FirstDown(yards=11, play_kind=PlayKind.RUNNING)
    assert "broke into the open field" in breakdown.key_factors


def test_fumble_is_checked_before_first_down():
    context = make_context(down=2, distance=2, field_position=30)
    outcome, breakdown = _resolve(context, RunAction(RunType.DIVE), draws=[0.5, 0.5, 0.001])
    assert isinstance(outcome, Turnover)
    assert outcome.turnover_kind == TurnoverKind.FUMBLE
    assert outcome.yards == 3
    assert 0.002 <= breakdown.probabilities["fumble"] <= 0.08


def test_completed_pass_uses_expected_depth():
    context = make_context(down=2, distance=8, field_position=50)
    outcome, breakdown = _resolve(context, PassAction(PassType.SLANT, expected_yards=6), draws=[0.5, 0.1])
    assert outcome == OffensiveGain(yards=6, gain_type=GainType.MEDIUM, play_kind=PlayKind.PASSING)
    assert breakdown.probabilities["completion"] == pytest.approx(0.6)


def test_incomplete_pass_without_interception():
    context = make_context(down=2, distance=8, field_position=50)
    outcome, breakdown = _resolve(context, PassAction(PassType.CURL, expected_yards=10), draws=[0.5, 0.9, 0.5])
    assert outcome == IncompletePass()
    assert breakdown.probabilities["interception"] == pytest.approx(0.05)


def test_interception_return_yards_come_from_the_next_draw():
    context = make_context(down=2, distance=8, field_position=50)
    outcome, _ = _resolve(context, PassAction(PassType.GO, expected_yards=25), draws=[0.5, 0.9, 0.01, 0.4])
    assert outcome == Turnover(TurnoverKind.INTERCEPTION, yards=0, return_yards=6)


def test_high_risk_throw_raises_interception_chance():
    context = make_context(down=2, distance=8, field_position=50)
    action = PassAction(PassType.POST, expected_yards=18, risk=RiskLevel.HIGH)
    _, breakdown = _resolve(context, action, draws=[0.5, 0.9, 0.5])
    assert breakdown.probabilities["interception"] == pytest.approx(0.065)


def test_execution_is_clamped_under_extreme_pressure():
    elite_offense = OffensiveRatings(**{name: 100.0 for name in OffensiveRatings.__dataclass_fields__})
    elite_defense = DefensiveRatings(**{name: 100.0 for name in DefensiveRatings.__dataclass_fields__})
    context = make_context(down=3, distance=4, field_position=60, pressure=PressureLevel.EXTREME)
    _, breakdown = _resolve(context, RunAction(RunType.POWER), offense=elite_offense, defense=elite_defense)
    assert breakdown.offense_execution == 95
    assert breakdown.defense_execution == 100


def test_goal_line_front_stiffens_run_defense():
    context = make_context(down=2, distance=5, field_position=50)
    _, base = _resolve(context, RunAction(RunType.POWER))
    _, goal_line = _resolve(
        context,
        RunAction(RunType.POWER),
        defense_action=DefensiveActionSet(formation=DefensiveFormation.GOAL_LINE, adjustments=("stack_box",)),
    )
    assert goal_line.defense_rating == pytest.approx(base.defense_rating + 20)
    assert goal_line.advantage < base.advantage


def test_overmatched_run_is_a_tackle_for_loss():
    helpless = OffensiveRatings(**{name: 0.0 for name in OffensiveRatings.__dataclass_fields__})
    wall = DefensiveRatings(**{name: 100.0 for name in DefensiveRatings.__dataclass_fields__})
    context = make_context(down=2, distance=10, field_position=50)
    outcome, breakdown = _resolve(context, RunAction(RunType.POWER), offense=helpless, defense=wall)
    assert outcome == TackleForLoss(yards=-5, play_kind=PlayKind.RUNNING)
    assert breakdown.advantage == -50


def test_rating_warnings_surface_in_breakdown():
    shaky = OffensiveRatings(ball_security=-5.0)
    outcome, breakdown = _resolve(make_context(field_position=25), RunAction(RunType.POWER), offense=shaky)
    assert outcome.kind == "offensive_gain"
    assert "RATING_BELOW_NOMINAL_RANGE offense_ratings.ball_security" in breakdown.key_factors


def test_missing_ratings_raise_configuration_error():
    resolver = PlayResolver(ScriptedRandom())
    with pytest.raises(ConfigurationError) as ex:
        resolver.resolve(make_context(), RunAction(RunType.POWER), BASE_DEFENSE, OFFENSE, None)
    assert ex.value.error_code == "PLAY_CONFIGURATION_INVALID"
    codes = [issue["code"] for issue in ex.value.artifact.context["issues"]]
    assert codes == ["MISSING_DEFENSIVE_RATINGS"]


def test_kickoff_return_from_standard_kick():
    assert kickoff_distance(80) == 45
    action = KickoffAction(kicking=KickingRatings(), returning=ReturnerRatings())
    outcome, _ = PlayResolver(ScriptedRandom()).resolve(make_context(), action, BASE_DEFENSE)
    assert outcome.result_type == KickoffResultType.RETURN
    assert outcome.kick_distance == 45
    assert outcome.return_yards == 15
    assert outcome.start_position == 35


def test_touchback_kickoff_starts_at_twenty_five():
    action = KickoffAction(kicking=KickingRatings(), returning=ReturnerRatings(), kickoff_type=KickoffType.TOUCHBACK)
    outcome, _ = PlayResolver(ScriptedRandom()).resolve(make_context(), action, BASE_DEFENSE)
    assert outcome.result_type == KickoffResultType.TOUCHBACK
    assert outcome.start_position == 25


def test_onside_recovery_keeps_ball_with_kicking_team():
    action = KickoffAction(kicking=KickingRatings(), returning=ReturnerRatings(), kickoff_type=KickoffType.ONSIDE)
    outcome, breakdown = PlayResolver(ScriptedRandom([0.1])).resolve(make_context(), action, BASE_DEFENSE)
    assert outcome.kicking_team_recovers
    assert outcome.start_position == 50
    assert breakdown.probabilities["onside_recovery"] == pytest.approx(0.45)


def test_punt_return_and_touchback():
    action = PuntAction(kicking=KickingRatings(), returning=ReturnerRatings())
    resolver = PlayResolver(ScriptedRandom())
    returned, _ = resolver.resolve(make_context(down=4, field_position=30), action, BASE_DEFENSE)
    assert returned.result_type == PuntResultType.RETURN
    assert returned.net_yards == 27
    deep, _ = resolver.resolve(make_context(down=4, field_position=70), action, BASE_DEFENSE)
    assert deep.result_type == PuntResultType.TOUCHBACK


def test_fake_punt_conversion():
    action = PuntAction(kicking=KickingRatings(), returning=ReturnerRatings(), punt_type=PuntType.FAKE)
    outcome, _ = PlayResolver(ScriptedRandom([0.1, 0.5])).resolve(make_context(down=4, distance=3), action, BASE_DEFENSE)
    assert outcome.is_fake
    assert outcome.result_type == PuntResultType.FAKE_CONVERTED
    assert outcome.net_yards == 10


def test_field_goal_probability_curve():
    assert field_goal_probability(30) == pytest.approx(0.75)
    assert field_goal_probability(10) == pytest.approx(0.99)
    assert field_goal_probability(70) == pytest.approx(0.3)
    action = FieldGoalAction(kicking=KickingRatings(), returning=ReturnerRatings(), distance=30)
    made, _ = PlayResolver(ScriptedRandom([0.7])).resolve(make_context(down=4, field_position=87), action, BASE_DEFENSE)
    missed, _ = PlayResolver(ScriptedRandom([0.8])).resolve(make_context(down=4, field_position=87), action, BASE_DEFENSE)
    assert made.attempt == AttemptType.FIELD_GOAL
    assert made.made
    assert made.probability == pytest.approx(0.75)
    assert not missed.made


def test_conversions_use_configured_probabilities():
    resolver = PlayResolver(ScriptedRandom())
    two_point = resolver.resolve_conversion(ConversionType.TWO_POINT, ScriptedRandom([0.4]))
    assert two_point.attempt == AttemptType.TWO_POINT
    assert two_point.made
    extra_point = resolver.resolve_conversion(ConversionType.EXTRA_POINT, ScriptedRandom([0.96]))
    assert extra_point.attempt == AttemptType.EXTRA_POINT
    assert not extra_point.made


def test_seeded_resolution_is_repeatable():
    context = make_context(down=2, distance=7, field_position=45)
    actions = [RunAction(RunType.POWER), PassAction(PassType.DIG, expected_yards=13)] * 10

    def run(seed):
        resolver = PlayResolver(seeded_random(seed))
        return [resolver.resolve(context, action, BASE_DEFENSE, OFFENSE, DEFENSE)[0] for action in actions]

    assert run(11) == run(11)
