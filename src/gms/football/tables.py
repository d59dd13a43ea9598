from __future__ import annotations

from gms.contracts import (
    Coverage,
    DefensiveFormation,
    GainType,
    Momentum,
    PassType,
    PlayKind,
    PressureLevel,
    RiskLevel,
    RunType,
    Weather,
)

# Offensive rating fields whose mean is the primary skill for each play subtype.
RUN_PRIMARY: dict[RunType, tuple[str, ...]] = {
    RunType.POWER: ("power_run_blocking",),
    RunType.ISO: ("power_run_blocking",),
    RunType.DIVE: ("power_run_blocking",),
    RunType.OUTSIDE_ZONE: ("zone_blocking_agility",),
    RunType.STRETCH: ("zone_blocking_agility",),
    RunType.SWEEP: ("zone_blocking_agility",),
    RunType.COUNTER: ("power_run_blocking", "zone_blocking_agility"),
    RunType.DRAW: ("power_run_blocking", "zone_blocking_agility"),
}

PASS_PRIMARY: dict[PassType, tuple[str, ...]] = {
    PassType.SCREEN: ("passing_accuracy",),
    PassType.SLANT: ("passing_accuracy",),
    PassType.QUICK_OUT: ("passing_accuracy",),
    PassType.HITCH: ("passing_accuracy",),
    PassType.CURL: ("passing_accuracy",),
    PassType.DIG: ("passing_accuracy", "arm_strength"),
    PassType.POST: ("passing_accuracy", "arm_strength"),
    PassType.CORNER: ("passing_accuracy", "arm_strength"),
    PassType.DEEP_OUT: ("passing_accuracy", "arm_strength"),
    PassType.GO: ("passing_accuracy", "arm_strength"),
}

# Defensive fields for the pass primary skill, keyed by coverage shell.
# A missing coverage tag falls back to the mean of man and zone.
COVERAGE_PRIMARY: dict[Coverage, tuple[str, ...]] = {
    Coverage.COVER_0: ("press_man_coverage",),
    Coverage.COVER_1: ("press_man_coverage",),
    Coverage.COVER_2: ("zone_coverage_coordination",),
    Coverage.COVER_3: ("zone_coverage_coordination",),
    Coverage.COVER_4: ("press_man_coverage", "zone_coverage_coordination"),
    Coverage.COVER_6: ("press_man_coverage", "zone_coverage_coordination"),
}
DEFAULT_COVERAGE_PRIMARY = ("press_man_coverage", "zone_coverage_coordination")
RUN_DEFENSE_PRIMARY = ("run_fit_discipline",)

PRIMARY_WEIGHT = 0.4
OFFENSE_SECONDARY: dict[PlayKind, tuple[tuple[str, float], ...]] = {
    PlayKind.RUNNING: (("breakaway_ability", 0.3), ("offensive_line_chemistry", 0.3)),
    PlayKind.PASSING: (("receiver_separation", 0.3), ("pass_protection_anchor", 0.3)),
}
DEFENSE_SECONDARY: dict[PlayKind, tuple[tuple[str, float], ...]] = {
    PlayKind.RUNNING: (("tackles_for_loss", 0.3), ("defensive_chemistry", 0.3)),
    PlayKind.PASSING: (("pass_rush_pressure", 0.3), ("defensive_chemistry", 0.3)),
}

FORMATION_BONUS: dict[tuple[DefensiveFormation, PlayKind], int] = {
    (DefensiveFormation.GOAL_LINE, PlayKind.RUNNING): 15,
    (DefensiveFormation.NICKEL, PlayKind.RUNNING): -10,
    (DefensiveFormation.DIME, PlayKind.RUNNING): -12,
    (DefensiveFormation.DIME, PlayKind.PASSING): 10,
    (DefensiveFormation.GOAL_LINE, PlayKind.PASSING): -8,
}

ADJUSTMENT_BONUS: dict[str, dict[PlayKind, int]] = {
    "blitz": {PlayKind.RUNNING: 3, PlayKind.PASSING: 4},
    "stack_box": {PlayKind.RUNNING: 5, PlayKind.PASSING: -3},
    "spy": {PlayKind.PASSING: 2},
    "prevent": {PlayKind.RUNNING: -4, PlayKind.PASSING: 3},
}

WEATHER_PENALTY: dict[Weather, dict[PlayKind, int]] = {
    Weather.CLEAR: {},
    Weather.RAIN: {PlayKind.RUNNING: -2, PlayKind.PASSING: -5},
    Weather.SNOW: {PlayKind.RUNNING: -3, PlayKind.PASSING: -8},
    Weather.WIND: {PlayKind.PASSING: -3},
}

MOMENTUM_BONUS: dict[Momentum, int] = {
    Momentum.HEAVILY_OFFENSE: 8,
    Momentum.OFFENSE: 4,
    Momentum.NEUTRAL: 0,
    Momentum.DEFENSE: -4,
    Momentum.HEAVILY_DEFENSE: -8,
}

PRESSURE_MODIFIER: dict[PressureLevel, int] = {
    PressureLevel.LOW: 0,
    PressureLevel.MEDIUM: 0,
    PressureLevel.HIGH: -1,
    PressureLevel.EXTREME: -2,
}

# (offense execution shift, defense execution shift)
PRESSURE_EXECUTION: dict[PressureLevel, tuple[int, int]] = {
    PressureLevel.LOW: (0, 0),
    PressureLevel.MEDIUM: (0, 0),
    PressureLevel.HIGH: (-3, 2),
    PressureLevel.EXTREME: (-5, 3),
}

PRESSURE_FUMBLE: dict[PressureLevel, float] = {
    PressureLevel.LOW: 0.0,
    PressureLevel.MEDIUM: 0.002,
    PressureLevel.HIGH: 0.005,
    PressureLevel.EXTREME: 0.01,
}

RISK_INTERCEPTION: dict[RiskLevel, float] = {
    RiskLevel.LOW: -0.01,
    RiskLevel.MEDIUM: 0.0,
    RiskLevel.HIGH: 0.015,
}

GAIN_THRESHOLDS: tuple[tuple[int, GainType], ...] = (
    (15, GainType.EXPLOSIVE),
    (8, GainType.BIG),
    (4, GainType.MEDIUM),
    (0, GainType.SMALL),
)

# Momentum contribution of a single play, from the offense's side.
MOMENTUM_IMPACT = {
    "touchdown": 4,
    "turnover": -3,
    "first_down": 1,
    GainType.EXPLOSIVE: 2,
    GainType.BIG: 1,
}
MOMENTUM_WINDOW = 5


def classify_gain(yards: int) -> GainType:
    for threshold, gain_type in GAIN_THRESHOLDS:
        if yards >= threshold:
            return gain_type
    return GainType.LOSS
