from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, ClassVar, Mapping, Protocol, Sequence, Union


class MatchPhase(str, Enum):
    KICKOFF = "kickoff"
    NORMAL = "normal"
    FINISHED = "finished"


class PlayKind(str, Enum):
    RUNNING = "running"
    PASSING = "passing"
    KICKOFF = "kickoff"
    PUNT = "punt"
    FIELD_GOAL = "field_goal"
    SITUATIONAL = "situational"


class RunType(str, Enum):
    POWER = "power"
    ISO = "iso"
    DIVE = "dive"
    OUTSIDE_ZONE = "outside_zone"
    STRETCH = "stretch"
    SWEEP = "sweep"
    COUNTER = "counter"
    DRAW = "draw"


class PassType(str, Enum):
    SCREEN = "screen"
    SLANT = "slant"
    QUICK_OUT = "quick_out"
    HITCH = "hitch"
    CURL = "curl"
    DIG = "dig"
    POST = "post"
    CORNER = "corner"
    DEEP_OUT = "deep_out"
    GO = "go"


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class DefensiveFormation(str, Enum):
    BASE = "base"
    NICKEL = "nickel"
    DIME = "dime"
    GOAL_LINE = "goal_line"
    KICK_RETURN = "kick_return"


class Coverage(str, Enum):
    COVER_0 = "cover_0"
    COVER_1 = "cover_1"
    COVER_2 = "cover_2"
    COVER_3 = "cover_3"
    COVER_4 = "cover_4"
    COVER_6 = "cover_6"


class Weather(str, Enum):
    CLEAR = "clear"
    RAIN = "rain"
    SNOW = "snow"
    WIND = "wind"


class PressureLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    EXTREME = "extreme"


class Momentum(str, Enum):
    HEAVILY_OFFENSE = "heavily_offense"
    OFFENSE = "offense"
    NEUTRAL = "neutral"
    DEFENSE = "defense"
    HEAVILY_DEFENSE = "heavily_defense"


class KickoffType(str, Enum):
    NORMAL = "normal"
    ONSIDE = "onside"
    SQUIB = "squib"
    TOUCHBACK = "touchback"


class PuntType(str, Enum):
    NORMAL = "normal"
    COFFIN_CORNER = "coffin_corner"
    FAKE = "fake"


class FieldGoalType(str, Enum):
    NORMAL = "normal"
    FAKE = "fake"


class AttemptType(str, Enum):
    FIELD_GOAL = "field_goal"
    FAKE_FIELD_GOAL = "fake_field_goal"
    EXTRA_POINT = "extra_point"
    TWO_POINT = "two_point"


class ConversionType(str, Enum):
    EXTRA_POINT = "extra_point"
    TWO_POINT = "two_point"


class SituationalType(str, Enum):
    KNEEL = "kneel"
    SPIKE = "spike"
    SAFETY_KICK = "safety_kick"


class FourthDownDecision(str, Enum):
    GO = "go"
    PUNT = "punt"
    FIELD_GOAL = "field_goal"


class GainType(str, Enum):
    SMALL = "small"
    MEDIUM = "medium"
    BIG = "big"
    EXPLOSIVE = "explosive"
    LOSS = "loss"


class TurnoverKind(str, Enum):
    INTERCEPTION = "interception"
    FUMBLE = "fumble"


class KickoffResultType(str, Enum):
    TOUCHBACK = "touchback"
    RETURN = "return"
    ONSIDE_RECOVERED = "onside_recovered"
    ONSIDE_LOST = "onside_lost"


class PuntResultType(str, Enum):
    RETURN = "return"
    FAIR_CATCH = "fair_catch"
    TOUCHBACK = "touchback"
    FAKE_CONVERTED = "fake_converted"
    FAKE_FAILED = "fake_failed"


class DriveResult(str, Enum):
    TOUCHDOWN = "touchdown"
    TURNOVER = "turnover"
    PUNT = "punt"
    FIELD_GOAL = "field_goal"
    MISSED_FIELD_GOAL = "missed_field_goal"
    SAFETY = "safety"
    END_OF_HALF = "end_of_half"


class DriveClassification(str, Enum):
    EXPLOSIVE = "explosive"
    METHODICAL = "methodical"
    QUICK_STRIKE = "quick_strike"
    STALLED = "stalled"


class RandomSource(Protocol):
    def rand(self) -> float: ...

    def randint(self, a: int, b: int) -> int: ...

    def choice(self, items: Sequence[Any]) -> Any: ...

    def shuffle(self, items: list[Any]) -> None: ...

    def spawn(self, substream_id: str) -> RandomSource: ...


@dataclass(frozen=True, slots=True)
class OffensiveRatings:
    passing_accuracy: float = 70.0
    arm_strength: float = 70.0
    power_run_blocking: float = 70.0
    zone_blocking_agility: float = 70.0
    pass_protection_anchor: float = 70.0
    offensive_line_chemistry: float = 70.0
    breakaway_ability: float = 70.0
    receiver_separation: float = 70.0
    ball_security: float = 70.0


@dataclass(frozen=True, slots=True)
class DefensiveRatings:
    run_fit_discipline: float = 70.0
    tackles_for_loss: float = 70.0
    press_man_coverage: float = 70.0
    zone_coverage_coordination: float = 70.0
    pass_rush_pressure: float = 70.0
    defensive_chemistry: float = 70.0


@dataclass(frozen=True, slots=True)
class KickingRatings:
    kicker_strength: float = 80.0
    kicker_accuracy: float = 80.0
    punter_strength: float = 70.0
    coverage_speed: float = 70.0
    surprise_factor: float = 30.0


@dataclass(frozen=True, slots=True)
class ReturnerRatings:
    return_explosiveness: float = 70.0


@dataclass(frozen=True, slots=True)
class RunAction:
    run_type: RunType
    direction: str = "middle"
    risk: RiskLevel = RiskLevel.MEDIUM
    kind: ClassVar[PlayKind] = PlayKind.RUNNING


@dataclass(frozen=True, slots=True)
class PassAction:
    pass_type: PassType
    expected_yards: int
    risk: RiskLevel = RiskLevel.MEDIUM
    kind: ClassVar[PlayKind] = PlayKind.PASSING


@dataclass(frozen=True, slots=True)
class KickoffAction:
    kicking: KickingRatings
    returning: ReturnerRatings
    kickoff_type: KickoffType = KickoffType.NORMAL
    kickoff_spot: int = 35
    kind: ClassVar[PlayKind] = PlayKind.KICKOFF


@dataclass(frozen=True, slots=True)
class PuntAction:
    kicking: KickingRatings
    returning: ReturnerRatings
    punt_type: PuntType = PuntType.NORMAL
    kind: ClassVar[PlayKind] = PlayKind.PUNT


@dataclass(frozen=True, slots=True)
class FieldGoalAction:
    kicking: KickingRatings
    returning: ReturnerRatings
    distance: int
    field_goal_type: FieldGoalType = FieldGoalType.NORMAL
    kind: ClassVar[PlayKind] = PlayKind.FIELD_GOAL


@dataclass(frozen=True, slots=True)
class SituationalAction:
    situational_type: SituationalType
    kind: ClassVar[PlayKind] = PlayKind.SITUATIONAL


OffensiveAction = Union[RunAction, PassAction, KickoffAction, PuntAction, FieldGoalAction, SituationalAction]
SpecialAction = Union[KickoffAction, PuntAction, FieldGoalAction]


@dataclass(frozen=True, slots=True)
class DefensiveActionSet:
    formation: DefensiveFormation = DefensiveFormation.BASE
    coverage: Coverage | None = None
    adjustments: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class PlayContext:
    down: int
    distance: int
    field_position: int
    clock_seconds: int
    quarter: int
    score_differential: int
    offense_team_id: str
    defense_team_id: str
    weather: Weather = Weather.CLEAR
    pressure: PressureLevel = PressureLevel.LOW
    momentum: Momentum = Momentum.NEUTRAL


@dataclass(frozen=True, slots=True)
class OffensiveGain:
    yards: int
    gain_type: GainType
    play_kind: PlayKind
    kind: ClassVar[str] = "offensive_gain"


@dataclass(frozen=True, slots=True)
class FirstDown:
    yards: int
    play_kind: PlayKind
    kind: ClassVar[str] = "first_down"


@dataclass(frozen=True, slots=True)
class Touchdown:
    yards: int
    play_kind: PlayKind
    kind: ClassVar[str] = "touchdown"


@dataclass(frozen=True, slots=True)
class Turnover:
    turnover_kind: TurnoverKind
    yards: int
    return_yards: int
    kind: ClassVar[str] = "turnover"


@dataclass(frozen=True, slots=True)
class IncompletePass:
    yards: int = 0
    kind: ClassVar[str] = "incomplete_pass"


@dataclass(frozen=True, slots=True)
class TackleForLoss:
    yards: int
    play_kind: PlayKind
    kind: ClassVar[str] = "tackle_for_loss"


@dataclass(frozen=True, slots=True)
class KickoffResult:
    kickoff_type: KickoffType
    result_type: KickoffResultType
    kick_distance: float
    return_yards: float
    start_position: int
    kind: ClassVar[str] = "kickoff_result"

    @property
    def kicking_team_recovers(self) -> bool:
        return self.result_type == KickoffResultType.ONSIDE_RECOVERED


@dataclass(frozen=True, slots=True)
class PuntResult:
    punt_type: PuntType
    result_type: PuntResultType
    punt_distance: float
    return_yards: float
    net_yards: int
    kind: ClassVar[str] = "punt_result"

    @property
    def is_fake(self) -> bool:
        return self.punt_type == PuntType.FAKE


@dataclass(frozen=True, slots=True)
class FieldGoalResult:
    attempt: AttemptType
    made: bool
    distance: int
    probability: float
    yards: int = 0
    kind: ClassVar[str] = "field_goal_result"


@dataclass(frozen=True, slots=True)
class KneelResult:
    yards: int = -1
    kind: ClassVar[str] = "kneel"


@dataclass(frozen=True, slots=True)
class SpikeResult:
    yards: int = 0
    kind: ClassVar[str] = "spike"


PlayOutcome = Union[
    OffensiveGain,
    FirstDown,
    Touchdown,
    Turnover,
    IncompletePass,
    TackleForLoss,
    KickoffResult,
    PuntResult,
    FieldGoalResult,
    KneelResult,
    SpikeResult,
]
SCRIMMAGE_OUTCOMES = (OffensiveGain, FirstDown, TackleForLoss, IncompletePass, KneelResult, SpikeResult)


@dataclass(slots=True)
class SituationalModifiers:
    down_distance: int = 0
    field_position: int = 0
    time_score: int = 0
    weather: int = 0
    pressure: int = 0
    momentum: int = 0

    @property
    def total(self) -> int:
        return self.down_distance + self.field_position + self.time_score + self.weather + self.pressure + self.momentum


@dataclass(slots=True)
class PlayBreakdown:
    play_kind: PlayKind
    offense_rating: float = 0.0
    defense_rating: float = 0.0
    advantage: float = 0.0
    modifiers: SituationalModifiers = field(default_factory=SituationalModifiers)
    offense_execution: int = 0
    defense_execution: int = 0
    jitter: int = 0
    base_result: float = 0.0
    probabilities: dict[str, float] = field(default_factory=dict)
    key_factors: list[str] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class PlaySummary:
    field_position: int
    yards_gained: int
    seconds_elapsed: int
    first_down: bool


@dataclass(frozen=True, slots=True)
class MatchSnapshot:
    quarter: int
    clock_seconds: int
    down: int
    distance: int
    field_position: int
    possession_team_id: str
    home_team_id: str
    away_team_id: str
    home_score: int
    away_score: int
    phase: MatchPhase
    play_count: int

    @property
    def defense_team_id(self) -> str:
        return self.away_team_id if self.possession_team_id == self.home_team_id else self.home_team_id

    def score_for(self, team_id: str) -> int:
        if team_id == self.home_team_id:
            return self.home_score
        if team_id == self.away_team_id:
            return self.away_score
        raise KeyError(team_id)


class AttributeProvider(Protocol):
    def offensive_attributes(self) -> OffensiveRatings | None: ...

    def defensive_attributes(self) -> DefensiveRatings | None: ...

    def kicking_attributes(self) -> KickingRatings | None: ...

    def returner_attributes(self) -> ReturnerRatings | None: ...


class ActionProvider(Protocol):
    def offensive_action(self, context: PlayContext, random_source: RandomSource) -> OffensiveAction: ...

    def defensive_action(self, context: PlayContext, random_source: RandomSource) -> DefensiveActionSet: ...

    def fourth_down_decision(self, context: PlayContext, random_source: RandomSource) -> FourthDownDecision: ...

    def kickoff_type(self, context: PlayContext, random_source: RandomSource) -> KickoffType: ...

    def punt_type(self, context: PlayContext, random_source: RandomSource) -> PuntType: ...

    def field_goal_type(self, context: PlayContext, random_source: RandomSource) -> FieldGoalType: ...


@dataclass(slots=True)
class TimeCosts:
    default: int = 35
    spike: int = 3
    kneel: int = 40
    incomplete: int = 5
    kick: int = 5


@dataclass(slots=True)
class MatchRules:
    quarter_seconds: int = 900
    quarters: int = 4
    first_down_distance: int = 10
    kickoff_spot: int = 35
    safety_kick_spot: int = 20
    kickoff_touchback_position: int = 25
    punt_touchback_position: int = 20
    conversion: ConversionType = ConversionType.EXTRA_POINT
    extra_point_probability: float = 0.95
    two_point_probability: float = 0.45
    weather: Weather = Weather.CLEAR
    max_plays: int = 400
    time_costs: TimeCosts = field(default_factory=TimeCosts)

    def validate(self) -> None:
        if self.quarter_seconds <= 0 or self.quarters < 2:
            raise ValueError("match must have at least two positive-length quarters")
        if self.quarters % 2:
            raise ValueError("quarter count must split evenly into halves")
        if not 1 <= self.first_down_distance <= 99:
            raise ValueError("first down distance must be within the field")
        for name in ("kickoff_spot", "safety_kick_spot", "kickoff_touchback_position", "punt_touchback_position"):
            value = getattr(self, name)
            if not 1 <= value <= 99:
                raise ValueError(f"{name} must be within the field, got {value}")
        for name in ("extra_point_probability", "two_point_probability"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be a probability, got {value}")
        costs = [
            self.time_costs.default,
            self.time_costs.spike,
            self.time_costs.kneel,
            self.time_costs.incomplete,
            self.time_costs.kick,
        ]
        if any(c < 0 for c in costs):
            raise ValueError("time costs must be non-negative")
        if self.max_plays <= 0:
            raise ValueError("max_plays must be positive")


@dataclass(slots=True)
class PlayEvent:
    event_id: str
    time: datetime
    kind: str
    play_index: int
    team_id: str
    claims: list[str] = field(default_factory=list)


PlayEventHandler = Callable[[PlayEvent], None]


@dataclass(slots=True)
class ValidationIssue:
    code: str
    severity: str
    field_path: str
    entity_id: str
    message: str


@dataclass(slots=True)
class ValidationResult:
    ok: bool
    issues: list[ValidationIssue]


class ValidationError(ValueError):
    def __init__(self, issues: list[ValidationIssue]) -> None:
        message = "; ".join(f"{i.code}:{i.entity_id}:{i.message}" for i in issues)
        super().__init__(message)
        self.issues = issues


@dataclass(slots=True)
class ForensicArtifact:
    artifact_id: str
    timestamp: datetime
    engine_scope: str
    error_code: str
    message: str
    state_snapshot: Mapping[str, Any]
    context: Mapping[str, Any]
    identifiers: Mapping[str, str]
    causal_fragment: Sequence[str]
