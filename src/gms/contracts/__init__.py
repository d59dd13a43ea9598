from .types import (
    MatchPhase,
    PlayKind,
    RunType,
    PassType,
    RiskLevel,
    DefensiveFormation,
    Coverage,
    Weather,
    PressureLevel,
    Momentum,
    KickoffType,
    PuntType,
    FieldGoalType,
    AttemptType,
    ConversionType,
    SituationalType,
    FourthDownDecision,
    GainType,
    TurnoverKind,
    KickoffResultType,
    PuntResultType,
    DriveResult,
    DriveClassification,
    RandomSource,
    OffensiveRatings,
    DefensiveRatings,
    KickingRatings,
    ReturnerRatings,
    RunAction,
    PassAction,
    KickoffAction,
    PuntAction,
    FieldGoalAction,
    SituationalAction,
    OffensiveAction,
    SpecialAction,
    DefensiveActionSet,
    PlayContext,
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
    PlayOutcome,
    SCRIMMAGE_OUTCOMES,
    SituationalModifiers,
    PlayBreakdown,
    PlaySummary,
    MatchSnapshot,
    AttributeProvider,
    ActionProvider,
    TimeCosts,
    MatchRules,
    PlayEvent,
    PlayEventHandler,
    ValidationIssue,
    ValidationResult,
    ValidationError,
    ForensicArtifact,
)

__all__ = [
    "ActionProvider",
    "AttemptType",
    "AttributeProvider",
    "ConversionType",
    "Coverage",
    "DefensiveActionSet",
    "DefensiveFormation",
    "DefensiveRatings",
    "DriveClassification",
    "DriveResult",
    "FieldGoalAction",
    "FieldGoalResult",
    "FieldGoalType",
    "FirstDown",
    "ForensicArtifact",
    "FourthDownDecision",
    "GainType",
    "IncompletePass",
    "KickingRatings",
    "KickoffAction",
    "KickoffResult",
    "KickoffResultType",
    "KickoffType",
    "KneelResult",
    "MatchPhase",
    "MatchRules",
    "MatchSnapshot",
    "Momentum",
    "OffensiveAction",
    "OffensiveGain",
    "OffensiveRatings",
    "PassAction",
    "PassType",
    "PlayBreakdown",
    "PlayContext",
    "PlayEvent",
    "PlayEventHandler",
    "PlayKind",
    "PlayOutcome",
    "PlaySummary",
    "PressureLevel",
    "PuntAction",
    "PuntResult",
    "PuntResultType",
    "PuntType",
    "RandomSource",
    "ReturnerRatings",
    "RiskLevel",
    "RunAction",
    "RunType",
    "SCRIMMAGE_OUTCOMES",
    "SituationalAction",
    "SituationalModifiers",
    "SituationalType",
    "SpecialAction",
    "SpikeResult",
    "TackleForLoss",
    "TimeCosts",
    "Touchdown",
    "Turnover",
    "TurnoverKind",
    "ValidationError",
    "ValidationIssue",
    "ValidationResult",
    "Weather",
]
