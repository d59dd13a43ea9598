from __future__ import annotations

from dataclasses import fields

from gms.contracts import (
    DefensiveRatings,
    FieldGoalAction,
    KickingRatings,
    KickoffAction,
    OffensiveAction,
    OffensiveRatings,
    PassAction,
    PlayContext,
    PuntAction,
    ReturnerRatings,
    RunAction,
    SituationalAction,
    ValidationError,
    ValidationIssue,
    ValidationResult,
)


class PlayInputValidator:
    """Gate run before any resolution so a bad request never touches match state."""

    def validate_play(
        self,
        context: PlayContext,
        action: OffensiveAction,
        offense_ratings: OffensiveRatings | None,
        defense_ratings: DefensiveRatings | None,
        *,
        entity_id: str = "play",
    ) -> ValidationResult:
        issues: list[ValidationIssue] = []
        issues.extend(self._validate_context(context, entity_id))
        if isinstance(action, (KickoffAction, PuntAction, FieldGoalAction)):
            issues.extend(self._validate_special(action, entity_id))
        elif isinstance(action, (RunAction, PassAction)):
            issues.extend(self._validate_scrimmage(action, offense_ratings, defense_ratings, entity_id))
        elif not isinstance(action, SituationalAction):
            issues.append(
                ValidationIssue(
                    code="UNKNOWN_ACTION",
                    severity="blocking",
                    field_path="offense_action",
                    entity_id=entity_id,
                    message=f"unsupported offensive action type '{type(action).__name__}'",
                )
            )
        return self._finalize(issues)

    def _finalize(self, issues: list[ValidationIssue]) -> ValidationResult:
        ordered = sorted(issues, key=lambda x: (x.severity, x.code, x.field_path))
        blocking = [i for i in ordered if i.severity == "blocking"]
        if blocking:
            raise ValidationError(blocking)
        return ValidationResult(ok=True, issues=ordered)

    def _validate_context(self, context: PlayContext, entity_id: str) -> list[ValidationIssue]:
        issues: list[ValidationIssue] = []
        if not 1 <= context.down <= 4:
            issues.append(self._blocking("INVALID_DOWN", "context.down", entity_id, f"down {context.down} outside 1-4"))
        if not 0 <= context.field_position <= 100:
            issues.append(
                self._blocking(
                    "INVALID_FIELD_POSITION",
                    "context.field_position",
                    entity_id,
                    f"field position {context.field_position} outside 0-100",
                )
            )
        if context.distance <= 0:
            issues.append(self._blocking("INVALID_DISTANCE", "context.distance", entity_id, "distance must be positive"))
        return issues

    def _validate_special(self, action: KickoffAction | PuntAction | FieldGoalAction, entity_id: str) -> list[ValidationIssue]:
        issues: list[ValidationIssue] = []
        label = action.kind.value
        if action.kicking is None:
            issues.append(self._blocking("MISSING_KICKING_RATINGS", f"{label}.kicking", entity_id, f"{label} requires kicking ratings"))
        elif not isinstance(action.kicking, KickingRatings):
            issues.append(self._blocking("INVALID_KICKING_RATINGS", f"{label}.kicking", entity_id, "kicking ratings have the wrong type"))
        else:
            issues.extend(self._rating_range_warnings(action.kicking, f"{label}.kicking", entity_id))
        if action.returning is None:
            issues.append(self._blocking("MISSING_RETURNER_RATINGS", f"{label}.returning", entity_id, f"{label} requires returner ratings"))
        elif not isinstance(action.returning, ReturnerRatings):
            issues.append(self._blocking("INVALID_RETURNER_RATINGS", f"{label}.returning", entity_id, "returner ratings have the wrong type"))
        if isinstance(action, FieldGoalAction) and action.distance <= 0:
            issues.append(self._blocking("INVALID_FIELD_GOAL_DISTANCE", "field_goal.distance", entity_id, "field goal distance must be positive"))
        return issues

    def _validate_scrimmage(
        self,
        action: RunAction | PassAction,
        offense_ratings: OffensiveRatings | None,
        defense_ratings: DefensiveRatings | None,
        entity_id: str,
    ) -> list[ValidationIssue]:
        issues: list[ValidationIssue] = []
        if offense_ratings is None:
            issues.append(self._blocking("MISSING_OFFENSIVE_RATINGS", "offense_ratings", entity_id, "scrimmage play requires offensive ratings"))
        else:
            issues.extend(self._rating_range_warnings(offense_ratings, "offense_ratings", entity_id))
        if defense_ratings is None:
            issues.append(self._blocking("MISSING_DEFENSIVE_RATINGS", "defense_ratings", entity_id, "scrimmage play requires defensive ratings"))
        else:
            issues.extend(self._rating_range_warnings(defense_ratings, "defense_ratings", entity_id))
        if isinstance(action, PassAction) and action.expected_yards < 0:
            issues.append(self._blocking("INVALID_EXPECTED_YARDS", "pass.expected_yards", entity_id, "expected route depth must be non-negative"))
        return issues

    def _rating_range_warnings(self, ratings: object, prefix: str, entity_id: str) -> list[ValidationIssue]:
        issues: list[ValidationIssue] = []
        for f in fields(ratings):
            value = getattr(ratings, f.name)
            if value < 0:
                issues.append(
                    ValidationIssue(
                        code="RATING_BELOW_NOMINAL_RANGE",
                        severity="warning",
                        field_path=f"{prefix}.{f.name}",
                        entity_id=entity_id,
                        message=f"rating {value} below 0",
                    )
                )
        return issues

    def _blocking(self, code: str, field_path: str, entity_id: str, message: str) -> ValidationIssue:
        return ValidationIssue(code=code, severity="blocking", field_path=field_path, entity_id=entity_id, message=message)
