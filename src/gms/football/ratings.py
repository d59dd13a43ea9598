from __future__ import annotations

import math
from dataclasses import dataclass, field

from gms.contracts import DefensiveActionSet, DefensiveRatings, OffensiveRatings, PassAction, RunAction
from gms.football.tables import (
    ADJUSTMENT_BONUS,
    COVERAGE_PRIMARY,
    DEFAULT_COVERAGE_PRIMARY,
    DEFENSE_SECONDARY,
    FORMATION_BONUS,
    OFFENSE_SECONDARY,
    PASS_PRIMARY,
    PRIMARY_WEIGHT,
    RUN_DEFENSE_PRIMARY,
    RUN_PRIMARY,
)

ADVANTAGE_LIMIT = 50.0


@dataclass(slots=True)
class MatchupRatings:
    offense_rating: float
    defense_rating: float
    advantage: float
    key_factors: list[str] = field(default_factory=list)


class CompositeRatingEvaluator:
    """Weighted primary/secondary skills for one scrimmage matchup."""

    def evaluate(
        self,
        action: RunAction | PassAction,
        defense_action: DefensiveActionSet,
        offense: OffensiveRatings,
        defense: DefensiveRatings,
    ) -> MatchupRatings:
        kind = action.kind
        if isinstance(action, RunAction):
            off_fields = RUN_PRIMARY[action.run_type]
            def_fields = RUN_DEFENSE_PRIMARY
            factors = [f"{action.run_type.value} vs run fit"]
        else:
            off_fields = PASS_PRIMARY[action.pass_type]
            if defense_action.coverage is None:
                def_fields = DEFAULT_COVERAGE_PRIMARY
                factors = [f"{action.pass_type.value} vs mixed coverage"]
            else:
                def_fields = COVERAGE_PRIMARY[defense_action.coverage]
                factors = [f"{action.pass_type.value} vs {defense_action.coverage.value}"]

        offense_rating = self._weighted(offense, off_fields, OFFENSE_SECONDARY[kind])
        defense_rating = self._weighted(defense, def_fields, DEFENSE_SECONDARY[kind])

        formation_bonus = FORMATION_BONUS.get((defense_action.formation, kind), 0)
        if formation_bonus:
            factors.append(f"{defense_action.formation.value} formation {formation_bonus:+d}")
        adjustment_bonus = 0
        for tag in defense_action.adjustments:
            bonus = ADJUSTMENT_BONUS.get(tag, {}).get(kind, 0)
            if bonus:
                adjustment_bonus += bonus
                factors.append(f"{tag} {bonus:+d}")
        defense_rating += formation_bonus + adjustment_bonus

        advantage = clamp(offense_rating - defense_rating, -ADVANTAGE_LIMIT, ADVANTAGE_LIMIT)
        return MatchupRatings(
            offense_rating=round(offense_rating, 4),
            defense_rating=round(defense_rating, 4),
            advantage=round(advantage, 4),
            key_factors=factors,
        )

    def _weighted(
        self,
        ratings: OffensiveRatings | DefensiveRatings,
        primary_fields: tuple[str, ...],
        secondary: tuple[tuple[str, float], ...],
    ) -> float:
        primary = sum(float(getattr(ratings, name)) for name in primary_fields) / len(primary_fields)
        total = primary * PRIMARY_WEIGHT
        for name, weight in secondary:
            total += float(getattr(ratings, name)) * weight
        return total


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def clamp_probability(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))
