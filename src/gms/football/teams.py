from __future__ import annotations

import json
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from gms.contracts import (
    AttributeProvider,
    DefensiveRatings,
    KickingRatings,
    OffensiveRatings,
    ReturnerRatings,
)
from gms.football.coaching import CoachProfile

UNIT_TYPES = {
    "offense": OffensiveRatings,
    "defense": DefensiveRatings,
    "kicking": KickingRatings,
    "returner": ReturnerRatings,
}


@dataclass(slots=True)
class TeamProfile(AttributeProvider):
    team_id: str
    name: str
    offense: OffensiveRatings | None = None
    defense: DefensiveRatings | None = None
    kicking: KickingRatings | None = None
    returner: ReturnerRatings | None = None
    coach: CoachProfile | None = None

    def offensive_attributes(self) -> OffensiveRatings | None:
        return self.offense

    def defensive_attributes(self) -> DefensiveRatings | None:
        return self.defense

    def kicking_attributes(self) -> KickingRatings | None:
        return self.kicking

    def returner_attributes(self) -> ReturnerRatings | None:
        return self.returner


def uniform_team(team_id: str, overall: float = 70.0, *, name: str | None = None) -> TeamProfile:
    """Team whose every unit rating sits at `overall`; kickers keep their own baseline."""
    offense = OffensiveRatings(**{f.name: overall for f in fields(OffensiveRatings)})
    defense = DefensiveRatings(**{f.name: overall for f in fields(DefensiveRatings)})
    return TeamProfile(
        team_id=team_id,
        name=name or team_id,
        offense=offense,
        defense=defense,
        kicking=KickingRatings(),
        returner=ReturnerRatings(return_explosiveness=overall),
        coach=CoachProfile(),
    )


def team_from_mapping(payload: dict[str, Any]) -> TeamProfile:
    missing = sorted({"team_id", "name"} - set(payload))
    if missing:
        raise ValueError(f"team definition missing required keys: {', '.join(missing)}")
    units: dict[str, Any] = {}
    for unit, unit_type in UNIT_TYPES.items():
        raw = payload.get(unit)
        if raw is None:
            continue
        if not isinstance(raw, dict):
            raise ValueError(f"team '{payload['team_id']}' unit '{unit}' must be a mapping")
        allowed = {f.name for f in fields(unit_type)}
        unknown = sorted(set(raw) - allowed)
        if unknown:
            raise ValueError(f"team '{payload['team_id']}' unit '{unit}' has unknown ratings: {', '.join(unknown)}")
        units[unit] = unit_type(**{k: float(v) for k, v in raw.items()})
    coach = payload.get("coach")
    return TeamProfile(
        team_id=str(payload["team_id"]),
        name=str(payload["name"]),
        coach=CoachProfile(**coach) if isinstance(coach, dict) else None,
        **units,
    )


def load_teams(path: Path) -> list[TeamProfile]:
    with path.open("r", encoding="utf-8") as f:
        payload = json.load(f)
    if not isinstance(payload, list):
        raise ValueError(f"{path} must contain a list of team definitions")
    return [team_from_mapping(item) for item in payload]
