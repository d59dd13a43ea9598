from .coaching import CoachProfile, SituationalActionProvider
from .drive import Drive, DriveStats, DriveTracker
from .models import MatchResult, PlayRecord
from .ratings import CompositeRatingEvaluator, MatchupRatings
from .resolver import PlayResolver
from .session import MatchEngine
from .situation import derive_pressure, momentum_for, play_impact, situational_modifiers
from .special_teams import field_goal_probability, kickoff_distance
from .teams import TeamProfile, load_teams, team_from_mapping, uniform_team
from .validation import PlayInputValidator

__all__ = [
    "CoachProfile",
    "CompositeRatingEvaluator",
    "Drive",
    "DriveStats",
    "DriveTracker",
    "MatchEngine",
    "MatchResult",
    "MatchupRatings",
    "PlayInputValidator",
    "PlayRecord",
    "PlayResolver",
    "SituationalActionProvider",
    "TeamProfile",
    "derive_pressure",
    "field_goal_probability",
    "kickoff_distance",
    "load_teams",
    "momentum_for",
    "play_impact",
    "situational_modifiers",
    "team_from_mapping",
    "uniform_team",
]
