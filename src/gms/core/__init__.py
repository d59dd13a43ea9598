from .errors import ConfigurationError, EngineIntegrityError, MisuseError, build_forensic_artifact, misuse_error
from .events import PlayEventBus
from .ids import make_id, match_event_id, now_utc, play_stream_id
from .randomness import PythonRandomSource, gameplay_random, play_random, seeded_random
from .rules import default_match_rules, two_point_rules, validate_match_config

__all__ = [
    "ConfigurationError",
    "EngineIntegrityError",
    "MisuseError",
    "PlayEventBus",
    "PythonRandomSource",
    "build_forensic_artifact",
    "default_match_rules",
    "gameplay_random",
    "make_id",
    "match_event_id",
    "misuse_error",
    "now_utc",
    "play_random",
    "play_stream_id",
    "seeded_random",
    "two_point_rules",
    "validate_match_config",
]
