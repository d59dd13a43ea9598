from __future__ import annotations

from datetime import UTC, datetime
from uuid import uuid4


def now_utc() -> datetime:
    return datetime.now(UTC)


def make_id(prefix: str) -> str:
    return f"{prefix}_{uuid4().hex[:12]}"


def play_stream_id(match_id: str, play_index: int) -> str:
    """Substream name for one play's draws; stable across replays of a seed."""
    return f"{match_id}:play:{play_index}"


def match_event_id(match_id: str, play_index: int) -> str:
    return make_id(f"{match_id}.p{play_index}")
