from __future__ import annotations

import pytest

from gms.contracts import MatchPhase
from gms.core import seeded_random
from gms.football import CoachProfile, MatchEngine, SituationalActionProvider, uniform_team


def _play(seed: int, max_plays: int | None = None):
    engine = MatchEngine(
        "NOR",
        "SOU",
        attributes={"NOR": uniform_team("NOR", 74.0), "SOU": uniform_team("SOU", 68.0)},
        actions={
            "NOR": SituationalActionProvider(CoachProfile(passing_tendency=65.0)),
            "SOU": SituationalActionProvider(CoachProfile(fourth_down_aggression=65.0, blitz_aggression=45.0)),
        },
        random_source=seeded_random(seed),
        match_id="G1",
    )
    return engine, engine.play_out(max_plays)


def test_full_match_runs_to_completion_within_bounds():
    engine, result = _play(2024)
    assert result.final_state.phase == MatchPhase.FINISHED
    assert (result.final_state.quarter, result.final_state.clock_seconds) == (4, 0)
    assert engine.final_scores() == {"NOR": result.home_score, "SOU": result.away_score}

    previous = (0, 0)
    for record in result.plays:
        snap = record.snapshot
        assert 0 <= snap.field_position <= 100
        assert 1 <= snap.down <= 4
        assert 0 <= snap.clock_seconds <= 900
        assert snap.home_score >= previous[0] and snap.away_score >= previous[1]
        previous = (snap.home_score, snap.away_score)

    assert all(drive.finalized for drive in result.drives)
    assert engine.active_drive is None
    assert len(result.action_stream) == len(result.plays)
    assert all(record.outcome_kind == record.outcome.kind for record in result.plays)


def test_result_names_the_winner():
    _, result = _play(2024)
    final = result.final_state
    assert (final.score_for("NOR"), final.score_for("SOU")) == (result.home_score, result.away_score)
    if result.home_score == result.away_score:
        assert result.winner is None
    else:
        leader = "NOR" if result.home_score > result.away_score else "SOU"
        assert result.winner == leader
    with pytest.raises(KeyError):
        final.score_for("EAS")


def test_same_seed_replays_the_same_match():
    _, first = _play(7)
    _, second = _play(7)
    assert first.action_stream == second.action_stream
    assert (first.home_score, first.away_score) == (second.home_score, second.away_score)


def test_play_cap_closes_the_match():
    engine, result = _play(99, max_plays=10)
    assert len(result.plays) == 10
    assert result.final_state.phase == MatchPhase.FINISHED
    assert engine.is_finished
