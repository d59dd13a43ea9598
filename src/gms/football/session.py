from __future__ import annotations

import logging
from collections import deque
from collections.abc import Mapping
from dataclasses import asdict, dataclass, replace

from gms.contracts import (
    SCRIMMAGE_OUTCOMES,
    ActionProvider,
    AttemptType,
    AttributeProvider,
    DefensiveActionSet,
    DefensiveFormation,
    DriveResult,
    FieldGoalAction,
    FieldGoalResult,
    FourthDownDecision,
    IncompletePass,
    KickoffAction,
    KickoffResult,
    KneelResult,
    MatchPhase,
    MatchRules,
    MatchSnapshot,
    OffensiveAction,
    PassAction,
    PlayContext,
    PlayEvent,
    PlayOutcome,
    PlaySummary,
    PuntAction,
    PuntResult,
    PuntResultType,
    RandomSource,
    RunAction,
    SpikeResult,
    Touchdown,
    Turnover,
)
from gms.core import (
    ConfigurationError,
    EngineIntegrityError,
    PlayEventBus,
    build_forensic_artifact,
    default_match_rules,
    match_event_id,
    misuse_error,
    now_utc,
    play_random,
)
from gms.football.drive import Drive, DriveTracker
from gms.football.models import MatchResult, PlayRecord
from gms.football.resolver import PlayResolver
from gms.football.situation import derive_pressure, momentum_for, play_impact
from gms.football.tables import MOMENTUM_WINDOW

logger = logging.getLogger(__name__)

FIELD_GOAL_SNAP_OFFSET = 17
KICK_RETURN_SET = DefensiveActionSet(formation=DefensiveFormation.KICK_RETURN)


@dataclass(slots=True)
class _MatchState:
    quarter: int
    clock_seconds: int
    down: int
    distance: int
    field_position: int
    possession_team_id: str
    home_score: int
    away_score: int
    phase: MatchPhase
    kickoff_spot: int


class MatchEngine:
    """Single-writer state machine for one match.

    `advance_play` is the only mutating entry point. Every provider call and
    the resolution itself happen before the state is touched, so a failure
    leaves the match exactly as it was.
    """

    def __init__(
        self,
        home_team_id: str,
        away_team_id: str,
        *,
        attributes: Mapping[str, AttributeProvider],
        actions: Mapping[str, ActionProvider] | ActionProvider,
        random_source: RandomSource,
        rules: MatchRules | None = None,
        resolver: PlayResolver | None = None,
        event_bus: PlayEventBus | None = None,
        match_id: str = "match",
    ) -> None:
        self._rules = rules or default_match_rules()
        self._rules.validate()
        if home_team_id == away_team_id:
            raise ValueError("home and away teams must differ")
        if not isinstance(actions, Mapping):
            actions = {home_team_id: actions, away_team_id: actions}
        self._home = home_team_id
        self._away = away_team_id
        self._match_id = match_id
        self._attributes = dict(attributes)
        self._actions = dict(actions)
        self._check_collaborators()

        self._random_source = random_source
        self._resolver = resolver or PlayResolver(random_source, rules=self._rules)
        self._event_bus = event_bus or PlayEventBus()
        self._tracker = DriveTracker()
        self._records: list[PlayRecord] = []
        self._recent: deque[tuple[str, int]] = deque(maxlen=MOMENTUM_WINDOW)
        self._play_index = 0
        # away side kicks the opening kickoff
        self._state = _MatchState(
            quarter=1,
            clock_seconds=self._rules.quarter_seconds,
            down=1,
            distance=self._rules.first_down_distance,
            field_position=self._rules.kickoff_spot,
            possession_team_id=away_team_id,
            home_score=0,
            away_score=0,
            phase=MatchPhase.KICKOFF,
            kickoff_spot=self._rules.kickoff_spot,
        )

    @property
    def event_bus(self) -> PlayEventBus:
        return self._event_bus

    @property
    def drives(self) -> list[Drive]:
        return self._tracker.drives

    @property
    def active_drive(self) -> Drive | None:
        return self._tracker.active

    @property
    def plays(self) -> list[PlayRecord]:
        return list(self._records)

    @property
    def is_finished(self) -> bool:
        return self._state.phase == MatchPhase.FINISHED

    def snapshot(self) -> MatchSnapshot:
        s = self._state
        return MatchSnapshot(
            quarter=s.quarter,
            clock_seconds=s.clock_seconds,
            down=s.down,
            distance=s.distance,
            field_position=s.field_position,
            possession_team_id=s.possession_team_id,
            home_team_id=self._home,
            away_team_id=self._away,
            home_score=s.home_score,
            away_score=s.away_score,
            phase=s.phase,
            play_count=len(self._records),
        )

    def final_scores(self) -> dict[str, int]:
        if not self.is_finished:
            raise misuse_error(
                "match_engine",
                "MATCH_NOT_FINISHED",
                "final scores are only available once the match is finished",
                self._state_snapshot(),
            )
        return {self._home: self._state.home_score, self._away: self._state.away_score}

    def advance_play(self) -> PlayOutcome:
        if self.is_finished:
            raise misuse_error("match_engine", "MATCH_FINISHED", "match is already finished", self._state_snapshot())
        play_index = len(self._records) + 1
        self._play_index = play_index
        rand = play_random(self._random_source, self._match_id, play_index)
        context = self._context()

        if self._state.phase == MatchPhase.KICKOFF:
            action, defense_action = self._kickoff_call(context, rand)
            outcome, breakdown = self._resolver.resolve(context, action, defense_action, random_source=rand)
        else:
            action, defense_action = self._scrimmage_call(context, rand)
            offense_ratings = defense_ratings = None
            if isinstance(action, (RunAction, PassAction)):
                offense_ratings = self._attributes[context.offense_team_id].offensive_attributes()
                defense_ratings = self._attributes[context.defense_team_id].defensive_attributes()
            outcome, breakdown = self._resolver.resolve(
                context, action, defense_action, offense_ratings, defense_ratings, random_source=rand
            )

        seconds = self._time_cost(outcome)
        conversion = self._apply_outcome(context, outcome, seconds, rand)
        self._recent.append((context.offense_team_id, play_impact(outcome)))
        self._tick_clock(seconds)
        self._ensure_drive()

        record = PlayRecord(
            play_index=play_index,
            quarter=context.quarter,
            clock_seconds=context.clock_seconds,
            offense_team_id=context.offense_team_id,
            offense_action=action,
            defense_action=defense_action,
            outcome=outcome,
            breakdown=breakdown,
            seconds_elapsed=seconds,
            snapshot=replace(self.snapshot(), play_count=play_index),
            conversion=conversion,
        )
        self._records.append(record)
        self._publish("play_resolved", context.offense_team_id, [f"{action.kind.value} -> {outcome.kind}"])
        logger.debug(
            "play %d q%d %ss %s: %s -> %s",
            play_index,
            context.quarter,
            context.clock_seconds,
            context.offense_team_id,
            action.kind.value,
            outcome.kind,
        )
        if self.is_finished:
            self._publish_final()
            logger.info(
                "match finished %s %d - %d %s after %d plays",
                self._home,
                self._state.home_score,
                self._state.away_score,
                self._away,
                play_index,
            )
        return outcome

    def play_out(self, max_plays: int | None = None) -> MatchResult:
        limit = max_plays or self._rules.max_plays
        action_stream: list[dict[str, str | int]] = []
        while not self.is_finished and len(self._records) < limit:
            outcome = self.advance_play()
            record = self._records[-1]
            action_stream.append(
                {
                    "play_index": record.play_index,
                    "quarter": record.quarter,
                    "offense_team": record.offense_team_id,
                    "play_kind": record.offense_action.kind.value,
                    "outcome": outcome.kind,
                }
            )
        if not self.is_finished:
            logger.warning("play limit %d reached before the clock expired; closing match", limit)
            self._finish()
            self._publish_final()
        return MatchResult(
            final_state=self.snapshot(),
            plays=self.plays,
            drives=self.drives,
            home_team_id=self._home,
            away_team_id=self._away,
            home_score=self._state.home_score,
            away_score=self._state.away_score,
            action_stream=action_stream,
        )

    def _check_collaborators(self) -> None:
        missing = [
            team_id
            for team_id in (self._home, self._away)
            if team_id not in self._attributes or team_id not in self._actions
        ]
        if missing:
            raise ConfigurationError(
                build_forensic_artifact(
                    engine_scope="match_engine",
                    error_code="MISSING_COLLABORATOR",
                    message=f"attribute and action providers are required for {missing}",
                    state_snapshot={"home_team_id": self._home, "away_team_id": self._away},
                    context={"attributes": sorted(self._attributes), "actions": sorted(self._actions)},
                    identifiers={"match_id": self._match_id},
                    causal_fragment=["match_setup"],
                )
            )

    def _other(self, team_id: str) -> str:
        return self._away if team_id == self._home else self._home

    def _score_of(self, team_id: str) -> int:
        return self._state.home_score if team_id == self._home else self._state.away_score

    def _context(self) -> PlayContext:
        s = self._state
        offense = s.possession_team_id
        defense = self._other(offense)
        diff = self._score_of(offense) - self._score_of(defense)
        return PlayContext(
            down=s.down,
            distance=s.distance,
            field_position=s.field_position,
            clock_seconds=s.clock_seconds,
            quarter=s.quarter,
            score_differential=diff,
            offense_team_id=offense,
            defense_team_id=defense,
            weather=self._rules.weather,
            pressure=derive_pressure(
                quarter=s.quarter,
                clock_seconds=s.clock_seconds,
                down=s.down,
                field_position=s.field_position,
                score_differential=diff,
                final_quarter=self._rules.quarters,
            ),
            momentum=momentum_for(offense, self._recent),
        )

    def _kickoff_call(self, context: PlayContext, rand: RandomSource) -> tuple[KickoffAction, DefensiveActionSet]:
        kicking_team = context.offense_team_id
        kickoff_type = self._actions[kicking_team].kickoff_type(context, rand)
        action = KickoffAction(
            kicking=self._attributes[kicking_team].kicking_attributes(),
            returning=self._attributes[context.defense_team_id].returner_attributes(),
            kickoff_type=kickoff_type,
            kickoff_spot=self._state.kickoff_spot,
        )
        return action, KICK_RETURN_SET

    def _scrimmage_call(self, context: PlayContext, rand: RandomSource) -> tuple[OffensiveAction, DefensiveActionSet]:
        offense = context.offense_team_id
        defense = context.defense_team_id
        provider = self._actions[offense]
        if context.down == 4:
            decision = provider.fourth_down_decision(context, rand)
            logger.debug("fourth down decision for %s at %s: %s", offense, context.field_position, decision.value)
            if decision == FourthDownDecision.PUNT:
                action = PuntAction(
                    kicking=self._attributes[offense].kicking_attributes(),
                    returning=self._attributes[defense].returner_attributes(),
                    punt_type=provider.punt_type(context, rand),
                )
                return action, KICK_RETURN_SET
            if decision == FourthDownDecision.FIELD_GOAL:
                action = FieldGoalAction(
                    kicking=self._attributes[offense].kicking_attributes(),
                    returning=self._attributes[defense].returner_attributes(),
                    distance=100 - context.field_position + FIELD_GOAL_SNAP_OFFSET,
                    field_goal_type=provider.field_goal_type(context, rand),
                )
                return action, KICK_RETURN_SET
        action = provider.offensive_action(context, rand)
        if isinstance(action, KickoffAction):
            raise ConfigurationError(
                build_forensic_artifact(
                    engine_scope="match_engine",
                    error_code="KICKOFF_OUTSIDE_KICKOFF_PHASE",
                    message="kickoff actions are only valid in the kickoff phase",
                    state_snapshot=self._state_snapshot(),
                    context={"action": type(action).__name__},
                    identifiers={"match_id": self._match_id, "offense_team_id": offense},
                    causal_fragment=["action_provider"],
                )
            )
        return action, self._actions[defense].defensive_action(context, rand)

    def _time_cost(self, outcome: PlayOutcome) -> int:
        costs = self._rules.time_costs
        if isinstance(outcome, IncompletePass):
            return costs.incomplete
        if isinstance(outcome, SpikeResult):
            return costs.spike
        if isinstance(outcome, KneelResult):
            return costs.kneel
        if isinstance(outcome, KickoffResult):
            return costs.kick
        if isinstance(outcome, PuntResult) and not outcome.is_fake:
            return costs.kick
        if isinstance(outcome, FieldGoalResult) and outcome.attempt == AttemptType.FIELD_GOAL:
            return costs.kick
        return costs.default

    def _apply_outcome(
        self,
        context: PlayContext,
        outcome: PlayOutcome,
        seconds: int,
        rand: RandomSource,
    ) -> FieldGoalResult | None:
        position = context.field_position
        if isinstance(outcome, KickoffResult):
            self._apply_kickoff(context, outcome)
        elif isinstance(outcome, Touchdown):
            return self._score_touchdown(position, outcome.yards, seconds, rand)
        elif isinstance(outcome, Turnover):
            self._tracker.add_play(PlaySummary(position, 0, seconds, False))
            self._change_possession(DriveResult.TURNOVER, 100 - position)
        elif isinstance(outcome, PuntResult):
            if outcome.is_fake:
                return self._advance_scrimmage(position, outcome.net_yards, seconds, rand)
            self._apply_punt(position, outcome, seconds)
        elif isinstance(outcome, FieldGoalResult):
            return self._apply_field_goal(position, outcome, seconds, rand)
        elif isinstance(outcome, SCRIMMAGE_OUTCOMES):
            return self._advance_scrimmage(position, outcome.yards, seconds, rand)
        else:
            raise EngineIntegrityError(
                build_forensic_artifact(
                    engine_scope="match_engine",
                    error_code="UNHANDLED_OUTCOME",
                    message=f"no state transition for outcome '{type(outcome).__name__}'",
                    state_snapshot=self._state_snapshot(),
                    context={},
                    identifiers={"match_id": self._match_id},
                    causal_fragment=["apply_outcome"],
                )
            )
        return None

    def _apply_kickoff(self, context: PlayContext, outcome: KickoffResult) -> None:
        s = self._state
        if not outcome.kicking_team_recovers:
            s.possession_team_id = context.defense_team_id
        s.field_position = outcome.start_position
        s.down = 1
        s.distance = self._rules.first_down_distance
        s.kickoff_spot = self._rules.kickoff_spot
        s.phase = MatchPhase.NORMAL
        logger.debug("kickoff %s: %s starts at %d", outcome.result_type.value, s.possession_team_id, s.field_position)

    def _apply_punt(self, position: int, outcome: PuntResult, seconds: int) -> None:
        self._tracker.add_play(PlaySummary(position, 0, seconds, False))
        landing = position + outcome.net_yards
        if outcome.result_type == PuntResultType.TOUCHBACK or landing >= 100:
            receiving = self._rules.punt_touchback_position
        else:
            receiving = max(1, min(99, 100 - landing))
        self._change_possession(DriveResult.PUNT, receiving)

    def _apply_field_goal(
        self,
        position: int,
        outcome: FieldGoalResult,
        seconds: int,
        rand: RandomSource,
    ) -> FieldGoalResult | None:
        if outcome.attempt == AttemptType.FAKE_FIELD_GOAL:
            return self._advance_scrimmage(position, outcome.yards, seconds, rand)
        if outcome.attempt != AttemptType.FIELD_GOAL:
            raise EngineIntegrityError(
                build_forensic_artifact(
                    engine_scope="match_engine",
                    error_code="CONVERSION_AS_PLAY",
                    message="conversion attempts are resolved only after a touchdown",
                    state_snapshot=self._state_snapshot(),
                    context={"attempt": outcome.attempt.value},
                    identifiers={"match_id": self._match_id},
                    causal_fragment=["apply_outcome", "field_goal"],
                )
            )
        self._tracker.add_play(PlaySummary(position, 0, seconds, False))
        if outcome.made:
            team = self._state.possession_team_id
            self._add_points(team, 3, f"field goal from {outcome.distance}")
            self._finalize_drive(DriveResult.FIELD_GOAL)
            self._prepare_kickoff(team, self._rules.kickoff_spot)
        else:
            self._change_possession(DriveResult.MISSED_FIELD_GOAL, 100 - position)
        return None

    def _advance_scrimmage(self, position: int, yards: int, seconds: int, rand: RandomSource) -> FieldGoalResult | None:
        s = self._state
        new_position = position + yards
        if new_position >= 100:
            return self._score_touchdown(position, yards, seconds, rand)
        if new_position <= 0:
            self._score_safety(position, yards, seconds)
            return None

        s.field_position = new_position
        # a loss grows the distance to go, unclamped
        s.distance -= yards
        first_down = s.distance <= 0
        self._tracker.add_play(PlaySummary(position, yards, seconds, first_down))
        if first_down:
            s.down = 1
            s.distance = self._rules.first_down_distance
            return None
        s.down += 1
        if s.down > 4:
            logger.debug("turnover on downs at %d", new_position)
            self._change_possession(DriveResult.TURNOVER, 100 - new_position)
        return None

    def _score_touchdown(self, position: int, yards: int, seconds: int, rand: RandomSource) -> FieldGoalResult:
        team = self._state.possession_team_id
        self._tracker.add_play(PlaySummary(position, yards, seconds, True))
        self._add_points(team, 6, "touchdown")
        conversion = self._resolver.resolve_conversion(self._rules.conversion, rand)
        if conversion.made:
            points = 2 if conversion.attempt == AttemptType.TWO_POINT else 1
            self._add_points(team, points, conversion.attempt.value)
        self._finalize_drive(DriveResult.TOUCHDOWN)
        self._prepare_kickoff(team, self._rules.kickoff_spot)
        return conversion

    def _score_safety(self, position: int, yards: int, seconds: int) -> None:
        conceding = self._state.possession_team_id
        self._tracker.add_play(PlaySummary(position, yards, seconds, False))
        self._add_points(self._other(conceding), 2, "safety")
        self._finalize_drive(DriveResult.SAFETY)
        self._prepare_kickoff(conceding, self._rules.safety_kick_spot)

    def _prepare_kickoff(self, kicking_team: str, spot: int) -> None:
        s = self._state
        s.phase = MatchPhase.KICKOFF
        s.possession_team_id = kicking_team
        s.kickoff_spot = spot
        s.field_position = spot
        s.down = 1
        s.distance = self._rules.first_down_distance

    def _change_possession(self, result: DriveResult, new_position: int) -> None:
        s = self._state
        self._finalize_drive(result)
        s.possession_team_id = self._other(s.possession_team_id)
        s.field_position = max(0, min(100, new_position))
        s.down = 1
        s.distance = self._rules.first_down_distance

    def _add_points(self, team_id: str, points: int, reason: str) -> None:
        if team_id == self._home:
            self._state.home_score += points
        else:
            self._state.away_score += points
        logger.info("%s scores %d (%s): %s %d - %d %s", team_id, points, reason, self._home, self._state.home_score, self._state.away_score, self._away)
        self._publish("score", team_id, [f"{reason} +{points}"])

    def _finalize_drive(self, result: DriveResult) -> None:
        if self._tracker.active is None:
            return
        drive = self._tracker.finalize(result)
        self._publish("drive_finalized", drive.offense_team_id, [result.value, drive.classify().value])

    def _ensure_drive(self) -> None:
        s = self._state
        if s.phase != MatchPhase.NORMAL or self._tracker.active is not None:
            return
        self._tracker.start(
            offense_team_id=s.possession_team_id,
            defense_team_id=self._other(s.possession_team_id),
            start_position=s.field_position,
            start_clock=s.clock_seconds,
            quarter=s.quarter,
        )

    def _tick_clock(self, seconds: int) -> None:
        s = self._state
        s.clock_seconds -= seconds
        if s.clock_seconds > 0:
            return
        if s.quarter >= self._rules.quarters:
            self._finish()
            return
        s.quarter += 1
        s.clock_seconds = self._rules.quarter_seconds
        logger.info("quarter %d begins: %s %d - %d %s", s.quarter, self._home, s.home_score, s.away_score, self._away)
        if s.quarter == self._rules.quarters // 2 + 1:
            self._start_second_half()

    def _start_second_half(self) -> None:
        s = self._state
        self._finalize_drive(DriveResult.END_OF_HALF)
        s.possession_team_id = self._other(s.possession_team_id)
        s.field_position = self._rules.kickoff_touchback_position
        s.down = 1
        s.distance = self._rules.first_down_distance
        s.kickoff_spot = self._rules.kickoff_spot
        s.phase = MatchPhase.NORMAL

    def _finish(self) -> None:
        s = self._state
        self._finalize_drive(DriveResult.END_OF_HALF)
        s.clock_seconds = 0
        s.phase = MatchPhase.FINISHED

    def _publish(self, kind: str, team_id: str, claims: list[str]) -> None:
        self._event_bus.publish(
            PlayEvent(
                event_id=match_event_id(self._match_id, self._play_index),
                time=now_utc(),
                kind=kind,
                play_index=self._play_index,
                team_id=team_id,
                claims=claims,
            )
        )

    def _publish_final(self) -> None:
        claims = [f"{self._home} {self._state.home_score}", f"{self._away} {self._state.away_score}"]
        self._publish("match_finished", self._home, claims)

    def _state_snapshot(self) -> dict[str, object]:
        return {"match_id": self._match_id, **asdict(self.snapshot())}
