from __future__ import annotations

import random
import uuid
from dataclasses import dataclass
from typing import Any, Callable, Mapping

from coup.app.legal_actions import legal_actions
from coup.domain.actions import Action, ActionKind
from coup.domain.errors import RuleViolation
from coup.domain.rules import InvestigationReport, RulesEngine
from coup.domain.state import MatchState, PendingAction
from coup.domain.validator import RuleValidator, Verdict
from coup.ops.config import MatchConfig, parse_match_config


@dataclass
class MatchRecord:
    match_id: str
    state: MatchState
    config: MatchConfig
    status: str = "active"
    error: str | None = None


@dataclass(frozen=True)
class StepResult:
    state: MatchState | None
    error: str | None = None
    fatal: bool = False
    pending: PendingAction | None = None
    report: InvestigationReport | None = None
    violation: RuleViolation | None = None


class GameServer:
    def __init__(self) -> None:
        self._matches: dict[str, MatchRecord] = {}

    def new_match(self, config: MatchConfig | Mapping[str, Any]) -> str:
        config = parse_match_config(config)
        rng = random.Random(config.seed)
        state = MatchState(treasury=config.treasury)
        for seat in config.seats:
            role = seat.resolve_role()
            if role is None:
                player = RulesEngine.add_random_participant(state, seat.name, rng)
            else:
                player = RulesEngine.add_participant(state, seat.name, role)
            player.coins = config.starting_coins
        RulesEngine.start(state)
        match_id = str(uuid.uuid4())
        self._matches[match_id] = MatchRecord(
            match_id=match_id,
            state=state,
            config=config,
        )
        return match_id

    def list_matches(self) -> list[str]:
        return list(self._matches.keys())

    def get_state(self, match_id: str) -> MatchState:
        return self._get_record(match_id).state

    def get_status(self, match_id: str) -> str:
        return self._get_record(match_id).status

    def evaluate(
        self,
        match_id: str,
        player_id: int,
        kind: ActionKind | str,
        target: int | None = None,
    ) -> Verdict:
        return RuleValidator.evaluate(self.get_state(match_id), kind, player_id, target)

    def legal_actions(self, match_id: str, player_id: int) -> list[Action]:
        record = self._get_record(match_id)
        if record.status != "active":
            return []
        return legal_actions(record.state, player_id)

    def step(self, match_id: str, player_id: int, action: Action) -> StepResult:
        """Propose an action; contested actions wait in a block window."""
        record = self._get_record(match_id)
        state = record.state
        if action.kind == ActionKind.INVESTIGATE:
            return self._run(record, lambda: RulesEngine.commit_action(state, player_id, action))
        return self._run(record, lambda: RulesEngine.propose(state, player_id, action))

    def resolve_block(self, match_id: str, blocker: int | None) -> StepResult:
        record = self._get_record(match_id)
        return self._run(record, lambda: RulesEngine.resolve_block(record.state, blocker))

    def end_turn(self, match_id: str, player_id: int) -> StepResult:
        record = self._get_record(match_id)
        return self._run(record, lambda: RulesEngine.end_turn(record.state, player_id))

    def winner(self, match_id: str) -> str:
        return RulesEngine.winner(self.get_state(match_id)).name

    def _run(self, record: MatchRecord, operation: Callable[[], object]) -> StepResult:
        if record.status == "errored":
            return StepResult(None, record.error, True)
        if RulesEngine.is_over(record.state):
            record.status = "finished"
            return StepResult(record.state, "Game is over", False)
        try:
            outcome = operation()
        except RuleViolation as exc:
            return StepResult(record.state, str(exc), False, violation=exc)
        except Exception as exc:  # noqa: BLE001
            record.status = "errored"
            record.error = f"Unexpected error: {exc}"
            return StepResult(record.state, record.error, True)
        if RulesEngine.is_over(record.state):
            record.status = "finished"
        pending = outcome if isinstance(outcome, PendingAction) else None
        report = outcome if isinstance(outcome, InvestigationReport) else None
        return StepResult(record.state, pending=pending, report=report)

    def _get_record(self, match_id: str) -> MatchRecord:
        if match_id not in self._matches:
            raise KeyError("Unknown match id")
        return self._matches[match_id]

    def remove_match(self, match_id: str) -> None:
        """Drop a match from memory."""
        self._matches.pop(match_id, None)

    def clear_all_matches(self) -> None:
        self._matches.clear()
