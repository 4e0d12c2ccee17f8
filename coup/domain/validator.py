"""Side-effect free legality checks for actions.

The validator never mutates a match and never raises for a rule failure; it
returns a :class:`Verdict`. Callers that want exception-style propagation use
:meth:`Verdict.raise_for_reason`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .actions import (
    ACTION_SPECS,
    INVEST_RETURN,
    JUDGE_SANCTION_COST,
    MANDATORY_COUP_COINS,
    ActionKind,
)
from .errors import (
    IllegalMove,
    IllegalTarget,
    InsufficientCoins,
    MatchNotStarted,
    NotCurrentTurn,
    RuleViolation,
    TreasuryInsufficient,
)
from .roles import Role, tax_amount
from .state import MatchState, PlayerState


class Reason(str, Enum):
    INSUFFICIENT_COINS = "insufficient_coins"
    NOT_CURRENT_TURN = "not_current_turn"
    ILLEGAL_TARGET = "illegal_target"
    ILLEGAL_MOVE = "illegal_move"
    MATCH_NOT_STARTED = "match_not_started"
    TREASURY_INSUFFICIENT = "treasury_insufficient"


_ERRORS: dict[Reason, type[RuleViolation]] = {
    Reason.INSUFFICIENT_COINS: InsufficientCoins,
    Reason.NOT_CURRENT_TURN: NotCurrentTurn,
    Reason.ILLEGAL_TARGET: IllegalTarget,
    Reason.ILLEGAL_MOVE: IllegalMove,
    Reason.MATCH_NOT_STARTED: MatchNotStarted,
    Reason.TREASURY_INSUFFICIENT: TreasuryInsufficient,
}

MUST_COUP_MESSAGE = "must coup"

_SPY_ONLY = {ActionKind.INVESTIGATE, ActionKind.BLOCK_ARREST}


@dataclass(frozen=True)
class Verdict:
    accepted: bool
    reason: Reason | None = None
    message: str = ""

    @staticmethod
    def accept() -> "Verdict":
        return Verdict(True)

    @staticmethod
    def reject(reason: Reason, message: str) -> "Verdict":
        return Verdict(False, reason, message)

    def __bool__(self) -> bool:
        return self.accepted

    def raise_for_reason(self) -> None:
        """Raise the concrete rule violation for a rejected verdict."""
        if self.accepted:
            return
        if self.reason is None:
            raise RuleViolation(self.message)
        raise _ERRORS[self.reason](self.message)


class RuleValidator:
    @staticmethod
    def evaluate(
        state: MatchState,
        kind: ActionKind | str,
        actor: int | None,
        target: int | None = None,
    ) -> Verdict:
        """Decide whether ``actor`` may perform ``kind`` against ``target``."""
        kind = ActionKind.parse(kind)
        actor_state = _lookup(state, actor)
        target_state = _lookup(state, target)
        verdict = RuleValidator._check_actor(state, kind, actor_state, target_state)
        if not verdict:
            return verdict
        if ACTION_SPECS[kind].requires_target:
            verdict = _check_target(kind, actor_state, target_state)
            if not verdict:
                return verdict
            if kind == ActionKind.ARREST and target_state.name == state.last_arrested:
                return Verdict.reject(
                    Reason.ILLEGAL_MOVE, "Cannot arrest the same player twice in a row"
                )
        return Verdict.accept()

    @staticmethod
    def is_available(state: MatchState, kind: ActionKind | str, actor: int | None) -> bool:
        """Target-less check used to enable or disable action buttons."""
        kind = ActionKind.parse(kind)
        return RuleValidator._check_actor(state, kind, _lookup(state, actor), None).accepted

    @staticmethod
    def action_cost(state: MatchState, kind: ActionKind | str, target: int | None = None) -> int:
        """Return the coin cost of an action, honouring the Judge sanction override."""
        kind = ActionKind.parse(kind)
        cost = ACTION_SPECS[kind].cost
        target_state = _lookup(state, target)
        if (
            kind == ActionKind.SANCTION
            and target_state is not None
            and target_state.role == Role.JUDGE
        ):
            return JUDGE_SANCTION_COST
        return cost

    @staticmethod
    def _check_actor(
        state: MatchState,
        kind: ActionKind,
        actor: PlayerState | None,
        target: PlayerState | None,
    ) -> Verdict:
        if actor is None:
            return Verdict.reject(Reason.ILLEGAL_MOVE, "No actor specified")
        if not actor.active:
            return Verdict.reject(Reason.ILLEGAL_MOVE, "Player is not active")
        if actor.coins >= MANDATORY_COUP_COINS and kind not in (
            ActionKind.COUP,
            ActionKind.END_TURN,
        ):
            return Verdict.reject(Reason.ILLEGAL_MOVE, MUST_COUP_MESSAGE)
        if not state.players or state.current_turn != actor.id:
            return Verdict.reject(Reason.NOT_CURRENT_TURN, "Not your turn")
        if not state.started:
            return Verdict.reject(Reason.MATCH_NOT_STARTED, "Game has not started")
        cost = RuleValidator.action_cost(
            state, kind, target.id if target is not None else None
        )
        if actor.coins < cost:
            return Verdict.reject(
                Reason.INSUFFICIENT_COINS, f"Need {cost} coins for {kind.value}"
            )
        if kind in (ActionKind.GATHER, ActionKind.TAX) and actor.sanctioned:
            return Verdict.reject(
                Reason.ILLEGAL_MOVE, "You are under sanctions and cannot gather or tax"
            )
        if kind == ActionKind.ARREST and actor.arrest_blocked:
            return Verdict.reject(
                Reason.ILLEGAL_MOVE, "Your arrest ability is blocked this turn"
            )
        if kind == ActionKind.INVEST and actor.role != Role.BARON:
            return Verdict.reject(Reason.ILLEGAL_MOVE, "Only Baron can invest")
        if kind in _SPY_ONLY and actor.role != Role.SPY:
            return Verdict.reject(Reason.ILLEGAL_MOVE, f"Only Spy can {kind.value}")
        if kind == ActionKind.INVEST and state.treasury < INVEST_RETURN:
            return Verdict.reject(
                Reason.ILLEGAL_MOVE,
                "Treasury doesn't have enough coins for investment return",
            )
        if kind in (ActionKind.GATHER, ActionKind.TAX):
            amount = 1 if kind == ActionKind.GATHER else tax_amount(actor.role)
            if state.treasury < amount:
                return Verdict.reject(
                    Reason.TREASURY_INSUFFICIENT, "Not enough coins in treasury"
                )
        return Verdict.accept()


def _check_target(
    kind: ActionKind, actor: PlayerState, target: PlayerState | None
) -> Verdict:
    if target is None:
        return Verdict.reject(Reason.ILLEGAL_TARGET, f"Target required for {kind.value}")
    if not target.active:
        return Verdict.reject(Reason.ILLEGAL_TARGET, "Target player is not active")
    if target.id == actor.id:
        return Verdict.reject(
            Reason.ILLEGAL_TARGET, f"Cannot target yourself with {kind.value}"
        )
    return Verdict.accept()


def _lookup(state: MatchState, seat: int | None) -> PlayerState | None:
    if seat is None or not (0 <= seat < len(state.players)):
        return None
    return state.players[seat]
