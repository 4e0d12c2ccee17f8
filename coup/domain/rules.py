from __future__ import annotations

import logging
import random
from dataclasses import dataclass

from .actions import (
    GENERAL_BLOCK_COST,
    INVEST_RETURN,
    MANDATORY_COUP_COINS,
    Action,
    ActionKind,
)
from .errors import (
    IllegalMove,
    IllegalTarget,
    InsufficientParticipants,
    MatchNotOver,
    NegativeAmount,
    ParticipantNotFound,
    RosterFull,
    TreasuryInsufficient,
)
from .roles import (
    MERCHANT_ARREST_PENALTY,
    MERCHANT_BONUS_THRESHOLD,
    Role,
    tax_amount,
)
from .state import MAX_PLAYERS, MIN_PLAYERS, MatchState, PendingAction, PlayerState
from .validator import RuleValidator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InvestigationReport:
    """What a Spy learns about a target."""

    target: int
    name: str
    role: Role
    coins: int
    sanctioned: bool


class RulesEngine:
    # -- roster and lifecycle ------------------------------------------------

    @staticmethod
    def add_participant(state: MatchState, name: str, role: Role) -> PlayerState:
        if len(state.players) >= MAX_PLAYERS:
            raise RosterFull(f"Maximum {MAX_PLAYERS} players allowed")
        if state.started:
            raise IllegalMove("Cannot join a match that has already started")
        if any(player.name == name for player in state.players):
            raise IllegalMove(f"Player name already taken: {name}")
        player = PlayerState(id=len(state.players), name=name, role=role)
        state.players.append(player)
        logger.info("%s (%s) joined the table", player.name, player.role.value)
        return player

    @staticmethod
    def add_random_participant(
        state: MatchState, name: str, rng: random.Random
    ) -> PlayerState:
        """Add a seat whose role is drawn uniformly from ``rng``."""
        return RulesEngine.add_participant(state, name, Role.random(rng))

    @staticmethod
    def start(state: MatchState) -> None:
        if state.started:
            raise IllegalMove("Match already started")
        if len(state.players) < MIN_PLAYERS:
            raise InsufficientParticipants("Not enough players to start game")
        state.started = True
        state.current_turn = 0
        state.actions_remaining = 1

    @staticmethod
    def is_over(state: MatchState) -> bool:
        return len(RulesEngine.active_players(state)) <= 1

    @staticmethod
    def winner(state: MatchState) -> PlayerState:
        if not RulesEngine.is_over(state):
            raise MatchNotOver("Game is not over yet")
        for player in state.players:
            if player.active:
                return player
        raise MatchNotOver("No winner - all players eliminated")

    # -- queries -------------------------------------------------------------

    @staticmethod
    def active_players(state: MatchState) -> list[PlayerState]:
        return [player for player in state.players if player.active]

    @staticmethod
    def current_player(state: MatchState) -> PlayerState:
        if not state.players:
            raise ParticipantNotFound("No players in game")
        return state.players[state.current_turn]

    @staticmethod
    def get_player(state: MatchState, player_id: int) -> PlayerState:
        if not (0 <= player_id < len(state.players)):
            raise ParticipantNotFound(f"Unknown player id: {player_id}")
        return state.players[player_id]

    @staticmethod
    def find_player(state: MatchState, name: str) -> PlayerState:
        for player in state.players:
            if player.name == name:
                return player
        raise ParticipantNotFound(f"Player not found: {name}")

    # -- treasury ------------------------------------------------------------

    @staticmethod
    def credit(state: MatchState, amount: int) -> None:
        if amount < 0:
            raise NegativeAmount("Cannot add negative amount to treasury")
        state.treasury += amount

    @staticmethod
    def debit(state: MatchState, amount: int) -> None:
        if amount < 0:
            raise NegativeAmount("Cannot remove negative amount from treasury")
        if state.treasury < amount:
            raise TreasuryInsufficient("Not enough coins in treasury")
        state.treasury -= amount

    # -- turn flow -----------------------------------------------------------

    @staticmethod
    def advance_turn(state: MatchState) -> None:
        if len(RulesEngine.active_players(state)) <= 1:
            return
        departing = state.players[state.current_turn]
        if departing.coins >= MANDATORY_COUP_COINS:
            logger.warning(
                "%s (%s) MUST COUP (has %s coins)",
                departing.name,
                departing.role.value,
                departing.coins,
            )
        departing.sanctioned = False
        departing.arrest_blocked = False
        count = len(state.players)
        start = state.current_turn
        idx = start
        while True:
            idx = (idx + 1) % count
            if idx == start or state.players[idx].active:
                break
        state.current_turn = idx
        upcoming = state.players[idx]
        if upcoming.active:
            logger.info(
                "%s (%s)'s turn begins - %s coins",
                upcoming.name,
                upcoming.role.value,
                upcoming.coins,
            )
            RulesEngine._on_turn_begin(state, upcoming)
            state.actions_remaining = 1

    @staticmethod
    def _on_turn_begin(state: MatchState, player: PlayerState) -> None:
        if player.role != Role.MERCHANT:
            return
        if player.coins >= MERCHANT_BONUS_THRESHOLD and state.treasury >= 1:
            RulesEngine.debit(state, 1)
            player.coins += 1
            logger.info("%s received merchant bonus coin", player.name)

    @staticmethod
    def _consume_action(state: MatchState) -> None:
        if state.actions_remaining > 0:
            state.actions_remaining -= 1
        if state.actions_remaining == 0:
            RulesEngine.advance_turn(state)

    # -- actions -------------------------------------------------------------

    @staticmethod
    def commit_action(
        state: MatchState, player_id: int, action: Action
    ) -> InvestigationReport | None:
        """Validate and apply an action, advancing the turn when the counter runs out.

        Investigate returns what the Spy learned; every other action returns None.
        """
        RulesEngine._ensure_no_pending(state)
        return RulesEngine._commit(state, player_id, action)

    @staticmethod
    def end_turn(state: MatchState, player_id: int) -> None:
        RulesEngine.commit_action(state, player_id, Action(ActionKind.END_TURN))

    @staticmethod
    def _commit(
        state: MatchState, player_id: int, action: Action
    ) -> InvestigationReport | None:
        RuleValidator.evaluate(state, action.kind, player_id, action.target).raise_for_reason()
        actor = state.players[player_id]
        kind = action.kind
        if kind == ActionKind.END_TURN:
            logger.info("%s (%s) ended turn", actor.name, actor.role.value)
            RulesEngine.advance_turn(state)
            return None
        if kind == ActionKind.INVESTIGATE:
            return RulesEngine._investigate(actor, RulesEngine._target(state, action))
        if kind == ActionKind.BLOCK_ARREST:
            target = RulesEngine._target(state, action)
            target.arrest_blocked = True
            logger.info("%s blocked %s's arrest ability", actor.name, target.name)
            return None
        if kind == ActionKind.GATHER:
            RulesEngine._collect(state, actor, 1)
        elif kind == ActionKind.TAX:
            RulesEngine._collect(state, actor, tax_amount(actor.role))
        elif kind == ActionKind.BRIBE:
            RulesEngine._pay(state, actor, RuleValidator.action_cost(state, kind))
            state.actions_remaining += 2
            logger.info("%s used bribe and gets 2 extra actions", actor.name)
        elif kind == ActionKind.ARREST:
            RulesEngine._arrest(state, actor, RulesEngine._target(state, action))
        elif kind == ActionKind.SANCTION:
            RulesEngine._sanction(state, actor, RulesEngine._target(state, action))
        elif kind == ActionKind.COUP:
            target = RulesEngine._target(state, action)
            RulesEngine._pay(state, actor, RuleValidator.action_cost(state, kind))
            target.active = False
            logger.info("%s performed coup on %s", actor.name, target.name)
        elif kind == ActionKind.INVEST:
            RulesEngine._pay(state, actor, RuleValidator.action_cost(state, kind))
            RulesEngine.debit(state, INVEST_RETURN)
            actor.coins += INVEST_RETURN
            logger.info("%s invested and now has %s coins", actor.name, actor.coins)
        else:
            raise IllegalMove(f"Unsupported action: {kind.value}")
        RulesEngine._consume_action(state)
        return None

    @staticmethod
    def _target(state: MatchState, action: Action) -> PlayerState:
        if action.target is None:
            raise IllegalTarget(f"Target required for {action.kind.value}")
        return RulesEngine.get_player(state, action.target)

    @staticmethod
    def _collect(state: MatchState, actor: PlayerState, amount: int) -> None:
        RulesEngine.debit(state, amount)
        actor.coins += amount
        logger.info(
            "%s (%s) collected %s coins - now has %s (treasury %s)",
            actor.name,
            actor.role.value,
            amount,
            actor.coins,
            state.treasury,
        )

    @staticmethod
    def _pay(state: MatchState, actor: PlayerState, amount: int) -> None:
        actor.coins -= amount
        RulesEngine.credit(state, amount)

    @staticmethod
    def _arrest(state: MatchState, actor: PlayerState, target: PlayerState) -> None:
        if target.role == Role.GENERAL:
            logger.info("%s arrested %s (General) - no coins transferred", actor.name, target.name)
        elif target.role == Role.MERCHANT:
            paid = min(target.coins, MERCHANT_ARREST_PENALTY)
            RulesEngine._pay(state, target, paid)
            logger.info("%s arrested %s (Merchant) - paid %s to treasury", actor.name, target.name, paid)
        elif target.coins > 0:
            target.coins -= 1
            actor.coins += 1
            logger.info("%s arrested %s - stole 1 coin", actor.name, target.name)
        else:
            logger.info("%s arrested %s - nothing to steal", actor.name, target.name)
        state.last_arrested = target.name
        actor.last_arrested = target.name

    @staticmethod
    def _sanction(state: MatchState, actor: PlayerState, target: PlayerState) -> None:
        cost = RuleValidator.action_cost(state, ActionKind.SANCTION, target.id)
        RulesEngine._pay(state, actor, cost)
        # Compensation keys off the target's role, never the actor's.
        if target.role == Role.BARON and state.treasury >= 1:
            RulesEngine.debit(state, 1)
            target.coins += 1
        target.sanctioned = True
        logger.info("%s sanctioned %s for %s coins", actor.name, target.name, cost)

    @staticmethod
    def _investigate(actor: PlayerState, target: PlayerState) -> InvestigationReport:
        logger.info("%s investigated %s", actor.name, target.name)
        return InvestigationReport(
            target=target.id,
            name=target.name,
            role=target.role,
            coins=target.coins,
            sanctioned=target.sanctioned,
        )

    # -- block window --------------------------------------------------------

    @staticmethod
    def eligible_blockers(
        state: MatchState, action: Action, player_id: int
    ) -> tuple[int, ...]:
        """Return seats that could counter the action if it were proposed now."""
        if not action.spec.contestable:
            return ()
        return tuple(
            player.id
            for player in state.players
            if player.active and player.id != player_id and player.can_block(action.kind)
        )

    @staticmethod
    def propose(
        state: MatchState, player_id: int, action: Action
    ) -> PendingAction | None:
        """Open a block window, or commit straight away when nobody can block."""
        RulesEngine._ensure_no_pending(state)
        RuleValidator.evaluate(state, action.kind, player_id, action.target).raise_for_reason()
        blockers = RulesEngine.eligible_blockers(state, action, player_id)
        if not blockers:
            RulesEngine._commit(state, player_id, action)
            return None
        state.pending = PendingAction(actor=player_id, action=action, blockers=blockers)
        logger.info(
            "%s proposed %s; block window open for %s",
            state.players[player_id].name,
            action.kind.value,
            ", ".join(state.players[seat].name for seat in blockers),
        )
        return state.pending

    @staticmethod
    def resolve_block(state: MatchState, blocker: int | None) -> None:
        """Close the block window: ``None`` commits, a blocker seat counters."""
        pending = state.pending
        if pending is None:
            raise IllegalMove("No block window is open")
        if blocker is None:
            state.pending = None
            RulesEngine._commit(state, pending.actor, pending.action)
            return
        if blocker not in pending.blockers:
            raise IllegalTarget("Player cannot block this action")
        actor = state.players[pending.actor]
        blocking = state.players[blocker]
        cost = RuleValidator.action_cost(state, pending.action.kind, pending.action.target)
        state.pending = None
        RulesEngine._pay(state, actor, cost)
        if pending.action.kind == ActionKind.COUP and blocking.role == Role.GENERAL:
            RulesEngine._pay(state, blocking, GENERAL_BLOCK_COST)
        logger.info(
            "%s (%s) blocked %s from %s",
            blocking.name,
            blocking.role.value,
            pending.action.kind.value,
            actor.name,
        )
        RulesEngine.advance_turn(state)

    @staticmethod
    def _ensure_no_pending(state: MatchState) -> None:
        if state.pending is not None:
            raise IllegalMove("Pending block must be resolved first")
