"""Read-only table snapshots for the presentation layer."""

from __future__ import annotations

from dataclasses import dataclass

from coup.domain.rules import RulesEngine
from coup.domain.state import MatchState, PendingAction, PlayerState


@dataclass(frozen=True)
class SeatView:
    """Public information about one seat."""

    id: int
    name: str
    role: str
    coins: int
    active: bool
    sanctioned: bool
    arrest_blocked: bool


@dataclass(frozen=True)
class BlockWindowView:
    """An action waiting for a block decision."""

    actor: int
    action: str
    target: int | None
    blockers: tuple[int, ...]


@dataclass(frozen=True)
class TableView:
    """Snapshot of everything a renderer needs to draw the table."""

    seats: tuple[SeatView, ...]
    treasury: int
    started: bool
    turn_player: int | None
    turn_name: str | None
    actions_remaining: int
    last_arrested: str | None
    block_window: BlockWindowView | None
    game_over: bool
    winner: str | None


def build_table_view(state: MatchState) -> TableView:
    """Build a snapshot of the match state."""
    seats = tuple(_seat_view(player) for player in state.players)
    turn_player: int | None = None
    turn_name: str | None = None
    if state.players:
        turn_player = state.current_turn
        turn_name = state.players[state.current_turn].name
    game_over = state.started and RulesEngine.is_over(state)
    winner = RulesEngine.winner(state).name if game_over else None
    return TableView(
        seats=seats,
        treasury=state.treasury,
        started=state.started,
        turn_player=turn_player,
        turn_name=turn_name,
        actions_remaining=state.actions_remaining,
        last_arrested=state.last_arrested,
        block_window=_block_window_view(state.pending),
        game_over=game_over,
        winner=winner,
    )


def _seat_view(player: PlayerState) -> SeatView:
    return SeatView(
        id=player.id,
        name=player.name,
        role=player.role.value,
        coins=player.coins,
        active=player.active,
        sanctioned=player.sanctioned,
        arrest_blocked=player.arrest_blocked,
    )


def _block_window_view(pending: PendingAction | None) -> BlockWindowView | None:
    if pending is None:
        return None
    return BlockWindowView(
        actor=pending.actor,
        action=pending.action.kind.value,
        target=pending.action.target,
        blockers=pending.blockers,
    )
