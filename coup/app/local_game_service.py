"""Interactive local game service for pass-and-play sessions.

The service holds one match per session and pauses whenever a contested
action opens a block window; the table resumes when a block decision (a
blocker seat or ``None``) is submitted.
"""

from __future__ import annotations

import base64
import logging
import os
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from coup.app.legal_actions import available_kinds
from coup.app.observations import TableView, build_table_view
from coup.domain.actions import Action, ActionKind
from coup.domain.errors import IllegalMove, MatchErrored
from coup.domain.rules import InvestigationReport
from coup.domain.validator import Verdict
from coup.ops.config import MatchConfig, SeatSpec

if TYPE_CHECKING:
    from coup.server.game_server import GameServer, StepResult

logger = logging.getLogger(__name__)


def _import_game_server():  # noqa: ANN202
    """Lazy import to avoid circular dependency with server.__init__."""
    from coup.server.game_server import GameServer

    return GameServer


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass
class LocalGameSession:
    """In-memory state for one interactive local game."""

    game_id: str
    match_id: str  # internal UUID used by GameServer
    seats: list[SeatSpec]
    last_report: InvestigationReport | None = None
    status: str = "active"  # active | awaiting_block | finished | errored
    error: str | None = None


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class LocalGameService:
    """Orchestrate pass-and-play games on a shared table."""

    def __init__(self, server: GameServer | None = None) -> None:
        self._sessions: dict[str, LocalGameSession] = {}
        if server is None:
            server = _import_game_server()()
        self._server: GameServer = server

    # -- public API ----------------------------------------------------------

    def create_game(
        self,
        seats: list[SeatSpec],
        seed: int | None = None,
        treasury: int | None = None,
    ) -> LocalGameSession:
        """Create and start a match with the given seats."""
        mapping: dict[str, Any] = {
            "seats": [seat.to_mapping() for seat in seats],
            "seed": seed,
        }
        if treasury is not None:
            mapping["treasury"] = treasury
        config = MatchConfig.from_mapping(mapping)
        match_id = self._server.new_match(config)
        session = LocalGameSession(
            game_id=self._new_game_id(),
            match_id=match_id,
            seats=list(seats),
        )
        self._sessions[session.game_id] = session
        logger.info("Created local game %s with %s seats", session.game_id, len(seats))
        return session

    def get_session(self, game_id: str) -> LocalGameSession:
        """Look up a game session by its short ID."""
        if game_id not in self._sessions:
            raise KeyError(f"Unknown game id: {game_id}")
        return self._sessions[game_id]

    def get_turn_view(self, game_id: str) -> dict[str, Any]:
        """Build the current turn payload for the UI."""
        session = self.get_session(game_id)
        if session.status == "errored":
            return {"game_id": game_id, "status": "errored", "error": session.error}
        state = self._server.get_state(session.match_id)
        table = build_table_view(state)
        if table.game_over:
            session.status = "finished"
        elif table.block_window is not None:
            session.status = "awaiting_block"
        else:
            session.status = "active"
        active = table.turn_player
        awaiting_action = session.status == "active" and active is not None
        return {
            "game_id": game_id,
            "status": session.status,
            "active_player_id": active,
            "active_player_name": table.turn_name,
            "table": _serialize_table(table),
            "available_actions": [kind.value for kind in available_kinds(state, active)]
            if awaiting_action
            else [],
            "legal_actions": _serialize_actions(
                self._server.legal_actions(session.match_id, active)
            )
            if awaiting_action
            else [],
            "investigation": _serialize_report(session.last_report),
            "winner": table.winner,
        }

    def evaluate(
        self,
        game_id: str,
        player_id: int,
        kind: ActionKind | str,
        target: int | None = None,
    ) -> Verdict:
        """Check an action without committing it."""
        session = self.get_session(game_id)
        return self._server.evaluate(session.match_id, player_id, kind, target)

    def submit_action(self, game_id: str, player_id: int, action: Action) -> dict[str, Any]:
        """Propose an action for the seat whose turn it is."""
        session = self.get_session(game_id)
        step = self._server.step(session.match_id, player_id, action)
        self._check_step(session, step)
        session.last_report = step.report
        return self.get_turn_view(game_id)

    def resolve_block(self, game_id: str, blocker: int | None) -> dict[str, Any]:
        """Submit the block decision for the open window."""
        session = self.get_session(game_id)
        step = self._server.resolve_block(session.match_id, blocker)
        self._check_step(session, step)
        session.last_report = None
        return self.get_turn_view(game_id)

    def end_turn(self, game_id: str, player_id: int) -> dict[str, Any]:
        session = self.get_session(game_id)
        step = self._server.end_turn(session.match_id, player_id)
        self._check_step(session, step)
        session.last_report = None
        return self.get_turn_view(game_id)

    # -- internal helpers ----------------------------------------------------

    def _check_step(self, session: LocalGameSession, step: StepResult) -> None:
        """Raise the failure carried by a step result."""
        if step.fatal:
            session.status = "errored"
            session.error = step.error
            raise MatchErrored(step.error or "Fatal game error")
        if step.violation is not None:
            raise step.violation
        if step.error:
            raise IllegalMove(step.error)

    def _new_game_id(self) -> str:
        """Generate a short uppercase Base32 game ID (8 chars), unique in-memory."""
        for _ in range(100):
            raw = os.urandom(5)  # 5 bytes -> 8 Base32 chars
            token = base64.b32encode(raw).decode("ascii").rstrip("=")[:8].upper()
            if token not in self._sessions:
                return token
        raise RuntimeError("Failed to generate unique game ID")


# ---------------------------------------------------------------------------
# Module-level helpers
# ---------------------------------------------------------------------------


def _serialize_table(table: TableView) -> dict[str, Any]:
    """Serialize a TableView for the UI."""
    window = table.block_window
    return {
        "treasury": table.treasury,
        "turn_player": table.turn_player,
        "actions_remaining": table.actions_remaining,
        "last_arrested": table.last_arrested,
        "players": [
            {
                "id": seat.id,
                "name": seat.name,
                "role": seat.role,
                "coins": seat.coins,
                "active": seat.active,
                "sanctioned": seat.sanctioned,
                "arrest_blocked": seat.arrest_blocked,
            }
            for seat in table.seats
        ],
        "block_window": None
        if window is None
        else {
            "actor": window.actor,
            "action": window.action,
            "target": window.target,
            "blockers": list(window.blockers),
        },
    }


def _serialize_actions(actions: list[Action]) -> list[dict[str, Any]]:
    """Serialize legal actions for the UI."""
    result = []
    for a in actions:
        entry: dict[str, Any] = {"kind": a.kind.value}
        if a.target is not None:
            entry["target"] = a.target
        result.append(entry)
    return result


def _serialize_report(report: InvestigationReport | None) -> dict[str, Any] | None:
    if report is None:
        return None
    return {
        "target": report.target,
        "name": report.name,
        "role": report.role.value,
        "coins": report.coins,
        "sanctioned": report.sanctioned,
    }
