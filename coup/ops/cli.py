"""CLI helpers for loading match configs and replaying scripted actions."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Mapping

from coup.app.observations import TableView, build_table_view
from coup.domain.actions import Action, ActionKind
from coup.domain.errors import IllegalMove, MatchErrored, ParticipantNotFound
from coup.domain.rules import InvestigationReport, RulesEngine
from coup.domain.state import MatchState
from coup.ops.config import MatchConfig, load_config
from coup.server.game_server import GameServer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReplayResult:
    """Outcome of replaying a scripted match."""

    match_id: str
    table: TableView
    reports: tuple[InvestigationReport, ...]


def replay_config(config: MatchConfig, server: GameServer | None = None) -> ReplayResult:
    """Play every scripted action in ``config`` and return the final table.

    Each step is a mapping with ``player`` and ``action`` names, an optional
    ``target`` name and an optional ``block`` naming the seat that counters a
    contested action (omitted means nobody blocks).
    """
    server = server or GameServer()
    match_id = server.new_match(config)
    state = server.get_state(match_id)
    reports: list[InvestigationReport] = []
    for index, step in enumerate(config.actions):
        try:
            player, action, blocker = _parse_step(state, step)
        except (KeyError, ValueError, ParticipantNotFound) as exc:
            raise ValueError(f"Step {index}: {exc}") from exc
        if action.kind == ActionKind.END_TURN:
            result = server.end_turn(match_id, player)
        else:
            result = server.step(match_id, player, action)
        if result.error is None and result.pending is not None:
            result = server.resolve_block(match_id, blocker)
        elif result.error is None and blocker is not None:
            raise IllegalMove(f"Step {index}: no block window to resolve")
        if result.fatal:
            raise MatchErrored(result.error or "Fatal game error")
        if result.violation is not None:
            raise result.violation
        if result.error:
            raise IllegalMove(f"Step {index}: {result.error}")
        if result.report is not None:
            reports.append(result.report)
        logger.debug("Step %s applied: %s", index, step)
    return ReplayResult(
        match_id=match_id,
        table=build_table_view(server.get_state(match_id)),
        reports=tuple(reports),
    )


def execute_config(config_path: Path, dry_run: bool = False) -> ReplayResult | None:
    """Load a config file and replay it unless ``dry_run`` is set."""
    config = load_config(config_path)
    if dry_run:
        return None
    return replay_config(config)


def format_result(result: ReplayResult) -> str:
    """Render a replay result as indented JSON."""
    payload: dict[str, Any] = {
        "match_id": result.match_id,
        "table": asdict(result.table),
        "investigations": [
            {**asdict(report), "role": report.role.value} for report in result.reports
        ],
    }
    return json.dumps(payload, indent=2)


def _parse_step(
    state: MatchState, step: Mapping[str, Any]
) -> tuple[int, Action, int | None]:
    """Resolve player names in a scripted step to seat ids."""
    player = RulesEngine.find_player(state, str(step["player"])).id
    kind = ActionKind.parse(str(step["action"]))
    target_name = step.get("target")
    target = (
        RulesEngine.find_player(state, str(target_name)).id
        if target_name is not None
        else None
    )
    block_name = step.get("block")
    blocker = (
        RulesEngine.find_player(state, str(block_name)).id
        if block_name is not None
        else None
    )
    return player, Action(kind, target=target), blocker
