"""Legal action helpers for the application layer."""

from __future__ import annotations

from coup.domain.actions import ACTION_SPECS, Action, ActionKind
from coup.domain.state import MatchState
from coup.domain.validator import RuleValidator


def legal_actions(state: MatchState, player_id: int) -> list[Action]:
    """Return every action the player could commit right now."""
    if state.pending is not None:
        return []
    actions: list[Action] = []
    for kind in ActionKind:
        if ACTION_SPECS[kind].requires_target:
            for target in state.players:
                if RuleValidator.evaluate(state, kind, player_id, target.id):
                    actions.append(Action(kind, target=target.id))
        elif RuleValidator.evaluate(state, kind, player_id):
            actions.append(Action(kind))
    return actions


def available_kinds(state: MatchState, player_id: int) -> list[ActionKind]:
    """Return the action buttons that should be enabled for the player."""
    return [kind for kind in ActionKind if RuleValidator.is_available(state, kind, player_id)]
