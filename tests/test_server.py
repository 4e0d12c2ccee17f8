from dataclasses import fields

import pytest

from coup.domain.actions import Action, ActionKind
from coup.domain.errors import IllegalMove, NotCurrentTurn
from coup.domain.roles import Role
from coup.ops.config import MatchConfig, SeatSpec
from coup.server.game_server import GameServer, MatchRecord


def make_config(*roles: str, **kwargs) -> MatchConfig:
    seats = tuple(SeatSpec(name=f"p{idx}", role=role) for idx, role in enumerate(roles))
    return MatchConfig(seats=seats, **kwargs)


def test_new_match_from_config():
    server = GameServer()
    match_id = server.new_match(make_config("Governor", "Spy", starting_coins=2))
    state = server.get_state(match_id)
    assert state.started is True
    assert [player.role for player in state.players] == [Role.GOVERNOR, Role.SPY]
    assert [player.coins for player in state.players] == [2, 2]
    assert server.get_status(match_id) == "active"
    assert server.list_matches() == [match_id]


def test_new_match_from_mapping():
    server = GameServer()
    match_id = server.new_match(
        {"seats": [{"name": "Alice", "role": "judge"}, {"name": "Bob"}], "treasury": 20, "seed": 4}
    )
    state = server.get_state(match_id)
    assert state.treasury == 20
    assert state.players[0].role == Role.JUDGE


def test_seeded_random_roles_are_reproducible():
    config = make_config("random", "random", "random", "random", seed=11)
    server = GameServer()
    first = server.get_state(server.new_match(config))
    second = server.get_state(server.new_match(config))
    assert [p.role for p in first.players] == [p.role for p in second.players]


def test_match_record_keeps_only_match_data():
    assert [field.name for field in fields(MatchRecord)] == [
        "match_id",
        "state",
        "config",
        "status",
        "error",
    ]


def test_matches_are_independent():
    server = GameServer()
    first = server.new_match(make_config("Governor", "Spy"))
    second = server.new_match(make_config("Governor", "Spy"))
    server.step(first, 0, Action(ActionKind.GATHER))
    assert server.get_state(first).treasury == 49
    assert server.get_state(second).treasury == 50


def test_step_returns_rule_violation_without_failing_match():
    server = GameServer()
    match_id = server.new_match(make_config("Governor", "Spy"))
    result = server.step(match_id, 1, Action(ActionKind.GATHER))
    assert result.error == "Not your turn"
    assert result.fatal is False
    assert isinstance(result.violation, NotCurrentTurn)
    assert server.get_status(match_id) == "active"


def test_step_opens_block_window_and_resolves():
    server = GameServer()
    match_id = server.new_match(make_config("Spy", "Governor"))
    result = server.step(match_id, 0, Action(ActionKind.TAX))
    assert result.error is None
    assert result.pending is not None
    assert result.pending.blockers == (1,)
    assert server.legal_actions(match_id, 0) == []
    resolved = server.resolve_block(match_id, 1)
    assert resolved.error is None
    assert server.get_state(match_id).current_turn == 1


def test_resolve_without_window_is_violation():
    server = GameServer()
    match_id = server.new_match(make_config("Spy", "Governor"))
    result = server.resolve_block(match_id, None)
    assert isinstance(result.violation, IllegalMove)


def test_investigate_returns_report():
    server = GameServer()
    match_id = server.new_match(make_config("Spy", "Merchant", starting_coins=3))
    result = server.step(match_id, 0, Action(ActionKind.INVESTIGATE, target=1))
    assert result.report is not None
    assert result.report.role == Role.MERCHANT
    assert result.report.coins == 3


def test_finished_match_rejects_steps():
    server = GameServer()
    match_id = server.new_match(make_config("Spy", "Judge", starting_coins=7))
    server.step(match_id, 0, Action(ActionKind.COUP, target=1))
    assert server.get_status(match_id) == "finished"
    assert server.winner(match_id) == "p0"
    result = server.end_turn(match_id, 0)
    assert result.error == "Game is over"
    assert result.fatal is False


def test_evaluate_and_legal_actions():
    server = GameServer()
    match_id = server.new_match(make_config("Baron", "Spy", starting_coins=3))
    assert server.evaluate(match_id, 0, ActionKind.INVEST)
    assert not server.evaluate(match_id, 1, "gather")
    kinds = {action.kind for action in server.legal_actions(match_id, 0)}
    assert ActionKind.INVEST in kinds


def test_unknown_match_raises_key_error():
    server = GameServer()
    with pytest.raises(KeyError):
        server.get_state("missing")


def test_remove_and_clear_matches():
    server = GameServer()
    first = server.new_match(make_config("Spy", "Judge"))
    server.new_match(make_config("Spy", "Judge"))
    server.remove_match(first)
    assert first not in server.list_matches()
    server.clear_all_matches()
    assert server.list_matches() == []
