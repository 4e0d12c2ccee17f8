from coup.app.legal_actions import available_kinds, legal_actions
from coup.app.observations import build_table_view
from coup.domain.actions import Action, ActionKind
from coup.domain.roles import Role
from coup.domain.rules import RulesEngine
from coup.domain.state import MatchState


def make_match(*roles: Role, coins: dict[int, int] | None = None, start: bool = True) -> MatchState:
    state = MatchState()
    for idx, role in enumerate(roles):
        RulesEngine.add_participant(state, f"p{idx}", role)
    for seat, amount in (coins or {}).items():
        state.players[seat].coins = amount
    if start:
        RulesEngine.start(state)
    return state


def test_legal_actions_for_opening_turn():
    state = make_match(Role.GOVERNOR, Role.SPY)
    actions = legal_actions(state, 0)
    assert actions == [
        Action(ActionKind.GATHER),
        Action(ActionKind.TAX),
        Action(ActionKind.ARREST, target=1),
        Action(ActionKind.END_TURN),
    ]


def test_legal_actions_for_spy_include_free_actions():
    state = make_match(Role.SPY, Role.GOVERNOR, Role.JUDGE)
    kinds = {(action.kind, action.target) for action in legal_actions(state, 0)}
    assert (ActionKind.INVESTIGATE, 1) in kinds
    assert (ActionKind.INVESTIGATE, 2) in kinds
    assert (ActionKind.BLOCK_ARREST, 2) in kinds
    assert (ActionKind.INVESTIGATE, 0) not in kinds


def test_legal_actions_with_ten_coins_only_coup():
    state = make_match(Role.BARON, Role.SPY, Role.JUDGE, coins={0: 10})
    actions = legal_actions(state, 0)
    assert actions == [
        Action(ActionKind.COUP, target=1),
        Action(ActionKind.COUP, target=2),
        Action(ActionKind.END_TURN),
    ]


def test_legal_actions_empty_off_turn_and_during_block_window():
    state = make_match(Role.SPY, Role.GOVERNOR)
    assert legal_actions(state, 1) == []
    RulesEngine.propose(state, 0, Action(ActionKind.TAX))
    assert legal_actions(state, 0) == []


def test_available_kinds_ignore_targets():
    state = make_match(Role.BARON, Role.SPY, coins={0: 3})
    kinds = available_kinds(state, 0)
    assert ActionKind.INVEST in kinds
    assert ActionKind.SANCTION in kinds
    assert ActionKind.ARREST in kinds
    assert ActionKind.BRIBE not in kinds
    assert ActionKind.INVESTIGATE not in kinds
    assert available_kinds(state, 1) == []


def test_table_view_reflects_state():
    state = make_match(Role.GOVERNOR, Role.SPY, coins={1: 2})
    RulesEngine.commit_action(state, 0, Action(ActionKind.ARREST, target=1))
    view = build_table_view(state)
    assert view.treasury == 50
    assert view.started is True
    assert view.turn_player == 1
    assert view.turn_name == "p1"
    assert view.last_arrested == "p1"
    assert [seat.coins for seat in view.seats] == [1, 1]
    assert view.seats[0].role == "Governor"
    assert view.block_window is None
    assert view.game_over is False
    assert view.winner is None


def test_table_view_block_window():
    state = make_match(Role.SPY, Role.JUDGE, coins={0: 4})
    RulesEngine.propose(state, 0, Action(ActionKind.BRIBE))
    window = build_table_view(state).block_window
    assert window is not None
    assert window.actor == 0
    assert window.action == "bribe"
    assert window.target is None
    assert window.blockers == (1,)


def test_table_view_before_start_and_after_finish():
    state = make_match(Role.GOVERNOR, Role.SPY, start=False)
    assert build_table_view(state).game_over is False
    RulesEngine.start(state)
    state.players[0].coins = 7
    RulesEngine.commit_action(state, 0, Action(ActionKind.COUP, target=1))
    view = build_table_view(state)
    assert view.game_over is True
    assert view.winner == "p0"
