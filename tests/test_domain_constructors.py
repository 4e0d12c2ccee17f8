import random

import pytest

from coup.domain.actions import ACTION_SPECS, Action, ActionKind
from coup.domain.roles import Role, can_block, tax_amount
from coup.domain.state import MatchState, PlayerState


def test_action_kind_parse_is_case_insensitive():
    assert ActionKind.parse("Tax") == ActionKind.TAX
    assert ActionKind.parse("Block Arrest") == ActionKind.BLOCK_ARREST
    assert ActionKind.parse("blockarrest") == ActionKind.BLOCK_ARREST
    assert ActionKind.parse("END_TURN") == ActionKind.END_TURN
    with pytest.raises(ValueError):
        ActionKind.parse("steal")


def test_action_target_requirements():
    Action(ActionKind.GATHER)
    Action(ActionKind.COUP, target=1)
    with pytest.raises(ValueError):
        Action(ActionKind.COUP)
    with pytest.raises(ValueError):
        Action(ActionKind.TAX, target=1)


def test_action_accepts_kind_name():
    assert Action("Arrest", target=2).kind == ActionKind.ARREST


def test_action_catalog_costs_and_flags():
    assert ACTION_SPECS[ActionKind.BRIBE].cost == 4
    assert ACTION_SPECS[ActionKind.SANCTION].cost == 3
    assert ACTION_SPECS[ActionKind.COUP].cost == 7
    assert ACTION_SPECS[ActionKind.INVEST].cost == 3
    contestable = {kind for kind, spec in ACTION_SPECS.items() if spec.contestable}
    assert contestable == {ActionKind.TAX, ActionKind.BRIBE, ActionKind.COUP}
    free = {kind for kind, spec in ACTION_SPECS.items() if spec.free}
    assert free == {ActionKind.INVESTIGATE, ActionKind.BLOCK_ARREST}


def test_tax_amount_per_role():
    assert tax_amount(Role.GOVERNOR) == 3
    for role in Role:
        if role != Role.GOVERNOR:
            assert tax_amount(role) == 2


def test_block_capabilities():
    assert can_block(Role.GOVERNOR, "TAX", 0)
    assert can_block(Role.JUDGE, "bribe", 0)
    assert not can_block(Role.GENERAL, "coup", 4)
    assert can_block(Role.GENERAL, "Coup", 5)
    assert not can_block(Role.SPY, "tax", 10)
    assert not can_block(Role.GOVERNOR, "not-an-action", 0)


def test_random_role_uses_injected_rng():
    first = [Role.random(random.Random(7)) for _ in range(3)]
    second = [Role.random(random.Random(7)) for _ in range(3)]
    assert first == second
    drawn = {Role.random(random.Random(seed)) for seed in range(200)}
    assert drawn == set(Role)


def test_player_state_validation():
    player = PlayerState(id=0, name="Alice", role="Spy")
    assert player.role == Role.SPY
    assert player.coins == 0
    assert player.active is True
    with pytest.raises(ValueError):
        PlayerState(id=0, name="", role=Role.SPY)
    with pytest.raises(ValueError):
        PlayerState(id=0, name="Alice", role=Role.SPY, coins=-1)


def test_player_can_block_reads_own_coins():
    general = PlayerState(id=0, name="G", role=Role.GENERAL, coins=4)
    assert not general.can_block(ActionKind.COUP)
    general.coins = 5
    assert general.can_block(ActionKind.COUP)


def test_match_state_defaults():
    state = MatchState()
    assert state.treasury == 50
    assert state.players == []
    assert state.started is False
    assert state.actions_remaining == 1
    assert state.pending is None


def test_match_state_validation():
    with pytest.raises(ValueError):
        MatchState(treasury=-1)
    with pytest.raises(ValueError):
        MatchState(players=[PlayerState(id=1, name="a", role=Role.SPY)])
    with pytest.raises(ValueError):
        MatchState(
            players=[
                PlayerState(id=0, name="a", role=Role.SPY),
                PlayerState(id=1, name="a", role=Role.JUDGE),
            ]
        )
    with pytest.raises(ValueError):
        MatchState(
            players=[PlayerState(id=idx, name=f"p{idx}", role=Role.SPY) for idx in range(7)]
        )
