from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ActionKind(str, Enum):
    GATHER = "gather"
    TAX = "tax"
    BRIBE = "bribe"
    ARREST = "arrest"
    SANCTION = "sanction"
    COUP = "coup"
    INVEST = "invest"
    INVESTIGATE = "investigate"
    BLOCK_ARREST = "block_arrest"
    END_TURN = "end_turn"

    @classmethod
    def parse(cls, name: "ActionKind | str") -> "ActionKind":
        """Resolve an action name case-insensitively ("Block Arrest", "block_arrest")."""
        if isinstance(name, ActionKind):
            return name
        key = _normalize(name)
        for kind in cls:
            if _normalize(kind.value) == key:
                return kind
        raise ValueError(f"Unknown action: {name}")


def _normalize(name: str) -> str:
    return name.replace("_", "").replace(" ", "").lower()


@dataclass(frozen=True)
class ActionSpec:
    cost: int
    requires_target: bool
    contestable: bool
    free: bool = False


# Sanction against a Judge costs more; see RuleValidator.action_cost().
ACTION_SPECS: dict[ActionKind, ActionSpec] = {
    ActionKind.GATHER: ActionSpec(cost=0, requires_target=False, contestable=False),
    ActionKind.TAX: ActionSpec(cost=0, requires_target=False, contestable=True),
    ActionKind.BRIBE: ActionSpec(cost=4, requires_target=False, contestable=True),
    ActionKind.ARREST: ActionSpec(cost=0, requires_target=True, contestable=False),
    ActionKind.SANCTION: ActionSpec(cost=3, requires_target=True, contestable=False),
    ActionKind.COUP: ActionSpec(cost=7, requires_target=True, contestable=True),
    ActionKind.INVEST: ActionSpec(cost=3, requires_target=False, contestable=False),
    ActionKind.INVESTIGATE: ActionSpec(
        cost=0, requires_target=True, contestable=False, free=True
    ),
    ActionKind.BLOCK_ARREST: ActionSpec(
        cost=0, requires_target=True, contestable=False, free=True
    ),
    ActionKind.END_TURN: ActionSpec(cost=0, requires_target=False, contestable=False),
}

JUDGE_SANCTION_COST = 4
MANDATORY_COUP_COINS = 10
GENERAL_BLOCK_COST = 5
INVEST_RETURN = 6


@dataclass(frozen=True)
class Action:
    kind: ActionKind
    target: int | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.kind, ActionKind):
            object.__setattr__(self, "kind", ActionKind.parse(self.kind))
        spec = ACTION_SPECS[self.kind]
        if spec.requires_target and self.target is None:
            raise ValueError(f"{self.kind.value} action requires a target")
        if not spec.requires_target and self.target is not None:
            raise ValueError(f"{self.kind.value} action cannot include a target")

    @property
    def spec(self) -> ActionSpec:
        return ACTION_SPECS[self.kind]
