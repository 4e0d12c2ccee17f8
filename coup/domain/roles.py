"""Role definitions and per-role behavior tables."""

from __future__ import annotations

import random
from enum import Enum

from .actions import ActionKind


class Role(str, Enum):
    GOVERNOR = "Governor"
    SPY = "Spy"
    BARON = "Baron"
    GENERAL = "General"
    JUDGE = "Judge"
    MERCHANT = "Merchant"

    @classmethod
    def random(cls, rng: random.Random) -> "Role":
        """Draw a role uniformly using the caller's RNG."""
        return rng.choice(list(cls))


DEFAULT_TAX = 2

TAX_AMOUNT: dict[Role, int] = {Role.GOVERNOR: 3}

# Actions each role may counter during a block window.
BLOCKABLE: dict[Role, frozenset[ActionKind]] = {
    Role.GOVERNOR: frozenset({ActionKind.TAX}),
    Role.GENERAL: frozenset({ActionKind.COUP}),
    Role.JUDGE: frozenset({ActionKind.BRIBE}),
}

# Minimum coins a role must hold before its block capability is live.
BLOCK_MIN_COINS: dict[Role, int] = {Role.GENERAL: 5}

MERCHANT_BONUS_THRESHOLD = 3
MERCHANT_ARREST_PENALTY = 2


def tax_amount(role: Role) -> int:
    """Return how many coins a tax yields for the role."""
    return TAX_AMOUNT.get(role, DEFAULT_TAX)


def can_block(role: Role, action: ActionKind | str, coins: int) -> bool:
    """Return True when the role can counter the named action right now."""
    try:
        kind = ActionKind.parse(action)
    except ValueError:
        return False
    if kind not in BLOCKABLE.get(role, frozenset()):
        return False
    return coins >= BLOCK_MIN_COINS.get(role, 0)
