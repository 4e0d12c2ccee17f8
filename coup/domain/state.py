from __future__ import annotations

from dataclasses import dataclass, field

from .actions import Action, ActionKind
from .roles import Role, can_block

MAX_PLAYERS = 6
MIN_PLAYERS = 2
STARTING_TREASURY = 50


@dataclass
class PlayerState:
    id: int
    name: str
    role: Role
    coins: int = 0
    active: bool = True
    sanctioned: bool = False
    arrest_blocked: bool = False
    last_arrested: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.role, Role):
            self.role = Role(self.role)
        if not self.name:
            raise ValueError("Player name is required")
        if self.coins < 0:
            raise ValueError("coins cannot be negative")

    def can_block(self, action: ActionKind | str) -> bool:
        """Return True if this seat may counter the action at this instant."""
        return can_block(self.role, action, self.coins)


@dataclass
class PendingAction:
    """An action waiting on the block window before it commits."""

    actor: int
    action: Action
    blockers: tuple[int, ...]


@dataclass
class MatchState:
    players: list[PlayerState] = field(default_factory=list)
    treasury: int = STARTING_TREASURY
    current_turn: int = 0
    started: bool = False
    last_arrested: str | None = None
    actions_remaining: int = 1
    pending: PendingAction | None = None

    def __post_init__(self) -> None:
        if len(self.players) > MAX_PLAYERS:
            raise ValueError(f"At most {MAX_PLAYERS} players allowed")
        ids = [player.id for player in self.players]
        if ids != list(range(len(self.players))):
            raise ValueError("Player ids must match seat order")
        names = [player.name for player in self.players]
        if len(names) != len(set(names)):
            raise ValueError("Duplicate player name")
        if self.treasury < 0:
            raise ValueError("treasury cannot be negative")
        if self.players and not (0 <= self.current_turn < len(self.players)):
            raise ValueError("Invalid current_turn")
