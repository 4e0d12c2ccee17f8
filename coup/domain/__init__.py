from .actions import ACTION_SPECS, Action, ActionKind, ActionSpec
from .errors import (
    IllegalMove,
    IllegalTarget,
    InsufficientCoins,
    InsufficientParticipants,
    MatchNotOver,
    MatchErrored,
    MatchNotStarted,
    NegativeAmount,
    NotCurrentTurn,
    ParticipantNotFound,
    RosterFull,
    RuleViolation,
    TreasuryInsufficient,
)
from .roles import Role
from .rules import InvestigationReport, RulesEngine
from .state import MatchState, PendingAction, PlayerState
from .validator import Reason, RuleValidator, Verdict

__all__ = [
    "Action",
    "ActionKind",
    "ActionSpec",
    "ACTION_SPECS",
    "Role",
    "PlayerState",
    "MatchState",
    "PendingAction",
    "RulesEngine",
    "InvestigationReport",
    "RuleValidator",
    "Verdict",
    "Reason",
    "RuleViolation",
    "InsufficientCoins",
    "NotCurrentTurn",
    "IllegalTarget",
    "IllegalMove",
    "RosterFull",
    "InsufficientParticipants",
    "ParticipantNotFound",
    "MatchNotStarted",
    "MatchErrored",
    "MatchNotOver",
    "NegativeAmount",
    "TreasuryInsufficient",
]
