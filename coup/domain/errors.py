"""Rule violation taxonomy shared by the engine and its callers."""

from __future__ import annotations


class RuleViolation(Exception):
    """Base class for every failure the rules engine reports."""


class InsufficientCoins(RuleViolation):
    pass


class NotCurrentTurn(RuleViolation):
    pass


class IllegalTarget(RuleViolation):
    """Self-target, inactive target or a missing required target."""


class IllegalMove(RuleViolation):
    """Sanctioned, blocked, role mismatch, mandatory coup and similar."""


class RosterFull(RuleViolation):
    pass


class InsufficientParticipants(RuleViolation):
    pass


class ParticipantNotFound(RuleViolation):
    pass


class MatchNotStarted(RuleViolation):
    pass


class MatchNotOver(RuleViolation):
    pass


class NegativeAmount(RuleViolation):
    pass


class TreasuryInsufficient(RuleViolation):
    pass


class MatchErrored(RuleViolation):
    """The hosted match hit an unexpected failure and can no longer be played."""
