from .game_server import GameServer, MatchRecord, StepResult

__all__ = ["GameServer", "MatchRecord", "StepResult"]
