"""Match configuration models and loading."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

from coup.domain.roles import Role
from coup.domain.state import MAX_PLAYERS, MIN_PLAYERS, STARTING_TREASURY

RANDOM_ROLE = "random"


@dataclass(frozen=True)
class SeatSpec:
    """Specification for one seat: a name and a role (or a random draw)."""

    name: str
    role: str = RANDOM_ROLE

    def __post_init__(self) -> None:
        """Validate seat spec fields."""
        if not isinstance(self.name, str) or not self.name:
            raise ValueError("SeatSpec.name is required")
        if self.role != RANDOM_ROLE:
            try:
                Role(self.role)
            except ValueError as exc:
                raise ValueError(f"Unknown role: {self.role}") from exc

    def resolve_role(self) -> Role | None:
        """Return the fixed role, or None when the role is drawn at random."""
        if self.role == RANDOM_ROLE:
            return None
        return Role(self.role)

    def to_mapping(self) -> dict[str, object]:
        return {"name": self.name, "role": self.role}

    @staticmethod
    def from_mapping(data: Mapping[str, Any]) -> "SeatSpec":
        """Create a SeatSpec from a mapping."""
        name = data.get("name")
        if not isinstance(name, str) or not name:
            raise ValueError("SeatSpec.name must be a non-empty string")
        role = data.get("role") or RANDOM_ROLE
        if not isinstance(role, str):
            raise ValueError("SeatSpec.role must be a string")
        role = role.strip()
        if role.lower() == RANDOM_ROLE:
            role = RANDOM_ROLE
        else:
            role = role.capitalize()
        return SeatSpec(name=name, role=role)


@dataclass(frozen=True)
class MatchConfig:
    """Specification for a match: seats, opening treasury and RNG seed."""

    seats: tuple[SeatSpec, ...]
    treasury: int = STARTING_TREASURY
    starting_coins: int = 0
    seed: int | None = None
    actions: tuple[dict[str, object], ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        """Validate match config fields."""
        if not (MIN_PLAYERS <= len(self.seats) <= MAX_PLAYERS):
            raise ValueError(f"Player count must be {MIN_PLAYERS}-{MAX_PLAYERS}")
        names = [seat.name for seat in self.seats]
        if len(names) != len(set(names)):
            raise ValueError("Seat names must be unique")
        if self.treasury < 0:
            raise ValueError("treasury cannot be negative")
        if self.starting_coins < 0:
            raise ValueError("starting_coins cannot be negative")

    def to_mapping(self) -> dict[str, object]:
        """Return a mapping representation of the config."""
        payload: dict[str, object] = {
            "seats": [seat.to_mapping() for seat in self.seats],
            "treasury": self.treasury,
            "starting_coins": self.starting_coins,
            "seed": self.seed,
        }
        if self.actions:
            payload["actions"] = [dict(step) for step in self.actions]
        return payload

    @staticmethod
    def from_mapping(data: Mapping[str, Any]) -> "MatchConfig":
        """Create a MatchConfig from a mapping."""
        seats_data = data.get("seats", [])
        if not isinstance(seats_data, list):
            raise ValueError("seats must be a list")
        seats = tuple(SeatSpec.from_mapping(item) for item in seats_data)
        actions_data = data.get("actions", []) or []
        if not isinstance(actions_data, list):
            raise ValueError("actions must be a list")
        for step in actions_data:
            if not isinstance(step, Mapping):
                raise ValueError("each action must be a mapping")
        return MatchConfig(
            seats=seats,
            treasury=_int_field(data, "treasury", STARTING_TREASURY),
            starting_coins=_int_field(data, "starting_coins", 0),
            seed=_int_field(data, "seed", None),
            actions=tuple(dict(step) for step in actions_data),
        )


def _int_field(data: Mapping[str, Any], key: str, default: int | None) -> int | None:
    """Read an optional integer field; an explicit null falls back to the default."""
    value = data.get(key)
    if value is None:
        return default
    if isinstance(value, bool):
        raise ValueError(f"{key} must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{key} must be an integer") from exc


def parse_match_config(config: MatchConfig | Mapping[str, Any]) -> MatchConfig:
    """Normalize a config input into a MatchConfig instance."""
    if isinstance(config, MatchConfig):
        return config
    return MatchConfig.from_mapping(config)


def load_config(path: Path) -> MatchConfig:
    """Load a match config from JSON or YAML."""
    data = _load_config_data(path)
    if not isinstance(data, Mapping):
        raise ValueError("Config file must contain a mapping")
    return MatchConfig.from_mapping(data)


def _load_config_data(path: Path) -> Mapping[str, Any]:
    """Load config data from disk."""
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    if path.suffix.lower() in {".json"}:
        return _load_json(path)
    if path.suffix.lower() in {".yaml", ".yml"}:
        return _load_yaml(path)
    raise ValueError("Config file must be .json or .yaml")


def _load_json(path: Path) -> Mapping[str, Any]:
    """Load config data from a JSON file."""
    with path.open("r", encoding="utf-8") as handle:
        return json.load(handle)


def _load_yaml(path: Path) -> Mapping[str, Any]:
    """Load config data from a YAML file."""
    import yaml

    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle)
    if not isinstance(data, Mapping):
        raise ValueError("YAML config must be a mapping")
    return data
