"""FastAPI endpoints for local pass-and-play games."""

from __future__ import annotations

from typing import Any, Callable

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from coup.app.local_game_service import LocalGameService
from coup.domain.actions import Action, ActionKind
from coup.domain.errors import NotCurrentTurn, RuleViolation
from coup.ops.config import SeatSpec

# ---------------------------------------------------------------------------
# Pydantic request / response models
# ---------------------------------------------------------------------------


class SeatRequest(BaseModel):
    name: str = Field(..., min_length=1, description="Display name, unique per table")
    role: str = Field(
        default="random",
        description="Governor, Spy, Baron, General, Judge, Merchant or 'random'",
    )


class CreateGameRequest(BaseModel):
    seats: list[SeatRequest] = Field(
        ..., min_length=2, max_length=6, description="2-6 seat definitions"
    )
    seed: int | None = Field(
        default=None, description="Optional RNG seed for random role draws"
    )
    treasury: int | None = Field(default=None, ge=0)


class CreateGameResponse(BaseModel):
    game_id: str


class PlayerView(BaseModel):
    id: int
    name: str
    role: str
    coins: int
    active: bool
    sanctioned: bool
    arrest_blocked: bool


class BlockWindowView(BaseModel):
    actor: int
    action: str
    target: int | None = None
    blockers: list[int]


class TableView(BaseModel):
    treasury: int
    turn_player: int | None
    actions_remaining: int
    last_arrested: str | None = None
    players: list[PlayerView]
    block_window: BlockWindowView | None = None


class ActionView(BaseModel):
    kind: str
    target: int | None = None


class InvestigationView(BaseModel):
    target: int
    name: str
    role: str
    coins: int
    sanctioned: bool


class TurnResponse(BaseModel):
    game_id: str
    status: str
    active_player_id: int | None = None
    active_player_name: str | None = None
    table: TableView | None = None
    available_actions: list[str] = []
    legal_actions: list[ActionView] = []
    investigation: InvestigationView | None = None
    winner: str | None = None
    error: str | None = None


class ActionRequest(BaseModel):
    kind: str
    target: int | None = None


class SubmitActionRequest(BaseModel):
    player_id: int
    action: ActionRequest


class BlockRequest(BaseModel):
    blocker: int | None = Field(
        default=None, description="Blocking seat id, or null to let the action through"
    )


class EndTurnRequest(BaseModel):
    player_id: int


class EvaluateRequest(BaseModel):
    player_id: int
    kind: str
    target: int | None = None


class VerdictResponse(BaseModel):
    accepted: bool
    reason: str | None = None
    message: str = ""


# ---------------------------------------------------------------------------
# Application factory
# ---------------------------------------------------------------------------


def create_app(service: LocalGameService | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(title="Coup Local Play", version="0.1.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    svc = service or LocalGameService()
    app.state.service = svc

    @app.get("/api/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/api/local-games", response_model=CreateGameResponse, status_code=201)
    def create_game(req: CreateGameRequest) -> CreateGameResponse:
        try:
            seats = [SeatSpec.from_mapping(s.model_dump()) for s in req.seats]
            session = svc.create_game(seats, seed=req.seed, treasury=req.treasury)
        except (ValueError, RuleViolation) as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return CreateGameResponse(game_id=session.game_id)

    @app.get("/api/local-games/{game_id}", response_model=TurnResponse)
    def get_game_state(game_id: str) -> TurnResponse:
        try:
            view = svc.get_turn_view(game_id)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        return _turn_view_to_response(game_id, view)

    @app.post("/api/local-games/{game_id}/evaluate", response_model=VerdictResponse)
    def evaluate(game_id: str, req: EvaluateRequest) -> VerdictResponse:
        kind = _parse_kind(req.kind)
        try:
            verdict = svc.evaluate(game_id, req.player_id, kind, req.target)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        return VerdictResponse(
            accepted=verdict.accepted,
            reason=verdict.reason.value if verdict.reason is not None else None,
            message=verdict.message,
        )

    @app.post("/api/local-games/{game_id}/actions", response_model=TurnResponse)
    def submit_action(game_id: str, req: SubmitActionRequest) -> TurnResponse:
        action = _parse_action(req.action)
        return _call(game_id, lambda: svc.submit_action(game_id, req.player_id, action))

    @app.post("/api/local-games/{game_id}/block", response_model=TurnResponse)
    def resolve_block(game_id: str, req: BlockRequest) -> TurnResponse:
        return _call(game_id, lambda: svc.resolve_block(game_id, req.blocker))

    @app.post("/api/local-games/{game_id}/end-turn", response_model=TurnResponse)
    def end_turn(game_id: str, req: EndTurnRequest) -> TurnResponse:
        return _call(game_id, lambda: svc.end_turn(game_id, req.player_id))

    return app


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _call(game_id: str, operation: Callable[[], dict[str, Any]]) -> TurnResponse:
    """Run a service command and translate its failures to HTTP errors."""
    try:
        view = operation()
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except NotCurrentTurn as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except RuleViolation as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return _turn_view_to_response(game_id, view)


def _parse_kind(name: str) -> ActionKind:
    try:
        return ActionKind.parse(name)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=f"Unknown action kind: {name}") from exc


def _parse_action(req: ActionRequest) -> Action:
    """Convert an ActionRequest pydantic model into a domain Action."""
    kind = _parse_kind(req.kind)
    try:
        return Action(kind=kind, target=req.target)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


def _turn_view_to_response(game_id: str, view: dict[str, Any]) -> TurnResponse:
    """Convert the service turn view dict into a TurnResponse."""
    table = None
    if view.get("table") is not None:
        t = view["table"]
        window = t.get("block_window")
        table = TableView(
            treasury=t["treasury"],
            turn_player=t.get("turn_player"),
            actions_remaining=t["actions_remaining"],
            last_arrested=t.get("last_arrested"),
            players=[PlayerView(**p) for p in t["players"]],
            block_window=BlockWindowView(**window) if window is not None else None,
        )
    investigation = view.get("investigation")
    return TurnResponse(
        game_id=game_id,
        status=view["status"],
        active_player_id=view.get("active_player_id"),
        active_player_name=view.get("active_player_name"),
        table=table,
        available_actions=view.get("available_actions", []),
        legal_actions=[ActionView(**la) for la in view.get("legal_actions", [])],
        investigation=InvestigationView(**investigation) if investigation else None,
        winner=view.get("winner"),
        error=view.get("error"),
    )
