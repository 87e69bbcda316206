"""
Game API endpoints - Start playthroughs, apply choices, read history
"""

import logging
import random
import uuid
from functools import lru_cache
from typing import NamedTuple

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from docket.config import (
    get_app_id,
    get_default_scenario,
    get_history_backend,
    get_history_dir,
    get_random_seed,
)
from docket.engine.history import (
    HistoryDispatcher,
    InMemoryHistoryRecorder,
    JsonlHistoryRecorder,
    load_history,
)
from docket.engine.narrative import NarrativeEngine
from docket.engine.scenario import ScenarioLoader
from docket.models.game import GameState, HistoryEntry, TurnResult
from docket.models.scenario import ScenarioData

logger = logging.getLogger(__name__)

router = APIRouter()


class GameSession(NamedTuple):
    """Session data kept alongside the engine."""

    engine: NarrativeEngine
    scenario_id: str


# In-memory game sessions (for prototype - would use Redis/DB in production)
game_sessions: dict[str, GameSession] = {}


@lru_cache(maxsize=1)
def get_recorder() -> InMemoryHistoryRecorder | JsonlHistoryRecorder:
    """History recorder selected by DOCKET_HISTORY_BACKEND"""
    backend = get_history_backend()
    if backend == "memory":
        return InMemoryHistoryRecorder()
    if backend != "jsonl":
        logger.warning(f"Unknown history backend '{backend}', using jsonl")
    return JsonlHistoryRecorder(get_history_dir(), get_app_id())


@lru_cache(maxsize=1)
def get_dispatcher() -> HistoryDispatcher:
    return HistoryDispatcher(get_recorder())


def load_scenario_or_none(scenario_id: str) -> ScenarioData | None:
    """Load a scenario; any failure leaves the engine idle instead of crashing."""
    try:
        return ScenarioLoader().load_scenario(scenario_id)
    except (OSError, ValueError) as e:
        logger.error(f"Scenario '{scenario_id}' could not be loaded: {e}")
        return None


def get_session(session_id: str) -> GameSession:
    if session_id not in game_sessions:
        raise HTTPException(status_code=404, detail="Game session not found")
    return game_sessions[session_id]


class NewGameRequest(BaseModel):
    """Request to start a new playthrough"""

    scenario_id: str | None = None
    user_id: str | None = None  # From the auth collaborator; random if absent
    seed: int | None = None  # Seed for case selection


class NewGameResponse(BaseModel):
    """Response after starting a new playthrough"""

    session_id: str
    user_id: str
    scenario_id: str
    title: str
    welcome: str
    prior_history: list[HistoryEntry]  # Informational only; play always starts fresh
    turn: TurnResult


class ChoiceRequest(BaseModel):
    """Request to choose one of the offered options"""

    session_id: str
    option_index: int


class SessionRequest(BaseModel):
    session_id: str


@router.post("/new", response_model=NewGameResponse)
async def new_game(request: NewGameRequest):
    """Start a new playthrough"""
    scenario_id = request.scenario_id or get_default_scenario()
    scenario = load_scenario_or_none(scenario_id)

    seed = request.seed if request.seed is not None else get_random_seed()
    engine = NarrativeEngine(
        scenario,
        rng=random.Random(seed),
        dispatcher=get_dispatcher(),
        user_id=request.user_id,
    )
    turn = engine.start()
    if not turn.ready:
        raise HTTPException(
            status_code=503, detail=f"Scenario '{scenario_id}' is not ready"
        )

    session_id = str(uuid.uuid4())
    game_sessions[session_id] = GameSession(engine=engine, scenario_id=scenario_id)
    logger.info(f"Session {session_id} started '{scenario_id}' for user {engine.user_id}")

    prior_history = await load_history(get_recorder(), engine.user_id)

    return NewGameResponse(
        session_id=session_id,
        user_id=engine.user_id,
        scenario_id=scenario_id,
        title=scenario.scenario.title,
        welcome=scenario.scenario.welcome,
        prior_history=prior_history,
        turn=turn,
    )


@router.post("/choose", response_model=TurnResult)
async def choose(request: ChoiceRequest):
    """Apply a choice; stale or unknown options leave the game unchanged"""
    session = get_session(request.session_id)
    return session.engine.choose_index(request.option_index)


@router.post("/restart", response_model=TurnResult)
async def restart(request: SessionRequest):
    """Throw away the playthrough and start over"""
    session = get_session(request.session_id)
    return session.engine.restart()


@router.get("/state/{session_id}")
async def get_state(session_id: str):
    """Get the current turn and full playthrough state"""
    session = get_session(session_id)
    engine = session.engine
    state: GameState | None = engine.state
    return {
        "turn": engine.view(),
        "state": state.model_dump(mode="json") if state else None,
    }


@router.get("/history/{session_id}", response_model=list[HistoryEntry])
async def get_history(session_id: str):
    """Persisted history for the session's user"""
    session = get_session(session_id)
    return await load_history(get_recorder(), session.engine.user_id)


@router.get("/feed", response_model=list[HistoryEntry])
async def get_public_feed():
    """Shared history of every player"""
    try:
        return await get_recorder().load_public()
    except Exception:
        logger.exception("Failed to load public history feed")
        return []
