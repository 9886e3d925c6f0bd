"""REST service to play Landlord against two bots."""

from __future__ import annotations

import uuid
from contextlib import asynccontextmanager
from dataclasses import asdict
from typing import Dict, List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from bots.base import BotStrategy
from bots.bot_arena import BOT_REGISTRY
from engine.auction import AuctionError
from engine.events import LoggingSink, MultiSink, RecordingSink
from engine.game import MatchSession
from engine.logging_utils import get_logger, setup_logging
from engine.rules_schema import RuleSet
from engine.service import ActionSpec, RoundService
from engine.state import InvalidPlay

log = get_logger("server.play_service")

HUMAN_NAME = "You"


class StartRequest(BaseModel):
    opponents: List[str] = Field(default_factory=lambda: ["greedy", "greedy"], min_length=2, max_length=2)
    seed: Optional[int] = None
    max_rounds: Optional[int] = Field(None, ge=1)


class ActionRequest(BaseModel):
    action_index: int = Field(..., ge=0)


class SessionState:
    def __init__(self, service: RoundService, bots: Dict[str, BotStrategy], events: RecordingSink) -> None:
        self.service = service
        self.bots = bots
        self.events = events

    @property
    def human(self):
        return self.service.player(HUMAN_NAME)

    def actions(self) -> List[ActionSpec]:
        if not self.service.has_active_round():
            return []
        return self.service.enabled_actions(self.human)

    def advance(self) -> None:
        """Let the bots act until the human has a decision to make or the match ends."""
        session = self.service.session
        while True:
            current = session.current_round
            if current is None:
                if session.is_over():
                    return
                current = self.service.start_round()
            if current.is_over():
                self.service.finish_round()
                continue
            player = current.current_player
            assert player is not None
            if player is self.human:
                return
            actions = self.service.enabled_actions(player)
            action = self.bots[player.name].choose_action(self.service, player, actions)
            self.service.apply(player, action)


sessions: Dict[str, SessionState] = {}


@asynccontextmanager
async def lifespan(_: FastAPI):
    setup_logging()
    yield


app = FastAPI(title="Landlord Play Service", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def serialize_state(session: SessionState) -> Dict[str, object]:
    view = session.service.get_session_view(HUMAN_NAME)
    state: Dict[str, object] = asdict(view)
    state["legalActions"] = [
        {"action_index": index, "label": action.label} for index, action in enumerate(session.actions())
    ]
    state["events"] = [event.message for event in session.events.events]
    session.events.clear()
    return state


def ensure_session(session_id: str) -> SessionState:
    session = sessions.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


@app.post("/session/start")
def start_session(request: StartRequest) -> Dict[str, object]:
    unknown = [name for name in request.opponents if name not in BOT_REGISTRY]
    if unknown:
        raise HTTPException(status_code=400, detail=f"Unknown bots: {', '.join(unknown)}")

    events = RecordingSink()
    names = [HUMAN_NAME, "Bot A", "Bot B"]
    match = MatchSession(
        player_names=names,
        seed=request.seed,
        rules=RuleSet(max_rounds=request.max_rounds),
        sink=MultiSink([LoggingSink(), events]),
    )
    bots = {name: BOT_REGISTRY[kind]() for name, kind in zip(names[1:], request.opponents)}
    session = SessionState(RoundService(match), bots, events)
    session.advance()

    session_id = uuid.uuid4().hex
    sessions[session_id] = session
    log.info("Started session %s against %s", session_id, ", ".join(request.opponents))
    return {"session_id": session_id, "state": serialize_state(session)}


@app.get("/session/{session_id}")
def get_state(session_id: str) -> Dict[str, object]:
    session = ensure_session(session_id)
    return {"state": serialize_state(session)}


@app.post("/session/{session_id}/action")
def take_action(session_id: str, request: ActionRequest) -> Dict[str, object]:
    session = ensure_session(session_id)
    actions = session.actions()
    if request.action_index >= len(actions):
        raise HTTPException(status_code=400, detail="Illegal action")
    try:
        session.service.apply(session.human, actions[request.action_index])
    except (ValueError, AuctionError, InvalidPlay) as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    session.advance()
    return {"state": serialize_state(session)}
