"""
Dino Evolution - Server

Copyright (c) 2026 SolisHQ (github.com/solishq). All rights reserved.
Licensed under MIT.

FastAPI + WebSocket control surface for one training session.
Create, step, run whole generations, pause, reset, inspect the champion.
"""

import asyncio
import json
from contextlib import asynccontextmanager
from fastapi import FastAPI, Query, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
from typing import Optional

from . import __version__
from .config import TrainingConfig
from .narrator import Narrator
from .session import TrainingSession


# ─── State ──────────────────────────────────────────────

session: Optional[TrainingSession] = None
narrator = Narrator()
ws_clients: set[WebSocket] = set()
auto_running = False
auto_task = None
_session_lock = asyncio.Lock()

NO_SESSION = {"error": "No simulation. POST /sim/create first."}


# ─── App ────────────────────────────────────────────────

async def _stop_auto():
    global auto_running, auto_task
    auto_running = False
    if auto_task:
        auto_task.cancel()
        try:
            await auto_task
        except asyncio.CancelledError:
            pass
        auto_task = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await _stop_auto()

app = FastAPI(title="Dino Evolution", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health():
    return {"status": "ok", "engine": "dino-evolution"}


@app.get("/")
async def root():
    return {"status": "Dino Evolution API", "version": __version__,
            "simulation": session is not None}


# ─── Models ─────────────────────────────────────────────

class CreateRequest(BaseModel):
    population: int = Field(default=15, ge=2, le=500)
    hidden: int = Field(default=6, ge=1, le=64)
    mutation_rate: float = Field(default=0.1, ge=0.0, le=1.0)
    elitism: int = Field(default=2, ge=0, le=500)
    jump_threshold: float = Field(default=0.5, ge=0.0, le=1.0)
    max_frames: int = Field(default=5000, ge=1, le=1_000_000)  # handlers run generations inline
    seed: Optional[int] = None

class StepRequest(BaseModel):
    frames: int = Field(default=1, ge=1, le=100_000)

class RunRequest(BaseModel):
    generations: int = Field(default=1, ge=1, le=1000)

class SpeedRequest(BaseModel):
    multiplier: float = Field(default=1.0, gt=0.0, le=10.0)


def _snapshot(limit: int = 5) -> dict:
    """Current generation at a glance: stats, game state, top dinos."""
    ranked = sorted(session.dinos, key=lambda d: d.fitness, reverse=True)
    return {
        "stats": session.get_stats(),
        "game": session.game.to_dict(),
        "leaderboard": [{**d.to_dict(), "rank": i + 1} for i, d in enumerate(ranked[:limit])],
    }


def _narrate(events: list[dict]) -> Optional[dict]:
    return narrator.narrate(session.population.generation, events, session.get_stats())


# ─── Simulation Control ────────────────────────────────

@app.post("/sim/create")
async def create_sim(req: CreateRequest):
    global session, narrator
    await _stop_auto()
    if req.elitism > req.population:
        return {"error": f"elitism ({req.elitism}) cannot exceed population ({req.population})"}
    config = TrainingConfig(
        population_size=req.population,
        hidden_count=req.hidden,
        mutation_rate=req.mutation_rate,
        elitism_count=req.elitism,
        jump_threshold=req.jump_threshold,
        max_frames=req.max_frames,
        seed=req.seed,
    )
    async with _session_lock:
        session = TrainingSession(config)
        session.start()
        narrator = Narrator()
        snapshot = _snapshot()
    await broadcast({"type": "created", "data": snapshot, "config": config.to_dict()})
    return {"status": "created", "dinos": len(session.dinos), "config": config.to_dict()}


@app.post("/sim/step")
async def step(req: StepRequest):
    """Advance a number of frames. Generation turnovers happen inline."""
    if not session:
        return NO_SESSION
    async with _session_lock:
        if not session.is_training:
            session.start()
        ended = 0
        for _ in range(req.frames):
            if session.is_paused:
                break
            if session.step():
                ended += 1
        events = session.pop_events()
        narration = _narrate(events) if events else None
        snapshot = _snapshot()
    await broadcast({"type": "step", "data": snapshot, "events": events[:10],
                     "narration": narration})
    return {"frame": session.generation_frames, "generation": session.population.generation,
            "generations_completed": ended, "alive": session.alive_count(),
            "narration": narration}


@app.post("/sim/generation")
async def run_generation():
    """Run the current generation to completion."""
    if not session:
        return NO_SESSION
    async with _session_lock:
        record = session.run_generation()
        events = session.pop_events()
        narration = _narrate(events)
    await broadcast({"type": "generation", "record": record, "events": events,
                     "narration": narration})
    return {"generation": session.population.generation, "record": record,
            "narration": narration}


@app.post("/sim/run")
async def run_multi(req: RunRequest):
    """Run several full generations, broadcasting after each one."""
    if not session:
        return NO_SESSION

    records = []
    for _ in range(req.generations):
        async with _session_lock:
            record = session.run_generation()
            events = session.pop_events()
            narration = _narrate(events)
        if record is None:
            break
        records.append(record)
        await broadcast({"type": "generation", "record": record, "events": events,
                         "narration": narration})
        await asyncio.sleep(0)

    return {"generations_completed": len(records), "generation": session.population.generation,
            "records": records}


@app.post("/sim/auto")
async def toggle_auto():
    """Toggle auto-running (one generation per tick)."""
    global auto_running, auto_task

    if auto_running:
        await _stop_auto()
        return {"auto": False}

    if not session:
        return NO_SESSION

    auto_running = True

    async def auto_loop():
        global auto_running
        try:
            while auto_running and session:
                async with _session_lock:
                    record = session.run_generation()
                    events = session.pop_events()
                    narration = _narrate(events)
                await broadcast({"type": "generation", "record": record, "events": events,
                                 "narration": narration})
                await asyncio.sleep(0.5)
        except asyncio.CancelledError:
            pass
        finally:
            auto_running = False

    auto_task = asyncio.create_task(auto_loop())
    return {"auto": True}


@app.post("/sim/pause")
async def toggle_pause():
    if not session:
        return NO_SESSION
    async with _session_lock:
        paused = session.toggle_pause()
    await broadcast({"type": "pause", "paused": paused})
    return {"paused": paused}


@app.post("/sim/reset")
async def reset_sim():
    """Back to generation 1 with fresh random networks."""
    if not session:
        return NO_SESSION
    await _stop_auto()
    async with _session_lock:
        session.reset()
        events = session.pop_events()
        narration = _narrate(events)
        session.start()
    await broadcast({"type": "reset", "events": events, "narration": narration})
    return {"generation": session.population.generation, "narration": narration}


@app.post("/sim/speed")
async def set_speed(req: SpeedRequest):
    if not session:
        return NO_SESSION
    session.game.set_speed_multiplier(req.multiplier)
    return {"speed_multiplier": session.game.speed_multiplier}


# ─── Query ──────────────────────────────────────────────

@app.get("/sim/stats")
async def get_stats():
    if not session:
        return NO_SESSION
    return {**session.get_stats(), "population": session.population.get_stats()}


@app.get("/sim/state")
async def get_state():
    if not session:
        return NO_SESSION
    return _snapshot()


@app.get("/sim/history")
async def get_history(limit: int = Query(50, ge=1, le=10_000)):
    if not session:
        return NO_SESSION
    return {"history": session.population.history[-limit:],
            "lineage": narrator.lineage}


@app.get("/sim/best")
async def get_best():
    """Weights of the all-time champion network."""
    if not session:
        return NO_SESSION
    champion = session.population.champion
    if champion is None:
        return {"error": "No generation evaluated yet."}
    return {"fitness": session.population.champion_fitness,
            "generation": session.population.champion_generation,
            "name": narrator.champion_name,
            "network": champion.to_dict()}


@app.get("/sim/current")
async def get_current_best():
    """The leading dino of the generation in progress."""
    if not session:
        return NO_SESSION
    best = session.get_current_best()
    return {"dino": best.to_dict() if best else None}


# ─── WebSocket ──────────────────────────────────────────

@app.websocket("/ws")
async def websocket_endpoint(ws: WebSocket):
    await ws.accept()
    ws_clients.add(ws)
    try:
        if session:
            await ws.send_json({"type": "init", "data": _snapshot()})
        while True:
            data = await ws.receive_text()
            if len(data) > 10_000:
                continue
            try:
                msg = json.loads(data)
            except json.JSONDecodeError:
                continue
            if msg.get("type") == "get_state" and session:
                await ws.send_json({"type": "state", "data": _snapshot()})
    except WebSocketDisconnect:
        pass
    finally:
        ws_clients.discard(ws)


async def broadcast(message: dict):
    """Send to all connected WebSocket clients."""
    dead = set()
    for ws in ws_clients:
        try:
            await ws.send_json(message)
        except (WebSocketDisconnect, RuntimeError):
            dead.add(ws)
    ws_clients.difference_update(dead)


# ─── Run ────────────────────────────────────────────────

def start(host: str = "0.0.0.0", port: int = 8000):
    import uvicorn
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    start()
