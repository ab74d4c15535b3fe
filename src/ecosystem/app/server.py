from __future__ import annotations

import asyncio
import json
import logging
import os
from collections import deque
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Dict, Optional, Set

from fastapi import FastAPI, Request, WebSocket, WebSocketDisconnect
from fastapi.responses import JSONResponse

from ..sim.core.config import AppConfig, ServerConfig, WorldConfig
from ..sim.core.errors import WorldError
from ..sim.core.world import World
from ..sim.io.world_file import load_world, parse_world

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QueuedSnapshot:
    generation: int
    payload: str


class SimulationController:
    def __init__(self, config: ServerConfig, world: Optional[World] = None):
        self.config = config
        self.world = world if world is not None else World(WorldConfig())
        self.broadcast_interval = max(1, config.broadcast_interval)
        self.running = False
        self.speed_multiplier = 1.0
        self.clients: Set[WebSocket] = set()
        self._client_last_sent: Dict[WebSocket, int] = {}
        self._snapshot_queue: deque[QueuedSnapshot] = deque()
        self._lock = asyncio.Lock()
        self._queue_lock = asyncio.Lock()
        self._loop_task: asyncio.Task | None = None

    async def start(self) -> None:
        if self._loop_task is None:
            self._loop_task = asyncio.create_task(self._loop())
        self.running = not self.world.finished

    async def stop(self) -> None:
        self.running = False

    async def reset(self) -> None:
        async with self._lock:
            self.world.reset()
        await self._restart_stream()

    async def load(self, world: World) -> None:
        async with self._lock:
            self.world = world
        await self._restart_stream()

    async def _restart_stream(self) -> None:
        async with self._queue_lock:
            self._snapshot_queue.clear()
        for client in self._client_last_sent:
            self._client_last_sent[client] = -1
        await self._broadcast_snapshot()

    async def advance(self) -> bool:
        """Run one generation; False once the world has no generations left."""
        async with self._lock:
            if self.world.finished:
                return False
            self.world.step()
            generation = self.world.generation
        if generation % self.broadcast_interval == 0 or self.world.finished:
            await self._broadcast_snapshot()
        return True

    async def _loop(self) -> None:
        while True:
            await asyncio.sleep(self.config.generation_interval / self.speed_multiplier)
            if not self.running:
                continue
            if not await self.advance():
                logger.info("world finished after %d generations", self.world.generation)
                self.running = False

    async def acknowledge(self, generation: int) -> None:
        async with self._queue_lock:
            while self._snapshot_queue and self._snapshot_queue[0].generation <= generation:
                self._snapshot_queue.popleft()

    def _serialize_snapshot(self) -> QueuedSnapshot:
        snapshot = self.world.snapshot()
        payload = {
            "type": "snapshot",
            "generation": snapshot.generation,
            "payload": {
                "generation": snapshot.generation,
                "remaining": snapshot.remaining,
                "population": snapshot.population,
                "rows": snapshot.rows,
                "metrics": asdict(snapshot.metrics) if snapshot.metrics is not None else None,
                "metadata": asdict(snapshot.metadata),
            },
        }
        return QueuedSnapshot(generation=snapshot.generation, payload=json.dumps(payload))

    async def _send_pending_snapshots(self, client: WebSocket) -> None:
        last_sent = self._client_last_sent.get(client, -1)
        async with self._queue_lock:
            pending = [item for item in self._snapshot_queue if item.generation > last_sent]
        for item in pending:
            await client.send_text(item.payload)
            last_sent = item.generation
        self._client_last_sent[client] = last_sent

    async def _broadcast_snapshot(self) -> None:
        queued = self._serialize_snapshot()
        async with self._queue_lock:
            self._snapshot_queue.append(queued)
        stale: Set[WebSocket] = set()
        for client in list(self.clients):
            try:
                await self._send_pending_snapshots(client)
            except WebSocketDisconnect:
                stale.add(client)
        for client in stale:
            self.clients.discard(client)
            self._client_last_sent.pop(client, None)


def _build_controller() -> SimulationController:
    config_path = os.environ.get("ECOSYSTEM_CONFIG")
    app_config = AppConfig.from_yaml(Path(config_path)) if config_path else AppConfig()
    world = World(app_config.world)
    if app_config.server.world_path:
        world = load_world(Path(app_config.server.world_path))
    return SimulationController(app_config.server, world)


app = FastAPI(title="Ecosystem Simulation")
controller = _build_controller()


@app.on_event("startup")
async def _startup() -> None:
    await controller.start()


@app.get("/api/status")
async def status() -> JSONResponse:
    world = controller.world
    snapshot = world.snapshot()
    return JSONResponse(
        {
            "running": controller.running,
            "generation": snapshot.generation,
            "remaining": snapshot.remaining,
            "population": snapshot.population,
        }
    )


@app.post("/api/control/start")
async def start_simulation() -> JSONResponse:
    await controller.start()
    return JSONResponse({"running": controller.running})


@app.post("/api/control/stop")
async def stop_simulation() -> JSONResponse:
    await controller.stop()
    return JSONResponse({"running": False})


@app.post("/api/control/reset")
async def reset_simulation() -> JSONResponse:
    await controller.reset()
    return JSONResponse({"running": controller.running, "generation": controller.world.generation})


@app.post("/api/control/speed")
async def set_speed(payload: dict) -> JSONResponse:
    speed = float(payload.get("multiplier", 1.0))
    controller.speed_multiplier = max(0.1, min(5.0, speed))
    return JSONResponse({"multiplier": controller.speed_multiplier})


@app.post("/api/world")
async def load_world_text(request: Request) -> JSONResponse:
    try:
        world = parse_world((await request.body()).decode("utf-8"))
    except WorldError as exc:
        return JSONResponse({"error": str(exc)}, status_code=400)
    await controller.load(world)
    await controller.stop()
    return JSONResponse({"n_rows": world.config.n_rows, "n_cols": world.config.n_cols, "remaining": world.remaining})


@app.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket) -> None:
    await websocket.accept()
    controller.clients.add(websocket)
    controller._client_last_sent[websocket] = -1
    await controller._send_pending_snapshots(websocket)
    try:
        while True:
            message = await websocket.receive_text()
            try:
                payload = json.loads(message)
            except json.JSONDecodeError:
                continue
            if payload.get("type") == "ack":
                generation = payload.get("generation")
                if isinstance(generation, int):
                    await controller.acknowledge(generation)
    except WebSocketDisconnect:
        controller.clients.discard(websocket)
        controller._client_last_sent.pop(websocket, None)


__all__ = ["app", "controller"]
