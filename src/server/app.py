from __future__ import annotations

import asyncio
import contextlib
import json
import logging
from typing import Optional, Set

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from simulation import Building, BuildingConfig, Simulation

logger = logging.getLogger(__name__)


class SpawnRequest(BaseModel):
    source: int
    target: int


class TickRequest(BaseModel):
    dt: float = Field(0.1, gt=0)


class SimulationManager:
    def __init__(
        self,
        floor_count: int = 8,
        floor_height: float = 1.5,
        tick_interval: float = 1 / 30,
        time_scale: float = 1.0,
    ) -> None:
        building = Building(BuildingConfig(floor_count=floor_count, floor_height=floor_height))
        self.simulation = Simulation(building=building)
        self.tick_interval = tick_interval
        self.time_scale = time_scale
        self.clients: Set[WebSocket] = set()
        self._task: Optional[asyncio.Task] = None
        self._lock = asyncio.Lock()

    async def start(self) -> None:
        if self._task is None:
            self._task = asyncio.create_task(self._run())
            logger.info("simulation loop started (tick every %.3fs)", self.tick_interval)

    async def stop(self) -> None:
        if self._task:
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
            self._task = None
            logger.info("simulation loop stopped")

    async def _run(self) -> None:
        while True:
            async with self._lock:
                self.simulation.tick(self.tick_interval * self.time_scale)
                payload = self.current_state()
            await self.broadcast(payload)
            await asyncio.sleep(self.tick_interval)

    async def broadcast(self, payload: dict) -> None:
        message = json.dumps(payload)
        disconnected: Set[WebSocket] = set()
        for client in set(self.clients):
            try:
                await client.send_text(message)
            except WebSocketDisconnect:
                disconnected.add(client)
        for client in disconnected:
            await self.unregister(client)

    async def register(self, websocket: WebSocket) -> None:
        await websocket.accept()
        self.clients.add(websocket)
        await websocket.send_text(json.dumps(self.current_state()))

    async def unregister(self, websocket: WebSocket) -> None:
        if websocket in self.clients:
            self.clients.remove(websocket)
        with contextlib.suppress(Exception):
            await websocket.close()

    def current_state(self) -> dict:
        state = self.simulation.snapshot().to_dict()
        state["floor_count"] = self.simulation.building.floor_count
        state["floor_height"] = self.simulation.building.floor_height
        state["scheduler"] = self.simulation.scheduler_name
        return state

    async def spawn(self, source: int, target: int) -> dict:
        async with self._lock:
            passenger = self.simulation.spawn_passenger(source, target)
            state = self.current_state()
            state["spawned"] = passenger.passenger_id
            return state

    async def spawn_random(self) -> dict:
        async with self._lock:
            passenger = self.simulation.spawn_random_passenger()
            state = self.current_state()
            state["spawned"] = passenger.passenger_id
            return state

    async def tick(self, dt: float) -> dict:
        async with self._lock:
            self.simulation.tick(dt)
            return self.current_state()


manager = SimulationManager()
app = FastAPI(title="Elevator Simulation API")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def on_startup() -> None:
    await manager.start()


@app.on_event("shutdown")
async def on_shutdown() -> None:
    await manager.stop()


@app.get("/state")
async def get_state() -> dict:
    return manager.current_state()


@app.get("/logs")
async def get_logs() -> list:
    return manager.current_state()["logs"]


@app.post("/passengers/spawn")
async def spawn_passenger(request: SpawnRequest) -> dict:
    try:
        return await manager.spawn(request.source, request.target)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@app.post("/passengers/spawn/random")
async def spawn_random_passenger() -> dict:
    return await manager.spawn_random()


@app.post("/tick")
async def tick(request: TickRequest) -> dict:
    return await manager.tick(request.dt)


@app.websocket("/ws/stream")
async def websocket_endpoint(websocket: WebSocket) -> None:
    await manager.register(websocket)
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        await manager.unregister(websocket)


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    uvicorn.run("server.app:app", host="0.0.0.0", port=8000, reload=False)
