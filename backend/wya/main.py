import asyncio
import contextlib
import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.types import ASGIApp, Receive, Scope, Send

from wya.api.cron import router as cron_router
from wya.api.errors import install_error_handlers
from wya.api.privacy import router as privacy_router
from wya.api.reports import router as reports_router
from wya.api.users import router as users_router
from wya.core.config import get_settings
from wya.core.database import create_engine, create_session_factory
from wya.stores.memory import MemoryStore
from wya.workers.inactivity import inactivity_loop

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("wya")


@asynccontextmanager
async def lifespan(app: FastAPI):
    engine = None
    if settings.store_backend == "memory":
        logger.warning("Using in-memory store; data is lost on restart")
        app.state.memory_store = MemoryStore()
    else:
        engine = create_engine(settings.database_url)
        app.state.session_factory = create_session_factory(engine)

    task = None
    if settings.inactivity_scan_interval_seconds > 0:
        task = asyncio.create_task(inactivity_loop(app.state, settings))
    yield
    if task is not None:
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
    if engine is not None:
        await engine.dispose()


app = FastAPI(title="WYA API", version="0.1.0", lifespan=lifespan)


class TimingMiddleware:
    """Lightweight ASGI middleware, no BaseHTTPMiddleware overhead."""
    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send):
        if scope["type"] != "http":
            return await self.app(scope, receive, send)

        t0 = time.perf_counter()
        status_code = 0

        async def send_wrapper(message):
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
            await send(message)

        await self.app(scope, receive, send_wrapper)
        ms = int((time.perf_counter() - t0) * 1000)
        method = scope.get("method", "?")
        path = scope.get("path", "?")
        logger.info(f"{method} {path} -> {status_code} in {ms}ms")


app.add_middleware(TimingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins.split(","),
    allow_methods=["*"],
    allow_headers=["*"],
)
install_error_handlers(app)

app.include_router(users_router)
app.include_router(reports_router)
app.include_router(cron_router)
app.include_router(privacy_router)


@app.get("/api/health")
async def health():
    return {"status": "ok"}
