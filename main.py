import logging
from contextlib import asynccontextmanager

import socketio
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from innovatefund.config import get_settings
from innovatefund.infrastructure import database
from innovatefund.interfaces.api.routes import register_routes
from innovatefund.runtime import Runtime

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the tables and start the realtime runtime; drain it on exit."""

    database.initialize_database()
    runtime: Runtime = app.state.runtime
    runtime.start()
    try:
        yield
    finally:
        await runtime.shutdown()
        database.engine.dispose()


def create_app(runtime: Runtime | None = None) -> FastAPI:
    """Build the FastAPI application with its process runtime."""

    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(title="InnovateFund API", lifespan=lifespan)
    app.state.runtime = runtime or Runtime(settings=settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_routes(app)
    return app


def create_asgi_app(app: FastAPI | None = None) -> socketio.ASGIApp:
    """Serve Socket.IO next to the HTTP API on the same port."""

    app = app or create_app()
    return socketio.ASGIApp(app.state.runtime.sio, other_asgi_app=app)


api = create_app()
app = create_asgi_app(api)
