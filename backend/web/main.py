"""Rewind Web Backend - FastAPI Application."""

import os

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.web.core.config import BACKEND_PORT_ENV_VARS, DEFAULT_BACKEND_PORT
from backend.web.core.lifespan import lifespan
from backend.web.routers import projects, versions
from config.schema import RewindSettings


def create_app(settings: RewindSettings | None = None) -> FastAPI:
    """Build the app; settings are loaded at startup when not given."""
    app = FastAPI(title="Rewind Web Backend", lifespan=lifespan)
    if settings is not None:
        app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(projects.router)
    app.include_router(versions.router)
    return app


app = create_app()


def _resolve_port() -> int:
    for name in BACKEND_PORT_ENV_VARS:
        port = os.environ.get(name)
        if port:
            return int(port)
    return DEFAULT_BACKEND_PORT


if __name__ == "__main__":
    # @@@module-launch-target - Package-qualified target keeps module launch (`python -m backend.web.main`) import-safe.
    uvicorn.run("backend.web.main:app", host="0.0.0.0", port=_resolve_port(), reload=True)
