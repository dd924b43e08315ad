"""FastAPI application factory."""

from __future__ import annotations

from fastapi import FastAPI

from project_context.web.api import router


def create_app() -> FastAPI:
    app = FastAPI(title="project-context", version="0.1.0")
    app.include_router(router)
    return app
