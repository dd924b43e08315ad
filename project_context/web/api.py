"""FastAPI routes for the project-context HTTP API."""

from __future__ import annotations

import asyncio
from dataclasses import asdict

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel, Field

from project_context.errors import ProjectRootError
from project_context.models import ContextRequest as PipelineRequest
from project_context.pipeline import build_context, get_dependency_graph, get_project_analysis, validate_context
from project_context.web.state import state

router = APIRouter(prefix="/api")


# --- Request models ---

class ContextRequest(BaseModel):
    query: str
    project_root: str
    scope: str | None = None
    completeness: str | None = Field(None, description="Informational only, does not change the output")
    max_tokens: int | None = None

class ValidateRequest(BaseModel):
    document: str
    query: str

class IndexRequest(BaseModel):
    project_root: str

class GraphRequest(BaseModel):
    target: str
    project_root: str
    include_tests: bool = True


def _index_or_400(project_root: str, refresh: bool = False):
    try:
        return state.index_for(project_root, refresh=refresh)
    except ProjectRootError as e:
        raise HTTPException(400, str(e))


# --- Endpoints ---

@router.post("/context")
async def context(req: ContextRequest):
    """Build a context document. Failures come back in-band, never as 5xx."""
    request = PipelineRequest(
        query=req.query,
        project_root=req.project_root,
        scope=req.scope,
        completeness=req.completeness,
        max_tokens=req.max_tokens,
    )
    index = state.get(req.project_root)
    result = await asyncio.to_thread(build_context, request, index)
    return asdict(result)


@router.post("/validate")
async def validate(req: ValidateRequest):
    return asdict(validate_context(req.document, req.query))


@router.post("/index")
async def index(req: IndexRequest):
    project = await asyncio.to_thread(_index_or_400, req.project_root, True)
    return {"project_root": str(project.project_root), **asdict(project.stats())}


@router.post("/graph")
async def graph(req: GraphRequest):
    project = await asyncio.to_thread(_index_or_400, req.project_root)
    result = get_dependency_graph(req.target, req.project_root, req.include_tests, index=project)
    if not result.graph.nodes:
        raise HTTPException(404, f"Target not found: {req.target}")
    return result.to_dict()


@router.get("/stats")
async def stats(project_root: str = Query(...)):
    project = state.get(project_root)
    if project is None:
        raise HTTPException(404, "Project not indexed")
    return {"project_root": str(project.project_root), **asdict(project.stats())}


@router.get("/analysis")
async def analysis(project_root: str = Query(...)):
    project = await asyncio.to_thread(_index_or_400, project_root)
    return get_project_analysis(project_root, index=project)


@router.get("/search")
async def search(project_root: str = Query(...), q: str = Query(...)):
    project = await asyncio.to_thread(_index_or_400, project_root)
    return [
        {"file": f.relative_path, "language": f.language.value}
        for f in project.search_files(q)
    ]
