# path: transit-tracker/transit_tracker/api/routes/projects.py

from __future__ import annotations

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from transit_tracker.errors import StoreError
from transit_tracker.models.project_models import FetchResult, Project, ProjectCreate, ProjectStatistics
from transit_tracker.services.project_loader import get_transit_projects
from transit_tracker.services.project_writes import (
    create_transit_project,
    delete_transit_project,
    get_project_statistics,
    update_project_progress,
)

router = APIRouter(prefix="/projects", tags=["projects"])


class ProgressUpdate(BaseModel):
    progress: int = Field(ge=0, le=100)


class DeleteResponse(BaseModel):
    deleted: bool


@router.get("", response_model=FetchResult)
async def list_projects() -> FetchResult:
    # Never fails: the fallback chain ends in sample data.
    return await get_transit_projects()


@router.get("/stats", response_model=ProjectStatistics)
async def project_stats() -> ProjectStatistics:
    try:
        return await get_project_statistics()
    except StoreError as e:
        raise HTTPException(status_code=502, detail=str(e))


@router.post("", response_model=Project, status_code=201)
async def create_project(body: ProjectCreate) -> Project:
    try:
        return await create_transit_project(body)
    except StoreError as e:
        raise HTTPException(status_code=502, detail=str(e))


@router.patch("/{project_id}/progress", response_model=Project)
async def set_progress(project_id: int, body: ProgressUpdate) -> Project:
    try:
        project = await update_project_progress(project_id, body.progress)
    except StoreError as e:
        raise HTTPException(status_code=502, detail=str(e))
    if project is None:
        raise HTTPException(status_code=404, detail=f"Project {project_id} not found")
    return project


@router.delete("/{project_id}", response_model=DeleteResponse)
async def delete_project(project_id: int) -> DeleteResponse:
    try:
        deleted = await delete_transit_project(project_id)
    except StoreError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return DeleteResponse(deleted=deleted)
