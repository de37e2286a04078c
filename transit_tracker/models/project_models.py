# path: transit-tracker/transit_tracker/models/project_models.py

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Tuple, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from transit_tracker.utils.geo import dedupe_consecutive


FetchSource = Literal["remote", "static-files", "sample"]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ProjectStatus(str, Enum):
    PLANNED = "Planned"
    IN_PROGRESS = "In Progress"
    DELAYED = "Delayed"
    COMPLETED = "Completed"


class ProjectType(str, Enum):
    SUBWAY = "Subway"
    LRT = "LRT"
    GO_RAIL = "GO Rail"
    BUS_RAPID_TRANSIT = "Bus Rapid Transit"
    OTHER = "Other"


### Canonical record (row shape of the projects table)


class ProjectFields(BaseModel):
    name: str
    status: ProjectStatus
    progress_percentage: int = Field(ge=0, le=100)
    budget_total: str
    estimated_completion: str
    project_type: ProjectType
    length: str  # "15.6 km"
    stations: int = Field(ge=0)
    description: str
    coordinates: List[Tuple[float, float]] = Field(default_factory=list)  # (lon, lat)
    color: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None

    @field_validator("coordinates")
    @classmethod
    def dedupe_coords(cls, coords: List[Tuple[float, float]]):
        return dedupe_consecutive(coords)


class ProjectCreate(ProjectFields):
    """Payload for inserting a project; the store assigns id and timestamps."""


class Project(ProjectFields):
    id: int
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class ConnectionStatus(BaseModel):
    connected: bool
    error: Optional[str] = None


class FetchResult(BaseModel):
    projects: List[Project]
    source: FetchSource
    connection_status: Optional[ConnectionStatus] = None


class ProjectStatistics(BaseModel):
    total: int = Field(ge=0)
    by_status: Dict[str, int] = Field(default_factory=dict)
    by_type: Dict[str, int] = Field(default_factory=dict)


### Raw GeoJSON shapes (static geometry files)
# Property values are left untyped; the normalizer coerces them field by field
# so a stray value never rejects a whole file.


class GeometryFileMetadata(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: Any = None
    id: Any = None
    name: Any = None
    description: Any = None
    color: Any = None


class RawFeatureProperties(BaseModel):
    model_config = ConfigDict(extra="allow")

    # Direct project properties ("simple" files)
    id: Any = None
    name: Any = None
    status: Any = None
    progressPercentage: Any = None
    budgetTotal: Any = None
    estimatedCompletion: Any = None
    projectType: Any = None
    length: Any = None
    stations: Any = None
    description: Any = None

    # Role tag ("complex" files): tracks, station-label, station-platforms, ...
    type: Any = None


class RawGeometry(BaseModel):
    type: Any = None
    coordinates: Any = None  # shape depends on type


class RawFeature(BaseModel):
    type: Any = "Feature"
    properties: RawFeatureProperties = Field(default_factory=RawFeatureProperties)
    geometry: Optional[RawGeometry] = None

    @field_validator("properties", mode="before")
    @classmethod
    def null_properties(cls, v):
        # GeoJSON allows "properties": null
        return v if isinstance(v, (dict, RawFeatureProperties)) else {}

    @field_validator("geometry", mode="before")
    @classmethod
    def unreadable_geometry(cls, v):
        return v if isinstance(v, (dict, RawGeometry)) else None


class SimpleGeometryFile(BaseModel):
    """A collection holding exactly one feature that carries its own project id."""

    kind: Literal["simple"] = "simple"
    type: Literal["FeatureCollection"] = "FeatureCollection"
    features: List[RawFeature]

    @model_validator(mode="after")
    def single_project_feature(self):
        if len(self.features) != 1:
            raise ValueError("simple geometry file must contain exactly one feature")
        if not self.features[0].properties.id:
            raise ValueError("simple geometry file feature must carry an id property")
        return self


class ComplexGeometryFile(BaseModel):
    """Many role-tagged features plus collection-level metadata."""

    kind: Literal["complex"] = "complex"
    type: Literal["FeatureCollection"] = "FeatureCollection"
    metadata: GeometryFileMetadata = Field(default_factory=GeometryFileMetadata)
    features: List[RawFeature] = Field(default_factory=list)
    bbox: Any = None

    @field_validator("metadata", mode="before")
    @classmethod
    def null_metadata(cls, v):
        return v if isinstance(v, (dict, GeometryFileMetadata)) else {}

    @field_validator("features", mode="before")
    @classmethod
    def feature_objects(cls, v):
        if not isinstance(v, list):
            return []
        return [f for f in v if isinstance(f, (dict, RawFeature))]
