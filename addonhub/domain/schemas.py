# addonhub/domain/schemas.py
from datetime import datetime
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field, field_validator

# ---------- Registry payloads ----------

class SourceReference(BaseModel):
    model_config = ConfigDict(extra="ignore")

    url: str | None = None
    type: str | None = None
    reference: str | None = None


class PackageVersionDescriptor(BaseModel):
    """One published version as described by the registry."""
    model_config = ConfigDict(extra="ignore")

    name: str | None = None
    version: str
    version_normalized: str
    source: SourceReference | None = None
    dist: SourceReference | None = None
    extra: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("extra", mode="before")
    @classmethod
    def _empty_extra(cls, v: Any) -> Any:
        # PHP serialises an empty map as []
        return v if isinstance(v, dict) else {}

    @field_validator("source", "dist", mode="before")
    @classmethod
    def _empty_reference(cls, v: Any) -> Any:
        return v if isinstance(v, dict) else None

# ---------- API ----------

class VersionIn(BaseModel):
    version: str
    pretty_version: str | None = None
    development: bool = False


class PackageCreate(BaseModel):
    name: str = Field(pattern=r"^[^/\s]+/[^/\s]+$")
    description: str | None = None
    type: str | None = None
    repository: str | None = None
    downloads: int = 0
    build_queued: bool = True
    versions: List[VersionIn] = []


class VersionOut(BaseModel):
    version: str
    pretty_version: str
    development: bool


class ScreenshotOut(BaseModel):
    key: str
    name: str
    size: int


class PackageDetail(BaseModel):
    name: str
    description: str | None = None
    type: str | None = None
    repository: str | None = None
    downloads: int = 0
    readme: str | None = None
    last_built: datetime | None = None
    build_queued: bool = False
    versions: List[VersionOut] = []
    screenshots: List[ScreenshotOut] = []


class BuildResult(BaseModel):
    name: str
    last_built: datetime | None
    screenshots: int
    has_readme: bool


class BuildReport(BaseModel):
    built: List[str] = []
    failed: Dict[str, str] = {}
