# tarball_service/models/fetch_models.py
from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class FetchSpec(BaseModel):
    """Canonical description of what to fetch, whichever request shape produced it."""

    model_config = ConfigDict(frozen=True)

    repo_url: str = Field(..., description="scheme://host/owner/repo")
    ref: str = Field(..., min_length=1, description="Branch, tag, or commit")
    sub_path: str = Field(default="", description="Subdirectory inside the snapshot; empty for the whole tree")
    repo_name: str = Field(..., description="Last segment of repo_url")


class FetchRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    spec: FetchSpec
    timeout: int = Field(..., description="Seconds; only enforced when ENFORCE_REQUEST_TIMEOUT is on")


class SnapshotRequestBody(BaseModel):
    """JSON body of `POST /`."""

    model_config = ConfigDict(populate_by_name=True)

    path: Optional[str] = ""
    repo_url: Optional[str] = Field(default="", alias="repoURL")
    target_revision: Optional[str] = Field(default="", alias="targetRevision")

    @field_validator("path", "repo_url", "target_revision", mode="before")
    @classmethod
    def _null_is_empty(cls, v: Any) -> Any:
        # JSON null reads the same as an absent field
        return "" if v is None else v
