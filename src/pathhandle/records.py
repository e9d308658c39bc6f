"""Serialization models for path handles."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict


class RecordModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid", frozen=True)


class PathRecord(RecordModel):
    """Point-in-time view of a handle, including its on-disk state."""

    path: str
    exists: bool
    type: Literal["file", "directory"]
    root: str
    name: str
    fullname: str
    ext: str
