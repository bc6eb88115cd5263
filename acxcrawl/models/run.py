"""Run ledger models for tracking pipeline executions."""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class Run(BaseModel):
    """Pipeline run record."""

    id: int = Field(..., description="Run ID")
    pipeline: str = Field(..., description="Pipeline name (articles, comments, bodies)")
    started_at: str = Field(..., description="When the run started (ISO 8601)")
    finished_at: Optional[str] = Field(None, description="When the run finished")
    status: str = Field("running", description="Run status (running, success, failed)")
    stats: Optional[Dict[str, Any]] = Field(None, description="Aggregate run statistics")


class Failure(BaseModel):
    """An item skipped during a run."""

    id: int = Field(..., description="Failure ID")
    run_id: Optional[int] = Field(None, description="Run the failure belongs to")
    pipeline: str = Field(..., description="Pipeline name")
    item_key: str = Field(..., description="Article ID, comment ID or slug")
    stage: str = Field(..., description="Where it failed (fetch, decode, encode, insert, update)")
    error: str = Field(..., description="Error message")
    created_at: str = Field(..., description="When the failure was recorded")
