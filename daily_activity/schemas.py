"""Pydantic schemas for the activity pipeline.

These schemas define the contracts between:
- The JSON configuration file and the orchestrator
- Change strategies and the commit driver
- Subprocess tools and their callers
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


DEFAULT_BRANCH = "main"


# =============================================================================
# Enums
# =============================================================================

class ChangeType(str, Enum):
    """Categories of generated edits."""
    README = "readme"
    COMMENT = "comment"
    PACKAGE = "package"
    DOCS = "docs"
    CONFIG = "config"


class RepoOutcome(str, Enum):
    """Result of processing one configured repository."""
    SUCCESS = "success"
    SKIPPED = "skipped"
    ERROR = "error"


# =============================================================================
# Configuration Schemas
# =============================================================================

class RepositoryDescriptor(BaseModel):
    """One configured repository entry."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    name: str | None = Field(default=None, description="Display name")
    local_path: str | None = Field(
        default=None,
        validation_alias=AliasChoices("localPath", "local_path", "path"),
        description="Existing checkout, absolute or relative to the config file",
    )
    url: str | None = Field(default=None, description="Remote to clone when no local copy exists")
    branch: str = Field(default=DEFAULT_BRANCH, description="Branch to commit and push to")

    @field_validator("branch", mode="before")
    @classmethod
    def _default_branch(cls, value: Any) -> Any:
        return value or DEFAULT_BRANCH

    @property
    def label(self) -> str:
        """Text used in progress lines before the repository is resolved."""
        return self.name or self.url or self.local_path or "unknown"


class ActivityConfig(BaseModel):
    """Top-level shape of the configuration file."""
    repositories: list[RepositoryDescriptor]


# =============================================================================
# Pipeline Schemas
# =============================================================================

class ChangeRecord(BaseModel):
    """A single-file edit produced by a change strategy."""

    model_config = ConfigDict(frozen=True)

    file: str = Field(..., description="Path relative to the repository root")
    message: str = Field(..., description="Commit message")
    type: ChangeType


class RunSummary(BaseModel):
    """Counters accumulated across one run."""
    succeeded: int = 0
    skipped: int = 0
    errored: int = 0

    @property
    def total(self) -> int:
        return self.succeeded + self.skipped + self.errored

    def record(self, outcome: RepoOutcome) -> None:
        if outcome is RepoOutcome.SUCCESS:
            self.succeeded += 1
        elif outcome is RepoOutcome.SKIPPED:
            self.skipped += 1
        else:
            self.errored += 1


# =============================================================================
# Tool Schemas
# =============================================================================

class ToolResult(BaseModel):
    """Standard response from any subprocess tool call."""
    ok: bool = Field(..., description="Whether the tool call succeeded")
    data: Any | None = Field(default=None, description="Tool-specific response data")
    error_code: str | None = Field(default=None, description="Error code if failed")
    error_message: str | None = Field(default=None, description="Human-readable error message")
    latency_ms: int | None = Field(default=None, description="Time taken in milliseconds")
