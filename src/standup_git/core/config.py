"""Run configuration for standup-git."""

from datetime import datetime, timedelta
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

AFTER_FORMAT = "%Y-%m-%dT%H:%M:%S"
DEFAULT_OUTPUT = "standup.json"


def default_after(now: Optional[datetime] = None) -> str:
    """Return the default lower time bound: 24 hours before ``now``."""
    now = now or datetime.now()
    return (now - timedelta(hours=24)).strftime(AFTER_FORMAT)


class StandupConfig(BaseModel):
    """Settings for a single standup run.

    The whole object is passed through the pipeline; nothing reads
    process-wide state.
    """

    user: str = Field(description="Author filter passed to git log --author")
    directory: Path = Field(
        default_factory=Path.home,
        description="Root directory to search recursively for repositories",
    )
    after: str = Field(
        default_factory=default_after,
        description="Lower time bound passed verbatim to git log --after",
    )
    output: Path = Field(
        default=Path(DEFAULT_OUTPUT), description="Report file to (over)write"
    )
    verbose: bool = Field(default=False, description="Emit extra diagnostics")
    on_walk_error: Literal["abort", "skip"] = Field(
        default="abort",
        description="Abort the whole walk on a directory error, or skip it",
    )

    @field_validator("user")
    @classmethod
    def validate_user(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("user must not be empty")
        return v
