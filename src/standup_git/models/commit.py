"""Commit record model for standup reports."""

from pydantic import BaseModel


class CommitRecord(BaseModel):
    """A single commit pulled from one repository's history."""

    author: str = ""
    project: str = ""
    date: str = ""  # Literal %cd text, never parsed
    message: str = ""  # Raw %B body, may span several lines
