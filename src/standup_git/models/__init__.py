"""Data models for standup-git."""

from .commit import CommitRecord

__all__ = ["CommitRecord"]
