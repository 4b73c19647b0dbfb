"""Standup pipeline: walk, extract, parse, write."""

import logging
from enum import Enum
from pathlib import Path
from typing import List

from standup_git.core.config import StandupConfig
from standup_git.core.errors import StandupError
from standup_git.core.extractor import extract_history
from standup_git.core.locator import find_repositories, project_name
from standup_git.core.parser import parse_records
from standup_git.core.report import write_report
from standup_git.models.commit import CommitRecord

logger = logging.getLogger(__name__)


class RunState(str, Enum):
    """Stage a standup run is in."""

    IDLE = "idle"
    WALKING = "walking"
    EXTRACTING = "extracting"
    PARSING = "parsing"
    WRITING = "writing"
    DONE = "done"
    FAILED = "failed"


class StandupRun:
    """One pass over a directory tree producing a standup report.

    Repositories are handled one at a time in walk order. Any StandupError
    moves the run to FAILED and propagates; the report is only written once
    every repository has been processed.
    """

    def __init__(self, config: StandupConfig):
        self.config = config
        self.state = RunState.IDLE
        self.records: List[CommitRecord] = []
        self.repositories: List[Path] = []

    def collect(self) -> List[CommitRecord]:
        """Gather commit records from every repository under the scan root."""
        try:
            self._collect()
        except StandupError:
            self._transition(RunState.FAILED)
            raise
        return self.records

    def run(self) -> Path:
        """Collect records and write the report. Returns the report path."""
        self.collect()
        try:
            self._transition(RunState.WRITING)
            path = write_report(self.records, self.config.output)
        except StandupError:
            self._transition(RunState.FAILED)
            raise
        self._transition(RunState.DONE)
        return path

    def _collect(self) -> None:
        config = self.config
        self._transition(RunState.WALKING)
        repos = find_repositories(config.directory, on_error=config.on_walk_error)
        for repo_root in repos:
            self.repositories.append(repo_root)
            logger.info("Found repository %s", repo_root)

            self._transition(RunState.EXTRACTING)
            raw = extract_history(repo_root, config.user, config.after)
            if not raw.strip():
                logger.info("No commits by %s in %s", config.user, repo_root)
                self._transition(RunState.WALKING)
                continue

            self._transition(RunState.PARSING)
            records = parse_records(raw, project_name(repo_root))
            if config.verbose:
                logger.info("%d commit(s) in %s", len(records), repo_root)
            self.records.extend(records)
            self._transition(RunState.WALKING)

    def _transition(self, state: RunState) -> None:
        logger.debug("State %s -> %s", self.state.value, state.value)
        self.state = state
