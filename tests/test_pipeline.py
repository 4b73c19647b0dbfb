"""End-to-end tests for the standup pipeline."""

import json
import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest
from git import Actor, Repo

from standup_git.core.config import StandupConfig
from standup_git.core.errors import ExtractionError, ParseError, TraversalError
from standup_git.core.pipeline import RunState, StandupRun

ALICE = Actor("Alice", "alice@example.com")
BOB = Actor("Bob", "bob@example.com")
LONG_AGO = "2000-01-01T00:00:00"


def make_repo(path: Path, commits) -> Repo:
    """Initialize a repository at ``path`` with ``(message, actor)`` commits."""
    repo = Repo.init(path)
    for i, (message, actor) in enumerate(commits):
        name = f"file{i}.txt"
        (path / name).write_text(message)
        repo.index.add([name])
        repo.index.commit(message, author=actor, committer=actor)
    return repo


@pytest.fixture
def workspace():
    """Scan root with A (two Alice commits), B (Bob only) and C (no repo)."""
    with tempfile.TemporaryDirectory() as temp_dir:
        root = Path(temp_dir) / "src"
        make_repo(root / "A", [("Start A", ALICE), ("Finish A", ALICE)])
        make_repo(root / "B", [("Bob's work", BOB)])
        (root / "C" / "nogit").mkdir(parents=True)
        (root / "C" / "nogit" / "notes.txt").write_text("nothing here\n")
        yield Path(temp_dir)


def make_config(workspace: Path, **overrides) -> StandupConfig:
    values = {
        "user": "Alice",
        "directory": workspace / "src",
        "after": LONG_AGO,
        "output": workspace / "standup.json",
    }
    values.update(overrides)
    return StandupConfig(**values)


def test_scenario_only_matching_repository_contributes(workspace):
    run = StandupRun(make_config(workspace))

    path = run.run()

    data = json.loads(path.read_text())
    assert len(data) == 2
    assert {item["project"] for item in data} == {"A"}
    assert [item["message"].strip() for item in data] == ["Finish A", "Start A"]
    assert run.state == RunState.DONE
    assert run.repositories == [workspace / "src" / "A", workspace / "src" / "B"]


def test_collect_without_writing(workspace):
    run = StandupRun(make_config(workspace))

    records = run.collect()

    assert [r.project for r in records] == ["A", "A"]
    assert not (workspace / "standup.json").exists()


def test_tree_without_repositories_writes_empty_array():
    with tempfile.TemporaryDirectory() as temp_dir:
        root = Path(temp_dir)
        (root / "empty" / "dir").mkdir(parents=True)
        config = StandupConfig(
            user="Alice", directory=root, after=LONG_AGO, output=root / "out.json"
        )

        path = StandupRun(config).run()

        assert json.loads(path.read_text()) == []


def test_repositories_are_visited_in_sorted_order(workspace):
    make_repo(workspace / "src" / "0-first", [("Early", ALICE)])

    records = StandupRun(make_config(workspace)).collect()

    assert [r.project for r in records] == ["0-first", "A", "A"]


def test_nested_copies_are_not_deduplicated(workspace):
    Repo(workspace / "src" / "A").clone(workspace / "src" / "A" / "copy")

    records = StandupRun(make_config(workspace)).collect()

    assert [r.project for r in records] == ["A", "A", "copy", "copy"]


def test_extraction_failure_aborts_without_report(workspace):
    run = StandupRun(make_config(workspace))
    error = ExtractionError("git log failed (exit 128)", workspace / "src" / "B")

    with patch(
        "standup_git.core.pipeline.extract_history",
        side_effect=[b"", error],
    ):
        with pytest.raises(ExtractionError):
            run.run()

    assert run.state == RunState.FAILED
    assert not (workspace / "standup.json").exists()


def test_empty_repository_aborts_run(workspace):
    Repo.init(workspace / "src" / "D-empty")
    run = StandupRun(make_config(workspace))

    with pytest.raises(ExtractionError):
        run.run()

    assert not (workspace / "standup.json").exists()


def test_parse_failure_aborts_run(workspace):
    run = StandupRun(make_config(workspace))

    with patch(
        "standup_git.core.pipeline.extract_history",
        return_value=b"<entry><message>a & b</message></entry>",
    ):
        with pytest.raises(ParseError):
            run.run()

    assert run.state == RunState.FAILED
    assert not (workspace / "standup.json").exists()


def test_stale_report_survives_failed_run(workspace):
    output = workspace / "standup.json"
    output.write_text("[]")

    with patch(
        "standup_git.core.pipeline.extract_history",
        side_effect=ExtractionError("boom"),
    ):
        with pytest.raises(ExtractionError):
            StandupRun(make_config(workspace)).run()

    assert output.read_text() == "[]"


def test_traversal_error_policy(workspace):
    missing = workspace / "missing"

    with pytest.raises(TraversalError):
        StandupRun(make_config(workspace, directory=missing)).run()

    path = StandupRun(
        make_config(workspace, directory=missing, on_walk_error="skip")
    ).run()
    assert json.loads(path.read_text()) == []


def test_scanning_current_directory_names_project(workspace, monkeypatch):
    monkeypatch.chdir(workspace / "src" / "A")
    config = make_config(workspace, directory=Path("."))

    records = StandupRun(config).collect()

    assert [r.project for r in records] == ["A", "A"]
