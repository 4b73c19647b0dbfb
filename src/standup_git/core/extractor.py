"""Run git log for a repository and return its raw record stream."""

import logging
from pathlib import Path

import git
from git.exc import CommandError, GitCommandNotFound

from standup_git.core.errors import ConfigError, ExtractionError

logger = logging.getLogger(__name__)

# One <entry> element per commit. Messages are not escaped: a body with a
# bare "&" or "<" fails to parse, and well-formed tags inside a body are
# flattened to their text by the parser.
LOG_TEMPLATE = (
    "<entry>"
    "<author>%an</author>"
    "<date>%cd</date>"
    "<message>%B</message>"
    "</entry>"
)


def build_log_args(author: str, after: str) -> list:
    """Arguments passed to ``git log`` for one repository."""
    return [
        "--no-color",
        f"--author={author}",
        f"--pretty=format:{LOG_TEMPLATE}",
        f"--after={after}",
    ]


def extract_history(repo_root: Path, author: str, after: str) -> bytes:
    """Return the raw ``git log`` output for ``repo_root``.

    Args:
        repo_root: Working tree to run git in
        author: Value for ``--author``
        after: Value for ``--after``, passed through unchanged

    Returns:
        Raw stdout bytes; empty when no commit matched

    Raises:
        ExtractionError: git could not be run or exited non-zero
    """
    repo_root = Path(repo_root)
    args = build_log_args(author, after)
    logger.debug("Running git log in %s with %s", repo_root, args)
    try:
        out = git.Git(str(repo_root)).log(*args, stdout_as_string=False)
    except GitCommandNotFound as e:
        raise ExtractionError(f"Cannot run git: {e.status}", repo_root) from e
    except CommandError as e:
        raise ExtractionError(_describe_command_error(e), repo_root) from e
    except OSError as e:
        raise ExtractionError(f"Cannot run git: {e}", repo_root) from e
    return out or b""


def resolve_default_author() -> str:
    """Return ``user.name`` from the global git configuration.

    Raises:
        ConfigError: the value is unset, blank or git cannot be run
    """
    try:
        name = git.Git().config("--global", "--get", "user.name")
    except GitCommandNotFound as e:
        raise ConfigError(f"Cannot run git: {e.status}") from e
    except CommandError as e:
        raise ConfigError(
            "No user given and no global git user.name configured"
        ) from e
    except OSError as e:
        raise ConfigError(f"Cannot read global git config: {e}") from e

    name = name.strip()
    if not name:
        raise ConfigError("No user given and global git user.name is empty")
    logger.debug("Using global git user.name %r", name)
    return name


def _describe_command_error(error: CommandError) -> str:
    stderr = error.stderr
    if isinstance(stderr, bytes):
        stderr = stderr.decode("utf-8", errors="replace")
    stderr = (stderr or "").strip()
    # GitPython prefixes captured stderr with "stderr: '"
    if stderr.startswith("stderr: '") and stderr.endswith("'"):
        stderr = stderr[len("stderr: '") : -1].strip()
    if stderr:
        return f"git log failed (exit {error.status}): {stderr}"
    return f"git log failed (exit {error.status})"
