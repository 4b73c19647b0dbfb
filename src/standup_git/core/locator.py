"""Find git repositories below a directory."""

import logging
import os
from pathlib import Path
from typing import Iterator

from standup_git.core.errors import TraversalError

logger = logging.getLogger(__name__)

GIT_MARKER = ".git"


def find_repositories(root: Path, on_error: str = "abort") -> Iterator[Path]:
    """Yield every repository root in the tree under ``root``.

    A repository root is a directory with a ``.git`` child directory; ``root``
    itself is included. Symlinks are not followed and ``.git`` directories are
    not descended into. Directories are visited in sorted order.

    Args:
        root: Directory to start the walk from
        on_error: ``"abort"`` raises TraversalError on the first unreadable
            directory, ``"skip"`` logs it and keeps walking

    Yields:
        Repository root directories, in visit order
    """
    if on_error not in ("abort", "skip"):
        raise ValueError(f"Unknown traversal error policy: {on_error!r}")

    def handle_error(err: OSError) -> None:
        failed = Path(err.filename) if err.filename else Path(root)
        if on_error == "abort":
            raise TraversalError(
                f"Cannot read directory: {err.strerror or err}", failed
            ) from err
        logger.warning("Skipping unreadable directory %s: %s", failed, err)

    for dirpath, dirnames, _filenames in os.walk(root, onerror=handle_error):
        if GIT_MARKER in dirnames:
            dirnames.remove(GIT_MARKER)
            yield Path(dirpath)
        dirnames.sort()


def project_name(repo_root: Path) -> str:
    """Name of the project a repository root belongs to.

    This is the directory holding ``.git``; a filesystem root yields "".
    Relative spellings such as ``.`` or ``..`` are made absolute first.
    """
    return Path(os.path.abspath(repo_root)).name
