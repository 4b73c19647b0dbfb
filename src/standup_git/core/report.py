"""Read and write the standup JSON report."""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Iterable, List

from pydantic import ValidationError

from standup_git.core.errors import WriteError
from standup_git.models.commit import CommitRecord

logger = logging.getLogger(__name__)


def render_report(records: Iterable[CommitRecord]) -> str:
    """Serialize records to an indented JSON array."""
    return json.dumps(
        [record.model_dump() for record in records], indent=2, ensure_ascii=False
    )


def write_report(records: Iterable[CommitRecord], path: Path) -> Path:
    """Write ``records`` to ``path``, replacing any previous report.

    The content goes to a temporary file beside ``path`` first and is then
    moved over it, so an interrupted write never leaves a half-written report.

    Returns:
        The path written

    Raises:
        WriteError: serialization or any filesystem operation failed
    """
    path = Path(path)
    try:
        content = render_report(records)
    except (TypeError, ValueError) as e:
        raise WriteError(f"Cannot serialize report: {e}", path) from e

    tmp_name = None
    try:
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        ) as f:
            tmp_name = f.name
            f.write(content)
        os.chmod(tmp_name, 0o666 & ~_current_umask())
        os.replace(tmp_name, path)
    except OSError as e:
        if tmp_name is not None:
            Path(tmp_name).unlink(missing_ok=True)
        raise WriteError(f"Cannot write report: {e}", path) from e

    logger.debug("Wrote report to %s", path)
    return path


def _current_umask() -> int:
    # os.umask can only be read by setting it
    mask = os.umask(0)
    os.umask(mask)
    return mask


def load_report(path: Path) -> List[CommitRecord]:
    """Read a report written by :func:`write_report` back into records."""
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    try:
        return [CommitRecord.model_validate(item) for item in data]
    except ValidationError as e:
        raise ValueError(f"Invalid report file {path}: {e}") from e
