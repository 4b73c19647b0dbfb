"""Decode the ``<entry>`` stream produced by git log into commit records.

git prints one ``<entry>`` element per commit with nothing around them, so
the output is a sequence of XML fragments rather than a document. The reader
below opens a synthetic container element, feeds the raw bytes through a
pull parser in chunks and emits a record each time a top-level element
closes.
"""

import logging
from typing import Iterator, List
from xml.etree import ElementTree

from standup_git.core.errors import ParseError
from standup_git.models.commit import CommitRecord

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024
RECORD_FIELDS = ("author", "date", "message")

_STREAM_OPEN = b"<stream>"
_STREAM_CLOSE = b"</stream>"


def iter_records(
    raw: bytes, project: str, chunk_size: int = CHUNK_SIZE
) -> Iterator[CommitRecord]:
    """Yield one CommitRecord per top-level element in ``raw``.

    Args:
        raw: Output of git log for a single repository
        project: Project name stamped onto every record
        chunk_size: Number of bytes fed to the parser at a time

    Raises:
        ParseError: the stream is malformed, truncated or badly encoded
    """
    parser = ElementTree.XMLPullParser(events=("start", "end"))
    depth = 0

    def drain() -> Iterator[CommitRecord]:
        nonlocal depth
        for event, elem in parser.read_events():
            if event == "start":
                depth += 1
                continue
            depth -= 1
            # depth 1 is the synthetic container; its children are entries
            if depth == 1:
                yield _to_record(elem, project)
                elem.clear()

    try:
        parser.feed(_STREAM_OPEN)
        yield from drain()
        for offset in range(0, len(raw), chunk_size):
            parser.feed(raw[offset : offset + chunk_size])
            yield from drain()
        parser.feed(_STREAM_CLOSE)
        yield from drain()
        parser.close()
    except ElementTree.ParseError as e:
        raise ParseError(f"Malformed git log output: {e}") from e


def parse_records(raw: bytes, project: str) -> List[CommitRecord]:
    """Decode every record in ``raw``; see :func:`iter_records`."""
    records = list(iter_records(raw, project))
    logger.debug("Parsed %d record(s) for project %r", len(records), project)
    return records


def _to_record(elem: ElementTree.Element, project: str) -> CommitRecord:
    fields = {}
    for name in RECORD_FIELDS:
        child = elem.find(name)
        # Markup inside a field is flattened to its text content
        fields[name] = "".join(child.itertext()) if child is not None else ""
    return CommitRecord(project=project, **fields)
