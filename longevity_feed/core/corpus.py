"""
Corpus merge and persistence.

The corpus is a single JSON array owned by the running process for the
duration of a run. Runs must not overlap; no file lock is taken. A session
reads the file once, and the full replacement is written atomically only
when the session is committed and exits cleanly.
"""

from __future__ import annotations

from contextlib import contextmanager
import json
import logging
import os
from pathlib import Path
import tempfile
from typing import Any, Iterator

from ..errors import CorpusError

logger = logging.getLogger(__name__)

Record = dict[str, Any]

DEFAULT_MAX_RECORDS = 200


def merge_records(
    new_records: list[Record],
    existing: list[Record],
    max_records: int = DEFAULT_MAX_RECORDS,
) -> list[Record]:
    """Combine new and existing records into the next corpus.

    New records go first so that, on equal dates, they precede older
    entries; the sort is stable. Records beyond the cap are discarded.

    Args:
        new_records: Enriched records produced by this run
        existing: Records of the current corpus
        max_records: Maximum number of records kept

    Returns:
        Records sorted by publishedDate descending, truncated to max_records
    """
    merged = [*new_records, *existing]
    merged.sort(key=lambda record: str(record.get("publishedDate") or ""), reverse=True)
    return merged[:max_records]


def dump_corpus(records: list[Record]) -> str:
    """Serialize records as pretty-printed, newline-terminated JSON."""
    return json.dumps(records, indent=2, ensure_ascii=False) + "\n"


class CorpusSession:
    """In-memory view of the corpus for one run."""

    def __init__(self, path: Path, records: list[Record]):
        self.path = path
        self.records = records
        self.pending: list[Record] | None = None

    @property
    def external_ids(self) -> set[str]:
        return {r["externalId"] for r in self.records if r.get("externalId")}

    @property
    def slugs(self) -> set[str]:
        return {r["slug"] for r in self.records if r.get("slug")}

    def commit(self, records: list[Record]) -> None:
        """Stage the full replacement corpus, written when the session closes."""
        self.pending = records


class CorpusStore:
    """Single-owner access to the corpus file.

    Attributes:
        path: Location of the corpus JSON file
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def read(self) -> list[Record]:
        """Load the corpus; a missing file is an empty corpus.

        Raises:
            CorpusError: If the file is unreadable, not JSON, or not an array of objects
        """
        if not self.path.exists():
            logger.warning("Corpus file %s not found; starting from an empty corpus", self.path)
            return []
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise CorpusError(f"Cannot read corpus {self.path}: {exc}") from exc
        if not isinstance(data, list):
            raise CorpusError(f"Corpus {self.path} must contain a JSON array")
        malformed = sum(1 for record in data if not isinstance(record, dict))
        if malformed:
            raise CorpusError(f"Corpus {self.path} has {malformed} entries that are not objects")
        return data

    def write(self, records: list[Record]) -> None:
        """Replace the corpus file atomically.

        Raises:
            CorpusError: If the file cannot be written
        """
        payload = dump_corpus(records)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as handle:
                    handle.write(payload)
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise CorpusError(f"Cannot write corpus {self.path}: {exc}") from exc

    @contextmanager
    def session(self) -> Iterator[CorpusSession]:
        """Open the corpus for one run.

        Nothing is written if the block raises or never calls commit().
        """
        session = CorpusSession(self.path, self.read())
        yield session
        if session.pending is not None:
            self.write(session.pending)
