from taskcli.ports.task_repository import TaskRepository
from taskcli.domain.task import Task, TaskId
from taskcli.domain.enums import TaskStatus
from taskcli.domain.errors import StorageError, TaskFormatError
from pathlib import Path
from typing import Iterable
from datetime import datetime, timezone
import json
import logging
import os
import re

logger = logging.getLogger(__name__)


### COMMENTS
# ==========================================================
# JSON file adapter (adapters/file/task_repo.py).
# ==========================================================
# - One JSON document: a list of records {id, description, status, createdAt, updatedAt}.
# - Pretty-printed (indent=2) so the file diffs nicely.
# - Every save rewrites the whole file: write `.swap`, fsync, os.replace.
# - Missing file, empty file or `null` document -> empty collection.
# - Anything else that does not decode -> TaskFormatError (no auto-repair).


def _encode_dt(dt: datetime) -> str:
    # ISO 8601 in UTC with a 'Z' suffix
    return dt.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")

# RFC 3339 allows any number of fraction digits; fromisoformat on 3.10 wants 3 or 6
_FRACTION = re.compile(r"(?<=:\d\d)\.(\d+)")

def _normalize_fraction(match: re.Match) -> str:
    return "." + match.group(1)[:6].ljust(6, "0")

def _parse_dt(value) -> datetime:
    """Parses an ISO 8601 timestamp with offset (or 'Z') into aware UTC.
    Fractions longer than microseconds (e.g. nanoseconds) are truncated."""
    if not isinstance(value, str):
        raise ValueError(f"timestamp must be a string, got {type(value).__name__}")
    text = _FRACTION.sub(_normalize_fraction, value.replace("Z", "+00:00"), count=1)
    dt = datetime.fromisoformat(text)
    if dt.tzinfo is None:
        raise ValueError(f"timestamp '{value}' has no timezone")
    return dt.astimezone(timezone.utc)

def _encode_task(task: Task) -> dict:
    return {
        "id": int(task.task_id),
        "description": task.description,
        "status": str(task.status),  # enum -> str
        "createdAt": _encode_dt(task.created_at),
        "updatedAt": _encode_dt(task.updated_at),
    }

def _decode_task(record: dict) -> Task:
    if not isinstance(record, dict):
        raise ValueError("record must be an object")

    raw_id = record["id"]
    if isinstance(raw_id, bool) or not isinstance(raw_id, int) or raw_id < 1:
        raise ValueError(f"id must be a positive integer, got {raw_id!r}")

    description = record["description"]
    if not isinstance(description, str) or not description.strip():
        raise ValueError(f"task {raw_id}: description must be a non-empty string")

    status = TaskStatus(record["status"])  # str -> enum, ValueError when unknown

    return Task(
        task_id=TaskId(raw_id),
        description=description,
        created_at=_parse_dt(record["createdAt"]),
        updated_at=_parse_dt(record["updatedAt"]),
        status=status,
    )


class JsonFileTaskRepository(TaskRepository):
    def __init__(self, path: Path) -> None:
        """Initializes the JSON file repository.
        The file itself is created lazily on the first save."""
        self.path = Path(path)

    def load(self) -> list[Task]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.debug("No data file at %s, starting empty", self.path)
            return []
        except OSError as e:
            raise StorageError(f"Cannot read {self.path}: {e}") from e

        if not raw.strip():
            return []

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise TaskFormatError(self.path.name, f"invalid JSON: {e}") from e

        if data is None:
            return []
        if not isinstance(data, list):
            raise TaskFormatError(self.path.name, "expected a list of tasks")

        tasks: list[Task] = []
        seen: set[int] = set()
        for index, record in enumerate(data):
            try:
                task = _decode_task(record)
            except KeyError as e:
                raise TaskFormatError(self.path.name, f"record {index}: missing field {e}") from e
            except (TypeError, ValueError) as e:
                raise TaskFormatError(self.path.name, f"record {index}: {e}") from e

            if task.task_id in seen:
                raise TaskFormatError(self.path.name, f"record {index}: duplicate id {task.task_id}")
            seen.add(task.task_id)
            tasks.append(task)

        logger.debug("Loaded %d task(s) from %s", len(tasks), self.path)
        return tasks

    def save(self, tasks: list[Task]) -> None:
        """Serializes the whole collection and replaces the file atomically."""
        self._atomic_dump(tasks)
        logger.debug("Saved %d task(s) to %s", len(tasks), self.path)

    def get_next_id(self) -> int:
        tasks = self.load()
        return max((t.task_id for t in tasks), default=0) + 1

    def _atomic_dump(self, tasks: Iterable[Task]) -> None:
        payload = json.dumps([_encode_task(t) for t in tasks], indent=2, ensure_ascii=False)
        tmp = self.path.with_suffix(self.path.suffix + ".swap")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tmp.open("w", encoding="utf-8", newline="\n") as f:
                f.write(payload)
                f.write("\n")
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp, self.path)
        except OSError as e:
            try:
                if tmp.exists():
                    tmp.unlink()
            except OSError:
                logger.warning("Could not remove temporary file %s", tmp)
            raise StorageError(f"Cannot write {self.path}: {e}") from e
