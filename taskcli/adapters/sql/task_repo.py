from __future__ import annotations
from pathlib import Path
import logging
import sqlalchemy as db
from sqlalchemy.exc import SQLAlchemyError
from taskcli.ports.task_repository import TaskRepository
from taskcli.domain.task import Task, TaskId
from taskcli.domain.enums import TaskStatus
from taskcli.domain.errors import StorageError, TaskFormatError
from datetime import datetime, timezone

logger = logging.getLogger(__name__)


class SqlTaskRepository(TaskRepository):
    def __init__(self, url: str | Path) -> None:
        """
        url: e.g. 'sqlite:///data/tasks.db' or a Path to the file (turned into a URL)
        """
        if isinstance(url, Path):
            db_url = f"sqlite:///{url}"
        else:
            db_url = url

        self.engine = db.create_engine(db_url, future=True)
        self.meta = db.MetaData()

        # position keeps the collection order independent of id
        self.tasks = db.Table(
            "tasks",
            self.meta,
            db.Column("position", db.Integer, primary_key=True, autoincrement=False),
            db.Column("id", db.Integer, nullable=False, unique=True),
            db.Column("description", db.String, nullable=False),
            db.Column("status", db.String, nullable=False),      # 'todo'/'in-progress'/'done'
            db.Column("created_at", db.String, nullable=False),  # ISO8601 '...Z'
            db.Column("updated_at", db.String, nullable=False),
        )

        try:
            self.meta.create_all(self.engine)
        except SQLAlchemyError as e:
            raise StorageError(f"Cannot open database {db_url}: {e}") from e

    def _encode_dt(self, dt: datetime) -> str:
        # ISO 8601 in UTC with a 'Z' suffix
        return dt.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")

    def _decode_dt(self, s: str) -> datetime:
        # '...Z' -> aware UTC
        dt = datetime.fromisoformat(s.replace("Z", "+00:00"))
        if dt.tzinfo is None:
            raise ValueError(f"timestamp '{s}' has no timezone")
        return dt.astimezone(timezone.utc)

    def _to_row(self, position: int, task: Task) -> dict:
        return {
            "position": position,
            "id": int(task.task_id),
            "description": task.description,
            "status": str(task.status),
            "created_at": self._encode_dt(task.created_at),
            "updated_at": self._encode_dt(task.updated_at),
        }

    def _from_row(self, row) -> Task:
        try:
            task_id = int(row["id"])
            if task_id < 1:
                raise ValueError(f"id must be a positive integer, got {task_id}")
            description = row["description"]
            if not isinstance(description, str) or not description.strip():
                raise ValueError(f"task {task_id}: description must be a non-empty string")

            return Task(
                task_id=TaskId(task_id),
                description=description,
                created_at=self._decode_dt(row["created_at"]),
                updated_at=self._decode_dt(row["updated_at"]),
                status=TaskStatus(row["status"]),
            )
        except (AttributeError, TypeError, ValueError) as e:
            raise TaskFormatError("tasks", f"row {row['position']}: {e}") from e

    def save(self, tasks: list[Task]) -> None:
        rows = [self._to_row(i, t) for i, t in enumerate(tasks)]
        try:
            # one transaction: either the whole new collection or the old one
            with self.engine.begin() as conn:
                conn.execute(db.delete(self.tasks))
                if rows:
                    conn.execute(db.insert(self.tasks), rows)
        except SQLAlchemyError as e:
            raise StorageError(f"Cannot save tasks: {e}") from e
        logger.debug("Saved %d task(s) to %s", len(rows), self.engine.url)

    def load(self) -> list[Task]:
        stmt = db.select(self.tasks).order_by(self.tasks.c.position.asc())
        try:
            with self.engine.connect() as conn:
                rows = conn.execute(stmt).mappings().all()
        except SQLAlchemyError as e:
            raise StorageError(f"Cannot load tasks: {e}") from e
        return [self._from_row(r) for r in rows]

    def get_next_id(self) -> int:
        stmt = db.select(db.func.max(self.tasks.c.id))
        try:
            with self.engine.connect() as conn:
                current = conn.execute(stmt).scalar_one()
        except SQLAlchemyError as e:
            raise StorageError(f"Cannot read tasks: {e}") from e
        return (current or 0) + 1
