"""File-based event and task storage adapter."""

import json
import logging
import uuid
from dataclasses import replace
from pathlib import Path

from chronogrid.core.events import Event
from chronogrid.core.tasks import Task
from chronogrid.ports.errors import RecordNotFoundError

logger = logging.getLogger(__name__)


class StoreFormatError(ValueError):
    """Raised when the data file exists but cannot be read as a store."""

    pass


def new_id() -> str:
    return uuid.uuid4().hex[:12]


class JsonFileStore:
    """
    JSON file storage for events and tasks.

    Implements EventRepository and TaskRepository protocols. The store owns
    identity: new records get fresh ids, and each update is stored as a new
    version of an immutable record.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path).expanduser()
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def _load(self) -> dict:
        if not self.path.exists():
            return {"events": [], "tasks": [], "versions": {}}
        try:
            data = json.loads(self.path.read_text())
        except json.JSONDecodeError as e:
            raise StoreFormatError(f"Cannot read {self.path}: {e}") from e
        data.setdefault("events", [])
        data.setdefault("tasks", [])
        data.setdefault("versions", {})
        return data

    def _save(self, data: dict) -> None:
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(data, indent=2))
        tmp.replace(self.path)

    def _index(self, records: list[dict], record_id: str) -> int:
        for i, record in enumerate(records):
            if record.get("id") == record_id:
                return i
        raise RecordNotFoundError(record_id)

    def _create(self, kind: str, record: dict) -> str:
        data = self._load()
        existing = {r.get("id") for r in data[kind]}
        record_id = record.get("id")
        if not record_id or record_id in existing:
            record_id = new_id()
        data[kind].append({**record, "id": record_id})
        data["versions"][record_id] = 1
        self._save(data)
        logger.debug(f"Created {kind[:-1]} {record_id}")
        return record_id

    def _update(self, kind: str, record: dict) -> int:
        data = self._load()
        index = self._index(data[kind], record["id"])
        data[kind][index] = record
        version = data["versions"].get(record["id"], 1) + 1
        data["versions"][record["id"]] = version
        self._save(data)
        return version

    def _delete(self, kind: str, record_id: str) -> None:
        data = self._load()
        index = self._index(data[kind], record_id)
        del data[kind][index]
        data["versions"].pop(record_id, None)
        self._save(data)

    def version(self, record_id: str) -> int:
        """Current version number of a record (1 after creation)."""
        versions = self._load()["versions"]
        if record_id not in versions:
            raise RecordNotFoundError(record_id)
        return versions[record_id]

    # ============== Events ==============

    def list_events(self) -> list[Event]:
        events = []
        for data in self._load()["events"]:
            try:
                events.append(Event.from_api(data))
            except (KeyError, ValueError) as e:
                logger.warning(f"Skipping malformed event {data.get('id')} in {self.path}: {e}")
        return events

    def get_event(self, event_id: str) -> Event:
        records = self._load()["events"]
        return Event.from_api(records[self._index(records, event_id)])

    def create_event(self, event: Event) -> Event:
        event_id = self._create("events", event.to_api())
        return replace(event, id=event_id)

    def update_event(self, event: Event) -> Event:
        self._update("events", event.to_api())
        return event

    def delete_event(self, event_id: str) -> None:
        self._delete("events", event_id)

    # ============== Tasks ==============

    def list_tasks(self) -> list[Task]:
        tasks = []
        for data in self._load()["tasks"]:
            try:
                tasks.append(Task.from_api(data))
            except (KeyError, ValueError) as e:
                logger.warning(f"Skipping malformed task {data.get('id')} in {self.path}: {e}")
        return tasks

    def get_task(self, task_id: str) -> Task:
        records = self._load()["tasks"]
        return Task.from_api(records[self._index(records, task_id)])

    def create_task(self, task: Task) -> Task:
        task_id = self._create("tasks", task.to_api())
        return replace(task, id=task_id)

    def update_task(self, task: Task) -> Task:
        self._update("tasks", task.to_api())
        return task

    def delete_task(self, task_id: str) -> None:
        self._delete("tasks", task_id)
