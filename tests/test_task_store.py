"""TaskStore の単体テスト"""

import threading
from datetime import datetime, timedelta, timezone

import pytest

from src.tasks import NotFoundError, TaskPriority, TaskStatus, TaskStore, ValidationError
from src.tasks.store import seed_sample_tasks


class FakeClock:
    """呼び出すたびに1分進む時計"""

    def __init__(self, start: datetime) -> None:
        self.current = start

    def __call__(self) -> datetime:
        value = self.current
        self.current += timedelta(minutes=1)
        return value


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2025, 3, 1, 9, 0, tzinfo=timezone.utc))


@pytest.fixture
def store(clock) -> TaskStore:
    return TaskStore(clock=clock)


def test_create_assigns_defaults_and_timestamps(store):
    task = store.create({"title": "Write report"})

    assert task.id
    assert task.description == ""
    assert task.status is TaskStatus.TODO
    assert task.priority is TaskPriority.MEDIUM
    assert task.due_date is None
    assert task.tags == []
    assert task.created_at == task.updated_at == datetime(2025, 3, 1, 9, 0, tzinfo=timezone.utc)


def test_create_then_get_round_trip(store):
    created = store.create(
        {
            "title": "Prepare slides",
            "description": "For Friday meeting",
            "status": "in_progress",
            "priority": "high",
            "due_date": "2025-03-10T12:00:00Z",
            "tags": ["work", "meeting"],
        }
    )

    fetched = store.get(created.id)

    assert fetched == created
    assert fetched.due_date == datetime(2025, 3, 10, 12, 0, tzinfo=timezone.utc)
    assert fetched.tags == ["work", "meeting"]


def test_create_reports_every_violation(store):
    with pytest.raises(ValidationError) as excinfo:
        store.create(
            {
                "title": "",
                "description": "x" * 501,
                "status": "blocked",
                "priority": "urgent",
                "due_date": "not-a-date",
                "tags": ["ok", "y" * 51],
            }
        )

    errors = excinfo.value.errors
    assert len(errors) == 6
    assert any("Title" in e for e in errors)
    assert any("Description" in e for e in errors)
    assert any("Status" in e for e in errors)
    assert any("Priority" in e for e in errors)
    assert any("Due date" in e for e in errors)
    assert any("tag" in e for e in errors)
    assert store.count() == 0


def test_create_rejects_server_assigned_fields(store):
    with pytest.raises(ValidationError) as excinfo:
        store.create({"title": "A", "id": "fixed"})
    assert "id" in excinfo.value.errors[0]


def test_title_length_limit(store):
    store.create({"title": "t" * 100})
    with pytest.raises(ValidationError):
        store.create({"title": "t" * 101})


def test_get_missing_raises(store):
    with pytest.raises(NotFoundError):
        store.get("missing")


def test_update_merges_and_refreshes_updated_at(store):
    created = store.create({"title": "Buy milk", "tags": ["home"]})

    updated = store.update(created.id, {"status": "completed", "due_date": "2025-03-02"})

    assert updated.title == "Buy milk"
    assert updated.tags == ["home"]
    assert updated.status is TaskStatus.COMPLETED
    assert updated.due_date == datetime(2025, 3, 2, tzinfo=timezone.utc)
    assert updated.created_at == created.created_at
    assert updated.updated_at > created.updated_at


def test_update_can_clear_due_date(store):
    created = store.create({"title": "A", "due_date": "2025-03-02"})
    updated = store.update(created.id, {"due_date": None})
    assert updated.due_date is None


def test_invalid_update_leaves_record_unchanged(store):
    created = store.create({"title": "Original", "priority": "low"})

    with pytest.raises(ValidationError):
        store.update(created.id, {"title": "Renamed", "status": "archived"})

    assert store.get(created.id) == created


def test_update_missing_raises(store):
    with pytest.raises(NotFoundError):
        store.update("missing", {"title": "x"})


def test_delete_and_clear(store):
    first = store.create({"title": "A"})
    store.create({"title": "B"})

    store.delete(first.id)
    with pytest.raises(NotFoundError):
        store.get(first.id)
    with pytest.raises(NotFoundError):
        store.delete(first.id)

    store.clear()
    assert store.list_all() == []
    store.clear()


def test_list_all_returns_copies(store):
    created = store.create({"title": "A", "tags": ["x"]})

    snapshot = store.list_all()
    snapshot[0].tags.append("mutated")
    snapshot[0].title = "changed"

    assert store.get(created.id).tags == ["x"]
    assert store.get(created.id).title == "A"


def test_seed_sample_tasks(store):
    now = datetime(2025, 3, 1, tzinfo=timezone.utc)
    seeded = seed_sample_tasks(store, now=now)

    assert len(seeded) == 3
    assert {t.status for t in seeded} == set(TaskStatus)
    assert store.count() == 3


def test_concurrent_writes_and_reads_stay_consistent():
    store = TaskStore()
    writers, per_writer = 4, 25
    stop = threading.Event()
    problems = []
    deleted = []

    def write(worker: int) -> None:
        for n in range(per_writer):
            task = store.create({"title": f"w{worker}-{n}", "description": f"about w{worker}-{n}"})
            store.update(
                task.id,
                {"title": f"w{worker}-{n} v2", "description": f"about w{worker}-{n} v2"},
            )
            if n % 3 == 0:
                store.delete(task.id)
                deleted.append(task.id)

    def read() -> None:
        while not stop.is_set():
            snapshot = store.list_all()
            ids = [task.id for task in snapshot]
            if len(ids) != len(set(ids)):
                problems.append("duplicate ids in snapshot")
            for task in snapshot:
                if task.description != f"about {task.title}":
                    problems.append(f"torn write: {task.title!r} / {task.description!r}")
                if task.updated_at < task.created_at:
                    problems.append(f"updated_at before created_at: {task.id}")

    readers = [threading.Thread(target=read) for _ in range(3)]
    workers = [threading.Thread(target=write, args=(i,)) for i in range(writers)]
    for thread in readers + workers:
        thread.start()
    for thread in workers:
        thread.join()
    stop.set()
    for thread in readers:
        thread.join()

    assert problems == []
    assert store.count() == writers * per_writer - len(deleted)
    assert all(task.title.endswith(" v2") for task in store.list_all())

    # clear と読み取りが並行しても、スナップショットは全件か空のどちらか
    remaining = store.count()
    sizes = []
    reader = threading.Thread(target=lambda: sizes.extend(len(store.list_all()) for _ in range(200)))
    reader.start()
    store.clear()
    reader.join()
    assert set(sizes) <= {0, remaining}
    assert store.count() == 0
