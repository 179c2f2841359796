import pytest

from studyflow.core.settings import Phase, TimerSettings
from studyflow.core.timer import EngineSnapshot, EngineState
from studyflow.data.storage import ENGINE_STATE_KEY, Storage


@pytest.fixture
def storage(tmp_path) -> Storage:
    storage = Storage(tmp_path / "app.db")
    storage.init_db()
    return storage


def test_init_db_creates_file(tmp_path) -> None:
    db = tmp_path / "nested" / "app.db"
    storage = Storage(db)
    storage.init_db()
    storage.init_db()
    assert db.exists()


def test_set_get_setting(storage) -> None:
    storage.set_setting("volume", 0)
    assert storage.get_setting("volume") == 0
    assert storage.get_setting("missing", "x") == "x"


def test_snapshot_round_trip(storage) -> None:
    snapshot = EngineSnapshot(
        state=EngineState(Phase.SHORT_BREAK, 187, True, 7, 42),
        settings=TimerSettings(50, 10, 30, 3, True, False, False),
    )
    storage.save_snapshot(snapshot)

    assert storage.load_snapshot() == snapshot
    assert Storage(storage.db_path).load_snapshot() == snapshot


def test_snapshot_without_focus_round_trips(storage) -> None:
    snapshot = EngineSnapshot(EngineState.initial(TimerSettings()), TimerSettings())
    storage.save_snapshot(snapshot)
    assert storage.load_snapshot() == snapshot


def test_missing_snapshot_is_none(storage) -> None:
    assert storage.load_snapshot() is None


def test_malformed_snapshot_is_ignored(storage) -> None:
    storage.save_snapshot(EngineSnapshot(EngineState.initial(TimerSettings()), TimerSettings()))
    storage.set_setting(ENGINE_STATE_KEY, {"phase": "nap", "remainingSeconds": 10})
    assert storage.load_snapshot() is None


def test_invalid_stored_settings_are_ignored(storage) -> None:
    storage.save_snapshot(EngineSnapshot(EngineState.initial(TimerSettings()), TimerSettings()))
    storage.set_setting("timer_settings", {"workDuration": 0})
    assert storage.load_snapshot() is None


def test_settings_beyond_editor_bounds_still_restore(storage) -> None:
    snapshot = EngineSnapshot(
        state=EngineState(Phase.WORK, 600, False, 5, 9),
        settings=TimerSettings(work_minutes=180, sessions_until_long_break=12),
    )
    storage.save_snapshot(snapshot)

    assert storage.load_snapshot() == snapshot


def test_create_and_list_tasks(storage) -> None:
    first = storage.create_task("  Read chapter 8 ", pomodoros=2, priority="high", category="History")
    second = storage.create_task("Flashcards")

    rows = storage.list_tasks()
    assert [row.id for row in rows] == [first, second]
    assert rows[0].title == "Read chapter 8"
    assert rows[0].pomodoros == 2
    assert rows[0].completed_pomodoros == 0
    assert rows[0].priority == "high"
    assert rows[1].priority == "medium"


@pytest.mark.parametrize(
    "kwargs",
    [{"title": "   "}, {"title": "x", "priority": "urgent"}, {"title": "x", "pomodoros": 0}],
)
def test_create_task_rejects_bad_input(storage, kwargs) -> None:
    with pytest.raises(ValueError):
        storage.create_task(**kwargs)


def test_toggle_done_and_delete(storage) -> None:
    task_id = storage.create_task("Write essay outline")

    storage.set_task_done(task_id, True)
    assert storage.list_tasks(include_done=False) == []
    assert storage.get_task(task_id).is_done is True

    storage.delete_task(task_id)
    assert storage.list_tasks() == []
    assert storage.get_task(task_id) is None


def test_increment_completed_pomodoro(storage) -> None:
    task_id = storage.create_task("Math assignment", pomodoros=4)
    assert storage.increment_completed_pomodoro(task_id) is True
    assert storage.increment_completed_pomodoro(task_id) is True
    assert storage.get_task(task_id).completed_pomodoros == 2


def test_increment_unknown_task_is_noop(storage) -> None:
    assert storage.increment_completed_pomodoro(999) is False
