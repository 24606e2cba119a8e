import json
from datetime import date

import pytest

from models import AppState, Habit, HabitCollection, ViewState
from storage import LocalStorage
from store import (
    DEFAULT_HABIT_NAMES,
    HabitStore,
    decode_import,
    export_document,
    export_filename,
)


def test_load_returns_seed_when_empty(store):
    habits = store.load()
    assert habits.names() == DEFAULT_HABIT_NAMES
    assert all(h.completed_dates == set() for h in habits)


def test_load_returns_seed_on_bad_json(store, storage):
    storage.set_item("habits", "{oops")
    assert store.load().names() == DEFAULT_HABIT_NAMES


def test_load_returns_seed_when_not_a_list(store, storage):
    storage.set_item("habits", json.dumps({"habits": []}))
    assert store.load().names() == DEFAULT_HABIT_NAMES


def test_save_then_load(store):
    habits = HabitCollection([Habit("Read", {"2024-03-05", "2024-03-04"}), Habit("Swim")])
    store.save(habits)

    loaded = store.load()
    assert loaded == habits


def test_save_load_is_stable(store, storage):
    store.save(store.load())
    first = storage.get_item("habits")
    store.save(store.load())
    assert storage.get_item("habits") == first


def test_saved_shape(store, storage):
    store.save(HabitCollection([Habit("Read", {"2024-03-05", "2024-03-01"})]))
    assert json.loads(storage.get_item("habits")) == [
        {"name": "Read", "completedDates": ["2024-03-01", "2024-03-05"]}
    ]


def test_store_uses_configured_key(storage):
    store = HabitStore(storage, key="mine")
    store.save(HabitCollection([Habit("Read")]))
    assert storage.get_item("habits") is None
    assert store.load().names() == ["Read"]


def test_add_habit_appends_and_persists(store):
    habits = store.load()
    assert store.add_habit(habits, "  Meditate ")
    assert habits.names()[-1] == "Meditate"
    assert store.load().names()[-1] == "Meditate"


def test_add_habit_is_case_insensitive_unique(store):
    habits = HabitCollection()
    assert store.add_habit(habits, "Read")
    assert not store.add_habit(habits, "read")
    assert habits.names() == ["Read"]


@pytest.mark.parametrize("name", ["", "   ", None])
def test_add_habit_ignores_blank(store, storage, name):
    habits = HabitCollection()
    assert not store.add_habit(habits, name)
    assert len(habits) == 0
    assert storage.get_item("habits") is None


def test_set_day_completion_is_idempotent(store):
    habits = HabitCollection([Habit("Read")])
    store.set_day_completion(habits, 0, "2024-03-05", True)
    once = set(habits[0].completed_dates)
    store.set_day_completion(habits, 0, "2024-03-05", True)
    assert habits[0].completed_dates == once == {"2024-03-05"}


def test_set_day_completion_toggle_restores(store):
    habits = HabitCollection([Habit("Read", {"2024-03-01"})])
    store.set_day_completion(habits, 0, "2024-03-05", True)
    store.set_day_completion(habits, 0, "2024-03-05", False)
    assert habits[0].completed_dates == {"2024-03-01"}
    assert store.load()[0].completed_dates == {"2024-03-01"}


def test_unchecking_absent_day_is_noop(store):
    habits = HabitCollection([Habit("Read")])
    store.set_day_completion(habits, 0, "2024-03-05", False)
    assert habits[0].completed_dates == set()


def test_set_day_completion_bad_index(store, storage):
    habits = HabitCollection([Habit("Read")])
    with pytest.raises(IndexError):
        store.set_day_completion(habits, 3, "2024-03-05", True)
    assert storage.get_item("habits") is None


def test_import_rejects_missing_habits_list(store, storage):
    habits = store.load()
    store.save(habits)
    before = storage.get_item("habits")

    result = store.import_collection({"not_habits": []})

    assert not result.accepted
    assert result.habits is None
    assert result.reason
    assert storage.get_item("habits") == before
    assert habits.names() == DEFAULT_HABIT_NAMES


@pytest.mark.parametrize("raw", [[], "habits", None, {"habits": {"name": "x"}}])
def test_decode_import_rejects_bad_shapes(raw):
    assert not decode_import(raw).accepted


def test_import_normalizes_entries(store):
    result = store.import_collection({
        "habits": [
            {"name": "Read", "completedDates": ["2024-03-05", "not-a-date"]},
            {"name": "Swim"},
            {"name": "Run", "completedDates": "2024-03-05"},
            {"name": "Bike", "completedDates": ["2024-03-05", 7]},
            {"name": "READ", "completedDates": ["2024-01-01"]},
            {"completedDates": []},
            "junk",
        ]
    })

    assert result.accepted
    habits = result.habits
    assert habits.names() == ["Read", "Swim", "Run", "Bike"]
    assert habits[0].completed_dates == {"2024-03-05", "not-a-date"}
    assert habits[1].completed_dates == set()
    assert habits[2].completed_dates == set()
    assert habits[3].completed_dates == set()
    assert store.load() == habits


def test_import_empty_list_replaces_everything(store):
    store.save(store.load())
    result = store.import_collection({"habits": []})
    assert result.accepted
    assert len(store.load()) == 0


def test_import_json_text(store):
    result = store.import_json(b'{"habits": [{"name": "Read", "completedDates": []}]}')
    assert result.accepted
    assert store.load().names() == ["Read"]


def test_import_json_rejects_garbage(store, storage):
    result = store.import_json("not json at all")
    assert not result.accepted
    assert storage.get_item("habits") is None


def test_export_document_round_trips_through_import(store):
    habits = HabitCollection([Habit("Read", {"2024-03-05"}), Habit("Swim")])
    document = export_document(habits)

    assert document.startswith("{\n  \"habits\"")
    assert json.loads(document) == {
        "habits": [
            {"name": "Read", "completedDates": ["2024-03-05"]},
            {"name": "Swim", "completedDates": []},
        ]
    }
    assert store.import_json(document).habits == habits


def test_export_filename():
    assert export_filename(date(2024, 3, 5)) == "habits-2024-03-05.json"


def test_load_returns_seed_on_invalid_utf8_file(tmp_path):
    path = tmp_path / "storage.json"
    path.write_bytes(b"\xff")
    store = HabitStore(LocalStorage(str(path)))
    assert store.load().names() == DEFAULT_HABIT_NAMES


def test_load_returns_seed_on_deeply_nested_value(store, storage):
    storage.set_item("habits", "[" * 200000)
    assert store.load().names() == DEFAULT_HABIT_NAMES


def test_import_json_rejects_deep_nesting(store, storage):
    result = store.import_json("[" * 200000)
    assert not result.accepted
    assert storage.get_item("habits") is None


def test_import_strips_names_before_dedup(store):
    result = store.import_collection({"habits": [{"name": " Read "}, {"name": "read"}]})
    assert result.habits.names() == ["Read"]


def test_apply_changes_sets_each_day(store):
    habits = HabitCollection([Habit("Read", {"2024-03-01"}), Habit("Swim")])
    applied = store.apply_changes(habits, [(0, "2024-03-01", False), (1, "2024-03-02", True)])

    assert applied == 2
    assert habits[0].completed_dates == set()
    assert store.load()[1].completed_dates == {"2024-03-02"}


def test_apply_changes_without_edits_writes_nothing(store, storage):
    assert store.apply_changes(HabitCollection([Habit("Read")]), []) == 0
    assert storage.get_item("habits") is None


def test_import_into_replaces_state_habits(store):
    state = AppState(habits=store.load(), view=ViewState(2024, 3), today=date(2024, 3, 5))
    result = store.import_into(state, '{"habits": [{"name": "Swim", "completedDates": ["2024-03-05"]}]}')

    assert result.accepted
    assert state.habits.names() == ["Swim"]
    assert state.habits[0].completed_dates == {"2024-03-05"}


def test_rejected_import_into_leaves_state(store):
    habits = store.load()
    state = AppState(habits=habits, view=ViewState(2024, 3), today=date(2024, 3, 5))
    result = store.import_into(state, '{"not_habits": []}')

    assert not result.accepted
    assert state.habits is habits
    assert state.habits.names() == DEFAULT_HABIT_NAMES
