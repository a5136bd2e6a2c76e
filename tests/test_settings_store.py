"""
Tests for the view settings store
"""
import pytest
from pydantic import ValidationError
from taskwatch.store.settings import SettingsStore, UsersView, default_state


def test_default_state():
    state = default_state()

    assert state["history"] == {"page": 1, "pageSize": 10, "taskKeys": [], "taskSearch": "", "search": ""}
    assert state["tasks"] == {"page": 1, "pageSize": 25, "search": ""}
    assert state["users"] == {"page": 1, "pageSize": 10, "search": "", "userRole": None}
    assert state["entries-index"] == {"page": 1, "pageSize": 10, "entryTypes": ["warning", "error"]}
    assert state["pageSizeOptions"] == [10, 25, 50]


def test_stores_do_not_share_defaults():
    first = SettingsStore()
    second = SettingsStore()

    first.get("history.taskKeys").append("t1")

    assert second.get("history.taskKeys") == []


def test_get_paths():
    store = SettingsStore()

    assert store.get("users.pageSize") == 10
    assert store.get("entries-index.entryTypes.1") == "error"
    assert store.get("pageSizeOptions") == [10, 25, 50]


def test_get_missing_path_is_silent():
    store = SettingsStore()

    assert store.get("users.nothing") is None
    assert store.get("nowhere.at.all") is None
    assert store.get("users.page.deeper") is None
    assert store.get("entries-index.entryTypes.9") is None
    assert store.get("users.nothing", default="fallback") == "fallback"


def test_set_existing_path():
    store = SettingsStore()

    store.set("users.search", "lee")
    store.set("history.taskKeys.0", "task-1")

    assert store.get("users.search") == "lee"
    assert store.get("history.taskKeys") == ["task-1"]


def test_set_creates_intermediate_containers():
    store = SettingsStore()

    store.set("reports.filters.status", "open")
    store.set("reports.columns.1", "name")

    assert store.get("reports") == {"filters": {"status": "open"}, "columns": [None, "name"]}


def test_set_many_is_one_transition():
    store = SettingsStore()
    seen = []
    store.subscribe(lambda mutation, payload, state: seen.append((mutation, payload, state["users"]["page"])))

    store.set_many({"users.page": 3, "users.search": "ann", "users.userRole": "adm"})

    assert seen == [("set_many", {"users.page": 3, "users.search": "ann", "users.userRole": "adm"}, 3)]
    assert store.view("users") == UsersView(page=3, search="ann", user_role="adm")


def test_set_many_applies_in_order():
    store = SettingsStore()

    store.set_many({"tasks": {"page": 2}, "tasks.search": "second"})

    assert store.get("tasks") == {"page": 2, "search": "second"}


def test_update_view_accepts_both_name_styles():
    store = SettingsStore()

    updated = store.update_view("history", page=2, taskSearch="build")

    assert updated.page == 2
    assert updated.task_search == "build"
    assert store.get("history.page") == 2
    assert store.get("history.taskSearch") == "build"


def test_update_view_validates_before_writing():
    store = SettingsStore()

    with pytest.raises(ValidationError):
        store.update_view("users", page=0)
    with pytest.raises(KeyError):
        store.update_view("users", pageNumber=2)
    with pytest.raises(KeyError):
        store.update_view("settings", page=2)

    assert store.get("users.page") == 1


def test_update_view_keeps_extra_keys():
    store = SettingsStore()
    store.set("users.sortBy", "lastName")

    store.update_view("users", search="lee")

    assert store.get("users.sortBy") == "lastName"
    assert store.get("users.search") == "lee"


def test_unsubscribe_and_reset():
    store = SettingsStore()
    seen = []
    unsubscribe = store.subscribe(lambda mutation, payload, state: seen.append(mutation))

    store.set("tasks.page", 4)
    unsubscribe()
    store.set("tasks.page", 5)
    store.reset()

    assert seen == ["set"]
    assert store.get("tasks.page") == 1
