"""
Settings Store

Pagination and search state for the list views (history, tasks, users,
entries-index). State is a plain tree addressed by dot paths such as
"users.pageSize" or "history.taskKeys.0"; each view also has a typed model
for validated updates.
"""
import copy
import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Type
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

logger = logging.getLogger("taskwatch.store")

PAGE_SIZE_OPTIONS = [10, 25, 50]

_MISSING = object()

Listener = Callable[[str, Any, Dict[str, Any]], None]


class ViewState(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=10, ge=1)


class HistoryView(ViewState):
    task_keys: List[str] = Field(default_factory=list)
    task_search: str = ""
    search: str = ""


class TasksView(ViewState):
    page_size: int = Field(default=25, ge=1)
    search: str = ""


class UsersView(ViewState):
    search: str = ""
    user_role: Optional[str] = None


class EntriesIndexView(ViewState):
    entry_types: List[str] = Field(default_factory=lambda: ["warning", "error"])


VIEWS: Dict[str, Type[ViewState]] = {
    "history": HistoryView,
    "tasks": TasksView,
    "users": UsersView,
    "entries-index": EntriesIndexView,
}


def default_state() -> Dict[str, Any]:
    state: Dict[str, Any] = {name: model().model_dump(by_alias=True) for name, model in VIEWS.items()}
    state["pageSizeOptions"] = list(PAGE_SIZE_OPTIONS)
    return state


def _step(node: Any, key: str) -> Any:
    if isinstance(node, Mapping):
        return node.get(key, _MISSING)
    if isinstance(node, list) and key.isdigit():
        index = int(key)
        return node[index] if index < len(node) else _MISSING
    return _MISSING


def get_path(tree: Any, field_path: str, default: Any = None) -> Any:
    """Get nested value using dot notation."""
    node = tree
    for key in field_path.split("."):
        node = _step(node, key)
        if node is _MISSING:
            return default
    return node


def set_path(tree: Dict[str, Any], field_path: str, value: Any) -> None:
    """Set nested value using dot notation, creating missing containers."""
    keys = field_path.split(".")
    node: Any = tree
    for key, next_key in zip(keys, keys[1:]):
        child = _step(node, key)
        if not isinstance(child, (dict, list)):
            child = [] if next_key.isdigit() else {}
            _assign(node, key, child)
        node = child
    _assign(node, keys[-1], value)


def _assign(node: Any, key: str, value: Any) -> None:
    if isinstance(node, list):
        if not key.isdigit():
            raise KeyError(f"Cannot use '{key}' as a list index")
        index = int(key)
        node.extend([None] * (index + 1 - len(node)))
        node[index] = value
    else:
        node[key] = value


class SettingsStore:
    """
    In-memory view state with dot-path accessors.

    Every mutation is one state transition: listeners registered with
    `subscribe` are called once per transition with the mutation name, its
    payload and the new state.
    """

    def __init__(self, state: Optional[Dict[str, Any]] = None):
        self._state = state if state is not None else default_state()
        self._listeners: List[Listener] = []

    @property
    def state(self) -> Dict[str, Any]:
        return self._state

    def get(self, field_path: str, default: Any = None) -> Any:
        return get_path(self._state, field_path, default)

    def set(self, field_path: str, value: Any) -> None:
        set_path(self._state, field_path, value)
        self._commit("set", {field_path: value})

    def set_many(self, values: Mapping[str, Any]) -> None:
        """Apply several path writes as a single transition, in mapping order."""
        staged = copy.deepcopy(self._state)
        for field_path, value in values.items():
            set_path(staged, field_path, value)
        self._state = staged
        self._commit("set_many", dict(values))

    def view(self, name: str) -> ViewState:
        """Validated model for one view."""
        return VIEWS[name].model_validate(self._state[name])

    def update_view(self, name: str, **fields: Any) -> ViewState:
        """
        Validated update of named fields (snake_case or camelCase) of a view.

        Raises KeyError for unknown views and pydantic's ValidationError for
        bad values; state is unchanged when either is raised.
        """
        model = VIEWS[name]
        known = set(model.model_fields) | {info.alias for info in model.model_fields.values() if info.alias}
        unknown = set(fields) - known
        if unknown:
            raise KeyError(f"Unknown fields for view '{name}': {', '.join(sorted(unknown))}")

        current = model.model_validate(self._state[name])
        updated = model.model_validate({**current.model_dump(), **fields})
        self._state[name] = {**self._state[name], **updated.model_dump(by_alias=True)}
        self._commit("update_view", {name: fields})
        return updated

    def reset(self) -> None:
        self._state = default_state()
        self._commit("reset", None)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a callable that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _commit(self, mutation: str, payload: Any) -> None:
        logger.debug(f"[SettingsStore.{mutation}] {payload}")
        for listener in list(self._listeners):
            listener(mutation, payload, self._state)
