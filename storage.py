"""Load and save app data through a key-value storage backend.

Two interchangeable backends hold JSON-compatible documents under string
keys: a TOML file and an embedded SQLite key-value table. Which one is used
is a runtime setting (see ``config.Settings.storage_backend``).
"""

import json
import logging
import os
import tomllib
from abc import ABC, abstractmethod
from pathlib import Path

import tomli_w
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Field, Session, SQLModel, create_engine

from config import STORAGE_BACKENDS, THEME_STORAGE_KEY, TODO_STORAGE_KEY, Settings
from data import TodoList

logger = logging.getLogger(__name__)


class StorageError(Exception):
    pass


class StorageNotFound(StorageError):
    """Nothing stored under the key yet."""


class SerializationError(StorageError):
    pass


class StorageAccessError(StorageError):
    pass


class Storage(ABC):
    @abstractmethod
    def save(self, key: str, value) -> None:
        ...

    @abstractmethod
    def load(self, key: str):
        ...

    def close(self) -> None:
        pass


class TomlStorage(Storage):
    """All keys live as top-level entries of one TOML file."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def _read(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("rb") as f:
                return tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise SerializationError(f"Failed to parse {self.path}: {e}") from e
        except OSError as e:
            raise StorageAccessError(f"Failed to read {self.path}: {e}") from e

    def load(self, key: str):
        document = self._read()
        if key not in document:
            logger.debug(f"No data found for key: {key}")
            raise StorageNotFound(f"No data found for key: {key}")
        return document[key]

    def save(self, key: str, value) -> None:
        try:
            document = self._read()
        except SerializationError as e:
            logger.warning(f"Overwriting unreadable storage file: {e}")
            document = {}
        document[key] = value
        try:
            payload = tomli_w.dumps(document).encode("utf-8")
        except (TypeError, ValueError) as e:
            raise SerializationError(f"Failed to serialize data for key {key}: {e}") from e

        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tmp_path.open("wb") as f:
                f.write(payload)
            os.replace(tmp_path, self.path)
        except OSError as e:
            tmp_path.unlink(missing_ok=True)
            raise StorageAccessError(f"Failed to write {self.path}: {e}") from e
        logger.info(f"Data saved successfully for key: {key}")


class KVEntry(SQLModel, table=True):
    __tablename__ = "kv_store"

    key: str = Field(primary_key=True)
    value: str   # JSON text


class SqliteStorage(Storage):
    """Embedded key-value table; values are stored as JSON text."""

    def __init__(self, path: Path):
        self.path = Path(path)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageAccessError(f"Failed to create {self.path.parent}: {e}") from e
        self._engine = create_engine(f"sqlite:///{self.path}")
        try:
            SQLModel.metadata.create_all(self._engine)
        except SQLAlchemyError as e:
            self._engine.dispose()
            raise StorageAccessError(f"Failed to open database at {self.path}: {e}") from e

    def load(self, key: str):
        try:
            with Session(self._engine) as session:
                entry = session.get(KVEntry, key)
                payload = entry.value if entry is not None else None
        except SQLAlchemyError as e:
            raise StorageAccessError(f"Failed to query data for key {key}: {e}") from e
        if payload is None:
            logger.debug(f"No data found for key: {key}")
            raise StorageNotFound(f"No data found for key: {key}")
        try:
            return json.loads(payload)
        except json.JSONDecodeError as e:
            raise SerializationError(f"Failed to deserialize data for key {key}: {e}") from e

    def save(self, key: str, value) -> None:
        try:
            payload = json.dumps(value)
        except (TypeError, ValueError) as e:
            raise SerializationError(f"Failed to serialize data for key {key}: {e}") from e
        try:
            with Session(self._engine) as session:
                session.merge(KVEntry(key=key, value=payload))
                session.commit()
        except SQLAlchemyError as e:
            raise StorageAccessError(f"Failed to save data for key {key}: {e}") from e
        logger.info(f"Data saved successfully for key: {key}")

    def close(self) -> None:
        self._engine.dispose()


def open_storage(settings: Settings) -> Storage:
    backend = settings.storage_backend
    if backend == "toml":
        return TomlStorage(settings.data_dir / "todos.toml")
    if backend == "sqlite":
        return SqliteStorage(settings.data_dir / "storage.db")
    raise ValueError(f"Unknown storage backend '{backend}'. Available: {list(STORAGE_BACKENDS)}")


# ------------------------------------------------------------------ #
# App data helpers                                                     #
# ------------------------------------------------------------------ #

def load_todo_list(store: Storage, key: str = TODO_STORAGE_KEY) -> TodoList:
    """Restore the saved collection, or an empty one if that fails."""
    try:
        snapshot = store.load(key)
    except StorageNotFound:
        return TodoList()
    except StorageError as e:
        logger.error(f"Failed to load todos: {e}")
        return TodoList()
    try:
        return TodoList.from_dict(snapshot)
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        logger.error(f"Stored todos for key {key} are invalid: {e}")
        return TodoList()


def save_todo_list(store: Storage, todo_list: TodoList, key: str = TODO_STORAGE_KEY) -> bool:
    try:
        store.save(key, todo_list.to_dict())
    except StorageError as e:
        logger.error(f"Failed to save todos: {e}")
        return False
    return True


def load_theme(store: Storage) -> bool | None:
    """Stored dark-mode preference, or None if there is none."""
    try:
        theme = store.load(THEME_STORAGE_KEY)
    except StorageNotFound:
        return None
    except StorageError as e:
        logger.error(f"Failed to load theme: {e}")
        return None
    if theme not in ("dark", "light"):
        logger.warning(f"Ignoring unknown theme value: {theme!r}")
        return None
    return theme == "dark"


def save_theme(store: Storage, dark: bool) -> bool:
    try:
        store.save(THEME_STORAGE_KEY, "dark" if dark else "light")
    except StorageError as e:
        logger.error(f"Failed to save theme: {e}")
        return False
    return True
