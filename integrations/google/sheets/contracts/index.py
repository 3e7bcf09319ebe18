from contextlib import nullcontext
from typing import TypeVar, Generic, Optional
from abc import ABC, abstractmethod

from readerwriterlock.rwlock import RWLockWrite

ModelType = TypeVar("ModelType")
KeyType = TypeVar("KeyType")
ValueType = TypeVar("ValueType")

StorageType = dict[KeyType, ValueType]

class Index(ABC, Generic[ModelType, KeyType, ValueType]):
    def __init__(self, shared_lock: RWLockWrite = None):
        self._data: StorageType = {}

        # The table data is refreshed by a background job while the handlers read it,
        # so any data operation needs to be protected
        # A shared lock is managed by the owning table, which takes the write lock around every change
        if shared_lock:
            self._read_lock = shared_lock
            self._write_lock = None
        else:
            self._read_lock = self._write_lock = RWLockWrite()

    def get(self, key: KeyType) -> Optional[ValueType]:
        with self._read_lock.gen_rlock():
            return self._data.get(key)

    def get_for_writing(self, key: KeyType) -> Optional[ValueType]:
        with self._writing():
            return self._data.get(key)

    def insert_all(self, models: list[ModelType]) -> None:
        with self._writing():
            for model in models:
                self._insert_inner(model)

    def update_all(self, changes: list[tuple[ModelType, ModelType]]) -> None:
        with self._writing():
            for old, new in changes:
                self._delete_inner(old)
                self._insert_inner(new)

    def reset(self, initial: list[ModelType] = None) -> None:
        with self._writing():
            self._data = {}
            for model in initial or []:
                self._insert_inner(model)

    def _writing(self):
        return self._write_lock.gen_wlock() if self._write_lock else nullcontext()

    @abstractmethod
    def _insert_inner(self, model: ModelType) -> None:
        pass

    @abstractmethod
    def _delete_inner(self, model: ModelType) -> None:
        pass
