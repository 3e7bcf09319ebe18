from typing import TypeVar, Callable, Optional

from readerwriterlock.rwlock import RWLockWrite

from integrations.google.sheets.contracts.index import Index

ModelType = TypeVar("ModelType")
KeyType = TypeVar("KeyType")

KeyPredicate = Callable[[ModelType], Optional[KeyType]]

# Maps each key to exactly one model; a later model with the same key replaces the earlier one
class UniqueIndex(
    Index[ModelType, KeyType, ModelType]
):
    def __init__(self, key: KeyPredicate, shared_lock: RWLockWrite = None):
        super().__init__(shared_lock)
        self._key = key

    def _insert_inner(self, model: ModelType) -> None:
        key = self._key(model)
        if key is not None:
            self._data[key] = model

    def _delete_inner(self, model: ModelType) -> None:
        key = self._key(model)
        if key is not None:
            self._data.pop(key, None)
