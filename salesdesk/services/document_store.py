"""Keyed document storage used by :class:`salesdesk.services.store.PageStore`."""

import logging
from abc import ABC, abstractmethod
from typing import Dict, Generic, List, Optional, TypeVar

T = TypeVar("T")
logger = logging.getLogger(__name__)


class DocumentStore(Generic[T], ABC):
    """Minimal keyed store interface.

    Implementations only persist; locking and domain rules live in the
    callers.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[T]:
        """Return the document stored under *key*, or None."""

    @abstractmethod
    def put(self, key: str, document: T) -> None:
        """Insert or replace the document stored under *key*."""

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Remove *key*; return False if it was not present."""

    @abstractmethod
    def values(self) -> List[T]:
        """Return every stored document in insertion order."""


class InMemoryDocumentStore(DocumentStore[T]):
    """Process-local store, used for development and tests."""

    def __init__(self) -> None:
        self._store: Dict[str, T] = {}

    def get(self, key: str) -> Optional[T]:
        return self._store.get(key)

    def put(self, key: str, document: T) -> None:
        self._store[key] = document

    def delete(self, key: str) -> bool:
        if key not in self._store:
            logger.warning("Document %s not found", key)
            return False
        del self._store[key]
        return True

    def values(self) -> List[T]:
        return list(self._store.values())
