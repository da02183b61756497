"""
Base document store abstraction for Content Assistant.

Defines the collection interface the workflow controller persists through.
Collections are addressed by slash-separated paths, e.g.
"artifacts/<app>/users/<user>/article_ideas". Records are plain dicts; the
document id travels in the "id" key of listed records.

Subscriptions deliver full snapshots, never deltas: a listener receives the
complete record list on subscribe and again after every write made through
the store, and replaces its local view with it.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional, Tuple

from content_assistant.errors import PersistenceError

Record = Dict[str, Any]
SnapshotListener = Callable[[List[Record]], None]
ErrorListener = Callable[[PersistenceError], None]


class DocumentStore(ABC):
    """
    Abstract base class for all document store backends.
    
    Implementations must provide list/add/update/delete and call
    `_notify(collection)` after each successful write. All failures are
    raised as PersistenceError.
    """
    
    def __init__(self):
        self._listeners: Dict[str, List[Tuple[SnapshotListener, Optional[ErrorListener]]]] = {}
    
    @property
    @abstractmethod
    def name(self) -> str:
        """
        Return the name of this storage backend.
        
        Used for diagnostics.
        """
        pass
    
    @abstractmethod
    def list(self, collection: str) -> List[Record]:
        """
        Return every record in a collection, oldest first.
        
        Each record is {"id": <document id>, **fields}.
        """
        pass
    
    @abstractmethod
    def add(self, collection: str, record: Record) -> str:
        """
        Add a record and return its new document id.
        """
        pass
    
    @abstractmethod
    def update(self, collection: str, doc_id: str, patch: Record) -> None:
        """
        Merge `patch` into an existing record.
        
        Raises:
            PersistenceError: If the record does not exist or the write fails.
        """
        pass
    
    @abstractmethod
    def delete(self, collection: str, doc_id: str) -> None:
        """
        Remove a record. Used to roll back partially applied batches.
        """
        pass
    
    def subscribe(
        self,
        collection: str,
        on_snapshot: SnapshotListener,
        on_error: Optional[ErrorListener] = None,
    ) -> Callable[[], None]:
        """
        Listen for full snapshots of a collection.
        
        The current snapshot is delivered immediately. If listing fails,
        `on_error` is called; without an error listener the
        PersistenceError propagates.
        
        Returns:
            Callable that removes the listener.
        """
        listener = (on_snapshot, on_error)
        self._listeners.setdefault(collection, []).append(listener)
        self._deliver(collection, listener)
        
        def unsubscribe() -> None:
            listeners = self._listeners.get(collection, [])
            if listener in listeners:
                listeners.remove(listener)
        
        return unsubscribe
    
    def _notify(self, collection: str) -> None:
        """Push a fresh snapshot to every listener of a collection."""
        for listener in list(self._listeners.get(collection, [])):
            self._deliver(collection, listener)
    
    def _deliver(self, collection: str, listener: Tuple[SnapshotListener, Optional[ErrorListener]]) -> None:
        on_snapshot, on_error = listener
        try:
            snapshot = self.list(collection)
        except PersistenceError as e:
            if on_error is None:
                raise
            on_error(e)
            return
        on_snapshot(snapshot)
    
    def __str__(self) -> str:
        return f"DocumentStore({self.name})"
    
    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
