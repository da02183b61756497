"""
Single-flight gate for workflow operations.

The gate is either idle or running exactly one operation kind. Acquisition
is a check-and-set under a lock, and release happens on every exit path
because `hold` is a context manager.
"""

from contextlib import contextmanager
from enum import Enum
from typing import Iterator, Optional
import threading


class OperationKind(str, Enum):
    FETCH_TRENDS = "fetch_trends"
    GENERATE_IDEAS = "generate_ideas"
    APPROVE_IDEA = "approve_idea"
    REJECT_IDEA = "reject_idea"
    DISCARD_DRAFT = "discard_draft"
    PUBLISH_DRAFT = "publish_draft"
    PUBLISH_EXTERNAL = "publish_external"


class OperationInProgress(Exception):
    """Raised when an operation is requested while another one is running."""
    
    def __init__(self, requested: OperationKind, running: OperationKind):
        self.requested = requested
        self.running = running
        if requested == running:
            message = f"{requested.value} is already in progress"
        else:
            message = f"Cannot start {requested.value} while {running.value} is in progress"
        super().__init__(message)


class OperationGate:
    """Idle | Running(kind), shared by all mutating workflow operations."""
    
    def __init__(self):
        self._lock = threading.Lock()
        self._running: Optional[OperationKind] = None
    
    @property
    def running(self) -> Optional[OperationKind]:
        """The operation currently in flight, or None when idle."""
        return self._running
    
    @property
    def busy(self) -> bool:
        return self._running is not None
    
    @contextmanager
    def hold(self, kind: OperationKind) -> Iterator[OperationKind]:
        """
        Run the enclosed block as operation `kind`.
        
        Raises:
            OperationInProgress: If any operation is already running.
        """
        with self._lock:
            if self._running is not None:
                raise OperationInProgress(kind, self._running)
            self._running = kind
        try:
            yield kind
        finally:
            with self._lock:
                self._running = None
