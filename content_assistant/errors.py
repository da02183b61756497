"""
Error types shared by the collaborators and the workflow controller.

Collaborators raise these; the controller turns them into user-visible
messages and never lets them escape an operation.
"""


class AssistantError(Exception):
    """Base class for expected, non-fatal failures."""


class UpstreamServiceError(AssistantError):
    """Generative API, relay or trend fetch failed, or returned a malformed response."""


class PersistenceError(AssistantError):
    """The document store rejected a read or write."""
