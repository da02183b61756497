"""
Storage module.

Persistence of ideas and published articles via Airtable or in memory.
"""

from content_assistant.storage.base import DocumentStore
from content_assistant.storage.airtable import AirtableDocumentStore, MockDocumentStore

__all__ = [
    "DocumentStore",
    "AirtableDocumentStore",
    "MockDocumentStore",
]
