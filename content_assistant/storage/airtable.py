"""
Airtable document store for Content Assistant.

Implements the DocumentStore interface on top of the Airtable REST API.

Airtable API Documentation: https://airtable.com/developers/web/api/introduction

=============================================================================
AIRTABLE SCHEMA
=============================================================================

Each collection maps to the table named after the last path segment
("article_ideas", "articles"; overridable). Every table needs a
`collection` column holding the full collection path, so several apps or
users can share one table.

article_ideas:

| Column Name | Field Type       | Description                         |
|-------------|------------------|-------------------------------------|
| collection  | Single line text | Full collection path                |
| title       | Single line text | Idea title                          |
| flair       | Single line text | Flair label                         |
| status      | Single line text | pending / approved / rejected       |
| createdAt   | Single line text | ISO timestamp                       |

articles: collection, title, flair, content (Long text), ideaId, authorId,
status, createdAt, publishedAt.

=============================================================================
"""

import time
import uuid
from typing import Any, Dict, List, Optional
import requests

from content_assistant.config import (
    AIRTABLE_API_KEY,
    AIRTABLE_ARTICLES_TABLE,
    AIRTABLE_BASE_ID,
    AIRTABLE_IDEAS_TABLE,
    REQUEST_TIMEOUT,
)
from content_assistant.errors import PersistenceError
from content_assistant.storage.base import DocumentStore, Record


class AirtableDocumentStore(DocumentStore):
    """
    Airtable-backed document store.
    
    Configuration is pulled from environment variables via content_assistant.config:
    - AIRTABLE_API_KEY: API key for authentication
    - AIRTABLE_BASE_ID: Base ID (starts with "app")
    - AIRTABLE_IDEAS_TABLE / AIRTABLE_ARTICLES_TABLE: table names
    """
    
    # Airtable API base URL
    API_BASE = "https://api.airtable.com/v0"
    
    # Rate limiting: Airtable allows 5 requests per second
    REQUEST_DELAY = 0.25  # 250ms between requests to stay under limit
    
    # Airtable's maximum page size
    PAGE_SIZE = 100
    
    COLLECTION_FIELD = "collection"
    
    def __init__(
        self,
        api_key: str = None,
        base_id: str = None,
        tables: Optional[Dict[str, str]] = None,
    ):
        """
        Initialize AirtableDocumentStore.
        
        Args:
            api_key: Airtable API key. Defaults to config.AIRTABLE_API_KEY.
            base_id: Airtable base ID. Defaults to config.AIRTABLE_BASE_ID.
            tables: Collection leaf name -> table name overrides.
        """
        super().__init__()
        # Use provided values, or fall back to config if None (not empty string)
        self.api_key = api_key if api_key is not None else AIRTABLE_API_KEY
        self.base_id = base_id if base_id is not None else AIRTABLE_BASE_ID
        self.tables = {
            "article_ideas": AIRTABLE_IDEAS_TABLE,
            "articles": AIRTABLE_ARTICLES_TABLE,
        }
        if tables:
            self.tables.update(tables)
        
        self._last_request_time = 0.0
    
    @property
    def name(self) -> str:
        return "airtable"
    
    @property
    def _headers(self) -> Dict[str, str]:
        """Construct headers for API requests."""
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
    
    def table_for(self, collection: str) -> str:
        """Resolve the table backing a collection path."""
        leaf = collection.rstrip("/").split("/")[-1]
        return self.tables.get(leaf, leaf)
    
    def _table_url(self, collection: str) -> str:
        return f"{self.API_BASE}/{self.base_id}/{self.table_for(collection)}"
    
    def _rate_limit(self) -> None:
        """Enforce rate limiting between requests."""
        now = time.time()
        elapsed = now - self._last_request_time
        if elapsed < self.REQUEST_DELAY:
            time.sleep(self.REQUEST_DELAY - elapsed)
        self._last_request_time = time.time()
    
    def _validate_config(self) -> None:
        """Validate that required configuration is present."""
        if not self.api_key:
            raise PersistenceError("AIRTABLE_API_KEY is not configured")
        if not self.base_id:
            raise PersistenceError("AIRTABLE_BASE_ID is not configured")
    
    def _request(self, method: str, url: str, **kwargs) -> Dict[str, Any]:
        """Send one rate-limited request and return the decoded body."""
        self._validate_config()
        self._rate_limit()
        
        try:
            response = requests.request(
                method,
                url,
                headers=self._headers,
                timeout=REQUEST_TIMEOUT,
                **kwargs,
            )
            response.raise_for_status()
            return response.json()
        except requests.RequestException as e:
            print(f"[{self.name}] {method} {url} failed: {e}")
            raise PersistenceError(str(e)) from e
        except ValueError as e:
            raise PersistenceError(f"Invalid response from Airtable: {e}") from e
    
    # =========================================================================
    # Serialization: records <-> Airtable
    # =========================================================================
    
    @classmethod
    def record_to_fields(cls, collection: str, record: Record) -> Dict[str, Any]:
        """Airtable fields for a record; None values are omitted."""
        fields = {k: v for k, v in record.items() if k != "id" and v is not None}
        fields[cls.COLLECTION_FIELD] = collection
        return fields
    
    @classmethod
    def airtable_record_to_record(cls, airtable_record: Dict[str, Any]) -> Record:
        fields = dict(airtable_record.get("fields", {}))
        fields.pop(cls.COLLECTION_FIELD, None)
        fields["id"] = airtable_record["id"]
        return fields
    
    @staticmethod
    def _quote(value: str) -> str:
        return "'" + value.replace("\\", "\\\\").replace("'", "\\'") + "'"
    
    # =========================================================================
    # DocumentStore Interface Implementation
    # =========================================================================
    
    def list(self, collection: str) -> List[Record]:
        url = self._table_url(collection)
        params: Dict[str, Any] = {
            "filterByFormula": f"{{{self.COLLECTION_FIELD}}}={self._quote(collection)}",
            "pageSize": self.PAGE_SIZE,
        }
        
        records: List[Record] = []
        while True:
            data = self._request("GET", url, params=params)
            for airtable_record in data.get("records", []):
                records.append(self.airtable_record_to_record(airtable_record))
            
            offset = data.get("offset")
            if not offset:
                break
            params = dict(params, offset=offset)
        
        records.sort(key=lambda r: str(r.get("createdAt", "")))
        return records
    
    def add(self, collection: str, record: Record) -> str:
        data = self._request(
            "POST",
            self._table_url(collection),
            json={"fields": self.record_to_fields(collection, record)},
        )
        doc_id = data.get("id")
        if not doc_id:
            raise PersistenceError("Airtable did not return a record id")
        
        self._notify(collection)
        return doc_id
    
    def update(self, collection: str, doc_id: str, patch: Record) -> None:
        fields = {k: v for k, v in patch.items() if k != "id"}
        self._request(
            "PATCH",
            f"{self._table_url(collection)}/{doc_id}",
            json={"fields": fields},
        )
        self._notify(collection)
    
    def delete(self, collection: str, doc_id: str) -> None:
        self._request("DELETE", f"{self._table_url(collection)}/{doc_id}")
        self._notify(collection)


class MockDocumentStore(DocumentStore):
    """
    In-memory document store for testing and development.
    
    Data is stored in memory and lost when the process ends.
    """
    
    def __init__(self):
        super().__init__()
        self._collections: Dict[str, Dict[str, Record]] = {}
    
    @property
    def name(self) -> str:
        return "mock"
    
    def list(self, collection: str) -> List[Record]:
        docs = self._collections.get(collection, {})
        return [dict(fields, id=doc_id) for doc_id, fields in docs.items()]
    
    def add(self, collection: str, record: Record) -> str:
        doc_id = uuid.uuid4().hex[:20]
        fields = {k: v for k, v in record.items() if k != "id"}
        self._collections.setdefault(collection, {})[doc_id] = fields
        self._notify(collection)
        return doc_id
    
    def update(self, collection: str, doc_id: str, patch: Record) -> None:
        docs = self._collections.get(collection, {})
        if doc_id not in docs:
            raise PersistenceError(f"No document {doc_id!r} in {collection}")
        docs[doc_id].update({k: v for k, v in patch.items() if k != "id"})
        self._notify(collection)
    
    def delete(self, collection: str, doc_id: str) -> None:
        docs = self._collections.get(collection, {})
        if doc_id not in docs:
            raise PersistenceError(f"No document {doc_id!r} in {collection}")
        del docs[doc_id]
        self._notify(collection)
    
    def get(self, collection: str, doc_id: str) -> Optional[Record]:
        """Get a single record by id."""
        fields = self._collections.get(collection, {}).get(doc_id)
        return dict(fields, id=doc_id) if fields is not None else None
    
    def clear(self) -> None:
        """Clear all collections (for testing)."""
        self._collections.clear()
    
    def count(self, collection: str) -> int:
        """Return number of records in a collection (for testing)."""
        return len(self._collections.get(collection, {}))
