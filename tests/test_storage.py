"""
Tests for document store abstraction and implementations.

Tests the DocumentStore snapshot contract, the in-memory store, Airtable
serialization and request handling (requests.request is mocked).
"""

import pytest
from unittest.mock import Mock, patch, call
import requests

from content_assistant.errors import PersistenceError
from content_assistant.storage import AirtableDocumentStore, DocumentStore, MockDocumentStore

from tests.test_config import EXPECTED

IDEAS = EXPECTED["collections"]["ideas"]
ARTICLES = EXPECTED["collections"]["articles"]


# =============================================================================
# Test Fixtures
# =============================================================================

@pytest.fixture
def airtable():
    store = AirtableDocumentStore(api_key="key", base_id="appBASE")
    store.REQUEST_DELAY = 0
    return store


def airtable_response(body, status_code=200):
    response = Mock()
    response.status_code = status_code
    response.json.return_value = body
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status_code} Client Error")
    return response


# =============================================================================
# MockDocumentStore
# =============================================================================

class TestMockDocumentStore:
    
    def test_add_returns_id_and_lists_record(self, mock_store):
        doc_id = mock_store.add(IDEAS, {"title": "T", "status": "pending"})
        
        assert mock_store.list(IDEAS) == [{"id": doc_id, "title": "T", "status": "pending"}]
        assert mock_store.count(IDEAS) == 1
        assert mock_store.count(ARTICLES) == 0
    
    def test_update_merges_patch(self, mock_store):
        doc_id = mock_store.add(IDEAS, {"title": "T", "status": "pending"})
        
        mock_store.update(IDEAS, doc_id, {"status": "approved"})
        
        assert mock_store.get(IDEAS, doc_id) == {"id": doc_id, "title": "T", "status": "approved"}
    
    def test_update_missing_document_raises(self, mock_store):
        with pytest.raises(PersistenceError):
            mock_store.update(IDEAS, "nope", {"status": "approved"})
    
    def test_delete_removes_record(self, mock_store):
        doc_id = mock_store.add(IDEAS, {"title": "T"})
        
        mock_store.delete(IDEAS, doc_id)
        
        assert mock_store.list(IDEAS) == []
        with pytest.raises(PersistenceError):
            mock_store.delete(IDEAS, doc_id)
    
    def test_records_are_listed_oldest_first(self, mock_store):
        for title in ["a", "b", "c"]:
            mock_store.add(IDEAS, {"title": title})
        
        assert [r["title"] for r in mock_store.list(IDEAS)] == ["a", "b", "c"]
    
    def test_clear(self, mock_store):
        mock_store.add(IDEAS, {"title": "T"})
        mock_store.clear()
        
        assert mock_store.list(IDEAS) == []


# =============================================================================
# Snapshot subscriptions
# =============================================================================

class TestSubscriptions:
    
    def test_subscribe_delivers_current_snapshot(self, mock_store):
        mock_store.add(IDEAS, {"title": "existing"})
        snapshots = []
        
        mock_store.subscribe(IDEAS, snapshots.append)
        
        assert len(snapshots) == 1
        assert snapshots[0][0]["title"] == "existing"
    
    def test_every_write_delivers_full_snapshot(self, mock_store):
        snapshots = []
        mock_store.subscribe(IDEAS, snapshots.append)
        
        doc_id = mock_store.add(IDEAS, {"title": "a"})
        mock_store.add(IDEAS, {"title": "b"})
        mock_store.update(IDEAS, doc_id, {"title": "a2"})
        
        assert [len(s) for s in snapshots] == [0, 1, 2, 2]
        assert [r["title"] for r in snapshots[-1]] == ["a2", "b"]
    
    def test_other_collections_are_not_notified(self, mock_store):
        snapshots = []
        mock_store.subscribe(IDEAS, snapshots.append)
        
        mock_store.add(ARTICLES, {"title": "x"})
        
        assert len(snapshots) == 1
    
    def test_unsubscribe_stops_delivery(self, mock_store):
        snapshots = []
        unsubscribe = mock_store.subscribe(IDEAS, snapshots.append)
        
        unsubscribe()
        mock_store.add(IDEAS, {"title": "a"})
        
        assert len(snapshots) == 1
    
    def test_listing_error_goes_to_error_listener(self, mock_store):
        errors = []
        with patch.object(mock_store, "list", side_effect=PersistenceError("down")):
            mock_store.subscribe(IDEAS, Mock(), errors.append)
        
        assert len(errors) == 1
        assert isinstance(errors[0], PersistenceError)
    
    def test_listing_error_without_listener_propagates(self, mock_store):
        with patch.object(mock_store, "list", side_effect=PersistenceError("down")):
            with pytest.raises(PersistenceError):
                mock_store.subscribe(IDEAS, Mock())


# =============================================================================
# AirtableDocumentStore
# =============================================================================

class TestAirtableSerialization:
    
    def test_table_is_resolved_from_collection_leaf(self, airtable):
        assert airtable.table_for(IDEAS) == "article_ideas"
        assert airtable.table_for(ARTICLES) == "articles"
    
    def test_table_overrides(self):
        store = AirtableDocumentStore(api_key="k", base_id="b", tables={"articles": "Published"})
        
        assert store.table_for(ARTICLES) == "Published"
    
    def test_record_to_fields_adds_collection_and_drops_none(self):
        fields = AirtableDocumentStore.record_to_fields(IDEAS, {"id": "x", "title": "T", "ideaId": None})
        
        assert fields == {"title": "T", "collection": IDEAS}
    
    def test_airtable_record_to_record(self):
        record = AirtableDocumentStore.airtable_record_to_record(
            {"id": "rec1", "fields": {"title": "T", "collection": IDEAS}}
        )
        
        assert record == {"id": "rec1", "title": "T"}


class TestAirtableRequests:
    
    @patch("content_assistant.storage.airtable.requests.request")
    def test_list_filters_by_collection_and_paginates(self, mock_request, airtable):
        mock_request.side_effect = [
            airtable_response({
                "records": [{"id": "rec2", "fields": {"title": "b", "createdAt": "2025-01-02"}}],
                "offset": "page2",
            }),
            airtable_response({
                "records": [{"id": "rec1", "fields": {"title": "a", "createdAt": "2025-01-01"}}],
            }),
        ]
        
        records = airtable.list(IDEAS)
        
        assert [r["id"] for r in records] == ["rec1", "rec2"]
        first, second = mock_request.call_args_list
        assert first.args == ("GET", "https://api.airtable.com/v0/appBASE/article_ideas")
        assert first.kwargs["params"]["filterByFormula"] == "{collection}='" + IDEAS + "'"
        assert second.kwargs["params"]["offset"] == "page2"
    
    @patch("content_assistant.storage.airtable.requests.request")
    def test_add_posts_fields_and_notifies(self, mock_request, airtable):
        mock_request.side_effect = [
            airtable_response({"id": "recNEW"}),
            airtable_response({"records": [{"id": "recNEW", "fields": {"title": "T"}}]}),
        ]
        snapshots = []
        airtable._listeners[IDEAS] = [(snapshots.append, None)]
        
        doc_id = airtable.add(IDEAS, {"title": "T"})
        
        assert doc_id == "recNEW"
        post = mock_request.call_args_list[0]
        assert post.args[0] == "POST"
        assert post.kwargs["json"] == {"fields": {"title": "T", "collection": IDEAS}}
        assert snapshots == [[{"id": "recNEW", "title": "T"}]]
    
    @patch("content_assistant.storage.airtable.requests.request")
    def test_update_patches_record(self, mock_request, airtable):
        mock_request.return_value = airtable_response({"id": "rec1"})
        
        airtable.update(IDEAS, "rec1", {"status": "approved"})
        
        method, url = mock_request.call_args.args
        assert method == "PATCH"
        assert url.endswith("/article_ideas/rec1")
        assert mock_request.call_args.kwargs["json"] == {"fields": {"status": "approved"}}
    
    @patch("content_assistant.storage.airtable.requests.request")
    def test_http_error_becomes_persistence_error(self, mock_request, airtable):
        mock_request.return_value = airtable_response({}, status_code=422)
        
        with pytest.raises(PersistenceError, match="422"):
            airtable.add(IDEAS, {"title": "T"})
    
    @patch("content_assistant.storage.airtable.requests.request")
    def test_network_error_becomes_persistence_error(self, mock_request, airtable):
        mock_request.side_effect = requests.ConnectionError("offline")
        
        with pytest.raises(PersistenceError):
            airtable.list(IDEAS)
    
    @patch("content_assistant.storage.airtable.requests.request")
    def test_missing_credentials_fail_before_request(self, mock_request):
        store = AirtableDocumentStore(api_key="", base_id="")
        
        with pytest.raises(PersistenceError, match="AIRTABLE_API_KEY"):
            store.list(IDEAS)
        mock_request.assert_not_called()
    
    def test_implements_interface(self, airtable):
        assert isinstance(airtable, DocumentStore)
        assert airtable.name == "airtable"
