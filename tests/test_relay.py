"""
Tests for the publishing relay client.

HTTP is mocked at content_assistant.services.relay.requests.post.
"""

from unittest.mock import Mock, patch

import pytest
import requests

from content_assistant.errors import UpstreamServiceError
from content_assistant.services import PublishingRelay

from tests.test_config import TEST_DATA


@pytest.fixture
def relay():
    return PublishingRelay(base_url="https://relay.test/", timeout=5)


def http_response(body=None, status_code=200, reason="OK"):
    response = Mock()
    response.ok = 200 <= status_code < 300
    response.status_code = status_code
    response.reason = reason
    if isinstance(body, Exception):
        response.json.side_effect = body
    else:
        response.json.return_value = body
    return response


ARTICLE = {"title": "T", "flair": "F", "content": "Body", "subreddit": "testsubreddit"}


class TestPublish:
    
    @patch("content_assistant.services.relay.requests.post")
    def test_posts_article_to_publish_endpoint(self, mock_post, relay):
        mock_post.return_value = http_response({"status": "Posted"})
        
        result = relay.publish(ARTICLE)
        
        assert result == {"status": "Posted"}
        args, kwargs = mock_post.call_args
        assert args[0] == "https://relay.test/publish-reddit"
        assert kwargs["json"] == ARTICLE
        assert kwargs["timeout"] == 5
    
    @patch("content_assistant.services.relay.requests.post")
    def test_non_dict_body_counts_as_success(self, mock_post, relay):
        mock_post.return_value = http_response("ok")
        
        assert relay.publish(ARTICLE) == {"status": "Success"}
    
    @patch("content_assistant.services.relay.requests.post")
    def test_relay_error_message_is_surfaced(self, mock_post, relay):
        mock_post.return_value = http_response(
            {"message": "Flair not allowed"}, status_code=400, reason="Bad Request"
        )
        
        with pytest.raises(UpstreamServiceError, match="Failed to publish to Reddit: Flair not allowed"):
            relay.publish(ARTICLE)
    
    @patch("content_assistant.services.relay.requests.post")
    def test_status_text_used_without_message(self, mock_post, relay):
        mock_post.return_value = http_response(ValueError("no json"), status_code=502, reason="Bad Gateway")
        
        with pytest.raises(UpstreamServiceError, match="Bad Gateway"):
            relay.publish(ARTICLE)
    
    @patch("content_assistant.services.relay.requests.post")
    def test_network_error_raises(self, mock_post, relay):
        mock_post.side_effect = requests.ConnectionError("refused")
        
        with pytest.raises(UpstreamServiceError, match="refused"):
            relay.publish(ARTICLE)


class TestFetchTrends:
    
    @patch("content_assistant.services.relay.requests.post")
    def test_posts_subreddit_and_returns_list(self, mock_post, relay):
        mock_post.return_value = http_response(TEST_DATA["relay_trends"])
        
        result = relay.fetch_trends("testsubreddit")
        
        assert result == TEST_DATA["relay_trends"]
        args, kwargs = mock_post.call_args
        assert args[0] == "https://relay.test/fetch-trends"
        assert kwargs["json"] == {"subreddit": "testsubreddit"}
    
    @patch("content_assistant.services.relay.requests.post")
    def test_non_list_body_raises(self, mock_post, relay):
        mock_post.return_value = http_response({"posts": []})
        
        with pytest.raises(UpstreamServiceError, match="unexpected response"):
            relay.fetch_trends("testsubreddit")
    
    @patch("content_assistant.services.relay.requests.post")
    def test_failure_message_prefix(self, mock_post, relay):
        mock_post.return_value = http_response({"message": "Subreddit not found"}, status_code=404)
        
        with pytest.raises(UpstreamServiceError, match="Failed to fetch Reddit trends: Subreddit not found"):
            relay.fetch_trends("missing")
