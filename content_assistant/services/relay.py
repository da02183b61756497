"""
Publishing relay client.

The relay is a small worker that holds the Reddit credentials. It accepts a
cleaned article and posts it, and proxies trend lookups for a subreddit.
"""

from typing import Any, Dict, List, Optional
import requests

from content_assistant.config import RELAY_BASE_URL, REQUEST_TIMEOUT
from content_assistant.errors import UpstreamServiceError


class PublishingRelay:
    """HTTP client for the publish/trends worker."""
    
    PUBLISH_PATH = "/publish-reddit"
    TRENDS_PATH = "/fetch-trends"
    
    def __init__(self, base_url: Optional[str] = None, timeout: int = REQUEST_TIMEOUT):
        self.base_url = (base_url or RELAY_BASE_URL).rstrip("/")
        self.timeout = timeout
    
    @property
    def name(self) -> str:
        return "relay"
    
    def publish(self, article: Dict[str, Any]) -> Dict[str, Any]:
        """
        Send an article for publishing.
        
        Args:
            article: {"title", "flair", "content", "subreddit"} with cleaned content.
            
        Returns:
            Relay response body (normally contains "status").
            
        Raises:
            UpstreamServiceError: With the relay's error message on failure.
        """
        data = self._post(self.PUBLISH_PATH, article, "Failed to publish to Reddit")
        return data if isinstance(data, dict) else {"status": "Success"}
    
    def fetch_trends(self, subreddit: str) -> List[Dict[str, Any]]:
        """
        Fetch popular posts for a subreddit.
        
        Raises:
            UpstreamServiceError: If the relay fails or returns a non-list body.
        """
        data = self._post(self.TRENDS_PATH, {"subreddit": subreddit}, "Failed to fetch Reddit trends")
        if not isinstance(data, list):
            raise UpstreamServiceError("Failed to fetch Reddit trends: unexpected response")
        return data
    
    def _post(self, path: str, body: Dict[str, Any], failure: str) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = requests.post(
                url,
                headers={"Content-Type": "application/json"},
                json=body,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            print(f"[{self.name}] Error calling {path}: {e}")
            raise UpstreamServiceError(f"{failure}: {e}") from e
        
        if not response.ok:
            message = self._error_message(response)
            print(f"[{self.name}] {path} returned {response.status_code}: {message}")
            raise UpstreamServiceError(f"{failure}: {message}")
        
        try:
            return response.json()
        except ValueError as e:
            raise UpstreamServiceError(f"{failure}: invalid JSON response") from e
    
    @staticmethod
    def _error_message(response: requests.Response) -> str:
        try:
            data = response.json()
        except ValueError:
            data = None
        if isinstance(data, dict) and data.get("message"):
            return str(data["message"])
        return response.reason or f"HTTP {response.status_code}"
