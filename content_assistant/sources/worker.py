"""
Relay-backed trend source.

Asks the publishing relay worker for the subreddit's popular posts. The
worker already returns {id, title, score, num_comments, permalink} objects.
"""

from typing import List, Optional

from content_assistant.config import TREND_LIMIT
from content_assistant.models.trend import TrendItem
from content_assistant.services.relay import PublishingRelay
from content_assistant.sources.base import TrendSource


class WorkerTrendSource(TrendSource):
    """Fetches trends through the relay's /fetch-trends endpoint."""
    
    def __init__(self, relay: Optional[PublishingRelay] = None):
        self.relay = relay or PublishingRelay()
    
    @property
    def name(self) -> str:
        return "worker"
    
    def fetch_trends(self, community: str, limit: Optional[int] = None) -> List[TrendItem]:
        if limit is None:
            limit = TREND_LIMIT
        
        raw_items = self.relay.fetch_trends(community)
        
        items: List[TrendItem] = []
        for raw in raw_items[:limit]:
            if not isinstance(raw, dict):
                continue
            try:
                items.append(TrendItem.from_dict(raw))
            except (ValueError, TypeError) as e:
                print(f"[{self.name}] Skipping invalid trend item: {e}")
        
        print(f"[{self.name}] Fetched {len(items)} trends from r/{community}")
        return items
