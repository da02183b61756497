"""
Subreddit RSS trend source.

Reads the public "hot" RSS feed of a subreddit. No credentials are needed,
but the feed carries no vote or comment counts, so those stay at zero.

RSS Feed: https://www.reddit.com/r/<subreddit>/hot/.rss
"""

from typing import List, Optional
from urllib.parse import urlparse
import feedparser

from content_assistant.config import TREND_LIMIT
from content_assistant.errors import UpstreamServiceError
from content_assistant.models.trend import TrendItem
from content_assistant.sources.base import TrendSource


REDDIT_FEED_URL = "https://www.reddit.com/r/{community}/hot/.rss"


class RedditFeedSource(TrendSource):
    """Fetches hot posts of a subreddit via its RSS feed."""
    
    def __init__(self, feed_url: str = None):
        """
        Initialize RedditFeedSource.
        
        Args:
            feed_url: Optional feed URL template with a {community} field (for testing).
        """
        self.feed_url = feed_url or REDDIT_FEED_URL
    
    @property
    def name(self) -> str:
        return "reddit_feed"
    
    def fetch_trends(self, community: str, limit: Optional[int] = None) -> List[TrendItem]:
        if limit is None:
            limit = TREND_LIMIT
        
        url = self.feed_url.format(community=community)
        feed = feedparser.parse(
            url,
            request_headers={
                "User-Agent": "ContentAssistant/1.0 (RSS Reader)",
            },
        )
        
        if feed.bozo and not feed.entries:
            print(f"[{self.name}] Feed parse error: {feed.bozo_exception}")
            raise UpstreamServiceError(
                f"Failed to fetch Reddit trends: {feed.bozo_exception}"
            )
        
        items: List[TrendItem] = []
        for entry in feed.entries[:limit]:
            item = self._normalize_entry(entry)
            if item is not None:
                items.append(item)
        
        print(f"[{self.name}] Fetched {len(items)} trends from r/{community}")
        return items
    
    def _normalize_entry(self, entry: dict) -> Optional[TrendItem]:
        """
        Convert an RSS entry to a TrendItem.
        
        Reddit entry structure:
        {
            "id": "t3_1abcde",
            "title": "Post title",
            "link": "https://www.reddit.com/r/sub/comments/1abcde/post_title/",
        }
        """
        if not entry:
            return None
        
        title = (entry.get("title") or "").strip()
        link = (entry.get("link") or "").strip()
        item_id = (entry.get("id") or "").strip()
        
        if not title or not (item_id or link):
            return None
        
        if item_id.startswith("t3_"):
            item_id = item_id[3:]
        
        return TrendItem(
            id=item_id or link,
            title=title,
            permalink=urlparse(link).path if link else "",
        )
