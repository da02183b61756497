"""
Trend sources module.

Fetchers for popular posts in the target community.
"""

from content_assistant.sources.base import TrendSource
from content_assistant.sources.worker import WorkerTrendSource
from content_assistant.sources.reddit_feed import RedditFeedSource

__all__ = [
    "TrendSource",
    "WorkerTrendSource",
    "RedditFeedSource",
]
