"""
Data models module.

Defines ideas, drafts, published articles and trend items.
"""

from content_assistant.models.idea import (
    Idea,
    IdeaStatus,
    new_local_id,
    normalize_flair,
)
from content_assistant.models.article import Draft, DraftStatus, PublishedArticle
from content_assistant.models.trend import TrendItem

__all__ = [
    "Idea",
    "IdeaStatus",
    "new_local_id",
    "normalize_flair",
    "Draft",
    "DraftStatus",
    "PublishedArticle",
    "TrendItem",
]
