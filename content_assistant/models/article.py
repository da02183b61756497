"""
Draft and published article models.

A Draft is the single in-progress article held by the workflow controller.
Publishing turns it into an append-only PublishedArticle.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from content_assistant.models.idea import Idea, new_local_id, parse_timestamp


class DraftStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"


@dataclass
class Draft:
    """
    The current, unpublished article.
    
    Attributes:
        title: Copied from the source idea.
        flair: Copied from the source idea.
        content: Raw Markdown returned by the generator (uncleaned).
        idea_id: Back reference to the originating idea.
        status: Always "draft" while held by the controller.
        created_at: When the draft was generated.
    """
    
    title: str
    flair: str
    content: str
    idea_id: Optional[str] = None
    status: DraftStatus = DraftStatus.DRAFT
    created_at: datetime = field(default_factory=datetime.now)
    
    @classmethod
    def from_idea(cls, idea: Idea, content: str) -> "Draft":
        return cls(
            title=idea.title,
            flair=idea.flair,
            content=content,
            idea_id=idea.id,
        )
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "flair": self.flair,
            "content": self.content,
            "ideaId": self.idea_id,
            "status": DraftStatus(self.status).value,
            "createdAt": self.created_at.isoformat(),
        }


@dataclass
class PublishedArticle:
    """A draft saved to the published-article history. Never mutated."""
    
    title: str
    flair: str
    content: str
    author_id: str
    id: str = field(default_factory=new_local_id)
    idea_id: Optional[str] = None
    status: DraftStatus = DraftStatus.PUBLISHED
    created_at: datetime = field(default_factory=datetime.now)
    published_at: datetime = field(default_factory=datetime.now)
    
    @classmethod
    def from_draft(cls, draft: Draft, author_id: str) -> "PublishedArticle":
        return cls(
            title=draft.title,
            flair=draft.flair,
            content=draft.content,
            author_id=author_id,
            idea_id=draft.idea_id,
            created_at=draft.created_at,
            published_at=datetime.now(),
        )
    
    def to_record(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "flair": self.flair,
            "content": self.content,
            "ideaId": self.idea_id,
            "authorId": self.author_id,
            "status": DraftStatus.PUBLISHED.value,
            "createdAt": self.created_at.isoformat(),
            "publishedAt": self.published_at.isoformat(),
        }
    
    def to_dict(self) -> Dict[str, Any]:
        data = self.to_record()
        data["id"] = self.id
        return data
    
    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "PublishedArticle":
        now = datetime.now()
        return cls(
            id=str(record.get("id", "")) or new_local_id(),
            title=record.get("title", ""),
            flair=record.get("flair", ""),
            content=record.get("content", ""),
            author_id=record.get("authorId", ""),
            idea_id=record.get("ideaId"),
            created_at=parse_timestamp(record.get("createdAt")) or now,
            published_at=parse_timestamp(record.get("publishedAt")) or now,
        )
    
    def __str__(self) -> str:
        return f"{self.title} ({self.flair}) published {self.published_at:%Y-%m-%d}"
