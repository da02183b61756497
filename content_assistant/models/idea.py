"""
Idea model for Content Assistant.

An Idea is a suggested article title plus its flair. Ideas are created in
bulk by idea generation (always pending) and only ever change status:
pending -> approved or pending -> rejected.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Iterable, Optional
import re
import uuid

from content_assistant.config import FLAIRS


class IdeaStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


def new_local_id() -> str:
    """Short random id for records that never reach the document store."""
    return uuid.uuid4().hex[:7]


def _flair_key(value: str) -> str:
    return re.sub(r"[^a-z0-9]+", " ", value.casefold()).strip()


def normalize_flair(value: str, flairs: Iterable[str] = FLAIRS) -> str:
    """
    Map a generated flair onto the fixed flair set.
    
    Exact matches win; otherwise emoji, case and punctuation are ignored
    ("growth hacks & breakthroughs" -> "🚀 Growth Hacks & Breakthroughs").
    
    Raises:
        ValueError: If the value does not name any known flair.
    """
    if not isinstance(value, str) or not value.strip():
        raise ValueError("flair is required and cannot be empty")
    
    flairs = tuple(flairs)
    value = value.strip()
    if value in flairs:
        return value
    
    key = _flair_key(value)
    for flair in flairs:
        if key and _flair_key(flair) == key:
            return flair
    
    raise ValueError(f"unknown flair {value!r}")


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO timestamp from a store record; datetimes pass through."""
    if value is None or isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None


@dataclass
class Idea:
    """
    A suggested article idea.
    
    Attributes:
        title: Suggested article title.
        flair: One of the fixed flair labels.
        id: Store document id, or a short local id when held in memory.
        status: pending, approved or rejected.
        created_at: When the idea was generated.
    """
    
    title: str
    flair: str
    id: str = field(default_factory=new_local_id)
    status: IdeaStatus = IdeaStatus.PENDING
    created_at: datetime = field(default_factory=datetime.now)
    
    def __post_init__(self) -> None:
        self.status = IdeaStatus(self.status)
        self.validate()
    
    def validate(self) -> None:
        """
        Validate required fields.
        
        Raises:
            ValueError: If validation fails.
        """
        errors = []
        
        if not isinstance(self.title, str) or not self.title.strip():
            errors.append("title is required and cannot be empty")
        
        if not isinstance(self.flair, str) or not self.flair.strip():
            errors.append("flair is required and cannot be empty")
        
        if errors:
            raise ValueError(f"Idea validation failed: {'; '.join(errors)}")
    
    @property
    def is_pending(self) -> bool:
        return self.status == IdeaStatus.PENDING
    
    def with_status(self, status: IdeaStatus) -> "Idea":
        """Return a copy with a new status (the only field that ever changes)."""
        return replace(self, status=IdeaStatus(status))
    
    def to_record(self) -> Dict[str, Any]:
        """Document-store fields (the id is the document key, not a field)."""
        return {
            "title": self.title,
            "flair": self.flair,
            "status": self.status.value,
            "createdAt": self.created_at.isoformat(),
        }
    
    def to_dict(self) -> Dict[str, Any]:
        data = self.to_record()
        data["id"] = self.id
        return data
    
    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Idea":
        """
        Create an Idea from a store snapshot record ({"id": ..., **fields}).
        
        Raises:
            ValueError: If the record is missing required fields.
        """
        return cls(
            id=str(record.get("id", "")) or new_local_id(),
            title=record.get("title", ""),
            flair=record.get("flair", ""),
            status=record.get("status", IdeaStatus.PENDING.value),
            created_at=parse_timestamp(record.get("createdAt")) or datetime.now(),
        )
    
    def __str__(self) -> str:
        return f"[{self.status.value}] {self.title} ({self.flair})"
