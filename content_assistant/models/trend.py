"""Trend items fetched from the target community (read-only input)."""

from dataclasses import dataclass, asdict
from typing import Any, Dict


@dataclass
class TrendItem:
    """A popular post in the target community."""
    
    id: str
    title: str
    score: int = 0
    num_comments: int = 0
    permalink: str = ""
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TrendItem":
        """
        Build from a relay/feed payload.
        
        Raises:
            ValueError: If id or title is missing.
        """
        item_id = data.get("id")
        title = (data.get("title") or "").strip()
        if not item_id or not title:
            raise ValueError("trend item requires id and title")
        
        return cls(
            id=str(item_id),
            title=title,
            score=int(data.get("score") or 0),
            num_comments=int(data.get("num_comments") or 0),
            permalink=data.get("permalink") or "",
        )
    
    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
