"""
Base trend source abstraction for Content Assistant.

Defines the interface for anything that can list popular posts in a
community, used as inspiration for idea generation.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from content_assistant.models.trend import TrendItem


class TrendSource(ABC):
    """
    Abstract base class for all trend sources.
    
    Attributes:
        name: Unique identifier for this source (e.g., "worker", "reddit_feed").
    """
    
    @property
    @abstractmethod
    def name(self) -> str:
        """
        Return the unique name identifier for this source.
        
        Used as the prefix of diagnostic output.
        """
        pass
    
    @abstractmethod
    def fetch_trends(self, community: str, limit: Optional[int] = None) -> List[TrendItem]:
        """
        Fetch popular posts from a community.
        
        Implementations should:
        - Respect the limit parameter (or use TREND_LIMIT if None)
        - Skip entries that cannot be normalized (missing id or title)
        - Raise UpstreamServiceError when the fetch itself fails, so the
          failure is reported instead of looking like a quiet community
        
        Args:
            community: Community (subreddit) name without the "r/" prefix.
            limit: Maximum number of items to return.
            
        Returns:
            List of TrendItem instances.
        """
        pass
    
    def __str__(self) -> str:
        return f"TrendSource({self.name})"
    
    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
