"""
Cleaning module.

Strips prompt-template scaffolding from generated article text.
"""

from content_assistant.cleaning.patterns import DEFAULT_SCAFFOLD_PATTERNS, ScaffoldPattern
from content_assistant.cleaning.cleaner import (
    ContentCleaner,
    clean_article_content,
    collapse_blank_lines,
    get_cleaner,
    is_title_line,
)

__all__ = [
    "DEFAULT_SCAFFOLD_PATTERNS",
    "ScaffoldPattern",
    "ContentCleaner",
    "clean_article_content",
    "collapse_blank_lines",
    "get_cleaner",
    "is_title_line",
]
