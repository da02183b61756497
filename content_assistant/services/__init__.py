"""
Services module.

External service integrations: text generation, the publishing relay and
the clipboard.
"""

from content_assistant.services.generator import TextGenerator, get_generator
from content_assistant.services.relay import PublishingRelay
from content_assistant.services.clipboard import (
    Clipboard,
    CommandClipboard,
    MemoryClipboard,
    create_clipboard,
)
from content_assistant.services.prompts import (
    ARTICLE_TEMPLATE,
    IDEAS_SCHEMA,
    build_article_prompt,
    build_ideas_prompt,
)

__all__ = [
    "TextGenerator",
    "get_generator",
    "PublishingRelay",
    "Clipboard",
    "CommandClipboard",
    "MemoryClipboard",
    "create_clipboard",
    "ARTICLE_TEMPLATE",
    "IDEAS_SCHEMA",
    "build_article_prompt",
    "build_ideas_prompt",
]
