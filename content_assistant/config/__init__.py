"""
Configuration module.

Handles environment variables, API keys, and application settings.
"""

from content_assistant.config.config import (
    APP_ENV,
    DEBUG,
    APP_ID,
    SESSION_USER_ID,
    GROQ_API_KEY,
    GROQ_MODEL,
    AIRTABLE_API_KEY,
    AIRTABLE_BASE_ID,
    AIRTABLE_IDEAS_TABLE,
    AIRTABLE_ARTICLES_TABLE,
    RELAY_BASE_URL,
    TARGET_SUBREDDIT,
    TREND_SOURCE,
    TREND_LIMIT,
    IDEAS_PER_REQUEST,
    REQUEST_TIMEOUT,
    DEDUPE_TITLE,
    CLIPBOARD_COMMAND,
    FLAIRS,
    DEFAULT_COMMUNITY_FOCUS,
    VALID_TREND_SOURCES,
    AssistantConfig,
    is_production,
    is_development,
    validate_config,
    print_config_summary,
)

__all__ = [
    "APP_ENV",
    "DEBUG",
    "APP_ID",
    "SESSION_USER_ID",
    "GROQ_API_KEY",
    "GROQ_MODEL",
    "AIRTABLE_API_KEY",
    "AIRTABLE_BASE_ID",
    "AIRTABLE_IDEAS_TABLE",
    "AIRTABLE_ARTICLES_TABLE",
    "RELAY_BASE_URL",
    "TARGET_SUBREDDIT",
    "TREND_SOURCE",
    "TREND_LIMIT",
    "IDEAS_PER_REQUEST",
    "REQUEST_TIMEOUT",
    "DEDUPE_TITLE",
    "CLIPBOARD_COMMAND",
    "FLAIRS",
    "DEFAULT_COMMUNITY_FOCUS",
    "VALID_TREND_SOURCES",
    "AssistantConfig",
    "is_production",
    "is_development",
    "validate_config",
    "print_config_summary",
]
