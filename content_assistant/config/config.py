"""
Configuration module for Content Assistant.

Loads environment variables from .env file and exposes them as typed configuration values.
Uses python-dotenv for loading and provides safe defaults where appropriate.

Module-level constants are the defaults; the workflow itself receives an
explicit AssistantConfig so nothing downstream reads the environment.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple
from dotenv import load_dotenv

# Load .env file from project root
# The .env file should be in the root directory (parent of content_assistant/)
_project_root = Path(__file__).parent.parent.parent
_env_path = _project_root / ".env"
load_dotenv(_env_path)


# =============================================================================
# Application Environment
# =============================================================================

# Application environment: "development", "staging", or "production"
# Default: "development" for safe local testing
APP_ENV: str = os.getenv("APP_ENV", "development")

# Enable debug mode for verbose output (only in development)
DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"

# Namespace for document store collections
APP_ID: str = os.getenv("APP_ID", "default-app-id")

# Identity recorded as authorId on published articles
SESSION_USER_ID: str = os.getenv("SESSION_USER_ID", "local-dev-user")


# =============================================================================
# Generative Text (Groq)
# =============================================================================

GROQ_API_KEY: str = os.getenv("GROQ_API_KEY", "")

GROQ_MODEL: str = os.getenv("GROQ_MODEL", "llama-3.3-70b-versatile")


# =============================================================================
# Airtable Configuration
# =============================================================================

# Airtable API key for authentication
# Without it ideas and articles are held in memory only
AIRTABLE_API_KEY: str = os.getenv("AIRTABLE_API_KEY", "")

# Airtable base ID where ideas and articles are stored
AIRTABLE_BASE_ID: str = os.getenv("AIRTABLE_BASE_ID", "")

# Tables backing the two collections
AIRTABLE_IDEAS_TABLE: str = os.getenv("AIRTABLE_IDEAS_TABLE", "article_ideas")
AIRTABLE_ARTICLES_TABLE: str = os.getenv("AIRTABLE_ARTICLES_TABLE", "articles")


# =============================================================================
# Publishing Relay / Trends
# =============================================================================

# Worker that relays publish and trend requests to Reddit
RELAY_BASE_URL: str = os.getenv(
    "RELAY_BASE_URL", "https://reddit-api-worker.growmybisznow.workers.dev"
)

# Community that ideas are written for and articles are published to
TARGET_SUBREDDIT: str = os.getenv("TARGET_SUBREDDIT", "growmybusinessnow")

# Where trends come from: "worker", "feed" (subreddit RSS) or "none"
TREND_SOURCE: str = os.getenv("TREND_SOURCE", "worker").lower()

# Maximum trend titles included in the idea prompt
TREND_LIMIT: int = int(os.getenv("TREND_LIMIT", "10"))


# =============================================================================
# Workflow Settings
# =============================================================================

# Number of ideas requested per generation call
IDEAS_PER_REQUEST: int = int(os.getenv("IDEAS_PER_REQUEST", "5"))

# HTTP request timeout in seconds
# Default: 30 seconds - long drafts take a while to generate
REQUEST_TIMEOUT: int = int(os.getenv("REQUEST_TIMEOUT", "30"))

# Strip an LLM-duplicated title line from the top of cleaned content
DEDUPE_TITLE: bool = os.getenv("DEDUPE_TITLE", "true").lower() == "true"

# Explicit clipboard command (e.g. "xclip -selection clipboard"); empty = auto-detect
CLIPBOARD_COMMAND: str = os.getenv("CLIPBOARD_COMMAND", "")


# Fixed flair set attached to ideas, drafts and articles
FLAIRS: Tuple[str, ...] = (
    "🚀 Growth Hacks & Breakthroughs",
    "💡 Freebie Fortune Finders",
    "📈 Digital Domination Playbook",
    "💸 Profit Pathways & Funding Funnel",
)

DEFAULT_COMMUNITY_FOCUS = (
    "growth strategies for small businesses and entrepreneurs in the USA, "
    "using free or low-cost resources"
)

VALID_TREND_SOURCES = ("worker", "feed", "none")


# =============================================================================
# Helper Functions
# =============================================================================

def is_production() -> bool:
    """Check if running in production environment."""
    return APP_ENV == "production"


def is_development() -> bool:
    """Check if running in development environment."""
    return APP_ENV == "development"


def validate_config() -> list[str]:
    """
    Validate that required configuration is present for production.
    
    Returns:
        List of missing or invalid configuration keys (empty if all valid).
    """
    errors = []
    
    if is_production():
        if not GROQ_API_KEY:
            errors.append("GROQ_API_KEY is required in production")
        if not AIRTABLE_API_KEY:
            errors.append("AIRTABLE_API_KEY is required in production")
        if not AIRTABLE_BASE_ID:
            errors.append("AIRTABLE_BASE_ID is required in production")
    
    if IDEAS_PER_REQUEST < 1:
        errors.append("IDEAS_PER_REQUEST must be at least 1")
    
    if REQUEST_TIMEOUT < 1:
        errors.append("REQUEST_TIMEOUT must be at least 1 second")
    
    if TREND_LIMIT < 0:
        errors.append("TREND_LIMIT cannot be negative")
    
    if TREND_SOURCE not in VALID_TREND_SOURCES:
        errors.append(
            f"TREND_SOURCE must be one of {', '.join(VALID_TREND_SOURCES)}, got {TREND_SOURCE!r}"
        )
    
    if not (RELAY_BASE_URL.startswith("http://") or RELAY_BASE_URL.startswith("https://")):
        errors.append("RELAY_BASE_URL must start with http:// or https://")
    
    return errors


def print_config_summary() -> None:
    """Print a summary of current configuration (safe for logs, no secrets)."""
    print(f"  APP_ENV: {APP_ENV}")
    print(f"  DEBUG: {DEBUG}")
    print(f"  APP_ID: {APP_ID}")
    print(f"  SESSION_USER_ID: {SESSION_USER_ID}")
    print(f"  GROQ_API_KEY: {'***' if GROQ_API_KEY else '(not set)'}")
    print(f"  GROQ_MODEL: {GROQ_MODEL}")
    print(f"  AIRTABLE_API_KEY: {'***' if AIRTABLE_API_KEY else '(not set)'}")
    print(f"  AIRTABLE_BASE_ID: {'***' if AIRTABLE_BASE_ID else '(not set)'}")
    print(f"  AIRTABLE_IDEAS_TABLE: {AIRTABLE_IDEAS_TABLE}")
    print(f"  AIRTABLE_ARTICLES_TABLE: {AIRTABLE_ARTICLES_TABLE}")
    print(f"  RELAY_BASE_URL: {RELAY_BASE_URL}")
    print(f"  TARGET_SUBREDDIT: {TARGET_SUBREDDIT}")
    print(f"  TREND_SOURCE: {TREND_SOURCE}")
    print(f"  TREND_LIMIT: {TREND_LIMIT}")
    print(f"  IDEAS_PER_REQUEST: {IDEAS_PER_REQUEST}")
    print(f"  REQUEST_TIMEOUT: {REQUEST_TIMEOUT}s")
    print(f"  DEDUPE_TITLE: {DEDUPE_TITLE}")


# =============================================================================
# Explicit Configuration Object
# =============================================================================

@dataclass
class AssistantConfig:
    """
    Configuration handed to the workflow controller and its collaborators.
    
    Defaults come from the environment; CLI arguments and tests override
    individual fields.
    """
    app_id: str = APP_ID
    user_id: str = SESSION_USER_ID
    subreddit: str = TARGET_SUBREDDIT
    community_focus: str = DEFAULT_COMMUNITY_FOCUS
    flairs: Tuple[str, ...] = field(default_factory=lambda: FLAIRS)
    ideas_per_request: int = IDEAS_PER_REQUEST
    
    # Trend-informed idea generation
    use_trends: bool = True
    trend_limit: int = TREND_LIMIT
    
    dedupe_title: bool = DEDUPE_TITLE
    verbose: bool = DEBUG
    
    @property
    def ideas_collection(self) -> str:
        """Private idea collection for the session user."""
        return f"artifacts/{self.app_id}/users/{self.user_id}/article_ideas"
    
    @property
    def articles_collection(self) -> str:
        """Public published-article collection for the app."""
        return f"artifacts/{self.app_id}/public/data/articles"
    
    @classmethod
    def from_args(cls, args, base: Optional["AssistantConfig"] = None) -> "AssistantConfig":
        """Create config from argparse namespace."""
        config = base or cls()
        if getattr(args, "subreddit", None):
            config.subreddit = args.subreddit
        if getattr(args, "ideas", None):
            config.ideas_per_request = args.ideas
        if getattr(args, "user_id", None):
            config.user_id = args.user_id
        if getattr(args, "verbose", False):
            config.verbose = True
        config.use_trends = bool(getattr(args, "with_trends", False))
        return config
