"""
Content Assistant - Web API

A small Flask JSON API over the article workflow. Any front end (or curl)
drives the same controller the CLI uses.

Run with: python -m web.app
Or: cd web && python app.py
"""

import sys
from pathlib import Path
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from flask import Flask, request, jsonify
from content_assistant.cleaning import clean_article_content
from content_assistant.config import DEBUG
from content_assistant.services import MemoryClipboard
from content_assistant.workflow import OperationResult, WorkflowController, create_controller

app = Flask(__name__)


# =============================================================================
# Activity Tracking
# =============================================================================

@dataclass
class ActivityLog:
    """Terminal-style log of workflow operations run through the API."""
    entries: List[Dict[str, str]] = field(default_factory=list)
    max_entries: int = 200
    
    def log(self, message: str, level: str = "info"):
        """Add a log entry with timestamp."""
        timestamp = datetime.now().strftime("%H:%M:%S")
        self.entries.append({
            "time": timestamp,
            "level": level,  # info, success, warning, error, cmd
            "message": message
        })
        del self.entries[:-self.max_entries]
    
    def clear(self):
        self.entries = []


# Result kind -> HTTP status
STATUS_CODES = {
    "ok": 200,
    "busy": 409,
    "invalid": 400,
    "not_found": 404,
    "upstream": 502,
    "persistence": 503,
}

# Global controller and activity (simple in-memory tracking)
_controller: Optional[WorkflowController] = None
_activity = ActivityLog()


def get_controller() -> WorkflowController:
    """Get the shared workflow controller (created on first use)."""
    global _controller
    if _controller is None:
        # The browser reads copied text from the response, not a system clipboard
        _controller = create_controller(clipboard=MemoryClipboard())
    return _controller


def set_controller(controller: Optional[WorkflowController]) -> None:
    """Replace the shared controller (None resets to lazy creation)."""
    global _controller
    if _controller is not None and _controller is not controller:
        _controller.close()
    _controller = controller


def get_activity() -> ActivityLog:
    return _activity


def _respond(command: str, result: OperationResult, **extra: Any):
    """Log an operation outcome and turn it into a JSON response."""
    _activity.log(f"$ {command}", "cmd")
    if result.success:
        _activity.log(result.message, "success")
    else:
        _activity.log(result.error or "Operation failed", "warning" if result.kind == "busy" else "error")
    
    body = result.to_dict()
    body.update(extra)
    return jsonify(body), STATUS_CODES.get(result.kind, 500)


# =============================================================================
# State
# =============================================================================

@app.route("/api/state")
def api_state():
    """Full workflow state: ideas, draft, articles, trends, error, loading."""
    return jsonify(get_controller().state_dict())


@app.route("/api/activity")
def api_activity():
    """Recent activity log entries."""
    return jsonify({"logs": _activity.entries})


@app.route("/api/ai/status")
def api_ai_status():
    """Check if text generation is available."""
    generator = get_controller().generator
    available = generator.is_available()
    return jsonify({
        "available": available,
        "model": generator.model if available else None
    })


# =============================================================================
# Trends & Ideas
# =============================================================================

@app.route("/api/trends/fetch", methods=["POST"])
def api_fetch_trends():
    """Fetch trending posts from the target (or given) subreddit."""
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return jsonify({"success": False, "error": "JSON object required"}), 400
    
    controller = get_controller()
    result = controller.fetch_trends(data.get("subreddit"))
    return _respond(
        "fetch-trends",
        result,
        trends=[t.to_dict() for t in controller.trends],
    )


@app.route("/api/ideas/generate", methods=["POST"])
def api_generate_ideas():
    """Generate a new batch of pending ideas."""
    controller = get_controller()
    result = controller.generate_ideas()
    return _respond(
        "generate-ideas",
        result,
        ideas=[idea.to_dict() for idea in (result.data or [])],
    )


@app.route("/api/ideas/<idea_id>/approve", methods=["POST"])
def api_approve_idea(idea_id):
    """Approve a pending idea and generate its draft."""
    controller = get_controller()
    result = controller.approve_idea(idea_id)
    draft = controller.current_draft if result.success else None
    return _respond(
        f"approve {idea_id}",
        result,
        draft=draft.to_dict() if draft else None,
    )


@app.route("/api/ideas/<idea_id>/reject", methods=["POST"])
def api_reject_idea(idea_id):
    """Reject a pending idea."""
    return _respond(f"reject {idea_id}", get_controller().reject_idea(idea_id))


# =============================================================================
# Draft
# =============================================================================

@app.route("/api/draft/discard", methods=["POST"])
def api_discard_draft():
    return _respond("discard", get_controller().discard_draft())


@app.route("/api/draft/export", methods=["POST"])
def api_export_draft():
    """CSV row `title,flair,cleaned content` for the current draft."""
    result = get_controller().export_draft()
    return _respond("export", result, csv=result.data if result.success else None)


@app.route("/api/draft/copy", methods=["POST"])
def api_copy_draft():
    """Cleaned content of the current draft."""
    result = get_controller().copy_clean_content()
    return _respond("copy", result, content=result.data if result.success else None)


@app.route("/api/draft/publish", methods=["POST"])
def api_publish_draft():
    """Save the current draft to the published-article history."""
    result = get_controller().publish_draft()
    return _respond(
        "publish",
        result,
        article=result.data.to_dict() if result.success else None,
    )


@app.route("/api/draft/publish-external", methods=["POST"])
def api_publish_external():
    """Send the current draft to the Reddit relay and save it to history."""
    result = get_controller().publish_to_external_target()
    article = result.data if result.success else None
    return _respond(
        "publish-reddit",
        result,
        article=article.to_dict() if article else None,
    )


# =============================================================================
# Articles
# =============================================================================

@app.route("/api/articles")
def api_articles():
    """Published articles, oldest first."""
    articles = get_controller().articles
    return jsonify({
        "success": True,
        "count": len(articles),
        "articles": [a.to_dict() for a in articles],
    })


@app.route("/api/articles/<article_id>")
def api_article(article_id):
    article = get_controller().get_article(article_id)
    if article is None:
        return jsonify({"success": False, "error": f"Article {article_id!r} not found."}), 404
    return jsonify({"success": True, "article": article.to_dict()})


@app.route("/api/articles/<article_id>/copy", methods=["POST"])
def api_copy_article(article_id):
    """Cleaned content of a published article."""
    result = get_controller().copy_clean_content(article_id)
    return _respond(f"copy {article_id}", result, content=result.data if result.success else None)


# =============================================================================
# Cleaning
# =============================================================================

@app.route("/api/clean", methods=["POST"])
def api_clean():
    """Clean arbitrary article text without touching the workflow."""
    data = request.get_json(silent=True)
    
    if not isinstance(data, dict) or not isinstance(data.get("content"), str):
        return jsonify({"success": False, "error": "Content string required"}), 400
    
    title = data.get("title")
    if title is not None and not isinstance(title, str):
        return jsonify({"success": False, "error": "Title must be a string"}), 400
    
    return jsonify({
        "success": True,
        "content": clean_article_content(data["content"], title=title),
    })


if __name__ == "__main__":
    print("=" * 50)
    print("🚀 Content Assistant API")
    print("=" * 50)
    print("Open http://localhost:5001/api/state in your browser")
    print("Press Ctrl+C to stop")
    print("=" * 50)
    app.run(debug=DEBUG, port=5001)
