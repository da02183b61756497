"""
Workflow Controller - Core execution logic.

This module orchestrates the article workflow:

    Ideas → Approve → Draft → Export | Publish → next idea

Steps:
1. Optionally fetch trending posts from the target community
2. Ask the generator for a batch of {title, flair} ideas (all pending)
3. Approve one idea: generate the long-form draft, mark the idea approved
4. Export the cleaned draft as a CSV row, or publish it (app history
   and/or the Reddit relay), or discard it

Design principles:
- Single flight: one mutating operation at a time (OperationGate)
- No partial application: a failed operation leaves ideas, draft and
  articles exactly as they were
- Errors are values: every operation returns an OperationResult and
  records its error message in `error`
- Collaborators only: generator, store, relay, clipboard and trend source
  are injected; the controller never talks HTTP itself
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union

from content_assistant.cleaning import ContentCleaner, get_cleaner
from content_assistant.config import AIRTABLE_API_KEY, TREND_SOURCE, AssistantConfig
from content_assistant.errors import PersistenceError, UpstreamServiceError
from content_assistant.export import draft_to_csv_row
from content_assistant.models import (
    Draft,
    Idea,
    IdeaStatus,
    PublishedArticle,
    TrendItem,
    normalize_flair,
)
from content_assistant.services import (
    IDEAS_SCHEMA,
    Clipboard,
    MemoryClipboard,
    PublishingRelay,
    TextGenerator,
    build_article_prompt,
    build_ideas_prompt,
    create_clipboard,
    get_generator,
)
from content_assistant.sources import RedditFeedSource, TrendSource, WorkerTrendSource
from content_assistant.storage import AirtableDocumentStore, DocumentStore
from content_assistant.workflow.gate import OperationGate, OperationInProgress, OperationKind


# =============================================================================
# Workflow Result Data Structures
# =============================================================================

class WorkflowState(str, Enum):
    IDLE = "idle"
    IDEAS_LOADED = "ideas_loaded"
    DRAFT_PENDING = "draft_pending"
    DRAFT_READY = "draft_ready"
    # Outcomes of a finished draft action, reported as last_outcome
    EXPORTED = "exported"
    PUBLISHED = "published"
    DISCARDED = "discarded"


# Result kinds
OK = "ok"
BUSY = "busy"
INVALID = "invalid"
NOT_FOUND = "not_found"
UPSTREAM = "upstream"
PERSISTENCE = "persistence"


@dataclass
class OperationResult:
    """Outcome of a workflow operation."""
    success: bool
    message: str = ""
    error: Optional[str] = None
    kind: str = OK
    data: Any = None
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "message": self.message,
            "error": self.error,
            "kind": self.kind,
        }


IdeaRef = Union[Idea, str]


# =============================================================================
# Controller Class
# =============================================================================

class WorkflowController:
    """
    Owns the idea collection, the current draft and the published articles.
    
    Usage:
        controller = WorkflowController(config, generator=TextGenerator())
        controller.generate_ideas()
        controller.approve_idea(controller.pending_ideas[0])
        controller.publish_draft()
    
    When a document store is given, ideas and articles are persisted and
    the local collections are replaced by the store's snapshots (status
    changes are also applied locally once the write succeeds). Without
    one they live in memory with locally generated ids.
    """
    
    def __init__(
        self,
        config: AssistantConfig = None,
        generator: Optional[TextGenerator] = None,
        store: Optional[DocumentStore] = None,
        relay: Optional[PublishingRelay] = None,
        clipboard: Optional[Clipboard] = None,
        trend_source: Optional[TrendSource] = None,
        cleaner: Optional[ContentCleaner] = None,
    ):
        self.config = config or AssistantConfig()
        self.generator = generator if generator is not None else get_generator()
        self.store = store
        self.relay = relay
        self.clipboard = clipboard or MemoryClipboard()
        self.trend_source = trend_source
        self.cleaner = cleaner or get_cleaner()
        
        self.ideas: List[Idea] = []
        self.articles: List[PublishedArticle] = []
        self.trends: List[TrendItem] = []
        self.current_draft: Optional[Draft] = None
        self.state = WorkflowState.IDLE
        self.last_outcome: Optional[WorkflowState] = None
        self.error: Optional[str] = None
        
        self._gate = OperationGate()
        self._unsubscribers: List[Callable[[], None]] = []
        
        if self.store is not None:
            self._subscribe()
    
    # =========================================================================
    # Views
    # =========================================================================
    
    @property
    def loading(self) -> bool:
        """True while any operation is in flight."""
        return self._gate.busy
    
    @property
    def running_operation(self) -> Optional[OperationKind]:
        return self._gate.running
    
    @property
    def pending_ideas(self) -> List[Idea]:
        return [idea for idea in self.ideas if idea.is_pending]
    
    def find_idea(self, idea_id: str) -> Optional[Idea]:
        for idea in self.ideas:
            if idea.id == idea_id:
                return idea
        return None
    
    def get_article(self, article_id: str) -> Optional[PublishedArticle]:
        for article in self.articles:
            if article.id == article_id:
                return article
        return None
    
    def clean_content(self, content: str, title: Optional[str] = None) -> str:
        """Clean article text, de-duplicating the title when configured."""
        return self.cleaner.clean(content, title=title if self.config.dedupe_title else None)
    
    def state_dict(self) -> Dict[str, Any]:
        """JSON-serializable view of the whole controller state."""
        running = self._gate.running
        return {
            "state": self.state.value,
            "last_outcome": self.last_outcome.value if self.last_outcome else None,
            "loading": running is not None,
            "running": running.value if running else None,
            "error": self.error,
            "ideas": [idea.to_dict() for idea in self.ideas],
            "draft": self.current_draft.to_dict() if self.current_draft else None,
            "articles": [article.to_dict() for article in self.articles],
            "trends": [trend.to_dict() for trend in self.trends],
        }
    
    # =========================================================================
    # Store Subscriptions
    # =========================================================================
    
    def _subscribe(self) -> None:
        self._unsubscribers.append(self.store.subscribe(
            self.config.ideas_collection,
            self._on_ideas_snapshot,
            lambda e: self._on_snapshot_error("Error loading ideas.", e),
        ))
        self._unsubscribers.append(self.store.subscribe(
            self.config.articles_collection,
            self._on_articles_snapshot,
            lambda e: self._on_snapshot_error("Error loading articles.", e),
        ))
    
    def _on_ideas_snapshot(self, records: List[Dict[str, Any]]) -> None:
        ideas = []
        for record in records:
            try:
                ideas.append(Idea.from_record(record))
            except ValueError as e:
                self._log(f"Skipping invalid idea {record.get('id')}: {e}")
        self.ideas = ideas
        if ideas and self.state == WorkflowState.IDLE:
            self.state = WorkflowState.IDEAS_LOADED
    
    def _on_articles_snapshot(self, records: List[Dict[str, Any]]) -> None:
        self.articles = [PublishedArticle.from_record(record) for record in records]
    
    def _on_snapshot_error(self, message: str, error: PersistenceError) -> None:
        print(f"[workflow] {message} {error}")
        self.error = message
    
    def close(self) -> None:
        """Stop listening to store snapshots."""
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []
    
    # =========================================================================
    # Operation Plumbing
    # =========================================================================
    
    def _log(self, message: str) -> None:
        if self.config.verbose:
            print(f"[workflow] {message}")
    
    def _settle(self, outcome: WorkflowState) -> None:
        """Record a finished draft action and return to the idea list."""
        self.last_outcome = outcome
        self.state = WorkflowState.IDEAS_LOADED if self.ideas else WorkflowState.IDLE
    
    def _fail(self, error: str, kind: str) -> OperationResult:
        self.error = error
        return OperationResult(success=False, error=error, kind=kind)
    
    def _run(self, kind: OperationKind, operation: Callable[..., OperationResult], *args) -> OperationResult:
        """Run an operation under the gate; concurrent requests are rejected."""
        try:
            with self._gate.hold(kind):
                self.error = None
                self._log(f"{kind.value} started")
                result = operation(*args)
                self._log(
                    f"{kind.value} {'succeeded' if result.success else 'failed'}: "
                    f"{result.message if result.success else result.error}"
                )
                return result
        except OperationInProgress as e:
            self._log(str(e))
            return OperationResult(success=False, error=str(e), kind=BUSY)
    
    @staticmethod
    def _idea_id(idea: IdeaRef) -> str:
        return idea.id if isinstance(idea, Idea) else str(idea)
    
    # =========================================================================
    # Trends
    # =========================================================================
    
    def fetch_trends(self, community: Optional[str] = None) -> OperationResult:
        """Replace the trend snapshot with the community's popular posts."""
        return self._run(OperationKind.FETCH_TRENDS, self._fetch_trends, community or self.config.subreddit)
    
    def _fetch_trends(self, community: str) -> OperationResult:
        if self.trend_source is None:
            return self._fail("No trend source configured.", INVALID)
        
        try:
            trends = self.trend_source.fetch_trends(community, limit=self.config.trend_limit)
        except UpstreamServiceError as e:
            return self._fail(f"Error fetching trends: {e}", UPSTREAM)
        
        self.trends = list(trends)
        return OperationResult(
            success=True,
            message=f"Fetched {len(self.trends)} trending posts from r/{community}",
            data=self.trends,
        )
    
    # =========================================================================
    # Ideas
    # =========================================================================
    
    def generate_ideas(self) -> OperationResult:
        """Generate a batch of pending ideas and add them to the collection."""
        return self._run(OperationKind.GENERATE_IDEAS, self._generate_ideas)
    
    def _generate_ideas(self) -> OperationResult:
        trend_titles = [t.title for t in self.trends] if self.config.use_trends else None
        prompt = build_ideas_prompt(self.config, trend_titles)
        
        try:
            raw = self.generator.generate(prompt, structured=True, schema=IDEAS_SCHEMA)
            new_ideas = self._materialize_ideas(raw)
        except UpstreamServiceError as e:
            return self._fail(f"Error generating content: {e}", UPSTREAM)
        
        if self.store is None:
            self.ideas = self.ideas + new_ideas
        else:
            previous_state = self.state
            try:
                new_ideas = self._persist_ideas(new_ideas)
            except PersistenceError as e:
                self.state = previous_state
                return self._fail(f"Error saving ideas: {e}", PERSISTENCE)
        
        self.state = WorkflowState.IDEAS_LOADED
        return OperationResult(
            success=True,
            message=f"Generated {len(new_ideas)} new ideas",
            data=new_ideas,
        )
    
    def _materialize_ideas(self, raw: Any) -> List[Idea]:
        """Validate the whole response before anything is stored."""
        if not isinstance(raw, list):
            raise UpstreamServiceError("Malformed idea response: expected a list of ideas")
        
        ideas = []
        for entry in raw:
            if not isinstance(entry, dict):
                raise UpstreamServiceError("Malformed idea response: expected {title, flair} objects")
            try:
                ideas.append(Idea(
                    title=str(entry.get("title") or "").strip(),
                    flair=normalize_flair(entry.get("flair"), self.config.flairs),
                ))
            except ValueError as e:
                raise UpstreamServiceError(f"Malformed idea response: {e}") from e
        return ideas
    
    def _persist_ideas(self, ideas: List[Idea]) -> List[Idea]:
        """Add ideas to the store; on failure remove the ones already added."""
        collection = self.config.ideas_collection
        added: List[Idea] = []
        try:
            for idea in ideas:
                doc_id = self.store.add(collection, idea.to_record())
                added.append(replace(idea, id=doc_id))
        except PersistenceError:
            self._rollback(collection, [idea.id for idea in added])
            raise
        return added
    
    def _rollback(self, collection: str, doc_ids: List[str]) -> None:
        for doc_id in doc_ids:
            try:
                self.store.delete(collection, doc_id)
            except PersistenceError as e:
                print(f"[workflow] Rollback of {doc_id} in {collection} failed: {e}")
    
    def _set_idea_status(self, idea: Idea, status: IdeaStatus) -> None:
        if self.store is not None:
            self.store.update(self.config.ideas_collection, idea.id, {"status": status.value})
        # Local copy follows the write even when the snapshot refresh fails
        self.ideas = [i.with_status(status) if i.id == idea.id else i for i in self.ideas]
    
    def _pending_idea(self, idea_id: str) -> Union[Idea, OperationResult]:
        idea = self.find_idea(idea_id)
        if idea is None:
            return self._fail(f"Idea {idea_id!r} not found.", NOT_FOUND)
        if not idea.is_pending:
            return self._fail(f"Idea '{idea.title}' is already {idea.status.value}.", INVALID)
        return idea
    
    def approve_idea(self, idea: IdeaRef) -> OperationResult:
        """Generate a draft from a pending idea and mark the idea approved."""
        return self._run(OperationKind.APPROVE_IDEA, self._approve_idea, self._idea_id(idea))
    
    def _approve_idea(self, idea_id: str) -> OperationResult:
        idea = self._pending_idea(idea_id)
        if isinstance(idea, OperationResult):
            return idea
        
        previous_state = self.state
        self.state = WorkflowState.DRAFT_PENDING
        draft: Optional[Draft] = None
        try:
            content = self.generator.generate(build_article_prompt(self.config, idea))
            if not isinstance(content, str) or not content.strip():
                raise UpstreamServiceError("Generator returned an empty draft")
            # Draft generation has finished; only now is the status update issued
            self._set_idea_status(idea, IdeaStatus.APPROVED)
            draft = Draft.from_idea(idea, content)
        except UpstreamServiceError as e:
            return self._fail(f"Error generating content: {e}", UPSTREAM)
        except PersistenceError as e:
            return self._fail(f"Error updating the idea: {e}", PERSISTENCE)
        finally:
            if draft is None:
                self.state = previous_state
        
        self.current_draft = draft
        self.state = WorkflowState.DRAFT_READY
        self.last_outcome = None
        return OperationResult(success=True, message=f"Draft ready: {idea.title}", data=draft)
    
    def reject_idea(self, idea: IdeaRef) -> OperationResult:
        """Mark a pending idea rejected."""
        return self._run(OperationKind.REJECT_IDEA, self._reject_idea, self._idea_id(idea))
    
    def _reject_idea(self, idea_id: str) -> OperationResult:
        idea = self._pending_idea(idea_id)
        if isinstance(idea, OperationResult):
            return idea
        
        try:
            self._set_idea_status(idea, IdeaStatus.REJECTED)
        except PersistenceError as e:
            return self._fail(f"Error rejecting the idea: {e}", PERSISTENCE)
        
        return OperationResult(success=True, message=f"Rejected: {idea.title}")
    
    # =========================================================================
    # Draft
    # =========================================================================
    
    def discard_draft(self) -> OperationResult:
        """Throw the current draft away without saving it."""
        return self._run(OperationKind.DISCARD_DRAFT, self._discard_draft)
    
    def _discard_draft(self) -> OperationResult:
        if self.current_draft is None:
            return self._fail("Nothing to discard.", INVALID)
        
        title = self.current_draft.title
        self.current_draft = None
        self._settle(WorkflowState.DISCARDED)
        return OperationResult(success=True, message=f"Discarded draft: {title}")
    
    def export_draft(self) -> OperationResult:
        """Copy `title,flair,cleaned content` as one CSV row. The draft is kept."""
        draft = self.current_draft
        if draft is None:
            return self._fail("Please generate an article draft first.", INVALID)
        
        row = draft_to_csv_row(draft, self.clean_content(draft.content, draft.title))
        if not self.clipboard.write(row):
            return self._fail("Error copying content to clipboard.", UPSTREAM)
        
        self._settle(WorkflowState.EXPORTED)
        return OperationResult(
            success=True,
            message="Article data (Title, Flair, Content) copied as CSV!",
            data=row,
        )
    
    def copy_clean_content(self, article_id: Optional[str] = None) -> OperationResult:
        """Copy the cleaned content of the current draft or of a published article."""
        if article_id is None:
            source = self.current_draft
            if source is None:
                return self._fail("Please generate an article draft first.", INVALID)
        else:
            source = self.get_article(article_id)
            if source is None:
                return self._fail(f"Article {article_id!r} not found.", NOT_FOUND)
        
        text = self.clean_content(source.content, source.title)
        if not self.clipboard.write(text):
            return self._fail("Error copying content to clipboard.", UPSTREAM)
        
        return OperationResult(success=True, message="Content copied to clipboard!", data=text)
    
    # =========================================================================
    # Publishing
    # =========================================================================
    
    def publish_draft(self) -> OperationResult:
        """Save the current draft to the published-article history."""
        return self._run(OperationKind.PUBLISH_DRAFT, self._publish_current_draft)
    
    def _publish_current_draft(self) -> OperationResult:
        draft = self.current_draft
        if draft is None:
            return self._fail("No article draft to publish.", INVALID)
        
        article = PublishedArticle.from_draft(draft, author_id=self.config.user_id)
        
        if self.store is None:
            self.articles = self.articles + [article]
        else:
            try:
                doc_id = self.store.add(self.config.articles_collection, article.to_record())
            except PersistenceError as e:
                return self._fail(f"Error saving the article: {e}", PERSISTENCE)
            article = replace(article, id=doc_id)
        
        self.current_draft = None
        self._settle(WorkflowState.PUBLISHED)
        return OperationResult(success=True, message="Article saved to your app history!", data=article)
    
    def publish_to_external_target(self) -> OperationResult:
        """Send the cleaned draft to the Reddit relay, then save it to history."""
        return self._run(OperationKind.PUBLISH_EXTERNAL, self._publish_external)
    
    def _publish_external(self) -> OperationResult:
        draft = self.current_draft
        if draft is None:
            return self._fail("Please generate an article draft first.", INVALID)
        if self.relay is None:
            return self._fail("No publishing relay configured.", INVALID)
        
        payload = {
            "title": draft.title,
            "flair": draft.flair,
            "content": self.clean_content(draft.content, draft.title),
            "subreddit": self.config.subreddit,
        }
        
        try:
            response = self.relay.publish(payload)
        except UpstreamServiceError as e:
            return self._fail(f"Failed to send article for Reddit publishing: {e}", UPSTREAM)
        
        status = (response or {}).get("status") or "Success"
        result = self._publish_current_draft()
        
        if not result.success:
            # The relay already accepted the post
            result.error = f"Article was sent to Reddit (status: {status}) but {result.error}"
            self.error = result.error
            return result
        
        result.message = f"Article sent to Reddit (status: {status}) and saved to your app history!"
        return result


# =============================================================================
# Convenience Functions
# =============================================================================

def create_trend_source(name: str, relay: PublishingRelay) -> Optional[TrendSource]:
    """Build the trend source named by TREND_SOURCE ("none" disables trends)."""
    if name == "worker":
        return WorkerTrendSource(relay)
    if name == "feed":
        return RedditFeedSource()
    return None


def create_controller(
    config: AssistantConfig = None,
    clipboard: Optional[Clipboard] = None,
) -> WorkflowController:
    """
    Wire a controller from environment configuration.
    
    Uses Airtable when AIRTABLE_API_KEY is set, otherwise keeps ideas and
    articles in memory.
    """
    relay = PublishingRelay()
    store = AirtableDocumentStore() if AIRTABLE_API_KEY else None
    
    return WorkflowController(
        config=config or AssistantConfig(),
        generator=get_generator(),
        store=store,
        relay=relay,
        clipboard=clipboard or create_clipboard(),
        trend_source=create_trend_source(TREND_SOURCE, relay),
    )
