"""
Workflow Property Tests

Verifies invariants that must hold over arbitrary operation sequences:
at most one current draft, idea statuses only move forward, publishing
clears the draft and grows history by exactly one, and overlapping
operations never both run.

Test data and expected values are defined in tests/test_config.py.
"""

import random
import threading

import pytest

from content_assistant.errors import UpstreamServiceError
from content_assistant.models import IdeaStatus
from content_assistant.workflow import WorkflowController

from tests.test_config import TEST_DATA


ALLOWED_TRANSITIONS = {
    (IdeaStatus.PENDING, IdeaStatus.PENDING),
    (IdeaStatus.PENDING, IdeaStatus.APPROVED),
    (IdeaStatus.PENDING, IdeaStatus.REJECTED),
    (IdeaStatus.APPROVED, IdeaStatus.APPROVED),
    (IdeaStatus.REJECTED, IdeaStatus.REJECTED),
}


def run_random_sequence(controller, rng, steps=60):
    """Apply random operations and check invariants after each one."""
    statuses = {}
    
    for _ in range(steps):
        ideas = controller.ideas
        choice = rng.choice(["generate", "approve", "reject", "discard", "export", "publish", "fail_approve"])
        target = rng.choice(ideas).id if ideas else "missing"
        articles_before = len(controller.articles)
        draft_before = controller.current_draft
        
        if choice == "generate":
            controller.generate_ideas()
        elif choice == "approve":
            controller.approve_idea(target)
        elif choice == "reject":
            controller.reject_idea(target)
        elif choice == "discard":
            controller.discard_draft()
        elif choice == "export":
            controller.export_draft()
        elif choice == "publish":
            result = controller.publish_draft()
            if result.success:
                assert controller.current_draft is None
                assert len(controller.articles) == articles_before + 1
                published = controller.articles[-1]
                assert (published.title, published.flair, published.content) == (
                    draft_before.title, draft_before.flair, draft_before.content
                )
            else:
                assert len(controller.articles) == articles_before
        elif choice == "fail_approve":
            original = controller.generator.generate.side_effect
            controller.generator.generate.side_effect = UpstreamServiceError("down")
            before = controller.find_idea(target)
            controller.approve_idea(target)
            controller.generator.generate.side_effect = original
            assert controller.current_draft is draft_before
            if before is not None:
                assert controller.find_idea(target).status == before.status
        
        # Invariants
        assert not controller.loading
        assert controller.current_draft is None or controller.current_draft.idea_id in {i.id for i in controller.ideas}
        for idea in controller.ideas:
            previous = statuses.get(idea.id, IdeaStatus.PENDING)
            assert (previous, idea.status) in ALLOWED_TRANSITIONS, \
                f"Idea {idea.id} moved {previous.value} -> {idea.status.value}"
            statuses[idea.id] = idea.status


@pytest.mark.workflow_properties
class TestSequenceInvariants:
    """Random operation sequences against both persistence modes."""
    
    @pytest.mark.parametrize("seed", range(8))
    def test_invariants_in_memory(self, controller, seed):
        run_random_sequence(controller, random.Random(seed))
    
    @pytest.mark.parametrize("seed", range(4))
    def test_invariants_with_store(self, stored_controller, seed):
        run_random_sequence(stored_controller, random.Random(seed))
    
    def test_repeated_approvals_leave_one_draft(self, controller):
        controller.generate_ideas()
        controller.generate_ideas()
        
        for idea in list(controller.pending_ideas):
            controller.approve_idea(idea)
        
        assert controller.current_draft is not None
        assert controller.current_draft.idea_id == controller.ideas[-1].id
        assert all(i.status == IdeaStatus.APPROVED for i in controller.ideas)


@pytest.mark.workflow_properties
class TestConcurrentRequests:
    """Overlapping requests from separate threads."""
    
    def test_second_generation_is_rejected_while_first_runs(self, assistant_config, mock_generator):
        started = threading.Event()
        release = threading.Event()
        
        def slow_generate(prompt, structured=False, schema=None, max_tokens=2048):
            started.set()
            release.wait(timeout=5)
            return [dict(i) for i in TEST_DATA["generated_ideas"]]
        
        mock_generator.generate.side_effect = slow_generate
        controller = WorkflowController(config=assistant_config, generator=mock_generator)
        results = {}
        
        worker = threading.Thread(target=lambda: results.setdefault("first", controller.generate_ideas()))
        worker.start()
        started.wait(timeout=5)
        
        results["second"] = controller.generate_ideas()
        assert controller.loading
        
        release.set()
        worker.join(timeout=5)
        
        assert results["first"].success
        assert results["second"].kind == "busy"
        assert len(controller.ideas) == len(TEST_DATA["generated_ideas"])
        assert mock_generator.generate.call_count == 1
        assert not controller.loading
