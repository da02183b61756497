"""
Pytest Configuration and Fixtures

This module provides:
- A per-category results report written to test_results/
- Shared fixtures: mock collaborators and wired controllers
- Marker registration
"""

import pytest
import sys
from collections import defaultdict
from datetime import datetime
from pathlib import Path
from typing import Dict, List

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

# Import test configuration
from tests.test_config import CONFIG, TEST_DATA, TEST_CATEGORIES, get_generated_ideas


# =============================================================================
# RESULTS REPORT
# =============================================================================

RESULTS_DIR = PROJECT_ROOT / "test_results"

# test module category -> [(test id, outcome, first line of the failure)]
_results: Dict[str, List[tuple]] = defaultdict(list)
_started: datetime = datetime.now()


def _category(nodeid: str) -> str:
    """tests/test_workflow.py::TestX::test_y -> workflow"""
    return Path(nodeid.split("::")[0]).stem.replace("test_", "", 1)


def pytest_runtest_logreport(report):
    """Record the outcome of each test call."""
    if report.when != "call":
        return
    text = str(report.longrepr).strip() if report.failed and report.longrepr else ""
    reason = text.splitlines()[-1][:100] if text else ""
    _results[_category(report.nodeid)].append((report.nodeid.split("::", 1)[-1], report.outcome, reason))


def format_report() -> str:
    outcomes = [outcome for results in _results.values() for _, outcome, _ in results]
    passed = outcomes.count("passed")
    lines = [
        "CONTENT ASSISTANT - TEST RESULTS REPORT",
        f"Run Date: {_started:%Y-%m-%d %H:%M:%S}",
        f"Passed {passed} of {len(outcomes)}, failed {outcomes.count('failed')}",
    ]
    
    for category, results in sorted(_results.items()):
        info = TEST_CATEGORIES.get(category, {})
        failed = [(name, reason) for name, outcome, reason in results if outcome == "failed"]
        lines.append("")
        lines.append(f"[{info.get('name', category)}] {len(results) - len(failed)}/{len(results)} passed")
        for risk in info.get("protects_against", []):
            lines.append(f"  guards: {risk}")
        for name, reason in failed:
            lines.append(f"  FAILED {name}: {reason}")
    
    return "\n".join(lines)


def pytest_sessionfinish(session, exitstatus):
    """Write the report once all tests have run."""
    if not _results:
        return
    RESULTS_DIR.mkdir(exist_ok=True)
    path = RESULTS_DIR / f"test_results_{_started:%Y%m%d_%H%M%S}.txt"
    path.write_text(format_report(), encoding="utf-8")
    print(f"\n📄 Test results saved to: {path}")


# =============================================================================
# SHARED FIXTURES
# =============================================================================

@pytest.fixture
def assistant_config():
    """AssistantConfig with test namespaces and trends disabled."""
    from content_assistant.config import AssistantConfig
    
    return AssistantConfig(
        app_id=CONFIG["app_id"],
        user_id=CONFIG["user_id"],
        subreddit=CONFIG["subreddit"],
        ideas_per_request=3,
        use_trends=False,
        verbose=False,
    )


@pytest.fixture
def mock_generator():
    """
    Generator double: structured calls return the idea payload,
    free-text calls return the generated article.
    """
    from unittest.mock import Mock
    from content_assistant.services import TextGenerator
    
    generator = Mock(spec=TextGenerator)
    generator.model = "test-model"
    generator.is_available.return_value = True
    
    def generate(prompt, structured=False, schema=None, max_tokens=2048):
        if structured:
            return get_generated_ideas()
        return TEST_DATA["generated_article"]
    
    generator.generate.side_effect = generate
    return generator


@pytest.fixture
def mock_relay():
    """Relay double that accepts every publish."""
    from unittest.mock import Mock
    from content_assistant.services import PublishingRelay
    
    relay = Mock(spec=PublishingRelay)
    relay.name = "relay"
    relay.publish.return_value = {"status": "Success"}
    relay.fetch_trends.return_value = [dict(t) for t in TEST_DATA["relay_trends"]]
    return relay


@pytest.fixture
def memory_clipboard():
    from content_assistant.services import MemoryClipboard
    return MemoryClipboard()


@pytest.fixture
def mock_store():
    """In-memory document store."""
    from content_assistant.storage import MockDocumentStore
    return MockDocumentStore()


@pytest.fixture
def controller(assistant_config, mock_generator, mock_relay, memory_clipboard):
    """Controller without a document store (ideas held in memory)."""
    from content_assistant.workflow import WorkflowController
    
    return WorkflowController(
        config=assistant_config,
        generator=mock_generator,
        relay=mock_relay,
        clipboard=memory_clipboard,
    )


@pytest.fixture
def stored_controller(assistant_config, mock_generator, mock_relay, memory_clipboard, mock_store):
    """Controller persisting through the in-memory document store."""
    from content_assistant.workflow import WorkflowController
    
    controller = WorkflowController(
        config=assistant_config,
        generator=mock_generator,
        store=mock_store,
        relay=mock_relay,
        clipboard=memory_clipboard,
    )
    yield controller
    controller.close()


# =============================================================================
# MARKERS FOR TEST CATEGORIES
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "config_validation: Configuration validation tests"
    )
    config.addinivalue_line(
        "markers", "cli_behavior: CLI interface tests"
    )
    config.addinivalue_line(
        "markers", "workflow_properties: Invariants over operation sequences"
    )
