"""
Pytest configuration and fixtures for anchoring tests
"""
import pytest

from anchoring.document import HtmlDocument
from anchoring.logging_config import TaskIndent

# Text content: "Title" [0, 5), p1 [5, 33), p2 [33, 61) with <b> at [41, 45)
SAMPLE_MARKUP = (
    "<h1>Title</h1>"
    "<p>Say hello world to everyone.</p>"
    "<p>Another <b>bold</b> paragraph here.</p>"
)


@pytest.fixture
def sample_markup():
    """Sample HTML fragment for testing"""
    return SAMPLE_MARKUP


@pytest.fixture
def document():
    """Parsed sample document"""
    return HtmlDocument.from_html(SAMPLE_MARKUP)


@pytest.fixture(autouse=True)
def reset_log_indent():
    """Start every test with a clean log tree"""
    TaskIndent.reset()
    yield
    TaskIndent.reset()
