import pytest

from richline import config
from richline.markup import parse


@pytest.fixture(autouse=True)
def debug_checks(monkeypatch):
    """Run every test with the coherence checker enabled."""
    monkeypatch.setattr(config.settings, "debug", True)


@pytest.fixture
def bold_doc():
    """Returns the document for '<b>abc</b>'."""
    return parse("<b>abc</b>")


@pytest.fixture
def mixed_doc():
    """Returns a document mixing plain, nested and sized text."""
    return parse("Hello <b>big <i>bold</i></b> <+1>world</+1>")
