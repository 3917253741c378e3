import os

import pytest

from isbnkit import create_app
from isbnkit.services import ranges as ranges_module
from isbnkit.services.ranges import get_range_table

# Partial, hand-maintained range message used by the test suite only
RANGES_FIXTURE = os.path.join(os.path.dirname(__file__), 'data', 'RangeMessage.xml')


@pytest.fixture(autouse=True)
def default_range_file(monkeypatch):
    """Point parse() calls without an explicit table at the fixture dataset."""
    monkeypatch.setattr(ranges_module, '_default_path', RANGES_FIXTURE)
    return RANGES_FIXTURE


@pytest.fixture
def app():
    """Create and configure a test app on the fixture range dataset."""
    app = create_app(ISBN_RANGES_FILE=RANGES_FIXTURE, LOG_JSON=False, LOG_LEVEL='DEBUG')
    app.config['TESTING'] = True
    yield app


@pytest.fixture
def client(app):
    """A test client for the app."""
    return app.test_client()


@pytest.fixture
def runner(app):
    """A test runner for the app's Click commands."""
    return app.test_cli_runner()


@pytest.fixture
def ranges():
    """The fixture range table (shared instance)."""
    return get_range_table(RANGES_FIXTURE)
