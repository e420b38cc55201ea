#-------------------------------------------------------------------------bh-
# pytest configuration and fixtures for modelcheck tests
#-------------------------------------------------------------------------eh-

import pytest
import sys
from pathlib import Path

# Add project src and tests to path for imports
PROJ_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJ_ROOT / 'src'))
sys.path.insert(0, str(PROJ_ROOT / 'tests'))

from fixtures.test_config import (
    create_test_engine,
    create_test_session_factory,
)

# Import every fixture model module up front, under the names the class
# lister will find them by.
import fixture_models.child_model
import fixture_models.parent_model
import fixture_models.sub_models.sub_model
import fixture_not_models.not_model

from modelcheck import StrictSink, ValidationConfig

TESTS_DIR = PROJ_ROOT / 'tests'
MODEL_DIR = TESTS_DIR / 'fixture_models'
NOT_MODEL_DIR = TESTS_DIR / 'fixture_not_models'
BLOG_DIR = TESTS_DIR / 'fixture_blog'


@pytest.fixture
def engine():
    """Fresh in-memory database with every fixture table created."""
    engine = create_test_engine()
    yield engine
    engine.dispose()


@pytest.fixture
def SessionFactory(engine):
    return create_test_session_factory(engine)


@pytest.fixture
def session(SessionFactory):
    """
    Provide a transactional test session.

    Creates a new session for each test and rolls back after the test completes.
    """
    session = SessionFactory()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def model_dir():
    return MODEL_DIR


@pytest.fixture
def config():
    """Default settings, scanning the fixture_models directory."""
    return ValidationConfig(model_paths=[str(MODEL_DIR)])


@pytest.fixture
def strict_sink():
    return StrictSink()
