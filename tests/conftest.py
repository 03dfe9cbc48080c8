"""
Global pytest fixtures for streamval tests.

This module provides:
- Isolation of the global ``config`` singleton between tests
- Isolation of the ``streamval`` logger between tests

Shared helpers (validation shortcuts, sample schemas) live in
tests/fixtures/ and are registered by the root conftest.py.
"""

import pytest


# =============================================================================
# Global State Isolation
# =============================================================================


@pytest.fixture(autouse=True)
def restore_config():
    """Restore the config singleton after every test."""
    from streamval import config

    saved = (config.strict, config.strict_formats, config.max_problems)
    yield
    config.strict, config.strict_formats, config.max_problems = saved


@pytest.fixture(autouse=True)
def restore_logging():
    """Restore the streamval logger's level and handlers after every test."""
    from streamval._logging import logger

    level = logger.level
    handlers = logger.handlers[:]
    yield
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    for handler in handlers:
        logger.addHandler(handler)
    logger.setLevel(level)


@pytest.fixture(scope="session")
def streamval():
    """The streamval package, for tests that exercise the top-level API."""
    import streamval

    return streamval
