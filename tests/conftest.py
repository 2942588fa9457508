"""Shared fixtures for autotag tests."""

import logging
from unittest.mock import MagicMock

import pytest

from autotag.infra.github_client import GitHubClient, RepoIdentity


@pytest.fixture(autouse=True)
def reset_autotag_logger():
    """Undo configure_logging() so caplog sees records in every test."""
    yield
    logger = logging.getLogger("autotag")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def repo():
    return RepoIdentity("octo", "widgets")


@pytest.fixture
def client():
    """GitHubClient double with an empty tag listing."""
    mock = MagicMock(spec=GitHubClient)
    mock.list_tags.return_value = []
    return mock


@pytest.fixture
def make_commit():
    """Factory for compare-API commit entries."""
    def _make(message, sha, login=None):
        return {
            'sha': sha,
            'commit': {'message': message},
            'author': {'login': login} if login else None,
        }
    return _make
