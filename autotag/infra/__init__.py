"""
Infrastructure layer for autotag.

Contains abstractions for external systems:
- GitHubClient: GitHub REST API access
- RepoIdentity: owner/name of the repository being tagged

These provide clean interfaces that can be mocked for testing.
"""

from .github_client import (
    GitHubClient,
    GitHubAPIError,
    RateLimitStatus,
    RepoIdentity,
    MAX_PAGE_SIZE,
)

__all__ = [
    'GitHubClient',
    'GitHubAPIError',
    'RateLimitStatus',
    'RepoIdentity',
    'MAX_PAGE_SIZE',
]
