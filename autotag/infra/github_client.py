"""
GitHub API client infrastructure for autotag.

Thin wrapper over the four REST calls a publish run needs:
- list tags
- compare two commits
- create an annotated tag object
- create a reference

Authentication and repository identity are passed in explicitly. Failed
calls raise GitHubAPIError; nothing is retried.
"""

import logging
import time
from dataclasses import dataclass
from typing import Optional, List, Dict, Any

import requests

from ..errors import APIError, ConfigError

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"

# GitHub's maximum page size for list endpoints
MAX_PAGE_SIZE = 100


@dataclass
class RateLimitStatus:
    """GitHub API rate limit status."""
    remaining: int
    limit: int
    reset_time: int  # Unix timestamp
    used: int

    @property
    def minutes_until_reset(self) -> int:
        """Minutes until rate limit resets."""
        now = int(time.time())
        return max(0, (self.reset_time - now) // 60)

    @property
    def is_low(self) -> bool:
        """Check if rate limit is getting low (< 100 remaining)."""
        return self.remaining < 100


@dataclass(frozen=True)
class RepoIdentity:
    """Owner and name of the repository being tagged."""
    owner: str
    name: str

    @classmethod
    def parse(cls, full_name: str) -> 'RepoIdentity':
        """
        Parse ``owner/name`` as found in GITHUB_REPOSITORY.

        Raises:
            ConfigError: the value is not of the form owner/name
        """
        parts = (full_name or '').strip().split('/')
        if len(parts) != 2 or not all(parts):
            raise ConfigError(f'Repository must be "owner/name", got "{full_name}".')
        return cls(owner=parts[0], name=parts[1])

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    def __str__(self) -> str:
        return self.full_name


class GitHubAPIError(APIError):
    """A GitHub API call failed or returned a non-success status."""

    def __init__(self, message: str, status_code: Optional[int] = None, endpoint: str = ''):
        super().__init__(message)
        self.status_code = status_code
        self.endpoint = endpoint


class GitHubClient:
    """
    GitHub REST client bound to one token.

    Example:
        client = GitHubClient(token)
        repo = RepoIdentity.parse("octo/widgets")
        tags = client.list_tags(repo)
    """

    def __init__(
        self,
        token: Optional[str] = None,
        api_url: str = DEFAULT_API_URL,
        timeout: int = 30
    ):
        """
        Initialize GitHubClient.

        Args:
            token: GitHub token used for every request
            api_url: API root (GitHub Enterprise servers differ)
            timeout: HTTP request timeout in seconds
        """
        self.token = token
        self.api_url = (api_url or DEFAULT_API_URL).rstrip('/')
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({
            'Accept': 'application/vnd.github+json',
            'User-Agent': 'autotag',
        })
        if token:
            self.session.headers['Authorization'] = f'token {token}'
        self._rate_limit_status: Optional[RateLimitStatus] = None

    @property
    def rate_limit_status(self) -> Optional[RateLimitStatus]:
        """Rate limit status seen on the last response, if any."""
        return self._rate_limit_status

    def _update_rate_limit_from_headers(self, headers) -> None:
        """Update rate limit status from response headers."""
        try:
            remaining = int(headers.get('X-RateLimit-Remaining', -1))
            limit = int(headers.get('X-RateLimit-Limit', -1))
            reset_time = int(headers.get('X-RateLimit-Reset', 0))
            used = int(headers.get('X-RateLimit-Used', 0))
        except (ValueError, TypeError):
            return

        if remaining >= 0 and limit >= 0:
            self._rate_limit_status = RateLimitStatus(
                remaining=remaining,
                limit=limit,
                reset_time=reset_time,
                used=used
            )

            if self._rate_limit_status.is_low:
                logger.warning(
                    f"GitHub API rate limit low: {remaining}/{limit} remaining, "
                    f"resets in {self._rate_limit_status.minutes_until_reset} minutes"
                )

    def _request(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        payload: Optional[Dict[str, Any]] = None
    ) -> Any:
        """Send one request and return the decoded JSON body."""
        url = f"{self.api_url}/{endpoint}"
        logger.debug(f"{method} {url}")

        try:
            response = self.session.request(
                method,
                url,
                params=params,
                json=payload,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise GitHubAPIError(f"GitHub API request failed: {e}", endpoint=endpoint) from e

        self._update_rate_limit_from_headers(response.headers)

        if not 200 <= response.status_code < 300:
            detail = ''
            try:
                detail = response.json().get('message', '')
            except (ValueError, AttributeError):
                detail = response.text or ''
            raise GitHubAPIError(
                f"GitHub API error {response.status_code} for {method} {endpoint}"
                + (f": {detail}" if detail else ''),
                status_code=response.status_code,
                endpoint=endpoint,
            )

        try:
            return response.json()
        except ValueError as e:
            raise GitHubAPIError(
                f"GitHub API returned invalid JSON for {endpoint}: {e}",
                status_code=response.status_code,
                endpoint=endpoint,
            ) from e

    def list_tags(self, repo: RepoIdentity, per_page: int = MAX_PAGE_SIZE) -> List[Dict[str, Any]]:
        """
        List the first page of repository tags, newest first.

        Args:
            repo: Repository to list
            per_page: Page size, capped at 100

        Returns:
            List of tag dicts with at least ``name`` and ``commit.sha``
        """
        per_page = max(1, min(per_page, MAX_PAGE_SIZE))
        data = self._request('GET', f"repos/{repo.full_name}/tags", params={'per_page': per_page})
        if not isinstance(data, list):
            raise GitHubAPIError(f"Unexpected tag listing for {repo}", endpoint=f"repos/{repo.full_name}/tags")
        return data

    def compare_commits(self, repo: RepoIdentity, base: str, head: str) -> Dict[str, Any]:
        """
        Compare two commits.

        Returns:
            Comparison dict; ``commits`` lists the commits from base to head
        """
        return self._request('GET', f"repos/{repo.full_name}/compare/{base}...{head}")

    def create_tag(
        self,
        repo: RepoIdentity,
        tag: str,
        message: str,
        sha: str,
        object_type: str = 'commit'
    ) -> Dict[str, Any]:
        """
        Create an annotated tag object.

        Returns:
            Tag object dict with ``tag`` and ``sha``
        """
        return self._request('POST', f"repos/{repo.full_name}/git/tags", payload={
            'tag': tag,
            'message': message,
            'object': sha,
            'type': object_type,
        })

    def create_ref(self, repo: RepoIdentity, ref: str, sha: str) -> Dict[str, Any]:
        """
        Create a reference.

        Returns:
            Reference dict with ``ref`` and ``url``
        """
        return self._request('POST', f"repos/{repo.full_name}/git/refs", payload={
            'ref': ref,
            'sha': sha,
        })
