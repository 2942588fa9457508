"""
Cached view of a repository's remote tags.

One index is built per publish run. The tag listing is fetched on first
use and shared by the existence check and the changelog, so a run lists
tags at most once. Only the first page (100 tags) is ever read.
"""

import logging
from typing import Optional, List, Dict, Any

from ..infra.github_client import GitHubClient, RepoIdentity, MAX_PAGE_SIZE

logger = logging.getLogger(__name__)


class RemoteTagIndex:
    """
    Lazily fetched, memoized tag listing.

    Once a value is cached it is never recomputed for the life of the
    index; errors are not cached and propagate to the caller.
    """

    def __init__(self, client: GitHubClient, repo: RepoIdentity, page_size: int = MAX_PAGE_SIZE):
        self.client = client
        self.repo = repo
        self.page_size = page_size
        self._tags: Optional[List[Dict[str, Any]]] = None
        self._exists: Dict[str, bool] = {}

    def list_tags(self) -> List[Dict[str, Any]]:
        """
        Get remote tags in the order GitHub returns them.

        Returns:
            List of ``{'name': ..., 'sha': ...}`` dicts
        """
        if self._tags is not None:
            return self._tags

        raw = self.client.list_tags(self.repo, per_page=self.page_size)
        if len(raw) >= self.page_size:
            logger.warning(
                f"{self.repo} returned a full page of {len(raw)} tags; "
                f"older tags are not checked."
            )

        self._tags = [
            {
                'name': item.get('name', ''),
                'sha': (item.get('commit') or {}).get('sha', ''),
            }
            for item in raw
        ]
        logger.debug(f"Fetched {len(self._tags)} tags from {self.repo}")
        return self._tags

    def latest(self) -> Optional[Dict[str, Any]]:
        """First tag of the listing, or None if the repository has none."""
        tags = self.list_tags()
        return tags[0] if tags else None

    def exists(self, name: str) -> bool:
        """Check whether a tag called ``name`` is in the listing."""
        if name in self._exists:
            return self._exists[name]

        found = any(tag['name'] == name for tag in self.list_tags())
        self._exists[name] = found
        return found
