"""
Changelog generation for tag messages.

The message lists the commits between the most recent remote tag and the
head being tagged. A user template may replace the built-in format:

    {{number}}   1-based position in the range
    {{message}}  commit message
    {{author}}   author login, empty when GitHub has no linked user
    {{sha}}      commit SHA

Placeholders are case-insensitive and tolerate one space inside the
braces (``{{ sha }}``). Any failure degrades to ``Version <version>``.
"""

import logging
import re
from typing import Optional, List, Dict, Any

from ..domain.tag import Tag
from ..infra.github_client import GitHubClient, RepoIdentity
from .tag_index import RemoteTagIndex

logger = logging.getLogger(__name__)

DEFAULT_HEAD = 'master'


def _placeholder(name: str) -> re.Pattern:
    return re.compile(r'\{\{\s?(' + name + r')\s?\}\}', re.IGNORECASE)


PLACEHOLDERS = {
    'number': _placeholder('number'),
    'message': _placeholder('message'),
    'author': _placeholder('author'),
    'sha': _placeholder('sha'),
}


def default_message(version: str) -> str:
    """Message used when no changelog can be produced."""
    return f"Version {version}"


def commit_fields(commit: Dict[str, Any]) -> Dict[str, str]:
    """
    Pull the renderable fields out of a compare-API commit entry.

    Returns:
        Dict with ``message``, ``author`` and ``sha``
    """
    author = commit.get('author') or {}
    return {
        'message': (commit.get('commit') or {}).get('message', ''),
        'author': author.get('login', '') if isinstance(author, dict) else '',
        'sha': commit.get('sha', ''),
    }


def render_commit(template: str, number: int, commit: Dict[str, Any]) -> str:
    """
    Render one commit through a user template.

    Returns:
        Trimmed rendering with a trailing newline
    """
    fields = commit_fields(commit)
    values = {
        'number': str(number),
        'message': fields['message'],
        'author': fields['author'],
        'sha': fields['sha'],
    }

    rendered = template
    for name, pattern in PLACEHOLDERS.items():
        value = values[name]
        rendered = pattern.sub(lambda _m, value=value: value, rendered)

    return rendered.strip() + '\n'


def render_default(number: int, commit: Dict[str, Any]) -> str:
    """Render one commit in the built-in numbered format."""
    fields = commit_fields(commit)
    lead = '\n' if number == 1 else ''
    author = f" ({fields['author']})" if fields['author'] else ''
    return f"{lead}{number}) {fields['message']}{author}\n(SHA: {fields['sha']})\n"


def render_changelog(commits: List[Dict[str, Any]], template: str = '') -> str:
    """
    Render a list of commits.

    Template entries are concatenated; built-in entries are separated by a
    blank line.
    """
    template = (template or '').strip()

    if template:
        return ''.join(
            render_commit(template, i, commit)
            for i, commit in enumerate(commits, start=1)
        )

    return '\n'.join(
        render_default(i, commit)
        for i, commit in enumerate(commits, start=1)
    )


class ChangelogGenerator:
    """
    Build a tag message from the commits since the last tag.

    Example:
        generator = ChangelogGenerator(client, repo, index, head=sha)
        message = generator.get_message(tag)
    """

    def __init__(
        self,
        client: GitHubClient,
        repo: RepoIdentity,
        index: RemoteTagIndex,
        template: str = '',
        head: Optional[str] = None
    ):
        self.client = client
        self.repo = repo
        self.index = index
        self.template = template or ''
        self.head = head or DEFAULT_HEAD

    def get_message(self, tag: Tag) -> str:
        """
        Get the message for ``tag``.

        An explicitly set message is returned unchanged. Otherwise the
        changelog is generated; on any failure the default message is used
        and a warning is logged.
        """
        if tag.has_message:
            return tag.message

        try:
            latest = self.index.latest()
            if latest is None:
                return default_message(tag.version)

            comparison = self.client.compare_commits(self.repo, latest['name'], self.head)
            commits = comparison.get('commits') or []
            if not commits:
                logger.warning(f"No commits between {latest['name']} and {self.head}.")
                return default_message(tag.version)

            return render_changelog(commits, self.template)
        except Exception as e:
            logger.warning(f"Failed to generate changelog from commits: {e}")
            return default_message(tag.version)
