"""
Service layer for autotag.

Contains the logic that coordinates domain objects and the GitHub client:
- RemoteTagIndex: cached listing of remote tags
- ChangelogGenerator: tag message from the commits since the last tag
- TagPublisher: the full publish pipeline

Services are the primary API for the CLI to use.
"""

from .tag_index import RemoteTagIndex
from .changelog import ChangelogGenerator, render_changelog, default_message
from .publisher import TagPublisher, PublishStage

__all__ = [
    'RemoteTagIndex',
    'ChangelogGenerator',
    'render_changelog',
    'default_message',
    'TagPublisher',
    'PublishStage',
]
