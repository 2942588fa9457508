"""
Domain layer for autotag.

Contains pure domain objects with no I/O beyond reading a version file:
- VersionSource / ExtractedVersion: input and output of version extraction
- Tag: the tag a run tries to create
- PublishResult: how a run ended, rendered as action outputs
"""

from .version import VersionSource, ExtractedVersion
from .tag import Tag, classify_version
from .result import PublishResult, PublishStatus, OUTPUT_NAMES

__all__ = [
    'VersionSource',
    'ExtractedVersion',
    'Tag',
    'classify_version',
    'PublishResult',
    'PublishStatus',
    'OUTPUT_NAMES',
]
