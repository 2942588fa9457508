"""
autotag - Release tagging for GitHub repositories.

autotag reads a release version from the repository's own files, derives
a tag name from it and creates the annotated tag and its reference on
GitHub, at most once. New tags carry a changelog of the commits since the
previous tag.

Quick Start:
    from autotag import GitHubClient, RepoIdentity, TagPublisher, load_config

    config = load_config()
    client = GitHubClient(config.token, api_url=config.api_url)
    result = TagPublisher(client, config.repo_identity(), config).run()

    if result.created:
        print(result.tag.name, result.tag.sha)
    else:
        print(result.status.value, result.error)

Extraction strategies:
    package - "version" field of package.json
    docker  - LABEL version=... in a Dockerfile
    regex   - any file, user-supplied pattern
"""

__version__ = "1.0.0"

# Domain objects
from .domain import (
    Tag,
    VersionSource,
    ExtractedVersion,
    PublishResult,
    PublishStatus,
    classify_version,
)

# Infrastructure
from .infra import GitHubClient, GitHubAPIError, RepoIdentity

# Services
from .services import (
    RemoteTagIndex,
    ChangelogGenerator,
    TagPublisher,
)

# Strategies
from .strategies import PackageStrategy, RegexStrategy, DockerStrategy, get_strategy

# Configuration
from .config import ActionConfig, load_config

__all__ = [
    # Version
    "__version__",
    # Domain objects
    "Tag",
    "VersionSource",
    "ExtractedVersion",
    "PublishResult",
    "PublishStatus",
    "classify_version",
    # Infrastructure
    "GitHubClient",
    "GitHubAPIError",
    "RepoIdentity",
    # Services
    "RemoteTagIndex",
    "ChangelogGenerator",
    "TagPublisher",
    # Strategies
    "PackageStrategy",
    "RegexStrategy",
    "DockerStrategy",
    "get_strategy",
    # Configuration
    "ActionConfig",
    "load_config",
]
