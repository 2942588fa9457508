"""
Version extraction strategies.

Each strategy reads one file and pulls a version string out of it:
- package: the ``version`` field of package.json
- regex: a user-supplied pattern applied to any file
- docker: a ``LABEL version=...`` line in a Dockerfile

Strategies never trim what they capture. A pattern that does not match
yields ``ExtractedVersion(found=False)``; whether that is fatal is the
publisher's call. Missing or unreadable files always raise.
"""

import json
import logging
import re
from pathlib import Path
from typing import Optional, Dict, Type

from .domain.version import VersionSource, ExtractedVersion
from .errors import ConfigError, ExtractionError

logger = logging.getLogger(__name__)

# Flags applied to every user pattern
PATTERN_FLAGS = re.IGNORECASE | re.MULTILINE

DOCKER_LABEL_PATTERN = r'LABEL[\s\t]+version=[\t\s+]?["\']?([0-9.]+)["\']?'


class PackageStrategy:
    """Read the version from a package.json manifest."""

    name = 'package'
    filename = 'package.json'

    def extract(self, root: Path) -> ExtractedVersion:
        """
        Extract the manifest's version field.

        Args:
            root: package.json itself or the directory containing it

        Returns:
            ExtractedVersion, always found

        Raises:
            ExtractionError: file missing, not JSON, or without a version
        """
        root = Path(root)
        if root.is_dir():
            root = root / self.filename

        if not root.is_file():
            raise ExtractionError(f"{self.filename} does not exist at {root}.")

        source = VersionSource.read(root)
        try:
            data = json.loads(source.content)
        except json.JSONDecodeError as e:
            raise ExtractionError(f"{source.path} is not valid JSON: {e}") from e

        version = data.get('version') if isinstance(data, dict) else None
        if version is None or str(version) == '':
            raise ExtractionError(f"{source.path} does not declare a version.")

        return ExtractedVersion(version=str(version), source=source.path)


class RegexStrategy:
    """
    Read the version from any file with a user-supplied pattern.

    A named group ``version`` wins over the first unnamed group.
    """

    name = 'regex'
    filename: Optional[str] = None

    def __init__(self, pattern: str):
        if not pattern:
            raise ConfigError("The regex strategy requires a regex_pattern.")
        self.pattern = pattern
        try:
            self._compiled = re.compile(pattern, PATTERN_FLAGS)
        except re.error as e:
            raise ConfigError(f'Invalid regex_pattern "{pattern}": {e}') from e

    def extract(self, root: Path) -> ExtractedVersion:
        """
        Apply the pattern to the file at ``root``.

        Raises:
            ConfigError: ``root`` is a directory and no default filename applies
            ExtractionError: the file does not exist
        """
        source = VersionSource.read(root, self.filename, pattern=self.pattern)
        match = self._compiled.search(source.content)

        if match is None:
            logger.debug(f"No match for /{self.pattern}/ in {source.path}")
            return ExtractedVersion(source=source.path)

        version = None
        if 'version' in self._compiled.groupindex:
            version = match.group('version')
        if version is None and self._compiled.groups >= 1:
            version = match.group(1)

        return ExtractedVersion(version=version, source=source.path)


class DockerStrategy(RegexStrategy):
    """Read the version from a ``LABEL version=`` line in a Dockerfile."""

    name = 'docker'
    filename = 'Dockerfile'

    def __init__(self):
        super().__init__(DOCKER_LABEL_PATTERN)


STRATEGIES: Dict[str, Type] = {
    PackageStrategy.name: PackageStrategy,
    RegexStrategy.name: RegexStrategy,
    DockerStrategy.name: DockerStrategy,
}


def get_strategy(name: str, pattern: Optional[str] = None):
    """
    Build the strategy registered under ``name``.

    Args:
        name: One of ``package``, ``regex``, ``docker``
        pattern: Pattern for the regex strategy

    Raises:
        ConfigError: unknown strategy name or bad pattern
    """
    key = (name or '').strip().lower()
    strategy_cls = STRATEGIES.get(key)

    if strategy_cls is RegexStrategy:
        return RegexStrategy(pattern or '')
    if strategy_cls is not None:
        return strategy_cls()

    raise ConfigError(
        f'"{name}" is not a recognized tagging strategy. Choose from: '
        f"'package' (package.json), 'docker' (uses Dockerfile), "
        f"or 'regex' (regular expression)."
    )
