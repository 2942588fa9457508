"""
Tag domain object for autotag.

A Tag is assembled from three independently trimmed parts:

    Tag("v", "1.2.3", "-rc")   -> name "v1.2.3-rc"
    Tag(" v ", "1.2.3\\n", "")  -> name "v1.2.3"

No separator is ever inserted; any separator belongs in the prefix or
suffix. The name is always recomputed from the parts.

Everything that comes from GitHub (existence, message, sha, uri, ref) is
filled in once during a publish run and never recomputed afterwards.
"""

import re
from typing import Optional, Tuple, Dict, Any

# At least five digits/dots, then a qualifier
PRERELEASE_PATTERN = re.compile(r'[0-9.]{5,}-[\w.-]+', re.IGNORECASE)
BUILD_PATTERN = re.compile(r'[0-9.]{5,}(?:-[\w.-]+)?\+[\w.-]+', re.IGNORECASE)


def classify_version(version: str) -> Tuple[bool, bool]:
    """
    Classify raw version text as prerelease and/or build.

    The two flags are independent:
        "1.2.3"          -> (False, False)
        "1.2.3-beta"     -> (True, False)
        "1.2.3+001"      -> (False, True)
        "1.2.3-beta+001" -> (True, True)

    Args:
        version: Version text, untrimmed

    Returns:
        Tuple of (prerelease, build)
    """
    return (
        PRERELEASE_PATTERN.search(version) is not None,
        BUILD_PATTERN.search(version) is not None,
    )


class Tag:
    """
    The tag a publish run tries to create.

    Attributes:
        prefix: Literal text placed before the version
        version: Version text as extracted
        suffix: Literal text placed after the version
        exists: None until checked against GitHub, then True/False
    """

    def __init__(self, prefix: str, version: str, suffix: str):
        self._prefix = prefix or ''
        self._version = version or ''
        self._suffix = suffix or ''
        self._message: Optional[str] = None
        self._exists: Optional[bool] = None
        self._sha = ''
        self._uri = ''
        self._ref = ''

    @property
    def prefix(self) -> str:
        return self._prefix

    @property
    def version(self) -> str:
        return self._version

    @property
    def suffix(self) -> str:
        return self._suffix

    @property
    def name(self) -> str:
        """Trimmed prefix + version + suffix."""
        return f"{self._prefix.strip()}{self._version.strip()}{self._suffix.strip()}"

    @property
    def prerelease(self) -> bool:
        return classify_version(self._version)[0]

    @property
    def build(self) -> bool:
        return classify_version(self._version)[1]

    @property
    def message(self) -> Optional[str]:
        """Message set explicitly or resolved during publishing."""
        return self._message

    @message.setter
    def message(self, value: Optional[str]) -> None:
        # Blank values never replace a message
        if value and value.strip():
            self._message = value

    @property
    def has_message(self) -> bool:
        return self._message is not None

    @property
    def exists(self) -> Optional[bool]:
        return self._exists

    @exists.setter
    def exists(self, value: bool) -> None:
        if self._exists is None:
            self._exists = bool(value)

    @property
    def sha(self) -> str:
        return self._sha

    @property
    def uri(self) -> str:
        return self._uri

    @property
    def ref(self) -> str:
        return self._ref

    @property
    def ref_name(self) -> str:
        """Fully qualified reference for this tag."""
        return f"refs/tags/{self.name}"

    def record_tag_object(self, sha: str) -> None:
        """Store the identifier of the created annotated tag object."""
        self._sha = sha or ''

    def record_reference(self, ref: str, uri: str) -> None:
        """Store the created reference name and its API location."""
        self._ref = ref or ''
        self._uri = uri or ''

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'name': self.name,
            'prefix': self._prefix,
            'version': self._version,
            'suffix': self._suffix,
            'prerelease': self.prerelease,
            'build': self.build,
            'message': self._message,
            'exists': self._exists,
            'sha': self._sha,
            'uri': self._uri,
            'ref': self._ref,
        }

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"Tag({self.name!r})"
