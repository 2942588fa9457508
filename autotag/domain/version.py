"""
Version source domain objects for autotag.

A VersionSource is one file read from disk; an ExtractedVersion is what a
strategy found in it. Neither does any lookup logic of its own.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Dict, Any

from ..errors import ConfigError, ExtractionError


@dataclass(frozen=True)
class VersionSource:
    """
    A file read once for version extraction.

    Attributes:
        path: Absolute path of the file that was read
        content: Raw text content
        pattern: Pattern the content will be matched against, if any
    """

    path: Path
    content: str
    pattern: Optional[str] = None

    @classmethod
    def read(
        cls,
        root: Path,
        default_filename: Optional[str] = None,
        pattern: Optional[str] = None
    ) -> 'VersionSource':
        """
        Resolve ``root`` to a regular file and read it.

        Args:
            root: File or directory to read from
            default_filename: Appended when ``root`` is a directory. When
                None, a directory is a configuration error.
            pattern: Pattern to carry along with the content

        Returns:
            VersionSource with the file content loaded

        Raises:
            ConfigError: ``root`` is a directory and no filename applies
            ExtractionError: the resolved file does not exist
        """
        path = Path(root).resolve()

        if path.is_dir():
            if default_filename is None:
                raise ConfigError(
                    f"{path} is a directory. The regex tag identification "
                    f"strategy requires a file."
                )
            path = path / default_filename

        if not path.is_file():
            raise ExtractionError(f'"{path}" does not exist.')

        try:
            content = path.read_text(encoding='utf-8')
        except (OSError, UnicodeDecodeError) as e:
            raise ExtractionError(f"Could not read {path}: {e}") from e

        return cls(path=path, content=content, pattern=pattern)


@dataclass(frozen=True)
class ExtractedVersion:
    """
    Result of running an extraction strategy.

    The version text is kept exactly as captured; trimming happens when
    the tag name is built.
    """

    version: Optional[str] = None
    source: Optional[Path] = None

    @property
    def found(self) -> bool:
        """True when a version was located."""
        return self.version is not None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'version': self.version,
            'found': self.found,
            'source': str(self.source) if self.source else None,
        }
