"""
Publish result domain objects for autotag.

The publisher returns a PublishResult instead of raising, so the caller
decides how a failure is surfaced. Every result renders the same set of
outputs; creation-related outputs are empty unless a tag was created.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Any, Optional

from ..errors import SUCCESS
from .tag import Tag

OUTPUT_NAMES = (
    'version',
    'tagrequested',
    'prerelease',
    'build',
    'tagname',
    'tagsha',
    'taguri',
    'tagmessage',
    'tagref',
    'tagcreated',
)


class PublishStatus(Enum):
    """How a publish run ended."""
    CREATED = "created"
    EXISTS = "exists"
    DRY_RUN = "dry_run"
    FAILED = "failed"


def _yes_no(value: bool) -> str:
    return 'yes' if value else 'no'


@dataclass
class PublishResult:
    """
    Outcome of one publish run.

    ``version`` and ``tag`` are filled in as far as the run got before it
    ended, so a failure after version resolution still reports the version.
    """
    status: PublishStatus
    version: Optional[str] = None
    tag: Optional[Tag] = None
    error: Optional[str] = None
    error_type: Optional[str] = None
    stage: Optional[str] = None
    exit_code: int = SUCCESS

    @property
    def created(self) -> bool:
        return self.status == PublishStatus.CREATED

    @property
    def failed(self) -> bool:
        return self.status == PublishStatus.FAILED

    def outputs(self) -> Dict[str, str]:
        """Render the action outputs, all as strings."""
        outputs = {name: '' for name in OUTPUT_NAMES}
        outputs['tagcreated'] = _yes_no(self.created)

        if self.version is not None:
            outputs['version'] = self.version

        if self.tag is not None:
            outputs['tagrequested'] = self.tag.name
            outputs['prerelease'] = _yes_no(self.tag.prerelease)
            outputs['build'] = _yes_no(self.tag.build)

            if self.status == PublishStatus.CREATED:
                outputs['tagname'] = self.tag.name
                outputs['tagsha'] = self.tag.sha
                outputs['taguri'] = self.tag.uri
                outputs['tagmessage'] = self.tag.message or ''
                outputs['tagref'] = self.tag.ref
            elif self.status == PublishStatus.DRY_RUN:
                outputs['tagmessage'] = self.tag.message or ''

        return outputs

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: Dict[str, Any] = {'status': self.status.value}
        result.update(self.outputs())
        if self.error:
            result['error'] = self.error
            result['error_type'] = self.error_type
            result['stage'] = self.stage
        return result
