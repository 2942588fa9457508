"""
Tag publishing service for autotag.

Runs the whole pipeline for one commit, strictly in order:

    resolve version -> name tag -> check existence -> prepare message
        -> create tag object -> create reference

An existing tag ends the run early and is not an error. Any failure ends
the run with a FAILED result; ``run()`` itself never raises.
"""

import logging
from enum import Enum
from typing import Optional

from ..config import ActionConfig
from ..domain.result import PublishResult, PublishStatus
from ..domain.tag import Tag
from ..errors import ExtractionError, GENERAL_ERROR
from ..infra.github_client import GitHubClient, RepoIdentity
from ..strategies import get_strategy
from .changelog import ChangelogGenerator, default_message
from .tag_index import RemoteTagIndex

logger = logging.getLogger(__name__)


class PublishStage(Enum):
    """Step the publisher has reached."""
    START = "start"
    VERSION_RESOLVED = "version_resolved"
    TAG_NAMED = "tag_named"
    EXISTENCE_CHECKED = "existence_checked"
    MESSAGE_PREPARED = "message_prepared"
    TAG_OBJECT_CREATED = "tag_object_created"
    REFERENCE_CREATED = "reference_created"


class TagPublisher:
    """
    Create a release tag for the triggering commit, at most once.

    Example:
        client = GitHubClient(config.token, config.api_url)
        publisher = TagPublisher(client, config.repo_identity(), config)
        result = publisher.run()
        if result.created:
            print(result.tag.name)
    """

    def __init__(self, client: GitHubClient, repo: RepoIdentity, config: ActionConfig):
        """
        Initialize TagPublisher.

        Args:
            client: Authenticated GitHub client
            repo: Repository to tag
            config: Inputs and commit context for this run
        """
        self.client = client
        self.repo = repo
        self.config = config
        self.index = RemoteTagIndex(client, repo)
        self.changelog = ChangelogGenerator(
            client,
            repo,
            self.index,
            template=config.commit_message_template,
            head=config.head,
        )
        self.stage = PublishStage.START
        self.version: Optional[str] = None
        self.tag: Optional[Tag] = None

    def _advance(self, stage: PublishStage) -> None:
        self.stage = stage
        logger.debug(f"Stage: {stage.value}")

    def resolve_version(self) -> str:
        """
        Extract the version with the configured strategy.

        Raises:
            ConfigError: unknown strategy, bad pattern, directory for regex
            ExtractionError: file problems or no version found
        """
        strategy_name = self.config.effective_strategy
        pattern = self.config.regex_pattern
        strategy = get_strategy(strategy_name, pattern)

        described = f" using the {strategy_name} extraction"
        if strategy_name == 'regex':
            described += f" with the /{pattern}/im pattern"
        described += '.'

        extracted = strategy.extract(self.config.version_root)
        if not extracted.found or not extracted.version.strip():
            raise ExtractionError(f"No version identified{described}")

        logger.warning(f'Recognized "{extracted.version}"{described}')
        return extracted.version

    def prepare_message(self, tag: Tag) -> str:
        """Use the explicit tag_message if set, otherwise the changelog."""
        tag.message = (self.config.tag_message or '').strip()
        tag.message = self.changelog.get_message(tag)
        if not tag.has_message:
            tag.message = default_message(tag.version)
        return tag.message

    def push(self, tag: Tag) -> None:
        """
        Create the annotated tag object and its reference.

        A reference failure leaves the tag object in place; it is logged
        and the error is re-raised.
        """
        new_tag = self.client.create_tag(
            self.repo,
            tag=tag.name,
            message=tag.message,
            sha=self.config.sha,
        )
        tag.record_tag_object(new_tag.get('sha', ''))
        self._advance(PublishStage.TAG_OBJECT_CREATED)
        logger.warning(f"Created new tag: {new_tag.get('tag', tag.name)}")

        ref = tag.ref_name
        try:
            new_ref = self.client.create_ref(self.repo, ref=ref, sha=tag.sha)
        except Exception:
            logger.error(
                f"Tag object {tag.sha} was created but {ref} could not be created "
                f"(owner={self.repo.owner}, repo={self.repo.name})."
            )
            raise

        tag.record_reference(new_ref.get('ref', ''), new_ref.get('url', ''))
        self._advance(PublishStage.REFERENCE_CREATED)
        logger.warning(f"Reference {tag.ref} available at {tag.uri}")

    def publish(self) -> PublishResult:
        """
        Run the pipeline, raising on failure.

        Returns:
            PublishResult with status CREATED, EXISTS or DRY_RUN
        """
        self.version = self.resolve_version()
        self._advance(PublishStage.VERSION_RESOLVED)

        tag = Tag(self.config.tag_prefix, self.version, self.config.tag_suffix)
        self.tag = tag
        self._advance(PublishStage.TAG_NAMED)
        logger.warning(f"Attempting to create {tag.name} tag.")

        tag.exists = self.index.exists(tag.name)
        self._advance(PublishStage.EXISTENCE_CHECKED)
        if tag.exists:
            logger.warning(f'"{tag.name}" tag already exists.')
            return PublishResult(PublishStatus.EXISTS, version=self.version, tag=tag)

        self.prepare_message(tag)
        self._advance(PublishStage.MESSAGE_PREPARED)

        if self.config.dry_run:
            logger.warning(f"Dry run: {tag.name} would be created at {self.config.sha}.")
            return PublishResult(PublishStatus.DRY_RUN, version=self.version, tag=tag)

        self.push(tag)
        return PublishResult(PublishStatus.CREATED, version=self.version, tag=tag)

    def run(self) -> PublishResult:
        """
        Run the pipeline and convert any failure into a FAILED result.

        Returns:
            PublishResult; never raises
        """
        try:
            return self.publish()
        except Exception as e:
            logger.error(str(e))
            logger.debug("Publish failed", exc_info=True)
            return PublishResult(
                PublishStatus.FAILED,
                version=self.version,
                tag=self.tag,
                error=str(e),
                error_type=type(e).__name__,
                stage=self.stage.value,
                exit_code=getattr(e, 'exit_code', GENERAL_ERROR),
            )
