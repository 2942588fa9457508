#!/usr/bin/env python3

import os
import json
import tomllib
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Dict, Any, Mapping

from .errors import ConfigError
from .infra.github_client import RepoIdentity, DEFAULT_API_URL

logger = logging.getLogger("autotag")

# GitHub Actions exposes each `with:` input as INPUT_<NAME>
INPUT_ENV_PREFIX = "INPUT_"

# Environment variables that feed the `github` section
CONTEXT_ENV = {
    'GITHUB_WORKSPACE': 'workspace',
    'GITHUB_SHA': 'sha',
    'GITHUB_REPOSITORY': 'repository',
    'GITHUB_API_URL': 'api_url',
    'GITHUB_OUTPUT': 'output_file',
}

# Inputs parsed as booleans; everything else stays text
BOOLEAN_INPUTS = {'dry_run'}

SECRET_MARKERS = ('TOKEN', 'SECRET', 'PASSWORD', 'KEY')


class ActionsFormatter(logging.Formatter):
    """
    Format records as GitHub Actions workflow commands.

    DEBUG/WARNING/ERROR become ``::debug::``/``::warning::``/``::error::``
    annotations; INFO is printed as-is.
    """

    COMMANDS = {
        logging.DEBUG: 'debug',
        logging.WARNING: 'warning',
        logging.ERROR: 'error',
        logging.CRITICAL: 'error',
    }

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        command = self.COMMANDS.get(record.levelno)
        if command is None:
            return message
        # Workflow commands end at the first newline unless it is escaped
        escaped = message.replace('%', '%25').replace('\r', '%0D').replace('\n', '%0A')
        return f"::{command}::{escaped}"


def running_in_actions(environ: Optional[Mapping[str, str]] = None) -> bool:
    """Check whether we are running inside a GitHub Actions job."""
    environ = os.environ if environ is None else environ
    return environ.get('GITHUB_ACTIONS', '').lower() == 'true'


def configure_logging(debug: bool = False, annotations: Optional[bool] = None) -> logging.Logger:
    """
    Configure the ``autotag`` logger with a single stderr handler.

    Args:
        debug: Enable DEBUG level
        annotations: Format as workflow commands (defaults to GITHUB_ACTIONS)

    Returns:
        The configured ``autotag`` logger
    """
    if annotations is None:
        annotations = running_in_actions()

    handler = logging.StreamHandler(sys.stderr)
    if annotations:
        handler.setFormatter(ActionsFormatter("%(message)s"))
    else:
        handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))

    for existing in list(logger.handlers):
        logger.removeHandler(existing)
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if debug else logging.INFO)
    logger.propagate = False
    return logger


def log_debug_context(workspace: Path, environ: Optional[Mapping[str, str]] = None) -> None:
    """Log environment variables and the workspace listing at DEBUG level."""
    if not logger.isEnabledFor(logging.DEBUG):
        return

    environ = os.environ if environ is None else environ
    lines = []
    for key in sorted(environ):
        value = environ[key]
        if any(marker in key.upper() for marker in SECRET_MARKERS):
            value = '***'
        lines.append(f"{key} :: {value}")
    logger.debug(" Available environment variables:\n -> " + "\n -> ".join(lines))

    try:
        entries = sorted(Path(workspace).iterdir(), key=lambda p: p.name)
    except OSError as e:
        logger.debug(f" Working Directory {workspace} is not readable: {e}")
        return

    listing = "\n".join(
        f"{'> ' if entry.is_dir() else '  - '}{entry.name}" for entry in entries
    )
    logger.debug(f" Working Directory: {workspace}:\n{listing}")


@dataclass
class ActionConfig:
    """
    Settings for one publish run.

    Inputs mirror the action's `with:` block; the remaining fields come
    from the GitHub Actions environment.
    """
    workspace: Path = field(default_factory=Path.cwd)
    root: str = './'
    strategy: str = 'package'
    regex_pattern: str = ''
    tag_prefix: str = ''
    tag_suffix: str = ''
    tag_message: str = ''
    commit_message_template: str = ''
    changelog_head: str = ''
    token: str = ''
    sha: str = ''
    repository: str = ''
    api_url: str = DEFAULT_API_URL
    output_file: str = ''
    dry_run: bool = False
    debug: bool = False

    @property
    def effective_strategy(self) -> str:
        """A non-blank pattern always selects the regex strategy."""
        if (self.regex_pattern or '').strip():
            return 'regex'
        return (self.strategy or 'package').strip().lower() or 'package'

    @property
    def version_root(self) -> Path:
        """File or directory to extract the version from."""
        return Path(self.workspace) / (self.root or './')

    @property
    def head(self) -> str:
        """Commit the changelog runs up to."""
        return self.changelog_head or self.sha or 'master'

    def repo_identity(self) -> RepoIdentity:
        return RepoIdentity.parse(self.repository)

    def validate(self) -> None:
        """
        Check that the GitHub context needed to publish is present.

        Raises:
            ConfigError: token, commit SHA or repository missing/invalid
        """
        if not self.token:
            raise ConfigError(
                "At least one of the following environment variables is required: "
                "GITHUB_TOKEN, INPUT_GITHUB_TOKEN"
            )
        if not self.sha:
            raise ConfigError("GITHUB_SHA is required to tag the triggering commit.")
        self.repo_identity()

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> 'ActionConfig':
        """Build from a merged configuration dictionary."""
        inputs = config.get('inputs', {})
        github = config.get('github', {})
        logging_cfg = config.get('logging', {})

        root = inputs.get('root') or inputs.get('package_root') or './'

        return cls(
            workspace=Path(github.get('workspace') or Path.cwd()),
            root=str(root),
            strategy=str(inputs.get('strategy') or 'package'),
            regex_pattern=str(inputs.get('regex_pattern') or ''),
            tag_prefix=str(inputs.get('tag_prefix') or ''),
            tag_suffix=str(inputs.get('tag_suffix') or ''),
            tag_message=str(inputs.get('tag_message') or ''),
            commit_message_template=str(inputs.get('commit_message_template') or ''),
            changelog_head=str(inputs.get('changelog_head') or ''),
            token=str(github.get('token') or ''),
            sha=str(github.get('sha') or ''),
            repository=str(github.get('repository') or ''),
            api_url=str(github.get('api_url') or DEFAULT_API_URL),
            output_file=str(github.get('output_file') or ''),
            dry_run=_typed('dry_run', inputs.get('dry_run', False)),
            debug=_typed('debug', logging_cfg.get('debug', False)),
        )


def get_default_config() -> Dict[str, Any]:
    """Get default configuration."""
    return {
        "inputs": {
            "root": "",
            "package_root": "",
            "strategy": "package",
            "regex_pattern": "",
            "tag_prefix": "",
            "tag_suffix": "",
            "tag_message": "",
            "commit_message_template": "",
            "changelog_head": "",
            "dry_run": False,
        },
        "github": {
            "token": "",
            "workspace": "",
            "sha": "",
            "repository": "",
            "api_url": DEFAULT_API_URL,
            "output_file": "",
        },
        "logging": {
            "debug": False,
        },
    }


def merge_configs(base_config, override_config):
    """
    Recursively merge two configuration dictionaries.

    Args:
        base_config (dict): Base configuration
        override_config (dict): Configuration to merge/override with

    Returns:
        dict: Merged configuration
    """
    merged = base_config.copy()

    for key, value in override_config.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            # Recursively merge nested dictionaries
            merged[key] = merge_configs(merged[key], value)
        else:
            # Override or add new key
            merged[key] = value

    return merged


TRUE_VALUES = ('true', 'yes', 'on', '1')
FALSE_VALUES = ('false', 'no', 'off', '0', '')


def _typed(name: str, value: Any) -> bool:
    """
    Parse a boolean input.

    Raises:
        ConfigError: the value is not a recognized boolean
    """
    if value is None or isinstance(value, bool):
        return bool(value)
    text = str(value).strip().lower()
    if text in TRUE_VALUES:
        return True
    if text in FALSE_VALUES:
        return False
    raise ConfigError(
        f'Input "{name}" must be a boolean (true/false, yes/no, on/off, 1/0), got "{value}".'
    )


def read_config_file(config_path: Path) -> Dict[str, Any]:
    """
    Read a JSON, TOML or YAML configuration file.

    Raises:
        ConfigError: the file is missing or cannot be parsed
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise ConfigError(f"Config file {config_path} does not exist.")

    try:
        if config_path.suffix.lower() in ['.toml']:
            with open(config_path, 'rb') as f:
                file_config = tomllib.load(f)
        elif config_path.suffix.lower() in ['.yaml', '.yml']:
            import yaml
            with open(config_path, 'r') as f:
                file_config = yaml.safe_load(f) or {}
        else:
            # Default to JSON format
            with open(config_path, 'r') as f:
                file_config = json.load(f)
    except Exception as e:
        raise ConfigError(f"Error loading config from {config_path}: {e}") from e

    if not isinstance(file_config, dict):
        raise ConfigError(f"Config file {config_path} must contain a mapping.")
    return file_config


def apply_env_overrides(config, environ: Optional[Mapping[str, str]] = None):
    """
    Apply environment variable overrides to configuration.

    INPUT_<NAME> variables set `inputs.<name>`; INPUT_GITHUB_TOKEN and
    GITHUB_TOKEN set the token; GITHUB_* context variables fill the
    `github` section. Empty values are ignored, so an input left blank in
    the workflow keeps the lower-precedence value.
    """
    environ = os.environ if environ is None else environ
    config = merge_configs(config, {})
    inputs = dict(config.get('inputs', {}))
    github = dict(config.get('github', {}))

    for env_key, value in environ.items():
        if not env_key.startswith(INPUT_ENV_PREFIX) or value == '':
            continue
        name = env_key[len(INPUT_ENV_PREFIX):].lower().replace('-', '_')
        if name == 'github_token':
            continue
        inputs[name] = _typed(name, value) if name in BOOLEAN_INPUTS else value

    token = environ.get('INPUT_GITHUB_TOKEN') or environ.get('GITHUB_TOKEN')
    if token:
        github['token'] = token

    for env_key, key in CONTEXT_ENV.items():
        if environ.get(env_key):
            github[key] = environ[env_key]

    if environ.get('RUNNER_DEBUG') == '1':
        config['logging'] = merge_configs(config.get('logging', {}), {'debug': True})

    config['inputs'] = inputs
    config['github'] = github
    return config


def load_config(
    config_path: Optional[Path] = None,
    overrides: Optional[Dict[str, Any]] = None,
    environ: Optional[Mapping[str, str]] = None
) -> ActionConfig:
    """
    Load settings for a publish run.

    Precedence, lowest first: defaults, config file, environment,
    ``overrides`` (explicit CLI options).
    """
    config = get_default_config()

    if config_path:
        config = merge_configs(config, read_config_file(config_path))
        logger.debug(f"Loaded config from {config_path}")

    config = apply_env_overrides(config, environ)

    if overrides:
        config = merge_configs(config, overrides)

    return ActionConfig.from_dict(config)
