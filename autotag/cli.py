#!/usr/bin/env python3

import json
import os
import sys
from typing import Any, Dict, Optional

import click

from autotag import __version__
from autotag.config import load_config, configure_logging, log_debug_context, ActionConfig
from autotag.domain.result import PublishResult, PublishStatus
from autotag.domain.tag import Tag
from autotag.errors import AutotagError, SUCCESS
from autotag.infra.github_client import GitHubClient
from autotag.output import emit_result
from autotag.services.publisher import TagPublisher
from autotag.strategies import get_strategy


def _input_options(func):
    """Options shared by every command that resolves a version."""
    options = [
        click.option('--config', 'config_path', type=click.Path(dir_okay=False), default=None,
                     help='JSON, TOML or YAML settings file.'),
        click.option('--root', default=None,
                     help='File or directory holding the version (relative to the workspace).'),
        click.option('--strategy', default=None,
                     help="Extraction strategy: package, docker or regex."),
        click.option('--regex-pattern', default=None,
                     help='Pattern capturing the version; forces the regex strategy.'),
        click.option('--tag-prefix', default=None, help='Text placed before the version.'),
        click.option('--tag-suffix', default=None, help='Text placed after the version.'),
        click.option('--debug', is_flag=True, default=False, help='Enable debug logging.'),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _overrides(**values: Any) -> Dict[str, Any]:
    """Turn CLI options that were given into a config override dict."""
    inputs = {key: value for key, value in values.items() if value is not None}
    return {'inputs': inputs} if inputs else {}


def _load(config_path: Optional[str], debug: bool, **inputs: Any) -> ActionConfig:
    overrides = _overrides(**inputs)
    if debug:
        overrides['logging'] = {'debug': True}
    config = load_config(config_path, overrides=overrides)
    configure_logging(debug=config.debug)
    log_debug_context(config.workspace)
    return config


@click.group()
@click.version_option(version=__version__, prog_name="autotag")
def cli():
    """autotag - Tag a GitHub repository with the version found in its files.

    Reads the version from package.json, a Dockerfile label or any file
    matched by a pattern, and creates the tag on GitHub unless it already
    exists.
    """
    pass


@cli.command('publish')
@_input_options
@click.option('--tag-message', default=None, help='Explicit tag message (skips the changelog).')
@click.option('--commit-message-template', default=None,
              help='Changelog entry template: {{number}}, {{message}}, {{author}}, {{sha}}.')
@click.option('--changelog-head', default=None,
              help='Commit the changelog runs to (defaults to the triggering commit).')
@click.option('--dry-run', is_flag=True, default=False, help='Resolve everything but create nothing.')
@click.option('--pretty', is_flag=True, help='Show outputs as a table instead of JSON.')
@click.option('--strict', is_flag=True, help='Exit non-zero when no tag could be produced.')
@click.pass_context
def publish_cmd(ctx, config_path, root, strategy, regex_pattern, tag_prefix, tag_suffix, debug,
                tag_message, commit_message_template, changelog_head, dry_run, pretty, strict):
    """
    Create the release tag for the triggering commit.

    Outputs are always written, also when tagging fails; failures are
    reported in the log and through `tagcreated=no`.
    """
    configure_logging(debug=debug)
    output_file = os.environ.get('GITHUB_OUTPUT', '')

    try:
        config = _load(
            config_path,
            debug,
            root=root,
            strategy=strategy,
            regex_pattern=regex_pattern,
            tag_prefix=tag_prefix,
            tag_suffix=tag_suffix,
            tag_message=tag_message,
            commit_message_template=commit_message_template,
            changelog_head=changelog_head,
            dry_run=dry_run or None,
        )
        output_file = config.output_file
        config.validate()
        client = GitHubClient(config.token, api_url=config.api_url)
        result = TagPublisher(client, config.repo_identity(), config).run()
    except AutotagError as e:
        click.echo(f"Error: {e}", err=True)
        result = PublishResult(
            PublishStatus.FAILED,
            error=str(e),
            error_type=type(e).__name__,
            stage='start',
            exit_code=e.exit_code,
        )

    emit_result(result, output_file=output_file, pretty=pretty)

    if strict and result.failed:
        ctx.exit(result.exit_code)
    ctx.exit(SUCCESS)


@cli.command('resolve')
@_input_options
def resolve_cmd(config_path, root, strategy, regex_pattern, tag_prefix, tag_suffix, debug):
    """
    Print the version and tag name without contacting GitHub.
    """
    try:
        config = _load(
            config_path,
            debug,
            root=root,
            strategy=strategy,
            regex_pattern=regex_pattern,
            tag_prefix=tag_prefix,
            tag_suffix=tag_suffix,
        )
        extracted = get_strategy(config.effective_strategy, config.regex_pattern).extract(
            config.version_root
        )
    except AutotagError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(e.exit_code)

    data = extracted.to_dict()
    data['strategy'] = config.effective_strategy
    if extracted.found and extracted.version.strip():
        tag = Tag(config.tag_prefix, extracted.version, config.tag_suffix)
        data.update({
            'tagrequested': tag.name,
            'prerelease': tag.prerelease,
            'build': tag.build,
        })

    click.echo(json.dumps(data, ensure_ascii=False))


def main():
    cli()


if __name__ == "__main__":
    main()
