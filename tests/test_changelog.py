"""
Tests for changelog generation.

Tests cover:
- Template rendering and placeholder substitution
- Built-in numbered format
- Explicit message short-circuit
- Degradation to "Version X" on every failure path
"""

import logging

import pytest

from autotag.domain.tag import Tag
from autotag.infra.github_client import GitHubAPIError
from autotag.services.changelog import (
    ChangelogGenerator,
    render_changelog,
    render_commit,
    default_message,
)
from autotag.services.tag_index import RemoteTagIndex

PREVIOUS_TAGS = [
    {"name": "v1.1.0", "commit": {"sha": "bbb"}},
    {"name": "v1.0.0", "commit": {"sha": "aaa"}},
]


@pytest.fixture
def commits(make_commit):
    return [
        make_commit("Add widgets", "sha1", "alice"),
        make_commit("Fix gears", "sha2"),
    ]


def _generator(client, repo, template='', head='headsha'):
    return ChangelogGenerator(client, repo, RemoteTagIndex(client, repo), template=template, head=head)


class TestRenderCommit:
    """Tests for template rendering."""

    def test_all_placeholders(self, make_commit):
        """Test every placeholder is substituted."""
        commit = make_commit("Add widgets", "abc123", "alice")
        rendered = render_commit("{{number}}|{{message}}|{{author}}|{{sha}}", 3, commit)
        assert rendered == "3|Add widgets|alice|abc123\n"

    def test_placeholders_case_and_spacing(self, make_commit):
        """Test placeholders are case-insensitive and allow one space."""
        commit = make_commit("Msg", "abc", "bob")
        rendered = render_commit("{{ NUMBER }} {{Message}} {{ sha}}", 1, commit)
        assert rendered == "1 Msg abc\n"

    def test_missing_author_is_empty(self, make_commit):
        """Test commits without a linked user render an empty author."""
        commit = make_commit("Msg", "abc")
        assert render_commit("[{{author}}]", 1, commit) == "[]\n"

    def test_output_trimmed(self, make_commit):
        """Test the rendering is trimmed before the newline is added."""
        commit = make_commit("Msg", "abc")
        assert render_commit("  {{message}}  \n", 1, commit) == "Msg\n"

    def test_replacement_text_is_literal(self, make_commit):
        """Test backslashes in commit messages are not treated as group references."""
        commit = make_commit(r"Fix \1 and \g<0>", "abc")
        assert render_commit("{{message}}", 1, commit) == "Fix \\1 and \\g<0>\n"


class TestRenderChangelog:
    """Tests for rendering a commit range."""

    def test_template_two_commits(self, commits):
        """Test a template yields one line per commit, in order."""
        output = render_changelog(commits, "{{number}}: {{message}} ({{author}})")
        assert output.splitlines() == ["1: Add widgets (alice)", "2: Fix gears ()"]
        assert "{{" not in output

    def test_default_format(self, commits):
        """Test the built-in numbered list."""
        output = render_changelog(commits)
        assert output == (
            "\n1) Add widgets (alice)\n(SHA: sha1)\n"
            "\n"
            "2) Fix gears\n(SHA: sha2)\n"
        )

    def test_blank_template_uses_default(self, commits):
        """Test a whitespace-only template is treated as unset."""
        assert render_changelog(commits, "   ") == render_changelog(commits)


class TestChangelogGenerator:
    """Tests for ChangelogGenerator.get_message()."""

    def test_explicit_message_returned(self, client, repo):
        """Test an explicit message skips all remote calls."""
        tag = Tag("v", "1.2.0", "")
        tag.message = "Hand written"
        assert _generator(client, repo).get_message(tag) == "Hand written"
        client.list_tags.assert_not_called()
        client.compare_commits.assert_not_called()

    def test_no_tags_default_message(self, client, repo):
        """Test the first release gets the default message."""
        tag = Tag("v", "1.0.0", "")
        assert _generator(client, repo).get_message(tag) == "Version 1.0.0"
        client.compare_commits.assert_not_called()

    def test_compares_latest_tag_to_head(self, client, repo, commits):
        """Test the range starts at the first listed tag."""
        client.list_tags.return_value = PREVIOUS_TAGS
        client.compare_commits.return_value = {"commits": commits}
        tag = Tag("v", "1.2.0", "")

        message = _generator(client, repo, template="{{message}}").get_message(tag)

        client.compare_commits.assert_called_once_with(repo, "v1.1.0", "headsha")
        assert message == "Add widgets\nFix gears\n"

    def test_compare_failure_degrades(self, client, repo, caplog):
        """Test a failed comparison falls back without raising."""
        client.list_tags.return_value = PREVIOUS_TAGS
        client.compare_commits.side_effect = GitHubAPIError("404", status_code=404)
        tag = Tag("v", "1.2.0", "")

        with caplog.at_level(logging.WARNING):
            message = _generator(client, repo).get_message(tag)

        assert message == "Version 1.2.0"
        assert "Failed to generate changelog" in caplog.text

    def test_listing_failure_degrades(self, client, repo):
        """Test a failed tag listing falls back without raising."""
        client.list_tags.side_effect = GitHubAPIError("boom")
        assert _generator(client, repo).get_message(Tag("", "2.0.0", "")) == "Version 2.0.0"

    def test_empty_range_degrades(self, client, repo):
        """Test an empty commit range falls back to the default."""
        client.list_tags.return_value = PREVIOUS_TAGS
        client.compare_commits.return_value = {"commits": []}
        assert _generator(client, repo).get_message(Tag("", "2.0.0", "")) == "Version 2.0.0"

    def test_malformed_comparison_degrades(self, client, repo):
        """Test unexpected response shapes fall back."""
        client.list_tags.return_value = PREVIOUS_TAGS
        client.compare_commits.return_value = {"commits": [None]}
        assert _generator(client, repo).get_message(Tag("", "2.0.0", "")) == "Version 2.0.0"

    def test_default_head(self, client, repo):
        """Test the head falls back to master."""
        generator = ChangelogGenerator(client, repo, RemoteTagIndex(client, repo))
        assert generator.head == "master"

    def test_default_message(self):
        """Test the fallback message format."""
        assert default_message("3.0.0") == "Version 3.0.0"
