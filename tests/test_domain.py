"""Tests for the domain layer."""

import pytest
from pathlib import Path

from autotag.domain import (
    Tag,
    ExtractedVersion,
    PublishResult,
    PublishStatus,
    OUTPUT_NAMES,
    classify_version,
)


class TestTagName:
    """Tests for tag name assembly."""

    def test_concatenates_parts_in_order(self):
        """Test prefix, version and suffix are joined without separators."""
        tag = Tag("v", "1.2.3", "-rc")
        assert tag.name == "v1.2.3-rc"

    def test_trims_each_part(self):
        """Test each part is trimmed independently."""
        tag = Tag("  release-", " 2.0.0\n", " \t")
        assert tag.name == "release-2.0.0"

    def test_no_prefix_or_suffix(self):
        """Test a bare version is its own name."""
        assert Tag("", "1.0.0", "").name == "1.0.0"

    def test_none_parts_are_empty(self):
        """Test missing prefix/suffix behave as empty strings."""
        assert Tag(None, "1.0.0", None).name == "1.0.0"

    def test_name_keeps_inner_whitespace(self):
        """Test only surrounding whitespace is removed."""
        assert Tag("my tag ", "1.0.0", "").name == "my tag1.0.0"

    def test_raw_version_kept(self):
        """Test the untrimmed version is preserved on the tag."""
        tag = Tag("v", " 1.0.0 ", "")
        assert tag.version == " 1.0.0 "

    def test_ref_name(self):
        """Test the reference name."""
        assert Tag("v", "1.0.0", "").ref_name == "refs/tags/v1.0.0"

    def test_str_and_repr(self):
        """Test string representations."""
        tag = Tag("v", "1.0.0", "")
        assert str(tag) == "v1.0.0"
        assert repr(tag) == "Tag('v1.0.0')"


class TestClassifyVersion:
    """Tests for prerelease/build classification."""

    @pytest.mark.parametrize("version,expected", [
        ("1.2.3", (False, False)),
        ("1.2.3-beta", (True, False)),
        ("1.2.3+001", (False, True)),
        ("1.2.3-beta+001", (True, True)),
        ("1.2.3-beta-2+001", (True, True)),
        ("1.2.3+build-7", (False, True)),
        ("10.20.30-rc.1", (True, False)),
        ("1.0-rc", (False, False)),
    ])
    def test_classification(self, version, expected):
        """Test prerelease and build flags are independent."""
        assert classify_version(version) == expected

    def test_tag_properties(self):
        """Test Tag exposes the same classification."""
        tag = Tag("v", "1.2.3-beta+001", "")
        assert tag.prerelease is True
        assert tag.build is True

    def test_classification_uses_raw_version(self):
        """Test whitespace around the version does not change the flags."""
        tag = Tag("", " 1.2.3-alpha ", "")
        assert tag.prerelease is True
        assert tag.build is False


class TestTagState:
    """Tests for message, existence and creation fields."""

    def test_message_initially_unset(self):
        """Test a new tag has no message."""
        tag = Tag("v", "1.0.0", "")
        assert tag.message is None
        assert tag.has_message is False

    def test_message_setter_accepts_text(self):
        """Test a non-empty message is stored."""
        tag = Tag("v", "1.0.0", "")
        tag.message = "First release"
        assert tag.message == "First release"

    @pytest.mark.parametrize("blank", ["", "   ", "\n\t", None])
    def test_message_setter_ignores_blank(self, blank):
        """Test blank values never replace a message."""
        tag = Tag("v", "1.0.0", "")
        tag.message = "Keep me"
        tag.message = blank
        assert tag.message == "Keep me"

    def test_exists_set_once(self):
        """Test existence is resolved once and then fixed."""
        tag = Tag("v", "1.0.0", "")
        assert tag.exists is None
        tag.exists = False
        tag.exists = True
        assert tag.exists is False

    def test_creation_fields_empty_by_default(self):
        """Test sha, uri and ref start empty."""
        tag = Tag("v", "1.0.0", "")
        assert (tag.sha, tag.uri, tag.ref) == ("", "", "")

    def test_record_creation(self):
        """Test tag object and reference are recorded."""
        tag = Tag("v", "1.0.0", "")
        tag.record_tag_object("abc123")
        tag.record_reference("refs/tags/v1.0.0", "https://api.github.com/repos/o/r/git/refs/tags/v1.0.0")
        assert tag.sha == "abc123"
        assert tag.ref == "refs/tags/v1.0.0"
        assert tag.uri.endswith("/git/refs/tags/v1.0.0")

    def test_to_dict(self):
        """Test dictionary conversion."""
        data = Tag("v", "1.0.0-rc", "").to_dict()
        assert data['name'] == "v1.0.0-rc"
        assert data['prerelease'] is True
        assert data['exists'] is None


class TestExtractedVersion:
    """Tests for ExtractedVersion."""

    def test_found(self):
        """Test found reflects a captured version."""
        assert ExtractedVersion("1.0.0").found is True
        assert ExtractedVersion().found is False

    def test_empty_string_counts_as_found(self):
        """Test an empty capture is still a match."""
        assert ExtractedVersion("").found is True

    def test_to_dict(self):
        """Test dictionary conversion."""
        data = ExtractedVersion("1.0.0", source=Path("/w/package.json")).to_dict()
        assert data == {'version': '1.0.0', 'found': True, 'source': '/w/package.json'}


class TestPublishResult:
    """Tests for PublishResult outputs."""

    def _created_tag(self):
        tag = Tag("v", "1.2.3", "")
        tag.message = "Version 1.2.3"
        tag.record_tag_object("tagsha")
        tag.record_reference("refs/tags/v1.2.3", "https://example/ref")
        return tag

    def test_outputs_always_complete(self):
        """Test every output is present even for an empty failure."""
        outputs = PublishResult(PublishStatus.FAILED).outputs()
        assert tuple(outputs) == OUTPUT_NAMES
        assert outputs['tagcreated'] == 'no'
        assert all(outputs[name] == '' for name in OUTPUT_NAMES if name != 'tagcreated')

    def test_created_outputs(self):
        """Test a created tag reports every field."""
        result = PublishResult(PublishStatus.CREATED, version="1.2.3", tag=self._created_tag())
        outputs = result.outputs()
        assert outputs == {
            'version': '1.2.3',
            'tagrequested': 'v1.2.3',
            'prerelease': 'no',
            'build': 'no',
            'tagname': 'v1.2.3',
            'tagsha': 'tagsha',
            'taguri': 'https://example/ref',
            'tagmessage': 'Version 1.2.3',
            'tagref': 'refs/tags/v1.2.3',
            'tagcreated': 'yes',
        }

    def test_exists_outputs(self):
        """Test an existing tag leaves creation outputs empty."""
        tag = Tag("v", "1.2.3", "")
        tag.exists = True
        outputs = PublishResult(PublishStatus.EXISTS, version="1.2.3", tag=tag).outputs()
        assert outputs['tagrequested'] == 'v1.2.3'
        assert outputs['tagname'] == ''
        assert outputs['tagsha'] == ''
        assert outputs['tagcreated'] == 'no'

    def test_failed_hides_partial_creation(self):
        """Test a failure after the tag object reports no creation outputs."""
        tag = Tag("v", "1.2.3", "")
        tag.record_tag_object("orphan")
        result = PublishResult(PublishStatus.FAILED, version="1.2.3", tag=tag, error="boom")
        outputs = result.outputs()
        assert outputs['tagsha'] == ''
        assert outputs['version'] == '1.2.3'
        assert result.tag.sha == 'orphan'

    def test_to_dict_includes_error(self):
        """Test errors are serialized with their stage."""
        result = PublishResult(
            PublishStatus.FAILED, error="boom", error_type="APIError", stage="tag_named"
        )
        data = result.to_dict()
        assert data['status'] == 'failed'
        assert data['error'] == 'boom'
        assert data['stage'] == 'tag_named'
