"""Tests for the domain layer."""

import pytest
from datetime import datetime, timezone

from gitresource.domain import (
    SourceConfig, Payload, VersionRef, CommitRecord, TagRecord,
    MetadataField, MetadataRecord, format_commit_date,
)
from gitresource.exit_codes import ConfigError


class TestVersionRef:
    """Tests for VersionRef."""

    def test_from_dict(self):
        assert VersionRef.from_dict({"ref": "abc"}) == VersionRef("abc")

    def test_absent_or_empty(self):
        assert VersionRef.from_dict(None) is None
        assert VersionRef.from_dict({}) is None
        assert VersionRef.from_dict({"ref": ""}) is None
        assert VersionRef.from_dict({"ref": None}) is None

    def test_non_string_ref(self):
        with pytest.raises(ConfigError):
            VersionRef.from_dict({"ref": 42})

    def test_exact_equality(self):
        assert VersionRef("v1.0") != VersionRef("V1.0")
        assert VersionRef("abc") != VersionRef("abc ")

    def test_to_dict(self):
        assert VersionRef("v1").to_dict() == {"ref": "v1"}


class TestSourceConfig:
    """Tests for SourceConfig parsing."""

    def test_full_source(self):
        src = SourceConfig.from_dict({
            "uri": "git@example.com:team/app.git",
            "branch": "main",
            "tag_filter": "v.*",
            "paths": ["src/app.go", "go.mod"],
            "private_key": "KEY",
        })
        assert src.uri == "git@example.com:team/app.git"
        assert src.branch == "main"
        assert src.tag_filter == "v.*"
        assert src.paths == ("src/app.go", "go.mod")
        assert src.private_key == "KEY"

    def test_minimal_source(self):
        src = SourceConfig.from_dict({"uri": "https://example.com/app.git"})
        assert src.branch == ""
        assert src.tag_filter == ""
        assert src.paths == ()

    def test_single_path_string(self):
        src = SourceConfig.from_dict({"uri": "u", "paths": "src/app.go"})
        assert src.paths == ("src/app.go",)

    def test_missing_uri(self):
        with pytest.raises(ConfigError):
            SourceConfig.from_dict({"branch": "main"})

    def test_missing_source(self):
        with pytest.raises(ConfigError):
            SourceConfig.from_dict(None)

    def test_bad_paths(self):
        with pytest.raises(ConfigError):
            SourceConfig.from_dict({"uri": "u", "paths": [1, 2]})

    def test_default_branch(self):
        src = SourceConfig(uri="u")
        assert src.with_default_branch().branch == "master"
        assert src.with_default_branch("main").branch == "main"
        assert SourceConfig(uri="u", branch="dev").with_default_branch("main").branch == "dev"

    def test_to_dict_omits_private_key(self):
        d = SourceConfig(uri="u", branch="main", private_key="secret").to_dict()
        assert d == {"uri": "u", "branch": "main"}
        assert "secret" not in repr(SourceConfig(uri="u", private_key="secret"))


class TestPayload:
    """Tests for Payload parsing."""

    def test_with_version(self):
        payload = Payload.from_dict({"source": {"uri": "u"}, "version": {"ref": "abc"}})
        assert payload.last_seen == "abc"

    def test_without_version(self):
        payload = Payload.from_dict({"source": {"uri": "u"}})
        assert payload.version is None
        assert payload.last_seen is None

    def test_not_an_object(self):
        with pytest.raises(ConfigError):
            Payload.from_dict(["source"])


class TestRecords:
    """Tests for commit/tag/metadata records."""

    def test_commit_date_format(self):
        commit = CommitRecord(
            id="abc",
            timestamp=datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
            author="Ada",
            message="msg",
        )
        assert format_commit_date(commit.timestamp) == "2024-01-02 03:04:05 +0000"

    def test_tag_is_frozen(self):
        tag = TagRecord(name="v1", target_commit_id="abc", timestamp=10)
        with pytest.raises(AttributeError):
            tag.name = "v2"

    def test_metadata_get(self):
        record = MetadataRecord(fields=(MetadataField("commit", "abc"), MetadataField("tag", "")))
        assert record.commit == "abc"
        assert record.tag == ""
        with pytest.raises(KeyError):
            record.get("author")
