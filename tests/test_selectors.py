"""Tests for TagSelector and PathFilter."""

import pytest
from unittest.mock import MagicMock

from gitresource.domain.records import TagRecord
from gitresource.exit_codes import ConfigError
from gitresource.infra.git_client import GitClient
from gitresource.services.path_filter import PathFilter
from gitresource.services.tag_selector import TagSelector, compile_tag_filter, translate_posix_classes


def tag(name, when):
    return TagRecord(name=name, target_commit_id="abc", timestamp=when)


class TestTagSelector:
    """Tests for tag filtering and ordering."""

    def test_select_filters_by_regex(self):
        git = MagicMock(spec=GitClient)
        git.list_tags.return_value = [tag("v1.0", 1), tag("latest", 2), tag("v2.0-rc1", 3)]
        selector = TagSelector(git, "/repo")

        assert [t.name for t in selector.select(r"^v\d+\.\d+$")] == ["v1.0"]
        assert [t.name for t in selector.select("v")] == ["v1.0", "v2.0-rc1"]
        git.list_tags.assert_called_with("/repo")

    def test_compile_rejects_bad_pattern(self):
        with pytest.raises(ConfigError) as exc:
            compile_tag_filter("[unclosed")
        assert "tag_filter" in str(exc.value)

    def test_latest_empty(self):
        assert TagSelector.latest([]) is None

    def test_latest_picks_max_timestamp(self):
        tags = [tag("b", 20), tag("c", 5), tag("a", 10)]
        assert TagSelector.latest(tags).name == "b"

    def test_latest_tie_goes_to_last_listed(self):
        tags = [tag("first", 10), tag("second", 10), tag("old", 1)]
        assert TagSelector.latest(tags).name == "second"

    def test_since_includes_last_seen_first(self):
        tags = [tag("v1", 1), tag("v2", 2), tag("v3", 3)]
        assert TagSelector.since(tags, "v2") == ["v2", "v3"]

    def test_since_unknown_returns_all_oldest_first(self):
        tags = [tag("v3", 3), tag("v1", 1), tag("v2", 2)]
        assert TagSelector.since(tags, "v0") == ["v1", "v2", "v3"]

    def test_since_ties_treat_last_listed_as_newest(self):
        tags = [tag("a", 10), tag("b", 10)]
        assert TagSelector.latest(tags).name == "b"
        assert TagSelector.since(tags, "a") == ["a", "b"]
        assert TagSelector.since(tags, "b") == ["b"]

    def test_since_never_reports_older_tag_after_latest(self):
        tags = [tag("v1", 5), tag("a", 10), tag("b", 10)]
        newest = TagSelector.latest(tags).name
        assert TagSelector.since(tags, newest) == [newest]


class TestTagFilter:
    """Tests for POSIX extended regex tag filters."""

    @pytest.mark.parametrize("pattern,name,matches", [
        ("^v[[:digit:]]+$", "v12", True),
        ("^v[[:digit:]]+$", "v1a", False),
        ("^[[:alpha:]]+-[[:xdigit:]]+$", "build-ff09", True),
        ("^[[:upper:]]", "release", False),
        ("[^[:space:]]$", "v1 ", False),
        ("^v[.[:digit:]]+$", "v1.2.3", True),
        (r"^v\d+\.\d+$", "v1.0", True),
    ])
    def test_patterns(self, pattern, name, matches):
        assert bool(compile_tag_filter(pattern).search(name)) is matches

    def test_literal_bracket_inside_class(self):
        assert compile_tag_filter("^[[a]+$").search("[a[")

    def test_unknown_class_is_config_error(self):
        with pytest.raises(ConfigError) as exc:
            compile_tag_filter("v[[:nope:]]")
        assert "nope" in str(exc.value)

    def test_translation(self):
        assert translate_posix_classes("v[[:digit:]]+") == "v[0-9]+"
        assert translate_posix_classes("[]a]") == "[\\]a]"
        assert translate_posix_classes("[:digit:]") == "[:digit:]"


class TestPathFilter:
    """Tests for watched path gating."""

    def test_touched(self):
        git = MagicMock(spec=GitClient)
        git.changed_paths.return_value = ["README.md", "src/app.go"]
        path_filter = PathFilter(git, "/repo")

        assert path_filter.touched("old", "new", ["src/app.go"])
        git.changed_paths.assert_called_once_with("/repo", "old", "new")

    def test_not_touched(self):
        git = MagicMock(spec=GitClient)
        git.changed_paths.return_value = ["docs/readme.md"]
        assert not PathFilter(git, "/repo").touched("old", "new", ["src/app.go", "go.mod"])

    def test_no_changes(self):
        git = MagicMock(spec=GitClient)
        git.changed_paths.return_value = []
        assert not PathFilter(git, "/repo").touched("old", "new", ["src/app.go"])

    def test_directory_is_not_a_prefix_match(self):
        git = MagicMock(spec=GitClient)
        git.changed_paths.return_value = ["src/app.go"]
        assert not PathFilter(git, "/repo").touched("old", "new", ["src/"])
