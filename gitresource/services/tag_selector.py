"""
Tag selection for the tag-filter policy.

Filters the repository's tags by a POSIX extended regular expression and
orders them by their timestamp. Among tags sharing a timestamp the one
listed last by the backend (ref-name order for GitClient) is the newest,
both for `latest` and for the walk in `since`.
"""

import re
import logging
from typing import List, Optional

from ..domain.records import TagRecord
from ..exit_codes import ConfigError
from ..infra.git_client import GitBackend

logger = logging.getLogger(__name__)

POSIX_CLASSES = {
    'alnum': '0-9A-Za-z',
    'alpha': 'A-Za-z',
    'blank': ' \\t',
    'cntrl': '\\x00-\\x1f\\x7f',
    'digit': '0-9',
    'graph': '!-~',
    'lower': 'a-z',
    'print': ' -~',
    'punct': '!-/:-@\\[-`{-~',
    'space': ' \\t\\n\\r\\f\\v',
    'upper': 'A-Z',
    'xdigit': '0-9A-Fa-f',
}


def translate_posix_classes(pattern: str) -> str:
    """
    Rewrite POSIX bracket classes such as [[:digit:]] for the re module.

    Only classes inside a bracket expression are rewritten; a literal
    '[' inside a bracket expression is escaped.

    Raises:
        ConfigError: for an unknown class name
    """
    out = []
    i = 0
    in_bracket = False
    while i < len(pattern):
        c = pattern[i]
        if c == '\\' and i + 1 < len(pattern):
            out.append(pattern[i:i + 2])
            i += 2
            continue

        if not in_bracket:
            out.append(c)
            i += 1
            if c == '[':
                in_bracket = True
                if pattern.startswith('^', i):
                    out.append('^')
                    i += 1
                if pattern.startswith(']', i):
                    out.append('\\]')
                    i += 1
            continue

        if pattern.startswith('[:', i):
            end = pattern.find(':]', i + 2)
            if end != -1:
                name = pattern[i + 2:end]
                if name not in POSIX_CLASSES:
                    raise ConfigError(f"invalid tag_filter {pattern!r}: unknown class [:{name}:]")
                out.append(POSIX_CLASSES[name])
                i = end + 2
                continue

        if c == '[':
            out.append('\\[')
        else:
            out.append(c)
            if c == ']':
                in_bracket = False
        i += 1

    return ''.join(out)


def compile_tag_filter(pattern: str) -> re.Pattern:
    """Compile a tag filter, reporting a bad pattern as a configuration error."""
    try:
        return re.compile(translate_posix_classes(pattern))
    except re.error as e:
        raise ConfigError(f"invalid tag_filter {pattern!r}: {e}")


class TagSelector:
    """
    Select and order tags matching a filter.

    Example:
        selector = TagSelector(GitClient(), "/tmp/repo")
        tags = selector.select("v[[:digit:]]+")
        newest = selector.latest(tags)
    """

    def __init__(self, git: GitBackend, path: str):
        self.git = git
        self.path = path

    def select(self, pattern: str) -> List[TagRecord]:
        """All tags whose name matches pattern anywhere (unanchored search)."""
        regex = compile_tag_filter(pattern)
        tags = [tag for tag in self.git.list_tags(self.path) if regex.search(tag.name)]
        logger.debug(f"{len(tags)} tags match {pattern!r}")
        return tags

    @staticmethod
    def ordered(tags: List[TagRecord]) -> List[TagRecord]:
        """Tags oldest first; ties keep listed order."""
        return sorted(tags, key=lambda t: t.timestamp)

    @staticmethod
    def latest(tags: List[TagRecord]) -> Optional[TagRecord]:
        """The most recent tag, or None for no tags."""
        if not tags:
            return None
        return TagSelector.ordered(tags)[-1]

    @staticmethod
    def since(tags: List[TagRecord], last_seen: str) -> List[str]:
        """
        Tag names from last_seen up to the newest, oldest first.

        Walks the tags newest to oldest, prepending each name, and stops
        after the tag named last_seen. If last_seen is not among the tags
        the whole set is returned.
        """
        result: List[str] = []
        for tag in reversed(TagSelector.ordered(tags)):
            result.insert(0, tag.name)
            if tag.name == last_seen:
                break
        else:
            if tags:
                logger.info(f"Version {last_seen!r} not among filtered tags, returning all {len(tags)}")
        return result
