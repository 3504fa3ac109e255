"""Classify relative paths as protected metadata or project content.

Protected names (VCS metadata, editor and IDE settings) may coexist with a
template overlay; anything else is project content that a template could
silently overwrite.
"""

import logging
import re
from dataclasses import dataclass

logger = logging.getLogger(__name__)

PROTECTED_FILES = (
    ".git", ".project", ".DS_Store", ".classpath", ".factorypath",
    ".gitattributes", ".gitignore", ".cw-settings", ".cw-extension",
)
PROTECTED_DIRS = (".github", ".vscode", ".settings", ".metadata")

_SEPARATORS = re.compile(r"[/\\]")


def _segments(relative_path: str) -> list[str]:
    return [s for s in _SEPARATORS.split(relative_path) if s not in ("", ".")]


@dataclass(frozen=True)
class WhitelistMatcher:
    """Exact-name match for files, prefix-segment match for directories."""

    files: frozenset
    dirs: frozenset

    def is_whitelisted(self, relative_path: str) -> bool:
        segments = _segments(relative_path)
        matched = bool(segments) and (
            segments[-1] in self.files
            or any(segment in self.dirs for segment in segments)
        )
        logger.debug("%s is in the whitelist: %s", relative_path, matched)
        return matched


DEFAULT_WHITELIST = WhitelistMatcher(
    files=frozenset(PROTECTED_FILES),
    dirs=frozenset(PROTECTED_DIRS),
)


def is_whitelisted(relative_path: str) -> bool:
    return DEFAULT_WHITELIST.is_whitelisted(relative_path)
