"""Dry-run an archive against the live filesystem before extracting it."""

import logging
import os
from dataclasses import dataclass

from stackinit.errors import ConflictError
from stackinit.materialize.archive_stream import iter_entries, open_archive
from stackinit.materialize.whitelist import DEFAULT_WHITELIST

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConflictReport:
    """Entries of the archive that would overwrite existing local files."""

    conflicts: tuple = ()

    @property
    def ok(self) -> bool:
        return not self.conflicts

    def raise_for_conflicts(self):
        if self.conflicts:
            raise ConflictError(self.conflicts)


def detect_conflicts(archive_path, target_dir=".", whitelist=DEFAULT_WHITELIST) -> ConflictReport:
    """Report every whitelisted entry that already exists as a non-directory.

    Nothing is written. The whole archive is read so that all conflicts are
    reported together.
    """
    conflicts = []
    with open_archive(archive_path) as tar:
        for member in iter_entries(tar, archive_path):
            if not whitelist.is_whitelisted(member.name):
                continue
            existing = os.path.join(target_dir, member.name)
            if os.path.exists(existing) and not os.path.isdir(existing):
                logger.warning(
                    "Conflict: %s exists in the file system and the template project.",
                    member.name,
                )
                conflicts.append(member.name)
    return ConflictReport(tuple(conflicts))
