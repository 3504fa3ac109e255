"""Materialize a template archive onto the local filesystem.

The extractor does no conflict detection: callers that must not overwrite
existing files run ``detect_conflicts`` first. A failure partway through
leaves already written files in place.
"""

import logging
import os
from dataclasses import dataclass

from stackinit.errors import ArchiveFormatError, FilesystemError
from stackinit.materialize.archive_stream import READ_ERRORS, iter_entries, open_archive

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".appsody-config.yaml"
DIR_MODE = 0o755
CHUNK_SIZE = 64 * 1024


@dataclass(frozen=True)
class ExtractionPolicy:
    """How an archive is laid down.

    suppress_non_config_files: write only the project config file.
    allow_overwrite: the caller skipped the conflict precheck.
    """

    suppress_non_config_files: bool = False
    allow_overwrite: bool = False

    def writes_file(self, name: str) -> bool:
        return not self.suppress_non_config_files or name.endswith(CONFIG_FILE_NAME)


def extract_archive(archive_path, policy: ExtractionPolicy, target_dir="."):
    """Extract directories and regular files in archive order.

    Symlinks, hard links and device entries are ignored.
    """
    with open_archive(archive_path) as tar:
        for member in iter_entries(tar, archive_path):
            destination = os.path.join(target_dir, member.name)
            if member.isdir():
                if policy.suppress_non_config_files:
                    continue
                logger.debug("Untar creating directory %s", member.name)
                _make_dirs(destination)
            elif member.isreg():
                if not policy.writes_file(member.name):
                    continue
                if policy.suppress_non_config_files and not _parent_exists(destination):
                    logger.debug("Skipping %s, suppressed mode creates no directories", member.name)
                    continue
                logger.debug("Untar creating %s", member.name)
                _write_file(tar.extractfile(member), destination, member.mode & 0o7777, archive_path)


def _parent_exists(path):
    parent = os.path.dirname(path)
    return not parent or os.path.isdir(parent)


def _make_dirs(path):
    try:
        os.makedirs(path, mode=DIR_MODE, exist_ok=True)
    except OSError as e:
        raise FilesystemError(f"Cannot create directory {path}: {e}") from e


def _write_file(source, destination, mode, archive_path):
    if not _parent_exists(destination):
        _make_dirs(os.path.dirname(destination))
    try:
        fd = os.open(destination, os.O_CREAT | os.O_WRONLY | os.O_TRUNC, mode)
    except OSError as e:
        raise FilesystemError(f"Cannot create {destination}: {e}") from e

    with os.fdopen(fd, "wb") as target:
        while True:
            try:
                chunk = source.read(CHUNK_SIZE)
            except READ_ERRORS as e:
                raise ArchiveFormatError(f"Error reading archive {archive_path}: {e}") from e
            if not chunk:
                break
            try:
                target.write(chunk)
            except OSError as e:
                raise FilesystemError(f"Cannot write {destination}: {e}") from e

    try:
        os.chmod(destination, mode)
    except OSError as e:
        raise FilesystemError(f"Cannot set permissions on {destination}: {e}") from e
