"""Forward-only reading of gzip-compressed tar archives.

Both the conflict precheck and the extractor walk the archive through
these helpers so that open failures, codec failures and unsafe entry
names are reported the same way.
"""

import tarfile
import zlib
from contextlib import contextmanager
from pathlib import PurePosixPath

from stackinit.errors import ArchiveFormatError, FilesystemError

READ_ERRORS = (tarfile.TarError, EOFError, zlib.error)


@contextmanager
def open_archive(archive_path):
    """Open *archive_path* as a streaming ``r|gz`` tar reader.

    The underlying file and the tar reader are closed on every exit path.
    """
    try:
        fileobj = open(archive_path, "rb")
    except OSError as e:
        raise FilesystemError(f"Cannot open archive {archive_path}: {e}") from e

    with fileobj:
        try:
            tar = tarfile.open(fileobj=fileobj, mode="r|gz")
        except READ_ERRORS as e:
            raise ArchiveFormatError(
                f"{archive_path} is not a valid tar.gz archive: {e}"
            ) from e
        with tar:
            yield tar


def iter_entries(tar, archive_path):
    """Yield each TarInfo in archive order, validating its name."""
    members = iter(tar)
    while True:
        try:
            member = next(members)
        except StopIteration:
            return
        except READ_ERRORS as e:
            raise ArchiveFormatError(f"Error reading archive {archive_path}: {e}") from e
        check_entry_name(member.name)
        yield member


def check_entry_name(name):
    """Reject entry names that would land outside the target directory."""
    path = PurePosixPath(name.replace("\\", "/"))
    if path.is_absolute() or ".." in path.parts:
        raise ArchiveFormatError(f"Archive entry escapes the target directory: {name}")
