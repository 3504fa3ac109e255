"""Error kinds raised by the scaffold flow.

Library code raises these; only the CLI turns them into an exit status.
"""


class StackInitError(Exception):
    """Base class for all scaffold errors.

    ``remediation`` is an optional hint printed after the message.
    """

    remediation = None

    def __init__(self, message, remediation=None):
        super().__init__(message)
        if remediation is not None:
            self.remediation = remediation


class TransportError(StackInitError):
    """The fetch could not be completed."""


class RemoteStatusError(StackInitError):
    """The remote answered with a non-success status."""

    remediation = "Check that the stack template URL is reachable and try again."

    def __init__(self, url, status_code, reason):
        super().__init__(f"Failed to fetch {url} : {status_code} {reason}".rstrip())
        self.url = url
        self.status_code = status_code


class ArchiveFormatError(StackInitError):
    """The archive is not a valid gzip-compressed tar stream."""


class ConflictError(StackInitError):
    """Template files would overwrite existing local files."""

    remediation = "If you wish to proceed, try again with the --overwrite option."

    def __init__(self, conflicts):
        self.conflicts = list(conflicts)
        super().__init__(
            "Conflicts exist with the template project: " + ", ".join(self.conflicts)
        )


class FilesystemError(StackInitError):
    """A create, write or remove operation failed."""


class ScriptExecutionError(StackInitError):
    """The stack init script exited non-zero or could not be launched."""

    remediation = "To try again, run `stackinit init` with no arguments."

    def __init__(self, message, returncode=None):
        super().__init__(message)
        self.returncode = returncode


class ContainerError(StackInitError):
    """A container command failed."""


class ProjectConfigError(StackInitError):
    """The project config file is missing or invalid."""


class UnknownStackError(StackInitError):
    """The stack index has no template for the requested stack."""


class ExistingProjectError(StackInitError):
    """The target directory already holds a project config."""


class UnsafeLaydownError(StackInitError):
    """The target directory holds files that may conflict with the template."""

    remediation = "If you wish to proceed, try again with the --overwrite option."
