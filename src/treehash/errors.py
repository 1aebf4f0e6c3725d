"""Exception classes and exit codes for treehash.

Exit Codes:
- 0: Success
- 1: General error (filesystem failure, corrupt index)
- 2: Invalid arguments
- 3: Resource not found
"""

EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_INVALID_ARGS = 2
EXIT_NOT_FOUND = 3


class TreehashError(Exception):
    """Base exception for treehash errors.

    Default exit code is EXIT_ERROR (1).
    """
    exit_code = EXIT_ERROR


class InvalidArgumentError(TreehashError):
    """Invalid command line arguments or configuration.

    Examples:
    - Ignore threshold out of range
    - Malformed YAML configuration file

    Exit code: 2
    """
    exit_code = EXIT_INVALID_ARGS


class ResourceNotFoundError(TreehashError):
    """Resource not found (index file, tree root).

    Exit code: 3
    """
    exit_code = EXIT_NOT_FOUND


class FilesystemError(TreehashError):
    """An open, stat, read, list or rename failed.

    Always fatal: the run is aborted and nothing is persisted.
    """

    def __init__(self, path, cause: OSError):
        self.path = str(path)
        self.cause = cause
        reason = cause.strerror or str(cause)
        super().__init__(f"{self.path}: {reason}")


class IndexFormatError(TreehashError):
    """The index file is not in the expected format."""

    def __init__(self, message: str, offset: int | None = None):
        self.offset = offset
        if offset is not None:
            message = f"{message} (at byte {offset})"
        super().__init__(message)


class IndexTruncatedError(IndexFormatError):
    """The index file ended in the middle of a record."""
