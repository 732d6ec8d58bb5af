class RefactorError(Exception):
    """Base exception for all rename errors."""

    pass


class InputError(RefactorError):
    """Raised for bad arguments before anything is modified."""

    pass


class MappingFileError(InputError):
    """Raised when a rename mapping set cannot be read or is malformed."""

    pass


class BackupError(RefactorError):
    """Raised when a backup cannot be found or restored."""

    pass
