from .exceptions import BackupError, InputError, MappingFileError, RefactorError

__all__ = ["RefactorError", "InputError", "MappingFileError", "BackupError"]
