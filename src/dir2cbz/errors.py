"""
Error types raised by the dir2cbz pipeline.

Every error carries the directory being processed (when known) so the caller
can report which input failed and keep going with the next one.
"""


class Dir2CbzError(Exception):
    """
    Base class for all pipeline errors.

    Args:
        message (str): Human-readable description of the failure
        directory (Path): Input directory being processed, if known
    """

    def __init__(self, message, directory=None):
        super().__init__(message)
        self.message = message
        self.directory = directory

    def __str__(self):
        if self.directory is not None:
            return f"{self.directory}: {self.message}"
        return self.message


class ScanError(Dir2CbzError, OSError):
    """The input directory (or one of its entries) could not be read."""

    def __init__(self, message, path, directory=None):
        super().__init__(message, directory)
        self.path = path


class CorruptImageError(Dir2CbzError):
    """An image failed to decode during verification."""

    def __init__(self, path, reason="", directory=None):
        message = f"Corrupt image {path}"
        if reason:
            message += f" ({reason})"
        super().__init__(message, directory)
        self.path = path
        self.reason = reason


class AlreadyExistsError(Dir2CbzError):
    """The target archive exists and overwriting was not allowed."""

    def __init__(self, path, directory=None):
        super().__init__(f"{path} already exists", directory)
        self.path = path


class ArchiveWriteError(Dir2CbzError, OSError):
    """The archive could not be written. Any existing archive is untouched."""

    def __init__(self, message, path, directory=None):
        super().__init__(message, directory)
        self.path = path


class DeleteError(Dir2CbzError, OSError):
    """The source directory could not be removed after packaging."""

    def __init__(self, message, path):
        super().__init__(message, path)
        self.path = path


class NonImageFilesError(Dir2CbzError):
    """Strict mode found files that are not supported images."""

    def __init__(self, paths, directory=None):
        super().__init__(
            f"Found {len(paths)} non-images/unsupported images", directory
        )
        self.paths = list(paths)
