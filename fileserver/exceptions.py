"""Custom exception classes for the file server."""


class FileServerError(Exception):
    """
    Base exception class for all file server errors.
    """
    status_code = 500
    code = "INTERNAL_ERROR"


class ValidationError(FileServerError):
    """
    Raised for bad filenames, empty uploads and malformed requests.
    """
    status_code = 400
    code = "VALIDATION_ERROR"


class LimitExceededError(FileServerError):
    """
    Raised when an upload carries too many files or a file is too large.
    """
    status_code = 400
    code = "LIMIT_EXCEEDED"


class NotFoundError(FileServerError):
    """
    Raised when a requested stored file does not exist.
    """
    status_code = 404
    code = "FILE_NOT_FOUND"


class StorageIOError(FileServerError):
    """
    Raised when the storage directory cannot be read or written.
    """
    status_code = 500
    code = "STORAGE_IO_ERROR"
