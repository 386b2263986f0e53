"""Exception classes for osskit."""


class OssKitException(Exception):
    """Base exception for osskit errors."""

    def __init__(self, message: str, user_message: str = None):
        """
        Initialize exception with technical and user-friendly messages.

        Args:
            message: Technical error message for logs
            user_message: User-friendly message for callers
        """
        super().__init__(message)
        self.user_message = user_message or message


class ConfigError(OssKitException):
    """A required configuration field is missing."""

    def __init__(self, field: str):
        super().__init__(
            f'The "{field}" property must be set.',
            user_message=f"Storage is not configured: {field} is missing."
        )
        self.field = field


class ClientError(OssKitException):
    """The storage client could not be constructed."""
    pass


class StorageError(OssKitException):
    """An operation failed inside the storage service or its transport."""

    def __init__(
        self,
        message     : str,
        status      : int = 0,
        code        : str = "",
        request_id  : str = ""
    ):
        super().__init__(message)
        self.status     = status
        self.code       = code
        self.request_id = request_id


class StreamOpenError(StorageError):
    """A signed URL could not be opened for reading."""
    pass
