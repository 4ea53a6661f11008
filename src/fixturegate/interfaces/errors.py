"""Exceptions raised by remote service implementations."""


class RemoteServiceError(Exception):
    """Base class for failures of a remote service call."""


class RemoteRequestError(RemoteServiceError):
    """The request could not be sent or no response was received."""


class RemoteResponseError(RemoteServiceError):
    """The remote service answered with an error.

    Attributes:
        status_code (int | None): HTTP status code, when the error came with one.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
