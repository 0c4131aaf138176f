"""Exception hierarchy for http-file-runner.

The parser itself never raises for malformed blocks; these errors cover
unreadable inputs, conversion failures and everything that can go wrong
while a request is executed.
"""


class HttpFileRunnerError(Exception):
    """Base class for all errors raised by this package."""


class RequestFileError(HttpFileRunnerError):
    """The request file could not be read."""

    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to read file {path}: {reason}")


class EnvironmentFileError(HttpFileRunnerError):
    """An environment file could not be read or has the wrong shape."""

    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load environment file {path}: {reason}")


class ConversionError(HttpFileRunnerError):
    """A curl command or request file could not be converted."""


class ExecutionError(HttpFileRunnerError):
    """A request failed while being executed."""

    def __init__(self, detail: str, uri: str | None = None):
        self.detail = detail
        self.uri = uri
        super().__init__(detail if uri is None else f"{detail} ({uri})")


class InvalidUrlError(ExecutionError):
    """The resolved URI is not usable for the protocol."""


class InvalidRequestError(ExecutionError):
    """The request itself is malformed, e.g. an invalid method token."""


class ConnectionFailedError(ExecutionError):
    """The peer could not be reached or dropped the connection."""


class ExecutionTimeout(ExecutionError):
    """The peer did not answer within the configured timeout."""
