"""Error types raised by LLM backends.

Every failure a backend can surface derives from BackendError so the UI
can catch one type, while the subclasses let it explain what went wrong
("no response in time" reads differently from "request failed").
"""


class BackendError(Exception):
    """Base class for backend errors."""

    def is_retryable(self) -> bool:
        """Override in subclasses to signal that resending may succeed."""
        return False


class BackendConstructionError(BackendError):
    """The backend could not be set up (fatal at startup)."""

    def __init__(self, message: str):
        super().__init__(f"Backend construction failed: {message}")


class BackendRequestError(BackendError):
    """Transport failure or non-success status from the remote API."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code

    def is_retryable(self) -> bool:
        return True


class MalformedResponseError(BackendError):
    """The remote payload does not have the expected shape."""

    def __init__(self, message: str):
        super().__init__(f"Malformed response: {message}")


class ResponseNotCompletedError(BackendError):
    """The remote service reported a non-terminal or failed status."""

    def __init__(self, status: str, detail: str = ""):
        message = f"Response is not completed: status '{status}'"
        if detail:
            message += f" ({detail})"
        super().__init__(message)
        self.status = status

    def is_retryable(self) -> bool:
        return True


class RunTimeoutError(BackendError):
    """A polled run did not complete within the retry ceiling."""

    def __init__(self, attempts: int, interval: float):
        super().__init__(
            f"Run did not complete with status 'completed' after {attempts} "
            f"retries every {interval:g} seconds"
        )
        self.attempts = attempts
        self.interval = interval

    def is_retryable(self) -> bool:
        return True


class MissingContextError(BackendError):
    """A remote handle required by the protocol does not exist."""
