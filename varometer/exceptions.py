"""
Custom exceptions for the VarOmeter client.
Each error subclasses VarOmeterError; where a built-in fits, it is mixed in
so callers catching FileNotFoundError, ValueError or TimeoutError still work.
"""


class VarOmeterError(Exception):
    """Base exception for all VarOmeter client errors."""
    pass


class ConfigurationError(VarOmeterError):
    """Raised when no API key can be resolved."""
    pass


class NotFoundError(VarOmeterError, FileNotFoundError):
    """Raised when the input variant file does not exist."""
    pass


class FormatError(VarOmeterError, ValueError):
    """Raised when the #CHROM header row is missing from a VCF stream."""
    pass


class RequestError(VarOmeterError):
    """Raised when an API request fails.

    Covers non-transient HTTP errors, transient errors after the retry budget
    is spent, and transport failures (``status`` is None for the latter).
    """

    def __init__(
        self,
        method: str,
        path: str,
        status: int | None = None,
        body: str = "",
        reason: str | None = None,
    ) -> None:
        self.method = method
        self.path = path
        self.status = status
        self.body = body or ""

        if status is not None:
            message = f"API request failed [{method} {path}] (HTTP {status})."
            if reason:
                message = f"{message[:-1]}: {reason}."
        else:
            message = f"API request failed [{method} {path}]: {reason or 'no response'}."
        detail = self.body if self.body else "No response body."
        super().__init__(f"{message} {detail}")


class RunFailureError(VarOmeterError):
    """Raised when the remote job reports a failed or error status."""

    def __init__(self, status: str, elapsed_seconds: float = 0.0) -> None:
        self.status = status
        self.elapsed_seconds = elapsed_seconds
        super().__init__(
            f"VarOmeter run failed. Status: {status} "
            f"(elapsed {elapsed_seconds / 60:.1f} min)"
        )


class RunTimeoutError(VarOmeterError, TimeoutError):
    """Raised when polling exceeds its wall-clock budget."""

    def __init__(
        self,
        timeout_seconds: float,
        last_status: str | None = None,
        elapsed_seconds: float = 0.0,
    ) -> None:
        self.timeout_seconds = timeout_seconds
        self.last_status = last_status
        self.elapsed_seconds = elapsed_seconds
        super().__init__(
            f"Timed out waiting for results. timeout_seconds = {timeout_seconds}; "
            f"last status: {last_status or 'unknown'}; "
            f"elapsed: {elapsed_seconds / 60:.1f} min"
        )


class ExtractionError(VarOmeterError, LookupError):
    """Raised when no id field can be found in an API response."""

    def __init__(self, candidates: tuple[str, ...], reason: str | None = None) -> None:
        self.candidates = tuple(candidates)
        message = reason or "Could not find an id field in the response."
        super().__init__(f"{message} Tried: {', '.join(self.candidates)}")
