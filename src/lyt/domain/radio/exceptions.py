"""Radio-specific exceptions for error handling."""

from typing import Optional


class RadioError(Exception):
    """Base exception for radio orchestration failures."""

    pass


class ResolutionError(RadioError):
    """Raised when no usable stream URL can be found for a channel."""

    pass


class FetchError(RadioError):
    """Raised when the DR API cannot be reached or its response cannot be decoded."""

    def __init__(self, message: str, endpoint: Optional[str] = None):
        self.endpoint = endpoint
        super().__init__(f"{message} ({endpoint})" if endpoint else message)


class EngineError(RadioError):
    """Raised when the streaming engine reports a failure or cannot be driven."""

    pass


class InvalidTransition(RadioError):
    """Raised internally for requested no-op transitions (e.g. pause while stopped)."""

    pass
