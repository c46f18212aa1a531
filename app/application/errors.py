class InvalidInput(ValueError):
    """Raised when a request is well-formed but semantically unusable."""


class InvalidTransition(RuntimeError):
    """Raised when a quiz session operation is not allowed in its current state."""


class NotFound(LookupError):
    pass


class UpstreamUnavailable(RuntimeError):
    """The trivia question provider could not deliver a usable batch."""
