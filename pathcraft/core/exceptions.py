"""Domain errors and their HTTP mapping."""

GENERATION_FAILED_MESSAGE = "Failed to generate roadmap. Please try again."


class PathcraftError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)

    @property
    def public_message(self) -> str:
        """Message safe to return in the response body."""
        return str(self)


class ValidationError(PathcraftError):
    """Invalid input, rejected before any external call."""

    status_code = 400
    default_message = "Invalid request"


class NotFoundError(PathcraftError):
    """A roadmap or milestone does not exist (or is not visible to the caller)."""

    status_code = 404
    default_message = "Not found"


class GenerationError(PathcraftError):
    """Any failure of the roadmap generation pipeline.

    The user-facing message is always the generic one; details go to the log.
    """

    status_code = 500
    default_message = GENERATION_FAILED_MESSAGE

    @property
    def public_message(self) -> str:
        return GENERATION_FAILED_MESSAGE


class ProviderError(GenerationError):
    """The model call failed (network, timeout, quota, bad provider response)."""


class MalformedRoadmapError(GenerationError):
    """Model output could not be turned into a structurally complete roadmap."""

    EXCERPT_CHARS = 500

    def __init__(self, message: str, text: str = "") -> None:
        super().__init__(message)
        self.head = text[: self.EXCERPT_CHARS]
        self.tail = text[-self.EXCERPT_CHARS :]


class PersistenceError(GenerationError):
    """Storage write failed while materializing a generated roadmap."""
