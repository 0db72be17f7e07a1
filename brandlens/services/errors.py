"""
Error taxonomy for the scoring engine.

InvalidArgumentError and NotFoundError are returned to callers with their
message. InternalError is surfaced as a generic failure. EmbeddingUnavailableError
never leaves the embedding layer; it is absorbed into the fallback vector.
"""


class BrandLensError(Exception):
    """Base class for all scoring engine errors."""

    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InvalidArgumentError(BrandLensError):
    """Raised when required fields are missing or contradictory."""

    status_code = 400


class NotFoundError(BrandLensError):
    """Raised when a project, theme or explicit content ID does not resolve."""

    status_code = 404


class EmbeddingUnavailableError(BrandLensError):
    """Raised inside the embedder when the remote provider cannot be used."""

    status_code = 503


class InternalError(BrandLensError):
    """Raised when a collaborator store fails unexpectedly."""

    status_code = 500
