"""Application error taxonomy.

Each error carries the HTTP status it maps to; the handler registered in
main.py turns any JobTrackerError into a JSON response with ``to_dict()``.
"""


class JobTrackerError(Exception):
    """Base class for caller-visible failures."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": self.message, "kind": type(self).__name__}


class Unauthenticated(JobTrackerError):
    status_code = 401

    def __init__(self, message: str = "Unauthenticated") -> None:
        super().__init__(message)


class NotFound(JobTrackerError):
    status_code = 404


class PreconditionFailed(JobTrackerError):
    status_code = 412


class QuotaExceeded(PreconditionFailed):
    status_code = 429

    def __init__(self, count: int, limit: int) -> None:
        super().__init__(f"Monthly AI generation quota reached ({count}/{limit})")
        self.count = count
        self.limit = limit

    def to_dict(self) -> dict:
        return {**super().to_dict(), "count": self.count, "limit": self.limit}


class ConfigurationError(JobTrackerError):
    status_code = 503


class GenerationError(JobTrackerError):
    """Failure talking to the generation provider. Never retried automatically."""

    status_code = 502


class ProviderError(GenerationError):
    def __init__(self, status: int, body: str) -> None:
        super().__init__(f"Gemini API error: {status} - {body}")
        self.status = status
        self.body = body

    def to_dict(self) -> dict:
        return {**super().to_dict(), "provider_status": self.status}


class EmptyGenerationError(GenerationError):
    def __init__(
        self,
        finish_reason: str | None = None,
        block_reason: str | None = None,
        safety_ratings: list | None = None,
    ) -> None:
        details = []
        if finish_reason:
            details.append(f"finish_reason={finish_reason}")
        if block_reason:
            details.append(f"block_reason={block_reason}")
        suffix = f" ({', '.join(details)})" if details else ""
        super().__init__(f"No content generated{suffix}")
        self.finish_reason = finish_reason
        self.block_reason = block_reason
        self.safety_ratings = safety_ratings or []

    def to_dict(self) -> dict:
        return {
            **super().to_dict(),
            "finish_reason": self.finish_reason,
            "block_reason": self.block_reason,
            "safety_ratings": self.safety_ratings,
        }


class TransportError(GenerationError):
    status_code = 504
