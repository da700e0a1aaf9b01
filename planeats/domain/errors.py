"""Domain exceptions shared by repositories, services and the API layer.

HTTP-facing errors carry a short ``title`` and a ``status_code``; the API
maps them to ``{"error": title, "message": str(exc)}`` bodies.
"""


class PlanEatsError(Exception):
    status_code = 500
    title = "Server error"


class NotFoundError(PlanEatsError):
    status_code = 404
    title = "Not found"

    def __init__(self, message: str, title: str = None):
        super().__init__(message)
        if title:
            self.title = title


class ForbiddenError(PlanEatsError):
    status_code = 403
    title = "Access denied"


class UnauthorizedError(PlanEatsError):
    status_code = 401
    title = "Access denied"

    def __init__(self, message: str, title: str = None):
        super().__init__(message)
        if title:
            self.title = title


class ValidationFailed(PlanEatsError):
    status_code = 400
    title = "Validation Error"

    def __init__(self, message: str, title: str = None):
        super().__init__(message)
        if title:
            self.title = title


class ConflictError(PlanEatsError):
    """Raised when a document was modified since it was loaded (stale revision)."""
    status_code = 409
    title = "Conflict"

    def __init__(self, collection: str, doc_id: str, expected: int, actual: int):
        super().__init__(
            f"{collection} document {doc_id} is at revision {actual}, expected {expected}"
        )
        self.collection = collection
        self.doc_id = doc_id
        self.expected = expected
        self.actual = actual


class ParseError(PlanEatsError):
    """The LLM completion could not be turned into a meal plan payload."""


class ProviderError(PlanEatsError):
    """An LLM provider call failed (network, auth, quota, empty answer)."""

    def __init__(self, provider: str, message: str):
        super().__init__(f"{provider} API error: {message}")
        self.provider = provider
