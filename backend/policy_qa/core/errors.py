"""Exception hierarchy for Policy QA."""

from __future__ import annotations


class PolicyQAError(Exception):
    """Base class for errors raised by the service."""


class QuestionRequiredError(PolicyQAError, ValueError):
    def __init__(self) -> None:
        super().__init__("question is required")


class DocumentSourceError(PolicyQAError):
    """The configured docs folder is missing or holds no .md/.txt file."""

    def __init__(self, path: object) -> None:
        super().__init__("docs folder not found")
        self.path = path


class CapabilityUnavailableError(PolicyQAError, RuntimeError):
    """An optional provider was used while it is not configured."""

    def __init__(self, capability: str) -> None:
        super().__init__(f"{capability} capability is not configured")
        self.capability = capability


class VectorDimensionError(PolicyQAError, ValueError):
    """A vector's length differs from the collection's configured size."""

    def __init__(self, expected: int, actual: int) -> None:
        super().__init__(f"Vector dimension mismatch: expected {expected}, got {actual}")
        self.expected = expected
        self.actual = actual


__all__ = [
    "PolicyQAError",
    "QuestionRequiredError",
    "DocumentSourceError",
    "CapabilityUnavailableError",
    "VectorDimensionError",
]
