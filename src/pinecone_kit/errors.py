# src/pinecone_kit/errors.py

from dataclasses import dataclass


class PineconeClientError(Exception):
    """Base class for errors raised by pinecone-kit itself."""


class ConfigurationError(PineconeClientError):
    """API key or base URL could not be resolved."""


class ValidationError(PineconeClientError, ValueError):
    """A caller-supplied parameter broke a local invariant.

    Always raised before any request is sent.
    """


@dataclass(frozen=True)
class ErrorDetail:
    type_url: str
    value: str


class PineconeError(PineconeClientError):
    """Structured error returned by the Pinecone API.

    The originating ``httpx.HTTPStatusError`` is kept as ``__cause__``.
    """

    def __init__(
        self,
        message: str,
        *,
        code: int | None,
        status: int,
        details: list[ErrorDetail] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.status = status
        self.details = details

    def __str__(self) -> str:
        return f"{self.message} (status={self.status}, code={self.code})"
