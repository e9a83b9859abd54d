"""Error taxonomy shared by the scan pipeline and the CLI."""

from __future__ import annotations


class EnsHunterError(Exception):
    """Base class for errors raised by ENS Hunter itself."""


class ValidationError(EnsHunterError):
    """Fatal precondition failure detected before the pipeline starts."""


class NoInputError(ValidationError):
    """The candidate list is empty after normalisation."""


class MissingCredentialError(ValidationError):
    """No API credential was supplied for the oracle endpoint."""


class OracleError(EnsHunterError):
    """An availability query failed (transport, malformed response, timeout)."""

    def __init__(self, message: str, *, identifier: str | None = None) -> None:
        super().__init__(message)
        self.identifier = identifier


class DeadlineExceeded(OracleError):
    """The shared run deadline expired before or during an oracle call."""


__all__ = [
    "DeadlineExceeded",
    "EnsHunterError",
    "MissingCredentialError",
    "NoInputError",
    "OracleError",
    "ValidationError",
]
