from __future__ import annotations

import typing as t


class CoralError(Exception):
    """Base class for errors raised by the bundled upstream collaborators."""


class UpstreamError(CoralError):
    def __init__(self, message: str, status_code: int, body: t.Optional[t.Any] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class CredentialError(CoralError):
    pass


class CircuitOpenError(CoralError):
    def __init__(self) -> None:
        super().__init__("circuit_open")
