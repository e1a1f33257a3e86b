"""Failures surfaced by the remote data gateway."""

from __future__ import annotations

from typing import Optional

INVALID_RESPONSE_MESSAGE = "Respons server tidak valid."


class GatewayError(Exception):
    """Base class for every gateway failure."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NetworkError(GatewayError):
    """No response reached the client (connection refused, DNS, timeout)."""


class InvalidResponseError(GatewayError):
    """A success status whose body is not the JSON the client expects."""


class RemoteError(GatewayError):
    """The backend answered with a non-success status."""

    def __init__(self, status: int, message: str):
        super().__init__(message)
        self.status = status

    def __repr__(self) -> str:
        return f"{type(self).__name__}(status={self.status}, message={self.message!r})"


class ValidationError(RemoteError):
    """400: missing or malformed request fields."""


class AuthError(RemoteError):
    """401: bad credentials."""


class NotFoundError(RemoteError):
    """404: stale id on update."""


class MethodNotAllowed(RemoteError):
    """405."""


class BackendError(RemoteError):
    """5xx: unexpected store failure."""


_BY_STATUS = {
    400: ValidationError,
    401: AuthError,
    404: NotFoundError,
    405: MethodNotAllowed,
}


def remote_error_for(status: int, message: Optional[str] = None) -> RemoteError:
    message = message or f"Permintaan gagal (HTTP {status})."
    if status >= 500:
        return BackendError(status, message)
    return _BY_STATUS.get(status, RemoteError)(status, message)


class UnknownRoleError(Exception):
    """The authenticated user carries a role no dashboard handles."""

    def __init__(self, role):
        super().__init__(f"Invalid user role: {role!r}")
        self.role = role
