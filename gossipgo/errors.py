"""Typed error taxonomy shared by the HTTP backend and the API client."""


class GossipGoError(Exception):
    status_code: int = 500
    error_type: str = "internal_error"

    def __init__(self, message: str = "An unexpected error occurred"):
        super().__init__(message)
        self.message = message


class AuthenticationError(GossipGoError):
    status_code = 401
    error_type = "authentication_error"


class PermissionDeniedError(GossipGoError):
    status_code = 403
    error_type = "forbidden"


class NotFoundError(GossipGoError):
    status_code = 404
    error_type = "not_found"


class ConflictError(GossipGoError):
    status_code = 409
    error_type = "conflict"


class InvalidTransitionError(ConflictError):
    error_type = "invalid_transition"


class InvalidRequestError(GossipGoError):
    status_code = 400
    error_type = "invalid_request"


class NetworkError(GossipGoError):
    """The backend could not be reached, or kept failing after retries."""

    status_code = 0
    error_type = "network_error"


_BY_TYPE: dict[str, type[GossipGoError]] = {
    cls.error_type: cls
    for cls in (
        AuthenticationError,
        PermissionDeniedError,
        NotFoundError,
        ConflictError,
        InvalidTransitionError,
        InvalidRequestError,
        NetworkError,
    )
}

_BY_STATUS: dict[int, type[GossipGoError]] = {
    400: InvalidRequestError,
    401: AuthenticationError,
    403: PermissionDeniedError,
    404: NotFoundError,
    409: ConflictError,
    422: InvalidRequestError,
}


def error_from_envelope(status_code: int, error_type: str | None, message: str) -> GossipGoError:
    """Rebuild the typed error a server response describes."""
    cls = _BY_TYPE.get(error_type or "") or _BY_STATUS.get(status_code, GossipGoError)
    return cls(message)
