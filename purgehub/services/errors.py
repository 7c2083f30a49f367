"""Service-level errors. Each carries the message surfaced to the caller and an HTTP status."""


class ModerationError(Exception):
    """Base class; message is shown verbatim to the caller."""

    status_code: int = 400

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class UnauthorizedError(ModerationError):
    """Caller has no valid bearer credential or it does not resolve to an account."""

    status_code = 401

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message)


class AdminOnlyError(ModerationError):
    """Caller is authenticated but lacks the admin role."""

    status_code = 403

    def __init__(self, message: str = "Admin only") -> None:
        super().__init__(message)


class PrincipalOnlyError(ModerationError):
    """Action reserved to the principal (super_admin) account."""

    status_code = 403

    def __init__(self, message: str = "Principal admin only") -> None:
        super().__init__(message)


class ForbiddenTargetError(ModerationError):
    """Target-mutability policy refused the action (self-target or protected admin)."""

    status_code = 403

    def __init__(self, message: str = "Not permitted to act on this account") -> None:
        super().__init__(message)


class ValidationFailedError(ModerationError):
    status_code = 422


class NotFoundError(ModerationError):
    status_code = 404


class InvalidTransitionError(ModerationError):
    """Report status change not allowed (terminal states never change or go back to pending)."""

    status_code = 409


class AuthApiError(ModerationError):
    """Platform auth admin API returned an error or was unreachable."""

    status_code = 502

    def __init__(self, message: str, upstream_status: int | None = None) -> None:
        self.upstream_status = upstream_status
        super().__init__(message)
