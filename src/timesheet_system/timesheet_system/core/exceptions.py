class DomainError(Exception):
    """Base exception for business rule violations.

    Every subclass is an expected, user-facing condition: the API layer turns
    it into a client error carrying ``str(exc)`` as message.
    """

    status_code = 400
    code = "domain_error"


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    code = "validation_error"


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""

    status_code = 401
    code = "authentication_error"


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    status_code = 403
    code = "forbidden"


Forbidden = AuthorizationError


class NotFoundError(DomainError):
    """Raised when a key does not match any stored row."""

    status_code = 404
    code = "not_found"


class LockedError(DomainError):
    """Raised on a mutation of a week that is Submitted or Validated."""

    status_code = 409
    code = "locked"


class ConflictWithAbsenceError(DomainError):
    """Raised when hours are logged on a day flagged absent (or flagged twice)."""

    status_code = 409
    code = "conflict_with_absence"


class HoursAlreadyLoggedError(DomainError):
    """Raised when flagging an absence on a day that already carries hours."""

    status_code = 409
    code = "hours_already_logged"


class EmptyWeekError(DomainError):
    """Raised when submitting a week whose computed total is zero."""

    code = "empty_week"


class MissingCommentError(DomainError):
    """Raised when rejecting a week without a rationale."""

    code = "missing_comment"


class InvalidTransitionError(DomainError):
    """Raised when a week transition is not allowed from its current status."""

    status_code = 409
    code = "invalid_transition"


class AlreadyValidatedError(InvalidTransitionError):
    code = "already_validated"


class AlreadySubmittedError(InvalidTransitionError):
    code = "already_submitted"


class NotSubmittedError(InvalidTransitionError):
    code = "not_submitted"
