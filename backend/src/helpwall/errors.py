"""
Error taxonomy for task lifecycle and settlement operations.
Every error carries the HTTP status the handlers respond with and a stable code.
"""


class HelpWallError(Exception):
    status_code = 500

    @property
    def code(self) -> str:
        return type(self).__name__


class ValidationError(HelpWallError):
    status_code = 400


class AuthorizationError(HelpWallError):
    status_code = 403


class NotOwner(AuthorizationError):
    pass


class NotReceiver(AuthorizationError):
    pass


class NotApplicant(AuthorizationError):
    pass


class CannotHelpOwnTask(AuthorizationError):
    pass


class NotFoundError(HelpWallError):
    status_code = 404


class TaskNotFound(NotFoundError):
    pass


class GratitudeNotFound(NotFoundError):
    pass


class StateConflictError(HelpWallError):
    """Expected race outcome. Callers should re-fetch the task rather than retry."""
    status_code = 409


class TaskAlreadyAssigned(StateConflictError):
    pass


class TaskNotOpenForApplications(StateConflictError):
    pass


class TaskNotOpen(StateConflictError):
    pass


class TaskNotInProgress(StateConflictError):
    pass


class TaskNotCompleted(StateConflictError):
    pass


class ReviewRequired(StateConflictError):
    pass


class AlreadyApplied(StateConflictError):
    pass


class GratitudeAlreadySent(StateConflictError):
    pass


class SettlementError(HelpWallError):
    status_code = 500


class LedgerWriteFailed(SettlementError):
    pass
