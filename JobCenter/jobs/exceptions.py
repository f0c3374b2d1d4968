"""Error taxonomy for job actions.

Every failure carries a machine-readable ``code``, the HTTP ``status`` the
API answers with, a message the tablet can show as-is and an optional
``details`` mapping (usually ``{field: reason}``).
"""

from __future__ import annotations

from typing import Optional


class JobActionError(Exception):
    code = 'error'
    status = 400
    default_message = 'The request could not be processed.'

    def __init__(self, message: Optional[str] = None, details: Optional[dict] = None):
        self.message = message or self.default_message
        self.details = dict(details or {})
        super().__init__(self.message)

    def as_dict(self) -> dict:
        payload = {'ok': False, 'code': self.code, 'message': self.message}
        if self.details:
            payload['details'] = self.details
        return payload


class InvalidInput(JobActionError):
    code = 'invalid_input'
    status = 400
    default_message = 'The request is malformed.'


class InvalidOperationId(InvalidInput):
    code = 'invalid_operation_id'
    default_message = 'A valid operation id is required.'


class MissingRequiredField(InvalidInput):
    code = 'missing_required_field'

    def __init__(self, field: str, message: Optional[str] = None):
        self.field = field
        super().__init__(
            message or f'{field} is required.',
            details={field: 'required'},
        )


class Unauthorized(JobActionError):
    code = 'unauthorized'
    status = 401
    default_message = 'Operator not logged in.'


class Forbidden(JobActionError):
    code = 'forbidden'
    status = 403
    default_message = 'You are not allowed to perform this action.'


class NotFound(JobActionError):
    code = 'not_found'
    status = 404
    default_message = 'The requested record does not exist.'


class OperationNotFound(NotFound):
    code = 'operation_not_found'

    def __init__(self, operation_id):
        self.operation_id = operation_id
        super().__init__(f'Operation {operation_id} not found.')


class StatusConflict(JobActionError):
    code = 'status_conflict'
    status = 409

    def __init__(self, current: str, expected: str, message: Optional[str] = None):
        self.current = current
        self.expected = expected
        super().__init__(
            message or f'Cannot perform this action. Current status: {current}, expected: {expected}.',
            details={'current': current, 'expected': expected},
        )


class ValidationFailed(JobActionError):
    code = 'validation_failed'
    status = 422

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(reason, details={field: reason})


class PersistenceFailure(JobActionError):
    code = 'persistence_failure'
    status = 500
    default_message = 'Database error occurred. Please try again.'

    def __init__(self):
        # Store internals never reach the caller
        super().__init__(self.default_message)
